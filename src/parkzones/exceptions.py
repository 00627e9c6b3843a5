"""Custom exception hierarchy for parkzones."""

from __future__ import annotations


class ParkZonesError(Exception):
    """Base exception for all parkzones errors."""


class ParkZonesConfigError(ParkZonesError):
    """Invalid or missing configuration."""


class FeedUnavailable(ParkZonesError):  # noqa: N818
    """The availability feed could not be read (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class MalformedItem(ParkZonesError):  # noqa: N818
    """A single feed entry could not be normalized into a zone record.

    Raised per item; the refresh cycle skips the entry and keeps going.
    """

    def __init__(self, message: str, *, index: int | None = None) -> None:
        self.index = index
        super().__init__(message)


class ZoneStoreClosedError(ParkZonesError):
    """The zone store has been torn down."""
