"""Raw feed item model (one element of ``GET /api/parking``)."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from parkzones.ingestion.normalize import is_sentinel, safe_float, safe_int, safe_str
from parkzones.models._base import FeedBaseModel


class FeedItem(FeedBaseModel):
    """A single parking zone as reported by the feed.

    Parameters
    ----------
    address : str
        Free-form address string.
    number_of_spots : int
        Total capacity of the zone.
    available_places : int or None
        Currently free spots. ``None`` when the feed omits it.
    latitude : float or None
        Latitude in degrees.
    longitude : float or None
        Longitude in degrees.
    zone_type : str or None
        Server-supplied availability hint (``"red"``/``"yellow"``/``"green"``).
    raw : dict
        Full feed dict.
    """

    address: str
    number_of_spots: int
    available_places: int | None = None
    latitude: float | None = None
    longitude: float | None = None
    zone_type: str | None = Field(default=None, alias="type")

    @field_validator("address", mode="before")
    @classmethod
    def _coerce_address(cls, value: Any) -> str | None:
        return safe_str(value)

    @field_validator("number_of_spots", "available_places", mode="before")
    @classmethod
    def _coerce_counts(cls, value: Any) -> int | None:
        # Placeholders mean "not reported"; anything else must be numeric.
        if is_sentinel(value):
            return None
        count = safe_int(value)
        if count is None:
            raise ValueError(f"expected a number, got {value!r}")
        return count

    @field_validator("number_of_spots")
    @classmethod
    def _non_negative_total(cls, value: int) -> int:
        if value < 0:
            raise ValueError("numberOfSpots must be >= 0")
        return value

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator("zone_type", mode="before")
    @classmethod
    def _coerce_type(cls, value: Any) -> str | None:
        return safe_str(value)

    def to_payload(self) -> dict[str, Any]:
        """Serialize back to the feed wire shape (used by admin mutations)."""
        return self.model_dump(by_alias=True, exclude={"raw"}, exclude_none=True)
