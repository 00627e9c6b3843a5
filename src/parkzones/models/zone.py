"""Normalized zone record models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AvailabilityBand(StrEnum):
    """Semantic availability classification shown to users."""

    GOOD = "good"
    LIMITED = "limited"
    FULL = "full"

    @property
    def color(self) -> str:
        return _BAND_COLORS[self]

    @property
    def label(self) -> str:
        return _BAND_LABELS[self]


_BAND_COLORS: dict[AvailabilityBand, str] = {
    AvailabilityBand.GOOD: "#22c55e",
    AvailabilityBand.LIMITED: "#f59e0b",
    AvailabilityBand.FULL: "#ef4444",
}

_BAND_LABELS: dict[AvailabilityBand, str] = {
    AvailabilityBand.GOOD: "Available",
    AvailabilityBand.LIMITED: "Limited",
    AvailabilityBand.FULL: "Full",
}


class BandHint(StrEnum):
    """Availability hint the feed may send in its ``type`` field."""

    FULL = "full"
    LIMITED = "limited"
    GOOD = "good"

    @classmethod
    def parse(cls, value: str | None) -> BandHint | None:
        """Map a feed ``type`` string to a hint; unknown values give ``None``."""
        if value is None:
            return None
        return _HINT_ALIASES.get(value.strip().lower())


_HINT_ALIASES: dict[str, BandHint] = {
    "red": BandHint.FULL,
    "full": BandHint.FULL,
    "yellow": BandHint.LIMITED,
    "limited": BandHint.LIMITED,
    "green": BandHint.GOOD,
    "good": BandHint.GOOD,
}


class GeoPoint(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class ZoneRecord(BaseModel):
    """A normalized parking zone.

    Records are immutable; a refresh replaces them wholesale. Two records
    compare equal when every field matches, which is what the store uses
    to decide whether a new snapshot differs from the current one.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1)
    address: str
    street: str
    number: str
    city: str
    country: str
    total_spots: int = Field(ge=0)
    available_spots: int = Field(ge=0)
    coordinates: GeoPoint | None = None
    band: AvailabilityBand
    band_hint: BandHint | None = None
    description: str = ""

    @model_validator(mode="after")
    def _check_capacity(self) -> ZoneRecord:
        if self.available_spots > self.total_spots:
            raise ValueError(
                f"available_spots ({self.available_spots}) exceeds total_spots ({self.total_spots})"
            )
        return self

    @property
    def name(self) -> str:
        return self.street

    @property
    def occupied_spots(self) -> int:
        return self.total_spots - self.available_spots

    @property
    def availability_ratio(self) -> float:
        if self.total_spots == 0:
            return 0.0
        return self.available_spots / self.total_spots
