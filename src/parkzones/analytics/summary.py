"""City-wide occupancy statistics over a zone snapshot."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from parkzones.models.zone import AvailabilityBand, ZoneRecord


class ZoneSummary(BaseModel):
    """Aggregate figures for the statistics cards and the assistant context.

    Parameters
    ----------
    total_spots : int
        Capacity across all zones.
    available_spots : int
        Free spots across all zones.
    occupied_spots : int
        ``total_spots - available_spots``.
    occupancy_rate : float
        Occupied share in percent, rounded to one decimal. ``0.0`` when
        there is no capacity.
    zone_count : int
        Number of zones.
    available_zones : list[str]
        Ids of zones with at least one free spot.
    full_zones : list[str]
        Ids of zones with no free spots.
    band_counts : dict
        Number of zones per availability band.
    """

    model_config = ConfigDict(frozen=True)

    total_spots: int = 0
    available_spots: int = 0
    occupied_spots: int = 0
    occupancy_rate: float = 0.0
    zone_count: int = 0
    available_zones: list[str] = Field(default_factory=list)
    full_zones: list[str] = Field(default_factory=list)
    band_counts: dict[AvailabilityBand, int] = Field(default_factory=dict)


def summarize(zones: Iterable[ZoneRecord]) -> ZoneSummary:
    records = list(zones)
    total = sum(zone.total_spots for zone in records)
    available = sum(zone.available_spots for zone in records)
    occupied = total - available
    rate = round(occupied / total * 100, 1) if total else 0.0

    band_counts = {band: 0 for band in AvailabilityBand}
    for zone in records:
        band_counts[zone.band] += 1

    return ZoneSummary(
        total_spots=total,
        available_spots=available,
        occupied_spots=occupied,
        occupancy_rate=rate,
        zone_count=len(records),
        available_zones=[zone.id for zone in records if zone.available_spots > 0],
        full_zones=[zone.id for zone in records if zone.available_spots == 0],
        band_counts=band_counts,
    )
