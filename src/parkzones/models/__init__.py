"""Data models for feed payloads, zone records and traffic profiles."""

from parkzones.models._base import FeedBaseModel
from parkzones.models.feed import FeedItem
from parkzones.models.traffic import (
    HOURS_PER_DAY,
    MAX_INTENSITY,
    MIN_INTENSITY,
    CategoryTag,
    HourBucket,
    IntensityLevel,
    TrafficProfile,
    heat_radius,
)
from parkzones.models.zone import AvailabilityBand, BandHint, GeoPoint, ZoneRecord

__all__ = [
    "HOURS_PER_DAY",
    "MAX_INTENSITY",
    "MIN_INTENSITY",
    "AvailabilityBand",
    "BandHint",
    "CategoryTag",
    "FeedBaseModel",
    "FeedItem",
    "GeoPoint",
    "HourBucket",
    "IntensityLevel",
    "TrafficProfile",
    "ZoneRecord",
    "heat_radius",
]
