"""Traffic intensity profile models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

HOURS_PER_DAY = 24
MIN_INTENSITY = 10
MAX_INTENSITY = 95


class CategoryTag(StrEnum):
    """Kind of area a zone sits in, derived from its address text."""

    CENTER = "center"
    BUSINESS = "business"
    UNIVERSITY = "university"
    HOSPITAL = "hospital"
    MALL = "mall"
    RESIDENTIAL = "residential"


class HourBucket(StrEnum):
    MORNING_RUSH = "morning_rush"
    MIDDAY = "midday"
    EVENING_PEAK = "evening_peak"
    EVENING = "evening"
    OVERNIGHT = "overnight"

    @classmethod
    def for_hour(cls, hour: int) -> HourBucket:
        """Bucket for an hour of day (0-23)."""
        if not 0 <= hour < HOURS_PER_DAY:
            raise ValueError(f"hour must be in [0, 23], got {hour}")
        # Ranges are inclusive and checked in order, so a boundary hour
        # belongs to the earlier bucket (9 is still morning rush).
        if 7 <= hour <= 9:
            return cls.MORNING_RUSH
        if 9 < hour <= 17:
            return cls.MIDDAY
        if 17 < hour <= 19:
            return cls.EVENING_PEAK
        if 19 < hour <= 23:
            return cls.EVENING
        return cls.OVERNIGHT

    @property
    def label(self) -> str:
        return _BUCKET_LABELS[self]


_BUCKET_LABELS: dict[HourBucket, str] = {
    HourBucket.MORNING_RUSH: "Morning Rush",
    HourBucket.MIDDAY: "Business Hours",
    HourBucket.EVENING_PEAK: "Evening Peak",
    HourBucket.EVENING: "Evening Activity",
    HourBucket.OVERNIGHT: "Quiet Hours",
}


class IntensityLevel(StrEnum):
    """Display level of a single intensity value."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very_high"

    @classmethod
    def for_intensity(cls, intensity: int) -> IntensityLevel:
        if intensity <= 30:
            return cls.LOW
        if intensity <= 60:
            return cls.MEDIUM
        if intensity <= 80:
            return cls.HIGH
        return cls.VERY_HIGH

    @property
    def color(self) -> str:
        return _LEVEL_COLORS[self]


_LEVEL_COLORS: dict[IntensityLevel, str] = {
    IntensityLevel.LOW: "#22c55e",
    IntensityLevel.MEDIUM: "#f59e0b",
    IntensityLevel.HIGH: "#f97316",
    IntensityLevel.VERY_HIGH: "#ef4444",
}


def heat_radius(intensity: int) -> float:
    """Marker radius (pixels) for a heatmap point."""
    return max(30.0, min(80.0, 30.0 + intensity * 0.5))


class TrafficProfile(BaseModel):
    """Synthetic 24-hour traffic intensity curve for one zone."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    zone_id: str
    tags: frozenset[CategoryTag] = Field(default_factory=frozenset)
    governing_tag: CategoryTag | None = None
    intensities: tuple[int, ...]

    @field_validator("intensities")
    @classmethod
    def _check_intensities(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        if len(value) != HOURS_PER_DAY:
            raise ValueError(f"expected {HOURS_PER_DAY} hourly values, got {len(value)}")
        for item in value:
            if not MIN_INTENSITY <= item <= MAX_INTENSITY:
                raise ValueError(f"intensity {item} outside [{MIN_INTENSITY}, {MAX_INTENSITY}]")
        return value

    def at(self, hour: int) -> int:
        if not 0 <= hour < HOURS_PER_DAY:
            raise ValueError(f"hour must be in [0, 23], got {hour}")
        return self.intensities[hour]

    def level_at(self, hour: int) -> IntensityLevel:
        return IntensityLevel.for_intensity(self.at(hour))

    @property
    def peak_hour(self) -> int:
        """First hour with the highest intensity."""
        return max(range(HOURS_PER_DAY), key=lambda hour: (self.intensities[hour], -hour))
