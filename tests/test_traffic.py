from __future__ import annotations

import random

import pytest

from parkzones.analytics.traffic import (
    TrafficSynthesizer,
    base_intensity,
    derive_tags,
    governing_tag,
    synthesize_profile,
)
from parkzones.config import ParkZonesConfig
from parkzones.ingestion.zones import build_zone_record
from parkzones.models.traffic import (
    CategoryTag,
    HourBucket,
    IntensityLevel,
    TrafficProfile,
    heat_radius,
)


class _FixedRng:
    """Generator whose jitter is always the given extreme."""

    def __init__(self, pick_high: bool) -> None:
        self._pick_high = pick_high

    def uniform(self, a: float, b: float) -> float:
        return b if self._pick_high else a


def _zone(address: str, *, available: int = 10, index: int = 0):
    return build_zone_record(
        {"address": address, "numberOfSpots": 100, "availablePlaces": available},
        index=index,
        config=ParkZonesConfig(),
    )


@pytest.mark.parametrize("seed", range(20))
@pytest.mark.parametrize(
    "text",
    ["Iulius Mall", "Piața Victoriei", "Campus Universitar", "Spitalul Județean", "Cartier Rezidential", "Strada X"],
)
def test_every_value_within_bounds(seed: int, text: str) -> None:
    profile = synthesize_profile("z", text, rng=random.Random(seed))

    assert len(profile.intensities) == 24
    assert all(10 <= value <= 95 for value in profile.intensities)


def test_mall_evening_peak_is_far_above_overnight() -> None:
    tag = governing_tag(derive_tags("Iulius Mall"))

    assert tag == CategoryTag.MALL
    assert base_intensity(18, tag) == 90
    assert base_intensity(3, tag) == 15

    for seed in range(10):
        profile = synthesize_profile("mall", "Iulius Mall", rng=random.Random(seed))
        assert profile.at(18) - profile.at(3) >= 60


def test_jitter_is_clamped() -> None:
    high = synthesize_profile("z", "Iulius Mall", rng=_FixedRng(pick_high=True))  # type: ignore[arg-type]
    low = synthesize_profile("z", "Strada X", rng=_FixedRng(pick_high=False))  # type: ignore[arg-type]

    assert high.at(18) == 95  # 90 + 7.5
    assert low.at(3) == 10  # 15 - 7.5


def test_same_seed_gives_same_profile() -> None:
    first = synthesize_profile("z", "Piața Unirii", rng=random.Random(42))
    second = synthesize_profile("z", "Piața Unirii", rng=random.Random(42))

    assert first.intensities == second.intensities


def test_multiple_tags_resolved_by_priority() -> None:
    tags = derive_tags("Bega Shopping Center")

    assert tags == frozenset({CategoryTag.MALL, CategoryTag.CENTER})
    assert governing_tag(tags) == CategoryTag.CENTER
    assert governing_tag({CategoryTag.MALL, CategoryTag.HOSPITAL, CategoryTag.RESIDENTIAL}) == CategoryTag.HOSPITAL
    assert governing_tag({CategoryTag.UNIVERSITY, CategoryTag.BUSINESS}) == CategoryTag.BUSINESS


def test_untagged_zone_uses_default_curve() -> None:
    assert derive_tags("Strada Exemplu", None, "") == frozenset()
    assert governing_tag(frozenset()) is None
    assert base_intensity(8, None) == 40
    assert base_intensity(3, None) == 15


def test_hospital_stays_busy_overnight() -> None:
    tag = governing_tag(derive_tags("Spitalul Județean de Urgență"))

    assert tag == CategoryTag.HOSPITAL
    assert base_intensity(2, tag) == 40


@pytest.mark.parametrize(
    ("hour", "bucket"),
    [
        (0, HourBucket.OVERNIGHT),
        (6, HourBucket.OVERNIGHT),
        (7, HourBucket.MORNING_RUSH),
        (9, HourBucket.MORNING_RUSH),
        (10, HourBucket.MIDDAY),
        (17, HourBucket.MIDDAY),
        (18, HourBucket.EVENING_PEAK),
        (19, HourBucket.EVENING_PEAK),
        (20, HourBucket.EVENING),
        (23, HourBucket.EVENING),
    ],
)
def test_hour_buckets(hour: int, bucket: HourBucket) -> None:
    assert HourBucket.for_hour(hour) == bucket


@pytest.mark.parametrize("hour", [-1, 24])
def test_hour_out_of_range(hour: int) -> None:
    with pytest.raises(ValueError):
        HourBucket.for_hour(hour)


def test_intensity_levels_and_radius() -> None:
    assert IntensityLevel.for_intensity(30) == IntensityLevel.LOW
    assert IntensityLevel.for_intensity(31) == IntensityLevel.MEDIUM
    assert IntensityLevel.for_intensity(80) == IntensityLevel.HIGH
    assert IntensityLevel.for_intensity(81) == IntensityLevel.VERY_HIGH
    assert IntensityLevel.VERY_HIGH.color == "#ef4444"
    assert heat_radius(0) == 30.0
    assert heat_radius(40) == 50.0
    assert heat_radius(100) == 80.0


def test_profile_rejects_wrong_length_and_out_of_range_values() -> None:
    with pytest.raises(ValueError):
        TrafficProfile(zone_id="z", intensities=(50,) * 23)
    with pytest.raises(ValueError):
        TrafficProfile(zone_id="z", intensities=(50,) * 23 + (96,))


def test_peak_hour_is_first_maximum() -> None:
    values = [20] * 24
    values[18] = 90
    values[20] = 90
    profile = TrafficProfile(zone_id="z", intensities=tuple(values))

    assert profile.peak_hour == 18


def test_synthesizer_caches_until_tags_change() -> None:
    synthesizer = TrafficSynthesizer(seed=7)
    zone = _zone("Strada Exemplu 3")

    first = synthesizer.profile_for(zone)
    # Availability changes keep the cached curve.
    assert synthesizer.profile_for(zone.model_copy(update={"available_spots": 50})) is first

    moved = zone.model_copy(update={"address": "Iulius Mall", "street": "Iulius Mall"})
    regenerated = synthesizer.profile_for(moved)
    assert regenerated is not first
    assert regenerated.governing_tag == CategoryTag.MALL


def test_synthesizer_drops_vanished_zones() -> None:
    synthesizer = TrafficSynthesizer(rng=random.Random(3))
    zones = {
        "zone-0": _zone("Piața Victoriei", index=0),
        "zone-1": _zone("Iulius Mall", index=1),
    }
    profiles = synthesizer.profiles_for(zones)
    assert set(profiles) == {"zone-0", "zone-1"}

    del zones["zone-1"]
    synthesizer.profiles_for(zones)

    assert synthesizer.cached("zone-1") is None
    assert synthesizer.cached("zone-0") is profiles["zone-0"]
