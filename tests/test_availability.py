from __future__ import annotations

import pytest

from parkzones.analytics.availability import classify_availability
from parkzones.models.zone import AvailabilityBand, BandHint


@pytest.mark.parametrize("total", [0, 1, 120, 10_000])
def test_no_free_spots_is_full_regardless_of_total(total: int) -> None:
    assert classify_availability(total, 0) == AvailabilityBand.FULL


def test_ratio_boundaries() -> None:
    assert classify_availability(100, 50) == AvailabilityBand.GOOD
    assert classify_availability(100, 29) == AvailabilityBand.LIMITED
    assert classify_availability(100, 30) == AvailabilityBand.GOOD
    assert classify_availability(10, 3) == AvailabilityBand.GOOD


def test_gap_band_is_configurable() -> None:
    assert classify_availability(100, 40) == AvailabilityBand.GOOD
    assert classify_availability(100, 40, gap_band=AvailabilityBand.LIMITED) == AvailabilityBand.LIMITED
    # Outside the gap the setting has no effect.
    assert classify_availability(100, 50, gap_band=AvailabilityBand.LIMITED) == AvailabilityBand.GOOD
    assert classify_availability(100, 29, gap_band=AvailabilityBand.GOOD) == AvailabilityBand.LIMITED


def test_full_hint_wins_over_free_spots() -> None:
    assert classify_availability(100, 80, BandHint.FULL) == AvailabilityBand.FULL


def test_limited_hint_wins_over_high_ratio() -> None:
    assert classify_availability(100, 90, BandHint.LIMITED) == AvailabilityBand.LIMITED


def test_good_hint_covers_gap_but_not_low_ratio() -> None:
    assert classify_availability(100, 40, BandHint.GOOD, gap_band=AvailabilityBand.LIMITED) == AvailabilityBand.GOOD
    assert classify_availability(100, 10, BandHint.GOOD) == AvailabilityBand.LIMITED


def test_zero_available_beats_good_hint() -> None:
    assert classify_availability(50, 0, BandHint.GOOD) == AvailabilityBand.FULL


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("red", BandHint.FULL),
        ("RED", BandHint.FULL),
        (" yellow ", BandHint.LIMITED),
        ("green", BandHint.GOOD),
        ("limited", BandHint.LIMITED),
        ("blue", None),
        (None, None),
    ],
)
def test_band_hint_parsing(value: str | None, expected: BandHint | None) -> None:
    assert BandHint.parse(value) is expected


def test_bands_carry_display_colors() -> None:
    assert AvailabilityBand.GOOD.color == "#22c55e"
    assert AvailabilityBand.LIMITED.color == "#f59e0b"
    assert AvailabilityBand.FULL.color == "#ef4444"
    assert AvailabilityBand.FULL.label == "Full"
