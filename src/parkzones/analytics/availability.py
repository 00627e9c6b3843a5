"""Availability band classification.

A zone with 30-50% free spots and no hint is GOOD by default, which matches
the dashboard's green markers; pass ``gap_band=AvailabilityBand.LIMITED``
(or set ``PARKZONES_GAP_BAND=limited``) for the stricter reading.
"""

from __future__ import annotations

from parkzones.models.zone import AvailabilityBand, BandHint

LIMITED_BELOW = 0.30
GOOD_FROM = 0.50


def availability_ratio(total: int, available: int) -> float:
    if total <= 0:
        return 0.0
    return available / total


def classify_availability(
    total: int,
    available: int,
    hint: BandHint | None = None,
    *,
    gap_band: AvailabilityBand = AvailabilityBand.GOOD,
) -> AvailabilityBand:
    """Classify a zone's availability into a band.

    Rules are checked in order; the first match wins:

    1. no free spots, or a ``FULL`` hint -> ``FULL``
    2. a ``LIMITED`` hint, or under 30% free -> ``LIMITED``
    3. a ``GOOD`` hint, or at least 50% free -> ``GOOD``
    4. otherwise (30-50% free, no hint) -> *gap_band*

    Parameters
    ----------
    total : int
        Zone capacity.
    available : int
        Currently free spots.
    hint : BandHint or None
        Server-supplied hint, if the feed sent one.
    gap_band : AvailabilityBand
        Band for the 30-50% range when no hint is present.
    """
    ratio = availability_ratio(total, available)

    if available <= 0 or hint is BandHint.FULL:
        return AvailabilityBand.FULL
    if hint is BandHint.LIMITED or ratio < LIMITED_BELOW:
        return AvailabilityBand.LIMITED
    if hint is BandHint.GOOD or ratio >= GOOD_FROM:
        return AvailabilityBand.GOOD
    return gap_band
