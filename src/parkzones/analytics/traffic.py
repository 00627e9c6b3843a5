"""Synthetic hourly traffic intensity profiles for the heatmap.

The curves are an illustrative display heuristic, not a measurement or a
prediction: each zone gets a base curve picked from the kind of area its
address suggests (shopping, city centre, campus, ...), plus bounded jitter.

Randomness always comes from an injected :class:`random.Random`, so a
seeded generator gives reproducible profiles.
"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Iterable, Mapping

from parkzones.models.traffic import (
    HOURS_PER_DAY,
    MAX_INTENSITY,
    MIN_INTENSITY,
    CategoryTag,
    HourBucket,
    TrafficProfile,
)
from parkzones.models.zone import ZoneRecord

_logger = logging.getLogger(__name__)

JITTER = 7.5

# Case-insensitive substrings; English plus the Romanian forms the feed uses.
CATEGORY_KEYWORDS: dict[CategoryTag, tuple[str, ...]] = {
    CategoryTag.MALL: ("mall", "shopping", "iulius"),
    CategoryTag.CENTER: ("center", "centre", "centru", "central", "square", "piața", "piata", "victoriei"),
    CategoryTag.UNIVERSITY: ("universit", "campus"),
    CategoryTag.HOSPITAL: ("hospital", "spital", "medical", "clinic"),
    CategoryTag.RESIDENTIAL: ("residential", "rezidential", "rezidențial", "cartier"),
    CategoryTag.BUSINESS: ("business", "office", "birouri"),
}

# Highest priority first; decides which tag drives the base curve.
TAG_PRIORITY: tuple[CategoryTag, ...] = (
    CategoryTag.CENTER,
    CategoryTag.BUSINESS,
    CategoryTag.UNIVERSITY,
    CategoryTag.HOSPITAL,
    CategoryTag.MALL,
    CategoryTag.RESIDENTIAL,
)

_UNTAGGED: CategoryTag | None = None

BASE_INTENSITY: dict[HourBucket, dict[CategoryTag | None, int]] = {
    HourBucket.MORNING_RUSH: {
        CategoryTag.CENTER: 85,
        CategoryTag.BUSINESS: 85,
        CategoryTag.UNIVERSITY: 75,
        CategoryTag.HOSPITAL: 65,
        CategoryTag.MALL: 35,
        CategoryTag.RESIDENTIAL: 40,
        _UNTAGGED: 40,
    },
    HourBucket.MIDDAY: {
        CategoryTag.CENTER: 75,
        CategoryTag.BUSINESS: 75,
        CategoryTag.UNIVERSITY: 65,
        CategoryTag.HOSPITAL: 70,
        CategoryTag.MALL: 55,
        CategoryTag.RESIDENTIAL: 25,
        _UNTAGGED: 25,
    },
    HourBucket.EVENING_PEAK: {
        CategoryTag.CENTER: 80,
        CategoryTag.BUSINESS: 60,
        CategoryTag.UNIVERSITY: 45,
        CategoryTag.HOSPITAL: 45,
        CategoryTag.MALL: 90,
        CategoryTag.RESIDENTIAL: 70,
        _UNTAGGED: 45,
    },
    HourBucket.EVENING: {
        CategoryTag.CENTER: 65,
        CategoryTag.BUSINESS: 35,
        CategoryTag.UNIVERSITY: 35,
        CategoryTag.HOSPITAL: 35,
        CategoryTag.MALL: 75,
        CategoryTag.RESIDENTIAL: 80,
        _UNTAGGED: 35,
    },
    HourBucket.OVERNIGHT: {
        CategoryTag.CENTER: 15,
        CategoryTag.BUSINESS: 15,
        CategoryTag.UNIVERSITY: 15,
        CategoryTag.HOSPITAL: 40,
        CategoryTag.MALL: 15,
        CategoryTag.RESIDENTIAL: 60,
        _UNTAGGED: 15,
    },
}


def derive_tags(*texts: str | None) -> frozenset[CategoryTag]:
    """Tags whose keywords occur in any of *texts*."""
    haystack = " ".join(text for text in texts if text).casefold()
    if not haystack:
        return frozenset()
    return frozenset(
        tag for tag, keywords in CATEGORY_KEYWORDS.items() if any(keyword in haystack for keyword in keywords)
    )


def governing_tag(tags: Iterable[CategoryTag]) -> CategoryTag | None:
    present = set(tags)
    for tag in TAG_PRIORITY:
        if tag in present:
            return tag
    return None


def base_intensity(hour: int, tag: CategoryTag | None) -> int:
    return BASE_INTENSITY[HourBucket.for_hour(hour)][tag]


def clamp_intensity(value: float) -> int:
    return max(MIN_INTENSITY, min(MAX_INTENSITY, round(value)))


def synthesize_profile(zone_id: str, *texts: str | None, rng: random.Random) -> TrafficProfile:
    """Build a 24-hour profile for a zone from its address/description text."""
    tags = derive_tags(*texts)
    governing = governing_tag(tags)
    intensities = tuple(
        clamp_intensity(base_intensity(hour, governing) + rng.uniform(-JITTER, JITTER))
        for hour in range(HOURS_PER_DAY)
    )
    return TrafficProfile(zone_id=zone_id, tags=tags, governing_tag=governing, intensities=intensities)


def _zone_texts(zone: ZoneRecord) -> tuple[str, ...]:
    return (zone.street, zone.address, zone.description)


class TrafficSynthesizer:
    """Per-zone profile cache backed by a single injected generator.

    A profile is regenerated only when the zone's derived tags change;
    availability changes alone keep the cached curve.
    """

    def __init__(self, *, rng: random.Random | None = None, seed: int | None = None) -> None:
        if rng is None:
            rng = random.Random(seed if seed is not None else time.time_ns())
        self._rng = rng
        self._profiles: dict[str, TrafficProfile] = {}

    def profile_for(self, zone: ZoneRecord) -> TrafficProfile:
        texts = _zone_texts(zone)
        cached = self._profiles.get(zone.id)
        if cached is not None and cached.tags == derive_tags(*texts):
            return cached
        profile = synthesize_profile(zone.id, *texts, rng=self._rng)
        self._profiles[zone.id] = profile
        _logger.debug("Generated traffic profile for %s (tag=%s)", zone.id, profile.governing_tag)
        return profile

    def profiles_for(self, zones: Mapping[str, ZoneRecord]) -> dict[str, TrafficProfile]:
        """Profiles for every zone; cache entries for vanished zones are dropped."""
        for stale_id in set(self._profiles) - set(zones):
            del self._profiles[stale_id]
        return {zone_id: self.profile_for(zone) for zone_id, zone in zones.items()}

    def cached(self, zone_id: str) -> TrafficProfile | None:
        return self._profiles.get(zone_id)

    def clear(self) -> None:
        self._profiles.clear()
