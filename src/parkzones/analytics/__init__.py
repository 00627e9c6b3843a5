"""Derived analytics over normalized zone records.

Availability banding, synthetic traffic profiles and summary statistics.
None of these modules perform I/O.
"""

from parkzones.analytics.availability import classify_availability
from parkzones.analytics.summary import ZoneSummary, summarize
from parkzones.analytics.traffic import TrafficSynthesizer, derive_tags, governing_tag, synthesize_profile

__all__ = [
    "TrafficSynthesizer",
    "ZoneSummary",
    "classify_availability",
    "derive_tags",
    "governing_tag",
    "summarize",
    "synthesize_profile",
]
