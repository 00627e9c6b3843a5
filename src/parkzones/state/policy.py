"""Snapshot acceptance policy.

This module intentionally contains *no* payload parsing. The ingestion
boundary produces normalized records; these rules only decide whether a
candidate snapshot may replace the current one.
"""

from __future__ import annotations

from collections.abc import Mapping

from parkzones.models.zone import ZoneRecord


def is_stale_generation(*, accepted_generation: int, incoming_generation: int) -> bool:
    """Responses from requests issued before the accepted one are stale."""
    return incoming_generation < accepted_generation


def records_differ(current: Mapping[str, ZoneRecord], incoming: Mapping[str, ZoneRecord]) -> bool:
    """Structural comparison of two record sets (keys and every field)."""
    if current.keys() != incoming.keys():
        return True
    return any(current[zone_id] != record for zone_id, record in incoming.items())
