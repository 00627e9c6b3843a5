"""State/store layer.

This package is the single source of truth for zone data: normalized
records from every refresh cycle end up in one :class:`ZoneStore`, and
views only ever read its current snapshot.
"""

from parkzones.state.events import RefreshResult, RefreshTrigger, SchedulerState
from parkzones.state.store import ZoneSnapshot, ZoneStore

__all__ = [
    "RefreshResult",
    "RefreshTrigger",
    "SchedulerState",
    "ZoneSnapshot",
    "ZoneStore",
]
