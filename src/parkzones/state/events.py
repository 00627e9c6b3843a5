"""Refresh cycle states and outcomes.

The scheduler reports every cycle as a :class:`RefreshResult`; it never
raises out of a cycle.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class SchedulerState(StrEnum):
    IDLE = "idle"
    FETCHING = "fetching"
    SUCCESS = "success"
    FAILURE = "failure"


class RefreshTrigger(StrEnum):
    STARTUP = "startup"
    TIMER = "timer"
    MANUAL = "manual"


class RefreshResult(BaseModel):
    """Outcome of one refresh cycle."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    ok: bool
    trigger: RefreshTrigger
    generation: int = Field(..., ge=1)
    changed: bool = False
    zone_count: int = 0
    skipped: int = 0
    error: Exception | None = None
    started_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    finished_at: datetime | None = None

    @property
    def duration_seconds(self) -> float | None:
        if self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()
