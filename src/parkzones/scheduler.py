"""Periodic and manual zone refresh.

The scheduler drives the feed transport on a fixed interval and on
demand, normalizes each response and offers it to the :class:`ZoneStore`.

State machine::

    IDLE -> FETCHING -> SUCCESS | FAILURE -> IDLE

A manual :meth:`RefreshScheduler.refresh` while a cycle is in flight
joins that cycle instead of issuing a second request. Every cycle also
carries a monotonically increasing generation number, and the store
rejects generations older than the last accepted one, so an overtaken
response can never overwrite newer data.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from functools import partial
from typing import Any

from parkzones._transport import FeedTransport
from parkzones.config import ParkZonesConfig
from parkzones.exceptions import FeedUnavailable
from parkzones.ingestion.zones import NormalizedBatch, normalize_feed
from parkzones.state.events import RefreshResult, RefreshTrigger, SchedulerState
from parkzones.state.store import ZoneStore

_logger = logging.getLogger(__name__)

Normalizer = Callable[[Sequence[Any]], NormalizedBatch]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RefreshScheduler:
    """Keeps a :class:`ZoneStore` in sync with the feed.

    Usage::

        scheduler = RefreshScheduler(transport, store, config)
        await scheduler.start()
        ...
        result = await scheduler.refresh()
        ...
        await scheduler.stop()

    Parameters
    ----------
    transport : FeedTransport
        Source of raw feed items.
    store : ZoneStore
        Store receiving normalized snapshots.
    config : ParkZonesConfig or None
        Supplies the default interval and normalization settings.
    interval : float or None
        Seconds between automatic cycles; overrides ``config.refresh_interval``.
    normalizer : callable or None
        Maps raw items to a :class:`NormalizedBatch`. Defaults to
        :func:`normalize_feed` with *config*.
    on_result : callable or None
        Called with every :class:`RefreshResult`.
    on_error : callable or None
        Called with the exception of every failed cycle.
    """

    def __init__(
        self,
        transport: FeedTransport,
        store: ZoneStore,
        config: ParkZonesConfig | None = None,
        *,
        interval: float | None = None,
        normalizer: Normalizer | None = None,
        on_result: Callable[[RefreshResult], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        config = config or ParkZonesConfig()
        self._transport = transport
        self._store = store
        self._interval = interval if interval is not None else config.refresh_interval
        if self._interval <= 0:
            raise ValueError("interval must be positive")
        self._normalize: Normalizer = normalizer or partial(normalize_feed, config=config)
        self._on_result = on_result
        self._on_error = on_error
        self._clock = clock

        self._state = SchedulerState.IDLE
        self._generation = 0
        self._inflight: asyncio.Task[RefreshResult] | None = None
        self._timer_task: asyncio.Task[None] | None = None
        self._reset_timer = asyncio.Event()
        self._last_result: RefreshResult | None = None
        self._consecutive_failures = 0

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._timer_task is not None and not self._timer_task.done()

    @property
    def generation(self) -> int:
        """Generation number of the most recently started cycle."""
        return self._generation

    @property
    def last_result(self) -> RefreshResult | None:
        return self._last_result

    @property
    def last_error(self) -> Exception | None:
        if self._last_result is None:
            return None
        return self._last_result.error

    @property
    def consecutive_failures(self) -> int:
        return self._consecutive_failures

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Run a first cycle now and then one every ``interval`` seconds."""
        if self.running:
            return
        self._reset_timer.clear()
        self._timer_task = asyncio.create_task(self._run_timer(), name="parkzones-refresh-timer")

    async def stop(self) -> None:
        """Clear the timer.

        An in-flight fetch is not cancelled; it completes in the
        background and its result is dropped if the store is closed.
        """
        task = self._timer_task
        self._timer_task = None
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def refresh(self, *, fresh: bool = False) -> RefreshResult:
        """Refresh now.

        When idle this starts a cycle and restarts the interval timer.
        When a cycle is already in flight it returns that cycle's result,
        unless *fresh* is set: then it waits for that cycle and starts a
        new one, so the fetch is issued after the call (used after
        upstream mutations).
        """
        if fresh and self._inflight is not None and not self._inflight.done():
            await asyncio.shield(self._inflight)
        task, started = self._ensure_cycle(RefreshTrigger.MANUAL)
        if started and self.running:
            self._reset_timer.set()
        return await asyncio.shield(task)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _ensure_cycle(self, trigger: RefreshTrigger) -> tuple[asyncio.Task[RefreshResult], bool]:
        """Return the in-flight cycle, or start one. The flag tells which."""
        if self._inflight is not None and not self._inflight.done():
            _logger.debug("Coalescing %s refresh with in-flight generation %d", trigger, self._generation)
            return self._inflight, False
        self._generation += 1
        self._inflight = asyncio.create_task(
            self._cycle(trigger, self._generation),
            name=f"parkzones-refresh-{self._generation}",
        )
        return self._inflight, True

    async def _run_timer(self) -> None:
        # The reset event is cleared only when consumed, never on loop entry.
        task, _ = self._ensure_cycle(RefreshTrigger.STARTUP)
        await asyncio.shield(task)
        while True:
            try:
                await asyncio.wait_for(self._reset_timer.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                self._reset_timer.clear()
                task, _ = self._ensure_cycle(RefreshTrigger.TIMER)
                await asyncio.shield(task)
            else:
                # A manual refresh set the event: start a fresh interval.
                self._reset_timer.clear()

    async def _cycle(self, trigger: RefreshTrigger, generation: int) -> RefreshResult:
        started_at = self._clock()
        self._state = SchedulerState.FETCHING
        try:
            items = await self._transport.fetch_zones()
            batch = self._normalize(items)
        except Exception as exc:
            if isinstance(exc, FeedUnavailable):
                _logger.warning("Refresh %d (%s) failed: %s", generation, trigger, exc)
            else:
                _logger.exception("Refresh %d (%s) failed unexpectedly", generation, trigger)
            self._state = SchedulerState.FAILURE
            self._consecutive_failures += 1
            result = RefreshResult(
                ok=False,
                trigger=trigger,
                generation=generation,
                error=exc,
                started_at=started_at,
                finished_at=self._clock(),
            )
        else:
            finished_at = self._clock()
            changed = self._store.publish(batch.records, generation=generation, observed_at=finished_at)
            if batch.skipped_count:
                _logger.warning("Refresh %d skipped %d malformed feed item(s)", generation, batch.skipped_count)
            self._state = SchedulerState.SUCCESS
            self._consecutive_failures = 0
            result = RefreshResult(
                ok=True,
                trigger=trigger,
                generation=generation,
                changed=changed,
                zone_count=len(batch.records),
                skipped=batch.skipped_count,
                started_at=started_at,
                finished_at=finished_at,
            )
        finally:
            if self._state is SchedulerState.FETCHING:
                # Cancelled mid-fetch.
                self._state = SchedulerState.IDLE

        self._last_result = result
        self._dispatch(result)
        self._state = SchedulerState.IDLE
        return result

    def _dispatch(self, result: RefreshResult) -> None:
        if self._on_result is not None:
            try:
                self._on_result(result)
            except Exception:
                _logger.debug("on_result callback failed", exc_info=True)
        if result.error is not None and self._on_error is not None:
            try:
                self._on_error(result.error)
            except Exception:
                _logger.debug("on_error callback failed", exc_info=True)
