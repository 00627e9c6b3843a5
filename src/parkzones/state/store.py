"""In-memory zone store.

This is the only component allowed to replace zone data. Consumers read
the current :class:`ZoneSnapshot`; a refresh swaps in a new snapshot as
a whole, so a reader never sees a mix of old and new records.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from datetime import UTC, datetime
from types import MappingProxyType

from parkzones.models.zone import ZoneRecord
from parkzones.state.policy import is_stale_generation, records_differ

_logger = logging.getLogger(__name__)

SnapshotListener = Callable[["ZoneSnapshot"], None]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ZoneSnapshot(Mapping[str, ZoneRecord]):
    """Immutable ``zone_id -> ZoneRecord`` mapping plus refresh metadata."""

    __slots__ = ("_zones", "refreshed_at", "generation")

    def __init__(
        self,
        zones: Mapping[str, ZoneRecord] | None = None,
        *,
        refreshed_at: datetime | None = None,
        generation: int = 0,
    ) -> None:
        self._zones: Mapping[str, ZoneRecord] = MappingProxyType(dict(zones or {}))
        self.refreshed_at = refreshed_at
        self.generation = generation

    def __getitem__(self, zone_id: str) -> ZoneRecord:
        return self._zones[zone_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._zones)

    def __len__(self) -> int:
        return len(self._zones)

    def __repr__(self) -> str:
        return f"ZoneSnapshot(zones={len(self._zones)}, generation={self.generation}, refreshed_at={self.refreshed_at!r})"

    def records(self) -> list[ZoneRecord]:
        return list(self._zones.values())


class ZoneStore:
    """Holds the current zone snapshot.

    Lifecycle: created empty, filled by the first successful refresh,
    replaced wholesale whenever a newer refresh yields different records,
    and closed on shutdown (later publishes are ignored).
    """

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._snapshot = ZoneSnapshot()
        self._accepted_generation = 0
        self._update_count = 0
        self._listeners: list[SnapshotListener] = []
        self._closed = False

    @property
    def snapshot(self) -> ZoneSnapshot:
        return self._snapshot

    @property
    def refreshed_at(self) -> datetime | None:
        """Time of the last refresh that replaced the snapshot."""
        return self._snapshot.refreshed_at

    @property
    def update_count(self) -> int:
        """Number of times the snapshot has been replaced."""
        return self._update_count

    @property
    def accepted_generation(self) -> int:
        return self._accepted_generation

    @property
    def closed(self) -> bool:
        return self._closed

    def publish(
        self,
        records: Mapping[str, ZoneRecord],
        *,
        generation: int,
        observed_at: datetime | None = None,
    ) -> bool:
        """Offer a freshly normalized record set.

        Returns ``True`` when the snapshot was replaced. Identical record
        sets, stale generations and publishes after :meth:`close` are
        discarded and leave the snapshot and its timestamp untouched.
        """
        if self._closed:
            _logger.debug("Store closed; ignoring generation %d", generation)
            return False

        if is_stale_generation(accepted_generation=self._accepted_generation, incoming_generation=generation):
            _logger.debug(
                "Discarding stale generation %d (accepted %d)",
                generation,
                self._accepted_generation,
            )
            return False
        self._accepted_generation = generation

        # The first successful refresh always populates the store, even when empty.
        populated = self._snapshot.refreshed_at is not None
        if populated and not records_differ(self._snapshot, records):
            _logger.debug("Generation %d identical to current snapshot; keeping it", generation)
            return False

        self._snapshot = ZoneSnapshot(
            records,
            refreshed_at=observed_at or self._clock(),
            generation=generation,
        )
        self._update_count += 1
        _logger.info("Zone snapshot replaced: %d zones (generation %d)", len(self._snapshot), generation)
        self._notify(self._snapshot)
        return True

    def _notify(self, snapshot: ZoneSnapshot) -> None:
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                _logger.debug("Snapshot listener failed", exc_info=True)

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a callback for snapshot replacements; returns an unsubscribe function."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Read helpers
    # ------------------------------------------------------------------

    def get(self, zone_id: str) -> ZoneRecord | None:
        return self._snapshot.get(zone_id)

    def zones(self) -> list[ZoneRecord]:
        return self._snapshot.records()

    def __len__(self) -> int:
        return len(self._snapshot)

    def __contains__(self, zone_id: object) -> bool:
        return zone_id in self._snapshot

    def close(self) -> None:
        """Tear the store down; the last snapshot stays readable."""
        self._closed = True
        self._listeners.clear()
