"""High-level async client for parking zone synchronization."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Mapping
from typing import Any

import aiohttp
from pydantic import ValidationError

from parkzones._transport import FeedTransport, HttpFeedTransport, ZoneAdminTransport
from parkzones.analytics.summary import ZoneSummary, summarize
from parkzones.analytics.traffic import TrafficSynthesizer
from parkzones.config import ParkZonesConfig
from parkzones.exceptions import MalformedItem, ParkZonesError, ZoneStoreClosedError
from parkzones.models.feed import FeedItem
from parkzones.models.traffic import TrafficProfile
from parkzones.models.zone import ZoneRecord
from parkzones.scheduler import RefreshScheduler
from parkzones.state.events import RefreshResult
from parkzones.state.store import ZoneSnapshot, ZoneStore

_logger = logging.getLogger(__name__)


class ParkZonesClient:
    """Async client keeping a zone store in sync with the availability feed.

    Usage::

        async with ParkZonesClient(ParkZonesConfig.from_env()) as client:
            await client.start()
            for zone in client.store.zones():
                print(zone.name, zone.band.label)

    Views should read through :attr:`store` (or subscribe to it) and never
    keep their own copies of the feed.
    """

    def __init__(
        self,
        config: ParkZonesConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: FeedTransport | None = None,
        rng: random.Random | None = None,
        on_refresh: Callable[[RefreshResult], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
    ) -> None:
        self._config = config or ParkZonesConfig()
        self._external_session = session is not None
        self._http_session = session
        self._transport: FeedTransport | None = transport
        self._injected_transport = transport is not None
        self._synthesizer = TrafficSynthesizer(rng=rng, seed=self._config.traffic_seed)
        self._on_refresh = on_refresh
        self._on_error = on_error
        self._store: ZoneStore | None = None
        self._scheduler: RefreshScheduler | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> ParkZonesClient:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpFeedTransport(self._config, self._http_session)
        self._store = ZoneStore()
        self._scheduler = RefreshScheduler(
            self._transport,
            self._store,
            self._config,
            on_result=self._on_refresh,
            on_error=self._on_error,
        )
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._scheduler is not None:
            await self._scheduler.stop()
        if self._store is not None:
            self._store.close()
        self._synthesizer.clear()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._injected_transport:
            self._transport = None
        self._scheduler = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_scheduler(self) -> RefreshScheduler:
        if self._scheduler is None:
            raise ParkZonesError("Client not initialized. Use 'async with ParkZonesClient(...) as client:'")
        return self._scheduler

    def _require_store(self) -> ZoneStore:
        if self._store is None:
            raise ParkZonesError("Client not initialized. Use 'async with ParkZonesClient(...) as client:'")
        if self._store.closed:
            raise ZoneStoreClosedError("Zone store has been closed")
        return self._store

    def _require_admin_transport(self) -> ZoneAdminTransport:
        if not isinstance(self._transport, ZoneAdminTransport):
            raise ParkZonesError("Transport does not support zone mutations")
        return self._transport

    # ------------------------------------------------------------------
    # Synchronization
    # ------------------------------------------------------------------

    @property
    def config(self) -> ParkZonesConfig:
        return self._config

    @property
    def store(self) -> ZoneStore:
        return self._require_store()

    @property
    def scheduler(self) -> RefreshScheduler:
        return self._require_scheduler()

    @property
    def snapshot(self) -> ZoneSnapshot:
        return self._require_store().snapshot

    async def start(self) -> None:
        """Start periodic refreshing (first cycle runs immediately)."""
        await self._require_scheduler().start()

    async def stop(self) -> None:
        await self._require_scheduler().stop()

    async def refresh(self) -> RefreshResult:
        """Manual refresh; joins an in-flight cycle if there is one."""
        return await self._require_scheduler().refresh()

    # ------------------------------------------------------------------
    # Derived analytics
    # ------------------------------------------------------------------

    def profiles(self) -> dict[str, TrafficProfile]:
        """Traffic profiles for every zone in the current snapshot."""
        return self._synthesizer.profiles_for(self.snapshot)

    def profile(self, zone_id: str) -> TrafficProfile | None:
        zone = self.snapshot.get(zone_id)
        if zone is None:
            return None
        return self._synthesizer.profile_for(zone)

    def summary(self) -> ZoneSummary:
        return summarize(self.snapshot.values())

    def zone(self, zone_id: str) -> ZoneRecord | None:
        return self._require_store().get(zone_id)

    # ------------------------------------------------------------------
    # Admin mutations
    # ------------------------------------------------------------------

    @staticmethod
    def _feed_payload(item: FeedItem | Mapping[str, Any]) -> dict[str, Any]:
        if isinstance(item, FeedItem):
            return item.to_payload()
        try:
            return FeedItem.model_validate(dict(item)).to_payload()
        except ValidationError as exc:
            raise MalformedItem(f"invalid zone payload: {exc.error_count()} error(s)") from exc

    async def create_zone(self, item: FeedItem | Mapping[str, Any]) -> RefreshResult:
        """Create a zone upstream, then re-synchronize."""
        await self._require_admin_transport().create_zone(self._feed_payload(item))
        _logger.info("Created zone upstream; refreshing")
        return await self._require_scheduler().refresh(fresh=True)

    async def update_zone(self, address: str, item: FeedItem | Mapping[str, Any]) -> RefreshResult:
        """Update the zone at *address* upstream, then re-synchronize."""
        await self._require_admin_transport().update_zone(address, self._feed_payload(item))
        _logger.info("Updated zone %r upstream; refreshing", address)
        return await self._require_scheduler().refresh(fresh=True)

    async def delete_zone(self, address: str) -> RefreshResult:
        """Delete the zone at *address* upstream, then re-synchronize."""
        await self._require_admin_transport().delete_zone(address)
        _logger.info("Deleted zone %r upstream; refreshing", address)
        return await self._require_scheduler().refresh(fresh=True)
