"""HTTP transport for the parking availability feed."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable
from urllib.parse import quote

import aiohttp

from parkzones.config import ParkZonesConfig
from parkzones.exceptions import FeedUnavailable

_logger = logging.getLogger(__name__)

USER_AGENT = "parkzones/1.0"


class FeedTransport(Protocol):
    """Structural feed interface used by the refresh scheduler.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpFeedTransport`) concrete.
    """

    async def fetch_zones(self) -> list[Any]:
        ...


@runtime_checkable
class ZoneAdminTransport(Protocol):
    """Transport that can also forward admin zone mutations upstream."""

    async def create_zone(self, item: Mapping[str, Any]) -> Any:
        ...

    async def update_zone(self, address: str, item: Mapping[str, Any]) -> Any:
        ...

    async def delete_zone(self, address: str) -> Any:
        ...


class HttpFeedTransport:
    """Reads the zone list and forwards admin mutations over HTTP.

    Every failure surfaces as :class:`FeedUnavailable`; there is no
    retry here, retry policy belongs to the scheduler.
    """

    def __init__(self, config: ParkZonesConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def _zone_endpoint(self, address: str) -> str:
        return f"{self._config.feed_path}/{quote(address, safe='')}"

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        payload: Mapping[str, Any] | None = None,
    ) -> Any:
        url = f"{self._config.base_url}{endpoint}"
        headers = {"accept": "application/json", "user-agent": USER_AGENT}

        _logger.debug("%s %s", method, url)

        try:
            async with self._http.request(
                method,
                url,
                json=dict(payload) if payload is not None else None,
                headers=headers,
                timeout=self._timeout,
            ) as resp:
                text = await resp.text()
                if not 200 <= resp.status < 300:
                    raise FeedUnavailable(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except FeedUnavailable:
            raise
        except asyncio.TimeoutError as exc:
            raise FeedUnavailable(
                f"Request to {endpoint} timed out after {self._config.request_timeout}s",
                endpoint=endpoint,
            ) from exc
        except aiohttp.ClientError as exc:
            raise FeedUnavailable(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc
        except UnicodeDecodeError as exc:
            raise FeedUnavailable(
                f"Undecodable response body from {endpoint}: {exc}",
                endpoint=endpoint,
            ) from exc

        if not text.strip():
            return None

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise FeedUnavailable(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                status_code=resp.status,
                endpoint=endpoint,
            ) from exc

    async def fetch_zones(self) -> list[Any]:
        """``GET /api/parking``: the raw zone list."""
        endpoint = self._config.feed_path
        body = await self._request("GET", endpoint)
        if not isinstance(body, list):
            raise FeedUnavailable(
                f"Expected a JSON array from {endpoint}, got {type(body).__name__}",
                endpoint=endpoint,
            )
        _logger.debug("Feed returned %d items", len(body))
        return body

    async def create_zone(self, item: Mapping[str, Any]) -> Any:
        """``POST /api/parking`` with a feed-shaped body."""
        return await self._request("POST", self._config.feed_path, payload=item)

    async def update_zone(self, address: str, item: Mapping[str, Any]) -> Any:
        """``PUT /api/parking/{address}``."""
        return await self._request("PUT", self._zone_endpoint(address), payload=item)

    async def delete_zone(self, address: str) -> Any:
        """``DELETE /api/parking/{address}``."""
        return await self._request("DELETE", self._zone_endpoint(address))
