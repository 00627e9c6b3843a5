from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

import aiohttp
import pytest

from parkzones._transport import HttpFeedTransport, ZoneAdminTransport
from parkzones.config import ParkZonesConfig
from parkzones.exceptions import FeedUnavailable


class _FakeResponse:
    def __init__(
        self,
        status: int,
        body: str,
        error: BaseException | None = None,
        text_error: BaseException | None = None,
    ) -> None:
        self.status = status
        self._body = body
        self._error = error
        self._text_error = text_error

    async def __aenter__(self) -> _FakeResponse:
        if self._error is not None:
            raise self._error
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None

    async def text(self) -> str:
        if self._text_error is not None:
            raise self._text_error
        return self._body


@dataclass
class _FakeSession:
    status: int = 200
    body: str = "[]"
    error: BaseException | None = None
    text_error: BaseException | None = None
    requests: list[dict[str, Any]] = field(default_factory=list)

    def request(self, method: str, url: str, **kwargs: Any) -> _FakeResponse:
        self.requests.append({"method": method, "url": url, **kwargs})
        return _FakeResponse(self.status, self.body, self.error, self.text_error)


def _transport(session: _FakeSession) -> HttpFeedTransport:
    config = ParkZonesConfig(base_url="https://parking.example.com/", request_timeout=2.5)
    return HttpFeedTransport(config, session)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_fetch_returns_raw_list() -> None:
    session = _FakeSession(body='[{"address": "Piața Unirii", "numberOfSpots": 85}]')

    items = await _transport(session).fetch_zones()

    assert items == [{"address": "Piața Unirii", "numberOfSpots": 85}]
    sent = session.requests[0]
    assert sent["method"] == "GET"
    assert sent["url"] == "https://parking.example.com/api/parking"
    assert sent["json"] is None
    assert sent["timeout"].total == 2.5


@pytest.mark.asyncio
async def test_http_error_status_is_feed_unavailable() -> None:
    session = _FakeSession(status=503, body="Service Unavailable")

    with pytest.raises(FeedUnavailable) as excinfo:
        await _transport(session).fetch_zones()

    assert excinfo.value.status_code == 503
    assert excinfo.value.endpoint == "/api/parking"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [aiohttp.ClientConnectionError("refused"), asyncio.TimeoutError()],
)
async def test_network_errors_are_feed_unavailable(error: BaseException) -> None:
    session = _FakeSession(error=error)

    with pytest.raises(FeedUnavailable) as excinfo:
        await _transport(session).fetch_zones()

    assert excinfo.value.status_code is None
    assert excinfo.value.__cause__ is error


@pytest.mark.asyncio
async def test_invalid_json_is_feed_unavailable() -> None:
    session = _FakeSession(body="<html>maintenance</html>")

    with pytest.raises(FeedUnavailable, match="Invalid JSON"):
        await _transport(session).fetch_zones()


@pytest.mark.asyncio
async def test_undecodable_body_is_feed_unavailable() -> None:
    error = UnicodeDecodeError("utf-8", b"\xff\xfe", 0, 1, "invalid start byte")
    session = _FakeSession(text_error=error)

    with pytest.raises(FeedUnavailable, match="Undecodable") as excinfo:
        await _transport(session).fetch_zones()

    assert excinfo.value.__cause__ is error


@pytest.mark.asyncio
@pytest.mark.parametrize("body", ['{"zones": []}', ""])
async def test_non_array_body_is_feed_unavailable(body: str) -> None:
    with pytest.raises(FeedUnavailable, match="JSON array"):
        await _transport(_FakeSession(body=body)).fetch_zones()


@pytest.mark.asyncio
async def test_admin_mutations_target_address_path() -> None:
    session = _FakeSession(body="")
    transport = _transport(session)
    payload = {"address": "Strada Exemplu Nr 3", "numberOfSpots": 10}

    assert isinstance(transport, ZoneAdminTransport)
    await transport.create_zone(payload)
    await transport.update_zone("Strada Exemplu Nr 3", payload)
    await transport.delete_zone("Piața Unirii/Nord")

    create, update, delete = session.requests
    assert (create["method"], create["url"], create["json"]) == (
        "POST",
        "https://parking.example.com/api/parking",
        payload,
    )
    assert update["method"] == "PUT"
    assert update["url"] == "https://parking.example.com/api/parking/Strada%20Exemplu%20Nr%203"
    assert delete["method"] == "DELETE"
    assert delete["url"] == "https://parking.example.com/api/parking/Pia%C8%9Ba%20Unirii%2FNord"
    assert delete["json"] is None
