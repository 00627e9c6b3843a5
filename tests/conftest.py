from __future__ import annotations

import asyncio
import copy
from dataclasses import dataclass, field
from typing import Any

import pytest

SAMPLE_FEED: list[dict[str, Any]] = [
    {
        "address": "Piața Victoriei Nr 1",
        "numberOfSpots": 120,
        "availablePlaces": 0,
        "latitude": 45.7494,
        "longitude": 21.2272,
        "type": "red",
    },
    {
        "address": "Piața Unirii, Timișoara, Romania",
        "numberOfSpots": 85,
        "availablePlaces": 2,
        "latitude": 45.7536,
        "longitude": 21.2251,
        "type": "yellow",
    },
    {
        "address": "Piața Consiliul Europei 2",
        "numberOfSpots": 300,
        "availablePlaces": 156,
        "latitude": 45.7415,
        "longitude": 21.2398,
        "type": "green",
    },
    {
        "address": "Bulevardul Vasile Pârvan 4",
        "numberOfSpots": 75,
        "latitude": 45.7472,
        "longitude": 21.2081,
        "type": "green",
    },
    {
        "address": "Iulius Mall Strada Alexandru Odobescu 2",
        "numberOfSpots": 450,
        "availablePlaces": 267,
        "latitude": 45.7308,
        "longitude": 21.2267,
        "type": "green",
    },
]


@dataclass
class FakeFeed:
    """Feed transport double.

    ``responses`` are served in order (the last one repeats); an
    exception instance is raised instead of returned. When ``gate`` is
    set, every fetch blocks until the event fires.
    """

    responses: list[Any] = field(default_factory=lambda: [copy.deepcopy(SAMPLE_FEED)])
    gate: asyncio.Event | None = None
    calls: int = 0

    async def fetch_zones(self) -> list[Any]:
        self.calls += 1
        call_index = self.calls - 1
        if self.gate is not None:
            await self.gate.wait()
        response = self.responses[min(call_index, len(self.responses) - 1)]
        if isinstance(response, Exception):
            raise response
        return copy.deepcopy(response)


@pytest.fixture
def sample_feed() -> list[dict[str, Any]]:
    return copy.deepcopy(SAMPLE_FEED)
