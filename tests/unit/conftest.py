"""Fixtures specific to unit tests."""

import asyncio
from typing import List

import pytest


class FakeClock:
    """Virtual monotonic clock; sleeping advances time instantly."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


@pytest.fixture
def fake_clock() -> FakeClock:
    """Provide a virtual clock for rate limiter tests."""
    return FakeClock()
