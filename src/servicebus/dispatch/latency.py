"""Delay strategies awaited before each handler call (simulated transport latency)."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

DelayStrategy = Callable[[], Awaitable[None]]


async def no_delay() -> None:
    """Zero-latency strategy for tests. Still yields to the event loop."""
    await asyncio.sleep(0)


class FixedDelay:
    """Sleep a fixed interval. Cancellable like any asyncio.sleep."""

    def __init__(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError("delay must be non-negative")
        self.seconds = seconds

    async def __call__(self) -> None:
        await asyncio.sleep(self.seconds)

    def __repr__(self) -> str:
        return f"FixedDelay({self.seconds!r})"


def from_milliseconds(ms: float) -> DelayStrategy:
    """Build a strategy from a millisecond value; 0 means no delay."""
    if ms <= 0:
        return no_delay
    return FixedDelay(ms / 1000.0)
