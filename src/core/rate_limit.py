"""Async rate limiting.

The engine paces GitHub calls with a single ``RateLimiter``; the chat bot
paces its responses with a ``KeyedRateLimiter`` so each chat gets its own
budget while different chats do not wait on each other.
"""

from __future__ import annotations

import asyncio
import math
import time
from typing import Awaitable, Callable, Hashable, Optional

from cachetools import TTLCache

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


def validate_interval(interval: float) -> float:
    """Return ``interval`` as a float, rejecting non-positive or non-finite values."""

    value = float(interval)
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"Rate limit interval must be a positive finite number, got {interval!r}")
    return value


class RateLimiter:
    """Grant at most one permit per ``interval`` seconds."""

    def __init__(
        self,
        interval: float,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._interval = validate_interval(interval)
        self._clock = clock
        self._sleep = sleep
        self._last_granted: Optional[float] = None
        self._lock = asyncio.Lock()

    @property
    def interval(self) -> float:
        return self._interval

    async def acquire(self) -> None:
        """Suspend until a permit is available, then take it."""

        async with self._lock:
            if self._last_granted is not None:
                wait = self._last_granted + self._interval - self._clock()
                if wait > 0:
                    await self._sleep(wait)
            self._last_granted = self._clock()


class KeyedRateLimiter:
    """Independent ``RateLimiter`` per key, created on first use.

    Limiters of keys that stay idle for ``IDLE_INTERVALS`` intervals are
    evicted; such a key starts again with an immediate permit.
    """

    IDLE_INTERVALS = 10
    MAX_KEYS = 10000

    def __init__(
        self,
        interval: float,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._interval = validate_interval(interval)
        self._clock = clock
        self._sleep = sleep
        self._limiters: TTLCache[Hashable, RateLimiter] = TTLCache(
            maxsize=self.MAX_KEYS,
            ttl=self._interval * self.IDLE_INTERVALS,
            timer=clock,
        )

    def __contains__(self, key: Hashable) -> bool:
        return key in self._limiters

    async def acquire(self, key: Hashable) -> None:
        limiter = self._limiters.get(key)
        if limiter is None:
            limiter = RateLimiter(self._interval, clock=self._clock, sleep=self._sleep)
            self._limiters[key] = limiter
        await limiter.acquire()
        # Expiry counts from the latest grant, not from creation.
        self._limiters[key] = limiter
