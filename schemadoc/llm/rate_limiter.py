"""
Request Rate Limiter

Caps outbound generation requests to a fixed quota per rolling window.
Every attempt counts against the quota, whether or not the HTTP call
succeeds, because the endpoint counts the request regardless of outcome.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class RateWindow:
    """Requests issued since ``window_start`` (clock seconds)."""

    count: int
    window_start: float


class RateLimiter:
    """
    Fixed-quota limiter over a rolling window.

    One instance is owned by one API client. The window is only mutated while
    holding ``_lock``; ``slot()`` keeps the lock for the whole dispatch so
    concurrent callers cannot overrun the quota.

    Usage:
        limiter = RateLimiter(limit=15, window_seconds=60)

        async with limiter.slot():
            response = await client.post(...)
    """

    def __init__(
        self,
        limit: int = 15,
        window_seconds: float = 60.0,
        safety_margin_seconds: float = 0.1,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ):
        if limit <= 0:
            raise ValueError("limit must be positive")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")

        self.limit = limit
        self.window_seconds = window_seconds
        self.safety_margin_seconds = safety_margin_seconds
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self.window = RateWindow(count=0, window_start=clock())

    @classmethod
    def from_settings(cls, settings) -> RateLimiter:
        """Build a limiter from GenerationSettings."""
        return cls(
            limit=settings.requests_per_window,
            window_seconds=settings.window_seconds,
            safety_margin_seconds=settings.safety_margin_seconds,
        )

    async def wait_for_slot(self) -> float:
        """
        Suspend until a request may be issued.

        Returns:
            Seconds spent waiting (0.0 when a slot was free)
        """
        async with self._lock:
            return await self._wait_locked()

    async def record_request(self) -> None:
        """Count one issued request against the current window."""
        async with self._lock:
            self._record_locked()

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        """Wait for a slot, run the request, then count it (even on failure)."""
        async with self._lock:
            await self._wait_locked()
            try:
                yield
            finally:
                self._record_locked()

    def _window_expired(self, now: float) -> bool:
        return now > self.window.window_start + self.window_seconds

    def _reset(self, now: float) -> None:
        self.window.count = 0
        self.window.window_start = now

    async def _wait_locked(self) -> float:
        now = self._clock()
        if self._window_expired(now):
            self._reset(now)
            return 0.0

        if self.window.count < self.limit:
            return 0.0

        delay = (
            self.window.window_start + self.window_seconds - now + self.safety_margin_seconds
        )
        logger.info(
            f"Request quota reached ({self.window.count}/{self.limit}), "
            f"waiting {delay:.2f}s for the next window",
            extra={"count": self.window.count, "limit": self.limit, "delay_seconds": delay},
        )
        await self._sleep(delay)
        self._reset(self._clock())
        return delay

    def _record_locked(self) -> None:
        now = self._clock()
        if self._window_expired(now):
            self._reset(now)
        self.window.count += 1
