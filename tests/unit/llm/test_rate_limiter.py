"""Unit tests for RateLimiter with a fake clock and recording sleep."""

from __future__ import annotations

import asyncio

import pytest

from schemadoc.config import GenerationSettings
from schemadoc.llm.rate_limiter import RateLimiter


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def _limiter(clock: FakeClock, limit: int = 15) -> RateLimiter:
    return RateLimiter(
        limit=limit,
        window_seconds=60.0,
        safety_margin_seconds=0.1,
        clock=clock,
        sleep=clock.sleep,
    )


class TestWaitForSlot:
    @pytest.mark.asyncio
    async def test_under_quota_does_not_wait(self):
        clock = FakeClock()
        limiter = _limiter(clock)

        for _ in range(14):
            assert await limiter.wait_for_slot() == 0.0
            await limiter.record_request()

        assert clock.sleeps == []
        assert limiter.window.count == 14

    @pytest.mark.asyncio
    async def test_full_window_waits_remaining_time_plus_margin(self):
        clock = FakeClock()
        limiter = _limiter(clock)
        for _ in range(15):
            await limiter.record_request()
        clock.now += 20.0

        waited = await limiter.wait_for_slot()

        assert waited == pytest.approx(40.1)
        assert clock.sleeps == [pytest.approx(40.1)]
        assert limiter.window.count == 0
        assert limiter.window.window_start == clock.now

    @pytest.mark.asyncio
    async def test_fifteenth_request_allowed_sixteenth_waits(self):
        clock = FakeClock()
        limiter = _limiter(clock)
        for _ in range(14):
            await limiter.record_request()

        assert await limiter.wait_for_slot() == 0.0
        await limiter.record_request()
        assert limiter.window.count == 15

        remaining = limiter.window.window_start + 60.0 - clock.now
        waited = await limiter.wait_for_slot()

        assert waited >= remaining + 0.1 - 1e-9
        assert limiter.window.count == 0

    @pytest.mark.asyncio
    async def test_expired_window_resets_without_waiting(self):
        clock = FakeClock()
        limiter = _limiter(clock)
        for _ in range(15):
            await limiter.record_request()
        clock.now += 60.5

        assert await limiter.wait_for_slot() == 0.0
        assert clock.sleeps == []
        assert limiter.window.count == 0
        assert limiter.window.window_start == clock.now


class TestRecordRequest:
    @pytest.mark.asyncio
    async def test_record_after_expiry_starts_new_window(self):
        clock = FakeClock()
        limiter = _limiter(clock)
        for _ in range(3):
            await limiter.record_request()
        clock.now += 61.0

        await limiter.record_request()

        assert limiter.window.count == 1
        assert limiter.window.window_start == clock.now


class TestSlot:
    @pytest.mark.asyncio
    async def test_slot_counts_successful_request(self):
        limiter = _limiter(FakeClock())

        async with limiter.slot():
            pass

        assert limiter.window.count == 1

    @pytest.mark.asyncio
    async def test_slot_counts_failed_request(self):
        limiter = _limiter(FakeClock())

        with pytest.raises(RuntimeError):
            async with limiter.slot():
                raise RuntimeError("transport failure")

        assert limiter.window.count == 1

    @pytest.mark.asyncio
    async def test_concurrent_callers_never_exceed_quota(self):
        clock = FakeClock()
        limiter = _limiter(clock, limit=3)
        in_window: list[float] = []

        async def call() -> None:
            async with limiter.slot():
                in_window.append(limiter.window.window_start)
                await asyncio.sleep(0)

        await asyncio.gather(*(call() for _ in range(7)))

        per_window: dict[float, int] = {}
        for start in in_window:
            per_window[start] = per_window.get(start, 0) + 1
        assert max(per_window.values()) <= 3
        assert len(clock.sleeps) == 2


def test_from_settings():
    settings = GenerationSettings(requests_per_window=10, window_seconds=30, safety_margin_seconds=0.5)

    limiter = RateLimiter.from_settings(settings)

    assert limiter.limit == 10
    assert limiter.window_seconds == 30
    assert limiter.safety_margin_seconds == 0.5


def test_invalid_limit():
    with pytest.raises(ValueError):
        RateLimiter(limit=0)
