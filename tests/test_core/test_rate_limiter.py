"""Tests for per-provider request spacing."""

import asyncio
import sys

import pytest

sys.path.append("src")
from marketlens.core.rate_limiter import RateLimiter


class FakeTime:
    """Clock and sleep pair where sleeping advances the clock."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def clock(self):
        return self.now

    async def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


class TestRateLimiter:
    """Test the sequential gate."""

    @pytest.mark.asyncio
    async def test_first_turn_is_immediate(self):
        fake = FakeTime()
        limiter = RateLimiter("test", 1.0, clock=fake.clock, sleep=fake.sleep)

        await limiter.await_turn()

        assert fake.sleeps == []
        assert limiter.last_turn == 0.0

    @pytest.mark.asyncio
    async def test_waits_out_remaining_interval(self):
        fake = FakeTime()
        limiter = RateLimiter("test", 1.0, clock=fake.clock, sleep=fake.sleep)

        await limiter.await_turn()
        fake.now += 0.25
        await limiter.await_turn()

        assert fake.sleeps == [pytest.approx(0.75)]
        assert limiter.last_turn == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_no_wait_when_interval_already_elapsed(self):
        fake = FakeTime()
        limiter = RateLimiter("test", 1.0, clock=fake.clock, sleep=fake.sleep)

        await limiter.await_turn()
        fake.now += 5
        await limiter.await_turn()

        assert fake.sleeps == []

    @pytest.mark.asyncio
    async def test_concurrent_callers_are_spaced(self):
        fake = FakeTime()
        limiter = RateLimiter("test", 2.0, clock=fake.clock, sleep=fake.sleep)
        turns = []

        async def caller():
            await limiter.await_turn()
            turns.append(fake.now)

        await asyncio.gather(caller(), caller(), caller())

        assert turns == [0.0, pytest.approx(2.0), pytest.approx(4.0)]

    @pytest.mark.asyncio
    async def test_limiters_are_independent(self):
        fake = FakeTime()
        first = RateLimiter("first", 10.0, clock=fake.clock, sleep=fake.sleep)
        second = RateLimiter("second", 10.0, clock=fake.clock, sleep=fake.sleep)

        await first.await_turn()
        await second.await_turn()

        assert fake.sleeps == []

    @pytest.mark.asyncio
    async def test_zero_interval_never_sleeps(self):
        fake = FakeTime()
        limiter = RateLimiter("test", 0.0, clock=fake.clock, sleep=fake.sleep)

        for _ in range(3):
            await limiter.await_turn()

        assert fake.sleeps == []
