import asyncio

import pytest

from task_manager_api.infrastructure.entrypoints.api.middleware.rate_limit_middleware import (
    FixedWindowRateLimiter,
)


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.mark.asyncio
async def test_allows_up_to_max_requests_then_denies():
    limiter = FixedWindowRateLimiter(max_requests=3, window_seconds=900, clock=FakeClock())

    decisions = [await limiter.hit("10.0.0.1") for _ in range(4)]

    assert [d.allowed for d in decisions] == [True, True, True, False]
    assert [d.remaining for d in decisions] == [2, 1, 0, 0]
    assert all(d.limit == 3 for d in decisions)


@pytest.mark.asyncio
async def test_reset_after_counts_down_within_window():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(max_requests=5, window_seconds=900, clock=clock)

    first = await limiter.hit("10.0.0.1")
    clock.now += 300.5
    later = await limiter.hit("10.0.0.1")

    assert first.reset_after == 900
    assert later.reset_after == 600


@pytest.mark.asyncio
async def test_new_window_starts_after_expiry():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=900, clock=clock)

    assert (await limiter.hit("10.0.0.1")).allowed
    assert not (await limiter.hit("10.0.0.1")).allowed

    clock.now += 900
    decision = await limiter.hit("10.0.0.1")

    assert decision.allowed
    assert decision.remaining == 0


@pytest.mark.asyncio
async def test_callers_are_counted_separately():
    limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=900, clock=FakeClock())

    assert (await limiter.hit("10.0.0.1")).allowed
    assert (await limiter.hit("10.0.0.2")).allowed
    assert not (await limiter.hit("10.0.0.1")).allowed


@pytest.mark.asyncio
async def test_expired_windows_are_pruned():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(max_requests=10, window_seconds=60, clock=clock)
    for n in range(5):
        await limiter.hit(f"10.0.0.{n}")
    assert limiter.tracked_keys() == 5

    clock.now += 61
    await limiter.hit("10.0.0.99")

    assert limiter.tracked_keys() == 1


@pytest.mark.asyncio
async def test_concurrent_hits_never_exceed_quota():
    limiter = FixedWindowRateLimiter(max_requests=100, window_seconds=900, clock=FakeClock())

    decisions = await asyncio.gather(*(limiter.hit("10.0.0.1") for _ in range(150)))

    assert sum(d.allowed for d in decisions) == 100
