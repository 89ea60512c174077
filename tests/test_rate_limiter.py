"""Tests for the provider rate limiter and response cache."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from app.core.rate_limiter import AsyncRateLimiter, TTLCache


class TestAsyncRateLimiter:
    """Tests for AsyncRateLimiter."""

    def test_first_call_does_not_wait(self) -> None:
        limiter = AsyncRateLimiter(1.0, clock=lambda: 100.0)
        with patch("app.core.rate_limiter.asyncio.sleep", new=AsyncMock()) as sleep:
            waited = asyncio.run(limiter.acquire())
        assert waited == 0.0
        sleep.assert_not_called()

    def test_second_call_waits_for_interval(self) -> None:
        times = iter([100.0, 100.4, 101.0])
        limiter = AsyncRateLimiter(1.0, clock=lambda: next(times))

        async def two_calls() -> float:
            await limiter.acquire()
            return await limiter.acquire()

        with patch("app.core.rate_limiter.asyncio.sleep", new=AsyncMock()) as sleep:
            waited = asyncio.run(two_calls())

        assert waited == pytest.approx(0.6)
        sleep.assert_awaited_once()
        assert sleep.await_args.args[0] == pytest.approx(0.6)

    def test_no_wait_after_interval(self) -> None:
        times = iter([100.0, 102.0, 102.0])
        limiter = AsyncRateLimiter(1.0, clock=lambda: next(times))

        async def two_calls() -> float:
            await limiter.acquire()
            return await limiter.acquire()

        with patch("app.core.rate_limiter.asyncio.sleep", new=AsyncMock()) as sleep:
            assert asyncio.run(two_calls()) == 0.0
        sleep.assert_not_called()


class TestTTLCache:
    """Tests for TTLCache."""

    def test_get_before_expiry(self) -> None:
        now = [0.0]
        cache = TTLCache(10, clock=lambda: now[0])
        cache.set("key", "value")
        now[0] = 9.0
        assert cache.get("key") == "value"

    def test_entry_expires(self) -> None:
        now = [0.0]
        cache = TTLCache(10, clock=lambda: now[0])
        cache.set("key", "value")
        now[0] = 10.0
        assert cache.get("key") is None
        assert len(cache) == 0

    def test_oldest_entry_evicted(self) -> None:
        cache = TTLCache(60, max_entries=2, clock=lambda: 0.0)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.get("a")
        cache.set("c", 3)
        assert cache.get("b") is None
        assert cache.get("a") == 1
        assert cache.get("c") == 3

    def test_make_key_separates_parts(self) -> None:
        assert TTLCache.make_key("ab", "c") != TTLCache.make_key("a", "bc")
        assert TTLCache.make_key("prompt") == TTLCache.make_key("prompt")
