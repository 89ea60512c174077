"""
Throttling and response caching for calls to external AI providers.

Free tiers of the OCR/AI providers allow only a few requests per minute, so
calls are spaced by a minimum interval and identical prompts are answered
from a short-lived cache.
"""

import asyncio
import hashlib
import time
from collections import OrderedDict
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class AsyncRateLimiter:
    """Spaces calls at least ``min_interval`` seconds apart."""

    def __init__(
        self, min_interval: float, clock: Callable[[], float] = time.monotonic
    ):
        self.min_interval = min_interval
        self._clock = clock
        self._lock = asyncio.Lock()
        self._last_call: Optional[float] = None

    async def acquire(self) -> float:
        """Wait for a free slot. Returns the number of seconds waited."""
        async with self._lock:
            waited = 0.0
            if self._last_call is not None:
                elapsed = self._clock() - self._last_call
                if elapsed < self.min_interval:
                    waited = self.min_interval - elapsed
                    await asyncio.sleep(waited)
            self._last_call = self._clock()
            return waited


class TTLCache(Generic[T]):
    """Small LRU cache whose entries expire after ``ttl`` seconds."""

    def __init__(
        self,
        ttl: float,
        max_entries: int = 128,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, tuple[float, T]]" = OrderedDict()

    @staticmethod
    def make_key(*parts: str) -> str:
        digest = hashlib.sha256()
        for part in parts:
            digest.update(part.encode("utf-8"))
            digest.update(b"\x00")
        return digest.hexdigest()

    def get(self, key: str) -> Optional[T]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if expires_at <= self._clock():
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return value

    def set(self, key: str, value: T) -> None:
        self._entries[key] = (self._clock() + self.ttl, value)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
