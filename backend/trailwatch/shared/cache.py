"""
In-memory TTL cache for upstream responses.

One ResponseCache holds one logical query (athlete stats, ride list).
Entries are never invalidated explicitly; they simply stop being served
once older than the TTL.

There is no single-flight protection: if two callers miss at the same
time both fetch, and the last write wins.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    value: T
    fetched_at: float


class ResponseCache(Generic[T]):
    """
    TTL memoization for a single async query.

    Usage:
        stats_cache = ResponseCache[AthleteStats](ttl=300, name="athlete stats")
        stats = await stats_cache.get_or_fetch(fetch_stats)
    """

    def __init__(
        self,
        ttl: float,
        clock: Callable[[], float] = time.monotonic,
        name: str = "response",
    ):
        self.ttl = ttl
        self.name = name
        self._clock = clock
        self._entry: Optional[CacheEntry[T]] = None
        self._lock = asyncio.Lock()

    async def get(self) -> Optional[T]:
        """Return the cached value if still fresh."""
        async with self._lock:
            entry = self._entry
            if entry is not None and self._clock() - entry.fetched_at < self.ttl:
                return entry.value
            return None

    async def set(self, value: T) -> None:
        async with self._lock:
            self._entry = CacheEntry(value=value, fetched_at=self._clock())

    async def get_or_fetch(self, fetch: Callable[[], Awaitable[T]]) -> T:
        """
        Serve from cache or call fetch() and store the result.

        The lock is not held while fetching, so a slow upstream never
        blocks readers of a fresh entry. Fetch errors propagate and leave
        the previous entry untouched.
        """
        cached = await self.get()
        if cached is not None:
            logger.debug(f"Using cached {self.name}")
            return cached

        logger.debug(f"Fetching new {self.name}")
        value = await fetch()
        await self.set(value)
        return value

    async def clear(self) -> None:
        async with self._lock:
            self._entry = None
