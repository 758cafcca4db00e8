"""In-process implementation of CacheClient."""

from __future__ import annotations

import time
from collections.abc import Callable


class MemoryCacheClient:
    """Dict-backed cache with per-entry expiry.

    Expired entries are evicted lazily when read. Once ``max_entries`` is
    reached, writing a new key evicts the entry closest to expiry.
    """

    def __init__(
        self,
        max_entries: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize with an entry limit and a monotonic clock."""
        self._store: dict[str, tuple[float, str]] = {}
        self._max_entries = max_entries
        self._clock = clock

    def __len__(self) -> int:
        return len(self._store)

    def _live(self, key: str) -> str | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._store[key]
            return None
        return value

    async def get(self, key: str) -> str | None:
        """Retrieve a value by key, or None if missing/expired."""
        return self._live(key)

    async def set(self, key: str, value: str, ttl_seconds: int = 3600) -> None:
        """Store a value with TTL."""
        if key not in self._store and len(self._store) >= self._max_entries:
            self._evict()
        self._store[key] = (self._clock() + ttl_seconds, value)

    async def delete(self, key: str) -> None:
        """Delete a key from the cache."""
        self._store.pop(key, None)

    async def exists(self, key: str) -> bool:
        """Check if a key exists and is not expired."""
        return self._live(key) is not None

    async def close(self) -> None:
        """Drop all entries."""
        self._store.clear()

    def _evict(self) -> None:
        """Purge expired entries, then the soonest-expiring one if still full."""
        now = self._clock()
        expired = [k for k, (expires_at, _) in self._store.items() if now >= expires_at]
        for k in expired:
            del self._store[k]
        if len(self._store) >= self._max_entries:
            oldest = min(self._store, key=lambda k: self._store[k][0])
            del self._store[oldest]
