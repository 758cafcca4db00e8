"""Single-host persistent CacheClient on top of diskcache."""

from __future__ import annotations

import asyncio
import sqlite3
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TypeVar

import diskcache

from anigate_core.exceptions import CacheBackendError

R = TypeVar("R")


class DiskCacheClient:
    """Entries live in a SQLite-backed directory and survive restarts.

    diskcache is synchronous and keeps one SQLite connection per thread,
    so every call runs on a single dedicated worker thread. That keeps
    the connection count at two (the worker and the constructing thread)
    and lets close() reach both. Expired entries are dropped by
    diskcache itself on access.
    """

    def __init__(self, cache_dir: Path, *, size_limit: int = 2**30) -> None:
        cache_dir.mkdir(parents=True, exist_ok=True)
        self._dir = cache_dir
        self._cache = diskcache.Cache(str(cache_dir), size_limit=size_limit)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="anigate-disk")

    async def _run(self, op: str, key: str, func: Callable[[], R]) -> R:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self._executor, func)
        except (sqlite3.Error, OSError, diskcache.Timeout) as e:
            msg = f"disk cache {op} failed for {key!r} in {self._dir}"
            raise CacheBackendError(msg) from e

    async def get(self, key: str) -> str | None:
        """Return the stored text, or None when absent or expired."""
        value = await self._run("read", key, lambda: self._cache.get(key, retry=True))
        return None if value is None else str(value)

    async def set(self, key: str, value: str, ttl_seconds: int = 3600) -> None:
        await self._run(
            "write", key, lambda: self._cache.set(key, value, expire=ttl_seconds, retry=True)
        )

    async def delete(self, key: str) -> None:
        await self._run("delete", key, lambda: self._cache.delete(key, retry=True))

    async def exists(self, key: str) -> bool:
        return await self._run("exists", key, lambda: key in self._cache)

    async def close(self) -> None:
        """Close the SQLite connections of the worker and the calling thread."""
        try:
            await asyncio.get_running_loop().run_in_executor(self._executor, self._cache.close)
        finally:
            self._cache.close()
            self._executor.shutdown(wait=False)
