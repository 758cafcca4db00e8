"""Tests for DiskCacheClient."""

from __future__ import annotations

import sqlite3
import threading
from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import pytest_asyncio

from anigate_core.exceptions import CacheBackendError
from anigate_infra.cache.disk_cache import DiskCacheClient
from anigate_infra.cache.read_through import fetch
from tests.mocks.mock_cache import CountingProducer


@pytest_asyncio.fixture
async def cache_client(tmp_path: Path) -> AsyncGenerator[DiskCacheClient, None]:
    """Create a temporary DiskCacheClient."""
    client = DiskCacheClient(tmp_path / "test_cache")
    yield client
    await client.close()


@pytest.mark.unit
class TestDiskCacheClient:
    """Test DiskCacheClient operations."""

    @pytest.mark.asyncio
    async def test_set_and_get(self, cache_client: DiskCacheClient) -> None:
        """Set a value and retrieve it."""
        await cache_client.set("key1", "value1")
        assert await cache_client.get("key1") == "value1"

    @pytest.mark.asyncio
    async def test_get_missing_key(self, cache_client: DiskCacheClient) -> None:
        """Get on missing key returns None."""
        assert await cache_client.get("nonexistent") is None

    @pytest.mark.asyncio
    async def test_exists(self, cache_client: DiskCacheClient) -> None:
        """Exists returns correct boolean."""
        assert await cache_client.exists("key1") is False
        await cache_client.set("key1", "value1")
        assert await cache_client.exists("key1") is True

    @pytest.mark.asyncio
    async def test_delete(self, cache_client: DiskCacheClient) -> None:
        """Delete removes a key."""
        await cache_client.set("key1", "value1")
        await cache_client.delete("key1")
        assert await cache_client.get("key1") is None

    @pytest.mark.asyncio
    async def test_creates_cache_dir(self, tmp_path: Path) -> None:
        """Nested cache directories are created on demand."""
        target = tmp_path / "a" / "b"
        client = DiskCacheClient(target)
        await client.close()
        assert target.is_dir()

    @pytest.mark.asyncio
    async def test_survives_reopen(self, tmp_path: Path) -> None:
        """Entries persist across client instances on the same directory."""
        first = DiskCacheClient(tmp_path / "persist")
        await first.set("k", "v", ttl_seconds=60)
        await first.close()

        second = DiskCacheClient(tmp_path / "persist")
        assert await second.get("k") == "v"
        await second.close()

    @pytest.mark.asyncio
    async def test_read_through_hit(self, cache_client: DiskCacheClient) -> None:
        """The helper memoizes through the disk backend."""
        producer = CountingProducer({"episodes": [1, 2, 3]})
        await fetch(cache_client, "jikan:episodes:1:1", producer, 60)
        assert await fetch(cache_client, "jikan:episodes:1:1", producer, 60) == {
            "episodes": [1, 2, 3]
        }
        assert producer.calls == 1

    @pytest.mark.asyncio
    async def test_sqlite_errors_are_wrapped(self, cache_client: DiskCacheClient) -> None:
        """Storage failures surface as CacheBackendError."""
        broken = MagicMock()
        broken.get.side_effect = sqlite3.OperationalError("database is locked")
        cache_client._cache = broken

        with pytest.raises(CacheBackendError, match="read failed"):
            await cache_client.get("k")

    @pytest.mark.asyncio
    async def test_operations_share_one_worker_thread(self, tmp_path: Path) -> None:
        """Every call runs on the same thread, so one connection serves them all."""
        client = DiskCacheClient(tmp_path / "threads")
        seen: set[int] = set()
        for _ in range(5):
            await client._run("read", "k", lambda: seen.add(threading.get_ident()))
        await client.close()

        assert len(seen) == 1
        assert threading.get_ident() not in seen

    @pytest.mark.asyncio
    async def test_close_reaches_worker_connection(self, tmp_path: Path) -> None:
        """close() runs on the worker thread as well as the caller's."""
        client = DiskCacheClient(tmp_path / "close")
        await client.set("k", "v")
        real_close = client._cache.close
        closed_on: list[int] = []

        def tracking_close() -> None:
            closed_on.append(threading.get_ident())
            real_close()

        client._cache.close = tracking_close  # type: ignore[method-assign]
        await client.close()

        assert len(set(closed_on)) == 2
        assert threading.get_ident() in closed_on
