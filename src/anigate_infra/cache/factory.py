"""Factory functions for creating cache backends from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from anigate_core.interfaces.cache import CacheClient
from anigate_infra.cache.read_through import ReadThroughCache

if TYPE_CHECKING:
    from anigate_core.config.settings import Settings

logger = structlog.get_logger()


def create_cache_client(settings: Settings) -> CacheClient | None:
    """Create the configured cache backend, or None when caching is off.

    Selecting ``redis`` without a ``redis_url`` disables caching with a
    warning instead of failing startup.
    """
    backend = settings.cache_backend
    if backend == "none":
        return None

    if backend == "memory":
        from anigate_infra.cache.memory_cache import MemoryCacheClient

        return MemoryCacheClient(max_entries=settings.memory_cache_max_entries)

    if backend == "disk":
        from anigate_infra.cache.disk_cache import DiskCacheClient

        return DiskCacheClient(settings.cache_dir)

    if backend == "redis":
        if not settings.redis_url:
            logger.warning("redis_url_missing_cache_disabled")
            return None
        from anigate_infra.cache.redis_cache import RedisCacheClient

        return RedisCacheClient.from_url(settings.redis_url)

    from anigate_infra.cache.db_cache import DBCacheClient

    return DBCacheClient.from_url(settings.database_url)


def create_read_through_cache(settings: Settings) -> ReadThroughCache:
    """Create the process-wide read-through cache from settings."""
    client = create_cache_client(settings)
    logger.info(
        "cache_configured",
        backend=settings.cache_backend if client is not None else "none",
        ttl_seconds=settings.cache_ttl_seconds,
        single_flight=settings.cache_single_flight,
    )
    return ReadThroughCache(
        client,
        default_ttl_seconds=settings.cache_ttl_seconds,
        fail_open=settings.cache_fail_open,
        coalesce=settings.cache_single_flight,
    )
