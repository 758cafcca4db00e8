"""Redis-backed implementation of CacheClient."""

from __future__ import annotations

from redis.asyncio import Redis
from redis.exceptions import RedisError

from anigate_core.exceptions import CacheBackendError


class RedisCacheClient:
    """Shared cache backed by Redis."""

    def __init__(self, redis: Redis) -> None:  # type: ignore[type-arg]
        """Initialize with a redis-py asyncio client."""
        self._redis = redis

    @classmethod
    def from_url(cls, url: str) -> RedisCacheClient:
        """Build a client from a redis URL; connects on first command."""
        return cls(Redis.from_url(url))

    async def get(self, key: str) -> str | None:
        """Retrieve a value by key."""
        try:
            value = await self._redis.get(key)
        except RedisError as e:
            msg = f"redis GET failed for {key!r}"
            raise CacheBackendError(msg) from e
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return str(value)

    async def set(self, key: str, value: str, ttl_seconds: int = 3600) -> None:
        """Store a value with TTL."""
        try:
            await self._redis.set(name=key, value=value, ex=ttl_seconds)
        except RedisError as e:
            msg = f"redis SET failed for {key!r}"
            raise CacheBackendError(msg) from e

    async def delete(self, key: str) -> None:
        """Delete a key from the cache."""
        try:
            await self._redis.delete(key)
        except RedisError as e:
            msg = f"redis DEL failed for {key!r}"
            raise CacheBackendError(msg) from e

    async def exists(self, key: str) -> bool:
        """Check if a key exists."""
        try:
            count = await self._redis.exists(key)
        except RedisError as e:
            msg = f"redis EXISTS failed for {key!r}"
            raise CacheBackendError(msg) from e
        return bool(count)

    async def close(self) -> None:
        """Close the connection pool."""
        await self._redis.aclose()  # type: ignore[attr-defined]
