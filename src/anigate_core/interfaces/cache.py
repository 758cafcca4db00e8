"""Abstract cache interface."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Protocol, TypeVar, runtime_checkable

T = TypeVar("T")

Producer = Callable[[], Awaitable[T]]
"""Zero-argument coroutine function whose result gets cached."""


@runtime_checkable
class CacheClient(Protocol):
    """Key/value store with TTL; implementations can be swapped."""

    async def get(self, key: str) -> str | None:
        """Retrieve a value by key, or None if missing or expired."""
        ...

    async def set(self, key: str, value: str, ttl_seconds: int = 3600) -> None:
        """Store a value with TTL."""
        ...

    async def delete(self, key: str) -> None:
        """Delete a key from the cache."""
        ...

    async def exists(self, key: str) -> bool:
        """Check if a key exists in the cache."""
        ...

    async def close(self) -> None:
        """Release backend resources."""
        ...
