"""Read-through cache helper used by every provider call site.

``fetch`` returns a cached value when one is present and fresh, otherwise
awaits the producer, stores its result with the given TTL and returns it.
Without a backend it simply awaits the producer.

Within one call the backend read happens before the producer runs and the
write happens after it succeeds. The producer is awaited at most once per
call and is never retried here; producer failures propagate unchanged and
are never cached. Backend failures are treated as misses when
``fail_open`` is set, otherwise raised as CacheBackendError. Results that
cannot be serialized raise CacheSerializationError.
"""

from __future__ import annotations

from typing import Any, TypeVar, overload

import structlog

from anigate_core.exceptions import CacheBackendError
from anigate_core.interfaces.cache import CacheClient, Producer
from anigate_infra.cache.codec import decode, encode
from anigate_infra.cache.single_flight import SingleFlight

T = TypeVar("T")

logger = structlog.get_logger()


@overload
async def fetch(
    client: CacheClient | None,
    key: str,
    producer: Producer[T],
    ttl_seconds: int,
    *,
    result_type: type[T],
    fail_open: bool = ...,
) -> T: ...


@overload
async def fetch(
    client: CacheClient | None,
    key: str,
    producer: Producer[T],
    ttl_seconds: int,
    *,
    result_type: None = ...,
    fail_open: bool = ...,
) -> T | Any: ...


async def fetch(
    client: CacheClient | None,
    key: str,
    producer: Producer[T],
    ttl_seconds: int,
    *,
    result_type: type[T] | None = None,
    fail_open: bool = True,
) -> T | Any:
    """Return the cached value for ``key`` or compute, store and return it.

    On a hit the cached JSON is decoded, and validated into
    ``result_type`` when one is given so the hit has the producer's type.
    Without ``result_type`` a hit returns plain decoded JSON.
    """
    if ttl_seconds <= 0:
        msg = f"ttl_seconds must be positive, got {ttl_seconds}"
        raise ValueError(msg)
    if client is None:
        return await producer()

    cached = await _read(client, key, fail_open=fail_open)
    if cached is not None:
        try:
            value = decode(cached, result_type)
        except ValueError as e:
            logger.warning("cache_decode_failed", key=key, error=str(e))
        else:
            logger.debug("cache_hit", key=key)
            return value

    logger.debug("cache_miss", key=key)
    result = await producer()
    await _write(client, key, encode(result, result_type), ttl_seconds, fail_open=fail_open)
    return result


async def _read(client: CacheClient, key: str, *, fail_open: bool) -> str | None:
    try:
        return await client.get(key)
    except Exception as e:
        if not fail_open:
            if isinstance(e, CacheBackendError):
                raise
            msg = f"cache read failed for {key!r}"
            raise CacheBackendError(msg) from e
        logger.warning("cache_read_failed", key=key, error=str(e))
        return None


async def _write(
    client: CacheClient, key: str, text: str, ttl_seconds: int, *, fail_open: bool
) -> None:
    try:
        await client.set(key, text, ttl_seconds=ttl_seconds)
    except Exception as e:
        if not fail_open:
            if isinstance(e, CacheBackendError):
                raise
            msg = f"cache write failed for {key!r}"
            raise CacheBackendError(msg) from e
        logger.warning("cache_write_failed", key=key, error=str(e))


class ReadThroughCache:
    """Read-through cache bound to one backend and policy.

    Built once at startup and shared by every provider. ``client=None``
    disables caching and turns every fetch into a direct producer call.
    With ``coalesce`` enabled, concurrent misses on the same key share a
    single producer call and receive the same result object.
    """

    def __init__(
        self,
        client: CacheClient | None,
        *,
        default_ttl_seconds: int = 3600,
        fail_open: bool = True,
        coalesce: bool = False,
    ) -> None:
        if default_ttl_seconds <= 0:
            msg = f"default_ttl_seconds must be positive, got {default_ttl_seconds}"
            raise ValueError(msg)
        self._client = client
        self._default_ttl = default_ttl_seconds
        self._fail_open = fail_open
        self._flight = SingleFlight() if coalesce else None

    @property
    def client(self) -> CacheClient | None:
        """The configured backend, or None when caching is disabled."""
        return self._client

    @property
    def enabled(self) -> bool:
        """Whether a backend is configured."""
        return self._client is not None

    @property
    def default_ttl_seconds(self) -> int:
        return self._default_ttl

    async def fetch(
        self,
        key: str,
        producer: Producer[T],
        ttl_seconds: int | None = None,
        *,
        result_type: type[T] | None = None,
    ) -> T | Any:
        """Read-through fetch using this cache's backend and defaults."""
        ttl = self._default_ttl if ttl_seconds is None else ttl_seconds

        async def _fetch() -> T | Any:
            return await fetch(
                self._client,
                key,
                producer,
                ttl,
                result_type=result_type,
                fail_open=self._fail_open,
            )

        if self._flight is None or self._client is None:
            return await _fetch()
        return await self._flight.do(key, _fetch)

    async def close(self) -> None:
        """Close the backend, if any."""
        if self._client is not None:
            await self._client.close()
