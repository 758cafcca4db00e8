"""Base provider client with cached operations."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any, ClassVar, TypeVar

import httpx
import structlog
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from anigate_core.exceptions import ProducerTimeoutError, ProviderError
from anigate_core.keys import cache_key
from anigate_core.models.anime import AnimeInfo, EpisodePage, RecentEpisodePage, SearchPage
from anigate_infra.cache.read_through import ReadThroughCache

T = TypeVar("T")

logger = structlog.get_logger()

RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


def _is_transient(exc: BaseException) -> bool:
    """Connection problems, rate limiting and 5xx are worth another attempt."""
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS
    return False


class BaseProvider(ABC):
    """Abstract base class for upstream anime providers.

    Public operations go through the shared read-through cache under keys
    ``<name>:<operation>:<params>``. The per-call timeout covers the cache
    lookup and the upstream request together.
    """

    name: ClassVar[str]
    base_url: ClassVar[str]

    def __init__(
        self,
        cache: ReadThroughCache,
        http: httpx.AsyncClient,
        *,
        ttl_seconds: int | None = None,
        timeout_seconds: float = 50.0,
        retry_max: int = 3,
        retry_wait_min: float = 0.5,
        retry_wait_max: float = 5.0,
    ) -> None:
        """Initialize with the shared cache and HTTP client."""
        self._cache = cache
        self._http = http
        self._ttl = ttl_seconds
        self._timeout = timeout_seconds
        self._retry_max = retry_max
        self._retry_wait_min = retry_wait_min
        self._retry_wait_max = retry_wait_max

    async def search(self, query: str, page: int = 1) -> SearchPage:
        """Search the provider catalog."""
        query = query.strip()
        if not query:
            msg = "query must not be empty"
            raise ValueError(msg)
        return await self._cached(
            "search",
            query,
            page,
            producer=lambda: self._search(query, page),
            result_type=SearchPage,
        )

    async def info(self, anime_id: str) -> AnimeInfo:
        """Fetch the detail record for one anime."""
        return await self._cached(
            "info", anime_id, producer=lambda: self._info(anime_id), result_type=AnimeInfo
        )

    async def episodes(self, anime_id: str, page: int = 1) -> EpisodePage:
        """Fetch one page of an anime's episode list."""
        return await self._cached(
            "episodes",
            anime_id,
            page,
            producer=lambda: self._episodes(anime_id, page),
            result_type=EpisodePage,
        )

    async def recent_episodes(self, page: int = 1) -> RecentEpisodePage:
        """Fetch one page of recently released episodes."""
        return await self._cached(
            "recent-episodes",
            page,
            producer=lambda: self._recent_episodes(page),
            result_type=RecentEpisodePage,
        )

    @abstractmethod
    async def _search(self, query: str, page: int) -> SearchPage: ...

    @abstractmethod
    async def _info(self, anime_id: str) -> AnimeInfo: ...

    @abstractmethod
    async def _episodes(self, anime_id: str, page: int) -> EpisodePage: ...

    @abstractmethod
    async def _recent_episodes(self, page: int) -> RecentEpisodePage: ...
    async def _cached(
        self,
        operation: str,
        *params: object,
        producer: Callable[[], Awaitable[T]],
        result_type: type[T],
    ) -> T:
        key = cache_key(self.name, operation, *params)
        try:
            async with asyncio.timeout(self._timeout):
                result: T = await self._cache.fetch(
                    key, producer, self._ttl, result_type=result_type
                )
                return result
        except TimeoutError as e:
            logger.warning("provider_timeout", key=key, timeout_seconds=self._timeout)
            msg = f"{self.name} {operation} timed out after {self._timeout}s"
            raise ProducerTimeoutError(msg) from e

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:  # noqa: ANN401
        """GET ``base_url + path`` and decode JSON, retrying transient failures."""
        url = f"{self.base_url}{path}"

        @retry(
            stop=stop_after_attempt(self._retry_max),
            wait=wait_exponential(
                multiplier=1, min=self._retry_wait_min, max=self._retry_wait_max
            ),
            retry=retry_if_exception(_is_transient),
            reraise=True,
        )
        async def _do_get() -> Any:  # noqa: ANN401
            response = await self._http.get(url, params=params)
            response.raise_for_status()
            return response.json()

        try:
            return await _do_get()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning("provider_request_failed", provider=self.name, url=url, status=status)
            msg = f"{self.name} returned HTTP {status} for {path}"
            raise ProviderError(msg) from e
        except httpx.HTTPError as e:
            logger.warning("provider_request_failed", provider=self.name, url=url, error=str(e))
            msg = f"{self.name} request failed for {path}: {e}"
            raise ProviderError(msg) from e
        except ValueError as e:
            msg = f"{self.name} returned invalid JSON for {path}"
            raise ProviderError(msg) from e
