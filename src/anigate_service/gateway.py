"""Composition root: one cache, one HTTP client, every provider."""

from __future__ import annotations

from types import TracebackType
from typing import Any

import httpx
import structlog

from anigate_core.config.settings import Settings
from anigate_core.exceptions import UnknownProviderError
from anigate_infra.cache.factory import create_read_through_cache
from anigate_infra.cache.read_through import ReadThroughCache
from anigate_service.providers.base import BaseProvider
from anigate_service.providers.factories import available_providers, create_provider

logger = structlog.get_logger()


class Gateway:
    """Holds the process-wide cache and provider clients.

    Build it once at startup with ``from_settings`` and pass it to
    whatever serves requests; nothing here is a module-level singleton.
    """

    def __init__(
        self,
        cache: ReadThroughCache,
        http: httpx.AsyncClient,
        providers: dict[str, BaseProvider],
    ) -> None:
        self.cache = cache
        self._http = http
        self._providers = providers

    @classmethod
    def from_settings(cls, settings: Settings) -> Gateway:
        """Construct the cache backend, HTTP client and all providers."""
        cache = create_read_through_cache(settings)
        http = httpx.AsyncClient(
            timeout=settings.http_timeout_seconds,
            headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
            follow_redirects=True,
        )
        providers = {
            name: create_provider(name, cache, http, settings) for name in available_providers()
        }
        logger.info("gateway_started", providers=sorted(providers), cache_enabled=cache.enabled)
        return cls(cache, http, providers)

    def provider(self, name: str) -> BaseProvider:
        """Look up a provider by name."""
        try:
            return self._providers[name.lower()]
        except KeyError:
            msg = f"unknown provider {name!r}; available: {', '.join(sorted(self._providers))}"
            raise UnknownProviderError(msg) from None

    @property
    def provider_names(self) -> list[str]:
        return sorted(self._providers)

    def describe(self) -> dict[str, Any]:
        """Summarize the wiring for diagnostics."""
        client = self.cache.client
        return {
            "providers": self.provider_names,
            "cache_backend": type(client).__name__ if client is not None else None,
            "cache_ttl_seconds": self.cache.default_ttl_seconds,
        }

    async def aclose(self) -> None:
        """Close the HTTP client and the cache backend."""
        try:
            await self._http.aclose()
        finally:
            await self.cache.close()
        logger.info("gateway_stopped")

    async def __aenter__(self) -> Gateway:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
