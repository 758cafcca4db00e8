"""Provider registry and factory functions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from anigate_core.exceptions import UnknownProviderError
from anigate_service.providers.base import BaseProvider
from anigate_service.providers.jikan import JikanProvider
from anigate_service.providers.kitsu import KitsuProvider

if TYPE_CHECKING:
    import httpx

    from anigate_core.config.settings import Settings
    from anigate_infra.cache.read_through import ReadThroughCache

PROVIDERS: dict[str, type[BaseProvider]] = {
    JikanProvider.name: JikanProvider,
    KitsuProvider.name: KitsuProvider,
}


def available_providers() -> list[str]:
    """Return registered provider names, sorted."""
    return sorted(PROVIDERS)


def create_provider(
    name: str,
    cache: ReadThroughCache,
    http: httpx.AsyncClient,
    settings: Settings,
) -> BaseProvider:
    """Create a provider by name, wired to the shared cache and HTTP client."""
    try:
        provider_cls = PROVIDERS[name.lower()]
    except KeyError:
        msg = f"unknown provider {name!r}; available: {', '.join(available_providers())}"
        raise UnknownProviderError(msg) from None
    return provider_cls(
        cache,
        http,
        ttl_seconds=settings.cache_ttl_seconds,
        timeout_seconds=settings.provider_timeout_seconds,
        retry_max=settings.http_retry_max,
        retry_wait_min=settings.http_retry_wait_min,
        retry_wait_max=settings.http_retry_wait_max,
    )
