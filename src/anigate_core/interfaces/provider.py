"""Abstract anime provider interface."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from anigate_core.models.anime import AnimeInfo, EpisodePage, RecentEpisodePage, SearchPage


@runtime_checkable
class AnimeProvider(Protocol):
    """Interface every upstream provider client exposes."""

    name: str

    async def search(self, query: str, page: int = 1) -> SearchPage:
        """Search the provider catalog."""
        ...

    async def info(self, anime_id: str) -> AnimeInfo:
        """Fetch the detail record for one anime."""
        ...

    async def episodes(self, anime_id: str, page: int = 1) -> EpisodePage:
        """Fetch one page of an anime's episode list."""
        ...

    async def recent_episodes(self, page: int = 1) -> RecentEpisodePage:
        """Fetch one page of recently released episodes."""
        ...
