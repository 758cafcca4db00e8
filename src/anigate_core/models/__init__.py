"""Domain models for anigate."""

from anigate_core.models.anime import (
    AnimeInfo,
    Episode,
    EpisodePage,
    MediaStatus,
    RecentEpisode,
    RecentEpisodePage,
    SearchPage,
    SearchResult,
)

__all__ = [
    "AnimeInfo",
    "Episode",
    "EpisodePage",
    "MediaStatus",
    "RecentEpisode",
    "RecentEpisodePage",
    "SearchPage",
    "SearchResult",
]
