"""Normalized anime payloads returned by every provider."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class MediaStatus(StrEnum):
    """Airing status, normalized across providers."""

    AIRING = "airing"
    FINISHED = "finished"
    UPCOMING = "upcoming"
    UNKNOWN = "unknown"


class SearchResult(BaseModel):
    """A single search hit."""

    id: str = Field(description="Provider-specific anime identifier")
    title: str = Field(description="Display title")
    url: str | None = Field(default=None, description="Canonical page on the provider site")
    image: str | None = Field(default=None, description="Poster image URL")
    media_type: str | None = Field(default=None, description="TV, Movie, OVA, ...")
    year: int | None = Field(default=None, description="Start year")
    provider: str = Field(description="Provider that produced this result")


class SearchPage(BaseModel):
    """One page of search results."""

    current_page: int = Field(default=1, ge=1)
    has_next_page: bool = False
    results: list[SearchResult] = Field(default_factory=list)


class AnimeInfo(BaseModel):
    """Detail record for one anime."""

    id: str
    title: str
    provider: str
    alt_titles: list[str] = Field(default_factory=list)
    synopsis: str | None = None
    image: str | None = None
    url: str | None = None
    media_type: str | None = None
    status: MediaStatus = MediaStatus.UNKNOWN
    total_episodes: int | None = Field(default=None, ge=0)
    genres: list[str] = Field(default_factory=list)
    score: float | None = None
    year: int | None = None


class Episode(BaseModel):
    """A single episode entry."""

    id: str
    number: int = Field(ge=0)
    title: str | None = None
    aired: str | None = Field(default=None, description="ISO date the episode aired")
    filler: bool = False


class EpisodePage(BaseModel):
    """One page of an anime's episode list."""

    anime_id: str
    provider: str
    current_page: int = Field(default=1, ge=1)
    has_next_page: bool = False
    episodes: list[Episode] = Field(default_factory=list)


class RecentEpisode(BaseModel):
    """A newly released episode together with the anime it belongs to."""

    anime_id: str = Field(description="Provider-specific anime identifier")
    title: str = Field(description="Anime display title")
    provider: str
    episode_id: str | None = None
    episode_number: int | None = Field(default=None, ge=0)
    episode_title: str | None = None
    image: str | None = None
    url: str | None = Field(default=None, description="Episode page on the provider site")
    aired: str | None = Field(default=None, description="ISO date the episode aired")


class RecentEpisodePage(BaseModel):
    """One page of the provider's recently released episodes."""

    current_page: int = Field(default=1, ge=1)
    has_next_page: bool = False
    results: list[RecentEpisode] = Field(default_factory=list)
