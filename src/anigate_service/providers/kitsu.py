"""Kitsu (JSON:API) provider."""

from __future__ import annotations

from typing import Any

import structlog

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
from anigate_service.providers.base import BaseProvider

logger = structlog.get_logger()

PAGE_SIZE = 20
SITE_URL = "https://kitsu.io/anime"

_STATUS_MAP = {
    "current": MediaStatus.AIRING,
    "finished": MediaStatus.FINISHED,
    "upcoming": MediaStatus.UPCOMING,
    "unreleased": MediaStatus.UPCOMING,
    "tba": MediaStatus.UPCOMING,
}


def _page_params(page: int) -> dict[str, Any]:
    return {"page[limit]": PAGE_SIZE, "page[offset]": (page - 1) * PAGE_SIZE}


def _year(attrs: dict[str, Any]) -> int | None:
    start = attrs.get("startDate")
    return int(start[:4]) if start else None


def _score(attrs: dict[str, Any]) -> float | None:
    """Kitsu rates out of 100; normalize to a 10-point scale."""
    rating = attrs.get("averageRating")
    return round(float(rating) / 10, 2) if rating else None


def _url(attrs: dict[str, Any]) -> str | None:
    slug = attrs.get("slug")
    return f"{SITE_URL}/{slug}" if slug else None


class KitsuProvider(BaseProvider):
    """Client for the kitsu.io edge API."""

    name = "kitsu"
    base_url = "https://kitsu.io/api/edge"

    async def _search(self, query: str, page: int) -> SearchPage:
        payload = await self._get_json(
            "/anime", params={"filter[text]": query, **_page_params(page)}
        )
        results = []
        for item in payload.get("data", []):
            attrs = item.get("attributes", {})
            results.append(
                SearchResult(
                    id=str(item["id"]),
                    title=attrs.get("canonicalTitle") or "",
                    url=_url(attrs),
                    image=(attrs.get("posterImage") or {}).get("small"),
                    media_type=attrs.get("subtype"),
                    year=_year(attrs),
                    provider=self.name,
                )
            )
        logger.info("kitsu_search_fetched", query=query, page=page, count=len(results))
        return SearchPage(
            current_page=page,
            has_next_page="next" in payload.get("links", {}),
            results=results,
        )

    async def _info(self, anime_id: str) -> AnimeInfo:
        payload = await self._get_json(f"/anime/{anime_id}", params={"include": "categories"})
        item = payload.get("data", {})
        attrs = item.get("attributes", {})
        canonical = attrs.get("canonicalTitle") or ""
        alt_titles = [
            title for title in (attrs.get("titles") or {}).values() if title and title != canonical
        ]
        genres = [
            inc["attributes"]["title"]
            for inc in payload.get("included", [])
            if inc.get("type") == "categories" and inc.get("attributes", {}).get("title")
        ]
        return AnimeInfo(
            id=str(item.get("id", anime_id)),
            title=canonical,
            provider=self.name,
            alt_titles=alt_titles,
            synopsis=attrs.get("synopsis"),
            image=(attrs.get("posterImage") or {}).get("original"),
            url=_url(attrs),
            media_type=attrs.get("subtype"),
            status=_STATUS_MAP.get(attrs.get("status", ""), MediaStatus.UNKNOWN),
            total_episodes=attrs.get("episodeCount"),
            genres=genres,
            score=_score(attrs),
            year=_year(attrs),
        )

    async def _episodes(self, anime_id: str, page: int) -> EpisodePage:
        payload = await self._get_json(f"/anime/{anime_id}/episodes", params=_page_params(page))
        episodes = []
        for item in payload.get("data", []):
            attrs = item.get("attributes", {})
            if attrs.get("number") is None:
                continue
            episodes.append(
                Episode(
                    id=str(item["id"]),
                    number=int(attrs["number"]),
                    title=attrs.get("canonicalTitle"),
                    aired=attrs.get("airdate"),
                )
            )
        return EpisodePage(
            anime_id=anime_id,
            provider=self.name,
            current_page=page,
            has_next_page="next" in payload.get("links", {}),
            episodes=episodes,
        )

    async def _recent_episodes(self, page: int) -> RecentEpisodePage:
        payload = await self._get_json(
            "/episodes", params={"sort": "-createdAt", "include": "media", **_page_params(page)}
        )
        anime = {
            inc["id"]: inc.get("attributes", {})
            for inc in payload.get("included", [])
            if inc.get("type") == "anime"
        }
        results = []
        for item in payload.get("data", []):
            attrs = item.get("attributes", {})
            media = ((item.get("relationships") or {}).get("media") or {}).get("data") or {}
            anime_attrs = anime.get(media.get("id"))
            if anime_attrs is None:
                continue
            number = attrs.get("number")
            results.append(
                RecentEpisode(
                    anime_id=str(media["id"]),
                    title=anime_attrs.get("canonicalTitle") or "",
                    provider=self.name,
                    episode_id=str(item["id"]),
                    episode_number=int(number) if number is not None else None,
                    episode_title=attrs.get("canonicalTitle"),
                    image=(anime_attrs.get("posterImage") or {}).get("small"),
                    url=_url(anime_attrs),
                    aired=attrs.get("airdate"),
                )
            )
        logger.info("kitsu_recent_episodes_fetched", page=page, count=len(results))
        return RecentEpisodePage(
            current_page=page,
            has_next_page="next" in payload.get("links", {}),
            results=results,
        )
