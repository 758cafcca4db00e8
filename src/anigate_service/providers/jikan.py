"""Jikan (unofficial MyAnimeList REST API) provider."""

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

SEARCH_PAGE_SIZE = 20

_STATUS_MAP = {
    "Currently Airing": MediaStatus.AIRING,
    "Finished Airing": MediaStatus.FINISHED,
    "Not yet aired": MediaStatus.UPCOMING,
}


def _image(item: dict[str, Any]) -> str | None:
    return ((item.get("images") or {}).get("jpg") or {}).get("image_url")


def _year(item: dict[str, Any]) -> int | None:
    if item.get("year"):
        return int(item["year"])
    aired = item.get("aired") or {}
    start = ((aired.get("prop") or {}).get("from") or {}).get("year")
    return int(start) if start else None


def _date(timestamp: str | None) -> str | None:
    """Trim an ISO timestamp to its date part."""
    return timestamp[:10] if timestamp else None


class JikanProvider(BaseProvider):
    """Client for api.jikan.moe v4."""

    name = "jikan"
    base_url = "https://api.jikan.moe/v4"

    async def _search(self, query: str, page: int) -> SearchPage:
        payload = await self._get_json(
            "/anime", params={"q": query, "page": page, "limit": SEARCH_PAGE_SIZE}
        )
        results = [
            SearchResult(
                id=str(item["mal_id"]),
                title=item.get("title") or "",
                url=item.get("url"),
                image=_image(item),
                media_type=item.get("type"),
                year=_year(item),
                provider=self.name,
            )
            for item in payload.get("data", [])
        ]
        pagination = payload.get("pagination", {})
        logger.info("jikan_search_fetched", query=query, page=page, count=len(results))
        return SearchPage(
            current_page=pagination.get("current_page", page),
            has_next_page=bool(pagination.get("has_next_page", False)),
            results=results,
        )

    async def _info(self, anime_id: str) -> AnimeInfo:
        payload = await self._get_json(f"/anime/{anime_id}/full")
        item = payload.get("data", {})
        alt_titles = [
            t["title"]
            for t in item.get("titles", [])
            if t.get("type") != "Default" and t.get("title")
        ]
        return AnimeInfo(
            id=str(item.get("mal_id", anime_id)),
            title=item.get("title") or "",
            provider=self.name,
            alt_titles=alt_titles,
            synopsis=item.get("synopsis"),
            image=_image(item),
            url=item.get("url"),
            media_type=item.get("type"),
            status=_STATUS_MAP.get(item.get("status", ""), MediaStatus.UNKNOWN),
            total_episodes=item.get("episodes"),
            genres=[g["name"] for g in item.get("genres", []) if g.get("name")],
            score=item.get("score"),
            year=_year(item),
        )

    async def _episodes(self, anime_id: str, page: int) -> EpisodePage:
        payload = await self._get_json(f"/anime/{anime_id}/episodes", params={"page": page})
        episodes = [
            Episode(
                id=f"{anime_id}-{item['mal_id']}",
                number=int(item["mal_id"]),
                title=item.get("title"),
                aired=_date(item.get("aired")),
                filler=bool(item.get("filler", False)),
            )
            for item in payload.get("data", [])
        ]
        pagination = payload.get("pagination", {})
        return EpisodePage(
            anime_id=anime_id,
            provider=self.name,
            current_page=page,
            has_next_page=bool(pagination.get("has_next_page", False)),
            episodes=episodes,
        )

    async def _recent_episodes(self, page: int) -> RecentEpisodePage:
        payload = await self._get_json("/watch/episodes", params={"page": page})
        results = []
        for item in payload.get("data", []):
            entry = item.get("entry") or {}
            if entry.get("mal_id") is None:
                continue
            # newest episode first
            latest = (item.get("episodes") or [{}])[0]
            number = latest.get("mal_id")
            results.append(
                RecentEpisode(
                    anime_id=str(entry["mal_id"]),
                    title=entry.get("title") or "",
                    provider=self.name,
                    episode_id=f"{entry['mal_id']}-{number}" if number is not None else None,
                    episode_number=int(number) if number is not None else None,
                    episode_title=latest.get("title"),
                    image=_image(entry),
                    url=latest.get("url") or entry.get("url"),
                )
            )
        pagination = payload.get("pagination", {})
        logger.info("jikan_recent_episodes_fetched", page=page, count=len(results))
        return RecentEpisodePage(
            current_page=page,
            has_next_page=bool(pagination.get("has_next_page", False)),
            results=results,
        )
