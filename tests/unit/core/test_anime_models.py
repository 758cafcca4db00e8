"""Tests for normalized anime models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from anigate_core.models.anime import (
    AnimeInfo,
    Episode,
    EpisodePage,
    MediaStatus,
    SearchPage,
    SearchResult,
)


@pytest.mark.unit
class TestMediaStatus:
    """Test MediaStatus enum."""

    def test_string_coercion(self) -> None:
        """MediaStatus behaves as a string."""
        assert str(MediaStatus.AIRING) == "airing"
        assert MediaStatus("finished") is MediaStatus.FINISHED


@pytest.mark.unit
class TestSearchPage:
    """Test SearchPage model."""

    def test_defaults(self) -> None:
        """An empty page starts at 1 with no next page."""
        page = SearchPage()
        assert page.current_page == 1
        assert page.has_next_page is False
        assert page.results == []

    def test_page_must_be_positive(self) -> None:
        """Page numbers start at 1."""
        with pytest.raises(ValidationError):
            SearchPage(current_page=0)

    def test_json_roundtrip_keeps_results(self) -> None:
        """A dumped page validates back to an equal page."""
        page = SearchPage(
            has_next_page=True,
            results=[SearchResult(id="20", title="Naruto", provider="jikan", year=2002)],
        )
        assert SearchPage.model_validate_json(page.model_dump_json()) == page


@pytest.mark.unit
class TestAnimeInfo:
    """Test AnimeInfo model."""

    def test_minimal_info(self) -> None:
        """Only id, title and provider are required."""
        info = AnimeInfo(id="21", title="One Piece", provider="jikan")
        assert info.status == MediaStatus.UNKNOWN
        assert info.genres == []
        assert info.total_episodes is None

    def test_negative_episode_count_raises(self) -> None:
        """Episode totals cannot be negative."""
        with pytest.raises(ValidationError):
            AnimeInfo(id="21", title="One Piece", provider="jikan", total_episodes=-1)

    def test_status_parsed_from_string(self) -> None:
        """Cached JSON status strings validate into the enum."""
        info = AnimeInfo.model_validate(
            {"id": "1", "title": "Bebop", "provider": "kitsu", "status": "finished"}
        )
        assert info.status is MediaStatus.FINISHED


@pytest.mark.unit
class TestEpisodePage:
    """Test Episode and EpisodePage models."""

    def test_episode_defaults(self) -> None:
        """Episodes are not filler unless marked."""
        ep = Episode(id="21-1", number=1)
        assert ep.filler is False
        assert ep.title is None

    def test_negative_number_raises(self) -> None:
        """Episode numbers cannot be negative."""
        with pytest.raises(ValidationError):
            Episode(id="x", number=-1)

    def test_page_holds_episodes(self) -> None:
        """EpisodePage carries its anime and provider."""
        page = EpisodePage(
            anime_id="21",
            provider="jikan",
            episodes=[Episode(id="21-1", number=1, title="Romance Dawn")],
        )
        assert page.episodes[0].title == "Romance Dawn"
        assert page.current_page == 1
