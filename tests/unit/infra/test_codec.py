"""Tests for the cache value codec."""

from __future__ import annotations

import json
from datetime import date

import pytest
from pydantic import ValidationError

from anigate_core.exceptions import CacheSerializationError
from anigate_core.models.anime import SearchPage, SearchResult
from anigate_infra.cache.codec import decode, encode


@pytest.mark.unit
class TestEncode:
    """encode() produces compact JSON text."""

    def test_plain_values(self) -> None:
        """Dicts and lists become compact JSON."""
        assert encode({"a": [1, 2], "b": None}) == '{"a":[1,2],"b":null}'

    def test_non_ascii_kept(self) -> None:
        """Japanese titles are stored verbatim."""
        assert encode({"title": "ナルト"}) == '{"title":"ナルト"}'

    def test_pydantic_model(self) -> None:
        """Models are dumped through pydantic."""
        text = encode(SearchResult(id="20", title="Naruto", provider="jikan"))
        assert json.loads(text)["title"] == "Naruto"

    def test_dates_need_a_result_type(self) -> None:
        """Dates are dumped as ISO strings only when a type will restore them."""
        assert (
            encode({"aired": date(2002, 10, 3)}, dict[str, date]) == '{"aired":"2002-10-03"}'
        )
        with pytest.raises(CacheSerializationError):
            encode({"aired": date(2002, 10, 3)})

    @pytest.mark.parametrize(
        "value",
        [(1, 2), {"ids": (1, 2)}, {1: "a"}, [{"nested": {2: "b"}}]],
        ids=["tuple", "nested-tuple", "int-key", "nested-int-key"],
    )
    def test_untyped_values_must_read_back_unchanged(self, value: object) -> None:
        """Without a type, anything JSON would reshape is rejected."""
        with pytest.raises(CacheSerializationError, match="read back unchanged"):
            encode(value)

    def test_typed_tuple_is_accepted(self) -> None:
        """A result type that restores tuples allows them."""
        assert encode((1, 2), tuple[int, int]) == "[1,2]"

    def test_set_raises(self) -> None:
        """Sets have no JSON form without a type."""
        with pytest.raises(CacheSerializationError, match="cannot serialize set"):
            encode({1, 2})

    def test_nan_raises(self) -> None:
        """Non-finite floats are not valid JSON."""
        with pytest.raises(CacheSerializationError):
            encode({"score": float("nan")})

    def test_unserializable_raises(self) -> None:
        """Arbitrary objects raise CacheSerializationError."""
        with pytest.raises(CacheSerializationError, match="object"):
            encode(object())


@pytest.mark.unit
class TestDecode:
    """decode() parses JSON and optionally validates."""

    def test_without_type_returns_plain_data(self) -> None:
        """Plain JSON comes back as built-in types."""
        assert decode('{"a":1}') == {"a": 1}

    def test_null_is_a_value(self) -> None:
        """A stored null decodes to None."""
        assert decode("null") is None

    def test_with_model_type(self) -> None:
        """A result type rebuilds the model."""
        page = SearchPage(results=[SearchResult(id="1", title="Bebop", provider="kitsu")])
        restored = decode(encode(page), SearchPage)
        assert isinstance(restored, SearchPage)
        assert restored == page

    def test_with_generic_type(self) -> None:
        """Any type pydantic can adapt is accepted."""
        assert decode("[1,2,3]", list[int]) == [1, 2, 3]

    def test_invalid_json_raises_value_error(self) -> None:
        """Corrupt text raises a ValueError subclass."""
        with pytest.raises(ValueError):
            decode("{not json")

    def test_shape_mismatch_raises_validation_error(self) -> None:
        """Text that does not fit the type fails validation."""
        with pytest.raises(ValidationError):
            decode('{"current_page":0}', SearchPage)
