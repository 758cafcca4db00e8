"""JSON encoding of producer results for storage in a cache backend."""

from __future__ import annotations

import functools
import json
from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic_core import PydanticSerializationError, to_jsonable_python

from anigate_core.exceptions import CacheSerializationError

T = TypeVar("T")


@functools.lru_cache(maxsize=128)
def _adapter(result_type: Any) -> TypeAdapter[Any]:  # noqa: ANN401
    return TypeAdapter(result_type)


def _model_or_reject(value: object) -> Any:  # noqa: ANN401
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    msg = f"{type(value).__name__} is not JSON serializable"
    raise TypeError(msg)


def _dumps(plain: object) -> str:
    return json.dumps(
        plain,
        default=_model_or_reject,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


def encode(value: object, result_type: Any = None) -> str:  # noqa: ANN401
    """Serialize a producer result to compact JSON text.

    With ``result_type`` anything pydantic can dump is accepted, since a
    hit is validated back into that type. Without it a hit returns the
    decoded JSON as is, so the value must be a pydantic model or plain
    JSON already: dicts with string keys, lists, str, int, float, bool
    and None. Tuples, sets, non-string keys or datetimes would read back
    as something else and raise CacheSerializationError instead.
    """
    try:
        if result_type is not None:
            return _dumps(to_jsonable_python(value))
        if isinstance(value, BaseModel):
            return _dumps(value.model_dump(mode="json"))
        text = _dumps(value)
    except (PydanticSerializationError, TypeError, ValueError) as e:
        msg = f"cannot serialize {type(value).__name__} for caching: {e}"
        raise CacheSerializationError(msg) from e
    if json.loads(text) != value:
        msg = (
            f"{type(value).__name__} would not read back unchanged from the cache; "
            "convert it to plain JSON or pass result_type"
        )
        raise CacheSerializationError(msg)
    return text


def decode(text: str, result_type: type[T] | None = None) -> T | Any:
    """Parse cached JSON text, validating into ``result_type`` when given.

    Raises ValueError (json.JSONDecodeError or pydantic.ValidationError)
    if the text is not valid for the requested type.
    """
    data = json.loads(text)
    if result_type is None:
        return data
    return _adapter(result_type).validate_python(data)
