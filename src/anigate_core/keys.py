"""Cache key construction.

Keys follow ``<provider>:<operation>:<params>`` so entries from different
providers and operations never collide, e.g. ``jikan:search:naruto:1``.
"""

from __future__ import annotations

KEY_SEPARATOR = ":"
MISSING_PARAM = "default"


def cache_key(provider: str, operation: str, *params: object) -> str:
    """Build a cache key for one provider operation.

    ``None`` params render as ``default``. Raises ValueError when the
    provider or operation is empty or contains the separator.
    """
    for label, part in (("provider", provider), ("operation", operation)):
        if not part or KEY_SEPARATOR in part:
            msg = f"{label} must be non-empty and free of '{KEY_SEPARATOR}': {part!r}"
            raise ValueError(msg)
    rendered = [MISSING_PARAM if p is None else str(p) for p in params]
    return KEY_SEPARATOR.join([provider, operation, *rendered])
