"""Public interface re-exports for anigate_core."""

from anigate_core.interfaces.cache import CacheClient, Producer
from anigate_core.interfaces.provider import AnimeProvider

__all__ = [
    "AnimeProvider",
    "CacheClient",
    "Producer",
]
