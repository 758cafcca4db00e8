"""Cache backends and the read-through helper."""

from anigate_infra.cache.read_through import ReadThroughCache, fetch
from anigate_infra.cache.single_flight import SingleFlight

__all__ = [
    "ReadThroughCache",
    "SingleFlight",
    "fetch",
]
