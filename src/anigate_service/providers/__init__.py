"""Upstream anime providers."""

from anigate_service.providers.base import BaseProvider
from anigate_service.providers.factories import available_providers, create_provider
from anigate_service.providers.jikan import JikanProvider
from anigate_service.providers.kitsu import KitsuProvider

__all__ = [
    "BaseProvider",
    "JikanProvider",
    "KitsuProvider",
    "available_providers",
    "create_provider",
]
