"""Custom exception hierarchy for anigate."""

from __future__ import annotations


class AnigateError(Exception):
    """Base exception for all anigate errors."""


class CacheBackendError(AnigateError):
    """Raised when the cache backend cannot be read or written."""


class CacheSerializationError(AnigateError):
    """Raised when a producer result cannot be encoded for the cache."""


class ProviderError(AnigateError):
    """Raised when an upstream provider request fails."""


class ProducerTimeoutError(ProviderError):
    """Raised when a provider operation exceeds its timeout."""


class UnknownProviderError(AnigateError):
    """Raised when a provider name is not registered."""
