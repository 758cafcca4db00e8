"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from unittest.mock import MagicMock

import pytest

from anigate_infra.cache.memory_cache import MemoryCacheClient
from tests.mocks.mock_cache import FakeClock, RecordingCacheClient
from tests.mocks.mock_settings import make_settings


@pytest.fixture
def mock_settings() -> MagicMock:
    """Return a MagicMock Settings with sensible defaults."""
    return make_settings()


@pytest.fixture
def clock() -> FakeClock:
    """Return a clock that advances only on demand."""
    return FakeClock()


@pytest.fixture
def memory_cache(clock: FakeClock) -> MemoryCacheClient:
    """Return an in-memory backend driven by the fake clock."""
    return MemoryCacheClient(max_entries=100, clock=clock)


@pytest.fixture
def recording_cache() -> RecordingCacheClient:
    """Return a backend that records calls and can be made to fail."""
    return RecordingCacheClient()


@pytest.fixture(autouse=True)
def _reset_logging() -> Generator[None, None, None]:
    """Save and restore root logger handlers around each test.

    CLI and logging tests call configure_logging(), which replaces root
    handlers with ones bound to pytest's captured streams.
    """
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers = original_handlers
    root.level = original_level
