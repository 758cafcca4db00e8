"""Coalesce concurrent calls for the same key into one in-flight task."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import structlog

T = TypeVar("T")

logger = structlog.get_logger()


class SingleFlight:
    """Concurrent callers sharing a key await a single execution of ``func``.

    The key is released as soon as the call finishes, so results and
    failures are shared only among callers that overlapped with it.
    A waiter being cancelled does not cancel the shared call.
    """

    def __init__(self) -> None:
        self._inflight: dict[str, asyncio.Task[Any]] = {}

    @property
    def in_flight(self) -> int:
        """Number of keys with a call currently running."""
        return len(self._inflight)

    async def do(self, key: str, func: Callable[[], Awaitable[T]]) -> T:
        """Run ``func`` for ``key``, or join the call already running."""
        task = self._inflight.get(key)
        if task is not None:
            logger.debug("single_flight_joined", key=key)
            return await asyncio.shield(task)  # type: ignore[no-any-return]

        async def _run() -> T:
            try:
                return await func()
            finally:
                self._inflight.pop(key, None)

        task = asyncio.ensure_future(_run())
        task.add_done_callback(_consume_exception)
        self._inflight[key] = task
        return await asyncio.shield(task)


def _consume_exception(task: asyncio.Task[Any]) -> None:
    """Mark the exception retrieved when every waiter was cancelled."""
    if not task.cancelled():
        task.exception()
