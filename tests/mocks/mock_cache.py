"""Test doubles for cache tests: a controllable clock and counting producers."""

from __future__ import annotations

from typing import Any


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingProducer:
    """Async producer returning (or raising) scripted outcomes in order.

    The last outcome repeats once the script runs out.
    """

    def __init__(self, *outcomes: Any) -> None:
        if not outcomes:
            msg = "at least one outcome is required"
            raise ValueError(msg)
        self.calls = 0
        self._outcomes = list(outcomes)

    async def __call__(self) -> Any:
        outcome = self._outcomes[min(self.calls, len(self._outcomes) - 1)]
        self.calls += 1
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class RecordingCacheClient:
    """In-memory CacheClient that logs every call and can be told to fail."""

    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.calls: list[tuple[str, str]] = []
        self.ttls: dict[str, int] = {}
        self.fail_get: Exception | None = None
        self.fail_set: Exception | None = None

    async def get(self, key: str) -> str | None:
        self.calls.append(("get", key))
        if self.fail_get is not None:
            raise self.fail_get
        return self.store.get(key)

    async def set(self, key: str, value: str, ttl_seconds: int = 3600) -> None:
        self.calls.append(("set", key))
        if self.fail_set is not None:
            raise self.fail_set
        self.store[key] = value
        self.ttls[key] = ttl_seconds

    async def delete(self, key: str) -> None:
        self.calls.append(("delete", key))
        self.store.pop(key, None)

    async def exists(self, key: str) -> bool:
        return key in self.store

    async def close(self) -> None:
        self.calls.append(("close", ""))
