"""Database-backed implementation of CacheClient using a key/value table."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

from sqlalchemy import delete
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from anigate_core.exceptions import CacheBackendError
from anigate_infra.db.engine import create_engine, create_session_factory, init_db
from anigate_infra.db.models import CacheEntry

# Dialects with INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {"sqlite": sqlite_insert, "postgresql": postgresql_insert}


def _is_expired(expires_at: datetime) -> bool:
    """Check expiry, handling both naive and aware datetimes."""
    now = datetime.now(UTC)
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=UTC)
    return expires_at <= now


async def _upsert(session: AsyncSession, key: str, value: str, expires_at: datetime) -> None:
    """Insert or overwrite one row in a single statement where the dialect allows."""
    insert = _UPSERT_INSERTS.get(session.get_bind().dialect.name)
    if insert is None:
        await session.merge(CacheEntry(key=key, value=value, expires_at=expires_at))
        return
    stmt = insert(CacheEntry).values(key=key, value=value, expires_at=expires_at)
    stmt = stmt.on_conflict_do_update(
        index_elements=[CacheEntry.key],
        set_={"value": stmt.excluded.value, "expires_at": stmt.excluded.expires_at},
    )
    await session.execute(stmt)


class DBCacheClient:
    """Cache backed by a SQL database, one short session per operation.

    Writes are upserts on sqlite and postgresql, so concurrent writers of
    one key overwrite each other instead of colliding on the primary key.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: AsyncEngine | None = None,
    ) -> None:
        """Initialize with a session factory; ``engine`` is disposed on close."""
        self._session_factory = session_factory
        self._engine = engine
        self._schema_ready = engine is None
        self._schema_lock = asyncio.Lock()

    @classmethod
    def from_url(cls, database_url: str) -> DBCacheClient:
        """Build a client that owns its engine; the table is created lazily."""
        engine = create_engine(database_url)
        return cls(create_session_factory(engine), engine=engine)

    async def _ensure_schema(self) -> None:
        if self._schema_ready or self._engine is None:
            return
        async with self._schema_lock:
            if not self._schema_ready:
                await init_db(self._engine)
                self._schema_ready = True

    async def get(self, key: str) -> str | None:
        """Retrieve a value by key, or None if missing/expired."""
        try:
            await self._ensure_schema()
            async with self._session_factory() as session:
                entry = await session.get(CacheEntry, key)
                if entry is None:
                    return None
                if _is_expired(entry.expires_at):
                    # only the stale row; a concurrent write may have replaced it
                    await session.execute(
                        delete(CacheEntry).where(
                            CacheEntry.key == key,
                            CacheEntry.expires_at <= datetime.now(UTC),
                        )
                        .execution_options(synchronize_session=False)
                    )
                    await session.commit()
                    return None
                return entry.value
        except SQLAlchemyError as e:
            msg = f"db cache read failed for {key!r}"
            raise CacheBackendError(msg) from e

    async def set(self, key: str, value: str, ttl_seconds: int = 3600) -> None:
        """Store a value with TTL, overwriting any existing entry."""
        expires_at = datetime.now(UTC) + timedelta(seconds=ttl_seconds)
        try:
            await self._ensure_schema()
            async with self._session_factory() as session:
                await _upsert(session, key, value, expires_at)
                await session.commit()
        except SQLAlchemyError as e:
            msg = f"db cache write failed for {key!r}"
            raise CacheBackendError(msg) from e

    async def delete(self, key: str) -> None:
        """Delete a key from the cache."""
        try:
            await self._ensure_schema()
            async with self._session_factory() as session:
                await session.execute(delete(CacheEntry).where(CacheEntry.key == key))
                await session.commit()
        except SQLAlchemyError as e:
            msg = f"db cache delete failed for {key!r}"
            raise CacheBackendError(msg) from e

    async def exists(self, key: str) -> bool:
        """Check if a key exists and is not expired."""
        return await self.get(key) is not None

    async def close(self) -> None:
        """Dispose the owned engine, if any."""
        if self._engine is not None:
            await self._engine.dispose()
