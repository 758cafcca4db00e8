"""Application settings using pydantic-settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    """Central configuration for anigate."""

    model_config = SettingsConfigDict(env_prefix="AG_", env_file=".env")

    # --- Cache ---
    cache_backend: Literal["none", "memory", "disk", "redis", "db"] = Field(
        default="none",
        description="Cache backend: 'none' calls providers directly on every request",
    )
    redis_url: str = Field(
        default="",
        description="Redis connection URL (required if cache_backend=redis)",
    )
    cache_dir: Path = Field(
        default=Path("./.cache/anigate"),
        description="Directory for diskcache persistent cache",
    )
    database_url: str = Field(
        default="sqlite+aiosqlite:///./anigate_cache.db",
        description="SQLAlchemy URL for the db cache backend",
    )
    cache_ttl_seconds: int = Field(
        default=3600,
        description="Default TTL for cached provider responses",
    )
    cache_fail_open: bool = Field(
        default=True,
        description="Treat cache backend errors as misses instead of failing the call",
    )
    cache_single_flight: bool = Field(
        default=False,
        description="Coalesce concurrent misses on the same key into one upstream call",
    )
    memory_cache_max_entries: int = Field(
        default=10_000,
        description="Entry limit for the in-memory backend",
    )

    # --- Providers ---
    provider_timeout_seconds: float = Field(
        default=50.0,
        description="Timeout for one provider operation, cache lookup included",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout per upstream HTTP request",
    )
    http_retry_max: int = Field(
        default=3,
        description="Maximum attempts per upstream request",
    )
    http_retry_wait_min: float = Field(
        default=0.5,
        description="Minimum retry wait in seconds",
    )
    http_retry_wait_max: float = Field(
        default=5.0,
        description="Maximum retry wait in seconds",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="User-Agent header sent to upstream providers",
    )

    # --- Logging ---
    log_level: str = Field(
        default="INFO",
        description="Root log level",
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        description="Log renderer",
    )

    @model_validator(mode="after")
    def validate_limits(self) -> Settings:
        """Reject non-positive TTLs, timeouts and retry counts."""
        if self.cache_ttl_seconds <= 0:
            msg = "cache_ttl_seconds must be positive"
            raise ValueError(msg)
        if self.provider_timeout_seconds <= 0 or self.http_timeout_seconds <= 0:
            msg = "timeouts must be positive"
            raise ValueError(msg)
        if self.http_retry_max < 1:
            msg = "http_retry_max must be at least 1"
            raise ValueError(msg)
        if self.memory_cache_max_entries < 1:
            msg = "memory_cache_max_entries must be at least 1"
            raise ValueError(msg)
        return self
