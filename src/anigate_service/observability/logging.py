"""Structured logging configuration using structlog."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars, merge_contextvars

if TYPE_CHECKING:
    from structlog.types import EventDict, Processor, WrappedLogger

    from anigate_core.config.settings import Settings

APP_NAME = "anigate"

# Libraries that log every request at INFO
_NOISY_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "redis", "diskcache")


def configure_logging(settings: Settings) -> None:
    """Route structlog and stdlib logging through one formatter.

    ``settings.log_format`` picks JSON lines or the dev console renderer,
    ``settings.log_level`` the root level.
    """
    shared_processors: list[Processor] = [
        merge_contextvars,
        _add_app_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    level = _resolve_level(settings.log_level)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(settings.log_format),
            ],
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def bind_request_context(**values: object) -> None:
    """Bind request fields (provider, operation, ...) to subsequent log entries."""
    bind_contextvars(**values)


def clear_request_context() -> None:
    """Clear all bound context variables."""
    clear_contextvars()


def _renderer(log_format: str) -> Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def _add_app_name(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("app", APP_NAME)
    return event_dict


def _resolve_level(level_name: str) -> int:
    """Convert a level name string to a logging level int."""
    level = logging.getLevelNamesMapping().get(level_name.upper())
    return level if isinstance(level, int) else logging.INFO
