"""Structured logging configuration for the card engine.

Logging goes through structlog so effect resolution, registry activity and
event-bus failures all produce key/value records that render as readable
console lines in development and as JSON in production.

An entry point configures logging once, usually from ``Settings``:

Example:
    >>> from card_engine.core.config import get_settings
    >>> from card_engine.core.logging import configure_logging_from_settings, get_logger
    >>> configure_logging_from_settings(get_settings())
    >>> logger = get_logger(__name__)
    >>> logger.info("Effect executed", kind="damage", success=True)
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger

    from card_engine.core.config import Settings


class AppContext:
    """Processor stamping every record with the application name and version."""

    def __init__(self, app_name: str = "card_engine", app_version: str | None = None) -> None:
        self.app_name = app_name
        self.app_version = app_version

    def __call__(
        self,
        logger: WrappedLogger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        event_dict["app"] = self.app_name
        if self.app_version:
            event_dict["version"] = self.app_version
        return event_dict


def configure_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    app_name: str = "card_engine",
    app_version: str | None = None,
) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        level: The logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Render JSON lines instead of console output.
        app_name: Value of the ``app`` key on every record.
        app_version: Value of the ``version`` key, omitted when unset.

    Example:
        >>> configure_logging(level="DEBUG", json_format=False)
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        AppContext(app_name, app_version),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.plain_traceback),
        ]

    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        level=numeric_level,
        stream=sys.stdout,
        force=True,
    )


def configure_logging_from_settings(settings: Settings | None = None) -> None:
    """Configure logging from application settings.

    ``debug`` forces the DEBUG level regardless of ``log_level``.

    Args:
        settings: Settings to read. Defaults to ``get_settings()``.
    """
    if settings is None:
        from card_engine.core.config import get_settings

        settings = get_settings()

    configure_logging(
        level="DEBUG" if settings.debug else settings.log_level,
        json_format=settings.json_logs,
        app_name=settings.app_name,
        app_version=settings.app_version,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a logger, typically with ``__name__``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind key/value pairs to every record logged from this context.

    Useful for tagging every record produced while resolving one turn.

    Example:
        >>> bind_context(game_id="g-1", turn=3)
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


__all__ = [
    "AppContext",
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
]
