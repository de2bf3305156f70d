"""
Structured logging for waypoint and the programs that use it.

waypoint's core never logs on the happy path or while converting errors; the
only events it emits are ``certain_violated`` (right before an abort) and
``unhandled_failure`` (when a failure reaches the program edge through
``waypoint.core.report``). This module configures structlog for those events
and hands out loggers.

Architecture:
    ::

        configure_logging(level="INFO", json_format=None, service="waypoint")
            │
            ▼
        structlog processor chain:
            1. TimeStamper (iso)
            2. merge_contextvars
            3. add_log_level
            4. service metadata
            5. ECS field names + JSONRenderer, or ConsoleRenderer on a tty

Examples:
    >>> from waypoint.core.logging import configure_logging, get_logger
    >>> configure_logging(level="INFO", json_format=True, service="importer")
    >>> logger = get_logger(__name__)
    >>> logger.info("batch_loaded", rows=42)

Tags:
    logging, structlog, observability, waypoint

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

if TYPE_CHECKING:
    from waypoint.core.settings import WaypointSettings


# service.name stamped on events that do not carry their own
_SERVICE_NAME = "waypoint"

# structlog key -> ECS key, applied to JSON output only
_ECS_FIELDS = {"timestamp": "@timestamp", "level": "log.level"}


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    event_dict.setdefault("service.name", _SERVICE_NAME)
    return event_dict


def _elasticsearch_compatible(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Rename structlog's standard keys to their ECS names."""
    for key, ecs_key in _ECS_FIELDS.items():
        if key in event_dict:
            event_dict[ecs_key] = event_dict.pop(key)
    return event_dict


def _build_processors(json_format: bool, add_timestamp: bool) -> list[Processor]:
    chain: list[Processor] = []
    if add_timestamp:
        chain.append(structlog.processors.TimeStamper(fmt="iso"))
    chain += [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_metadata,
    ]
    if json_format:
        chain += [_elasticsearch_compatible, structlog.processors.JSONRenderer()]
    else:
        chain.append(structlog.dev.ConsoleRenderer(colors=True))
    return chain


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "waypoint",
    add_timestamp: bool = True,
) -> None:
    """Install the structlog configuration used for waypoint's events.

    Args:
        level: Minimum level name (DEBUG ... CRITICAL)
        json_format: JSON lines (True), console (False), or JSON only when
            stdout is not a terminal (None)
        service: Value of ``service.name`` on every event
        add_timestamp: Stamp events with an ISO timestamp
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    numeric_level = logging.getLevelName(level.upper())
    if json_format is None:
        json_format = not sys.stdout.isatty()

    structlog.configure(
        processors=_build_processors(json_format, add_timestamp),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    # Third-party stdlib loggers share the level and the stream.
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=numeric_level)


def configure_from_settings(settings: WaypointSettings | None = None) -> None:
    """Configure logging from ``WaypointSettings`` (cached settings by default)."""
    from waypoint.core.settings import get_settings

    settings = settings or get_settings()
    configure_logging(
        level=settings.log_level,
        json_format=settings.log_json,
        service=settings.service,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger (usually ``get_logger(__name__)``).

    The name is carried as the ``logger_name`` field of every event. It is an
    initial value of the lazy proxy, so module-level loggers still pick up
    whatever configuration is active when they first log.
    """
    if name is None:
        return structlog.get_logger()
    return structlog.get_logger(name, logger_name=name)


def bind_context(**kwargs: Any) -> None:
    """Attach fields to every event logged from this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


class LogContext:
    """Bind fields for the duration of a ``with`` block.

    Example:
        with LogContext(job="import", run_id="abc123"):
            exit_on_err(run_import())
    """

    def __init__(self, **fields: Any):
        self._fields = fields

    def __enter__(self) -> LogContext:
        bind_context(**self._fields)
        return self

    def __exit__(self, *exc_info: Any) -> None:
        unbind_context(*self._fields)


__all__ = [
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
    "LogContext",
]
