"""
spine-flow logging - structured logging via structlog.

Library modules obtain loggers with ``get_logger(__name__)`` and never
configure logging themselves; applications call ``configure_logging()`` once
at startup (or rely on structlog's defaults).

Architecture:
    ::

        configure_logging(level="DEBUG", json_format=False)
            │
            ▼
        structlog processor chain:
          1. TimeStamper (iso)
          2. merge_contextvars
          3. add_log_level
          4. add_service_metadata
          5. JSONRenderer (or ConsoleRenderer for a tty)

Events emitted by the pipeline:
    - ``flow.stage``                 observer hook, when stage tracing is on
    - ``flow.stage_failed``          synchronous stage failure was isolated
    - ``flow.retry_attempt_failed``  a retry attempt re-observed a failure

Examples:
    >>> from spineflow.core.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", json_format=True, service="reports")
    >>> logger = get_logger(__name__)
    >>> logger.debug("flow.stage", value=42)

Tags:
    logging, structlog, observability, spine-flow
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from spineflow.core.errors import InvalidConfigError


_SERVICE_NAME = "spineflow"

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service.name", _SERVICE_NAME)
    return event_dict


def _resolve_level(level: str) -> int:
    name = level.upper()
    if name not in _LEVELS:
        raise InvalidConfigError("log_level", level)
    return getattr(logging, name)


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "spineflow",
    add_timestamp: bool = True,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: True for JSON, False for console, None for auto (JSON if not tty)
        service: Service name to include in logs
        add_timestamp: Include ISO timestamp in logs

    Raises:
        InvalidConfigError: If ``level`` is not a known level name
    """
    global _SERVICE_NAME
    numeric_level = _resolve_level(level)
    _SERVICE_NAME = service

    if json_format is None:
        json_format = not sys.stdout.isatty()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_metadata,
    ]

    if add_timestamp:
        shared_processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=numeric_level,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger.

    Args:
        name: Logger name (usually __name__)
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context to include in all subsequent logs.

    Example:
        bind_context(chain="nightly-report")
        logger.debug("flow.stage")  # Includes chain
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove specific keys from logging context."""
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    """Clear all bound context."""
    structlog.contextvars.clear_contextvars()


class LogContext:
    """Context manager for scoped logging context.

    Example:
        with LogContext(chain="nightly-report"):
            await flow(fetch()).map(render).get()
        # Context cleared here
    """

    def __init__(self, **kwargs: Any):
        self._context = kwargs

    def __enter__(self) -> "LogContext":
        bind_context(**self._context)
        return self

    def __exit__(self, *args) -> None:
        unbind_context(*self._context.keys())

    async def __aenter__(self) -> "LogContext":
        bind_context(**self._context)
        return self

    async def __aexit__(self, *args) -> None:
        unbind_context(*self._context.keys())


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
    "LogContext",
]
