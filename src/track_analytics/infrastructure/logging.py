"""Structured logging configuration.

Log lines go to stderr; stdout is reserved for result tables and
comparison reports so CLI output stays pipeable. Each CLI invocation binds
a run context (command, query id, source) that is merged into every event
logged while it runs.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _stderr_logger_factory(*args: Any) -> structlog.PrintLogger:
    # Resolved per call so a replaced sys.stderr is honoured.
    return structlog.PrintLogger(file=sys.stderr)


def _level_number(level: str) -> int:
    name = level.upper()
    if name not in _LEVELS:
        raise ValueError(f"Unknown log level {level!r}; expected one of {', '.join(_LEVELS)}")
    return getattr(logging, name)


def setup_logging(
    level: str = "INFO",
    log_format: str = "json",
) -> None:
    """
    Set up structured logging with structlog.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format ('json' or 'console')

    Raises:
        ValueError: If ``level`` is not a known log level.
    """
    level_number = _level_number(level)

    # Library loggers (opentelemetry exporters, prometheus) share the stream
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level_number)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    renderer: Processor
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level_number),
        context_class=dict,
        logger_factory=_stderr_logger_factory,
        cache_logger_on_first_use=False,
    )


def bind_run_context(**values: Any) -> None:
    """Attach ``values`` to every event logged until ``clear_run_context``."""
    structlog.contextvars.bind_contextvars(
        **{key: value for key, value in values.items() if value is not None}
    )


def clear_run_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """
    Get a bound logger instance.

    Args:
        name: Logger name (module name typically)
        **initial_context: Initial context to bind to the logger

    Returns:
        A bound structlog logger
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
