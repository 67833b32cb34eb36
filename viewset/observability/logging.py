"""Structured logging configuration using structlog.

Provides JSON logging for production and console logging for development.
Library modules only ever call get_logger(); configuring output is up to
the hosting process, through setup_logging() or structlog.configure().
Until structlog is configured, events go to stderr so they never mix with
output a host writes to stdout.
"""

import logging
import sys
from typing import TYPE_CHECKING, Any, cast

import structlog

from viewset.config.models.observability import LoggingConfig

if TYPE_CHECKING:
    from viewset.config.settings import Settings

LOG_FORMATS = ("json", "console")


def setup_logging(
    level: str = "INFO",
    format: str = "json",
    colors: bool = True,
) -> None:
    """Configure structured logging.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Output format - "json" for production, "console" for development
        colors: Whether the console renderer emits ANSI colors
    """
    if format not in LOG_FORMATS:
        raise ValueError(f"Unknown log format: {format!r}")

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if format == "json":
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=colors))

    level_num = logging.getLevelName(level.upper())
    if not isinstance(level_num, int):
        level_num = logging.INFO

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=False,
    )


def configure_logging(config: LoggingConfig) -> None:
    """Configure structured logging from a LoggingConfig section."""
    setup_logging(level=config.level, format=config.format, colors=config.colors)


def setup_logging_from_settings(settings: "Settings") -> None:
    """Configure structured logging from loaded settings."""
    configure_logging(settings.observability.logging)


class _DeferredLogger:
    """Resolves a structlog logger at call time.

    Once structlog is configured this is plain structlog.get_logger(name);
    before that, events are rendered with structlog's defaults to stderr.
    """

    def __init__(self, name: str) -> None:
        self._name = name

    def __getattr__(self, method: str) -> Any:
        if structlog.is_configured():
            logger = structlog.get_logger(self._name)
        else:
            logger = structlog.wrap_logger(structlog.PrintLogger(sys.stderr))
        return getattr(logger, method)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance bound to the given name.

    Args:
        name: Logger name (typically __name__ of the module)

    Returns:
        A bound structlog logger
    """
    return cast(structlog.stdlib.BoundLogger, _DeferredLogger(name))
