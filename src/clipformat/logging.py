"""Structured logging configuration for Clipformat.

Provides JSON-formatted structured logging using structlog.
Supports both development (colored console) and production (JSON) modes.
The host usually injects its own logger into the pipeline; the logger
returned by get_logger() is the default when it does not.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from structlog.typing import Processor

# Track if logging has been configured
_configured = False

# Parent of every module logger in the package.
PACKAGE_LOGGER = "clipformat"


def configure_logging(
    level: str = "WARNING",
    format: str = "text",
) -> None:
    """Configure structured logging for Clipformat.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        format: Output format - "json" for log shipping, "text" for a console.

    Example:
        ```python
        from clipformat.logging import configure_logging, get_logger

        configure_logging(level="DEBUG", format="text")
        logger = get_logger()
        logger.info("Pipeline assembled", recognizers=8)
        ```
    """
    global _configured

    log_level = getattr(logging, level.upper(), logging.WARNING)

    # Configure standard library logging to not duplicate structlog output
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=log_level,
    )
    # basicConfig is a no-op once the host configured logging; the package
    # logger still honours the requested level.
    logging.getLogger(PACKAGE_LOGGER).setLevel(log_level)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if format.lower() == "json":
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=False),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name. Uses calling module name if None.

    Returns:
        A bound structlog logger.
    """
    if not _configured:
        configure_logging()

    return structlog.get_logger(name)  # type: ignore[no-any-return]


def bind_context(**kwargs: object) -> None:
    """Bind context variables to all subsequent log messages.

    Useful for tagging every line of one host callback, e.g. with the
    hotkey or action that triggered processing.

    Args:
        **kwargs: Key-value pairs to bind to the logging context.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
