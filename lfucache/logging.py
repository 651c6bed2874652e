"""
Structured logging for lfucache.

The library only emits events through structlog; it never configures
logging on import. Applications (and the benchmark harness) call
configure_logging() once at startup.
"""

import logging
import sys
from typing import Any

import structlog


def configure_logging(level: str = "INFO", json: bool = False, stream: Any = None) -> None:
    """
    Configure structlog on top of the standard library logger.

    Args:
        level: Minimum log level name ("DEBUG", "INFO", ...)
        json: Render JSON lines instead of the pretty console format
        stream: Output stream for log records (default: sys.stderr at call time)

    Raises:
        ValueError: If level is not a known logging level name
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"unknown log level: {level!r}")
    if stream is None:
        stream = sys.stderr

    shared_processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=stream.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=stream,
        level=numeric_level,
        force=True,
    )


def get_logger(name: str) -> Any:
    """
    Get a structured logger instance.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.debug("lfu_cache_evicted", removed=2, remaining=3)
    """
    return structlog.get_logger(name)
