"""Structured logging configuration for the request helpers.

This module provides structured logging using structlog. Helpers log dotted
event names with keyword context, for example::

    logger.debug("fingerprint.computed", algorithm="simple-checksum", components=2)
    logger.info("method.rejected", method="DELETE", allowed=["GET", "HEAD"])

Examples:
    Configure logging at application startup::

        from request_helpers.observability.logging import configure_logging

        configure_logging(level="INFO", json_output=True)

    Use the logger::

        from request_helpers.observability.logging import get_logger

        logger = get_logger(__name__)
        logger.warning("body.invalid_json", path="/api/items", error="Expecting value")
"""

import logging
import sys
from typing import Any

import structlog


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
) -> None:
    """Configure structured logging for the application.

    This should be called once at application startup.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: If True, emit JSON logs; if False, use console format
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper()),
    )

    processors: list[object] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,  # type: ignore[arg-type]
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper())),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ from the calling module)

    Returns:
        A structlog logger instance
    """
    return structlog.get_logger(name)
