"""Structured logging for the execution layer.

The statistical core reports through exceptions and Result.warnings and
does not log. Compute units and the registry emit structlog events:

    from statsuite.core.logging import configure_logging, get_logger

    configure_logging(log_level="DEBUG", log_format="json")
    logger = get_logger(__name__)
    logger.info("unit_created", module="regression.linear")

Without configure_logging() structlog's defaults apply.
"""

from __future__ import annotations

import logging
import sys
from typing import cast

import structlog
from structlog.typing import FilteringBoundLogger


def configure_logging(
    log_level: str = "INFO",
    log_format: str = "console",
    show_timestamps: bool = True,
    color: bool = True,
) -> None:
    """Configure structured logging for the host process.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: "console" for development, "json" for machine consumption
        show_timestamps: Whether to prefix events with an ISO timestamp
        color: Whether to use colors in console mode
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if show_timestamps:
        shared_processors.insert(0, structlog.processors.TimeStamper(fmt="iso", utc=True))

    if log_format == "json":
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(
                colors=color,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, log_level.upper())),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> FilteringBoundLogger:
    """Get a structured logger (typically get_logger(__name__))."""
    return cast(FilteringBoundLogger, structlog.get_logger(name))
