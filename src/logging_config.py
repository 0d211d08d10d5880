"""Structured logging setup for the gateway and the stdio bridge."""

import logging
import sys
from typing import TextIO

import structlog


def _get_renderer(log_format: str) -> structlog.processors.JSONRenderer | structlog.dev.ConsoleRenderer:
    """Pick the renderer for the configured log format."""
    if log_format.lower() == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def configure_logging(
    level: str = "INFO",
    log_format: str = "json",
    stream: TextIO | None = None,
) -> None:
    """Configure structlog on top of the standard library logger.

    Args:
        level: Minimum log level name (e.g. "INFO").
        log_format: "json" for machine-readable lines, anything else for console output.
        stream: Destination stream. Defaults to stdout; the stdio bridge passes stderr.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _get_renderer(log_format),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )
