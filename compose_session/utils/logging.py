"""structlog setup."""

import logging
import sys
from typing import Optional

import structlog

from ..config import settings


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """Configure structlog for the process.

    Args:
        level: Minimum log level name; defaults to settings.log_level
        fmt: "console" or "json"; defaults to settings.log_format
    """
    log_config = settings.logging
    level_name = (level or log_config.log_level).upper()
    fmt = (fmt or log_config.log_format).lower()

    min_level = logging.getLevelName(level_name)
    if not isinstance(min_level, int):
        raise ValueError(f"Unknown log level: {level_name}")

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer())
    elif fmt == "console":
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        raise ValueError(f"Unknown log format: {fmt}")

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
