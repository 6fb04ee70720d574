"""structlog configuration for the estimator.

Console rendering for local use, JSON lines when LOG_FORMAT=json.
structlog output goes to stdout; stdlib records go to stderr.
"""

import logging
import sys
from typing import Optional

import structlog

from config.settings import settings


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        level: Log level name (default from settings).
        fmt: "console" or "json" (default from settings).
    """
    level_name = (level or settings.log_level).upper()
    log_level = getattr(logging, level_name, logging.INFO)
    renderer = (
        structlog.processors.JSONRenderer()
        if (fmt or settings.log_format) == "json"
        else structlog.dev.ConsoleRenderer()
    )

    logging.basicConfig(level=log_level, stream=sys.stderr, format="%(message)s")

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )

    # Set levels for noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)


__all__ = ["configure_logging"]
