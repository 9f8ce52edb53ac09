"""
Structured logging for service clients.

Uses structlog. Console output for development, JSON otherwise. Callers that
already have a logger (stdlib or structlog) pass it per request; this module
only provides the fallback.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog
from structlog.types import Processor


ENV_LOG_LEVEL = "LOG_LEVEL"
ENV_LOG_FORMAT = "LOG_FORMAT"  # "console" or "json"


def configure_logging(level: str | None = None, fmt: str | None = None) -> None:
    """
    Configure structlog processors.

    Defaults come from `LOG_LEVEL` (INFO) and `LOG_FORMAT` (console).
    """
    level_name = (level or os.environ.get(ENV_LOG_LEVEL) or "INFO").upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        log_level = logging.INFO
    fmt = (fmt or os.environ.get(ENV_LOG_FORMAT) or "console").lower()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if fmt == "json":
        processors = shared_processors + [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None, **initial_context: Any) -> Any:
    """
    Get a structlog logger, optionally bound to `initial_context`.

    Usage:
        logger = get_logger(__name__, service_slug="my-form")
        logger.error("request failed: %s", reason)
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger


__all__ = ["configure_logging", "get_logger"]
