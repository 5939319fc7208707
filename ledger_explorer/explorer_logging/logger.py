"""
Structured logging for the feed and the object loader.

Every line carries level, an ISO timestamp, event_type (the snake_case first
argument) and the logger name. Request context (total_count/page_size/page for
a page fetch, object_id for an owned-objects load) is bound with log_context()
and merged into every line logged inside it, including lines from the fetcher
and the RPC client underneath.

Logs go to stderr so the CLI keeps stdout for tables. LOG_FORMAT=json (default)
or console; LOG_LEVEL filters below the given level.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, ContextManager, TextIO

import structlog
from structlog._config import BoundLoggerLazyProxy
from structlog.typing import FilteringBoundLogger

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "json"


def _level_value(level: str | None) -> int:
    name = (level or os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL)).strip().upper()
    return getattr(logging, name, logging.INFO)


def configure_logging(
    level: str | None = None,
    fmt: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """
    (Re)configure structlog. Arguments default to LOG_LEVEL / LOG_FORMAT and
    stderr. Loggers already used keep the configuration they were first used with.
    """
    out = stream or sys.stderr
    fmt = (fmt or os.getenv("LOG_FORMAT", DEFAULT_LOG_FORMAT)).strip().lower()
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
        structlog.processors.EventRenamer("event_type"),
    ]
    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(colors=out.isatty(), event_key="event_type")
        )
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_level_value(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=out),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_logging()


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Logger for a module; bound lazily so it follows configure_logging() until
    first use.

        logger = get_logger(__name__)
        logger.info("feed_page_loaded", record_count=20)
    """
    return BoundLoggerLazyProxy(
        None, initial_values={"logger": name}, logger_factory_args=(name,)
    )


def log_context(**context: Any) -> ContextManager[None]:
    """
    Bind context to every line logged inside the block (this task only).

        with log_context(object_id=owner):
            ...
    """
    return structlog.contextvars.bound_contextvars(**context)
