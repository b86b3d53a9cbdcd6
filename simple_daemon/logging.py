"""
Structured logging for simple-daemon.

Features:
- structlog everywhere, snake_case event names with keyword context
- Console renderer for humans, JSON renderer for log collectors
- A null logger for components that were never given one
"""

import logging
import sys
from typing import Any

import structlog

__all__ = ["configure_logging", "null_logger"]


def _drop(logger: Any, method_name: str, event_dict: Any) -> Any:
    raise structlog.DropEvent


def configure_logging(level: str = "INFO", fmt: str = "console") -> None:
    """Configure structlog for the daemon process.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR)
        fmt: "console" for human-readable output, "json" for one object per line
    """
    renderer: Any
    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=False,
    )


def null_logger() -> Any:
    """Return a structlog logger that discards everything."""
    return structlog.wrap_logger(
        structlog.ReturnLogger(),
        processors=[_drop],
    )
