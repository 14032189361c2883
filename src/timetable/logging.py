"""Structured logging for the timetable package, built on structlog.

Events are snake_case names with key/value context, e.g.
    log.warning("routine_rejected", operation="delete", error="Routine not found")

Everything goes to stderr: the render CLI owns stdout for the grid or its
JSON. Records from stdlib loggers (pydantic-settings, asyncio) are rendered by
the same processor chain so one run produces one log format.
"""

import logging
import sys
from typing import TextIO

import structlog

# Applied to structlog events and to foreign stdlib records alike
_SHARED_PROCESSORS = (
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
)


def _renderer(json_output: bool):
    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logging(
    json_output: bool = False, log_level: str = "INFO", stream: TextIO | None = None
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        json_output: One JSON object per event instead of console lines.
        log_level: Minimum level name; unknown names fall back to INFO.
        stream: Destination, stderr when omitted.
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    stream = stream or sys.stderr
    renderer = _renderer(json_output)

    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
            foreign_pre_chain=list(_SHARED_PROCESSORS),
        )
    )
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(numeric_level)


def get_logger(name: str) -> structlog.BoundLogger:
    """Logger for a module; pass __name__."""
    return structlog.get_logger(name)
