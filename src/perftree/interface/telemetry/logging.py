from __future__ import annotations

from typing import Any, TextIO
import logging
import sys
import structlog


def setup_logging(level: int | str = "WARNING", stream: TextIO | None = None) -> None:
    """Configure structlog for JSON-formatted logging on stderr.

    Reports go to stdout, so log lines must never share it.
    """
    if isinstance(level, str):
        min_level = logging.getLevelName(level.upper())
        if not isinstance(min_level, int):
            min_level = logging.WARNING
    else:
        min_level = level

    logging.basicConfig(
        format="%(message)s",
        level=min_level,
        stream=stream if stream is not None else sys.stderr,
    )

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            min_level
        ),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None):
    """Return a structlog logger bound to the provided name."""
    return structlog.get_logger(name or "perftree")


def bind_session(logger: Any, session_id: str | None = None, **kwargs) -> Any:
    """Attach session metadata to a logger so every command can be correlated."""
    context = {"session_id": session_id} if session_id else {}
    context.update(kwargs)
    return logger.bind(**context)


__all__ = ["setup_logging", "get_logger", "bind_session"]
