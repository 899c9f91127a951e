"""Structured logging configuration.

This module hands out loggers with a stable JSON event format.
It prefers structlog and falls back to standard logging if absent.
The minimum level comes from PKGSTORE_LOG_LEVEL (default WARNING).
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any

_DEFAULT_LEVEL_NAME = "WARNING"
_structlog_configured = False


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog or stdlib logger accepting keyword event fields.
    """
    try:
        import structlog
    except ImportError:
        return _get_standard_logger(name)

    global _structlog_configured
    if not _structlog_configured:
        structlog.configure(
            processors=[
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.add_log_level,
                structlog.processors.JSONRenderer(sort_keys=True),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(_resolve_level()),
            cache_logger_on_first_use=True,
        )
        _structlog_configured = True
    return structlog.get_logger(name)


def _resolve_level() -> int:
    """Resolve the numeric log level from the environment.

    Returns:
        Stdlib logging level; unknown names fall back to WARNING.
    """
    level_name = os.getenv("PKGSTORE_LOG_LEVEL", _DEFAULT_LEVEL_NAME).strip().upper()
    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else logging.WARNING


def _get_standard_logger(name: str) -> Any:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        logger.addHandler(handler)
        logger.setLevel(_resolve_level())
    return _StructuredStandardLogger(logger)


class _StructuredStandardLogger:
    """Stdlib logger adapter that accepts structured keyword fields."""

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def debug(self, event: str, **fields: object) -> None:
        self._logger.debug(_format_event(event, fields))

    def info(self, event: str, **fields: object) -> None:
        self._logger.info(_format_event(event, fields))

    def warning(self, event: str, **fields: object) -> None:
        self._logger.warning(_format_event(event, fields))

    def error(self, event: str, **fields: object) -> None:
        self._logger.error(_format_event(event, fields))


def _format_event(event: str, fields: dict[str, object]) -> str:
    """Render a structured event line for standard logging.

    Args:
        event: Event name.
        fields: Event fields; non-JSON values are stringified.

    Returns:
        JSON-encoded event string.
    """
    if not fields:
        return event
    payload = {"event": event, **fields}
    return json.dumps(payload, sort_keys=True, default=str)
