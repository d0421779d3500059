"""Structured logging configuration.

This module initializes structlog with a stable JSON event format.
Pipeline runs bind per-run fields onto these loggers instead of sharing
one global instance.
"""

from __future__ import annotations

from typing import Any

import structlog

_CONFIGURED = False


def get_logger(name: str, **bound_fields: object) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.
        **bound_fields: Optional context fields attached to every event.

    Returns:
        A structlog logger with structured output.
    """
    _configure_structlog()
    logger = structlog.get_logger(name)
    if bound_fields:
        return logger.bind(**bound_fields)
    return logger


def _configure_structlog() -> None:
    global _CONFIGURED
    if _CONFIGURED:
        return
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        cache_logger_on_first_use=True,
    )
    _CONFIGURED = True
