"""Structured logging configuration using structlog.

Call setup_logging() once at application startup before any log calls.
Session credentials and Maps API keys are masked by redact_secrets, so
callers may bind request context freely.
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any

import structlog

SECRET_KEYS = frozenset({"api_key", "authorization", "credential", "key", "token"})
REDACTED = "***"


def redact_secrets(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor: mask values bound under secret-looking keys."""
    for name in SECRET_KEYS.intersection(event_dict):
        if event_dict[name]:
            event_dict[name] = REDACTED
    return event_dict


def setup_logging(*, json_output: bool = True, log_level: str = "INFO") -> None:
    """Configure structlog for the gateway.

    Args:
        json_output: If True, render logs as JSON. If False, use dev-friendly console output.
        log_level: Minimum log level to emit (DEBUG, INFO, WARNING, ERROR).
    """
    level = logging.getLevelName(log_level.upper())
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # uvicorn and httpx log through stdlib; keep them at the same threshold.
    logging.basicConfig(level=level, format="%(name)s %(levelname)s %(message)s")
    # httpx logs full request URLs at INFO, and Maps URLs carry the key.
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
