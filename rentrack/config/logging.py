"""
Structured logging configuration using structlog.

Console output in development, JSON in staging/production. Ledger events
that an operator may need to reconcile by hand are tagged ``audit=True``
and, when an audit log is configured, also appended to that file as JSON
lines.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from rentrack.config.settings import get_settings

AUDIT_LOGGER_NAME = "rentrack.audit"

# Events kept in the audit trail
AUDIT_EVENTS = frozenset(
    {
        "movement_batch_recorded",
        "movement_batch_conflict",
        "movement_integrity_failure",
        "movement_permission_denied",
        "batch_origin_missing",
        "rate_missing",
    }
)

_METHOD_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "exception": logging.ERROR,
    "critical": logging.CRITICAL,
}

_audit_renderer = structlog.processors.JSONRenderer(default=str)


def add_app_context(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add application context to log events."""
    settings = get_settings()
    event_dict["app"] = settings.app_name
    event_dict["environment"] = settings.environment
    return event_dict


def tag_audit_events(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Mark ledger events and copy them to the audit logger."""
    if event_dict.get("event") in AUDIT_EVENTS:
        event_dict["audit"] = True
        audit = logging.getLogger(AUDIT_LOGGER_NAME)
        if audit.handlers:
            line = _audit_renderer(logger, method_name, dict(event_dict))
            audit.log(_METHOD_LEVELS.get(method_name, logging.INFO), line)
    return event_dict


def _configure_audit_log() -> None:
    settings = get_settings()
    audit = logging.getLogger(AUDIT_LOGGER_NAME)
    audit.handlers.clear()
    audit.propagate = False
    if not settings.storage.audit_log_name:
        return
    handler = logging.FileHandler(settings.storage.audit_log_path, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(message)s"))
    audit.addHandler(handler)
    audit.setLevel(logging.INFO)


def configure_logging() -> None:
    """Configure structlog and the audit trail for the application."""
    settings = get_settings()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
        tag_audit_events,
    ]

    if settings.environment == "development":
        renderer: list[Processor] = [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]
    else:
        renderer = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(default=str),
        ]

    structlog.configure(
        processors=shared_processors + renderer,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
    )
    _configure_audit_log()

    # SQL chatter
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
