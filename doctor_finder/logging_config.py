"""
Structured logging for the doctor directory.

structlog renders JSON in production and a console view elsewhere. Every
entry is tagged with the service name, and request-scoped fields are bound
through ``structlog.contextvars``: ``trace_id`` for the whole HTTP request,
``doctor_id`` once a route knows which doctor it is serving. Service code
just logs; it never passes these fields around.

Usage:
    from doctor_finder.logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("doctor_search_completed", matched=12, has_query=True)
"""

from __future__ import annotations

import logging
import sys
import uuid
from contextlib import contextmanager
from typing import Any, Iterator, Optional, TextIO

import structlog

from doctor_finder.config import get_settings

SERVICE_NAME = "doctor-finder"

# Supabase client stack plus uvicorn's access log, which api_request replaces.
QUIET_LOGGERS = ("httpx", "httpcore", "hpack", "postgrest", "gotrue", "supabase", "uvicorn.access")


def generate_trace_id() -> str:
    """Short random id used when the caller sends no X-Request-ID."""
    return uuid.uuid4().hex[:12]


@contextmanager
def request_context(trace_id: str) -> Iterator[None]:
    """
    Scope log context to one request.

    Starts from a clean context holding only ``trace_id`` and restores
    whatever was bound before on exit, so fields bound inside (such as
    ``doctor_id``) never outlive the request.
    """
    previous = structlog.contextvars.get_contextvars()
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(trace_id=trace_id)
    try:
        yield
    finally:
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(**previous)


def bind_doctor(doctor_id: str) -> None:
    """Tag the rest of the current request's log entries with a doctor id."""
    structlog.contextvars.bind_contextvars(doctor_id=doctor_id)


def _add_service(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def setup_logging(
    log_level: Optional[str] = None,
    json_logs: Optional[bool] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure structlog and route stdlib records through the same renderer.

    Args:
        log_level: Root level; defaults to ``Settings.log_level``.
        json_logs: JSON lines instead of console output; defaults to on
            in production.
        stream: Output stream; defaults to stdout.
    """
    settings = get_settings()
    level = (log_level or settings.log_level).upper()
    if json_logs is None:
        json_logs = settings.is_production

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_service,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    renderer: structlog.types.Processor
    if json_logs:
        # Tracebacks must be flattened into a field before JSON rendering
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=(stream or sys.stdout).isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # uvicorn and supabase log through stdlib; give them the same fields
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Named structured logger; pass the calling module's ``__name__``."""
    return structlog.stdlib.get_logger(name)
