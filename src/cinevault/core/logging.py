"""structlog setup for CineVault.

Every log line carries a ``correlation_id``. The HTTP middleware binds one per
request; lines logged outside a request get a fresh id of their own.
"""

import logging
import sys
import uuid
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from cinevault.core.config import Settings, get_settings

THIRD_PARTY_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error")


def new_correlation_id() -> str:
    return f"cid_{uuid.uuid4().hex[:12]}"


def ensure_correlation_id(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("correlation_id", new_correlation_id())
    return event_dict


def event_to_message(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Emit the log text under ``message`` instead of structlog's ``event``."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


def configure_logging(settings: Settings | None = None) -> None:
    """Install the structlog pipeline.

    Console output with colors in development or when ``log_format`` is
    ``console``; one JSON object per line otherwise.
    """
    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level)
    pretty = settings.is_development or settings.log_format == "console"

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        ensure_correlation_id,
        structlog.processors.StackInfoRenderer(),
    ]
    if pretty:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            event_to_message,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=not pretty,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a logger that tags its lines with ``logger_name=<name>``.

    Args:
        name: Usually the calling module's ``__name__``. Defaults to 'cinevault'.

    Returns:
        A lazy proxy that binds to the configured pipeline on first use.
    """
    name = name or "cinevault"
    return structlog.get_logger(name, logger_name=name)


def bind_correlation_id(correlation_id: str) -> None:
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def clear_context() -> None:
    """Drop everything bound to the current request context."""
    structlog.contextvars.clear_contextvars()
