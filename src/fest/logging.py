"""
structlog setup shared by the API server and the CLIs.

Per-request fields (request id, user id) live in structlog's contextvars and
are merged into every event logged while the request is being handled.
"""

import logging
import sys
import uuid

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars, merge_contextvars

_SHARED_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
]


def configure_logging(debug: bool = False) -> None:
    """Route structlog through stdlib logging on stdout.

    Debug mode renders coloured console lines at DEBUG level; otherwise one
    JSON object per line at INFO.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        stream=sys.stdout,
        format="%(message)s",
        force=True,
    )

    renderer = (
        structlog.dev.ConsoleRenderer(colors=True)
        if debug
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[*_SHARED_PROCESSORS, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def new_request_id() -> str:
    """Short random id attached to every log line of one HTTP request."""
    return uuid.uuid4().hex[:12]


def bind_request(request_id: str | None = None) -> str:
    """Start a fresh logging context for a request and return its id."""
    clear_contextvars()
    request_id = request_id or new_request_id()
    bind_contextvars(request_id=request_id)
    return request_id


def bind_user_id(user_id: int | str) -> None:
    """Tag the rest of the current request's log lines with the local user id."""
    bind_contextvars(user_id=str(user_id))


def clear_request_context() -> None:
    clear_contextvars()
