"""
Request logging middleware
"""

import json
import re
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .logging import bind_request, clear_request_context, get_logger

logger = get_logger(__name__)

# Substrings that mark a query parameter as a credential
SENSITIVE_KEYS = ("token", "secret", "password", "auth", "key", "jwt", "session", "cookie")

# GraphQL documents and variables sent over GET are logged only by operation name
GRAPHQL_PAYLOAD_PARAMS = ("query", "variables", "extensions")

_NAMED_OPERATION = re.compile(r"\b(?:query|mutation|subscription)\s+(\w+)")


def sanitize_query_params(params: Mapping[str, Any]) -> dict[str, Any]:
    """Copy ``params`` with credential-looking values replaced by ``[REDACTED]``."""
    return {
        key: "[REDACTED]" if any(marker in key.lower() for marker in SENSITIVE_KEYS) else value
        for key, value in params.items()
    }


def _operation_from_query(query: Any) -> str | None:
    if not isinstance(query, str) or not query.strip():
        return None
    if "__schema" in query:
        return "__introspection"
    match = _NAMED_OPERATION.search(query)
    return match.group(1) if match else "unnamed_operation"


async def extract_graphql_operation_name(request: Request) -> str | None:
    """Name of the GraphQL operation carried by a /graphql request, if any."""
    if request.url.path != "/graphql":
        return None

    if request.method == "GET":
        payload: Any = dict(request.query_params)
    elif request.method == "POST":
        try:
            payload = json.loads(await request.body() or b"null")
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None
    else:
        return None

    if not isinstance(payload, dict):
        return None
    name = payload.get("operationName")
    if isinstance(name, str) and name:
        return name
    return _operation_from_query(payload.get("query"))


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Give every request a request id and log its start and outcome."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        bind_request(request.headers.get("x-request-id"))
        operation = await extract_graphql_operation_name(request)

        params = sanitize_query_params(request.query_params)
        if request.url.path == "/graphql":
            params.update({k: "[REDACTED]" for k in GRAPHQL_PAYLOAD_PARAMS if k in params})

        logger.info(
            "Request started",
            method=request.method,
            path=request.url.path,
            query_params=params or None,
            graphql_operation=operation,
            remote_addr=request.client.host if request.client else None,
        )
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error("Request failed", path=request.url.path, error=str(e))
            raise
        else:
            logger.info(
                "Request completed",
                path=request.url.path,
                status_code=response.status_code,
                graphql_operation=operation,
            )
            return response
        finally:
            clear_request_context()
