"""
FastAPI middleware for request tracing and correlation.

Every request gets a request ID that is returned in the ``X-Request-ID``
response header and bound to structlog's context variables, so every log
event emitted while handling the request carries it.
"""

from __future__ import annotations

import uuid
from typing import Awaitable, Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add a request ID to each HTTP request.

    An incoming ``X-Request-ID`` header (set by a gateway or client) is reused;
    otherwise a new UUID4 is generated. The ID is:

    1. stored in ``request.state.request_id`` for route handlers,
    2. bound as ``request_id`` in structlog contextvars for the request,
    3. echoed in the ``X-Request-ID`` response header.

    Example:
        >>> app.add_middleware(RequestIDMiddleware)
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.clear_contextvars()

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
