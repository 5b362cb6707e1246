"""
Rabbitry Backend — Request ID Middleware
=========================================

What:  Gives every request a correlation ID, echoes it in X-Request-ID and
       stamps it on every log record written while the request runs.
How:   The ID (the client's X-Request-ID, or a short UUID) lives in a
       ContextVar. RequestIDLogFilter copies it onto each LogRecord as
       `request_id`, so the root format can print it for service, DAO and
       access log lines alike.

    [a1b2c3d4] rabbitry.services.breed_service: Adding breed Dwarf Lop
    [a1b2c3d4] rabbitry.access: POST /api/breeds 201 12.4ms from 10.0.0.7
"""

import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on one event loop each see their own ID.
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class RequestIDLogFilter(logging.Filter):
    """Adds `request_id` to records; "-" outside a request."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get()
        return True


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Binds the request ID for the duration of one request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
