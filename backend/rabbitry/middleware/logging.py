"""
Rabbitry Backend — Access Log Middleware
=========================================

What:  One line per request on the `rabbitry.access` logger.
How:   Times the rest of the stack and logs method, path, status, duration
       and client address. The request ID is added by RequestIDLogFilter.

Levels:
    5xx, or an exception escaping the stack   ERROR
    4xx                                       WARNING
    anything else                             INFO

Bodies are never logged. Paths in QUIET_PATHS (probe endpoints) are not
logged at all.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("rabbitry.access")

QUIET_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log for every non-probe request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        client = request.client.host if request.client else "unknown"
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            self._log(request, 500, started, client)
            raise

        self._log(request, response.status_code, started, client)
        return response

    @staticmethod
    def _log(request: Request, status: int, started: float, client: str) -> None:
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms from %s",
            request.method,
            request.url.path,
            status,
            elapsed_ms,
            client,
            extra={
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "duration_ms": round(elapsed_ms, 2),
                "client_ip": client,
            },
        )
