"""
Solace Backend — Request Logging Middleware
============================================

What:  One access-log line per HTTP request: method, path, status, duration,
       request ID and client address.
How:   Measures from middleware entry to response return; the log level
       follows the status class (5xx ERROR, 4xx WARNING, otherwise INFO).

GraphQL note:
    Operation failures are reported inside a 200 response body, so they do
    not show up here as 4xx/5xx. They are logged by graphql/errors.py with
    the same request ID.

Privacy:
    Request bodies (passwords in createUser) and Authorization headers are
    never logged. The caller id resolved by BearerAuthMiddleware is not
    logged either; the request ID is enough to correlate.

Why not uvicorn's access log:
    It carries neither the request ID nor the duration.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from solace.middleware.request_id import request_id_var

logger = logging.getLogger("solace.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Duration covers everything below this middleware. For generateAdvice
    the OpenRouter call dominates it.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # Why perf_counter: monotonic, unaffected by wall-clock adjustments
        start_time = time.perf_counter()

        # request.client is None when the server does not report a peer address
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = request.url.path
        rid = request_id_var.get("")

        # Why skip: health checks run every few seconds and would bury real traffic
        if path == "/health":
            return await call_next(request)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        # Why: alerting keys on level; 5xx is ours to fix, 4xx is the client's
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
