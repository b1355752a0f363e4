"""
Solace Backend — Request ID Middleware
=======================================

What:  Assigns a short correlation ID to each request and returns it in the
       X-Request-ID response header.
Why:   Every log line of one GraphQL operation (resolver, services, error
       translation) can be tied back to the HTTP request that caused it.
How:   Reuses the client's X-Request-ID when present, otherwise generates
       one; stores it in a ContextVar and on request.state.
Who:   Registered last in create_app(), so it runs first on every request.

Where the ID shows up:
    - Access log lines (RequestLoggingMiddleware)
    - GraphQL error logs (graphql/errors.py) for translated and masked errors
    - The `request_id` field of REST error bodies (ErrorResponse)
    - The X-Request-ID response header, for clients to quote in reports
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# ── Context Variable ──────────────────────────────────────────────────────
# Coroutine-local: concurrent requests on one event loop each see their own ID.
# Why not threading.local: every request runs on the same event-loop thread.
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Behavior:
        1. Use the client's X-Request-ID header if it sent one
        2. Otherwise generate an 8-character ID
        3. Store it in request_id_var and request.state.request_id
        4. Echo it in the response headers

    Why accept client IDs:
        The web client can tag a user action before calling /graphql and
        find the matching server logs afterwards.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # Why 8 chars: unique enough to correlate one request, short in logs.
        # An empty header counts as absent.
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        # Why both: loggers and resolvers read the ContextVar, route handlers
        # can read request.state without importing this module
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)

        # Why: GraphQL errors arrive in a 200 body; the header is the client's
        # only handle for a support request
        response.headers["X-Request-ID"] = rid
        return response
