"""
Solace Backend — Bearer Authentication Middleware
==================================================

What:  Resolves the caller's identity from `Authorization: Bearer <jwt>`.
How:   The token is verified by TokenVerifier (signature, expiry, audience);
       the verified subject is stored on request.state.user_id. Missing or
       invalid tokens leave user_id as None. Rejection is left to the
       operations that need an identity (createProblem), so anonymous
       queries keep working.
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from solace.middleware.request_id import request_id_var
from solace.services.auth_service import TokenVerifier, parse_bearer_token

logger = logging.getLogger(__name__)


class BearerAuthMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, verifier: TokenVerifier):
        super().__init__(app)
        self.verifier = verifier
        if not verifier.enabled:
            logger.warning("JWT_SECRET is not set; bearer tokens will not be accepted")

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request.state.user_id = None

        token = parse_bearer_token(request.headers.get("Authorization"))
        if token is not None:
            user_id = self.verifier.verify(token)
            if user_id is None:
                logger.info("[%s] Ignoring unverifiable bearer token", request_id_var.get(""))
            request.state.user_id = user_id

        return await call_next(request)
