"""
Solace Backend — Authentication Primitives
===========================================

What:  Password hashing for createUser and bearer-token verification for the
       operations that act on behalf of a caller (createProblem).
How:   passlib CryptContext (PBKDF2-SHA256) for hashes; python-jose for
       HS256 tokens issued by the identity provider.
Who:   UserService (hash_password), BearerAuthMiddleware (TokenVerifier).

Token Rules:
    - Signature checked with JWT_SECRET, audience checked against JWT_AUDIENCE
    - The `sub` claim must be a UUID; it becomes the caller's user id
    - Anything else (expired, wrong audience, bad signature) yields no identity
"""

import logging
import uuid
from typing import List, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from solace.config import Settings

logger = logging.getLogger(__name__)


password_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    default="pbkdf2_sha256",
    deprecated="auto",
)


def hash_password(password: str) -> str:
    return password_context.hash(password)


def parse_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Extracts the raw token from an Authorization header value.

    Accepts "Bearer <token>" (scheme is case-insensitive). Returns None when
    the header is missing or uses another scheme.
    """
    if not authorization:
        return None
    value = authorization.strip()
    if not value.lower().startswith("bearer "):
        return None
    return value.split(" ", 1)[1].strip() or None


class TokenVerifier:
    """
    Verifies identity-provider tokens and returns the caller's user id.

    A verifier without a secret never accepts a token: the server then runs
    with no authenticated callers at all.
    """

    def __init__(self, secret: str, audience: Optional[str], algorithms: List[str]):
        self.secret = secret
        self.audience = audience or None
        self.algorithms = algorithms

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenVerifier":
        return cls(
            secret=settings.jwt_secret,
            audience=settings.jwt_audience,
            algorithms=settings.jwt_algorithms_list,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.secret)

    def verify(self, token: str) -> Optional[uuid.UUID]:
        if not self.enabled:
            return None

        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=self.algorithms,
                audience=self.audience,
                options={"verify_aud": self.audience is not None},
            )
        except JWTError as e:
            logger.info("Rejected bearer token: %s", str(e))
            return None

        subject = claims.get("sub")
        try:
            return uuid.UUID(str(subject))
        except ValueError:
            logger.info("Rejected bearer token: subject %r is not a user id", subject)
            return None
