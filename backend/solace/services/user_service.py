"""
Solace Backend — User Service
==============================

What:  Account creation and the user read-model (user + owned problems).
Who:   The createUser mutation and the user(id) query.

Uniqueness:
    username and email are unique. A taken value is reported as
    ConflictError before the insert; the UNIQUE constraints catch the race
    where two requests create the same account concurrently.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, Union

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from solace.database import storage_errors
from solace.exceptions import ConflictError, NotFoundError
from solace.identifiers import parse_identifier
from solace.models.user import User
from solace.schemas.inputs import UserCreate, parse_input
from solace.schemas.responses import UserResponse
from solace.services.auth_service import hash_password
from solace.services.problem_service import ProblemService

logger = logging.getLogger(__name__)


def _conflicting_field(error: IntegrityError) -> Optional[str]:
    detail = str(error.orig).lower()
    for field in ("username", "email"):
        if field in detail:
            return field
    return None


class UserService:
    """
    Responsibilities:
        - create_user(): validated insert with a hashed password
        - get_user(): user with all owned problems, oldest first
    """

    def __init__(self, session: AsyncSession, problems: Optional[ProblemService] = None):
        self.session = session
        self.problems = problems or ProblemService(session)

    async def create_user(self, username: str, email: str, password: str) -> UserResponse:
        """
        Raises:
            ValidationError: Malformed username, email or password
            ConflictError: Username or email already taken
            DatabaseError: Insert failed for any other reason
        """
        payload = parse_input(UserCreate, username=username, email=email, password=password)

        # Why check first: the common case gets the exact field name without
        # parsing driver-specific IntegrityError text
        with storage_errors("check for an existing account", username=payload.username):
            result = await self.session.execute(
                select(User.username, User.email).where(
                    or_(User.username == payload.username, User.email == payload.email)
                )
            )
            existing = result.first()

        if existing is not None:
            field = "username" if existing.username == payload.username else "email"
            raise ConflictError(
                message=f"A user with this {field} already exists",
                field=field,
            )

        user = User(
            id=uuid.uuid4(),
            username=payload.username,
            email=payload.email,
            password_hash=hash_password(payload.password),
            created_at=datetime.now(timezone.utc),
        )

        with storage_errors("create the user", username=payload.username):
            self.session.add(user)
            try:
                await self.session.flush()
            except IntegrityError as e:
                # A failed flush leaves the session unusable until rolled back
                await self.session.rollback()
                field = _conflicting_field(e)
                logger.warning("User insert hit a uniqueness violation: %s", str(e.orig))
                raise ConflictError(
                    message=f"A user with this {field or 'username or email'} already exists",
                    field=field,
                ) from e

        logger.info("User %s created (%s)", user.id, user.username)
        return UserResponse(
            id=user.id,
            username=user.username,
            email=user.email,
            created_at=user.created_at,
        )

    async def get_user(self, user_id: Union[str, uuid.UUID]) -> UserResponse:
        """
        Raises:
            InvalidIdentifierError: Malformed id (before any query)
            NotFoundError: No user with this id
            DatabaseError: Query execution failed
        """
        uid = parse_identifier(user_id, "user")

        with storage_errors("retrieve the user", user_id=str(uid)):
            result = await self.session.execute(select(User).where(User.id == uid))
            user = result.scalar_one_or_none()

        if user is None:
            raise NotFoundError(resource="user", resource_id=str(uid))

        # Listed through ProblemService so every read path builds problems alike
        problems = await self.problems.list_problems_for_user(uid)
        return UserResponse(
            id=user.id,
            username=user.username,
            email=user.email,
            created_at=user.created_at,
            problems=problems,
        )
