"""
Solace Backend — User Service Tests
=====================================

What:  Tests for UserService create_user / get_user.

What we test:
    ✅ Created user reads back with their problems, password is hashed
    ✅ Duplicate email / username → ConflictError, first user still readable
    ✅ Invalid payloads → ValidationError
    ✅ Malformed id → InvalidIdentifierError before any query
"""

import uuid
from unittest.mock import MagicMock

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from solace.exceptions import (
    ConflictError,
    InvalidIdentifierError,
    NotFoundError,
    ValidationError,
)
from solace.models.user import User
from solace.services.auth_service import password_context
from solace.services.user_service import UserService


class TestCreateUser:
    """Tests for create_user."""

    @pytest.mark.asyncio
    async def test_create_and_read(self, db_session):
        service = UserService(db_session)

        created = await service.create_user("alice", "A@X.com", "correct horse battery")
        fetched = await service.get_user(str(created.id))

        assert fetched.username == "alice"
        assert fetched.email == "a@x.com"
        assert fetched.problems == []

    @pytest.mark.asyncio
    async def test_password_is_hashed(self, db_session):
        created = await UserService(db_session).create_user("alice", "a@x.com", "correct horse battery")

        row = (await db_session.execute(select(User).where(User.id == created.id))).scalar_one()
        assert row.password_hash != "correct horse battery"
        assert password_context.verify("correct horse battery", row.password_hash)

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts_and_first_user_remains(self, db_session):
        service = UserService(db_session)
        first = await service.create_user("alice", "a@x.com", "correct horse battery")

        with pytest.raises(ConflictError) as exc_info:
            await service.create_user("alicia", "a@x.com", "another password")

        assert exc_info.value.field == "email"
        still_there = await service.get_user(first.id)
        assert still_there.username == "alice"

    @pytest.mark.asyncio
    async def test_duplicate_username_conflicts(self, db_session):
        service = UserService(db_session)
        await service.create_user("alice", "a@x.com", "correct horse battery")

        with pytest.raises(ConflictError) as exc_info:
            await service.create_user("alice", "other@x.com", "another password")

        assert exc_info.value.field == "username"

    @pytest.mark.asyncio
    async def test_integrity_error_race_maps_to_conflict(self, mock_db_session):
        no_existing = MagicMock()
        no_existing.first.return_value = None
        mock_db_session.execute.return_value = no_existing
        mock_db_session.flush.side_effect = IntegrityError(
            "INSERT INTO users", {}, Exception("UNIQUE constraint failed: users.email")
        )

        with pytest.raises(ConflictError) as exc_info:
            await UserService(mock_db_session).create_user("alice", "a@x.com", "correct horse battery")

        assert exc_info.value.field == "email"
        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "username,email,password,field",
        [
            ("al", "a@x.com", "correct horse battery", "username"),
            ("alice", "not-an-email", "correct horse battery", "email"),
            ("alice", "a@x.com", "short", "password"),
        ],
    )
    async def test_invalid_payload(self, mock_db_session, username, email, password, field):
        with pytest.raises(ValidationError) as exc_info:
            await UserService(mock_db_session).create_user(username, email, password)

        assert exc_info.value.field == field
        mock_db_session.execute.assert_not_awaited()


class TestGetUser:
    """Tests for get_user."""

    @pytest.mark.asyncio
    async def test_user_with_problems(self, seed, db_session):
        user = await seed.user()
        problem = await seed.problem(user)

        result = await UserService(db_session).get_user(str(user.id))

        assert [p.id for p in result.problems] == [problem.id]
        assert result.problems[0].title == "Stress at work"

    @pytest.mark.asyncio
    async def test_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            await UserService(db_session).get_user(str(uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_invalid_id_fails_before_storage_access(self, mock_db_session):
        with pytest.raises(InvalidIdentifierError):
            await UserService(mock_db_session).get_user("not-a-uuid")

        mock_db_session.execute.assert_not_awaited()
