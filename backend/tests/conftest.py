"""
Solace Backend — Test Configuration (conftest.py)
==================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (mocked sessions, an in-memory
       database, seeded rows, bearer tokens, an API client).

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: AsyncMock session for unit tests (no DB needed)
    ├── database: in-memory SQLite Database with the schema created
    ├── db_session: AsyncSession on that database
    ├── seed: helpers inserting users, problems, verses and plans
    ├── advice_generator: fake AdviceGenerator recording its calls
    ├── make_token: mints bearer tokens accepted by the test settings
    └── test_client: HTTPX AsyncClient talking to the FastAPI app
"""

import os
import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run BEFORE any solace import: settings are read at import time
TEST_JWT_SECRET = "test-jwt-secret-not-real"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["OPENROUTER_API_KEY"] = "test-key-not-real"
os.environ["JWT_SECRET"] = TEST_JWT_SECRET
os.environ["JWT_AUDIENCE"] = "authenticated"
os.environ["LOG_LEVEL"] = "WARNING"

from jose import jwt  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import solace.models  # noqa: E402,F401  (registers every table on Base.metadata)
from solace.database import Base, Database  # noqa: E402
from solace.models.problem import Problem  # noqa: E402
from solace.models.reading_plan import ReadingPlan, ReadingPlanItem  # noqa: E402
from solace.models.user import User  # noqa: E402
from solace.models.verse import Verse  # noqa: E402
from solace.services.auth_service import hash_password  # noqa: E402
from solace.services.llm_base import AdviceGenerator  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Unit-test doubles
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_verse(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = verse
            result = await VerseService(mock_db_session).get_verse(verse_id)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


class FakeAdviceGenerator(AdviceGenerator):
    """Returns canned advice (or raises `error`) and records every call."""

    def __init__(self, advice: str = "Cast all your anxiety on Him.", error: Optional[Exception] = None):
        self.advice = advice
        self.error = error
        self.calls: List[tuple] = []

    async def generate_advice(self, problem_description: str, verses: Sequence[str]) -> str:
        self.calls.append((problem_description, list(verses)))
        if self.error is not None:
            raise self.error
        return self.advice


@pytest.fixture
def advice_generator():
    return FakeAdviceGenerator()


# ══════════════════════════════════════════════════════════════════════════
# In-memory database
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def database():
    """
    A fresh in-memory SQLite database per test.

    StaticPool keeps a single connection, so every session (including the
    ones the API opens per request) sees the same in-memory database.
    """
    db = Database(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session_factory() as session:
        yield session


class Seeder:
    """Inserts committed rows so both services and API requests can read them."""

    def __init__(self, session):
        self.session = session

    async def _save(self, row):
        self.session.add(row)
        await self.session.commit()
        return row

    async def user(self, username: str = "alice", email: str = "a@x.com") -> User:
        return await self._save(User(
            id=uuid.uuid4(),
            username=username,
            email=email,
            password_hash=hash_password("correct horse battery"),
            created_at=datetime.now(timezone.utc),
        ))

    async def problem(self, user: User, title: str = "Stress at work", **fields) -> Problem:
        return await self._save(Problem(
            id=uuid.uuid4(),
            user_id=user.id,
            title=title,
            description=fields.pop("description", "Deadlines keep piling up."),
            created_at=fields.pop("created_at", datetime.now(timezone.utc)),
            **fields,
        ))

    async def verse(self, book: str = "Psalms", chapter: int = 23, verse: int = 1,
                    text: str = "The Lord is my shepherd; I shall not want.") -> Verse:
        return await self._save(Verse(
            id=uuid.uuid4(), book=book, chapter=chapter, verse=verse, text=text,
        ))

    async def plan(self, problem: Problem) -> ReadingPlan:
        return await self._save(ReadingPlan(
            id=uuid.uuid4(),
            problem_id=problem.id,
            created_at=datetime.now(timezone.utc),
        ))

    async def item(self, plan: ReadingPlan, verse: Verse, item_order: int,
                   is_read: bool = False) -> ReadingPlanItem:
        return await self._save(ReadingPlanItem(
            id=uuid.uuid4(),
            reading_plan_id=plan.id,
            verse_id=verse.id,
            item_order=item_order,
            is_read=is_read,
            created_at=datetime.now(timezone.utc),
        ))


@pytest.fixture
def seed(db_session):
    return Seeder(db_session)


# ══════════════════════════════════════════════════════════════════════════
# API client
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_token():
    """Mints an HS256 token signed with the test secret."""

    def _make(subject, secret: str = TEST_JWT_SECRET, audience: str = "authenticated",
              expires_in: timedelta = timedelta(hours=1)) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": str(subject),
            "aud": audience,
            "iat": int(now.timestamp()),
            "exp": int((now + expires_in).timestamp()),
        }
        return jwt.encode(claims, secret, algorithm="HS256")

    return _make


@pytest_asyncio.fixture
async def test_client(database, advice_generator):
    """
    HTTPX AsyncClient routed straight into the FastAPI app.

    ASGITransport does not run the lifespan, so the test database and the
    fake advice generator are placed on app.state here.
    """
    from solace.main import app

    app.state.database = database
    app.state.advice_generator = advice_generator
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
