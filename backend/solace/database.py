"""
Solace Backend — Database Engine & Session Management
======================================================

What:  Async SQLAlchemy engine, session factory, FastAPI session dependency
       and the translation of driver errors into DatabaseError.
Why:   Centralizes all database connection logic in one place.
How:   A `Database` object owns the engine (connection pool) and the session
       factory. It is constructed once in the app lifespan and stored on
       `app.state`; nothing in the services reaches for it globally. Each
       request gets its own AsyncSession which commits on success and rolls
       back on error.
Who:   main.py (lifecycle), the GraphQL context getter (sessions), tests
       (isolated in-memory instances).

Connection Pooling Strategy (PostgreSQL):
    pool_size / max_overflow from settings, pool_pre_ping to catch stale
    connections, pool_recycle=3600. SQLite URLs (tests) use SQLAlchemy's
    default pool for the dialect.
"""

import logging
from contextlib import contextmanager
from typing import Any, AsyncGenerator, Iterator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from solace.config import Settings
from solace.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class to register with a single metadata
    object (used by the test suite to create the schema).
    """
    pass


class Database:
    """
    Explicitly constructed storage handle: engine + session factory.

    Usage:
        database = Database.from_settings(settings)
        async with database.session_factory() as session:
            ...
        await database.dispose()
    """

    def __init__(self, url: str, **engine_kwargs: Any):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        # expire_on_commit=False: response models are built from ORM objects
        # after the request's transaction has been committed
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        engine_kwargs: dict = {"echo": settings.log_level == "DEBUG"}
        if not settings.database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )
        return cls(settings.database_url, **engine_kwargs)

    async def ping(self) -> None:
        """Executes SELECT 1; raises if the database is unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def wait_until_ready(self, attempts: int = 5) -> None:
        """
        What:  Pings the database with exponential backoff until it answers.
        When:  Once during application startup.
        Why:   The API container often starts before PostgreSQL accepts
               connections; after `attempts` failures startup is aborted.
        """
        retrying = AsyncRetrying(
            retry=retry_if_exception_type((OSError, DBAPIError)),
            stop=stop_after_attempt(attempts),
            wait=wait_exponential_jitter(initial=1, max=10, jitter=1),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                await self.ping()
        logger.info("Database connection verified")

    async def dispose(self) -> None:
        """Closes all pooled connections (application shutdown)."""
        await self.engine.dispose()


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the app's Database
        2. Yields it to the handler / GraphQL context
        3. On success: commits the transaction (GraphQL mutations have
           already committed in run_operation; this catches anything else)
        4. On error: rolls back the transaction
        5. Always: closes the session (returns connection to pool)
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@contextmanager
def storage_errors(operation: str, **context: Any) -> Iterator[None]:
    """
    Translates any SQLAlchemyError raised inside the block into DatabaseError.

    Application exceptions (NotFoundError, ConflictError, ...) pass through
    untouched so callers see the specific kind.

    Example:
        with storage_errors("fetch verse", verse_id=str(verse_id)):
            result = await session.execute(select(Verse).where(...))
    """
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(
            "Database error during %s: %s | Context: %s",
            operation,
            str(e),
            context,
        )
        raise DatabaseError(
            message=f"Could not {operation}. Please try again.",
            context={**context, "error_type": type(e).__name__},
        ) from e
