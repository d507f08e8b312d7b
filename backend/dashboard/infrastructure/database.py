"""Database Session Manager — process-wide async engine, sessions with rollback, error mapping.

Invariants:
    - One engine per process, created in the FastAPI lifespan and disposed on shutdown
    - Every session auto-rolls-back on exception (no partial commits leak)
    - All SQLAlchemy exceptions map to PersistenceError; unique violations to DuplicateRecordError
    - Statements are SQLAlchemy constructs: user values are always bound parameters

Design Decisions:
    - Singleton db_manager initialized on startup: the engine's pool is safe for concurrent
      sessions, so every submission shares it
    - translate_db_error() is public: action handlers catch SQLAlchemyError themselves
      (they turn failures into form state) and reuse the same mapping
    - expire_on_commit=False: prevents lazy-load issues in async context
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy import text

from dashboard.core.errors import DuplicateRecordError, PersistenceError

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when the driver reports a unique-constraint conflict (Postgres or SQLite)."""
    orig = exc.orig
    for candidate in (orig, getattr(orig, "__cause__", None)):
        if candidate is None:
            continue
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code == UNIQUE_VIOLATION_SQLSTATE:
            return True
    return "UNIQUE constraint failed" in str(orig)


def translate_db_error(exc: SQLAlchemyError, operation: str) -> PersistenceError:
    """Map a SQLAlchemy exception to the dashboard error hierarchy."""
    if isinstance(exc, IntegrityError):
        if is_unique_violation(exc):
            return DuplicateRecordError(operation)
        return PersistenceError("Integrity constraint violated", operation)
    if isinstance(exc, OperationalError):
        return PersistenceError("Connection or operational error", operation)
    if isinstance(exc, DBAPIError):
        return PersistenceError("Database driver error", operation)
    return PersistenceError("Database operation failed", operation)


def _engine_options(
    database_url: str, pool_size: int, max_overflow: int, ssl: str | None,
) -> dict:
    if database_url.startswith("sqlite"):
        return {}
    options: dict = {
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }
    if ssl and database_url.startswith("postgresql+asyncpg"):
        options["connect_args"] = {"ssl": ssl}
    return options


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 20,
        max_overflow: int = 10,
        ssl: str | None = None,
    ):
        self.engine = create_async_engine(
            database_url,
            **_engine_options(database_url, pool_size, max_overflow, ssl),
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"DB error: {e}")
            raise translate_db_error(e, "session") from e
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs):
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)


async def close_db() -> None:
    global db_manager
    if db_manager:
        await db_manager.dispose()
        db_manager = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
