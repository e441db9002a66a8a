"""
Notes API — Database Session Management
=========================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   `Database` owns an async engine with connection pooling and a session
       factory. `get_db_session` provides a per-request session that commits on
       success and rolls back on error.
Who:   Built by `create_app()` from Settings and stored on `app.state.database`;
       route handlers receive sessions through FastAPI's dependency injection.
When:  Engine is created once per application; sessions are created per-request.

Connection Pooling Strategy (PostgreSQL):
    pool_size=20:      Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes (total max = 30)
    pool_pre_ping:     Validates connections before use (catches stale connections)
    pool_recycle=3600: Recycles connections every hour

SQLite (tests, local development):
    No pool sizing arguments. Every new DBAPI connection runs
    `PRAGMA foreign_keys=ON` so that deleting a note cascades to its share grants
    the same way PostgreSQL enforces it.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from notes_api.config import Settings
from notes_api.exceptions import DatabaseError

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class to:
    1. Register with SQLAlchemy's metadata (used by Alembic for migrations)
    2. Share a single metadata object for consistent schema management
    """
    pass


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Engine + session factory pair for one application instance.

    Attributes:
        engine:          AsyncEngine bound to `settings.database_url`
        session_factory: async_sessionmaker producing AsyncSession objects
                         with expire_on_commit=False (attributes stay readable
                         after the request's commit)
    """

    def __init__(self, settings: Settings):
        engine_kwargs = {
            "echo": settings.db_echo,
            "pool_pre_ping": settings.db_pool_pre_ping,
        }
        if not settings.is_sqlite:
            engine_kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_recycle=3600,
            )

        self.engine: AsyncEngine = create_async_engine(settings.database_url, **engine_kwargs)

        if settings.is_sqlite:
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Yield a session inside a commit-or-rollback envelope.

        How it works:
            1. Creates a new session from the factory
            2. Yields it to the caller (the handler performs queries)
            3. On success: commits the transaction
            4. On error: rolls back the transaction and re-raises
               (a failed commit is raised as DatabaseError)
            5. Always: closes the session (returns connection to pool)
        """
        async with self.session_factory() as session:
            try:
                yield session
                try:
                    await session.commit()
                except SQLAlchemyError as e:
                    logger.error("Commit failed: %s", e, exc_info=True)
                    raise DatabaseError(
                        context={"operation": "commit", "error_type": type(e).__name__},
                    ) from e
            except Exception:
                # Rollback for ANY failure, including non-DB errors raised
                # after a successful query; the global handler formats it.
                await session.rollback()
                raise
            finally:
                await session.close()

    async def ping(self) -> None:
        """Run `SELECT 1`; raises if the database is unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def create_all(self) -> None:
        """Create every table registered on Base.metadata (no-op for existing tables)."""
        # Models register themselves on import
        import notes_api.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """
        Gracefully closes all connections in the pool.

        Called during application shutdown (lifespan handler).
        """
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    Example usage in a route:
        @router.get("/notes/get-notes")
        async def list_notes(db: AsyncSession = Depends(get_db_session, scope="function")):
            ...

    Declare it with scope="function": the commit then runs when the handler
    returns, before the response is sent, so a failed commit becomes a 500
    instead of a success response for a lost write.

    Raises:
        Any database exceptions are propagated to the global error handler,
        which returns appropriate HTTP status codes.
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
