"""
NotesVault Backend: Database Engine & Session Management
========================================================

What:  Async SQLAlchemy engine construction, session factory, and a
       transactional session scope.
How:   The application factory builds one engine per app from Settings and
       hands it to SqlNoteRepository; nothing is created at import time.
Who:   Used by SqlNoteRepository, the health check (through the repository)
       and Alembic (Base.metadata).

Connection Pooling:
    pool_size / max_overflow / pool_pre_ping come from Settings.
    pool_recycle=3600 recycles connections every hour.
    SQLite URLs get SQLAlchemy's default pool and none of these options.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from notesvault.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Sharing one metadata object lets Alembic and `create_schema()` see every
    table registered by the models package.
    """
    pass


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine described by `settings`.

    SQL echo follows the DEBUG log level.
    """
    options = {"echo": settings.log_level == "DEBUG"}
    if not settings.uses_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(settings.database_url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: rows stay readable after commit, outside the session
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def session_scope(
    factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """
    Provide a session wrapped in a single transaction.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the caller, which performs its queries
        3. On success: commits the transaction
        4. On any error: rolls back and re-raises
        5. Always: closes the session (returns the connection to the pool)
    """
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
