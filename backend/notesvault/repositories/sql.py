"""
NotesVault Backend: SQLAlchemy Note Repository
==============================================

What:  NoteRepository backed by async SQLAlchemy (asyncpg in production,
       aiosqlite for local runs and tests).
How:   Every operation opens its own session through `session_scope()`, so
       each call is one short transaction touching at most one row.

Resilience Strategy:
    1. asyncio.wait_for bounds each attempt by Settings.storage_timeout
    2. Tenacity retries transient failures (OperationalError, InterfaceError,
       driver OSErrors such as refused connections, timeouts) with
       exponential backoff plus random jitter
    3. Whatever is left is logged and re-raised as StorageUnavailableError,
       so no driver exception ever travels above this layer

All five operations are idempotent for a given input (merge by primary key,
delete by primary key), which is what makes replaying them on retry safe.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, TypeVar

from sqlalchemy import delete, select, text
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from notesvault.config import Settings
from notesvault.database import Base, build_engine, build_session_factory, session_scope
from notesvault.exceptions import StorageUnavailableError
from notesvault.models.note import Note, NoteRow
from notesvault.repositories.base import NoteRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")

# OSError covers refused or dropped connections that asyncpg raises unwrapped
TRANSIENT_ERRORS = (OperationalError, InterfaceError, asyncio.TimeoutError, OSError)


class SqlNoteRepository(NoteRepository):
    """
    Relational note store.

    Query Patterns:
        - put_or_update: session.merge(row) → INSERT or UPDATE by primary key
        - get_by_id:     SELECT ... WHERE id = :id (primary key lookup)
        - exists:        SELECT id ... WHERE id = :id LIMIT 1
        - delete:        DELETE ... WHERE id = :id
        - list:          SELECT ... ORDER BY created_at DESC, id ASC
                         (served by idx_notes_created_at)
    """

    def __init__(
        self,
        engine: AsyncEngine,
        timeout: float = 5.0,
        retry_attempts: int = 3,
        retry_min_wait: float = 0.2,
        retry_max_wait: float = 2.0,
    ):
        self._engine = engine
        self._session_factory = build_session_factory(engine)
        self._timeout = timeout
        self._retry_attempts = retry_attempts
        self._retry_min_wait = retry_min_wait
        self._retry_max_wait = retry_max_wait

    @classmethod
    def from_settings(cls, settings: Settings) -> "SqlNoteRepository":
        return cls(
            build_engine(settings),
            timeout=settings.storage_timeout,
            retry_attempts=settings.storage_retry_attempts,
            retry_min_wait=settings.storage_retry_min_wait,
            retry_max_wait=settings.storage_retry_max_wait,
        )

    # ── Execution helpers ─────────────────────────────────────────────────

    async def _in_session(self, work: Callable[[AsyncSession], Awaitable[T]]) -> T:
        async with session_scope(self._session_factory) as session:
            return await work(session)

    async def _run(
        self,
        operation: str,
        work: Callable[[AsyncSession], Awaitable[T]],
        note_id: Optional[str] = None,
    ) -> T:
        """
        Execute `work` in a fresh transaction with timeout and retry.

        Raises:
            StorageUnavailableError: retries exhausted or a non-transient
                SQLAlchemy or connection error occurred.
        """
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            stop=stop_after_attempt(self._retry_attempts),
            wait=wait_exponential(
                multiplier=self._retry_min_wait,
                max=self._retry_max_wait,
            ) + wait_random(0, self._retry_min_wait),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    return await asyncio.wait_for(self._in_session(work), timeout=self._timeout)
        except (SQLAlchemyError, asyncio.TimeoutError, OSError) as e:
            # Type name only: driver messages can echo bound parameters (note text)
            logger.error(
                "Storage operation %s failed for note %s: %s",
                operation,
                note_id or "-",
                type(e).__name__,
            )
            raise StorageUnavailableError(
                context={
                    "operation": operation,
                    "note_id": note_id,
                    "error_type": type(e).__name__,
                },
            ) from e
        raise StorageUnavailableError(context={"operation": operation, "note_id": note_id})

    # ── NoteRepository contract ───────────────────────────────────────────

    async def put_or_update(self, note: Note) -> Note:
        async def work(session: AsyncSession) -> Note:
            row = await session.merge(NoteRow.from_domain(note))
            await session.flush()
            return row.to_domain()

        return await self._run("put_or_update", work, note.id)

    async def get_by_id(self, note_id: str) -> Optional[Note]:
        async def work(session: AsyncSession) -> Optional[Note]:
            row = await session.get(NoteRow, note_id)
            return row.to_domain() if row is not None else None

        return await self._run("get_by_id", work, note_id)

    async def exists(self, note_id: str) -> bool:
        async def work(session: AsyncSession) -> bool:
            result = await session.execute(
                select(NoteRow.id).where(NoteRow.id == note_id).limit(1)
            )
            return result.scalar_one_or_none() is not None

        return await self._run("exists", work, note_id)

    async def delete(self, note_id: str) -> None:
        async def work(session: AsyncSession) -> None:
            await session.execute(delete(NoteRow).where(NoteRow.id == note_id))

        await self._run("delete", work, note_id)

    async def list_by_created_at_desc(self) -> List[Note]:
        async def work(session: AsyncSession) -> List[Note]:
            result = await session.execute(
                select(NoteRow).order_by(NoteRow.created_at.desc(), NoteRow.id.asc())
            )
            return [row.to_domain() for row in result.scalars().all()]

        return await self._run("list", work)

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def create_schema(self) -> None:
        """Create missing tables (development/tests; production uses Alembic)."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ensured")

    async def ping(self) -> bool:
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Storage ping failed: %s", type(e).__name__)
            return False

    async def close(self) -> None:
        await self._engine.dispose()
