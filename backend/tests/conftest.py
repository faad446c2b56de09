"""
NotesVault Backend: Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── test_settings:      isolated Settings (memory storage, known credentials)
    ├── mock_repository:    AsyncMock NoteRepository (service unit tests)
    ├── memory_repository:  empty InMemoryNoteRepository
    ├── sql_repository:     SqlNoteRepository on a throwaway SQLite file
    ├── app:                create_app() wired to memory_repository
    ├── test_client:        HTTPX AsyncClient with valid Basic credentials
    └── anonymous_client:   HTTPX AsyncClient without credentials
"""

import os

# Set before any notesvault import: notesvault.main builds its module-level
# app (and engine) from the environment at import time.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_notesvault.db"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timezone  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402

from notesvault.config import Settings  # noqa: E402
from notesvault.main import create_app  # noqa: E402
from notesvault.models.note import Note  # noqa: E402
from notesvault.repositories import (  # noqa: E402
    InMemoryNoteRepository,
    NoteRepository,
    SqlNoteRepository,
)

TEST_USERNAME = "tester"
TEST_PASSWORD = "s3cret-pass"

OLDER = datetime(2026, 2, 21, 0, 0, 0, tzinfo=timezone.utc)
NEWER = datetime(2026, 2, 21, 0, 0, 10, tzinfo=timezone.utc)


def make_note(note_id: str, content: str = "some text", created_at: datetime = OLDER) -> Note:
    return Note(id=note_id, content=content, created_at=created_at)


@pytest.fixture
def test_settings():
    """Settings that ignore .env and the process environment's credentials."""
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite://",
        storage_backend="memory",
        auth_username=TEST_USERNAME,
        auth_password=TEST_PASSWORD,
        log_level="WARNING",
    )


@pytest.fixture
def mock_repository():
    """
    Provides a mock NoteRepository.

    put_or_update echoes the note it was given, like the real stores do.

    Usage:
        async def test_get(mock_repository):
            mock_repository.get_by_id.return_value = make_note("1")
    """
    repository = AsyncMock(spec=NoteRepository)
    repository.put_or_update.side_effect = lambda note: note
    repository.get_by_id.return_value = None
    repository.exists.return_value = False
    repository.list_by_created_at_desc.return_value = []
    return repository


@pytest.fixture
def memory_repository():
    return InMemoryNoteRepository()


@pytest_asyncio.fixture
async def sql_repository(tmp_path):
    """SqlNoteRepository on a fresh SQLite file, schema created, no retries."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}")
    repository = SqlNoteRepository(
        engine,
        timeout=5.0,
        retry_attempts=1,
        retry_min_wait=0,
        retry_max_wait=0,
    )
    await repository.create_schema()
    yield repository
    await repository.close()


@pytest.fixture
def app(test_settings, memory_repository):
    return create_app(test_settings, memory_repository)


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/notes")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        auth=(TEST_USERNAME, TEST_PASSWORD),
    ) as client:
        yield client


@pytest_asyncio.fixture
async def anonymous_client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
