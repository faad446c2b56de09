"""
NotesVault Backend: Note Service (Note Lifecycle)
=================================================

What:  Decides what becomes a persisted note: normalization, validation,
       id/timestamp assignment, and the order of storage calls.
How:   Stateless orchestrator over an injected NoteRepository. Every
       operation returns an Outcome; client errors (InvalidContentError,
       NotFoundError) are values, storage errors propagate as raised.
Who:   Built once by the application factory; called by the notes routes.

Operation Flow:
    create:  normalize → validate → assign id + created_at → put_or_update
    get:     get_by_id → NotFound if absent
    list:    list_by_created_at_desc
    update:  normalize → validate → get_by_id → NotFound | replace content → put_or_update
    delete:  exists → NotFound | delete

Ordering contracts:
    - update validates before it looks anything up; a blank update never
      reaches the repository
    - update never writes without a successful read first
    - delete checks existence first; deleting an unknown id is a NotFound,
      never a silent no-op

Concurrency:
    Holds no per-request state and takes no locks. Two concurrent updates of
    the same note both succeed and the later write wins.
"""

import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional

from notesvault.exceptions import NotFoundError
from notesvault.models.note import Note
from notesvault.repositories.base import NoteRepository
from notesvault.services.outcome import Outcome
from notesvault.services.validation import check_content, normalize_content


def _new_note_id() -> str:
    return str(uuid.uuid4())


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class NoteService:
    """
    Business logic layer for note operations.

    Args:
        repository: the storage collaborator every operation delegates to
        id_factory: returns a fresh, globally unique note id (UUID4 by default)
        clock: returns the current aware UTC time
    """

    def __init__(
        self,
        repository: NoteRepository,
        id_factory: Optional[Callable[[], str]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.repository = repository
        self._id_factory = id_factory or _new_note_id
        self._clock = clock or _utc_now

    async def create(self, raw_content: Optional[str]) -> Outcome[Note]:
        """
        Create and store a new note.

        Side effects: exactly one put_or_update on success; nothing on
        InvalidContentError.
        """
        content = normalize_content(raw_content)
        invalid = check_content(content)
        if invalid is not None:
            return Outcome.failure(invalid)

        note = Note(id=self._id_factory(), content=content, created_at=self._clock())
        stored = await self.repository.put_or_update(note)
        return Outcome.success(stored)

    async def get_by_id(self, note_id: str) -> Outcome[Note]:
        note = await self.repository.get_by_id(note_id)
        if note is None:
            return Outcome.failure(NotFoundError(note_id))
        return Outcome.success(note)

    async def list(self) -> Outcome[List[Note]]:
        """All notes, newest first. Each call re-queries the repository."""
        notes = await self.repository.list_by_created_at_desc()
        return Outcome.success(list(notes))

    async def update(self, note_id: str, raw_content: Optional[str]) -> Outcome[Note]:
        """
        Replace the content of an existing note.

        id and created_at are carried over from the stored note unchanged.

        Side effects: zero or one read, then zero or one write.
        """
        content = normalize_content(raw_content)
        invalid = check_content(content)
        if invalid is not None:
            return Outcome.failure(invalid)

        existing = await self.repository.get_by_id(note_id)
        if existing is None:
            return Outcome.failure(NotFoundError(note_id))

        stored = await self.repository.put_or_update(existing.with_content(content))
        return Outcome.success(stored)

    async def delete_by_id(self, note_id: str) -> Outcome[None]:
        if not await self.repository.exists(note_id):
            return Outcome.failure(NotFoundError(note_id))
        await self.repository.delete(note_id)
        return Outcome.success(None)
