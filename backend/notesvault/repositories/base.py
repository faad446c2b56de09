"""
NotesVault Backend: Abstract Note Repository
============================================

What:  The storage contract NoteService is written against.
How:   Concrete stores inherit from NoteRepository and implement the five
       abstract coroutines. The service never imports a concrete store; the
       application factory picks one from Settings and injects it.

Implementations:
    - SqlNoteRepository: async SQLAlchemy (PostgreSQL in production, SQLite locally)
    - InMemoryNoteRepository: process-local dict, for development and tests

Contract shared by every implementation:
    - Per-key operations are atomic; no operation touches more than one note
    - No validation: whatever Note the service passes in is stored as-is
    - Failures are raised as StorageUnavailableError, never as driver errors
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from notesvault.models.note import Note


class NoteRepository(ABC):
    """Durable record store for notes, keyed by note id."""

    @abstractmethod
    async def put_or_update(self, note: Note) -> Note:
        """
        Insert `note`, or overwrite the stored note with the same id.

        Returns:
            The note as stored (equal to the input unless the store
            canonicalizes a field, e.g. timestamp precision).
        """
        ...

    @abstractmethod
    async def get_by_id(self, note_id: str) -> Optional[Note]:
        """Return the stored note, or None when the id is unknown."""
        ...

    @abstractmethod
    async def exists(self, note_id: str) -> bool:
        ...

    @abstractmethod
    async def delete(self, note_id: str) -> None:
        """Remove the note; unknown ids are a no-op at this layer."""
        ...

    @abstractmethod
    async def list_by_created_at_desc(self) -> List[Note]:
        """
        Every stored note, newest first.

        Equal created_at values are ordered by ascending id so that the
        result is deterministic for a given store state.
        """
        ...

    async def ping(self) -> bool:
        """Lightweight reachability probe used by GET /health."""
        return True

    async def close(self) -> None:
        """Release connections or other resources held by the store."""
        return None
