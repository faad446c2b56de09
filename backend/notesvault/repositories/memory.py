"""
NotesVault Backend: In-Memory Note Repository
=============================================

What:  Dict-backed NoteRepository living in process memory.
Who:   Selected with STORAGE_BACKEND=memory; used heavily by the test suite.

Every method body runs without an await point, so on a single event loop
each call is atomic per key. Nothing survives a restart.
"""

import dataclasses
from typing import Dict, List, Optional

from notesvault.models.note import Note, ensure_utc
from notesvault.repositories.base import NoteRepository


class InMemoryNoteRepository(NoteRepository):
    def __init__(self, notes: Optional[List[Note]] = None):
        self._notes: Dict[str, Note] = {}
        for note in notes or []:
            self._store(note)

    def _store(self, note: Note) -> Note:
        stored = dataclasses.replace(note, created_at=ensure_utc(note.created_at))
        self._notes[stored.id] = stored
        return stored

    async def put_or_update(self, note: Note) -> Note:
        return self._store(note)

    async def get_by_id(self, note_id: str) -> Optional[Note]:
        return self._notes.get(note_id)

    async def exists(self, note_id: str) -> bool:
        return note_id in self._notes

    async def delete(self, note_id: str) -> None:
        self._notes.pop(note_id, None)

    async def list_by_created_at_desc(self) -> List[Note]:
        # Two stable sorts: id ascending, then created_at descending on top
        by_id = sorted(self._notes.values(), key=lambda n: n.id)
        return sorted(by_id, key=lambda n: n.created_at, reverse=True)

    def __len__(self) -> int:
        return len(self._notes)
