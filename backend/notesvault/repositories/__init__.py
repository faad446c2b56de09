"""
NotesVault Backend: Storage Layer
=================================

Repository Inventory:
    - NoteRepository (abstract): contract used by NoteService
    - SqlNoteRepository: async SQLAlchemy implementation
    - InMemoryNoteRepository: dict-backed implementation

`build_repository()` picks the implementation named by
Settings.storage_backend; the application factory calls it once at startup.
"""

from notesvault.config import Settings
from notesvault.repositories.base import NoteRepository
from notesvault.repositories.memory import InMemoryNoteRepository
from notesvault.repositories.sql import SqlNoteRepository

__all__ = [
    "NoteRepository",
    "InMemoryNoteRepository",
    "SqlNoteRepository",
    "build_repository",
]


def build_repository(settings: Settings) -> NoteRepository:
    if settings.storage_backend == "memory":
        return InMemoryNoteRepository()
    return SqlNoteRepository.from_settings(settings)
