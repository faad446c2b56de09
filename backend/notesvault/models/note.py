"""
NotesVault Backend: Note Models
===============================

What:  The Note domain record and its SQLAlchemy table mapping.
How:   `Note` is an immutable dataclass passed between the service and any
       repository. `NoteRow` maps it onto the `notes` table; only
       SqlNoteRepository ever sees a NoteRow.

Table Design:
    - id: 36-char UUID string assigned by NoteService (never by the database)
    - content: TEXT, already trimmed and non-blank when it gets here
    - created_at: UTC with timezone, written once at creation

    Index on created_at DESC serves the only list query
    (ORDER BY created_at DESC, id ASC).
"""

import dataclasses
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from notesvault.database import Base


def ensure_utc(value: datetime) -> datetime:
    """Return `value` as an aware UTC datetime; naive values are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class Note:
    """
    A single persisted note.

    Lifecycle:
        1. Built by NoteService.create() with a fresh id and created_at
        2. Replaced by NoteService.update() with new content only
        3. Removed by NoteService.delete_by_id()
    """

    id: str
    content: str
    created_at: datetime

    def with_content(self, content: str) -> "Note":
        """Copy of this note with `content` replaced; id and created_at are kept."""
        return dataclasses.replace(self, content=content)


class NoteRow(Base):
    """ORM mapping of the `notes` table."""

    __tablename__ = "notes"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="Note identifier (UUID string) assigned by the service",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Trimmed, non-blank note text",
    )

    # SQLite stores this without an offset; ensure_utc() restores it on read.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="When this note was created (UTC)",
    )

    __table_args__ = (
        Index("idx_notes_created_at", created_at.desc()),
    )

    @classmethod
    def from_domain(cls, note: Note) -> "NoteRow":
        return cls(id=note.id, content=note.content, created_at=ensure_utc(note.created_at))

    def to_domain(self) -> Note:
        return Note(id=self.id, content=self.content, created_at=ensure_utc(self.created_at))

    def __repr__(self) -> str:
        return f"<NoteRow(id={self.id}, created_at='{self.created_at}')>"
