"""
NotesVault Backend: Pydantic Request/Response Schemas
=====================================================

What:  Pydantic models defining the HTTP contract.
How:   FastAPI parses request bodies into these models, serializes responses
       from them, and generates the OpenAPI document.

Request bodies only enforce JSON shape (content must be a string if given).
Presence and blankness are checked explicitly: presence by the route via
`require_content()`, blankness by NoteService.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from notesvault.exceptions import InvalidContentError
from notesvault.models.note import Note


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteContentRequest(BaseModel):
    """
    Body of POST /notes and PUT /notes/{id}.

    Example:
        {"content": "buy milk"}

    Unknown fields are ignored.
    """

    content: Optional[str] = Field(default=None, description="Note text (trimmed server-side)")

    model_config = ConfigDict(extra="ignore")


def require_content(payload: NoteContentRequest) -> Optional[InvalidContentError]:
    """Request-shape check run before the service is called: `content` must be present."""
    if payload.content is None:
        return InvalidContentError()
    return None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """
    Wire representation of a note.

    Example:
        {
            "id": "3f2c0d1e-8a5b-4c6f-9e7d-1b2a3c4d5e6f",
            "content": "hello world",
            "createdAt": "2026-02-21T00:00:10Z"
        }
    """

    id: str = Field(description="Unique note identifier")
    content: str = Field(description="Trimmed note text")
    created_at: datetime = Field(
        alias="createdAt",
        description="When the note was created (UTC ISO 8601)",
    )

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_note(cls, note: Note) -> "NoteResponse":
        return cls(id=note.id, content=note.content, created_at=note.created_at)


class ErrorResponse(BaseModel):
    """
    Body of every error response.

    Example:
        {"error": "Note with ID 'does-not-exist' was not found"}
    """

    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """GET /health body, used by container health checks and load balancers."""

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    storage: str = Field(description="Storage connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since the service started")
