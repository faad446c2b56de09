"""
NotesVault Backend: Error Taxonomy
==================================

What:  The three error kinds the note lifecycle can produce, as one hierarchy.
How:   Each error carries a client-safe message, a `kind` tag, and an optional
       context dict that is logged but never returned to the client.
Who:   Produced by NoteService and the repositories; rendered by the
       transport layer through `routes.responses.error_response()`.

Error Hierarchy:
    NotesVaultError (base)
    ├── InvalidContentError      → 400 Bad Request   (returned in an Outcome)
    ├── NotFoundError            → 404 Not Found     (returned in an Outcome)
    └── StorageUnavailableError  → 503 Unavailable   (raised by repositories)

Client errors travel as values: NoteService hands them back inside an
`Outcome` and the route picks a status code from `error.kind`. Storage
failures are raised by the storage layer and pass through the service
untouched until the global exception handler renders them.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Machine-readable classification used to pick an HTTP status code."""

    INVALID_CONTENT = "invalid_content"
    NOT_FOUND = "not_found"
    STORAGE_UNAVAILABLE = "storage_unavailable"


class NotesVaultError(Exception):
    """
    Base class for all NotesVault application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
        kind:     ErrorKind tag, fixed per subclass
    """

    kind: ErrorKind = ErrorKind.STORAGE_UNAVAILABLE

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r})"


class InvalidContentError(NotesVaultError):
    """
    Note content was absent or blank after normalization.

    HTTP: 400 Bad Request. Never retried; the client has to send text.
    """

    kind = ErrorKind.INVALID_CONTENT

    def __init__(
        self,
        message: str = "content must not be blank",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx.setdefault("field", "content")
        super().__init__(message=message, context=ctx)


class NotFoundError(NotesVaultError):
    """
    The referenced note id does not exist in storage.

    HTTP: 404 Not Found. The message always contains the requested id.
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        note_id: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["note_id"] = note_id
        super().__init__(message=f"Note with ID '{note_id}' was not found", context=ctx)
        self.note_id = note_id


class StorageUnavailableError(NotesVaultError):
    """
    The storage layer could not complete an operation (after its own retries).

    HTTP: 503 Service Unavailable. The message is always generic; the driver
    error type and the operation name only go to the server log via context.
    """

    kind = ErrorKind.STORAGE_UNAVAILABLE

    def __init__(
        self,
        message: str = "Note storage is temporarily unavailable. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
