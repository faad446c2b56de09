"""
NotesVault Backend: Service Outcomes
====================================

What:  The value every NoteService operation returns: either a result or a
       classified client error.
How:   Callers branch on `outcome.ok`; on failure `outcome.error.kind` names
       the ErrorKind. Storage failures are not wrapped here: they are raised
       by the repository and propagate as exceptions.

Example:
    outcome = await service.get_by_id(note_id)
    if not outcome.ok:
        return error_response(outcome.error)
    note = outcome.value
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from notesvault.exceptions import NotesVaultError

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    value: Optional[T] = None
    error: Optional[NotesVaultError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: NotesVaultError) -> "Outcome[T]":
        return cls(error=error)
