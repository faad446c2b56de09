"""
NotesVault Backend: Error Response Rendering
============================================

What:  Single mapping from ErrorKind to HTTP status, and the renderer that
       turns any NotesVaultError into `{"error": message}`.
Who:   Used by the notes routes (for returned Outcome errors) and by the
       global exception handlers (for raised storage errors).
"""

import logging
from typing import Dict

from fastapi.responses import JSONResponse

from notesvault.exceptions import ErrorKind, NotesVaultError
from notesvault.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.INVALID_CONTENT: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.STORAGE_UNAVAILABLE: 503,
}


def error_body(message: str) -> Dict[str, str]:
    return {"error": message}


def error_response(error: NotesVaultError) -> JSONResponse:
    """
    Render a classified error.

    Only `error.message` reaches the client; `error.context` goes to the log.
    """
    status_code = STATUS_BY_KIND.get(error.kind, 500)
    rid = request_id_var.get("")
    if status_code >= 500:
        logger.error("[%s] %s: %s | Context: %s", rid, error.kind.value, error.message, error.context)
    else:
        logger.warning("[%s] %s: %s", rid, error.kind.value, error.message)

    headers = {"Retry-After": "5"} if status_code == 503 else None
    return JSONResponse(status_code=status_code, content=error_body(error.message), headers=headers)
