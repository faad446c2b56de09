"""
NotesVault Backend: Notes Route Handlers
========================================

What:  CRUD endpoints for notes, mounted at /notes and again at /v1/notes.
How:   Parse the body, run the request-shape check, call one NoteService
       operation, and map its Outcome to a status code and JSON body.
Who:   API clients; every route sits behind HTTP Basic auth (see security.py).

Route Inventory:
    POST   /notes          → 201 + Location | 400
    GET    /notes          → 200 (newest first)
    GET    /notes/{id}     → 200 | 404
    PUT    /notes/{id}     → 200 | 400 | 404
    DELETE /notes/{id}     → 204 | 404

    Storage failures surface as 503 through the global exception handler.
"""

import logging
from typing import List, Union

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from notesvault.routes.responses import error_response
from notesvault.schemas.note import (
    ErrorResponse,
    NoteContentRequest,
    NoteResponse,
    require_content,
)
from notesvault.services.note_service import NoteService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notes", tags=["Notes"])

ERROR_RESPONSES = {
    401: {"description": "Missing or invalid credentials", "model": ErrorResponse},
    503: {"description": "Storage unavailable", "model": ErrorResponse},
}


def get_note_service(request: Request) -> NoteService:
    """Dependency returning the NoteService built by create_app()."""
    return request.app.state.note_service


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=NoteResponse,
    responses={
        400: {"description": "Content missing or blank", "model": ErrorResponse},
        **ERROR_RESPONSES,
    },
    summary="Create a note",
)
async def create_note(
    payload: NoteContentRequest,
    request: Request,
    response: Response,
    service: NoteService = Depends(get_note_service),
) -> Union[NoteResponse, JSONResponse]:
    """
    Store a new note and point the Location header at it.

    The Location path follows the prefix the request came in on
    (/notes/<id> or /v1/notes/<id>).
    """
    missing = require_content(payload)
    if missing is not None:
        return error_response(missing)

    outcome = await service.create(payload.content)
    if not outcome.ok:
        return error_response(outcome.error)

    note = outcome.value
    response.headers["Location"] = f"{request.url.path.rstrip('/')}/{note.id}"
    logger.info("Created note %s", note.id)
    return NoteResponse.from_note(note)


@router.get(
    "",
    response_model=List[NoteResponse],
    responses=ERROR_RESPONSES,
    summary="List notes, newest first",
)
async def list_notes(
    service: NoteService = Depends(get_note_service),
) -> List[NoteResponse]:
    outcome = await service.list()
    return [NoteResponse.from_note(note) for note in outcome.value]


@router.get(
    "/{note_id}",
    response_model=NoteResponse,
    responses={
        404: {"description": "Note not found", "model": ErrorResponse},
        **ERROR_RESPONSES,
    },
    summary="Get a single note by ID",
)
async def get_note(
    note_id: str,
    service: NoteService = Depends(get_note_service),
) -> Union[NoteResponse, JSONResponse]:
    outcome = await service.get_by_id(note_id)
    if not outcome.ok:
        return error_response(outcome.error)
    return NoteResponse.from_note(outcome.value)


@router.put(
    "/{note_id}",
    response_model=NoteResponse,
    responses={
        400: {"description": "Content missing or blank", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
        **ERROR_RESPONSES,
    },
    summary="Replace the content of a note",
)
async def update_note(
    note_id: str,
    payload: NoteContentRequest,
    service: NoteService = Depends(get_note_service),
) -> Union[NoteResponse, JSONResponse]:
    """
    Replace a note's content; id and createdAt never change.

    Concurrent updates are not detected: the last write to reach storage wins.
    """
    missing = require_content(payload)
    if missing is not None:
        return error_response(missing)

    outcome = await service.update(note_id, payload.content)
    if not outcome.ok:
        return error_response(outcome.error)

    logger.info("Updated note %s", note_id)
    return NoteResponse.from_note(outcome.value)


@router.delete(
    "/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        404: {"description": "Note not found", "model": ErrorResponse},
        **ERROR_RESPONSES,
    },
    summary="Delete a note",
)
async def delete_note(
    note_id: str,
    service: NoteService = Depends(get_note_service),
) -> Response:
    outcome = await service.delete_by_id(note_id)
    if not outcome.ok:
        return error_response(outcome.error)

    logger.info("Deleted note %s", note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
