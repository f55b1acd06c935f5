"""
NoteCache: Notes Route Handlers
===============================

What:  GET/PUT/DELETE /notes/{note_name} and GET /notes.
How:   Extracts the path parameter and body, delegates to NoteService,
       returns plain text (single note, confirmations) or JSON (listing).
Who:   Called by API clients; also documented at /docs.

Errors raised by the service (NotFoundError, BadRequestError) are turned into
responses by the global handlers in main.py, so these handlers contain no
try/except.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import PlainTextResponse

from notecache.deps import get_note_service
from notecache.schemas.note import ErrorResponse, Note, NoteUpdate
from notecache.services.note_service import NoteService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notes", tags=["Notes"])


@router.get(
    "/{note_name}",
    response_class=PlainTextResponse,
    responses={
        200: {"description": "Note text", "content": {"text/plain": {}}},
        404: {"description": "Note not found", "model": ErrorResponse},
    },
    summary="Get the content of a note",
)
async def get_note(
    note_name: str,
    service: NoteService = Depends(get_note_service),
) -> PlainTextResponse:
    text = await service.get_note(note_name)
    return PlainTextResponse(text)


@router.put(
    "/{note_name}",
    response_class=PlainTextResponse,
    responses={
        200: {"description": "Note updated successfully", "content": {"text/plain": {}}},
        400: {"description": "Bad request (missing text)", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
    },
    summary="Update the content of a note",
)
async def update_note(
    note_name: str,
    payload: Optional[NoteUpdate] = Body(default=None),
    service: NoteService = Depends(get_note_service),
) -> PlainTextResponse:
    """
    Overwrite a note with the `text` field of the JSON body.

    A missing body is treated like a body without `text`: the existence check
    still runs first, then the missing text is reported as 400.
    """
    text = payload.text if payload is not None else None
    await service.update_note(note_name, text)
    return PlainTextResponse("Note updated")


@router.delete(
    "/{note_name}",
    response_class=PlainTextResponse,
    responses={
        200: {"description": "Note deleted successfully", "content": {"text/plain": {}}},
        404: {"description": "Note not found", "model": ErrorResponse},
    },
    summary="Delete a note",
)
async def delete_note(
    note_name: str,
    service: NoteService = Depends(get_note_service),
) -> PlainTextResponse:
    await service.delete_note(note_name)
    return PlainTextResponse("Note deleted")


@router.get(
    "",
    response_model=List[Note],
    responses={
        200: {"description": "List of notes"},
        500: {"description": "Cache directory could not be read", "model": ErrorResponse},
    },
    summary="Get all notes",
    description=(
        "Returns every note in the cache directory with its full text. "
        "Subdirectories are skipped. Order is unspecified."
    ),
)
async def list_notes(
    service: NoteService = Depends(get_note_service),
) -> List[Note]:
    return await service.list_notes()
