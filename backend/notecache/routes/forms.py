"""
NoteCache: Form Upload Routes
=============================

What:  POST /write (create a note from form fields) and GET /UploadForm.html.
How:   /write reads `note_name` and `note` from an
       application/x-www-form-urlencoded or multipart/form-data body and
       delegates to NoteService.create_note(). The HTML page is a static
       asset shipped inside the package.
Who:   Browsers submitting the upload form; scripts posting form data.

Request Flow (POST /write):
    1. FastAPI parses the form body (python-multipart)
    2. Missing note_name / note → 400 (an empty note is kept as "")
    3. Exclusive create in the cache directory
    4. 201 "Note created" | 400 "Note already exists" | 500 "Error creating note"
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse, PlainTextResponse

from notecache.deps import get_note_service
from notecache.exceptions import NotFoundError
from notecache.schemas.note import ErrorResponse
from notecache.services.note_service import NoteService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Upload"])

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"
UPLOAD_FORM = STATIC_DIR / "UploadForm.html"

WRITE_FORM_SCHEMA = {
    "type": "object",
    "properties": {
        "note_name": {"type": "string", "description": "Name of the new note"},
        "note": {"type": "string", "description": "Content of the new note"},
    },
    "required": ["note_name", "note"],
}


def _form_text(form, field: str) -> Optional[str]:
    """Return a text form field, or None when it is absent or a file part."""
    value = form.get(field)
    return value if isinstance(value, str) else None


@router.post(
    "/write",
    status_code=201,
    response_class=PlainTextResponse,
    responses={
        201: {"description": "Note created successfully", "content": {"text/plain": {}}},
        400: {"description": "Note already exists, or a field is missing", "model": ErrorResponse},
        500: {"description": "Error creating note", "model": ErrorResponse},
    },
    summary="Create a new note",
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/x-www-form-urlencoded": {"schema": WRITE_FORM_SCHEMA},
                "multipart/form-data": {"schema": WRITE_FORM_SCHEMA},
            },
        }
    },
)
async def write_note(
    request: Request,
    service: NoteService = Depends(get_note_service),
) -> PlainTextResponse:
    """
    Create a note from form fields.

    Error responses (handled by global exception handlers):
        HTTP 400: note_name/note missing (BadRequestError) or name taken (ConflictError)
        HTTP 500: write failed (NoteStorageError); the OS error is only logged
    """
    form = await request.form()
    await service.create_note(_form_text(form, "note_name"), _form_text(form, "note"))
    return PlainTextResponse("Note created", status_code=201)


@router.get(
    "/UploadForm.html",
    response_class=FileResponse,
    responses={
        200: {"description": "HTML form retrieved successfully", "content": {"text/html": {}}},
        404: {"description": "HTML file not found", "model": ErrorResponse},
    },
    summary="Serve the upload form HTML file",
)
async def upload_form() -> FileResponse:
    if not UPLOAD_FORM.is_file():
        logger.error("Upload form asset missing at %s", UPLOAD_FORM)
        raise NotFoundError(name=UPLOAD_FORM.name)
    return FileResponse(path=str(UPLOAD_FORM), media_type="text/html")
