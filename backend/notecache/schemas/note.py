"""
NoteCache: Pydantic Request/Response Schemas
============================================

What:  Pydantic models defining the API contract.
How:   FastAPI uses these to validate JSON bodies, serialize responses,
       and generate the OpenAPI document served at /docs.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Domain / Response Models
# ══════════════════════════════════════════════════════════════════════════


class Note(BaseModel):
    """
    A note as returned by GET /notes.

    The note has no representation outside the filesystem: `name` is the
    file name inside the cache directory and `text` is its full content.
    """
    name: str = Field(description="Note name (file name inside the cache directory)")
    text: str = Field(description="Note content")

    model_config = {"frozen": True}


NoteList = List[Note]


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteUpdate(BaseModel):
    """
    JSON body of PUT /notes/{name}.

    `text` is optional at the schema level so that a body without it reaches
    the handler: the note's existence is checked before the body, and a
    missing text is reported as 400 rather than a schema error.
    """
    text: Optional[str] = Field(default=None, description="New content for the note")


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "Not found",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    storage_backend: str = Field(description="Configured storage backend")
    cache_dir: str = Field(description="Cache directory status: writable, read_only, missing")
    uptime_seconds: float = Field(description="Seconds since service started")
