"""
NoteCache: FastAPI Dependencies
===============================

What:  Dependency providers shared by route handlers.
How:   create_app() stores the configured NoteService and Settings on
       app.state; these functions hand them to routes via Depends().
"""

from fastapi import Request

from notecache.config import Settings
from notecache.services.note_service import NoteService


def get_note_service(request: Request) -> NoteService:
    """Return the NoteService bound to the running application."""
    return request.app.state.note_service


def get_app_settings(request: Request) -> Settings:
    """Return the Settings the application was created with."""
    return request.app.state.settings
