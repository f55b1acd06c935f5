"""
NoteCache: Note Service (Business Logic)
========================================

What:  The five note operations behind the HTTP routes.
How:   Delegates storage to a NoteRepository and applies the request rules:
       existence is checked before the body, required fields are checked for
       presence, and unexpected errors become NoteStorageError.
Who:   Called by route handlers; calls the repository.

Operation summary:
    get_note(name)              → text          | NotFoundError
    update_note(name, text)     → None          | NotFoundError, BadRequestError
    delete_note(name)           → None          | NotFoundError
    list_notes()                → [Note, ...]   | NoteStorageError
    create_note(name, text)     → None          | BadRequestError, ConflictError, NoteStorageError
"""

import logging
from typing import List, Optional

from notecache.exceptions import (
    BadRequestError,
    NoteCacheError,
    NoteStorageError,
    NotFoundError,
)
from notecache.schemas.note import Note
from notecache.services.note_repository import NoteRepository

logger = logging.getLogger(__name__)


class NoteService:
    """
    Business logic layer for note operations.

    NoteService keeps no state of its own beyond the repository handle;
    every call is a single independent existence-check → action step.
    """

    def __init__(self, repository: NoteRepository):
        self.repository = repository

    async def get_note(self, name: str) -> str:
        """
        Return the text of note `name`.

        Raises:
            NotFoundError: No regular file called `name` in the cache directory (→ 404)
        """
        return await self.repository.get(name)

    async def update_note(self, name: str, text: Optional[str]) -> None:
        """
        Replace the whole text of an existing note.

        The note must exist before the body is looked at, so an update of a
        missing note is 404 even when `text` is also missing.

        Raises:
            NotFoundError: Note does not exist (→ 404)
            BadRequestError: `text` was absent or null (→ 400)
        """
        if not await self.repository.exists(name):
            raise NotFoundError(name=name)
        if text is None:
            raise BadRequestError(message="Text is required", field="text")

        await self.repository.put(name, text)
        logger.info("Note updated: %s (%d chars)", name, len(text))

    async def delete_note(self, name: str) -> None:
        """
        Remove note `name`. Irreversible.

        Raises:
            NotFoundError: Note does not exist (→ 404)
        """
        await self.repository.delete(name)
        logger.info("Note deleted: %s", name)

    async def list_notes(self) -> List[Note]:
        """
        Return every note with its full text.

        Order is whatever the repository enumerates and is not guaranteed to
        be stable or sorted.
        """
        notes = await self.repository.list()
        logger.debug("Listed %d notes", len(notes))
        return notes

    async def create_note(self, name: Optional[str], text: Optional[str]) -> None:
        """
        Create a new note, failing if the name is taken.

        Raises:
            BadRequestError: note_name missing/empty or note missing (→ 400)
            ConflictError: A note (or any entry) already exists at that name (→ 400)
            NoteStorageError: The write itself failed (→ 500, detail logged only)
        """
        if not name:
            raise BadRequestError(message="Note name is required", field="note_name")
        if text is None:
            raise BadRequestError(message="Note text is required", field="note")

        try:
            await self.repository.create_if_absent(name, text)
        except NoteCacheError:
            raise
        except Exception as e:
            logger.error("Error writing note %s: %s", name, str(e), exc_info=True)
            raise NoteStorageError(
                message="Error creating note",
                context={"name": name, "error_type": type(e).__name__},
            )
        logger.info("Note created: %s", name)
