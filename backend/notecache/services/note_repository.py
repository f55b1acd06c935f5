"""
NoteCache: Note Repository (Storage Layer)
==========================================

What:  The storage contract for notes plus two implementations.
How:   NoteRepository is an abstract base class; the service layer talks only
       to that interface.
Who:   Built by create_app() from settings.storage_backend; used by NoteService.

Implementations:
    - FileNoteRepository:     one file per note, directly under the cache directory
    - InMemoryNoteRepository: a dict keyed by note name (tests, embedding)

Filesystem layout:
    cache/
    ├── groceries        ← note "groceries", content = note text
    ├── todo             ← note "todo"
    └── archive/         ← directory: never a note, skipped by list()

Concurrency:
    create_if_absent() is a single exclusive-create open ("x" mode), so two
    racing creates of the same name cannot both succeed. put() and delete()
    keep the existence-check-then-act sequence: concurrent writers to one
    note race and the last completed write wins.
"""

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

import aiofiles
import aiofiles.os

from notecache.exceptions import (
    BadRequestError,
    ConflictError,
    NoteStorageError,
    NotFoundError,
)
from notecache.schemas.note import Note

logger = logging.getLogger(__name__)


class NoteRepository(ABC):
    """
    Abstract key-value store of notes keyed by name.

    Contract:
        - exists() is True only for a stored note
        - get(), put() and delete() raise NotFoundError for an unknown name
        - put() replaces the whole text
        - create_if_absent() raises ConflictError when the name is taken
        - list() returns every note; order is unspecified
        - Unexpected storage failures raise NoteStorageError
    """

    @abstractmethod
    async def exists(self, name: str) -> bool:
        """Return True if a note called `name` is stored."""

    @abstractmethod
    async def get(self, name: str) -> str:
        """Return the full text of note `name`."""

    @abstractmethod
    async def put(self, name: str, text: str) -> None:
        """Overwrite the text of existing note `name`."""

    @abstractmethod
    async def delete(self, name: str) -> None:
        """Remove note `name`."""

    @abstractmethod
    async def list(self) -> List[Note]:
        """Return all stored notes with their text."""

    @abstractmethod
    async def create_if_absent(self, name: str, text: str) -> None:
        """Store a new note, failing if `name` is already taken."""


class FileNoteRepository(NoteRepository):
    """
    Notes stored as plain files directly under a cache directory.

    Paths are built with os.path.join(cache_dir, name) and the name is not
    sanitized. With confine_names=True, a name is rejected unless its
    resolved path is a direct child of the cache directory (blocks "..",
    absolute paths and separators).

    A note exists only while a regular file sits at its path. Directories
    and symlinks are never notes.
    """

    def __init__(self, cache_dir: str, confine_names: bool = False):
        """
        Args:
            cache_dir: Root directory holding note files. Not created here;
                       see ensure_cache_dir() in main.py.
            confine_names: Reject names that escape the cache directory.
        """
        self.cache_dir = cache_dir
        self.confine_names = confine_names
        logger.info("FileNoteRepository initialized with cache_dir=%s", cache_dir)

    def _note_path(self, name: str) -> str:
        path = os.path.join(self.cache_dir, name)
        if self.confine_names:
            root = Path(self.cache_dir).resolve()
            if not name or Path(path).resolve().parent != root:
                raise BadRequestError(
                    message="Invalid note name",
                    field="note_name",
                    context={"name": name},
                )
        return path

    async def _is_note_file(self, path: str) -> bool:
        # lstat semantics: a symlink is not a note, even if it points at a file
        if await aiofiles.os.path.islink(path):
            return False
        return await aiofiles.os.path.isfile(path)

    async def _read_text(self, path: str) -> str:
        # Undecodable bytes read as U+FFFD
        async with aiofiles.open(path, "r", encoding="utf-8", errors="replace", newline="") as f:
            return await f.read()

    async def _require(self, name: str) -> str:
        path = self._note_path(name)
        if not await self._is_note_file(path):
            raise NotFoundError(name=name)
        return path

    async def exists(self, name: str) -> bool:
        return await self._is_note_file(self._note_path(name))

    async def get(self, name: str) -> str:
        path = await self._require(name)
        try:
            return await self._read_text(path)
        except FileNotFoundError:
            # Removed between the existence check and the open
            raise NotFoundError(name=name)
        except OSError as e:
            logger.error("Failed to read note %s: %s", path, str(e))
            raise NoteStorageError(
                message="Error reading note",
                context={"path": path, "os_error": str(e)},
            )

    async def put(self, name: str, text: str) -> None:
        path = await self._require(name)
        try:
            async with aiofiles.open(path, "w", encoding="utf-8", newline="") as f:
                await f.write(text)
        except OSError as e:
            logger.error("Failed to update note %s: %s", path, str(e))
            raise NoteStorageError(
                message="Error updating note",
                context={"path": path, "os_error": str(e)},
            )

    async def delete(self, name: str) -> None:
        path = await self._require(name)
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            raise NotFoundError(name=name)
        except OSError as e:
            logger.error("Failed to delete note %s: %s", path, str(e))
            raise NoteStorageError(
                message="Error deleting note",
                context={"path": path, "os_error": str(e)},
            )

    async def list(self) -> List[Note]:
        """
        Read every note in the cache directory.

        Each call reads the full content of every file. Entries that are not
        regular files are logged and left out. Order follows os.listdir().
        """
        try:
            entries = await aiofiles.os.listdir(self.cache_dir)
        except OSError as e:
            logger.error("Failed to list cache directory %s: %s", self.cache_dir, str(e))
            raise NoteStorageError(
                message="Error listing notes",
                context={"path": self.cache_dir, "os_error": str(e)},
            )

        notes: List[Note] = []
        for entry in entries:
            path = os.path.join(self.cache_dir, entry)
            if not await self._is_note_file(path):
                logger.info("Skipping directory: %s", entry)
                continue
            try:
                text = await self._read_text(path)
            except FileNotFoundError:
                # Deleted while listing
                continue
            except OSError as e:
                logger.error("Failed to read note %s: %s", path, str(e))
                raise NoteStorageError(
                    message="Error listing notes",
                    context={"path": path, "os_error": str(e)},
                )
            notes.append(Note(name=entry, text=text))
        return notes

    async def create_if_absent(self, name: str, text: str) -> None:
        path = self._note_path(name)
        try:
            # "x" fails with FileExistsError if anything already sits at path
            async with aiofiles.open(path, "x", encoding="utf-8", newline="") as f:
                await f.write(text)
        except FileExistsError:
            raise ConflictError(name=name)
        except OSError as e:
            logger.error("Error writing note %s: %s", path, str(e))
            raise NoteStorageError(
                message="Error creating note",
                context={"path": path, "os_error": str(e)},
            )
        logger.info("Note stored: %s (%d chars)", name, len(text))


class InMemoryNoteRepository(NoteRepository):
    """
    Dict-backed repository with the same contract as FileNoteRepository.

    Nothing is persisted. Listing returns notes in insertion order.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._notes: Dict[str, str] = dict(initial or {})

    async def exists(self, name: str) -> bool:
        return name in self._notes

    async def get(self, name: str) -> str:
        try:
            return self._notes[name]
        except KeyError:
            raise NotFoundError(name=name)

    async def put(self, name: str, text: str) -> None:
        if name not in self._notes:
            raise NotFoundError(name=name)
        self._notes[name] = text

    async def delete(self, name: str) -> None:
        try:
            del self._notes[name]
        except KeyError:
            raise NotFoundError(name=name)

    async def list(self) -> List[Note]:
        return [Note(name=name, text=text) for name, text in self._notes.items()]

    async def create_if_absent(self, name: str, text: str) -> None:
        # No await between the check and the insert, so this is atomic on the event loop
        if name in self._notes:
            raise ConflictError(name=name)
        self._notes[name] = text
