"""
NoteCache: Application Package Initializer
==========================================

What: Plain-text note storage over HTTP, one file per note in a cache directory.
Who:  Imported by the CLI (`notecache`), by uvicorn, and by pytest.

Architecture Note:
    The service keeps the usual layered FastAPI shape:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │        NoteService (Rules)          │  ← check ordering, error translation
    ├─────────────────────────────────────┤
    │     NoteRepository (Storage)        │  ← filesystem or in-memory
    └─────────────────────────────────────┘

    Routes never touch the filesystem directly; they only see the
    repository through the service, so the storage backend can be swapped
    (filesystem for production, in-memory for tests) without route changes.
"""

__version__ = "1.0.0"
