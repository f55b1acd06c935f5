"""
NoteCache: Custom Exception Hierarchy
=====================================

What:  Application-specific exceptions for each failure a note operation can hit.
How:   Each exception carries a user-facing message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the matching status code.
Who:   Raised by the repository and service layers; caught by global handlers.

Exception Hierarchy:
    NoteCacheError (base)
    ├── BadRequestError    → 400 Bad Request (missing field, rejected name)
    ├── ConflictError      → 400 Bad Request (note already exists)
    ├── NotFoundError      → 404 Not Found
    └── NoteStorageError   → 500 Internal Server Error (I/O failure)

ConflictError maps to 400, not 409: clients of this API have always
received 400 for "Note already exists".
"""

from typing import Any, Dict, Optional


class NoteCacheError(Exception):
    """
    Base exception for all NoteCache application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class BadRequestError(NoteCacheError):
    """
    Raised when the client omitted a required field or sent an unusable name.

    When:    PUT without `text`, POST /write without `note_name` or `note`,
             or a name rejected by the confine_names setting.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Bad request",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class ConflictError(NoteCacheError):
    """
    Raised when creating a note whose name is already taken.

    When:    POST /write with a note_name that already exists in the cache directory.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if name is not None:
            ctx["name"] = name
        super().__init__(message="Note already exists", context=ctx)
        self.name = name


class NotFoundError(NoteCacheError):
    """
    Raised when a requested note does not exist.

    When:    GET, PUT or DELETE /notes/{name} where no regular file named
             `name` sits in the cache directory.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if name is not None:
            ctx["name"] = name
        super().__init__(message="Not found", context=ctx)
        self.name = name


class NoteStorageError(NoteCacheError):
    """
    Raised when a file system operation on the cache directory fails.

    When:    Disk full, permission denied, I/O error while writing a note.
    HTTP:    500 Internal Server Error

    The response never includes the OS error or the path; both go to the
    server log through `context`.
    """

    def __init__(
        self,
        message: str = "Error creating note",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
