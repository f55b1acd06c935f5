"""
NoteCache: FastAPI Application Factory
======================================

What:  Creates and configures the FastAPI application instance.
How:   create_app(settings) wires the storage backend, middleware, exception
       handlers and routers. There is no module-level app because host, port
       and cache_dir are required; run through the CLI, or with
       `uvicorn --factory notecache.main:create_app` and NOTECACHE_* variables.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging                  │
    │                                                     │
    │  Routes:                                            │
    │   /notes, /notes/{name}   /write   /UploadForm.html │
    │   /health                 /docs    /openapi.json    │
    │                                                     │
    │  Exception Handlers:                                │
    │   BadRequest→400  Conflict→400  NotFound→404        │
    │   NoteStorage→500 Exception→500                     │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, make sure the cache directory exists
    Shutdown: log only; nothing is pooled or held open between requests
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from notecache import __version__
from notecache.config import Settings, get_settings
from notecache.exceptions import (
    BadRequestError,
    ConflictError,
    NoteCacheError,
    NoteStorageError,
    NotFoundError,
)
from notecache.middleware.logging import RequestLoggingMiddleware
from notecache.middleware.request_id import RequestIDMiddleware, request_id_var
from notecache.routes import forms, health, notes
from notecache.services.note_repository import (
    FileNoteRepository,
    InMemoryNoteRepository,
    NoteRepository,
)
from notecache.services.note_service import NoteService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output: stdout
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # uvicorn's own access log duplicates RequestLoggingMiddleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Cache Directory Bootstrap
# ══════════════════════════════════════════════════════════════════════════

def ensure_cache_dir(cache_dir: str) -> bool:
    """
    Create the cache directory (and parents) if it is missing.

    Returns True when the directory was created, False when it already existed.
    Raises OSError if it cannot be created.
    """
    path = Path(cache_dir).resolve()
    if path.is_dir():
        logger.info("Cache directory already exists at: %s", path)
        return False
    path.mkdir(parents=True, exist_ok=True)
    logger.info("Cache directory created at: %s", path)
    return True


def build_repository(settings: Settings) -> NoteRepository:
    """Instantiate the repository selected by settings.storage_backend."""
    if settings.storage_backend == "memory":
        return InMemoryNoteRepository()
    return FileNoteRepository(settings.cache_dir, confine_names=settings.confine_names)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings

    setup_logging(settings.log_level)
    logger.info(
        "Host: %s, Port: %d, Cache Directory: %s",
        settings.host,
        settings.port,
        settings.cache_dir,
    )
    if settings.storage_backend == "filesystem":
        ensure_cache_dir(settings.cache_dir)
    logger.info("Server is running on http://%s:%d", settings.host, settings.port)

    yield

    logger.info("NoteCache shutting down.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": message,
            "request_id": request_id_var.get(""),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP responses.

    Handler table:
        BadRequestError   → 400 bad_request
        ConflictError     → 400 conflict
        NotFoundError     → 404 not_found
        NoteStorageError  → 500 server_error (OS detail logged, not returned)
        NoteCacheError    → 500 server_error
        Exception         → 500 internal_server_error (traceback logged)
    """

    @app.exception_handler(BadRequestError)
    async def handle_bad_request(request: Request, exc: BadRequestError):
        logger.warning("[%s] Bad request: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "bad_request", exc.message)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        logger.warning("[%s] Conflict: %s already exists", request_id_var.get(""), exc.name)
        return _error_response(400, "conflict", exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, "not_found", exc.message)

    @app.exception_handler(NoteStorageError)
    async def handle_storage_error(request: Request, exc: NoteStorageError):
        logger.error(
            "[%s] Storage error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error_response(500, "server_error", exc.message)

    @app.exception_handler(NoteCacheError)
    async def handle_app_error(request: Request, exc: NoteCacheError):
        logger.error("[%s] Application error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return _error_response(500, "server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return _error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[NoteRepository] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration; read from the environment when omitted.
        repository: Storage override; built from settings when omitted.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="NoteCache API",
        description="Plain-text notes stored one file per note in a cache directory.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.note_service = NoteService(repository or build_repository(settings))

    # Last added runs first: RequestID → Logging → routes
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(notes.router)
    app.include_router(forms.router)
    app.include_router(health.router)

    return app
