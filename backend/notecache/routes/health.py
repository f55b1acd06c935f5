"""
NoteCache: Health Check Route
=============================

What:  Health check endpoint for monitoring and process supervisors.
How:   Checks that the cache directory exists and is writable.

Status levels:
    - healthy:   cache directory present and writable (HTTP 200)
    - unhealthy: cache directory missing or read-only (HTTP 503)

The in-memory backend has no directory to probe and always reports healthy.
"""

import logging
import os
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from notecache import __version__
from notecache.config import Settings
from notecache.deps import get_app_settings
from notecache.schemas.note import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


def probe_cache_dir(cache_dir: str) -> str:
    """Return 'writable', 'read_only' or 'missing' for the cache directory."""
    if not os.path.isdir(cache_dir):
        return "missing"
    if not os.access(cache_dir, os.W_OK | os.X_OK):
        return "read_only"
    return "writable"


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Cache directory unusable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(settings: Settings = Depends(get_app_settings)):
    if settings.storage_backend == "memory":
        cache_status = "in_memory"
    else:
        cache_status = probe_cache_dir(settings.cache_dir)

    healthy = cache_status in ("writable", "in_memory")
    if not healthy:
        logger.warning("Health check: cache directory %s is %s", settings.cache_dir, cache_status)

    body = HealthResponse(
        status="healthy" if healthy else "unhealthy",
        version=__version__,
        storage_backend=settings.storage_backend,
        cache_dir=cache_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    return JSONResponse(status_code=200 if healthy else 503, content=body.model_dump())
