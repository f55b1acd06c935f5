"""
NoteCache: Test Configuration (conftest.py)
===========================================

What:  Shared pytest fixtures for the test suite.

Fixture Hierarchy (all function-scoped):
    ├── cache_dir: Fresh temporary cache directory
    ├── settings: Settings pointing at cache_dir
    ├── file_repository: FileNoteRepository over cache_dir
    ├── memory_repository: Empty InMemoryNoteRepository
    ├── app: FastAPI app built by create_app(settings)
    └── test_client: HTTPX AsyncClient bound to `app`
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from notecache.config import Settings
from notecache.main import create_app
from notecache.services.note_repository import FileNoteRepository, InMemoryNoteRepository


@pytest.fixture
def cache_dir(tmp_path):
    """A fresh, empty cache directory for each test."""
    path = tmp_path / "cache"
    path.mkdir()
    return path


@pytest.fixture
def settings(cache_dir):
    return Settings(host="127.0.0.1", port=3000, cache_dir=str(cache_dir), log_level="WARNING")


@pytest.fixture
def file_repository(cache_dir):
    return FileNoteRepository(str(cache_dir))


@pytest.fixture
def memory_repository():
    return InMemoryNoteRepository()


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed straight into the ASGI app (no server, no lifespan).

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/notes")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
