"""
NoteCache: HTTP API Tests
=========================

What:  End-to-end tests of every route through the ASGI app.
How:   HTTPX AsyncClient over ASGITransport; the cache directory is a
       per-test tmp_path, so the filesystem effects can be asserted directly.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from notecache.config import Settings
from notecache.main import create_app, ensure_cache_dir
from notecache.services.note_repository import NoteRepository


async def create(client, name, text):
    return await client.post("/write", data={"note_name": name, "note": text})


class TestGetNote:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["missing", "foo.txt", "with space"])
    async def test_absent_note_is_404(self, test_client, name):
        response = await test_client.get(f"/notes/{name}")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_returns_plain_text(self, test_client, cache_dir):
        (cache_dir / "foo").write_text("hello", encoding="utf-8")
        response = await test_client.get("/notes/foo")
        assert response.status_code == 200
        assert response.text == "hello"
        assert response.headers["content-type"].startswith("text/plain")

    @pytest.mark.asyncio
    async def test_directory_is_404(self, test_client, cache_dir):
        (cache_dir / "archive").mkdir()
        response = await test_client.get("/notes/archive")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_undecodable_bytes_are_replaced(self, test_client, cache_dir):
        (cache_dir / "binary").write_bytes(b"\xffbad")
        response = await test_client.get("/notes/binary")
        assert response.status_code == 200
        assert response.text == "\ufffdbad"


class TestCreateNote:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "name,text",
        [("foo", "hello"), ("empty", ""), ("multi", "line one\nline two"), ("unicode", "naïve ✓")],
    )
    async def test_create_then_get(self, test_client, name, text):
        response = await create(test_client, name, text)
        assert response.status_code == 201
        assert response.text == "Note created"

        response = await test_client.get(f"/notes/{name}")
        assert response.status_code == 200
        assert response.text == text

    @pytest.mark.asyncio
    async def test_create_writes_file(self, test_client, cache_dir):
        await create(test_client, "groceries", "milk")
        assert (cache_dir / "groceries").read_text(encoding="utf-8") == "milk"

    @pytest.mark.asyncio
    async def test_create_multipart(self, test_client):
        response = await test_client.post(
            "/write",
            files={"note_name": (None, "foo"), "note": (None, "from the form")},
        )
        assert response.status_code == 201
        assert (await test_client.get("/notes/foo")).text == "from the form"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("encoding", ["urlencoded", "multipart"])
    async def test_empty_note_creates_empty_file(self, test_client, cache_dir, encoding):
        if encoding == "urlencoded":
            response = await create(test_client, "blank", "")
        else:
            response = await test_client.post(
                "/write", files={"note_name": (None, "blank"), "note": (None, "")}
            )

        assert response.status_code == 201
        assert (cache_dir / "blank").read_text(encoding="utf-8") == ""
        assert (await test_client.get("/notes/blank")).text == ""

    @pytest.mark.asyncio
    async def test_names_escape_cache_dir_by_default(self, test_client, cache_dir):
        response = await create(test_client, "../escape", "outside")
        assert response.status_code == 201
        assert (cache_dir.parent / "escape").read_text(encoding="utf-8") == "outside"

    @pytest.mark.asyncio
    async def test_confined_names_reject_traversal(self, cache_dir):
        settings = Settings(
            host="127.0.0.1", port=3000, cache_dir=str(cache_dir), confine_names=True
        )
        app = create_app(settings)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await create(client, "../escape", "outside")

        assert response.status_code == 400
        assert not (cache_dir.parent / "escape").exists()

    @pytest.mark.asyncio
    async def test_duplicate_is_400_and_keeps_first(self, test_client):
        assert (await create(test_client, "foo", "first")).status_code == 201

        response = await create(test_client, "foo", "second")
        assert response.status_code == 400
        assert response.json()["message"] == "Note already exists"

        assert (await test_client.get("/notes/foo")).text == "first"

    @pytest.mark.asyncio
    async def test_missing_note_name_is_400(self, test_client):
        response = await test_client.post("/write", data={"note": "orphan"})
        assert response.status_code == 400
        assert response.json()["error"] == "bad_request"

    @pytest.mark.asyncio
    async def test_missing_note_text_is_400(self, test_client, cache_dir):
        response = await test_client.post("/write", data={"note_name": "foo"})
        assert response.status_code == 400
        assert not (cache_dir / "foo").exists()

    @pytest.mark.asyncio
    async def test_concurrent_creates_single_winner(self, test_client):
        responses = await asyncio.gather(
            *(create(test_client, "race", f"writer-{i}") for i in range(4))
        )
        statuses = sorted(r.status_code for r in responses)
        assert statuses == [201, 400, 400, 400]

    @pytest.mark.asyncio
    async def test_write_failure_is_500_without_detail(self, settings):
        repository = AsyncMock(spec=NoteRepository)
        repository.create_if_absent.side_effect = OSError("No space left on device")
        app = create_app(settings, repository=repository)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await create(client, "foo", "hello")

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "Error creating note"
        assert "No space" not in response.text


class TestUpdateNote:

    @pytest.mark.asyncio
    async def test_update_existing(self, test_client):
        await create(test_client, "foo", "hello")

        response = await test_client.put("/notes/foo", json={"text": "x"})
        assert response.status_code == 200
        assert response.text == "Note updated"
        assert (await test_client.get("/notes/foo")).text == "x"

    @pytest.mark.asyncio
    async def test_update_replaces_whole_content(self, test_client, cache_dir):
        await create(test_client, "foo", "a long original body")
        await test_client.put("/notes/foo", json={"text": "short"})
        assert (cache_dir / "foo").read_text(encoding="utf-8") == "short"

    @pytest.mark.asyncio
    async def test_update_missing_is_404(self, test_client, cache_dir):
        response = await test_client.put("/notes/ghost", json={"text": "x"})
        assert response.status_code == 404
        assert not (cache_dir / "ghost").exists()

    @pytest.mark.asyncio
    async def test_update_missing_without_text_is_404(self, test_client):
        response = await test_client.put("/notes/ghost", json={})
        assert response.status_code == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "kwargs",
        [{"json": {}}, {"json": {"other": "x"}}, {"json": {"text": None}}, {}],
        ids=["empty-object", "other-field", "null-text", "no-body"],
    )
    async def test_update_without_text_is_400(self, test_client, kwargs):
        await create(test_client, "foo", "hello")

        response = await test_client.put("/notes/foo", **kwargs)
        assert response.status_code == 400
        assert response.json()["message"] == "Text is required"
        assert (await test_client.get("/notes/foo")).text == "hello"

    @pytest.mark.asyncio
    async def test_update_with_non_string_text_is_rejected(self, test_client):
        await create(test_client, "foo", "hello")
        response = await test_client.put("/notes/foo", json={"text": 5})
        assert response.status_code == 422
        assert (await test_client.get("/notes/foo")).text == "hello"


class TestDeleteNote:

    @pytest.mark.asyncio
    async def test_delete_then_get_and_delete_are_404(self, test_client, cache_dir):
        await create(test_client, "foo", "hello")

        response = await test_client.delete("/notes/foo")
        assert response.status_code == 200
        assert response.text == "Note deleted"
        assert not (cache_dir / "foo").exists()

        assert (await test_client.get("/notes/foo")).status_code == 404
        assert (await test_client.delete("/notes/foo")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_directory_is_404(self, test_client, cache_dir):
        (cache_dir / "archive").mkdir()
        assert (await test_client.delete("/notes/archive")).status_code == 404
        assert (cache_dir / "archive").is_dir()


class TestListNotes:

    @pytest.mark.asyncio
    async def test_empty(self, test_client):
        response = await test_client.get("/notes")
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_lists_notes_and_skips_directories(self, test_client, cache_dir):
        await create(test_client, "a", "1")
        await create(test_client, "b", "2")
        (cache_dir / "subdir").mkdir()
        (cache_dir / "subdir" / "c").write_text("3", encoding="utf-8")

        response = await test_client.get("/notes")
        assert response.status_code == 200
        notes = sorted(response.json(), key=lambda n: n["name"])
        assert notes == [{"name": "a", "text": "1"}, {"name": "b", "text": "2"}]

    @pytest.mark.asyncio
    async def test_undecodable_file_does_not_break_listing(self, test_client, cache_dir):
        await create(test_client, "good", "ok")
        (cache_dir / "binary").write_bytes(b"\xff\xfe\x00bad")

        response = await test_client.get("/notes")
        assert response.status_code == 200
        notes = {n["name"]: n["text"] for n in response.json()}
        assert notes["good"] == "ok"
        assert notes["binary"].endswith("bad")
        assert "\ufffd" in notes["binary"]

    @pytest.mark.asyncio
    async def test_reflects_updates(self, test_client):
        await create(test_client, "a", "1")
        await test_client.put("/notes/a", json={"text": "changed"})
        assert (await test_client.get("/notes")).json() == [{"name": "a", "text": "changed"}]


class TestScenario:

    @pytest.mark.asyncio
    async def test_full_lifecycle(self, test_client):
        assert (await create(test_client, "foo", "hello")).status_code == 201

        response = await test_client.get("/notes/foo")
        assert (response.status_code, response.text) == (200, "hello")

        assert (await test_client.put("/notes/foo", json={"text": "world"})).status_code == 200

        response = await test_client.get("/notes/foo")
        assert (response.status_code, response.text) == (200, "world")

        assert (await test_client.delete("/notes/foo")).status_code == 200
        assert (await test_client.get("/notes/foo")).status_code == 404

    @pytest.mark.asyncio
    async def test_full_lifecycle_in_memory(self, cache_dir):
        settings = Settings(
            host="127.0.0.1", port=3000, cache_dir=str(cache_dir), storage_backend="memory"
        )
        app = create_app(settings)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            assert (await create(client, "foo", "hello")).status_code == 201
            assert (await client.get("/notes/foo")).text == "hello"
            assert (await client.put("/notes/foo", json={"text": "world"})).status_code == 200
            assert (await client.get("/notes")).json() == [{"name": "foo", "text": "world"}]
            assert (await client.delete("/notes/foo")).status_code == 200
            assert (await client.get("/notes/foo")).status_code == 404

        assert list(cache_dir.iterdir()) == []


class TestStartup:

    @pytest.mark.asyncio
    async def test_lifespan_creates_cache_dir(self, tmp_path):
        cache = tmp_path / "nested" / "cache"
        app = create_app(Settings(host="127.0.0.1", port=3000, cache_dir=str(cache)))

        with patch("notecache.main.setup_logging"):
            async with app.router.lifespan_context(app):
                assert cache.is_dir()

    @pytest.mark.asyncio
    async def test_lifespan_keeps_existing_cache_dir(self, cache_dir):
        (cache_dir / "keep").write_text("kept", encoding="utf-8")
        app = create_app(Settings(host="127.0.0.1", port=3000, cache_dir=str(cache_dir)))

        with patch("notecache.main.setup_logging"), patch(
            "notecache.main.ensure_cache_dir", wraps=ensure_cache_dir
        ) as mock_ensure:
            async with app.router.lifespan_context(app):
                pass

        mock_ensure.assert_called_once_with(str(cache_dir))
        assert (cache_dir / "keep").read_text(encoding="utf-8") == "kept"

    def test_ensure_cache_dir_reports_creation(self, tmp_path):
        cache = tmp_path / "cache"
        assert ensure_cache_dir(str(cache)) is True
        assert ensure_cache_dir(str(cache)) is False


class TestAmbientRoutes:

    @pytest.mark.asyncio
    async def test_upload_form(self, test_client):
        response = await test_client.get("/UploadForm.html")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert 'action="/write"' in response.text
        assert 'name="note_name"' in response.text

    @pytest.mark.asyncio
    async def test_openapi_lists_routes(self, test_client):
        response = await test_client.get("/openapi.json")
        assert response.status_code == 200
        paths = response.json()["paths"]
        assert "/notes/{note_name}" in paths
        assert "/notes" in paths
        assert "/write" in paths

    @pytest.mark.asyncio
    async def test_docs_page(self, test_client):
        response = await test_client.get("/docs")
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["cache_dir"] == "writable"

    @pytest.mark.asyncio
    async def test_health_missing_cache_dir(self, tmp_path):
        settings = Settings(host="127.0.0.1", port=3000, cache_dir=str(tmp_path / "nope"))
        app = create_app(settings)
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/health")
        assert response.status_code == 503
        assert response.json()["cache_dir"] == "missing"

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/notes")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_request_id_echoed_in_header_and_error(self, test_client):
        response = await test_client.get("/notes/ghost", headers={"X-Request-ID": "trace-123"})
        assert response.headers["X-Request-ID"] == "trace-123"
        assert response.json()["request_id"] == "trace-123"

    @pytest.mark.asyncio
    async def test_unexpected_error_is_generic_500(self, settings):
        repository = AsyncMock(spec=NoteRepository)
        repository.list.side_effect = RuntimeError("boom")
        app = create_app(settings, repository=repository)

        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/notes")

        assert response.status_code == 500
        assert response.json()["error"] == "internal_server_error"
        assert "boom" not in response.text
