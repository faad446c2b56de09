"""
NotesVault Backend: API Endpoint Tests
======================================

What:  End-to-end HTTP tests through the full FastAPI stack.
How:   HTTPX AsyncClient over ASGITransport against create_app() wired to an
       in-memory repository (see conftest.py).

What we test:
    ✅ Create / get / list / update / delete happy paths
    ✅ `{"error": ...}` bodies for 400, 401, 404, 503
    ✅ /v1/notes mirrors /notes
    ✅ /health and / are public
"""

from datetime import datetime

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from notesvault.exceptions import StorageUnavailableError
from notesvault.main import create_app
from notesvault.repositories import InMemoryNoteRepository

from conftest import NEWER, OLDER, TEST_PASSWORD, TEST_USERNAME, make_note


def parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class UnavailableRepository(InMemoryNoteRepository):
    """Every operation fails the way SqlNoteRepository does once retries run out."""

    async def put_or_update(self, note):
        raise StorageUnavailableError(context={"operation": "put_or_update"})

    async def get_by_id(self, note_id):
        raise StorageUnavailableError(context={"operation": "get_by_id"})

    async def exists(self, note_id):
        raise StorageUnavailableError(context={"operation": "exists"})

    async def list_by_created_at_desc(self):
        raise StorageUnavailableError(context={"operation": "list"})

    async def ping(self):
        return False


@pytest_asyncio.fixture
async def unavailable_client(test_settings):
    app = create_app(test_settings, UnavailableRepository())
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        auth=(TEST_USERNAME, TEST_PASSWORD),
    ) as client:
        yield client


class TestCreateNote:

    @pytest.mark.asyncio
    async def test_create_note(self, test_client, memory_repository):
        response = await test_client.post("/notes", json={"content": "hello world"})

        assert response.status_code == 201
        body = response.json()
        assert body["content"] == "hello world"
        assert body["id"]
        assert parse_timestamp(body["createdAt"]).utcoffset().total_seconds() == 0
        assert response.headers["Location"] == f"/notes/{body['id']}"
        assert await memory_repository.exists(body["id"])

    @pytest.mark.asyncio
    async def test_create_trims_content(self, test_client):
        response = await test_client.post("/notes", json={"content": "  padded\n"})

        assert response.status_code == 201
        assert response.json()["content"] == "padded"

    @pytest.mark.asyncio
    async def test_create_blank_content_is_400(self, test_client, memory_repository):
        response = await test_client.post("/notes", json={"content": "   "})

        assert response.status_code == 400
        assert "content" in response.json()["error"]
        assert len(memory_repository) == 0

    @pytest.mark.asyncio
    async def test_create_missing_content_is_400(self, test_client):
        response = await test_client.post("/notes", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "content must not be blank"}

    @pytest.mark.asyncio
    async def test_create_non_string_content_is_400(self, test_client):
        response = await test_client.post("/notes", json={"content": 42})

        assert response.status_code == 400
        assert response.json()["error"].startswith("content")

    @pytest.mark.asyncio
    async def test_create_malformed_json_is_400(self, test_client):
        response = await test_client.post(
            "/notes",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert "error" in response.json()

    @pytest.mark.asyncio
    async def test_unknown_fields_are_ignored(self, test_client):
        response = await test_client.post(
            "/notes", json={"content": "text", "id": "chosen-by-client"}
        )

        assert response.status_code == 201
        assert response.json()["id"] != "chosen-by-client"


class TestReadNotes:

    @pytest.mark.asyncio
    async def test_list_newest_first(self, test_client, memory_repository):
        await memory_repository.put_or_update(make_note("1", "older", OLDER))
        await memory_repository.put_or_update(make_note("2", "newer", NEWER))

        response = await test_client.get("/notes")

        assert response.status_code == 200
        assert [n["id"] for n in response.json()] == ["2", "1"]

    @pytest.mark.asyncio
    async def test_list_empty(self, test_client):
        response = await test_client.get("/notes")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_get_note(self, test_client, memory_repository):
        await memory_repository.put_or_update(make_note("1", "first", OLDER))

        response = await test_client.get("/notes/1")

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == "1"
        assert body["content"] == "first"
        assert parse_timestamp(body["createdAt"]) == OLDER

    @pytest.mark.asyncio
    async def test_get_missing_note_is_404(self, test_client):
        response = await test_client.get("/notes/non-existent-id")

        assert response.status_code == 404
        assert "non-existent-id" in response.json()["error"]


class TestUpdateNote:

    @pytest.mark.asyncio
    async def test_update_note(self, test_client, memory_repository):
        await memory_repository.put_or_update(make_note("update-me", "original content", OLDER))

        response = await test_client.put("/notes/update-me", json={"content": "updated content"})

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == "update-me"
        assert body["content"] == "updated content"
        assert parse_timestamp(body["createdAt"]) == OLDER
        stored = await memory_repository.get_by_id("update-me")
        assert stored.content == "updated content"

    @pytest.mark.asyncio
    async def test_update_blank_content_is_400(self, test_client, memory_repository):
        await memory_repository.put_or_update(make_note("update-me", "original content"))

        response = await test_client.put("/notes/update-me", json={"content": " "})

        assert response.status_code == 400
        assert (await memory_repository.get_by_id("update-me")).content == "original content"

    @pytest.mark.asyncio
    async def test_update_blank_content_on_missing_note_is_400(self, test_client):
        response = await test_client.put("/notes/ghost", json={"content": ""})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_missing_note_is_404(self, test_client, memory_repository):
        response = await test_client.put("/notes/ghost", json={"content": "text"})

        assert response.status_code == 404
        assert "ghost" in response.json()["error"]
        assert len(memory_repository) == 0


class TestDeleteNote:

    @pytest.mark.asyncio
    async def test_delete_note(self, test_client, memory_repository):
        await memory_repository.put_or_update(make_note("delete-me"))

        response = await test_client.delete("/notes/delete-me")

        assert response.status_code == 204
        assert response.content == b""
        assert not await memory_repository.exists("delete-me")

    @pytest.mark.asyncio
    async def test_delete_missing_note_is_404(self, test_client):
        response = await test_client.delete("/notes/does-not-exist")

        assert response.status_code == 404
        assert "does-not-exist" in response.json()["error"]


class TestVersionedRoutes:

    @pytest.mark.asyncio
    async def test_v1_create_and_get(self, test_client):
        created = await test_client.post("/v1/notes", json={"content": "versioned"})

        assert created.status_code == 201
        note_id = created.json()["id"]
        assert created.headers["Location"] == f"/v1/notes/{note_id}"

        fetched = await test_client.get(f"/v1/notes/{note_id}")
        assert fetched.json()["content"] == "versioned"

        # Both prefixes share one store
        plain = await test_client.get(f"/notes/{note_id}")
        assert plain.status_code == 200

    @pytest.mark.asyncio
    async def test_v1_delete_missing_is_404(self, test_client):
        response = await test_client.delete("/v1/notes/does-not-exist")

        assert response.status_code == 404


class TestAuthentication:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/notes", "/v1/notes"])
    async def test_missing_credentials_is_401(self, anonymous_client, path):
        response = await anonymous_client.get(path)

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"].startswith("Basic")
        assert response.json() == {"error": "authentication required"}

    @pytest.mark.asyncio
    async def test_wrong_password_is_401(self, anonymous_client):
        response = await anonymous_client.get("/notes", auth=(TEST_USERNAME, "wrong"))

        assert response.status_code == 401
        assert response.json() == {"error": "invalid credentials"}

    @pytest.mark.asyncio
    async def test_rejected_request_never_writes(self, anonymous_client, memory_repository):
        response = await anonymous_client.post("/notes", json={"content": "sneaky"})

        assert response.status_code == 401
        assert len(memory_repository) == 0

    @pytest.mark.asyncio
    async def test_auth_disabled(self, test_settings, memory_repository):
        settings = test_settings.model_copy(update={"auth_enabled": False})
        app = create_app(settings, memory_repository)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/notes")

        assert response.status_code == 200


class TestAppFactory:
    """create_app() must keep the collaborators it is handed, even empty ones."""

    def test_empty_repository_is_kept(self, test_settings):
        repository = InMemoryNoteRepository()

        app = create_app(test_settings, repository)

        assert app.state.repository is repository
        assert app.state.note_service.repository is repository
        assert app.state.settings is test_settings

    @pytest.mark.asyncio
    async def test_notes_written_over_http_land_in_injected_repository(self, test_settings):
        repository = InMemoryNoteRepository()
        app = create_app(test_settings, repository)

        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
            auth=(TEST_USERNAME, TEST_PASSWORD),
        ) as client:
            response = await client.post("/notes", json={"content": "kept"})

        assert response.status_code == 201
        assert len(repository) == 1


class TestStorageUnavailable:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, path, body",
        [
            ("POST", "/notes", {"content": "text"}),
            ("GET", "/notes", None),
            ("GET", "/notes/1", None),
            ("PUT", "/notes/1", {"content": "text"}),
            ("DELETE", "/notes/1", None),
        ],
    )
    async def test_storage_failure_is_503(self, unavailable_client, method, path, body):
        response = await unavailable_client.request(method, path, json=body)

        assert response.status_code == 503
        assert response.headers["Retry-After"] == "5"
        assert response.json() == {
            "error": "Note storage is temporarily unavailable. Please try again later."
        }

    @pytest.mark.asyncio
    async def test_blank_update_is_400_even_when_storage_is_down(self, unavailable_client):
        response = await unavailable_client.put("/notes/1", json={"content": ""})

        assert response.status_code == 400


class TestPublicRoutes:

    @pytest.mark.asyncio
    async def test_health(self, anonymous_client):
        response = await anonymous_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["storage"] == "connected"

    @pytest.mark.asyncio
    async def test_health_unhealthy_storage(self, unavailable_client):
        response = await unavailable_client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"

    @pytest.mark.asyncio
    async def test_home_page(self, anonymous_client):
        response = await anonymous_client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "/v1/notes" in response.text

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, anonymous_client):
        response = await anonymous_client.get("/health", headers={"X-Request-ID": "abc-123"})

        assert response.headers["X-Request-ID"] == "abc-123"

    @pytest.mark.asyncio
    async def test_unknown_route_uses_error_body(self, test_client):
        response = await test_client.get("/nope")

        assert response.status_code == 404
        assert "error" in response.json()

    @pytest.mark.asyncio
    async def test_unsafe_request_id_is_replaced(self, anonymous_client):
        response = await anonymous_client.get(
            "/health", headers={"X-Request-ID": "bad id\twith spaces"}
        )

        rid = response.headers["X-Request-ID"]
        assert rid != "bad id\twith spaces"
        assert len(rid) == 8
