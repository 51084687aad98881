"""Tests for the host app and the built-in FitDegree pack routes."""
import httpx
import pytest
from fastapi.testclient import TestClient

from studio_site.config import settings
from studio_site.main import create_app
from studio_site.packs import PackMounter
from studio_site.packs.loader import BUILTIN_PACK_DIR
from studio_site.routes import get_fitdegree_client
from studio_site.services.endpoints import catalog
from studio_site.services.fitdegree_client import FitDegreeClient

PREFIX = "/api/gizmos/fitdegree"


def fitdegree_override(handler):
    """Dependency override yielding a client backed by a mock transport."""

    async def override():
        client = FitDegreeClient(
            base_url="https://fd.test", api_key="", transport=httpx.MockTransport(handler)
        )
        async with client:
            yield client

    return override


def respond(body):
    return lambda request: httpx.Response(200, json=body)


@pytest.fixture
def app():
    return create_app(PackMounter([BUILTIN_PACK_DIR]))


@pytest.fixture
def client(app):
    """Create a test client with packs mounted."""
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class TestHealthEndpoints:
    """Tests for health and root endpoints."""

    def test_health_check(self, client):
        """Test health check endpoint."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "studio-site"}

    def test_root_lists_packs(self, client):
        """Test root endpoint."""
        data = client.get("/").json()
        assert data["message"] == "Studio Site API"
        assert data["packs"] == ["fitdegree"]

    def test_ping(self, client):
        """The ping route proves the pack mounted."""
        response = client.get(f"{PREFIX}/public/__ping")
        assert response.status_code == 200
        assert response.json() == {"ok": True, "gizmo": "fitdegree"}


class TestPublicInstructors:
    """Tests for the instructors proxy."""

    def test_success(self, app, client):
        body = {"auth_status": {"code": 0}, "response": [{"id": 1, "name": "Ana"}]}
        app.dependency_overrides[get_fitdegree_client] = fitdegree_override(respond(body))

        response = client.get(f"{PREFIX}/public/instructors")

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["endpoint_used"] == catalog.literal("instructors")[0]
        assert data["response"] == [{"id": 1, "name": "Ana"}]

    def test_all_candidates_rejected(self, app, client):
        """Exhausted candidates answer 502 with the override hint."""
        app.dependency_overrides[get_fitdegree_client] = fitdegree_override(
            respond({"auth_status": {"code": 19, "msg": "Endpoint not found"}})
        )

        response = client.get(f"{PREFIX}/public/instructors")

        assert response.status_code == 502
        data = response.json()
        assert data["ok"] is False
        assert data["detail"]["auth_status"]["code"] == 19
        assert "FITDEGREE_ENDPOINT_TEAM_MEMBERS" in data["hint"]

    def test_unexpected_error(self, app, client):
        """Anything else answers 500 without a hint."""

        def explode(request):
            raise ValueError("kaboom")

        app.dependency_overrides[get_fitdegree_client] = fitdegree_override(explode)

        response = client.get(f"{PREFIX}/public/instructors")

        assert response.status_code == 500
        data = response.json()
        assert "kaboom" in data["error"]
        assert data["hint"] is None


class TestPublicClasses:
    """Tests for the class proxies."""

    RECORDS = [
        {"id": 3, "fs_event_datetime": "2026-01-07 09:00:00"},
        {"id": 1, "fs_event_datetime": "2026-01-05 09:00:00"},
        {"id": 9, "fs_event_datetime": "2026-01-01 09:00:00", "past": True},
        {"id": 2, "fs_event_datetime": "2026-01-06 09:00:00"},
        {"id": 4, "fs_event_datetime": "2026-01-08 09:00:00"},
    ]

    def test_classes_passthrough(self, app, client):
        app.dependency_overrides[get_fitdegree_client] = fitdegree_override(
            respond({"response": self.RECORDS})
        )

        data = client.get(f"{PREFIX}/public/classes").json()

        assert data["endpoint_used"] == catalog.literal("classes")[0]
        assert data["response"] == self.RECORDS

    def test_featured_classes(self, app, client):
        app.dependency_overrides[get_fitdegree_client] = fitdegree_override(
            respond({"response": self.RECORDS})
        )

        data = client.get(f"{PREFIX}/public/featured-classes").json()

        ids = [r["id"] for r in data["response"]]
        assert ids == [1, 2, 3, 4][: settings.featured_classes_limit]

    def test_studio_scoped_query(self, app, client):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"response": []})

        app.dependency_overrides[get_fitdegree_client] = fitdegree_override(handler)

        client.get(f"{PREFIX}/public/classes")

        assert seen[0].url.params["fitspot_id"] == settings.fitspot_id
