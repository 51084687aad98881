"""Tests for the FitDegree client."""
import httpx
import pytest

from studio_site.errors import EndpointResolutionError, UpstreamEnvelopeError
from studio_site.services.cache import TTLCache
from studio_site.services.endpoints import EndpointCatalog
from studio_site.services.fitdegree_client import (
    EXHAUSTED_NOTE,
    FitDegreeClient,
    get_auth_status,
    looks_like_endpoint_not_found,
)
from studio_site.services.normalize import normalize_instructors

BASE_URL = "https://fd.test"
NOT_FOUND = {"auth_status": {"code": 19, "msg": "Endpoint not found"}}


def make_client(handler, **kwargs) -> FitDegreeClient:
    kwargs.setdefault("api_key", "")
    kwargs.setdefault("catalog", EndpointCatalog())
    return FitDegreeClient(
        base_url=BASE_URL, transport=httpx.MockTransport(handler), **kwargs
    )


class Recorder:
    """Mock handler serving scripted payloads by path and recording requests."""

    def __init__(self, routes=None, default=None):
        self.routes = routes or {}
        self.default = default if default is not None else NOT_FOUND
        self.requests = []

    @property
    def paths(self):
        return [r.url.path for r in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        body = self.routes.get(request.url.path, self.default)
        if isinstance(body, Exception):
            raise body
        if isinstance(body, httpx.Response):
            return body
        return httpx.Response(200, json=body)


class TestSentinelDetection:
    """Tests for the endpoint-not-found sentinel."""

    def test_code_19_detected(self):
        assert looks_like_endpoint_not_found(NOT_FOUND)
        assert looks_like_endpoint_not_found({"auth_status": {"code": "19"}})

    def test_other_codes_ignored(self):
        assert not looks_like_endpoint_not_found({"auth_status": {"code": 0}})
        assert not looks_like_endpoint_not_found({"auth_status": {"code": None}})
        assert not looks_like_endpoint_not_found({"response": []})
        assert not looks_like_endpoint_not_found("<html>")

    def test_auth_status_from_wrapped_payload(self):
        """auth_status is read from the top level or from `data`."""
        assert get_auth_status({"auth_status": {"code": 0, "msg": "ok"}}) == (0, "ok")
        assert get_auth_status({"data": NOT_FOUND}) == (19, "Endpoint not found")
        assert get_auth_status({"auth_status": {"code": "0"}}) == (None, None)
        assert get_auth_status({}) == (None, None)


class TestBuildUrl:
    """Tests for URL construction."""

    def test_drops_empty_query_values(self):
        client = make_client(Recorder())
        url = client.build_url("x", {"a": 1, "b": None, "c": ""})
        assert url == "https://fd.test/x?a=1"

    def test_auth_header(self):
        client = make_client(Recorder(), api_key="secret", auth_scheme="Bearer")
        assert client._headers()["Authorization"] == "Bearer secret"

    def test_raw_key_without_scheme(self):
        client = make_client(
            Recorder(), api_key="secret", auth_header="X-Api-Key", auth_scheme=""
        )
        assert client._headers()["X-Api-Key"] == "secret"


class TestResolve:
    """Tests for candidate resolution."""

    @pytest.mark.asyncio
    async def test_first_non_sentinel_wins(self):
        """Candidates before k are rejected; k is returned; later ones are untouched."""
        handler = Recorder(routes={"/b": {"auth_status": {"code": 0}, "response": [1]}})

        async with make_client(handler) as client:
            payload = await client.resolve(["/a", "/b", "/c"])

        assert handler.paths == ["/a", "/b"]
        assert payload["response"] == [1]
        assert payload["_debug"]["resolved"] == "/b"
        assert payload["_debug"]["tried"] == ["/a", "/b"]
        assert "note" not in payload["_debug"]

    @pytest.mark.asyncio
    async def test_http_status_not_consulted(self):
        """A 404 without the sentinel still resolves."""
        handler = Recorder(
            routes={"/a": httpx.Response(404, json={"error": "nope"})}
        )

        async with make_client(handler) as client:
            payload = await client.resolve(["/a", "/b"])

        assert payload["error"] == "nope"
        assert payload["_debug"]["status"] == 404

    @pytest.mark.asyncio
    async def test_all_sentinel_returns_note(self):
        """Exhaustion returns the last payload with a note instead of raising."""
        handler = Recorder()

        async with make_client(handler) as client:
            payload = await client.resolve(["/a", "/b"])

        assert payload["ok"] is True
        assert payload["data"] == NOT_FOUND
        assert payload["_debug"]["note"] == EXHAUSTED_NOTE
        assert payload["_debug"]["resolved"] == "/b"

    @pytest.mark.asyncio
    async def test_transport_error_skipped(self):
        """A transport failure moves on to the next candidate."""
        handler = Recorder(
            routes={"/a": httpx.ConnectError("refused"), "/b": {"response": []}}
        )

        async with make_client(handler) as client:
            payload = await client.resolve(["/a", "/b"])

        assert payload["_debug"]["resolved"] == "/b"

    @pytest.mark.asyncio
    async def test_all_transport_errors_raise(self):
        """The last transport error surfaces when nothing answered."""
        handler = Recorder(default=httpx.ConnectError("refused"))

        async with make_client(handler) as client:
            with pytest.raises(httpx.ConnectError):
                await client.resolve(["/a", "/b"])

    @pytest.mark.asyncio
    async def test_no_candidates(self):
        async with make_client(Recorder()) as client:
            with pytest.raises(EndpointResolutionError):
                await client.resolve([])

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        """Non-JSON bodies come back as text under `data`."""
        handler = Recorder(routes={"/a": httpx.Response(200, text="<html>ok</html>")})

        async with make_client(handler) as client:
            payload = await client.resolve(["/a"])

        assert payload["data"] == "<html>ok</html>"
        assert payload["_debug"]["resolved"] == "/a"

    @pytest.mark.asyncio
    async def test_requires_context_manager(self):
        client = make_client(Recorder())
        with pytest.raises(RuntimeError):
            await client.fetch_once("/a")


class TestFetchJson:
    """Tests for single-path resolution through variants."""

    @pytest.mark.asyncio
    async def test_team_members_variant(self):
        """A lower-case variant answers after the literal path is rejected."""
        ok_body = {"auth_status": {"code": 0}, "response": [{"id": 1, "name": "Ana"}]}
        handler = Recorder(routes={"/api/v1/team_members": ok_body})

        async with make_client(handler) as client:
            payload = await client.fetch_json("/api/v1/TEAM_MEMBERS")

        assert handler.paths[0] == "/api/v1/TEAM_MEMBERS"
        assert payload["_debug"]["requested"] == "/api/v1/TEAM_MEMBERS"
        assert payload["_debug"]["resolved"] == "/api/v1/team_members"

        instructors = normalize_instructors(payload)
        assert [i.full_name for i in instructors] == ["Ana"]

    @pytest.mark.asyncio
    async def test_query_sent_with_every_attempt(self):
        handler = Recorder(routes={"/v1/classes": {"response": []}})

        async with make_client(handler) as client:
            await client.fetch_json("/api/v1/CLASSES", {"fitspot_id": "782"})

        assert all(r.url.params["fitspot_id"] == "782" for r in handler.requests)


class TestFetchResource:
    """Tests for catalog-backed resource fetches."""

    @pytest.mark.asyncio
    async def test_override_tried_first(self):
        catalog = EndpointCatalog(overrides={"instructors": ["/custom/staff"]})
        handler = Recorder(routes={"/custom/staff": {"response": []}})

        async with make_client(handler, catalog=catalog) as client:
            payload = await client.fetch_resource("instructors")

        assert handler.paths == ["/custom/staff"]
        assert payload["_debug"]["requested"] == "instructors"

    @pytest.mark.asyncio
    async def test_cache_reused(self):
        """A cached resource is not fetched twice within its TTL."""
        handler = Recorder(routes={"/group-class/": {"response": []}})

        async with make_client(handler, cache=TTLCache()) as client:
            await client.fetch_resource("group_classes", {"page": 1})
            await client.fetch_resource("group_classes", {"page": 1})

        assert handler.paths == ["/group-class/"]


class TestFetchFirstWorking:
    """Tests for the pack's candidate walk."""

    @pytest.mark.asyncio
    async def test_returns_accepted_endpoint(self):
        catalog_literal = ["/first", "/second"]
        handler = Recorder(
            routes={
                "/first": {"auth_status": {"code": 4, "msg": "Denied"}},
                "/second": {"auth_status": {"code": 0}, "response": [{"id": 7}]},
            }
        )

        async with make_client(handler) as client:
            endpoint, payload = await client.fetch_first_working(catalog_literal)

        assert endpoint == "/second"
        assert payload["response"] == [{"id": 7}]

    @pytest.mark.asyncio
    async def test_missing_auth_status_counts_as_success(self):
        handler = Recorder(routes={"/first": {"response": []}})

        async with make_client(handler) as client:
            endpoint, _ = await client.fetch_first_working(["/first"])

        assert endpoint == "/first"

    @pytest.mark.asyncio
    async def test_all_rejected(self):
        """Exhausted candidates raise with the last auth status."""
        handler = Recorder(routes={"/first": {"auth_status": {"code": 4, "msg": "Denied"}}})

        async with make_client(handler) as client:
            with pytest.raises(EndpointResolutionError) as exc_info:
                await client.fetch_first_working(["/first"])

        detail = exc_info.value.detail
        assert detail["auth_status"] == {"code": 4, "msg": "Denied"}
        assert "lastPayload" in detail

    @pytest.mark.asyncio
    async def test_all_transport_errors(self):
        handler = Recorder(default=httpx.ConnectError("refused"))

        async with make_client(handler) as client:
            with pytest.raises(EndpointResolutionError) as exc_info:
                await client.fetch_first_working(["/first"])

        assert "refused" in exc_info.value.detail["error"]


class TestFetchCollection:
    """Tests for collection envelopes."""

    @pytest.mark.asyncio
    async def test_returns_data(self):
        body = {"response": {"success": True, "data": {"items": [{"id": 1}], "cache": {}}}}
        handler = Recorder(routes={"/group-class/": body})

        async with make_client(handler) as client:
            data = await client.fetch_collection("group_classes")

        assert data["items"] == [{"id": 1}]

    @pytest.mark.asyncio
    async def test_unsuccessful_envelope(self):
        body = {"response": {"success": False}}
        handler = Recorder(routes={"/group-class/": body})

        async with make_client(handler) as client:
            with pytest.raises(UpstreamEnvelopeError, match="group_classes"):
                await client.fetch_collection("group_classes")
