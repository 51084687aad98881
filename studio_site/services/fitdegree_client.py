"""FitDegree API client with endpoint-candidate resolution."""
import json
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple

import httpx

from ..config import settings
from ..errors import EndpointResolutionError, UpstreamEnvelopeError
from ..models import FetchResult, ResolutionDebug
from ..utils.logger import logger
from .cache import TTLCache
from .endpoints import EndpointCatalog, catalog as default_catalog, endpoint_variants

ENDPOINT_NOT_FOUND_CODE = 19

EXHAUSTED_NOTE = (
    f"All endpoint variants returned auth_status.code={ENDPOINT_NOT_FOUND_CODE} "
    "(Endpoint not found)."
)

# Debug trailer caps
TRIED_LIMIT_OK = 25
TRIED_LIMIT_EXHAUSTED = 50


def looks_like_endpoint_not_found(payload: Any) -> bool:
    """True when the body carries FitDegree's endpoint-not-found sentinel."""
    if not isinstance(payload, Mapping):
        return False
    auth = payload.get("auth_status")
    if not isinstance(auth, Mapping):
        return False
    try:
        return int(auth.get("code")) == ENDPOINT_NOT_FOUND_CODE
    except (TypeError, ValueError):
        return False


def get_auth_status(payload: Any) -> Tuple[Optional[int], Optional[str]]:
    """Return (code, message) from `auth_status` or `data.auth_status`.

    The code is None when absent or not an integer.
    """
    auth = None
    if isinstance(payload, Mapping):
        auth = payload.get("auth_status")
        if auth is None and isinstance(payload.get("data"), Mapping):
            auth = payload["data"].get("auth_status")
    if not isinstance(auth, Mapping):
        return None, None

    code = auth.get("code")
    if isinstance(code, bool) or not isinstance(code, int):
        code = None
    return code, auth.get("msg") or auth.get("message")


def _annotate(payload: Any, debug: ResolutionDebug) -> Dict[str, Any]:
    trailer = debug.model_dump(exclude_none=True)
    if isinstance(payload, dict):
        return {**payload, "_debug": trailer}
    return {"ok": True, "data": payload, "_debug": trailer}


def _unwrap_envelope(payload: Any) -> Mapping[str, Any]:
    if isinstance(payload, Mapping):
        if "response" in payload:
            return payload
        data = payload.get("data")
        if isinstance(data, Mapping) and "response" in data:
            return data
    return {}


class FitDegreeClient:
    """Async client for the FitDegree API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        auth_header: Optional[str] = None,
        auth_scheme: Optional[str] = None,
        timeout: Optional[float] = None,
        catalog: Optional[EndpointCatalog] = None,
        cache: Optional[TTLCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            base_url: API origin. Defaults to settings.fitdegree_api_base
            api_key: API key. Defaults to settings.fitdegree_api_key
            auth_header: Header carrying the key
            auth_scheme: Scheme prefix for the key; empty sends the raw key
            timeout: Request timeout in seconds. Defaults to settings.default_timeout
            catalog: Endpoint candidates per resource
            cache: Optional memoization for resource fetches
            transport: Custom httpx transport (used by tests)
        """
        self.base_url = (
            base_url if base_url is not None else settings.fitdegree_api_base
        ).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.fitdegree_api_key
        self.auth_header = auth_header or settings.fitdegree_auth_header
        self.auth_scheme = (
            auth_scheme if auth_scheme is not None else settings.fitdegree_auth_scheme
        )
        self.timeout = timeout or settings.default_timeout
        self.catalog = catalog or default_catalog
        self.cache = cache
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        """Async context manager entry."""
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self._transport,
            headers={"User-Agent": "studio-site/1.0"},
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers[self.auth_header] = (
                f"{self.auth_scheme} {self.api_key}" if self.auth_scheme else self.api_key
            )
        return headers

    def build_url(self, path: str, query: Optional[Mapping[str, Any]] = None) -> str:
        """Join the base URL and path; drop None/empty query values."""
        path = str(path or "")
        if not path.startswith("/"):
            path = "/" + path
        url = httpx.URL(self.base_url + path)
        params = {
            k: str(v) for k, v in (query or {}).items() if v is not None and v != ""
        }
        if params:
            url = url.copy_merge_params(params)
        return str(url)

    async def fetch_once(
        self, path: str, query: Optional[Mapping[str, Any]] = None
    ) -> FetchResult:
        """Perform one GET and parse the body.

        Raises:
            httpx.RequestError: Transport failure
        """
        if not self._client:
            raise RuntimeError("FitDegreeClient must be used as an async context manager")

        url = self.build_url(path, query)
        response = await self._client.get(url, headers=self._headers())

        text = response.text
        try:
            payload = json.loads(text) if text else None
        except ValueError:
            payload = text or None

        return FetchResult(
            url=url, status=response.status_code, ok=response.is_success, payload=payload
        )

    async def fetch_absolute(self, url: str) -> Any:
        """GET a fully qualified URL (no auth header) and parse its JSON.

        Raises:
            httpx.HTTPStatusError: Non-2xx response
            httpx.RequestError: Transport failure
            UpstreamEnvelopeError: Body is not JSON
        """
        if not self._client:
            raise RuntimeError("FitDegreeClient must be used as an async context manager")

        response = await self._client.get(url)
        response.raise_for_status()
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamEnvelopeError(f"[BUILD] {url} did not return JSON") from e

    async def resolve(
        self,
        paths: Iterable[str],
        query: Optional[Mapping[str, Any]] = None,
        requested: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Return the first payload without the endpoint-not-found sentinel.

        HTTP status is not consulted; FitDegree reports errors in-body. When
        every candidate answers with the sentinel, the last answer is returned
        wrapped with an explanatory note instead of raising.

        Args:
            paths: Candidate paths, tried strictly in order
            query: Query parameters sent with every attempt
            requested: Label recorded in the debug trailer

        Returns:
            Payload annotated with a `_debug` trailer

        Raises:
            httpx.RequestError: Every candidate failed at the transport level
            EndpointResolutionError: No candidates were given
        """
        paths = list(paths)
        requested = requested or (paths[0] if paths else "")
        tried = []
        last: Optional[Tuple[str, FetchResult]] = None
        last_error: Optional[httpx.RequestError] = None

        for path in paths:
            tried.append(path)
            try:
                result = await self.fetch_once(path, query)
            except httpx.RequestError as e:
                last_error = e
                logger.warning(f"[FITDEGREE] transport error on {path}: {e!r}")
                continue

            last = (path, result)
            if not looks_like_endpoint_not_found(result.payload):
                logger.info(f"[FITDEGREE] resolved {requested} -> {path} ({result.status})")
                return _annotate(
                    result.payload,
                    ResolutionDebug(
                        requested=requested,
                        resolved=path,
                        url=result.url,
                        status=result.status,
                        tried=tried[:TRIED_LIMIT_OK],
                    ),
                )

        if last is None:
            if last_error is not None:
                raise last_error
            raise EndpointResolutionError(
                "No endpoint candidates to try.", {"requested": requested}
            )

        path, result = last
        logger.warning(f"[FITDEGREE] {requested}: {EXHAUSTED_NOTE}")
        return {
            "ok": True,
            "data": result.payload,
            "_debug": ResolutionDebug(
                requested=requested,
                resolved=path,
                url=result.url,
                status=result.status,
                tried=tried[:TRIED_LIMIT_EXHAUSTED],
                note=EXHAUSTED_NOTE,
            ).model_dump(exclude_none=True),
        }

    async def fetch_json(
        self, endpoint_path: str, query: Optional[Mapping[str, Any]] = None
    ) -> Dict[str, Any]:
        """Resolve a single path through its case/prefix variants."""
        return await self.resolve(
            endpoint_variants(endpoint_path), query, requested=endpoint_path
        )

    async def fetch_resource(
        self, resource: str, query: Optional[Mapping[str, Any]] = None
    ) -> Dict[str, Any]:
        """Resolve a logical resource through its catalog candidates."""
        if self.cache is not None:
            cached = self.cache.get(resource, query)
            if cached is not None:
                logger.info(f"[FITDEGREE] cache hit: {resource}")
                return cached

        payload = await self.resolve(
            self.catalog.candidates(resource), query, requested=resource
        )

        if self.cache is not None:
            self.cache.set(resource, query, payload)
        return payload

    async def fetch_first_working(
        self, candidates: Sequence[str], query: Optional[Mapping[str, Any]] = None
    ) -> Tuple[str, Dict[str, Any]]:
        """Try each candidate (with variants) until FitDegree accepts one.

        `auth_status.code == 0`, or no `auth_status` at all, counts as success.

        Returns:
            Tuple of (endpoint, payload)

        Raises:
            EndpointResolutionError: No candidate succeeded
        """
        last_payload: Any = None
        last_error: Optional[Exception] = None

        for endpoint in candidates:
            try:
                payload = await self.fetch_json(endpoint, query)
            except httpx.RequestError as e:
                last_error = e
                logger.warning(f"[FITDEGREE] endpoint error: {endpoint} {e!r}")
                continue

            last_payload = payload
            code, _ = get_auth_status(payload)

            if code is None:
                logger.info(f"[FITDEGREE] endpoint ok (no auth_status): {endpoint}")
                return endpoint, payload
            if code == 0:
                logger.info(f"[FITDEGREE] endpoint ok: {endpoint}")
                return endpoint, payload

            logger.warning(f"[FITDEGREE] endpoint rejected: {endpoint} code={code}")

        code, msg = get_auth_status(last_payload)
        if code is not None:
            detail = {"auth_status": {"code": code, "msg": msg}, "lastPayload": last_payload}
        else:
            detail = {"error": str(last_error) if last_error else "Unknown error"}

        raise EndpointResolutionError(
            "No FitDegree endpoint candidates succeeded.", detail
        )

    async def fetch_collection(
        self, resource: str, query: Optional[Mapping[str, Any]] = None
    ) -> Dict[str, Any]:
        """Fetch a `{response: {success, data}}` collection envelope.

        Returns:
            The envelope's `data` mapping (`items`, `cache`, ...)

        Raises:
            UpstreamEnvelopeError: Envelope missing or not successful
        """
        payload = await self.fetch_resource(resource, query)
        response = _unwrap_envelope(payload).get("response")

        if not isinstance(response, Mapping) or not response.get("success"):
            raise UpstreamEnvelopeError(f"[BUILD] {resource} response not success")

        data = response.get("data")
        return dict(data) if isinstance(data, Mapping) else {}


async def fetch_json(
    endpoint_path: str, query: Optional[Mapping[str, Any]] = None
) -> Dict[str, Any]:
    """Convenience function to resolve one endpoint path.

    Args:
        endpoint_path: FitDegree path (variants are tried automatically)
        query: Query parameters

    Returns:
        Annotated payload
    """
    async with FitDegreeClient() as client:
        return await client.fetch_json(endpoint_path, query)
