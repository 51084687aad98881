"""Public FitDegree proxy endpoints."""
from typing import Any, Dict, List, Optional, Tuple

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from studio_site.config import settings
from studio_site.errors import EndpointResolutionError
from studio_site.models import CollectionResponse, ErrorResponse
from studio_site.routes import get_fitdegree_client
from studio_site.services.endpoints import catalog
from studio_site.services.fitdegree_client import FitDegreeClient
from studio_site.services.normalize import extract_list, featured_records
from studio_site.utils.logger import logger

router = APIRouter(tags=["fitdegree"])


async def _fetch_list(client: FitDegreeClient, resource: str) -> Tuple[str, List[Any]]:
    endpoint, payload = await client.fetch_first_working(
        catalog.literal(resource), {"fitspot_id": settings.fitspot_id}
    )
    return endpoint, extract_list(payload)


def _error(resource: str, status: int, message: str, detail: Optional[Dict[str, Any]] = None):
    body = ErrorResponse(
        error=message, detail=detail, hint=catalog.hint(resource) if status == 502 else None
    )
    return JSONResponse(status_code=status, content=body.model_dump())


async def _collection(client: FitDegreeClient, resource: str, limit: Optional[int] = None):
    try:
        endpoint, records = await _fetch_list(client, resource)
    except EndpointResolutionError as e:
        logger.warning(f"[FITDEGREE] {resource}: {e}")
        return _error(resource, 502, str(e), e.detail)
    except Exception as e:
        logger.error(f"[FITDEGREE] {resource} failed: {e!r}")
        return _error(resource, 500, f"Failed to fetch {resource}: {e}")

    if limit is not None:
        records = featured_records(records, limit)
    return CollectionResponse(endpoint_used=endpoint, response=records)


@router.get("/public/instructors", response_model=CollectionResponse)
async def public_instructors(client: FitDegreeClient = Depends(get_fitdegree_client)):
    """Team members visible on the public site."""
    return await _collection(client, "instructors")


@router.get("/public/classes", response_model=CollectionResponse)
async def public_classes(client: FitDegreeClient = Depends(get_fitdegree_client)):
    """Upcoming classes as FitDegree returns them."""
    return await _collection(client, "classes")


@router.get("/public/featured-classes", response_model=CollectionResponse)
async def public_featured_classes(
    client: FitDegreeClient = Depends(get_fitdegree_client),
):
    """The next few upcoming classes, soonest first."""
    return await _collection(client, "classes", limit=settings.featured_classes_limit)
