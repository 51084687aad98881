"""Services for the application."""
from .cache import TTLCache
from .endpoints import EndpointCatalog, catalog, endpoint_variants
from .fitdegree_client import FitDegreeClient, fetch_json, looks_like_endpoint_not_found
from .site_writer import SiteWriter

__all__ = [
    "TTLCache",
    "EndpointCatalog",
    "catalog",
    "endpoint_variants",
    "FitDegreeClient",
    "fetch_json",
    "looks_like_endpoint_not_found",
    "SiteWriter",
]
