"""Studio site: FitDegree-backed page builders and gizmo pack host."""
from .config import settings
from .errors import (
    BuildError,
    EndpointResolutionError,
    PackContractError,
    PlaceholderNotFoundError,
    StudioSiteError,
    UpstreamEnvelopeError,
)
from .services import EndpointCatalog, FitDegreeClient, SiteWriter, TTLCache, catalog

__all__ = [
    "settings",
    "BuildError",
    "EndpointResolutionError",
    "PackContractError",
    "PlaceholderNotFoundError",
    "StudioSiteError",
    "UpstreamEnvelopeError",
    "EndpointCatalog",
    "FitDegreeClient",
    "SiteWriter",
    "TTLCache",
    "catalog",
]
