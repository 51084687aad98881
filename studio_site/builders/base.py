"""Base class for static page builders."""
from typing import Any, Dict, Optional

from ..config import Settings, settings
from ..models import BuildResult
from ..services.fitdegree_client import FitDegreeClient
from ..services.site_writer import SiteWriter

# Client markers FitDegree's admin app sends; the API accepts them from builds too
CLIENT_MARKERS = {
    "__fd_client": "admin",
    "__fd_client_version": "3.1.7",
    "__identifier": "site-build",
}


class BaseBuilder:
    """Fetch, filter, render and splice one page.

    Subclasses set `name`, `page` and implement `build`. The client must
    already be entered (`async with FitDegreeClient() as client`).
    """

    name: str = ""
    page: str = ""

    def __init__(
        self,
        client: FitDegreeClient,
        writer: Optional[SiteWriter] = None,
        config: Optional[Settings] = None,
    ):
        """Initialize the builder.

        Args:
            client: Entered FitDegree client
            writer: Site writer. Defaults to one over settings.publish_path
            config: Settings. Defaults to the global settings
        """
        self.client = client
        self.config = config or settings
        self.writer = writer or SiteWriter(self.config.publish_path)

    def studio_query(self, **extra: Any) -> Dict[str, Any]:
        """Studio-scoped query parameters shared by collection calls."""
        cfg = self.config
        return {
            **extra,
            "fitspot_id": cfg.fitspot_id,
            "fitspot_id__EQ": cfg.fitspot_id,
            "company_id": cfg.company_id,
            "company_id__EQ": cfg.company_id,
            **CLIENT_MARKERS,
        }

    def collection_query(self, order_field: str, limit: int) -> Dict[str, Any]:
        return self.studio_query(
            is_deleted=0, **{f"{order_field}__ORDER": "ASC"}, page=1, limit=limit
        )

    async def build(self) -> BuildResult:
        raise NotImplementedError
