"""Instructor Team page builder (and optional per-instructor pages)."""
from typing import Any, List

from ..errors import UpstreamEnvelopeError
from ..models import BuildResult, Instructor
from ..services import render
from ..services.normalize import (
    HiddenInstructors,
    extract_list,
    is_publishable_instructor,
    normalize_instructors,
)
from ..utils.logger import logger
from .base import BaseBuilder

PLACEHOLDER = "<!-- INSTRUCTORS_STATIC -->"
BACK_HREF = "/instructors.html"


class InstructorsBuilder(BaseBuilder):
    """Renders public instructors into instructors.html.

    Only active, non-hidden instructors with a photo and a real bio are
    published.
    """

    name = "instructors"
    page = "instructors.html"

    async def fetch_payload(self) -> Any:
        """Team members from the pack's public proxy, or FitDegree directly."""
        url = self.config.instructors_api_url
        if url:
            logger.info(f"[BUILD] Fetch: {url}")
            body = await self.client.fetch_absolute(url)
            if not isinstance(body, dict) or not body.get("ok"):
                error = body.get("error") if isinstance(body, dict) else None
                raise UpstreamEnvelopeError(
                    f"[BUILD] API returned ok=false: {error or 'Unknown error'}"
                )
            return body

        return await self.client.fetch_resource(
            "instructors", {"fitspot_id": self.config.fitspot_id}
        )

    def detail_href(self, instructor: Instructor) -> str:
        return f"/instructors/{instructor.slug}/"

    def render_grid(self, instructors: List[Instructor]) -> str:
        with_detail = self.config.generate_instructor_detail_pages
        cards = [
            render.instructor_card(i, self.detail_href(i) if with_detail else None)
            for i in instructors
        ]
        return render.grid(cards, classes="grid cols-3 instructor-grid")

    async def build(self) -> BuildResult:
        cfg = self.config
        logger.info(
            f"[BUILD] Instructors generator starting (detail pages: "
            f"{cfg.generate_instructor_detail_pages})"
        )

        payload = await self.fetch_payload()
        total = len(extract_list(payload))
        instructors = normalize_instructors(payload, HiddenInstructors.from_settings(cfg))
        visible = [i for i in instructors if is_publishable_instructor(i)]

        target = self.writer.splice(self.page, {PLACEHOLDER: self.render_grid(visible)})
        logger.info(
            f"[BUILD] Updated {target} with {len(visible)} instructors "
            f"(filtered from {total})."
        )

        extra_files = []
        if cfg.generate_instructor_detail_pages:
            for instructor in visible:
                canonical = (
                    f"{cfg.site_origin}{self.detail_href(instructor)}"
                    if cfg.site_origin
                    else None
                )
                html = render.instructor_detail_page(
                    instructor, BACK_HREF, cfg.site_name, canonical
                )
                extra_files.append(
                    self.writer.write_page(f"instructors/{instructor.slug}/index.html", html)
                )
            logger.info(f"[BUILD] Wrote {len(extra_files)} instructor detail pages")

        return BuildResult(
            target=target, count=len(visible), total=total, extra_files=extra_files
        )
