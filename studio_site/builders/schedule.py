"""Upcoming schedule builder for book.html."""
from datetime import datetime, timedelta
from typing import Callable, Optional, Tuple

from ..models import BuildResult
from ..services import render
from ..services.normalize import normalize_schedule_items, upcoming
from ..utils.logger import logger
from .base import BaseBuilder

PLACEHOLDER = "<!-- SCHEDULE_STATIC -->"

# FitDegree schedule object types listed on the booking page
SCHEDULE_OBJECT_TYPES = '["1","2","22","4"]'


class ScheduleBuilder(BaseBuilder):
    """Renders the next few scheduled classes."""

    name = "schedule"
    page = "book.html"

    def __init__(self, *args, now: Callable[[], datetime] = datetime.now, **kwargs):
        super().__init__(*args, **kwargs)
        self._now = now

    def date_range(self) -> Tuple[str, str]:
        """Today 00:00 through `schedule_days_ahead` days later, local time."""
        now = self._now()
        start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        end = start + timedelta(days=self.config.schedule_days_ahead)
        fmt = "%Y-%m-%d 00:00:00"
        return start.strftime(fmt), end.strftime(fmt)

    def query(self, start: Optional[str] = None, end: Optional[str] = None):
        if start is None or end is None:
            start, end = self.date_range()
        return self.studio_query(
            object_type__IN=SCHEDULE_OBJECT_TYPES,
            show_past="false",
            published_status__IN="[1]",
            show_no_instructor="true",
            is_cancelled__IN="[0]",
            start_datetime=start,
            end_datetime=end,
        )

    async def build(self) -> BuildResult:
        logger.info("[BUILD] Schedule generator starting")

        data = await self.client.fetch_collection("schedule", self.query())
        items = data.get("items") if isinstance(data.get("items"), list) else []

        selected = upcoming(
            normalize_schedule_items(items), self.config.schedule_card_limit
        )
        html = render.grid(
            [render.schedule_card(item) for item in selected],
            empty=render.EMPTY_SCHEDULE,
        )

        target = self.writer.splice(self.page, {PLACEHOLDER: html})
        logger.info(f"[BUILD] Updated {target} with {len(selected)} schedule items.")
        return BuildResult(target=target, count=len(selected), total=len(items))
