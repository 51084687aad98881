"""Teacher training builder for teacher-training.html."""
from ..models import BuildResult
from ..services import render
from ..services.normalize import matches_keyword, normalize_group_classes
from ..utils.logger import logger
from .base import BaseBuilder

PLACEHOLDER = "<!-- TRAINING_STATIC -->"

# Pull enough to filter locally
COLLECTION_LIMIT = 100


class TeacherTrainingBuilder(BaseBuilder):
    """Renders group classes matching the training keyword.

    teacher-training.html already wraps the token in a grid, so only the
    cards are emitted.
    """

    name = "teacher-training"
    page = "teacher-training.html"

    async def build(self) -> BuildResult:
        logger.info("[BUILD] Teacher training generator starting")

        data = await self.client.fetch_collection(
            "group_classes", self.collection_query("title", COLLECTION_LIMIT)
        )
        classes = normalize_group_classes(data.get("items"))

        keyword = self.config.training_keyword
        selected = [c for c in classes if matches_keyword(c, keyword)][
            : max(self.config.training_limit, 0)
        ]

        html = render.cards_only(
            (render.training_card(c) for c in selected), empty=render.EMPTY_TRAINING
        )

        target = self.writer.splice(self.page, {PLACEHOLDER: html})
        logger.info(f"[BUILD] Updated {target} with {len(selected)} training items.")
        return BuildResult(target=target, count=len(selected), total=len(classes))
