"""Class types and one-on-one services builder for classes-services.html."""
from ..models import BuildResult
from ..services import render
from ..services.normalize import (
    is_training_class,
    normalize_group_classes,
    normalize_services,
)
from ..utils.logger import logger
from .base import BaseBuilder

PLACEHOLDER_CLASSES = "<!-- CLASS_TYPES_STATIC -->"
PLACEHOLDER_SERVICES = "<!-- ONE_ON_ONE_STATIC -->"

COLLECTION_LIMIT = 200


class ClassesServicesBuilder(BaseBuilder):
    """Renders class types (training excluded) and bookable services."""

    name = "classes-services"
    page = "classes-services.html"

    async def render_class_types(self) -> tuple[str, int, int]:
        data = await self.client.fetch_collection(
            "group_classes", self.collection_query("title", COLLECTION_LIMIT)
        )
        classes = normalize_group_classes(data.get("items"))

        keyword = self.config.training_keyword
        class_types = [
            c for c in classes if not is_training_class(c, keyword)
        ][: max(self.config.class_types_limit, 0)]

        cards = [render.class_type_card(c) for c in class_types]
        return render.grid(cards), len(class_types), len(classes)

    async def render_services(self) -> tuple[str, int, int]:
        data = await self.client.fetch_collection(
            "services", self.collection_query("name", COLLECTION_LIMIT)
        )
        services = normalize_services(data)
        shown = [s for s in services if s.display_on_app]

        cards = [render.service_card(s) for s in shown]
        return render.grid(cards), len(shown), len(services)

    async def build(self) -> BuildResult:
        logger.info("[BUILD] Classes & Services generator starting")

        classes_html, class_count, class_total = await self.render_class_types()
        services_html, service_count, service_total = await self.render_services()

        target = self.writer.splice(
            self.page,
            {PLACEHOLDER_CLASSES: classes_html, PLACEHOLDER_SERVICES: services_html},
        )
        logger.info(
            f"[BUILD] Updated {target} with {class_count} class types and "
            f"{service_count} services."
        )
        return BuildResult(
            target=target,
            count=class_count + service_count,
            total=class_total + service_total,
        )
