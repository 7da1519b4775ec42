"""Route Manager - archive and single routes declared by content types"""

from typing import Literal, Optional

from pydantic import BaseModel

from core.logging_config import get_logger
from services.content_type_registry import ContentTypeRegistry

logger = get_logger(__name__)


class RouteEntry(BaseModel):
    name: str
    path: str
    kind: Literal["archive", "single"]
    content_type: str


class RouteManager:
    """Turns the route descriptors of registered content types into a route table"""

    @staticmethod
    def routes(registry: ContentTypeRegistry) -> list[RouteEntry]:
        entries: list[RouteEntry] = []
        seen_paths: dict[str, str] = {}

        for schema in registry.all():
            candidates = [
                ("archive", schema.routes.archive_path),
                ("single", schema.routes.router_single_pattern),
            ]
            for kind, path in candidates:
                if not path:
                    continue
                if path in seen_paths:
                    logger.warning_ctx(
                        f"Route {path} already claimed by '{seen_paths[path]}', skipping",
                        content_type=schema.slug,
                    )
                    continue
                seen_paths[path] = schema.slug
                entries.append(RouteEntry(
                    name=f"{schema.slug}_{kind}",
                    path=path,
                    kind=kind,
                    content_type=schema.slug,
                ))

        logger.info(f"Generated {len(entries)} content routes")
        return entries

    @staticmethod
    def find(entries: list[RouteEntry], name: str) -> Optional[RouteEntry]:
        for entry in entries:
            if entry.name == name:
                return entry
        return None
