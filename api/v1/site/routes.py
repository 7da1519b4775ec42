"""
Public site routes.

Built from the route table once the content types are known: every archive
path lists the published entries of its type and every single pattern shows
one published entry by slug. Drafts, archived entries and entries scheduled
for the future are answered with 404.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_entity_service
from schemas.content_type_read import ArchivePage
from schemas.entity import EntityRead
from services.entity_service import EntityService
from services.route_manager import RouteEntry


def _archive_endpoint(content_type: str):
    def archive(entity_service: EntityService = Depends(get_entity_service)) -> ArchivePage:
        schema = entity_service.schema(content_type)
        return ArchivePage(
            content_type=content_type,
            display_name=schema.display_name,
            items=[entity_service.to_read(entity) for entity in entity_service.list_published(content_type)],
        )
    return archive


def _single_endpoint(content_type: str):
    def single(slug: str, entity_service: EntityService = Depends(get_entity_service)) -> EntityRead:
        entity = entity_service.get_by_slug(content_type, slug, published_only=True)
        return entity_service.to_read(entity)
    return single


def build_site_router(routes: list[RouteEntry]) -> APIRouter:
    router = APIRouter(tags=["Site"])

    for entry in routes:
        if entry.kind == "archive":
            endpoint, response_model = _archive_endpoint(entry.content_type), ArchivePage
        else:
            endpoint, response_model = _single_endpoint(entry.content_type), EntityRead

        router.add_api_route(
            entry.path,
            endpoint,
            methods=["GET"],
            name=entry.name,
            response_model=response_model,
        )

    return router
