"""Content type API endpoints - registered types, their fields and forms"""

from typing import Optional

from fastapi import APIRouter, Depends

from api.dependencies import get_entity_service, get_registry
from schemas.content_type_read import ContentTypeDetail, ContentTypeRead
from services.content_type_registry import ContentTypeRegistry
from services.entity_service import EntityService

router = APIRouter()


@router.get("/", response_model=list[ContentTypeRead])
def list_content_types(
    kind: Optional[str] = None,
    registry: ContentTypeRegistry = Depends(get_registry),
):
    """List registered content types in registration order, optionally filtered by kind"""
    schemas = registry.all()
    if kind is not None:
        schemas = [schema for schema in schemas if schema.kind == kind]
    return [ContentTypeRead.from_schema(schema) for schema in schemas]


@router.get("/{content_type}/", response_model=ContentTypeDetail)
def get_content_type(
    content_type: str,
    registry: ContentTypeRegistry = Depends(get_registry),
    entity_service: EntityService = Depends(get_entity_service),
):
    """
    Get a content type with its field declarations.

    ``form`` holds one input spec per field, describing the empty create form.
    """
    schema = registry.get(content_type)
    summary = ContentTypeRead.from_schema(schema)
    return ContentTypeDetail(
        **summary.model_dump(),
        fields=list(schema.fields),
        form=entity_service.describe_form(content_type),
    )
