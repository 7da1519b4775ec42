"""Response models for the content type admin endpoints"""

from typing import Optional

from pydantic import BaseModel

from schemas.content_type import ContentTypeSchema
from schemas.entity import EntityRead
from schemas.field_definition import FieldDefinition
from schemas.input_spec import InputSpec


class ContentTypeRead(BaseModel):
    slug: str
    display_name: str
    kind: str
    description: Optional[str] = None
    icon: Optional[str] = None
    table_name: str
    title_field: Optional[str] = None
    archive_path: Optional[str] = None
    single_pattern: Optional[str] = None
    field_count: int

    @classmethod
    def from_schema(cls, schema: ContentTypeSchema) -> "ContentTypeRead":
        return cls(
            slug=schema.slug,
            display_name=schema.display_name,
            kind=schema.kind,
            description=schema.description,
            icon=schema.icon,
            table_name=schema.table_name,
            title_field=schema.title_field_name,
            archive_path=schema.routes.archive_path,
            single_pattern=schema.routes.single_pattern,
            field_count=len(schema.fields),
        )


class ContentTypeDetail(ContentTypeRead):
    """Content type plus its field declarations and empty form"""
    fields: list[FieldDefinition]
    form: list[InputSpec]


class EntityList(BaseModel):
    items: list[EntityRead]
    total: int
    limit: Optional[int] = None
    offset: int = 0


class ArchivePage(BaseModel):
    """Published entries listed on a content type's archive route"""
    content_type: str
    display_name: str
    items: list[EntityRead]
