"""Content type schemas, route descriptors and the declaration base class"""

from typing import Any, ClassVar, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from core.exceptions import SchemaDefinitionError
from schemas.field_definition import FieldDefinition, FieldKind

SLUG_PLACEHOLDER = ":slug"

TITLE_FIELD_CANDIDATES = ("title", "name")

# Base columns every content type table carries
RESERVED_FIELD_NAMES = frozenset({
    "id", "slug", "status", "published_at", "author_id", "created_at", "updated_at",
})


class RouteDescriptor(BaseModel):
    """Archive and single URL patterns attached to a content type"""
    archive_path: Optional[str] = None
    single_pattern: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @field_validator("archive_path", "single_pattern")
    @classmethod
    def _must_be_absolute(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.startswith("/"):
            raise ValueError(f"Route path '{value}' must start with '/'")
        return value

    @field_validator("single_pattern")
    @classmethod
    def _must_have_placeholder(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and SLUG_PLACEHOLDER not in value:
            raise ValueError(f"Single route pattern '{value}' must contain '{SLUG_PLACEHOLDER}'")
        return value

    def single_path(self, entity_slug: str) -> Optional[str]:
        if not self.single_pattern:
            return None
        return self.single_pattern.replace(SLUG_PLACEHOLDER, entity_slug)

    @property
    def router_single_pattern(self) -> Optional[str]:
        """Single pattern in path-parameter syntax (``/blog/{slug}``)"""
        if not self.single_pattern:
            return None
        return self.single_pattern.replace(SLUG_PLACEHOLDER, "{slug}")


class ContentTypeSchema(BaseModel):
    """
    Describes one dynamic content type.

    Built once during discovery and immutable afterwards; re-registering a
    slug replaces the whole schema.
    """
    slug: str = Field(..., max_length=100, pattern=r'^[a-z0-9][a-z0-9_-]*$')
    display_name: str = Field(..., max_length=200)
    kind: Literal["content", "taxonomy"] = "content"
    description: Optional[str] = None
    icon: Optional[str] = Field(None, max_length=100)
    table: Optional[str] = Field(None, max_length=100, pattern=r'^[a-z][a-z0-9_]*$')
    title_field: Optional[str] = None
    routes: RouteDescriptor = Field(default_factory=RouteDescriptor)
    fields: tuple[FieldDefinition, ...] = ()

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _taxonomies_have_a_name(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("kind") != "taxonomy":
            return data
        fields = list(data.get("fields") or [])
        names = {
            item.get("name") if isinstance(item, dict) else getattr(item, "name", None)
            for item in fields
        }
        if "name" not in names:
            fields.insert(0, FieldDefinition(name="name", type="string", required=True))
        return {**data, "fields": tuple(fields)}

    @model_validator(mode="after")
    def _check_fields(self) -> "ContentTypeSchema":
        seen = set()
        for definition in self.fields:
            if definition.name in RESERVED_FIELD_NAMES:
                raise SchemaDefinitionError(
                    f"Field name '{definition.name}' on '{self.slug}' is reserved",
                    details={"content_type": self.slug, "field": definition.name},
                )
            if definition.name in seen:
                raise SchemaDefinitionError(
                    f"Content type '{self.slug}' declares field '{definition.name}' twice",
                    details={"content_type": self.slug, "field": definition.name},
                )
            seen.add(definition.name)

        if self.title_field and self.title_field not in seen:
            raise SchemaDefinitionError(
                f"Title field '{self.title_field}' is not declared on '{self.slug}'",
                details={"content_type": self.slug, "field": self.title_field},
            )
        return self

    @property
    def table_name(self) -> str:
        return self.table or self.slug.replace("-", "_")

    @property
    def title_field_name(self) -> Optional[str]:
        """Field used for slug generation and display names"""
        if self.title_field:
            return self.title_field
        names = self.field_names
        for candidate in TITLE_FIELD_CANDIDATES:
            if candidate in names:
                return candidate
        for definition in self.fields:
            if definition.type == FieldKind.STRING.value:
                return definition.name
        return None

    @property
    def field_names(self) -> list[str]:
        return [definition.name for definition in self.fields]

    @property
    def fields_map(self) -> dict[str, FieldDefinition]:
        return {definition.name: definition for definition in self.fields}

    @property
    def is_taxonomy(self) -> bool:
        return self.kind == "taxonomy"

    def field(self, name: str) -> Optional[FieldDefinition]:
        for definition in self.fields:
            if definition.name == name:
                return definition
        return None

    def required_fields(self) -> list[FieldDefinition]:
        return [definition for definition in self.fields if definition.required]


class ContentTypeDeclaration:
    """
    Base class for declared content types.

    Subclasses living in a content type package are picked up by the loader::

        class FaqType(ContentTypeDeclaration):
            name = "FAQ"
            slug = "faqs"
            archive = "/help/faqs"
            fields = [
                field("question", "string", required=True),
            ]
    """
    name: ClassVar[Optional[str]] = None
    slug: ClassVar[Optional[str]] = None
    kind: ClassVar[str] = "content"
    description: ClassVar[Optional[str]] = None
    icon: ClassVar[Optional[str]] = None
    table_name: ClassVar[Optional[str]] = None
    title_field: ClassVar[Optional[str]] = None
    archive: ClassVar[Optional[str]] = None
    single: ClassVar[Optional[str]] = None
    fields: ClassVar[list[FieldDefinition]] = []

    @classmethod
    def to_schema(cls) -> ContentTypeSchema:
        if not cls.slug:
            raise SchemaDefinitionError(f"{cls.__name__} does not declare a slug")

        return ContentTypeSchema(
            slug=cls.slug,
            display_name=cls.name or cls.slug.replace("-", " ").title(),
            kind=cls.kind,
            description=cls.description,
            icon=cls.icon,
            table=cls.table_name,
            title_field=cls.title_field,
            routes=RouteDescriptor(archive_path=cls.archive, single_pattern=cls.single),
            fields=tuple(cls.fields),
        )
