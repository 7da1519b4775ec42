"""Content Type Registry - slug to schema mapping, sealed after startup"""

from typing import Dict, Optional

from core.exceptions import ContentTypeNotFoundError, RegistrySealedError, SchemaDefinitionError
from core.logging_config import get_logger
from schemas.content_type import ContentTypeSchema

logger = get_logger(__name__)


class ContentTypeRegistry:
    """
    Registry of content type schemas.

    Populated once during startup discovery, then sealed. After ``seal()``
    the registry is read-only and can be shared by request handlers without
    locking.
    """

    def __init__(self):
        self._schemas: Dict[str, ContentTypeSchema] = {}
        self._sealed = False

    def __contains__(self, slug: str) -> bool:
        return slug in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    def register(self, slug: str, schema: ContentTypeSchema) -> None:
        """Register a schema; a second registration under the same slug replaces the first"""
        if self._sealed:
            raise RegistrySealedError(slug)
        if slug != schema.slug:
            raise SchemaDefinitionError(
                f"Cannot register schema '{schema.slug}' under slug '{slug}'",
                details={"content_type": slug},
            )

        if slug in self._schemas:
            logger.info(f"Replacing content type: {slug}")
            # Replacement counts as a new registration for ordering
            del self._schemas[slug]

        self._schemas[slug] = schema
        logger.info(f"Registered content type: {slug} ({schema.display_name})")

    def unregister(self, slug: str) -> None:
        if self._sealed:
            raise RegistrySealedError(slug)
        self._schemas.pop(slug, None)

    def seal(self) -> None:
        self._sealed = True
        logger.info(f"Content type registry sealed with {len(self._schemas)} content types")

    def find(self, slug: str) -> Optional[ContentTypeSchema]:
        return self._schemas.get(slug)

    def get(self, slug: str) -> ContentTypeSchema:
        schema = self._schemas.get(slug)
        if schema is None:
            raise ContentTypeNotFoundError(slug)
        return schema

    def all(self) -> list[ContentTypeSchema]:
        """All schemas in registration order"""
        return list(self._schemas.values())

    def content_types(self) -> list[ContentTypeSchema]:
        return [schema for schema in self._schemas.values() if not schema.is_taxonomy]

    def taxonomies(self) -> list[ContentTypeSchema]:
        return [schema for schema in self._schemas.values() if schema.is_taxonomy]
