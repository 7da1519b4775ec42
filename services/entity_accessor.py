"""Entity accessor - typed get/set of entity fields through the schema"""

from typing import Any, Optional

from core.exceptions import UnknownFieldError
from field_types import EntityResolver, Field
from schemas.content_type import ContentTypeSchema
from schemas.entity import DynamicEntity
from services.field_type_registry import FieldTypeRegistry, get_field_type_registry


class EntityAccessor:
    """
    Generic accessor for the fields of one content type.

    Field strategies are looked up by name at call time, so reference fields
    read and write lists no matter what is stored or assigned.
    """

    def __init__(
        self,
        schema: ContentTypeSchema,
        field_types: Optional[FieldTypeRegistry] = None,
        resolver: Optional[EntityResolver] = None,
    ):
        self.schema = schema
        field_types = field_types or get_field_type_registry()
        self._fields: dict[str, Field] = {
            definition.name: field_types.build(definition, resolver=resolver)
            for definition in schema.fields
        }

    def field_names(self) -> list[str]:
        return list(self._fields.keys())

    def fields(self) -> list[Field]:
        return list(self._fields.values())

    def field(self, name: str) -> Field:
        try:
            return self._fields[name]
        except KeyError:
            raise UnknownFieldError(self.schema.slug, name)

    def get(self, entity: DynamicEntity, name: str) -> Any:
        return self.field(name).get_value(entity)

    def set(self, entity: DynamicEntity, name: str, value: Any) -> None:
        entity.set_field(name, self.field(name).normalize(value))

    def defaults(self) -> dict[str, Any]:
        return {
            definition.name: definition.default
            for definition in self.schema.fields
            if definition.default is not None
        }

    def display(self, entity: DynamicEntity) -> dict[str, str]:
        return {name: field.format_for_display(entity) for name, field in self._fields.items()}
