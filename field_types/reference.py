from typing import Any, Optional

from field_types.base import BLANK_DISPLAY, Field, entity_label, is_blank
from schemas.entity import DynamicEntity
from schemas.input_spec import Choice, InputSpec

MAX_SELECT_SIZE = 10


class ReferenceField(Field):
    """
    Zero or more foreign ids into another content type.

    Values are always lists, even when a single entry is referenced.
    """
    type_tag = "reference"
    input_kind = "select"

    @property
    def target_schema(self) -> Optional[str]:
        return self.definition.target_schema

    def get_value(self, entity: DynamicEntity) -> list:
        return self.normalize(entity.get_field(self.name))

    def normalize(self, value: Any) -> list:
        if value is None:
            return []
        if isinstance(value, (list, tuple, set)):
            items = list(value)
        else:
            items = [value]
        return [item for item in items if not is_blank(item)]

    def blank_value(self) -> list:
        return []

    def coerce(self, raw: Any) -> list[int]:
        ids: list[int] = []
        for item in self.normalize(raw):
            if isinstance(item, bool):
                raise TypeError("booleans are not ids")
            entity_id = int(str(item).strip())
            if entity_id not in ids:
                ids.append(entity_id)
        return ids

    def invalid_message(self, raw: Any) -> str:
        return f"{self.label} must be a list of entry ids"

    def format_value(self, value: Any) -> str:
        ids = self.normalize(value)
        if not ids:
            return BLANK_DISPLAY
        if not self.target_schema or self.resolver is None:
            return ", ".join(str(item) for item in ids)

        coerced = self.coerce(ids)
        found = {entity.id: entity for entity in self.resolver.find_many(self.target_schema, coerced)}
        # Dangling ids are left out
        labels = [entity_label(found[entity_id]) for entity_id in coerced if entity_id in found]
        return ", ".join(labels) if labels else BLANK_DISPLAY

    def describe_input(self, current_value: Any = None, path: Optional[str] = None) -> InputSpec:
        spec = super().describe_input(current_value, path)
        if not self.target_schema or self.resolver is None:
            spec.kind = "text"
            spec.value = ", ".join(str(item) for item in self.normalize(current_value))
            return spec

        selected = {str(item) for item in self.normalize(current_value)}
        entities = self._ordered(self.resolver.find_all(self.target_schema))

        spec.multiple = True
        spec.value = self.normalize(current_value)
        spec.choices = [
            Choice(label=entity_label(entity), value=entity.id, selected=str(entity.id) in selected)
            for entity in entities
        ]
        spec.options = {**spec.options, "size": min(len(spec.choices), MAX_SELECT_SIZE)}
        return spec

    @staticmethod
    def _ordered(entities: list[DynamicEntity]) -> list[DynamicEntity]:
        """Order by title when the target has one, else by name, else by id"""
        for attribute in ("title", "name"):
            if any(attribute in entity.fields for entity in entities):
                return sorted(
                    entities,
                    key=lambda entity: (str(entity.get_field(attribute) or "").casefold(), entity.id or 0),
                )
        return sorted(entities, key=lambda entity: entity.id or 0)


class BelongsToField(Field):
    """Single foreign id into another content type"""
    type_tag = "belongs_to"
    input_kind = "select"

    @property
    def target_schema(self) -> Optional[str]:
        return self.definition.target_schema

    def coerce(self, raw: Any) -> int:
        if isinstance(raw, bool):
            raise TypeError("booleans are not ids")
        return int(str(raw).strip())

    def invalid_message(self, raw: Any) -> str:
        return f"{self.label} must reference an existing entry"

    def format_value(self, value: Any) -> str:
        if is_blank(value):
            return BLANK_DISPLAY
        if not self.target_schema or self.resolver is None:
            return str(value)

        entity = self.resolver.find_one(self.target_schema, self.coerce(value))
        return entity_label(entity) if entity is not None else BLANK_DISPLAY

    def describe_input(self, current_value: Any = None, path: Optional[str] = None) -> InputSpec:
        spec = super().describe_input(current_value, path)
        if not self.target_schema or self.resolver is None:
            spec.kind = "text"
            return spec

        entities = ReferenceField._ordered(self.resolver.find_all(self.target_schema))
        spec.include_blank = None if self.required else f"Select {self.label}"
        spec.choices = [
            Choice(
                label=entity_label(entity),
                value=entity.id,
                selected=not is_blank(current_value) and str(entity.id) == str(current_value),
            )
            for entity in entities
        ]
        return spec
