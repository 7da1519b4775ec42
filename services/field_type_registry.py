"""Field Type Registry - maps field type tags to field strategies"""

from typing import Callable, Dict, Iterable, Optional

from core.logging_config import get_logger
from field_types import (
    ArrayField,
    BelongsToField,
    BooleanField,
    DateField,
    DatetimeField,
    EntityResolver,
    Field,
    FieldContext,
    JsonField,
    NumberField,
    ReferenceField,
    RepeaterField,
    SelectField,
    StringField,
    TaxonomyField,
    TextField,
)
from schemas.field_definition import STORAGE_ONLY_TAGS, FieldDefinition, FieldKind

logger = get_logger(__name__)

FieldFactory = Callable[[FieldDefinition, FieldContext], Field]

DEFAULT_FIELD_TYPES: Dict[FieldKind, FieldFactory] = {
    FieldKind.STRING: StringField,
    FieldKind.TEXT: TextField,
    FieldKind.TEXTAREA: TextField,
    FieldKind.RICH_TEXT: TextField,
    FieldKind.NUMBER: NumberField,
    FieldKind.INTEGER: NumberField,
    FieldKind.DECIMAL: NumberField,
    FieldKind.BOOLEAN: BooleanField,
    FieldKind.CHECKBOX: BooleanField,
    FieldKind.DATE: DateField,
    FieldKind.DATETIME: DatetimeField,
    FieldKind.SELECT: SelectField,
    FieldKind.TAXONOMY: TaxonomyField,
    FieldKind.REFERENCE: ReferenceField,
    FieldKind.REPEATER: RepeaterField,
}

# Storage tags whose values are not plain strings
STORAGE_FIELD_TYPES: Dict[str, FieldFactory] = {
    "json": JsonField,
    "images": JsonField,
    "array": ArrayField,
    "belongs_to": BelongsToField,
}

FALLBACK_FIELD_TYPE: FieldFactory = StringField


class FieldTypeRegistry:
    """
    Maps type tags to field strategy factories.

    Unknown tags never fail: they are built with the plain string strategy so a
    misconfigured schema degrades to a text box instead of breaking the admin.
    """

    def __init__(self, include_defaults: bool = True):
        self._factories: Dict[str, FieldFactory] = {}
        if include_defaults:
            for kind, factory in DEFAULT_FIELD_TYPES.items():
                self.register(kind.value, factory)
            for tag, factory in STORAGE_FIELD_TYPES.items():
                self.register(tag, factory)

    def register(self, type_tag: str, factory: FieldFactory) -> None:
        """Register (or replace) the strategy for a type tag"""
        tag = getattr(type_tag, "value", type_tag)
        if tag in self._factories:
            logger.debug(f"Replacing field type: {tag}")
        self._factories[tag] = factory

    def get_factory(self, type_tag: str) -> Optional[FieldFactory]:
        return self._factories.get(type_tag)

    def is_known(self, type_tag: str) -> bool:
        return type_tag in self._factories

    def type_tags(self) -> list[str]:
        return list(self._factories.keys())

    def build(self, definition: FieldDefinition, resolver: Optional[EntityResolver] = None) -> Field:
        factory = self._factories.get(definition.type)

        if factory is None:
            if definition.type not in STORAGE_ONLY_TAGS:
                logger.warning_ctx(
                    f"Unknown field type '{definition.type}', using string field",
                    field=definition.name,
                    type=definition.type,
                )
            factory = FALLBACK_FIELD_TYPE

        return factory(definition, FieldContext(registry=self, resolver=resolver))

    def build_all(
        self,
        definitions: Iterable[FieldDefinition],
        resolver: Optional[EntityResolver] = None
    ) -> list[Field]:
        return [self.build(definition, resolver=resolver) for definition in definitions]


# Singleton instance
_field_type_registry: Optional[FieldTypeRegistry] = None


def get_field_type_registry() -> FieldTypeRegistry:
    """Get the process-wide FieldTypeRegistry instance"""
    global _field_type_registry
    if _field_type_registry is None:
        _field_type_registry = FieldTypeRegistry()
    return _field_type_registry
