"""Field definitions - immutable descriptors of one declared field"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from core.exceptions import SchemaDefinitionError


class FieldKind(str, Enum):
    """Field kinds that have a dedicated strategy in the field type registry"""
    STRING = "string"
    TEXT = "text"
    TEXTAREA = "textarea"
    RICH_TEXT = "rich_text"
    NUMBER = "number"
    INTEGER = "integer"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    CHECKBOX = "checkbox"
    DATE = "date"
    DATETIME = "datetime"
    SELECT = "select"
    TAXONOMY = "taxonomy"
    REFERENCE = "reference"
    REPEATER = "repeater"

    @classmethod
    def parse(cls, tag: str) -> Optional["FieldKind"]:
        try:
            return cls(tag)
        except ValueError:
            return None


# Storage tags outside the form kinds; no unknown-tag warning is logged for them
STORAGE_ONLY_TAGS = frozenset({"json", "array", "image", "images", "belongs_to", "has_many"})

_DEFINITION_KEYS = {
    "label", "required", "default", "choices", "precision", "scale",
    "taxonomy_type", "target_schema", "model_class", "sub_fields", "fields",
    "unique", "help_text", "placeholder",
}


def humanize(name: str) -> str:
    """``display_order`` -> ``Display order``, ``vendor_ids`` -> ``Vendor ids``"""
    text = name[:-3] if name.endswith("_id") else name
    text = text.replace("_", " ").strip()
    return text[:1].upper() + text[1:]


class FieldDefinition(BaseModel):
    """
    One field of a content type schema.

    ``type`` is kept as a plain tag so that unknown or forward-incompatible
    tags survive declaration and degrade to the string strategy at build time.
    """
    name: str = Field(..., max_length=100, pattern=r'^[a-z_][a-z0-9_]*$')
    type: str = "string"
    label: str
    required: bool = False
    default: Any = None
    choices: tuple[tuple[str, Any], ...] = ()
    precision: Optional[int] = None
    scale: Optional[int] = None
    taxonomy_type: Optional[str] = None
    target_schema: Optional[str] = None
    sub_fields: tuple["FieldDefinition", ...] = ()
    unique: bool = False
    help_text: Optional[str] = None
    placeholder: Optional[str] = None
    options: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _fill_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("type") is not None:
            data["type"] = str(getattr(data["type"], "value", data["type"]))
        if not data.get("label") and data.get("name"):
            data["label"] = humanize(str(data["name"]))
        # model_class is the declaration spelling of the reference target
        if data.get("model_class") and not data.get("target_schema"):
            data["target_schema"] = data["model_class"]
        data.pop("model_class", None)
        return data

    @field_validator("choices", mode="before")
    @classmethod
    def _normalize_choices(cls, value: Any) -> Any:
        if value is None:
            return ()
        normalized = []
        for choice in value:
            if isinstance(choice, dict):
                normalized.append((str(choice["label"]), choice["value"]))
            elif isinstance(choice, (list, tuple)):
                label, choice_value = choice
                normalized.append((str(label), choice_value))
            else:
                normalized.append((str(choice), choice))
        return tuple(normalized)

    @model_validator(mode="after")
    def _check_structure(self) -> "FieldDefinition":
        if self.type == FieldKind.SELECT.value and not self.choices:
            raise SchemaDefinitionError(
                f"Select field '{self.name}' must declare choices",
                details={"field": self.name},
            )

        if self.type == FieldKind.REPEATER.value:
            if not self.sub_fields:
                raise SchemaDefinitionError(
                    f"Repeater field '{self.name}' must declare sub fields",
                    details={"field": self.name},
                )
            seen = set()
            for sub_field in self.sub_fields:
                if sub_field.type == FieldKind.REPEATER.value:
                    raise SchemaDefinitionError(
                        f"Repeater field '{self.name}' cannot contain repeater '{sub_field.name}'",
                        details={"field": self.name, "sub_field": sub_field.name},
                    )
                if sub_field.name in seen:
                    raise SchemaDefinitionError(
                        f"Repeater field '{self.name}' declares '{sub_field.name}' twice",
                        details={"field": self.name, "sub_field": sub_field.name},
                    )
                seen.add(sub_field.name)
        elif self.sub_fields:
            raise SchemaDefinitionError(
                f"Only repeater fields can declare sub fields ('{self.name}' is '{self.type}')",
                details={"field": self.name},
            )
        return self

    @property
    def kind(self) -> Optional[FieldKind]:
        return FieldKind.parse(self.type)

    @property
    def choice_values(self) -> list[Any]:
        return [value for _, value in self.choices]

    def choice_label(self, value: Any) -> Optional[str]:
        for label, choice_value in self.choices:
            if choice_value == value or str(choice_value) == str(value):
                return label
        return None


def field(name: str, type: str = "string", **options: Any) -> FieldDefinition:
    """
    Declaration helper used by content type modules::

        field("price", "decimal", precision=10, scale=2, required=True)

    Keyword arguments that are not FieldDefinition attributes end up in
    ``options`` (for example ``of="string"`` on array fields).
    """
    data: dict[str, Any] = {"name": name, "type": type}
    extra: dict[str, Any] = {}
    for key, value in options.items():
        if key in _DEFINITION_KEYS:
            data["sub_fields" if key == "fields" else key] = value
        else:
            extra[key] = value
    data["options"] = extra
    return FieldDefinition(**data)


FieldDefinition.model_rebuild()
