import json
from typing import Any

from field_types.base import BLANK_DISPLAY, Field, is_blank
from schemas.entity import DynamicEntity


class JsonField(Field):
    """
    Free-form JSON document (also used for image lists).

    Dicts and lists are stored as submitted; strings are parsed as JSON.
    """
    type_tag = "json"
    input_kind = "textarea"

    def coerce(self, raw: Any) -> Any:
        if isinstance(raw, (dict, list)):
            return raw
        if isinstance(raw, tuple):
            return list(raw)
        if isinstance(raw, str):
            return json.loads(raw)
        raise TypeError(f"unsupported JSON value: {type(raw).__name__}")

    def invalid_message(self, raw: Any) -> str:
        return f"{self.label} must be valid JSON"

    def format_value(self, value: Any) -> str:
        if is_blank(value):
            return BLANK_DISPLAY
        if isinstance(value, str):
            return value
        return json.dumps(value, default=str)

    def input_value(self, value: Any) -> Any:
        if is_blank(value) or isinstance(value, str):
            return value
        return json.dumps(value, indent=2, default=str)

    def input_options(self) -> dict[str, Any]:
        return {"rows": self.definition.options.get("rows", 5)}


class ArrayField(Field):
    """List of strings; a comma separated string is split into items"""
    type_tag = "array"
    input_kind = "text"

    def get_value(self, entity: DynamicEntity) -> list:
        return self.normalize(entity.get_field(self.name))

    def normalize(self, value: Any) -> list:
        if value is None:
            return []
        if isinstance(value, str):
            items = value.split(",")
        elif isinstance(value, (list, tuple, set)):
            items = list(value)
        else:
            items = [value]
        return [str(item).strip() for item in items if not is_blank(item)]

    def blank_value(self) -> list:
        return []

    def coerce(self, raw: Any) -> list[str]:
        if isinstance(raw, dict):
            raise TypeError("mappings are not lists")
        return self.normalize(raw)

    def invalid_message(self, raw: Any) -> str:
        return f"{self.label} must be a list of values"

    def format_value(self, value: Any) -> str:
        items = self.normalize(value)
        return ", ".join(items) if items else BLANK_DISPLAY

    def input_value(self, value: Any) -> Any:
        return ", ".join(self.normalize(value))
