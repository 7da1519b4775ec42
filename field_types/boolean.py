from typing import Any

from field_types.base import Field, is_blank

TRUE_VALUES = frozenset({"1", "true", "t", "yes", "y", "on"})
FALSE_VALUES = frozenset({"0", "false", "f", "no", "n", "off", ""})


class BooleanField(Field):
    type_tag = "boolean"
    input_kind = "checkbox"

    def coerce(self, raw: Any) -> bool:
        if isinstance(raw, str):
            return raw.strip().lower() in TRUE_VALUES
        return bool(raw)

    def validate(self, raw: Any) -> bool:
        # Checkbox submissions never fail: anything falsy becomes False
        if is_blank(raw):
            return False
        return self.coerce(raw)

    def is_empty(self, raw: Any) -> bool:
        return is_blank(raw) or not self.coerce(raw)

    def input_value(self, value: Any) -> bool:
        return False if is_blank(value) else self.coerce(value)

    def input_options(self) -> dict[str, Any]:
        return {"checked_value": "1", "unchecked_value": "0"}

    def format_value(self, value: Any) -> str:
        return "✓ Yes" if not is_blank(value) and self.coerce(value) else "✗ No"
