from typing import Any, Optional

from field_types.base import BLANK_DISPLAY, Field, is_blank
from schemas.input_spec import Choice, InputSpec


class SelectField(Field):
    type_tag = "select"
    input_kind = "select"

    @property
    def include_blank(self) -> Optional[str]:
        return None if self.required else f"Select {self.label}"

    def describe_input(self, current_value: Any = None, path: Optional[str] = None) -> InputSpec:
        spec = super().describe_input(current_value, path)
        spec.include_blank = self.include_blank
        spec.choices = [
            Choice(
                label=label,
                value=value,
                selected=not is_blank(current_value) and str(value) == str(current_value),
            )
            for label, value in self.definition.choices
        ]
        return spec

    def coerce(self, raw: Any) -> Any:
        for value in self.definition.choice_values:
            if value == raw or str(value) == str(raw).strip():
                return value
        raise ValueError(f"'{raw}' is not a choice")

    def invalid_message(self, raw: Any) -> str:
        return f"{self.label} must be one of: {', '.join(str(v) for v in self.definition.choice_values)}"

    def format_value(self, value: Any) -> str:
        if is_blank(value):
            return BLANK_DISPLAY
        return self.definition.choice_label(value) or str(value)
