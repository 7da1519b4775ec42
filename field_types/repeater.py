from typing import Any, Optional

from core.exceptions import FieldValidationError
from field_types.base import BLANK_DISPLAY, Field, is_blank
from schemas.input_spec import InputSpec

INDEX_PLACEHOLDER = "__INDEX__"


class RepeaterField(Field):
    """
    Ordered list of rows, each row a map keyed by the sub-field names.

    Every sub-value goes through the strategy of its own sub-field, so a
    reference inside a repeater is normalized exactly like a top-level one.
    """
    type_tag = "repeater"
    input_kind = "repeater"

    def __init__(self, definition, context):
        super().__init__(definition, context)
        self.sub_fields: list[Field] = context.registry.build_all(
            definition.sub_fields, resolver=context.resolver
        )

    def blank_value(self) -> list:
        return []

    def normalize(self, value: Any) -> list[dict]:
        if is_blank(value):
            return []
        rows = value.values() if isinstance(value, dict) else value
        return [dict(row) for row in rows if isinstance(row, dict)]

    def get_value(self, entity) -> list[dict]:
        return self.normalize(entity.get_field(self.name))

    # Display

    def format_value(self, value: Any) -> str:
        rows = self.normalize(value)
        if not rows:
            return BLANK_DISPLAY
        lines = []
        for position, row in enumerate(rows, start=1):
            parts = [
                f"{sub_field.label}: {sub_field.safe_format(row.get(sub_field.name))}"
                for sub_field in self.sub_fields
            ]
            lines.append(f"{position}. {', '.join(parts)}")
        return "\n".join(lines)

    # Input

    def describe_input(self, current_value: Any = None, path: Optional[str] = None) -> InputSpec:
        base_path = path or self.name
        rows = self.normalize(current_value)

        spec = super().describe_input(current_value, path)
        spec.value = rows
        spec.rows = [
            [
                sub_field.describe_input(row.get(sub_field.name), path=f"{base_path}[{index}][{sub_field.name}]")
                for sub_field in self.sub_fields
            ]
            for index, row in enumerate(rows)
        ]
        spec.template = [
            sub_field.describe_input(
                sub_field.definition.default,
                path=f"{base_path}[{INDEX_PLACEHOLDER}][{sub_field.name}]",
            )
            for sub_field in self.sub_fields
        ]
        spec.options = {
            "index_placeholder": INDEX_PLACEHOLDER,
            "next_index": len(rows),
            "removable": True,
            "add_label": f"Add {self.label}",
        }
        return spec

    # Submission

    def coerce(self, raw: Any) -> list[dict]:
        cleaned_rows = []
        for position, row in self._ordered_rows(raw):
            if not isinstance(row, dict):
                raise FieldValidationError(self.name, f"{self.label} row {position} is malformed")
            if all(sub_field.is_empty(row.get(sub_field.name)) for sub_field in self.sub_fields):
                continue
            cleaned_rows.append(self._clean_row(position, row))
        return cleaned_rows

    def _ordered_rows(self, raw: Any) -> list[tuple[int, Any]]:
        if isinstance(raw, dict):
            try:
                indexed = [(int(str(key)), row) for key, row in raw.items()]
            except ValueError:
                raise FieldValidationError(self.name, f"{self.label} row indexes must be integers")
            return sorted(indexed, key=lambda item: item[0])
        if isinstance(raw, (list, tuple)):
            return list(enumerate(raw))
        raise FieldValidationError(self.name, f"{self.label} must be a list of rows")

    def _clean_row(self, position: int, row: dict) -> dict:
        cleaned = {}
        for sub_field in self.sub_fields:
            value = row.get(sub_field.name)
            if is_blank(value):
                cleaned[sub_field.name] = sub_field.blank_value()
                continue
            try:
                cleaned[sub_field.name] = sub_field.validate(value)
            except FieldValidationError as e:
                raise FieldValidationError(self.name, f"Row {position}: {e.message}")
        return cleaned
