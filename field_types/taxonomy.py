from typing import Any, Optional

from field_types.base import BLANK_DISPLAY, Field, is_blank
from schemas.input_spec import Choice, InputSpec


class TaxonomyField(Field):
    """Single foreign id into a taxonomy content type"""
    type_tag = "taxonomy"
    input_kind = "select"

    @property
    def taxonomy_type(self) -> Optional[str]:
        return self.definition.taxonomy_type

    def coerce(self, raw: Any) -> int:
        if isinstance(raw, bool):
            raise TypeError("booleans are not ids")
        return int(str(raw).strip())

    def invalid_message(self, raw: Any) -> str:
        return f"{self.label} must reference an existing entry"

    def format_value(self, value: Any) -> str:
        if is_blank(value) or not self.taxonomy_type:
            return BLANK_DISPLAY
        if self.resolver is None:
            return str(value)

        term = self.resolver.find_one(self.taxonomy_type, self.coerce(value))
        if term is None or is_blank(term.get_field("name")):
            return BLANK_DISPLAY
        return str(term.get_field("name"))

    def describe_input(self, current_value: Any = None, path: Optional[str] = None) -> InputSpec:
        spec = super().describe_input(current_value, path)
        if not self.taxonomy_type or self.resolver is None:
            # No vocabulary to offer: plain text box
            spec.kind = "text"
            return spec

        terms = sorted(
            self.resolver.find_all(self.taxonomy_type),
            key=lambda term: str(term.get_field("name") or "").casefold(),
        )
        spec.include_blank = None if self.required else f"Select {self.label}"
        spec.choices = [
            Choice(
                label=str(term.get_field("name") or term.id),
                value=term.id,
                selected=not is_blank(current_value) and str(term.id) == str(current_value),
            )
            for term in terms
        ]
        return spec
