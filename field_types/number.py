from decimal import Decimal
from typing import Any

from field_types.base import BLANK_DISPLAY, Field, is_blank


class NumberField(Field):
    """
    Numeric input for ``number``, ``integer`` and ``decimal`` tags.

    ``integer`` only accepts integral values, ``decimal`` is quantized to the
    declared scale and ``number`` keeps integers as ints and the rest as floats.
    """
    type_tag = "number"
    input_kind = "number"

    def _to_decimal(self, raw: Any) -> Decimal:
        if isinstance(raw, bool):
            raise TypeError("booleans are not numbers")
        value = Decimal(str(raw).strip())
        if not value.is_finite():
            raise ValueError("number must be finite")
        return value

    def coerce(self, raw: Any) -> Any:
        value = self._to_decimal(raw)
        field_type = self.definition.type

        if field_type == "integer":
            if value != value.to_integral_value():
                raise ValueError("not an integer")
            return int(value)

        if field_type == "decimal":
            if self.definition.scale is not None:
                return value.quantize(Decimal(1).scaleb(-self.definition.scale))
            return value

        if value == value.to_integral_value():
            return int(value)
        return float(value)

    def invalid_message(self, raw: Any) -> str:
        if self.definition.type == "integer":
            return f"{self.label} must be a whole number"
        return f"{self.label} must be a number"

    def input_options(self) -> dict[str, Any]:
        field_type = self.definition.type
        if field_type == "integer":
            return {"step": "1"}
        if field_type == "decimal" and self.definition.scale is not None:
            return {"step": str(Decimal(1).scaleb(-self.definition.scale))}
        return {"step": "any"}

    def format_value(self, value: Any) -> str:
        if is_blank(value):
            return BLANK_DISPLAY
        if self.definition.type == "decimal" and self.definition.scale is not None:
            return str(self._to_decimal(value).quantize(Decimal(1).scaleb(-self.definition.scale)))
        return str(value)
