"""Base field strategy and shared helpers"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, Optional, Protocol

from core.exceptions import FieldValidationError
from core.logging_config import get_logger
from schemas.entity import DynamicEntity
from schemas.field_definition import FieldDefinition
from schemas.input_spec import InputSpec

if TYPE_CHECKING:
    from services.field_type_registry import FieldTypeRegistry

logger = get_logger(__name__)

BLANK_DISPLAY = "-"


class EntityResolver(Protocol):
    """Lookup of related entities used by taxonomy and reference fields"""

    def find_one(self, schema_slug: str, entity_id: int) -> Optional[DynamicEntity]: ...

    def find_many(self, schema_slug: str, ids: list[int]) -> list[DynamicEntity]: ...

    def find_all(self, schema_slug: str) -> list[DynamicEntity]: ...


@dataclass(frozen=True)
class FieldContext:
    registry: "FieldTypeRegistry"
    resolver: Optional[EntityResolver] = None


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set)):
        return all(is_blank(item) for item in value)
    if isinstance(value, dict):
        return not value
    return False


def entity_label(entity: DynamicEntity) -> str:
    """Display name of a related entity: title, else name, else id"""
    for attribute in ("title", "name"):
        value = entity.get_field(attribute)
        if not is_blank(value):
            return str(value)
    return str(entity.id)


class Field:
    """
    Strategy for one field of a schema.

    Subclasses override ``coerce`` for submissions, ``format_value`` for
    display and ``describe_input`` for form controls.
    """
    type_tag: ClassVar[str] = "string"
    input_kind: ClassVar[str] = "text"

    def __init__(self, definition: FieldDefinition, context: FieldContext):
        self.definition = definition
        self.context = context

    def __repr__(self):
        return f"<{self.__class__.__name__}(name='{self.name}', type='{self.definition.type}')>"

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def label(self) -> str:
        return self.definition.label

    @property
    def required(self) -> bool:
        return self.definition.required

    @property
    def resolver(self) -> Optional[EntityResolver]:
        return self.context.resolver

    # Reading

    def get_value(self, entity: DynamicEntity) -> Any:
        return entity.get_field(self.name)

    def normalize(self, value: Any) -> Any:
        """Shape a stored or assigned value without rejecting it"""
        return value

    # Display

    def format_for_display(self, entity: DynamicEntity) -> str:
        try:
            value = self.get_value(entity)
        except Exception as e:
            logger.error_ctx(f"Error reading field {self.name}: {e}", field=self.name)
            return BLANK_DISPLAY
        return self.safe_format(value)

    def safe_format(self, value: Any) -> str:
        try:
            return self.format_value(value)
        except Exception as e:
            logger.error_ctx(f"Error displaying field {self.name}: {e}", field=self.name)
            return BLANK_DISPLAY if is_blank(value) else str(value)

    def format_value(self, value: Any) -> str:
        if is_blank(value):
            return BLANK_DISPLAY
        return str(value)

    # Input

    def describe_input(self, current_value: Any = None, path: Optional[str] = None) -> InputSpec:
        return InputSpec(
            kind=self.input_kind,
            name=path or self.name,
            label=self.label,
            required=self.required,
            value=self.input_value(current_value),
            placeholder=self.definition.placeholder,
            help_text=self.definition.help_text,
            options=self.input_options(),
        )

    def input_value(self, value: Any) -> Any:
        return value

    def input_options(self) -> dict[str, Any]:
        return {}

    # Submission

    def blank_value(self) -> Any:
        return None

    def is_empty(self, raw: Any) -> bool:
        return is_blank(raw)

    def validate(self, raw: Any) -> Any:
        if is_blank(raw):
            return self.blank_value()
        try:
            return self.coerce(raw)
        except FieldValidationError:
            raise
        except (ValueError, TypeError, ArithmeticError):
            raise FieldValidationError(self.name, self.invalid_message(raw))

    def coerce(self, raw: Any) -> Any:
        return raw if isinstance(raw, str) else str(raw)

    def invalid_message(self, raw: Any) -> str:
        return f"{self.label} is invalid"
