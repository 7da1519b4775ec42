"""Field strategies, one per field kind"""

from field_types.base import EntityResolver, Field, FieldContext, entity_label, is_blank
from field_types.boolean import BooleanField
from field_types.date import DateField, DatetimeField
from field_types.number import NumberField
from field_types.reference import BelongsToField, ReferenceField
from field_types.repeater import RepeaterField
from field_types.select import SelectField
from field_types.structured import ArrayField, JsonField
from field_types.taxonomy import TaxonomyField
from field_types.text import StringField, TextField

__all__ = [
    "EntityResolver",
    "Field",
    "FieldContext",
    "entity_label",
    "is_blank",
    "ArrayField",
    "BelongsToField",
    "BooleanField",
    "DateField",
    "DatetimeField",
    "JsonField",
    "NumberField",
    "ReferenceField",
    "RepeaterField",
    "SelectField",
    "StringField",
    "TaxonomyField",
    "TextField",
]
