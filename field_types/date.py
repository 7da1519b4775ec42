from datetime import date, datetime, time
from typing import Any

from field_types.base import BLANK_DISPLAY, Field, is_blank

DATE_DISPLAY_FORMAT = "%B %d, %Y"
DATETIME_DISPLAY_FORMAT = "%B %d, %Y at %I:%M %p"


def parse_datetime(raw: Any) -> datetime:
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, date):
        return datetime.combine(raw, time.min)
    text = str(raw).strip()
    if text.endswith(("Z", "z")):
        text = f"{text[:-1]}+00:00"
    return datetime.fromisoformat(text)


def parse_date(raw: Any) -> date:
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    text = str(raw).strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        return parse_datetime(text).date()


class DateField(Field):
    type_tag = "date"
    input_kind = "date"

    def coerce(self, raw: Any) -> date:
        return parse_date(raw)

    def invalid_message(self, raw: Any) -> str:
        return f"{self.label} must be a date (YYYY-MM-DD)"

    def input_value(self, value: Any) -> Any:
        if is_blank(value):
            return None
        try:
            return parse_date(value).isoformat()
        except ValueError:
            return str(value)

    def format_value(self, value: Any) -> str:
        if is_blank(value):
            return BLANK_DISPLAY
        try:
            return parse_date(value).strftime(DATE_DISPLAY_FORMAT)
        except ValueError:
            return str(value)


class DatetimeField(Field):
    type_tag = "datetime"
    input_kind = "datetime-local"

    def coerce(self, raw: Any) -> datetime:
        return parse_datetime(raw)

    def invalid_message(self, raw: Any) -> str:
        return f"{self.label} must be a date and time (YYYY-MM-DDTHH:MM)"

    def input_value(self, value: Any) -> Any:
        if is_blank(value):
            return None
        try:
            return parse_datetime(value).strftime("%Y-%m-%dT%H:%M")
        except ValueError:
            return str(value)

    def format_value(self, value: Any) -> str:
        if is_blank(value):
            return BLANK_DISPLAY
        try:
            return parse_datetime(value).strftime(DATETIME_DISPLAY_FORMAT)
        except ValueError:
            return str(value)
