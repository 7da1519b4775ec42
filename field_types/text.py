import re
from typing import Any

from field_types.base import BLANK_DISPLAY, Field, is_blank

PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


class StringField(Field):
    type_tag = "string"
    input_kind = "text"


class TextField(Field):
    """Multi-line text; display keeps paragraphs separated by one blank line"""
    type_tag = "textarea"
    input_kind = "textarea"

    def input_options(self) -> dict[str, Any]:
        return {"rows": self.definition.options.get("rows", 5)}

    def format_value(self, value: Any) -> str:
        if is_blank(value):
            return BLANK_DISPLAY
        text = str(value).replace("\r\n", "\n")
        paragraphs = [paragraph.strip() for paragraph in PARAGRAPH_BREAK.split(text)]
        return "\n\n".join(paragraph for paragraph in paragraphs if paragraph)
