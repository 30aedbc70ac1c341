"""Message rendering.

Rule messages are templates. When a rule fails on a field, the template is
rendered against that field's label and value and the form context, so the
error stored on a field state is ready to display.
"""

import re
from dataclasses import replace
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from formstate.types import ValidationError

if TYPE_CHECKING:
    from formstate.context import FormContext


class MessageInterpolator:
    """Interpolates labels and values into error messages.

    Supports:
    - {label} - The failing field's label
    - {value} - The failing field's value, formatted for display
    - {fieldName} or {fieldName:value} - Another field's formatted value
    - {fieldName:raw} - Another field's raw value
    - {fieldName:label} - Another field's label

    Placeholders naming fields absent from the context are left untouched.
    The names "label" and "value" always refer to the failing field.
    """

    # Pattern: {fieldName[:modifier]}
    PATTERN = re.compile(r"\{(?P<field>\w+)(?::(?P<modifier>value|raw|label))?\}")

    def __init__(self, date_format: str = "%B %d, %Y", datetime_format: str = "%B %d, %Y %I:%M %p"):
        self.date_format = date_format
        self.datetime_format = datetime_format

    def interpolate(
        self,
        template: str,
        label: str,
        value: Any = None,
        context: "FormContext | None" = None,
    ) -> str:
        """Interpolate labels and values into a message template.

        Args:
            template: Message template with {placeholder}s
            label: Label of the field the message is for
            value: Current value of that field
            context: Form snapshot used to resolve other fields

        Returns:
            Message with resolvable placeholders replaced
        """

        def replace_match(match: re.Match) -> str:
            name = match.group("field")
            modifier = match.group("modifier")

            if modifier is None and name == "label":
                return label
            if modifier is None and name == "value":
                return self.format_value(value)

            state = context.get_field(name) if context is not None else None
            if state is None:
                return match.group(0)

            if modifier == "label":
                return state.label
            elif modifier == "raw":
                return str(state.value) if state.value is not None else ""
            else:
                return self.format_value(state.value)

        return self.PATTERN.sub(replace_match, template)

    def render(
        self,
        error: ValidationError,
        label: str,
        value: Any = None,
        context: "FormContext | None" = None,
    ) -> ValidationError:
        """Return a copy of the error with its message interpolated."""
        message = self.interpolate(error.message, label, value, context)
        if message == error.message:
            return error
        return replace(error, message=message)

    def format_value(self, value: Any) -> str:
        """Format a value for display."""
        if value is None:
            return ""
        if isinstance(value, bool):
            return "Yes" if value else "No"
        if isinstance(value, datetime):
            return value.strftime(self.datetime_format)
        if isinstance(value, date):
            return value.strftime(self.date_format)
        if isinstance(value, (list, tuple)):
            return ", ".join(self.format_value(v) for v in value)
        return str(value)


def to_title_case(name: str) -> str:
    """Convert a camelCase or snake_case field name to Title Case."""
    result = re.sub(r"([A-Z])", r" \1", name).replace("_", " ")
    return " ".join(result.split()).title()


DEFAULT_INTERPOLATOR = MessageInterpolator()
