"""Date comparison rules.

DateBefore/DateAfter accept date and datetime values. String values are parsed
first: with the rule's strptime format when one is given, as ISO
8601 otherwise. A string that does not parse fails with DATE_UNPARSABLE rather
than the comparison message.

Formats are checked when the rule is built; a format with no directives,
an unknown directive, or one that cannot round-trip a date is a configuration
error.
"""

import re
from datetime import date, datetime, time
from typing import Any

from formstate.errors import InvalidRuleError
from formstate.rules.base import BaseRule
from formstate.types import ValidationError, is_empty


# strptime directives supported on every platform
KNOWN_DIRECTIVES = frozenset("aAwdbBmyYHIpMSfzjUWcxXGuV%")

_DIRECTIVE = re.compile(r"%(.?)")
_TIME_DIRECTIVES = frozenset("HIpMSfzcX")

# Round-trip sample; every field distinct
_SAMPLE = datetime(2000, 11, 23, 13, 45, 30)

UNPARSABLE_CODE = "DATE_UNPARSABLE"


def check_format(rule: str, fmt: Any) -> str:
    """Validate a strptime format, returning it unchanged."""
    if not isinstance(fmt, str) or not fmt:
        raise InvalidRuleError(rule, f"format must be a non-empty string, got {fmt!r}")

    directives = [d for d in _DIRECTIVE.findall(fmt) if d != "%"]
    if not directives:
        raise InvalidRuleError(rule, f"format {fmt!r} contains no date directives")

    unknown = sorted({d for d in directives if d not in KNOWN_DIRECTIVES})
    if unknown:
        listed = ", ".join(f"%{d}" if d else "trailing %" for d in unknown)
        raise InvalidRuleError(rule, f"format {fmt!r} uses unsupported directives: {listed}")

    try:
        datetime.strptime(_SAMPLE.strftime(fmt), fmt)
    except ValueError as e:
        raise InvalidRuleError(rule, f"format {fmt!r} cannot be parsed back: {e}") from e
    return fmt


def _has_time(fmt: str) -> bool:
    return any(d in _TIME_DIRECTIVES for d in _DIRECTIVE.findall(fmt))


def parse_date(value: Any, fmt: str | None = None) -> date | None:
    """Parse a date/datetime from a value, or return None if it cannot be.

    Values parsed with a format that has no time directives come back as
    plain dates.
    """
    if isinstance(value, (date, datetime)):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if fmt is not None:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            return None
        return parsed if _has_time(fmt) else parsed.date()

    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _align(value: date, bound: date) -> date:
    """Bring a value to the bound's granularity (date vs datetime)."""
    if isinstance(bound, datetime):
        if not isinstance(value, datetime):
            return datetime.combine(value, time.min)
        return value
    if isinstance(value, datetime):
        return value.date()
    return value


class _DateRule(BaseRule):
    skip_empty = True

    def __init__(
        self,
        bound: date | datetime | str,
        fmt: str | None = None,
        message: str | None = None,
        code: str | None = None,
        unparsable_message: str | None = None,
    ):
        self.fmt = check_format(self.name, fmt) if fmt is not None else None

        parsed = parse_date(bound, self.fmt)
        if parsed is None:
            raise InvalidRuleError(self.name, f"bound {bound!r} is not a date")
        self.bound = parsed

        super().__init__(message, code)
        self.unparsable_message = unparsable_message or self._default_unparsable()

    @property
    def params(self):
        params: dict[str, Any] = {"bound": self.bound.isoformat()}
        if self.fmt:
            params["format"] = self.fmt
        return params

    def _display_bound(self) -> str:
        if self.fmt:
            return self.bound.strftime(self.fmt)
        return self.bound.isoformat()

    def _default_unparsable(self) -> str:
        if self.fmt:
            return f"{{label}} must be a date in the format {self.fmt}"
        return "{label} must be a valid date"

    def __call__(self, value, context) -> ValidationError | None:
        if is_empty(value):
            return None

        parsed = parse_date(value, self.fmt)
        if parsed is None:
            return self.fail(self.unparsable_message, UNPARSABLE_CODE)

        try:
            if self.compare(_align(parsed, self.bound)):
                return None
        except TypeError:
            # Naive vs aware datetimes cannot be ordered
            pass
        return self.fail()

    def compare(self, value: date) -> bool:
        raise NotImplementedError


class DateBefore(_DateRule):
    """Value must be strictly before the bound."""

    name = "dateBefore"
    default_code = "DATE_NOT_BEFORE"

    def default_message(self) -> str:
        return f"{{label}} must be before {self._display_bound()}"

    def compare(self, value):
        return value < self.bound


class DateAfter(_DateRule):
    """Value must be strictly after the bound."""

    name = "dateAfter"
    default_code = "DATE_NOT_AFTER"

    def default_message(self) -> str:
        return f"{{label}} must be after {self._display_bound()}"

    def compare(self, value):
        return value > self.bound


def date_before(
    bound: date | datetime | str,
    fmt: str | None = None,
    message: str | None = None,
    code: str | None = None,
    unparsable_message: str | None = None,
) -> DateBefore:
    return DateBefore(bound, fmt, message, code, unparsable_message)


def date_after(
    bound: date | datetime | str,
    fmt: str | None = None,
    message: str | None = None,
    code: str | None = None,
    unparsable_message: str | None = None,
) -> DateAfter:
    return DateAfter(bound, fmt, message, code, unparsable_message)
