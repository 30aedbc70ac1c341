"""Single-field constraint rules.

These rules look only at the field's own value:
- required: Field must have a non-empty value
- email/url: Format validation
- minLength/maxLength/size: Length bounds
- minValue/maxValue: Numeric (or any ordered) bounds
- inList/notInList: Membership
- integer/numeric: Number format validation
- regex: Full match against a caller-supplied pattern
- isTrue/isFalse: Boolean acknowledgement
"""

import math
import re
from decimal import Decimal
from typing import Any, Iterable

from formstate.errors import InvalidRuleError
from formstate.rules.base import BaseRule, require_count, values_equal
from formstate.types import is_empty


# =============================================================================
# Format Patterns
# =============================================================================

# Email: Basic RFC 5322 compliant pattern
EMAIL_PATTERN = re.compile(
    r"^[a-z0-9._%+-]+@[a-z0-9.-]+\.[a-z]{2,}\Z",
    re.IGNORECASE,
)

# URL: scheme, host, optional remainder
URL_PATTERN = re.compile(
    r"^(?:https?|ftp)://[^\s/$.?#][^\s/?#]*(?:[/?#][^\s]*)?\Z",
    re.IGNORECASE,
)

INTEGER_PATTERN = re.compile(r"^[+-]?\d+\Z")


# =============================================================================
# Presence
# =============================================================================


class Required(BaseRule):
    """Fails on None, blank strings and empty collections.

    False is not empty; use IsTrue for checkboxes that must be ticked.
    """

    name = "required"
    default_code = "REQUIRED"

    def default_message(self) -> str:
        return "{label} is required"

    def check(self, value, context):
        return not is_empty(value)


# =============================================================================
# Formats
# =============================================================================


class Email(BaseRule):
    name = "email"
    default_code = "INVALID_EMAIL"

    def default_message(self) -> str:
        return "{label} must be a valid email address"

    def check(self, value, context):
        return isinstance(value, str) and EMAIL_PATTERN.match(value) is not None


class Url(BaseRule):
    name = "url"
    default_code = "INVALID_URL"

    def default_message(self) -> str:
        return "{label} must be a valid URL"

    def check(self, value, context):
        return isinstance(value, str) and URL_PATTERN.match(value) is not None


class Integer(BaseRule):
    """Format check only; use MinValue/MaxValue for range."""

    name = "integer"
    default_code = "INVALID_INTEGER"

    def default_message(self) -> str:
        return "{label} must be a whole number"

    def check(self, value, context):
        if isinstance(value, bool):
            return False
        if isinstance(value, int):
            return True
        if isinstance(value, str):
            return INTEGER_PATTERN.match(value.strip()) is not None
        return False


class Numeric(BaseRule):
    name = "numeric"
    default_code = "INVALID_NUMBER"

    def default_message(self) -> str:
        return "{label} must be a number"

    def check(self, value, context):
        if isinstance(value, bool):
            return False
        if isinstance(value, (int, Decimal)):
            return True
        if isinstance(value, float):
            return math.isfinite(value)
        if isinstance(value, str):
            try:
                return math.isfinite(float(value.strip()))
            except ValueError:
                return False
        return False


class Regex(BaseRule):
    """The whole value must match the pattern."""

    name = "regex"
    default_code = "PATTERN_MISMATCH"

    def __init__(
        self,
        pattern: str,
        flags: int = 0,
        message: str | None = None,
        code: str | None = None,
    ):
        if not isinstance(pattern, str):
            raise InvalidRuleError(self.name, f"pattern must be a string, got {pattern!r}")
        try:
            self.pattern = re.compile(pattern, flags)
        except (re.error, TypeError) as e:
            raise InvalidRuleError(self.name, f"bad pattern {pattern!r}: {e}") from e
        super().__init__(message, code)

    @property
    def params(self):
        return {"pattern": self.pattern.pattern}

    def default_message(self) -> str:
        return "{label} format is invalid"

    def check(self, value, context):
        return isinstance(value, str) and self.pattern.fullmatch(value) is not None


# =============================================================================
# Length
# =============================================================================


class _LengthRule(BaseRule):
    def __init__(self, length: int, message: str | None = None, code: str | None = None):
        self.length = require_count(self.name, length, "length")
        super().__init__(message, code)

    @property
    def params(self):
        return {"length": self.length}

    def check(self, value, context):
        try:
            actual = len(value)
        except TypeError:
            return False
        return self.compare(actual)

    def compare(self, actual: int) -> bool:
        raise NotImplementedError


class MinLength(_LengthRule):
    name = "minLength"
    default_code = "MIN_LENGTH"

    def default_message(self) -> str:
        return f"{{label}} must be at least {self.length} characters"

    def compare(self, actual):
        return actual >= self.length


class MaxLength(_LengthRule):
    name = "maxLength"
    default_code = "MAX_LENGTH"

    def default_message(self) -> str:
        return f"{{label}} must be at most {self.length} characters"

    def compare(self, actual):
        return actual <= self.length


class Size(_LengthRule):
    """Exact length."""

    name = "size"
    default_code = "SIZE"

    def default_message(self) -> str:
        return f"{{label}} must be exactly {self.length} characters"

    def compare(self, actual):
        return actual == self.length


# =============================================================================
# Bounds
# =============================================================================


def _comparable(value: Any, bound: Any) -> Any:
    """Convert numeric strings so they compare against a numeric bound."""
    if isinstance(value, str) and isinstance(bound, (int, float, Decimal)):
        try:
            return float(value.strip())
        except ValueError:
            return value
    return value


class _BoundRule(BaseRule):
    def __init__(self, bound: Any, message: str | None = None, code: str | None = None):
        if bound is None or isinstance(bound, bool):
            raise InvalidRuleError(self.name, f"bound must be an ordered value, got {bound!r}")
        self.bound = bound
        super().__init__(message, code)

    @property
    def params(self):
        return {"bound": self.bound}

    def check(self, value, context):
        if isinstance(value, bool):
            return False
        value = _comparable(value, self.bound)
        if isinstance(value, float) and not math.isfinite(value):
            return False
        try:
            return self.compare(value)
        except TypeError:
            # Unorderable against the bound
            return False

    def compare(self, value: Any) -> bool:
        raise NotImplementedError


class MinValue(_BoundRule):
    name = "minValue"
    default_code = "MIN_VALUE"

    def default_message(self) -> str:
        return f"{{label}} must be at least {self.bound}"

    def compare(self, value):
        return not value < self.bound


class MaxValue(_BoundRule):
    name = "maxValue"
    default_code = "MAX_VALUE"

    def default_message(self) -> str:
        return f"{{label}} must be at most {self.bound}"

    def compare(self, value):
        return not value > self.bound


# =============================================================================
# Membership
# =============================================================================


class _MembershipRule(BaseRule):
    def __init__(
        self,
        values: Iterable[Any],
        message: str | None = None,
        code: str | None = None,
    ):
        if isinstance(values, (str, bytes)):
            raise InvalidRuleError(self.name, "values must be a collection, not a string")
        self.values = tuple(values)
        if not self.values:
            raise InvalidRuleError(self.name, "values must not be empty")
        super().__init__(message, code)

    @property
    def params(self):
        return {"values": list(self.values)}

    def contains(self, value: Any) -> bool:
        return any(values_equal(value, candidate) for candidate in self.values)

    def _listing(self) -> str:
        return ", ".join(str(v) for v in self.values)


class InList(_MembershipRule):
    name = "inList"
    default_code = "NOT_IN_LIST"

    def default_message(self) -> str:
        return f"{{label}} must be one of: {self._listing()}"

    def check(self, value, context):
        return self.contains(value)


class NotInList(_MembershipRule):
    name = "notInList"
    default_code = "IN_LIST"

    def default_message(self) -> str:
        return f"{{label}} must not be one of: {self._listing()}"

    def check(self, value, context):
        return not self.contains(value)


# =============================================================================
# Booleans
# =============================================================================


class IsTrue(BaseRule):
    name = "isTrue"
    default_code = "NOT_TRUE"

    def default_message(self) -> str:
        return "{label} must be checked"

    def check(self, value, context):
        return value is True


class IsFalse(BaseRule):
    name = "isFalse"
    default_code = "NOT_FALSE"

    def default_message(self) -> str:
        return "{label} must not be checked"

    def check(self, value, context):
        return value is False


# =============================================================================
# Factories
# =============================================================================


def required(message: str | None = None, code: str | None = None) -> Required:
    return Required(message, code)


def email(message: str | None = None, code: str | None = None) -> Email:
    return Email(message, code)


def url(message: str | None = None, code: str | None = None) -> Url:
    return Url(message, code)


def integer(message: str | None = None, code: str | None = None) -> Integer:
    return Integer(message, code)


def numeric(message: str | None = None, code: str | None = None) -> Numeric:
    return Numeric(message, code)


def regex(
    pattern: str,
    flags: int = 0,
    message: str | None = None,
    code: str | None = None,
) -> Regex:
    return Regex(pattern, flags, message, code)


def min_length(length: int, message: str | None = None, code: str | None = None) -> MinLength:
    return MinLength(length, message, code)


def max_length(length: int, message: str | None = None, code: str | None = None) -> MaxLength:
    return MaxLength(length, message, code)


def size(length: int, message: str | None = None, code: str | None = None) -> Size:
    return Size(length, message, code)


def min_value(bound: Any, message: str | None = None, code: str | None = None) -> MinValue:
    return MinValue(bound, message, code)


def max_value(bound: Any, message: str | None = None, code: str | None = None) -> MaxValue:
    return MaxValue(bound, message, code)


def in_list(values: Iterable[Any], message: str | None = None, code: str | None = None) -> InList:
    return InList(values, message, code)


def not_in_list(
    values: Iterable[Any],
    message: str | None = None,
    code: str | None = None,
) -> NotInList:
    return NotInList(values, message, code)


def is_true(message: str | None = None, code: str | None = None) -> IsTrue:
    return IsTrue(message, code)


def is_false(message: str | None = None, code: str | None = None) -> IsFalse:
    return IsFalse(message, code)
