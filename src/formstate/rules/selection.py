"""Selection-count rules for group fields.

A group field's value is the tuple of its selected option payloads, so these
rules simply count it. They are only meaningful on GroupFieldState.
"""

from collections.abc import Sized
from typing import Any

from formstate.errors import InvalidRuleError
from formstate.rules.base import BaseRule, require_count


def selected_count(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, Sized) and not isinstance(value, str):
        return len(value)
    return 1


class MinSelected(BaseRule):
    name = "minSelected"
    default_code = "MIN_SELECTED"

    def __init__(self, count: int, message: str | None = None, code: str | None = None):
        self.count = require_count(self.name, count, "count")
        super().__init__(message, code)

    @property
    def params(self):
        return {"count": self.count}

    def default_message(self) -> str:
        noun = "option" if self.count == 1 else "options"
        return f"Select at least {self.count} {noun} for {{label}}"

    def check(self, value, context):
        return selected_count(value) >= self.count


class MaxSelected(BaseRule):
    name = "maxSelected"
    default_code = "MAX_SELECTED"

    def __init__(self, count: int, message: str | None = None, code: str | None = None):
        self.count = require_count(self.name, count, "count")
        super().__init__(message, code)

    @property
    def params(self):
        return {"count": self.count}

    def default_message(self) -> str:
        noun = "option" if self.count == 1 else "options"
        return f"Select at most {self.count} {noun} for {{label}}"

    def check(self, value, context):
        return selected_count(value) <= self.count


class RangeSelected(BaseRule):
    """Selected count must lie in [low, high], both inclusive."""

    name = "rangeSelected"
    default_code = "RANGE_SELECTED"

    def __init__(
        self,
        low: int,
        high: int,
        message: str | None = None,
        code: str | None = None,
    ):
        self.low = require_count(self.name, low, "low")
        self.high = require_count(self.name, high, "high")
        if self.low > self.high:
            raise InvalidRuleError(self.name, f"low ({low}) must not exceed high ({high})")
        super().__init__(message, code)

    @property
    def params(self):
        return {"low": self.low, "high": self.high}

    def default_message(self) -> str:
        return f"Select between {self.low} and {self.high} options for {{label}}"

    def check(self, value, context):
        return self.low <= selected_count(value) <= self.high


def min_selected(count: int, message: str | None = None, code: str | None = None) -> MinSelected:
    return MinSelected(count, message, code)


def max_selected(count: int, message: str | None = None, code: str | None = None) -> MaxSelected:
    return MaxSelected(count, message, code)


def range_selected(
    low: int,
    high: int,
    message: str | None = None,
    code: str | None = None,
) -> RangeSelected:
    return RangeSelected(low, high, message, code)
