"""Cross-field rules.

These rules read other fields' values from the FormContext. Each declares the
field names it reads through `references`, so a Form can reject unknown names
when the field is registered rather than when it is first validated.

Available rules:
- requiredIf: Require a value when another field holds an expected value, or
  when a predicate over declared fields holds
- same: Value must equal another field's value (password confirmation)
"""

from typing import Any, Callable, Sequence

from formstate.errors import InvalidRuleError
from formstate.rules.base import BaseRule, resolve, values_equal
from formstate.types import is_empty


class _Filled:
    """Sentinel: condition holds when the referenced field is non-empty."""

    def __repr__(self) -> str:
        return "FILLED"


FILLED: Any = _Filled()


def _check_field_name(rule: str, name: Any) -> str:
    if not isinstance(name, str) or not name:
        raise InvalidRuleError(rule, f"field name must be a non-empty string, got {name!r}")
    return name


# =============================================================================
# Required If
# =============================================================================


class RequiredIf(BaseRule):
    """Requires a value when a condition over other fields holds.

    Two modes:
        Named field: RequiredIf("contactMethod", "phone") requires this field
            while contactMethod equals "phone" (or, for a group field, while
            "phone" is among its selected payloads). Omitting the expected
            value requires this field whenever the other field is filled.
        Predicate: RequiredIf(fields=["country", "age"], when=fn) calls
            fn(country_value, age_value) with the resolved values, in the
            declared order, and requires this field when it returns truthy.
    """

    name = "requiredIf"
    default_code = "REQUIRED"

    def __init__(
        self,
        field: str | None = None,
        expected: Any = FILLED,
        *,
        fields: Sequence[str] | None = None,
        when: Callable[..., bool] | None = None,
        message: str | None = None,
        code: str | None = None,
    ):
        if field is not None and (fields is not None or when is not None):
            raise InvalidRuleError(
                self.name, "use either a named field or fields + when, not both"
            )

        if field is not None:
            self.fields: tuple[str, ...] = (_check_field_name(self.name, field),)
            self.expected = expected
            self.when = None
        elif when is not None:
            if not callable(when):
                raise InvalidRuleError(self.name, f"when must be callable, got {when!r}")
            if not fields or isinstance(fields, str):
                raise InvalidRuleError(
                    self.name, "predicate mode needs a list of referenced field names"
                )
            self.fields = tuple(_check_field_name(self.name, f) for f in fields)
            self.expected = FILLED
            self.when = when
        else:
            raise InvalidRuleError(self.name, "a named field or a when predicate is required")

        super().__init__(message, code)

    @property
    def references(self):
        return self.fields

    @property
    def params(self):
        params: dict[str, Any] = {"fields": list(self.fields)}
        if self.when is None and self.expected is not FILLED:
            params["expected"] = self.expected
        return params

    def default_message(self) -> str:
        return "{label} is required"

    def condition_met(self, context) -> bool:
        values = [resolve(context, name) for name in self.fields]
        if self.when is not None:
            return bool(self.when(*values))
        if self.expected is FILLED:
            return not is_empty(values[0])
        if isinstance(values[0], tuple) and not isinstance(self.expected, tuple):
            # Group selection: any selected payload matches
            return any(values_equal(v, self.expected) for v in values[0])
        return values_equal(values[0], self.expected)

    def check(self, value, context):
        if not self.condition_met(context):
            return True
        return not is_empty(value)


# =============================================================================
# Same
# =============================================================================


class Same(BaseRule):
    """Value must equal another field's current value.

    Equality is type-sensitive: 1 does not match "1" and True does not
    match 1.
    """

    name = "same"
    default_code = "NOT_SAME"

    def __init__(self, field: str, message: str | None = None, code: str | None = None):
        self.field = _check_field_name(self.name, field)
        super().__init__(message, code)

    @property
    def references(self):
        return (self.field,)

    @property
    def params(self):
        return {"field": self.field}

    def default_message(self) -> str:
        return f"{{label}} must match {{{self.field}:label}}"

    def check(self, value, context):
        return values_equal(value, resolve(context, self.field))


# =============================================================================
# Factories
# =============================================================================


def required_if(
    field: str | None = None,
    expected: Any = FILLED,
    *,
    fields: Sequence[str] | None = None,
    when: Callable[..., bool] | None = None,
    message: str | None = None,
    code: str | None = None,
) -> RequiredIf:
    return RequiredIf(
        field,
        expected,
        fields=fields,
        when=when,
        message=message,
        code=code,
    )


def same(field: str, message: str | None = None, code: str | None = None) -> Same:
    return Same(field, message, code)
