"""Base class and shared helpers for built-in rules."""

from typing import TYPE_CHECKING, Any

from formstate.errors import InvalidRuleError
from formstate.types import ValidationError, is_empty

if TYPE_CHECKING:
    from formstate.context import FormContext


class BaseRule:
    """Base class for built-in rules.

    Subclasses override `check`, which returns True when the value passes.
    A rule is configured once at construction and is stateless afterwards.

    Class attributes:
        name: Rule type name used in configuration error messages
        default_code: Error code used when no override is given
        skip_empty: If True, empty values pass without calling `check`
    """

    name = "rule"
    default_code = "INVALID"
    skip_empty = False

    def __init__(self, message: str | None = None, code: str | None = None):
        self.message = message or self.default_message()
        self.code = code or self.default_code

    @property
    def references(self) -> tuple[str, ...]:
        """Field names this rule reads from the form context."""
        return ()

    @property
    def params(self) -> dict[str, Any]:
        """Rule configuration, exposed on the errors this rule produces."""
        return {}

    def default_message(self) -> str:
        return "{label} is invalid"

    def check(self, value: Any, context: "FormContext") -> bool:
        """Return True if the value passes. Override in subclasses."""
        raise NotImplementedError("Subclasses must implement check()")

    def fail(self, message: str | None = None, code: str | None = None) -> ValidationError:
        return ValidationError(
            message=message or self.message,
            code=code or self.code,
            params=self.params,
        )

    def __call__(self, value: Any, context: "FormContext") -> ValidationError | None:
        if self.skip_empty and is_empty(value):
            return None
        if self.check(value, context):
            return None
        return self.fail()

    def __repr__(self) -> str:
        args = ", ".join(f"{k}={v!r}" for k, v in self.params.items())
        return f"{type(self).__name__}({args})"


def values_equal(left: Any, right: Any) -> bool:
    """Type-sensitive equality.

    Plain == except that booleans only equal booleans, so True does not
    match 1 and False does not match 0.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    return left == right


def resolve(context: "FormContext", name: str) -> Any:
    """Current value of a named field, or None if the field is absent."""
    state = context.get_field(name)
    if state is None:
        return None
    return state.value


def require_count(rule: str, value: Any, param: str = "n") -> int:
    """Validate a non-negative integer rule parameter."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRuleError(rule, f"{param} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidRuleError(rule, f"{param} must not be negative, got {value}")
    return value
