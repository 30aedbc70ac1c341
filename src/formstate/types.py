"""Core types for the formstate validation system.

This module defines the foundational types shared by every layer:
- ValidationError: the message a failing rule produces
- Rule: the callable contract every rule satisfies
- FieldLike: the derivation contract every field kind satisfies
- RuleDefinition: the declarative (dict/YAML) form of a rule
"""

from collections.abc import Sized
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, Sequence, TypeVar

if TYPE_CHECKING:
    from formstate.context import FormContext


T = TypeVar("T")
F = TypeVar("F", bound="FieldLike")


@dataclass(frozen=True)
class ValidationError:
    """A single validation failure.

    This is a value attached to a field state, never an exception.

    Attributes:
        message: Human-readable message; may contain {label}-style placeholders
            until it is rendered against a field
        code: Machine-readable error code (e.g., "MIN_LENGTH")
        params: Rule configuration the message was built from
    """

    message: str
    code: str
    params: dict[str, Any] = field(default_factory=dict, compare=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "params": dict(self.params),
        }


class Rule(Protocol):
    """Protocol that all rules satisfy.

    Any callable with this shape can sit in a field's rule chain. Returning a
    plain string is accepted as shorthand for a ValidationError with code
    "CUSTOM".
    """

    def __call__(
        self,
        value: Any,
        context: "FormContext",
    ) -> "ValidationError | str | None":
        ...


class FieldLike(Protocol):
    """Derivation contract for field kinds.

    A field kind keeps its label and rule chain across every derivation;
    only value, error and touched change through copy_with.
    """

    label: str
    error: ValidationError | None
    touched: bool
    rules: tuple[Rule, ...]

    @property
    def value(self) -> Any:
        ...

    @property
    def references(self) -> frozenset[str]:
        ...

    @property
    def is_valid(self) -> bool:
        ...

    def copy_with(self: F, value: Any = ..., error: Any = ..., touched: Any = ...) -> F:
        ...

    def validate(self, context: "FormContext | None" = None) -> ValidationError | None:
        ...

    def with_value(self: F, value: Any, context: "FormContext | None" = None) -> F:
        ...

    def revalidated(self: F, context: "FormContext | None" = None) -> F:
        ...

    def with_touched(
        self: F,
        flag: bool,
        revalidate: bool = False,
        context: "FormContext | None" = None,
    ) -> F:
        ...


@dataclass
class RuleDefinition:
    """Declarative definition of a rule (from YAML or a dict).

    This gets resolved to an actual rule by the RuleRegistry.

    Attributes:
        type: Rule type ("required", "minLength", "requiredIf", ...)
        params: Type-specific parameters
        message: Optional message template override
        code: Optional error code override
    """

    type: str
    params: dict[str, Any] = field(default_factory=dict)
    message: str = ""
    code: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any] | str) -> "RuleDefinition":
        """Create RuleDefinition from YAML/JSON data.

        A bare string is shorthand for a rule with no params.
        """
        if isinstance(data, str):
            return cls(type=data)

        return cls(
            type=data["type"],
            params=dict(data.get("params", {})),
            message=data.get("message", ""),
            code=data.get("code", ""),
        )


def is_empty(value: Any) -> bool:
    """Check if a value is considered empty.

    None, blank strings and empty collections are empty. False and 0 are not.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, Sized) and not isinstance(value, (bytes, bytearray)):
        return len(value) == 0
    return False


def ensure_tuple(rules: Sequence[Rule] | None) -> tuple[Rule, ...]:
    """Freeze a rule sequence, preserving declaration order."""
    if rules is None:
        return ()
    return tuple(rules)
