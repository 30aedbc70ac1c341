"""FieldState: an immutable snapshot of one form field.

A field state is never modified in place. Every change derives a new snapshot,
and the owning Form installs it in place of the old one:

    name = FieldState("", label="Name", rules=[required(), min_length(2)])
    name = name.with_value("Al")     # touched, error recomputed
    name.error                       # None
"""

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Generic, Sequence

from formstate.context import EMPTY_CONTEXT, FormContext
from formstate.engine import ValidationEngine
from formstate.messages import DEFAULT_INTERPOLATOR, MessageInterpolator
from formstate.types import Rule, T, ValidationError, ensure_tuple

if TYPE_CHECKING:
    from formstate.types import FieldLike


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


def same_rules(left: Sequence[Rule], right: Sequence[Rule]) -> bool:
    """Rule chains are equal when they hold the same rule objects in order."""
    return len(left) == len(right) and all(a is b for a, b in zip(left, right))


def collect_references(rules: Sequence[Rule]) -> frozenset[str]:
    """Field names read by a rule chain.

    Plain callables have no `references` attribute and reference nothing.
    """
    names: set[str] = set()
    for rule in rules:
        names.update(getattr(rule, "references", ()))
    return frozenset(names)


def run_rules(
    state: "FieldLike",
    value: Any,
    context: FormContext | None,
    interpolator: MessageInterpolator,
) -> ValidationError | None:
    """Run a state's rule chain and render the resulting message."""
    ctx = EMPTY_CONTEXT if context is None else context
    error = ValidationEngine.run(value, state.rules, ctx)
    if error is None:
        return None
    return interpolator.render(error, state.label, value, ctx)


@dataclass(frozen=True, eq=False)
class FieldState(Generic[T]):
    """Immutable state of a single field.

    Attributes:
        value: Current value
        label: Display label, used in error messages
        error: Result of the most recent validation of `value`, or None
        touched: True once the user has changed the value
        rules: Rule chain, applied in declaration order
        interpolator: Renders rule messages for this field
    """

    value: T
    label: str = ""
    error: ValidationError | None = None
    touched: bool = False
    rules: tuple[Rule, ...] = ()
    interpolator: MessageInterpolator = field(default=DEFAULT_INTERPOLATOR, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "rules", ensure_tuple(self.rules))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldState):
            return NotImplemented
        return (
            self.value == other.value
            and self.label == other.label
            and self.error == other.error
            and self.touched == other.touched
            and same_rules(self.rules, other.rules)
        )

    __hash__ = None  # type: ignore[assignment]

    @property
    def is_valid(self) -> bool:
        return self.error is None

    @property
    def references(self) -> frozenset[str]:
        """Names of other fields this field's rules read."""
        return collect_references(self.rules)

    def validate(self, context: FormContext | None = None) -> ValidationError | None:
        """Compute the error the current value would have. Does not modify state."""
        return run_rules(self, self.value, context, self.interpolator)

    def with_value(self, value: T, context: FormContext | None = None) -> "FieldState[T]":
        """Derive a snapshot holding a user-entered value.

        The result is touched and its error reflects `value` validated against
        `context`. Install it in the owning Form so other fields see it.
        """
        changed = replace(self, value=value, touched=True)
        return changed.revalidated(context)

    def with_touched(
        self,
        flag: bool,
        revalidate: bool = False,
        context: FormContext | None = None,
    ) -> "FieldState[T]":
        """Derive a snapshot with a different touched flag.

        The error is kept as is unless `revalidate` is set.
        """
        changed = replace(self, touched=flag)
        if revalidate:
            return changed.revalidated(context)
        return changed

    def revalidated(self, context: FormContext | None = None) -> "FieldState[T]":
        """Derive a snapshot whose error reflects the current value."""
        return replace(self, error=self.validate(context))

    def copy_with(
        self,
        value: Any = UNSET,
        error: Any = UNSET,
        touched: Any = UNSET,
    ) -> "FieldState[T]":
        """Derive a snapshot, keeping label and rules.

        Omitted arguments keep their current value; pass error=None to clear
        the error. No validation happens here.
        """
        changes: dict[str, Any] = {}
        if value is not UNSET:
            changes["value"] = value
        if error is not UNSET:
            changes["error"] = error
        if touched is not UNSET:
            changes["touched"] = touched
        return replace(self, **changes)

    def all_errors(self, context: FormContext | None = None) -> list[ValidationError]:
        """Every failing rule's message, rendered, in declaration order."""
        ctx = EMPTY_CONTEXT if context is None else context
        return [
            self.interpolator.render(error, self.label, self.value, ctx)
            for error in ValidationEngine.run_all(self.value, self.rules, ctx)
        ]
