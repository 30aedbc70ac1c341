"""Group fields: checkbox and radio groups.

A GroupFieldState is a composite of OptionStates. Selection lives on the
options themselves (their `checked` flag); the group's value is derived as the
payloads of the checked options, in declaration order. Group rules, such as
range_selected, validate that derived tuple.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Generic, Sequence

from formstate.context import FormContext
from formstate.errors import ConfigurationError, DuplicateOptionError, UnknownOptionError
from formstate.field import UNSET, collect_references, run_rules, same_rules
from formstate.messages import DEFAULT_INTERPOLATOR, MessageInterpolator
from formstate.rules.base import values_equal
from formstate.types import Rule, T, ValidationError, ensure_tuple


class GroupMode(str, Enum):
    """How options of a group are selected."""

    CHECKBOX = "checkbox"  # Any number of options
    RADIO = "radio"  # At most one option


# =============================================================================
# Option State
# =============================================================================


@dataclass(frozen=True, eq=False)
class OptionState(Generic[T]):
    """One selectable option of a group.

    `value` is the option's payload and never changes through user input;
    what the user changes is `checked`. An option's own rules therefore run
    against its checked flag (e.g. is_true on a lone "I agree" option).

    Attributes:
        value: Payload reported by the group when this option is selected
        label: Display label (defaults to str(value))
        checked: Selection signal
        error: Result of the most recent validation of `checked`, or None
        touched: True once the user has toggled this option
        rules: Rule chain applied to `checked`
    """

    value: T
    label: str = ""
    checked: bool = False
    error: ValidationError | None = None
    touched: bool = False
    rules: tuple[Rule, ...] = ()
    interpolator: MessageInterpolator = field(default=DEFAULT_INTERPOLATOR, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "rules", ensure_tuple(self.rules))
        if not self.label:
            object.__setattr__(self, "label", str(self.value))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OptionState):
            return NotImplemented
        return (
            self.value == other.value
            and self.label == other.label
            and self.checked == other.checked
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
        return collect_references(self.rules)

    def validate(self, context: FormContext | None = None) -> ValidationError | None:
        return run_rules(self, self.checked, context, self.interpolator)

    def revalidated(self, context: FormContext | None = None) -> "OptionState[T]":
        return replace(self, error=self.validate(context))

    def with_checked(self, checked: bool, context: FormContext | None = None) -> "OptionState[T]":
        """User toggled the option: touched, error recomputed."""
        return replace(self, checked=checked, touched=True).revalidated(context)

    def with_touched(
        self,
        flag: bool,
        revalidate: bool = False,
        context: FormContext | None = None,
    ) -> "OptionState[T]":
        changed = replace(self, touched=flag)
        return changed.revalidated(context) if revalidate else changed

    def copy_with(
        self,
        value: Any = UNSET,
        error: Any = UNSET,
        touched: Any = UNSET,
        checked: Any = UNSET,
    ) -> "OptionState[T]":
        changes: dict[str, Any] = {}
        if value is not UNSET:
            changes["value"] = value
        if error is not UNSET:
            changes["error"] = error
        if touched is not UNSET:
            changes["touched"] = touched
        if checked is not UNSET:
            changes["checked"] = checked
        return replace(self, **changes)


def make_options(options: Any) -> tuple[OptionState, ...]:
    """Normalize option declarations.

    Accepts:
        - a mapping of payload -> checked
        - an iterable whose items are OptionStates, (payload, label) pairs,
          or bare payloads
    """
    if isinstance(options, Mapping):
        return tuple(
            OptionState(value=payload, checked=bool(checked))
            for payload, checked in options.items()
        )

    result = []
    for item in options:
        if isinstance(item, OptionState):
            result.append(item)
        elif isinstance(item, tuple) and len(item) == 2:
            result.append(OptionState(value=item[0], label=item[1]))
        else:
            result.append(OptionState(value=item))
    return tuple(result)


# =============================================================================
# Group Field State
# =============================================================================


@dataclass(frozen=True, eq=False)
class GroupFieldState(Generic[T]):
    """Immutable state of a checkbox or radio group.

    Attributes:
        options: Child option states, in declaration order
        label: Display label
        error: Result of the most recent validation of the selection, or None
        touched: True once the user has changed the selection
        rules: Rule chain applied to the selected-values tuple
        mode: CHECKBOX allows any number of selections, RADIO at most one
    """

    options: tuple[OptionState[T], ...] = ()
    label: str = ""
    error: ValidationError | None = None
    touched: bool = False
    rules: tuple[Rule, ...] = ()
    mode: GroupMode = GroupMode.CHECKBOX
    interpolator: MessageInterpolator = field(default=DEFAULT_INTERPOLATOR, repr=False)

    def __post_init__(self) -> None:
        options = make_options(self.options)
        object.__setattr__(self, "options", options)
        object.__setattr__(self, "rules", ensure_tuple(self.rules))

        seen: list[Any] = []
        for option in options:
            if any(values_equal(option.value, prior) for prior in seen):
                raise DuplicateOptionError(option.value)
            seen.append(option.value)

        if self.mode == GroupMode.RADIO and sum(o.checked for o in options) > 1:
            raise ConfigurationError(
                f"Radio group {self.label!r} has more than one selected option"
            )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GroupFieldState):
            return NotImplemented
        return (
            self.options == other.options
            and self.label == other.label
            and self.error == other.error
            and self.touched == other.touched
            and self.mode == other.mode
            and same_rules(self.rules, other.rules)
        )

    __hash__ = None  # type: ignore[assignment]

    # -------------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------------

    @property
    def value(self) -> tuple[T, ...]:
        """The group's effective value: payloads of the checked options."""
        return self.selected_values()

    def selected_values(self) -> tuple[T, ...]:
        return tuple(option.value for option in self.options if option.checked)

    @property
    def selected_count(self) -> int:
        return sum(1 for option in self.options if option.checked)

    @property
    def is_valid(self) -> bool:
        """True if neither the group nor any option holds an error."""
        return self.error is None and all(option.is_valid for option in self.options)

    @property
    def references(self) -> frozenset[str]:
        names = set(collect_references(self.rules))
        for option in self.options:
            names.update(option.references)
        return frozenset(names)

    def option(self, value: Any) -> OptionState[T] | None:
        """Find an option by payload."""
        for option in self.options:
            if values_equal(option.value, value):
                return option
        return None

    def _index(self, value: Any) -> int:
        for index, option in enumerate(self.options):
            if values_equal(option.value, value):
                return index
        raise UnknownOptionError(value)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self, context: FormContext | None = None) -> ValidationError | None:
        """Compute the group error for the current selection."""
        return run_rules(self, self.value, context, self.interpolator)

    def revalidated(self, context: FormContext | None = None) -> "GroupFieldState[T]":
        """Recompute the group error and every option's error."""
        options = tuple(option.revalidated(context) for option in self.options)
        changed = replace(self, options=options)
        return replace(changed, error=changed.validate(context))

    # -------------------------------------------------------------------------
    # Selection changes (user input: touched, re-validated)
    # -------------------------------------------------------------------------

    def with_checked(
        self,
        value: Any,
        checked: bool = True,
        context: FormContext | None = None,
    ) -> "GroupFieldState[T]":
        """Check or uncheck one option.

        In RADIO mode checking an option unchecks the others.
        """
        if self.mode == GroupMode.RADIO and checked:
            return self.select(value, context)

        index = self._index(value)
        options = list(self.options)
        options[index] = options[index].with_checked(checked, context)
        return self._selection_changed(options, context)

    def toggle(self, value: Any, context: FormContext | None = None) -> "GroupFieldState[T]":
        index = self._index(value)
        return self.with_checked(value, not self.options[index].checked, context)

    def select(self, value: Any, context: FormContext | None = None) -> "GroupFieldState[T]":
        """Exclusive selection: check the option equal to `value`, uncheck the rest.

        Selecting None clears the group.
        """
        if value is not None:
            self._index(value)

        options = []
        for option in self.options:
            checked = value is not None and values_equal(option.value, value)
            if checked != option.checked:
                option = option.with_checked(checked, context)
            options.append(option)
        return self._selection_changed(options, context)

    def with_value(
        self,
        values: Iterable[Any] | None,
        context: FormContext | None = None,
    ) -> "GroupFieldState[T]":
        """Check exactly the options whose payload is in `values`.

        A string or other non-iterable value is taken as a single payload.

        Raises:
            UnknownOptionError: If a value matches no option
            ValueError: If a RADIO group is given more than one value
        """
        wanted = self._wanted(values)
        options = []
        for option in self.options:
            checked = any(values_equal(option.value, v) for v in wanted)
            if checked != option.checked:
                option = option.with_checked(checked, context)
            options.append(option)
        return self._selection_changed(options, context)

    def _wanted(self, values: Iterable[Any] | None) -> list[Any]:
        if values is None:
            wanted = []
        elif isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
            wanted = [values]
        else:
            wanted = list(values)
        if self.mode == GroupMode.RADIO and len(wanted) > 1:
            raise ValueError(f"Radio group {self.label!r} accepts at most one value")
        for value in wanted:
            self._index(value)
        return wanted

    def _selection_changed(
        self,
        options: Sequence[OptionState[T]],
        context: FormContext | None,
    ) -> "GroupFieldState[T]":
        changed = replace(self, options=tuple(options), touched=True)
        return replace(changed, error=changed.validate(context))

    # -------------------------------------------------------------------------
    # Structure changes (copy-on-write replacement of the option list)
    # -------------------------------------------------------------------------

    def with_options(
        self,
        options: Iterable[Any],
        context: FormContext | None = None,
    ) -> "GroupFieldState[T]":
        """Replace the option list. The group error is recomputed."""
        changed = replace(self, options=make_options(options))
        return replace(changed, error=changed.validate(context))

    def add_option(
        self,
        option: Any,
        context: FormContext | None = None,
    ) -> "GroupFieldState[T]":
        """Append an option (an OptionState, a (payload, label) pair or a payload)."""
        return self.with_options(self.options + make_options([option]), context)

    def remove_option(
        self,
        value: Any,
        context: FormContext | None = None,
    ) -> "GroupFieldState[T]":
        index = self._index(value)
        options = self.options[:index] + self.options[index + 1:]
        return self.with_options(options, context)

    # -------------------------------------------------------------------------
    # Derivation contract
    # -------------------------------------------------------------------------

    def with_touched(
        self,
        flag: bool,
        revalidate: bool = False,
        context: FormContext | None = None,
    ) -> "GroupFieldState[T]":
        changed = replace(self, touched=flag)
        return changed.revalidated(context) if revalidate else changed

    def copy_with(
        self,
        value: Any = UNSET,
        error: Any = UNSET,
        touched: Any = UNSET,
        options: Any = UNSET,
    ) -> "GroupFieldState[T]":
        """Derive a snapshot, keeping label, rules and mode.

        `value` sets the checked flags to match the given payloads without
        touching or validating anything.
        """
        changes: dict[str, Any] = {}
        if options is not UNSET:
            changes["options"] = make_options(options)
        if error is not UNSET:
            changes["error"] = error
        if touched is not UNSET:
            changes["touched"] = touched
        changed = replace(self, **changes)

        if value is not UNSET:
            wanted = changed._wanted(value)
            options = tuple(
                option.copy_with(checked=any(values_equal(option.value, v) for v in wanted))
                for option in changed.options
            )
            changed = replace(changed, options=options)
        return changed


# =============================================================================
# Constructors
# =============================================================================


def checkbox_group(
    label: str,
    options: Any,
    rules: Sequence[Rule] | None = None,
) -> GroupFieldState:
    """Build a checkbox group.

    Example:
        toppings = checkbox_group(
            "Toppings",
            {"mushrooms": True, "pepperoni": True, "olives": False},
            rules=[range_selected(1, 3)],
        )
    """
    return GroupFieldState(
        options=make_options(options),
        label=label,
        rules=ensure_tuple(rules),
        mode=GroupMode.CHECKBOX,
    )


def radio_group(
    label: str,
    options: Any,
    rules: Sequence[Rule] | None = None,
    selected: Any = None,
) -> GroupFieldState:
    """Build a radio group, optionally with an initial selection."""
    built = make_options(options)
    if selected is not None:
        if not any(values_equal(o.value, selected) for o in built):
            raise UnknownOptionError(selected)
        built = tuple(
            o.copy_with(checked=values_equal(o.value, selected)) for o in built
        )
    return GroupFieldState(
        options=built,
        label=label,
        rules=ensure_tuple(rules),
        mode=GroupMode.RADIO,
    )
