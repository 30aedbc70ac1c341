"""Form: the aggregate that owns a form's fields.

The Form holds the canonical FormContext. Field states and contexts are
immutable; the Form only ever swaps its reference to a new context, so any
reader holding an older context keeps a consistent snapshot.

Cross-field references are checked when fields are registered. A rule that
names a field the form does not have fails registration immediately instead
of failing on first validation.
"""

import logging
from collections.abc import Mapping
from typing import Any

from formstate.context import EMPTY_CONTEXT, FormContext
from formstate.errors import ConfigurationError, DuplicateFieldError, UnknownFieldError
from formstate.field import same_rules
from formstate.group import GroupFieldState
from formstate.types import FieldLike

logger = logging.getLogger(__name__)


class Form:
    """Owns the name -> field state mapping for one form.

    Example:
        form = Form()
        form.register_fields({
            "password": FieldState("", label="Password", rules=[required(), min_length(8)]),
            "confirm": FieldState("", label="Confirm", rules=[same("password")]),
        })
        form.set_value("password", "abcdefgh")
        form.set_value("confirm", "abcdefgh")
        form.is_valid()  # True
    """

    def __init__(self, fields: Mapping[str, FieldLike] | None = None):
        self._context: FormContext = EMPTY_CONTEXT
        if fields:
            self.register_fields(fields)

    def __contains__(self, name: object) -> bool:
        return name in self._context

    def __len__(self) -> int:
        return len(self._context)

    def __repr__(self) -> str:
        return f"Form({list(self._context.names)!r})"

    @property
    def context(self) -> FormContext:
        """The current snapshot."""
        return self._context

    @property
    def names(self) -> tuple[str, ...]:
        return self._context.names

    # =========================================================================
    # Registration
    # =========================================================================

    def register_field(self, name: str, state: FieldLike) -> FormContext:
        """Register one field.

        Raises:
            DuplicateFieldError: If the name is already registered
            UnknownFieldError: If the field's rules reference a name the form
                does not have (a field may reference itself)
        """
        return self.register_fields({name: state})

    def register_fields(self, fields: Mapping[str, FieldLike]) -> FormContext:
        """Register several fields at once.

        References resolve against the existing fields plus the whole batch,
        so fields that refer to each other must be registered together.
        Nothing is installed if any field fails its checks.

        Returns:
            The new context
        """
        batch = dict(fields)
        for name in batch:
            if not isinstance(name, str) or not name:
                raise ValueError(f"Field name must be a non-empty string, got {name!r}")
            if name in self._context:
                raise DuplicateFieldError(name)

        known = set(self._context) | set(batch)
        for name, state in batch.items():
            self._check_references(name, state, known)

        logger.debug("Registering fields %s", list(batch))
        return self._install(self._context.with_fields(batch))

    def _check_references(self, name: str, state: FieldLike, known: set[str]) -> None:
        for ref in sorted(state.references):
            if ref not in known:
                raise UnknownFieldError(ref, referenced_by=name)

    # =========================================================================
    # Lookup
    # =========================================================================

    def get_field(self, name: str) -> FieldLike | None:
        return self._context.get_field(name)

    def value_of(self, name: str) -> Any:
        """Current value of a field.

        Raises:
            UnknownFieldError: If the name is not registered
        """
        return self._context.value_of(name)

    def _require(self, name: str) -> FieldLike:
        state = self._context.get_field(name)
        if state is None:
            raise UnknownFieldError(name)
        return state

    def dependents_of(self, name: str) -> tuple[str, ...]:
        """Names of fields whose rules read `name`, in registration order."""
        return tuple(
            other
            for other, state in self._context.items()
            if other != name and name in state.references
        )

    # =========================================================================
    # Updates
    # =========================================================================

    def update_field(
        self,
        name: str,
        state: FieldLike,
        revalidate_dependents: bool = False,
    ) -> FormContext:
        """Install a new snapshot for a registered field.

        The snapshot must carry the registered rule chain; a field keeps its
        rules for its whole lifetime.

        Raises:
            ConfigurationError: If the snapshot carries different rules
            UnknownFieldError: If the name is not registered, or the new
                state references a name the form does not have
        """
        current = self._require(name)
        if not same_rules(current.rules, state.rules):
            raise ConfigurationError(f"Field '{name}' cannot change its rules")
        self._check_references(name, state, set(self._context))
        return self._replace(name, state, revalidate_dependents)

    def set_value(
        self,
        name: str,
        value: Any,
        revalidate_dependents: bool = True,
    ) -> FormContext:
        """Apply a user-entered value to a field.

        The field is derived with `with_value` against the current context.
        Fields whose rules read this one are then re-validated against the
        updated context, keeping their touched flags.
        """
        state = self._require(name)
        new_state = state.with_value(value, self._context)
        return self._replace(name, new_state, revalidate_dependents)

    def toggle_option(self, name: str, option: Any) -> FormContext:
        """Toggle one option of a group field."""
        state = self._require(name)
        if not isinstance(state, GroupFieldState):
            raise TypeError(f"Field '{name}' is not a group field")
        return self._replace(name, state.toggle(option, self._context), True)

    def touch(self, name: str) -> FormContext:
        state = self._require(name)
        return self._install(self._context.with_field(name, state.with_touched(True)))

    def touch_all(self) -> FormContext:
        """Mark every field touched, e.g. when the user presses submit."""
        touched = {name: state.with_touched(True) for name, state in self._context.items()}
        return self._install(FormContext(touched))

    def _replace(self, name: str, state: FieldLike, revalidate_dependents: bool) -> FormContext:
        context = self._context.with_field(name, state)
        if revalidate_dependents:
            dependents = self.dependents_of(name)
            if dependents:
                logger.debug("Re-validating dependents of %s: %s", name, dependents)
                context = context.with_fields(
                    {dep: context[dep].revalidated(context) for dep in dependents}
                )
        return self._install(context)

    def _install(self, context: FormContext) -> FormContext:
        self._context = context
        return context

    # =========================================================================
    # Validation
    # =========================================================================

    def validate_all(self) -> FormContext:
        """Re-validate every field against one fixed snapshot.

        All cross-field lookups resolve against the context as it was before
        this call, never against results computed earlier in the same pass,
        so the outcome does not depend on registration order.

        Returns:
            The new context
        """
        snapshot = self._context
        updated = {name: state.revalidated(snapshot) for name, state in snapshot.items()}
        context = FormContext(updated)
        logger.debug(
            "Validated %d fields, %d invalid",
            len(updated),
            sum(1 for state in updated.values() if not state.is_valid),
        )
        return self._install(context)

    def is_valid(self) -> bool:
        """True if no field (or group option) currently holds an error."""
        return all(state.is_valid for state in self._context.values())

    def errors(self) -> dict[str, str]:
        """Messages of fields that currently hold an error."""
        return {
            name: state.error.message
            for name, state in self._context.items()
            if state.error is not None
        }

    def values(self) -> dict[str, Any]:
        """Current values by name; a group's value is its selected payloads."""
        return {name: state.value for name, state in self._context.items()}
