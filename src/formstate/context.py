"""FormContext: an immutable snapshot of a whole form.

Cross-field rules read other fields through a FormContext. A context never
changes after construction; updates produce a new context, so a validation
pass holding a context always sees one consistent name -> state mapping.
"""

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from formstate.errors import UnknownFieldError
from formstate.types import FieldLike


class FormContext(Mapping[str, FieldLike]):
    """Read-only mapping of field name to field state.

    Example:
        ctx = FormContext({"password": FieldState("secret", label="Password")})
        ctx.value_of("password")  # "secret"
        ctx2 = ctx.with_field("password", new_state)  # ctx is unchanged
    """

    __slots__ = ("_fields",)

    def __init__(self, fields: Mapping[str, FieldLike] | None = None):
        object.__setattr__(self, "_fields", MappingProxyType(dict(fields or {})))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("FormContext is immutable")

    def __getitem__(self, name: str) -> FieldLike:
        try:
            return self._fields[name]
        except KeyError:
            raise UnknownFieldError(name) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __repr__(self) -> str:
        return f"FormContext({list(self._fields)!r})"

    @property
    def names(self) -> tuple[str, ...]:
        """Field names in registration order."""
        return tuple(self._fields)

    def get_field(self, name: str) -> FieldLike | None:
        """Look up a field state, or None if the name is not registered."""
        return self._fields.get(name)

    def value_of(self, name: str) -> Any:
        """Current value of a field.

        Raises:
            UnknownFieldError: If the name is not registered
        """
        return self[name].value

    def with_field(self, name: str, state: FieldLike) -> "FormContext":
        """Return a new context with one field added or replaced."""
        return self.with_fields({name: state})

    def with_fields(self, fields: Mapping[str, FieldLike]) -> "FormContext":
        """Return a new context with several fields added or replaced.

        Existing names keep their position; new names are appended.
        """
        merged = dict(self._fields)
        merged.update(fields)
        return FormContext(merged)


EMPTY_CONTEXT = FormContext()
