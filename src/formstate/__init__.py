"""formstate: immutable form-field state and validation.

This package provides:
- FieldState: an immutable snapshot of one field (value, label, error, touched)
- Rules: pure callables checking a value, optionally against other fields
- ValidationEngine: fail-fast evaluation of a field's rule chain
- FormContext / Form: snapshots of a whole form for cross-field rules
- GroupFieldState: checkbox and radio groups with selection-count rules

Usage:
    from formstate import Form, FieldState, required, min_length, same

    form = Form()
    form.register_fields({
        "password": FieldState("", label="Password", rules=[required(), min_length(8)]),
        "confirm": FieldState("", label="Confirm password", rules=[same("password")]),
    })
    form.set_value("password", "abcdefgh")
    form.set_value("confirm", "abcdefgh")
    assert form.is_valid()
"""

from formstate.context import EMPTY_CONTEXT, FormContext
from formstate.definitions import (
    FieldDefinition,
    FormDefinition,
    OptionDefinition,
    build_field,
    build_form,
    load_form,
    load_form_definition,
    validate_definition,
)
from formstate.engine import ValidationEngine
from formstate.errors import (
    ConfigurationError,
    DefinitionError,
    DefinitionIssue,
    DuplicateFieldError,
    DuplicateOptionError,
    InvalidRuleError,
    UnknownFieldError,
    UnknownOptionError,
    UnknownRuleTypeError,
)
from formstate.field import FieldState
from formstate.form import Form
from formstate.group import (
    GroupFieldState,
    GroupMode,
    OptionState,
    checkbox_group,
    radio_group,
)
from formstate.messages import MessageInterpolator
from formstate.registry import RuleRegistry, register_builtin_rules
from formstate.rules import (
    BaseRule,
    date_after,
    date_before,
    email,
    in_list,
    integer,
    is_false,
    is_true,
    max_length,
    max_selected,
    max_value,
    min_length,
    min_selected,
    min_value,
    not_in_list,
    numeric,
    range_selected,
    regex,
    required,
    required_if,
    same,
    size,
    url,
)
from formstate.types import FieldLike, Rule, RuleDefinition, ValidationError, is_empty

__all__ = [
    # Types
    "FieldLike",
    "Rule",
    "RuleDefinition",
    "ValidationError",
    "is_empty",
    # State
    "EMPTY_CONTEXT",
    "FieldState",
    "Form",
    "FormContext",
    "GroupFieldState",
    "GroupMode",
    "OptionState",
    "checkbox_group",
    "radio_group",
    # Engine
    "MessageInterpolator",
    "ValidationEngine",
    # Registry
    "RuleRegistry",
    "register_builtin_rules",
    # Definitions
    "FieldDefinition",
    "FormDefinition",
    "OptionDefinition",
    "build_field",
    "build_form",
    "load_form",
    "load_form_definition",
    "validate_definition",
    # Errors
    "ConfigurationError",
    "DefinitionError",
    "DefinitionIssue",
    "DuplicateFieldError",
    "DuplicateOptionError",
    "InvalidRuleError",
    "UnknownFieldError",
    "UnknownOptionError",
    "UnknownRuleTypeError",
    # Rules
    "BaseRule",
    "date_after",
    "date_before",
    "email",
    "in_list",
    "integer",
    "is_false",
    "is_true",
    "max_length",
    "max_selected",
    "max_value",
    "min_length",
    "min_selected",
    "min_value",
    "not_in_list",
    "numeric",
    "range_selected",
    "regex",
    "required",
    "required_if",
    "same",
    "size",
    "url",
]
