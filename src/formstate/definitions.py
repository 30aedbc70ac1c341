"""Declarative form definitions.

Forms can be declared in YAML (or any dict) and built into a Form:

    form: signup
    fields:
      - name: email
        label: Email
        rules: [required, email]
      - name: toppings
        kind: checkbox_group
        options: [mushrooms, pepperoni, olives]
        rules:
          - type: rangeSelected
            params: {low: 1, high: 3}

Documents are checked against a bundled JSON Schema before anything is
built, and every issue is reported at once with its location.
"""

import json
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError as SchemaError

from formstate.errors import DefinitionError, DefinitionIssue
from formstate.field import FieldState
from formstate.form import Form
from formstate.group import GroupFieldState, GroupMode, OptionState
from formstate.messages import to_title_case
from formstate.registry import RuleRegistry, register_builtin_rules
from formstate.rules.base import values_equal
from formstate.types import FieldLike, RuleDefinition

logger = logging.getLogger(__name__)

_SCHEMA_PATH = Path(__file__).parent / "schemas" / "form.schema.json"

FIELD_KINDS = ("field", "checkbox_group", "radio_group")


# =============================================================================
# Definition Types
# =============================================================================


@dataclass
class OptionDefinition:
    """One option of a group field."""

    value: Any
    label: str = ""
    checked: bool = False
    rules: list[RuleDefinition] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "OptionDefinition":
        """A bare scalar is shorthand for an unchecked option."""
        if not isinstance(data, dict):
            return cls(value=data)
        return cls(
            value=data["value"],
            label=data.get("label", ""),
            checked=data.get("checked", False),
            rules=[RuleDefinition.from_dict(r) for r in data.get("rules", [])],
        )


@dataclass
class FieldDefinition:
    """Definition of one field.

    Attributes:
        name: Unique field name within the form
        label: Display label (defaults to the name in Title Case)
        kind: "field", "checkbox_group" or "radio_group"
        initial: Initial value; for groups, the initially selected payload(s)
        rules: Rule definitions, in evaluation order
        options: Options of a group field
    """

    name: str
    label: str = ""
    kind: str = "field"
    initial: Any = None
    rules: list[RuleDefinition] = field(default_factory=list)
    options: list[OptionDefinition] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FieldDefinition":
        return cls(
            name=data["name"],
            label=data.get("label", ""),
            kind=data.get("kind", "field"),
            initial=data.get("initial"),
            rules=[RuleDefinition.from_dict(r) for r in data.get("rules", [])],
            options=[OptionDefinition.from_dict(o) for o in data.get("options", [])],
        )

    @property
    def display_label(self) -> str:
        return self.label or to_title_case(self.name)


@dataclass
class FormDefinition:
    """Definition of a whole form."""

    name: str
    fields: list[FieldDefinition] = field(default_factory=list)
    description: str = ""

    @classmethod
    def from_dict(cls, data: Any, source: str | None = None) -> "FormDefinition":
        """Validate and parse a definition document.

        Raises:
            DefinitionError: If the document violates the schema or declares
                a field name twice
        """
        issues = validate_definition(data)
        if issues:
            raise DefinitionError(issues, source)

        return cls(
            name=data["form"],
            fields=[FieldDefinition.from_dict(f) for f in data["fields"]],
            description=data.get("description", ""),
        )


# =============================================================================
# Schema Validation
# =============================================================================


@lru_cache(maxsize=1)
def _load_schema() -> dict[str, Any]:
    with _SCHEMA_PATH.open(encoding="utf-8") as fh:
        return json.load(fh)


def _json_path(error: SchemaError) -> str:
    """Convert a jsonschema error path to a readable string."""
    parts = []
    for p in error.absolute_path:
        if isinstance(p, int):
            parts.append(f"[{p}]")
        else:
            parts.append(str(p))
    return "/".join(parts).replace("/[", "[")


def validate_definition(data: Any) -> list[DefinitionIssue]:
    """Check a definition document, returning every issue found.

    Returns:
        A list of DefinitionIssue objects (empty if the document is valid)
    """
    validator = Draft202012Validator(_load_schema())
    issues = [
        DefinitionIssue(message=error.message, path=_json_path(error))
        for error in sorted(validator.iter_errors(data), key=_json_path)
    ]
    if issues:
        return issues

    seen: set[str] = set()
    for index, field_data in enumerate(data["fields"]):
        name = field_data["name"]
        if name in seen:
            issues.append(
                DefinitionIssue(
                    message=f"Field '{name}' is declared more than once",
                    path=f"fields[{index}]/name",
                )
            )
        seen.add(name)
    return issues


# =============================================================================
# Loading and Building
# =============================================================================


def load_form_definition(path: Path | str) -> FormDefinition:
    """Load a form definition from a YAML file.

    Raises:
        DefinitionError: If the file is not valid YAML, is empty, or fails
            validation
    """
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise DefinitionError(
            [DefinitionIssue(message=f"YAML parse error: {exc}")], str(path)
        ) from exc

    if raw is None:
        raise DefinitionError(
            [DefinitionIssue(message="File is empty or contains only whitespace")],
            str(path),
        )

    definition = FormDefinition.from_dict(raw, source=str(path))
    logger.debug("Loaded form '%s' with %d fields from %s", definition.name, len(definition.fields), path)
    return definition


def _initial_selection(definition: FieldDefinition) -> list[Any]:
    if definition.initial is None:
        return []
    if isinstance(definition.initial, list):
        return definition.initial
    return [definition.initial]


def build_field(definition: FieldDefinition) -> FieldLike:
    """Build a field state from its definition.

    Rule types are resolved through the RuleRegistry; configuration errors
    in rule params surface here.
    """
    if definition.kind not in FIELD_KINDS:
        raise DefinitionError(
            [DefinitionIssue(message=f"Unknown field kind '{definition.kind}'", path=definition.name)]
        )

    rules = RuleRegistry.create_all(definition.rules)

    if definition.kind == "field":
        initial = "" if definition.initial is None else definition.initial
        return FieldState(value=initial, label=definition.display_label, rules=rules)

    selected = _initial_selection(definition)
    options = [
        OptionState(
            value=option.value,
            label=option.label,
            checked=option.checked or any(values_equal(option.value, s) for s in selected),
            rules=RuleRegistry.create_all(option.rules),
        )
        for option in definition.options
    ]
    mode = GroupMode.RADIO if definition.kind == "radio_group" else GroupMode.CHECKBOX
    return GroupFieldState(
        options=tuple(options),
        label=definition.display_label,
        rules=tuple(rules),
        mode=mode,
    )


def build_form(definition: FormDefinition) -> Form:
    """Build a Form, registering every field in one batch.

    Registering the batch together lets fields reference each other in
    either order.
    """
    register_builtin_rules()
    form = Form()
    form.register_fields({f.name: build_field(f) for f in definition.fields})
    return form


def load_form(path: Path | str) -> Form:
    """Load a YAML definition and build it."""
    return build_form(load_form_definition(path))
