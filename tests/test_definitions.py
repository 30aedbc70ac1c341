"""Tests for declarative form definitions (YAML + JSON Schema)."""

from datetime import date
from textwrap import dedent

import pytest

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
from formstate.errors import DefinitionError, UnknownFieldError, UnknownRuleTypeError
from formstate.field import FieldState
from formstate.group import GroupFieldState, GroupMode
from formstate.registry import RuleRegistry, register_builtin_rules


@pytest.fixture(autouse=True)
def setup_registry():
    """Register built-in rules before each test."""
    RuleRegistry.clear()
    register_builtin_rules()
    yield
    RuleRegistry.clear()


@pytest.fixture
def write_yaml(tmp_path):
    """Write a YAML document to a temp file and return its path."""

    def _write(content, name="form.yaml"):
        path = tmp_path / name
        path.write_text(dedent(content), encoding="utf-8")
        return path

    return _write


SIGNUP_YAML = """
form: signup
description: Account creation
fields:
  - name: confirmPassword
    label: Confirm password
    rules:
      - type: same
        params: {field: password}
  - name: password
    rules:
      - required
      - type: minLength
        params: {length: 8}
  - name: contactMethod
    kind: radio_group
    options: [email, phone]
    initial: email
  - name: phone
    rules:
      - type: requiredIf
        params: {field: contactMethod, value: phone}
  - name: toppings
    kind: checkbox_group
    options:
      - mushrooms
      - value: pepperoni
        label: Pepperoni
        checked: true
      - olives
    rules:
      - type: rangeSelected
        params: {low: 1, high: 2}
  - name: startDate
    label: Start date
    rules:
      - type: dateAfter
        params: {bound: 2020-01-01}
"""


def make_minimal(**field):
    data = {"name": "email"}
    data.update(field)
    return {"form": "test", "fields": [data]}


# =============================================================================
# Schema Validation
# =============================================================================


class TestValidateDefinition:
    def test_valid_document(self):
        assert validate_definition(make_minimal(rules=["required", "email"])) == []

    def test_missing_form_name(self):
        issues = validate_definition({"fields": [{"name": "email"}]})
        assert [issue.message for issue in issues] == ["'form' is a required property"]

    def test_issue_paths(self):
        issues = validate_definition(make_minimal(rules=[{"params": {}}]))
        assert issues
        assert all(issue.path == "fields[0]/rules[0]" for issue in issues)

    def test_unknown_property(self):
        issues = validate_definition(make_minimal(colour="red"))
        assert any(issue.path == "fields[0]" for issue in issues)

    def test_bad_field_name(self):
        issues = validate_definition(make_minimal(name="first name"))
        assert any(issue.path == "fields[0]/name" for issue in issues)

    def test_group_without_options(self):
        assert validate_definition(make_minimal(kind="checkbox_group"))

    def test_plain_field_with_options(self):
        assert validate_definition(make_minimal(options=["a", "b"]))

    def test_unknown_kind(self):
        assert validate_definition(make_minimal(kind="slider"))

    def test_duplicate_field_names(self):
        data = {"form": "test", "fields": [{"name": "email"}, {"name": "email"}]}
        issues = validate_definition(data)
        assert len(issues) == 1
        assert issues[0].path == "fields[1]/name"
        assert "more than once" in issues[0].message

    def test_from_dict_raises_with_every_issue(self):
        data = {"form": "", "fields": [{"name": "a b"}, {"label": "x"}]}
        with pytest.raises(DefinitionError) as exc_info:
            FormDefinition.from_dict(data, source="inline")
        assert len(exc_info.value.issues) >= 3
        assert exc_info.value.source == "inline"
        assert "Invalid form definition in inline" in str(exc_info.value)


# =============================================================================
# Parsing
# =============================================================================


class TestParsing:
    def test_form_definition(self):
        definition = FormDefinition.from_dict(make_minimal(rules=["required"]))
        assert definition.name == "test"
        assert [f.name for f in definition.fields] == ["email"]
        assert definition.fields[0].rules[0].type == "required"

    def test_option_shorthand(self):
        assert OptionDefinition.from_dict("olives") == OptionDefinition(value="olives")

    def test_display_label_defaults_to_title_case(self):
        assert FieldDefinition(name="firstName").display_label == "First Name"
        assert FieldDefinition(name="x", label="Custom").display_label == "Custom"


# =============================================================================
# Loading
# =============================================================================


class TestLoadFormDefinition:
    def test_load(self, write_yaml):
        definition = load_form_definition(write_yaml(SIGNUP_YAML))
        assert definition.name == "signup"
        assert definition.description == "Account creation"
        assert len(definition.fields) == 6

    def test_empty_file(self, write_yaml):
        with pytest.raises(DefinitionError, match="empty"):
            load_form_definition(write_yaml("   \n"))

    def test_invalid_yaml(self, write_yaml):
        with pytest.raises(DefinitionError, match="YAML parse error"):
            load_form_definition(write_yaml("form: [unclosed\n"))

    def test_schema_violation_names_source(self, write_yaml):
        path = write_yaml("form: broken\nfields: []\n", name="broken.yaml")
        with pytest.raises(DefinitionError) as exc_info:
            load_form_definition(path)
        assert exc_info.value.source == str(path)


# =============================================================================
# Building
# =============================================================================


class TestBuildForm:
    def test_build_from_yaml(self, write_yaml):
        form = load_form(write_yaml(SIGNUP_YAML))

        assert form.names == (
            "confirmPassword",
            "password",
            "contactMethod",
            "phone",
            "toppings",
            "startDate",
        )
        assert form.get_field("password").label == "Password"
        assert form.value_of("contactMethod") == ("email",)
        assert form.value_of("toppings") == ("pepperoni",)
        assert form.get_field("toppings").option("pepperoni").label == "Pepperoni"

    def test_built_form_validates(self, write_yaml):
        form = load_form(write_yaml(SIGNUP_YAML))
        form.set_value("password", "abcdefgh")
        form.set_value("confirmPassword", "abcdefgh")
        form.toggle_option("contactMethod", "phone")
        form.set_value("startDate", date(2019, 6, 1))
        form.validate_all()

        assert form.errors() == {
            "phone": "Phone is required",
            "startDate": "Start date must be after 2020-01-01",
        }

    def test_unknown_rule_type(self):
        definition = FormDefinition.from_dict(make_minimal(rules=["postcode"]))
        with pytest.raises(UnknownRuleTypeError):
            build_form(definition)

    def test_unknown_reference(self):
        definition = FormDefinition.from_dict(
            make_minimal(rules=[{"type": "same", "params": {"field": "password"}}])
        )
        with pytest.raises(UnknownFieldError):
            build_form(definition)


class TestBuildField:
    def test_plain_field(self):
        state = build_field(FieldDefinition(name="age", initial=30))
        assert isinstance(state, FieldState)
        assert state.value == 30
        assert state.label == "Age"

    def test_plain_field_defaults_to_empty_string(self):
        assert build_field(FieldDefinition(name="age")).value == ""

    def test_checkbox_group_initial_selection(self):
        definition = FieldDefinition(
            name="toppings",
            kind="checkbox_group",
            initial=["olives", "mushrooms"],
            options=[OptionDefinition("mushrooms"), OptionDefinition("olives")],
        )
        state = build_field(definition)
        assert isinstance(state, GroupFieldState)
        assert state.mode == GroupMode.CHECKBOX
        assert state.value == ("mushrooms", "olives")

    def test_radio_group(self):
        definition = FieldDefinition(
            name="size",
            kind="radio_group",
            options=[OptionDefinition("S"), OptionDefinition("M")],
        )
        state = build_field(definition)
        assert state.mode == GroupMode.RADIO
        assert state.value == ()

    def test_unknown_kind(self):
        with pytest.raises(DefinitionError):
            build_field(FieldDefinition(name="x", kind="slider"))
