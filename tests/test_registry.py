"""Tests for the RuleRegistry and built-in rule factories."""

from datetime import date

import pytest

from formstate.context import EMPTY_CONTEXT, FormContext
from formstate.errors import InvalidRuleError, UnknownRuleTypeError
from formstate.field import FieldState
from formstate.registry import RuleRegistry, register_builtin_rules
from formstate.rules import FILLED, DateBefore, MinLength, RequiredIf
from formstate.types import RuleDefinition


@pytest.fixture(autouse=True)
def setup_registry():
    """Register built-in rules before each test."""
    RuleRegistry.clear()
    register_builtin_rules()
    yield
    RuleRegistry.clear()


def make_rule(data):
    return RuleRegistry.create(RuleDefinition.from_dict(data))


# =============================================================================
# RuleDefinition
# =============================================================================


class TestRuleDefinition:
    def test_from_string(self):
        definition = RuleDefinition.from_dict("required")
        assert definition.type == "required"
        assert definition.params == {}

    def test_from_dict(self):
        definition = RuleDefinition.from_dict(
            {
                "type": "minLength",
                "params": {"length": 8},
                "message": "Too short",
                "code": "SHORT",
            }
        )
        assert definition.type == "minLength"
        assert definition.params == {"length": 8}
        assert definition.message == "Too short"
        assert definition.code == "SHORT"


# =============================================================================
# Registry
# =============================================================================


class TestRuleRegistry:
    def test_builtins_registered(self):
        expected = {
            "required", "email", "url", "integer", "numeric", "isTrue", "isFalse",
            "minLength", "maxLength", "size", "minValue", "maxValue",
            "inList", "notInList", "minSelected", "maxSelected", "rangeSelected",
            "dateBefore", "dateAfter", "regex", "same", "requiredIf",
        }
        assert set(RuleRegistry.list_registered()) == expected

    def test_unknown_type(self):
        with pytest.raises(UnknownRuleTypeError) as exc_info:
            make_rule("postcode")
        assert exc_info.value.rule_type == "postcode"
        assert "required" in exc_info.value.available

    def test_register_custom_factory(self):
        def even(value, context):
            return None if value % 2 == 0 else "{label} must be even"

        RuleRegistry.register_factory("even", lambda definition: even)
        assert RuleRegistry.is_registered("even")
        assert make_rule("even") is even

    def test_register_is_idempotent(self):
        original = make_rule("required")
        RuleRegistry.register_factory("required", lambda definition: None)
        assert type(make_rule("required")) is type(original)

    def test_clear(self):
        RuleRegistry.clear()
        assert RuleRegistry.list_registered() == []

    def test_create_all_keeps_order(self):
        rules = RuleRegistry.create_all(
            [RuleDefinition("required"), RuleDefinition("email")]
        )
        assert [r.name for r in rules] == ["required", "email"]


# =============================================================================
# Built-in Factories
# =============================================================================


class TestBuiltinFactories:
    def test_min_length(self):
        rule = make_rule({"type": "minLength", "params": {"length": 6}})
        assert isinstance(rule, MinLength)
        assert rule.length == 6
        assert rule("abc", EMPTY_CONTEXT).code == "MIN_LENGTH"

    def test_message_and_code_overrides(self):
        rule = make_rule(
            {"type": "required", "message": "Need {label}", "code": "MISSING"}
        )
        error = rule("", EMPTY_CONTEXT)
        assert error.message == "Need {label}"
        assert error.code == "MISSING"

    def test_missing_param(self):
        with pytest.raises(InvalidRuleError, match="missing parameter 'length'"):
            make_rule("minLength")

    def test_malformed_param(self):
        with pytest.raises(InvalidRuleError):
            make_rule({"type": "minLength", "params": {"length": "six"}})

    def test_in_list(self):
        rule = make_rule({"type": "inList", "params": {"values": ["a", "b"]}})
        assert rule("a", EMPTY_CONTEXT) is None
        assert rule("c", EMPTY_CONTEXT).code == "NOT_IN_LIST"

    def test_regex(self):
        rule = make_rule({"type": "regex", "params": {"pattern": "[0-9]{5}"}})
        assert rule("12345", EMPTY_CONTEXT) is None

    def test_same(self):
        rule = make_rule({"type": "same", "params": {"field": "password"}})
        assert rule.references == ("password",)

    def test_required_if_with_value(self):
        rule = make_rule(
            {"type": "requiredIf", "params": {"field": "dropdown", "value": "other"}}
        )
        assert isinstance(rule, RequiredIf)
        ctx = FormContext({"dropdown": FieldState("other")})
        assert rule("", ctx).code == "REQUIRED"

    def test_required_if_without_value(self):
        rule = make_rule({"type": "requiredIf", "params": {"field": "phone"}})
        assert rule.expected is FILLED

    def test_range_selected(self):
        rule = make_rule({"type": "rangeSelected", "params": {"low": 1, "high": 3}})
        assert rule(("a",), EMPTY_CONTEXT) is None
        assert rule((), EMPTY_CONTEXT).code == "RANGE_SELECTED"

    def test_range_selected_low_above_high(self):
        with pytest.raises(InvalidRuleError):
            make_rule({"type": "rangeSelected", "params": {"low": 3, "high": 1}})

    def test_date_before_with_format(self):
        rule = make_rule(
            {
                "type": "dateBefore",
                "params": {
                    "bound": "01/01/2025",
                    "format": "%d/%m/%Y",
                    "unparsableMessage": "Use DD/MM/YYYY",
                },
            }
        )
        assert isinstance(rule, DateBefore)
        assert rule.bound == date(2025, 1, 1)
        assert rule("2024-06-01", EMPTY_CONTEXT).message == "Use DD/MM/YYYY"

    def test_date_after_with_date_bound(self):
        rule = make_rule({"type": "dateAfter", "params": {"bound": date(2020, 1, 1)}})
        assert rule(date(2019, 1, 1), EMPTY_CONTEXT).code == "DATE_NOT_AFTER"
