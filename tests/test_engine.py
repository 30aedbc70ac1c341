"""Tests for the ValidationEngine."""

import pytest

from formstate.context import EMPTY_CONTEXT
from formstate.engine import CUSTOM_CODE, ValidationEngine, normalize_result
from formstate.rules import min_length, regex, required
from formstate.types import ValidationError


class RecordingRule:
    """Rule that records each call and returns a fixed result."""

    def __init__(self, result=None):
        self.result = result
        self.calls = []

    def __call__(self, value, context):
        self.calls.append(value)
        return self.result


class ExplodingRule:
    def __call__(self, value, context):
        raise RuntimeError("rule bug")


# =============================================================================
# Fail-fast Evaluation
# =============================================================================


class TestRun:
    def test_no_rules_passes(self):
        assert ValidationEngine.run("anything", [], EMPTY_CONTEXT) is None

    def test_all_pass(self):
        rules = [required(), min_length(6)]
        assert ValidationEngine.run("abcdef", rules, EMPTY_CONTEXT) is None

    def test_first_failure_wins(self):
        rules = [required(), min_length(6)]
        assert ValidationEngine.run("", rules, EMPTY_CONTEXT).code == "REQUIRED"
        assert ValidationEngine.run("abc", rules, EMPTY_CONTEXT).code == "MIN_LENGTH"

    def test_declaration_order_decides_message(self):
        length, pattern = min_length(3), regex(r"\d+")

        forward = ValidationEngine.run("ab", [length, pattern], EMPTY_CONTEXT)
        backward = ValidationEngine.run("ab", [pattern, length], EMPTY_CONTEXT)

        assert forward.code == "MIN_LENGTH"
        assert backward.code == "PATTERN_MISMATCH"

    def test_rules_after_failure_are_not_called(self):
        before = RecordingRule()
        failing = RecordingRule(ValidationError("bad", "BAD"))
        after = RecordingRule()

        error = ValidationEngine.run("x", [before, failing, after], EMPTY_CONTEXT)

        assert error.code == "BAD"
        assert before.calls == ["x"]
        assert failing.calls == ["x"]
        assert after.calls == []

    def test_repeated_runs_agree(self):
        rules = [required(), min_length(6)]
        first = ValidationEngine.run("abc", rules, EMPTY_CONTEXT)
        second = ValidationEngine.run("abc", rules, EMPTY_CONTEXT)
        assert first == second

    def test_rule_exceptions_propagate(self):
        with pytest.raises(RuntimeError, match="rule bug"):
            ValidationEngine.run("x", [ExplodingRule()], EMPTY_CONTEXT)

    def test_iterates_rules_once(self):
        rules = iter([required(), min_length(6)])
        assert ValidationEngine.run("abc", rules, EMPTY_CONTEXT).code == "MIN_LENGTH"


class TestRunAll:
    def test_collects_every_failure_in_order(self):
        rules = [min_length(3), regex(r"\d+"), required()]
        errors = ValidationEngine.run_all("ab", rules, EMPTY_CONTEXT)
        assert [e.code for e in errors] == ["MIN_LENGTH", "PATTERN_MISMATCH"]

    def test_empty_when_all_pass(self):
        assert ValidationEngine.run_all("123", [regex(r"\d+")], EMPTY_CONTEXT) == []


# =============================================================================
# Result Normalization
# =============================================================================


class TestNormalizeResult:
    def test_none(self):
        assert normalize_result(None, required()) is None

    def test_validation_error_passes_through(self):
        error = ValidationError("bad", "BAD")
        assert normalize_result(error, required()) is error

    def test_string_becomes_custom_error(self):
        error = normalize_result("Must be even", required())
        assert error == ValidationError(message="Must be even", code=CUSTOM_CODE)

    def test_empty_string_means_pass(self):
        assert normalize_result("", required()) is None

    def test_plain_function_rules(self):
        def even(value, context):
            return None if value % 2 == 0 else "{label} must be even"

        assert ValidationEngine.run(4, [even], EMPTY_CONTEXT) is None
        error = ValidationEngine.run(3, [even], EMPTY_CONTEXT)
        assert error.code == "CUSTOM"
        assert error.message == "{label} must be even"

    @pytest.mark.parametrize("result", [False, 0, ["bad"]])
    def test_other_types_rejected(self, result):
        with pytest.raises(TypeError):
            normalize_result(result, required())
