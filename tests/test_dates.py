"""Tests for date comparison rules."""

from datetime import date, datetime

import pytest

from formstate.context import EMPTY_CONTEXT
from formstate.errors import InvalidRuleError
from formstate.rules import UNPARSABLE_CODE, date_after, date_before


def check(rule, value):
    return rule(value, EMPTY_CONTEXT)


# =============================================================================
# Comparisons
# =============================================================================


class TestDateBefore:
    def test_earlier_date_passes(self):
        assert check(date_before(date(2025, 1, 1)), date(2024, 6, 1)) is None

    def test_later_date_fails(self):
        error = check(date_before(date(2020, 1, 1)), date(2024, 6, 1))
        assert error.code == "DATE_NOT_BEFORE"
        assert error.message == "{label} must be before 2020-01-01"
        assert error.params == {"bound": "2020-01-01"}

    def test_bound_itself_fails(self):
        bound = date(2024, 6, 1)
        assert check(date_before(bound), bound).code == "DATE_NOT_BEFORE"

    def test_datetime_value_against_date_bound(self):
        rule = date_before(date(2024, 6, 2))
        assert check(rule, datetime(2024, 6, 1, 23, 59)) is None


class TestDateAfter:
    def test_later_date_passes(self):
        assert check(date_after(date(2020, 1, 1)), date(2024, 6, 1)) is None

    def test_earlier_date_fails(self):
        error = check(date_after(date(2025, 1, 1)), date(2024, 6, 1))
        assert error.code == "DATE_NOT_AFTER"

    def test_bound_itself_fails(self):
        bound = date(2024, 6, 1)
        assert check(date_after(bound), bound).code == "DATE_NOT_AFTER"

    def test_date_value_against_datetime_bound(self):
        rule = date_after(datetime(2024, 6, 1, 12, 0))
        assert check(rule, date(2024, 6, 1)).code == "DATE_NOT_AFTER"
        assert check(rule, date(2024, 6, 2)) is None


# =============================================================================
# String Parsing
# =============================================================================


class TestStringValues:
    def test_iso_strings_without_format(self):
        rule = date_before(date(2025, 1, 1))
        assert check(rule, "2024-06-01") is None
        assert check(rule, "2025-06-01").code == "DATE_NOT_BEFORE"

    def test_strings_with_format(self):
        rule = date_before(date(2025, 1, 1), fmt="%d/%m/%Y")
        assert check(rule, "01/06/2024") is None
        assert check(rule, "31/12/2025").code == "DATE_NOT_BEFORE"

    @pytest.mark.parametrize("fmt", ["%c", "%x %X"])
    def test_locale_time_directives_keep_time(self, fmt):
        rule = date_after(datetime(2024, 6, 1, 12, 0), fmt=fmt)
        evening = datetime(2024, 6, 1, 18, 0).strftime(fmt)
        morning = datetime(2024, 6, 1, 9, 0).strftime(fmt)
        assert check(rule, evening) is None
        assert check(rule, morning).code == "DATE_NOT_AFTER"

    def test_bound_string_parsed_with_format(self):
        rule = date_after("01/01/2020", fmt="%d/%m/%Y")
        assert rule.bound == date(2020, 1, 1)
        assert rule.message == "{label} must be after 01/01/2020"

    def test_unparsable_string_has_distinct_code(self):
        rule = date_before(date(2025, 1, 1), fmt="%d/%m/%Y")
        error = check(rule, "2024-06-01")
        assert error.code == UNPARSABLE_CODE
        assert error.message == "{label} must be a date in the format %d/%m/%Y"

    def test_unparsable_without_format(self):
        error = check(date_before(date(2025, 1, 1)), "next tuesday")
        assert error.code == "DATE_UNPARSABLE"
        assert error.message == "{label} must be a valid date"

    def test_unparsable_message_override(self):
        rule = date_after(date(2020, 1, 1), unparsable_message="Use YYYY-MM-DD")
        assert check(rule, "soon").message == "Use YYYY-MM-DD"

    def test_non_date_values_are_unparsable(self):
        assert check(date_after(date(2020, 1, 1)), 42).code == "DATE_UNPARSABLE"

    def test_empty_passes(self):
        assert check(date_after(date(2020, 1, 1)), "") is None
        assert check(date_after(date(2020, 1, 1)), None) is None


# =============================================================================
# Configuration
# =============================================================================


class TestConfiguration:
    @pytest.mark.parametrize(
        "fmt",
        [
            "YYYY-MM-DD",  # no directives
            "%Y-%Q",  # unknown directive
            "%Y-%m-%d %",  # trailing percent
            "%G",  # cannot be parsed back on its own
            "",
        ],
    )
    def test_bad_format_fails_at_construction(self, fmt):
        with pytest.raises(InvalidRuleError):
            date_before(date(2025, 1, 1), fmt=fmt)

    @pytest.mark.parametrize("bound", ["not a date", 42, None])
    def test_bad_bound_fails_at_construction(self, bound):
        with pytest.raises(InvalidRuleError):
            date_after(bound)

    def test_bound_not_matching_format(self):
        with pytest.raises(InvalidRuleError):
            date_after("2020-01-01", fmt="%d/%m/%Y")
