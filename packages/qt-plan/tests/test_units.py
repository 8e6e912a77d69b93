"""Tests for lenient number and memory-unit extraction."""

import re

import pytest

from qt_plan.units import as_number, leading_number, match_number, parse_memory


class TestMatchNumber:
    def test_labeled_field(self):
        assert match_number("(cost=0.00..4.50 rows=10 width=8)", r"rows=([0-9.]+)") == 10.0

    def test_first_match_wins(self):
        assert match_number("rows=3 rows=7", r"rows=([0-9]+)") == 3.0

    def test_string_pattern_is_case_insensitive(self):
        assert match_number("Actual Time=12.5", r"actual time=([0-9.]+)") == 12.5

    def test_compiled_pattern(self):
        pattern = re.compile(r"width=([0-9]+)")
        assert match_number("rows=1 width=42", pattern) == 42.0

    def test_absent_is_none(self):
        assert match_number("(cost=1..2)", r"rows=([0-9.]+)") is None

    def test_empty_text_is_none(self):
        assert match_number("", r"rows=([0-9.]+)") is None
        assert match_number(None, r"rows=([0-9.]+)") is None

    def test_non_numeric_capture_is_none(self):
        """A capture such as "1.2.3" does not raise."""
        assert match_number("rows=1.2.3", r"rows=([0-9.]+)") is None


class TestLeadingNumber:
    @pytest.mark.parametrize("cell,expected", [
        ("12.5ms", 12.5),
        ("[3.1,4.0]", 3.1),
        ("  600.00 ", 600.0),
        (42, 42.0),
    ])
    def test_extracts_first_number(self, cell, expected):
        assert leading_number(cell) == expected

    def test_no_number(self):
        assert leading_number("n/a") is None
        assert leading_number(None) is None


class TestAsNumber:
    def test_numeric_values_pass_through(self):
        assert as_number(380) == 380.0
        assert as_number(0.25) == 0.25

    def test_numeric_strings(self):
        assert as_number("750.5") == 750.5
        assert as_number("12 ms") == 12.0

    def test_missing_uses_default(self):
        assert as_number(None) == 0.0
        assert as_number("unknown", default=-1.0) == -1.0

    def test_non_finite_uses_default(self):
        assert as_number(float("nan")) == 0.0
        assert as_number(float("inf"), default=-1.0) == -1.0
        assert as_number("Infinity") == 0.0
        assert as_number(10 ** 400) == 0.0

    def test_bool_is_not_a_number(self):
        assert as_number(True) == 0.0


class TestParseMemory:
    @pytest.mark.parametrize("value,expected", [
        ("2GB", 2048.0),
        ("1.5 G", 1536.0),
        ("96MB", 96.0),
        ("512 KB", 0.5),
        ("6144KB", 6.0),
        ("2048K", 2.0),
        ("64", 64.0),
        ("48mb", 48.0),
    ])
    def test_normalizes_to_mb(self, value, expected):
        assert parse_memory(value) == pytest.approx(expected)

    def test_non_finite_is_none(self):
        assert parse_memory(float("inf")) is None
        assert parse_memory(float("nan")) is None
        assert parse_memory(10 ** 400) is None
        assert parse_memory("9" * 400 + "GB") is None

    def test_overlong_digits_are_not_numbers(self):
        assert leading_number("9" * 400) is None
        assert match_number("rows=" + "9" * 400, r"rows=([0-9.]+)") is None

    def test_numbers_are_already_mb(self):
        assert parse_memory(32) == 32.0
        assert parse_memory(7.5) == 7.5

    def test_absent_is_none_not_zero(self):
        assert parse_memory(None) is None
        assert parse_memory("n/a") is None
        assert parse_memory("") is None
