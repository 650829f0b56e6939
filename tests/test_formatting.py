"""
Tests for number parsing and id-ID / Rupiah formatting.

Run with: pytest tests/test_formatting.py -v
"""

import pytest

from adrule.core.formatting import (
    format_amount,
    format_condition_value,
    format_id_number,
    format_interval,
    format_percentage,
    format_rupiah,
    parse_number,
)


class TestParseNumber:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("1000", 1000.0),
            (" 42 ", 42.0),
            ("-3.5", -3.5),
            (".5", 0.5),
            ("1e3", 1000.0),
            ("0x10", 16.0),
            ("", 0.0),
            (7, 7.0),
        ],
    )
    def test_parses_like_javascript_number(self, raw, expected):
        assert parse_number(raw) == expected

    @pytest.mark.parametrize("raw", ["abc", "1,000", "1_000", "inf", "NaN", "1e400", None, True])
    def test_returns_none_for_nan_results(self, raw):
        assert parse_number(raw) is None


class TestIdNumber:
    def test_groups_thousands_with_periods(self):
        assert format_id_number(1500000) == "1.500.000"

    def test_small_numbers_are_unchanged(self):
        assert format_id_number(999) == "999"

    def test_decimal_comma_and_three_digit_limit(self):
        assert format_id_number(1500.5) == "1.500,5"
        assert format_id_number(0.1234) == "0,123"

    def test_negative(self):
        assert format_id_number(-2500) == "-2.500"

    def test_very_large_values(self):
        assert format_id_number(1e21) == "1.000.000.000.000.000.000.000"


class TestRupiah:
    def test_prefix(self):
        assert format_rupiah(500000) == "Rp 500.000"

    def test_every_separator_is_a_period(self):
        assert format_rupiah(1500.5) == "Rp 1.500.5"


class TestConditionValue:
    def test_below_threshold_is_raw(self):
        assert format_condition_value("999", 1000) == "999"

    def test_threshold_is_inclusive(self):
        assert format_condition_value("1000", 1000) == "Rp 1.000"

    def test_non_numeric_is_raw(self):
        assert format_condition_value("abc", 1000) == "abc"

    def test_raw_string_is_preserved_below_threshold(self):
        assert format_condition_value("3.50", 1000) == "3.50"


class TestAmount:
    def test_dot_separated_and_raw_amounts_match(self):
        assert format_amount("1.500.000") == "Rp 1.500.000"
        assert format_amount("1500000") == "Rp 1.500.000"

    def test_unparseable_amount_is_shown_as_entered(self):
        assert format_amount("abc") == "Rp abc"


def test_percentage_drops_trailing_zero():
    assert format_percentage(20.0) == "20%"
    assert format_percentage(12.5) == "12.5%"


@pytest.mark.parametrize(
    "seconds, label",
    [(900, "15 menit"), (630, "10 menit 30 detik"), (45, "45 detik"), (60, "1 menit")],
)
def test_interval_labels(seconds, label):
    assert format_interval(seconds) == label
