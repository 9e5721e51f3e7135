import math

import pytest

from utils.parsing import parse_count, parse_decimal, round_currency, round_litres


@pytest.mark.parametrize("raw, expected", [
    ("12.5", 12.5),
    ("  7", 7.0),
    ("12.5abc", 12.5),
    ("-3.25", -3.25),
    (".5", 0.5),
    ("1e3", 1000.0),
    (42, 42.0),
    (3.75, 3.75),
])
def test_parse_decimal_reads_numeric_prefix(raw, expected):
    assert parse_decimal(raw) == expected


@pytest.mark.parametrize("raw", ["", "abc", "   ", None, True, "nan", float("nan"), math.inf, "--1"])
def test_parse_decimal_falls_back_to_zero(raw):
    assert parse_decimal(raw) == 0.0


@pytest.mark.parametrize("raw, expected", [
    ("7", 7),
    ("7.9", 7),
    ("12 notes", 12),
    (3.6, 3),
    ("", 0),
    ("x", 0),
    (None, 0),
    (float("nan"), 0),
])
def test_parse_count(raw, expected):
    assert parse_count(raw) == expected


def test_rounding_policy():
    assert round_currency(5144.944999) == 5144.94
    assert round_litres(50.50049) == 50.5
    assert round_currency(None) == 0.0


@pytest.mark.parametrize("raw", ["9" * 400, "99999999999999999999", 10 ** 30, -(10 ** 30), 1e300])
def test_parse_count_out_of_range_is_zero(raw):
    assert parse_count(raw) == 0


def test_parse_count_keeps_largest_storable_value():
    assert parse_count(str(2 ** 63 - 1)) == 2 ** 63 - 1
    assert parse_count("000000000000000000000042") == 42


@pytest.mark.parametrize("raw", ["9" * 400, "1e400", "2e15", 10 ** 400, -1e16])
def test_parse_decimal_out_of_range_is_zero(raw):
    assert parse_decimal(raw) == 0.0
