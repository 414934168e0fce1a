"""Tests for dimensions module."""

import pytest

from mediaembed.dimensions import is_empty, parse_dimension, parse_int


@pytest.mark.parametrize(
    "value, expected",
    [
        ("450", 450),
        ("450px", 450),
        ("450PX", 450),
        ("450Px", 450),
        (" 450 ", 450),
        ("abc", 560),
        ("px", 560),
        ("12.5", 560),
        ("0450", 560),
        ("9999", 960),
        ("9999px", 960),
        ("", 560),
        (None, 560),
        ("-5", 0),
    ],
)
def test_parse_dimension(value, expected):
    assert parse_dimension(value, 560, 960) == expected


def test_max_defaults_to_default():
    """Without an explicit max the default is the upper bound."""
    assert parse_dimension("900", 560) == 560
    assert parse_dimension("300", 560) == 300


def test_min_clamp():
    assert parse_dimension("10", 560, 960, 100) == 100
    assert parse_dimension("-5", 560, 960, 0) == 0


def test_empty_not_clamped():
    """Empty input returns the default even when it is out of range."""
    assert parse_dimension("", 2000, 960) == 2000
    assert parse_dimension("0", 560, 960) == 560


def test_only_trailing_px_is_stripped():
    assert parse_dimension("4px50", 560, 960) == 560


def test_parse_int():
    assert parse_int("42") == 42
    assert parse_int("+42") == 42
    assert parse_int("-42") == -42
    assert parse_int(" 7\n") == 7
    assert parse_int("0") == 0
    assert parse_int("007") is None
    assert parse_int("4 2") is None
    assert parse_int("") is None
    assert parse_int(None) is None


def test_is_empty():
    assert is_empty(None)
    assert is_empty("")
    assert is_empty("0")
    assert not is_empty("00")
    assert not is_empty(" ")


def test_overlong_integer_is_unparseable():
    """Digit runs too long for a 64-bit int fall back to the default."""
    assert parse_int("9" * 5000) is None
    assert parse_int("-" + "9" * 19) is None
    assert parse_int("9" * 18) == 999999999999999999
    assert parse_dimension("9" * 5000, 560, 960) == 560
    assert parse_dimension("9" * 5000 + "px", 560, 960) == 560
