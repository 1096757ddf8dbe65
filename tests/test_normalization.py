from __future__ import annotations

import math

from pyhud.ingestion.normalize import clamp_with_fallback, safe_number, safe_str, strict_flag


def test_safe_number_parses_numeric_input() -> None:
    assert safe_number(5) == 5
    assert isinstance(safe_number(5), int)
    assert safe_number(2.5) == 2.5
    assert safe_number(" 42 ") == 42
    assert isinstance(safe_number("42"), int)
    assert safe_number("42.0") == 42.0
    assert isinstance(safe_number("42.0"), float)


def test_safe_number_rejects_everything_else() -> None:
    assert safe_number(None) is None
    assert safe_number(True) is None
    assert safe_number("NaN-ish") is None
    assert safe_number("--") is None
    assert safe_number("") is None
    assert safe_number(math.nan) is None
    assert safe_number(math.inf) is None
    assert safe_number("inf") is None
    assert safe_number([1]) is None


def test_safe_str_and_strict_flag() -> None:
    assert safe_str("abc") == "abc"
    assert safe_str(12) == "12"
    assert safe_str("") is None
    assert safe_str({"a": 1}) is None

    assert strict_flag(True) is True
    assert strict_flag(False) is False
    assert strict_flag(1) is None
    assert strict_flag("true") is None


def test_clamp_with_fallback() -> None:
    assert clamp_with_fallback(150, 73, low=0, high=100) == 100
    assert clamp_with_fallback(-3, 73, low=0, high=100) == 0
    assert clamp_with_fallback(55, 73, low=0, high=100) == 55
    assert clamp_with_fallback("oops", 73, low=0, high=100) == 73
    assert clamp_with_fallback(None, 73) == 73
    assert clamp_with_fallback(1_000_000, 0) == 1_000_000
