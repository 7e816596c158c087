"""Tests for shared value helpers."""

from __future__ import annotations

import math

import pytest

from nefit_easy.utils import float_or_none, format_value


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (21.26, 21.3),
        (21.24, 21.2),
        (21.25, 21.3),
        (-0.05, -0.1),
        (20, 20.0),
    ],
)
def test_format_value_rounds_half_up(value: float, expected: float) -> None:
    """Numbers are rounded half-up to one decimal."""

    assert format_value(value) == expected


def test_format_value_passes_through_non_numbers() -> None:
    """Booleans, strings and non-finite values are left alone."""

    assert format_value(True) is True
    assert format_value("clock") == "clock"
    assert format_value(None) is None
    assert math.isnan(format_value(float("nan")))


def test_float_or_none_handles_strings_and_invalid_values() -> None:
    """Numeric strings convert; blanks, booleans and garbage do not."""

    assert float_or_none("1.5") == 1.5
    assert float_or_none(" 2 ") == 2.0
    assert float_or_none("") is None
    assert float_or_none("abc") is None
    assert float_or_none(True) is None
    assert float_or_none(float("inf")) is None


@pytest.mark.parametrize(("value", "expected"), [(0.15, 0.2), (2.25, 2.3), (1.45, 1.5)])
def test_format_value_rounds_the_shortest_decimal_form(
    value: float, expected: float
) -> None:
    """Ties are decided on the printed decimal, not the binary float."""

    assert format_value(value) == expected
