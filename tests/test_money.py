"""Integer-cents rounding and formatting."""

import pytest

from app.core.money import format_cents, round_cents, round_half_up


@pytest.mark.parametrize(
    "value, expected",
    [(2.5, 3), (-2.5, -2), (0.49, 0), (1.5, 2)],
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_round_half_up_to_two_places():
    assert round_half_up(0.125, 2) == 0.13
    assert round_half_up(-5.0, 2) == -5.0
    assert round_half_up(1.005, 2) == 1.01
    assert round_half_up(-1.005, 2) == -1.0
    assert round_half_up(33.335, 2) == 33.34


def test_round_cents():
    assert round_cents(8333.5) == 8334
    assert round_cents(99.4) == 99
    assert round_cents(-2.5) == -2


def test_format_cents():
    assert format_cents(123450) == "$1,234.50"
    assert format_cents(-999) == "-$9.99"
    assert format_cents(1200, code="CA") == "CA$12.00"
    assert format_cents(0) == "$0.00"
