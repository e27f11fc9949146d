import math

import pytest

from onsitecalc.engine.formatter import format_feet_inches
from onsitecalc.engine.quantity import parse_leading_number, parse_quantity


@pytest.mark.parametrize(
    "token, expected",
    [
        ("12", 12.0),
        ("7/8", 0.875),
        ("10 3/8", 10.375),
        ("3' 5 1/2\"", 41.5),
        ("3' 7/8\"", 36.875),
        ("2' 6", 30.0),
        ("5'", 60.0),
        ("1.5'", 18.0),
        ("'6", 6.0),
        ("6\"", 6.0),
        ("  4  ", 4.0),
        ("2.5", 2.5),
        ("-4", -4.0),
        ("12abc", 12.0),
        ("junk", 0.0),
        ("", 0.0),
        ("   ", 0.0),
    ],
)
def test_parse_quantity(token: str, expected: float) -> None:
    assert parse_quantity(token) == pytest.approx(expected)


def test_parse_quantity_splits_on_first_feet_mark_only() -> None:
    # "2' 6'" leaves "6'" as inch text, which reads as 6
    assert parse_quantity("2' 6'") == pytest.approx(30.0)


def test_parse_quantity_zero_denominator_is_not_finite() -> None:
    assert math.isinf(parse_quantity("3/0"))
    assert math.isinf(parse_quantity("2 1/0"))
    assert math.isnan(parse_quantity("0/0"))


@pytest.mark.parametrize(
    "text, expected",
    [("5", 5.0), ("  5.25x", 5.25), (".5", 0.5), ("5.", 5.0), ("1e2", 100.0), ("-3", -3.0), ("abc", None), ("", None)],
)
def test_parse_leading_number(text: str, expected) -> None:
    assert parse_leading_number(text) == expected


@pytest.mark.parametrize("n", range(12))
def test_whole_inches_under_a_foot_round_trip(n: int) -> None:
    assert format_feet_inches(parse_quantity(str(n))) == f'{n}"'


@pytest.mark.parametrize(
    "numerator, denominator",
    [(n, d) for d in (2, 4, 8, 16) for n in range(1, d)],
)
def test_power_of_two_fractions_parse_exactly(numerator: int, denominator: int) -> None:
    assert parse_quantity(f"{numerator}/{denominator}") == numerator / denominator


@pytest.mark.parametrize(
    "token, expected",
    [("2/4", '1/2"'), ("4/16", '1/4"'), ("6/8", '3/4"'), ("10/16", '5/8"'), ("8/16", '1/2"'), ("1/16", '1/16"')],
)
def test_fractions_render_in_lowest_terms(token: str, expected: str) -> None:
    assert format_feet_inches(parse_quantity(token)) == expected
