import pytest

from onsitecalc.engine.arithmetic import (
    ArithmeticSyntaxError,
    evaluate_arithmetic,
    is_plain_arithmetic,
    tokenize_arithmetic,
)


@pytest.mark.parametrize(
    "expression, expected",
    [
        ("2 + 3 * 4", 14.0),
        ("(2 + 3) * 4", 20.0),
        ("10 / 4", 2.5),
        ("-3 + 5", 2.0),
        ("2 - 3 - 4", -5.0),
        ("100 / 10 / 2", 5.0),
        ("6 × 7", 42.0),
        ("8 ÷ 2", 4.0),
        ("50%", 50.0),
        ("1.5 + .5", 2.0),
        ("-(2 + 3)", -5.0),
        ("((1))", 1.0),
    ],
)
def test_evaluate_arithmetic(expression: str, expected: float) -> None:
    assert evaluate_arithmetic(expression) == pytest.approx(expected)


def test_evaluate_arithmetic_zero_division() -> None:
    with pytest.raises(ZeroDivisionError):
        evaluate_arithmetic("5 / 0")


@pytest.mark.parametrize("expression", ["", "(1 + 2", "1 +", "()", "1 2", "* 3", ".", "1 + )"])
def test_evaluate_arithmetic_rejects_malformed_input(expression: str) -> None:
    with pytest.raises(ArithmeticSyntaxError):
        evaluate_arithmetic(expression)


def test_arithmetic_syntax_error_is_a_value_error() -> None:
    assert issubclass(ArithmeticSyntaxError, ValueError)


def test_tokenize_arithmetic() -> None:
    assert tokenize_arithmetic("12.5*(3 - 1)") == ["12.5", "*", "(", "3", "-", "1", ")"]
    with pytest.raises(ArithmeticSyntaxError):
        tokenize_arithmetic("2 ^ 3")


@pytest.mark.parametrize(
    "expression, expected",
    [("2 + 2", True), ("(1 + 2) × 3 %", True), ("5'", False), ('6"', False), ("two", False)],
)
def test_is_plain_arithmetic(expression: str, expected: bool) -> None:
    assert is_plain_arithmetic(expression) is expected
