import json
import math

import pytest

from onsitecalc.engine.evaluator import (
    EvaluationFailure,
    EvaluationResult,
    FailureKind,
    evaluate,
    reduce_tokens,
)


def _result(expression: str) -> EvaluationResult:
    outcome = evaluate(expression)
    assert isinstance(outcome, EvaluationResult), outcome
    return outcome


def test_mixed_numbers_add() -> None:
    result = _result("5 1/2 + 3 1/4")
    assert result.value == pytest.approx(8.75)
    assert result.feet_inches == '8 3/4"'
    assert result.total_inches == "8 3/4 In"
    assert result.measurement is True
    assert result.display == '8 3/4"'


def test_feet_subtraction() -> None:
    result = _result("2' 6 - 1'")
    assert result.value == pytest.approx(18.0)
    assert result.feet_inches == "1' 6\""
    assert result.total_inches == "18 In"


def test_whole_feet_keep_the_space_before_the_inch_mark() -> None:
    result = _result("2' + 2'")
    assert result.value == pytest.approx(48.0)
    assert result.feet_inches == "4' \""
    assert result.total_inches == "48 In"


def test_multiplication_binds_tighter_than_subtraction() -> None:
    result = _result("5 1/2 + 3 1/4 - 2 * 1/2")
    assert result.value == pytest.approx(7.75)
    assert result.feet_inches == '7 3/4"'


@pytest.mark.parametrize(
    "expression, expected_value, expected_display",
    [
        ("7/8", 0.875, '7/8"'),
        ("3' 6 × 2", 84.0, "7' \""),
        ("10 3/8 ÷ 2", 5.1875, '5 3/16"'),
        ("1' - 2'", -12.0, "-1' \""),
        ("junk", 0.0, '0"'),
    ],
)
def test_measurement_expressions(expression: str, expected_value: float, expected_display: str) -> None:
    result = _result(expression)
    assert result.measurement is True
    assert result.value == pytest.approx(expected_value)
    assert result.feet_inches == expected_display


def test_percentage_is_plain_numeric() -> None:
    result = _result("100 + 10%")
    assert result.measurement is False
    assert result.value == pytest.approx(110.0)
    assert result.feet_inches == "110"
    assert result.total_inches == "110"


@pytest.mark.parametrize(
    "expression, expected",
    [("12 + 4", 16.0), ("(2 + 3) * 4", 20.0), ("7 ÷ 2", 3.5), ("12", 12.0), ("50 %", 50.0)],
)
def test_plain_arithmetic(expression: str, expected: float) -> None:
    result = _result(expression)
    assert result.measurement is False
    assert result.value == pytest.approx(expected)


@pytest.mark.parametrize("expression", ["", "   ", "\t\n"])
def test_empty_expression(expression: str) -> None:
    outcome = evaluate(expression)
    assert isinstance(outcome, EvaluationFailure)
    assert outcome.kind is FailureKind.EMPTY_EXPRESSION
    assert outcome.ok is False


@pytest.mark.parametrize("expression", ["5 / 0", "3/8 / 0", "2' / 0 + 1"])
def test_zero_divisor_renders_error(expression: str) -> None:
    result = _result(expression)
    assert math.isnan(result.value)
    assert result.feet_inches == "Error"
    assert result.total_inches == "Error"
    assert result.as_dict()["value"] is None
    json.dumps(result.as_dict())


def test_dangling_operator_is_an_evaluation_error() -> None:
    outcome = evaluate("5' +")
    assert isinstance(outcome, EvaluationFailure)
    assert outcome.kind is FailureKind.EVALUATION_ERROR
    assert outcome.expression == "5' +"
    assert outcome.display == "Error"
    assert outcome.as_dict()["error"] == "evaluation_error"


def test_unbalanced_parentheses_degrade_through_measurement_path() -> None:
    result = _result("(5 + 3")
    assert result.measurement is True
    assert result.value == pytest.approx(3.0)


def test_result_echoes_expression() -> None:
    result = _result("  5 1/2 + 3 1/4 ")
    assert result.expression == "5 1/2 + 3 1/4"
    assert result.as_dict()["expression"] == "5 1/2 + 3 1/4"


@pytest.mark.parametrize(
    "tokens, expected",
    [
        (["2", "*", "3", "+", "4", "/", "2"], 8.0),
        (["10", "-", "2", "-", "3"], 5.0),
        (["12", "/", "2", "*", "3"], 18.0),
        (["1'", "+", "6"], 18.0),
        (["3 1/4"], 3.25),
    ],
)
def test_reduce_tokens(tokens: list[str], expected: float) -> None:
    assert reduce_tokens(tokens) == pytest.approx(expected)


def test_reduce_tokens_zero_divisor_is_nan() -> None:
    assert math.isnan(reduce_tokens(["1", "/", "0", "+", "1"]))


@pytest.mark.parametrize("tokens", [[], ["5", "+"], ["1", "^", "2"]])
def test_reduce_tokens_rejects_bad_sequences(tokens: list[str]) -> None:
    with pytest.raises(ValueError):
        reduce_tokens(tokens)
