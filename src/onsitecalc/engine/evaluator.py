"""Evaluate construction-measurement expressions.

:func:`evaluate` is the single entry point. It tries, in order, the
percentage shortcut, plain arithmetic and finally the unit-aware measurement
grammar, and always returns either an :class:`EvaluationResult` or an
:class:`EvaluationFailure`.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

from .arithmetic import evaluate_arithmetic, is_plain_arithmetic
from .formatter import ERROR_DISPLAY, format_feet_inches, format_plain_number, format_total_inches
from .percent import evaluate_percentage
from .quantity import parse_quantity
from .tokenizer import has_unit_markers, tokenize_measurement

__all__ = [
    "EvaluationFailure",
    "EvaluationResult",
    "FailureKind",
    "Outcome",
    "evaluate",
    "reduce_tokens",
]

LOGGER = logging.getLogger(__name__)


class FailureKind(str, Enum):
    EMPTY_EXPRESSION = "empty_expression"
    MALFORMED_EXPRESSION = "malformed_expression"
    EVALUATION_ERROR = "evaluation_error"


@dataclass(frozen=True)
class EvaluationResult:
    """Successful evaluation, with both display renderings precomputed."""

    value: float
    feet_inches: str
    total_inches: str
    expression: str
    measurement: bool

    ok = True

    @property
    def display(self) -> str:
        return self.feet_inches

    def as_dict(self) -> Dict[str, Any]:
        """Return a JSON-safe representation (non-finite values become ``None``)."""

        return {
            "ok": True,
            "value": self.value if math.isfinite(self.value) else None,
            "feet_inches": self.feet_inches,
            "total_inches": self.total_inches,
            "expression": self.expression,
            "measurement": self.measurement,
        }


@dataclass(frozen=True)
class EvaluationFailure:
    """An expression that produced no result."""

    kind: FailureKind
    expression: str
    message: str = ""

    ok = False
    display = ERROR_DISPLAY

    def as_dict(self) -> Dict[str, Any]:
        return {
            "ok": False,
            "error": self.kind.value,
            "message": self.message,
            "expression": self.expression,
        }


Outcome = Union[EvaluationResult, EvaluationFailure]


def _plain_result(value: float, expression: str) -> EvaluationResult:
    rendered = format_plain_number(value)
    return EvaluationResult(
        value=value,
        feet_inches=rendered,
        total_inches=rendered,
        expression=expression,
        measurement=False,
    )


def _measurement_result(inches: float, expression: str) -> EvaluationResult:
    return EvaluationResult(
        value=inches,
        feet_inches=format_feet_inches(inches),
        total_inches=format_total_inches(inches),
        expression=expression,
        measurement=True,
    )


def _apply(left: float, op: str, right: float) -> float:
    if op == "*":
        return left * right
    if op == "/":
        return left / right if right != 0 else math.nan
    if op == "+":
        return left + right
    if op == "-":
        return left - right
    raise ValueError(f"Unknown operator {op!r}")


def reduce_tokens(tokens: Sequence[str]) -> float:
    """Reduce ``value (op value)*`` honouring ``*``/``/`` before ``+``/``-``.

    Both tiers are folded left to right. A zero divisor yields ``nan``.
    """

    if not tokens:
        raise ValueError("Cannot reduce an empty token list")
    if len(tokens) % 2 == 0:
        raise ValueError(f"Dangling operator {tokens[-1]!r}")
    if len(tokens) == 1:
        return parse_quantity(tokens[0])

    values = [parse_quantity(token) for token in tokens[0::2]]
    operators = list(tokens[1::2])

    # first pass: multiplication and division
    terms: List[float] = [values[0]]
    additive: List[str] = []
    for op, value in zip(operators, values[1:]):
        if op in ("*", "/"):
            terms[-1] = _apply(terms[-1], op, value)
        else:
            additive.append(op)
            terms.append(value)

    # second pass: addition and subtraction
    result = terms[0]
    for op, value in zip(additive, terms[1:]):
        result = _apply(result, op, value)
    return result


def _try_arithmetic(expression: str) -> Optional[float]:
    try:
        return evaluate_arithmetic(expression)
    except (ValueError, ArithmeticError, RecursionError) as exc:
        LOGGER.debug("arithmetic_fallthrough", extra={"expression": expression, "error": str(exc)})
        return None


def evaluate(expression: str) -> Outcome:
    """Evaluate ``expression`` such as ``5 1/2 + 3 1/4`` or ``100 + 10%``."""

    expr = expression.strip()
    if not expr:
        return EvaluationFailure(FailureKind.EMPTY_EXPRESSION, expression, "Expression is empty")

    reading = evaluate_percentage(expr)
    if reading is not None:
        LOGGER.debug("percentage_path", extra={"expression": expr, "shape": reading.shape})
        return _plain_result(reading.value, expr)

    if not has_unit_markers(expr) and is_plain_arithmetic(expr):
        value = _try_arithmetic(expr)
        if value is not None:
            LOGGER.debug("arithmetic_path", extra={"expression": expr})
            return _plain_result(value, expr)

    try:
        tokens = tokenize_measurement(expr)
        if not tokens:
            return EvaluationFailure(FailureKind.MALFORMED_EXPRESSION, expr, "No tokens found")
        inches = reduce_tokens(tokens)
    except Exception as exc:
        LOGGER.warning("measurement_evaluation_failed", extra={"expression": expr, "error": str(exc)})
        return EvaluationFailure(FailureKind.EVALUATION_ERROR, expr, str(exc))

    LOGGER.debug("measurement_path", extra={"expression": expr, "tokens": tokens})
    return _measurement_result(inches, expr)
