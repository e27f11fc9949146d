"""Sandboxed evaluator for plain ``+ - * / ( )`` arithmetic.

Expressions are tokenized and evaluated by precedence climbing; nothing is
ever handed to :func:`eval`.
"""
from __future__ import annotations

import math
import re
from typing import List

from .tokenizer import OPERATOR_GLYPHS

__all__ = ["ArithmeticSyntaxError", "evaluate_arithmetic", "is_plain_arithmetic", "tokenize_arithmetic"]

_PLAIN_ARITHMETIC = re.compile(r"^[\d\s.+\-*/×÷()%]+$")
_STRIPPED = str.maketrans({"%": None, **OPERATOR_GLYPHS})

_OP_PRECEDENCE = {"+": 1, "-": 1, "*": 2, "/": 2}
_PREFIX_PRECEDENCE = 3


class ArithmeticSyntaxError(ValueError):
    """Raised when a plain arithmetic expression cannot be parsed."""


def is_plain_arithmetic(expression: str) -> bool:
    """Return ``True`` if ``expression`` only holds digits, operators and parentheses."""

    return bool(_PLAIN_ARITHMETIC.match(expression))


def tokenize_arithmetic(expression: str) -> List[str]:
    tokens: List[str] = []
    expr = expression.translate(_STRIPPED)
    i = 0
    while i < len(expr):
        ch = expr[i]
        if ch.isspace():
            i += 1
            continue
        if ch in "+-*/()":
            tokens.append(ch)
            i += 1
            continue
        if ch.isdigit() or ch == ".":
            j = i + 1
            saw_dot = ch == "."
            while j < len(expr):
                nxt = expr[j]
                if nxt.isdigit():
                    j += 1
                    continue
                if nxt == "." and not saw_dot:
                    saw_dot = True
                    j += 1
                    continue
                break
            tokens.append(expr[i:j])
            i = j
            continue
        raise ArithmeticSyntaxError(f"Unexpected character {ch!r} in {expression!r}")
    return tokens


def _parse_number(token: str) -> float:
    if token == ".":
        raise ArithmeticSyntaxError("Lone decimal point")
    return float(token)


def _apply(op: str, left: float, right: float) -> float:
    if op == "+":
        return left + right
    if op == "-":
        return left - right
    if op == "*":
        return left * right
    if right == 0:
        raise ZeroDivisionError("division by zero")
    return left / right


def _evaluate_tokens(tokens: List[str]) -> float:
    idx = 0

    def parse_expression(min_prec: int = 0) -> float:
        nonlocal idx
        if idx >= len(tokens):
            raise ArithmeticSyntaxError("Unexpected end of expression")
        tok = tokens[idx]
        if tok in ("+", "-"):
            idx += 1
            value = parse_expression(_PREFIX_PRECEDENCE)
            left = value if tok == "+" else -value
        elif tok == "(":
            idx += 1
            left = parse_expression(0)
            if idx >= len(tokens) or tokens[idx] != ")":
                raise ArithmeticSyntaxError("Missing closing parenthesis")
            idx += 1
        elif tok in _OP_PRECEDENCE or tok == ")":
            raise ArithmeticSyntaxError(f"Unexpected token {tok!r}")
        else:
            left = _parse_number(tok)
            idx += 1

        while idx < len(tokens):
            op = tokens[idx]
            prec = _OP_PRECEDENCE.get(op)
            if prec is None or prec < min_prec:
                break
            idx += 1
            right = parse_expression(prec + 1)
            left = _apply(op, left, right)
        return left

    result = parse_expression(0)
    if idx != len(tokens):
        raise ArithmeticSyntaxError(f"Trailing tokens: {tokens[idx:]}")
    return result


def evaluate_arithmetic(expression: str) -> float:
    """Evaluate ``expression`` with the usual precedence and parentheses.

    ``%`` signs are ignored and ``×``/``÷`` are accepted as operators. Raises
    :class:`ArithmeticSyntaxError` for malformed input and
    :class:`ZeroDivisionError` for a zero divisor.
    """

    tokens = tokenize_arithmetic(expression)
    if not tokens:
        raise ArithmeticSyntaxError("Empty expression")
    result = _evaluate_tokens(tokens)
    if not math.isfinite(result):
        raise ArithmeticSyntaxError(f"Non-finite result for {expression!r}")
    return result
