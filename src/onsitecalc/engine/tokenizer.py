"""Split measurement expressions into alternating value and operator tokens."""
from __future__ import annotations

import re
from typing import List

__all__ = ["OPERATOR_GLYPHS", "has_unit_markers", "normalize_operator", "tokenize_measurement"]

OPERATOR_GLYPHS = {"×": "*", "÷": "/"}
_OPERATOR_CHARS = frozenset("+-*/") | frozenset(OPERATOR_GLYPHS)

_UNIT_MARKERS = re.compile(r"['\"]|\d+/\d+")


def has_unit_markers(expression: str) -> bool:
    """Return ``True`` when ``expression`` uses feet, inch or fraction notation."""

    return _UNIT_MARKERS.search(expression) is not None


def normalize_operator(symbol: str) -> str:
    return OPERATOR_GLYPHS.get(symbol, symbol)


def _is_operator_boundary(expression: str, index: int, buffer: str) -> bool:
    char = expression[index]
    if char not in _OPERATOR_CHARS or not buffer.strip():
        return False

    last = index == len(expression) - 1
    prev_char = expression[index - 1] if index > 0 else ""
    next_char = "" if last else expression[index + 1]
    if not (prev_char == " " or next_char == " " or last):
        return False

    if char == "/" and prev_char.isdigit() and next_char.isdigit():
        return False
    return True


def tokenize_measurement(expression: str) -> List[str]:
    """Tokenize ``expression`` as ``value (op value)*``.

    An operator needs a space on at least one side (or must end the text) so
    that ``3/8`` stays a fraction while ``3 / 8`` is a division. Display glyphs
    ``×`` and ``÷`` are normalised to ``*`` and ``/``.
    """

    tokens: List[str] = []
    buffer = ""
    for index, char in enumerate(expression):
        if _is_operator_boundary(expression, index, buffer):
            tokens.append(buffer.strip())
            tokens.append(normalize_operator(char))
            buffer = ""
            continue
        buffer += char

    if buffer.strip():
        tokens.append(buffer.strip())
    return tokens
