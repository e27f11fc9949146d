"""Percentage shortcuts: ``100 + 10%`` and ``15% of 80``."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

__all__ = ["PercentageReading", "evaluate_percentage"]

_NUMBER = r"-?\d+(?:\.\d+)?"

_ADJUST_PATTERN = re.compile(rf"^({_NUMBER})\s*([+-])\s*({_NUMBER})\s*%$")
_PERCENT_OF_PATTERN = re.compile(rf"^({_NUMBER})\s*%\s*(?:of|de|×|\*)?\s*({_NUMBER})$", re.IGNORECASE)
_TIMES_PERCENT_PATTERN = re.compile(rf"^({_NUMBER})\s*(?:×|\*)\s*({_NUMBER})\s*%$")


@dataclass(frozen=True)
class PercentageReading:
    """How a percentage expression was read."""

    value: float
    shape: str
    percent: float
    base: float


def _adjust(match: re.Match[str]) -> PercentageReading:
    base = float(match.group(1))
    percent = float(match.group(3))
    delta = base * (percent / 100)
    value = base + delta if match.group(2) == "+" else base - delta
    return PercentageReading(value=value, shape="adjust", percent=percent, base=base)


def _percent_of(expression: str, match: re.Match[str]) -> PercentageReading:
    first = float(match.group(1))
    second = float(match.group(2))
    # The side of the midpoint the % sign falls on decides which operand is the rate.
    if expression.index("%") < len(expression) / 2:
        percent, base = first, second
    else:
        percent, base = second, first
    return PercentageReading(value=(percent / 100) * base, shape="percent_of", percent=percent, base=base)


def evaluate_percentage(expression: str) -> Optional[PercentageReading]:
    """Evaluate the two supported percentage shapes, ``None`` for anything else.

    ``expression`` is expected to be stripped already.
    """

    if "%" not in expression:
        return None

    match = _ADJUST_PATTERN.match(expression)
    if match:
        return _adjust(match)

    match = _PERCENT_OF_PATTERN.match(expression) or _TIMES_PERCENT_PATTERN.match(expression)
    if match:
        return _percent_of(expression, match)
    return None
