"""Parse a single feet/inches/fraction token into inches."""
from __future__ import annotations

import math
import re
from typing import Optional

__all__ = ["INCHES_PER_FOOT", "parse_leading_number", "parse_quantity"]

INCHES_PER_FOOT = 12

_FEET_MARK = "'"
_INCH_MARK = '"'

_LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_MIXED_NUMBER = re.compile(r"^(\d+)\s+(\d+)/(\d+)$")
_SIMPLE_FRACTION = re.compile(r"^(\d+)/(\d+)$")


def parse_leading_number(text: str) -> Optional[float]:
    """Return the longest decimal prefix of ``text`` or ``None`` when there is none."""

    match = _LEADING_NUMBER.match(text)
    if match is None:
        return None
    return float(match.group(0))


def _divide(numerator: str, denominator: str) -> float:
    num = float(numerator)
    den = float(denominator)
    if den == 0:
        return math.inf if num else math.nan
    return num / den


def _parse_inches(text: str) -> float:
    mixed = _MIXED_NUMBER.match(text)
    if mixed:
        whole, num, den = mixed.groups()
        return float(whole) + _divide(num, den)

    fraction = _SIMPLE_FRACTION.match(text)
    if fraction:
        return _divide(*fraction.groups())

    return parse_leading_number(text) or 0.0


def parse_quantity(token: str) -> float:
    """Convert ``token`` such as ``3' 5 1/2"`` into a number of inches.

    Never raises: text that cannot be read contributes zero.
    """

    text = token.strip().replace(_INCH_MARK, "")
    feet = 0.0
    if _FEET_MARK in text:
        feet_text, text = text.split(_FEET_MARK, 1)
        feet = parse_leading_number(feet_text) or 0.0

    text = text.strip()
    if not text:
        return feet * INCHES_PER_FOOT
    return feet * INCHES_PER_FOOT + _parse_inches(text)
