"""Integer helpers shared by the parser and the formatter."""
from __future__ import annotations

import math
from typing import NamedTuple

__all__ = ["SIXTEENTHS", "SixteenthRounding", "gcd", "round_half_up", "round_to_sixteenths"]

SIXTEENTHS = 16


class SixteenthRounding(NamedTuple):
    """A non-negative value snapped to the nearest 1/16, fraction in lowest terms."""

    whole: int
    numerator: int
    denominator: int

    @property
    def has_fraction(self) -> bool:
        return self.numerator > 0


def gcd(a: int, b: int) -> int:
    """Euclidean greatest common divisor."""

    while b:
        a, b = b, a % b
    return a


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties going up."""

    return int(math.floor(value + 0.5))


def round_to_sixteenths(value: float) -> SixteenthRounding:
    """Split ``value`` into whole inches and a reduced sixteenth fraction.

    ``value`` must be finite and non-negative. When the fraction rounds up to
    16/16 the carry is applied to ``whole``.
    """

    whole = int(math.floor(value))
    sixteenths = round_half_up((value - whole) * SIXTEENTHS)
    if sixteenths >= SIXTEENTHS:
        return SixteenthRounding(whole + 1, 0, 1)
    if sixteenths <= 0:
        return SixteenthRounding(whole, 0, 1)
    divisor = gcd(sixteenths, SIXTEENTHS)
    return SixteenthRounding(whole, sixteenths // divisor, SIXTEENTHS // divisor)
