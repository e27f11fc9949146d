"""Render inch values as feet-inches-fraction and decimal-inch display strings."""
from __future__ import annotations

import math
from typing import List

from .numeric import SixteenthRounding, round_to_sixteenths
from .quantity import INCHES_PER_FOOT

__all__ = [
    "ERROR_DISPLAY",
    "format_feet_inches",
    "format_plain_number",
    "format_total_inches",
]

ERROR_DISPLAY = "Error"


def _fraction_text(rounded: SixteenthRounding) -> str:
    if not rounded.has_fraction:
        return ""
    return f"{rounded.numerator}/{rounded.denominator}"


def _fraction_suffix(rounded: SixteenthRounding) -> str:
    fraction = _fraction_text(rounded)
    return f" {fraction}" if fraction else ""


def format_feet_inches(inches: float) -> str:
    """Format ``inches`` as ``5' 3 1/4"`` rounded to the nearest sixteenth.

    Feet are only shown when non-zero; whole inches are shown when non-zero or
    when they are the only thing left to show, so zero renders as ``0"``.
    Whole feet keep the space after the foot mark: ``1' "``.
    """

    if not math.isfinite(inches):
        return ERROR_DISPLAY

    negative = inches < 0
    value = abs(inches)

    feet = int(math.floor(value / INCHES_PER_FOOT))
    rounded = round_to_sixteenths(value % INCHES_PER_FOOT)
    whole = rounded.whole
    if whole >= INCHES_PER_FOOT:
        # 15.5/16 and up on 11" carries into the next foot
        feet += whole // INCHES_PER_FOOT
        whole %= INCHES_PER_FOOT

    suffix = _fraction_suffix(rounded)
    text = ""
    if feet > 0:
        text += f"{feet}' "
    if whole > 0 or (feet == 0 and not suffix):
        text += str(whole)
    text += suffix + '"'

    return ("-" if negative else "") + text.strip()


def format_total_inches(inches: float) -> str:
    """Format ``inches`` as ``63 1/4 In`` without splitting out feet."""

    if not math.isfinite(inches):
        return ERROR_DISPLAY

    negative = inches < 0
    rounded = round_to_sixteenths(abs(inches))
    fraction = _fraction_text(rounded)

    parts: List[str] = []
    if rounded.whole > 0 or not fraction:
        parts.append(str(rounded.whole))
    if fraction:
        parts.append(fraction)
    parts.append("In")

    return ("-" if negative else "") + " ".join(parts)


def format_plain_number(value: float) -> str:
    """Format a plain-mode result: ``110`` rather than ``110.0``."""

    if not math.isfinite(value):
        return ERROR_DISPLAY
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)
