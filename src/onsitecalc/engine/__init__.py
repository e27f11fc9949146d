"""Measurement expression engine: parser, evaluator and formatter."""

from .arithmetic import ArithmeticSyntaxError, evaluate_arithmetic
from .evaluator import EvaluationFailure, EvaluationResult, FailureKind, Outcome, evaluate, reduce_tokens
from .formatter import ERROR_DISPLAY, format_feet_inches, format_plain_number, format_total_inches
from .numeric import SixteenthRounding, gcd, round_half_up, round_to_sixteenths
from .percent import PercentageReading, evaluate_percentage
from .quantity import INCHES_PER_FOOT, parse_quantity
from .tokenizer import has_unit_markers, tokenize_measurement

__all__ = [
    "ArithmeticSyntaxError",
    "ERROR_DISPLAY",
    "EvaluationFailure",
    "EvaluationResult",
    "FailureKind",
    "INCHES_PER_FOOT",
    "Outcome",
    "PercentageReading",
    "SixteenthRounding",
    "evaluate",
    "evaluate_arithmetic",
    "evaluate_percentage",
    "format_feet_inches",
    "format_plain_number",
    "format_total_inches",
    "gcd",
    "has_unit_markers",
    "parse_quantity",
    "reduce_tokens",
    "round_half_up",
    "round_to_sixteenths",
    "tokenize_measurement",
]
