"""onsitecalc – feet, inches and fractions calculator core."""

from ._version import __version__
from .engine import (
    EvaluationFailure,
    EvaluationResult,
    FailureKind,
    evaluate,
    format_feet_inches,
    format_total_inches,
    parse_quantity,
)

__all__ = [
    "__version__",
    "EvaluationFailure",
    "EvaluationResult",
    "FailureKind",
    "evaluate",
    "format_feet_inches",
    "format_total_inches",
    "parse_quantity",
    "cli",
    "config",
    "engine",
    "interpret",
    "service",
    "utils",
]
