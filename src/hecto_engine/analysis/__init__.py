"""Load-time indentation analysis and in-place arithmetic."""

from .expression import (
    DivisionByZeroError,
    ExpressionError,
    ExpressionEvaluator,
    ExpressionSyntaxError,
    evaluate,
)
from .indent import IndentDetector, IndentPolicy, detect

__all__ = [
    "DivisionByZeroError",
    "ExpressionError",
    "ExpressionEvaluator",
    "ExpressionSyntaxError",
    "evaluate",
    "IndentDetector",
    "IndentPolicy",
    "detect",
]
