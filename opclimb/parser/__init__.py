"""
opclimb Parser Package

Recursive descent evaluator over a runtime-extensible operator table.

Key Features:
- Precedence climbing driven by the registry's priority tiers
- Left-associative folding within a tier
- Parenthesized groups restart the climb from the loosest tier
- Diagnostics pointing at the exact offending character

Author: xwest
"""

from .evaluator import ExpressionEvaluator, evaluate, DEFAULT_MAX_NESTING
from ..errors import (
    EvaluatorError, ExpressionSyntaxError, UnknownOperatorError,
    DuplicateOperatorError, InvalidOperatorError, OperationError, Diagnostic
)

__all__ = [
    # Core evaluator
    "ExpressionEvaluator",
    "evaluate",
    "DEFAULT_MAX_NESTING",

    # Error handling
    "EvaluatorError",
    "ExpressionSyntaxError",
    "UnknownOperatorError",
    "DuplicateOperatorError",
    "InvalidOperatorError",
    "OperationError",
    "Diagnostic",
]
