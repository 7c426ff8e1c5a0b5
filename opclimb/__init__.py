"""
opclimb - Operator Climbing Expression Evaluator

A small recursive-descent evaluator for integer arithmetic with a runtime-extensible
operator table. New binary operators can be slotted in at any precedence tier
relative to the operators already registered.

Architecture:
    opclimb/
    ├── operators/       # Operator registry and built-in operator library
    ├── parser/          # Recursive descent evaluator and diagnostics
    └── cli.py           # Command-line driver

Author: xwest
License: MIT
"""

__version__ = "0.1.0"
__author__ = "xwest"
__email__ = "dev@neuralscript.org"
__license__ = "MIT"

from .operators import OperatorRegistry, BinaryOperation
from .parser import (
    ExpressionEvaluator,
    evaluate,
    EvaluatorError,
    ExpressionSyntaxError,
    UnknownOperatorError,
    DuplicateOperatorError,
    InvalidOperatorError,
    OperationError,
)

__all__ = [
    # Core classes
    "ExpressionEvaluator",
    "OperatorRegistry",
    "BinaryOperation",
    "evaluate",

    # Errors
    "EvaluatorError",
    "ExpressionSyntaxError",
    "UnknownOperatorError",
    "DuplicateOperatorError",
    "InvalidOperatorError",
    "OperationError",

    # Version info
    "__version__",
    "__author__",
    "__email__",
    "__license__",
]
