"""
opclimb Operators Package

Holds the operator table the evaluator dispatches through and the library of
ready-made binary functions.

Author: xwest
"""

from .library import BinaryOperation, BUILTIN_OPERATIONS, NAMED_OPERATIONS
from .registry import OperatorRegistry

__all__ = [
    "OperatorRegistry",
    "BinaryOperation",
    "BUILTIN_OPERATIONS",
    "NAMED_OPERATIONS",
]
