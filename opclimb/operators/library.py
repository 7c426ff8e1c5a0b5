"""
Built-in operator table and named binary functions.

The built-ins mirror ordinary school arithmetic: additive operators on tier 1,
multiplicative ones on tier 2. NAMED_OPERATIONS is the catalogue the command
line driver draws from when extending the table.
"""

import math
from typing import Callable, Dict, List, Tuple

BinaryOperation = Callable[[float, float], float]


def add(x: float, y: float) -> float:
    return x + y


def sub(x: float, y: float) -> float:
    return x - y


def mul(x: float, y: float) -> float:
    return x * y


def div(x: float, y: float) -> float:
    """IEEE-754 division: a zero divisor gives a signed infinity or nan instead of raising."""
    if y == 0:
        if x == 0 or math.isnan(x):
            return math.nan
        return math.copysign(math.inf, x) * math.copysign(1.0, y)
    return x / y


def mod(x: float, y: float) -> float:
    return math.fmod(x, y)


# (symbol, implementation, priority)
BUILTIN_OPERATIONS: List[Tuple[str, BinaryOperation, int]] = [
    ('+', add, 1),
    ('-', sub, 1),
    ('*', mul, 2),
    ('/', div, 2),
]

NAMED_OPERATIONS: Dict[str, BinaryOperation] = {
    "add": add,
    "sub": sub,
    "mul": mul,
    "div": div,
    "mod": mod,
    "pow": math.pow,
    "max": max,
    "min": min,
    "hypot": math.hypot,
}
