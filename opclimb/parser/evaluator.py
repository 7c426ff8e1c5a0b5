"""
opclimb recursive descent evaluator

Evaluates straight off the character sequence, no token stream. One recursive
method takes a priority tier: it climbs towards the tightest tier, bottoms out on a
literal or a parenthesized group, then folds same-tier operators left to right on
the way back up.

    expression(p)  := expression(p + 1) (op_p expression(p + 1))*   for p <= max
    expression(p)  := value                                          for p > max
    value          := digits | '(' expression(1) ')'

Author: xwest
"""

import logging
import math
import sys
from typing import Optional

from ..errors import (
    SourcePosition, create_unexpected_character_error, create_unexpected_eof_error,
    create_missing_paren_error, create_trailing_input_error,
    create_number_overflow_error, create_nesting_error, create_operation_error
)
from ..operators.registry import OperatorRegistry, BinaryOperation

logger = logging.getLogger(__name__)

DIGITS = frozenset("0123456789")
EOF_CHAR = '\0'
DEFAULT_MAX_NESTING = 200
# Stack frames left to the caller when sizing the nesting budget
RECURSION_HEADROOM = 250


class ExpressionEvaluator:
    """
    Single-use evaluator for one expression string.

    Owns the scan cursor; reads the operator table from its registry. The
    registry may be extended before parse() but not while a parse is running.
    """

    def __init__(self, expression: str, registry: Optional[OperatorRegistry] = None,
                 max_nesting: int = DEFAULT_MAX_NESTING):
        """
        Args:
            expression: Source text, digits, registered operators and parentheses only
            registry: Operator table to dispatch through. A fresh table with the
                built-in operators is created when omitted.
            max_nesting: Deepest parenthesis nesting accepted. The interpreter
                recursion limit can lower it further: every nesting level costs
                one stack frame per priority tier.
        """
        self.expression = expression
        self.registry = registry if registry is not None else OperatorRegistry.with_builtins()
        self.max_nesting = max_nesting
        self.pos = 0
        self._depth = 0

    def add_operation(self, symbol: str, implementation: BinaryOperation, after: str,
                      shared: bool = False) -> int:
        """Register a new operator one tier above ``after``. See OperatorRegistry.add_operation."""
        return self.registry.add_operation(symbol, implementation, after, shared=shared)

    def parse(self) -> float:
        """
        Evaluate the expression from the current cursor to the end of input.

        Raises:
            ExpressionSyntaxError: the input is malformed or has trailing characters
            OperationError: an operator implementation failed
        """
        result = self._parse_at_priority(1)
        if not self._is_at_end():
            raise create_trailing_input_error(self._current(), self._position())
        logger.debug("Evaluated %r = %r", self.expression, result)
        return result

    # ------------------------------------------------------------------
    # Grammar productions
    # ------------------------------------------------------------------

    def _parse_at_priority(self, priority: int) -> float:
        if priority > self.registry.max_priority:
            return self._parse_value()

        char = self._current()
        if char not in DIGITS and char != '(':
            raise self._unexpected("a digit or '('")

        result = self._parse_at_priority(priority + 1)
        operators = self.registry.members_at(priority)
        while not self._is_at_end() and self._current() in operators:
            symbol = self._current()
            operator_pos = self._position()
            self._advance()
            right = self._parse_at_priority(priority + 1)
            result = self._apply(symbol, result, right, operator_pos)
        return result

    def _parse_value(self) -> float:
        char = self._current()
        if char in DIGITS:
            return self._parse_number()

        if char == '(':
            open_offset = self.pos
            limit = self._nesting_limit()
            if self._depth >= limit:
                raise create_nesting_error(limit, self._position())
            self._advance()
            self._depth += 1
            try:
                result = self._parse_at_priority(1)
            finally:
                self._depth -= 1
            self._expect_closing_paren(open_offset)
            return result

        raise self._unexpected("a number or '('")

    def _parse_number(self) -> float:
        start = self.pos
        while not self._is_at_end() and self._current() in DIGITS:
            self._advance()

        lexeme = self.expression[start:self.pos]
        value = float(lexeme)
        if math.isinf(value):
            raise create_number_overflow_error(lexeme, SourcePosition(start, self.expression))
        return value

    def _nesting_limit(self) -> int:
        frames_per_level = self.registry.max_priority + 2
        budget = sys.getrecursionlimit() - RECURSION_HEADROOM
        return min(self.max_nesting, max(0, budget // frames_per_level - 1))

    def _expect_closing_paren(self, open_offset: int) -> None:
        if self._is_at_end():
            raise create_missing_paren_error(open_offset, self._position(), None)
        if self._current() != ')':
            raise create_missing_paren_error(open_offset, self._position(), self._current())
        self._advance()

    def _apply(self, symbol: str, left: float, right: float, position: SourcePosition) -> float:
        operation = self.registry.implementation_of(symbol)
        try:
            return operation(left, right)
        except (ArithmeticError, ValueError) as e:
            raise create_operation_error(symbol, e, position) from e

    # ------------------------------------------------------------------
    # Cursor helpers
    # ------------------------------------------------------------------

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.expression)

    def _current(self) -> str:
        """Character under the cursor, EOF_CHAR past the end."""
        if self.pos < len(self.expression):
            return self.expression[self.pos]
        return EOF_CHAR

    def _advance(self) -> None:
        self.pos += 1

    def _position(self) -> SourcePosition:
        return SourcePosition(self.pos, self.expression)

    def _unexpected(self, expected: str):
        if self._is_at_end():
            return create_unexpected_eof_error(expected, self._position())
        return create_unexpected_character_error(self._current(), self._position(), expected)


def evaluate(expression: str, registry: Optional[OperatorRegistry] = None) -> float:
    """Evaluate ``expression`` once with the given (or the built-in) operator table."""
    return ExpressionEvaluator(expression, registry).parse()
