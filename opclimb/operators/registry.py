"""
Operator registry for the opclimb evaluator.

Keeps the three views of the operator table in step with each other:

    implementation      symbol -> binary function
    priority            symbol -> tier (1 = loosest)
    members_by_priority tier   -> set of symbols on that tier

The evaluator only ever reads the registry; every mutation goes through
add_operation, which builds the new mappings first and swaps them in together.

Author: xwest
"""

import logging
from typing import Dict, FrozenSet, Iterator, List, Optional, Set, Tuple

from ..errors import (
    UnknownOperatorError, DuplicateOperatorError, InvalidOperatorError
)
from .library import BUILTIN_OPERATIONS, BinaryOperation

logger = logging.getLogger(__name__)

# Characters the grammar reserves for itself
RESERVED_SYMBOLS = frozenset("0123456789()\0")

# Each tier costs one stack frame per parsed value
MAX_PRIORITY = 256


class OperatorRegistry:
    """
    Runtime-extensible table of left-associative binary operators.

    Higher priority values bind tighter. Tiers are dense, starting at 1.
    """

    def __init__(self, builtins: bool = True):
        self._implementations: Dict[str, BinaryOperation] = {}
        self._priorities: Dict[str, int] = {}
        self._members: Dict[int, Set[str]] = {}

        if builtins:
            for symbol, operation, priority in BUILTIN_OPERATIONS:
                self._implementations[symbol] = operation
                self._priorities[symbol] = priority
                self._members.setdefault(priority, set()).add(symbol)

        self._max_priority = max(self._members, default=0)

    @classmethod
    def with_builtins(cls) -> "OperatorRegistry":
        """Create a registry holding + - * /."""
        return cls(builtins=True)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def max_priority(self) -> int:
        """Tightest tier in use, 0 for an empty registry."""
        return self._max_priority

    def priority_of(self, symbol: str) -> int:
        try:
            return self._priorities[symbol]
        except KeyError:
            raise UnknownOperatorError(
                symbol,
                code="E101",
                help_text=f"Registered operators: {' '.join(sorted(self._priorities)) or '(none)'}"
            ) from None

    def implementation_of(self, symbol: str) -> BinaryOperation:
        try:
            return self._implementations[symbol]
        except KeyError:
            raise UnknownOperatorError(symbol, code="E101") from None

    def members_at(self, priority: int) -> FrozenSet[str]:
        """Symbols on the given tier (empty for tiers not in use)."""
        return frozenset(self._members.get(priority, ()))

    def levels(self) -> List[Tuple[int, List[str]]]:
        """Tiers from loosest to tightest with their sorted symbols."""
        return [(priority, sorted(self._members[priority])) for priority in sorted(self._members)]

    def copy(self) -> "OperatorRegistry":
        clone = OperatorRegistry(builtins=False)
        clone._implementations = dict(self._implementations)
        clone._priorities = dict(self._priorities)
        clone._members = {priority: set(symbols) for priority, symbols in self._members.items()}
        clone._max_priority = self._max_priority
        return clone

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._priorities

    def __len__(self) -> int:
        return len(self._priorities)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._priorities, key=lambda s: (self._priorities[s], s)))

    def __repr__(self) -> str:
        tiers = ", ".join(f"{priority}: {''.join(symbols)}" for priority, symbols in self.levels())
        return f"OperatorRegistry({{{tiers}}})"

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_operation(self, symbol: str, implementation: BinaryOperation, after: str,
                      shared: bool = False) -> int:
        """
        Register a new binary operator one tier above an existing one.

        Args:
            symbol: Single character naming the new operator
            implementation: Function of two floats returning a float
            after: Registered operator the new one should bind tighter than
            shared: Join the tier directly above ``after`` instead of opening
                a fresh one. Operators already on that tier keep equal
                precedence with the new operator.

        Returns:
            The priority assigned to the new operator.

        By default the new operator gets a tier of its own. When the tier
        above ``after`` is occupied, it and every tighter tier move up by
        one so the new operator sits strictly between them.
        """
        self._validate_definition(symbol, implementation)
        new_priority = self.priority_of(after) + 1

        members = {priority: set(symbols) for priority, symbols in self._members.items()}
        priorities = dict(self._priorities)
        implementations = dict(self._implementations)

        opens_tier = new_priority not in members or not shared
        if opens_tier and self._max_priority >= MAX_PRIORITY:
            raise InvalidOperatorError(
                f"Cannot add '{symbol}': the table already has {MAX_PRIORITY} priority tiers",
                code="E104",
                help_text="Use shared=True to put the operator on an existing tier."
            )

        if new_priority in members and not shared:
            logger.debug("Shifting tiers >= %d up to make room for '%s'", new_priority, symbol)
            members = {
                (priority + 1 if priority >= new_priority else priority): symbols
                for priority, symbols in members.items()
            }
            priorities = {
                existing: (priority + 1 if priority >= new_priority else priority)
                for existing, priority in priorities.items()
            }

        members.setdefault(new_priority, set()).add(symbol)
        priorities[symbol] = new_priority
        implementations[symbol] = implementation

        self._members = members
        self._priorities = priorities
        self._implementations = implementations
        self._max_priority = max(members)

        logger.debug("Registered operator '%s' at priority %d (after '%s'%s)",
                     symbol, new_priority, after, ", shared" if shared else "")
        return new_priority

    def _validate_definition(self, symbol: str, implementation: Optional[BinaryOperation]) -> None:
        if not isinstance(symbol, str) or len(symbol) != 1:
            raise InvalidOperatorError(
                f"Operator symbol must be a single character, got {symbol!r}",
                code="E103"
            )
        if symbol in RESERVED_SYMBOLS or symbol.isspace():
            raise InvalidOperatorError(
                f"Operator symbol {symbol!r} is reserved by the expression grammar",
                code="E103",
                help_text="Digits, parentheses and whitespace cannot be used as operators."
            )
        if not callable(implementation):
            raise InvalidOperatorError(
                f"Implementation for '{symbol}' is not callable",
                code="E103"
            )
        if symbol in self._priorities:
            raise DuplicateOperatorError(
                symbol,
                code="E102",
                help_text=f"'{symbol}' already sits on tier {self._priorities[symbol]}.",
                suggestions=["Pick a different symbol", "Build a fresh OperatorRegistry"]
            )
