"""
Tests for the opclimb operator registry.

Author: xwest
"""

import math
import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from opclimb.operators import OperatorRegistry, NAMED_OPERATIONS
from opclimb.operators.library import div
from opclimb.operators.registry import MAX_PRIORITY
from opclimb.errors import (
    UnknownOperatorError, DuplicateOperatorError, InvalidOperatorError, EvaluatorError
)


class TestOperatorRegistry(unittest.TestCase):
    """Test cases for tier bookkeeping."""

    def setUp(self):
        self.registry = OperatorRegistry()

    def assertConsistent(self, registry):
        """Every symbol sits in exactly one tier bucket matching its priority."""
        seen = []
        for priority, symbols in registry.levels():
            for symbol in symbols:
                self.assertEqual(registry.priority_of(symbol), priority)
                self.assertTrue(callable(registry.implementation_of(symbol)))
                seen.append(symbol)
        self.assertEqual(sorted(seen), sorted(registry))
        self.assertEqual(len(seen), len(set(seen)))
        self.assertEqual([p for p, _ in registry.levels()], list(range(1, registry.max_priority + 1)))

    def test_builtins(self):
        self.assertEqual(self.registry.levels(), [(1, ['+', '-']), (2, ['*', '/'])])
        self.assertEqual(self.registry.max_priority, 2)
        self.assertEqual(len(self.registry), 4)
        self.assertIn('+', self.registry)
        self.assertNotIn('^', self.registry)
        self.assertEqual(list(self.registry), ['+', '-', '*', '/'])
        self.assertConsistent(self.registry)

    def test_empty_registry(self):
        registry = OperatorRegistry(builtins=False)
        self.assertEqual(registry.max_priority, 0)
        self.assertEqual(registry.levels(), [])
        self.assertEqual(len(registry), 0)

    def test_add_above_top_tier(self):
        priority = self.registry.add_operation('^', math.pow, '*')
        self.assertEqual(priority, 3)
        self.assertEqual(self.registry.max_priority, 3)
        self.assertEqual(self.registry.members_at(3), frozenset('^'))
        self.assertConsistent(self.registry)

    def test_add_between_tiers_shifts_tighter_tiers(self):
        self.registry.add_operation('^', math.pow, '*')
        priority = self.registry.add_operation('@', max, '+')

        self.assertEqual(priority, 2)
        self.assertEqual(self.registry.levels(), [
            (1, ['+', '-']),
            (2, ['@']),
            (3, ['*', '/']),
            (4, ['^']),
        ])
        self.assertEqual(self.registry.priority_of('^'), 4)
        self.assertConsistent(self.registry)

    def test_add_shared(self):
        priority = self.registry.add_operation('@', max, '+', shared=True)
        self.assertEqual(priority, 2)
        self.assertEqual(self.registry.members_at(2), frozenset('*/@'))
        self.assertEqual(self.registry.max_priority, 2)
        self.assertConsistent(self.registry)

    def test_add_shared_above_top_opens_tier(self):
        self.registry.add_operation('^', math.pow, '/', shared=True)
        self.assertEqual(self.registry.levels()[-1], (3, ['^']))

    def test_unknown_anchor(self):
        with self.assertRaises(UnknownOperatorError) as ctx:
            self.registry.add_operation('^', math.pow, '%')
        self.assertEqual(ctx.exception.symbol, '%')
        self.assertIsInstance(ctx.exception, LookupError)
        self.assertIsInstance(ctx.exception, EvaluatorError)
        self.assertNotIn('^', self.registry)
        self.assertConsistent(self.registry)

    def test_duplicate_rejected_without_mutation(self):
        self.registry.add_operation('^', math.pow, '*')
        before = self.registry.levels()
        with self.assertRaises(DuplicateOperatorError):
            self.registry.add_operation('^', max, '+')
        with self.assertRaises(DuplicateOperatorError):
            self.registry.add_operation('+', max, '*')
        self.assertEqual(self.registry.levels(), before)
        self.assertIs(self.registry.implementation_of('^'), math.pow)

    def test_invalid_symbols(self):
        for symbol in ['', '**', '1', '(', ')', ' ', '\0', None]:
            with self.subTest(symbol=symbol):
                with self.assertRaises(InvalidOperatorError):
                    self.registry.add_operation(symbol, max, '+')
        self.assertEqual(len(self.registry), 4)

    def test_non_callable_implementation(self):
        with self.assertRaises(InvalidOperatorError):
            self.registry.add_operation('^', 42, '*')

    def test_priority_lookup_of_unknown_symbol(self):
        with self.assertRaises(UnknownOperatorError):
            self.registry.priority_of('?')
        with self.assertRaises(UnknownOperatorError):
            self.registry.implementation_of('?')
        self.assertEqual(self.registry.members_at(7), frozenset())

    def test_copy_is_independent(self):
        clone = self.registry.copy()
        clone.add_operation('^', math.pow, '*')
        self.assertIn('^', clone)
        self.assertNotIn('^', self.registry)
        self.assertEqual(self.registry.max_priority, 2)

    def test_with_builtins(self):
        registry = OperatorRegistry.with_builtins()
        self.assertEqual(registry.levels(), self.registry.levels())
        self.assertEqual(registry.max_priority, 2)

    def test_max_priority_tracks_registrations(self):
        self.registry.add_operation('^', math.pow, '*')
        self.assertEqual(self.registry.max_priority, 3)
        self.registry.add_operation('@', max, '+')
        self.assertEqual(self.registry.max_priority, 4)
        self.registry.add_operation('%', math.fmod, '+', shared=True)
        self.assertEqual(self.registry.max_priority, 4)
        self.assertEqual(self.registry.copy().max_priority, 4)

    def test_tier_cap(self):
        previous = '*'
        i = 0
        while self.registry.max_priority < MAX_PRIORITY:
            symbol = chr(0x100 + i)
            self.registry.add_operation(symbol, max, previous)
            previous = symbol
            i += 1

        with self.assertRaises(InvalidOperatorError) as ctx:
            self.registry.add_operation('^', math.pow, previous)
        self.assertEqual(ctx.exception.code, "E104")
        with self.assertRaises(InvalidOperatorError):
            self.registry.add_operation('^', math.pow, '+')

        # Joining an existing tier opens no new one
        self.registry.add_operation('^', math.pow, '+', shared=True)
        self.assertEqual(self.registry.max_priority, MAX_PRIORITY)
        self.assertConsistent(self.registry)

    def test_repr(self):
        self.assertEqual(repr(self.registry), "OperatorRegistry({1: +-, 2: */})")


class TestOperatorLibrary(unittest.TestCase):
    """Built-in and named binary functions."""

    def test_ieee_division(self):
        self.assertEqual(div(6.0, 3.0), 2.0)
        self.assertEqual(div(1.0, 0.0), math.inf)
        self.assertEqual(div(-1.0, 0.0), -math.inf)
        self.assertEqual(div(1.0, -0.0), -math.inf)
        self.assertTrue(math.isnan(div(0.0, 0.0)))

    def test_named_operations(self):
        self.assertEqual(NAMED_OPERATIONS["pow"](3.0, 2.0), 9.0)
        self.assertEqual(NAMED_OPERATIONS["max"](9.0, 6.0), 9.0)
        self.assertEqual(NAMED_OPERATIONS["min"](9.0, 6.0), 6.0)
        self.assertEqual(NAMED_OPERATIONS["mod"](7.0, 4.0), 3.0)
        self.assertEqual(NAMED_OPERATIONS["hypot"](3.0, 4.0), 5.0)


if __name__ == '__main__':
    unittest.main()
