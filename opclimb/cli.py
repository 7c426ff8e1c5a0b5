#!/usr/bin/env python3
"""
Command-line driver for opclimb.

Examples:
    opclimb "2+2*2"                        # 2+2*2 = 6
    opclimb --op ^ pow "*" "2*3^2"         # 2*3^2 = 18
    opclimb --op @ max + --levels "9@2*3"  # print the tiers, then 9@2*3 = 9
    echo "2*(2+2)" | opclimb               # read expressions from stdin
    opclimb --check                        # run the reference samples
"""

import argparse
import logging
import sys
from typing import Iterable, List, Optional, Sequence, TextIO, Tuple

from .errors import EvaluatorError
from .operators import OperatorRegistry, NAMED_OPERATIONS
from .parser import ExpressionEvaluator

logger = logging.getLogger(__name__)

# (expression, expected value, [(symbol, function name, after)])
REFERENCE_CASES: List[Tuple[str, float, List[Tuple[str, str, str]]]] = [
    ("1", 1, []),
    ("1+1", 2, []),
    ("2*2+2", 6, []),
    ("2+2*2", 6, []),
    ("2*(2+2)", 8, []),
    ("2*(2/2)", 2, []),
    ("2*3^2", 18, [("^", "pow", "*")]),
    ("9@2*3", 9, [("@", "max", "+")]),
]


def format_value(value: float) -> str:
    """Print integral results without a trailing '.0'."""
    if float(value).is_integer():
        return str(int(value))
    return repr(value)


def build_registry(operations: Iterable[Sequence[str]], shared: bool = False) -> OperatorRegistry:
    """Build the built-in table extended with named operations, applied in order."""
    registry = OperatorRegistry.with_builtins()
    for symbol, name, after in operations:
        try:
            implementation = NAMED_OPERATIONS[name]
        except KeyError:
            raise ValueError(
                f"unknown operation '{name}' (choose from {', '.join(sorted(NAMED_OPERATIONS))})"
            ) from None
        registry.add_operation(symbol, implementation, after, shared=shared)
    return registry


def run_reference_checks(out: TextIO = sys.stdout) -> bool:
    """Evaluate the reference samples; report every mismatch."""
    failures = 0
    for expression, expected, operations in REFERENCE_CASES:
        try:
            actual = ExpressionEvaluator(expression, build_registry(operations)).parse()
        except EvaluatorError as e:
            print(f"FAIL {expression}: {e.message}", file=out)
            failures += 1
            continue
        if actual != expected:
            print(f"FAIL {expression}: expected {format_value(expected)}, got {format_value(actual)}",
                  file=out)
            failures += 1

    if failures:
        print(f"{failures} of {len(REFERENCE_CASES)} tests failed", file=out)
        return False
    print("tests were passed", file=out)
    return True


def _read_expressions(args: argparse.Namespace, stdin: TextIO) -> List[str]:
    if args.expressions:
        return list(args.expressions)
    return [line.strip("\r\n") for line in stdin if line.strip()]


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="opclimb",
        description="Evaluate integer arithmetic with an extensible operator table",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"Named operations: {', '.join(sorted(NAMED_OPERATIONS))}"
    )
    parser.add_argument('expressions', nargs='*', metavar='EXPR',
                        help='Expressions to evaluate (read from stdin when omitted)')
    parser.add_argument('--op', nargs=3, action='append', default=[],
                        metavar=('SYMBOL', 'NAME', 'AFTER'),
                        help='Register operation NAME as SYMBOL one tier above AFTER (repeatable)')
    parser.add_argument('--shared', action='store_true',
                        help='Let --op operators share the tier above AFTER instead of opening a new one')
    parser.add_argument('--levels', action='store_true',
                        help='Print the operator precedence tiers')
    parser.add_argument('--check', action='store_true',
                        help='Run the reference sample expressions and exit')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable debug logging')
    return parser


def main(argv: Optional[Sequence[str]] = None, stdin: Optional[TextIO] = None,
         stdout: Optional[TextIO] = None, stderr: Optional[TextIO] = None) -> int:
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr

    args = create_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=stderr
    )

    if args.check:
        return 0 if run_reference_checks(stdout) else 1

    try:
        registry = build_registry(args.op, shared=args.shared)
    except (EvaluatorError, ValueError) as e:
        print(f"opclimb: {e}", file=stderr)
        return 1

    if args.levels:
        for priority, symbols in registry.levels():
            print(f"{priority}: {' '.join(symbols)}", file=stdout)
        if not args.expressions:
            return 0

    status = 0
    for expression in _read_expressions(args, stdin):
        try:
            value = ExpressionEvaluator(expression, registry).parse()
        except EvaluatorError as e:
            logger.debug("Failed to evaluate %r", expression, exc_info=True)
            print(str(e), end="", file=stderr)
            status = 1
            continue
        print(f"{expression} = {format_value(value)}", file=stdout)
    return status


if __name__ == "__main__":
    sys.exit(main())
