"""
Error handling for the opclimb evaluator.

Every failure carries a Diagnostic with the offending cursor position so callers
can point at the exact character that stopped the parse.

Author: xwest
"""

from typing import Optional, List
from dataclasses import dataclass


@dataclass(frozen=True)
class SourcePosition:
    """Cursor position inside an expression string."""
    offset: int
    expression: str = ""

    def __str__(self) -> str:
        return f"<expr>:{self.offset + 1}"

    def caret_line(self) -> str:
        """Render the expression with a caret under the offending character."""
        if not self.expression:
            return ""
        return f"{self.expression}\n{' ' * self.offset}^"


@dataclass
class Diagnostic:
    """Structured error report (message, position, severity, hints)."""
    message: str
    position: Optional[SourcePosition]
    severity: str  # "error", "warning"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        result = f"{self.severity.upper()}: {self.message}"
        if self.code:
            result += f" [{self.code}]"
        result += "\n"

        if self.position is not None:
            result += f"  --> {self.position}\n"
            caret = self.position.caret_line()
            if caret:
                for line in caret.splitlines():
                    result += f"   | {line}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class EvaluatorError(Exception):
    """
    Base class for every error raised by opclimb.

    Contains detailed diagnostic information for error reporting.
    """

    def __init__(
        self,
        message: str,
        position: Optional[SourcePosition] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.message = message
        self.diagnostic = Diagnostic(
            message=message,
            position=position,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def __str__(self) -> str:
        return str(self.diagnostic)


class ExpressionSyntaxError(EvaluatorError, SyntaxError):
    """
    Raised when the input cannot be parsed at the current cursor.

    ``character`` is None when the parse ran off the end of the input.
    """

    def __init__(self, message: str, position: SourcePosition, character: Optional[str], **kwargs):
        super().__init__(message, position, **kwargs)
        self.position = position.offset
        self.character = character
        # SyntaxError attributes used by traceback formatting
        self.msg = message
        self.offset = position.offset + 1
        self.text = position.expression


class UnknownOperatorError(EvaluatorError, LookupError):
    """Raised when an operator symbol referenced by a registration is not registered."""

    def __init__(self, symbol: str, **kwargs):
        super().__init__(f"Unknown operator: '{symbol}'", **kwargs)
        self.symbol = symbol


class DuplicateOperatorError(EvaluatorError, ValueError):
    """Raised when registering a symbol that is already registered."""

    def __init__(self, symbol: str, **kwargs):
        super().__init__(f"Operator already registered: '{symbol}'", **kwargs)
        self.symbol = symbol


class InvalidOperatorError(EvaluatorError, ValueError):
    """Raised for a symbol or implementation that cannot be registered."""


class OperationError(EvaluatorError, ArithmeticError):
    """Raised when an operator implementation fails while folding operands."""

    def __init__(self, symbol: str, message: str, position: SourcePosition, **kwargs):
        super().__init__(message, position, **kwargs)
        self.symbol = symbol
        self.position = position.offset


# Common error codes for categorization
ERROR_CODES = {
    "E001": "Unexpected character",
    "E002": "Unexpected end of input",
    "E003": "Missing closing parenthesis",
    "E004": "Number literal overflow",
    "E005": "Unexpected trailing input",
    "E006": "Parentheses nested too deeply",
    "E101": "Unknown operator",
    "E102": "Duplicate operator",
    "E103": "Invalid operator definition",
    "E104": "Too many priority tiers",
    "E201": "Operation failed",
}


# Helper functions for creating common errors

def create_unexpected_character_error(char: str, position: SourcePosition,
                                      expected: str = "a digit or '('") -> ExpressionSyntaxError:
    """Create an error for a character that cannot start the expected production."""
    if char == " ":
        help_text = "Whitespace is not allowed inside expressions."
        suggestions = ["Remove the spaces from the expression"]
    elif char.isprintable():
        help_text = f"Expected {expected} at this position, found '{char}'."
        suggestions = []
    else:
        help_text = f"Non-printable character (Unicode: U+{ord(char):04X}) is not allowed."
        suggestions = []

    return ExpressionSyntaxError(
        message=f"Unexpected character '{char}' at position {position.offset}",
        position=position,
        character=char,
        code="E001",
        help_text=help_text,
        suggestions=suggestions
    )


def create_unexpected_eof_error(expected: str, position: SourcePosition) -> ExpressionSyntaxError:
    """Create an error for unexpected end of input."""
    return ExpressionSyntaxError(
        message=f"Unexpected end of input at position {position.offset}, expected {expected}",
        position=position,
        character=None,
        code="E002",
        help_text=f"The expression ended while the parser was expecting {expected}.",
        suggestions=["Check for a missing operand after the last operator"]
    )


def create_missing_paren_error(open_offset: int, position: SourcePosition,
                               found: Optional[str]) -> ExpressionSyntaxError:
    """Create an error for a '(' that was never closed."""
    if found is None:
        message = f"Unexpected end of input at position {position.offset}, expected ')'"
        code = "E002"
    else:
        message = f"Expected ')' at position {position.offset}, found '{found}'"
        code = "E003"

    return ExpressionSyntaxError(
        message=message,
        position=position,
        character=found,
        code=code,
        help_text=f"The '(' at position {open_offset} was never closed.",
        suggestions=["Add a closing ')'"]
    )


def create_trailing_input_error(char: str, position: SourcePosition) -> ExpressionSyntaxError:
    """Create an error for input left over after a complete expression."""
    return ExpressionSyntaxError(
        message=f"Unexpected character '{char}' at position {position.offset}",
        position=position,
        character=char,
        code="E005",
        help_text=f"'{char}' is not a registered operator and cannot continue the expression.",
        suggestions=["Register the operator before parsing"] if char not in "() " else []
    )


def create_number_overflow_error(lexeme: str, position: SourcePosition) -> ExpressionSyntaxError:
    """Create an error for an integer literal that does not fit a float."""
    return ExpressionSyntaxError(
        message=f"Number literal too large: '{lexeme[:20]}{'...' if len(lexeme) > 20 else ''}'",
        position=position,
        character=lexeme[0],
        code="E004",
        help_text="Literals are evaluated as double precision floats."
    )


def create_nesting_error(limit: int, position: SourcePosition) -> ExpressionSyntaxError:
    """Create an error for parentheses nested deeper than the evaluator allows."""
    return ExpressionSyntaxError(
        message=f"Parentheses nested deeper than {limit} levels",
        position=position,
        character="(",
        code="E006",
        help_text="Each level costs one stack frame per priority tier; raise max_nesting "
                  "or the interpreter recursion limit to accept deeper expressions."
    )


def create_operation_error(symbol: str, exc: Exception, position: SourcePosition) -> OperationError:
    """Create an error for an operator implementation that raised."""
    return OperationError(
        symbol=symbol,
        message=f"Operation '{symbol}' failed at position {position.offset}: {exc}",
        position=position,
        code="E201",
        help_text=f"The implementation registered for '{symbol}' raised {type(exc).__name__}."
    )
