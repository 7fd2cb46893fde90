"""Error hierarchy shared by the tokenizer, tree builder, evaluator and file helpers.

Every failure is local to the expression being processed: callers catch
ExpressionError (or one of the narrower bases) and report str(e).
"""


class ExpressionError(Exception):
    """Base class for all expression errors."""
    pass


# --------------------------
# Parsing
# --------------------------

class ParseError(ExpressionError):
    """Raised when text cannot be turned into a postfix sequence or a tree."""
    pass


class InvalidCharacterError(ParseError):
    """Raised for a character the tokenizer cannot scan."""

    def __init__(self, char: str, pos: int):
        super().__init__(f"Invalid character: {char} at pos {pos}")
        self.char = char
        self.pos = pos


class MismatchedParenthesesError(ParseError):
    def __init__(self, message: str = "Mismatched parentheses"):
        super().__init__(message)


class NotEnoughOperandsError(ParseError):
    def __init__(self, message: str = "Invalid expression: not enough operands"):
        super().__init__(message)


class TooManyOperandsError(ParseError):
    def __init__(self, message: str = "Invalid expression: too many operands"):
        super().__init__(message)


# --------------------------
# Evaluation
# --------------------------

class EvalError(ExpressionError):
    """Raised for errors during evaluation of a built tree."""
    pass


class UndefinedVariableError(EvalError):
    def __init__(self, name: str):
        super().__init__(f"Undefined variable: {name}")
        self.name = name


class DivisionByZeroError(EvalError):
    def __init__(self):
        super().__init__("Division by zero")


class InvalidNumericLiteralError(EvalError):
    def __init__(self, literal: str):
        super().__init__(f"Invalid numeric literal: {literal}")
        self.literal = literal


class UnknownOperatorError(EvalError):
    """Raised for a node tag the evaluator does not know; a correct tokenizer never produces one."""
    pass


class NestingTooDeepError(ExpressionError):
    """Raised when a tree is too deep to walk within the interpreter's recursion limit."""

    def __init__(self, message: str = "expression nested too deeply"):
        super().__init__(message)


# --------------------------
# Collaborators
# --------------------------

class StorageError(ExpressionError):
    """Raised when an expression or tree file cannot be read or written."""
    pass


class ConfigError(ExpressionError):
    """Raised for invalid settings."""
    pass
