"""
Infix expression parsing and evaluation.

Text is converted to postfix with the shunting-yard algorithm, reduced to an
expression tree, and evaluated against a variable binding:

    >>> from exprtree import calculate
    >>> calculate("x + 1", {"x": 5.0})
    6.0
"""

from .errors import (
    ConfigError,
    DivisionByZeroError,
    EvalError,
    ExpressionError,
    InvalidCharacterError,
    InvalidNumericLiteralError,
    MismatchedParenthesesError,
    NestingTooDeepError,
    NotEnoughOperandsError,
    ParseError,
    StorageError,
    TooManyOperandsError,
    UndefinedVariableError,
    UnknownOperatorError,
)
from .tokenizer import Token, TokenType, convert
from .tree import (
    BinaryOp,
    ExpressionNode,
    Function,
    Number,
    UnaryMinus,
    Variable,
    build,
    collect_variables,
    parse,
)
from .evaluator import Evaluator, calculate, evaluate, format_result
from .serializer import dump_tree, load_tree, render_tree, save_expression, save_tree

__version__ = "1.0.0"

__all__ = [
    'BinaryOp', 'ConfigError', 'DivisionByZeroError', 'EvalError', 'Evaluator',
    'ExpressionError', 'ExpressionNode', 'Function', 'InvalidCharacterError',
    'InvalidNumericLiteralError', 'MismatchedParenthesesError', 'NestingTooDeepError',
    'NotEnoughOperandsError', 'Number', 'ParseError', 'StorageError', 'Token', 'TokenType',
    'TooManyOperandsError', 'UnaryMinus', 'UndefinedVariableError', 'UnknownOperatorError',
    'Variable',
    'build', 'calculate', 'collect_variables', 'convert', 'dump_tree', 'evaluate',
    'format_result', 'load_tree', 'parse', 'render_tree', 'save_expression', 'save_tree',
]
