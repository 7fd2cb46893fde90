"""Infix to postfix conversion (shunting-yard).

The tokenizer scans the text once, left to right. Letters, digits and '.'
accumulate into a literal buffer that is flushed as a NUMBER, VARIABLE or
FUNCTION token when any other character is seen. Operators are resolved
against an operator stack using PRECEDENCE; an operator pops everything of
greater or equal precedence, so every binary operator, '^' included, is
left-associative.

A '-' seen where an operand is expected (start of input, after '(' or after
another operator) is a unary minus, carried as the internal symbol '-u'.

Function names (sin, cos, log) wait on the operator stack until the ')' that
closes their argument, so 'sin(0)' converts to '0 sin'.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List

from .errors import InvalidCharacterError, MismatchedParenthesesError

logger = logging.getLogger(__name__)

# --------------------------
# Tokens
# --------------------------

class TokenType:
    """Enumeration of token types."""
    NUMBER = 'NUMBER'
    VARIABLE = 'VARIABLE'
    OPERATOR = 'OPERATOR'
    UNARY_MINUS = 'UNARY_MINUS'
    FUNCTION = 'FUNCTION'
    LPAREN = 'LPAREN'
    RPAREN = 'RPAREN'


UNARY_MINUS = '-u'
BINARY_OPERATORS = frozenset('+-*/^')
FUNCTIONS = frozenset({'sin', 'cos', 'log'})

# Higher number = binds tighter. '(' sits at 0 so nothing pops past it.
PRECEDENCE = {
    '(': 0,
    '+': 1,
    '-': 1,
    '*': 2,
    '/': 2,
    '^': 3,
    UNARY_MINUS: 4,
}
FUNCTION_PRECEDENCE = 5

_VARIABLE_RE = re.compile(r'^[A-Za-z][A-Za-z0-9_]*$')


@dataclass(frozen=True)
class Token:
    """Represents a token with type, raw text, and character position."""
    type: str
    value: str
    pos: int = -1

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value!r}, pos={self.pos})"

    @property
    def precedence(self) -> int:
        if self.type == TokenType.FUNCTION:
            return FUNCTION_PRECEDENCE
        return PRECEDENCE.get(self.value, 0)

    @classmethod
    def from_text(cls, text: str, pos: int = -1) -> "Token":
        """Classify a raw postfix item such as '2', 'x', '+', '-u' or 'sin'."""
        if text == UNARY_MINUS:
            return cls(TokenType.UNARY_MINUS, text, pos)
        if text in BINARY_OPERATORS:
            return cls(TokenType.OPERATOR, text, pos)
        if text == '(':
            return cls(TokenType.LPAREN, text, pos)
        if text == ')':
            return cls(TokenType.RPAREN, text, pos)
        return classify_literal(text, pos)


def is_variable_name(text: str) -> bool:
    return bool(_VARIABLE_RE.match(text))


def classify_literal(text: str, pos: int = -1) -> Token:
    """Classify a flushed letter/digit buffer. Anything that is not a function or a
    well-formed identifier is a NUMBER; the evaluator rejects malformed numbers."""
    if text in FUNCTIONS:
        return Token(TokenType.FUNCTION, text, pos)
    if is_variable_name(text):
        return Token(TokenType.VARIABLE, text, pos)
    return Token(TokenType.NUMBER, text, pos)


def _is_literal_char(ch: str) -> bool:
    return ch == '.' or (ch.isascii() and ch.isalnum())


# --------------------------
# Shunting-yard
# --------------------------

class Converter:
    """Converts one infix string to a postfix token list."""

    def __init__(self, text: str):
        self.text = text
        self.output: List[Token] = []
        self.stack: List[Token] = []
        self.buffer: List[str] = []
        self.buffer_start = 0
        self.expect_operand = True

    def _flush(self) -> None:
        if not self.buffer:
            return
        token = classify_literal(''.join(self.buffer), self.buffer_start)
        self.buffer = []
        if token.type == TokenType.FUNCTION:
            self.stack.append(token)
        else:
            self.output.append(token)
        self.expect_operand = False

    def _pop_while(self, precedence: int) -> None:
        while self.stack and self.stack[-1].precedence >= precedence:
            self.output.append(self.stack.pop())

    def _close_paren(self) -> None:
        while self.stack and self.stack[-1].type != TokenType.LPAREN:
            self.output.append(self.stack.pop())
        if not self.stack:
            raise MismatchedParenthesesError()
        self.stack.pop()
        if self.stack and self.stack[-1].type == TokenType.FUNCTION:
            self.output.append(self.stack.pop())
        self.expect_operand = False

    def _operator(self, ch: str, pos: int) -> None:
        if self.expect_operand and ch == '-':
            token = Token(TokenType.UNARY_MINUS, UNARY_MINUS, pos)
        else:
            token = Token(TokenType.OPERATOR, ch, pos)
        self._pop_while(token.precedence)
        self.stack.append(token)
        self.expect_operand = True

    def convert(self) -> List[Token]:
        for pos, ch in enumerate(self.text):
            if _is_literal_char(ch):
                if not self.buffer:
                    self.buffer_start = pos
                self.buffer.append(ch)
                continue
            self._flush()
            if ch == '(':
                self.stack.append(Token(TokenType.LPAREN, ch, pos))
                self.expect_operand = True
            elif ch == ')':
                self._close_paren()
            elif ch in BINARY_OPERATORS:
                self._operator(ch, pos)
            elif not ch.isspace():
                raise InvalidCharacterError(ch, pos)
        self._flush()
        while self.stack:
            token = self.stack.pop()
            if token.type == TokenType.LPAREN:
                raise MismatchedParenthesesError()
            self.output.append(token)
        return self.output


def convert(text: str) -> List[Token]:
    """Convert an infix expression to a postfix token list.

    Raises InvalidCharacterError or MismatchedParenthesesError.
    """
    postfix = Converter(text).convert()
    logger.debug("Converted %r to postfix %s", text, postfix_text(postfix))
    return postfix


def postfix_text(postfix: List[Token], sep: str = " ") -> str:
    """Render a postfix sequence as raw token text, e.g. '2 3 4 * +'."""
    return sep.join(t.value for t in postfix)
