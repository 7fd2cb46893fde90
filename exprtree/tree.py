"""Expression tree nodes and postfix-to-tree reduction."""

from __future__ import annotations

import functools
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Iterator, List, Sequence, Tuple, TypeVar, Union

from .errors import (
    MismatchedParenthesesError,
    NestingTooDeepError,
    NotEnoughOperandsError,
    TooManyOperandsError,
)
from .tokenizer import UNARY_MINUS, Token, TokenType, convert

logger = logging.getLogger(__name__)

# --------------------------
# Nodes
# --------------------------

@dataclass(frozen=True)
class ExpressionNode(ABC):
    """Abstract base tree node. Only the subclasses below are instantiated; each
    carries only the children its tag needs.
    """

    @property
    @abstractmethod
    def value(self) -> str:
        """Node label as written in a tree dump."""

    @property
    def children(self) -> Tuple["ExpressionNode", ...]:
        return ()


@dataclass(frozen=True)
class Number(ExpressionNode):
    literal: str

    @property
    def value(self) -> str:
        return self.literal


@dataclass(frozen=True)
class Variable(ExpressionNode):
    name: str

    @property
    def value(self) -> str:
        return self.name


@dataclass(frozen=True)
class UnaryMinus(ExpressionNode):
    left: ExpressionNode

    @property
    def value(self) -> str:
        return UNARY_MINUS

    @property
    def children(self) -> Tuple[ExpressionNode, ...]:
        return (self.left,)


@dataclass(frozen=True)
class Function(ExpressionNode):
    name: str
    left: ExpressionNode

    @property
    def value(self) -> str:
        return self.name

    @property
    def children(self) -> Tuple[ExpressionNode, ...]:
        return (self.left,)


@dataclass(frozen=True)
class BinaryOp(ExpressionNode):
    op: str
    left: ExpressionNode
    right: ExpressionNode

    @property
    def value(self) -> str:
        return self.op

    @property
    def children(self) -> Tuple[ExpressionNode, ...]:
        return (self.left, self.right)


# --------------------------
# Builder
# --------------------------

PostfixItem = Union[Token, str]


def build(postfix: Sequence[PostfixItem]) -> ExpressionNode:
    """Reduce a postfix sequence to a single tree.

    Items may be Tokens from convert() or raw strings such as '2', 'x', '+',
    '-u' or 'sin', which are classified the same way the tokenizer would.

    Raises NotEnoughOperandsError when an operator finds too few operands on
    the stack and TooManyOperandsError when more than one subtree is left over.
    """
    stack: List[ExpressionNode] = []
    for item in postfix:
        token = Token.from_text(item) if isinstance(item, str) else item
        if token.type == TokenType.OPERATOR:
            if len(stack) < 2:
                raise NotEnoughOperandsError()
            right = stack.pop()
            left = stack.pop()
            stack.append(BinaryOp(token.value, left, right))
        elif token.type in (TokenType.UNARY_MINUS, TokenType.FUNCTION):
            if not stack:
                raise NotEnoughOperandsError()
            operand = stack.pop()
            if token.type == TokenType.UNARY_MINUS:
                stack.append(UnaryMinus(operand))
            else:
                stack.append(Function(token.value, operand))
        elif token.type == TokenType.VARIABLE:
            stack.append(Variable(token.value))
        elif token.type == TokenType.NUMBER:
            stack.append(Number(token.value))
        else:
            # parentheses never survive conversion
            raise MismatchedParenthesesError()
    if not stack:
        raise NotEnoughOperandsError()
    if len(stack) > 1:
        raise TooManyOperandsError()
    return stack[0]


def parse(text: str) -> ExpressionNode:
    """Convert and build in one step."""
    root = build(convert(text))
    logger.debug("Built tree for %r", text)
    return root


# --------------------------
# Traversal
# --------------------------

F = TypeVar("F", bound=Callable)


def depth_limited(func: F) -> F:
    """Report a RecursionError from walking a tree as NestingTooDeepError.

    Building is iterative, so a long flat expression yields a tree deeper than
    the recursive walkers can follow.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except RecursionError:
            raise NestingTooDeepError() from None
    return wrapper  # type: ignore[return-value]


def iter_preorder(node: ExpressionNode, depth: int = 0) -> Iterator[Tuple[ExpressionNode, int]]:
    """Yield (node, depth) pairs root first, then left subtree, then right subtree."""
    yield node, depth
    for child in node.children:
        yield from iter_preorder(child, depth + 1)


@depth_limited
def collect_variables(node: ExpressionNode) -> List[str]:
    """Distinct variable names in the order they first appear, left to right."""
    names: List[str] = []
    for child, _ in iter_preorder(node):
        if isinstance(child, Variable) and child.name not in names:
            names.append(child.name)
    return names
