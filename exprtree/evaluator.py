"""Tree evaluation against a variable binding.

All arithmetic is 64-bit float. Results IEEE-754 defines as NaN or
Infinity (overflowing powers, log(0), sin(inf), ...) are returned as such.
The wrappers below turn the exceptions math raises for these into the IEEE
value.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Dict, Mapping, Optional

from .errors import (
    DivisionByZeroError,
    InvalidNumericLiteralError,
    UndefinedVariableError,
    UnknownOperatorError,
)
from .tree import BinaryOp, ExpressionNode, Function, Number, UnaryMinus, Variable, depth_limited, parse

logger = logging.getLogger(__name__)

VariableBinding = Mapping[str, float]

# --------------------------
# Functions and operators
# --------------------------

def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x == math.floor(x) and math.fmod(x, 2.0) != 0.0


def _power(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        if base == 0 and exponent < 0:
            # 0 ** negative
            if _is_odd_integer(exponent):
                return math.copysign(math.inf, base)
            return math.inf
        # negative base with a fractional exponent
        return math.nan


def _log(x: float) -> float:
    if x == 0:
        return -math.inf
    if x < 0 or math.isnan(x):
        return math.nan
    return math.log(x)


def _trig(func: Callable[[float], float]) -> Callable[[float], float]:
    def wrapper(x: float) -> float:
        if math.isinf(x):
            return math.nan
        return func(x)
    wrapper.__name__ = func.__name__
    return wrapper


FUNCTIONS: Dict[str, Callable[[float], float]] = {
    'sin': _trig(math.sin),
    'cos': _trig(math.cos),
    'log': _log,
}


def _divide(left: float, right: float) -> float:
    if right == 0:
        raise DivisionByZeroError()
    return left / right


BINARY_OPERATORS: Dict[str, Callable[[float, float], float]] = {
    '+': lambda l, r: l + r,
    '-': lambda l, r: l - r,
    '*': lambda l, r: l * r,
    '/': _divide,
    '^': _power,
}

# --------------------------
# Evaluator
# --------------------------

class Evaluator:
    """Evaluates tree nodes against a name -> value binding. The tree is never mutated."""

    def __init__(self, bindings: Optional[VariableBinding] = None):
        self.bindings: VariableBinding = bindings if bindings is not None else {}

    def eval(self, node: ExpressionNode) -> float:
        """Evaluate given node and return the result or raise EvalError."""
        if isinstance(node, Number):
            try:
                return float(node.literal)
            except ValueError:
                raise InvalidNumericLiteralError(node.literal) from None
        if isinstance(node, Variable):
            if node.name not in self.bindings:
                raise UndefinedVariableError(node.name)
            return float(self.bindings[node.name])
        if isinstance(node, Function):
            func = FUNCTIONS.get(node.name)
            if func is None:
                raise UnknownOperatorError(f"Unknown function: {node.name}")
            return func(self.eval(node.left))
        if isinstance(node, UnaryMinus):
            return -self.eval(node.left)
        if isinstance(node, BinaryOp):
            op = BINARY_OPERATORS.get(node.op)
            if op is None:
                raise UnknownOperatorError(f"Unknown operator: {node.op}")
            # left before right
            left = self.eval(node.left)
            right = self.eval(node.right)
            return op(left, right)
        raise UnknownOperatorError(f"Unsupported node: {type(node).__name__}")


@depth_limited
def evaluate(node: ExpressionNode, bindings: Optional[VariableBinding] = None) -> float:
    result = Evaluator(bindings).eval(node)
    logger.debug("Evaluated %s node -> %r", type(node).__name__, result)
    return result


def calculate(text: str, bindings: Optional[VariableBinding] = None) -> float:
    """Parse and evaluate an infix expression."""
    return evaluate(parse(text), bindings)


def format_result(value: float) -> str:
    """Results are always reported with exactly two decimals."""
    return f"{value:.2f}"

