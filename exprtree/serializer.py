"""Text forms of an expression tree.

Two file formats exist and they are deliberately not symmetric:

* save_tree() writes the indented dump, one node per line, two spaces per
  depth level, root first, then the left subtree, then the right subtree.
* load_tree() reads an expression file: the first line is an infix expression
  that is re-parsed; any further lines are ignored.

A dump is therefore not something load_tree() can read back. Round trips go
through save_expression() / load_tree().
"""

from __future__ import annotations

import logging
from typing import List

from .errors import StorageError
from .tree import ExpressionNode, depth_limited, iter_preorder, parse

logger = logging.getLogger(__name__)

INDENT = "  "


@depth_limited
def dump_tree(node: ExpressionNode) -> str:
    lines = [f"{INDENT * depth}{child.value}" for child, depth in iter_preorder(node)]
    return "\n".join(lines) + "\n"


def save_tree(node: ExpressionNode, path: str) -> None:
    """Write the indented dump of node to path."""
    text = dump_tree(node)
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise StorageError(f"Error saving expression tree to file: {e}") from e
    logger.info(f"Saved expression tree to {path}")


def save_expression(text: str, path: str) -> None:
    """Write an infix expression in the format load_tree() reads."""
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text.strip() + "\n")
    except OSError as e:
        raise StorageError(f"Error saving expression to file: {e}") from e
    logger.info(f"Saved expression to {path}")


def load_tree(path: str) -> ExpressionNode:
    """Re-parse the expression on the first line of path.

    Raises:
        StorageError: If the file is missing, unreadable or empty
        ParseError: If the stored expression is malformed
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            line = f.readline()
    except OSError as e:
        raise StorageError(f"Error loading expression tree from file: {e}") from e
    if not line:
        raise StorageError("Error loading expression tree from file: File is empty")
    root = parse(line.rstrip("\r\n"))
    logger.info(f"Loaded expression tree from {path}")
    return root


@depth_limited
def render_tree(node: ExpressionNode) -> str:
    """Box-drawing view of the tree for the console, e.g.

        ├── +
        │   ├── 2
        │   └── 3
    """
    lines: List[str] = []

    def walk(current: ExpressionNode, prefix: str, is_left: bool) -> None:
        lines.append(prefix + ("├── " if is_left else "└── ") + current.value)
        child_prefix = prefix + ("│   " if is_left else "    ")
        children = current.children
        for i, child in enumerate(children):
            walk(child, child_prefix, i == 0)

    walk(node, "", True)
    return "\n".join(lines)
