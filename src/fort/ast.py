"""Syntax tree nodes and the per-kind child append rules."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto

from fort.tokens import Token


class NodeType(Enum):
    PROGRAM = auto()
    STATEMENT = auto()
    GOTO = auto()
    LABEL = auto()
    IDENT = auto()
    KEYWORD = auto()


@dataclass(slots=True)
class Tree:
    """Binary tree node, optionally carrying the token it was built from."""

    type: NodeType
    token: Token | None = None
    left: Tree | None = None
    right: Tree | None = None
    depth: int = 0


def _append_goto(tree: Tree, child: Tree) -> Tree:
    raise NotImplementedError("GO TO statement nodes cannot take children yet")


def _append_binary(tree: Tree, child: Tree) -> Tree:
    if tree.left is None:
        tree.left = child
    elif tree.right is None:
        tree.right = child
    else:
        raise ValueError(f"{tree.type.name} node already has two children")
    child.depth = tree.depth + 1
    return tree


_APPENDS: dict[NodeType, Callable[[Tree, Tree], Tree]] = {
    NodeType.GOTO: _append_goto,
}


def append_tree(tree: Tree, child: Tree) -> Tree:
    """Attach child under tree using the rule registered for tree's kind."""
    append = _APPENDS.get(tree.type, _append_binary)
    return append(tree, child)
