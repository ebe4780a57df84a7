"""Forest search and traversal.

Every function here searches the whole forest, regardless of where a
navigation cursor currently points. Traversal uses an explicit work
stack, so depth is bounded by memory rather than the interpreter's
recursion limit.

Lookup misses return None; they are an expected outcome (for example a
stale selection after a snapshot refresh), not an error.
"""

from __future__ import annotations

from typing import Iterator, Sequence

from orgnav.core.models import TreeNode


def walk_forest(forest: Sequence[TreeNode]) -> Iterator[TreeNode]:
    """Iterate over every node of the forest in pre-order."""
    stack = list(reversed(forest))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def find_node(forest: Sequence[TreeNode], node_id: str | None) -> TreeNode | None:
    """Find a node anywhere in the forest.

    Args:
        forest: Forest roots.
        node_id: Id to look for.

    Returns:
        The first node with a matching id, or None.
    """
    if node_id is None:
        return None
    for node in walk_forest(forest):
        if node.id == node_id:
            return node
    return None


def find_path(forest: Sequence[TreeNode], node_id: str) -> list[TreeNode] | None:
    """Return the root-to-node chain for node_id, or None if absent.

    The returned list starts with a forest root and ends with the node
    itself.
    """
    stack: list[tuple[TreeNode, int]] = [(root, 0) for root in reversed(forest)]
    path: list[TreeNode] = []
    while stack:
        node, depth = stack.pop()
        del path[depth:]
        path.append(node)
        if node.id == node_id:
            return path
        stack.extend((child, depth + 1) for child in reversed(node.children))
    return None


def flatten_ids(forest: Sequence[TreeNode]) -> list[str]:
    """Return every id of the forest in pre-order."""
    return [node.id for node in walk_forest(forest)]


def count_nodes(forest: Sequence[TreeNode]) -> int:
    """Return the number of nodes in the forest."""
    return sum(1 for _ in walk_forest(forest))
