"""
orgnav.serializers - JSON serialization for tree, cursor and session state.

Provides functions to serialize orgnav data models to JSON-compatible
dicts, plus the two presentation formats the console uses: the
react-d3-tree node format and a plain-text outline.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Sequence

from orgnav.core.cursor import NavigationCursor
from orgnav.core.models import TreeNode

UNNAMED_NODE = "Unnamed Node"


def _build_nested(
    forest: Sequence[TreeNode],
    make: Callable[[TreeNode], Dict[str, Any]],
    children_key: str = "children",
    omit_empty: bool = False,
) -> List[Dict[str, Any]]:
    """Serialize a forest bottom-up without recursion.

    Args:
        forest: Nodes to serialize (with their descendants).
        make: Builds the dict for one node, excluding children.
        children_key: Key under which child dicts are stored.
        omit_empty: Leave children_key out for leaves.
    """
    preorder: List[TreeNode] = []
    stack = list(reversed(forest))
    while stack:
        node = stack.pop()
        preorder.append(node)
        stack.extend(reversed(node.children))

    done: Dict[int, Dict[str, Any]] = {}
    for node in reversed(preorder):
        data = make(node)
        if node.children or not omit_empty:
            data[children_key] = [done[id(child)] for child in node.children]
        done[id(node)] = data

    return [done[id(root)] for root in forest]


def _node_fields(node: TreeNode) -> Dict[str, Any]:
    return {
        "id": node.id,
        "parent_id": node.parent_id,
        "name": node.name,
        "description": node.description,
        "is_active": node.is_active,
        "level": node.level,
        "attributes": dict(node.attributes),
    }


def serialize_node(node: TreeNode, include_children: bool = True) -> Dict[str, Any]:
    """
    Serialize a TreeNode to a JSON-compatible dict.

    Args:
        node: Node to serialize
        include_children: Include all descendants (default True)

    Returns:
        Dict suitable for JSON serialization
    """
    if not include_children:
        data = _node_fields(node)
        data["child_count"] = node.child_count
        return data
    return _build_nested([node], _node_fields)[0]


def serialize_node_summary(node: TreeNode) -> Dict[str, Any]:
    """
    Serialize node summary (lighter weight, for level listings).

    Args:
        node: Node to serialize

    Returns:
        Dict with summary fields only
    """
    return {
        "id": node.id,
        "name": node.name,
        "description": node.description,
        "is_active": node.is_active,
        "level": node.level,
        "child_count": node.child_count,
    }


def serialize_forest(forest: Sequence[TreeNode]) -> List[Dict[str, Any]]:
    """Serialize every root with its descendants."""
    return _build_nested(forest, _node_fields)


def serialize_cursor(cursor: NavigationCursor) -> Dict[str, Any]:
    """
    Serialize navigation state.

    Path entries and level nodes are summaries; the full records are
    available through the forest.
    """
    return {
        "path": [serialize_node_summary(node) for node in cursor.path],
        "current_level_nodes": [serialize_node_summary(n) for n in cursor.current_level_nodes()],
        "depth": cursor.depth,
        "breadcrumb": cursor.breadcrumb(),
    }


def serialize_state(
    forest: Sequence[TreeNode],
    cursor: NavigationCursor,
    selected: Optional[TreeNode],
    generation: int,
    error: Optional[str] = None,
) -> Dict[str, Any]:
    """Serialize a complete navigation session."""
    return {
        "forest": serialize_forest(forest),
        "cursor": serialize_cursor(cursor),
        "selected_node": serialize_node(selected) if selected is not None else None,
        "generation": generation,
        "error": error,
    }


def _d3_fields(node: TreeNode) -> Dict[str, Any]:
    return {
        "name": node.name or UNNAMED_NODE,
        "attributes": {
            **node.attributes,
            "id": node.id,
            "description": node.description,
            "level": node.level,
            "is_active": node.is_active,
        },
    }


def to_d3_tree(forest: Sequence[TreeNode]) -> List[Dict[str, Any]]:
    """
    Convert a forest to react-d3-tree node dicts.

    Leaves carry no "children" key, matching what the tree component
    expects for collapsible rendering.
    """
    return _build_nested(forest, _d3_fields, omit_empty=True)


def root_options(forest: Sequence[TreeNode]) -> List[Dict[str, str]]:
    """Options for a root-node dropdown: one value/label pair per root."""
    return [{"value": root.id, "label": root.name or root.id} for root in forest]


def render_text_tree(forest: Sequence[TreeNode]) -> str:
    """
    Render the forest as an indented outline.

    Example:
        Head Office (Level 0, ID: hq, Children: 2)
          ├─ Finance (Level 1, ID: fin, Children: 0)
          └─ IT (Level 1, ID: it, Children: 0)
    """
    lines: List[str] = []
    # (node, depth, branch prefix)
    stack: List[tuple] = [(root, 0, "") for root in reversed(forest)]
    while stack:
        node, depth, prefix = stack.pop()
        indent = "  " * depth
        lines.append(
            f"{indent}{prefix}{node.name or UNNAMED_NODE} "
            f"(Level {node.level}, ID: {node.id}, Children: {node.child_count})"
        )
        last = len(node.children) - 1
        for index in range(last, -1, -1):
            branch = "└─ " if index == last else "├─ "
            stack.append((node.children[index], depth + 1, branch))
    return "\n".join(lines)
