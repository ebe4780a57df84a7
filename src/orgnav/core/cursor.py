"""Navigation cursor over a forest.

The cursor is the path of nodes the user has entered, root to current.
An empty path means the root level is visible. Invalid moves (entering
a childless node, going back or resetting at the root level) are
no-ops and report no transition.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from orgnav.core.models import TreeNode

ROOT_LABEL = "Root"
PATH_SEPARATOR = " → "


@dataclass(frozen=True)
class Transition:
    """A change of cursor level.

    Attributes:
        kind: "enter", "back" or "reset".
        from_depth: Path length before the move.
        to_depth: Path length after the move.
        node_id: The entered node for "enter", the left node for "back",
            None for "reset".
    """

    kind: str
    from_depth: int
    to_depth: int
    node_id: str | None = None


class NavigationCursor:
    """Path of entered nodes defining the visible level of a forest."""

    def __init__(self, forest: Sequence[TreeNode]) -> None:
        self._forest = list(forest)
        self._path: list[TreeNode] = []

    @property
    def forest(self) -> list[TreeNode]:
        return self._forest

    @property
    def path(self) -> list[TreeNode]:
        """Entered nodes, root to current (a copy)."""
        return list(self._path)

    @property
    def path_ids(self) -> list[str]:
        return [node.id for node in self._path]

    @property
    def depth(self) -> int:
        return len(self._path)

    @property
    def at_root(self) -> bool:
        return not self._path

    def current_level_nodes(self) -> list[TreeNode]:
        """Return the forest roots at the root level, else the children of
        the last entered node."""
        if not self._path:
            return list(self._forest)
        return list(self._path[-1].children)

    def contains(self, node_id: str | None) -> bool:
        """Check whether node_id is one of the current level's nodes."""
        return self.lookup(node_id) is not None

    def lookup(self, node_id: str | None) -> TreeNode | None:
        """Return the current-level node with node_id, or None."""
        if node_id is None:
            return None
        for node in self.current_level_nodes():
            if node.id == node_id:
                return node
        return None

    def enter(self, node: TreeNode) -> Transition | None:
        """Descend into node's children.

        Returns:
            The transition, or None when node has no children.
        """
        if not node.children:
            return None
        depth = len(self._path)
        self._path.append(node)
        return Transition("enter", depth, depth + 1, node.id)

    def back(self) -> Transition | None:
        """Return to the parent level.

        Returns:
            The transition, or None at the root level.
        """
        if not self._path:
            return None
        depth = len(self._path)
        left = self._path.pop()
        return Transition("back", depth, depth - 1, left.id)

    def reset(self) -> Transition | None:
        """Return to the root level.

        Returns:
            The transition, or None if already at the root level.
        """
        if not self._path:
            return None
        depth = len(self._path)
        self._path.clear()
        return Transition("reset", depth, 0)

    def breadcrumb(self) -> str:
        """Display the current path, e.g. "Head Office → Finance"."""
        if not self._path:
            return ROOT_LABEL
        return PATH_SEPARATOR.join(node.name or node.id for node in self._path)
