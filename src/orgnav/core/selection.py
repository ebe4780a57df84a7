"""Level-scoped node selection.

A selection is made among the nodes of the cursor's current level, but
it is resolved against the whole forest, so a consumer that captured a
selection before the user navigated elsewhere still gets the full
record.

The resolver does not watch the cursor. Whoever moves the cursor passes
the resulting Transition to apply(), which enforces the clearing
policy:

- strict: every transition clears the selection.
- preserve-root-on-back: a root-level selection that was active when
  the user entered a first-level subtree is restored when back()
  returns to the root level. Every other transition clears it.
"""

from __future__ import annotations

from enum import Enum

from orgnav.core.cursor import NavigationCursor, Transition
from orgnav.core.locator import find_node
from orgnav.core.models import TreeNode


class SelectionPolicy(Enum):
    """How a selection survives cursor transitions."""

    STRICT = "strict"
    PRESERVE_ROOT_ON_BACK = "preserve-root-on-back"


class SelectionResolver:
    """Holds the selected node id for one navigation cursor."""

    def __init__(
        self,
        cursor: NavigationCursor,
        policy: SelectionPolicy | str = SelectionPolicy.STRICT,
    ) -> None:
        """Initialize the resolver.

        Args:
            cursor: Cursor whose current level scopes select().
            policy: Clearing policy, as enum or its string value.

        Raises:
            ValueError: If policy is not a known policy name.
        """
        self._cursor = cursor
        self.policy = SelectionPolicy(policy)
        self._selected_id: str | None = None
        self._held_root_id: str | None = None

    @property
    def selected_id(self) -> str | None:
        return self._selected_id

    def select(self, node_id: str | None) -> TreeNode | None:
        """Select a node of the current level.

        Args:
            node_id: Id to select, or None to clear the selection.

        Returns:
            The selected node, or None when node_id is None or not part
            of the current level. A miss leaves the selection unchanged.
        """
        if node_id is None:
            self.clear()
            return None

        node = self._cursor.lookup(node_id)
        if node is None:
            return None
        self._selected_id = node.id
        return node

    def clear(self) -> None:
        self._selected_id = None
        self._held_root_id = None

    def current(self) -> TreeNode | None:
        """Resolve the selection against the full forest."""
        return find_node(self._cursor.forest, self._selected_id)

    def apply(self, transition: Transition | None) -> None:
        """Update the selection after a cursor move.

        Args:
            transition: What the cursor reported; None (a no-op move)
                leaves the selection alone.
        """
        if transition is None:
            return

        preserve = self.policy is SelectionPolicy.PRESERVE_ROOT_ON_BACK
        held: str | None = None
        restored: str | None = None

        if preserve and transition.kind == "enter" and transition.from_depth == 0:
            if self._is_root(self._selected_id):
                held = self._selected_id
        elif preserve and transition.kind == "back" and transition.to_depth == 0:
            if transition.from_depth == 1 and self._is_root(self._held_root_id):
                restored = self._held_root_id

        self._selected_id = restored
        self._held_root_id = held

    def _is_root(self, node_id: str | None) -> bool:
        return node_id is not None and any(root.id == node_id for root in self._cursor.forest)
