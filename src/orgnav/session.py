"""
orgnav.session - Navigation session over one hierarchy snapshot.

A HierarchySession owns the forest built from the current snapshot,
the navigation cursor and the selection. It is the one object a
consumer (the REST server, the CLI, a form) talks to.

Snapshot lifecycle:
    session = HierarchySession()
    token = session.begin_refresh()       # fetch starts
    ...
    session.complete_refresh(token, nodes)  # ignored if stale or closed

Every snapshot change rebuilds the forest from scratch and resets the
cursor and selection, so no node reference outlives its snapshot.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from orgnav.core.cursor import NavigationCursor, Transition
from orgnav.core.locator import find_node
from orgnav.core.models import FlatNode, TreeNode
from orgnav.core.selection import SelectionPolicy, SelectionResolver
from orgnav.core.tree_builder import BuildReport, TreeBuilder
from orgnav.errors import SnapshotError
from orgnav.serializers import serialize_state
from orgnav.source import FlatNodeSource

logger = logging.getLogger(__name__)


class HierarchySession:
    """Session-scoped forest, cursor and selection.

    All navigation methods are synchronous and return the updated
    state dict (see orgnav.serializers.serialize_state).
    """

    def __init__(
        self,
        flat_nodes: Iterable[FlatNode] | None = None,
        sort_children: str = "source",
        selection_policy: SelectionPolicy | str = SelectionPolicy.STRICT,
    ) -> None:
        """Initialize the session.

        Args:
            flat_nodes: Initial snapshot, if already available.
            sort_children: Sibling ordering ("source" or "name").
            selection_policy: Selection clearing policy.
        """
        self.sort_children = sort_children
        self.selection_policy = SelectionPolicy(selection_policy)
        self.report = BuildReport()
        self.last_error: str | None = None
        self._generation = 0
        self._latest_token = 0
        self._closed = False
        self._install([])

        if flat_nodes is not None:
            self.load(flat_nodes)

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any],
        flat_nodes: Iterable[FlatNode] | None = None,
    ) -> HierarchySession:
        """Create a session using the ``[tree]`` and ``[navigation]`` sections."""
        return cls(
            flat_nodes,
            sort_children=config.get("tree", {}).get("child_order", "source"),
            selection_policy=config.get("navigation", {}).get("selection_policy", "strict"),
        )

    # ─────────────────────────────────────────────────────────────────
    # Read access
    # ─────────────────────────────────────────────────────────────────

    @property
    def forest(self) -> list[TreeNode]:
        return self._forest

    @property
    def cursor(self) -> NavigationCursor:
        return self._cursor

    @property
    def selection(self) -> SelectionResolver:
        return self._selection

    @property
    def generation(self) -> int:
        """Number of snapshots accepted so far."""
        return self._generation

    @property
    def is_open(self) -> bool:
        return not self._closed

    def find(self, node_id: str) -> TreeNode | None:
        """Find any node of the current forest."""
        return find_node(self._forest, node_id)

    def selected_node(self) -> TreeNode | None:
        return self._selection.current()

    def state(self) -> dict[str, Any]:
        """Serialize forest, cursor, selection and snapshot status."""
        return serialize_state(
            self._forest,
            self._cursor,
            self._selection.current(),
            self._generation,
            self.last_error,
        )

    # ─────────────────────────────────────────────────────────────────
    # Snapshot lifecycle
    # ─────────────────────────────────────────────────────────────────

    def load(self, flat_nodes: Iterable[FlatNode]) -> dict[str, Any]:
        """Replace the snapshot and start navigation at the root level."""
        builder = TreeBuilder(sort_children=self.sort_children).add_nodes(flat_nodes)
        forest, self.report = builder.build_and_report()
        self._install(forest)
        self._generation += 1
        self.last_error = None
        for warning in self.report.warnings:
            logger.info(warning)
        logger.debug("Loaded snapshot generation %d (%d roots)", self._generation, len(forest))
        return self.state()

    def begin_refresh(self) -> int:
        """Start a fetch; returns the token that will be allowed to land."""
        self._latest_token += 1
        return self._latest_token

    def complete_refresh(self, token: int, flat_nodes: Iterable[FlatNode]) -> bool:
        """Apply a fetched snapshot if its fetch is still current.

        Returns:
            False if the session was closed or a newer fetch started
            since begin_refresh() returned token; the snapshot is then
            discarded.
        """
        if not self._accepts(token):
            logger.debug("Discarding stale snapshot for refresh token %d", token)
            return False
        self.load(flat_nodes)
        return True

    def fail_refresh(self, token: int, error: Exception | str) -> bool:
        """Record a failed fetch; forest, cursor and selection are kept."""
        if not self._accepts(token):
            return False
        self.last_error = str(error)
        logger.warning("Snapshot refresh failed: %s", error)
        return True

    def refresh(self, source: FlatNodeSource) -> dict[str, Any]:
        """Fetch a new snapshot from source and load it.

        Raises:
            SnapshotError: If the fetch fails. The last good state is
                kept and the message is stored in last_error.
        """
        token = self.begin_refresh()
        try:
            nodes = source.fetch()
        except SnapshotError as e:
            self.fail_refresh(token, e)
            raise
        self.complete_refresh(token, nodes)
        return self.state()

    def close(self) -> None:
        """Discard all session state; pending fetches will be ignored."""
        self._closed = True
        self._latest_token += 1
        self.last_error = None
        self._install([])

    def open(self) -> None:
        """Reopen a closed session with an empty forest."""
        self._closed = False
        self.last_error = None
        self._install([])

    # ─────────────────────────────────────────────────────────────────
    # Navigation callbacks
    # ─────────────────────────────────────────────────────────────────

    def enter(self, node_id: str) -> dict[str, Any]:
        """Enter a node of the current level; unknown or childless ids are ignored."""
        node = self._cursor.lookup(node_id)
        if node is not None:
            self._apply(self._cursor.enter(node))
        return self.state()

    def back(self) -> dict[str, Any]:
        self._apply(self._cursor.back())
        return self.state()

    def reset(self) -> dict[str, Any]:
        self._apply(self._cursor.reset())
        return self.state()

    def select(self, node_id: str | None) -> dict[str, Any]:
        """Select a node of the current level, or clear with None."""
        self._selection.select(node_id)
        return self.state()

    # ─────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────

    def _install(self, forest: list[TreeNode]) -> None:
        self._forest = forest
        self._cursor = NavigationCursor(forest)
        self._selection = SelectionResolver(self._cursor, self.selection_policy)

    def _accepts(self, token: int) -> bool:
        return not self._closed and token == self._latest_token

    def _apply(self, transition: Transition | None) -> None:
        if transition is not None:
            logger.debug(
                "Cursor %s: depth %d -> %d",
                transition.kind,
                transition.from_depth,
                transition.to_depth,
            )
        self._selection.apply(transition)
