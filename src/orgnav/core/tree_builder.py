"""Tree builder for materializing hierarchy forests.

This module provides the TreeBuilder class for turning a flat,
parent-referenced snapshot into a forest of TreeNode instances.

Malformed input never raises. Dangling parent references and
self references are promoted to roots, duplicate ids resolve
last-write-wins, and parent chains that loop are cut at their first
member in input order. Every anomaly is recorded in the BuildReport.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from orgnav.core.models import FlatNode, TreeNode

logger = logging.getLogger(__name__)

CHILD_ORDERS = ("source", "name")


@dataclass
class BuildReport:
    """Structural anomalies found while building a forest.

    Attributes:
        orphan_ids: Nodes whose parent_id matched no node.
        self_referencing_ids: Nodes that named themselves as parent.
        duplicate_ids: Ids that appeared more than once.
        broken_loops: Parent loops, each listed in chain order; the
            first member of each was promoted to a root.
    """

    orphan_ids: list[str] = field(default_factory=list)
    self_referencing_ids: list[str] = field(default_factory=list)
    duplicate_ids: list[str] = field(default_factory=list)
    broken_loops: list[list[str]] = field(default_factory=list)

    @property
    def has_anomalies(self) -> bool:
        return bool(
            self.orphan_ids
            or self.self_referencing_ids
            or self.duplicate_ids
            or self.broken_loops
        )

    @property
    def warnings(self) -> list[str]:
        """Human-readable warning messages."""
        messages = [f"Orphaned node promoted to root: {i}" for i in self.orphan_ids]
        messages += [f"Self-referencing node promoted to root: {i}" for i in self.self_referencing_ids]
        messages += [f"Duplicate id (last record kept): {i}" for i in self.duplicate_ids]
        messages += [f"Parent loop broken: {' -> '.join(loop)}" for loop in self.broken_loops]
        return messages


class TreeBuilder:
    """Builds a forest from FlatNode records.

    Nodes may be added in several batches; linking, level computation
    and materialization happen when build() is called. The builder
    never mutates the records it is given.

    Example:
        builder = TreeBuilder()
        builder.add_nodes(snapshot)
        forest = builder.build()
    """

    def __init__(self, sort_children: str | None = "source") -> None:
        """Initialize the builder.

        Args:
            sort_children: "source" (or None) keeps input order, "name"
                orders siblings by display name.

        Raises:
            ValueError: If sort_children is not a known ordering.
        """
        if sort_children is None:
            sort_children = "source"
        if sort_children not in CHILD_ORDERS:
            raise ValueError(
                f"Unknown child order: {sort_children!r}. Use one of {', '.join(CHILD_ORDERS)}."
            )
        self.sort_children = sort_children
        self.report = BuildReport()
        self._nodes: dict[str, FlatNode] = {}
        self._duplicates: list[str] = []

    def add_nodes(self, flat_nodes: Iterable[FlatNode]) -> TreeBuilder:
        """Index nodes by id.

        A repeated id replaces the earlier record but keeps its
        position in the input order.

        Args:
            flat_nodes: FlatNode records.

        Returns:
            Self for method chaining.
        """
        for node in flat_nodes:
            if node.id in self._nodes and node.id not in self._duplicates:
                self._duplicates.append(node.id)
            self._nodes[node.id] = node
        return self

    def build(self) -> list[TreeNode]:
        """Build the forest.

        Returns:
            Forest roots in input order (or name order).
        """
        report = BuildReport(duplicate_ids=list(self._duplicates))

        parent_of = self._resolve_parents(report)
        self._break_loops(parent_of, report)
        roots, children_of = self._link(parent_of)
        levels = self._compute_levels(roots, children_of)
        forest = self._materialize(roots, children_of, levels)

        self.report = report
        if report.broken_loops:
            logger.warning("Broke %d parent loop(s) while building forest", len(report.broken_loops))
        logger.debug(
            "Built forest: %d nodes, %d roots, %d orphans, %d duplicates",
            len(self._nodes),
            len(forest),
            len(report.orphan_ids),
            len(report.duplicate_ids),
        )
        return forest

    def build_and_report(self) -> tuple[list[TreeNode], BuildReport]:
        """Build the forest and return it with its anomaly report."""
        forest = self.build()
        return forest, self.report

    def _resolve_parents(self, report: BuildReport) -> dict[str, str | None]:
        """Map each id to its parent id, or None for a root."""
        parent_of: dict[str, str | None] = {}

        for node_id, node in self._nodes.items():
            parent_id = node.parent_id
            if parent_id is None:
                parent_of[node_id] = None
            elif parent_id == node_id:
                logger.debug("Node %s references itself as parent", node_id)
                report.self_referencing_ids.append(node_id)
                parent_of[node_id] = None
            elif parent_id not in self._nodes:
                logger.debug("Node %s references missing parent %s", node_id, parent_id)
                report.orphan_ids.append(node_id)
                parent_of[node_id] = None
            else:
                parent_of[node_id] = parent_id

        return parent_of

    def _break_loops(self, parent_of: dict[str, str | None], report: BuildReport) -> None:
        """Promote one member of every parent loop to a root.

        Walks each parent chain once. A chain that runs into a node
        still on the current walk has closed a loop.
        """
        position = {node_id: index for index, node_id in enumerate(self._nodes)}
        unvisited, walking, done = 0, 1, 2
        state = dict.fromkeys(self._nodes, unvisited)

        for start_id in self._nodes:
            if state[start_id] == done:
                continue

            path: list[str] = []
            current = start_id
            while current is not None and state[current] == unvisited:
                state[current] = walking
                path.append(current)
                current = parent_of[current]

            if current is not None and state[current] == walking:
                loop = path[path.index(current):]
                promoted = min(loop, key=position.__getitem__)
                parent_of[promoted] = None
                report.broken_loops.append(loop)
                logger.debug("Promoted %s to root to break loop %s", promoted, loop)

            for node_id in path:
                state[node_id] = done

    def _link(
        self, parent_of: dict[str, str | None]
    ) -> tuple[list[str], dict[str, list[str]]]:
        """Assemble root ids and child id lists in input order."""
        roots: list[str] = []
        children_of: dict[str, list[str]] = {node_id: [] for node_id in self._nodes}

        for node_id in self._nodes:
            parent_id = parent_of[node_id]
            if parent_id is None:
                roots.append(node_id)
            else:
                children_of[parent_id].append(node_id)

        if self.sort_children == "name":
            # sorted() is stable, so equal names keep input order
            key = self._name_key
            roots.sort(key=key)
            for child_ids in children_of.values():
                child_ids.sort(key=key)

        return roots, children_of

    def _name_key(self, node_id: str) -> str:
        return self._nodes[node_id].name.casefold()

    @staticmethod
    def _compute_levels(roots: list[str], children_of: dict[str, list[str]]) -> dict[str, int]:
        """Compute levels top-down: roots are 0, children parent + 1."""
        levels: dict[str, int] = {}
        stack = [(root_id, 0) for root_id in roots]
        while stack:
            node_id, level = stack.pop()
            levels[node_id] = level
            stack.extend((child_id, level + 1) for child_id in children_of[node_id])
        return levels

    def _materialize(
        self,
        roots: list[str],
        children_of: dict[str, list[str]],
        levels: dict[str, int],
    ) -> list[TreeNode]:
        """Create TreeNodes bottom-up so each parent gets finished children."""
        preorder: list[str] = []
        stack = list(reversed(roots))
        while stack:
            node_id = stack.pop()
            preorder.append(node_id)
            stack.extend(reversed(children_of[node_id]))

        built: dict[str, TreeNode] = {}
        for node_id in reversed(preorder):
            built[node_id] = TreeNode.from_flat(
                self._nodes[node_id],
                level=levels[node_id],
                children=tuple(built[child_id] for child_id in children_of[node_id]),
            )

        return [built[root_id] for root_id in roots]


def build_forest(
    flat_nodes: Iterable[FlatNode],
    sort_children: str | None = None,
) -> list[TreeNode]:
    """Convenience function to build a forest from FlatNode records.

    Args:
        flat_nodes: FlatNode records in snapshot order.
        sort_children: Sibling ordering ("source" or "name").

    Returns:
        Forest roots.
    """
    return TreeBuilder(sort_children=sort_children).add_nodes(flat_nodes).build()
