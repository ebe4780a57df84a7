"""Hierarchy node data structures.

This module provides the two node representations used by the engine:

- FlatNode: one record of the flat, parent-referenced snapshot
- TreeNode: a materialized node carrying its level and children

Both are frozen. A TreeNode is never modified after the builder creates
it; a new snapshot produces a new forest.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping

# Record keys that map onto FlatNode fields rather than the payload.
_KNOWN_FIELDS = ("name", "description", "is_active")

# Structural key of nested API records; never part of the payload.
CHILDREN_KEY = "children"


@dataclass(frozen=True)
class FlatNode:
    """A node record as delivered by the snapshot source.

    Attributes:
        id: Opaque unique identifier.
        parent_id: Identifier of the parent, or None for a root.
        name: Display name.
        description: Display description.
        is_active: Display-only activity flag.
        attributes: Every other field of the source record, unchanged.
    """

    id: str
    parent_id: str | None = None
    name: str = ""
    description: str = ""
    is_active: bool = True
    attributes: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(
        cls,
        record: Mapping[str, Any],
        id_field: str = "id",
        parent_field: str = "parent_id",
    ) -> FlatNode:
        """Create a FlatNode from an API record.

        Args:
            record: Source record.
            id_field: Key holding the node identifier.
            parent_field: Key holding the parent identifier.

        Returns:
            The FlatNode.

        Raises:
            KeyError: If the record has no value under id_field.
        """
        node_id = record.get(id_field)
        if node_id is None or node_id == "":
            raise KeyError(id_field)

        parent_id = record.get(parent_field)
        is_active = record.get("is_active")
        attributes = {
            key: value
            for key, value in record.items()
            if key not in (id_field, parent_field, CHILDREN_KEY, *_KNOWN_FIELDS)
        }
        return cls(
            id=str(node_id),
            parent_id=str(parent_id) if parent_id not in (None, "") else None,
            name=record.get("name") or "",
            description=record.get("description") or "",
            is_active=_parse_flag(is_active),
            attributes=attributes,
        )


def _parse_flag(value: Any) -> bool:
    """Read an activity flag; missing means active, "false"/"0" strings mean inactive."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip().lower() not in ("false", "0", "no", "")
    return bool(value)


@dataclass(frozen=True)
class TreeNode:
    """A materialized hierarchy node.

    Carries every FlatNode field plus its computed level and its
    children. ``parent_id`` is the declared value from the snapshot, so
    for a promoted orphan it still names the missing parent.
    """

    id: str
    parent_id: str | None
    name: str
    description: str
    is_active: bool
    level: int
    # Excluded from eq/hash/repr so deep chains never recurse
    children: tuple[TreeNode, ...] = field(default=(), compare=False, repr=False)
    attributes: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_flat(
        cls,
        flat: FlatNode,
        level: int,
        children: tuple[TreeNode, ...] = (),
    ) -> TreeNode:
        """Materialize a FlatNode at the given level."""
        return cls(
            id=flat.id,
            parent_id=flat.parent_id,
            name=flat.name,
            description=flat.description,
            is_active=flat.is_active,
            level=level,
            children=children,
            attributes=dict(flat.attributes),
        )

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    @property
    def child_count(self) -> int:
        return len(self.children)

    def walk(self) -> Iterator[TreeNode]:
        """Iterate over this node and its descendants in pre-order."""
        stack: deque[TreeNode] = deque([self])
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def __str__(self) -> str:
        return f"{self.name or self.id} (Level {self.level}, ID: {self.id})"
