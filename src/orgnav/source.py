"""
orgnav.source - Snapshot sources

A source supplies one immutable snapshot of FlatNode records per call
to fetch(). Records are accepted in the shapes the hierarchy API
returns: a plain list, or an envelope such as
``{"success": true, "count": 2, "nodes": [...]}``. Records may also
arrive pre-nested under ``children``; those are flattened first.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Protocol, Sequence

from orgnav.core.models import CHILDREN_KEY, FlatNode
from orgnav.errors import SnapshotError

logger = logging.getLogger(__name__)

ENVELOPE_KEYS = ("nodes", "data")


class FlatNodeSource(Protocol):
    """Anything that can produce a node snapshot."""

    def fetch(self) -> list[FlatNode]: ...


def unwrap_envelope(payload: Any) -> list[Any]:
    """Return the record list from a list or an API envelope.

    Raises:
        SnapshotError: If no record list can be found.
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping):
        for key in ENVELOPE_KEYS:
            records = payload.get(key)
            if isinstance(records, list):
                return records
    raise SnapshotError(
        f"Expected a list of nodes or an object with one of {', '.join(ENVELOPE_KEYS)}"
    )


def flatten_nested(
    records: Sequence[Mapping[str, Any]],
    id_field: str = "id",
    parent_field: str = "parent_id",
) -> list[dict[str, Any]]:
    """Flatten records nested under ``children`` into pre-order.

    A nested record without its own parent reference gets the id of
    the record it was nested in. Records that are already flat pass
    through as copies.

    Raises:
        SnapshotError: If a record is not an object.
    """
    flat: list[dict[str, Any]] = []
    stack: list[tuple[Any, Any]] = [(record, None) for record in reversed(records)]

    while stack:
        record, enclosing_id = stack.pop()
        if not isinstance(record, Mapping):
            raise SnapshotError(f"Node record must be an object, got {type(record).__name__}")

        copy = {key: value for key, value in record.items() if key != CHILDREN_KEY}
        if enclosing_id is not None and copy.get(parent_field) in (None, ""):
            copy[parent_field] = enclosing_id
        flat.append(copy)

        children = record.get(CHILDREN_KEY) or []
        if not isinstance(children, list):
            raise SnapshotError(f"'{CHILDREN_KEY}' must be a list in record {record.get(id_field)!r}")
        stack.extend((child, record.get(id_field)) for child in reversed(children))

    return flat


def parse_records(
    payload: Any,
    id_field: str = "id",
    parent_field: str = "parent_id",
) -> list[FlatNode]:
    """Convert an API payload into FlatNode records.

    Args:
        payload: Decoded JSON: list of records or envelope object.
        id_field: Key holding each node's id.
        parent_field: Key holding each node's parent id.

    Returns:
        FlatNode records in snapshot order.

    Raises:
        SnapshotError: If the payload has the wrong shape or a record
            has no id.
    """
    records = flatten_nested(unwrap_envelope(payload), id_field, parent_field)
    nodes: list[FlatNode] = []
    for index, record in enumerate(records):
        try:
            nodes.append(FlatNode.from_dict(record, id_field=id_field, parent_field=parent_field))
        except KeyError:
            raise SnapshotError(f"Node record #{index} has no '{id_field}'") from None
    return nodes


class StaticSource:
    """In-memory snapshot, e.g. records already fetched by the caller."""

    def __init__(
        self,
        payload: Any,
        id_field: str = "id",
        parent_field: str = "parent_id",
    ) -> None:
        self.payload = payload
        self.id_field = id_field
        self.parent_field = parent_field

    def fetch(self) -> list[FlatNode]:
        return parse_records(self.payload, self.id_field, self.parent_field)


class JsonFileSource:
    """Snapshot read from a JSON file on every fetch."""

    def __init__(
        self,
        path: Path,
        id_field: str = "id",
        parent_field: str = "parent_id",
    ) -> None:
        self.path = Path(path)
        self.id_field = id_field
        self.parent_field = parent_field

    def fetch(self) -> list[FlatNode]:
        """Read and parse the snapshot file.

        Raises:
            SnapshotError: If the file is missing, unreadable or malformed.
        """
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise SnapshotError(f"Snapshot file not found: {self.path}") from None
        except (OSError, UnicodeDecodeError) as e:
            raise SnapshotError(f"Cannot read snapshot file {self.path}: {e}") from e
        except json.JSONDecodeError as e:
            raise SnapshotError(f"Malformed JSON in {self.path}: {e}") from e

        nodes = parse_records(payload, self.id_field, self.parent_field)
        logger.debug("Read %d nodes from %s", len(nodes), self.path)
        return nodes


def source_from_config(config: Mapping[str, Any], path: Path | None = None) -> JsonFileSource:
    """Create a JsonFileSource from the ``[source]`` config section.

    Args:
        config: Full configuration dictionary.
        path: Snapshot path overriding ``source.path``.

    Raises:
        SnapshotError: If no snapshot path is configured or given.
    """
    section = config.get("source", {})
    snapshot = path or section.get("path")
    if not snapshot:
        raise SnapshotError("No snapshot file given and source.path is not configured")
    return JsonFileSource(
        Path(snapshot),
        id_field=section.get("id_field", "id"),
        parent_field=section.get("parent_field", "parent_id"),
    )
