"""Shared pytest fixtures for orgnav tests."""

import pytest


@pytest.fixture
def make_node():
    """Factory for FlatNode records with short positional arguments."""
    from orgnav.core.models import FlatNode

    def _make(node_id, parent_id=None, name=None, **kwargs):
        return FlatNode(
            id=node_id,
            parent_id=parent_id,
            name=node_id.upper() if name is None else name,
            **kwargs,
        )

    return _make


@pytest.fixture
def org_records():
    """Raw API records for a two-root organization.

    Head Office
      Finance
        Accounts Payable
      IT (inactive)
    Operations
      Logistics
    """
    return [
        {"id": "hq", "parent_id": None, "name": "Head Office", "description": "Group HQ", "code": "HQ"},
        {"id": "fin", "parent_id": "hq", "name": "Finance", "description": "Money", "code": "FIN"},
        {"id": "it", "parent_id": "hq", "name": "IT", "is_active": False},
        {"id": "ap", "parent_id": "fin", "name": "Accounts Payable"},
        {"id": "ops", "parent_id": None, "name": "Operations"},
        {"id": "log", "parent_id": "ops", "name": "Logistics"},
    ]


@pytest.fixture
def org_nodes(org_records):
    """FlatNode records for the sample organization."""
    from orgnav.source import parse_records

    return parse_records(org_records)


@pytest.fixture
def org_forest(org_nodes):
    """Forest built from the sample organization."""
    from orgnav.core.tree_builder import build_forest

    return build_forest(org_nodes)


@pytest.fixture
def snapshot_file(tmp_path, org_records):
    """The sample organization written as an API envelope JSON file."""
    import json

    path = tmp_path / "nodes.json"
    path.write_text(
        json.dumps({"success": True, "count": len(org_records), "nodes": org_records}),
        encoding="utf-8",
    )
    return path
