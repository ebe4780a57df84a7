"""
orgnav - Hierarchy tree engine for organizational structures

orgnav materializes a flat, parent-referenced list of organization
nodes into a forest, lets a user drill into and back out of subtrees
with a navigation cursor, and resolves the selected node's full record
from anywhere in the forest.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("orgnav")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed
__license__ = "MIT"

from orgnav.core import (
    BuildReport,
    FlatNode,
    NavigationCursor,
    SelectionPolicy,
    SelectionResolver,
    TreeBuilder,
    TreeNode,
    build_forest,
    find_node,
)
from orgnav.errors import ConfigError, OrgnavError, SnapshotError
from orgnav.session import HierarchySession

__all__ = [
    "__version__",
    "BuildReport",
    "ConfigError",
    "FlatNode",
    "HierarchySession",
    "NavigationCursor",
    "OrgnavError",
    "SelectionPolicy",
    "SelectionResolver",
    "SnapshotError",
    "TreeBuilder",
    "TreeNode",
    "build_forest",
    "find_node",
]
