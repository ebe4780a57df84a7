"""
orgnav.core - Tree building, search, navigation and selection
"""

from orgnav.core.cursor import NavigationCursor, Transition
from orgnav.core.locator import count_nodes, find_node, find_path, flatten_ids, walk_forest
from orgnav.core.models import FlatNode, TreeNode
from orgnav.core.selection import SelectionPolicy, SelectionResolver
from orgnav.core.tree_builder import BuildReport, TreeBuilder, build_forest

__all__ = [
    "BuildReport",
    "FlatNode",
    "NavigationCursor",
    "SelectionPolicy",
    "SelectionResolver",
    "Transition",
    "TreeBuilder",
    "TreeNode",
    "build_forest",
    "count_nodes",
    "find_node",
    "find_path",
    "flatten_ids",
    "walk_forest",
]
