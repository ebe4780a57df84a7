"""
orgnav.commands.find - Look up one node anywhere in a snapshot.
"""

from __future__ import annotations

import argparse
import json
import sys

from orgnav.commands.show import load_session
from orgnav.core.cursor import PATH_SEPARATOR
from orgnav.core.locator import find_path
from orgnav.serializers import render_text_tree, serialize_node


def run(args: argparse.Namespace) -> int:
    """Run the find command."""
    session = load_session(args)

    path = find_path(session.forest, args.node_id)
    if path is None:
        print(f"Node '{args.node_id}' not found", file=sys.stderr)
        return 1

    node = path[-1]
    if args.json:
        print(json.dumps(serialize_node(node), indent=2))
        return 0

    print(f"Path: {PATH_SEPARATOR.join(n.name or n.id for n in path)}")
    if node.description:
        print(f"Description: {node.description}")
    print(f"Active: {'yes' if node.is_active else 'no'}")
    print()
    print(render_text_tree([node]))
    return 0
