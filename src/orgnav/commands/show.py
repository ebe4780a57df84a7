"""
orgnav.commands.show - Print a snapshot as a tree.

- `orgnav show FILE` - Text outline
- `orgnav show FILE --format json` - Nested JSON records
- `orgnav show FILE --format d3` - react-d3-tree JSON
"""

from __future__ import annotations

import argparse
import json
import sys

from orgnav.config import get_config
from orgnav.serializers import render_text_tree, serialize_forest, to_d3_tree
from orgnav.session import HierarchySession
from orgnav.source import source_from_config


def load_session(args: argparse.Namespace) -> HierarchySession:
    """Build a session from the snapshot named on the command line or in config."""
    config = get_config(getattr(args, "config", None))
    source = source_from_config(config, getattr(args, "file", None))
    session = HierarchySession.from_config(config)
    session.refresh(source)
    return session


def run(args: argparse.Namespace) -> int:
    """Run the show command."""
    session = load_session(args)

    if args.report:
        for warning in session.report.warnings:
            print(f"Warning: {warning}", file=sys.stderr)

    if not session.forest:
        print("No nodes found.")
        return 0

    if args.format == "json":
        print(json.dumps(serialize_forest(session.forest), indent=2))
    elif args.format == "d3":
        print(json.dumps(to_d3_tree(session.forest), indent=2))
    else:
        print(render_text_tree(session.forest))

    return 0
