"""
orgnav.commands.serve - Run the REST API over a snapshot.
"""

from __future__ import annotations

import argparse
import sys

from orgnav.config import get_config
from orgnav.session import HierarchySession
from orgnav.source import source_from_config


def run(args: argparse.Namespace) -> int:
    """Run the serve command."""
    try:
        from orgnav.server import create_app
    except ImportError:
        print("Error: server dependencies not installed.", file=sys.stderr)
        print("Install with: pip install orgnav[server]", file=sys.stderr)
        return 1

    config = get_config(args.config)
    source = source_from_config(config, args.file)
    session = HierarchySession.from_config(config)
    session.refresh(source)

    host = args.host or config["server"]["host"]
    port = args.port or config["server"]["port"]

    app = create_app(session, source=source, config=config)
    print(f"Serving {len(session.forest)} root node(s) on http://{host}:{port}")
    try:
        app.run(host=host, port=port, debug=False)
    except KeyboardInterrupt:
        print("\nServer stopped.")
    return 0
