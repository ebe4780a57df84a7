"""
orgnav.cli - Command-line interface.

Main entry point for the orgnav CLI tool.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from orgnav import __version__
from orgnav.commands import config_cmd, find, serve, show


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="orgnav",
        description="Organizational hierarchy tree engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  orgnav show nodes.json                # Print the hierarchy as an outline
  orgnav show nodes.json --format d3    # Tree-visualization JSON
  orgnav find nodes.json fin-01         # Locate one node and its subtree
  orgnav serve nodes.json --port 5050   # REST API for the console UI

Configuration:
  orgnav config path                    # Show config file location
  orgnav config show                    # View effective settings

Settings live in .orgnav.toml; ORGNAV_<SECTION>_<KEY> overrides them.
        """,
    )

    # Global options
    parser.add_argument(
        "--version",
        action="version",
        version=f"orgnav {__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file",
        metavar="PATH",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # show command
    show_parser = subparsers.add_parser(
        "show",
        help="Print a node snapshot as a tree",
    )
    show_parser.add_argument(
        "file",
        type=Path,
        nargs="?",
        help="JSON snapshot (default: source.path from config)",
    )
    show_parser.add_argument(
        "--format",
        choices=["text", "json", "d3"],
        default="text",
        help="Output format (default: text)",
    )
    show_parser.add_argument(
        "--report",
        action="store_true",
        help="List orphans, duplicates and broken parent loops on stderr",
    )

    # find command
    find_parser = subparsers.add_parser(
        "find",
        help="Locate a node anywhere in the hierarchy",
    )
    find_parser.add_argument("file", type=Path, help="JSON snapshot")
    find_parser.add_argument("node_id", help="Node id to look up")
    find_parser.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="Print the node and its descendants as JSON",
    )

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve the navigation REST API",
    )
    serve_parser.add_argument(
        "file",
        type=Path,
        nargs="?",
        help="JSON snapshot (default: source.path from config)",
    )
    serve_parser.add_argument("--host", help="Bind address (default: server.host)")
    serve_parser.add_argument("--port", type=int, help="Port (default: server.port)")

    # config command
    config_parser = subparsers.add_parser(
        "config",
        help="Inspect configuration",
    )
    config_subparsers = config_parser.add_subparsers(dest="config_action")
    config_subparsers.add_parser("show", help="Print effective configuration")
    config_subparsers.add_parser("path", help="Print the config file in use")

    return parser


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Route library log records to stderr at the requested level."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()

    # Enable shell tab-completion if argcomplete is installed
    # Install with: pip install orgnav[completion]
    try:
        import argcomplete

        argcomplete.autocomplete(parser)
    except ImportError:
        pass

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    configure_logging(args.verbose, args.quiet)

    try:
        if args.command == "show":
            return show.run(args)
        elif args.command == "find":
            return find.run(args)
        elif args.command == "serve":
            return serve.run(args)
        elif args.command == "config":
            return config_cmd.run(args)
        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        return 130
    except Exception as e:
        if args.verbose:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
