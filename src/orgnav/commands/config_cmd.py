"""
orgnav.commands.config_cmd - Inspect configuration.

- `orgnav config show` - Print the effective configuration as TOML
- `orgnav config path` - Print the config file in use
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import tomlkit

from orgnav.config import find_config_file, get_config


def run(args: argparse.Namespace) -> int:
    """Run the config command."""
    action = getattr(args, "config_action", None)

    if action == "show":
        config = get_config(args.config)
        print(tomlkit.dumps(config), end="")
        return 0
    elif action == "path":
        path = args.config or find_config_file(Path.cwd())
        if path is None:
            print("No .orgnav.toml found; using defaults", file=sys.stderr)
            return 1
        print(path)
        return 0
    else:
        print("Usage: orgnav config <show|path>", file=sys.stderr)
        return 1
