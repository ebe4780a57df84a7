"""
orgnav.config.loader - Configuration file discovery, parsing and merging.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import tomlkit
from tomlkit.exceptions import TOMLKitError

from orgnav.config.defaults import CONFIG_FILENAME, DEFAULT_CONFIG, ENV_PREFIX
from orgnav.core.selection import SelectionPolicy
from orgnav.core.tree_builder import CHILD_ORDERS
from orgnav.errors import ConfigError

logger = logging.getLogger(__name__)


def parse_toml_document(content: str) -> tomlkit.TOMLDocument:
    """Parse TOML text, keeping formatting for round-trip edits.

    Raises:
        ConfigError: If the text is not valid TOML.
    """
    try:
        return tomlkit.parse(content)
    except TOMLKitError as e:
        raise ConfigError(f"Invalid TOML: {e}") from e


def parse_toml(content: str) -> Dict[str, Any]:
    """Parse TOML text into plain Python dicts and lists."""
    return parse_toml_document(content).unwrap()


def find_config_file(start: Path) -> Optional[Path]:
    """Find .orgnav.toml in start or any of its parents.

    Args:
        start: Directory to start searching from.

    Returns:
        Path to the config file, or None if not found.
    """
    current = start.resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current.parent == current:
            return None
        current = current.parent


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge override into a copy of base.

    Nested dicts are merged key by key; any other value in override
    replaces the base value.
    """
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _try_parse_env_value(value: str) -> Any:
    """Convert an environment string to a typed value.

    JSON arrays/objects and integers are decoded, "true"/"false" become
    booleans; anything else (including malformed JSON) stays a string.
    """
    lowered = value.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if value.strip().startswith(("[", "{")):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    if value.strip().lstrip("-").isdigit():
        try:
            return int(value)
        except ValueError:
            return value
    return value


def _apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    """Apply ORGNAV_<SECTION>_<KEY> environment variables.

    Only sections already present in config are touched; unknown
    sections are ignored.
    """
    for name, raw in os.environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        section, _, key = name[len(ENV_PREFIX):].lower().partition("_")
        if not key or not isinstance(config.get(section), dict):
            continue
        config[section][key] = _try_parse_env_value(raw)
        logger.debug("Config override from %s", name)
    return config


def validate_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Check option values that the engine would otherwise reject late.

    Raises:
        ConfigError: On an unknown child order, selection policy or a
            non-integer server port.
    """
    child_order = config.get("tree", {}).get("child_order")
    if child_order not in CHILD_ORDERS:
        raise ConfigError(
            f"tree.child_order must be one of {', '.join(CHILD_ORDERS)}, got {child_order!r}"
        )

    policy = config.get("navigation", {}).get("selection_policy")
    try:
        SelectionPolicy(policy)
    except ValueError:
        names = ", ".join(p.value for p in SelectionPolicy)
        raise ConfigError(
            f"navigation.selection_policy must be one of {names}, got {policy!r}"
        ) from None

    port = config.get("server", {}).get("port")
    if not isinstance(port, int) or isinstance(port, bool):
        raise ConfigError(f"server.port must be an integer, got {port!r}")

    return config


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration.

    Defaults are merged with the file at path (when given), then
    environment overrides are applied and the result validated.
    A relative source.path is resolved against the config file's
    directory.

    Args:
        path: Config file to read, or None for defaults only.

    Returns:
        The configuration dictionary.

    Raises:
        ConfigError: If the file cannot be read or holds invalid values.
    """
    user: Dict[str, Any] = {}
    if path is not None:
        try:
            content = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        user = parse_toml(content)

    config = _apply_env_overrides(merge_configs(DEFAULT_CONFIG, user))

    snapshot = config["source"].get("path")
    if path is not None and snapshot and not Path(snapshot).is_absolute():
        config["source"]["path"] = str(Path(path).parent / snapshot)

    return validate_config(config)


def get_config(config_path: Optional[Path] = None, start: Optional[Path] = None) -> Dict[str, Any]:
    """Load the explicit config file, or the one discovered from start.

    Args:
        config_path: Explicit config file (e.g. from --config).
        start: Directory to search from (defaults to the cwd).

    Returns:
        The configuration dictionary (defaults if no file is found).
    """
    if config_path is None:
        config_path = find_config_file(start or Path.cwd())
    if config_path is not None:
        logger.debug("Using config file %s", config_path)
    return load_config(config_path)
