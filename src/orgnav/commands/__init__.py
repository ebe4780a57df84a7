"""
orgnav.commands - CLI command implementations
"""

__all__ = [
    "config_cmd",
    "find",
    "serve",
    "show",
]
