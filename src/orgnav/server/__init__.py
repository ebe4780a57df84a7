"""orgnav.server - Flask REST API server for hierarchy navigation.

Provides a thin REST wrapper over HierarchySession, exposing the
forest, cursor and selection to the console UI.
"""

from orgnav.server.app import create_app

__all__ = ["create_app"]
