"""orgnav.server.app - Flask app factory and REST API routes.

This is a THIN REST wrapper. All logic lives in
``orgnav.session.HierarchySession``; routes only translate HTTP to
session calls and session state to JSON.

One app instance holds one navigation session, the way a single
console modal holds one cursor.
"""

from __future__ import annotations

from typing import Any

from flask import Flask, jsonify
from flask_cors import CORS

from orgnav.errors import SnapshotError
from orgnav.serializers import root_options, serialize_forest, serialize_node, to_d3_tree
from orgnav.session import HierarchySession
from orgnav.source import FlatNodeSource


def create_app(
    session: HierarchySession,
    source: FlatNodeSource | None = None,
    config: dict[str, Any] | None = None,
) -> Flask:
    """Create the Flask application with REST API routes.

    Args:
        session: Navigation session to expose.
        source: Snapshot source used by POST /api/refresh.
        config: orgnav configuration dict.

    Returns:
        Configured Flask application.
    """
    app = Flask(__name__)
    CORS(app)

    _state: dict[str, Any] = {
        "session": session,
        "source": source,
        "config": config or {},
    }

    @app.after_request
    def _no_cache(response):
        response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
        return response

    # ─────────────────────────────────────────────────────────────────
    # Read-only GET endpoints
    # ─────────────────────────────────────────────────────────────────

    @app.route("/api/state")
    def api_state():
        """GET /api/state - Forest, cursor, selection and snapshot status."""
        return jsonify(_state["session"].state())

    @app.route("/api/forest")
    def api_forest():
        """GET /api/forest - Full forest with descendants."""
        return jsonify(serialize_forest(_state["session"].forest))

    @app.route("/api/node/<path:node_id>")
    def api_node(node_id: str):
        """GET /api/node/<path:node_id> - One node with its descendants."""
        node = _state["session"].find(node_id)
        if node is None:
            return jsonify({"error": f"Node '{node_id}' not found"}), 404
        return jsonify(serialize_node(node))

    @app.route("/api/d3-tree")
    def api_d3_tree():
        """GET /api/d3-tree - Forest in react-d3-tree format."""
        return jsonify(to_d3_tree(_state["session"].forest))

    @app.route("/api/root-options")
    def api_root_options():
        """GET /api/root-options - Value/label pairs for the root selector."""
        return jsonify(root_options(_state["session"].forest))

    # ─────────────────────────────────────────────────────────────────
    # Navigation endpoints
    # ─────────────────────────────────────────────────────────────────

    @app.route("/api/enter/<path:node_id>", methods=["POST"])
    def api_enter(node_id: str):
        """POST /api/enter/<path:node_id> - Enter a node of the current level."""
        return jsonify(_state["session"].enter(node_id))

    @app.route("/api/back", methods=["POST"])
    def api_back():
        """POST /api/back - Return to the parent level."""
        return jsonify(_state["session"].back())

    @app.route("/api/reset", methods=["POST"])
    def api_reset():
        """POST /api/reset - Return to the root level."""
        return jsonify(_state["session"].reset())

    @app.route("/api/select/<path:node_id>", methods=["POST"])
    def api_select(node_id: str):
        """POST /api/select/<path:node_id> - Select a node of the current level."""
        return jsonify(_state["session"].select(node_id))

    @app.route("/api/select", methods=["POST"])
    def api_clear_selection():
        """POST /api/select - Clear the selection."""
        return jsonify(_state["session"].select(None))

    @app.route("/api/refresh", methods=["POST"])
    def api_refresh():
        """POST /api/refresh - Refetch the snapshot and restart navigation."""
        src = _state["source"]
        if src is None:
            return jsonify({"error": "No snapshot source configured"}), 400
        try:
            return jsonify(_state["session"].refresh(src))
        except SnapshotError:
            # session.last_error carries the message into the state
            return jsonify(_state["session"].state()), 502

    return app
