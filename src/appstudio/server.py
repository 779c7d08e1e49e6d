"""
HTTP transport for an App.

    GET    /                        the page
    GET    /health                  liveness check
    POST   /session                 start a session; returns its id, inputs and outputs
    POST   /session/<id>/inputs     {"values": {...}} in, changed outputs out
    DELETE /session/<id>            end a session
"""

import logging

from flask import Blueprint, Flask, jsonify, request

from appstudio.util import CONFIG

logger = logging.getLogger(__name__)


def _error(message, status):
    return jsonify({"error": message}), status


def app_blueprint(app) -> Blueprint:
    bp = Blueprint("appstudio", __name__)

    @bp.route("/")
    def page():
        return app.html(endpoint=request.script_root + "/")

    @bp.route("/health")
    def health():
        return jsonify({"status": "ok", "sessions": len(app.sessions)})

    @bp.route("/session", methods=["POST"])
    def start_session():
        app.prune_sessions(CONFIG["server"].get("session_ttl", 3600))
        try:
            session = app.new_session()
            outputs = session.flush()
        except Exception as e:
            logger.exception("Server logic failed while starting a session")
            return _error(f"Server logic failed: {type(e).__name__}: {e}", 500)
        return jsonify({"session": session.id, "inputs": session.values, "outputs": outputs})

    @bp.route("/session/<session_id>/inputs", methods=["POST"])
    def set_inputs(session_id):
        try:
            session = app.get_session(session_id)
        except KeyError:
            return _error(f"Unknown session {session_id!r}", 404)
        body = request.get_json(silent=True)
        if not isinstance(body, dict) or not isinstance(body.get("values"), dict):
            return _error('Expected a JSON body like {"values": {"input_id": value}}', 400)
        try:
            outputs = session.set_inputs(body["values"])
        except KeyError as e:
            return _error(e.args[0] if e.args else str(e), 400)
        except ValueError as e:
            return _error(str(e), 400)
        return jsonify({"outputs": outputs, "inputs": session.values})

    @bp.route("/session/<session_id>", methods=["DELETE"])
    def end_session(session_id):
        if not app.end_session(session_id):
            return _error(f"Unknown session {session_id!r}", 404)
        return "", 204

    return bp


def create_server(app) -> Flask:
    """Create the Flask application serving `app`."""
    server = Flask(__name__)
    server.json.sort_keys = False
    server.register_blueprint(app_blueprint(app))
    return server
