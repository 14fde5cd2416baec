"""Application factory exposing synchronisation runs over HTTP."""

from __future__ import annotations

from pathlib import Path

from flask import Flask, jsonify
from werkzeug.exceptions import BadRequest

from csv2po.config.settings import default_settings_path
from csv2po.version import get_project_version

from .http import problem_response
from .routes import register_routes


def create_app(settings_path: Path | None = None) -> Flask:
    """Create and configure the Flask application instance.

    ``settings_path`` names the YAML settings file every sync request starts
    from; it defaults to the file named by ``CSV2PO_CONFIG``.
    """

    app = Flask(__name__)
    app.config["CSV2PO_SETTINGS_PATH"] = settings_path or default_settings_path()

    register_routes(app)

    @app.route("/health", methods=["GET"])
    def health_check():
        """Simple health check endpoint for infrastructure monitoring."""

        return jsonify({"status": "ok", "version": get_project_version()})

    @app.errorhandler(BadRequest)
    def handle_bad_request(error: BadRequest):
        """Return consistent JSON responses for malformed payloads."""

        message = error.description or "Invalid request"
        return problem_response("bad_request", status=400, message=message).to_response()

    return app


__all__ = ["create_app"]
