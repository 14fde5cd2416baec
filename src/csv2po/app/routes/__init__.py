"""Blueprint registrations for application routes."""

from flask import Flask

from .languages import blueprint as languages_blueprint
from .sync import blueprint as sync_blueprint


def register_routes(app: Flask) -> None:
    """Register all Flask blueprints with the provided application."""

    app.register_blueprint(sync_blueprint)
    app.register_blueprint(languages_blueprint)
