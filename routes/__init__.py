"""Flask blueprints for netnet."""

from __future__ import annotations

from flask import Flask


def register_blueprints(app: Flask) -> None:
    """Register all route blueprints on the app."""
    from .capture import capture_bp

    app.register_blueprint(capture_bp)
