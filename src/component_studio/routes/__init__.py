"""
Routes Package
Handles all application routes.
"""

from .api import API_BLUEPRINTS, uploads_bp


def register_blueprints(app):
    for blueprint in API_BLUEPRINTS:
        app.register_blueprint(blueprint)
    app.register_blueprint(uploads_bp)
