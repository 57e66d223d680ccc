"""
Route blueprints for the file server application.
"""
from .main import main_bp
from .api import api_bp
from .upload import upload_bp

__all__ = ["main_bp", "api_bp", "upload_bp"]


def register_blueprints(app):
    """
    Register all blueprints with the Flask app.

    Mutation routes are left out entirely in read-only mode.

    Args:
        app: Flask application instance with settings attached
    """
    settings = app.settings
    url_prefix = settings.prefix.rstrip("/") or None

    if not settings.read_only:
        app.register_blueprint(api_bp, url_prefix=url_prefix)
        app.register_blueprint(upload_bp, url_prefix=url_prefix)
    app.register_blueprint(main_bp, url_prefix=url_prefix)
