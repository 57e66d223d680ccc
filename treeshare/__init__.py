"""
Flask application factory for the file server.
"""
import logging
import shutil

import humanize
from flask import Flask

from .config import get_config, Settings
from .services.path_resolver import PathResolver
from .services.file_service import FileService
from .services.archive_service import ArchiveService
from .routes import register_blueprints
from .utils.file_utils import format_size


def create_app(config_name: str = None, **overrides) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration name (development, production, testing)
        overrides: Settings fields taking precedence over the configuration,
            e.g. root, prefix, skip_hidden, follow_symlinks, read_only, verbose

    Returns:
        Configured Flask application
    """
    app = Flask(__name__)

    #load configuration
    config = get_config(config_name)
    app.config.from_object(config)

    #frozen settings for easy access
    app.settings = Settings.from_config(config, **overrides)

    app.logger.setLevel(logging.INFO if app.settings.verbose else logging.WARNING)
    app.add_template_filter(format_size, "format_size")

    # Initialize services
    _init_services(app, app.settings)

    # Register blueprints
    register_blueprints(app)

    # Log startup information
    _log_startup_info(app)

    return app


def _init_services(app: Flask, settings: Settings) -> None:
    """Initialize application services."""
    # Every service resolves client paths through the same resolver
    app.path_resolver = PathResolver(settings)

    app.file_service = FileService(settings, app.path_resolver)

    app.archive_service = ArchiveService(settings)


def _log_startup_info(app: Flask) -> None:
    """Log startup information."""
    settings = app.settings
    free = humanize.naturalsize(shutil.disk_usage(settings.root).free, binary=True)

    print("-" * 50)
    print("Starting treeshare...")
    print(f"Sharing directory: {settings.root} ({free} free)")
    print(f"Read only: {settings.read_only}")
    print(f"Skip hidden files: {settings.skip_hidden}")

    if settings.follow_symlinks:
        print("!!! Following symlinks: links may point outside the shared directory !!!")

    print("-" * 50)
