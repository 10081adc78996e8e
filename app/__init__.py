"""
App factory: create_app()

- Loads config (env); a missing OPENAI_API_KEY raises ConfigError here,
  before any route exists
- Sets up logging
- Wires DI container (storage, stores, generator)
- Registers middleware (request IDs, timing)
- Registers blueprints from routes/*
- Installs global JSON error handlers
"""

from __future__ import annotations
import logging
from typing import Any, Dict, Optional

from flask import Flask, jsonify

from app.config import Settings, load_settings
from app.logging_setup import configure_logging
from app.container import Container
from app import middleware
from service import GeneratorLike

logger = logging.getLogger("Runtime")


def _register_blueprints(app: Flask) -> None:
    # Lazy imports to avoid circulars
    from routes.health_routes import bp as health_bp
    from routes.remix_routes import bp as remix_bp
    from routes.saved_routes import bp as saved_bp
    from routes.styles_routes import bp as styles_bp
    from routes.share_routes import bp as share_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(remix_bp)
    app.register_blueprint(saved_bp)
    app.register_blueprint(styles_bp)
    app.register_blueprint(share_bp)


def _install_error_handlers(app: Flask) -> None:
    @app.errorhandler(400)
    def bad_request(err):
        app.logger.warning(f"400: {err}")
        return jsonify({"message": "Bad request"}), 400

    @app.errorhandler(404)
    def not_found(err):
        return jsonify({"message": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(err):
        return jsonify({"message": "Method not allowed"}), 405

    @app.errorhandler(500)
    def server_error(err):
        app.logger.exception("Unhandled server error")
        return jsonify({"message": "Something went wrong"}), 500


def create_app(
    config_override: Optional[Dict[str, Any]] = None,
    *,
    generator: Optional[GeneratorLike] = None,
) -> Flask:
    # Settings & logging
    settings: Settings = load_settings(config_override)
    configure_logging(settings)

    app = Flask(__name__, static_folder=None)
    app.config["SECRET_KEY"] = settings.SECRET_KEY
    app.config["SETTINGS"] = settings

    # Dependency container (stores, generator)
    container = Container(settings, generator=generator)
    app.container = container  # type: ignore[attr-defined]

    # Middleware
    middleware.install_request_id(app)
    middleware.install_timing(app)

    # Blueprints
    _register_blueprints(app)

    # Error handlers
    _install_error_handlers(app)

    logger.info(f"App started with model={settings.OPENAI_MODEL} data_dir={settings.DATA_DIR}")

    @app.get("/")
    def root():
        return {"ok": True, "service": "remix-tool"}

    return app
