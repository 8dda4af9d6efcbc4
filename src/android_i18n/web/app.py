"""Flask application configuration and blueprint registration."""

from __future__ import annotations

from flask import Flask, jsonify

from android_i18n import __version__
from android_i18n.exceptions import (
    BackendConfigError,
    ResourceParseError,
    RunError,
    SpreadsheetError,
    TranslationError,
)
from android_i18n.logger import get_logger

from .routes.translation import translation_bp

logger = get_logger(__name__)

# Request-level errors map to 400; anything else from the engine is a server error
_CLIENT_ERRORS = (BackendConfigError, ResourceParseError, RunError, SpreadsheetError)


def build_app() -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)

    # Ensure JSON responses keep Unicode data.
    app.config["JSON_AS_ASCII"] = False
    app.json.ensure_ascii = False

    register_blueprints(app)
    register_default_routes(app)

    return app


def register_blueprints(app: Flask) -> None:
    """Register Flask blueprints."""
    app.register_blueprint(translation_bp, url_prefix="/api")


def register_default_routes(app: Flask) -> None:
    """Register health route and JSON error handlers."""

    @app.get("/health")
    def health_check():
        logger.debug("Health check requested")
        return jsonify({"status": "ok", "version": __version__})

    @app.errorhandler(TranslationError)
    def translation_error(e: TranslationError):
        status = 400 if isinstance(e, _CLIENT_ERRORS) else 500
        if status == 400:
            logger.warning("Request rejected: %s", e)
        else:
            logger.exception("Translation error: %s", e)
        error_response = {"error": str(e), "code": e.code}
        if e.details:
            error_response["details"] = e.details
        return jsonify(error_response), status

    @app.errorhandler(404)
    def page_not_found(e):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(500)
    def internal_error(e):
        logger.exception("Internal server error: %s", e)
        return jsonify({"error": "Internal server error"}), 500
