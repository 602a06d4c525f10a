"""
Treatment Pricing Engine - Flask Application Entry Point.

This is a slim app factory that:
1. Loads configuration (config.Config or the object passed in)
2. Configures logging
3. Registers route blueprints
4. Sets up JSON error handlers

The pricing core holds no state: every request carries its own pricing
configuration, so there is nothing to start up or shut down.
"""

from __future__ import annotations

import os

from flask import Flask, jsonify
from werkzeug.exceptions import NotFound, RequestEntityTooLarge

from logging_config import setup_logging, get_logger
from routes import register_blueprints


# Module logger (configured after setup_logging)
logger = get_logger(__name__)


def create_app(config_object: str = "config.Config") -> Flask:
    """
    Application factory - creates and configures Flask app.

    Args:
        config_object: Import path of the configuration class

    Returns:
        Configured Flask application
    """
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Configure logging
    enable_file_logging = app.config.get("ENVIRONMENT") == "production"
    root_logger = setup_logging(
        log_level=app.config.get("LOG_LEVEL", "INFO"),
        log_dir=app.config.get("LOG_DIR"),
        enable_file_logging=enable_file_logging
    )

    # Flask logs through the same handlers
    app.logger.handlers = root_logger.handlers
    app.logger.setLevel(root_logger.level)

    logger.info(f"Starting treatment pricing engine in {app.config.get('ENVIRONMENT')} mode")

    # =========================================================================
    # REGISTER BLUEPRINTS
    # =========================================================================

    register_blueprints(app)

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.errorhandler(RequestEntityTooLarge)
    def handle_request_too_large(e):
        max_kb = app.config.get("MAX_CONTENT_LENGTH", 1024 * 1024) / 1024
        return jsonify({
            "error": f"Request too large. Maximum size is {max_kb:.0f} KB.",
            "type": "RequestEntityTooLarge",
            "details": {},
        }), 413

    @app.errorhandler(NotFound)
    def handle_not_found(e):
        return jsonify({"error": "Not found", "type": "NotFound", "details": {}}), 404

    @app.errorhandler(500)
    def handle_server_error(e):
        logger.error(f"500 error: {e}", exc_info=True)
        return jsonify({
            "error": "An unexpected error occurred",
            "type": "InternalServerError",
            "details": {},
        }), 500

    logger.info("Application initialized successfully")
    return app


if __name__ == "__main__":
    app = create_app()
    debug_mode = os.environ.get("FLASK_DEBUG", "1") == "1"
    app.run(debug=debug_mode)
