import logging
import os

from dotenv import load_dotenv
from flask import Flask

from newsextract.utils.correlation import (
    CORRELATION_HEADER,
    clear_correlation_context,
    current_correlation_id,
)
from newsextract.utils.logging_config import setup_logging


def create_app():
    """Create and configure an instance of the Flask application."""
    load_dotenv()

    # Set up logging as early as possible
    setup_logging()
    logger = logging.getLogger(__name__)

    from newsextract.config import settings

    logger.info("Application starting with configuration:")
    logger.info(f"  ENV: {settings.ENV}")
    logger.info(f"  MIN_CONTENT_LENGTH: {settings.MIN_CONTENT_LENGTH}")
    logger.info(f"  SITE_RULES_PATH: {settings.SITE_RULES_PATH}")

    app = Flask(__name__, instance_relative_config=True)
    app.config["ENV"] = settings.ENV
    app.json.sort_keys = False
    app.config["MAX_CONTENT_LENGTH"] = int(os.getenv("MAX_REQUEST_BYTES", str(20 * 1024 * 1024)))

    @app.after_request
    def echo_correlation_id(response):
        correlation_id = current_correlation_id()
        if correlation_id:
            response.headers[CORRELATION_HEADER] = correlation_id
        return response

    @app.teardown_request
    def reset_logging_context(_exc=None):
        clear_correlation_context()

    # Register Blueprints
    from .routes import parser

    if "parser" not in app.blueprints:
        app.register_blueprint(parser.bp)

    return app
