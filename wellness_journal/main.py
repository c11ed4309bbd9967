import logging

from flask import Flask

from wellness_journal import config
from wellness_journal.api.routes import api


def create_app() -> Flask:
    """
    Build the Flask app with the journal API registered.
    """
    app = Flask(__name__)
    # Meal photos arrive as base64 data URLs
    app.config["MAX_CONTENT_LENGTH"] = 4 * 1024 * 1024
    app.register_blueprint(api)
    return app


def configure_logging() -> None:
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
