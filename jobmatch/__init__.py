"""
Flask application factory for the JobMatch API.
"""

import logging

from flask import Flask
import sentry_sdk
from sentry_sdk.integrations.flask import FlaskIntegration

from jobmatch.cli import register_commands
from jobmatch.config import get_config
from jobmatch.error_handlers import register_error_handlers
from jobmatch.extensions import db, init_extensions
from jobmatch.logging_config import setup_logging
from jobmatch.middleware.request_id import init_request_id_middleware
from jobmatch.routes import register_blueprints

logger = logging.getLogger(__name__)


def setup_sentry(app: Flask) -> None:
    """Initialize Sentry error tracking in production when a DSN is configured."""
    sentry_dsn = app.config.get("SENTRY_DSN")

    if sentry_dsn and app.config.get("ENVIRONMENT") == "production":
        sentry_sdk.init(
            dsn=sentry_dsn,
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,
            environment="production",
            release=app.config.get("APP_VERSION", "1.0.0"),
            send_default_pii=False,
        )
        app.logger.info("Sentry error tracking initialized")


def create_app(config_name=None) -> Flask:
    """Application factory function to create and configure the Flask app."""
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))

    # Request ID first so every later hook and log line can see it
    init_request_id_middleware(app)
    setup_logging(app)
    setup_sentry(app)

    init_extensions(app)
    register_error_handlers(app)
    register_blueprints(app)
    register_commands(app)

    if app.config.get("ENVIRONMENT") == "development":
        with app.app_context():
            db.create_all()

    logger.info(f"{app.config['APP_NAME']} started in {app.config['ENVIRONMENT']} mode")
    return app
