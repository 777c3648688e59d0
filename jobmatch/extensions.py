# jobmatch/extensions.py
"""
Flask extensions initialization module.
"""

import logging

from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
jwt = JWTManager()
cors = CORS()

logger = logging.getLogger(__name__)


def init_extensions(app):
    """Initialize all Flask extensions."""
    db.init_app(app)
    logger.info("SQLAlchemy initialized")

    jwt.init_app(app)
    logger.info("JWT Manager initialized")

    init_cors(app)

    return app


def init_cors(app):
    """Enable CORS for API routes only, limited to the configured frontend."""
    frontend_url = app.config.get("FRONTEND_URL")

    if not frontend_url:
        logger.warning("FRONTEND_URL not set, CORS will be disabled")
        return

    if frontend_url == "*" and app.config.get("ENVIRONMENT") == "production":
        raise RuntimeError("Wildcard CORS origin '*' is not allowed in production")

    cors.init_app(
        app,
        resources={
            r"/api/*": {
                "origins": frontend_url,
                "allow_headers": ["Content-Type", "Authorization", "X-Request-ID"],
                "expose_headers": ["X-Request-ID"],
                "methods": ["GET", "POST", "OPTIONS"],
                "max_age": 600,
            }
        },
    )
    logger.info(f"CORS configured for origin {frontend_url}")
