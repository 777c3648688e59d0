from datetime import datetime

from flask import Blueprint, current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from jobmatch.extensions import db

bp = Blueprint("health", __name__)


def check_database():
    try:
        db.session.execute(text("SELECT 1"))
        return {"status": "ok"}
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Database health check failed: {e}")
        return {"status": "error", "message": "Database connection failed"}


@bp.get("/health")
def health():
    """
    Health check endpoint that verifies API and database status.
    """
    database = check_database()
    healthy = database["status"] == "ok"

    return jsonify({
        "status": "ok" if healthy else "degraded",
        "api": "ok",
        "database": database,
        "version": current_app.config.get("APP_VERSION"),
        "timestamp": datetime.utcnow().isoformat(),
    }), 200 if healthy else 503
