# jobmatch/error_handlers.py
import logging

from flask import jsonify, request
from werkzeug.exceptions import HTTPException

from jobmatch.errors import DomainError

logger = logging.getLogger(__name__)


def register_error_handlers(app):
    """Register all error handlers for the application"""

    @app.errorhandler(DomainError)
    def handle_domain_error(error):
        log = logger.error if error.status_code >= 500 else logger.warning
        log(f"{error.__class__.__name__}: {error.message} - Path: {request.path}")

        response = jsonify({
            "error": error.code,
            "message": error.message,
            "path": request.path,
            **error.payload,
        })
        response.status_code = error.status_code
        return response

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        """
        Handles known HTTP errors (404, 401, 403, etc.)
        """
        if e.code >= 500:
            logger.error(f"HTTP {e.code}: {e.description} - Path: {request.path}")
        return jsonify({
            "error": e.name,
            "message": e.description,
            "path": request.path,
        }), e.code

    @app.errorhandler(Exception)
    def handle_exception(e):
        """
        Handles all unexpected server errors
        Prevents stack trace leakage in responses
        """
        logger.exception(f"Unhandled exception - Path: {request.path}")
        return jsonify({
            "error": "Internal Server Error",
            "message": "Something went wrong. Please try again later.",
            "path": request.path,
        }), 500
