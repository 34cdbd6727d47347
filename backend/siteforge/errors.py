import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

from siteforge.domain.invariants.exceptions import InvariantViolation

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def __str__(self):
        return self.message


class ValidationError(AppError):
    status_code = 400


class NotAuthenticated(AppError):
    status_code = 401

    def __init__(self, message="Not authenticated"):
        super().__init__(message)


class Forbidden(AppError):
    status_code = 403


class NotFound(AppError):
    status_code = 404


class Conflict(AppError):
    status_code = 409


class StorageError(AppError):
    status_code = 502


def error_response(error_name, message, status_code):
    response = jsonify({
        "success": False,
        "error": error_name,
        "message": message
    })
    response.status_code = status_code
    return response


def register_error_handlers(app):
    @app.errorhandler(AppError)
    def handle_app_error(error):
        logger.warning("%s: %s", type(error).__name__, error.message)
        return error_response(type(error).__name__, error.message, error.status_code)

    @app.errorhandler(InvariantViolation)
    def handle_invariant_violation(error):
        logger.warning("InvariantViolation: %s", error)
        return error_response("InvariantViolation", str(error), 400)

    @app.errorhandler(ValueError)
    def handle_value_error(error):
        # Lifecycle guards raise plain ValueError on illegal transitions
        logger.warning("ValueError: %s", error)
        return error_response("ValidationError", str(error), 400)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return error_response(error.name.replace(" ", ""), error.description, error.code)

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        logger.exception("Unhandled error")
        return error_response("InternalServerError", "Internal server error", 500)
