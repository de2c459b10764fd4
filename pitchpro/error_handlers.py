"""Render application errors as JSON."""

from flask import Blueprint, current_app, jsonify
from flask_wtf.csrf import CSRFError
from google.api_core.exceptions import GoogleAPIError

from .errors import (
    AccessDeniedError,
    AppError,
    AuthenticationError,
    NotFoundError,
    SearchNotConfiguredError,
    ValidationError,
)

error_handlers_bp = Blueprint("error_handlers", __name__)


def _error_response(message, status_code, **extra):
    return jsonify({"status": "error", "message": message, **extra}), status_code


@error_handlers_bp.app_errorhandler(ValidationError)
def handle_validation_error(error):
    """Handles validation errors."""
    current_app.logger.warning(f"Validation Error: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(NotFoundError)
def handle_not_found_error(error):
    """Handles not found errors."""
    current_app.logger.warning(f"Not Found Error: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(AccessDeniedError)
def handle_access_denied_error(error):
    current_app.logger.warning(f"Access Denied: {error.message}")
    return _error_response(error.message, error.status_code, access_denied=True)


@error_handlers_bp.app_errorhandler(AuthenticationError)
def handle_authentication_error(error):
    current_app.logger.warning(f"Authentication Error: {error.message}")
    return _error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Handles generic application errors, e.g. failed loads and searches."""
    current_app.logger.error(f"Application Error: {error.message}")
    retryable = error.status_code >= 500 and not isinstance(  # noqa: PLR2004
        error, SearchNotConfiguredError
    )
    return _error_response(error.message, error.status_code, retryable=retryable)


@error_handlers_bp.app_errorhandler(GoogleAPIError)
def handle_firestore_error(e):
    """Handles Firestore errors that escaped the services."""
    current_app.logger.error(f"Firestore Error: {e}")
    # Avoid exposing raw backend error details to the user
    return _error_response(
        "Failed to load data. Please reload the page.", 503, retryable=True
    )


@error_handlers_bp.app_errorhandler(404)
def handle_404(e):
    """Handles generic 404 errors for routes that don't exist."""
    return _error_response("Not found.", 404)


@error_handlers_bp.app_errorhandler(500)
def handle_500(e):
    """Handles unexpected server errors."""
    current_app.logger.error(f"Internal Server Error: {e}")
    return _error_response("An unexpected error occurred.", 500)


@error_handlers_bp.app_errorhandler(CSRFError)
def handle_csrf_error(e):
    """
    Handles CSRF errors, which usually indicate a session timeout or a missing
    token.
    """
    current_app.logger.warning(f"CSRF Error: {e.description}")
    return _error_response(
        "Your session may have expired. Please try your action again.", 400
    )
