"""
Error envelope middleware - every error leaves as an ErrorResponse body.

{
    "error": "NOT_FOUND",
    "message": "The requested URL was not found on the server.",
    "requestId": "uuid"
}

Contract routes build their own error bodies in the dispatcher; these
handlers cover plain Flask routes and anything that escapes them.
"""

import logging

from flask import Flask, g, jsonify
from werkzeug.exceptions import HTTPException

from api.serializers.response import error_body


logger = logging.getLogger('api.middleware.error')


# Error codes reference
ERROR_CODES = {
    # Client errors (4xx)
    "BAD_REQUEST": 400,
    "VALIDATION_ERROR": 400,
    "NOT_FOUND": 404,
    "METHOD_NOT_ALLOWED": 405,
    "UNSUPPORTED_MEDIA_TYPE": 415,

    # Server errors (5xx)
    "INTERNAL_ERROR": 500,
}


def setup_error_handlers(app: Flask) -> None:
    """
    Set up standardized error handlers on Flask app.

    Handles:
    - HTTP exceptions (404, 405, ...) keeping their status code
    - Unhandled Python exceptions as 500 INTERNAL_ERROR

    Args:
        app: Flask application instance
    """

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        """Handle Flask/Werkzeug HTTP exceptions."""
        # "Not Found" -> "NOT_FOUND"
        code = error.name.upper().replace(' ', '_')
        return make_error_response(code, error.description, status_code=error.code)

    @app.errorhandler(Exception)
    def handle_generic_error(error):
        """Handle unhandled Python exceptions."""
        request_id = getattr(g, 'request_id', None)

        logger.exception(
            f"Unhandled error: {error}",
            extra={
                "event": "unhandled_error",
                "request_id": request_id,
                "error_type": type(error).__name__,
            }
        )
        return make_error_response("INTERNAL_ERROR", "An unexpected error occurred")


def make_error_response(code: str, message: str = None, status_code: int = None, details=None):
    """
    Create a standardized error response.

    Args:
        code: Error code (e.g., "NOT_FOUND")
        message: Human-readable error message
        status_code: HTTP status code (defaults based on error code)
        details: Optional field-level failures

    Returns:
        Tuple of (response, status_code)
    """
    if status_code is None:
        status_code = ERROR_CODES.get(code, 500)
    return jsonify(error_body(code, message, details=details)), status_code
