"""
Request ID middleware - X-Request-ID correlation.

Every request gets an id in flask.g.request_id:
- the client's X-Request-ID header when it looks like an id
- otherwise a fresh UUID4

The id is echoed in the X-Request-ID response header and in error bodies.
"""

import re
import uuid

from flask import Flask, g, request

REQUEST_ID_HEADER = 'X-Request-ID'

# Client-supplied ids end up in logs; keep them short and printable.
_VALID_REQUEST_ID = re.compile(r'^[A-Za-z0-9._\-]{1,128}$')


def setup_request_id_middleware(app: Flask) -> None:
    """
    Set up request ID middleware on Flask app.

    Args:
        app: Flask application instance
    """

    @app.before_request
    def inject_request_id():
        g.request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))

    @app.after_request
    def add_request_id_header(response):
        if hasattr(g, 'request_id'):
            response.headers[REQUEST_ID_HEADER] = g.request_id
        return response


def resolve_request_id(header_value) -> str:
    """Return the client id if acceptable, else a new UUID4 string."""
    if header_value and _VALID_REQUEST_ID.match(header_value):
        return header_value
    return str(uuid.uuid4())
