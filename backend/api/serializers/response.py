"""
Response body helpers.

Provides the standard error body and content-type aware serialization.
"""

import json
from typing import Any, Dict, List, Optional

from flask import g, has_request_context


def error_body(
    code: str,
    message: Optional[str] = None,
    details: Optional[List[Dict[str, Any]]] = None,
    request_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Build a standardized error body (ErrorResponse shape).

    Args:
        code: Error kind (e.g., "VALIDATION_ERROR")
        message: Optional human-readable error message
        details: Optional field-level failures
        request_id: Correlation id; read from flask.g when omitted

    Returns:
        Error dict:
        {
            "error": "VALIDATION_ERROR",
            "message": "...",
            "details": [...],
            "requestId": "..."
        }
    """
    body: Dict[str, Any] = {"error": code}

    if message:
        body["message"] = message
    if details:
        body["details"] = details

    if request_id is None and has_request_context():
        request_id = getattr(g, 'request_id', None)
    if request_id:
        body["requestId"] = request_id

    return body


def serialize(payload: Any, content_type: str) -> bytes:
    """
    Serialize a JSON-ready payload for the declared content type.

    JSON types (application/json, application/*+json) are dumped as UTF-8
    JSON; text types are written as-is.

    Raises:
        ValueError: If the content type has no serializer
    """
    mime = content_type.split(';', 1)[0].strip().lower()

    if mime == "application/json" or mime.endswith("+json"):
        return json.dumps(payload, ensure_ascii=False).encode("utf-8")
    if mime.startswith("text/"):
        return str(payload).encode("utf-8")

    raise ValueError(f"No serializer for content type '{content_type}'")
