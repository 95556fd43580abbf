"""
Shared response schemas used by every contract.

ErrorResponse is the machine-readable error shape:
    {"error": "VALIDATION_ERROR", "message": "...", "details": [...]}
"""

from typing import List

from pydantic import Field

from .schema import ContractModel


class ErrorDetail(ContractModel):
    """One field-level failure inside an error response."""
    location: str = Field(
        default=None,
        description="Request part that failed (path, query, body)",
        examples=["body"],
    )
    path: str = Field(
        description="Dotted path of the failing field within the part",
        examples=["name"],
    )
    reason: str = Field(
        description="Why the field was rejected",
        examples=["Field required"],
    )


class ErrorResponse(ContractModel):
    """Error body returned for every non-2xx response."""
    error: str = Field(
        description="Error kind",
        examples=["VALIDATION_ERROR"],
    )
    message: str = Field(
        default=None,
        description="Human-readable explanation",
        examples=["1 input validation error(s)"],
    )
    details: List[ErrorDetail] = Field(
        default=None,
        description="Field-level failures (input validation only)",
    )
    requestId: str = Field(
        default=None,
        description="Correlation id, echoed in the X-Request-ID header",
    )
