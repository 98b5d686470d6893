"""Error response schemas.

All error responses use the same envelope: {"error": {"code": "...", "message": "..."}}.
Codes: invalid_parameter, domain_error, not_found, conflict,
repository_unavailable, internal_error.
"""

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    """Machine-readable code plus a human-readable message."""

    code: str
    message: str


class ErrorResponse(BaseModel):
    error: ErrorDetail
