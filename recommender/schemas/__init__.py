"""
Pydantic schemas for API request and response validation.

Error bodies share one shape, defined here: {"error": str, "code": ErrorCode}.
"""

from pydantic import BaseModel

from recommender.errors import ErrorCode


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""
    error: str
    code: ErrorCode
