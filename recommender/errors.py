"""
Error taxonomy for the recommendation API.

Every failure a caller can see is an APIError subclass carrying an HTTP
status, a coarse ErrorCode and a message that is safe to show to users.
main.py registers one exception handler that renders them as
{"error": message, "code": code}.
"""

from enum import Enum
from typing import Dict, Optional

from fastapi import status


class ErrorCode(str, Enum):
    BAD_REQUEST = "BAD_REQUEST"
    UPSTREAM = "UPSTREAM"
    RATE_LIMIT = "RATE_LIMIT"
    PARSE_ERROR = "PARSE_ERROR"


class APIError(Exception):
    """Base class for errors rendered as an error response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: ErrorCode = ErrorCode.PARSE_ERROR
    default_message: str = "An unexpected error occurred. Please try again."

    def __init__(
        self,
        message: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.message = message or self.default_message
        self.headers = headers
        super().__init__(self.message)


class BadRequestError(APIError):
    """Client input was malformed or out of bounds. Never retried."""
    status_code = status.HTTP_400_BAD_REQUEST
    code = ErrorCode.BAD_REQUEST
    default_message = "Bad request"


class MethodNotAllowedError(APIError):
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED
    code = ErrorCode.BAD_REQUEST
    default_message = "Method not allowed. Use POST."


class RateLimitExceededError(APIError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = ErrorCode.RATE_LIMIT
    default_message = "Rate limit exceeded. Please try again later."


class UpstreamServiceError(APIError):
    """Generation failed after all retries; the cause is logged, not returned."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = ErrorCode.UPSTREAM
    default_message = "Failed to generate recommendations. Please try again."


class InternalServerError(APIError):
    pass
