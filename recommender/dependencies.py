"""
FastAPI dependency functions for the recommendation API.

Shared state (rate limiter, recommendation generator) is created once by
create_app() and stored on app.state; these dependencies hand it to the
request-scoped code. Rate limiting runs here, before the request body is
read.
"""

import logging

from fastapi import Depends, Request

from recommender.errors import RateLimitExceededError
from recommender.services.rate_limiter import RateLimiter, RateLimitResult
from recommender.services.recommendation_service import RecommendationGenerator

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"


def get_client_key(request: Request) -> str:
    """
    Identify the caller for rate limiting.

    Uses the first address in X-Forwarded-For, then X-Real-IP, then the
    "unknown" sentinel (all unidentified callers share one bucket).
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        ip = forwarded.split(",")[0]
    else:
        ip = request.headers.get("x-real-ip") or UNKNOWN_CLIENT
    return ip.strip() or UNKNOWN_CLIENT


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


def get_recommendation_generator(request: Request) -> RecommendationGenerator:
    return request.app.state.recommendation_generator


async def enforce_rate_limit(
    request: Request,
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
) -> RateLimitResult:
    """
    Admit the request or reject it with 429.

    Returns:
        RateLimitResult: Used by the route to attach X-RateLimit-* headers

    Raises:
        RateLimitExceededError: When the client used up its window
    """
    client_key = get_client_key(request)
    result = rate_limiter.check(client_key)

    if not result.allowed:
        logger.warning(f"Rate limit exceeded for client={client_key}")
        raise RateLimitExceededError(headers=result.headers())

    return result
