"""
Service layer for the seed recommender backend.

Contains the recommendation pipeline:
- validation: shape and bounds of domain, seeds and count
- rate_limiter: per-client fixed window admission control
- recommendation_service: Gemini call, retries, JSON repair, normalization
- post_processing: deduplication and confidence ranking
- request_handler: orchestration used by the HTTP route

Services act as the glue between routes (HTTP layer) and the LLM.
"""

from .post_processing import remove_duplicates, sort_by_confidence
from .rate_limiter import RateLimiter, RateLimitResult
from .recommendation_service import (
    ConfigurationError,
    GenerationError,
    RecommendationGenerator,
    ResponseParseError,
)
from .request_handler import handle_recommendation_request, parse_recommendation_request
from .validation import (
    normalize_seed,
    validate_count,
    validate_domain,
    validate_seed_title,
    validate_seeds,
)

__all__ = [
    "remove_duplicates",
    "sort_by_confidence",
    "RateLimiter",
    "RateLimitResult",
    "ConfigurationError",
    "GenerationError",
    "RecommendationGenerator",
    "ResponseParseError",
    "handle_recommendation_request",
    "parse_recommendation_request",
    "normalize_seed",
    "validate_count",
    "validate_domain",
    "validate_seed_title",
    "validate_seeds",
]
