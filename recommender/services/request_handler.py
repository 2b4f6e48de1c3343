"""
Request orchestration for POST /api/recommend.

Runs the steps after rate limiting and body parsing:
validate -> normalize seeds -> generate -> deduplicate -> sort -> respond.

Failures are raised as APIError subclasses so the route stays thin:
- Validation problems -> BadRequestError (message shown verbatim)
- Generator failures -> UpstreamServiceError (generic message, cause logged)
"""

import logging
from typing import Any, Dict

from recommender.errors import BadRequestError, UpstreamServiceError
from recommender.schemas.recommendations import RecommendationRequest, RecommendationResponse
from recommender.services.post_processing import remove_duplicates, sort_by_confidence
from recommender.services.recommendation_service import GenerationError, RecommendationGenerator
from recommender.services.validation import (
    normalize_seed,
    validate_count,
    validate_domain,
    validate_seeds,
)
from recommender.utils.constants import Domain

logger = logging.getLogger(__name__)


def parse_recommendation_request(payload: Any) -> RecommendationRequest:
    """
    Validate a decoded request body.

    Checks domain, seeds and count in that order and stops at the first
    failing check.

    Raises:
        BadRequestError: With the joined validation messages
    """
    if not isinstance(payload, dict):
        raise BadRequestError("Request body must be a JSON object")

    domain = payload.get("domain")
    if not validate_domain(domain):
        raise BadRequestError('Domain must be one of "songs", "movies" or "tvshows"')

    seeds = payload.get("seeds")
    seed_validation = validate_seeds(seeds)
    if not seed_validation.valid:
        raise BadRequestError(", ".join(seed_validation.errors))

    count_validation = validate_count(payload.get("count"))
    if not count_validation.valid:
        raise BadRequestError(count_validation.error)

    return RecommendationRequest(
        domain=Domain(domain),
        seeds=[normalize_seed(seed) for seed in seeds],
        count=count_validation.value,
    )


async def handle_recommendation_request(
    payload: Any,
    generator: RecommendationGenerator,
) -> RecommendationResponse:
    """
    Validate a request body and produce the final response.

    Args:
        payload: Decoded JSON body
        generator: Shared RecommendationGenerator

    Returns:
        RecommendationResponse with deduplicated items sorted by confidence

    Raises:
        BadRequestError: Invalid domain, seeds or count
        UpstreamServiceError: Generation failed after all retries
    """
    request = parse_recommendation_request(payload)
    logger.info(
        f"Recommendation requested: domain={request.domain.value} "
        f"seeds={len(request.seeds)} count={request.count}"
    )

    try:
        generated = await generator.generate(request.domain, request.seeds, request.count)
    except GenerationError as e:
        logger.error(f"Gemini API error: {e}", exc_info=True)
        raise UpstreamServiceError() from e

    items = sort_by_confidence(remove_duplicates(generated.items))

    if len(items) < request.count:
        logger.warning(f"Only got {len(items)} recommendations instead of {request.count}")

    meta: Dict[str, Any] = generated.meta.model_dump()
    meta.update(seed_count=len(request.seeds), requested=request.count)

    return RecommendationResponse(items=items, meta=meta)
