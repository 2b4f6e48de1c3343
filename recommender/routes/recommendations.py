"""
FastAPI routes for the recommendation endpoint.

Endpoints:
- POST /api/recommend: Recommendations similar to up to five seeds
- GET/PUT/DELETE/PATCH /api/recommend: 405 with a BAD_REQUEST body
"""

from fastapi import APIRouter, Depends, Request, Response

from recommender.dependencies import enforce_rate_limit, get_recommendation_generator
from recommender.errors import APIError, BadRequestError, InternalServerError, MethodNotAllowedError
from recommender.schemas import ErrorResponse
from recommender.schemas.recommendations import RecommendationResponse
from recommender.services.rate_limiter import RateLimitResult
from recommender.services.recommendation_service import RecommendationGenerator
from recommender.services.request_handler import handle_recommendation_request
from recommender.utils.logging import get_logger

logger = get_logger(__name__)

# Create router
router = APIRouter(
    prefix="/api",
    tags=["recommendations"]
)


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.post(
    "/recommend",
    response_model=RecommendationResponse,
    status_code=200,
    summary="Recommend items similar to the seeds",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid JSON or invalid domain/seeds/count"},
        429: {"model": ErrorResponse, "description": "Too many requests from this client"},
        500: {"model": ErrorResponse, "description": "Unexpected server error"},
        503: {"model": ErrorResponse, "description": "Generation failed after retries"},
    },
    description="""
    Returns AI-generated recommendations similar to the given seeds.

    **Request body:** `{"domain": "songs"|"movies"|"tvshows", "seeds": [{"title", "by"?}], "count": 1-20}`

    **Flow:**
    1. Rate limit check (10 requests per 15 minutes per client)
    2. Parse JSON body
    3. Validate domain, seeds (1-5) and count (1-20)
    4. Generate with Gemini (up to 3 attempts)
    5. Deduplicate and sort by confidence
    6. Respond with X-RateLimit-* headers

    Fewer items than requested is not an error.
    """
)
async def recommend_endpoint(
    request: Request,
    response: Response,
    rate_limit: RateLimitResult = Depends(enforce_rate_limit),
    generator: RecommendationGenerator = Depends(get_recommendation_generator),
) -> RecommendationResponse:
    """
    Recommendation endpoint.

    - Rate limit: Handled by enforce_rate_limit dependency
    - Parse: JSON body read here so malformed JSON maps to BAD_REQUEST
    - Validate/Generate/Post-process: request_handler service
    """
    try:
        payload = await request.json()
    except ValueError:
        raise BadRequestError("Invalid JSON in request body")

    try:
        result = await handle_recommendation_request(payload, generator)
    except APIError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in recommendation API: {e}", exc_info=True)
        raise InternalServerError() from e

    response.headers.update(rate_limit.headers())
    logger.info(f"Returning {len(result.items)} recommendations")
    return result


@router.api_route(
    "/recommend",
    methods=["GET", "PUT", "DELETE", "PATCH"],
    status_code=405,
    include_in_schema=False,
)
async def recommend_method_not_allowed() -> None:
    raise MethodNotAllowedError()
