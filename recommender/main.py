"""
FastAPI application entry point for the seed recommender backend.

create_app() is the composition root: it builds the rate limiter and the
recommendation generator once and stores them on app.state, where the
request dependencies pick them up. Tests call create_app() with their own
instances instead of resetting module globals.
"""

import logging
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from recommender.config import settings
from recommender.errors import APIError, InternalServerError
from recommender.routes.health import router as health_router
from recommender.routes.recommendations import router as recommendations_router
from recommender.routes.samples import router as samples_router
from recommender.services.rate_limiter import RateLimiter
from recommender.services.recommendation_service import RecommendationGenerator

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


def _get_cors_origins() -> List[str]:
    """
    Get allowed CORS origins based on environment.

    - ENVIRONMENT=production: Uses CORS_ALLOWED_ORIGINS env var
    - anything else: Allows all origins for local dev

    Returns:
        List of allowed origin URLs, or ["*"] for development.
    """
    if settings.is_production():
        origins = settings.CORS_ALLOWED_ORIGINS
        if origins:
            logger.info(f"CORS configured for production with {len(origins)} allowed origins")
        else:
            logger.warning(
                "CORS_ALLOWED_ORIGINS not set in production. "
                "No web origins allowed. Set CORS_ALLOWED_ORIGINS for the web client."
            )
        return origins

    logger.info(f"CORS configured for {settings.ENVIRONMENT}: allowing all origins")
    return ["*"]


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Render every APIError as {"error": ..., "code": ...}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "code": exc.code.value},
        headers=exc.headers,
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render anything that escaped the routes as a generic PARSE_ERROR."""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return await api_error_handler(request, InternalServerError())


def create_app(
    rate_limiter: Optional[RateLimiter] = None,
    recommendation_generator: Optional[RecommendationGenerator] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        rate_limiter: Shared limiter (defaults to one built from settings)
        recommendation_generator: Shared generator (defaults to one built from settings)

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Seed Recommender API",
        description="AI recommendations for songs, movies and TV shows similar to user seeds",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.state.rate_limiter = rate_limiter or RateLimiter(
        max_requests=settings.RATE_LIMIT_MAX,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    )
    app.state.recommendation_generator = recommendation_generator or RecommendationGenerator(
        api_key=settings.GEMINI_API_KEY,
        model=settings.GEMINI_MODEL,
        model_label=settings.MODEL_LABEL,
        timeout_seconds=settings.GEMINI_TIMEOUT_SECONDS,
        max_retries=settings.GENERATION_MAX_RETRIES,
        retry_base_delay=settings.RETRY_BASE_DELAY_SECONDS,
    )

    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_get_cors_origins(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-RateLimit-Limit", "X-RateLimit-Remaining", "X-RateLimit-Reset"],
    )

    # Register routers
    app.include_router(health_router)
    app.include_router(recommendations_router)
    app.include_router(samples_router)

    return app


app = create_app()

logger.info("FastAPI app initialized successfully")
