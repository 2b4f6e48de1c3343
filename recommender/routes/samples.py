"""
Sample seed sets shown by the UI when a page has no seeds yet.
"""

from fastapi import APIRouter

from recommender.errors import BadRequestError
from recommender.schemas.recommendations import SampleSeedsResponse, Seed
from recommender.services.validation import validate_domain
from recommender.utils.constants import SAMPLE_SEEDS, Domain

router = APIRouter(
    prefix="/api",
    tags=["recommendations"]
)


@router.get(
    "/samples/{domain}",
    response_model=SampleSeedsResponse,
    summary="Sample seeds for a domain",
)
async def get_sample_seeds(domain: str) -> SampleSeedsResponse:
    """Return the five sample seeds for songs, movies or tvshows."""
    if not validate_domain(domain):
        raise BadRequestError('Domain must be one of "songs", "movies" or "tvshows"')

    domain_tag = Domain(domain)
    return SampleSeedsResponse(
        domain=domain_tag,
        seeds=[Seed(**seed) for seed in SAMPLE_SEEDS[domain_tag]],
    )
