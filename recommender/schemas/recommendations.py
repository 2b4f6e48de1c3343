"""
Pydantic schemas for the recommendation endpoint.

These models define the request/response contracts for POST /api/recommend.
The request body is validated by hand (see services/validation.py) so that
every seed error can be reported at once; the models here describe the shapes
that leave the validator and the generator.
"""

from typing import ClassVar, Dict, List, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field

from recommender.utils.constants import (
    MAX_COUNT,
    MAX_GENRES,
    MAX_SEEDS,
    MAX_WHY_LENGTH,
    MAX_YEAR,
    MIN_COUNT,
    MIN_SEEDS,
    MIN_YEAR,
    Domain,
)

# ============================================================================
# REQUEST MODELS
# ============================================================================

class Seed(BaseModel):
    """
    A user-provided anchor item.

    `by` is the artist for songs, the director for movies and the creator
    for TV shows. It is omitted (not blank) when the user left it empty.
    """
    model_config = ConfigDict(frozen=True)

    title: str = Field(
        ...,
        description="Trimmed title of the seed item",
        min_length=1,
        examples=["Bohemian Rhapsody", "Spirited Away"]
    )
    by: Optional[str] = Field(
        None,
        description="Optional trimmed creator name",
        examples=["Queen", "Hayao Miyazaki"]
    )


class RecommendationRequest(BaseModel):
    """Validated unit of work submitted to the generator. Never persisted."""
    domain: Domain
    seeds: List[Seed] = Field(..., min_length=MIN_SEEDS, max_length=MAX_SEEDS)
    count: int = Field(..., ge=MIN_COUNT, le=MAX_COUNT)


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class Recommendation(BaseModel):
    """
    Fields shared by every recommended item.

    Subclasses add exactly one creator field and expose it through
    `creator_name`, so callers never need to probe which field is present.
    Instances are built by the generator from clamped values and never
    mutated afterwards.
    """
    model_config = ConfigDict(frozen=True)

    creator_field: ClassVar[str] = ""

    title: str = Field(..., min_length=1)
    year: int = Field(..., ge=MIN_YEAR, le=MAX_YEAR)
    genres: List[str] = Field(default_factory=list, max_length=MAX_GENRES)
    why: str = Field(..., max_length=MAX_WHY_LENGTH)
    confidence: float = Field(..., ge=0.0, le=1.0)

    @property
    def creator_name(self) -> str:
        raise NotImplementedError


class SongRecommendation(Recommendation):
    creator_field: ClassVar[str] = "artist"

    artist: str

    @property
    def creator_name(self) -> str:
        return self.artist


class MovieRecommendation(Recommendation):
    creator_field: ClassVar[str] = "director"

    director: str

    @property
    def creator_name(self) -> str:
        return self.director


class TVShowRecommendation(Recommendation):
    creator_field: ClassVar[str] = "creator"

    creator: str

    @property
    def creator_name(self) -> str:
        return self.creator


RECOMMENDATION_MODELS: Dict[Domain, Type[Recommendation]] = {
    Domain.SONGS: SongRecommendation,
    Domain.MOVIES: MovieRecommendation,
    Domain.TVSHOWS: TVShowRecommendation,
}

AnyRecommendation = Union[SongRecommendation, MovieRecommendation, TVShowRecommendation]


class ResponseMeta(BaseModel):
    """
    Metadata describing how a response was produced.

    Extra keys the model reported are kept alongside the fields below.
    """
    model_config = ConfigDict(extra="allow")

    seed_count: int = Field(..., description="Number of seeds the request carried")
    requested: int = Field(..., description="Number of items the caller asked for")
    model: str = Field(..., description="Label of the engine that produced the items")


class RecommendationResponse(BaseModel):
    """
    Response for POST /api/recommend.

    Items are deduplicated and sorted by confidence (highest first). There may
    be fewer items than requested when the model produced unusable entries.
    """
    items: List[AnyRecommendation]
    meta: ResponseMeta

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "items": [
                    {
                        "title": "Paranoid Android",
                        "artist": "Radiohead",
                        "year": 1997,
                        "genres": ["Alternative Rock", "Art Rock"],
                        "why": "Multi-part epic structure with operatic shifts",
                        "confidence": 0.86
                    }
                ],
                "meta": {"seed_count": 1, "requested": 1, "model": "ai-engine"}
            }
        }
    )


class SampleSeedsResponse(BaseModel):
    """Response for GET /api/samples/{domain}."""
    domain: Domain
    seeds: List[Seed]
