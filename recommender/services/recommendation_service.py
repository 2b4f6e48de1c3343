"""
Recommendation Service - Gemini seed-based recommendations

This service turns a list of seeds into typed recommendations using Google's
Gemini model.

Architecture:
- Pattern: Single-shot LLM call, retried with exponential backoff (tenacity)
- Model: Gemini 2.5 Flash
- API: Google Gen AI Python SDK (google-genai)
- Temperature: 0.4 on the first attempt, 0.6 on retries (more variety after
  a malformed or unsatisfying answer)
- Output: JSON parsed from text, repaired when the model gets the syntax wrong

Model output is untrusted. Every item is normalized on the way in: titles are
required, numbers are clamped, strings are truncated and the domain's creator
field is filled with a default when missing.
"""

import asyncio
import functools
import json
import logging
import math
import re
from typing import Any, Dict, List, Optional

from google import genai
from google.genai import types
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from recommender.agents.recommendation.prompts import build_recommendation_prompt
from recommender.schemas.recommendations import (
    RECOMMENDATION_MODELS,
    Recommendation,
    RecommendationResponse,
    ResponseMeta,
    Seed,
)
from recommender.utils.constants import (
    DEFAULT_CONFIDENCE,
    DEFAULT_WHY,
    DEFAULT_YEAR,
    MAX_GENRES,
    MAX_WHY_LENGTH,
    MAX_YEAR,
    MIN_YEAR,
    UNKNOWN_CREATORS,
    Domain,
)

logger = logging.getLogger(__name__)

INITIAL_TEMPERATURE = 0.4
RETRY_TEMPERATURE = 0.6
MAX_OUTPUT_TOKENS = 8192
TOP_P = 0.8
TOP_K = 40

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")
_BARE_KEY_RE = re.compile(r"([{,]\s*)([a-zA-Z_][a-zA-Z0-9_]*)\s*:")
_SINGLE_QUOTED_VALUE_RE = re.compile(r":\s*'([^']*)'")


class GenerationError(Exception):
    """Gemini did not produce a usable response within the allowed attempts."""


class ResponseParseError(GenerationError):
    """Model output could not be turned into the expected JSON object."""


class ConfigurationError(GenerationError):
    """The Gemini API key is missing. Not retryable."""


# =============================================================================
# PARSING AND NORMALIZATION
# =============================================================================

def _repair_json(text: str) -> str:
    """Fix the syntax slips LLMs make most often."""
    text = _TRAILING_COMMA_RE.sub(r"\1", text)
    text = _BARE_KEY_RE.sub(r'\1"\2":', text)
    return _SINGLE_QUOTED_VALUE_RE.sub(r':"\1"', text)


def parse_ai_response(text: str) -> Any:
    """
    Parse model text as JSON.

    Tries, in order: the text as-is; the span from the first "{" to the last
    "}" (drops markdown fences and chatter); that span after light repair
    (trailing commas, bare keys, single-quoted values). The first stage that
    parses wins.

    Raises:
        ResponseParseError: If no stage produces valid JSON
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    match = _JSON_OBJECT_RE.search(text)
    if not match:
        raise ResponseParseError("Could not extract valid JSON from response")

    candidate = match.group(0)
    try:
        return json.loads(candidate)
    except json.JSONDecodeError:
        pass

    try:
        return json.loads(_repair_json(candidate))
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"Could not repair JSON in response: {e}") from e


def _is_number(value: Any) -> bool:
    # JSON integers are unbounded; only floats can be inf or nan
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def _clean_genres(raw: Any) -> List[str]:
    if not isinstance(raw, list):
        return []
    genres = []
    for genre in raw[:MAX_GENRES]:
        if isinstance(genre, str):
            genres.append(genre)
        elif _is_number(genre):
            genres.append(str(genre))
    return genres


def normalize_recommendation(item: Any, domain: Domain) -> Optional[Recommendation]:
    """
    Build a typed recommendation from one raw model item.

    Returns None for items that are not objects or lack a non-empty title;
    callers drop those rather than failing the whole response.
    """
    if not isinstance(item, dict):
        return None

    title = item.get("title")
    if not isinstance(title, str) or not title.strip():
        return None

    model_cls = RECOMMENDATION_MODELS[domain]

    year = item.get("year")
    year = int(max(MIN_YEAR, min(MAX_YEAR, year))) if _is_number(year) else DEFAULT_YEAR

    why = item.get("why")
    why = why[:MAX_WHY_LENGTH] if isinstance(why, str) else DEFAULT_WHY

    confidence = item.get("confidence")
    confidence = float(max(0.0, min(1.0, confidence))) if _is_number(confidence) else DEFAULT_CONFIDENCE

    creator = item.get(model_cls.creator_field)
    creator = creator.strip() if isinstance(creator, str) else ""

    return model_cls(
        title=title.strip(),
        year=year,
        genres=_clean_genres(item.get("genres")),
        why=why,
        confidence=confidence,
        **{model_cls.creator_field: creator or UNKNOWN_CREATORS[domain]},
    )


# =============================================================================
# GENERATOR
# =============================================================================

def _log_failed_attempt(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception()
    logger.warning(
        f"AI engine error (attempt {retry_state.attempt_number}): {type(error).__name__}: {error}"
    )


class RecommendationGenerator:
    """
    Calls Gemini and turns its answer into a RecommendationResponse.

    One instance is created at startup and shared by all requests. The SDK
    client is created on first use; tests pass `client` directly.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        model_label: str = "ai-engine",
        timeout_seconds: float = 30.0,
        max_retries: int = 2,
        retry_base_delay: float = 0.1,
        client: Optional[genai.Client] = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.model_label = model_label
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay
        self._client = client

    def _get_client(self) -> genai.Client:
        if self._client is not None:
            return self._client

        if not self.api_key:
            raise ConfigurationError(
                "GEMINI_API_KEY is not configured. "
                "Please set it in your .env file to get recommendations."
            )

        self._client = genai.Client(
            api_key=self.api_key,
            http_options=types.HttpOptions(timeout=int(self.timeout_seconds * 1000)),
        )
        logger.info("Gemini client initialized successfully for recommendations")
        return self._client

    async def _call_model(self, prompt: str, temperature: float) -> str:
        client = self._get_client()
        config = types.GenerateContentConfig(
            temperature=temperature,
            max_output_tokens=MAX_OUTPUT_TOKENS,
            top_p=TOP_P,
            top_k=TOP_K,
        )

        # The SDK call blocks; keep it off the event loop
        loop = asyncio.get_running_loop()
        response = await asyncio.wait_for(
            loop.run_in_executor(
                None,
                functools.partial(
                    client.models.generate_content,
                    model=self.model,
                    contents=prompt,
                    config=config,
                ),
            ),
            timeout=self.timeout_seconds,
        )

        text = (response.text or "").strip()
        if not text:
            raise ResponseParseError("Empty text in Gemini response")
        return text

    def _build_response(
        self, text: str, domain: Domain, seeds: List[Seed], count: int
    ) -> RecommendationResponse:
        parsed = parse_ai_response(text)

        if not isinstance(parsed, dict) or not isinstance(parsed.get("items"), list):
            raise ResponseParseError("Invalid response structure: missing items array")

        meta: Dict[str, Any] = parsed.get("meta") if isinstance(parsed.get("meta"), dict) else {}
        model_name = meta.get("model")

        items = [
            recommendation
            for recommendation in (normalize_recommendation(item, domain) for item in parsed["items"])
            if recommendation is not None
        ][:count]

        return RecommendationResponse(
            items=items,
            meta=ResponseMeta.model_validate({
                **meta,
                "seed_count": len(seeds),
                "requested": count,
                "model": model_name if isinstance(model_name, str) and model_name else self.model_label,
            }),
        )

    async def generate(
        self, domain: Domain, seeds: List[Seed], count: int
    ) -> RecommendationResponse:
        """
        Generate recommendations for normalized seeds.

        Args:
            domain: Content category of the seeds
            seeds: 1-5 normalized seeds
            count: Number of items wanted (1-20)

        Returns:
            RecommendationResponse with at most `count` normalized items

        Raises:
            ConfigurationError: If no API key is configured (never retried)
            GenerationError: If every attempt failed
        """
        domain = Domain(domain)
        prompt = build_recommendation_prompt(domain, seeds, count)

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(multiplier=self.retry_base_delay, min=0),
            retry=retry_if_not_exception_type(ConfigurationError),
            before_sleep=_log_failed_attempt,
            sleep=asyncio.sleep,
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    attempt_number = attempt.retry_state.attempt_number
                    temperature = INITIAL_TEMPERATURE if attempt_number == 1 else RETRY_TEMPERATURE
                    text = await self._call_model(prompt, temperature)
                    logger.debug(f"Raw response preview: {text[:500]}")
                    response = self._build_response(text, domain, seeds, count)
        except ConfigurationError:
            raise
        except Exception as e:
            logger.warning(f"AI engine error (final attempt): {type(e).__name__}: {e}")
            raise GenerationError("Failed to get recommendations from AI engine") from e

        logger.info(
            f"Gemini returned {len(response.items)} usable items "
            f"(attempt {attempt_number}, domain={domain.value})"
        )
        return response
