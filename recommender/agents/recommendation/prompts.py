"""
Recommendation Prompt Templates

Contains the per-domain prompt templates and the prompt builder for the
Recommendation Generator.

Architecture:
- Pattern: Single-shot LLM call, JSON parsed from the response text
- Model: Gemini 2.5 Flash
- Temperature: 0.4 on the first attempt, 0.6 on retries
- Output: One minified JSON object {"items": [...], "meta": {...}}

Prompt Engineering Pattern:
- Uses XML tags for structured content
- One template per domain; each frames the same task ("infer taste signals
  from the seeds, recommend similar items") in that medium's vocabulary
- Seeds are embedded as compact JSON, count as a bare integer
"""

import json
from typing import Dict, List

from recommender.schemas.recommendations import Seed
from recommender.utils.constants import MAX_WHY_LENGTH, Domain

# =============================================================================
# TEMPLATES
# =============================================================================
# Placeholders: {seeds_json}, {count}, {why_limit}. Literal JSON braces are doubled.
# =============================================================================

SONG_PROMPT_TEMPLATE = """You are a music recommender.

<task>
Given up to five seed songs (title and optional artist), infer the listener's taste signals
(mood, tempo, genre, era, production, vocal style, cultural niche) and recommend similar songs.
</task>

<seeds>
{seeds_json}
</seeds>

<requested>{count}</requested>

<rules>
1. Produce EXACTLY {count} items. If the seeds pull in contradictory directions, still produce
   {count} items but lower their confidence and say so briefly in "why".
2. Never recommend a seed itself and never repeat an item.
3. Keep "confidence" between 0 and 1.
4. Prefer globally recognizable songs where possible.
5. Vary the angle of each "why": genre blend, vocal style, production, era, mood,
   instrumentation or cultural context. Example: "Dreamy shoegaze textures with ethereal vocals".
6. Keep every "why" under {why_limit} characters.
</rules>

<output_format>
Return ONLY minified JSON with this exact structure. No markdown, no prose.
{{"items":[{{"title":"String","artist":"String","year":1999,"genres":["String"],"why":"String","confidence":0.0}}],"meta":{{"seed_count":0,"requested":{count},"model":"ai-engine"}}}}
</output_format>"""

MOVIE_PROMPT_TEMPLATE = """You are a film recommender.

<task>
Given up to five seed films (title and optional director), infer the viewer's taste signals
(tone, themes, pacing, cinematography, period, country, language) and recommend similar films.
</task>

<seeds>
{seeds_json}
</seeds>

<requested>{count}</requested>

<rules>
1. Produce EXACTLY {count} items. If that is impossible, still fill the list but lower the
   confidence and explain the tension in "why".
2. Never recommend a seed itself and never repeat an item.
3. Keep "confidence" between 0 and 1.
4. Mix in a few non-obvious choices when confidence is high.
5. Vary the angle of each "why": visual style, narrative structure, thematic depth,
   character work, directorial technique or cultural impact.
   Example: "Non-linear storytelling with baroque visual flair".
6. Keep every "why" under {why_limit} characters.
</rules>

<output_format>
Return ONLY minified JSON with this exact structure. No markdown, no prose.
{{"items":[{{"title":"String","director":"String","year":1999,"genres":["String"],"why":"String","confidence":0.0}}],"meta":{{"seed_count":0,"requested":{count},"model":"ai-engine"}}}}
</output_format>"""

TVSHOW_PROMPT_TEMPLATE = """You are a TV series recommender.

<task>
Given up to five seed TV shows (title and optional creator), infer the viewer's taste signals
(narrative style, character development, pacing, themes, tone, setting, format) and recommend
similar series. Consider both streaming and broadcast series.
</task>

<seeds>
{seeds_json}
</seeds>

<requested>{count}</requested>

<rules>
1. Produce EXACTLY {count} items. If that is impossible, still fill the list but lower the
   confidence and explain the tension in "why".
2. Never recommend a seed itself and never repeat an item.
3. Keep "confidence" between 0 and 1.
4. Mix in a few non-obvious choices when confidence is high.
5. Vary the angle of each "why": character arcs, world-building, dialogue, narrative
   complexity, tonal balance, production values or cultural themes.
   Example: "Witty dialogue meets supernatural mystery".
6. Keep every "why" under {why_limit} characters.
</rules>

<output_format>
Return ONLY minified JSON with this exact structure. No markdown, no prose.
{{"items":[{{"title":"String","creator":"String","year":1999,"genres":["String"],"why":"String","confidence":0.0}}],"meta":{{"seed_count":0,"requested":{count},"model":"ai-engine"}}}}
</output_format>"""

PROMPT_TEMPLATES: Dict[Domain, str] = {
    Domain.SONGS: SONG_PROMPT_TEMPLATE,
    Domain.MOVIES: MOVIE_PROMPT_TEMPLATE,
    Domain.TVSHOWS: TVSHOW_PROMPT_TEMPLATE,
}


# =============================================================================
# PROMPT BUILDER
# =============================================================================

def serialize_seeds(seeds: List[Seed]) -> str:
    """Compact JSON list of seeds; an absent `by` is left out entirely."""
    return json.dumps(
        [seed.model_dump(exclude_none=True) for seed in seeds],
        ensure_ascii=False,
        separators=(",", ":"),
    )


def build_recommendation_prompt(domain: Domain, seeds: List[Seed], count: int) -> str:
    """
    Build the prompt for one recommendation request.

    Args:
        domain: Selects the template (songs, movies, tvshows)
        seeds: Normalized seeds
        count: Number of items requested

    Returns:
        str: Prompt text ready to be sent to Gemini
    """
    template = PROMPT_TEMPLATES[Domain(domain)]
    return template.format(
        seeds_json=serialize_seeds(seeds),
        count=count,
        why_limit=MAX_WHY_LENGTH,
    )
