"""
Tests for the Recommendation Service.

These tests verify:
- Prompt building for each domain
- The three-stage JSON parse/repair chain
- Normalization and clamping of raw model items
- Retry, backoff temperature and failure behavior of the generator

Note: These tests use a mocked Gemini client to avoid actual API calls
and ensure deterministic test behavior.
"""

import json
from unittest.mock import patch

import pytest

from recommender.agents.recommendation.prompts import build_recommendation_prompt
from recommender.schemas.recommendations import (
    MovieRecommendation,
    Seed,
    SongRecommendation,
    TVShowRecommendation,
)
from recommender.services.recommendation_service import (
    INITIAL_TEMPERATURE,
    RETRY_TEMPERATURE,
    ConfigurationError,
    GenerationError,
    RecommendationGenerator,
    ResponseParseError,
    normalize_recommendation,
    parse_ai_response,
)
from recommender.utils.constants import Domain


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def seeds():
    return [Seed(title="Hotel California", by="Eagles")]


def make_generator(client, **kwargs):
    kwargs.setdefault("retry_base_delay", 0)
    return RecommendationGenerator(api_key="test-key", client=client, **kwargs)


# =============================================================================
# UNIT TESTS: Prompt Building
# =============================================================================

class TestPromptBuilding:
    """Tests for build_recommendation_prompt."""

    def test_song_prompt_uses_artist_field(self, seeds):
        prompt = build_recommendation_prompt(Domain.SONGS, seeds, 5)
        assert "music recommender" in prompt
        assert '"artist":"String"' in prompt
        assert '"director"' not in prompt

    def test_movie_prompt_uses_director_field(self):
        prompt = build_recommendation_prompt(Domain.MOVIES, [Seed(title="Heat")], 5)
        assert "film recommender" in prompt
        assert '"director":"String"' in prompt

    def test_tvshow_prompt_uses_creator_field(self):
        prompt = build_recommendation_prompt(Domain.TVSHOWS, [Seed(title="The Wire")], 5)
        assert "TV series recommender" in prompt
        assert '"creator":"String"' in prompt

    def test_prompt_includes_seed_json(self, seeds):
        prompt = build_recommendation_prompt(Domain.SONGS, seeds, 5)
        assert '[{"title":"Hotel California","by":"Eagles"}]' in prompt

    def test_absent_by_is_omitted(self):
        prompt = build_recommendation_prompt(Domain.SONGS, [Seed(title="Hotel California")], 5)
        assert '[{"title":"Hotel California"}]' in prompt
        assert "null" not in prompt

    def test_prompt_includes_count(self, seeds):
        prompt = build_recommendation_prompt(Domain.SONGS, seeds, 17)
        assert "Produce EXACTLY 17 items" in prompt
        assert "<requested>17</requested>" in prompt
        assert '"requested":17' in prompt

    def test_prompt_keeps_non_ascii_titles(self):
        prompt = build_recommendation_prompt(Domain.MOVIES, [Seed(title="Amélie 🎬")], 3)
        assert "Amélie 🎬" in prompt

    def test_seed_with_braces_does_not_break_formatting(self):
        prompt = build_recommendation_prompt(Domain.SONGS, [Seed(title="{count} {x}")], 3)
        assert '"title":"{count} {x}"' in prompt

    def test_accepts_plain_domain_string(self, seeds):
        assert build_recommendation_prompt("tvshows", seeds, 2) == build_recommendation_prompt(
            Domain.TVSHOWS, seeds, 2
        )


# =============================================================================
# UNIT TESTS: Response Parsing
# =============================================================================

class TestParseAIResponse:
    """Tests for parse_ai_response."""

    def test_direct_json(self):
        assert parse_ai_response('{"items": []}') == {"items": []}

    def test_json_inside_markdown_fence(self):
        text = 'Here you go:\n```json\n{"items": [{"title": "Kashmir"}]}\n```\nEnjoy!'
        assert parse_ai_response(text) == {"items": [{"title": "Kashmir"}]}

    def test_trailing_commas_are_repaired(self):
        text = '{"items": [{"title": "Kashmir",},],}'
        assert parse_ai_response(text) == {"items": [{"title": "Kashmir"}]}

    def test_bare_keys_are_quoted(self):
        text = '{items: [{title: "Kashmir", confidence: 0.8}]}'
        assert parse_ai_response(text) == {"items": [{"title": "Kashmir", "confidence": 0.8}]}

    def test_single_quoted_values_are_converted(self):
        text = "{\"items\": [{\"title\": 'Kashmir', \"artist\": 'Led Zeppelin'}]}"
        assert parse_ai_response(text) == {
            "items": [{"title": "Kashmir", "artist": "Led Zeppelin"}]
        }

    def test_no_object_raises(self):
        with pytest.raises(ResponseParseError):
            parse_ai_response("Sorry, I can't help with that.")

    def test_unrepairable_raises(self):
        with pytest.raises(ResponseParseError):
            parse_ai_response('{"items": [{"title": "Kashmir"')

    def test_garbage_inside_braces_raises(self):
        with pytest.raises(ResponseParseError):
            parse_ai_response("prefix {not json at all} suffix")


# =============================================================================
# UNIT TESTS: Normalization
# =============================================================================

class TestNormalizeRecommendation:
    """Tests for normalize_recommendation."""

    def test_clamps_and_truncates(self):
        raw = {
            "title": " X ",
            "confidence": 1.5,
            "year": 1800,
            "genres": [1, 2, 3, 4, 5, 6],
            "why": "a" * 300,
        }
        item = normalize_recommendation(raw, Domain.SONGS)
        assert item.title == "X"
        assert item.confidence == 1
        assert item.year == 1900
        assert item.genres == ["1", "2", "3", "4", "5"]
        assert item.why == "a" * 220

    def test_upper_bounds(self):
        item = normalize_recommendation(
            {"title": "Future", "year": 2099, "confidence": -0.2}, Domain.MOVIES
        )
        assert item.year == 2030
        assert item.confidence == 0

    def test_defaults_for_missing_fields(self):
        item = normalize_recommendation({"title": "Kashmir"}, Domain.SONGS)
        assert item.year == 2020
        assert item.genres == []
        assert item.why == "Similar to your seeds"
        assert item.confidence == 0.5
        assert item.artist == "Unknown Artist"

    def test_defaults_for_wrong_types(self):
        item = normalize_recommendation(
            {"title": "Kashmir", "year": "1975", "genres": "rock", "why": 3,
             "confidence": "high", "artist": 9},
            Domain.SONGS,
        )
        assert item.year == 2020
        assert item.genres == []
        assert item.why == "Similar to your seeds"
        assert item.confidence == 0.5
        assert item.artist == "Unknown Artist"

    def test_boolean_is_not_a_number(self):
        item = normalize_recommendation({"title": "Kashmir", "confidence": True}, Domain.SONGS)
        assert item.confidence == 0.5

    def test_huge_integers_are_clamped(self):
        item = normalize_recommendation(
            {"title": "Kashmir", "year": 10 ** 400, "confidence": 10 ** 400}, Domain.SONGS
        )
        assert item.year == 2030
        assert item.confidence == 1.0

        item = normalize_recommendation(
            {"title": "Kashmir", "year": -(10 ** 400), "confidence": -(10 ** 400)}, Domain.SONGS
        )
        assert item.year == 1900
        assert item.confidence == 0.0

    @pytest.mark.parametrize("domain,model_cls,field,default", [
        (Domain.SONGS, SongRecommendation, "artist", "Unknown Artist"),
        (Domain.MOVIES, MovieRecommendation, "director", "Unknown Director"),
        (Domain.TVSHOWS, TVShowRecommendation, "creator", "Unknown Creator"),
    ])
    def test_domain_creator_field(self, domain, model_cls, field, default):
        named = normalize_recommendation({"title": "T1", field: "  Someone  "}, domain)
        unnamed = normalize_recommendation({"title": "T2"}, domain)
        assert isinstance(named, model_cls)
        assert named.creator_name == "Someone"
        assert unnamed.creator_name == default

    def test_other_domain_creator_field_is_ignored(self):
        item = normalize_recommendation({"title": "Heat", "artist": "Moby"}, Domain.MOVIES)
        assert item.director == "Unknown Director"
        assert "artist" not in item.model_dump()

    @pytest.mark.parametrize("raw", [
        None,
        "Kashmir",
        {},
        {"title": ""},
        {"title": "   "},
        {"title": 42},
    ])
    def test_unusable_items_are_dropped(self, raw):
        assert normalize_recommendation(raw, Domain.SONGS) is None

    def test_genre_entries_that_are_not_scalars_are_skipped(self):
        item = normalize_recommendation(
            {"title": "Kashmir", "genres": ["Rock", None, {"x": 1}, "Blues"]}, Domain.SONGS
        )
        assert item.genres == ["Rock", "Blues"]


# =============================================================================
# INTEGRATION TESTS: Mocked Gemini API
# =============================================================================

class TestRecommendationGenerator:
    """Generator tests with mocked Gemini API."""

    @pytest.mark.asyncio
    async def test_successful_generation(self, gemini_client_factory, seeds, song_response_text):
        client = gemini_client_factory(song_response_text)
        generator = make_generator(client)

        result = await generator.generate(Domain.SONGS, seeds, 5)

        assert len(result.items) == 5
        assert all(isinstance(item, SongRecommendation) for item in result.items)
        assert result.meta.requested == 5
        assert result.meta.seed_count == 1
        assert result.meta.model == "ai-engine"
        assert client.models.generate_content.call_count == 1

    @pytest.mark.asyncio
    async def test_first_attempt_uses_low_temperature(self, gemini_client_factory, seeds, song_response_text):
        client = gemini_client_factory(song_response_text)
        generator = make_generator(client, model="gemini-test")

        await generator.generate(Domain.SONGS, seeds, 5)

        kwargs = client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-test"
        assert "Hotel California" in kwargs["contents"]
        config = kwargs["config"]
        assert config.temperature == INITIAL_TEMPERATURE
        assert config.max_output_tokens == 8192
        assert config.top_p == 0.8
        assert config.top_k == 40

    @pytest.mark.asyncio
    async def test_truncates_to_requested_count(self, gemini_client_factory, seeds, song_response_text):
        generator = make_generator(gemini_client_factory(song_response_text))
        result = await generator.generate(Domain.SONGS, seeds, 3)
        assert len(result.items) == 3

    @pytest.mark.asyncio
    async def test_missing_meta_gets_defaults(self, gemini_client_factory, seeds, song_items):
        text = json.dumps({"items": song_items})
        generator = make_generator(gemini_client_factory(text), model_label="custom-label")

        result = await generator.generate(Domain.SONGS, seeds, 5)

        assert result.meta.model_dump() == {
            "seed_count": 1, "requested": 5, "model": "custom-label"
        }

    @pytest.mark.asyncio
    async def test_invalid_items_are_dropped_not_retried(self, gemini_client_factory, seeds):
        text = json.dumps({"items": [{"title": "Kashmir"}, {"title": ""}, "junk"]})
        client = gemini_client_factory(text)
        generator = make_generator(client)

        result = await generator.generate(Domain.SONGS, seeds, 5)

        assert [item.title for item in result.items] == ["Kashmir"]
        assert client.models.generate_content.call_count == 1

    @pytest.mark.asyncio
    async def test_retries_after_malformed_output(self, gemini_client_factory, seeds, song_response_text):
        client = gemini_client_factory("I cannot answer that", song_response_text)
        generator = make_generator(client)

        result = await generator.generate(Domain.SONGS, seeds, 5)

        assert len(result.items) == 5
        calls = client.models.generate_content.call_args_list
        assert len(calls) == 2
        assert calls[0].kwargs["config"].temperature == INITIAL_TEMPERATURE
        assert calls[1].kwargs["config"].temperature == RETRY_TEMPERATURE
        assert RETRY_TEMPERATURE > INITIAL_TEMPERATURE

    @pytest.mark.asyncio
    async def test_retries_after_missing_items(self, gemini_client_factory, seeds, song_response_text):
        client = gemini_client_factory('{"recommendations": []}', song_response_text)
        result = await make_generator(client).generate(Domain.SONGS, seeds, 5)
        assert len(result.items) == 5

    @pytest.mark.asyncio
    async def test_retries_after_network_error(self, gemini_client_factory, seeds, song_response_text):
        client = gemini_client_factory(ConnectionError("reset by peer"), song_response_text)
        result = await make_generator(client).generate(Domain.SONGS, seeds, 5)
        assert len(result.items) == 5

    @pytest.mark.asyncio
    async def test_retries_after_empty_text(self, gemini_client_factory, seeds, song_response_text):
        client = gemini_client_factory("", song_response_text)
        result = await make_generator(client).generate(Domain.SONGS, seeds, 5)
        assert len(result.items) == 5

    @pytest.mark.asyncio
    async def test_gives_up_after_three_attempts(self, gemini_client_factory, seeds):
        client = gemini_client_factory("bad", "worse", "worst", "never reached")
        generator = make_generator(client)

        with pytest.raises(GenerationError):
            await generator.generate(Domain.SONGS, seeds, 5)

        assert client.models.generate_content.call_count == 3

    @pytest.mark.asyncio
    async def test_backoff_doubles_each_attempt(self, gemini_client_factory, seeds):
        client = gemini_client_factory("bad", "worse", "worst")
        generator = make_generator(client, retry_base_delay=0.1)

        with patch("recommender.services.recommendation_service.asyncio.sleep") as mock_sleep:
            mock_sleep.return_value = None
            with pytest.raises(GenerationError):
                await generator.generate(Domain.SONGS, seeds, 5)

        delays = [call.args[0] for call in mock_sleep.call_args_list]
        assert delays == pytest.approx([0.1, 0.2])

    @pytest.mark.asyncio
    async def test_huge_year_does_not_fail_the_attempt(self, gemini_client_factory, seeds, song_items):
        huge = dict(song_items[0], title="Overflow", year=int("9" * 401))
        client = gemini_client_factory(json.dumps({"items": [song_items[1], huge]}))

        result = await make_generator(client).generate(Domain.SONGS, seeds, 5)

        assert [item.year for item in result.items] == [1975, 2030]
        assert client.models.generate_content.call_count == 1

    @pytest.mark.asyncio
    async def test_extra_meta_keys_are_kept(self, gemini_client_factory, seeds, song_items):
        text = json.dumps({
            "items": song_items,
            "meta": {"model": "gemini-x", "seed_count": 99, "note": "diverse picks"},
        })
        result = await make_generator(gemini_client_factory(text)).generate(Domain.SONGS, seeds, 5)

        assert result.meta.model_dump() == {
            "seed_count": 1, "requested": 5, "model": "gemini-x", "note": "diverse picks"
        }

    @pytest.mark.asyncio
    async def test_max_retries_zero_means_single_attempt(self, gemini_client_factory, seeds):
        client = gemini_client_factory("bad", "never reached")
        generator = make_generator(client, max_retries=0)

        with pytest.raises(GenerationError) as exc_info:
            await generator.generate(Domain.SONGS, seeds, 5)

        assert client.models.generate_content.call_count == 1
        assert isinstance(exc_info.value.__cause__, ResponseParseError)

    @pytest.mark.asyncio
    async def test_missing_api_key_is_not_retried(self, seeds):
        generator = RecommendationGenerator(api_key="", retry_base_delay=0)

        with patch("recommender.services.recommendation_service.asyncio.sleep") as mock_sleep:
            with pytest.raises(ConfigurationError):
                await generator.generate(Domain.SONGS, seeds, 5)

        mock_sleep.assert_not_called()

    @pytest.mark.asyncio
    async def test_client_is_created_once(self, gemini_client_factory, seeds, song_response_text):
        client = gemini_client_factory(song_response_text, song_response_text)
        generator = RecommendationGenerator(api_key="test-key", retry_base_delay=0)

        with patch("recommender.services.recommendation_service.genai.Client") as mock_client_cls:
            mock_client_cls.return_value = client
            await generator.generate(Domain.SONGS, seeds, 5)
            await generator.generate(Domain.SONGS, seeds, 5)

        assert mock_client_cls.call_count == 1
        assert mock_client_cls.call_args.kwargs["api_key"] == "test-key"
