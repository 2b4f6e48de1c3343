"""
Pytest configuration for the recommender backend tests.

Sets up test environment and global fixtures.
"""
import json
import os
from unittest.mock import MagicMock

import pytest

# Disable config validation during tests
# This allows tests to run without requiring real environment variables
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-api-key")


def _make_gemini_client(*texts):
    """
    Mock Gemini client whose generate_content returns the given texts in order.

    Pass an Exception instance to make that call raise instead.
    """
    responses = []
    for text in texts:
        if isinstance(text, Exception):
            responses.append(text)
        else:
            mock_response = MagicMock()
            mock_response.text = text
            responses.append(mock_response)

    mock_client = MagicMock()
    mock_client.models.generate_content.side_effect = responses
    return mock_client


@pytest.fixture
def song_items():
    """Five well-formed, distinct song items as the model would return them."""
    return [
        {"title": "Paranoid Android", "artist": "Radiohead", "year": 1997,
         "genres": ["Alternative Rock"], "why": "Multi-part epic structure", "confidence": 0.72},
        {"title": "Kashmir", "artist": "Led Zeppelin", "year": 1975,
         "genres": ["Hard Rock"], "why": "Orchestral heft and hypnotic riffs", "confidence": 0.91},
        {"title": "Life on Mars?", "artist": "David Bowie", "year": 1971,
         "genres": ["Glam Rock"], "why": "Theatrical piano balladry", "confidence": 0.65},
        {"title": "Layla", "artist": "Derek and the Dominos", "year": 1970,
         "genres": ["Blues Rock"], "why": "Two-part structure with a piano coda", "confidence": 0.84},
        {"title": "Go Your Own Way", "artist": "Fleetwood Mac", "year": 1977,
         "genres": ["Soft Rock"], "why": "West-coast harmonies and studio polish", "confidence": 0.58},
    ]


@pytest.fixture
def song_response_text(song_items):
    return json.dumps({
        "items": song_items,
        "meta": {"seed_count": 1, "requested": 5, "model": "ai-engine"},
    })


@pytest.fixture
def gemini_client_factory():
    """Factory fixture: gemini_client_factory(text_or_exception, ...) -> mock client."""
    return _make_gemini_client
