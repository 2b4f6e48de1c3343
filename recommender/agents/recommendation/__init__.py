"""
Recommendation System - Single-Shot LLM Architecture

This module contains the prompt templates for the Gemini-based recommender.

The service layer is in:
- recommender/services/recommendation_service.py

Prompt templates are in:
- recommender/agents/recommendation/prompts.py
"""

from recommender.agents.recommendation.prompts import (
    PROMPT_TEMPLATES,
    build_recommendation_prompt,
)

__all__ = [
    "PROMPT_TEMPLATES",
    "build_recommendation_prompt",
]
