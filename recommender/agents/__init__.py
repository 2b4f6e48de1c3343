"""
AI Components for the seed recommender.

Recommendation System (Single-Shot LLM)
   - Uses Gemini to infer taste signals from seeds and return similar items
   - NOT an ADK agent - uses the Google Gen AI SDK directly
   - Call, retry and parsing live in: recommender/services/recommendation_service.py
"""
