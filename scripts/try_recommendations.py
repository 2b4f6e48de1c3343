#!/usr/bin/env python3
"""
Recommendation Live Test Script

Calls the real Gemini API through the same pipeline the endpoint uses
(validation, generation, deduplication, sorting) without starting a server.

Usage:
    python scripts/try_recommendations.py
    python scripts/try_recommendations.py --domain movies --seed "Inception|Christopher Nolan" --count 8
    python scripts/try_recommendations.py --domain songs --sample
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import List

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

os.environ.setdefault("VALIDATE_CONFIG", "false")

from recommender.config import settings
from recommender.errors import APIError
from recommender.schemas.recommendations import RecommendationResponse
from recommender.services.recommendation_service import RecommendationGenerator
from recommender.services.request_handler import handle_recommendation_request
from recommender.utils.constants import SAMPLE_SEEDS, Domain

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def parse_seed(raw: str) -> dict:
    """Parse "Title|By" (or just "Title") into a raw seed dict."""
    title, _, by = raw.partition("|")
    seed = {"title": title}
    if by:
        seed["by"] = by
    return seed


def print_result(result: RecommendationResponse) -> None:
    """Pretty print the recommendation result."""
    print("\n" + "=" * 60)
    print(f"MODEL: {result.meta.model}  REQUESTED: {result.meta.requested}  GOT: {len(result.items)}")
    print("=" * 60)

    for i, item in enumerate(result.items, 1):
        print(f"--- #{i} ({item.confidence:.2f}) ---")
        print(f"  Title:   {item.title}")
        print(f"  By:      {item.creator_name}")
        print(f"  Year:    {item.year}")
        print(f"  Genres:  {', '.join(item.genres)}")
        print(f"  Why:     {item.why}")
        print()


async def run(domain: str, seeds: List[dict], count: int) -> None:
    if not settings.GEMINI_API_KEY:
        print("\nERROR: GEMINI_API_KEY environment variable not set!")
        print("   Please set it in your .env file or export it:")
        print("   export GEMINI_API_KEY=your-gemini-api-key")
        return

    generator = RecommendationGenerator(
        api_key=settings.GEMINI_API_KEY,
        model=settings.GEMINI_MODEL,
        model_label=settings.MODEL_LABEL,
        timeout_seconds=settings.GEMINI_TIMEOUT_SECONDS,
        max_retries=settings.GENERATION_MAX_RETRIES,
        retry_base_delay=settings.RETRY_BASE_DELAY_SECONDS,
    )

    print(f"\nDomain: {domain}")
    for seed in seeds:
        print(f"Seed:   {seed['title']}" + (f" / {seed['by']}" if seed.get("by") else ""))
    print(f"Count:  {count}")
    print("\nCalling Gemini API...")

    try:
        result = await handle_recommendation_request(
            {"domain": domain, "seeds": seeds, "count": count},
            generator,
        )
    except APIError as e:
        print(f"\nFAILED [{e.code.value}]: {e.message}")
        return

    print_result(result)


def main():
    parser = argparse.ArgumentParser(
        description="Try the recommendation pipeline against the real Gemini API",
    )
    parser.add_argument(
        "--domain",
        choices=[domain.value for domain in Domain],
        default=Domain.SONGS.value,
        help="Content category"
    )
    parser.add_argument(
        "--seed",
        action="append",
        default=[],
        help='Seed as "Title" or "Title|By" (repeat up to 5 times)'
    )
    parser.add_argument(
        "--sample",
        action="store_true",
        help="Use the domain's sample seeds"
    )
    parser.add_argument(
        "--count",
        type=int,
        default=5,
        help="Number of recommendations (1-20)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args()

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.sample or not args.seed:
        seeds = SAMPLE_SEEDS[Domain(args.domain)][:3]
    else:
        seeds = [parse_seed(raw) for raw in args.seed]

    asyncio.run(run(args.domain, seeds, args.count))


if __name__ == "__main__":
    main()
