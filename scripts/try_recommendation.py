#!/usr/bin/env python3
"""
Recommendation Test Script

Runs one health profile through the recommendation pipeline locally,
without starting the API server or the web client.

The backend is chosen exactly like the server chooses it (USE_MOCK_API,
RECOMMENDATION_BACKEND, GOOGLE_API_KEY / RECOMMENDATION_BACKEND_URL from
your .env). Pass --mock to force the rule-based generator.

Usage:
    python scripts/try_recommendation.py
    python scripts/try_recommendation.py --age 52 --gender female --medications 와파린
    python scripts/try_recommendation.py --concerns 피로 스트레스 --lifestyle 야근 --smoking
    python scripts/try_recommendation.py --mock --json
"""

import argparse
import asyncio
import json
import logging
import os
import sys

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from supplement_advisor.config import settings
from supplement_advisor.schemas.recommendations import LLMRecommendation
from supplement_advisor.services.errors import LLMError
from supplement_advisor.services.profile_validator import validate_profile
from supplement_advisor.services.recommendation_service import RecommendationFetcher
from supplement_advisor.services.response_parser import is_fallback


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def print_result(result: LLMRecommendation) -> None:
    """Pretty print the recommendation result."""
    print("\n" + "=" * 60)
    print("SAFE MODE FALLBACK" if is_fallback(result) else "RECOMMENDATION")
    print("=" * 60)

    for i, supplement in enumerate(result.supplements, 1):
        print(f"\n--- Supplement #{i} ---")
        print(f"  Name:     {supplement.name}")
        print(f"  Dosage:   {supplement.dosage}")
        print(f"  Reason:   {supplement.reason}")
        if supplement.caution:
            print(f"  Caution:  {supplement.caution}")

    print(f"\nSummary: {result.summary}\n")


async def run(profile_data: dict, force_mock: bool, as_json: bool) -> int:
    """Validate the profile, fetch once and print. Returns the exit code."""
    try:
        profile = validate_profile(profile_data)
    except LLMError as e:
        print(f"\n❌ Invalid profile: {e.message}")
        return 2

    if force_mock:
        fetcher = RecommendationFetcher(mode="mock")
    else:
        fetcher = RecommendationFetcher.from_settings(settings)

    print(f"\nBackend: {fetcher.mode}")
    print(f"Profile: {profile.age}세, {profile.gender}, {profile.weight}kg")

    try:
        result = await fetcher.fetch(profile)
    except LLMError as e:
        print(f"\n❌ {e.kind} error: {e.message}")
        return 1

    if as_json:
        print(json.dumps(result.model_dump(exclude_none=True), ensure_ascii=False, indent=2))
    else:
        print_result(result)
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Test the supplement recommendation pipeline locally",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Default profile (29세 남성, 피로 + 수면)
  python scripts/try_recommendation.py

  # Medication interaction check
  python scripts/try_recommendation.py --medications 와파린 --concerns 혈행

  # Rule-based generator only, JSON output
  python scripts/try_recommendation.py --mock --json
        """
    )

    parser.add_argument("--age", type=int, default=29, help="Age in years (default: 29)")
    parser.add_argument(
        "--gender",
        choices=["male", "female", "other"],
        default="male",
        help="Gender (default: male)"
    )
    parser.add_argument("--weight", type=float, default=70, help="Weight in kg (default: 70)")
    parser.add_argument("--smoking", action="store_true", help="The user smokes")
    parser.add_argument(
        "--medications",
        default="없음",
        help="Medications currently taken, free text (default: 없음)"
    )
    parser.add_argument("--concerns", nargs="+", default=["피로"], help="Health concern tags")
    parser.add_argument("--lifestyle", nargs="+", default=["수면"], help="Lifestyle tags")
    parser.add_argument("--mock", action="store_true", help="Force the rule-based generator")
    parser.add_argument("--json", action="store_true", help="Print the raw JSON response")

    args = parser.parse_args()

    profile_data = {
        "age": args.age,
        "gender": args.gender,
        "weight": args.weight,
        "smoking": args.smoking,
        "medications": args.medications,
        "concerns": args.concerns,
        "lifestyle": args.lifestyle,
    }

    sys.exit(asyncio.run(run(profile_data, force_mock=args.mock, as_json=args.json)))


if __name__ == "__main__":
    main()
