"""
Service layer for the Supplement Advisor backend.

Contains the recommendation pipeline:
- Validates the submitted health profile
- Fetches a completion from the configured backend (or the mock generator)
- Extracts and validates the JSON payload, falling back to safe mode
- Maps transport/backend failures into typed LLMErrors

Services act as the glue between routes (HTTP layer) and the model backends.
"""

from .errors import LLMError, ProfileValidationError
from .mock_recommendation import build_mock_recommendation
from .pending import PendingRecommendation
from .profile_validator import validate_profile
from .recommendation_service import (
    RecommendationFetcher,
    get_recommendation,
    get_recommendation_fetcher,
)
from .response_parser import (
    extract_json,
    get_fallback_recommendation,
    parse_llm_response,
    validate_recommendation,
)

__all__ = [
    "LLMError",
    "ProfileValidationError",
    "validate_profile",
    "build_mock_recommendation",
    "extract_json",
    "validate_recommendation",
    "parse_llm_response",
    "get_fallback_recommendation",
    "RecommendationFetcher",
    "get_recommendation",
    "get_recommendation_fetcher",
    "PendingRecommendation",
]
