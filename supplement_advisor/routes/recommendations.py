"""
FastAPI routes for the supplement recommendation endpoint.

Endpoints (aliases, same handler):
- POST /recommendation
- POST /health/recommend
- POST /api/recommendation  (path the web client calls)

Endpoint flow:
- Step 1: Auth -> none (public, no accounts)
- Step 2: Parse/Validate -> services/profile_validator.py (fail-fast, 400)
- Step 3: Call service -> RecommendationFetcher.fetch (mock or live), run as a
  PendingRecommendation that is cancelled if the client disconnects
- Step 4: Map output -> LLMRecommendation (200) or LLMError (mapped to a
  status code by the exception handler in main.py)
- Step 5: Persistence -> none
"""

import asyncio
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Request, Response

from supplement_advisor.schemas.profile import HealthProfile
from supplement_advisor.schemas.recommendations import LLMErrorResponse, LLMRecommendation
from supplement_advisor.services.pending import PendingRecommendation
from supplement_advisor.services.profile_validator import validate_profile
from supplement_advisor.services.recommendation_service import (
    RecommendationFetcher,
    get_recommendation_fetcher,
)
from supplement_advisor.utils.logging import describe_profile, get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["recommendations"])

# Seconds between client-disconnect checks while a fetch is in flight
DISCONNECT_CHECK_INTERVAL = 0.5

# Non-standard status (nginx convention) for a request the client abandoned
CLIENT_CLOSED_REQUEST = 499

_ERROR_RESPONSES: Dict[int | str, Dict[str, Any]] = {
    400: {"model": LLMErrorResponse, "description": "Invalid health profile"},
    500: {"model": LLMErrorResponse, "description": "Unexpected failure while producing the recommendation"},
    502: {"model": LLMErrorResponse, "description": "Model backend error (non-2xx, quota, malformed envelope)"},
    503: {"model": LLMErrorResponse, "description": "Model backend unreachable"},
    504: {"model": LLMErrorResponse, "description": "Model backend timed out after retries"},
}


def _profile_payload(payload: Dict[str, Any]) -> Any:
    """Accept {"profile": {...}} as well as a bare profile object."""
    if "profile" in payload:
        return payload["profile"]
    return payload


async def fetch_while_connected(
    request: Request,
    fetcher: RecommendationFetcher,
    profile: HealthProfile,
) -> Optional[LLMRecommendation]:
    """
    Run the fetch as a PendingRecommendation while the client is connected.

    Returns:
        The recommendation, or None when the client disconnected first (the
        fetch and any pending retries are cancelled)

    Raises:
        LLMError: the fetch failed while the client was still waiting
    """
    outcome: asyncio.Future = asyncio.get_running_loop().create_future()
    pending = PendingRecommendation(fetcher, profile, outcome.set_result, outcome.set_exception)
    pending.start()

    try:
        while not outcome.done():
            if await request.is_disconnected():
                logger.info("Client disconnected, cancelling in-flight recommendation")
                return None
            await asyncio.wait({outcome}, timeout=DISCONNECT_CHECK_INTERVAL)
    finally:
        if pending.active:
            await pending.cancel()

    return outcome.result()


@router.post(
    "/api/recommendation",
    response_model=LLMRecommendation,
    response_model_exclude_none=True,
    include_in_schema=False,
)
@router.post(
    "/health/recommend",
    response_model=LLMRecommendation,
    response_model_exclude_none=True,
    include_in_schema=False,
)
@router.post(
    "/recommendation",
    response_model=LLMRecommendation,
    response_model_exclude_none=True,
    status_code=200,
    responses=_ERROR_RESPONSES,
    summary="Recommend supplements for a health profile",
    description="""
    Returns supplement recommendations with drug-interaction cautions.

    **Request body:** `{"profile": {age, gender, weight, smoking, medications, concerns, lifestyle}}`
    (a bare profile object is accepted too).

    **Responses:**
    - 200: recommendation (may be the safe-mode fallback when the model output was unusable)
    - 400/500/502/503/504: `{type, message}` error body

    **Mock mode:** when USE_MOCK_API=true or no model credential is configured,
    a deterministic rule-based recommendation is returned without any live call.
    """
)
async def recommend_supplements_endpoint(
    request: Request,
    payload: Dict[str, Any] = Body(...),
    fetcher: RecommendationFetcher = Depends(get_recommendation_fetcher),
):
    """
    Recommendation endpoint.

    - Parse/Validate: validate_profile raises ProfileValidationError (400)
    - Call service: fetch_while_connected, LLMError on backend failure
    - Return response: FastAPI validates against LLMRecommendation
    """
    profile = validate_profile(_profile_payload(payload))

    logger.info(
        f"Recommendation requested: mode={fetcher.mode}, {describe_profile(profile)}"
    )

    recommendation = await fetch_while_connected(request, fetcher, profile)
    if recommendation is None:
        return Response(status_code=CLIENT_CLOSED_REQUEST)

    logger.info(f"Returning {len(recommendation.supplements)} supplement(s)")
    return recommendation
