"""
Liveness route.

Public, no body, no backend call: answering at all means the process is up.
Whether recommendations are live or mocked is not reported here.
"""

from fastapi import APIRouter

from supplement_advisor.schemas.health import HealthResponse
from supplement_advisor.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["system"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint",
    description="Returns {\"status\": \"ok\"} while the API is responding.",
)
async def health_check() -> HealthResponse:
    logger.debug("Health check endpoint called")
    return HealthResponse()
