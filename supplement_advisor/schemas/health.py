"""
Health check endpoint schemas.
"""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness body for GET /health; the web client polls it before submitting a profile."""

    status: Literal["ok"] = Field(
        default="ok",
        description="Always 'ok' while the API is responding",
        examples=["ok"]
    )
