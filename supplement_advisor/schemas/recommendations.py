"""
Pydantic schemas for the recommendation endpoint.

`LLMRecommendation` doubles as the schema the model output is validated
against (see services/response_parser.py) and as the 200 response body.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

# ============================================================================
# RESPONSE MODELS
# ============================================================================

class Supplement(BaseModel):
    """A single supplement suggestion."""
    name: str = Field(
        ...,
        min_length=1,
        description="Supplement name (Korean)",
        examples=["멜라토닌"]
    )
    reason: str = Field(
        ...,
        min_length=1,
        description="Why it is recommended, combining medications, lifestyle and concerns",
        examples=["피로 고민 + 수면 질 저하 생활 패턴을 고려한 추천."]
    )
    dosage: str = Field(
        ...,
        min_length=1,
        description="Daily intake amount",
        examples=["0.5-3 mg"]
    )
    caution: Optional[str] = Field(
        None,
        description="Drug interactions and intake cautions",
        examples=["일부 약물과 상호작용 가능성(예: 혈압약, 항응고제)."]
    )


class LLMRecommendation(BaseModel):
    """
    Validated recommendation returned to callers.

    Invariant: always holds at least one supplement. The model output is
    validated against this schema and replaced by the safe-mode fallback
    when it does not conform.
    """
    supplements: List[Supplement] = Field(
        ...,
        min_length=1,
        description="Ordered supplement suggestions (at least one)"
    )
    summary: str = Field(
        ...,
        min_length=1,
        description="Overall summary including medication interaction warnings"
    )


class LLMErrorResponse(BaseModel):
    """
    Error body returned for every non-200 recommendation response.

    Only the sanitized message is sent; diagnostics stay in the server logs.
    """
    type: Literal["network", "timeout", "parse", "api", "validation"] = Field(
        ...,
        description="Error kind",
        examples=["timeout"]
    )
    message: str = Field(
        ...,
        description="User-facing message (Korean)",
        examples=["API 호출 시간이 초과되었습니다. 다시 시도해주세요."]
    )
