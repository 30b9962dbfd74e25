"""
Response Extractor + Response Validator for raw model completions.

The model is asked for JSON only, but completions still arrive wrapped in
markdown fences or surrounded by commentary. This module:

1. extract_json: strips a leading/trailing ``` fence and cuts the text down
   to the span between the first "{" and the last "}". No repair is
   attempted; malformed JSON is only delimited.
2. validate_recommendation: json.loads + pydantic schema validation. Any
   failure is logged and replaced by the canonical safe-mode
   recommendation, so this stage never raises.
"""

import json
import logging
import re

from pydantic import ValidationError

from supplement_advisor.schemas.recommendations import LLMRecommendation, Supplement

logger = logging.getLogger(__name__)

# Anchored fences: "```" or "```json" at the very start, "```" at the very end
_LEADING_FENCE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\s*```$")

# Greedy: first "{" through last "}" so commentary on either side is dropped
_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)

# Marker carried by every fallback summary; the UI and tests look for it
SAFE_MODE_MARKER = "안전 모드"

# Raw text preview length written to the logs on failures
_LOG_PREVIEW_CHARS = 1000


def extract_json(raw_response: str) -> str:
    """
    Recover the JSON object substring from a raw model completion.

    Args:
        raw_response: Completion text exactly as returned by the backend

    Returns:
        The "{...}" span if one exists, otherwise the trimmed, fence-free text
    """
    cleaned = raw_response.strip()
    cleaned = _LEADING_FENCE.sub("", cleaned)
    cleaned = _TRAILING_FENCE.sub("", cleaned)

    match = _JSON_OBJECT.search(cleaned)
    if match:
        return match.group(0)

    return cleaned


def get_fallback_recommendation() -> LLMRecommendation:
    """
    Canonical safe-mode recommendation.

    Returned whenever the model output cannot be trusted. A new object is
    built on every call so callers can never mutate a shared instance.
    """
    return LLMRecommendation(
        supplements=[
            Supplement(
                name="종합 비타민",
                dosage="1정 (제조사 권장량)",
                reason="기본적인 영양소 보충을 위해 추천합니다.",
                caution="개인 맞춤 추천을 위해 정확한 정보 입력이 필요합니다.",
            )
        ],
        summary=f"{SAFE_MODE_MARKER} 추천입니다. 정확한 추천을 위해 다시 시도해주세요.",
    )


def is_fallback(recommendation: LLMRecommendation) -> bool:
    """True when the recommendation is the safe-mode fallback."""
    return SAFE_MODE_MARKER in recommendation.summary


def validate_recommendation(json_text: str) -> LLMRecommendation:
    """
    Parse and schema-check an extracted JSON string.

    Never raises: empty input, invalid JSON, schema violations and an empty
    supplements list all return the safe-mode fallback.

    Args:
        json_text: Output of extract_json

    Returns:
        The validated recommendation, or the safe-mode fallback
    """
    if not json_text or not json_text.strip():
        logger.error("LLM response contained no JSON (empty after extraction)")
        return get_fallback_recommendation()

    try:
        parsed = json.loads(json_text)
    except (ValueError, RecursionError) as e:
        # Integer literals past the digit limit raise a plain ValueError; deep nesting raises RecursionError
        logger.error(f"Failed to parse JSON response: {type(e).__name__}: {e}")
        logger.error(f"Extracted content: {json_text[:_LOG_PREVIEW_CHARS]}")
        return get_fallback_recommendation()

    try:
        validated = LLMRecommendation.model_validate(parsed)
    except ValidationError as e:
        logger.error(f"LLM response failed schema validation: {e.errors()}")
        logger.error(f"Extracted content: {json_text[:_LOG_PREVIEW_CHARS]}")
        return get_fallback_recommendation()

    # Redundant while the schema keeps min_length=1 on supplements
    if not validated.supplements:
        logger.warning("Supplements list is empty after validation, using fallback")
        return get_fallback_recommendation()

    logger.info(f"Parsed {len(validated.supplements)} supplement recommendations")
    return validated


def parse_llm_response(raw_response: str) -> LLMRecommendation:
    """
    Extract and validate a raw completion in one step.

    Args:
        raw_response: Completion text exactly as returned by the backend

    Returns:
        The validated recommendation, or the safe-mode fallback
    """
    json_text = extract_json(raw_response)
    recommendation = validate_recommendation(json_text)

    if is_fallback(recommendation):
        logger.warning(f"Serving safe-mode fallback. Raw response: {raw_response[:_LOG_PREVIEW_CHARS]}")

    return recommendation
