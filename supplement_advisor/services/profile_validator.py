"""
Profile Validator - turns a raw intake payload into a HealthProfile.

Fail-fast: only the first violated rule is reported, in the priority order
the intake form uses (age, weight, gender, text lengths, tag selection).
The ordering itself comes from schemas/profile.py; this module picks the
first pydantic error and phrases it for the user.
"""

import logging
from typing import Any, Dict, Mapping, Tuple

from pydantic import ValidationError

from supplement_advisor.schemas.profile import HealthProfile
from supplement_advisor.services.errors import ProfileValidationError
from supplement_advisor.utils.logging import describe_profile

logger = logging.getLogger(__name__)

# (field, pydantic error type) -> user-facing reason
_REASONS: Dict[Tuple[str, str], str] = {
    ("age", "missing"): "나이를 입력해주세요",
    ("age", "int_type"): "나이는 정수여야 합니다",
    ("age", "greater_than_equal"): "나이는 1 이상이어야 합니다",
    ("age", "less_than_equal"): "나이는 150 이하여야 합니다",
    ("weight", "missing"): "체중을 입력해주세요",
    ("weight", "float_type"): "체중은 숫자여야 합니다",
    ("weight", "finite_number"): "체중은 숫자여야 합니다",
    ("weight", "greater_than_equal"): "체중은 1kg 이상이어야 합니다",
    ("weight", "less_than_equal"): "체중은 500kg 이하여야 합니다",
    ("gender", "missing"): "성별을 선택해주세요",
    ("gender", "literal_error"): "유효한 성별을 선택해주세요",
    ("medications", "string_type"): "약물 정보는 문자열이어야 합니다",
    ("medications", "string_too_long"): "약물 정보는 500자 이하여야 합니다",
    ("concerns", "string_type"): "건강 고민은 문자열이어야 합니다",
    ("concerns", "string_too_long"): "건강 고민은 항목당 500자 이하여야 합니다",
    ("concerns", "tuple_type"): "건강 고민은 목록이어야 합니다",
    ("lifestyle", "string_type"): "생활 패턴은 문자열이어야 합니다",
    ("lifestyle", "string_too_long"): "생활 패턴은 항목당 500자 이하여야 합니다",
    ("lifestyle", "tuple_type"): "생활 패턴은 목록이어야 합니다",
    ("smoking", "bool_type"): "흡연 여부는 예/아니오로 선택해주세요",
}


def _first_violation(exc: ValidationError) -> Tuple[str, str]:
    """Return (field, reason) for the first error pydantic reported."""
    error = exc.errors()[0]
    loc = error.get("loc") or ()
    ctx = error.get("ctx") or {}

    # Model-level rules (tag selection) carry their field in the context
    field = str(loc[0]) if loc else str(ctx.get("field", "profile"))
    reason = _REASONS.get((field, error["type"]), error.get("msg", "유효하지 않은 값입니다"))
    return field, reason


def validate_profile(candidate: Any) -> HealthProfile:
    """
    Validate and normalize a raw health profile.

    Args:
        candidate: Mapping as decoded from the request body

    Returns:
        Frozen HealthProfile with normalized tags and medications

    Raises:
        ProfileValidationError: naming the first failing field and the reason
    """
    if not isinstance(candidate, Mapping):
        logger.warning(f"Profile payload is not an object (got {type(candidate).__name__})")
        raise ProfileValidationError("profile", "건강 정보를 찾을 수 없습니다")

    try:
        profile = HealthProfile.model_validate(dict(candidate))
    except ValidationError as exc:
        field, reason = _first_violation(exc)
        logger.info(
            f"Profile rejected: field={field}, error_count={exc.error_count()}"
        )
        raise ProfileValidationError(field, reason) from exc

    logger.debug(f"Profile accepted: {describe_profile(profile)}")
    return profile
