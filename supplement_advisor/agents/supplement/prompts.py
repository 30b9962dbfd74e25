"""
Supplement Recommendation Prompt Template

Contains the user prompt builder for the supplement recommendation flow.

Architecture:
- Pattern: Single-shot LLM (one user message, no system prompt, no tools)
- Output: JSON requested in the prompt text and parsed from the raw
  completion (see services/response_parser.py)

The wording below is a contract with the model. Changing it changes the
output the parser receives, so every edit must bump PROMPT_VERSION; the
version is logged with each live call.
"""

from supplement_advisor.schemas.profile import NO_MEDICATION, HealthProfile

# Rendered for empty tag lists; same word the form uses for "no medication"
NONE_LABEL = NO_MEDICATION

PROMPT_VERSION = "2025-01-ko-v1"

GENDER_LABELS = {
    "male": "남성",
    "female": "여성",
    "other": "기타",
}

# Shape the parser validates against; quoted verbatim in the prompt
OUTPUT_SHAPE = """{
  "supplements": [{"name": "한국어명", "reason": "이유", "dosage": "1일 기준 섭취 용량", "caution": "주의사항"}],
  "summary": "요약"
}"""

# =============================================================================
# INSTRUCTION BLOCK
# =============================================================================
# (1) medication interaction cross-check, (2) synthesis of medications +
# lifestyle + concerns, then the strict JSON-only output rules.
# =============================================================================

INSTRUCTION_BLOCK = f"""다음 두 가지를 수행하세요:

1. 약물 상호작용 체크:
   - 복용 중인 약물과 추천할 영양제 간의 상호작용을 분석하세요
   - 위험한 조합이 있으면 caution 필드에 명시하세요
   - 복용 중인 약물과 함께 섭취하면 안 되는 영양제가 있으면 해당 영양제를 추천하지 마세요

2. 종합 추천:
   - 복용 중인 약물 + 생활 패턴 + 건강 고민을 모두 종합하여 추천하세요

JSON 형식으로만 출력:
{OUTPUT_SHAPE}

규칙:
1. JSON만 출력 (설명 없음)
2. supplements 최소 1개
3. name은 한국어
4. dosage는 1일 기준 섭취 용량을 명시
5. reason에는 약물+생활+고민을 종합한 추천 이유를 명시
6. caution에는 약물 상호작용, 복용 시 주의사항을 명시
7. summary에는 약물 상호작용 경고와 종합 추천 근거를 포함"""


def gender_label(gender: str) -> str:
    """Korean label for a gender value; unknown values render as 기타."""
    return GENDER_LABELS.get(gender, GENDER_LABELS["other"])


def format_weight(weight: float) -> str:
    """Render 70.0 as "70" and 70.5 as "70.5"."""
    if float(weight).is_integer():
        return str(int(weight))
    return str(float(weight))


def _join_tags(tags) -> str:
    return ", ".join(tags) if tags else NONE_LABEL


def build_supplement_prompt(profile: HealthProfile) -> str:
    """
    Build the user prompt for a supplement recommendation.

    Pure and deterministic: the same profile always yields a byte-identical
    prompt.

    Args:
        profile: Validated health profile

    Returns:
        Complete prompt string sent as the single user message
    """
    smoking = "흡연" if profile.smoking else "비흡연"
    medications = profile.medications or NONE_LABEL

    return f"""건강 정보 기반 영양제 추천 및 약물 상호작용 체크.

사용자: {profile.age}세 {gender_label(profile.gender)}, {format_weight(profile.weight)}kg, {smoking}
복용 중인 약물: {medications}
건강 고민: {_join_tags(profile.concerns)}
생활 패턴: {_join_tags(profile.lifestyle)}

{INSTRUCTION_BLOCK}"""
