"""
Mock Generator - rule-based stand-in for the live model.

Used when USE_MOCK_API=true or no credential is configured, so the frontend
and backend can be developed and tested without live calls or cost.
Deterministic: no randomness, no clock, no network.
"""

from typing import List

from supplement_advisor.agents.supplement.prompts import gender_label
from supplement_advisor.schemas.profile import HealthProfile, tags_contain
from supplement_advisor.schemas.recommendations import LLMRecommendation, Supplement

# Clause appended to the summary when the user takes medication
MEDICATION_WARNING = "약물 상호작용을 주의해야 합니다"

FATIGUE_CONCERNS = ("피로", "피로감")
FATIGUE_LIFESTYLE = ("수면", "피로")


def _has_fatigue_tags(profile: HealthProfile) -> bool:
    return (
        tags_contain(profile.concerns, *FATIGUE_CONCERNS)
        or tags_contain(profile.lifestyle, *FATIGUE_LIFESTYLE)
    )


def build_mock_recommendation(profile: HealthProfile) -> LLMRecommendation:
    """
    Build a rule-based recommendation for a profile.

    Fatigue or sleep tags yield melatonin + vitamin D3; anything else yields
    a general multivitamin. The summary always states age and gender and
    carries a medication warning when medications are listed.

    Args:
        profile: Validated health profile

    Returns:
        LLMRecommendation with at least one supplement
    """
    supplements: List[Supplement] = []

    if _has_fatigue_tags(profile):
        supplements.append(Supplement(
            name="멜라토닌",
            dosage="0.5-3 mg",
            reason=(
                "피로 고민 + 수면 질 저하 생활 패턴을 고려한 추천. "
                "수면-각성 주기를 조절하고 수면의 질을 개선하여 피로감 완화에 도움."
            ),
            caution="일부 약물과 상호작용 가능성(예: 혈압약, 항응고제) 및 특정 질환이 있는 경우 의사와 상담.",
        ))
        supplements.append(Supplement(
            name="비타민 D3",
            dosage="1000-2000 IU",
            reason=(
                "피로 고민 + 야근 자주 생활 패턴을 고려한 추천. 햇빛 노출이 부족한 생활에서 "
                "피로감과 근육/정서적 기분 저하를 완화하는 데 도움이 될 수 있습니다."
            ),
            caution="장기간 고용량 복용 시 혈청 칼슘 수치를 확인하는 것이 좋고, 고칼슘혈증 증상에 주의.",
        ))

    if not supplements:
        supplements.append(Supplement(
            name="종합 비타민",
            dosage="1정 (제조사 권장량)",
            reason="기본적인 영양소 보충을 위해 추천합니다.",
            caution="복용 중인 약물이 있으면 의사와 상담 후 섭취하세요.",
        ))

    summary = f"나이 {profile.age}세, {gender_label(profile.gender)}을 고려한 맞춤형 영양제 추천입니다."

    if profile.takes_medication:
        summary += (
            f" ⚠️ 현재 {profile.medications}을 복용 중이므로 {MEDICATION_WARNING}. "
            "반드시 의료 전문가와 상담 후 섭취하시기 바랍니다."
        )

    return LLMRecommendation(supplements=supplements, summary=summary)
