"""
Tests for the rule-based mock generator.
"""

from supplement_advisor.services.mock_recommendation import (
    MEDICATION_WARNING,
    build_mock_recommendation,
)
from supplement_advisor.services.profile_validator import validate_profile


def _profile(**overrides):
    payload = {
        "age": 45,
        "gender": "female",
        "weight": 60,
        "smoking": False,
        "medications": "없음",
        "concerns": ["소화"],
        "lifestyle": ["운동 부족"],
    }
    payload.update(overrides)
    return validate_profile(payload)


class TestMockRecommendation:

    def test_fatigue_and_sleep_yield_melatonin_and_vitamin_d(self):
        result = build_mock_recommendation(_profile(concerns=["피로"], lifestyle=["수면"]))

        names = [s.name for s in result.supplements]
        assert names == ["멜라토닌", "비타민 D3"]

    def test_sleep_lifestyle_alone_triggers_fatigue_rule(self):
        result = build_mock_recommendation(_profile(lifestyle=["수면"]))

        assert result.supplements[0].name == "멜라토닌"

    def test_other_tags_yield_multivitamin(self):
        result = build_mock_recommendation(_profile())

        assert [s.name for s in result.supplements] == ["종합 비타민"]

    def test_summary_states_age_and_gender(self):
        result = build_mock_recommendation(_profile())

        assert "45세" in result.summary
        assert "여성" in result.summary

    def test_medication_warning(self):
        result = build_mock_recommendation(_profile(medications="와파린"))

        assert "와파린" in result.summary
        assert MEDICATION_WARNING in result.summary

    def test_no_warning_without_medication(self):
        for medications in ("없음", ""):
            result = build_mock_recommendation(_profile(medications=medications))

            assert MEDICATION_WARNING not in result.summary

    def test_every_supplement_is_complete(self):
        result = build_mock_recommendation(_profile(concerns=["피로감"]))

        for supplement in result.supplements:
            assert supplement.name and supplement.dosage and supplement.reason

    def test_generator_is_deterministic(self):
        profile = _profile(medications="와파린", concerns=["피로"])

        assert build_mock_recommendation(profile) == build_mock_recommendation(profile)
