"""
Tests for the supplement recommendation prompt builder.
"""

import pytest

from supplement_advisor.agents.supplement.prompts import (
    OUTPUT_SHAPE,
    build_supplement_prompt,
    format_weight,
    gender_label,
)
from supplement_advisor.services.profile_validator import validate_profile


@pytest.fixture
def profile(profile_payload):
    return validate_profile(profile_payload)


class TestBuildSupplementPrompt:

    def test_prompt_is_deterministic(self, profile_payload):
        first = build_supplement_prompt(validate_profile(profile_payload))
        second = build_supplement_prompt(validate_profile(profile_payload))

        assert first == second

    def test_user_line(self, profile):
        prompt = build_supplement_prompt(profile)

        assert "사용자: 29세 남성, 70kg, 비흡연" in prompt

    def test_smoker_and_female(self, profile_payload):
        profile_payload.update(gender="female", smoking=True, weight=55.5)

        prompt = build_supplement_prompt(validate_profile(profile_payload))

        assert "사용자: 29세 여성, 55.5kg, 흡연" in prompt

    def test_medications_and_tags(self, profile_payload):
        profile_payload.update(
            medications="와파린",
            concerns=["피로", "스트레스"],
            lifestyle=["야근"],
        )

        prompt = build_supplement_prompt(validate_profile(profile_payload))

        assert "복용 중인 약물: 와파린" in prompt
        assert "건강 고민: 피로, 스트레스" in prompt
        assert "생활 패턴: 야근" in prompt

    def test_empty_medications_render_as_none(self, profile_payload):
        profile_payload["medications"] = ""

        prompt = build_supplement_prompt(validate_profile(profile_payload))

        assert "복용 중인 약물: 없음" in prompt

    def test_prompt_asks_for_json_only(self, profile):
        prompt = build_supplement_prompt(profile)

        assert OUTPUT_SHAPE in prompt
        assert "JSON만 출력" in prompt
        assert "약물 상호작용" in prompt


class TestHelpers:

    @pytest.mark.parametrize("gender,label", [("male", "남성"), ("female", "여성"), ("other", "기타")])
    def test_gender_label(self, gender, label):
        assert gender_label(gender) == label

    @pytest.mark.parametrize("weight,text", [(70, "70"), (70.0, "70"), (70.5, "70.5"), (62.25, "62.25")])
    def test_format_weight(self, weight, text):
        assert format_weight(weight) == text
