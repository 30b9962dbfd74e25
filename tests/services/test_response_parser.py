"""
Tests for the response extractor and validator.

These tests verify:
- Fence and commentary stripping
- Schema validation of the extracted JSON
- Safe-mode fallback for every unusable completion
"""

import json
import sys

import pytest

from supplement_advisor.schemas.recommendations import LLMRecommendation
from supplement_advisor.services.response_parser import (
    SAFE_MODE_MARKER,
    extract_json,
    get_fallback_recommendation,
    is_fallback,
    parse_llm_response,
    validate_recommendation,
)


@pytest.fixture
def valid_completion():
    return json.dumps({
        "supplements": [
            {
                "name": "마그네슘",
                "reason": "수면 질 개선",
                "dosage": "300 mg",
                "caution": "신장 질환 시 상담",
            }
        ],
        "summary": "수면 개선을 위한 추천",
    }, ensure_ascii=False)


# =============================================================================
# extract_json
# =============================================================================

class TestExtractJson:

    def test_plain_object_is_unchanged(self):
        assert extract_json('{"a": 1}') == '{"a": 1}'

    def test_json_fence_is_removed(self):
        assert extract_json('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_bare_fence_is_removed(self):
        assert extract_json('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_surrounding_commentary_is_dropped(self):
        raw = '추천 결과입니다:\n{"a": {"b": 2}}\n도움이 되길 바랍니다.'

        assert extract_json(raw) == '{"a": {"b": 2}}'

    def test_text_without_braces_is_returned_trimmed(self):
        assert extract_json("  죄송합니다. 추천할 수 없습니다.  ") == "죄송합니다. 추천할 수 없습니다."

    def test_malformed_json_is_only_delimited(self):
        assert extract_json('앞 {"a": 1,} 뒤') == '{"a": 1,}'


# =============================================================================
# validate_recommendation
# =============================================================================

class TestValidateRecommendation:

    def test_valid_json_round_trips(self, valid_completion):
        result = validate_recommendation(valid_completion)

        assert not is_fallback(result)
        assert result.model_dump(exclude_none=True) == json.loads(valid_completion)

    def test_caution_is_optional(self):
        text = '{"supplements": [{"name": "아연", "reason": "면역", "dosage": "10 mg"}], "summary": "요약"}'

        result = validate_recommendation(text)

        assert result.supplements[0].caution is None
        assert not is_fallback(result)

    @pytest.mark.parametrize("text", ["", "   ", "not json", "{broken"])
    def test_unparseable_input_falls_back(self, text):
        assert is_fallback(validate_recommendation(text))

    def test_empty_supplements_falls_back(self):
        assert is_fallback(validate_recommendation('{"supplements": [], "summary": "x"}'))

    def test_missing_summary_falls_back(self):
        text = '{"supplements": [{"name": "아연", "reason": "면역", "dosage": "10 mg"}]}'

        assert is_fallback(validate_recommendation(text))

    def test_supplement_missing_dosage_falls_back(self):
        text = '{"supplements": [{"name": "아연", "reason": "면역"}], "summary": "요약"}'

        assert is_fallback(validate_recommendation(text))

    def test_deeply_nested_json_falls_back(self):
        text = '{"a": ' * 100000 + "1" + "}" * 100000

        assert is_fallback(validate_recommendation(text))

    @pytest.mark.skipif(
        not hasattr(sys, "get_int_max_str_digits"), reason="interpreter has no integer digit limit"
    )
    def test_oversized_integer_literal_falls_back(self):
        text = (
            '{"supplements": [{"name": "아연", "reason": "면역", "dosage": "10 mg"}], '
            '"summary": "요약", "n": ' + "1" * 5000 + "}"
        )

        assert is_fallback(validate_recommendation(text))

    def test_wrong_type_falls_back(self):
        assert is_fallback(validate_recommendation('{"supplements": "아연", "summary": "요약"}'))

    def test_fallback_is_logged(self, caplog):
        with caplog.at_level("ERROR"):
            validate_recommendation("not json")

        assert "Failed to parse JSON response" in caplog.text


# =============================================================================
# FALLBACK + parse_llm_response
# =============================================================================

class TestFallback:

    def test_fallback_content(self):
        fallback = get_fallback_recommendation()

        assert isinstance(fallback, LLMRecommendation)
        assert len(fallback.supplements) == 1
        assert fallback.supplements[0].name == "종합 비타민"
        assert SAFE_MODE_MARKER in fallback.summary

    def test_fallback_is_a_fresh_object(self):
        first = get_fallback_recommendation()
        second = get_fallback_recommendation()

        assert first is not second
        assert first == second

    def test_parse_fenced_completion(self, valid_completion):
        result = parse_llm_response(f"```json\n{valid_completion}\n```")

        assert result.supplements[0].name == "마그네슘"

    def test_parse_completion_with_commentary(self, valid_completion):
        result = parse_llm_response(f"다음은 추천입니다.\n{valid_completion}\n감사합니다.")

        assert result.summary == "수면 개선을 위한 추천"

    def test_parse_commentary_with_empty_supplements_returns_fallback(self):
        result = parse_llm_response('here\'s the result: {"supplements":[],"summary":"no matches"}')

        assert is_fallback(result)
        assert result.supplements[0].name == "종합 비타민"

    def test_parse_refusal_returns_fallback(self):
        assert is_fallback(parse_llm_response("죄송합니다. 도와드릴 수 없습니다."))
