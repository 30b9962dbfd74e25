"""
Tests for settings validation.
"""

import pytest

from supplement_advisor.config import Settings


def _settings(**attrs):
    return type("_Settings", (Settings,), attrs)


class TestSettingsValidate:

    def test_mock_mode_needs_no_credentials(self):
        config = _settings(USE_MOCK_API=True, GOOGLE_API_KEY="", RECOMMENDATION_BACKEND="gemini")

        config.validate()

    def test_gemini_requires_key(self):
        config = _settings(USE_MOCK_API=False, GOOGLE_API_KEY="", RECOMMENDATION_BACKEND="gemini")

        with pytest.raises(ValueError, match="GOOGLE_API_KEY"):
            config.validate()

    def test_proxy_requires_url(self):
        config = _settings(USE_MOCK_API=False, RECOMMENDATION_BACKEND="proxy", RECOMMENDATION_BACKEND_URL="")

        with pytest.raises(ValueError, match="RECOMMENDATION_BACKEND_URL"):
            config.validate()

    def test_unknown_backend_is_rejected(self):
        config = _settings(USE_MOCK_API=True, RECOMMENDATION_BACKEND="openai")

        with pytest.raises(ValueError, match="Unknown RECOMMENDATION_BACKEND"):
            config.validate()

    def test_example_key_is_not_a_key(self):
        assert _settings(GOOGLE_API_KEY="your_api_key_here").has_google_api_key() is False
        assert _settings(GOOGLE_API_KEY="AIza-real").has_google_api_key() is True

    def test_environment_helpers(self):
        assert _settings(ENVIRONMENT="Production").is_production()
        assert _settings(ENVIRONMENT="development").is_development()
