"""
Pytest configuration for Supplement Advisor tests.

Sets up test environment and global fixtures.
"""
import os
import pytest

# Disable config validation during tests
# This allows tests to run without requiring real environment variables
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("USE_MOCK_API", "true")
os.environ.setdefault("GOOGLE_API_KEY", "test-google-api-key")


@pytest.fixture
def profile_payload():
    """Raw intake payload that passes validation (fatigue + sleep, no medication)."""
    return {
        "age": 29,
        "gender": "male",
        "weight": 70,
        "smoking": False,
        "medications": "없음",
        "concerns": ["피로"],
        "lifestyle": ["수면"],
    }
