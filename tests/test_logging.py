"""
Tests for the logging helpers (privacy rules).
"""

import logging

from supplement_advisor.services.profile_validator import validate_profile
from supplement_advisor.utils.logging import describe_profile, get_logger


def test_describe_profile_hides_medications(profile_payload):
    profile_payload["medications"] = "와파린"

    description = describe_profile(validate_profile(profile_payload))

    assert "와파린" not in description
    assert "medications_len=3" in description
    assert "age=29" in description
    assert "concerns=1" in description


def test_get_logger_explicit_level():
    logger = get_logger("supplement_advisor.tests.example", level=logging.WARNING)

    assert logger.level == logging.WARNING
