"""
Logging utilities for the Supplement Advisor backend.

Provides standardized logger configuration following privacy rules.

CRITICAL PRIVACY RULES:
- NEVER log GOOGLE_API_KEY or any other credential
- NEVER log the free-text medications field verbatim (log its length instead)
- Health profile fields may be logged only as coarse metadata (age, tag counts)

Acceptable logging:
- High-level events (e.g., "Live recommendation attempt 2/3")
- Raw model output previews when parsing fails (operators need them to debug)
- Error kinds and sanitized error messages
"""

import logging
from typing import Optional

from supplement_advisor.config import settings
from supplement_advisor.schemas.profile import HealthProfile


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Get a logger for the specified module.

    Args:
        name: Module name (typically __name__)
        level: Optional logging level (defaults to LOG_LEVEL from settings)

    Returns:
        Logger instance

    Usage:
        >>> from supplement_advisor.utils.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("High-level event occurred")
    """
    logger = logging.getLogger(name)

    if level is None:
        level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logger.setLevel(level)
    return logger


def describe_profile(profile: HealthProfile) -> str:
    """
    Log-safe one-line description of a health profile.

    Medications are reduced to a length and tags to counts.
    """
    return (
        f"age={profile.age}, gender={profile.gender}, smoking={profile.smoking}, "
        f"concerns={len(profile.concerns)}, lifestyle={len(profile.lifestyle)}, "
        f"medications_len={len(profile.medications)}"
    )
