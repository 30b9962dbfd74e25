"""
Supplement Recommendation - Single-Shot LLM Architecture

This module contains the prompt template for the supplement recommendation
flow. The service layer (fetch, retry, parse, fallback) is in:
- supplement_advisor/services/recommendation_service.py
"""

from supplement_advisor.agents.supplement.prompts import (
    PROMPT_VERSION,
    build_supplement_prompt,
)

__all__ = [
    "PROMPT_VERSION",
    "build_supplement_prompt",
]
