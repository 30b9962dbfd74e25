"""
AI components for the Supplement Advisor backend.

1. Supplement Recommendation (Single-Shot LLM)
   - Prompt template in agents/supplement/prompts.py
   - Transport, retry and parsing live in the service layer

The model is asked for JSON in plain text and the service layer recovers,
validates and, if needed, replaces it with a safe-mode result.
"""

from supplement_advisor.agents.supplement import (
    PROMPT_VERSION,
    build_supplement_prompt,
)

__all__ = [
    "PROMPT_VERSION",
    "build_supplement_prompt",
]
