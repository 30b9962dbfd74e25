"""
Supplement Advisor backend.

Collects a health profile, asks a language model (or the rule-based mock)
for supplement recommendations and always hands back a well-formed result.
"""

__version__ = "0.1.0"
