"""
Typed error taxonomy for the recommendation pipeline.

Every failure path ends in exactly one LLMError. Transport and SDK
exceptions are translated inside the fetcher and never escape it.
"""

from typing import Dict, Literal

LLMErrorKind = Literal["network", "timeout", "parse", "api", "validation"]

# HTTP status returned for each error kind by the recommendation routes
ERROR_STATUS_CODES: Dict[str, int] = {
    "validation": 400,
    "parse": 500,
    "api": 502,
    "network": 503,
    "timeout": 504,
}


class LLMError(Exception):
    """
    Failure surfaced to the caller of the recommendation pipeline.

    Attributes:
        kind: One of network, timeout, parse, api, validation
        message: Sanitized, user-facing message (Korean)
    """

    def __init__(self, kind: LLMErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def status_code(self) -> int:
        return ERROR_STATUS_CODES.get(self.kind, 500)

    def to_dict(self) -> Dict[str, str]:
        """Wire shape of the error: {"type": ..., "message": ...}."""
        return {"type": self.kind, "message": self.message}

    def __repr__(self) -> str:
        return f"LLMError(kind={self.kind!r}, message={self.message!r})"


class ProfileValidationError(LLMError):
    """The submitted health profile violates a field constraint."""

    def __init__(self, field: str, reason: str):
        super().__init__("validation", f"{field}: {reason}")
        self.field = field
        self.reason = reason
