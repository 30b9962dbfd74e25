"""
Recommendation Service - fetch, retry and error mapping

Orchestrates one recommendation request:

    HealthProfile -> prompt -> backend (with retries) -> extract -> validate

Architecture:
- Pattern: Single-shot LLM with a bounded retry loop
- Backends: Gemini (direct) or an intermediary proxy, see services/transports.py
- Mode: "mock" | "gemini" | "proxy", resolved ONCE when the fetcher is built.
  Mock mode is forced when USE_MOCK_API=true or the selected backend has no
  credential configured.
- Timeout: 60 s per attempt (asyncio.wait_for)
- Retries: at most 2 (3 attempts total), sequential, linear backoff
- Output: always an LLMRecommendation or a single typed LLMError

A safe-mode fallback produced by the response validator is a degraded
success, not an error: it is returned like any other recommendation.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Literal, Optional

from supplement_advisor.agents.supplement.prompts import PROMPT_VERSION, build_supplement_prompt
from supplement_advisor.config import Settings, settings
from supplement_advisor.schemas.profile import HealthProfile
from supplement_advisor.schemas.recommendations import LLMRecommendation
from supplement_advisor.services.errors import LLMError
from supplement_advisor.services.mock_recommendation import build_mock_recommendation
from supplement_advisor.services.response_parser import parse_llm_response
from supplement_advisor.services.transports import AttemptFailure, GeminiTransport, ProxyTransport

logger = logging.getLogger(__name__)

FetchMode = Literal["mock", "gemini", "proxy"]

DEFAULT_TIMEOUT_SECONDS = 60.0
DEFAULT_MAX_RETRIES = 2


# =============================================================================
# RETRY POLICY
# =============================================================================

@dataclass(frozen=True)
class RetryPolicy:
    """How the fetcher reacts to one failure kind."""
    retryable: bool
    base_delay: float = 0.0

    def backoff(self, attempt: int) -> float:
        """Delay before the next attempt; attempt is the 1-based attempt that just failed."""
        return self.base_delay * attempt


RETRY_POLICIES: Dict[str, RetryPolicy] = {
    # Backend answered but with no content (and not because of the length cap)
    "empty_content": RetryPolicy(retryable=True, base_delay=1.0),
    # Our own timeout / transport-level abort
    "timeout": RetryPolicy(retryable=True, base_delay=2.0),
    # Upstream 408
    "request_timeout": RetryPolicy(retryable=True, base_delay=2.0),
    # Retrying will not change the token budget without prompt changes
    "truncated": RetryPolicy(retryable=False),
    # Quota / rate limit will not clear within the retry window
    "rate_limited": RetryPolicy(retryable=False),
    "upstream_error": RetryPolicy(retryable=False),
    "malformed_envelope": RetryPolicy(retryable=False),
    "network": RetryPolicy(retryable=False),
}

_NOT_RETRYABLE = RetryPolicy(retryable=False)


def to_llm_error(failure: AttemptFailure) -> LLMError:
    """Map the last attempt failure to the user-facing error taxonomy."""
    kind = failure.kind

    if kind in ("timeout", "request_timeout"):
        return LLMError("timeout", "API 호출 시간이 초과되었습니다. 다시 시도해주세요.")
    if kind == "truncated":
        return LLMError("parse", "API 응답이 토큰 한도에 도달하여 비어있습니다.")
    if kind == "empty_content":
        return LLMError("parse", "API 응답이 비어있습니다.")
    if kind == "rate_limited":
        return LLMError(
            "api",
            "API 사용량 한도를 초과했습니다 (429). 계정의 결제 정보와 사용량(quota)을 확인해주세요.",
        )
    if kind == "upstream_error":
        return LLMError("api", f"API 오류 ({failure.status}): {failure.detail}")
    if kind == "malformed_envelope":
        return LLMError("api", "추천 서버 응답 형식이 올바르지 않습니다.")
    if kind == "network":
        return LLMError("network", "네트워크 연결을 확인해주세요.")

    return LLMError("parse", "알 수 없는 오류가 발생했습니다.")


# =============================================================================
# FETCHER
# =============================================================================

class RecommendationFetcher:
    """
    fetch(profile) -> LLMRecommendation | raises LLMError

    The mode and transport are fixed at construction; nothing is re-read from
    configuration per call. Each fetch is independent: the only state kept
    across attempts is the attempt counter.
    """

    def __init__(
        self,
        mode: FetchMode,
        transport=None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if mode != "mock" and transport is None:
            raise ValueError(f"A transport is required for mode '{mode}'")
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")

        self.mode = mode
        self.transport = transport
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self._sleep = sleep

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "RecommendationFetcher":
        """
        Resolve the fetch mode from configuration, once.

        Missing credentials are equivalent to USE_MOCK_API=true.
        """
        backend = config.RECOMMENDATION_BACKEND.lower()
        transport = None
        mode: FetchMode = "mock"

        if config.USE_MOCK_API:
            logger.info("USE_MOCK_API=true, recommendations served by the mock generator")
        elif backend == "proxy":
            if config.RECOMMENDATION_BACKEND_URL:
                mode = "proxy"
                transport = ProxyTransport(
                    base_url=config.RECOMMENDATION_BACKEND_URL,
                    path=config.RECOMMENDATION_BACKEND_PATH,
                    timeout_seconds=config.LLM_TIMEOUT_SECONDS,
                )
            else:
                logger.warning("RECOMMENDATION_BACKEND_URL not configured, falling back to mock mode")
        elif config.has_google_api_key():
            mode = "gemini"
            transport = GeminiTransport(api_key=config.GOOGLE_API_KEY, model=config.LLM_MODEL)
        else:
            logger.warning(
                "GOOGLE_API_KEY not configured (or still the example value), falling back to mock mode. "
                "Set GOOGLE_API_KEY in your .env file for live recommendations."
            )

        logger.info(f"Recommendation fetcher resolved to mode={mode}")
        return cls(
            mode=mode,
            transport=transport,
            timeout_seconds=config.LLM_TIMEOUT_SECONDS,
            max_retries=config.LLM_MAX_RETRIES,
        )

    @property
    def is_mock(self) -> bool:
        return self.mode == "mock"

    async def fetch(self, profile: HealthProfile) -> LLMRecommendation:
        """
        Produce a recommendation for a validated profile.

        Args:
            profile: Validated health profile

        Returns:
            LLMRecommendation (possibly the safe-mode fallback)

        Raises:
            LLMError: transport or backend failure after the retry policy ran out
        """
        if self.is_mock:
            logger.info("Serving mock recommendation")
            return build_mock_recommendation(profile)

        prompt = build_supplement_prompt(profile)
        raw_response = await self._complete_with_retries(profile, prompt)
        return parse_llm_response(raw_response)

    async def _complete_with_retries(self, profile: HealthProfile, prompt: str) -> str:
        max_attempts = self.max_retries + 1
        attempt = 0

        while True:
            attempt += 1
            logger.info(
                f"Live recommendation attempt {attempt}/{max_attempts} via {self.transport.name} "
                f"(prompt_version={PROMPT_VERSION})"
            )

            try:
                return await asyncio.wait_for(
                    self.transport.complete(profile, prompt),
                    timeout=self.timeout_seconds,
                )
            except asyncio.TimeoutError:
                failure = AttemptFailure("timeout", f"No response within {self.timeout_seconds}s")
            except AttemptFailure as e:
                failure = e
            except Exception as e:
                logger.exception(f"Unexpected error calling {self.transport.name}: {e}")
                raise LLMError("parse", "알 수 없는 오류가 발생했습니다.") from e

            policy = RETRY_POLICIES.get(failure.kind, _NOT_RETRYABLE)

            if not policy.retryable or attempt >= max_attempts:
                logger.error(
                    f"Recommendation failed after {attempt} attempt(s): "
                    f"kind={failure.kind}, status={failure.status}, detail={failure.detail}"
                )
                raise to_llm_error(failure) from failure

            delay = policy.backoff(attempt)
            logger.warning(
                f"Attempt {attempt} failed ({failure.kind}: {failure.detail}), retrying in {delay:.1f}s"
            )
            await self._sleep(delay)


# =============================================================================
# PROCESS-WIDE FETCHER
# =============================================================================

_fetcher: Optional[RecommendationFetcher] = None


def get_recommendation_fetcher() -> RecommendationFetcher:
    """
    Lazily build the process-wide fetcher from settings.

    Also used as a FastAPI dependency so tests can override it.
    """
    global _fetcher

    if _fetcher is None:
        _fetcher = RecommendationFetcher.from_settings(settings)

    return _fetcher


async def get_recommendation(profile: HealthProfile) -> LLMRecommendation:
    """Fetch a recommendation with the process-wide fetcher."""
    return await get_recommendation_fetcher().fetch(profile)
