"""
Recommendation backends behind one capability interface.

Each transport performs exactly ONE attempt:

    async def complete(profile, prompt) -> str

and either returns the raw completion text or raises AttemptFailure with a
failure kind from the retry policy table (services/recommendation_service.py).
Timeouts, retries and mapping to LLMError are the fetcher's job, not the
transport's.

Backends:
- GeminiTransport: direct model call through the Google Gen AI SDK
- ProxyTransport: intermediary recommendation backend over HTTP (httpx)
"""

import json
import logging
from typing import Any, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from supplement_advisor.schemas.profile import HealthProfile

logger = logging.getLogger(__name__)

# Output token caps. Reasoning-class models (Gemini 2.5 thinks by default)
# spend most of the budget on hidden reasoning and come back empty with the
# normal cap.
DEFAULT_MAX_OUTPUT_TOKENS = 2000
REASONING_MAX_OUTPUT_TOKENS = 10000
REASONING_MODEL_MARKERS = ("gemini-2.5", "nano", "o1", "reasoning", "thinking")


class AttemptFailure(Exception):
    """
    One failed attempt against a backend.

    Attributes:
        kind: Key into RETRY_POLICIES (e.g. "timeout", "rate_limited")
        detail: Diagnostic text for the logs (may contain upstream messages)
        status: Upstream HTTP status, when there was one
    """

    def __init__(self, kind: str, detail: str, status: Optional[int] = None):
        super().__init__(f"{kind}: {detail}")
        self.kind = kind
        self.detail = detail
        self.status = status


def failure_for_status(status: int, detail: str) -> AttemptFailure:
    """Classify a non-2xx upstream status."""
    if status == 408:
        return AttemptFailure("request_timeout", detail, status)
    if status == 429:
        return AttemptFailure("rate_limited", detail, status)
    return AttemptFailure("upstream_error", detail, status)


def max_output_tokens_for(model: str) -> int:
    """Output token cap for a model id."""
    lowered = model.lower()
    if any(marker in lowered for marker in REASONING_MODEL_MARKERS):
        return REASONING_MAX_OUTPUT_TOKENS
    return DEFAULT_MAX_OUTPUT_TOKENS


# =============================================================================
# GEMINI (direct model call)
# =============================================================================

def _response_text(response: Any) -> str:
    """
    Pull the completion text out of a Gemini response.

    Reads the candidate parts first; response.text can be None even when the
    parts carry text.
    """
    candidates = getattr(response, "candidates", None) or []
    if candidates:
        content = getattr(candidates[0], "content", None)
        parts = getattr(content, "parts", None) or []
        texts = [part.text for part in parts if isinstance(getattr(part, "text", None), str)]
        if any(texts):
            return "".join(texts)

    text = getattr(response, "text", None)
    return text if isinstance(text, str) else ""


def _finish_reason_name(response: Any) -> str:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return ""
    reason = getattr(candidates[0], "finish_reason", None)
    if reason is None:
        return ""
    return str(getattr(reason, "name", reason))


class GeminiTransport:
    """Single-prompt completion against a Gemini model."""

    name = "gemini"

    def __init__(self, api_key: str, model: str, client: Optional[genai.Client] = None):
        self.model = model
        self._api_key = api_key
        self._client = client

    def _get_client(self) -> genai.Client:
        # Lazy so constructing the transport never touches the network stack
        if self._client is None:
            self._client = genai.Client(api_key=self._api_key)
            logger.info("Gemini client initialized for supplement recommendations")
        return self._client

    async def complete(self, profile: HealthProfile, prompt: str) -> str:
        config = types.GenerateContentConfig(
            max_output_tokens=max_output_tokens_for(self.model),
        )

        try:
            response = await self._get_client().aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )
        except genai_errors.APIError as e:
            raise failure_for_status(e.code, e.message or str(e)) from e
        except httpx.TimeoutException as e:
            raise AttemptFailure("timeout", f"Gemini request timed out: {e}") from e
        except httpx.TransportError as e:
            raise AttemptFailure("network", f"Gemini transport error: {e}") from e

        content = _response_text(response)
        if content.strip():
            return content

        finish_reason = _finish_reason_name(response)
        if finish_reason == "MAX_TOKENS":
            raise AttemptFailure("truncated", f"Empty completion, finish_reason={finish_reason}")
        raise AttemptFailure("empty_content", f"Empty completion, finish_reason={finish_reason or 'unknown'}")


# =============================================================================
# PROXY (intermediary recommendation backend)
# =============================================================================

def _error_detail(response: httpx.Response) -> str:
    """Best-effort message from an error response body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:300] or response.reason_phrase

    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            if body.get(key):
                return str(body[key])
    return response.reason_phrase


class ProxyTransport:
    """
    Posts the normalized profile to a backend that runs the model itself.

    The backend answers {"result": <JSON string or object>, "model_id"?,
    "region"?}. The result is handed back as text so it goes through the
    same extract/validate stage as a direct completion.
    """

    name = "proxy"

    def __init__(
        self,
        base_url: str,
        path: str = "/health/recommend",
        timeout_seconds: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"
        self._timeout = httpx.Timeout(timeout_seconds, connect=10.0)
        self._transport = transport

    async def complete(self, profile: HealthProfile, prompt: str) -> str:
        payload = {"profile": profile.model_dump(mode="json")}

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.post(url=self.url, json=payload)
            except httpx.TimeoutException as e:
                raise AttemptFailure("timeout", f"Backend request timed out: {e}") from e
            except httpx.TransportError as e:
                raise AttemptFailure("network", f"Backend unreachable: {e}") from e

        if not response.is_success:
            raise failure_for_status(response.status_code, _error_detail(response))

        try:
            body = response.json()
        except ValueError as e:
            raise AttemptFailure("malformed_envelope", f"Backend returned non-JSON body: {response.text[:300]}") from e

        if not isinstance(body, dict) or "result" not in body:
            raise AttemptFailure("malformed_envelope", f"Backend response missing 'result': {str(body)[:300]}")

        if body.get("model_id") or body.get("region"):
            logger.info(f"Backend served model_id={body.get('model_id')} region={body.get('region')}")

        result = body["result"]
        if isinstance(result, str):
            if result.strip():
                return result
        elif result:
            return json.dumps(result, ensure_ascii=False)

        if body.get("finish_reason") == "length":
            raise AttemptFailure("truncated", "Backend result empty, finish_reason=length")
        raise AttemptFailure("empty_content", "Backend result empty")
