"""
Cancellable in-flight recommendation.

A caller that may lose interest before the fetch finishes (a client that
navigates away, a disconnected request) starts the fetch through
PendingRecommendation. cancel() clears the "still interested" flag and
cancels the task, which also stops any pending retry backoff. Callbacks
are gated on the flag, so neither fires after cancel(). Failures other
than LLMError are logged and delivered as a "parse" LLMError.
"""

import asyncio
import contextlib
import logging
from typing import Callable, Optional

from supplement_advisor.schemas.profile import HealthProfile
from supplement_advisor.schemas.recommendations import LLMRecommendation
from supplement_advisor.services.errors import LLMError

logger = logging.getLogger(__name__)


class PendingRecommendation:
    """One in-flight fetch with success/error callbacks."""

    def __init__(
        self,
        fetcher,
        profile: HealthProfile,
        on_success: Callable[[LLMRecommendation], None],
        on_error: Callable[[LLMError], None],
    ):
        self._fetcher = fetcher
        self._profile = profile
        self._on_success = on_success
        self._on_error = on_error
        self._interested = False
        self._task: Optional[asyncio.Task] = None

    @property
    def active(self) -> bool:
        """True while the caller still wants the result."""
        return self._interested

    @property
    def task(self) -> Optional[asyncio.Task]:
        return self._task

    def start(self) -> asyncio.Task:
        """Schedule the fetch on the running loop."""
        if self._task is not None:
            raise RuntimeError("PendingRecommendation already started")

        self._interested = True
        self._task = asyncio.get_running_loop().create_task(self._run())
        return self._task

    async def _run(self) -> None:
        try:
            recommendation = await self._fetcher.fetch(self._profile)
        except LLMError as e:
            self._deliver_error(e)
            return
        except Exception as e:
            logger.exception(f"Unexpected error producing recommendation: {e}")
            error = LLMError("parse", "알 수 없는 오류가 발생했습니다.")
            error.__cause__ = e
            self._deliver_error(error)
            return

        if self._interested:
            self._interested = False
            self._on_success(recommendation)
        else:
            logger.debug("Dropping result for a cancelled recommendation")

    def _deliver_error(self, error: LLMError) -> None:
        if self._interested:
            self._interested = False
            self._on_error(error)
        else:
            logger.debug(f"Dropping {error.kind} error for a cancelled recommendation")

    async def cancel(self) -> None:
        """Stop the fetch (including pending retries); no callback fires afterwards."""
        self._interested = False

        if self._task is not None and not self._task.done():
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            logger.info("In-flight recommendation cancelled")
