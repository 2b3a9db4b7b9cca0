"""
Video report poller.

Drives an asynchronous provider job to a terminal state under a fixed attempt
budget (60 checks, 10 s apart → ~10 minutes worst case).

Outcomes per status check:
  - transport error / timeout / unreadable body → transient, retry
  - 404 → ReportNotFound, 401 → AuthenticationFailed (no retry)
  - other non-2xx → retry; StatusCheckFailed on the final attempt
  - completed + report → success
  - failed / error → ProviderProcessingFailed (no retry)
  - anything else (processing, pending, uploaded, unknown) → keep polling

The fetch primitive and the sleep are injected so tests can drive the state
machine without real network calls or real delays.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from media_verify.config import settings
from media_verify.core.errors import (
    AuthenticationFailed,
    MalformedResponse,
    NetworkError,
    PollingExhausted,
    PollingTimeout,
    ProviderProcessingFailed,
    ReportNotFound,
    RequestTimeout,
    StatusCheckFailed,
)

logger = logging.getLogger(__name__)

TERMINAL_FAILURE_STATES = ("failed", "error")
IN_PROGRESS_STATES = ("processing", "pending", "uploaded")

# Failures of a single check that must not end the poll loop early.
TRANSIENT_ERRORS = (NetworkError, RequestTimeout, asyncio.TimeoutError)


@dataclass(frozen=True)
class ProviderResponse:
    status_code: int
    body: Optional[Any] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


FetchStatus = Callable[[str], Awaitable[ProviderResponse]]
Sleep = Callable[[float], Awaitable[Any]]


class ReportPoller:
    """Polls one report id until completion, failure, or budget exhaustion."""

    def __init__(
        self,
        fetch: FetchStatus,
        *,
        max_attempts: Optional[int] = None,
        interval_sec: Optional[float] = None,
        error_backoff_sec: Optional[float] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self._fetch = fetch
        self._sleep = sleep
        self.max_attempts = max_attempts if max_attempts is not None else settings.poll_max_attempts
        self.interval_sec = interval_sec if interval_sec is not None else settings.poll_interval_sec
        self.error_backoff_sec = (
            error_backoff_sec if error_backoff_sec is not None else settings.poll_error_backoff_sec
        )

    async def poll(self, report_id: str) -> dict:
        logger.info(f"[POLL] Waiting for report {report_id} (max {self.max_attempts} checks, {self.interval_sec:g}s apart)")

        for attempt in range(1, self.max_attempts + 1):
            if attempt > 1:
                await self._sleep(self.interval_sec)

            is_final = attempt >= self.max_attempts

            try:
                response = await self._fetch(report_id)
            except TRANSIENT_ERRORS as e:
                logger.warning(f"[POLL] Attempt {attempt}/{self.max_attempts} transport failure: {e}")
                if is_final:
                    raise PollingExhausted(
                        f"Video processing failed after {self.max_attempts} attempts: {e}"
                    ) from e
                continue
            except MalformedResponse as e:
                logger.warning(f"[POLL] Attempt {attempt}/{self.max_attempts} unreadable status body: {e}")
                if is_final:
                    raise PollingExhausted(
                        f"Video processing failed after {self.max_attempts} attempts: {e}"
                    ) from e
                await self._sleep(self.error_backoff_sec)
                continue

            if response.status_code == 404:
                logger.error(f"[POLL] Report {report_id} not found")
                raise ReportNotFound(
                    "Video report not found. The video may have failed to upload or process.",
                    status_code=404,
                )

            if response.status_code == 401:
                logger.error(f"[POLL] Authentication rejected while checking {report_id}")
                raise AuthenticationFailed("Authentication failed while checking report status.", status_code=401)

            if not response.ok:
                if is_final:
                    logger.error(f"[POLL] Status check failed on final attempt: {response.status_code}")
                    raise StatusCheckFailed(
                        f"Status check failed with error {response.status_code}",
                        status_code=response.status_code,
                    )
                logger.warning(f"[POLL] Status check failed ({response.status_code}), retrying...")
                continue

            body = response.body if isinstance(response.body, dict) else {}
            state = body.get("status")

            if state == "completed" and body.get("report"):
                logger.info(f"[POLL] Report {report_id} completed after {attempt} checks")
                return body

            if state in TERMINAL_FAILURE_STATES:
                logger.error(f"[POLL] Provider reported '{state}' for {report_id}")
                raise ProviderProcessingFailed(
                    f"Video analysis {state}. The file may be corrupted, too large, or in an unsupported format."
                )

            if state in IN_PROGRESS_STATES:
                progress = min(95.0, attempt / self.max_attempts * 100)
                logger.info(f"[POLL] Still {state} ({attempt}/{self.max_attempts}, ~{progress:.1f}%)")
            else:
                logger.warning(f"[POLL] Unknown status '{state}' for {report_id}, continuing to poll...")

        total_minutes = self.max_attempts * self.interval_sec / 60
        logger.error(f"[POLL] Report {report_id} not finished after {self.max_attempts} checks")
        raise PollingTimeout(
            f"Video processing timeout after {total_minutes:g} minutes."
        )
