"""
Detection provider client ("AI or Not" v1 reports API).

Images are analyzed synchronously: the upload response already carries the
`report`. Videos are only acknowledged with a `report_id` and have to be
polled until the report is complete (see integrations/poller.py).

Endpoint URLs come from settings so another deployment of the same API shape
can be targeted without code changes.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import aiohttp

from media_verify.config import settings
from media_verify.core.errors import (
    InvalidCredential,
    MalformedResponse,
    NetworkError,
    RequestTimeout,
    error_for_submission_status,
)
from media_verify.integrations import http_client as http_module
from media_verify.integrations.poller import ProviderResponse, ReportPoller, Sleep
from media_verify.schemas.verification import MediaKind, MediaUpload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadTarget:
    endpoint: str
    field_name: str
    timeout_sec: float


def upload_target(kind: MediaKind) -> UploadTarget:
    """Endpoint, multipart field name and upload deadline for a media kind."""
    if kind == "image":
        return UploadTarget(
            endpoint=settings.provider_image_endpoint,
            field_name="object",
            timeout_sec=settings.image_upload_timeout_sec,
        )
    return UploadTarget(
        endpoint=settings.provider_video_endpoint,
        field_name="video",
        timeout_sec=settings.video_upload_timeout_sec,
    )


def needs_polling(kind: MediaKind, payload: dict) -> bool:
    """A video upload acknowledged with a report id but no report body is still running."""
    return kind == "video" and bool(payload.get("report_id")) and not payload.get("report")


class AIOrNotClient:
    def __init__(self, api_key: Optional[str], report_endpoint: Optional[str] = None):
        if not api_key:
            raise InvalidCredential("API key not provided.")
        self._api_key = api_key
        self.report_endpoint = (report_endpoint or settings.provider_report_endpoint).rstrip("/")

    @property
    def _headers(self) -> dict:
        # No Content-Type: aiohttp sets the multipart boundary itself.
        return {"Authorization": f"Bearer {self._api_key}"}

    async def submit(self, upload: MediaUpload, kind: MediaKind) -> dict:
        """Upload the file once. Returns the provider's JSON payload or raises a typed error."""
        target = upload_target(kind)

        form = aiohttp.FormData()
        form.add_field(
            target.field_name,
            upload.content,
            filename=upload.filename,
            content_type=upload.mime_type or "application/octet-stream",
        )

        logger.info(
            f"[SUBMIT] {kind} {upload.filename} ({upload.size} bytes) → {target.endpoint} "
            f"field='{target.field_name}' timeout={target.timeout_sec:g}s"
        )

        try:
            async with http_module.request_session() as sess:
                async with sess.post(
                    target.endpoint,
                    data=form,
                    headers=self._headers,
                    timeout=aiohttp.ClientTimeout(total=target.timeout_sec),
                ) as response:
                    if not 200 <= response.status < 300:
                        error_text = await response.text()
                        logger.error(f"[SUBMIT] Provider error {response.status}: {error_text}")
                        raise error_for_submission_status(response.status, error_text)

                    try:
                        payload = await response.json(content_type=None)
                    except ValueError as e:
                        raise MalformedResponse(f"Provider returned invalid JSON: {e}") from e
        except asyncio.TimeoutError as e:
            logger.error(f"[SUBMIT] Upload timed out after {target.timeout_sec:g}s")
            raise RequestTimeout(
                f"Upload timed out after {target.timeout_sec:g}s. Try a smaller file or check your connection."
            ) from e
        except aiohttp.ClientError as e:
            logger.error(f"[SUBMIT] Network error: {e}")
            raise NetworkError(f"Unable to connect to verification service: {e}") from e

        if not isinstance(payload, dict):
            raise MalformedResponse("Provider response is not a JSON object.")

        logger.info(f"[SUBMIT] Response received (report_id={payload.get('report_id') or payload.get('id')})")
        logger.debug(f"[SUBMIT] Raw response: {payload}")
        return payload

    async def fetch_report(self, report_id: str) -> ProviderResponse:
        """One status check. Non-2xx statuses are returned, not raised; the poller classifies them."""
        url = f"{self.report_endpoint}/{report_id}"
        try:
            async with http_module.request_session() as sess:
                async with sess.get(
                    url,
                    headers=self._headers,
                    timeout=aiohttp.ClientTimeout(total=settings.poll_request_timeout_sec),
                ) as response:
                    if not 200 <= response.status < 300:
                        return ProviderResponse(status_code=response.status)
                    try:
                        body = await response.json(content_type=None)
                    except ValueError as e:
                        raise MalformedResponse(f"Status body is not valid JSON: {e}") from e
        except asyncio.TimeoutError as e:
            raise RequestTimeout(f"Status check timed out after {settings.poll_request_timeout_sec:g}s") from e
        except aiohttp.ClientError as e:
            raise NetworkError(f"Status check failed: {e}") from e

        if not isinstance(body, dict):
            raise MalformedResponse("Status body is not a JSON object.")
        return ProviderResponse(status_code=response.status, body=body)

    def poller(self, sleep: Optional[Sleep] = None) -> ReportPoller:
        if sleep is None:
            return ReportPoller(self.fetch_report)
        return ReportPoller(self.fetch_report, sleep=sleep)

    async def analyze(self, upload: MediaUpload, kind: MediaKind, sleep: Optional[Sleep] = None) -> dict:
        """Submit, then poll when the provider answered asynchronously. Returns the terminal payload."""
        payload = await self.submit(upload, kind)
        if needs_polling(kind, payload):
            logger.info(f"[SUBMIT] Video accepted for processing, polling report {payload['report_id']}")
            return await self.poller(sleep).poll(str(payload["report_id"]))
        return payload
