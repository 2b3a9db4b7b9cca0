"""
Verification workflow: validate → submit → (poll) → normalize.

`verify_media` is the public entry point. It performs no persistence, no
usage accounting and no session bookkeeping. Callers do that after it
returns. Either a complete VerificationResult comes back or a
VerificationError subclass is raised.
"""

import logging
import time
from typing import Callable, Optional

from media_verify.core.errors import InvalidCredential, VerificationError
from media_verify.core.file_validator import format_file_size, validate_upload
from media_verify.detection.normalizer import normalize_report
from media_verify.detection.policy import NormalizationPolicy
from media_verify.integrations.aiornot import AIOrNotClient
from media_verify.integrations.poller import Sleep
from media_verify.schemas.verification import MediaUpload, VerificationResult

logger = logging.getLogger(__name__)


async def verify_media(
    upload: MediaUpload,
    api_key: Optional[str],
    *,
    client: Optional[AIOrNotClient] = None,
    policy: Optional[NormalizationPolicy] = None,
    clock: Callable[[], float] = time.monotonic,
    sleep: Optional[Sleep] = None,
) -> VerificationResult:
    if not api_key and client is None:
        raise InvalidCredential("API key not provided.")

    kind = validate_upload(upload)
    client = client or AIOrNotClient(api_key)

    logger.info(f"[VERIFY] Processing {kind}: {upload.filename} ({format_file_size(upload.size)})")

    started = clock()
    try:
        payload = await client.analyze(upload, kind, sleep=sleep)
    except VerificationError as e:
        logger.error(f"[VERIFY] {upload.filename} failed: {e.code}: {e.message}")
        raise

    processing_time = clock() - started

    result = normalize_report(
        payload,
        kind,
        processing_time,
        policy=policy,
        fallback_id=f"temp-{int(time.time() * 1000)}",
        file_size=format_file_size(upload.size),
    )

    logger.info(
        f"[VERIFY] {upload.filename} → {result.status} {result.confidence:.1f}% in {result.processing_time:.2f}s"
    )
    return result
