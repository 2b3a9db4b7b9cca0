"""
Verification routes: /verify, /verify/latest, /verify/latest/summary

POST /verify accepts multipart/form-data with a 'file' field and an optional
X-Device-ID header. The provider credential comes from settings, never from
the client. Typed workflow errors are returned as
{"detail": {"code": ..., "message": ...}} with the error's HTTP status.
"""

import logging
from typing import Optional

from fastapi import APIRouter, File, Header, HTTPException, UploadFile

from media_verify.config import settings
from media_verify.core.errors import VerificationError
from media_verify.core.file_validator import check_size_limit, classify_media
from media_verify.schemas.verification import MediaUpload, VerificationResult, VerificationSummary
from media_verify.services import session_store
from media_verify.services.display import summarize
from media_verify.services.verification_service import verify_media

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Verification"])


def _http_error(e: VerificationError, filename: str) -> HTTPException:
    logger.info(f"[ROUTE] Returning {e.http_status} for {filename}: {e.code}")
    return HTTPException(status_code=e.http_status, detail=e.to_dict())


@router.post("/verify", response_model=VerificationResult, response_model_exclude_none=True)
async def verify(
    file: UploadFile = File(...),
    device_id: Optional[str] = Header(None, alias="X-Device-ID"),
):
    """Verify one image or video against the detection provider."""
    filename = file.filename or "uploaded_file"

    # Reject on the declared size before the body is read into memory.
    if file.size:
        try:
            check_size_limit(classify_media(file.content_type, filename), file.size)
        except VerificationError as e:
            raise _http_error(e, filename)

    upload = MediaUpload(content=await file.read(), filename=filename, mime_type=file.content_type)

    try:
        result = await verify_media(upload, settings.aiornot_api_key)
    except VerificationError as e:
        raise _http_error(e, filename)

    if device_id:
        session_store.save_latest_result(device_id, result)

    return result


@router.get("/verify/latest", response_model=VerificationResult, response_model_exclude_none=True)
async def latest(device_id: str = Header(..., alias="X-Device-ID")):
    """Most recent result for this device, for session resumption."""
    result = session_store.load_latest_result(device_id)
    if result is None:
        raise HTTPException(status_code=404, detail="No recent verification for this device.")
    return result


@router.get("/verify/latest/summary", response_model=VerificationSummary)
async def latest_summary(device_id: str = Header(..., alias="X-Device-ID")):
    """Display labels and recommendation for this device's most recent result."""
    result = session_store.load_latest_result(device_id)
    if result is None:
        raise HTTPException(status_code=404, detail="No recent verification for this device.")
    return summarize(result)


@router.delete("/verify/latest", status_code=204)
async def clear_latest(device_id: str = Header(..., alias="X-Device-ID")):
    session_store.clear_latest_result(device_id)
