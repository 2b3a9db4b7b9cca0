"""
Media classification and upload validation.

Classification runs on the declared MIME type first and falls back to the
filename extension, so a browser upload labelled `application/octet-stream`
still resolves. Everything here runs before any network call.
"""

import logging
import os
import re
from typing import Optional

from media_verify.config import settings
from media_verify.core.errors import InvalidUpload, PayloadTooLarge, UnsupportedMediaType
from media_verify.schemas.verification import MediaKind, MediaUpload

logger = logging.getLogger(__name__)

SUPPORTED_IMAGE_TYPES = (
    'image/jpeg', 'image/png', 'image/gif', 'image/webp', 'image/bmp',
    'image/tiff', 'image/svg+xml', 'image/heic', 'image/heif',
    'image/avif', 'image/jxl', 'image/raw', 'image/cr2', 'image/nef',
    'image/arw', 'image/dng', 'image/psd', 'image/ico', 'image/jp2',
    'image/jpm', 'image/jpx',
)

SUPPORTED_VIDEO_TYPES = (
    'video/mp4', 'video/avi', 'video/mov', 'video/wmv', 'video/flv',
    'video/webm', 'video/mkv', 'video/m4v', 'video/3gp', 'video/3g2',
    'video/mts', 'video/m2ts', 'video/ts', 'video/mxf', 'video/asf',
    'video/rm', 'video/rmvb', 'video/vob', 'video/ogv', 'video/dv',
    'video/quicktime',
)

_IMAGE_EXT_RE = re.compile(
    r'\.(jpg|jpeg|png|gif|webp|bmp|tiff|tif|svg|heic|heif|avif|jxl|raw|cr2|nef|arw|dng|psd|ico|jp2|jpm|jpx)$',
    re.IGNORECASE,
)
_VIDEO_EXT_RE = re.compile(
    r'\.(mp4|avi|mov|wmv|flv|webm|mkv|m4v|3gp|3g2|mts|m2ts|ts|mxf|asf|rm|rmvb|vob|ogv|dv)$',
    re.IGNORECASE,
)


def is_image(mime_type: Optional[str], filename: str) -> bool:
    mime = (mime_type or "").lower()
    if mime.startswith("image/") or mime in SUPPORTED_IMAGE_TYPES:
        return True
    return bool(_IMAGE_EXT_RE.search(filename or ""))


def is_video(mime_type: Optional[str], filename: str) -> bool:
    mime = (mime_type or "").lower()
    if mime.startswith("video/") or mime in SUPPORTED_VIDEO_TYPES:
        return True
    return bool(_VIDEO_EXT_RE.search(filename or ""))


def classify_media(mime_type: Optional[str], filename: str) -> MediaKind:
    """Resolve an upload to 'image' or 'video'; image wins when both match."""
    if is_image(mime_type, filename):
        return "image"
    if is_video(mime_type, filename):
        return "video"
    raise UnsupportedMediaType(
        f"Unsupported file type: {mime_type or os.path.splitext(filename or '')[1] or 'unknown'}. "
        "Please upload an image or video file."
    )


def validate_upload(upload: MediaUpload) -> MediaKind:
    """Classify the upload and enforce the per-kind size limit."""
    if not upload.content:
        raise InvalidUpload("No file provided.")

    kind = classify_media(upload.mime_type, upload.filename)
    check_size_limit(kind, upload.size)
    return kind


def check_size_limit(kind: MediaKind, size: int) -> None:
    """Raise PayloadTooLarge when `size` bytes exceeds the limit for this kind."""
    max_bytes = settings.max_image_upload_bytes if kind == "image" else settings.max_video_upload_bytes

    if size > max_bytes:
        logger.warning(f"[VALIDATE] Rejected {kind} of {format_file_size(size)} (limit {max_bytes // 1024 // 1024}MB)")
        raise PayloadTooLarge(
            f"File size exceeds {max_bytes // 1024 // 1024}MB limit for {kind}s."
        )


def format_file_size(size: int) -> str:
    """Human-readable size: '0 Bytes', '1.5 KB', '2 MB'."""
    if size <= 0:
        return "0 Bytes"

    units = ["Bytes", "KB", "MB", "GB"]
    i = 0
    while i < len(units) - 1 and size >= 1024 ** (i + 1):
        i += 1
    value = round(size / (1024 ** i), 2)
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {units[i]}"
