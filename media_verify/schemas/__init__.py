from media_verify.schemas.verification import (
    DetectionDetails,
    MediaKind,
    MediaUpload,
    Status,
    StatusBand,
    VerificationResult,
    VerificationSummary,
)

__all__ = [
    "DetectionDetails",
    "MediaKind",
    "MediaUpload",
    "Status",
    "StatusBand",
    "VerificationResult",
    "VerificationSummary",
]
