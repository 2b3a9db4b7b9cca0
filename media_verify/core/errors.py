"""
Typed failures for the verification workflow.

Every error the core can raise subclasses `VerificationError` and carries:
  - `code`        stable snake-case identifier for API clients
  - `http_status` status the HTTP surface answers with
  - `status_code` the provider's HTTP status, when one was involved

The core never translates these into user-facing copy; callers do.
"""

from typing import Optional


class VerificationError(Exception):
    code = "verification_failed"
    http_status = 500

    def __init__(self, message: str, status_code: Optional[int] = None, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = detail

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


# --- Local validation (raised before any network call) ---

class UnsupportedMediaType(VerificationError):
    code = "unsupported_media_type"
    http_status = 415


class InvalidUpload(VerificationError):
    code = "invalid_upload"
    http_status = 400


class InvalidCredential(VerificationError):
    code = "invalid_credential"
    http_status = 500


class PayloadTooLarge(VerificationError):
    code = "payload_too_large"
    http_status = 413


# --- Provider HTTP status mapping ---

class AuthenticationFailed(VerificationError):
    code = "authentication_failed"
    http_status = 502


class AccessForbidden(VerificationError):
    code = "access_forbidden"
    http_status = 502


class RateLimited(VerificationError):
    code = "rate_limited"
    http_status = 429


class ProviderServerError(VerificationError):
    code = "provider_server_error"
    http_status = 502


class ProviderRequestFailed(VerificationError):
    code = "provider_request_failed"
    http_status = 502


# --- Polling ---

class ReportNotFound(VerificationError):
    code = "report_not_found"
    http_status = 404


class ProviderProcessingFailed(VerificationError):
    code = "provider_processing_failed"
    http_status = 422


class StatusCheckFailed(VerificationError):
    code = "status_check_failed"
    http_status = 502


class PollingExhausted(VerificationError):
    code = "polling_exhausted"
    http_status = 504


class PollingTimeout(VerificationError):
    code = "polling_timeout"
    http_status = 504


# --- Transport / payload ---

class NetworkError(VerificationError):
    code = "network_error"
    http_status = 503


class RequestTimeout(VerificationError):
    code = "request_timeout"
    http_status = 504


class MalformedResponse(VerificationError):
    code = "malformed_response"
    http_status = 502


def error_for_submission_status(status: int, body_text: str = "") -> VerificationError:
    """Map a non-success status from the report upload to its error kind."""
    if status == 401:
        return AuthenticationFailed("Invalid API key.", status_code=status, detail=body_text)
    if status == 403:
        return AccessForbidden("Access forbidden for this API key.", status_code=status, detail=body_text)
    if status == 413:
        return PayloadTooLarge("File is too large for the provider.", status_code=status, detail=body_text)
    if status == 429:
        return RateLimited("Provider rate limit exceeded.", status_code=status, detail=body_text)
    if status >= 500:
        return ProviderServerError(f"Provider server error ({status}).", status_code=status, detail=body_text)
    return ProviderRequestFailed(
        f"Provider rejected the request ({status}): {body_text or 'Unknown error'}",
        status_code=status,
        detail=body_text,
    )
