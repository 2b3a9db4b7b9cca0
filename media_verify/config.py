"""
Central application configuration.

Every tunable value lives here as a typed, documented field.
Any field can be overridden at runtime via an environment variable of the
same name (case-insensitive), e.g.:

    AIORNOT_API_KEY=sk_live_... uvicorn media_verify.main:app
    export STATUS_BAND_MODE=threshold             # three-band display
    export INFER_COMPLEMENT=false                 # never guess the other side

A `.env` file at the project root is loaded automatically.
"""

from typing import Literal, Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,   # AIORNOT_API_KEY == aiornot_api_key
        extra="ignore",         # silently drop unknown env vars
    )

    # ------------------------------------------------------------------ #
    # Detection Provider                                                  #
    # ------------------------------------------------------------------ #
    aiornot_api_key: Optional[str] = Field(
        None, description="Bearer credential for the detection provider"
    )
    provider_image_endpoint: str = Field(
        "https://api.aiornot.com/v1/reports/image",
        description="Synchronous image report endpoint (multipart field 'object')"
    )
    provider_video_endpoint: str = Field(
        "https://api.aiornot.com/v1/reports/video",
        description="Asynchronous video report endpoint (multipart field 'video')"
    )
    provider_report_endpoint: str = Field(
        "https://api.aiornot.com/v1/reports",
        description="Report status base URL; the report id is appended"
    )

    # ------------------------------------------------------------------ #
    # Timeouts (seconds)                                                  #
    # ------------------------------------------------------------------ #
    image_upload_timeout_sec: float = Field(
        45.0, description="Images return inline, so the upload deadline is short"
    )
    video_upload_timeout_sec: float = Field(
        180.0, description="Videos only acknowledge receipt, but the upload itself is large"
    )

    # ------------------------------------------------------------------ #
    # Video Report Polling                                                #
    # ------------------------------------------------------------------ #
    poll_max_attempts: int = Field(
        60, description="Status checks before giving up (60 x 10 s = 10 min)"
    )
    poll_interval_sec: float = Field(
        10.0, description="Wait between status checks"
    )
    poll_request_timeout_sec: float = Field(
        8.0, description="Per-check deadline; must stay below poll_interval_sec"
    )
    poll_error_backoff_sec: float = Field(
        5.0, description="Extra wait after an unreadable status body"
    )

    # ------------------------------------------------------------------ #
    # Result Normalization                                                #
    # ------------------------------------------------------------------ #
    infer_complement: bool = Field(
        True, description="Derive the missing side as 100 - known side"
    )
    status_band_mode: Literal["binary", "threshold"] = Field(
        "binary", description="'binary' → authentic/fake, 'threshold' adds 'suspicious'"
    )
    band_fake_threshold: float = Field(
        70.0, description="AI probability at or above this → 'fake' band"
    )
    band_authentic_threshold: float = Field(
        30.0, description="AI probability at or below this → 'authentic' band"
    )
    min_processing_time_sec: float = Field(
        0.1, description="Floor for the reported processing time"
    )

    # ------------------------------------------------------------------ #
    # File Size Limits                                                    #
    # ------------------------------------------------------------------ #
    max_image_upload_mb: int = Field(
        50, description="Max MB for image uploads"
    )
    max_video_upload_mb: int = Field(
        500, description="Max MB for video uploads"
    )

    # ------------------------------------------------------------------ #
    # Session Store                                                       #
    # ------------------------------------------------------------------ #
    upstash_redis_host: Optional[str] = Field(
        None, description="Upstash REST URL; memory fallback when unset"
    )
    upstash_redis_password: Optional[str] = Field(
        None, description="Upstash REST token"
    )
    session_ttl_sec: int = Field(
        86_400, description="24 h, most recent result per device (session:{device_id})"
    )
    session_memory_limit: int = Field(
        1000, description="Max devices kept by the in-memory fallback store"
    )

    # ------------------------------------------------------------------ #
    # Derived byte-level properties (computed from MB fields)             #
    # ------------------------------------------------------------------ #
    @property
    def max_image_upload_bytes(self) -> int:
        return self.max_image_upload_mb * 1024 * 1024

    @property
    def max_video_upload_bytes(self) -> int:
        return self.max_video_upload_mb * 1024 * 1024

    @model_validator(mode="after")
    def check_poll_timing(self) -> "Settings":
        if self.poll_request_timeout_sec >= self.poll_interval_sec:
            raise ValueError(
                f"poll_request_timeout_sec ({self.poll_request_timeout_sec:g}) must be below "
                f"poll_interval_sec ({self.poll_interval_sec:g})"
            )
        return self


# Single shared instance, import this everywhere.
settings = Settings()
