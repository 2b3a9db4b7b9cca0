from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

MediaKind = Literal["image", "video"]
Status = Literal["authentic", "fake"]
StatusBand = Literal["authentic", "suspicious", "fake"]


class MediaUpload(BaseModel):
    """A file handed to the workflow. Never persisted by the core."""
    model_config = ConfigDict(frozen=True)

    content: bytes
    filename: str
    mime_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


class DetectionDetails(BaseModel):
    """Facet sub-scores (0-100). A field is None unless the provider reported it."""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    face_analysis: Optional[int] = None
    temporal_consistency: Optional[int] = None
    audio_analysis: Optional[int] = None
    compression_artifacts: Optional[int] = None
    metadata_analysis: Optional[int] = None
    pixel_analysis: Optional[int] = None


class VerificationResult(BaseModel):
    """Normalized provider verdict. Serializes with camelCase keys."""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    report_id: Optional[str] = None
    status: Status
    status_band: StatusBand
    confidence: float = Field(ge=0, le=100)
    ai_probability: float = Field(ge=0, le=100)
    human_probability: float = Field(ge=0, le=100)
    content_type: MediaKind
    file_size: Optional[str] = None
    detection_details: DetectionDetails = Field(default_factory=DetectionDetails)
    risk_factors: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    resolution: Optional[str] = None
    duration: Optional[str] = None
    processing_time: float
    raw_api_response: Dict[str, Any] = Field(default_factory=dict)
    generator_analysis: Dict[str, Any] = Field(default_factory=dict)
    api_verdict: Optional[str] = None


class VerificationSummary(BaseModel):
    """Display-ready view of a VerificationResult."""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    content_type: MediaKind
    status: Status
    display_status: str
    qualitative_status: str
    confidence: float = Field(ge=0, le=100)
    confidence_label: str
    recommendation: str
