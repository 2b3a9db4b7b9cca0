"""
Presentation helpers shared by every place a result is shown or exported.

Status comes strictly from provider data; when nothing usable is available the
wording says so ("Status Unknown") instead of leaning either way.
"""

from dataclasses import dataclass
from typing import Optional

from media_verify.schemas.verification import Status, VerificationResult, VerificationSummary


@dataclass(frozen=True)
class DisplayStatus:
    status: Status
    display_status: str
    qualitative_status: str
    confidence: float


def qualitative_status(status: Status, confidence: float) -> str:
    if confidence <= 0:
        return "Status Unknown"

    label = "Authentic" if status == "authentic" else "AI Generated"
    if confidence >= 90:
        return f"Highly {label}"
    if confidence >= 70:
        return f"Likely {label}"
    if confidence >= 50:
        return f"Possibly {label}"
    return f"Uncertain - Lean {label}"


def recommendation_text(status: Status, qualitative: str) -> str:
    if status == "authentic":
        if qualitative.startswith("Highly"):
            return "Strong evidence suggests this content is human-created"
        if qualitative.startswith("Likely"):
            return "Evidence suggests this content is human-created"
        if qualitative.startswith("Possibly"):
            return "Some evidence suggests human creation, verify with additional sources"
        return "Uncertain analysis, recommend additional verification"

    if qualitative.startswith("Highly"):
        return "Strong evidence suggests this content is AI-generated"
    if qualitative.startswith("Likely"):
        return "Evidence suggests this content is AI-generated"
    if qualitative.startswith("Possibly"):
        return "Some evidence suggests AI generation, exercise caution"
    return "Uncertain analysis, exercise caution and seek additional verification"


def resolve_display_status(
    ai_probability: Optional[float] = None,
    human_probability: Optional[float] = None,
    fallback_status: Optional[str] = None,
    stored_confidence: Optional[float] = None,
) -> DisplayStatus:
    """
    Pick the status to show for a stored verification.

    Order: live probabilities → confidence persisted from an earlier response
    → the verdict alone (with zero confidence).
    """
    ai = ai_probability or 0.0
    human = human_probability or 0.0
    status: Status = "authentic"
    confidence = 0.0

    if ai > 0 or human > 0:
        if ai > human:
            status, confidence = "fake", ai
        else:
            status, confidence = "authentic", human
    elif stored_confidence is not None and stored_confidence > 0:
        status = "fake" if fallback_status in ("fake", "ai") else "authentic"
        confidence = stored_confidence
    elif fallback_status in ("fake", "ai"):
        status = "fake"

    return DisplayStatus(
        status=status,
        display_status="AI Generated" if status == "fake" else "Human Created",
        qualitative_status=qualitative_status(status, confidence),
        confidence=confidence,
    )


def format_confidence(confidence: float) -> str:
    return f"{confidence:.1f}%"


def summarize(result: VerificationResult) -> VerificationSummary:
    """Wording and labels for one result, as shown to the user."""
    # The normalized status already reflects the verdict, so probabilities are not re-compared.
    display = resolve_display_status(fallback_status=result.status, stored_confidence=result.confidence)
    return VerificationSummary(
        id=result.id,
        content_type=result.content_type,
        status=display.status,
        display_status=display.display_status,
        qualitative_status=display.qualitative_status,
        confidence=display.confidence,
        confidence_label=format_confidence(display.confidence),
        recommendation=recommendation_text(display.status, display.qualitative_status),
    )
