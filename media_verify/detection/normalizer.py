"""
Provider report → VerificationResult.

`normalize_report` is the only place a provider payload is interpreted. It is
a pure function of its arguments: processing time and the fallback id are
supplied by the caller, so the same payload always yields the same result.

Nothing is synthesized. Facet scores, resolution, duration, risk factors and
recommendations appear only when the payload carries them; the single
exception is the complement inference governed by `NormalizationPolicy`.
"""

import logging
import math
from typing import Any, Dict, List, Optional, Tuple

from media_verify.config import settings
from media_verify.core.errors import MalformedResponse
from media_verify.detection.extraction import ProbabilityPair, as_number, extract_probabilities
from media_verify.detection.policy import NormalizationPolicy, policy_from_settings
from media_verify.schemas.verification import (
    DetectionDetails,
    MediaKind,
    Status,
    VerificationResult,
)

logger = logging.getLogger(__name__)


def _dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _percent(fraction: float) -> float:
    return max(0.0, min(100.0, round(fraction * 100, 4)))


def _score(value: Any) -> Optional[int]:
    """Facet score (0-1) → rounded percentage, half-up."""
    number = as_number(value)
    if number is None:
        return None
    return int(math.floor(number * 100 + 0.5))


def _facet_score(facets: Dict[str, Any], name: str) -> Optional[int]:
    return _score(_dict(facets.get(name)).get("score"))


def _resolve_sides(pair: Optional[ProbabilityPair], infer_complement: bool) -> Tuple[float, float]:
    if pair is None:
        logger.warning("[NORMALIZE] Provider did not supply confidence values, using zero values")
        return 0.0, 0.0

    ai, human = pair.ai, pair.human
    if ai is not None and human is not None:
        return ai, human

    known = ai if ai is not None else human
    if infer_complement:
        inferred = max(0.0, 1.0 - known)
    else:
        logger.warning(f"[NORMALIZE] Only one probability side supplied ({pair.source}); complement inference disabled")
        inferred = 0.0

    if ai is None:
        return inferred, human
    return ai, inferred


def _decide_status(
    verdict: Optional[str],
    detected: Optional[bool],
    ai_probability: float,
    human_probability: float,
) -> Tuple[Status, float]:
    if verdict == "ai":
        return "fake", ai_probability
    if verdict == "human":
        return "authentic", human_probability
    if detected is True:
        return "fake", ai_probability
    if detected is False:
        return "authentic", human_probability
    if ai_probability > human_probability and ai_probability > 0:
        return "fake", ai_probability
    if human_probability > ai_probability and human_probability > 0:
        return "authentic", human_probability

    # No usable signal: never default to the alarming state.
    logger.warning("[NORMALIZE] No clear status signal, defaulting to authentic with 0% confidence")
    return "authentic", 0.0


def _detection_details(payload: Dict[str, Any], report: Dict[str, Any], kind: MediaKind) -> DetectionDetails:
    facets = _dict(payload.get("facets"))
    ai_details = _dict(_dict(report.get("ai")).get("details"))

    face = _facet_score(facets, "face_detection")
    if face is None:
        face = _score(ai_details.get("face_analysis"))

    details: Dict[str, Optional[int]] = {
        "face_analysis": face,
        "compression_artifacts": _facet_score(facets, "quality"),
    }
    if kind == "image":
        details["metadata_analysis"] = _facet_score(facets, "metadata")
        details["pixel_analysis"] = _score(ai_details.get("pixel_analysis"))
    else:
        details["temporal_consistency"] = _score(ai_details.get("temporal_consistency"))
        details["audio_analysis"] = _facet_score(facets, "audio_analysis")

    return DetectionDetails(**details)


def _resolution(media_info: Dict[str, Any]) -> Optional[str]:
    width = as_number(media_info.get("width"))
    height = as_number(media_info.get("height"))
    if not width or not height:
        return None
    return f"{int(width)}x{int(height)}"


def _duration(media_info: Dict[str, Any]) -> Optional[str]:
    seconds = as_number(media_info.get("duration_seconds"))
    if not seconds or seconds < 0:
        return None
    return f"{int(seconds // 60)}:{int(seconds % 60):02d}"


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def normalize_report(
    payload: Any,
    kind: MediaKind,
    processing_time: float,
    *,
    policy: Optional[NormalizationPolicy] = None,
    fallback_id: Optional[str] = None,
    file_size: Optional[str] = None,
) -> VerificationResult:
    """Map one terminal provider payload onto a VerificationResult."""
    if not isinstance(payload, dict):
        raise MalformedResponse(f"Provider report must be a JSON object, got {type(payload).__name__}")

    policy = policy or policy_from_settings()
    report = _dict(payload.get("report"))
    media_info = _dict(report.get("media_info"))

    logger.debug(
        f"[NORMALIZE] kind={kind} report_keys={sorted(report.keys())} "
        f"facet_keys={sorted(_dict(payload.get('facets')).keys())}"
    )

    pair = extract_probabilities(payload, kind)
    ai_side, human_side = _resolve_sides(pair, policy.infer_complement)
    ai_probability = _percent(ai_side)
    human_probability = _percent(human_side)

    raw_verdict = report.get("verdict")
    status, confidence = _decide_status(
        raw_verdict if isinstance(raw_verdict, str) else None,
        pair.detected if pair else None,
        ai_probability,
        human_probability,
    )

    provider_id = payload.get("id") or payload.get("report_id")
    report_id = str(provider_id) if provider_id is not None else None

    result = VerificationResult(
        id=report_id or fallback_id or "unknown",
        report_id=report_id,
        status=status,
        status_band=policy.band_policy(status, confidence, ai_probability),
        confidence=confidence,
        ai_probability=ai_probability,
        human_probability=human_probability,
        content_type=kind,
        file_size=file_size,
        detection_details=_detection_details(payload, report, kind),
        risk_factors=_string_list(report.get("risk_factors")),
        recommendations=_string_list(report.get("recommendations")),
        resolution=_resolution(media_info),
        duration=_duration(media_info) if kind == "video" else None,
        processing_time=max(settings.min_processing_time_sec, processing_time),
        raw_api_response=payload,
        generator_analysis=_dict(report.get("generator")),
        api_verdict=raw_verdict if isinstance(raw_verdict, str) else None,
    )

    logger.info(
        f"[NORMALIZE] {kind} → {result.status} ({result.status_band}) "
        f"confidence={result.confidence:.1f}% ai={ai_probability:.1f}% human={human_probability:.1f}%"
    )
    return result
