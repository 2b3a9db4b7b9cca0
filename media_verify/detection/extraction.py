"""
Probability extraction strategies for provider report payloads.

The provider nests its confidence figures differently for images and videos,
and older report formats differ again. Each strategy below is a pure function
`(payload) -> ProbabilityPair | None` that understands exactly one shape.
`extract_probabilities` tries the chain for a media kind in priority order and
returns the first hit.

All values are fractions in [0, 1]; either side of a pair may be missing.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence

from media_verify.schemas.verification import MediaKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbabilityPair:
    ai: Optional[float] = None
    human: Optional[float] = None
    detected: Optional[bool] = None   # explicit "detected as AI" flag
    source: str = ""

    @property
    def is_complete(self) -> bool:
        return self.ai is not None and self.human is not None


Strategy = Callable[[Dict[str, Any]], Optional[ProbabilityPair]]


def as_number(value: Any) -> Optional[float]:
    """Finite real numbers only; bools are ints and do not count."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    if not math.isfinite(number):
        return None
    return number


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _report(payload: Dict[str, Any]) -> Dict[str, Any]:
    return _as_dict(payload.get("report"))


def _side_confidence(side: Any) -> Optional[float]:
    """`report.ai` may be `{"confidence": x, ...}` or a bare number."""
    if isinstance(side, dict):
        return as_number(side.get("confidence"))
    return as_number(side)


def _side_detected(side: Any) -> Optional[bool]:
    if isinstance(side, dict) and isinstance(side.get("is_detected"), bool):
        return side["is_detected"]
    return None


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


def ai_video_probabilities(payload: Dict[str, Any]) -> Optional[ProbabilityPair]:
    ai_video = _as_dict(_report(payload).get("ai_video"))
    ai = as_number(ai_video.get("ai_probability"))
    if ai is None:
        return None
    return ProbabilityPair(
        ai=ai,
        human=as_number(ai_video.get("human_probability")),
        detected=_side_detected(ai_video),
        source="ai_video_probabilities",
    )


def ai_video_confidence(payload: Dict[str, Any]) -> Optional[ProbabilityPair]:
    ai_video = _as_dict(_report(payload).get("ai_video"))
    confidence = as_number(ai_video.get("confidence"))
    if confidence is None:
        return None
    return ProbabilityPair(
        ai=confidence,
        detected=_side_detected(ai_video),
        source="ai_video_confidence",
    )


def top_level_probabilities(payload: Dict[str, Any]) -> Optional[ProbabilityPair]:
    ai = as_number(payload.get("ai_probability"))
    if ai is None:
        return None
    return ProbabilityPair(
        ai=ai,
        human=as_number(payload.get("human_probability")),
        source="top_level_probabilities",
    )


def nested_confidence(payload: Dict[str, Any]) -> Optional[ProbabilityPair]:
    report = _report(payload)
    ai = _side_confidence(report.get("ai"))
    human = _side_confidence(report.get("human"))
    if ai is None and human is None:
        return None
    return ProbabilityPair(
        ai=ai,
        human=human,
        detected=_side_detected(report.get("ai")),
        source="nested_confidence",
    )


STRATEGIES: Dict[str, Sequence[Strategy]] = {
    "video": (
        ai_video_probabilities,
        ai_video_confidence,
        top_level_probabilities,
        nested_confidence,
    ),
    "image": (
        top_level_probabilities,
        nested_confidence,
    ),
}


def extract_probabilities(payload: Dict[str, Any], kind: MediaKind) -> Optional[ProbabilityPair]:
    """Run the strategy chain for `kind`; None when no strategy finds a number."""
    for strategy in STRATEGIES[kind]:
        pair = strategy(payload)
        if pair is not None:
            logger.debug(f"[NORMALIZE] {kind} probabilities from {pair.source}: ai={pair.ai} human={pair.human}")
            return pair
    return None
