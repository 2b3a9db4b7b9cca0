"""
Normalization policy: complement inference and status banding.

Call sites historically disagreed on two points, so both are parameters here
rather than constants:
  - whether a missing probability side is inferred as `100 - known side`
  - whether results are shown in two bands (authentic/fake) or three
    (authentic/suspicious/fake), and at which cut-offs
"""

from dataclasses import dataclass, field
from typing import Callable, Optional

from media_verify.config import settings
from media_verify.schemas.verification import Status, StatusBand

BandPolicy = Callable[[Status, float, float], StatusBand]


def binary_bands(status: Status, confidence: float, ai_probability: float) -> StatusBand:
    return status


@dataclass(frozen=True)
class ThresholdBands:
    """Three bands on the AI probability: >= fake_at → fake, <= authentic_at → authentic."""
    fake_at: float = 70.0
    authentic_at: float = 30.0

    def __call__(self, status: Status, confidence: float, ai_probability: float) -> StatusBand:
        # Nothing reported at all: keep the conservative binary status.
        if confidence == 0 and ai_probability == 0:
            return status
        if ai_probability >= self.fake_at:
            return "fake"
        if ai_probability <= self.authentic_at:
            return "authentic"
        return "suspicious"


@dataclass(frozen=True)
class NormalizationPolicy:
    infer_complement: bool = True
    band_policy: BandPolicy = field(default=binary_bands)


def policy_from_settings(config: Optional[object] = None) -> NormalizationPolicy:
    config = config or settings
    if config.status_band_mode == "threshold":
        bands: BandPolicy = ThresholdBands(
            fake_at=config.band_fake_threshold,
            authentic_at=config.band_authentic_threshold,
        )
    else:
        bands = binary_bands
    return NormalizationPolicy(infer_complement=config.infer_complement, band_policy=bands)
