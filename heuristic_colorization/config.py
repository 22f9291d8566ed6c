"""Configuration dataclasses for the heuristic colorization pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict, Optional

from heuristic_colorization.types import QualityTier, StrategyId


def _check_range(name: str, value: float, low: float, high: float) -> None:
    if not low <= value <= high:
        raise ValueError(f"{name} must be within [{low}, {high}], got {value}")


@dataclass(frozen=True)
class CustomizationSettings:
    """User-tunable adjustments applied after a strategy runs.

    Attributes:
        saturation: Scale of each channel's distance from the pixel gray.
        warmth: Red multiplier; green is scaled by ``(warmth + 1) / 2``.
        contrast: Contrast around the 0.5 midpoint in normalized space.
        vintage: Whether to add the warm film push.
        preservation: Detail preservation weight. Accepted and carried in
            results, but it does not change any pixel math.
    """

    saturation: float = 1.0
    warmth: float = 1.0
    contrast: float = 1.0
    vintage: bool = False
    preservation: float = 0.8

    def __post_init__(self) -> None:
        _check_range("saturation", self.saturation, 0.5, 2.0)
        _check_range("warmth", self.warmth, 0.5, 1.5)
        _check_range("contrast", self.contrast, 0.5, 2.0)
        _check_range("preservation", self.preservation, 0.0, 1.0)

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


NEUTRAL_CUSTOMIZATION = CustomizationSettings()

STRATEGY_DEFAULTS: Dict[StrategyId, CustomizationSettings] = {
    StrategyId.VINTAGE_RESTORATION: CustomizationSettings(
        saturation=0.8, warmth=1.2, contrast=1.1, vintage=True, preservation=0.8
    ),
    StrategyId.CONTEXT_AWARE_NATURAL: CustomizationSettings(
        saturation=1.0, warmth=1.0, contrast=1.2, vintage=False, preservation=0.9
    ),
    StrategyId.PORTRAIT_ENHANCE: CustomizationSettings(
        saturation=0.9, warmth=1.1, contrast=1.0, vintage=False, preservation=0.85
    ),
    StrategyId.QUICK_VIBRANT: CustomizationSettings(
        saturation=1.3, warmth=1.1, contrast=1.1, vintage=False, preservation=0.7
    ),
    StrategyId.PROFESSIONAL_MULTIPASS: CustomizationSettings(
        saturation=1.1, warmth=1.0, contrast=1.3, vintage=False, preservation=0.95
    ),
    StrategyId.PALETTE_MATCH: CustomizationSettings(
        saturation=1.0, warmth=1.0, contrast=1.0, vintage=False, preservation=0.8
    ),
}


def default_customization(strategy: StrategyId) -> CustomizationSettings:
    """Return the settings a strategy ships with."""

    return STRATEGY_DEFAULTS.get(StrategyId.parse(strategy), NEUTRAL_CUSTOMIZATION)


@dataclass
class PipelineConfig:
    """Top-level configuration for the colorization pipeline.

    Attributes:
        standard_max_dimension: Working-size bound for the standard tier.
        high_max_dimension: Working-size bound for the high tier.
        jpeg_quality: Encoder quality on OpenCV's 0-100 scale.
        ensemble_workers: Threads used for the ensemble components. One runs
            them sequentially.
        fallback_on_error: Replace post-decode failures with the sepia
            rendering instead of raising.
    """

    standard_max_dimension: int = 1024
    high_max_dimension: int = 1280
    jpeg_quality: int = 95
    ensemble_workers: int = 1
    fallback_on_error: bool = True

    def max_dimension(self, quality: QualityTier) -> int:
        if QualityTier.parse(quality) is QualityTier.HIGH:
            return self.high_max_dimension
        return self.standard_max_dimension


@dataclass
class BatchConfig:
    """Settings for running many images through the pipeline.

    Attributes:
        max_workers: Size of the worker pool. One processes items in order on
            the calling thread.
        strategy: Strategy applied to every item.
        quality: Quality tier applied to every item.
        customization: Optional customization shared by every item.
        pipeline: Configuration for the underlying pipeline.
        output_suffix: Appended to each output file name after the item stem and
            strategy id.
    """

    max_workers: int = 1
    strategy: StrategyId = StrategyId.ENSEMBLE
    quality: QualityTier = QualityTier.HIGH
    customization: Optional[CustomizationSettings] = None
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    output_suffix: str = "-colorized.jpg"

    def __post_init__(self) -> None:
        self.strategy = StrategyId.parse(self.strategy)
        self.quality = QualityTier.parse(self.quality)
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")
        if not self.output_suffix:
            raise ValueError("output_suffix must not be empty")
