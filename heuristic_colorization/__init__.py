"""Deterministic heuristic colorization of grayscale images.

The package turns a grayscale (or near-grayscale) raster into a plausible
color rendering with pixel-level rules only: a fixed catalogue of named
strategies, a user customization stage, an ensemble blender and a
strategy-specific stylization pass, framed by a bounded-resolution
normalizer and a JPEG encoder with a sepia fallback.
"""

from heuristic_colorization.batch import BatchColorizer, BatchItem, BatchStatus
from heuristic_colorization.config import (
    BatchConfig,
    CustomizationSettings,
    PipelineConfig,
    default_customization,
)
from heuristic_colorization.pipeline import ColorizationPipeline, colorize
from heuristic_colorization.types import (
    ColorizationError,
    ColorizeRequest,
    ColorizeResult,
    EncodedImage,
    EncodeError,
    ImageAnalysis,
    ImageDecodeError,
    QualityTier,
    RasterImage,
    StrategyId,
)

__all__ = [
    "BatchColorizer",
    "BatchItem",
    "BatchStatus",
    "BatchConfig",
    "CustomizationSettings",
    "PipelineConfig",
    "default_customization",
    "ColorizationPipeline",
    "colorize",
    "ColorizationError",
    "ColorizeRequest",
    "ColorizeResult",
    "EncodedImage",
    "EncodeError",
    "ImageAnalysis",
    "ImageDecodeError",
    "QualityTier",
    "RasterImage",
    "StrategyId",
]
