"""Shared type definitions for the heuristic colorization pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional, Union

import numpy as np

if TYPE_CHECKING:
    from heuristic_colorization.config import CustomizationSettings


ProgressCallback = Callable[[int], None]
ImageSource = Union[bytes, bytearray, memoryview, str, os.PathLike, np.ndarray]


class ColorizationError(Exception):
    """Base class for errors raised by the colorization pipeline."""


class ImageDecodeError(ColorizationError, ValueError):
    """The source image could not be decoded into a raster."""


class EncodeError(ColorizationError, RuntimeError):
    """The final raster could not be serialized to an image blob."""


class StrategyId(str, Enum):
    """Named colorization variants."""

    VINTAGE_RESTORATION = "vintage-restoration"
    CONTEXT_AWARE_NATURAL = "context-aware-natural"
    PORTRAIT_ENHANCE = "portrait-enhance"
    QUICK_VIBRANT = "quick-vibrant"
    PROFESSIONAL_MULTIPASS = "professional-multipass"
    PALETTE_MATCH = "palette-match"
    EDGE_AWARE_CLASSIC = "edge-aware-classic"
    CONTEXT_SIGMOID = "context-sigmoid"
    ENSEMBLE = "ensemble"

    @classmethod
    def parse(cls, value: Union[str, "StrategyId"]) -> "StrategyId":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as exc:
            choices = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown strategy '{value}'. Expected one of: {choices}") from exc


class QualityTier(str, Enum):
    """Working-resolution tier requested by the caller."""

    STANDARD = "standard"
    HIGH = "high"

    @classmethod
    def parse(cls, value: Union[str, "QualityTier"]) -> "QualityTier":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as exc:
            raise ValueError(f"Unknown quality tier: {value}") from exc


@dataclass
class RasterImage:
    """Normalized working raster.

    Attributes:
        pixels: HxWx3 uint8 RGB array, row-major with a top-left origin.
        was_resized: Whether the normalizer had to downsample the source.
    """

    pixels: np.ndarray
    was_resized: bool = False

    def __post_init__(self) -> None:
        if self.pixels.ndim != 3 or self.pixels.shape[-1] != 3:
            raise ValueError(f"Expected an HxWx3 raster, got shape {self.pixels.shape}")
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"Expected a uint8 raster, got {self.pixels.dtype}")

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])


@dataclass(frozen=True)
class ImageAnalysis:
    """Global luminance statistics used to steer the heuristics."""

    average_luminance: float
    is_low_light: bool
    is_high_contrast: bool
    dark_ratio: float
    bright_ratio: float


@dataclass(frozen=True)
class EncodedImage:
    """Compressed image blob returned to callers."""

    data: bytes
    width: int
    height: int
    mime_type: str = "image/jpeg"


@dataclass
class ColorizeRequest:
    """Everything a single colorization call needs."""

    image: ImageSource
    strategy: StrategyId = StrategyId.ENSEMBLE
    customization: Optional[CustomizationSettings] = None
    quality: QualityTier = QualityTier.STANDARD
    on_progress: Optional[ProgressCallback] = None

    def __post_init__(self) -> None:
        self.strategy = StrategyId.parse(self.strategy)
        self.quality = QualityTier.parse(self.quality)


@dataclass
class ColorizeResult:
    """Encoded output plus the metadata gallery and batch callers keep."""

    image: EncodedImage
    strategy: StrategyId
    customization: Optional[CustomizationSettings]
    quality: QualityTier
    was_resized: bool
    analysis: Optional[ImageAnalysis] = None
    used_fallback: bool = False
    error: Optional[str] = None

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height
