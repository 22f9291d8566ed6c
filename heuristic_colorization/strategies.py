"""Leaf colorization strategies.

Every strategy reads the luminance of the normalized raster, classifies each
pixel into a band or feature class and maps gray to RGB with a fixed formula.
Outputs are stored as uint8, so every channel ends up clamped to [0, 255].
"""

from __future__ import annotations

from typing import Dict, Optional, Type

import numpy as np

from heuristic_colorization import detectors
from heuristic_colorization.config import CustomizationSettings
from heuristic_colorization.customization import apply_customization
from heuristic_colorization.types import ImageAnalysis, StrategyId
from heuristic_colorization.utils.vision import luminance, stack_channels, to_uint8


class ColorizationStrategy:
    """Base class: map a grayscale-equivalent raster to RGB."""

    strategy_id: StrategyId

    def render(self, gray: np.ndarray, analysis: ImageAnalysis) -> np.ndarray:
        """Return HxWx3 float RGB values for the given HxW gray map."""

        raise NotImplementedError

    def __call__(
        self,
        image: np.ndarray,
        analysis: ImageAnalysis,
        customization: Optional[CustomizationSettings] = None,
    ) -> np.ndarray:
        gray = luminance(image)
        colorized = to_uint8(self.render(gray, analysis))
        if customization is not None:
            colorized = apply_customization(colorized, customization)
        return colorized


class VintageRestorationStrategy(ColorizationStrategy):
    """Four warm luminance bands followed by a uniform warm multiply."""

    strategy_id = StrategyId.VINTAGE_RESTORATION

    def render(self, gray: np.ndarray, analysis: ImageAnalysis) -> np.ndarray:
        bands = [gray < 50, gray < 120, gray < 180]
        red = np.select(bands, [gray * 0.8 + 20, gray * 1.1 + 25, gray * 1.15 + 15], gray * 1.08 + 10)
        green = np.select(bands, [gray * 0.7 + 15, gray * 0.95 + 15, gray * 1.05 + 10], gray * 1.03 + 5)
        blue = np.select(bands, [gray * 0.6 + 10, gray * 0.75 + 5, gray * 0.85], gray * 0.92)
        red = np.minimum(255.0, red)
        green = np.minimum(255.0, green)
        blue = np.minimum(255.0, blue)
        return stack_channels(red * 1.1, green * 1.05, blue)


class ContextAwareNaturalStrategy(ColorizationStrategy):
    """Skin, sky and vegetation confidences pick one of four mappings."""

    strategy_id = StrategyId.CONTEXT_AWARE_NATURAL

    def render(self, gray: np.ndarray, analysis: ImageAnalysis) -> np.ndarray:
        norm = gray / 255.0
        branches = [
            detectors.skin_tone_confidence(norm) > 0.7,
            detectors.sky_confidence(norm) > 0.8,
            detectors.vegetation_confidence(norm) > 0.6,
        ]
        hue_shift = np.sin(norm * np.pi) * 0.2

        def _channel(skin, sky, vegetation, default) -> np.ndarray:
            return 255.0 * np.minimum(1.0, np.select(branches, [skin, sky, vegetation], default))

        red = _channel(0.8 + norm * 0.4, 0.4 + norm * 0.3, 0.3 + norm * 0.4, norm + hue_shift * 0.3)
        green = _channel(0.6 + norm * 0.35, 0.6 + norm * 0.35, 0.5 + norm * 0.45, norm + hue_shift * 0.2)
        blue = _channel(0.5 + norm * 0.3, 0.8 + norm * 0.2, 0.2 + norm * 0.3, norm - hue_shift * 0.1)
        return stack_channels(red, green, blue)


class PortraitEnhanceStrategy(ColorizationStrategy):
    """Warmer skin-like mapping inside the central portrait region."""

    strategy_id = StrategyId.PORTRAIT_ENHANCE

    def render(self, gray: np.ndarray, analysis: ImageAnalysis) -> np.ndarray:
        portrait = detectors.portrait_mask(*gray.shape)
        red = np.where(portrait, np.minimum(255.0, (gray * 1.2 + 25) * 1.15), gray * 1.1 + 20)
        green = np.where(portrait, np.minimum(255.0, (gray * 1.1 + 15) * 1.08), gray * 1.05 + 10)
        blue = np.where(portrait, gray * 0.9 + 5, gray * 0.95)
        return stack_channels(red, green, blue)


class QuickVibrantStrategy(ColorizationStrategy):
    strategy_id = StrategyId.QUICK_VIBRANT

    saturation_boost = 1.3

    def render(self, gray: np.ndarray, analysis: ImageAnalysis) -> np.ndarray:
        warmth = 1.1 + np.sin(gray / 255.0 * np.pi) * 0.2
        rgb = stack_channels(gray * warmth + 15, gray * (warmth * 0.95) + 8, gray * (warmth * 0.8))
        average = rgb.mean(axis=-1, keepdims=True)
        return average + (rgb - average) * self.saturation_boost


class ProfessionalMultipassStrategy(ColorizationStrategy):
    """Edges get near-identity coloring, texture scales strength elsewhere."""

    strategy_id = StrategyId.PROFESSIONAL_MULTIPASS

    def render(self, gray: np.ndarray, analysis: ImageAnalysis) -> np.ndarray:
        edges = detectors.edge_mask(gray)
        strength = 1.0 + detectors.texture_map(gray.shape) * 0.5
        red = np.where(edges, gray * 1.05, gray * (1.1 * strength) + 20)
        green = np.where(edges, gray * 1.03, gray * (1.05 * strength) + 15)
        blue = np.where(edges, gray * 0.98, gray * (0.9 * strength) + 10)
        return stack_channels(red, green, blue)


class PaletteMatchStrategy(ColorizationStrategy):
    """Bucket gray into a fixed palette and blend 30/70 with the gray."""

    strategy_id = StrategyId.PALETTE_MATCH

    palette = np.array(
        [
            [180, 140, 120],
            [120, 150, 180],
            [100, 120, 90],
            [200, 180, 160],
        ],
        dtype="float64",
    )

    def palette_index(self, gray: np.ndarray) -> np.ndarray:
        last = len(self.palette) - 1
        index = np.floor(gray / 255.0 * last).astype(int)
        return np.clip(index, 0, last)

    def render(self, gray: np.ndarray, analysis: ImageAnalysis) -> np.ndarray:
        colors = self.palette[self.palette_index(gray)]
        return gray[..., None] * 0.3 + colors * 0.7


class EdgeAwareClassicStrategy(ColorizationStrategy):
    """Subtle tint on edges, three-band mapping everywhere else."""

    strategy_id = StrategyId.EDGE_AWARE_CLASSIC

    def render(self, gray: np.ndarray, analysis: ImageAnalysis) -> np.ndarray:
        edges = detectors.edge_mask(gray)
        bands = [gray < 60, gray < 140]
        red = np.select(bands, [gray * 0.9 + 30, gray * 1.2 + 20], np.minimum(255.0, gray * 1.1 + 15))
        green = np.select(bands, [gray * 0.8 + 20, gray * 1.1 + 10], np.minimum(255.0, gray * 1.05 + 8))
        blue = np.select(bands, [gray * 0.7 + 15, gray * 0.8], np.minimum(255.0, gray * 0.9))
        return stack_channels(
            np.where(edges, gray * 1.02, red),
            np.where(edges, gray * 1.01, green),
            np.where(edges, gray * 0.98, blue),
        )


def _sigmoid(x: np.ndarray) -> np.ndarray:
    return 1.0 / (1.0 + np.exp(-x))


class ContextSigmoidStrategy(ColorizationStrategy):
    """Sigmoid channel curves shifted by the 3x3 neighborhood context."""

    strategy_id = StrategyId.CONTEXT_SIGMOID

    def render(self, gray: np.ndarray, analysis: ImageAnalysis) -> np.ndarray:
        warmth, neutral, cool = detectors.pixel_context(gray)
        norm = gray / 255.0
        rgb = stack_channels(
            255.0 * _sigmoid((norm - 0.5) * 4 + warmth),
            255.0 * _sigmoid((norm - 0.3) * 3.5 + neutral),
            255.0 * _sigmoid((norm - 0.7) * 3 + cool),
        )
        return gray[..., None] * 0.3 + rgb * 0.7


STRATEGY_TABLE: Dict[StrategyId, Type[ColorizationStrategy]] = {
    cls.strategy_id: cls
    for cls in (
        VintageRestorationStrategy,
        ContextAwareNaturalStrategy,
        PortraitEnhanceStrategy,
        QuickVibrantStrategy,
        ProfessionalMultipassStrategy,
        PaletteMatchStrategy,
        EdgeAwareClassicStrategy,
        ContextSigmoidStrategy,
    )
}


def get_strategy(strategy_id: StrategyId) -> ColorizationStrategy:
    """Instantiate the leaf strategy registered for ``strategy_id``."""

    strategy_id = StrategyId.parse(strategy_id)
    try:
        return STRATEGY_TABLE[strategy_id]()
    except KeyError:
        raise ValueError(f"{strategy_id.value} is not a leaf strategy.") from None
