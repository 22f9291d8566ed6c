"""Strategy-keyed stylization applied after customization."""

from __future__ import annotations

from typing import Callable, Dict

import numpy as np

from heuristic_colorization.types import StrategyId
from heuristic_colorization.utils.vision import luminance, stack_channels, to_uint8


def _warm_film(rgb: np.ndarray) -> np.ndarray:
    return stack_channels(
        np.minimum(255.0, rgb[..., 0] * 1.1 + 10),
        np.minimum(255.0, rgb[..., 1] * 1.05 + 5),
        np.minimum(255.0, rgb[..., 2] * 0.95),
    )


def _gray_contrast(rgb: np.ndarray, factor: float = 1.2) -> np.ndarray:
    gray = luminance(rgb)[..., None]
    return np.clip((rgb - gray) * factor + gray, 0.0, 255.0)


def _average_saturation(rgb: np.ndarray, factor: float = 1.3) -> np.ndarray:
    average = rgb.mean(axis=-1, keepdims=True)
    return np.minimum(255.0, average + (rgb - average) * factor)


def _balanced(rgb: np.ndarray, saturation: float = 1.15, brightness: float = 1.05) -> np.ndarray:
    average = rgb.mean(axis=-1, keepdims=True)
    return np.minimum(255.0, (average + (rgb - average) * saturation) * brightness)


POST_PROCESSORS: Dict[StrategyId, Callable[[np.ndarray], np.ndarray]] = {
    StrategyId.VINTAGE_RESTORATION: _warm_film,
    StrategyId.EDGE_AWARE_CLASSIC: _gray_contrast,
    StrategyId.CONTEXT_SIGMOID: _average_saturation,
    StrategyId.ENSEMBLE: _balanced,
}


def apply_post_processing(image: np.ndarray, strategy: StrategyId) -> np.ndarray:
    """Apply the final stylization registered for ``strategy``.

    Strategies without a registered pass are returned unchanged.
    """

    processor = POST_PROCESSORS.get(StrategyId.parse(strategy))
    if processor is None:
        return image
    return to_uint8(processor(image[..., :3].astype("float64")))
