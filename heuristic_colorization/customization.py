"""User customization stage applied to a strategy's output."""

from __future__ import annotations

import numpy as np

from heuristic_colorization.config import CustomizationSettings
from heuristic_colorization.utils.vision import luminance, stack_channels, to_uint8


def apply_customization(image: np.ndarray, settings: CustomizationSettings) -> np.ndarray:
    """Apply saturation, warmth, contrast and the optional vintage push.

    ``settings.preservation`` is intentionally not consulted.

    Args:
        image: HxWx3 uint8 RGB raster.
        settings: Caller-supplied adjustments.

    Returns:
        New HxWx3 uint8 raster.
    """

    rgb = image[..., :3].astype("float64")
    gray = luminance(rgb)[..., None]
    rgb = gray + (rgb - gray) * settings.saturation

    red, green, blue = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    red = red * settings.warmth
    green = green * ((settings.warmth + 1.0) * 0.5)

    def _contrast(channel: np.ndarray) -> np.ndarray:
        return ((channel / 255.0 - 0.5) * settings.contrast + 0.5) * 255.0

    red, green, blue = _contrast(red), _contrast(green), _contrast(blue)

    if settings.vintage:
        red = np.minimum(255.0, red * 1.1 + 10.0)
        green = np.minimum(255.0, green * 1.05 + 5.0)
        blue = np.minimum(255.0, blue * 0.95)

    return to_uint8(stack_channels(red, green, blue))
