"""Utility helpers for pixel conversion, luminance and resizing."""

import math
from typing import Tuple

import cv2
import numpy as np

LUMA_WEIGHTS = (0.299, 0.587, 0.114)


def luminance(image: np.ndarray) -> np.ndarray:
    """Compute per-pixel gray as ``0.299r + 0.587g + 0.114b``.

    Args:
        image: HxWx3 (or HxWx4) array with channels in RGB order.

    Returns:
        HxW float64 array on the 0-255 scale.
    """

    # Summed channel by channel so every pixel rounds the same way regardless of
    # image size.
    rgb = image.astype("float64")
    red_weight, green_weight, blue_weight = LUMA_WEIGHTS
    return rgb[..., 0] * red_weight + rgb[..., 1] * green_weight + rgb[..., 2] * blue_weight


def unit_float_to_uint8(image: np.ndarray) -> np.ndarray:
    """Convert float images in [0, 1] to uint8."""

    return to_uint8(np.clip(np.asarray(image, dtype="float64"), 0.0, 1.0) * 255.0)


def to_uint8(image: np.ndarray) -> np.ndarray:
    """Store float channel values the way an 8-bit clamped buffer does.

    Values are clamped to [0, 255] and rounded half-to-even; NaN becomes 0.
    """

    image = np.nan_to_num(np.asarray(image, dtype="float64"), nan=0.0)
    return np.rint(np.clip(image, 0.0, 255.0)).astype("uint8")


def stack_channels(red: np.ndarray, green: np.ndarray, blue: np.ndarray) -> np.ndarray:
    return np.stack([red, green, blue], axis=-1)


def ensure_rgb(image: np.ndarray) -> np.ndarray:
    """Coerce grayscale and RGBA arrays to HxWx3."""

    if image.ndim == 2:
        return np.repeat(image[..., None], 3, axis=-1)
    if image.shape[-1] == 1:
        return np.repeat(image, 3, axis=-1)
    if image.shape[-1] == 4:
        return image[..., :3]
    return image


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def resize(image: np.ndarray, size: Tuple[int, int]) -> np.ndarray:
    """Resize to ``(height, width)``, using area interpolation when shrinking."""

    height, width = size
    if image.shape[:2] == (height, width):
        return image
    shrinking = height <= image.shape[0] and width <= image.shape[1]
    interpolation = cv2.INTER_AREA if shrinking else cv2.INTER_LINEAR
    return cv2.resize(image, (width, height), interpolation=interpolation)
