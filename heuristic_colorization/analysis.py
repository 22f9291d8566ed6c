"""Global image statistics used to steer the colorization heuristics."""

from __future__ import annotations

import logging

import numpy as np

from heuristic_colorization.types import ImageAnalysis
from heuristic_colorization.utils.vision import luminance

logger = logging.getLogger(__name__)

DARK_THRESHOLD = 85
BRIGHT_THRESHOLD = 170
LOW_LIGHT_THRESHOLD = 100
HIGH_CONTRAST_RATIO = 0.6


def analyze_image(image: np.ndarray) -> ImageAnalysis:
    """Single pass over the raster computing luminance statistics."""

    gray = luminance(image)
    pixel_count = gray.size
    if pixel_count == 0:
        raise ValueError("Cannot analyze an empty raster.")

    average = float(gray.sum() / pixel_count)
    dark_ratio = float(np.count_nonzero(gray < DARK_THRESHOLD) / pixel_count)
    bright_ratio = float(np.count_nonzero(gray > BRIGHT_THRESHOLD) / pixel_count)
    analysis = ImageAnalysis(
        average_luminance=average,
        is_low_light=average < LOW_LIGHT_THRESHOLD,
        is_high_contrast=dark_ratio + bright_ratio > HIGH_CONTRAST_RATIO,
        dark_ratio=dark_ratio,
        bright_ratio=bright_ratio,
    )
    logger.debug(
        "Image analysis: avg=%.2f dark=%.3f bright=%.3f low_light=%s high_contrast=%s",
        analysis.average_luminance,
        analysis.dark_ratio,
        analysis.bright_ratio,
        analysis.is_low_light,
        analysis.is_high_contrast,
    )
    return analysis
