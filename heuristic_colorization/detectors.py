"""Coarse per-pixel feature detectors.

These are luminance-threshold heuristics rather than semantic detectors. The
strategies are tuned to the exact thresholds below, so they are kept as is.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

EDGE_THRESHOLD = 30.0
PORTRAIT_RADIUS_FRACTION = 0.3
SKY_TOP_FRACTION = 0.3
TEXTURE_BASELINE = 0.5


def skin_tone_confidence(normalized_gray: np.ndarray) -> np.ndarray:
    """0.8 where normalized gray lies in (0.3, 0.8), else 0.2."""

    inside = (normalized_gray > 0.3) & (normalized_gray < 0.8)
    return np.where(inside, 0.8, 0.2)


def sky_confidence(normalized_gray: np.ndarray) -> np.ndarray:
    """0.9 for bright pixels in the top 30% of rows, else 0.1."""

    height = normalized_gray.shape[0]
    rows = np.arange(height)[:, None]
    top = rows < height * SKY_TOP_FRACTION
    return np.where(top & (normalized_gray > 0.6), 0.9, 0.1)


def vegetation_confidence(normalized_gray: np.ndarray) -> np.ndarray:
    """0.7 where normalized gray lies in (0.2, 0.6), else 0.3."""

    inside = (normalized_gray > 0.2) & (normalized_gray < 0.6)
    return np.where(inside, 0.7, 0.3)


def edge_mask(gray: np.ndarray, threshold: float = EDGE_THRESHOLD) -> np.ndarray:
    """Mark interior pixels whose gray differs from a 4-neighbor by more than ``threshold``.

    Border pixels are never edges.
    """

    height, width = gray.shape
    edges = np.zeros((height, width), dtype=bool)
    if height < 3 or width < 3:
        return edges
    center = gray[1:-1, 1:-1]
    neighbors = (
        gray[1:-1, :-2],
        gray[1:-1, 2:],
        gray[:-2, 1:-1],
        gray[2:, 1:-1],
    )
    max_diff = np.max([np.abs(center - neighbor) for neighbor in neighbors], axis=0)
    edges[1:-1, 1:-1] = max_diff > threshold
    return edges


def portrait_mask(height: int, width: int) -> np.ndarray:
    """Pixels closer to the image center than 0.3 x min(width, height)."""

    rows, cols = np.mgrid[0:height, 0:width]
    distance = np.hypot(cols - width / 2.0, rows - height / 2.0)
    return distance < min(width, height) * PORTRAIT_RADIUS_FRACTION


def texture_map(shape: Tuple[int, int]) -> np.ndarray:
    """Uniform texture strength; an extension point for real texture analysis."""

    return np.full(shape, TEXTURE_BASELINE, dtype="float64")


def _neighborhood_mean(values: np.ndarray) -> np.ndarray:
    height, width = values.shape
    padded = np.pad(values, 1)
    valid = np.pad(np.ones_like(values), 1)
    total = np.zeros_like(values)
    count = np.zeros_like(values)
    for dy in range(3):
        for dx in range(3):
            total += padded[dy : dy + height, dx : dx + width]
            count += valid[dy : dy + height, dx : dx + width]
    return total / count


def pixel_context(gray: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Average warm/neutral/cool votes over each pixel's in-bounds 3x3 neighborhood.

    Every neighbor votes +0.5 or -0.5 per channel: warm when gray > 128,
    neutral when 85 < gray < 170, cool when gray < 128.

    Returns:
        ``(warmth, neutral, cool)`` HxW arrays in [-0.5, 0.5].
    """

    warm_votes = np.where(gray > 128, 0.5, -0.5)
    neutral_votes = np.where((gray > 85) & (gray < 170), 0.5, -0.5)
    cool_votes = np.where(gray < 128, 0.5, -0.5)
    return (
        _neighborhood_mean(warm_votes),
        _neighborhood_mean(neutral_votes),
        _neighborhood_mean(cool_votes),
    )
