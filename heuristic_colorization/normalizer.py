"""Decode sources and bound the working resolution."""

from __future__ import annotations

import logging
import os
from typing import Tuple

import cv2
import numpy as np

from heuristic_colorization.types import ImageDecodeError, ImageSource, RasterImage
from heuristic_colorization.utils.vision import ensure_rgb, resize, round_half_up, unit_float_to_uint8

logger = logging.getLogger(__name__)


def _decode_bytes(data: bytes) -> np.ndarray:
    if not data:
        raise ImageDecodeError("Cannot decode an empty image buffer.")
    buffer = np.frombuffer(data, dtype=np.uint8)
    bgr = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    if bgr is None:
        raise ImageDecodeError("Image buffer is not in a supported format.")
    return cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)


def _decode_array(array: np.ndarray) -> np.ndarray:
    if array.ndim not in (2, 3) or array.size == 0:
        raise ImageDecodeError(f"Expected a non-empty HxW or HxWxC array, got shape {array.shape}")
    if array.ndim == 3 and array.shape[-1] not in (1, 3, 4):
        raise ImageDecodeError(f"Unsupported channel count: {array.shape[-1]}")
    if np.issubdtype(array.dtype, np.floating):
        array = unit_float_to_uint8(array)
    elif array.dtype != np.uint8:
        raise ImageDecodeError(f"Unsupported pixel dtype: {array.dtype}; expected uint8 or float in [0, 1]")
    return np.ascontiguousarray(ensure_rgb(array))


def decode_image(source: ImageSource) -> np.ndarray:
    """Turn an encoded buffer, a file path or a pixel array into an RGB raster.

    Args:
        source: Encoded bytes, a filesystem path, or an HxW / HxWx3 (RGB) /
            HxWx4 (RGBA) array.

    Returns:
        HxWx3 uint8 RGB array.

    Raises:
        ImageDecodeError: If the source cannot be decoded.
    """

    if isinstance(source, np.ndarray):
        return _decode_array(source)
    if isinstance(source, (bytes, bytearray, memoryview)):
        return _decode_bytes(bytes(source))
    if isinstance(source, (str, os.PathLike)):
        path = os.fspath(source)
        if not os.path.isfile(path):
            raise ImageDecodeError(f"Image file not found: {path}")
        # Read the bytes first so non-ASCII paths decode on every platform.
        with open(path, "rb") as handle:
            return _decode_bytes(handle.read())
    raise ImageDecodeError(f"Unsupported image source type: {type(source).__name__}")


def fit_within(width: int, height: int, max_dimension: int) -> Tuple[int, int]:
    """Scale ``(width, height)`` so the larger side is at most ``max_dimension``.

    Aspect ratio is preserved with half-up rounding; images that already fit
    are never upscaled.
    """

    if width <= max_dimension and height <= max_dimension:
        return width, height
    if width > height:
        return max_dimension, max(1, round_half_up(height * max_dimension / width))
    return max(1, round_half_up(width * max_dimension / height)), max_dimension


def normalize_raster(pixels: np.ndarray, max_dimension: int) -> RasterImage:
    """Downsample a decoded RGB raster to the working resolution."""

    height, width = pixels.shape[:2]
    new_width, new_height = fit_within(width, height, max_dimension)
    was_resized = (new_width, new_height) != (width, height)
    if was_resized:
        pixels = resize(pixels, (new_height, new_width))
    logger.info(
        "Image %s resized. Final dimensions: %dx%d",
        "was" if was_resized else "was not",
        new_width,
        new_height,
    )
    return RasterImage(pixels=np.ascontiguousarray(pixels, dtype=np.uint8), was_resized=was_resized)
