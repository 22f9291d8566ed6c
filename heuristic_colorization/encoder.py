"""JPEG serialization and the sepia fallback rendering."""

from __future__ import annotations

import cv2
import numpy as np

from heuristic_colorization.types import EncodeError, EncodedImage
from heuristic_colorization.utils.vision import stack_channels, to_uint8

SEPIA_MATRIX = np.array(
    [
        [0.393, 0.769, 0.189],
        [0.349, 0.686, 0.168],
        [0.272, 0.534, 0.131],
    ],
    dtype="float64",
)


def sepia(image: np.ndarray) -> np.ndarray:
    """Deterministic sepia tone of an RGB raster, capped at 255."""

    rgb = image.astype("float64")
    red, green, blue = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    toned = stack_channels(
        *(red * row[0] + green * row[1] + blue * row[2] for row in SEPIA_MATRIX)
    )
    return to_uint8(np.minimum(255.0, toned))


def encode_jpeg(image: np.ndarray, quality: int = 95) -> EncodedImage:
    """Encode an HxWx3 RGB uint8 raster as JPEG.

    Raises:
        EncodeError: If OpenCV cannot produce the blob.
    """

    if image.ndim != 3 or image.shape[-1] < 3 or image.size == 0:
        raise EncodeError(f"Cannot encode raster with shape {image.shape}")
    bgr = cv2.cvtColor(np.ascontiguousarray(image[..., :3], dtype=np.uint8), cv2.COLOR_RGB2BGR)
    ok, buffer = cv2.imencode(".jpg", bgr, [int(cv2.IMWRITE_JPEG_QUALITY), int(quality)])
    if not ok:
        raise EncodeError("Failed to create colorized image blob")
    return EncodedImage(
        data=buffer.tobytes(),
        width=int(image.shape[1]),
        height=int(image.shape[0]),
    )


def decode_jpeg(blob: EncodedImage) -> np.ndarray:
    """Decode an encoded blob back to an RGB raster (for previews and checks)."""

    buffer = np.frombuffer(blob.data, dtype=np.uint8)
    bgr = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    if bgr is None:
        raise EncodeError("Blob is not a decodable image")
    return cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)
