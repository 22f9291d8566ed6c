import os
import tempfile
import unittest

import cv2
import numpy as np

from heuristic_colorization.config import PipelineConfig
from heuristic_colorization.normalizer import decode_image, fit_within, normalize_raster
from heuristic_colorization.types import ImageDecodeError, QualityTier


def _png_bytes(rgb: np.ndarray) -> bytes:
    ok, buffer = cv2.imencode(".png", cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR))
    assert ok
    return buffer.tobytes()


class FitWithinTest(unittest.TestCase):
    def test_landscape_and_portrait(self) -> None:
        self.assertEqual(fit_within(2000, 1000, 1024), (1024, 512))
        self.assertEqual(fit_within(1000, 2000, 1024), (512, 1024))

    def test_square(self) -> None:
        self.assertEqual(fit_within(1500, 1500, 1024), (1024, 1024))

    def test_no_upscaling(self) -> None:
        self.assertEqual(fit_within(800, 600, 1024), (800, 600))
        self.assertEqual(fit_within(1024, 1024, 1024), (1024, 1024))

    def test_rounds_half_up(self) -> None:
        self.assertEqual(fit_within(3000, 1001, 1024), (1024, 342))
        self.assertEqual(fit_within(2048, 5, 1024), (1024, 3))

    def test_never_collapses_to_zero(self) -> None:
        self.assertEqual(fit_within(5000, 1, 1024), (1024, 1))

    def test_bound_and_aspect_hold_for_many_sizes(self) -> None:
        config = PipelineConfig()
        for tier in QualityTier:
            bound = config.max_dimension(tier)
            for width, height in [(4000, 3000), (3001, 17), (1281, 1279), (640, 5000), (999, 999)]:
                new_width, new_height = fit_within(width, height, bound)
                self.assertLessEqual(max(new_width, new_height), bound)
                if new_width >= new_height:
                    self.assertLessEqual(abs(new_height - height * new_width / width), 1.0)
                else:
                    self.assertLessEqual(abs(new_width - width * new_height / height), 1.0)


class NormalizeRasterTest(unittest.TestCase):
    def test_downsamples_large_images(self) -> None:
        raster = normalize_raster(np.zeros((1000, 2000, 3), dtype=np.uint8), 1024)
        self.assertEqual((raster.width, raster.height), (1024, 512))
        self.assertTrue(raster.was_resized)

    def test_small_images_pass_through(self) -> None:
        pixels = np.full((3, 4, 3), 77, dtype=np.uint8)
        raster = normalize_raster(pixels, 1024)
        self.assertFalse(raster.was_resized)
        self.assertTrue(np.array_equal(raster.pixels, pixels))

    def test_quality_tiers(self) -> None:
        config = PipelineConfig()
        self.assertEqual(config.max_dimension(QualityTier.STANDARD), 1024)
        self.assertEqual(config.max_dimension("high"), 1280)


class DecodeImageTest(unittest.TestCase):
    def test_decodes_png_bytes_as_rgb(self) -> None:
        rgb = np.zeros((2, 3, 3), dtype=np.uint8)
        rgb[0, 0] = (255, 0, 0)
        decoded = decode_image(_png_bytes(rgb))
        self.assertTrue(np.array_equal(decoded, rgb))

    def test_decodes_file_path(self) -> None:
        rgb = np.full((4, 4, 3), (10, 20, 30), dtype=np.uint8)
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "input.png")
            with open(path, "wb") as handle:
                handle.write(_png_bytes(rgb))
            self.assertTrue(np.array_equal(decode_image(path), rgb))

    def test_coerces_arrays(self) -> None:
        gray = np.arange(6, dtype=np.uint8).reshape(2, 3)
        decoded = decode_image(gray)
        self.assertEqual(decoded.shape, (2, 3, 3))
        self.assertTrue(np.array_equal(decoded[..., 0], gray))

        rgba = np.full((2, 2, 4), 9, dtype=np.uint8)
        self.assertEqual(decode_image(rgba).shape, (2, 2, 3))

    def test_float_arrays_are_unit_scaled(self) -> None:
        decoded = decode_image(np.full((4, 4, 3), 0.5, dtype=np.float32))
        self.assertEqual(decoded.dtype, np.uint8)
        self.assertTrue(np.all(decoded == 128))

        clipped = decode_image(np.array([[-0.5, 0.0, 1.0, 2.0]], dtype=np.float64))
        self.assertEqual(clipped[0, :, 0].tolist(), [0, 0, 255, 255])

    def test_unsupported_integer_dtype(self) -> None:
        with self.assertRaises(ImageDecodeError):
            decode_image(np.full((4, 4, 3), 1000, dtype=np.uint16))

    def test_decode_failures(self) -> None:
        bad_sources = [
            b"",
            b"definitely not an image",
            "/nonexistent/path/to/image.png",
            np.zeros((0, 4, 3), dtype=np.uint8),
            np.zeros((2, 2, 2), dtype=np.uint8),
            42,
        ]
        for source in bad_sources:
            with self.assertRaises(ImageDecodeError):
                decode_image(source)

    def test_decode_error_is_value_error(self) -> None:
        self.assertTrue(issubclass(ImageDecodeError, ValueError))


if __name__ == "__main__":
    unittest.main()
