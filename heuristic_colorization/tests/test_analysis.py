import unittest

import numpy as np

from heuristic_colorization.analysis import analyze_image


class AnalyzeImageTest(unittest.TestCase):
    def test_half_black_half_white(self) -> None:
        image = np.zeros((4, 4, 3), dtype=np.uint8)
        image[:, 2:] = 255

        analysis = analyze_image(image)

        self.assertAlmostEqual(analysis.average_luminance, 127.5, places=5)
        self.assertAlmostEqual(analysis.dark_ratio, 0.5)
        self.assertAlmostEqual(analysis.bright_ratio, 0.5)
        self.assertTrue(analysis.is_high_contrast)
        self.assertFalse(analysis.is_low_light)

    def test_uniform_dark_image_is_low_light(self) -> None:
        analysis = analyze_image(np.full((3, 5, 3), 50, dtype=np.uint8))

        self.assertTrue(analysis.is_low_light)
        self.assertAlmostEqual(analysis.dark_ratio, 1.0)
        self.assertAlmostEqual(analysis.bright_ratio, 0.0)
        self.assertTrue(analysis.is_high_contrast)

    def test_uniform_midtone(self) -> None:
        analysis = analyze_image(np.full((2, 2, 3), 128, dtype=np.uint8))

        self.assertAlmostEqual(analysis.average_luminance, 128.0, places=5)
        self.assertFalse(analysis.is_low_light)
        self.assertFalse(analysis.is_high_contrast)

    def test_uses_weighted_luminance(self) -> None:
        image = np.zeros((1, 1, 3), dtype=np.uint8)
        image[0, 0] = (255, 0, 0)

        analysis = analyze_image(image)

        self.assertAlmostEqual(analysis.average_luminance, 0.299 * 255, places=5)
        self.assertAlmostEqual(analysis.dark_ratio, 1.0)

    def test_band_edges_hold_for_large_flat_images(self) -> None:
        for size in (1, 64, 257):
            at_dark_edge = analyze_image(np.full((size, size, 3), 85, dtype=np.uint8))
            at_bright_edge = analyze_image(np.full((size, size, 3), 170, dtype=np.uint8))

            self.assertEqual(at_dark_edge.dark_ratio, 0.0)
            self.assertEqual(at_dark_edge.bright_ratio, 0.0)
            self.assertEqual(at_bright_edge.dark_ratio, 0.0)
            self.assertEqual(at_bright_edge.bright_ratio, 0.0)

    def test_empty_raster_raises(self) -> None:
        with self.assertRaises(ValueError):
            analyze_image(np.zeros((0, 0, 3), dtype=np.uint8))


if __name__ == "__main__":
    unittest.main()
