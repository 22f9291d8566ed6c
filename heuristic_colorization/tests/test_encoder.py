import unittest

import numpy as np

from heuristic_colorization.encoder import decode_jpeg, encode_jpeg, sepia
from heuristic_colorization.types import EncodeError


class SepiaTest(unittest.TestCase):
    def test_mid_gray(self) -> None:
        output = sepia(np.full((1, 1, 3), 100, dtype=np.uint8))
        self.assertEqual(output[0, 0].tolist(), [135, 120, 94])

    def test_white_is_capped(self) -> None:
        output = sepia(np.full((1, 1, 3), 255, dtype=np.uint8))
        self.assertEqual(output[0, 0].tolist(), [255, 255, 239])

    def test_black_stays_black(self) -> None:
        output = sepia(np.zeros((2, 2, 3), dtype=np.uint8))
        self.assertFalse(output.any())


class EncodeJpegTest(unittest.TestCase):
    def test_encodes_jpeg_blob(self) -> None:
        image = np.full((6, 9, 3), (180, 120, 60), dtype=np.uint8)
        blob = encode_jpeg(image)

        self.assertTrue(blob.data.startswith(b"\xff\xd8"))
        self.assertEqual(blob.mime_type, "image/jpeg")
        self.assertEqual((blob.width, blob.height), (9, 6))

        decoded = decode_jpeg(blob)
        self.assertEqual(decoded.shape, (6, 9, 3))
        self.assertTrue(np.all(np.abs(decoded.astype(int) - image.astype(int)) <= 4))

    def test_encoding_is_deterministic(self) -> None:
        rng = np.random.default_rng(2)
        image = rng.integers(0, 256, size=(16, 16, 3), dtype=np.uint8)
        self.assertEqual(encode_jpeg(image).data, encode_jpeg(image).data)

    def test_empty_raster_raises(self) -> None:
        with self.assertRaises(EncodeError):
            encode_jpeg(np.zeros((0, 0, 3), dtype=np.uint8))


if __name__ == "__main__":
    unittest.main()
