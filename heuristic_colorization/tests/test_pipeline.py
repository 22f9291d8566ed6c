import unittest
from unittest import mock

import numpy as np

from heuristic_colorization.analysis import analyze_image
from heuristic_colorization.config import PipelineConfig, default_customization
from heuristic_colorization.encoder import encode_jpeg, sepia
from heuristic_colorization.pipeline import ColorizationPipeline, colorize
from heuristic_colorization.postprocess import apply_post_processing
from heuristic_colorization.strategies import QuickVibrantStrategy
from heuristic_colorization.types import (
    ColorizeRequest,
    ImageDecodeError,
    QualityTier,
    StrategyId,
)

CHECKERBOARD = np.array(
    [
        [[0, 0, 0], [255, 255, 255]],
        [[255, 255, 255], [0, 0, 0]],
    ],
    dtype=np.uint8,
)


class ColorizationPipelineTest(unittest.TestCase):
    def setUp(self) -> None:
        rng = np.random.default_rng(13)
        self.image = rng.integers(0, 256, size=(16, 20, 3), dtype=np.uint8)

    def test_progress_milestones(self) -> None:
        progress = []
        result = colorize(self.image, strategy="vintage-restoration", on_progress=progress.append)

        self.assertEqual(progress, [10, 30, 50, 60, 80, 95, 100])
        self.assertFalse(result.used_fallback)
        self.assertTrue(result.image.data.startswith(b"\xff\xd8"))

    def test_checkerboard_quick_vibrant(self) -> None:
        result = colorize(CHECKERBOARD, strategy=StrategyId.QUICK_VIBRANT, quality="standard")

        self.assertEqual((result.width, result.height), (2, 2))
        self.assertFalse(result.was_resized)
        self.assertFalse(result.used_fallback)

        pipeline = ColorizationPipeline()
        raster = pipeline.load(CHECKERBOARD, QualityTier.STANDARD)
        analysis = analyze_image(raster.pixels)
        colorized = pipeline.colorize_raster(raster.pixels, StrategyId.QUICK_VIBRANT, analysis)
        colorized = apply_post_processing(colorized, StrategyId.QUICK_VIBRANT)

        self.assertEqual(colorized.dtype, np.uint8)
        self.assertTrue(np.array_equal(colorized[0, 0], colorized[1, 1]))
        self.assertTrue(np.array_equal(colorized[0, 1], colorized[1, 0]))

    def test_repeated_calls_are_identical(self) -> None:
        first = colorize(CHECKERBOARD, strategy=StrategyId.QUICK_VIBRANT)
        second = colorize(CHECKERBOARD, strategy=StrategyId.QUICK_VIBRANT)
        self.assertEqual(first.image.data, second.image.data)

    def test_every_strategy_runs_with_its_defaults(self) -> None:
        for strategy in StrategyId:
            result = colorize(
                self.image, strategy=strategy, customization=default_customization(strategy)
            )
            self.assertFalse(result.used_fallback, f"{strategy.value}: {result.error}")
            self.assertEqual((result.width, result.height), (20, 16))
            self.assertEqual(result.customization, default_customization(strategy))

    def test_resize_bounds_per_tier(self) -> None:
        large = np.zeros((1000, 2000, 3), dtype=np.uint8)

        standard = colorize(large, strategy="palette-match", quality=QualityTier.STANDARD)
        self.assertEqual((standard.width, standard.height), (1024, 512))
        self.assertTrue(standard.was_resized)

        high = colorize(large, strategy="palette-match", quality=QualityTier.HIGH)
        self.assertEqual((high.width, high.height), (1280, 640))

    def test_threaded_ensemble_matches_sequential(self) -> None:
        sequential = colorize(self.image, strategy=StrategyId.ENSEMBLE)
        threaded = colorize(
            self.image, strategy=StrategyId.ENSEMBLE, config=PipelineConfig(ensemble_workers=3)
        )
        self.assertEqual(sequential.image.data, threaded.image.data)

    def test_analysis_is_reported(self) -> None:
        result = colorize(np.full((4, 4, 3), 40, dtype=np.uint8), strategy="portrait-enhance")
        self.assertIsNotNone(result.analysis)
        self.assertTrue(result.analysis.is_low_light)


class FallbackTest(unittest.TestCase):
    def setUp(self) -> None:
        self.image = np.tile(np.arange(0, 250, 10, dtype=np.uint8)[None, :, None], (6, 1, 3))

    def test_strategy_failure_returns_sepia(self) -> None:
        progress = []
        pipeline = ColorizationPipeline()
        with mock.patch.object(QuickVibrantStrategy, "render", side_effect=RuntimeError("boom")):
            with self.assertLogs("heuristic_colorization.pipeline", level="ERROR"):
                result = pipeline(
                    ColorizeRequest(
                        image=self.image,
                        strategy=StrategyId.QUICK_VIBRANT,
                        on_progress=progress.append,
                    )
                )

        normalized = pipeline.load(self.image, QualityTier.STANDARD).pixels
        expected = encode_jpeg(sepia(normalized), PipelineConfig().jpeg_quality)

        self.assertTrue(result.used_fallback)
        self.assertIn("boom", result.error)
        self.assertEqual(result.image.data, expected.data)
        self.assertEqual(progress[-1], 100)
        self.assertIsNotNone(result.analysis)

    def test_post_processing_failure_returns_sepia(self) -> None:
        with mock.patch(
            "heuristic_colorization.pipeline.apply_post_processing",
            side_effect=ValueError("bad stylization"),
        ):
            with self.assertLogs("heuristic_colorization.pipeline", level="ERROR"):
                result = colorize(self.image, strategy=StrategyId.VINTAGE_RESTORATION)
        self.assertTrue(result.used_fallback)

    def test_fallback_can_be_disabled(self) -> None:
        pipeline = ColorizationPipeline(PipelineConfig(fallback_on_error=False))
        with mock.patch.object(QuickVibrantStrategy, "render", side_effect=RuntimeError("boom")):
            with self.assertRaises(RuntimeError):
                pipeline(ColorizeRequest(image=self.image, strategy=StrategyId.QUICK_VIBRANT))

    def test_decode_failure_is_fatal(self) -> None:
        progress = []
        with self.assertRaises(ImageDecodeError):
            colorize(b"", strategy="ensemble", on_progress=progress.append)
        self.assertNotIn(100, progress)

    def test_float_input_keeps_its_brightness(self) -> None:
        result = colorize(np.full((8, 8, 3), 0.5, dtype=np.float32), strategy="vintage-restoration")

        self.assertFalse(result.used_fallback)
        self.assertAlmostEqual(result.analysis.average_luminance, 128.0, places=5)

    def test_failing_progress_callback_does_not_abort(self) -> None:
        calls = []

        def _callback(progress: int) -> None:
            calls.append(progress)
            raise RuntimeError("listener gone")

        with self.assertLogs("heuristic_colorization.pipeline", level="ERROR") as logs:
            result = colorize(self.image, strategy="vintage-restoration", on_progress=_callback)

        self.assertFalse(result.used_fallback)
        self.assertIsNone(result.error)
        self.assertEqual(calls, [10, 30, 50, 60, 80, 95, 100])
        self.assertTrue(any("100%" in line for line in logs.output))

    def test_unknown_strategy_rejected_before_running(self) -> None:
        with self.assertRaises(ValueError):
            colorize(self.image, strategy="deoldify")


if __name__ == "__main__":
    unittest.main()
