"""End-to-end heuristic colorization pipeline."""

from __future__ import annotations

import logging
from typing import Optional, Union

import numpy as np

from heuristic_colorization.analysis import analyze_image
from heuristic_colorization.config import CustomizationSettings, PipelineConfig
from heuristic_colorization.encoder import encode_jpeg, sepia
from heuristic_colorization.ensemble import EnsembleBlender
from heuristic_colorization.normalizer import decode_image, normalize_raster
from heuristic_colorization.postprocess import apply_post_processing
from heuristic_colorization.strategies import get_strategy
from heuristic_colorization.types import (
    ColorizeRequest,
    ColorizeResult,
    ImageAnalysis,
    ImageSource,
    ProgressCallback,
    QualityTier,
    RasterImage,
    StrategyId,
)

logger = logging.getLogger(__name__)

PROGRESS_STRATEGY_SELECTED = 10
PROGRESS_NORMALIZING = 30
PROGRESS_ANALYZED = 50
PROGRESS_DISPATCH = 60
PROGRESS_POST_PROCESSING = 80
PROGRESS_ENCODING = 95
PROGRESS_DONE = 100


class ColorizationPipeline:
    """Orchestrates normalization, analysis, colorization and encoding.

    Flow:
        1) Decode the source and bound it to the tier's working size. A decode
           failure is the only error surfaced to the caller.
        2) Compute global luminance statistics.
        3) Run one leaf strategy, or the ensemble blender over its
           components, then the optional customization stage.
        4) Apply the strategy's final stylization and encode to JPEG.

    Anything that fails after step 1 is logged and replaced by a sepia
    rendering of the normalized raster, so callers always receive a blob.

    The pipeline holds no per-call state and may be shared across threads.
    """

    def __init__(self, config: Optional[PipelineConfig] = None) -> None:
        self.config = config or PipelineConfig()
        self.ensemble = EnsembleBlender(workers=self.config.ensemble_workers)

    @staticmethod
    def _report(callback: Optional[ProgressCallback], progress: int) -> None:
        if callback is None:
            return
        try:
            callback(progress)
        except Exception:
            logger.exception("Progress callback failed at %d%%", progress)

    def load(self, source: ImageSource, quality: QualityTier) -> RasterImage:
        """Decode ``source`` and normalize it for ``quality``."""

        pixels = decode_image(source)
        return normalize_raster(pixels, self.config.max_dimension(quality))

    def colorize_raster(
        self,
        image: np.ndarray,
        strategy: StrategyId,
        analysis: ImageAnalysis,
        customization: Optional[CustomizationSettings] = None,
    ) -> np.ndarray:
        """Run the selected strategy (including customization) on ``image``."""

        if strategy is StrategyId.ENSEMBLE:
            return self.ensemble(image, analysis, customization)
        return get_strategy(strategy)(image, analysis, customization)

    def __call__(self, request: ColorizeRequest) -> ColorizeResult:
        strategy = request.strategy
        on_progress = request.on_progress
        quality_level = self.config.jpeg_quality

        self._report(on_progress, PROGRESS_STRATEGY_SELECTED)
        logger.info("Using %s colorization strategy", strategy.value)

        self._report(on_progress, PROGRESS_NORMALIZING)
        raster = self.load(request.image, request.quality)

        analysis: Optional[ImageAnalysis] = None
        error: Optional[str] = None
        try:
            analysis = analyze_image(raster.pixels)
            self._report(on_progress, PROGRESS_ANALYZED)

            self._report(on_progress, PROGRESS_DISPATCH)
            colorized = self.colorize_raster(
                raster.pixels, strategy, analysis, request.customization
            )

            self._report(on_progress, PROGRESS_POST_PROCESSING)
            colorized = apply_post_processing(colorized, strategy)

            self._report(on_progress, PROGRESS_ENCODING)
            encoded = encode_jpeg(colorized, quality_level)
        except Exception as exc:
            if not self.config.fallback_on_error:
                raise
            logger.exception(
                "Colorization with %s failed; returning sepia fallback", strategy.value
            )
            error = f"{type(exc).__name__}: {exc}"
            encoded = encode_jpeg(sepia(raster.pixels), quality_level)

        self._report(on_progress, PROGRESS_DONE)
        if error is None:
            logger.info("Colorization completed successfully using %s strategy", strategy.value)
        return ColorizeResult(
            image=encoded,
            strategy=strategy,
            customization=request.customization,
            quality=request.quality,
            was_resized=raster.was_resized,
            analysis=analysis,
            used_fallback=error is not None,
            error=error,
        )


def colorize(
    image: ImageSource,
    strategy: Union[StrategyId, str] = StrategyId.ENSEMBLE,
    quality: Union[QualityTier, str] = QualityTier.STANDARD,
    customization: Optional[CustomizationSettings] = None,
    on_progress: Optional[ProgressCallback] = None,
    config: Optional[PipelineConfig] = None,
) -> ColorizeResult:
    """Colorize one image and return the encoded result.

    Raises:
        ImageDecodeError: If ``image`` cannot be decoded.
    """

    request = ColorizeRequest(
        image=image,
        strategy=strategy,
        customization=customization,
        quality=quality,
        on_progress=on_progress,
    )
    return ColorizationPipeline(config)(request)
