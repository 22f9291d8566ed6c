"""Ensemble blending of several leaf strategies."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

import numpy as np

from heuristic_colorization.config import CustomizationSettings
from heuristic_colorization.customization import apply_customization
from heuristic_colorization.strategies import ColorizationStrategy, get_strategy
from heuristic_colorization.types import ImageAnalysis, StrategyId
from heuristic_colorization.utils.vision import luminance, to_uint8

logger = logging.getLogger(__name__)

COMPONENTS: Tuple[StrategyId, ...] = (
    StrategyId.VINTAGE_RESTORATION,
    StrategyId.EDGE_AWARE_CLASSIC,
    StrategyId.CONTEXT_SIGMOID,
)

SHADOW_WEIGHTS = (0.6, 0.2, 0.2)
HIGHLIGHT_WEIGHTS = (0.2, 0.6, 0.2)
MIDTONE_WEIGHTS = (0.2, 0.2, 0.6)


def band_weights(gray: np.ndarray) -> np.ndarray:
    """Per-pixel component weights keyed on the pre-strategy gray.

    Returns:
        HxWx3 array; the last axis follows ``COMPONENTS`` and sums to 1.
    """

    shadows = (gray < 85)[..., None]
    highlights = (gray > 170)[..., None]
    return np.where(
        shadows,
        np.array(SHADOW_WEIGHTS),
        np.where(highlights, np.array(HIGHLIGHT_WEIGHTS), np.array(MIDTONE_WEIGHTS)),
    )


class EnsembleBlender:
    """Run the component strategies on separate copies and blend per pixel."""

    strategy_id = StrategyId.ENSEMBLE

    def __init__(self, workers: int = 1, components: Sequence[StrategyId] = COMPONENTS) -> None:
        if len(components) != len(SHADOW_WEIGHTS):
            raise ValueError(f"Ensemble needs exactly {len(SHADOW_WEIGHTS)} components.")
        self.workers = max(1, int(workers))
        self.components: List[ColorizationStrategy] = [get_strategy(c) for c in components]

    def run_components(self, image: np.ndarray, analysis: ImageAnalysis) -> List[np.ndarray]:
        """Colorize independent copies of ``image`` with every component."""

        if self.workers == 1:
            logger.debug("Running %d ensemble components sequentially", len(self.components))
            return [component(image.copy(), analysis) for component in self.components]

        logger.debug(
            "Running %d ensemble components on %d threads", len(self.components), self.workers
        )
        with ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="ensemble") as executor:
            futures = [
                executor.submit(component, image.copy(), analysis) for component in self.components
            ]
            return [future.result() for future in futures]

    def blend(self, image: np.ndarray, outputs: Sequence[np.ndarray]) -> np.ndarray:
        weights = band_weights(luminance(image))
        blended = np.zeros(image.shape[:2] + (3,), dtype="float64")
        for idx, output in enumerate(outputs):
            blended += weights[..., idx : idx + 1] * output[..., :3].astype("float64")
        return to_uint8(blended)

    def __call__(
        self,
        image: np.ndarray,
        analysis: ImageAnalysis,
        customization: Optional[CustomizationSettings] = None,
    ) -> np.ndarray:
        blended = self.blend(image, self.run_components(image, analysis))
        if customization is not None:
            blended = apply_customization(blended, customization)
        return blended
