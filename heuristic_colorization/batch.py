"""Run many images through the pipeline and track per-item status."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional

from heuristic_colorization.config import BatchConfig
from heuristic_colorization.pipeline import ColorizationPipeline
from heuristic_colorization.types import ColorizeRequest, ColorizeResult, ImageSource

logger = logging.getLogger(__name__)


class BatchStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


@dataclass
class BatchItem:
    """One queued image and its processing state."""

    source: ImageSource
    name: str
    status: BatchStatus = BatchStatus.PENDING
    progress: int = 0
    result: Optional[ColorizeResult] = None
    error: Optional[str] = None


def _item_name(source: ImageSource, index: int) -> str:
    if isinstance(source, (str, os.PathLike)):
        return os.path.basename(os.fspath(source))
    return f"item-{index:03d}"


class BatchColorizer:
    """Feeds images through one shared pipeline, sequentially or on a bounded pool."""

    def __init__(
        self,
        config: Optional[BatchConfig] = None,
        pipeline: Optional[ColorizationPipeline] = None,
    ) -> None:
        self.config = config or BatchConfig()
        self.pipeline = pipeline or ColorizationPipeline(self.config.pipeline)

    def build_items(self, sources: Iterable[ImageSource]) -> List[BatchItem]:
        return [BatchItem(source=source, name=_item_name(source, idx)) for idx, source in enumerate(sources)]

    def output_name(self, item: BatchItem) -> str:
        """File name for a finished item: stem, strategy id, then the configured suffix."""

        stem = os.path.splitext(item.name)[0]
        return f"{stem}-{self.config.strategy.value}{self.config.output_suffix}"

    def process(self, item: BatchItem) -> BatchItem:
        """Colorize a single item, recording its status and progress."""

        item.status = BatchStatus.PROCESSING
        item.progress = 0

        def _on_progress(progress: int) -> None:
            item.progress = progress

        request = ColorizeRequest(
            image=item.source,
            strategy=self.config.strategy,
            customization=self.config.customization,
            quality=self.config.quality,
            on_progress=_on_progress,
        )
        try:
            item.result = self.pipeline(request)
        except Exception as exc:
            logger.error("Error processing %s: %s", item.name, exc)
            item.status = BatchStatus.ERROR
            item.progress = 0
            item.error = str(exc) or type(exc).__name__
            return item
        item.status = BatchStatus.COMPLETED
        item.progress = 100
        return item

    def run(
        self,
        sources: Iterable[ImageSource],
        on_item: Optional[Callable[[BatchItem], None]] = None,
    ) -> List[BatchItem]:
        """Process every source and return items in submission order.

        ``on_item`` is called on the calling thread as each item finishes.
        """

        items = self.build_items(sources)
        if self.config.max_workers == 1:
            for item in items:
                self.process(item)
                if on_item is not None:
                    on_item(item)
        else:
            with ThreadPoolExecutor(
                max_workers=self.config.max_workers, thread_name_prefix="colorize-batch"
            ) as executor:
                futures = [executor.submit(self.process, item) for item in items]
                for future in as_completed(futures):
                    finished = future.result()
                    if on_item is not None:
                        on_item(finished)

        completed = sum(1 for item in items if item.status is BatchStatus.COMPLETED)
        logger.info("Batch finished: %d/%d completed", completed, len(items))
        return items

    @staticmethod
    def overall_progress(items: List[BatchItem]) -> float:
        """Fraction of items that reached a terminal state, in [0, 1]."""

        if not items:
            return 0.0
        done = sum(1 for item in items if item.status in (BatchStatus.COMPLETED, BatchStatus.ERROR))
        return done / len(items)
