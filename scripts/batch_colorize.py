import argparse
import logging
import os
import sys
from typing import List, Optional

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from heuristic_colorization.batch import BatchColorizer, BatchItem, BatchStatus
from heuristic_colorization.config import BatchConfig, PipelineConfig, default_customization
from heuristic_colorization.types import QualityTier, StrategyId


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Colorize many images with one strategy.")
    parser.add_argument("--inputs", nargs="+", required=True, help="Input image paths")
    parser.add_argument("--outdir", default="outputs/batch", help="Output directory")
    parser.add_argument(
        "--strategy",
        default=StrategyId.ENSEMBLE.value,
        choices=[member.value for member in StrategyId],
    )
    parser.add_argument(
        "--quality",
        default=QualityTier.HIGH.value,
        choices=[member.value for member in QualityTier],
    )
    parser.add_argument("--use-defaults", action="store_true", help="Apply the strategy's default settings")
    parser.add_argument("--suffix", default="-colorized.jpg", help="Output file name suffix")
    parser.add_argument("--workers", type=int, default=1, help="Images processed concurrently")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    strategy = StrategyId.parse(args.strategy)
    config = BatchConfig(
        max_workers=args.workers,
        strategy=strategy,
        quality=args.quality,
        customization=default_customization(strategy) if args.use_defaults else None,
        pipeline=PipelineConfig(),
        output_suffix=args.suffix,
    )
    batch = BatchColorizer(config)
    os.makedirs(args.outdir, exist_ok=True)

    def _on_item(item: BatchItem) -> None:
        if item.status is BatchStatus.COMPLETED:
            path = os.path.join(args.outdir, batch.output_name(item))
            with open(path, "wb") as handle:
                handle.write(item.result.image.data)
            suffix = " (sepia fallback)" if item.result.used_fallback else ""
            print(f"[done] {item.name} -> {path}{suffix}")
        else:
            print(f"[error] {item.name}: {item.error}")

    items = batch.run(args.inputs, on_item=_on_item)
    completed = sum(1 for item in items if item.status is BatchStatus.COMPLETED)
    print(f"Done. {completed}/{len(items)} images saved to {args.outdir}")


if __name__ == "__main__":
    main()
