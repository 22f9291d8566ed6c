import argparse
import json
import logging
import os
import sys
import time
from typing import List, Optional

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from heuristic_colorization.config import (
    CustomizationSettings,
    PipelineConfig,
    default_customization,
)
from heuristic_colorization.pipeline import colorize
from heuristic_colorization.types import QualityTier, StrategyId


def _save_blob(path: str, data: bytes) -> None:
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    with open(path, "wb") as handle:
        handle.write(data)


def _write_metadata(path: str, payload: dict) -> None:
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, ensure_ascii=True)


def _build_customization(args: argparse.Namespace) -> Optional[CustomizationSettings]:
    base = default_customization(args.strategy) if args.use_defaults else None
    overrides = {
        key: getattr(args, key)
        for key in ("saturation", "warmth", "contrast", "preservation")
        if getattr(args, key) is not None
    }
    if args.vintage:
        overrides["vintage"] = True
    if base is None and not overrides:
        return None
    merged = (base or CustomizationSettings()).to_dict()
    merged.update(overrides)
    return CustomizationSettings(**merged)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Colorize a grayscale image with pixel heuristics.")
    parser.add_argument("--input", required=True, help="Input image path")
    parser.add_argument("--out", default="outputs/colorized.jpg", help="Output JPEG path")
    parser.add_argument(
        "--strategy",
        default=StrategyId.ENSEMBLE.value,
        choices=[member.value for member in StrategyId],
    )
    parser.add_argument(
        "--quality",
        default=QualityTier.STANDARD.value,
        choices=[member.value for member in QualityTier],
    )
    parser.add_argument("--use-defaults", action="store_true", help="Start from the strategy's default settings")
    parser.add_argument("--saturation", type=float, default=None)
    parser.add_argument("--warmth", type=float, default=None)
    parser.add_argument("--contrast", type=float, default=None)
    parser.add_argument("--preservation", type=float, default=None)
    parser.add_argument("--vintage", action="store_true")
    parser.add_argument("--workers", type=int, default=1, help="Threads for ensemble components")
    parser.add_argument("--save-json", action="store_true", help="Save metadata.json next to the output")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    customization = _build_customization(args)
    config = PipelineConfig(ensemble_workers=args.workers)
    result = colorize(
        args.input,
        strategy=args.strategy,
        quality=args.quality,
        customization=customization,
        on_progress=lambda progress: logging.getLogger("colorize").debug("progress %d%%", progress),
        config=config,
    )
    _save_blob(args.out, result.image.data)

    if args.save_json:
        metadata_path = os.path.splitext(args.out)[0] + ".json"
        _write_metadata(
            metadata_path,
            {
                "input": os.path.abspath(args.input),
                "strategy": result.strategy.value,
                "quality": result.quality.value,
                "timestamp": int(time.time() * 1000),
                "customization": customization.to_dict() if customization else None,
                "width": result.width,
                "height": result.height,
                "was_resized": result.was_resized,
                "used_fallback": result.used_fallback,
            },
        )
    print(f"colorized image saved to {args.out}")


if __name__ == "__main__":
    main()
