# cutout/pipeline/orchestrator.py
from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Dict, Iterable, Optional

from ..schemas.config import AppConfig
from ..utils.errors import CutoutError
from ..utils.logging_utils import get_logger
from .cascade import RemoteClassifier, remove_background
from .io import load_raster, save_rgba, save_mask


def run_images(
    images: Iterable[Path],
    output_dir: Path,
    masks_dir: Path,
    logs_dir: Path,
    cfg: AppConfig,
    remote: Optional[RemoteClassifier] = None,
) -> Dict[str, int]:
    """
    Cut out every image and write `<stem>-cutout.png` to output_dir.
    - Mode `cascade`: advanced → flood fill → statistical → edge → forced
    - Mode `multilayer`: weighted feature layers + opening/closing
    A failure on one image is logged and the batch moves on.
    Returns how many images each method handled (plus "failed").
    """
    logger = get_logger("orchestrator", logs_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    if cfg.run.save_debug:
        masks_dir.mkdir(parents=True, exist_ok=True)

    methods: Counter = Counter()
    for i, path in enumerate(images, 1):
        try:
            logger.info("")
            logger.info(f"🚀 [{i}] {path.name}")
            image = load_raster(path)
            logger.info(f" [{i}] {image.width}x{image.height}, {image.channels} channels")

            result = remove_background(image, cfg, remote=remote, logger=logger)
            save_rgba(output_dir / f"{path.stem}-cutout.png", result.image)
            if cfg.run.save_debug:
                save_mask(masks_dir / f"{path.stem}-mask.png", result.alpha)

            note = " (low confidence)" if result.low_confidence else ""
            logger.info(f"✅ [{i}] {path.name} → {result.method}{note}")
            methods[result.method] += 1
        except CutoutError as e:
            logger.error(f"❌ [{i}] {path.name} failed: {e}")
            methods["failed"] += 1

    if methods:
        logger.info("=" * 60)
        logger.info("📊 Methods used")
        for method, n in methods.most_common():
            logger.info(f"   {method:<36} {n}")
        logger.info("=" * 60)
    return dict(methods)
