from __future__ import annotations
import argparse, yaml
from pathlib import Path
from typing import List, Optional
from cutout.schemas.config import AppConfig, RemoteConfig
from cutout.utils.logging_utils import get_logger
from cutout.pipeline.io import discover_images
from cutout.pipeline.orchestrator import run_images

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Classical background removal")
    ap.add_argument("--config", type=Path, default=Path("configs/default.yaml"))
    ap.add_argument("--input-dir", type=Path)
    ap.add_argument("--limit", type=int)
    ap.add_argument("--mode", choices=["cascade", "multilayer"])
    return ap.parse_args(argv)

def load_config(path: Path) -> AppConfig:
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    cfg = AppConfig.model_validate(raw)
    if "remote" not in raw:
        # environment is read once here and passed down as a frozen value
        cfg = cfg.model_copy(update={"remote": RemoteConfig.from_env()})
    return cfg

def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    cfg = load_config(args.config)
    if args.input_dir:
        cfg.paths.input_dir = str(args.input_dir)
    if args.limit:
        cfg.run.limit = args.limit
    if args.mode:
        cfg.run.mode = args.mode

    log = get_logger("main", Path(cfg.paths.logs_dir))
    log.info("🚀 Starting background removal run")
    log.info(f"📁 input_dir={cfg.paths.input_dir} | output_dir={cfg.paths.output_dir} | mode={cfg.run.mode} | limit={cfg.run.limit}")

    images = discover_images(Path(cfg.paths.input_dir), cfg.run.limit)
    if not images:
        log.error("❌ No images found. Expected .jpg/.jpeg/.png files in the input directory.")
        raise SystemExit(1)

    run_images(
        images=images,
        output_dir=Path(cfg.paths.output_dir),
        masks_dir=Path(cfg.paths.masks_dir),
        logs_dir=Path(cfg.paths.logs_dir),
        cfg=cfg,
    )
    log.info("🎉 Done.")

if __name__ == "__main__":
    main()
