# cutout/pipeline/cascade.py
from __future__ import annotations
from typing import Callable, Dict, List, Optional
import logging
import numpy as np

from ..schemas.config import AppConfig, CascadeConfig
from ..schemas.models import CascadeResult, MethodResult, RasterImage
from ..utils.logging_utils import get_logger
from ..masking.base import CascadeStrategy
from ..masking.advanced_detection import AdvancedDetection
from ..masking.flood_fill import FloodFill
from ..masking.statistical import StatisticalSeparation
from ..masking.edge_processing import EdgeProcessing
from ..masking.forced_removal import ForcedRemoval
from ..masking.multilayer import MultiLayerMaskSynthesizer
from .compositor import compose_rgba

# Optional collaborator tried before the core; returns an RGBA raster or None.
RemoteClassifier = Callable[[RasterImage], Optional[RasterImage]]


def has_contrast(image_rgb: np.ndarray, min_std: float) -> bool:
    """False for (near) flat images, which have no subject to separate."""
    px = image_rgb[..., :3].reshape(-1, 3).astype(np.float64)
    return float(px.std(axis=0).max()) >= min_std


class CascadeOrchestrator:
    """
    Ordered removal strategies; the first accepted mask wins.
    ForcedRemoval closes the list and always accepts, so `run` never fails
    for a decodable image.
    """

    def __init__(self, cfg: CascadeConfig, logger: Optional[logging.Logger] = None):
        self.cfg = cfg
        self.logger = logger or get_logger("cascade")
        v = cfg.validator
        factories: Dict[str, Callable[[], CascadeStrategy]] = {
            "advanced": lambda: AdvancedDetection(cfg.advanced, v, self.logger),
            "flood_fill": lambda: FloodFill(cfg.flood_fill, v, self.logger),
            "statistical": lambda: StatisticalSeparation(cfg.statistical, v, self.logger),
            "edge": lambda: EdgeProcessing(cfg.edge, v, self.logger),
            "forced": lambda: ForcedRemoval(cfg.forced, v, self.logger),
        }
        self.strategies: List[CascadeStrategy] = [factories[name]() for name in cfg.method_order]
        self.logger.info(f"🪄 Cascade order: {[s.name for s in self.strategies]}")

    def select_mask(self, image_rgb: np.ndarray) -> List[MethodResult]:
        """Attempts in order; the last entry is the accepted one."""
        attempts: List[MethodResult] = []
        flat = not has_contrast(image_rgb, self.cfg.min_contrast_std)
        if flat:
            self.logger.info("ℹ️ Flat image: detection stages skipped")

        for strategy in self.strategies:
            if flat and not isinstance(strategy, ForcedRemoval):
                attempts.append(MethodResult.reject(strategy.name, "flat image"))
                continue
            self.logger.info(f"🎯 {strategy.name}…")
            result = strategy.attempt(image_rgb)
            attempts.append(result)
            if result.accepted:
                self.logger.info(f"✅ Accepted: {result.method} {result.detail}".rstrip())
                return attempts
            self.logger.info(f"⏭️ {strategy.name} rejected ({result.detail}) → try next stage")

        # method_order always ends with ForcedRemoval, which always accepts
        raise RuntimeError("Cascade ended without an accepted mask")

    def run(self, image: RasterImage) -> CascadeResult:
        attempts = self.select_mask(image.rgb())
        chosen = attempts[-1]
        return CascadeResult(
            image=compose_rgba(image, chosen.mask),
            method=chosen.method,
            low_confidence=chosen.low_confidence,
            attempts=attempts,
        )


def run_multilayer(image: RasterImage, cfg: AppConfig,
                   rng: Optional[np.random.Generator] = None) -> CascadeResult:
    synth = MultiLayerMaskSynthesizer(cfg.synthesizer, rng=rng)
    mask = synth.get_mask(image.rgb())
    result = MethodResult(method="multilayer", accepted=True, mask=mask)
    return CascadeResult(image=compose_rgba(image, mask), method="multilayer", attempts=[result])


def remove_background(image: RasterImage, cfg: AppConfig,
                      remote: Optional[RemoteClassifier] = None,
                      rng: Optional[np.random.Generator] = None,
                      logger: Optional[logging.Logger] = None) -> CascadeResult:
    """
    Entry point for one decoded image.
    The remote classifier (if given and enabled) is tried first; any failure
    falls back to the local core selected by `cfg.run.mode`.
    """
    log = logger or get_logger("cascade")
    if remote is not None and cfg.remote.active:
        try:
            out = remote(image)
        except Exception as e:
            log.info(f"⏭️ Remote classifier failed ({e}) → local processing")
            out = None
        if out is not None:
            log.info("☁️ Remote classifier succeeded")
            return CascadeResult(image=out, method="remote")

    if cfg.run.mode == "multilayer":
        return run_multilayer(image, cfg, rng=rng)
    return CascadeOrchestrator(cfg.cascade, log).run(image)
