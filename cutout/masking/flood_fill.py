from __future__ import annotations
import logging
import numpy as np

from ..schemas.config import FloodFillConfig, ValidatorConfig
from ..schemas.models import MethodResult
from .base import CascadeStrategy
from .region_grower import flood_fill_mask, seed_points


class FloodFill(CascadeStrategy):
    name = "flood_fill"

    def __init__(self, cfg: FloodFillConfig, validator: ValidatorConfig, logger: logging.Logger) -> None:
        super().__init__(validator, logger)
        self.cfg = cfg

    def attempt(self, image_rgb: np.ndarray) -> MethodResult:
        seeds = seed_points(image_rgb)
        self.logger.info(f"🌊 Flood fill from {len(seeds)} seeds")
        mask = flood_fill_mask(image_rgb, seeds, tolerance=self.cfg.tolerance,
                               max_fraction=self.cfg.max_fraction)
        return self.judge(mask, self.cfg.band, tolerance=self.cfg.tolerance)
