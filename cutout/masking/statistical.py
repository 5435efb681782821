from __future__ import annotations
import logging
import numpy as np

from ..schemas.config import StatisticalConfig, ValidatorConfig
from ..schemas.models import MethodResult
from ..color.clusters import dominant_colors
from ..metrics.background_score import background_score
from .base import CascadeStrategy
from .mask_builder import enhanced_distance_mask


class StatisticalSeparation(CascadeStrategy):
    """Histogram-dominant colors that score as background, tried with the enhanced mask."""
    name = "statistical_separation"

    def __init__(self, cfg: StatisticalConfig, validator: ValidatorConfig, logger: logging.Logger) -> None:
        super().__init__(validator, logger)
        self.cfg = cfg

    def attempt(self, image_rgb: np.ndarray) -> MethodResult:
        colors = dominant_colors(image_rgb, top=self.cfg.top_colors)
        self.logger.info(f"📊 Found {len(colors)} dominant colors")
        tried = 0
        for dom in colors:
            if dom.frequency < self.cfg.min_frequency_pct:
                continue
            score = background_score(image_rgb, dom.color, self.cfg.score_tolerance)
            self.logger.info(f"   {dom.color} - {dom.frequency:.1f}% - background score {score:.2f}")
            if score < self.cfg.min_background_score:
                continue
            tried += 1
            for tol in self.cfg.tolerances:
                mask = enhanced_distance_mask(image_rgb, dom.color, tol)
                result = self.judge(mask, self.cfg.band, tolerance=tol)
                if result.accepted:
                    result.detail = f"dominant {dom.color} score={score:.2f}"
                    return result

        return MethodResult.reject(self.name, f"{tried} background-like colors, none accepted")
