from __future__ import annotations
import logging
import numpy as np

from ..schemas.config import EdgeProcessingConfig, ValidatorConfig
from ..schemas.models import MethodResult
from .base import CascadeStrategy
from .mask_builder import edge_background_mask


class EdgeProcessing(CascadeStrategy):
    name = "edge_processing"

    def __init__(self, cfg: EdgeProcessingConfig, validator: ValidatorConfig, logger: logging.Logger) -> None:
        super().__init__(validator, logger)
        self.cfg = cfg

    def attempt(self, image_rgb: np.ndarray) -> MethodResult:
        self.logger.info("⚡ Low-gradient background from edge map")
        return self.judge(edge_background_mask(image_rgb), self.cfg.band)
