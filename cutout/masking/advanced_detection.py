from __future__ import annotations
import logging
import numpy as np

from ..schemas.config import AdvancedDetectionConfig, ValidatorConfig
from ..schemas.models import MethodResult
from ..color.sampling import sample_background_regions
from ..color.clusters import cluster_colors
from .base import CascadeStrategy
from .mask_builder import distance_mask


class AdvancedDetection(CascadeStrategy):
    """Corner color clusters × tolerance ladder with the plain distance mask."""
    name = "advanced_detection"

    def __init__(self, cfg: AdvancedDetectionConfig, validator: ValidatorConfig, logger: logging.Logger) -> None:
        super().__init__(validator, logger)
        self.cfg = cfg

    def attempt(self, image_rgb: np.ndarray) -> MethodResult:
        samples = sample_background_regions(image_rgb)
        self.logger.info(f"📍 Sampled {len(samples)} background pixels")
        if len(samples) == 0:
            return MethodResult.reject(self.name, "no border samples")

        clusters = cluster_colors(samples)
        self.logger.info(f"🎨 Found {len(clusters)} color clusters")
        for i, cluster in enumerate(clusters, 1):
            self.logger.info(f"   Cluster {i}: {cluster.color} - {cluster.count} samples")
            for tol in self.cfg.tolerances:
                mask = distance_mask(image_rgb, cluster.color, tol)
                result = self.judge(mask, self.cfg.band, tolerance=tol)
                if result.accepted:
                    result.detail = f"cluster {cluster.color}"
                    return result

        return MethodResult.reject(self.name, f"no tolerance accepted for {len(clusters)} clusters")
