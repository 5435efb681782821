# cutout/masking/forced_removal.py
"""
Last cascade stage. A small state machine walks from the most targeted mask
to the bluntest and always ends in OPAQUE, which keeps every pixel:

    CORNER_COLOR → LIGHT_NEUTRAL → CORNER_BLOCKS → OPAQUE
"""
from __future__ import annotations
from enum import Enum
import logging
from typing import Callable, Dict, Optional, Tuple
import numpy as np

from ..schemas.config import ForcedRemovalConfig, ValidatorConfig
from ..schemas.models import Color, MethodResult
from ..color.sampling import sample_corners
from ..color.clusters import most_frequent_color
from ..metrics.background_score import color_coverage
from .base import CascadeStrategy
from .mask_builder import enhanced_distance_mask, light_background_mask, corner_color_mask


class ForcedState(str, Enum):
    CORNER_COLOR = "corner_color"
    LIGHT_NEUTRAL = "light_neutral"
    CORNER_BLOCKS = "corner_blocks"
    OPAQUE = "opaque"


_NEXT = {
    ForcedState.CORNER_COLOR: ForcedState.LIGHT_NEUTRAL,
    ForcedState.LIGHT_NEUTRAL: ForcedState.CORNER_BLOCKS,
    ForcedState.CORNER_BLOCKS: ForcedState.OPAQUE,
}


class ForcedRemoval(CascadeStrategy):
    name = "forced_removal"

    def __init__(self, cfg: ForcedRemovalConfig, validator: ValidatorConfig, logger: logging.Logger) -> None:
        super().__init__(validator, logger)
        self.cfg = cfg
        self._handlers: Dict[ForcedState, Callable[[np.ndarray], Optional[MethodResult]]] = {
            ForcedState.CORNER_COLOR: self._corner_color,
            ForcedState.LIGHT_NEUTRAL: self._light_neutral,
            ForcedState.CORNER_BLOCKS: self._corner_blocks,
        }

    def attempt(self, image_rgb: np.ndarray) -> MethodResult:
        state = ForcedState.CORNER_COLOR
        while state is not ForcedState.OPAQUE:
            result, state = self.step(state, image_rgb)
            if result is not None:
                return result
        return self._opaque(image_rgb)

    def step(self, state: ForcedState, image_rgb: np.ndarray) -> Tuple[Optional[MethodResult], ForcedState]:
        """Run one state; returns (accepted result or None, next state)."""
        result = self._handlers[state](image_rgb)
        if result is not None and result.accepted:
            return result, state
        return None, _NEXT[state]

    def background_candidate(self, image_rgb: np.ndarray) -> Optional[Color]:
        color = most_frequent_color(sample_corners(image_rgb, dense=True))
        if color is None:
            return None
        coverage = color_coverage(image_rgb, color, self.cfg.coverage_tolerance)
        self.logger.info(f"   Corner candidate {color} covers {coverage:.1f}% of the image")
        return color if coverage >= self.cfg.min_coverage_pct else None

    def _corner_color(self, image_rgb: np.ndarray) -> Optional[MethodResult]:
        self.logger.info("🔥 Forced: most frequent corner color")
        color = self.background_candidate(image_rgb)
        if color is None:
            return None
        for tol in self.cfg.tolerances:
            mask = enhanced_distance_mask(image_rgb, color, tol)
            result = self.judge(mask, self.cfg.corner_color_band, tolerance=tol,
                                label=f"{self.name}:{ForcedState.CORNER_COLOR.value}")
            if result.accepted:
                result.detail = f"corner color {color}"
                return result
        return None

    def _light_neutral(self, image_rgb: np.ndarray) -> Optional[MethodResult]:
        self.logger.info("🔧 Forced: light/neutral background")
        return self.judge(light_background_mask(image_rgb), self.cfg.light_band,
                          label=f"{self.name}:{ForcedState.LIGHT_NEUTRAL.value}")

    def _corner_blocks(self, image_rgb: np.ndarray) -> Optional[MethodResult]:
        self.logger.info("🔧 Forced: per-corner dominant colors")
        return self.judge(corner_color_mask(image_rgb), self.cfg.corner_blocks_band,
                          label=f"{self.name}:{ForcedState.CORNER_BLOCKS.value}")

    def _opaque(self, image_rgb: np.ndarray) -> MethodResult:
        self.logger.warning("⚠️ Forced: nothing acceptable, keeping the image fully opaque")
        h, w = image_rgb.shape[:2]
        return MethodResult(
            method=f"{self.name}:{ForcedState.OPAQUE.value}",
            accepted=True,
            mask=np.full((h, w), 255, dtype=np.uint8),
            detail="no removal applied",
            low_confidence=True,
        )
