from __future__ import annotations
from dataclasses import dataclass
import numpy as np

from ..schemas.config import AcceptanceBand, ValidatorConfig
from ..schemas.models import ValidationStats
from ..metrics.mask_stats import label_removed
from ..metrics.windows import central_window


@dataclass
class MaskVerdict:
    passed: bool
    reason: str = ""


def center_removal_ratio(mask: np.ndarray, fraction: float = 0.3) -> float:
    h, w = mask.shape
    ys, xs = central_window(h, w, fraction)
    window = mask[ys, xs]
    if window.size == 0:
        return 0.0
    return float(np.count_nonzero(window == 0)) / float(window.size)


def largest_core_hole(mask: np.ndarray, fraction: float = 0.25) -> float:
    """
    Area (as a fraction of the whole image) of the biggest 4-connected removed
    region that reaches into the central core window. Regions are measured in
    full, not clipped to the window.
    """
    h, w = mask.shape
    n, labels, areas = label_removed(mask)
    if n == 0:
        return 0.0
    ys, xs = central_window(h, w, fraction)
    touching = np.unique(labels[ys, xs])
    touching = touching[touching != 0]
    if touching.size == 0:
        return 0.0
    return float(areas[touching].max()) / float(mask.size)


def validate_object_preservation(mask: np.ndarray, cfg: ValidatorConfig = ValidatorConfig()) -> MaskVerdict:
    ratio = center_removal_ratio(mask, cfg.center_fraction)
    if ratio > cfg.max_center_removal:
        return MaskVerdict(False, f"center removal {ratio * 100:.1f}% > {cfg.max_center_removal * 100:.0f}%")
    hole = largest_core_hole(mask, cfg.core_fraction)
    if hole > cfg.max_hole_fraction:
        return MaskVerdict(False, f"hole of {hole * 100:.1f}% of image reaches the core")
    return MaskVerdict(True)


def evaluate_mask(mask: np.ndarray, stats: ValidationStats, band: AcceptanceBand,
                  cfg: ValidatorConfig = ValidatorConfig()) -> MaskVerdict:
    pct = stats.removed_percentage
    if pct < band.min_removed_pct or pct > band.max_removed_pct:
        return MaskVerdict(False, f"removed {pct:.1f}% outside [{band.min_removed_pct:g}, {band.max_removed_pct:g}]")
    if band.max_regions is not None and stats.connected_regions > band.max_regions:
        return MaskVerdict(False, f"{stats.connected_regions} regions > {band.max_regions}")
    if band.validate_preservation:
        return validate_object_preservation(mask, cfg)
    return MaskVerdict(True)
