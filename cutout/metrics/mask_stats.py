from __future__ import annotations
from typing import Tuple
import numpy as np
import cv2

from ..schemas.models import ValidationStats


def label_removed(mask: np.ndarray) -> Tuple[int, np.ndarray, np.ndarray]:
    """4-connected labeling of zero pixels. Returns (n_regions, labels, areas[label])."""
    removed = (mask == 0).astype(np.uint8)
    num, labels, stats, _ = cv2.connectedComponentsWithStats(removed, connectivity=4)
    return num - 1, labels, stats[:, cv2.CC_STAT_AREA]


def removed_percentage(mask: np.ndarray) -> float:
    return 100.0 * float(np.count_nonzero(mask == 0)) / float(mask.size)


def count_connected_regions(mask: np.ndarray) -> int:
    n, _, _ = label_removed(mask)
    return n


def analyze_mask_statistics(mask: np.ndarray) -> ValidationStats:
    return ValidationStats(
        removed_percentage=removed_percentage(mask),
        connected_regions=count_connected_regions(mask),
    )
