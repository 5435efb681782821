from __future__ import annotations
from typing import List, Optional, Tuple
import numpy as np

from ..schemas.models import Color, ColorCluster, DominantColor
from .distance import round_half_up

CLUSTER_STEP = 15
FREQUENT_STEP = 20
HISTOGRAM_STEP = 10


def quantize(samples: np.ndarray, step: int) -> np.ndarray:
    """Round each channel half-up to the nearest multiple of step, clamped to [0, 255]."""
    q = round_half_up(np.asarray(samples, dtype=np.float64) / step) * step
    return np.clip(q, 0, 255).astype(np.int32)


def _ranked_counts(samples: np.ndarray, step: int) -> Tuple[np.ndarray, np.ndarray]:
    """Unique quantized colors and their counts, most frequent first (ties: first seen)."""
    samples = np.asarray(samples).reshape(-1, 3)
    if samples.shape[0] == 0:
        return np.empty((0, 3), np.int32), np.empty((0,), np.int64)
    q = quantize(samples, step)
    keys, first, counts = np.unique(q, axis=0, return_index=True, return_counts=True)
    order = np.lexsort((first, -counts))
    return keys[order], counts[order]


def cluster_colors(samples: np.ndarray, step: int = CLUSTER_STEP, top: int = 5) -> List[ColorCluster]:
    keys, counts = _ranked_counts(samples, step)
    return [ColorCluster(Color.from_iterable(k), int(c)) for k, c in zip(keys[:top], counts[:top])]


def most_frequent_color(samples: np.ndarray, step: int = FREQUENT_STEP) -> Optional[Color]:
    keys, _ = _ranked_counts(samples, step)
    if keys.shape[0] == 0:
        return None
    return Color.from_iterable(keys[0])


def dominant_colors(rgb: np.ndarray, top: int = 7, step: int = HISTOGRAM_STEP) -> List[DominantColor]:
    """Full-image histogram on a step-10 grid, top buckets with their share in percent."""
    pixels = rgb[..., :3].reshape(-1, 3)
    keys, counts = _ranked_counts(pixels, step)
    total = float(pixels.shape[0]) or 1.0
    return [DominantColor(Color.from_iterable(k), 100.0 * int(c) / total)
            for k, c in zip(keys[:top], counts[:top])]
