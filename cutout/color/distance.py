from __future__ import annotations
import numpy as np

from ..schemas.models import Color

# Luma-style channel weights used for every "perceptual" distance
PERCEPTUAL_WEIGHTS = np.array([0.3, 0.59, 0.11], dtype=np.float64)


def _delta(rgb: np.ndarray, color: Color) -> np.ndarray:
    return rgb[..., :3].astype(np.float64) - color.as_array()


def perceptual_distance(rgb: np.ndarray, color: Color) -> np.ndarray:
    """sqrt(0.3·Δr² + 0.59·Δg² + 0.11·Δb²) per pixel."""
    d = _delta(rgb, color)
    return np.sqrt((d * d) @ PERCEPTUAL_WEIGHTS)


def euclidean_distance(rgb: np.ndarray, color: Color) -> np.ndarray:
    d = _delta(rgb, color)
    return np.sqrt((d * d).sum(axis=-1))


def lightness(rgb: np.ndarray) -> np.ndarray:
    return rgb[..., :3].astype(np.float64).mean(axis=-1)


def channel_spread(rgb: np.ndarray) -> np.ndarray:
    """|r-g| + |g-b| + |r-b|."""
    c = rgb[..., :3].astype(np.int32)
    r, g, b = c[..., 0], c[..., 1], c[..., 2]
    return np.abs(r - g) + np.abs(g - b) + np.abs(r - b)


def round_half_up(x: np.ndarray) -> np.ndarray:
    return np.floor(np.asarray(x, dtype=np.float64) + 0.5)
