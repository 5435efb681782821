# cutout/masking/mask_builder.py
"""
Distance-to-color masks with a protected subject ellipse.

All builders allocate a fresh uint8 mask (255 = keep) and never touch the
input pixels. The plain and enhanced builders feather the edge of the removed
area with a linear ramp; the helper masks used by forced removal are hard 0/255.
"""
from __future__ import annotations
import numpy as np

from ..schemas.models import Color
from ..color.distance import perceptual_distance, euclidean_distance, lightness, channel_spread, round_half_up
from ..color.clusters import most_frequent_color
from ..color.sampling import corner_blocks
from ..metrics.edge_map import edge_map, low_edge_background
from ..metrics.windows import edge_distance, protected_zone


def _check_tolerance(tolerance: float) -> None:
    if tolerance <= 0:
        raise ValueError(f"tolerance must be positive, got {tolerance}")


def _ramp(distance: np.ndarray, start: float, span: float) -> np.ndarray:
    return np.clip(round_half_up((distance - start) / span * 255.0), 0, 255)


def distance_mask(rgb: np.ndarray, color: Color, tolerance: float) -> np.ndarray:
    """
    d <= 0.6T → 0, 0.6T < d <= T → linear ramp to 255, else 255,
    where d is the perceptual distance to `color`. Protected pixels stay 255.
    """
    _check_tolerance(tolerance)
    h, w = rgb.shape[:2]
    d = perceptual_distance(rgb, color)
    inner = 0.6 * tolerance
    mask = np.full((h, w), 255.0)
    ramp = (d > inner) & (d <= tolerance)
    mask[ramp] = _ramp(d[ramp], inner, 0.4 * tolerance)
    mask[d <= inner] = 0
    mask[protected_zone(h, w)] = 255
    return mask.astype(np.uint8)


def enhanced_distance_mask(rgb: np.ndarray, color: Color, tolerance: float,
                           edge_band: float = 0.35) -> np.ndarray:
    """
    Stricter variant: d <= 0.7T → 0; the 0.7T..T ramp only applies within
    edge_band·min(h, w) of the border, elsewhere such pixels stay opaque.
    """
    _check_tolerance(tolerance)
    h, w = rgb.shape[:2]
    d = perceptual_distance(rgb, color)
    inner = 0.7 * tolerance
    near_edge = edge_distance(h, w) <= min(w, h) * edge_band
    mask = np.full((h, w), 255.0)
    ramp = (d > inner) & (d <= tolerance) & near_edge
    mask[ramp] = _ramp(d[ramp], inner, 0.3 * tolerance)
    mask[d <= inner] = 0
    mask[protected_zone(h, w)] = 255
    return mask.astype(np.uint8)


def light_background_mask(rgb: np.ndarray) -> np.ndarray:
    """Remove light (mean > 120) or neutral (spread < 30) pixels, favouring those near the border."""
    h, w = rgb.shape[:2]
    light = lightness(rgb)
    spread = channel_spread(rgb)
    edge_bonus = np.maximum(0.0, (50.0 - edge_distance(h, w)) / 50.0)

    candidate = (light > 120) | (spread < 30)
    strong = (light > 140) | (spread < 20) | (edge_bonus > 0.3)
    remove = candidate & strong & ~protected_zone(h, w)

    mask = np.full((h, w), 255, dtype=np.uint8)
    mask[remove] = 0
    return mask


def corner_color_mask(rgb: np.ndarray, tolerance: float = 40.0) -> np.ndarray:
    """Inside each 10% corner block, clear pixels close to that block's most frequent color."""
    h, w = rgb.shape[:2]
    mask = np.full((h, w), 255, dtype=np.uint8)
    side = int(min(w, h) * 0.1)
    if side <= 0:
        return mask
    for x0, y0, s in corner_blocks(h, w, side):
        ys = slice(max(0, y0), min(h, y0 + s))
        xs = slice(max(0, x0), min(w, x0 + s))
        block = rgb[ys, xs]
        color = most_frequent_color(block[::2, ::2, :3].reshape(-1, 3))
        if color is None:
            continue
        sub = mask[ys, xs]
        sub[euclidean_distance(block, color) <= tolerance] = 0
    return mask


def edge_background_mask(rgb: np.ndarray) -> np.ndarray:
    """Clear weak-gradient pixels near the border or in quiet neighbourhoods, outside the protected zone."""
    h, w = rgb.shape[:2]
    edges = edge_map(rgb)
    remove = low_edge_background(edges) & ~protected_zone(h, w)
    mask = np.full((h, w), 255, dtype=np.uint8)
    mask[remove] = 0
    return mask
