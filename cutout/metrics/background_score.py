from __future__ import annotations
import numpy as np

from ..schemas.models import Color
from ..color.distance import euclidean_distance
from ..color.sampling import corner_blocks
from .windows import central_window

SCORE_TOLERANCE = 40.0


def _matches(rgb: np.ndarray, color: Color, tolerance: float) -> np.ndarray:
    return euclidean_distance(rgb, color) <= tolerance


def edge_presence(rgb: np.ndarray, color: Color, tolerance: float = SCORE_TOLERANCE) -> float:
    """Fraction of the one-pixel image frame that matches the color."""
    h, w = rgb.shape[:2]
    frame = np.zeros((h, w), dtype=bool)
    frame[0, :] = frame[-1, :] = True
    frame[:, 0] = frame[:, -1] = True
    hits = _matches(rgb, color, tolerance)[frame]
    return float(hits.mean()) if hits.size else 0.0


def corner_concentration(rgb: np.ndarray, color: Color, tolerance: float = SCORE_TOLERANCE) -> float:
    h, w = rgb.shape[:2]
    side = int(min(w, h) * 0.1)
    if side <= 0:
        return 0.0
    match = _matches(rgb, color, tolerance)
    hits = total = 0
    for x0, y0, s in corner_blocks(h, w, side):
        block = match[max(0, y0):min(h, y0 + s), max(0, x0):min(w, x0 + s)]
        hits += int(block.sum())
        total += block.size
    return hits / total if total else 0.0


def center_absence(rgb: np.ndarray, color: Color, tolerance: float = SCORE_TOLERANCE) -> float:
    h, w = rgb.shape[:2]
    ys, xs = central_window(h, w, 0.3)
    block = _matches(rgb[ys, xs], color, tolerance)
    presence = float(block.mean()) if block.size else 0.0
    return 1.0 - presence


def light_neutral_bonus(color: Color) -> float:
    mean = (color.r + color.g + color.b) / 3.0
    neutral = abs(color.r - color.g) < 30 and abs(color.g - color.b) < 30
    return 0.1 if (mean > 150 or neutral) else 0.0


def background_score(rgb: np.ndarray, color: Color, tolerance: float = SCORE_TOLERANCE) -> float:
    """
    Likelihood in [0, 1] that `color` is the background:
    0.35·edge presence + 0.3·corner concentration + 0.25·center absence + 0.1 light/neutral bonus.
    """
    score = (
        0.35 * edge_presence(rgb, color, tolerance)
        + 0.3 * corner_concentration(rgb, color, tolerance)
        + 0.25 * center_absence(rgb, color, tolerance)
        + light_neutral_bonus(color)
    )
    return float(min(max(score, 0.0), 1.0))


def color_coverage(rgb: np.ndarray, color: Color, tolerance: float) -> float:
    """Percent of all pixels within `tolerance` (Euclidean) of the color."""
    return 100.0 * float(_matches(rgb, color, tolerance).mean())
