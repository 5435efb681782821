from __future__ import annotations
from typing import Tuple
import numpy as np


def central_window(h: int, w: int, fraction: float) -> Tuple[slice, slice]:
    """Centered square of side fraction·min(h, w), clipped to the image."""
    side = min(w, h) * fraction
    y0 = max(0, int(np.ceil(h / 2 - side / 2)))
    x0 = max(0, int(np.ceil(w / 2 - side / 2)))
    y1 = min(h, int(np.ceil(h / 2 + side / 2)))
    x1 = min(w, int(np.ceil(w / 2 + side / 2)))
    return slice(y0, y1), slice(x0, x1)


def edge_distance(h: int, w: int) -> np.ndarray:
    """min(x, w - x, y, h - y) for every pixel."""
    xs = np.arange(w)
    ys = np.arange(h)
    dx = np.minimum(xs, w - xs)
    dy = np.minimum(ys, h - ys)
    return np.minimum(dy[:, None], dx[None, :]).astype(np.float64)


def protected_zone(h: int, w: int) -> np.ndarray:
    """Ellipse centred on the image with both semi-axes 0.25·min(h, w)."""
    r = min(w, h) * 0.25
    ys, xs = np.mgrid[0:h, 0:w].astype(np.float64)
    d = ((xs - w / 2.0) / r) ** 2 + ((ys - h / 2.0) / r) ** 2
    return d <= 1.0
