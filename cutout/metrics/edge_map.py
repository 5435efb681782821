# cutout/metrics/edge_map.py
"""
Gradient-magnitude maps.

`edge_map` follows the classic "grey → slight blur → 1..99 percentile stretch → vertical
derivative" recipe and yields a uint8 map; `low_edge_background` turns that
map into a background-leaning boolean mask. The Sobel pair is shared with the
multi-layer synthesizer.
"""
from __future__ import annotations
import numpy as np
import cv2

VERTICAL_KERNEL = np.array([[-1, -2, -1],
                            [0, 0, 0],
                            [1, 2, 1]], dtype=np.float32)
SOBEL_Y = VERTICAL_KERNEL
SOBEL_X = np.ascontiguousarray(VERTICAL_KERNEL.T)

LOW_EDGE = 40
QUIET_EDGE = 25
QUIET_RATIO = 0.7
BORDER_FRACTION = 0.3


def correlate3x3(img: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """Plain correlation (kernel applied as written, no flip) with replicated borders, float32 output."""
    return cv2.filter2D(img.astype(np.float32), cv2.CV_32F, kernel, borderType=cv2.BORDER_REPLICATE)


def stretch_percentiles(grey: np.ndarray, lower: float = 1.0, upper: float = 99.0) -> np.ndarray:
    """Linear stretch of the lower..upper percentile range onto 0..255; flat input is returned as is."""
    lo, hi = (float(v) for v in np.percentile(grey, (lower, upper)))
    if hi <= lo:
        return grey
    scale = 255.0 / (hi - lo)
    clipped = np.clip(grey.astype(np.float32), lo, hi)
    return cv2.convertScaleAbs(clipped, alpha=scale, beta=-lo * scale)


def edge_map(rgb: np.ndarray, blur_sigma: float = 0.6) -> np.ndarray:
    """
    Positive response where intensity rises going down the image (dark above
    light); the opposite transition clips to 0.
    """
    grey = cv2.cvtColor(np.ascontiguousarray(rgb[..., :3]), cv2.COLOR_RGB2GRAY)
    blurred = cv2.GaussianBlur(grey, (0, 0), blur_sigma)
    response = correlate3x3(stretch_percentiles(blurred), VERTICAL_KERNEL)
    return np.clip(response, 0, 255).astype(np.uint8)


def border_band(h: int, w: int, fraction: float = BORDER_FRACTION) -> np.ndarray:
    """True where a pixel lies within fraction·min(h, w) of any border."""
    b = min(w, h) * fraction
    xs = np.arange(w)
    ys = np.arange(h)
    near_x = (xs < b) | (xs >= w - b)
    near_y = (ys < b) | (ys >= h - b)
    return near_y[:, None] | near_x[None, :]


def quiet_neighbourhood(edges: np.ndarray, radius: int = 2,
                        quiet: int = QUIET_EDGE, ratio: float = QUIET_RATIO) -> np.ndarray:
    """True where at least `ratio` of the in-bounds (2r+1)² neighbours are below `quiet`."""
    k = 2 * radius + 1
    low = (edges < quiet).astype(np.float32)
    ones = np.ones_like(low)
    count = cv2.boxFilter(low, -1, (k, k), normalize=False, borderType=cv2.BORDER_CONSTANT)
    valid = cv2.boxFilter(ones, -1, (k, k), normalize=False, borderType=cv2.BORDER_CONSTANT)
    return (count / np.maximum(valid, 1.0)) >= ratio - 1e-6


def low_edge_background(edges: np.ndarray) -> np.ndarray:
    h, w = edges.shape
    weak = edges < LOW_EDGE
    return weak & (border_band(h, w) | quiet_neighbourhood(edges))
