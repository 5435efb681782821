from __future__ import annotations
import numpy as np

from .edge_map import SOBEL_X, SOBEL_Y


def channel_sum(rgb: np.ndarray) -> np.ndarray:
    """r + g + b as exact integers (held in float64)."""
    return rgb[..., :3].astype(np.int64).sum(axis=-1).astype(np.float64)


def mean_intensity(rgb: np.ndarray) -> np.ndarray:
    return channel_sum(rgb) / 3.0


def _interior_correlate(img: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """3×3 correlation evaluated on interior pixels only; the one-pixel frame stays 0."""
    h, w = img.shape
    out = np.zeros((h, w), dtype=np.float64)
    if h < 3 or w < 3:
        return out
    acc = np.zeros((h - 2, w - 2), dtype=np.float64)
    for ky in range(3):
        for kx in range(3):
            k = float(kernel[ky, kx])
            if k:
                acc += k * img[ky:ky + h - 2, kx:kx + w - 2]
    out[1:-1, 1:-1] = acc
    return out


def sobel_magnitude_layer(rgb: np.ndarray) -> np.ndarray:
    """Sobel magnitude of mean intensity / 255, clipped to [0, 1]; frame pixels are 0."""
    # integer sums keep the kernel cancellation exact on flat regions
    total = channel_sum(rgb)
    gx = _interior_correlate(total, SOBEL_X) / 3.0
    gy = _interior_correlate(total, SOBEL_Y) / 3.0
    return np.clip(np.sqrt(gx * gx + gy * gy) / 255.0, 0.0, 1.0)


def pattern_variance_layer(rgb: np.ndarray) -> np.ndarray:
    """Sum of squared intensity deviations over the 8-neighbourhood / (8·255²); frame pixels are 0."""
    inten = mean_intensity(rgb)
    h, w = inten.shape
    out = np.zeros((h, w), dtype=np.float64)
    if h < 3 or w < 3:
        return out
    center = inten[1:-1, 1:-1]
    acc = np.zeros_like(center)
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            if dy == 0 and dx == 0:
                continue
            nb = inten[1 + dy:h - 1 + dy, 1 + dx:w - 1 + dx]
            acc += (nb - center) ** 2
    out[1:-1, 1:-1] = np.minimum(acc / (8.0 * 255.0 * 255.0), 1.0)
    return out
