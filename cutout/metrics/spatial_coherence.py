# cutout/metrics/spatial_coherence.py
"""
Spatial coherence layer - how much a pixel differs from its 5×5 neighbourhood.

Flat regions (typical studio backgrounds) score near 0; textured or boundary
pixels score higher. Pixels closer than two pixels to the border have no full
neighbourhood and score 0.
"""
from __future__ import annotations
import numpy as np


def spatial_coherence_layer(rgb: np.ndarray, radius: int = 2) -> np.ndarray:
    """
    Mean Euclidean RGB distance between each pixel and the (2r+1)² window around it
    (the pixel itself included), divided by 255 and clipped to [0, 1].

    Args:
        rgb: (H, W, 3|4) uint8 image
        radius: half-size of the square window

    Returns:
        float64 (H, W) layer
    """
    px = rgb[..., :3].astype(np.float64)
    h, w = px.shape[:2]
    out = np.zeros((h, w), dtype=np.float64)
    if h <= 2 * radius or w <= 2 * radius:
        return out

    center = px[radius:h - radius, radius:w - radius]
    total = np.zeros(center.shape[:2], dtype=np.float64)
    count = 0
    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            nb = px[radius + dy:h - radius + dy, radius + dx:w - radius + dx]
            total += np.sqrt(((center - nb) ** 2).sum(axis=-1))
            count += 1

    out[radius:h - radius, radius:w - radius] = np.clip(total / count / 255.0, 0.0, 1.0)
    return out
