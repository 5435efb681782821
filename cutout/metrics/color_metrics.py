from __future__ import annotations
import numpy as np

_CHUNK = 4096


def draw_color_samples(rgb: np.ndarray, rng: np.random.Generator, n: int = 1000) -> np.ndarray:
    """n pixel colors drawn uniformly (with replacement) from the image."""
    h, w = rgb.shape[:2]
    xs = rng.integers(0, w, size=n)
    ys = rng.integers(0, h, size=n)
    return rgb[ys, xs, :3].astype(np.float64)


def nearest_sample_distance(rgb: np.ndarray, samples: np.ndarray) -> np.ndarray:
    """Per-pixel Euclidean RGB distance to the closest sample color."""
    h, w = rgb.shape[:2]
    px = rgb[..., :3].reshape(-1, 3).astype(np.float64)
    refs = np.unique(samples.reshape(-1, 3), axis=0)
    out = np.empty(px.shape[0], dtype=np.float64)
    ref_sq = (refs * refs).sum(axis=1)
    for start in range(0, px.shape[0], _CHUNK):
        chunk = px[start:start + _CHUNK]
        d2 = (chunk * chunk).sum(axis=1)[:, None] + ref_sq[None, :] - 2.0 * chunk @ refs.T
        out[start:start + _CHUNK] = np.sqrt(np.maximum(d2.min(axis=1), 0.0))
    return out.reshape(h, w)


def color_cluster_layer(rgb: np.ndarray, rng: np.random.Generator, n_samples: int = 1000,
                        polarity: str = "literal") -> np.ndarray:
    """Distance to the nearest of n randomly drawn image colors, scaled by 1/255 and clipped to [0, 1]."""
    samples = draw_color_samples(rgb, rng, n_samples)
    layer = np.clip(nearest_sample_distance(rgb, samples) / 255.0, 0.0, 1.0)
    if polarity == "inverted":
        layer = 1.0 - layer
    return layer
