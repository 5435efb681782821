from __future__ import annotations
from collections import deque
from typing import List, Optional, Sequence, Tuple
import numpy as np

from ..schemas.models import Color
from ..color.distance import perceptual_distance
from ..metrics.windows import edge_distance, protected_zone

Point = Tuple[int, int]  # (x, y)


def is_likely_background_pixel(rgb: np.ndarray, x: int, y: int) -> bool:
    r, g, b = (int(v) for v in rgb[y, x, :3])
    light = (r + g + b) / 3.0
    spread = abs(r - g) + abs(g - b) + abs(r - b)
    return light > 120 or spread < 50


def seed_points(rgb: np.ndarray) -> List[Point]:
    """Four corners, then edge midpoints and quarter points that look like background."""
    h, w = rgb.shape[:2]
    seeds: List[Point] = [(0, 0), (w - 1, 0), (0, h - 1), (w - 1, h - 1)]
    midpoints = [(w // 2, 0), (w // 2, h - 1), (0, h // 2), (w - 1, h // 2)]
    quarters = [
        (w // 4, 0), (3 * w // 4, 0), (w // 4, h - 1), (3 * w // 4, h - 1),
        (0, h // 4), (0, 3 * h // 4), (w - 1, h // 4), (w - 1, 3 * h // 4),
    ]
    for p in midpoints + quarters:
        if is_likely_background_pixel(rgb, *p):
            seeds.append(p)
    return seeds


def adjusted_tolerance(h: int, w: int, tolerance: float) -> np.ndarray:
    """Tolerance shrinks by up to 20% with distance from the nearest edge (saturating at 0.4·min side)."""
    reach = max(min(w, h) * 0.4, 1e-9)
    factor = np.minimum(1.0, edge_distance(h, w) / reach)
    return tolerance * (1.0 - factor * 0.2)


def flood_fill_mask(rgb: np.ndarray,
                    seeds: Optional[Sequence[Point]] = None,
                    tolerance: float = 40.0,
                    max_fraction: float = 0.65) -> np.ndarray:
    """
    Breadth-first, 4-connected background growth from each seed in turn.

    A pixel joins the background when its perceptual distance to the seed's
    color is within the position-adjusted tolerance. The protected ellipse is
    never entered, pixels absorbed by one seed are not revisited by later ones,
    and growth stops for good once max_fraction of all pixels were absorbed.
    """
    h, w = rgb.shape[:2]
    seeds = list(seed_points(rgb) if seeds is None else seeds)
    mask = np.full((h, w), 255, dtype=np.uint8)
    visited = np.zeros((h, w), dtype=bool)
    blocked = protected_zone(h, w)
    tol_map = adjusted_tolerance(h, w, tolerance)
    budget = int(h * w * max_fraction)
    absorbed = 0

    for sx, sy in seeds:
        if absorbed >= budget:
            break
        if not (0 <= sx < w and 0 <= sy < h) or visited[sy, sx]:
            continue
        start = Color.from_iterable(rgb[sy, sx, :3])
        absorbable = (perceptual_distance(rgb, start) <= tol_map) & ~blocked

        queue = deque([(sx, sy)])
        while queue and absorbed < budget:
            x, y = queue.popleft()
            if x < 0 or x >= w or y < 0 or y >= h:
                continue
            if visited[y, x] or not absorbable[y, x]:
                continue
            visited[y, x] = True
            mask[y, x] = 0
            absorbed += 1
            queue.append((x + 1, y))
            queue.append((x - 1, y))
            queue.append((x, y + 1))
            queue.append((x, y - 1))

    return mask
