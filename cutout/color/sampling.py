from __future__ import annotations
from typing import List, Tuple
import numpy as np

Block = Tuple[int, int, int]  # (x0, y0, side)


def _sample_block(rgb: np.ndarray, x0: int, y0: int, side: int, stride: int = 2) -> np.ndarray:
    h, w = rgb.shape[:2]
    ys = slice(max(0, y0), min(h, y0 + side), stride)
    xs = slice(max(0, x0), min(w, x0 + side), stride)
    return rgb[ys, xs, :3].reshape(-1, 3)


def corner_blocks(h: int, w: int, side: int) -> List[Block]:
    """Top-left, top-right, bottom-left, bottom-right squares of the given side."""
    return [
        (0, 0, side),
        (w - side, 0, side),
        (0, h - side, side),
        (w - side, h - side, side),
    ]


def _concat(parts: List[np.ndarray]) -> np.ndarray:
    parts = [p for p in parts if p.size]
    if not parts:
        return np.empty((0, 3), dtype=np.uint8)
    return np.concatenate(parts, axis=0)


def sample_blocks(rgb: np.ndarray, blocks: List[Block], stride: int = 2) -> np.ndarray:
    return _concat([_sample_block(rgb, x, y, s, stride) for x, y, s in blocks])


def sample_background_regions(rgb: np.ndarray) -> np.ndarray:
    """Corner samples used to seed cluster detection: blocks of 2·max(10, 5% of min side)."""
    h, w = rgb.shape[:2]
    border = max(10.0, min(w, h) * 0.05)
    side = int(border * 2)
    return sample_blocks(rgb, corner_blocks(h, w, side))


def border_anchor_blocks(h: int, w: int, side: int) -> List[Block]:
    """Blocks hugging the border at the edge midpoints and quarter points."""
    half = side // 2
    blocks: List[Block] = []
    for fx in (0.25, 0.5, 0.75):
        cx = int(w * fx)
        blocks.append((cx - half, 0, side))
        blocks.append((cx - half, h - side, side))
    for fy in (0.25, 0.5, 0.75):
        cy = int(h * fy)
        blocks.append((0, cy - half, side))
        blocks.append((w - side, cy - half, side))
    return blocks


def sample_corners(rgb: np.ndarray, dense: bool = False) -> np.ndarray:
    """
    Corner blocks of side max(20, 10% of min side), stride 2.
    With dense=True also samples half-size blocks at edge midpoints and quarter points.
    """
    h, w = rgb.shape[:2]
    side = int(max(20.0, min(w, h) * 0.1))
    blocks = corner_blocks(h, w, side)
    if dense:
        blocks = blocks + border_anchor_blocks(h, w, max(1, side // 2))
    return sample_blocks(rgb, blocks)
