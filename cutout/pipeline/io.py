from __future__ import annotations
from pathlib import Path
from typing import List, Optional
import numpy as np
import cv2

from ..schemas.models import RasterImage
from ..utils.errors import DecodeError, EncodeError

IMAGE_SUFFIXES = (".jpg", ".jpeg", ".png")


def discover_images(input_dir: Path, limit: Optional[int] = None) -> List[Path]:
    images = sorted(p for p in input_dir.iterdir()
                    if p.is_file() and p.suffix.lower() in IMAGE_SUFFIXES)
    return images[:limit] if limit else images


def load_raster(path: Path) -> RasterImage:
    """Decode a file into an RGB or RGBA RasterImage."""
    img = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if img is None:
        raise DecodeError(f"Failed to read image: {path}")
    if img.dtype != np.uint8:
        raise DecodeError(f"Unsupported bit depth {img.dtype} in {path}")
    if img.ndim == 2:
        img = cv2.cvtColor(img, cv2.COLOR_GRAY2RGB)
    elif img.shape[2] == 4:
        img = cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)
    elif img.shape[2] == 3:
        img = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
    else:
        raise DecodeError(f"Unsupported channel count {img.shape[2]} in {path}")
    return RasterImage(img)


def save_rgba(path: Path, image: RasterImage) -> None:
    if image.channels != 4:
        raise EncodeError(f"Expected RGBA raster, got {image.channels} channels")
    bgra = cv2.cvtColor(np.ascontiguousarray(image.pixels), cv2.COLOR_RGBA2BGRA)
    if not cv2.imwrite(str(path.with_suffix(".png")), bgra):
        raise EncodeError(f"Failed to write {path}")


def save_mask(path: Path, mask: np.ndarray) -> None:
    if not cv2.imwrite(str(path), mask):
        raise EncodeError(f"Failed to write {path}")
