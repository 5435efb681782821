from __future__ import annotations
import numpy as np

from ..schemas.models import RasterImage
from ..utils.errors import EncodeError


def compose_rgba(image: RasterImage, mask: np.ndarray) -> RasterImage:
    """RGB from the source's first three channels, alpha = mask, pixel for pixel."""
    if mask.shape != (image.height, image.width):
        raise EncodeError(f"Mask shape {mask.shape} does not match image {image.height}x{image.width}")
    out = np.empty((image.height, image.width, 4), dtype=np.uint8)
    out[..., :3] = image.rgb()
    out[..., 3] = np.clip(mask, 0, 255).astype(np.uint8)
    return RasterImage(out)
