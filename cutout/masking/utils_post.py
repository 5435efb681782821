from __future__ import annotations
import numpy as np
import cv2

_K3 = np.ones((3, 3), np.uint8)


def _with_frame_from(src: np.ndarray, filtered: np.ndarray) -> np.ndarray:
    # frame pixels are not filtered: copy them through from the input
    out = filtered.copy()
    out[0, :] = src[0, :]
    out[-1, :] = src[-1, :]
    out[:, 0] = src[:, 0]
    out[:, -1] = src[:, -1]
    return out


def erode(mask: np.ndarray) -> np.ndarray:
    """3×3 min filter over the 8-neighbourhood; border rows/columns copied through."""
    if mask.shape[0] < 3 or mask.shape[1] < 3:
        return mask.copy()
    return _with_frame_from(mask, cv2.erode(mask, _K3, borderType=cv2.BORDER_REPLICATE))


def dilate(mask: np.ndarray) -> np.ndarray:
    """3×3 max filter over the 8-neighbourhood; border rows/columns copied through."""
    if mask.shape[0] < 3 or mask.shape[1] < 3:
        return mask.copy()
    return _with_frame_from(mask, cv2.dilate(mask, _K3, borderType=cv2.BORDER_REPLICATE))


def opening(mask: np.ndarray) -> np.ndarray:
    """erode → dilate: drops isolated foreground speckles."""
    return dilate(erode(mask))


def closing(mask: np.ndarray) -> np.ndarray:
    """dilate → erode: fills isolated background holes."""
    return erode(dilate(mask))


def open_close(mask: np.ndarray) -> np.ndarray:
    return closing(opening(mask))
