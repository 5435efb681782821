from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional
import numpy as np

from ..utils.errors import DecodeError


@dataclass(frozen=True)
class Color:
    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for v in (self.r, self.g, self.b):
            if not 0 <= v <= 255:
                raise ValueError(f"Color channel out of range: {v}")

    @classmethod
    def from_iterable(cls, rgb) -> "Color":
        r, g, b = (int(v) for v in rgb)
        return cls(r, g, b)

    def as_array(self) -> np.ndarray:
        return np.array([self.r, self.g, self.b], dtype=np.float64)

    def __str__(self) -> str:
        return f"RGB({self.r}, {self.g}, {self.b})"


@dataclass(frozen=True)
class ColorCluster:
    color: Color
    count: int


@dataclass(frozen=True)
class DominantColor:
    color: Color
    frequency: float  # percent of all pixels, 0..100


@dataclass(frozen=True)
class RasterImage:
    """
    Decoded image: row-major interleaved uint8 pixels of shape (H, W, C), C in {3, 4}.
    The pixels are copied and made read-only on construction.
    """
    pixels: np.ndarray

    def __post_init__(self) -> None:
        px = self.pixels
        if not isinstance(px, np.ndarray) or px.dtype != np.uint8:
            raise DecodeError("RasterImage expects a uint8 numpy array")
        if px.ndim != 3 or px.shape[2] not in (3, 4):
            raise DecodeError(f"Unsupported raster shape {px.shape}; need (H, W, 3|4)")
        if px.shape[0] == 0 or px.shape[1] == 0:
            raise DecodeError("Empty raster")
        px = np.array(px, order="C", copy=True)
        px.setflags(write=False)
        object.__setattr__(self, "pixels", px)

    @classmethod
    def from_buffer(cls, width: int, height: int, channels: int, buffer: bytes) -> "RasterImage":
        if channels not in (3, 4):
            raise DecodeError(f"Unsupported channel count: {channels}")
        expected = width * height * channels
        if width <= 0 or height <= 0 or len(buffer) != expected:
            raise DecodeError(f"Buffer length {len(buffer)} != {width}x{height}x{channels}")
        arr = np.frombuffer(bytes(buffer), dtype=np.uint8).reshape(height, width, channels)
        return cls(arr)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def channels(self) -> int:
        return int(self.pixels.shape[2])

    @property
    def buffer(self) -> bytes:
        return self.pixels.tobytes()

    def rgb(self) -> np.ndarray:
        """First three channels as a read-only (H, W, 3) view."""
        return self.pixels[..., :3]


@dataclass(frozen=True)
class ValidationStats:
    removed_percentage: float  # 0..100
    connected_regions: int


@dataclass
class MethodResult:
    method: str
    accepted: bool
    mask: Optional[np.ndarray] = None
    stats: Optional[ValidationStats] = None
    tolerance: Optional[float] = None
    detail: str = ""
    low_confidence: bool = False

    @classmethod
    def reject(cls, method: str, detail: str, stats: Optional[ValidationStats] = None) -> "MethodResult":
        return cls(method=method, accepted=False, stats=stats, detail=detail)


@dataclass
class CascadeResult:
    image: RasterImage
    method: str
    low_confidence: bool = False
    attempts: List[MethodResult] = field(default_factory=list)

    @property
    def alpha(self) -> np.ndarray:
        return self.image.pixels[..., 3]

