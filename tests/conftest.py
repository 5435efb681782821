from __future__ import annotations
import numpy as np
import pytest

from cutout.schemas.config import AppConfig, PathsConfig
from cutout.schemas.models import RasterImage
from cutout.utils.logging_utils import get_logger

WHITE = (255, 255, 255)
RED = (255, 0, 0)


def make_bordered(size: int = 100, border: int = 20, bg=WHITE, fg=RED) -> np.ndarray:
    """Uniform background with a centered solid square."""
    img = np.zeros((size, size, 3), dtype=np.uint8)
    img[...] = bg
    img[border:size - border, border:size - border] = fg
    return img


@pytest.fixture
def bordered_rgb() -> np.ndarray:
    return make_bordered()


@pytest.fixture
def bordered_image(bordered_rgb) -> RasterImage:
    return RasterImage(bordered_rgb)


@pytest.fixture
def uniform_rgb() -> np.ndarray:
    img = np.zeros((50, 50, 3), dtype=np.uint8)
    img[...] = (90, 140, 200)
    return img


@pytest.fixture
def ring_mask() -> np.ndarray:
    """Alpha that removes exactly the 20px border of the 100×100 bordered image."""
    m = np.zeros((100, 100), dtype=np.uint8)
    m[20:80, 20:80] = 255
    return m


@pytest.fixture
def app_cfg(tmp_path) -> AppConfig:
    return AppConfig(paths=PathsConfig(
        input_dir=str(tmp_path / "in"),
        output_dir=str(tmp_path / "out"),
        masks_dir=str(tmp_path / "masks"),
        logs_dir=str(tmp_path / "logs"),
    ))


@pytest.fixture
def logger():
    return get_logger("tests")
