import cv2
import numpy as np
import pytest

from cutout.schemas.models import RasterImage
from cutout.pipeline.io import discover_images, load_raster, save_rgba, save_mask
from cutout.pipeline.orchestrator import run_images
from cutout.utils.errors import DecodeError, EncodeError


def _write_rgb(path, rgb):
    assert cv2.imwrite(str(path), cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR))


def test_load_raster_returns_rgb_order(tmp_path, bordered_rgb):
    path = tmp_path / "square.png"
    _write_rgb(path, bordered_rgb)
    image = load_raster(path)
    assert (image.width, image.height, image.channels) == (100, 100, 3)
    assert tuple(image.pixels[50, 50]) == (255, 0, 0)


def test_load_raster_rejects_garbage(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"not an image")
    with pytest.raises(DecodeError):
        load_raster(path)


def test_save_rgba_preserves_alpha(tmp_path):
    px = np.zeros((4, 5, 4), dtype=np.uint8)
    px[..., 0] = 200
    px[..., 3] = np.arange(20, dtype=np.uint8).reshape(4, 5) * 10
    save_rgba(tmp_path / "out.png", RasterImage(px))
    back = load_raster(tmp_path / "out.png")
    assert back.channels == 4
    np.testing.assert_array_equal(back.pixels, px)


def test_save_rgba_needs_alpha(tmp_path, bordered_image):
    with pytest.raises(EncodeError):
        save_rgba(tmp_path / "out.png", bordered_image)


def test_save_mask(tmp_path, ring_mask):
    save_mask(tmp_path / "mask.png", ring_mask)
    back = cv2.imread(str(tmp_path / "mask.png"), cv2.IMREAD_UNCHANGED)
    np.testing.assert_array_equal(back, ring_mask)


def test_discover_images_filters_and_limits(tmp_path):
    for name in ("b.png", "a.JPG", "c.jpeg", "notes.txt"):
        (tmp_path / name).write_bytes(b"")
    assert [p.name for p in discover_images(tmp_path)] == ["a.JPG", "b.png", "c.jpeg"]
    assert len(discover_images(tmp_path, limit=2)) == 2


def test_run_images_continues_after_failure(tmp_path, app_cfg, bordered_rgb):
    src = tmp_path / "in"
    src.mkdir()
    _write_rgb(src / "a_square.png", bordered_rgb)
    (src / "b_broken.png").write_bytes(b"\x89PNG garbage")
    app_cfg.run.save_debug = True

    counts = run_images(
        images=discover_images(src),
        output_dir=tmp_path / "out",
        masks_dir=tmp_path / "masks",
        logs_dir=tmp_path / "logs",
        cfg=app_cfg,
    )
    assert counts == {"advanced_detection": 1, "failed": 1}
    out = load_raster(tmp_path / "out" / "a_square-cutout.png")
    assert out.channels == 4
    assert out.pixels[0, 0, 3] == 0 and out.pixels[50, 50, 3] == 255
    assert (tmp_path / "masks" / "a_square-mask.png").exists()
    assert not (tmp_path / "out" / "b_broken-cutout.png").exists()
