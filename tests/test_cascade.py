import numpy as np
import pytest

from cutout.schemas.config import CascadeConfig, RemoteConfig, RunConfig
from cutout.schemas.models import RasterImage
from cutout.pipeline.cascade import CascadeOrchestrator, has_contrast, remove_background
from cutout.pipeline.compositor import compose_rgba
from cutout.utils.errors import EncodeError


def test_bordered_image_uses_advanced_detection(bordered_image, logger):
    result = CascadeOrchestrator(CascadeConfig(), logger).run(bordered_image)
    assert result.method == "advanced_detection"
    assert not result.low_confidence
    assert len(result.attempts) == 1
    assert result.attempts[0].tolerance == 35

    alpha = result.alpha
    assert result.image.channels == 4
    assert (alpha[:20, :] == 0).all() and (alpha[80:, :] == 0).all()
    assert (alpha[:, :20] == 0).all() and (alpha[:, 80:] == 0).all()
    assert (alpha[20:80, 20:80] == 255).all()
    np.testing.assert_array_equal(result.image.rgb(), bordered_image.rgb())


def test_uniform_image_stays_opaque(uniform_rgb, logger):
    image = RasterImage(uniform_rgb)
    result = CascadeOrchestrator(CascadeConfig(), logger).run(image)
    assert result.method == "forced_removal:opaque"
    assert result.low_confidence
    assert result.image.pixels.shape == (50, 50, 4)
    assert (result.alpha == 255).all()
    skipped = [a for a in result.attempts if a.detail == "flat image"]
    assert [a.method for a in skipped] == [
        "advanced_detection", "flood_fill", "statistical_separation", "edge_processing"]


def test_rgba_input_keeps_color_channels(bordered_rgb, logger):
    rgba = np.dstack([bordered_rgb, np.full((100, 100), 7, dtype=np.uint8)])
    result = CascadeOrchestrator(CascadeConfig(), logger).run(RasterImage(rgba))
    assert result.method == "advanced_detection"
    np.testing.assert_array_equal(result.image.rgb(), bordered_rgb)
    assert result.alpha[0, 0] == 0


def test_method_order_is_configurable(bordered_image, logger):
    cfg = CascadeConfig(method_order=["flood_fill", "forced"])
    orchestrator = CascadeOrchestrator(cfg, logger)
    assert [s.name for s in orchestrator.strategies] == ["flood_fill", "forced_removal"]
    assert orchestrator.run(bordered_image).method == "flood_fill"


def test_has_contrast(uniform_rgb, bordered_rgb):
    assert not has_contrast(uniform_rgb, 1.0)
    assert has_contrast(bordered_rgb, 1.0)


def test_compose_rgba_alpha_is_mask(bordered_image):
    mask = np.arange(100 * 100, dtype=np.int64).reshape(100, 100) % 256
    out = compose_rgba(bordered_image, mask.astype(np.uint8))
    np.testing.assert_array_equal(out.pixels[..., 3], mask)
    np.testing.assert_array_equal(out.rgb(), bordered_image.rgb())
    with pytest.raises(EncodeError):
        compose_rgba(bordered_image, np.zeros((10, 10), dtype=np.uint8))


class _Remote:
    def __init__(self, out=None, error=None):
        self.calls = 0
        self.out = out
        self.error = error

    def __call__(self, image):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.out


@pytest.fixture
def remote_cfg(app_cfg):
    return app_cfg.model_copy(update={"remote": RemoteConfig(enabled=True, api_key="key")})


def test_remote_result_wins(bordered_image, remote_cfg, logger):
    cut = compose_rgba(bordered_image, np.full((100, 100), 255, dtype=np.uint8))
    remote = _Remote(out=cut)
    result = remove_background(bordered_image, remote_cfg, remote=remote, logger=logger)
    assert result.method == "remote"
    assert result.image is cut
    assert remote.calls == 1


def test_remote_failure_falls_back(bordered_image, remote_cfg, logger):
    remote = _Remote(error=ConnectionError("offline"))
    result = remove_background(bordered_image, remote_cfg, remote=remote, logger=logger)
    assert remote.calls == 1
    assert result.method == "advanced_detection"


def test_inactive_remote_is_not_called(bordered_image, app_cfg, logger):
    remote = _Remote()
    result = remove_background(bordered_image, app_cfg, remote=remote, logger=logger)
    assert remote.calls == 0
    assert result.method == "advanced_detection"


def test_multilayer_mode(bordered_image, app_cfg, logger):
    cfg = app_cfg.model_copy(update={"run": RunConfig(mode="multilayer")})
    result = remove_background(bordered_image, cfg, rng=np.random.default_rng(0), logger=logger)
    assert result.method == "multilayer"
    assert set(np.unique(result.alpha)) <= {0, 255}
