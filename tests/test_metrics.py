import numpy as np
import pytest

from cutout.schemas.models import Color
from cutout.metrics.edge_map import (
    edge_map, border_band, low_edge_background, correlate3x3, stretch_percentiles, VERTICAL_KERNEL,
)
from cutout.metrics.background_score import (
    background_score, edge_presence, corner_concentration, center_absence,
    light_neutral_bonus, color_coverage,
)
from cutout.metrics.windows import central_window, edge_distance, protected_zone
from cutout.metrics.texture_metrics import sobel_magnitude_layer, pattern_variance_layer
from cutout.metrics.spatial_coherence import spatial_coherence_layer


def test_central_window_bounds():
    ys, xs = central_window(100, 100, 0.3)
    assert (ys.start, ys.stop, xs.start, xs.stop) == (35, 65, 35, 65)
    ys, _ = central_window(100, 100, 0.25)
    assert (ys.start, ys.stop) == (38, 63)


def test_edge_distance_and_protected_zone():
    d = edge_distance(10, 20)
    assert d[0, 5] == 0 and d[5, 10] == 5
    zone = protected_zone(100, 100)
    assert zone[50, 50] and not zone[0, 0] and not zone[50, 80]


def test_edge_map_flat_image_is_zero(uniform_rgb):
    edges = edge_map(uniform_rgb)
    assert edges.dtype == np.uint8
    assert not edges.any()
    assert low_edge_background(edges).all()


def test_edge_map_finds_horizontal_boundary(bordered_rgb):
    edges = edge_map(bordered_rgb)
    assert edges.max() > 200
    assert edges[5, 5] == 0
    # interior of the square is flat
    assert edges[50, 50] == 0


def _step_image(top, bottom):
    img = np.zeros((40, 40, 3), dtype=np.uint8)
    img[:20] = top
    img[20:] = bottom
    return img


def test_correlation_applies_kernel_unflipped():
    img = np.zeros((5, 5), dtype=np.float32)
    img[2, 2] = 1.0
    out = correlate3x3(img, VERTICAL_KERNEL)
    # impulse response of a correlation is the kernel mirrored
    np.testing.assert_array_equal(out[1:4, 1:4], VERTICAL_KERNEL[::-1, ::-1])


def test_edge_map_responds_to_dark_over_light():
    edges = edge_map(_step_image(20, 230))
    assert edges.max() == 255
    assert (edges[19:21, :] == 255).all()


def test_edge_map_ignores_light_over_dark():
    assert edge_map(_step_image(230, 20)).max() == 0


def test_percentile_stretch_ignores_outliers():
    grey = np.full((100, 100), 100, dtype=np.uint8)
    grey[50:, :] = 150
    grey[0, 0] = 255           # a single outlier does not move the 99th percentile
    out = stretch_percentiles(grey)
    assert out[10, 10] == 0 and out[90, 90] == 255 and out[0, 0] == 255
    flat = np.full((4, 4), 9, dtype=np.uint8)
    np.testing.assert_array_equal(stretch_percentiles(flat), flat)


def test_sobel_layer_exact_on_flat_color(uniform_rgb):
    # 143.33… mean intensity must still cancel to exactly zero
    assert np.count_nonzero(sobel_magnitude_layer(uniform_rgb)) == 0
    odd = np.zeros((8, 8, 3), dtype=np.uint8)
    odd[...] = (1, 0, 0)
    assert not sobel_magnitude_layer(odd).any()


def test_border_band():
    band = border_band(100, 100)
    assert band[0, 50] and band[50, 29] and band[50, 70]
    assert not band[50, 50]


def test_background_score_components(bordered_rgb):
    white, red = Color(255, 255, 255), Color(255, 0, 0)
    assert edge_presence(bordered_rgb, white) == 1.0
    assert corner_concentration(bordered_rgb, white) == 1.0
    assert center_absence(bordered_rgb, white) == 1.0
    assert background_score(bordered_rgb, white) > 0.99
    assert background_score(bordered_rgb, red) == 0.0
    assert light_neutral_bonus(Color(128, 128, 128)) == 0.1
    assert light_neutral_bonus(Color(200, 0, 0)) == 0.0


def test_color_coverage(bordered_rgb):
    assert color_coverage(bordered_rgb, Color(255, 255, 255), 10) == pytest.approx(64.0)
    assert color_coverage(bordered_rgb, Color(250, 5, 5), 10) == pytest.approx(36.0)


def test_texture_layers_bounded_and_flat_on_uniform(uniform_rgb, bordered_rgb):
    for layer_fn in (sobel_magnitude_layer, pattern_variance_layer, spatial_coherence_layer):
        flat = layer_fn(uniform_rgb)
        assert flat.shape == uniform_rgb.shape[:2]
        assert not flat.any()
        layer = layer_fn(bordered_rgb)
        assert layer.min() >= 0.0 and layer.max() <= 1.0
        assert layer.max() > 0.0
