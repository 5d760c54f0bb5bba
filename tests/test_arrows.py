from types import SimpleNamespace

import pytest

from freebody.arrows import annotation_arrow, arrow_geometry, arrow_length, format_magnitude
from freebody.config import CanvasConfig


@pytest.mark.parametrize(
    'magnitude, expected',
    [(0, 30.0), (2, 30.0), (10, 80.0), (-10, 80.0), (15, 120.0), (100, 150.0)],
)
def test_arrow_length_is_clamped(magnitude, expected):
    assert arrow_length(magnitude) == pytest.approx(expected)


def test_arrow_length_is_monotonic():
    lengths = [arrow_length(m) for m in range(0, 40)]

    assert lengths == sorted(lengths)


def test_downward_arrow_points_down_on_canvas():
    arrow = arrow_geometry(10, 20, 270, 10)

    assert arrow.tail == (10, 20)
    assert arrow.tip == pytest.approx((10, 100))
    assert arrow.head[1] == arrow.tip
    assert arrow.label == '10'


def test_rightward_arrow_label_sits_above_shaft():
    arrow = arrow_geometry(0, 0, 0, 10)

    assert arrow.tip == pytest.approx((80, 0))
    assert arrow.label_position == pytest.approx((40, -15))
    left, _, right = arrow.head
    assert left == pytest.approx((72, -4))
    assert right == pytest.approx((72, 4))


def test_upward_arrow_with_custom_config():
    cfg = CanvasConfig(arrow_base_length=10, arrow_reference_magnitude=1, arrow_min_length=0, arrow_max_length=1000)
    arrow = arrow_geometry(0, 0, 90, 3, label='R_A', config=cfg)

    assert arrow.length == 30
    assert arrow.tip == pytest.approx((0, -30))
    assert arrow.label == 'R_A'


def test_format_magnitude():
    assert format_magnitude(10.0) == '10'
    assert format_magnitude(2.5) == '2.5'
    assert format_magnitude(1 / 3) == '0.333'


def test_annotation_arrow_uses_annotation_fields():
    annotation = SimpleNamespace(x=5.0, y=5.0, angle=180.0, magnitude=10.0, label='F')
    arrow = annotation_arrow(annotation)

    assert arrow.tip == pytest.approx((-75, 5))
    assert arrow.label == 'F'
