import math

import numpy as np
import pytest

from freebody.arcs import (
    ArcConfig,
    UnknownBodyError,
    ac_arc_config,
    arc_body_names,
    arc_bounding_box,
    arc_points,
    calculate_bounding_box,
    cb_arc_config,
    generate_arc,
    generate_arc_path,
    generate_thumbnail,
    normalize_angle_delta,
    register_arc_body,
    sample_arc,
    sweep_flag,
    to_display_frame,
)
from freebody.model import Point


R2 = 100 / math.sqrt(2)


@pytest.mark.parametrize('radius', [1.0, 50.0, 100.0, 150.0, 1234.5])
def test_arc_points_lie_on_circle(radius):
    for name in ('AC', 'CB'):
        for pt in arc_points(name, radius):
            assert math.hypot(pt.x, pt.y) == pytest.approx(radius, abs=1e-6)


def test_ac_and_cb_point_layout():
    ac = {pt.name: pt.coords for pt in arc_points('AC', 100)}
    cb = {pt.name: pt.coords for pt in arc_points('CB', 100)}

    assert ac['A'] == (-100.0, 0.0)
    assert ac['mid'] == pytest.approx((-R2, R2))
    assert ac['C'] == (0.0, 100.0)
    assert cb['C'] == (0.0, 100.0)
    assert cb['mid'] == pytest.approx((R2, R2))
    assert cb['B'] == (100.0, 0.0)
    assert list(ac) == ['A', 'mid', 'C']
    assert list(cb) == ['C', 'mid', 'B']


@pytest.mark.parametrize(
    'delta, expected',
    [(90, 90), (-90, -90), (270, -90), (-270, 90), (180, 180), (-180, 180), (360, 0), (450, 90)],
)
def test_normalize_angle_delta(delta, expected):
    assert normalize_angle_delta(delta) == expected


def test_sweep_is_always_the_quarter_minor_arc():
    assert ac_arc_config(100).sweep == 90.0
    assert cb_arc_config(100).sweep == 90.0
    # Same quarter written the other way round, and across the 0/360 seam.
    assert ArcConfig(0, 0, 100, 270, 180, 20).sweep == -90.0
    assert ArcConfig(0, 0, 100, 270, 0, 20).sweep == 90.0
    assert ArcConfig(0, 0, 100, 0, 270, 20).sweep == -90.0
    assert sweep_flag(270, 0) == 1
    assert sweep_flag(0, 270) == 0


def test_ac_path_text():
    path = generate_arc_path(ac_arc_config(100, 20))

    assert path == (
        'M -100.00 0.00 A 100 100 0 0 1 0.00 -100.00 '
        'L 0.00 -80.00 A 80 80 0 0 0 -80.00 0.00 Z'
    )


def test_cb_path_text():
    path = generate_arc_path(cb_arc_config(100, 20))

    assert path == (
        'M 0.00 -100.00 A 100 100 0 0 1 100.00 0.00 '
        'L 80.00 0.00 A 80 80 0 0 0 0.00 -80.00 Z'
    )


def test_zero_thickness_closes_to_start():
    path = generate_arc_path(ac_arc_config(100, 0))

    assert path.endswith('L -100.00 0.00 Z')
    assert path.count(' A ') == 1


def test_arc_bounding_boxes():
    ac = arc_bounding_box(ac_arc_config(100, 20))
    cb = arc_bounding_box(cb_arc_config(100, 20))

    assert (ac.min_x, ac.min_y, ac.max_x, ac.max_y) == pytest.approx((-100, -100, 0, 0))
    assert (cb.min_x, cb.min_y, cb.max_x, cb.max_y) == pytest.approx((0, -100, 100, 0))


def test_bounding_box_includes_cardinal_extreme():
    box = arc_bounding_box(ArcConfig(0, 0, 100, 225, 315, 10))

    assert box.min_y == pytest.approx(-100)
    assert box.min_x == pytest.approx(-R2)
    assert box.max_x == pytest.approx(R2)


def test_calculate_bounding_box():
    box = calculate_bounding_box([Point('A', -1, 2), (3, -4)])

    assert (box.min_x, box.min_y, box.max_x, box.max_y) == (-1, -4, 3, 2)
    assert (box.width, box.height) == (4, 6)
    assert box.view_box(1) == '-2 -5 6 8'
    assert calculate_bounding_box([]).width == 0


def test_generate_arc_local_points_are_display_frame():
    geometry = generate_arc('AC', 100)
    points = {pt.name: pt.coords for pt in geometry.local_points}

    assert points['A'] == pytest.approx((-100, 0))
    assert points['C'] == pytest.approx((0, -100))
    assert points['mid'] == pytest.approx((-R2, -R2))
    assert geometry.config.thickness == 20.0
    assert geometry.path.startswith('M -100.00 0.00 A 100 100 0 0 1')


def test_generate_arc_unknown_body():
    with pytest.raises(UnknownBodyError, match='Unknown body name: XY'):
        generate_arc('XY', 100)


def test_to_display_frame_scales_flips_and_offsets():
    (pt,) = to_display_frame([Point('C', 0, 100)], scale=0.5, offset_x=10, offset_y=20)

    assert pt.coords == (10.0, -30.0)


def test_thumbnail_view_box_covers_circle():
    thumb = generate_thumbnail('CB', 50)

    assert thumb.view_box == '-60 -60 120 120'
    assert [pt.name for pt in thumb.points] == ['C', 'mid', 'B']
    assert 'A 50 50 0 0 1' in thumb.path


def test_sample_arc_polyline():
    samples = sample_arc(ac_arc_config(100), segments=4)

    assert samples.shape == (5, 2)
    assert np.allclose(np.hypot(samples[:, 0], samples[:, 1]), 100)
    assert np.allclose(samples[0], (-100, 0), atol=1e-9)
    assert np.allclose(samples[-1], (0, -100), atol=1e-9)


def test_register_arc_body():
    register_arc_body(
        'DE',
        0.0,
        90.0,
        lambda r: (('D', r, 0.0), ('E', 0.0, -r)),
    )
    try:
        assert 'DE' in arc_body_names()
        geometry = generate_arc('DE', 10, 2)
        assert [pt.name for pt in geometry.local_points] == ['D', 'E']
    finally:
        from freebody import arcs

        arcs._ARC_BODIES.pop('DE', None)

    with pytest.raises(ValueError):
        register_arc_body('EMPTY', 90.0, 450.0, lambda r: ())
