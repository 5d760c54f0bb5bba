"""Quarter-circle arc geometry for the arc-shaped rigid bodies.

All output of this module is in the *display* frame: the problem's local
frame with the y axis flipped (y grows downwards), centred on the body's
local origin. A body authored with point ``C`` at ``(0, R)`` therefore shows
it at ``(0, -R)`` here, which is exactly where the canvas puts it for a
non-ground body (see :class:`freebody.model.CoordinateConvention`).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from .config import get_canvas_config
from .model import Coord, Point


_SQRT2 = math.sqrt(2.0)


class UnknownBodyError(LookupError):
    """Raised when no arc geometry is registered for a body name."""


@dataclass(frozen=True)
class ArcConfig:
    center_x: float
    center_y: float
    radius: float
    start_angle: float  # degrees, display frame
    end_angle: float
    thickness: float

    @property
    def inner_radius(self) -> float:
        return max(0.0, self.radius - self.thickness)

    @property
    def sweep(self) -> float:
        """Signed minor-arc span in degrees."""

        return normalize_angle_delta(self.end_angle - self.start_angle)


@dataclass(frozen=True)
class BoundingBox:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def view_box(self, padding: float = 0.0) -> str:
        return " ".join(
            _format_number(v)
            for v in (
                self.min_x - padding,
                self.min_y - padding,
                self.width + 2 * padding,
                self.height + 2 * padding,
            )
        )


@dataclass(frozen=True)
class ArcGeometry:
    path: str
    bounding_box: BoundingBox
    local_points: Tuple[Point, ...]
    config: ArcConfig


@dataclass(frozen=True)
class Thumbnail:
    path: str
    view_box: str
    points: Tuple[Point, ...]


PointsFactory = Callable[[float], Sequence[Tuple[str, float, float]]]


@dataclass(frozen=True)
class ArcBodySpec:
    """Arc span (display frame) and point layout (problem frame) of a body type."""

    start_angle: float
    end_angle: float
    points: PointsFactory


def _ac_points(r: float) -> Sequence[Tuple[str, float, float]]:
    return (("A", -r, 0.0), ("mid", -r / _SQRT2, r / _SQRT2), ("C", 0.0, r))


def _cb_points(r: float) -> Sequence[Tuple[str, float, float]]:
    return (("C", 0.0, r), ("mid", r / _SQRT2, r / _SQRT2), ("B", r, 0.0))


_ARC_BODIES: Dict[str, ArcBodySpec] = {
    # A(-R, 0) at 180 deg; C(0, R) is (0, -R) on screen, i.e. 270 deg.
    "AC": ArcBodySpec(180.0, 270.0, _ac_points),
    # 360 rather than 0 keeps the span written as the increasing quarter.
    "CB": ArcBodySpec(270.0, 360.0, _cb_points),
}


def register_arc_body(name: str, start_angle: float, end_angle: float, points: PointsFactory) -> None:
    """Register a new arc-shaped body type."""

    if normalize_angle_delta(end_angle - start_angle) == 0.0:
        raise ValueError(f"arc body {name!r} needs a non-empty span")
    _ARC_BODIES[name] = ArcBodySpec(float(start_angle), float(end_angle), points)


def arc_body_names() -> List[str]:
    return list(_ARC_BODIES)


def _body_spec(body_name: str) -> ArcBodySpec:
    body_spec = _ARC_BODIES.get(body_name)
    if body_spec is None:
        raise UnknownBodyError(f"Unknown body name: {body_name}")
    return body_spec


def _format_number(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def format_coord(value: float) -> str:
    text = f"{value:.2f}"
    return "0.00" if text == "-0.00" else text


def normalize_angle_delta(delta: float) -> float:
    """Wrap an angle difference in degrees into (-180, 180]."""

    d = math.fmod(delta, 360.0)
    if d <= -180.0:
        d += 360.0
    elif d > 180.0:
        d -= 360.0
    return d


def sweep_flag(start_angle: float, end_angle: float) -> int:
    """SVG sweep flag that draws the minor arc from start to end."""

    return 1 if normalize_angle_delta(end_angle - start_angle) > 0 else 0


def _polar(cx: float, cy: float, r: float, degrees: float) -> Coord:
    rad = math.radians(degrees)
    return (cx + r * math.cos(rad), cy + r * math.sin(rad))


def generate_arc_path(config: ArcConfig) -> str:
    """SVG path of the annulus wedge described by *config*."""

    cx, cy, r = config.center_x, config.center_y, config.radius
    inner = config.inner_radius
    flag = sweep_flag(config.start_angle, config.end_angle)

    osx, osy = _polar(cx, cy, r, config.start_angle)
    oex, oey = _polar(cx, cy, r, config.end_angle)
    isx, isy = _polar(cx, cy, inner, config.start_angle)
    iex, iey = _polar(cx, cy, inner, config.end_angle)

    # Large-arc flag is always 0: these bodies never span more than 180 deg.
    path = f"M {format_coord(osx)} {format_coord(osy)} "
    path += f"A {_format_number(r)} {_format_number(r)} 0 0 {flag} {format_coord(oex)} {format_coord(oey)} "
    if config.thickness > 0 and inner > 0:
        path += f"L {format_coord(iex)} {format_coord(iey)} "
        path += (
            f"A {_format_number(inner)} {_format_number(inner)} 0 0 {1 - flag} "
            f"{format_coord(isx)} {format_coord(isy)} Z"
        )
    else:
        path += f"L {format_coord(isx)} {format_coord(isy)} Z"
    return path


def _arc_config(body_name: str, radius: float, thickness: float) -> ArcConfig:
    spec = _body_spec(body_name)
    return ArcConfig(0.0, 0.0, float(radius), spec.start_angle, spec.end_angle, float(thickness))


def ac_arc_config(radius: float, thickness: float = 20.0) -> ArcConfig:
    return _arc_config("AC", radius, thickness)


def cb_arc_config(radius: float, thickness: float = 20.0) -> ArcConfig:
    return _arc_config("CB", radius, thickness)


def arc_points(body_name: str, radius: float) -> Tuple[Point, ...]:
    """Template point layout of *body_name* in the problem frame (y up)."""

    return tuple(Point(name, x, y) for name, x, y in _body_spec(body_name).points(float(radius)))


PointLike = Union[Point, Coord]


def _xy(pt: PointLike) -> Coord:
    if isinstance(pt, Point):
        return (pt.x, pt.y)
    return (float(pt[0]), float(pt[1]))


def to_display_frame(
    points: Iterable[Point],
    scale: float = 1.0,
    offset_x: float = 0.0,
    offset_y: float = 0.0,
) -> Tuple[Point, ...]:
    """Scale, flip and offset problem-frame points onto the screen."""

    return tuple(
        Point(pt.name, pt.x * scale + offset_x, -pt.y * scale + offset_y) for pt in points
    )


def calculate_bounding_box(points: Iterable[PointLike]) -> BoundingBox:
    coords = [_xy(pt) for pt in points]
    if not coords:
        return BoundingBox(0.0, 0.0, 0.0, 0.0)
    xs = [c[0] for c in coords]
    ys = [c[1] for c in coords]
    return BoundingBox(min(xs), min(ys), max(xs), max(ys))


def _angle_within_sweep(angle: float, config: ArcConfig) -> bool:
    sweep = config.sweep
    if sweep > 0:
        offset = (angle - config.start_angle) % 360.0
        return 0.0 < offset < sweep
    offset = (config.start_angle - angle) % 360.0
    return 0.0 < offset < -sweep


def arc_bounding_box(config: ArcConfig) -> BoundingBox:
    """Tight bounding box of the annulus wedge."""

    cx, cy = config.center_x, config.center_y
    coords = [
        _polar(cx, cy, config.radius, config.start_angle),
        _polar(cx, cy, config.radius, config.end_angle),
        _polar(cx, cy, config.inner_radius, config.start_angle),
        _polar(cx, cy, config.inner_radius, config.end_angle),
    ]
    for cardinal in (0.0, 90.0, 180.0, 270.0):
        if _angle_within_sweep(cardinal, config):
            coords.append(_polar(cx, cy, config.radius, cardinal))
    return calculate_bounding_box(coords)


def generate_arc(body_name: str, radius: float, thickness: Optional[float] = None) -> ArcGeometry:
    """Path, bounding box and display-frame points of an arc body.

    Raises :class:`UnknownBodyError` for body names without arc geometry.
    """

    if thickness is None:
        thickness = get_canvas_config().arc_thickness
    config = _arc_config(body_name, radius, thickness)
    local_points = to_display_frame(arc_points(body_name, radius))
    return ArcGeometry(
        path=generate_arc_path(config),
        bounding_box=arc_bounding_box(config),
        local_points=local_points,
        config=config,
    )


def generate_thumbnail(body_name: str, radius: Optional[float] = None) -> Thumbnail:
    """Palette thumbnail: thin arc plus a padded view box around the full circle."""

    cfg = get_canvas_config()
    if radius is None:
        radius = cfg.thumbnail_radius
    geometry = generate_arc(body_name, radius, cfg.thumbnail_thickness)
    box = calculate_bounding_box(
        list(geometry.local_points) + [(-radius, -radius), (radius, radius)]
    )
    return Thumbnail(
        path=geometry.path,
        view_box=box.view_box(cfg.thumbnail_padding),
        points=geometry.local_points,
    )


def sample_arc(config: ArcConfig, segments: Optional[int] = None) -> np.ndarray:
    """Polyline along the minor arc, shape ``(segments + 1, 2)``."""

    if segments is None:
        segments = get_canvas_config().arc_segments
    segments = max(1, int(segments))
    angles = np.radians(config.start_angle + np.linspace(0.0, config.sweep, segments + 1))
    return np.column_stack(
        (
            config.center_x + config.radius * np.cos(angles),
            config.center_y + config.radius * np.sin(angles),
        )
    )
