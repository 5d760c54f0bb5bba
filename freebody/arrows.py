"""Display geometry of force and reaction arrows."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from .config import CanvasConfig, get_canvas_config
from .model import Coord


@dataclass(frozen=True)
class ArrowGeometry:
    tail: Coord
    tip: Coord
    head: Tuple[Coord, Coord, Coord]
    label_position: Coord
    label: str
    length: float


def format_magnitude(magnitude: float) -> str:
    if float(magnitude).is_integer():
        return str(int(magnitude))
    return f"{magnitude:.3g}"


def arrow_length(magnitude: float, config: Optional[CanvasConfig] = None) -> float:
    """Shaft length, proportional to ``|magnitude|`` and clamped to the visual range."""

    cfg = config or get_canvas_config()
    raw = cfg.arrow_base_length * abs(magnitude) / cfg.arrow_reference_magnitude
    return max(cfg.arrow_min_length, min(cfg.arrow_max_length, raw))


def arrow_geometry(
    x: float,
    y: float,
    angle: float,
    magnitude: float,
    label: Optional[str] = None,
    config: Optional[CanvasConfig] = None,
) -> ArrowGeometry:
    """Arrow starting at canvas point ``(x, y)``.

    ``angle`` is in degrees in the problem frame (counter-clockwise, y up);
    the returned coordinates are on the canvas, where y grows downwards.
    """

    cfg = config or get_canvas_config()
    length = arrow_length(magnitude, cfg)
    rad = math.radians(angle)
    ux, uy = math.cos(rad), -math.sin(rad)
    # Normal that points above a rightward arrow.
    nx, ny = uy, -ux

    tip = (x + ux * length, y + uy * length)
    base = (tip[0] - ux * cfg.arrow_head_size, tip[1] - uy * cfg.arrow_head_size)
    half = cfg.arrow_head_size / 2.0
    head = (
        (base[0] + nx * half, base[1] + ny * half),
        tip,
        (base[0] - nx * half, base[1] - ny * half),
    )
    mid = (x + ux * length / 2.0, y + uy * length / 2.0)
    label_position = (mid[0] + nx * cfg.arrow_label_offset, mid[1] + ny * cfg.arrow_label_offset)
    return ArrowGeometry(
        tail=(x, y),
        tip=tip,
        head=head,
        label_position=label_position,
        label=label if label is not None else format_magnitude(magnitude),
        length=length,
    )


def annotation_arrow(annotation, config: Optional[CanvasConfig] = None) -> ArrowGeometry:
    """Arrow for a canvas force/reaction annotation (anything with x, y, angle, magnitude, label)."""

    return arrow_geometry(
        annotation.x,
        annotation.y,
        annotation.angle,
        annotation.magnitude,
        label=annotation.label,
        config=config,
    )
