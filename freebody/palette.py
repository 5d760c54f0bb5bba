"""Template palette: one entry per problem body, with a thumbnail to show."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .arcs import Thumbnail, UnknownBodyError, generate_thumbnail
from .canvas import CanvasEngine, DroppedBody
from .model import Point, Problem, RigidBody

logger = logging.getLogger(__name__)

_GROUND_PADDING = 10
_HATCH_XS = (-6, -3, 0, 3, 6)


class PaletteKind(str, Enum):
    ARC = "arc"
    GROUND = "ground"
    PLACEHOLDER = "placeholder"


@dataclass(frozen=True)
class PaletteEntry:
    index: int
    body: RigidBody
    kind: PaletteKind
    thumbnail: Optional[Thumbnail] = None
    error: Optional[str] = None

    @property
    def label(self) -> str:
        return self.body.name


def ground_thumbnail(body: RigidBody) -> Thumbnail:
    """Pin on a hatched base; the pin sits on the support's attachment point."""

    base = "M -8 2 L 8 2 L 8 5 L -8 5 Z"
    hatching = " ".join(f"M {x} 5 L {x + 2} 9" for x in _HATCH_XS)
    stem = "M 0 3 L 0 2"
    p = _GROUND_PADDING
    names = body.point_names or ["pin"]
    return Thumbnail(
        path=f"{base} {hatching} {stem}",
        view_box=f"{-p} {-p} {2 * p} {2 * p}",
        points=(Point(names[0], 0.0, 0.0),),
    )


def palette_entry(index: int, body: RigidBody, radius: Optional[float] = None) -> PaletteEntry:
    if body.is_ground:
        return PaletteEntry(index, body, PaletteKind.GROUND, ground_thumbnail(body))
    try:
        thumbnail = generate_thumbnail(body.name, radius)
    except UnknownBodyError as exc:
        logger.warning("No thumbnail for body %s: %s", body.name, exc)
        return PaletteEntry(index, body, PaletteKind.PLACEHOLDER, error=str(exc))
    return PaletteEntry(index, body, PaletteKind.ARC, thumbnail)


def palette_entries(problem: Problem, radius: Optional[float] = None) -> List[PaletteEntry]:
    """Entries for every body of *problem*, in document order."""

    return [palette_entry(index, body, radius) for index, body in enumerate(problem.bodies)]


def place_from_palette(engine: CanvasEngine, entry: PaletteEntry, x: float, y: float) -> DroppedBody:
    return engine.place_body(entry.body, x, y, template_index=entry.index)
