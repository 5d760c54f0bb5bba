"""Numeric problem model produced by the parser."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

PointName = str
Coord = Tuple[float, float]


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def angle(self) -> float:
        """Angle in degrees, counter-clockwise from +x with y pointing up."""

        return _DIRECTION_ANGLES[self]


_DIRECTION_ANGLES: Dict[Direction, float] = {
    Direction.RIGHT: 0.0,
    Direction.UP: 90.0,
    Direction.LEFT: 180.0,
    Direction.DOWN: 270.0,
}


class CoordinateConvention(Enum):
    """How a template's local y axis maps onto the canvas.

    Ground supports are drawn with their local y used as-is. Every other body
    is authored with "up" positive, while the canvas grows downwards, so the
    local y is negated.
    """

    GROUND = 1
    BODY = -1

    @property
    def y_sign(self) -> int:
        return self.value

    def to_world(self, origin: Coord, local: Coord) -> Coord:
        return (origin[0] + local[0], origin[1] + self.y_sign * local[1])

    def to_local(self, origin: Coord, world: Coord) -> Coord:
        return (world[0] - origin[0], self.y_sign * (world[1] - origin[1]))

    def origin_for(self, local: Coord, world: Coord) -> Coord:
        """Origin that puts the point at *local* onto *world*."""

        return (world[0] - local[0], world[1] - self.y_sign * local[1])


@dataclass(frozen=True)
class Point:
    name: PointName
    x: float
    y: float

    @property
    def coords(self) -> Coord:
        return (self.x, self.y)


@dataclass(frozen=True)
class Force:
    point: PointName
    direction: Direction
    magnitude: float
    preset: bool = True


@dataclass(frozen=True)
class RigidBody:
    name: str
    is_ground: bool = False
    points: Tuple[Point, ...] = ()
    forces: Tuple[Force, ...] = ()
    image: Optional[str] = None

    @property
    def convention(self) -> CoordinateConvention:
        return CoordinateConvention.GROUND if self.is_ground else CoordinateConvention.BODY

    @property
    def point_names(self) -> List[PointName]:
        return [pt.name for pt in self.points]

    def point(self, name: PointName) -> Optional[Point]:
        for pt in self.points:
            if pt.name == name:
                return pt
        return None


@dataclass(frozen=True)
class ParseWarning:
    body: str
    field: str
    expression: str
    message: str

    def __str__(self) -> str:
        return f"{self.body}.{self.field}: {self.expression!r} -> {self.message}"


@dataclass(frozen=True)
class Problem:
    id: str
    title: str
    description: str
    bodies: Tuple[RigidBody, ...] = ()
    symbols: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))
    warnings: Tuple[ParseWarning, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "symbols", MappingProxyType(dict(self.symbols)))

    def body(self, name: str) -> Optional[RigidBody]:
        for body in self.bodies:
            if body.name == name:
                return body
        return None

    def bodies_named(self, name: str) -> List[RigidBody]:
        return [body for body in self.bodies if body.name == name]

    def with_metadata(self, title: str, description: str) -> "Problem":
        return replace(self, title=title, description=description)
