"""Canvas placement, snapping and force annotations.

:class:`CanvasEngine` owns every body instance placed on the canvas and every
force/reaction annotation bound to an instance's attachment point. All
mutation goes through its methods; renderers read immutable snapshots.

World positions of attachment points are never stored. They are derived
through :func:`world_position`, which applies the template's coordinate
convention (ground supports keep their local y, other bodies flip it).
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .arrows import format_magnitude
from .config import get_canvas_config
from .logging_utils import apply_debug_logging
from .model import Coord, Point, Problem, RigidBody

logger = logging.getLogger(__name__)


class CanvasState(str, Enum):
    EMPTY = "empty"
    POPULATED = "populated"
    DRAGGING = "dragging"


class AnnotationKind(str, Enum):
    FORCE = "force"
    REACTION = "reaction"


class SnapPointState(str, Enum):
    DEFAULT = "default"
    HOVERED = "hovered"
    HAS_FORCE = "has_force"
    SELECTED = "selected"


def make_snap_point_id(instance_id: str, point_name: str) -> str:
    return f"{instance_id}-{point_name}"


def world_position(template: RigidBody, origin: Coord, point: Point) -> Coord:
    """Canvas position of *point* for an instance of *template* at *origin*."""

    return template.convention.to_world(origin, point.coords)


@dataclass(frozen=True)
class DroppedBody:
    id: str
    template: RigidBody
    x: float
    y: float
    template_index: Optional[int] = None

    @property
    def origin(self) -> Coord:
        return (self.x, self.y)

    def snap_point_id(self, point_name: str) -> str:
        return make_snap_point_id(self.id, point_name)

    def world_points(self, at: Optional[Coord] = None) -> List[Tuple[Point, Coord]]:
        origin = self.origin if at is None else at
        return [(pt, world_position(self.template, origin, pt)) for pt in self.template.points]

    def world_point(self, point_name: str, at: Optional[Coord] = None) -> Optional[Coord]:
        pt = self.template.point(point_name)
        if pt is None:
            return None
        return world_position(self.template, self.origin if at is None else at, pt)


@dataclass(frozen=True)
class ForceAnnotation:
    id: str
    snap_point_id: str
    instance_id: str
    point_name: str
    x: float
    y: float
    angle: float
    magnitude: float
    kind: AnnotationKind
    label: str


@dataclass(frozen=True)
class SnapCandidate:
    source_point_id: str
    target_point_id: str
    target_x: float
    target_y: float
    distance: float


@dataclass(frozen=True)
class Selection:
    body_id: Optional[str] = None
    point_id: Optional[str] = None


@dataclass(frozen=True)
class DragStatus:
    instance_id: str
    x: float
    y: float


@dataclass(frozen=True)
class SnapPointView:
    id: str
    instance_id: str
    point_name: str
    x: float
    y: float
    state: SnapPointState


@dataclass(frozen=True)
class CanvasSnapshot:
    state: CanvasState
    bodies: Tuple[DroppedBody, ...]
    snap_points: Tuple[SnapPointView, ...]
    force_arrows: Tuple[ForceAnnotation, ...]
    snap_candidates: Tuple[SnapCandidate, ...]
    selection: Selection
    hovered_point: Optional[str]
    dragging: Optional[DragStatus]


def find_snap_candidates(
    bodies: Sequence[DroppedBody],
    moving: DroppedBody,
    origin: Coord,
    tolerance: float,
) -> List[SnapCandidate]:
    """Attachment points of *moving* (placed at *origin*) near other instances' points.

    Order is the tie-break order: moving points in template order, then other
    instances in placement order, then their points in template order.
    """

    target_ids: List[str] = []
    target_xy: List[Coord] = []
    for body in bodies:
        if body.id == moving.id:
            continue
        for pt, coord in body.world_points():
            target_ids.append(body.snap_point_id(pt.name))
            target_xy.append(coord)
    if not target_ids:
        return []

    targets = np.asarray(target_xy, dtype=float)
    candidates: List[SnapCandidate] = []
    for pt, (sx, sy) in moving.world_points(at=origin):
        dist = np.hypot(targets[:, 0] - sx, targets[:, 1] - sy)
        for idx in np.flatnonzero(dist <= tolerance):
            candidates.append(
                SnapCandidate(
                    source_point_id=moving.snap_point_id(pt.name),
                    target_point_id=target_ids[idx],
                    target_x=float(targets[idx, 0]),
                    target_y=float(targets[idx, 1]),
                    distance=float(dist[idx]),
                )
            )
    return candidates


class CanvasEngine:
    """Placement, drag/snap and annotation state of one canvas session.

    Operations on unknown instance or point ids are silent no-ops so stale UI
    events (a drag tick after ``clear_all``, a click on a removed body) are
    harmless.
    """

    def __init__(self, snap_tolerance: Optional[float] = None):
        if snap_tolerance is None:
            snap_tolerance = get_canvas_config().snap_tolerance
        self.snap_tolerance = float(snap_tolerance)
        self._bodies: List[DroppedBody] = []
        self._annotations: Dict[str, ForceAnnotation] = {}
        self._selection = Selection()
        self._hovered: Optional[str] = None
        self._drag: Optional[DragStatus] = None
        self._candidates: Tuple[SnapCandidate, ...] = ()
        self._ids = itertools.count(1)

    # -- read access -----------------------------------------------------

    @property
    def state(self) -> CanvasState:
        if self._drag is not None:
            return CanvasState.DRAGGING
        return CanvasState.POPULATED if self._bodies else CanvasState.EMPTY

    @property
    def bodies(self) -> Tuple[DroppedBody, ...]:
        return tuple(self._bodies)

    @property
    def annotations(self) -> Tuple[ForceAnnotation, ...]:
        return tuple(self._annotations.values())

    @property
    def selection(self) -> Selection:
        return self._selection

    @property
    def snap_candidates(self) -> Tuple[SnapCandidate, ...]:
        return self._candidates

    @property
    def dragging(self) -> Optional[DragStatus]:
        return self._drag

    def body(self, instance_id: str) -> Optional[DroppedBody]:
        index = self._index(instance_id)
        return None if index is None else self._bodies[index]

    def annotation(self, snap_point_id: str) -> Optional[ForceAnnotation]:
        return self._annotations.get(snap_point_id)

    def resolve_snap_point(self, snap_point_id: str) -> Optional[Tuple[DroppedBody, Point]]:
        # Point names never contain "-", so the last one separates the instance id.
        instance_id, sep, point_name = snap_point_id.rpartition("-")
        index = self._index(instance_id) if sep else None
        if index is None:
            return None
        body = self._bodies[index]
        pt = body.template.point(point_name)
        if pt is None:
            return None
        return body, pt

    def world_point(self, snap_point_id: str) -> Optional[Coord]:
        resolved = self.resolve_snap_point(snap_point_id)
        if resolved is None:
            return None
        body, pt = resolved
        return world_position(body.template, body.origin, pt)

    def _index(self, instance_id: Optional[str]) -> Optional[int]:
        for index, body in enumerate(self._bodies):
            if body.id == instance_id:
                return index
        return None

    # -- placement and drag ----------------------------------------------

    def place_body(
        self,
        template: RigidBody,
        x: float,
        y: float,
        *,
        template_index: Optional[int] = None,
    ) -> DroppedBody:
        body = DroppedBody(
            id=f"{template.name}-{next(self._ids)}",
            template=template,
            x=float(x),
            y=float(y),
            template_index=template_index,
        )
        self._bodies.append(body)
        logger.info("Placed %s at (%.2f, %.2f)", body.id, body.x, body.y)
        return body

    def begin_drag(self, instance_id: str) -> bool:
        if self._drag is not None:
            logger.debug("Ignoring drag of %s: %s is already dragging", instance_id, self._drag.instance_id)
            return False
        body = self.body(instance_id)
        if body is None:
            logger.debug("Ignoring drag of unknown instance %s", instance_id)
            return False
        self._drag = DragStatus(body.id, body.x, body.y)
        self._candidates = ()
        return True

    def drag_move(self, x: float, y: float) -> Tuple[SnapCandidate, ...]:
        if self._drag is None:
            logger.debug("Ignoring drag move outside a drag")
            return ()
        body = self.body(self._drag.instance_id)
        self._drag = DragStatus(self._drag.instance_id, float(x), float(y))
        self._candidates = tuple(
            find_snap_candidates(self._bodies, body, (float(x), float(y)), self.snap_tolerance)
        )
        return self._candidates

    def end_drag(self, x: float, y: float) -> Optional[DroppedBody]:
        if self._drag is None:
            logger.debug("Ignoring drag end outside a drag")
            return None
        index = self._index(self._drag.instance_id)
        body = self._bodies[index]
        origin = (float(x), float(y))

        candidates = find_snap_candidates(self._bodies, body, origin, self.snap_tolerance)
        if candidates:
            first = candidates[0]
            source = body.template.point(first.source_point_id[len(body.id) + 1:])
            origin = body.template.convention.origin_for(
                source.coords, (first.target_x, first.target_y)
            )
            logger.info(
                "Snapped %s onto %s (%d candidate(s))",
                first.source_point_id,
                first.target_point_id,
                len(candidates),
            )
        else:
            logger.info("Dropped %s at (%.2f, %.2f)", body.id, origin[0], origin[1])

        moved = replace(body, x=origin[0], y=origin[1])
        self._bodies[index] = moved
        self._refresh_annotations(moved)
        self._drag = None
        self._candidates = ()
        return moved

    # -- annotations -----------------------------------------------------

    def add_force(
        self,
        snap_point_id: str,
        magnitude: float,
        angle: float,
        kind: AnnotationKind = AnnotationKind.FORCE,
        label: Optional[str] = None,
    ) -> Optional[ForceAnnotation]:
        """Attach (or replace) the arrow at *snap_point_id*.

        ``angle`` is in degrees, counter-clockwise with y up.
        """

        if self._drag is not None:
            logger.debug("Ignoring force on %s during a drag", snap_point_id)
            return None
        resolved = self.resolve_snap_point(snap_point_id)
        if resolved is None:
            logger.debug("Ignoring force on unknown snap point %s", snap_point_id)
            return None
        body, pt = resolved
        x, y = world_position(body.template, body.origin, pt)
        annotation = ForceAnnotation(
            id=f"arrow-{snap_point_id}",
            snap_point_id=snap_point_id,
            instance_id=body.id,
            point_name=pt.name,
            x=x,
            y=y,
            angle=float(angle),
            magnitude=float(magnitude),
            kind=AnnotationKind(kind),
            label=label if label is not None else format_magnitude(magnitude),
        )
        # Last write wins and moves to the end of the draw order.
        self._annotations.pop(snap_point_id, None)
        self._annotations[snap_point_id] = annotation
        return annotation

    def remove_force(self, snap_point_id: str) -> bool:
        return self._annotations.pop(snap_point_id, None) is not None

    def apply_preset_forces(self, instance_id: str) -> List[ForceAnnotation]:
        """Turn the template's preset external forces into annotations."""

        body = self.body(instance_id)
        if body is None:
            return []
        added = []
        for force in body.template.forces:
            annotation = self.add_force(
                body.snap_point_id(force.point),
                force.magnitude,
                force.direction.angle,
                AnnotationKind.FORCE,
            )
            if annotation is not None:
                added.append(annotation)
        return added

    def _refresh_annotations(self, body: DroppedBody) -> None:
        for key, annotation in list(self._annotations.items()):
            if annotation.instance_id != body.id:
                continue
            coord = body.world_point(annotation.point_name)
            if coord is None:
                logger.warning("Dropping arrow %s: point no longer exists", annotation.id)
                del self._annotations[key]
                continue
            self._annotations[key] = replace(annotation, x=coord[0], y=coord[1])

    # -- removal ---------------------------------------------------------

    def clear_body(self, instance_id: str) -> bool:
        index = self._index(instance_id)
        if index is None:
            return False
        body = self._bodies.pop(index)
        owned = {body.snap_point_id(name) for name in body.template.point_names}

        self._annotations = {
            key: ann for key, ann in self._annotations.items() if ann.instance_id != body.id
        }
        if self._selection.body_id == body.id:
            self._selection = replace(self._selection, body_id=None)
        if self._selection.point_id in owned:
            self._selection = replace(self._selection, point_id=None)
        if self._hovered in owned:
            self._hovered = None
        if self._drag is not None and self._drag.instance_id == body.id:
            self._drag = None
            self._candidates = ()
        logger.info("Removed %s", body.id)
        return True

    def clear_all(self) -> None:
        self._bodies.clear()
        self._annotations.clear()
        self._selection = Selection()
        self._hovered = None
        self._drag = None
        self._candidates = ()
        logger.info("Cleared canvas")

    # -- selection -------------------------------------------------------

    def select_body(self, instance_id: Optional[str]) -> Selection:
        if instance_id is None or self._index(instance_id) is not None:
            self._selection = replace(self._selection, body_id=instance_id)
        return self._selection

    def select_point(self, snap_point_id: Optional[str]) -> Selection:
        if snap_point_id is None or self.resolve_snap_point(snap_point_id) is not None:
            self._selection = replace(self._selection, point_id=snap_point_id)
        return self._selection

    def hover_point(self, snap_point_id: Optional[str]) -> None:
        if snap_point_id is None or self.resolve_snap_point(snap_point_id) is not None:
            self._hovered = snap_point_id

    # -- re-parse support ------------------------------------------------

    def rebind_templates(self, problem: Problem) -> None:
        """Point every instance at the matching body of a re-parsed *problem*."""

        for index, body in enumerate(self._bodies):
            template: Optional[RigidBody] = None
            pos = body.template_index
            if pos is not None and pos < len(problem.bodies) and problem.bodies[pos].name == body.template.name:
                template = problem.bodies[pos]
            else:
                template = problem.body(body.template.name)
            if template is None:
                logger.warning("No template named %s in problem %s", body.template.name, problem.id)
                continue
            rebound = replace(body, template=template)
            self._bodies[index] = rebound
            self._refresh_annotations(rebound)

    # -- rendering boundary ----------------------------------------------

    def _point_state(self, snap_point_id: str) -> SnapPointState:
        if self._selection.point_id == snap_point_id:
            return SnapPointState.SELECTED
        if snap_point_id in self._annotations:
            return SnapPointState.HAS_FORCE
        if self._hovered == snap_point_id:
            return SnapPointState.HOVERED
        return SnapPointState.DEFAULT

    def snapshot(self) -> CanvasSnapshot:
        views = []
        for body in self._bodies:
            for pt, (x, y) in body.world_points():
                point_id = body.snap_point_id(pt.name)
                views.append(SnapPointView(point_id, body.id, pt.name, x, y, self._point_state(point_id)))
        return CanvasSnapshot(
            state=self.state,
            bodies=tuple(self._bodies),
            snap_points=tuple(views),
            force_arrows=tuple(self._annotations.values()),
            snap_candidates=self._candidates,
            selection=self._selection,
            hovered_point=self._hovered,
            dragging=self._drag,
        )


apply_debug_logging(
    globals(),
    logger=logger,
    skip={
        "make_snap_point_id",
        "world_position",
        "DroppedBody.snap_point_id",
        "DroppedBody.world_points",
        "DroppedBody.world_point",
    },
)
