"""Raw problem documents: the declarative tree before any evaluation.

Nodes keep every coordinate and magnitude as the expression text found in
the source. The parser evaluates them; the tree itself is immutable so the
same document can be re-parsed under different symbol tables.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Tuple, Union

logger = logging.getLogger(__name__)


class DocumentError(ValueError):
    pass


@dataclass(frozen=True)
class PointNode:
    name: str
    x: str = "0"
    y: str = "0"


@dataclass(frozen=True)
class ForceNode:
    point: str
    direction: str = "down"
    magnitude: str = "0"


@dataclass(frozen=True)
class BodyNode:
    name: str
    ground: str = "False"
    image: Optional[str] = None
    points: Tuple[PointNode, ...] = field(default_factory=tuple)
    forces: Tuple[ForceNode, ...] = field(default_factory=tuple)

    @property
    def is_ground(self) -> bool:
        return self.ground == "True"


@dataclass(frozen=True)
class ProblemDocument:
    problem_id: str = "0"
    bodies: Tuple[BodyNode, ...] = field(default_factory=tuple)


DocumentSource = Union[str, bytes, Mapping[str, Any], ProblemDocument]


def _attr(elem: ET.Element, name: str, default: str) -> str:
    value = elem.get(name)
    return default if value is None else value


def _body_from_element(elem: ET.Element) -> BodyNode:
    image_elem = elem.find("ImageFile")
    image = image_elem.text.strip() if image_elem is not None and image_elem.text else None
    points = tuple(
        PointNode(
            name=_attr(pt, "Name", ""),
            x=_attr(pt, "X", "0"),
            y=_attr(pt, "Y", "0"),
        )
        for pt in elem.findall("Point")
    )
    forces = tuple(
        ForceNode(
            point=_attr(fc, "Point", ""),
            direction=_attr(fc, "Dir", "down"),
            magnitude=_attr(fc, "Mag", "0"),
        )
        for fc in elem.findall("ExternalForce")
    )
    return BodyNode(
        name=_attr(elem, "Name", ""),
        ground=_attr(elem, "IsGround", "False"),
        image=image,
        points=points,
        forces=forces,
    )


def read_problem_xml(text: Union[str, bytes]) -> ProblemDocument:
    """Read the ``<Problem>`` XML form of a problem document."""

    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise DocumentError(f"Failed to parse problem XML: {exc}") from exc

    if root.tag != "Problem":
        problem = root.find("Problem")
        if problem is None:
            raise DocumentError("No Problem element found in XML")
        root = problem

    bodies = tuple(_body_from_element(elem) for elem in root.findall("RigidBody"))
    doc = ProblemDocument(problem_id=_attr(root, "id", "0"), bodies=bodies)
    logger.debug("Read problem document %s with %d bodies", doc.problem_id, len(bodies))
    return doc


def _expr_text(value: Any, default: str) -> str:
    if value is None:
        return default
    if isinstance(value, bool):
        raise DocumentError(f"expected an expression, got {value!r}")
    return str(value)


def _ground_text(value: Any) -> str:
    if value is None:
        return "False"
    if isinstance(value, bool):
        return "True" if value else "False"
    return str(value)


def _items(data: Mapping[str, Any], key: str) -> Iterable[Mapping[str, Any]]:
    items = data.get(key) or []
    if isinstance(items, Mapping):
        items = [items]
    elif not isinstance(items, (list, tuple)):
        raise DocumentError(f"{key} must be a list of mappings, got {items!r}")
    for item in items:
        if not isinstance(item, Mapping):
            raise DocumentError(f"{key} entries must be mappings, got {item!r}")
        yield item


def _first(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def document_from_mapping(data: Mapping[str, Any]) -> ProblemDocument:
    """Build a document from its nested-mapping form (e.g. decoded JSON)."""

    if not isinstance(data, Mapping):
        raise DocumentError(f"problem document must be a mapping, got {type(data).__name__}")
    bodies = []
    for body in _items(data, "bodies"):
        points = tuple(
            PointNode(
                name=str(pt.get("name", "")),
                x=_expr_text(pt.get("x"), "0"),
                y=_expr_text(pt.get("y"), "0"),
            )
            for pt in _items(body, "points")
        )
        forces = tuple(
            ForceNode(
                point=str(fc.get("point", "")),
                direction=str(_first(fc, "direction", "dir") or "down"),
                magnitude=_expr_text(_first(fc, "magnitude", "mag"), "0"),
            )
            for fc in _items(body, "forces")
        )
        bodies.append(
            BodyNode(
                name=str(body.get("name", "")),
                ground=_ground_text(_first(body, "is_ground", "ground")),
                image=body.get("image"),
                points=points,
                forces=forces,
            )
        )
    return ProblemDocument(problem_id=str(data.get("id", "0")), bodies=tuple(bodies))


def load_document(source: DocumentSource) -> ProblemDocument:
    """Return a :class:`ProblemDocument` for XML text, a mapping or a document."""

    if isinstance(source, ProblemDocument):
        return source
    if isinstance(source, (str, bytes)):
        return read_problem_xml(source)
    if isinstance(source, Mapping):
        return document_from_mapping(source)
    raise DocumentError(f"unsupported problem document source {type(source).__name__}")
