from typing import Set

from .document import BodyNode, ProblemDocument
from .model import Direction

_GROUND_FLAGS = ('True', 'False')
_DIRECTIONS = {d.value for d in Direction}


class ValidationError(Exception):
    pass


def _where(index: int, body: BodyNode) -> str:
    return f'[body {index + 1} {body.name!r}]'


def _validate_body(index: int, body: BodyNode) -> None:
    where = _where(index, body)
    if not body.name:
        raise ValidationError(f'[body {index + 1}] body name must not be empty')
    if body.ground not in _GROUND_FLAGS:
        raise ValidationError(
            f'{where} IsGround must be "True" or "False" (got {body.ground!r})'
        )

    seen: Set[str] = set()
    for pt in body.points:
        if not pt.name:
            raise ValidationError(f'{where} point name must not be empty')
        if '-' in pt.name:
            raise ValidationError(f'{where} point name {pt.name!r} must not contain "-"')
        if pt.name in seen:
            raise ValidationError(f'{where} duplicate point name {pt.name!r}')
        seen.add(pt.name)

    for force in body.forces:
        if force.point not in seen:
            raise ValidationError(
                f'{where} force references unknown point {force.point!r}'
                f' (known: {", ".join(sorted(seen)) or "none"})'
            )
        if force.direction not in _DIRECTIONS:
            raise ValidationError(
                f'{where} force at {force.point!r} has invalid direction {force.direction!r}'
            )


def validate_document(doc: ProblemDocument) -> None:
    for index, body in enumerate(doc.bodies):
        _validate_body(index, body)
