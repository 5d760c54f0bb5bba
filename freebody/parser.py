import logging
from typing import List, Mapping, Optional, Tuple

from .config import get_parser_config
from .document import BodyNode, DocumentSource, load_document
from .expression import evaluate_expression
from .logging_utils import apply_debug_logging
from .model import Direction, Force, ParseWarning, Point, Problem, RigidBody
from .symbols import SymbolTable, as_symbol_table
from .validate import validate_document

logger = logging.getLogger(__name__)

DEFAULT_DESCRIPTION = 'Free-body diagram problem'


class ProblemParseError(ValueError):
    pass


class _BodyEvaluator:
    """Evaluates the expressions of one body and applies the fallback policy."""

    def __init__(self, body: BodyNode, symbols: SymbolTable, strict: bool):
        self.body = body
        self.symbols = symbols
        self.strict = strict
        self.warnings: List[ParseWarning] = []

    def value(self, field: str, expr: str) -> float:
        value, error = evaluate_expression(expr, self.symbols)
        if error is None:
            return value
        if self.strict:
            raise ProblemParseError(
                f'[body {self.body.name!r}] cannot evaluate {field} {expr!r}: {error}'
            )
        logger.warning(
            'Error evaluating expression %r for %s.%s: %s; using 0',
            expr,
            self.body.name,
            field,
            error,
        )
        self.warnings.append(ParseWarning(self.body.name, field, expr, error))
        return 0.0

    def build(self) -> RigidBody:
        points = tuple(
            Point(
                name=pt.name,
                x=self.value(f'{pt.name}.x', pt.x),
                y=self.value(f'{pt.name}.y', pt.y),
            )
            for pt in self.body.points
        )
        forces = tuple(
            Force(
                point=fc.point,
                direction=Direction(fc.direction),
                magnitude=self.value(f'force@{fc.point}.magnitude', fc.magnitude),
                preset=True,
            )
            for fc in self.body.forces
        )
        return RigidBody(
            name=self.body.name,
            is_ground=self.body.is_ground,
            points=points,
            forces=forces,
            image=self.body.image,
        )


def parse_problem(
    document: DocumentSource,
    symbols: Optional[Mapping] = None,
    *,
    strict: Optional[bool] = None,
    title: Optional[str] = None,
    description: Optional[str] = None,
) -> Problem:
    """Evaluate *document* under *symbols* into a numeric :class:`Problem`.

    Structural errors raise ``ValidationError`` before anything is evaluated.
    Expression failures fall back to ``0.0`` with a recorded warning unless
    ``strict`` (or ``ParserConfig.strict_expressions``) is set, in which case
    :class:`ProblemParseError` is raised.
    """

    doc = load_document(document)
    validate_document(doc)

    if strict is None:
        strict = get_parser_config().strict_expressions
    table = as_symbol_table(symbols)

    bodies: List[RigidBody] = []
    warnings: List[ParseWarning] = []
    for body in doc.bodies:
        evaluator = _BodyEvaluator(body, table, strict)
        bodies.append(evaluator.build())
        warnings.extend(evaluator.warnings)

    problem = Problem(
        id=doc.problem_id,
        title=title if title is not None else f'Problem {doc.problem_id}',
        description=description if description is not None else DEFAULT_DESCRIPTION,
        bodies=tuple(bodies),
        symbols=table.snapshot(),
        warnings=tuple(warnings),
    )
    logger.info(
        'Parsed problem %s: %d bodies, %d warning(s)',
        problem.id,
        len(problem.bodies),
        len(problem.warnings),
    )
    return problem


def reparse(
    problem: Problem,
    document: DocumentSource,
    symbols: Optional[Mapping] = None,
    *,
    strict: Optional[bool] = None,
) -> Problem:
    """Re-evaluate *document* under new symbols, keeping the narrative text of *problem*."""

    return parse_problem(
        document,
        symbols,
        strict=strict,
        title=problem.title,
        description=problem.description,
    )


def geometry_signature(problem: Problem) -> Tuple:
    """Names and counts of a problem, without any evaluated number."""

    return tuple(
        (
            body.name,
            body.is_ground,
            tuple(pt.name for pt in body.points),
            tuple((fc.point, fc.direction.value) for fc in body.forces),
        )
        for body in problem.bodies
    )


apply_debug_logging(globals(), logger=logger)
