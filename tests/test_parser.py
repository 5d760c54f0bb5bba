import logging
import math

import pytest

from freebody.catalog import PROBLEM_6_XML
from freebody.config import ParserConfig, get_parser_config, set_parser_config
from freebody.model import CoordinateConvention, Direction
from freebody.parser import (
    DEFAULT_DESCRIPTION,
    ProblemParseError,
    geometry_signature,
    parse_problem,
    reparse,
)
from freebody.symbols import SymbolTable
from freebody.validate import ValidationError


BAD_EXPR_XML = '''
<Problem id="9">
  <RigidBody Name="AC" IsGround="False">
    <Point Name="A" X="-Q" Y="0" />
    <Point Name="C" X="0" Y="R" />
    <ExternalForce Point="C" Dir="down" Mag="P*" />
  </RigidBody>
</Problem>
'''


@pytest.fixture
def restore_parser_config():
    saved = get_parser_config()
    yield
    set_parser_config(saved)


def test_parse_problem_6_geometry():
    problem = parse_problem(PROBLEM_6_XML)

    assert problem.id == '6'
    assert problem.title == 'Problem 6'
    assert problem.description == DEFAULT_DESCRIPTION
    assert [b.name for b in problem.bodies] == ['AC', 'CB', 'A_Ground', 'B_Ground']
    assert problem.warnings == ()

    ac = problem.body('AC')
    assert ac.point('A').coords == (-100.0, 0.0)
    assert ac.point('C').coords == (0.0, 100.0)
    assert ac.point('mid').x == pytest.approx(-100 / math.sqrt(2))
    assert ac.point('mid').y == pytest.approx(100 / math.sqrt(2))
    assert ac.image == 'assets/AC.png'
    assert ac.convention is CoordinateConvention.BODY

    force = ac.forces[0]
    assert (force.point, force.direction, force.magnitude, force.preset) == ('mid', Direction.DOWN, 10.0, True)

    ground = problem.body('B_Ground')
    assert ground.is_ground
    assert ground.convention is CoordinateConvention.GROUND
    assert ground.point('B').coords == (100.0, 0.0)
    assert ground.forces == ()


def test_title_and_description_overrides():
    problem = parse_problem(PROBLEM_6_XML, title='Quarter circles', description='Draw it.')

    assert problem.title == 'Quarter circles'
    assert problem.description == 'Draw it.'


def test_parse_with_symbol_overrides():
    problem = parse_problem(PROBLEM_6_XML, {'R': 150, 'P': 25})

    cb = problem.body('CB')
    assert cb.point('B').coords == (150.0, 0.0)
    assert cb.forces[0].magnitude == 25.0
    assert problem.symbols['R'] == 150.0
    assert problem.symbols['P'] == 25.0


def test_problem_symbols_are_a_private_snapshot():
    table = SymbolTable()
    problem = parse_problem(PROBLEM_6_XML, table)
    table.set('R', 1)

    assert problem.symbols['R'] == 100.0
    with pytest.raises(TypeError):
        problem.symbols['R'] = 5


def test_reparse_changes_only_numbers():
    original = parse_problem(PROBLEM_6_XML, title='T', description='D')
    updated = reparse(original, PROBLEM_6_XML, {'R': 150})

    assert geometry_signature(updated) == geometry_signature(original)
    assert (updated.title, updated.description) == ('T', 'D')
    assert updated.body('AC').point('A').x == -150.0
    assert original.body('AC').point('A').x == -100.0


def test_lenient_mode_substitutes_zero_and_records_warnings(caplog):
    with caplog.at_level(logging.WARNING, logger='freebody.parser'):
        problem = parse_problem(BAD_EXPR_XML)

    ac = problem.body('AC')
    assert ac.point('A').coords == (0.0, 0.0)
    assert ac.point('C').coords == (0.0, 100.0)
    assert ac.forces[0].magnitude == 0.0

    fields = [(w.body, w.field, w.expression) for w in problem.warnings]
    assert fields == [('AC', 'A.x', '-Q'), ('AC', 'force@C.magnitude', 'P*')]
    assert 'Unknown symbol(s): Q' in problem.warnings[0].message
    assert 'Error evaluating expression' in caplog.text


def test_strict_mode_raises():
    with pytest.raises(ProblemParseError, match="A.x '-Q'"):
        parse_problem(BAD_EXPR_XML, strict=True)


def test_strict_mode_from_config(restore_parser_config):
    set_parser_config(ParserConfig(strict_expressions=True))

    with pytest.raises(ProblemParseError):
        parse_problem(BAD_EXPR_XML)
    assert parse_problem(BAD_EXPR_XML, strict=False).warnings


def test_structural_errors_reject_whole_problem():
    xml = '''
    <Problem id="1">
      <RigidBody Name="AC"><Point Name="A" X="0" Y="0" /></RigidBody>
      <RigidBody Name="CB">
        <Point Name="C" X="0" Y="0" />
        <ExternalForce Point="mid" />
      </RigidBody>
    </Problem>
    '''
    with pytest.raises(ValidationError, match="unknown point 'mid'"):
        parse_problem(xml)


def test_duplicate_body_names_keep_document_order():
    problem = parse_problem(
        {
            'id': '2',
            'bodies': [
                {'name': 'G', 'is_ground': True, 'points': [{'name': 'A', 'x': '-R'}]},
                {'name': 'G', 'is_ground': True, 'points': [{'name': 'A', 'x': 'R'}]},
            ],
        }
    )

    assert [b.point('A').x for b in problem.bodies_named('G')] == [-100.0, 100.0]
    assert problem.body('G') is problem.bodies[0]
