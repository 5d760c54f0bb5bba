import logging

import pytest

from freebody.canvas import CanvasEngine
from freebody.catalog import PROBLEM_6_XML
from freebody.palette import PaletteKind, palette_entries, place_from_palette
from freebody.parser import parse_problem


@pytest.fixture
def problem():
    return parse_problem(PROBLEM_6_XML)


def test_entries_follow_document_order(problem):
    entries = palette_entries(problem)

    assert [(e.index, e.label, e.kind) for e in entries] == [
        (0, 'AC', PaletteKind.ARC),
        (1, 'CB', PaletteKind.ARC),
        (2, 'A_Ground', PaletteKind.GROUND),
        (3, 'B_Ground', PaletteKind.GROUND),
    ]


def test_arc_entries_have_thumbnails(problem):
    ac = palette_entries(problem, radius=50)[0]

    assert ac.error is None
    assert ac.thumbnail.view_box == '-60 -60 120 120'
    assert [pt.name for pt in ac.thumbnail.points] == ['A', 'mid', 'C']


def test_ground_entry_glyph(problem):
    ground = palette_entries(problem)[2]

    assert ground.thumbnail.view_box == '-10 -10 20 20'
    assert ground.thumbnail.points[0].name == 'A'
    assert ground.thumbnail.points[0].coords == (0.0, 0.0)
    assert ground.thumbnail.path.count('M ') == 7


def test_unknown_body_falls_back_to_placeholder(caplog):
    problem = parse_problem(
        {'id': '5', 'bodies': [{'name': 'Beam', 'points': [{'name': 'A', 'x': 'R'}]}]}
    )

    with caplog.at_level(logging.WARNING, logger='freebody.palette'):
        (entry,) = palette_entries(problem)

    assert entry.kind is PaletteKind.PLACEHOLDER
    assert entry.thumbnail is None
    assert 'Unknown body name: Beam' in entry.error
    assert 'No thumbnail for body Beam' in caplog.text


def test_place_from_palette_records_template_index(problem):
    engine = CanvasEngine()
    entry = palette_entries(problem)[3]

    body = place_from_palette(engine, entry, 40, 60)

    assert body.id == 'B_Ground-1'
    assert body.template_index == 3
    assert engine.world_point('B_Ground-1-B') == (140.0, 60.0)
