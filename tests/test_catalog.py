import pytest

from freebody.catalog import (
    PROBLEM_6_DESCRIPTION,
    PROBLEM_6_TITLE,
    PROBLEM_6_XML,
    ProblemCatalog,
    default_catalog,
)
from freebody.document import DocumentError


def test_default_catalog_loads_problem_6():
    catalog = default_catalog()

    assert catalog.problems() == ['6']
    assert '6' in catalog
    result = catalog.load('6')

    assert result.ok
    assert result.error is None
    assert result.problem.title == PROBLEM_6_TITLE
    assert result.problem.description == PROBLEM_6_DESCRIPTION
    assert len(result.problem.bodies) == 4


def test_unknown_problem():
    result = default_catalog().load('42')

    assert not result.ok
    assert result.error == 'Unknown problem: 42'
    assert not default_catalog().update_symbols('42', {'R': 1}).ok


def test_update_symbols_keeps_title_and_merges():
    catalog = default_catalog()
    catalog.load('6')

    first = catalog.update_symbols('6', {'R': 150})
    second = catalog.update_symbols('6', {'P': 25})

    assert first.problem.body('CB').point('B').x == 150.0
    assert second.problem.body('CB').point('B').x == 150.0
    assert second.problem.body('CB').forces[0].magnitude == 25.0
    assert second.problem.title == PROBLEM_6_TITLE
    assert catalog.get('6').symbols == {'R': 150, 'P': 25}


def test_update_symbols_before_first_load():
    catalog = default_catalog()

    result = catalog.update_symbols('6', {'R': 200})

    assert result.problem.body('AC').point('A').x == -200.0
    assert result.problem.description == PROBLEM_6_DESCRIPTION


def test_failed_update_keeps_previous_symbols():
    catalog = default_catalog()
    catalog.update_symbols('6', {'R': 150})

    result = catalog.update_symbols('6', {'R': float('inf')})

    assert not result.ok
    assert 'failed to load' in result.error
    assert catalog.get('6').symbols == {'R': 150}


def test_broken_documents_report_load_errors():
    catalog = ProblemCatalog()
    catalog.register('<Problem><RigidBody', problem_id='broken')
    catalog.register(
        '<Problem id="8"><RigidBody Name="AC" IsGround="maybe" /></Problem>',
        title='Bad flag',
    )
    catalog.register({'id': '9', 'bodies': [{'name': 'X', 'points': 5}]}, problem_id='9')

    broken = catalog.load('broken')
    bad_flag = catalog.load('8')

    assert broken.problem is None
    assert 'Problem broken failed to load' in broken.error
    assert bad_flag.problem is None
    assert 'IsGround' in bad_flag.error

    malformed = catalog.load('9')
    assert not malformed.ok
    assert malformed.problem is None
    assert 'Problem 9 failed to load' in malformed.error
    assert 'points must be a list of mappings' in malformed.error


def test_strict_load_reports_expression_errors():
    catalog = ProblemCatalog()
    catalog.register('<Problem id="3"><RigidBody Name="X"><Point Name="A" X="Q" /></RigidBody></Problem>')

    assert catalog.load('3').ok
    strict = catalog.load('3', strict=True)
    assert not strict.ok
    assert 'Unknown symbol(s): Q' in strict.error


def test_register_without_id_needs_a_readable_document():
    with pytest.raises(DocumentError):
        ProblemCatalog().register('not xml')


def test_registered_symbols_apply_on_load():
    catalog = ProblemCatalog()
    catalog.register(PROBLEM_6_XML, symbols={'R': 10})

    assert catalog.load('6').problem.body('AC').point('C').y == 10.0
