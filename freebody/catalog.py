"""Registry of problem documents, with the built-in Problem #6."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from .document import DocumentSource, load_document
from .model import Problem
from .parser import parse_problem, reparse
from .validate import ValidationError

logger = logging.getLogger(__name__)

PROBLEM_6_XML = """\
<Problem id="6">
  <RigidBody Name="AC" IsGround="False">
    <ImageFile>assets/AC.png</ImageFile>
    <Point Name="A" X="-R" Y="0" />
    <Point Name="mid" X="-R/√2" Y="R/√2" />
    <Point Name="C" X="0" Y="R" />
    <ExternalForce Point="mid" Dir="down" Mag="P" />
  </RigidBody>
  <RigidBody Name="CB" IsGround="False">
    <ImageFile>assets/CB.png</ImageFile>
    <Point Name="C" X="0" Y="R" />
    <Point Name="mid" X="R/√2" Y="R/√2" />
    <Point Name="B" X="R" Y="0" />
    <ExternalForce Point="mid" Dir="down" Mag="P" />
  </RigidBody>
  <RigidBody Name="A_Ground" IsGround="True">
    <Point Name="A" X="-R" Y="0" />
  </RigidBody>
  <RigidBody Name="B_Ground" IsGround="True">
    <Point Name="B" X="R" Y="0" />
  </RigidBody>
</Problem>
"""

PROBLEM_6_TITLE = "Problem #6: Quarter-Circle Rigid Bodies"
PROBLEM_6_DESCRIPTION = (
    "Two quarter-circle rigid bodies AC and CB with downward loads P at their "
    "mid-points. Draw the free-body diagram showing all forces and reactions."
)

# Document, expression and symbol errors are all ValueErrors.
_LOAD_ERRORS = (ValueError, ValidationError)


@dataclass(frozen=True)
class LoadResult:
    problem: Optional[Problem] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.problem is not None


@dataclass
class CatalogEntry:
    problem_id: str
    source: DocumentSource
    title: Optional[str] = None
    description: Optional[str] = None
    symbols: Dict[str, float] = field(default_factory=dict)


class ProblemCatalog:
    """Problem documents by id.

    Sources are kept as registered and parsed on :meth:`load`, so a broken
    document is reported through :class:`LoadResult` rather than at start-up
    (provided its id is given explicitly).
    """

    def __init__(self):
        self._entries: Dict[str, CatalogEntry] = {}
        self._loaded: Dict[str, Problem] = {}

    def register(
        self,
        document: DocumentSource,
        *,
        problem_id: Optional[str] = None,
        title: Optional[str] = None,
        description: Optional[str] = None,
        symbols: Optional[Mapping] = None,
    ) -> str:
        if problem_id is None:
            problem_id = load_document(document).problem_id
        self._entries[problem_id] = CatalogEntry(
            problem_id=problem_id,
            source=document,
            title=title,
            description=description,
            symbols=dict(symbols or {}),
        )
        self._loaded.pop(problem_id, None)
        logger.info("Registered problem %s", problem_id)
        return problem_id

    def get(self, problem_id: str) -> Optional[CatalogEntry]:
        return self._entries.get(problem_id)

    def problems(self) -> List[str]:
        return list(self._entries)

    def __contains__(self, problem_id: object) -> bool:
        return problem_id in self._entries

    def load(self, problem_id: str, *, strict: Optional[bool] = None) -> LoadResult:
        """Parse a registered problem; every failure comes back as ``error``."""

        entry = self._entries.get(problem_id)
        if entry is None:
            return LoadResult(error=f"Unknown problem: {problem_id}")
        return self._parse(entry, entry.symbols, strict)

    def update_symbols(
        self,
        problem_id: str,
        overrides: Mapping,
        *,
        strict: Optional[bool] = None,
    ) -> LoadResult:
        """Merge *overrides* into the problem's symbols and re-parse it.

        Title and description of the previously loaded problem are kept. On
        failure the registered symbols are left unchanged.
        """

        entry = self._entries.get(problem_id)
        if entry is None:
            return LoadResult(error=f"Unknown problem: {problem_id}")
        merged = dict(entry.symbols)
        merged.update(overrides)
        result = self._parse(entry, merged, strict)
        if result.ok:
            entry.symbols = merged
            logger.info("Updated symbols of problem %s: %s", problem_id, sorted(overrides))
        return result

    def _parse(self, entry: CatalogEntry, symbols: Mapping, strict: Optional[bool]) -> LoadResult:
        previous = self._loaded.get(entry.problem_id)
        try:
            if previous is None:
                problem = parse_problem(
                    entry.source,
                    symbols,
                    strict=strict,
                    title=entry.title,
                    description=entry.description,
                )
            else:
                problem = reparse(previous, entry.source, symbols, strict=strict)
        except _LOAD_ERRORS as exc:
            logger.error("Problem %s failed to load: %s", entry.problem_id, exc)
            return LoadResult(error=f"Problem {entry.problem_id} failed to load: {exc}")
        self._loaded[entry.problem_id] = problem
        return LoadResult(problem=problem)


def default_catalog() -> ProblemCatalog:
    catalog = ProblemCatalog()
    catalog.register(PROBLEM_6_XML, title=PROBLEM_6_TITLE, description=PROBLEM_6_DESCRIPTION)
    return catalog
