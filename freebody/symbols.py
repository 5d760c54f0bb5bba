"""Symbol table used by point, force and magnitude expressions."""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Dict, Iterator, List, Optional

DEFAULT_SYMBOLS: Dict[str, float] = {
    "R": 100.0,
    "P": 10.0,
    "Sqrt[2]": math.sqrt(2),
    "√2": math.sqrt(2),
}

_NUMERIC_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")


def is_valid_symbol_name(name: object) -> bool:
    """Return ``True`` when *name* can be used as a symbol token."""

    if not isinstance(name, str) or not name:
        return False
    if any(ch.isspace() for ch in name):
        return False
    return not _NUMERIC_RE.match(name)


class SymbolTable(Mapping):
    """Mutable mapping of symbol names to finite float values.

    A fresh table starts from :data:`DEFAULT_SYMBOLS`; ``values`` are applied
    on top of the defaults, so partial overrides keep the remaining symbols.
    """

    def __init__(self, values: Optional[Mapping] = None, *, defaults: bool = True):
        self._values: Dict[str, float] = {}
        if defaults:
            self._values.update(DEFAULT_SYMBOLS)
        if values:
            self.update(values)

    def __getitem__(self, name: str) -> float:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        items = ", ".join(f"{k}={v!r}" for k, v in sorted(self._values.items()))
        return f"SymbolTable({items})"

    def set(self, name: str, value: float) -> None:
        if not is_valid_symbol_name(name):
            raise ValueError(f"Invalid symbol name: {name!r}")
        number = float(value)
        if not math.isfinite(number):
            raise ValueError(f"Symbol {name!r} must be finite, got {value!r}")
        self._values[name] = number

    def update(self, values: Mapping) -> None:
        for name, value in values.items():
            self.set(name, value)

    def delete(self, name: str) -> None:
        self._values.pop(name, None)

    def reset(self) -> None:
        self._values = dict(DEFAULT_SYMBOLS)

    def with_overrides(self, values: Optional[Mapping] = None) -> "SymbolTable":
        table = SymbolTable(self._values, defaults=False)
        if values:
            table.update(values)
        return table

    def snapshot(self) -> Dict[str, float]:
        return dict(self._values)

    def tokens_longest_first(self) -> List[str]:
        # Ties are broken by name so substitution order is reproducible.
        return sorted(self._values, key=lambda name: (-len(name), name))


def as_symbol_table(symbols: Optional[Mapping]) -> SymbolTable:
    """Return a private :class:`SymbolTable` for *symbols*.

    Plain mappings are merged over the defaults; an existing table is copied
    so callers never share mutable state with a parsed problem.
    """

    if symbols is None:
        return SymbolTable()
    if isinstance(symbols, SymbolTable):
        return symbols.with_overrides()
    return SymbolTable(symbols)
