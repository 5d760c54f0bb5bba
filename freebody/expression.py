"""Evaluation of the algebraic expressions used in problem documents.

Expressions are small: a symbol (``R``), a signed symbol (``-R``), a ratio
(``R/√2``) or a literal. Evaluation runs in three stages:

1. every symbol token of the table is replaced by its numeric text, longest
   token first, so ``Sqrt[2]`` and ``√2`` are consumed before any shorter
   token could match inside them;
2. a residual that is already a plain number is returned directly;
3. anything else is handed to SymPy after a whitelist check.
"""

from __future__ import annotations

import math
import re
from typing import Any, Dict, Mapping, Optional, Tuple

import sympy as sp

from .symbols import as_symbol_table


class ExpressionError(ValueError):
    pass


_ALLOWED_FUNCS: Dict[str, Any] = {
    "sqrt": sp.sqrt,
    "sin": sp.sin,
    "cos": sp.cos,
    "tan": sp.tan,
    "asin": sp.asin,
    "acos": sp.acos,
    "atan": sp.atan,
    "abs": sp.Abs,
    "min": sp.Min,
    "max": sp.Max,
    "pi": sp.pi,
    "E": sp.E,
}

_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
# Numbers are matched first so the exponent of ``1e-05`` is not read as ``e``.
_TOKEN_RE = re.compile(
    r"(?P<num>(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)|(?P<ident>[A-Za-z_][A-Za-z0-9_]*)"
)
_ALLOWED_RESIDUAL_RE = re.compile(r"^[0-9A-Za-z_.+\-*/^(),\s]*$")

_PATTERN_CACHE: Dict[str, "re.Pattern[str]"] = {}


def _token_pattern(token: str) -> "re.Pattern[str]":
    pattern = _PATTERN_CACHE.get(token)
    if pattern is None:
        escaped = re.escape(token)
        if _IDENT_RE.match(token):
            # ``R`` must not match inside ``R1`` or inside a float like ``1e5``.
            escaped = rf"(?<![A-Za-z0-9_.]){escaped}(?![A-Za-z0-9_])"
        pattern = re.compile(escaped)
        _PATTERN_CACHE[token] = pattern
    return pattern


def _number_text(value: float) -> str:
    text = repr(float(value))
    return f"({text})" if value < 0 else text


def substitute_symbols(expr: str, symbols: Mapping) -> str:
    """Replace every symbol token of *symbols* in *expr* by its value."""

    table = as_symbol_table(symbols)
    out = expr
    for token in table.tokens_longest_first():
        text = _number_text(table[token])
        out = _token_pattern(token).sub(lambda _m, _t=text: _t, out)
    return out


def _parse_number(text: str) -> Optional[float]:
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _evaluate_residual(residual: str, expr_text: str) -> float:
    if not _ALLOWED_RESIDUAL_RE.match(residual):
        bad = sorted({ch for ch in residual if not _ALLOWED_RESIDUAL_RE.match(ch)})
        raise ExpressionError(
            f"Unexpected character(s) {''.join(bad)!r} in expression {expr_text!r}"
        )
    unknown = sorted(
        {
            match.group("ident")
            for match in _TOKEN_RE.finditer(residual)
            if match.group("ident") and match.group("ident") not in _ALLOWED_FUNCS
        }
    )
    if unknown:
        raise ExpressionError(f"Unknown symbol(s): {', '.join(unknown)}")

    try:
        parsed = sp.sympify(residual, locals=dict(_ALLOWED_FUNCS), convert_xor=True)
    except (sp.SympifyError, SyntaxError, TypeError, ValueError) as exc:
        raise ExpressionError(f"Parse error in {expr_text!r}: {exc}") from exc

    try:
        value = float(parsed.evalf())
    except (TypeError, ValueError) as exc:
        raise ExpressionError(
            f"Expression {expr_text!r} did not evaluate to a real number"
        ) from exc
    if not math.isfinite(value):
        raise ExpressionError(f"Expression {expr_text!r} evaluated to {value}")
    return value


def evaluate(expr: str, symbols: Optional[Mapping] = None) -> float:
    """Evaluate *expr* against *symbols* (defaults when ``None``).

    Raises :class:`ExpressionError` on any failure.
    """

    text = (expr or "").strip()
    if not text:
        raise ExpressionError("Empty expression")

    residual = substitute_symbols(text, symbols).strip()
    value = _parse_number(residual)
    if value is not None:
        return value
    return _evaluate_residual(residual, text)


def evaluate_expression(
    expr: str, symbols: Optional[Mapping] = None
) -> Tuple[Optional[float], Optional[str]]:
    """Evaluate *expr* and report failures instead of raising.

    Returns ``(value, error_message)``; ``value`` is ``None`` on failure.
    """

    try:
        return evaluate(expr, symbols), None
    except ExpressionError as exc:
        return None, str(exc)
