import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from freebody import (
    ProblemCatalog,
    UnknownBodyError,
    default_catalog,
    generate_arc,
    print_problem,
)
from freebody.arcs import format_coord

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _parse_symbols(items: Optional[List[str]], parser: argparse.ArgumentParser) -> Dict[str, float]:
    symbols: Dict[str, float] = {}
    for item in items or []:
        name, sep, value = item.partition("=")
        name = name.strip()
        if not sep or not name:
            parser.error(f"--symbol expects NAME=VALUE, got {item!r}")
        try:
            symbols[name] = float(value)
        except ValueError:
            parser.error(f"--symbol {name}: {value!r} is not a number")
    return symbols


def _catalog_for(path: Optional[str]) -> ProblemCatalog:
    if path is None:
        return default_catalog()
    try:
        text = Path(path).read_text(encoding="utf-8")
        source = json.loads(text) if path.endswith(".json") else text
    except (OSError, ValueError) as exc:
        logger.error("Cannot read %s: %s", path, exc)
        print(f"Cannot read {path}: {exc}", file=sys.stderr)
        raise SystemExit(1)
    catalog = ProblemCatalog()
    # Keyed by path so a broken document still reaches load() and reports there.
    catalog.register(source, problem_id=path)
    return catalog


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Parse free-body diagram problems")
    parser.add_argument(
        "path",
        nargs="?",
        help="Problem document (XML, or JSON mapping); defaults to the built-in Problem #6",
    )
    parser.add_argument(
        "--symbol",
        action="append",
        metavar="NAME=VALUE",
        help="Override a symbol, e.g. --symbol R=150 (repeatable)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on expressions that cannot be evaluated instead of using 0",
    )
    parser.add_argument(
        "--arc",
        metavar="BODY",
        help="Also print the arc path and bounding box of an arc body (AC, CB)",
    )
    parser.add_argument(
        "--radius",
        type=float,
        help="Arc radius (default: the problem's R symbol)",
    )
    parser.add_argument(
        "--thickness",
        type=float,
        help="Arc thickness (default: 20)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    symbols = _parse_symbols(args.symbol, parser)

    catalog = _catalog_for(args.path)
    problem_id = catalog.problems()[0]
    if symbols:
        result = catalog.update_symbols(problem_id, symbols, strict=args.strict)
    else:
        result = catalog.load(problem_id, strict=args.strict)
    if not result.ok:
        logger.error("%s", result.error)
        print(result.error, file=sys.stderr)
        raise SystemExit(1)

    problem = result.problem
    print(problem.title)
    print(problem.description)
    print(print_problem(problem))

    if args.arc:
        radius = args.radius if args.radius is not None else problem.symbols.get("R", 100.0)
        try:
            arc = generate_arc(args.arc, radius, args.thickness)
        except UnknownBodyError as exc:
            logger.error("%s", exc)
            print(exc, file=sys.stderr)
            raise SystemExit(1)
        box = arc.bounding_box
        low = ", ".join(format_coord(v) for v in (box.min_x, box.min_y))
        high = ", ".join(format_coord(v) for v in (box.max_x, box.max_y))
        print(f"arc {args.arc} r={radius:g} thickness={arc.config.thickness:g}")
        print(f"  path: {arc.path}")
        print(f"  bbox: ({low}) - ({high})")
        for pt in arc.local_points:
            print(f"  {pt.name}: ({format_coord(pt.x)}, {format_coord(pt.y)})")


if __name__ == "__main__":
    main(sys.argv[1:])
