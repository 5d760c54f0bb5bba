from typing import Dict, Mapping

from .model import Force, Point, Problem, RigidBody


def number_str(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.6g}"


def _format_opts(opts: Dict[str, object]) -> str:
    if not opts:
        return ""
    parts = []
    for key in sorted(opts.keys()):
        value = opts[key]
        if isinstance(value, bool):
            rendered = "true" if value else "false"
        elif isinstance(value, (int, float)):
            rendered = number_str(value)
        else:
            rendered = value if (isinstance(value, str) and " " not in value) else f'"{value}"'
        parts.append(f"{key}={rendered}")
    return " [" + " ".join(parts) + "]"


def symbols_str(symbols: Mapping[str, float]) -> str:
    return " ".join(f"{name}={number_str(symbols[name])}" for name in sorted(symbols))


def point_str(point: Point) -> str:
    return f"point {point.name} ({number_str(point.x)}, {number_str(point.y)})"


def force_str(force: Force) -> str:
    return f"force {force.point} {force.direction.value} {number_str(force.magnitude)}"


def format_body(body: RigidBody) -> str:
    opts: Dict[str, object] = {"ground": body.is_ground}
    if body.image:
        opts["image"] = body.image
    lines = [f"body {body.name}{_format_opts(opts)}"]
    lines.extend(f"  {point_str(pt)}" for pt in body.points)
    lines.extend(f"  {force_str(fc)}" for fc in body.forces)
    return "\n".join(lines)


def print_problem(problem: Problem, *, with_warnings: bool = True) -> str:
    lines = [f'problem {problem.id} "{problem.title}"']
    if problem.symbols:
        lines.append(f"symbols {symbols_str(problem.symbols)}")
    for body in problem.bodies:
        lines.append(format_body(body))
    if with_warnings:
        for warning in problem.warnings:
            lines.append(f"warning {warning}")
    return "\n".join(lines)
