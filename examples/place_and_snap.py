"""Example session: assemble the Problem #6 arch on the canvas and annotate it."""

from freebody import (
    AnnotationKind,
    CanvasEngine,
    annotation_arrow,
    default_catalog,
    palette_entries,
    place_from_palette,
)


def drop(engine: CanvasEngine, instance_id: str, x: float, y: float) -> None:
    engine.begin_drag(instance_id)
    for candidate in engine.drag_move(x, y):
        print(f"  near {candidate.target_point_id} ({candidate.distance:.1f})")
    body = engine.end_drag(x, y)
    print(f"{instance_id} -> ({body.x:.2f}, {body.y:.2f})")


def main() -> None:
    problem = default_catalog().load("6").problem
    print(problem.title)

    engine = CanvasEngine()
    entries = palette_entries(problem)
    for entry in entries:
        print(f"palette {entry.index}: {entry.label} ({entry.kind.value})")

    ac = place_from_palette(engine, entries[0], 0, 0)
    cb = place_from_palette(engine, entries[1], 300, 0)
    a_ground = place_from_palette(engine, entries[2], -300, 300)
    b_ground = place_from_palette(engine, entries[3], 300, 300)

    drop(engine, cb.id, 5, -3)
    drop(engine, a_ground.id, 8, 6)
    drop(engine, b_ground.id, -4, 7)

    engine.apply_preset_forces(ac.id)
    engine.apply_preset_forces(cb.id)
    engine.add_force(f"{a_ground.id}-A", 5, 90, AnnotationKind.REACTION, label="A_y")
    engine.add_force(f"{b_ground.id}-B", 5, 90, AnnotationKind.REACTION, label="B_y")

    snapshot = engine.snapshot()
    print("Snap points:")
    for view in snapshot.snap_points:
        print(f"  {view.id}: ({view.x:.2f}, {view.y:.2f}) {view.state.value}")
    print("Arrows:")
    for annotation in snapshot.force_arrows:
        arrow = annotation_arrow(annotation)
        print(
            f"  {annotation.id} [{annotation.kind.value}] {arrow.label}: "
            f"({arrow.tail[0]:.1f}, {arrow.tail[1]:.1f}) -> ({arrow.tip[0]:.1f}, {arrow.tip[1]:.1f})"
        )


if __name__ == "__main__":
    main()
