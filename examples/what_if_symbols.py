"""Example: re-parse Problem #6 under different symbols and keep the canvas in step."""

from freebody import CanvasEngine, default_catalog, print_problem


def main() -> None:
    catalog = default_catalog()
    problem = catalog.load("6").problem

    engine = CanvasEngine()
    for index, body in enumerate(problem.bodies):
        engine.place_body(body, 0, 0, template_index=index)

    for radius in (100, 150, 200):
        result = catalog.update_symbols("6", {"R": radius})
        if not result.ok:
            print(result.error)
            continue
        engine.rebind_templates(result.problem)
        print(print_problem(result.problem, with_warnings=False))
        print(f"AC-1-C at {engine.world_point('AC-1-C')}")
        print()


if __name__ == "__main__":
    main()
