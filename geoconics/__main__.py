import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from geoconics import (
    SceneError,
    Tolerance,
    intersect_scene,
    read_scene,
    results_to_json,
)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Intersect the curves of a JSON scene")
    parser.add_argument("path", help="Path to the JSON scene file")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--epsilon",
        type=float,
        default=None,
        help="Comparison tolerance (default: library default)",
    )
    parser.add_argument(
        "--output",
        help="Write the intersections as JSON to the given path",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    try:
        tol = Tolerance(args.epsilon) if args.epsilon is not None else None
    except ValueError as exc:
        parser.error(str(exc))

    logger.info("Reading scene from %s", args.path)
    try:
        scene = read_scene(args.path)
    except SceneError as exc:
        logger.error("Invalid scene: %s", exc)
        raise SystemExit(1)

    logger.info("Scene has %d shape(s) and %d pair(s)", len(scene.shapes), len(scene.pairs))
    results = intersect_scene(scene, tol=tol)

    failures = 0
    for result in results:
        print(f"{result.first} x {result.second}:")
        if not result.ok:
            failures += 1
            print(f"  error: {result.error}")
        elif not result.points:
            print("  (no intersection)")
        else:
            for x, y in result.points:
                print(f"  ({x:.6f}, {y:.6f})")

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(results_to_json(results, epsilon=args.epsilon), encoding="utf-8")
        logger.info("Wrote intersections to %s", output_path)

    if failures:
        logger.warning("%d pair(s) could not be intersected", failures)


if __name__ == "__main__":
    main()
