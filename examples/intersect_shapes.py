"""Example: intersect a few curves and query closest points."""

import math

from geoconics import Circle, Ellipse, GeneralizedConic, InfiniteLine, Parabola, Tolerance, intersect

CURVES = {
    "unit circle": Circle.from_center((0.0, 0.0), 1.0),
    "tilted ellipse": Ellipse((0.5, 0.0), 2.0, 0.75, math.pi / 6.0),
    "parabola": Parabola((0.0, 0.5), InfiniteLine((0.0, -0.5), (1.0, 0.0))),
    "diagonal": InfiniteLine((0.0, 0.0), (1.0, 1.0)),
    "hyperbola xy=1/4": GeneralizedConic(0.0, 1.0, 0.0, 0.0, 0.0, -0.25),
}


def main() -> None:
    names = list(CURVES)
    for i, first in enumerate(names):
        for second in names[i + 1:]:
            points = intersect(CURVES[first], CURVES[second])
            print(f"{first} x {second}: {len(points)} point(s)")
            for x, y in points:
                print(f"  ({x:.6f}, {y:.6f})")

    ellipse = CURVES["tilted ellipse"]
    x, y = ellipse.get_closest_point_to_point((3.0, 2.0))
    print(f"\nClosest point on the ellipse to (3, 2): ({x:.6f}, {y:.6f})")
    x, y = ellipse.get_closest_point_to_line(InfiniteLine((0.0, 4.0), (1.0, 0.0)))
    print(f"Closest point on the ellipse to y = 4: ({x:.6f}, {y:.6f})")

    near = InfiniteLine((0.0, 1.0 + 1e-7), (1.0, 0.0))
    print("\nNear-tangent line, default tolerance:", intersect(CURVES["unit circle"], near))
    print("Near-tangent line, epsilon 1e-5:", intersect(CURVES["unit circle"], near, tol=Tolerance(1e-5)))


if __name__ == "__main__":
    main()
