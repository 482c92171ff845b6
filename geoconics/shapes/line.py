from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..conic import GeneralizedConic
from ..errors import InvalidShapeError
from ..logging_utils import apply_debug_logging
from ..tolerance import Point, Tolerance, resolve_tolerance
from .base import as_point

logger = logging.getLogger(__name__)


def _rotate90(v: Point) -> Point:
    return -v[1], v[0]


def _cross(u: Point, v: Point) -> float:
    return u[0] * v[1] - u[1] * v[0]


@dataclass(frozen=True)
class InfiniteLine:
    """Line through ``point`` along the unit vector ``direction``.

    The left normal ``n = rot90(direction)`` orients the line: signed
    distances are positive on the side ``n`` points to, and the homogeneous
    triple is ``(n_x, n_y, -n . point)``.
    """

    point: Point
    direction: Point

    def __post_init__(self) -> None:
        point = as_point(self.point, "line point")
        dx, dy = as_point(self.direction, "line direction")
        length = math.hypot(dx, dy)
        if length == 0.0:
            raise InvalidShapeError("line direction must be nonzero")
        object.__setattr__(self, "point", point)
        object.__setattr__(self, "direction", (dx / length, dy / length))

    @classmethod
    def from_points(cls, first: Sequence[float], second: Sequence[float]) -> "InfiniteLine":
        a = as_point(first, "line point")
        b = as_point(second, "line point")
        return cls(a, (b[0] - a[0], b[1] - a[1]))

    @classmethod
    def from_triple(cls, triple: Sequence[float]) -> "InfiniteLine":
        """Build the line ``l1 x + l2 y + l3 = 0``, keeping the triple's orientation."""

        if len(triple) != 3:
            raise InvalidShapeError(f"line triple must have three entries, got {triple!r}")
        l1, l2, l3 = (float(value) for value in triple)
        norm_sq = l1 * l1 + l2 * l2
        if norm_sq == 0.0 or not math.isfinite(norm_sq) or not math.isfinite(l3):
            raise InvalidShapeError(f"invalid line triple {triple!r}")
        foot = (-l3 * l1 / norm_sq, -l3 * l2 / norm_sq)
        return cls(foot, (l2, -l1))

    @property
    def normal(self) -> Point:
        return _rotate90(self.direction)

    def get_triple(self) -> Tuple[float, float, float]:
        nx, ny = self.normal
        return nx, ny, -(nx * self.point[0] + ny * self.point[1])

    def as_generalized_conic(self) -> GeneralizedConic:
        """The line together with the line at infinity, as a degenerate conic."""

        l1, l2, l3 = self.get_triple()
        return GeneralizedConic(0.0, 0.0, 0.0, l1, l2, l3)

    def signed_distance_to(self, point: Sequence[float]) -> float:
        nx, ny = self.normal
        return nx * (float(point[0]) - self.point[0]) + ny * (float(point[1]) - self.point[1])

    def distance_to(self, point: Sequence[float]) -> float:
        return abs(self.signed_distance_to(point))

    def translated(self, dx: float, dy: float) -> "InfiniteLine":
        return InfiniteLine((self.point[0] + dx, self.point[1] + dy), self.direction)

    def get_point_on_line(self, t: float = 0.0) -> Point:
        return self.point[0] + t * self.direction[0], self.point[1] + t * self.direction[1]

    def is_point_on_line(self, point: Sequence[float], *, tol: Optional[Tolerance] = None) -> bool:
        return resolve_tolerance(tol).is_zero(self.signed_distance_to(point))

    def is_point_on(self, point: Sequence[float], *, tol: Optional[Tolerance] = None) -> bool:
        return self.is_point_on_line(point, tol=tol)

    def get_closest_point_to_point(self, point: Sequence[float]) -> Point:
        dx, dy = self.direction
        t = dx * (float(point[0]) - self.point[0]) + dy * (float(point[1]) - self.point[1])
        return self.get_point_on_line(t)

    def intersect_with_infinite_line(self, other: "InfiniteLine", *, tol: Optional[Tolerance] = None) -> Optional[Point]:
        """Single crossing point, or ``None`` for parallel (or coincident) lines."""

        denom = _cross(self.direction, other.direction)
        if resolve_tolerance(tol).is_zero(denom):
            logger.debug("Lines are parallel; no single intersection")
            return None
        offset = (other.point[0] - self.point[0], other.point[1] - self.point[1])
        return self.get_point_on_line(_cross(offset, other.direction) / denom)

    def intersect_with_circle(self, circle, *, tol: Optional[Tolerance] = None) -> List[Point]:
        return circle.intersect_with_infinite_line(self, tol=tol)

    def intersect_with_ellipse(self, ellipse, *, tol: Optional[Tolerance] = None) -> List[Point]:
        return ellipse.intersect_with_infinite_line(self, tol=tol)

    def intersect_with_parabola(self, parabola, *, tol: Optional[Tolerance] = None) -> List[Point]:
        return parabola.intersect_with_infinite_line(self, tol=tol)

    def intersect_with_generalized_conic(
        self, conic: GeneralizedConic, *, tol: Optional[Tolerance] = None
    ) -> List[Point]:
        return conic.intersect_with_infinite_line(self, tol=tol)

    def intersect_with(self, other, *, tol: Optional[Tolerance] = None) -> List[Point]:
        if isinstance(other, InfiniteLine):
            crossing = self.intersect_with_infinite_line(other, tol=tol)
            return [] if crossing is None else [crossing]
        return other.intersect_with_infinite_line(self, tol=tol)

    def clone(self) -> "InfiniteLine":
        return InfiniteLine(self.point, self.direction)


apply_debug_logging(globals(), logger=logger)


__all__ = ["InfiniteLine"]
