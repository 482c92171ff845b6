from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence

from ..conic import GeneralizedConic
from ..errors import InvalidShapeError
from ..logging_utils import apply_debug_logging
from ..tolerance import Point, Tolerance, resolve_tolerance
from .base import ConicShape, as_point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Circle(ConicShape):
    center: Point
    radius: float

    def __post_init__(self) -> None:
        center = as_point(self.center, "circle center")
        radius = float(self.radius)
        if not math.isfinite(radius) or radius <= 0.0:
            raise InvalidShapeError(f"circle radius must be positive, got {self.radius!r}")
        object.__setattr__(self, "center", center)
        object.__setattr__(self, "radius", radius)

    @classmethod
    def from_center(cls, center: Sequence[float], radius: float) -> "Circle":
        return cls(center, radius)

    @property
    def anchor(self) -> Point:
        return self.center

    def translated(self, dx: float, dy: float) -> "Circle":
        return Circle((self.center[0] + dx, self.center[1] + dy), self.radius)

    def as_generalized_conic(self) -> GeneralizedConic:
        h, k = self.center
        return GeneralizedConic(
            A=1.0,
            B=0.0,
            C=1.0,
            D=-2.0 * h,
            E=-2.0 * k,
            F=h * h + k * k - self.radius * self.radius,
        )

    def is_point_on_circle(self, point: Sequence[float], *, tol: Optional[Tolerance] = None) -> bool:
        distance = math.hypot(float(point[0]) - self.center[0], float(point[1]) - self.center[1])
        return resolve_tolerance(tol).numbers_are_equal(distance, self.radius)

    def is_point_on(self, point: Sequence[float], *, tol: Optional[Tolerance] = None) -> bool:
        return self.is_point_on_circle(point, tol=tol)

    def get_closest_point_to_point(self, point: Sequence[float], *, tol: Optional[Tolerance] = None) -> Point:
        """Radial projection onto the circle; the center maps to ``center + (r, 0)``."""

        h, k = self.center
        vx, vy = float(point[0]) - h, float(point[1]) - k
        norm = math.hypot(vx, vy)
        if resolve_tolerance(tol).is_zero(norm):
            return h + self.radius, k
        scale = self.radius / norm
        return h + vx * scale, k + vy * scale


apply_debug_logging(globals(), logger=logger)


__all__ = ["Circle"]
