from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from ..conic import GeneralizedConic
from ..errors import ConicComputationError, InvalidShapeError
from ..logging_utils import apply_debug_logging
from ..tolerance import Point, Tolerance, resolve_tolerance
from .base import ConicShape, as_point
from .line import InfiniteLine

logger = logging.getLogger(__name__)

# Imaginary parts below this (relative to the root size) are rounding noise.
_CUBIC_IMAG_TOL = 1e-9


@dataclass(frozen=True)
class Parabola(ConicShape):
    """Locus of points equidistant from ``focus`` and the ``directrix`` line."""

    focus: Point
    directrix: InfiniteLine

    def __post_init__(self) -> None:
        focus = as_point(self.focus, "parabola focus")
        if not isinstance(self.directrix, InfiniteLine):
            raise InvalidShapeError(f"parabola directrix must be an InfiniteLine, got {type(self.directrix).__name__}")
        if self.directrix.distance_to(focus) == 0.0:
            raise InvalidShapeError("parabola focus must not lie on its directrix")
        object.__setattr__(self, "focus", focus)

    @property
    def focal_length(self) -> float:
        """Distance from the vertex to the focus."""

        return self.directrix.distance_to(self.focus) / 2.0

    @property
    def axis(self) -> Point:
        """Unit vector from the directrix towards the focus."""

        nx, ny = self.directrix.normal
        side = 1.0 if self.directrix.signed_distance_to(self.focus) > 0.0 else -1.0
        return side * nx, side * ny

    @property
    def vertex(self) -> Point:
        ux, uy = self.axis
        f = self.focal_length
        return self.focus[0] - f * ux, self.focus[1] - f * uy

    @property
    def anchor(self) -> Point:
        return self.vertex

    def translated(self, dx: float, dy: float) -> "Parabola":
        return Parabola((self.focus[0] + dx, self.focus[1] + dy), self.directrix.translated(dx, dy))

    def as_generalized_conic(self) -> GeneralizedConic:
        a, b, c = self.directrix.get_triple()
        h, k = self.focus
        u = a * a + b * b
        return GeneralizedConic(
            A=u - a * a,
            B=-2.0 * a * b,
            C=u - b * b,
            D=-2.0 * u * h - 2.0 * a * c,
            E=-2.0 * u * k - 2.0 * b * c,
            F=u * (h * h + k * k) - c * c,
        )

    def is_point_on_parabola(self, point: Sequence[float], *, tol: Optional[Tolerance] = None) -> bool:
        to_focus = math.hypot(float(point[0]) - self.focus[0], float(point[1]) - self.focus[1])
        return resolve_tolerance(tol).numbers_are_equal(to_focus, self.directrix.distance_to(point))

    def is_point_on(self, point: Sequence[float], *, tol: Optional[Tolerance] = None) -> bool:
        return self.is_point_on_parabola(point, tol=tol)

    def _local_frame(self) -> Tuple[Point, Point, Point]:
        ux, uy = self.axis
        return self.vertex, (uy, -ux), (ux, uy)

    def get_closest_point_to_point(self, point: Sequence[float]) -> Point:
        """Nearest point on the parabola.

        In the vertex frame the curve is ``v = s^2 / (4 f)``; the foot point
        parameter ``s`` is a real root of
        ``s^3 / (8 f^2) + s (1 - q_v / (2 f)) - q_s = 0``.
        """

        (vx, vy), (tx, ty), (ux, uy) = self._local_frame()
        f = self.focal_length
        dx, dy = float(point[0]) - vx, float(point[1]) - vy
        q_s = dx * tx + dy * ty
        q_v = dx * ux + dy * uy

        roots = np.roots([1.0 / (8.0 * f * f), 0.0, 1.0 - q_v / (2.0 * f), -q_s])
        scale = max(1.0, float(np.max(np.abs(roots)))) if roots.size else 1.0
        real_roots = [float(root.real) for root in roots if abs(root.imag) <= _CUBIC_IMAG_TOL * scale]
        if not real_roots:
            raise ConicComputationError(f"no real foot point parameter among {roots}")

        def squared_distance(s: float) -> float:
            return (s - q_s) ** 2 + (s * s / (4.0 * f) - q_v) ** 2

        s = min(real_roots, key=squared_distance)
        v = s * s / (4.0 * f)
        return vx + s * tx + v * ux, vy + s * ty + v * uy


apply_debug_logging(globals(), logger=logger)


__all__ = ["Parabola"]
