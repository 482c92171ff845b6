"""Rotated ellipse with closest-point queries.

The closest point to a point follows D. Eberly, "Distance from a Point to an
Ellipse, an Ellipsoid, or a Hyperellipsoid": in the ellipse's own frame the
foot point solves a monotone equation in one variable, bracketed so that
bisection always converges.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Optional, Sequence, Tuple

import numpy as np
from scipy import optimize

from ..conic import GeneralizedConic
from ..degenerate import split_degenerate_conic
from ..errors import ConicComputationError, InvalidShapeError
from ..linalg import adjugate, skew, to_affine
from ..logging_utils import apply_debug_logging
from ..tolerance import Point, Tolerance, resolve_tolerance
from .base import ConicShape, as_point
from .line import InfiniteLine

logger = logging.getLogger(__name__)

# Enough halvings to walk the whole double-precision exponent range.
BISECTION_MAX_ITERATIONS = 1074
BISECTION_ROOT_TOLERANCE = 1e-15


def _rotate(x: float, y: float, angle: float) -> Tuple[float, float]:
    c, s = math.cos(angle), math.sin(angle)
    return c * x - s * y, s * x + c * y


@dataclass(frozen=True)
class Ellipse(ConicShape):
    """Ellipse with the ``semimajor`` axis at ``rotation`` radians from the x axis.

    ``rotation`` is normalized into ``[0, pi)``.  The axis lengths are not
    reordered, so ``semimajor < semiminor`` simply describes the same curve
    turned by a quarter turn.
    """

    center: Point
    semimajor: float
    semiminor: float
    rotation: float = 0.0

    def __post_init__(self) -> None:
        center = as_point(self.center, "ellipse center")
        a, b = float(self.semimajor), float(self.semiminor)
        for label, value in (("semimajor", a), ("semiminor", b)):
            if not math.isfinite(value) or value <= 0.0:
                raise InvalidShapeError(f"ellipse {label} must be positive, got {value!r}")
        rotation = float(self.rotation)
        if not math.isfinite(rotation):
            raise InvalidShapeError(f"ellipse rotation must be finite, got {self.rotation!r}")
        object.__setattr__(self, "center", center)
        object.__setattr__(self, "semimajor", a)
        object.__setattr__(self, "semiminor", b)
        object.__setattr__(self, "rotation", rotation % math.pi)

    @property
    def anchor(self) -> Point:
        return self.center

    def translated(self, dx: float, dy: float) -> "Ellipse":
        return replace(self, center=(self.center[0] + dx, self.center[1] + dy))

    def conic_coefficients(self) -> Tuple[float, float, float, float, float, float]:
        h, k = self.center
        a, b = self.semimajor, self.semiminor
        ca, sa = math.cos(self.rotation), math.sin(self.rotation)
        s2a = math.sin(2.0 * self.rotation)
        a2, b2 = a * a, b * b

        A = a2 * sa * sa + b2 * ca * ca
        B = (b2 - a2) * s2a
        C = a2 * ca * ca + b2 * sa * sa
        D = (a2 - b2) * k * s2a - 2.0 * h * A
        E = (a2 - b2) * h * s2a - 2.0 * k * C
        F = (
            (a2 * h * h + b2 * k * k) * sa * sa
            + (a2 * k * k + b2 * h * h) * ca * ca
            + h * k * (b2 - a2) * s2a
            - a2 * b2
        )
        return A, B, C, D, E, F

    def as_generalized_conic(self) -> GeneralizedConic:
        return GeneralizedConic(*self.conic_coefficients())

    def is_point_on_ellipse(self, point: Sequence[float], *, tol: Optional[Tolerance] = None) -> bool:
        u, v = _rotate(float(point[0]) - self.center[0], float(point[1]) - self.center[1], -self.rotation)
        value = (u / self.semimajor) ** 2 + (v / self.semiminor) ** 2
        return resolve_tolerance(tol).numbers_are_equal(value, 1.0)

    def is_point_on(self, point: Sequence[float], *, tol: Optional[Tolerance] = None) -> bool:
        return self.is_point_on_ellipse(point, tol=tol)

    def get_closest_point_to_point(self, point: Sequence[float]) -> Point:
        a, b = self.semimajor, self.semiminor
        e0, e1 = max(a, b), min(a, b)
        beta = (self.rotation + (math.pi / 2.0 if a < b else 0.0)) % (2.0 * math.pi)

        # Standard position: centered, major axis along x, first quadrant.
        y0s, y1s = _rotate(float(point[0]) - self.center[0], float(point[1]) - self.center[1], -beta)
        y0, y1 = abs(y0s), abs(y1s)

        if y1 > 0.0:
            if y0 > 0.0:
                t_bar = _solve_foot_parameter(e0, e1, y0, y1)
                x0 = e0 * e0 * y0 / (t_bar + e0 * e0)
                x1 = e1 * e1 * y1 / (t_bar + e1 * e1)
            else:
                x0, x1 = 0.0, e1
        else:
            if y0 < (e0 * e0 - e1 * e1) / e0:
                x0 = e0 * e0 * y0 / (e0 * e0 - e1 * e1)
                x1 = e1 * math.sqrt(max(0.0, 1.0 - (x0 / e0) ** 2))
            else:
                x0, x1 = e0, 0.0

        fx, fy = _rotate(math.copysign(x0, y0s), math.copysign(x1, y1s), beta)
        return fx + self.center[0], fy + self.center[1]

    def get_closest_point_to_line(self, line: InfiniteLine, *, tol: Optional[Tolerance] = None) -> Point:
        """Tangent point on the side of the ellipse nearest to ``line``.

        Lines parallel to ``line`` meet at the point at infinity ``p``; the two
        tangents through ``p`` form the degenerate conic ``[p]x^T adj(Q) [p]x``
        and their poles with respect to the ellipse are the tangent points.
        """

        tolerance = resolve_tolerance(tol)
        q = self.as_generalized_conic().as_matrix()
        adj_q = adjugate(q)
        triple = np.asarray(line.get_triple(), dtype=float)
        p_inf = np.cross(np.array([0.0, 0.0, 1.0]), triple)
        m = skew(p_inf)
        tangents = m.T @ adj_q @ m

        g, h = split_degenerate_conic(tangents, tol=tolerance)
        candidates = []
        for tangent in (g, h):
            touch = to_affine(adj_q @ tangent, tol=tolerance)
            if touch is None:
                raise ConicComputationError(f"tangent {tangent} has its pole at infinity")
            candidates.append(touch)
        first, second = candidates
        return second if line.distance_to(first) > line.distance_to(second) else first


def _solve_foot_parameter(e0: float, e1: float, y0: float, y1: float) -> float:
    def residual(t: float) -> float:
        r0 = e0 * y0 / (t + e0 * e0)
        r1 = e1 * y1 / (t + e1 * e1)
        return r0 * r0 + r1 * r1 - 1.0

    lower = -e1 * e1 + e1 * y1
    upper = -e1 * e1 + math.sqrt(e0 * e0 * y0 * y0 + e1 * e1 * y1 * y1)
    root, info = optimize.bisect(
        residual,
        lower,
        upper,
        xtol=BISECTION_ROOT_TOLERANCE,
        maxiter=BISECTION_MAX_ITERATIONS,
        full_output=True,
        disp=False,
    )
    if not info.converged:
        raise ConicComputationError(f"ellipse foot-point bisection did not converge: {info.flag}")
    logger.debug("Foot parameter %.17g after %d iterations", root, info.iterations)
    return float(root)


apply_debug_logging(globals(), logger=logger)


__all__ = ["Ellipse", "BISECTION_MAX_ITERATIONS", "BISECTION_ROOT_TOLERANCE"]
