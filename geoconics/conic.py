"""General conic ``A x^2 + B x y + C y^2 + D x + E y + F = 0`` and its intersections.

Conic-conic intersection uses the pencil of conics ``Q1 + lambda Q2``: every
member passes through the common points of the two operands, and the members
with ``det = 0`` are line pairs.  Splitting such a member into its lines
reduces the problem to line-conic intersections.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

import numpy as np

from .degenerate import LinePair, line_pair_apex, lines_from_rank_one, split_degenerate_conic
from .errors import CoincidentConicsError, ConicComputationError, InvalidShapeError
from .line_conic import intersect_line_with_conic_matrix
from .linalg import (
    as_matrix3,
    conic_anchor,
    conic_in_frame,
    conic_length_scale,
    homogeneous_lines_equal,
    is_line_at_infinity,
    largest_abs_element,
    matrix_rank,
    point_from_frame,
    real_eigenvalues,
    skew,
    to_affine,
    translation_frame,
)
from .logging_utils import apply_debug_logging
from .tolerance import Point, Tolerance, resolve_tolerance

if TYPE_CHECKING:  # pragma: no cover
    from .shapes.line import InfiniteLine

logger = logging.getLogger(__name__)


def _normalized(matrix: np.ndarray) -> np.ndarray:
    peak = float(np.max(np.abs(matrix)))
    return matrix / peak if peak else matrix


def conics_coincide(q1, q2, *, tol: Optional[Tolerance] = None) -> bool:
    """True when the two matrices are proportional, i.e. describe one curve."""

    stacked = np.vstack([np.asarray(q1, dtype=float).reshape(1, -1), np.asarray(q2, dtype=float).reshape(1, -1)])
    return matrix_rank(stacked, tol=tol) < 2


def _pair_frame(q1: np.ndarray, q2: np.ndarray, tol: Tolerance) -> np.ndarray:
    """Local frame centered between the two conics' anchors, in units of their size."""

    x1, y1 = conic_anchor(q1, tol=tol)
    x2, y2 = conic_anchor(q2, tol=tol)
    center = ((x1 + x2) / 2.0, (y1 + y2) / 2.0)
    shift = translation_frame(center)
    scale = max(
        conic_length_scale(conic_in_frame(q1, shift)),
        conic_length_scale(conic_in_frame(q2, shift)),
    )
    return translation_frame(center, scale)


def _degenerate_members(q1: np.ndarray, q2: np.ndarray, tol: Tolerance) -> List[Tuple[Optional[float], np.ndarray]]:
    """Line-pair members of the pencil, the one with the largest ``lambda`` first.

    A singular operand is itself a member of the pencil and is used as-is
    instead of inverting ``Q2``.
    """

    if matrix_rank(q2, tol=tol) < 3:
        logger.debug("Second conic is degenerate; using it as the pencil member")
        return [(None, q2)]
    if matrix_rank(q1, tol=tol) < 3:
        logger.debug("First conic is degenerate; using it as the pencil member")
        return [(None, q1)]

    pencil = q1 @ np.linalg.inv(-q2)
    eigenvalues = real_eigenvalues(pencil)
    if not eigenvalues:
        raise ConicComputationError("conic pencil has no real eigenvalue")
    logger.debug("Pencil eigenvalues %s", eigenvalues)
    return [(lam, q1 + lam * q2) for lam in sorted(eigenvalues, reverse=True)]


def _component_lines(member: np.ndarray, tol: Tolerance) -> Tuple[List[np.ndarray], List[np.ndarray]]:
    """Real lines of a degenerate member, plus the real apex of a complex pair.

    Returns ``(lines, apex_points)``.  Both lists are empty for members of
    full rank.
    """

    member = _normalized(member)
    rank = matrix_rank(member, tol=tol)
    if rank == 0:
        raise ConicComputationError("degenerate pencil member is the zero matrix")
    if rank > 2:
        logger.debug("Pencil member has full rank; no line pair")
        return [], []

    if rank == 2:
        apex = line_pair_apex(member, tol=tol, largest=True)
        if apex is None:  # pragma: no cover - rank two always has a nonzero adjugate
            return [], []
        if not apex.real_lines:
            logger.debug("Pencil member is a complex line pair; only the apex is real")
            return [], [apex.point]
        point = np.where(np.abs(apex.point) > tol.epsilon * float(np.max(np.abs(apex.point))), apex.point, 0.0)
        member = member + skew(point)

    row, col, _ = largest_abs_element(member)
    first, second = lines_from_rank_one(member, row, col)
    lines = [first]
    if not homogeneous_lines_equal(first, second, tol=tol):
        lines.append(second)
    return [line for line in lines if not is_line_at_infinity(line, tol=tol)], []


def intersect_conic_matrices(q1, q2, *, tol: Optional[Tolerance] = None) -> List[Point]:
    """Candidate affine points shared by two conic matrices.

    Candidates are not yet filtered by membership on either conic; callers
    apply their own point tests.  Raises :class:`CoincidentConicsError` when
    the two matrices describe the same curve.
    """

    tolerance = resolve_tolerance(tol)
    frame = _pair_frame(as_matrix3(q1), as_matrix3(q2), tolerance)
    m1 = _normalized(conic_in_frame(q1, frame))
    m2 = _normalized(conic_in_frame(q2, frame))
    if conics_coincide(m1, m2, tol=tolerance):
        raise CoincidentConicsError("conics coincide; their intersection is the whole curve")

    fallback: List[Point] = []
    for lam, member in _degenerate_members(m1, m2, tolerance):
        lines, apexes = _component_lines(member, tolerance)
        if not lines:
            for apex in apexes:
                point = to_affine(apex, tol=tolerance)
                if point is not None:
                    fallback.append(point_from_frame(point, frame))
            continue
        logger.debug("Using pencil member lambda=%s with %d line(s)", lam, len(lines))
        candidates: List[Point] = []
        for line in lines:
            for matrix in (m1, m2):
                local = intersect_line_with_conic_matrix(matrix, line, tol=tolerance)
                candidates.extend(point_from_frame(point, frame) for point in local)
        return candidates
    return fallback


@dataclass(frozen=True)
class GeneralizedConic:
    """Immutable conic given by its six implicit-equation coefficients."""

    A: float
    B: float
    C: float
    D: float
    E: float
    F: float

    def __post_init__(self) -> None:
        values = [float(getattr(self, name)) for name in "ABCDEF"]
        if not all(np.isfinite(values)):
            raise InvalidShapeError(f"invalid conic coefficients {values}")
        if not any(values):
            raise InvalidShapeError("conic coefficients must not all be zero")
        for name, value in zip("ABCDEF", values):
            object.__setattr__(self, name, value)

    @classmethod
    def from_matrix(cls, matrix) -> "GeneralizedConic":
        m = as_matrix3(matrix)
        sym = (m + m.T) / 2.0
        return cls(
            A=sym[0, 0],
            B=2.0 * sym[0, 1],
            C=sym[1, 1],
            D=2.0 * sym[0, 2],
            E=2.0 * sym[1, 2],
            F=sym[2, 2],
        )

    @property
    def coefficients(self) -> Tuple[float, float, float, float, float, float]:
        return (self.A, self.B, self.C, self.D, self.E, self.F)

    def as_matrix(self) -> np.ndarray:
        return np.array(
            [
                [self.A, self.B / 2.0, self.D / 2.0],
                [self.B / 2.0, self.C, self.E / 2.0],
                [self.D / 2.0, self.E / 2.0, self.F],
            ]
        )

    def as_generalized_conic(self) -> "GeneralizedConic":
        return self

    def evaluate(self, point: Sequence[float]) -> float:
        x, y = float(point[0]), float(point[1])
        return self.A * x * x + self.B * x * y + self.C * y * y + self.D * x + self.E * y + self.F

    def is_point_on(self, point: Sequence[float], *, tol: Optional[Tolerance] = None) -> bool:
        """Zero test of the equation scaled so its largest coefficient is one."""

        peak = max(abs(value) for value in self.coefficients)
        return resolve_tolerance(tol).is_zero(self.evaluate(point) / peak)

    @property
    def anchor(self) -> Point:
        """Center of a central conic, vertex of a parabola, a point of a line otherwise."""

        return conic_anchor(self.as_matrix())

    def translated(self, dx: float, dy: float) -> "GeneralizedConic":
        """The same curve moved by ``(dx, dy)``."""

        return GeneralizedConic.from_matrix(conic_in_frame(self.as_matrix(), translation_frame((-dx, -dy))))

    def is_degenerate(self, *, tol: Optional[Tolerance] = None) -> bool:
        return matrix_rank(self.as_matrix(), tol=tol) < 3

    def intersect_with_line_triple(self, line: Sequence[float], *, tol: Optional[Tolerance] = None) -> List[Point]:
        tolerance = resolve_tolerance(tol)
        points = intersect_line_with_conic_matrix(self.as_matrix(), line, tol=tolerance)
        return [point for point in points if self.is_point_on(point, tol=tolerance)]

    def intersect_with_infinite_line(self, line: "InfiniteLine", *, tol: Optional[Tolerance] = None) -> List[Point]:
        tolerance = resolve_tolerance(tol)
        points = self.intersect_with_line_triple(line.get_triple(), tol=tolerance)
        return [point for point in points if line.is_point_on_line(point, tol=tolerance)]

    def intersect_with_conic(self, other: "GeneralizedConic", *, tol: Optional[Tolerance] = None) -> List[Point]:
        tolerance = resolve_tolerance(tol)
        candidates = intersect_conic_matrices(self.as_matrix(), other.as_matrix(), tol=tolerance)
        points = []
        for point in candidates:
            if self.is_point_on(point, tol=tolerance) and other.is_point_on(point, tol=tolerance):
                points.append(point)
        return tolerance.select_distinct(points)

    def intersect_with_generalized_conic(
        self, other: "GeneralizedConic", *, tol: Optional[Tolerance] = None
    ) -> List[Point]:
        return self.intersect_with_conic(other, tol=tol)

    @staticmethod
    def split_degenerate_conic(matrix, *, tol: Optional[Tolerance] = None) -> LinePair:
        return split_degenerate_conic(matrix, tol=tol)

    def clone(self) -> "GeneralizedConic":
        return GeneralizedConic(*self.coefficients)


apply_debug_logging(globals(), logger=logger)


__all__ = ["GeneralizedConic", "conics_coincide", "intersect_conic_matrices"]
