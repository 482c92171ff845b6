"""Intersection of a homogeneous line with a conic given as a 3x3 matrix.

The conic is restricted to the line as ``D = [l]x^T Q [l]x``, a rank <= 2
matrix ``p q^T + q p^T`` built from the two (possibly complex or coincident)
meeting points ``p`` and ``q``.  For a suitable ``alpha`` the matrix
``D + alpha [l]x`` collapses to the rank-one product ``p q^T`` and both points
are read off a single row and column.

The rank and discriminant tests compare entries of ``D`` against each other,
so the problem is first moved to a local frame: the origin goes to the foot
of the line seen from the conic's anchor and lengths are divided by the
conic's size.  Far from the world origin the raw coefficients differ by many
orders of magnitude and those tests would fail.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

import numpy as np

from .linalg import (
    as_matrix3,
    as_vector3,
    conic_anchor,
    conic_in_frame,
    conic_length_scale,
    largest_abs_element,
    line_in_frame,
    matrix_rank,
    point_from_frame,
    skew,
    to_affine,
    translation_frame,
)
from .logging_utils import apply_debug_logging
from .tolerance import Point, Tolerance, resolve_tolerance

logger = logging.getLogger(__name__)


def _restricted_minor(d: np.ndarray, pivot: int) -> float:
    j, k = [index for index in range(3) if index != pivot]
    return float(d[j, j] * d[k, k] - d[j, k] * d[k, j])


def _line_frame(q: np.ndarray, l: np.ndarray, tol: Tolerance) -> np.ndarray:
    ax, ay = conic_anchor(q, tol=tol)
    a, b, c = (float(value) for value in l)
    norm_sq = a * a + b * b
    if norm_sq > 0.0:
        offset = (a * ax + b * ay + c) / norm_sq
        if math.isfinite(offset):
            ax, ay = ax - offset * a, ay - offset * b
    shifted = conic_in_frame(q, translation_frame((ax, ay)))
    return translation_frame((ax, ay), conic_length_scale(shifted))


def _intersect_in_frame(q: np.ndarray, l: np.ndarray, tolerance: Tolerance) -> List[Point]:
    q = q / float(np.max(np.abs(q)))
    l = l / float(np.max(np.abs(l)))

    skew_l = skew(l)
    d = skew_l.T @ q @ skew_l
    d_scale = float(np.max(np.abs(d)))
    if d_scale <= tolerance.epsilon:
        logger.debug("Line %s lies on the conic; no isolated intersection points", l)
        return []

    rank = matrix_rank(d, tol=tolerance)
    if rank >= 2:
        pivot = int(np.argmax(np.abs(l)))
        minor = _restricted_minor(d, pivot) / (d_scale * d_scale)
        if tolerance.is_gt_zero(minor):
            logger.debug("Negative discriminant %.6g; line misses the conic", -minor)
            return []
        alpha = math.sqrt(max(-minor, 0.0)) * d_scale / l[pivot]
        rank_one = d + alpha * skew_l
    else:
        rank_one = d

    row, col, _ = largest_abs_element(rank_one)
    points: List[Point] = []
    for candidate in (rank_one[row, :], rank_one[:, col]):
        point = to_affine(candidate, tol=tolerance)
        if point is None:
            logger.debug("Dropping intersection at infinity %s", candidate)
            continue
        points.append(point)
    return points


def intersect_line_with_conic_matrix(
    conic, line: Sequence[float], *, tol: Optional[Tolerance] = None
) -> List[Point]:
    """Affine points where ``line`` meets the conic ``conic``.

    Returns zero, one (tangency) or two distinct points.  A line that lies
    entirely inside a degenerate conic has no isolated intersection points
    and yields an empty list, as do points at infinity.
    """

    tolerance = resolve_tolerance(tol)
    q = as_matrix3(conic)
    l = as_vector3(line)
    if not np.any(q) or not np.any(l):
        return []

    frame = _line_frame(q, l, tolerance)
    local = _intersect_in_frame(conic_in_frame(q, frame), line_in_frame(l, frame), tolerance)
    return tolerance.select_distinct([point_from_frame(point, frame) for point in local])


apply_debug_logging(globals(), logger=logger)


__all__ = ["intersect_line_with_conic_matrix"]
