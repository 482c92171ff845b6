"""Factor a degenerate conic (rank <= 2) into its two component lines.

A symmetric matrix ``D`` of rank two describes a line pair ``g``, ``h`` with
``D ~ g h^T + h g^T``.  Its adjugate is ``-p p^T`` where ``p = g x h`` is the
point where the lines meet.  Adding the skew matrix ``[p]x`` to ``D`` cancels
one of the symmetric terms and leaves the rank-one product ``g h^T``, from
which both lines are read as a row and a column.

When the adjugate's diagonal is positive instead, the two lines are complex
conjugates; only their meeting point is real.
"""

from __future__ import annotations

import logging
import math
from typing import NamedTuple, Optional, Tuple

import numpy as np

from .errors import DegenerateConicError
from .linalg import adjugate, as_matrix3, first_nonvanishing_element, matrix_rank, skew
from .logging_utils import apply_debug_logging
from .tolerance import Tolerance, resolve_tolerance

logger = logging.getLogger(__name__)

LinePair = Tuple[np.ndarray, np.ndarray]


class PairApex(NamedTuple):
    """Meeting point of a line pair, scaled so ``D + [point]x`` has rank one."""

    point: np.ndarray
    real_lines: bool


def line_pair_apex(matrix, *, tol: Optional[Tolerance] = None, largest: bool = False) -> Optional[PairApex]:
    """Meeting point of the line pair encoded by ``matrix``.

    The column of ``adj(D)`` is chosen by the first diagonal entry that is not
    negligible, or by the largest one when ``largest`` is set.  Returns
    ``None`` when every diagonal entry vanishes (rank below two).
    """

    tolerance = resolve_tolerance(tol)
    adj = adjugate(matrix)
    peak = float(np.max(np.abs(adj)))
    if peak == 0.0:
        return None
    diagonal = np.diag(adj)
    if largest:
        index = int(np.argmax(np.abs(diagonal)))
        if abs(diagonal[index]) <= tolerance.epsilon * peak:
            return None
    else:
        candidates = [i for i in range(3) if abs(diagonal[i]) > tolerance.epsilon * peak]
        if not candidates:
            return None
        index = candidates[0]
    value = float(diagonal[index])
    return PairApex(point=adj[:, index] / math.sqrt(abs(value)), real_lines=value < 0.0)


def lines_from_rank_one(matrix, row: int, col: int) -> LinePair:
    """Read ``(row, col)`` of an outer product ``g h^T`` as the pair of factors."""

    mat = as_matrix3(matrix)
    return mat[row, :].copy(), mat[:, col].copy()


def split_degenerate_conic(matrix, *, tol: Optional[Tolerance] = None) -> LinePair:
    """Split a rank-two symmetric matrix into two real line triples ``(g, h)``.

    Raises :class:`DegenerateConicError` when the matrix is not symmetric, has
    full rank, has no nonzero adjugate diagonal (a doubled line or the zero
    matrix), or encodes a pair of complex conjugate lines.
    """

    tolerance = resolve_tolerance(tol)
    mat = as_matrix3(matrix)
    scale = float(np.max(np.abs(mat)))
    if scale == 0.0:
        raise DegenerateConicError("cannot split the zero matrix")
    if not np.allclose(mat, mat.T, rtol=0.0, atol=tolerance.epsilon * scale):
        raise DegenerateConicError("degenerate conic matrix must be symmetric")
    if matrix_rank(mat, tol=tolerance) > 2:
        raise DegenerateConicError("matrix has full rank and is not a line pair")

    apex = line_pair_apex(mat, tol=tolerance)
    if apex is None:
        raise DegenerateConicError("adjugate has no nonzero diagonal entry; matrix is not a line pair")
    if not apex.real_lines:
        raise DegenerateConicError("matrix describes a pair of complex conjugate lines")

    rank_one = mat + skew(apex.point)
    pivot = first_nonvanishing_element(rank_one, tol=tolerance)
    if pivot is None:  # pragma: no cover - the symmetric part never cancels
        raise DegenerateConicError("line pair collapsed to the zero matrix")
    row, col, _ = pivot
    logger.debug("Splitting line pair at pivot (%d, %d), apex %s", row, col, apex.point)
    return lines_from_rank_one(rank_one, row, col)


apply_debug_logging(globals(), logger=logger)


__all__ = [
    "LinePair",
    "PairApex",
    "line_pair_apex",
    "lines_from_rank_one",
    "split_degenerate_conic",
]
