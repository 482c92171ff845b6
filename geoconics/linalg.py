"""Small numpy helpers for 3x3 projective linear algebra."""

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .tolerance import Point, Tolerance, resolve_tolerance

# Relative spread under which eigenvalues are treated as one multiple root.
EIGEN_CLUSTER_TOL = 1e-6


def as_vector3(values: Sequence[float]) -> np.ndarray:
    vec = np.asarray(values, dtype=float).reshape(-1)
    if vec.shape != (3,):
        raise ValueError(f"invalid homogeneous vector of shape {vec.shape}")
    return vec


def as_matrix3(values) -> np.ndarray:
    mat = np.asarray(values, dtype=float)
    if mat.shape != (3, 3):
        raise ValueError(f"invalid 3x3 matrix of shape {mat.shape}")
    return mat


def skew(v: Sequence[float]) -> np.ndarray:
    """Cross-product matrix ``[v]x`` so that ``skew(a) @ b == cross(a, b)``."""

    x, y, z = as_vector3(v)
    return np.array(
        [
            [0.0, -z, y],
            [z, 0.0, -x],
            [-y, x, 0.0],
        ]
    )


def adjugate(m) -> np.ndarray:
    """Adjugate of a 3x3 matrix, well defined for singular input."""

    mat = as_matrix3(m)
    a, b, c = mat[:, 0], mat[:, 1], mat[:, 2]
    return np.array([np.cross(b, c), np.cross(c, a), np.cross(a, b)])


def matrix_rank(m, *, tol: Optional[Tolerance] = None) -> int:
    """Numerical rank with singular values compared against the largest one."""

    eps = resolve_tolerance(tol).epsilon
    mat = np.asarray(m, dtype=float)
    if mat.size == 0:
        return 0
    singular = np.linalg.svd(mat, compute_uv=False)
    largest = float(singular[0]) if singular.size else 0.0
    if largest == 0.0 or not np.isfinite(largest):
        return 0
    return int(np.count_nonzero(singular > eps * largest))


def real_eigenvalues(m) -> List[float]:
    """Real eigenvalues of ``m`` in ascending order.

    Eigenvalues whose imaginary part is negligible count as real.  A multiple
    root is returned once, as the mean of its numerically split copies.
    """

    values = np.linalg.eigvals(np.asarray(m, dtype=float))
    if values.size == 0:
        return []
    scale = max(1.0, float(np.max(np.abs(values))))
    cutoff = EIGEN_CLUSTER_TOL * scale
    real = sorted(float(value.real) for value in values if abs(value.imag) <= cutoff)

    clusters: List[List[float]] = []
    for value in real:
        if clusters and value - clusters[-1][-1] <= cutoff:
            clusters[-1].append(value)
        else:
            clusters.append([value])
    return [sum(cluster) / len(cluster) for cluster in clusters]


def largest_abs_element(m) -> Tuple[int, int, float]:
    mat = np.asarray(m, dtype=float)
    flat = int(np.argmax(np.abs(mat)))
    row, col = divmod(flat, mat.shape[1])
    return row, col, float(mat[row, col])


def first_nonvanishing_element(m, *, tol: Optional[Tolerance] = None) -> Optional[Tuple[int, int, float]]:
    """First entry in row-major order that is not negligible next to the largest one."""

    eps = resolve_tolerance(tol).epsilon
    mat = np.asarray(m, dtype=float)
    peak = float(np.max(np.abs(mat))) if mat.size else 0.0
    if peak == 0.0:
        return None
    rows, cols = mat.shape
    for row in range(rows):
        for col in range(cols):
            if abs(mat[row, col]) > eps * peak:
                return row, col, float(mat[row, col])
    return None  # pragma: no cover - the peak itself always qualifies


def normalize_homogeneous(v: Sequence[float]) -> np.ndarray:
    vec = as_vector3(v)
    peak = float(np.max(np.abs(vec)))
    if peak == 0.0:
        return vec
    return vec / peak


def to_affine(v: Sequence[float], *, tol: Optional[Tolerance] = None) -> Optional[Point]:
    """Project a homogeneous point to the plane, ``None`` for points at infinity."""

    vec = normalize_homogeneous(v)
    if not np.all(np.isfinite(vec)) or not np.any(vec):
        return None
    x, y, w = vec
    if resolve_tolerance(tol).is_zero(w):
        return None
    return float(x / w), float(y / w)


def is_line_at_infinity(line: Sequence[float], *, tol: Optional[Tolerance] = None) -> bool:
    l1, l2, _ = normalize_homogeneous(line)
    tolerance = resolve_tolerance(tol)
    return tolerance.is_zero(l1) and tolerance.is_zero(l2)


def homogeneous_lines_equal(g: Sequence[float], h: Sequence[float], *, tol: Optional[Tolerance] = None) -> bool:
    """True when two line triples describe the same line (any nonzero scale)."""

    a = normalize_homogeneous(g)
    b = normalize_homogeneous(h)
    tolerance = resolve_tolerance(tol)
    pivot = int(np.argmax(np.abs(a)))
    if tolerance.is_zero(b[pivot]):
        return False
    b = b * (a[pivot] / b[pivot])
    return tolerance.vectors_equal(a, b)


def translation_frame(origin: Sequence[float], scale: float = 1.0) -> np.ndarray:
    """Homogeneous map ``x = scale * u + origin`` from local to world coordinates."""

    ox, oy = float(origin[0]), float(origin[1])
    return np.array(
        [
            [scale, 0.0, ox],
            [0.0, scale, oy],
            [0.0, 0.0, 1.0],
        ]
    )


def conic_in_frame(q, frame) -> np.ndarray:
    t = as_matrix3(frame)
    return t.T @ as_matrix3(q) @ t


def line_in_frame(line: Sequence[float], frame) -> np.ndarray:
    return as_matrix3(frame).T @ as_vector3(line)


def point_from_frame(point: Sequence[float], frame) -> Point:
    t = as_matrix3(frame)
    return float(t[0, 0] * point[0] + t[0, 2]), float(t[1, 1] * point[1] + t[1, 2])


def conic_anchor(q, *, tol: Optional[Tolerance] = None) -> Point:
    """A finite reference point of the conic.

    Central conics give their center and parabolas their vertex.  Parallel
    line pairs give the point of their midline nearest the origin, and a
    bare line its foot point.
    """

    tolerance = resolve_tolerance(tol)
    mat = as_matrix3(q)
    quad = (mat[:2, :2] + mat[:2, :2].T) / 2.0
    d = (mat[:2, 2] + mat[2, :2]) / 2.0
    f = float(mat[2, 2])

    eigenvalues, eigenvectors = np.linalg.eigh(quad)
    peak = float(np.max(np.abs(eigenvalues)))
    if peak == 0.0:
        norm_sq = float(d @ d)
        if norm_sq == 0.0:
            return 0.0, 0.0
        foot = -f * d / (2.0 * norm_sq)
        return float(foot[0]), float(foot[1])

    if not any(tolerance.is_zero(value / peak) for value in eigenvalues):
        center = np.linalg.solve(quad, -d)
        return float(center[0]), float(center[1])

    # Rank-one quadratic part: a parabola or two parallel lines.
    big = int(np.argmax(np.abs(eigenvalues)))
    mu = float(eigenvalues[big])
    n = eigenvectors[:, big]
    a = eigenvectors[:, 1 - big]
    s = -float(n @ d) / mu
    along = float(a @ d)
    t = 0.0
    if not tolerance.is_zero(along / max(peak, float(np.max(np.abs(d))))):
        t = -(mu * s * s + 2.0 * s * float(n @ d) + f) / (2.0 * along)
    point = s * n + t * a
    return float(point[0]), float(point[1])


def conic_length_scale(q) -> float:
    """Size of the conic seen from the local origin.

    Dividing coordinates by it brings the quadratic, linear and constant
    terms to comparable magnitudes.
    """

    mat = as_matrix3(q)
    quad = float(np.max(np.abs(mat[:2, :2])))
    if quad == 0.0:
        return 1.0
    linear = float(np.max(np.abs(mat[:2, 2])))
    constant = abs(float(mat[2, 2]))
    scale = max(linear / quad, math.sqrt(constant / quad))
    if scale > 0.0 and math.isfinite(scale):
        return scale
    return 1.0


__all__ = [
    "EIGEN_CLUSTER_TOL",
    "as_vector3",
    "as_matrix3",
    "skew",
    "adjugate",
    "matrix_rank",
    "real_eigenvalues",
    "largest_abs_element",
    "first_nonvanishing_element",
    "normalize_homogeneous",
    "to_affine",
    "is_line_at_infinity",
    "homogeneous_lines_equal",
    "translation_frame",
    "conic_in_frame",
    "line_in_frame",
    "point_from_frame",
    "conic_anchor",
    "conic_length_scale",
]
