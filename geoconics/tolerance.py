"""Epsilon-based comparisons shared by every numerical routine.

Every comparison-sensitive operation in the package accepts an optional
``tol`` keyword.  When it is omitted the process-wide default returned by
:func:`get_default_tolerance` is used.
"""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

Point = Tuple[float, float]

DEFAULT_EPSILON = 1e-10


@dataclass(frozen=True)
class Tolerance:
    epsilon: float = DEFAULT_EPSILON

    def __post_init__(self) -> None:
        eps = float(self.epsilon)
        if not math.isfinite(eps) or eps <= 0.0:
            raise ValueError(f"tolerance epsilon must be positive and finite, got {self.epsilon!r}")
        object.__setattr__(self, "epsilon", eps)

    def is_zero(self, value: float) -> bool:
        return abs(value) < self.epsilon

    def is_gt_zero(self, value: float) -> bool:
        return value >= self.epsilon

    def is_lt_zero(self, value: float) -> bool:
        return value <= -self.epsilon

    def numbers_are_equal(self, a: float, b: float) -> bool:
        return self.is_zero(a - b)

    def points_equal(self, p: Sequence[float], q: Sequence[float]) -> bool:
        return self.numbers_are_equal(p[0], q[0]) and self.numbers_are_equal(p[1], q[1])

    def vectors_equal(self, u: Sequence[float], v: Sequence[float]) -> bool:
        if len(u) != len(v):
            return False
        return all(self.numbers_are_equal(a, b) for a, b in zip(u, v))

    def select_distinct(self, points: Iterable[Sequence[float]]) -> List[Point]:
        """Drop near-duplicate points, keeping the first occurrence of each."""

        distinct: List[Point] = []
        for point in points:
            candidate = (float(point[0]), float(point[1]))
            if not any(self.points_equal(candidate, seen) for seen in distinct):
                distinct.append(candidate)
        return distinct


_DEFAULT_TOLERANCE = Tolerance()


def get_default_tolerance() -> Tolerance:
    return copy.deepcopy(_DEFAULT_TOLERANCE)


def set_default_tolerance(tolerance: Tolerance) -> None:
    global _DEFAULT_TOLERANCE
    if not isinstance(tolerance, Tolerance):
        raise TypeError(f"expected Tolerance, got {type(tolerance).__name__}")
    _DEFAULT_TOLERANCE = copy.deepcopy(tolerance)


def resolve_tolerance(tol: Optional[Tolerance]) -> Tolerance:
    return tol if tol is not None else _DEFAULT_TOLERANCE


def is_zero(value: float, *, tol: Optional[Tolerance] = None) -> bool:
    return resolve_tolerance(tol).is_zero(value)


def is_gt_zero(value: float, *, tol: Optional[Tolerance] = None) -> bool:
    return resolve_tolerance(tol).is_gt_zero(value)


def is_lt_zero(value: float, *, tol: Optional[Tolerance] = None) -> bool:
    return resolve_tolerance(tol).is_lt_zero(value)


def numbers_are_equal(a: float, b: float, *, tol: Optional[Tolerance] = None) -> bool:
    return resolve_tolerance(tol).numbers_are_equal(a, b)


def points_equal(p: Sequence[float], q: Sequence[float], *, tol: Optional[Tolerance] = None) -> bool:
    return resolve_tolerance(tol).points_equal(p, q)


def vectors_equal(u: Sequence[float], v: Sequence[float], *, tol: Optional[Tolerance] = None) -> bool:
    return resolve_tolerance(tol).vectors_equal(u, v)


def select_distinct(points: Iterable[Sequence[float]], *, tol: Optional[Tolerance] = None) -> List[Point]:
    return resolve_tolerance(tol).select_distinct(points)


__all__ = [
    "DEFAULT_EPSILON",
    "Point",
    "Tolerance",
    "get_default_tolerance",
    "set_default_tolerance",
    "resolve_tolerance",
    "is_zero",
    "is_gt_zero",
    "is_lt_zero",
    "numbers_are_equal",
    "points_equal",
    "vectors_equal",
    "select_distinct",
]
