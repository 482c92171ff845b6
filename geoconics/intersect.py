"""Single entry point for intersecting any two supported curves."""

from __future__ import annotations

import logging
from typing import List, Optional, Union

from .conic import GeneralizedConic
from .logging_utils import apply_debug_logging
from .shapes import Circle, ConicShape, Ellipse, InfiniteLine, Parabola
from .tolerance import Point, Tolerance, resolve_tolerance

logger = logging.getLogger(__name__)

Curve = Union[InfiniteLine, Circle, Ellipse, Parabola, GeneralizedConic]

SUPPORTED_TYPES = (InfiniteLine, Circle, Ellipse, Parabola, GeneralizedConic)


def intersect(first: Curve, second: Curve, *, tol: Optional[Tolerance] = None) -> List[Point]:
    """Distinct affine points shared by ``first`` and ``second``.

    Two lines are solved directly.  A line against any conic keeps the line
    as a homogeneous triple.  Every other pair goes through the pencil of
    conics and is filtered through both operands' own point tests.
    """

    for operand in (first, second):
        if not isinstance(operand, SUPPORTED_TYPES):
            raise TypeError(f"cannot intersect object of type {type(operand).__name__}")
    tolerance = resolve_tolerance(tol)

    if isinstance(first, InfiniteLine):
        return first.intersect_with(second, tol=tolerance)
    if isinstance(second, InfiniteLine):
        return second.intersect_with(first, tol=tolerance)
    if isinstance(first, ConicShape):
        return first.intersect_with(second, tol=tolerance)
    if isinstance(second, ConicShape):
        return second.intersect_with(first, tol=tolerance)
    return first.intersect_with_conic(second, tol=tolerance)


apply_debug_logging(globals(), logger=logger)


__all__ = ["Curve", "SUPPORTED_TYPES", "intersect"]
