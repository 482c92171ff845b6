"""Capabilities shared by every shape and the common conic-backed intersections."""

from __future__ import annotations

import dataclasses
import logging
import math
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional, Protocol, Sequence, runtime_checkable

from ..conic import GeneralizedConic, intersect_conic_matrices
from ..errors import InvalidShapeError
from ..line_conic import intersect_line_with_conic_matrix
from ..logging_utils import apply_debug_logging
from ..tolerance import Point, Tolerance, resolve_tolerance

if TYPE_CHECKING:  # pragma: no cover
    from .line import InfiniteLine

logger = logging.getLogger(__name__)


def as_point(value: Sequence[float], label: str) -> Point:
    if len(value) != 2:
        raise InvalidShapeError(f"{label} must have two coordinates, got {value!r}")
    x, y = float(value[0]), float(value[1])
    if not (math.isfinite(x) and math.isfinite(y)):
        raise InvalidShapeError(f"{label} must be finite, got {value!r}")
    return x, y


@runtime_checkable
class ToGeneralizedConic(Protocol):
    def as_generalized_conic(self) -> GeneralizedConic:
        ...


@runtime_checkable
class PointMembership(Protocol):
    def is_point_on(self, point: Sequence[float], *, tol: Optional[Tolerance] = None) -> bool:
        ...


@runtime_checkable
class IntersectWithLine(Protocol):
    def intersect_with_infinite_line(self, line: "InfiniteLine", *, tol: Optional[Tolerance] = None) -> List[Point]:
        ...


def _on_both(point: Point, first: PointMembership, second: PointMembership, tol: Tolerance) -> bool:
    return first.is_point_on(point, tol=tol) and second.is_point_on(point, tol=tol)


def _shifted(points: List[Point], dx: float, dy: float) -> List[Point]:
    return [(x + dx, y + dy) for x, y in points]


class ConicShape(ABC):
    """Base for shapes that reduce to a :class:`GeneralizedConic`.

    Subclasses provide ``as_generalized_conic``, a closed-form
    ``is_point_on``, an ``anchor`` point and ``translated``.  Intersections
    move both operands so that the anchors sit near the origin, run once on
    the conic matrices there and shift the candidates back.  The candidates
    are then filtered through the native predicates of both operands, which
    rejects false positives of the matrix route.
    """

    @abstractmethod
    def as_generalized_conic(self) -> GeneralizedConic:
        ...

    @abstractmethod
    def is_point_on(self, point: Sequence[float], *, tol: Optional[Tolerance] = None) -> bool:
        ...

    @property
    @abstractmethod
    def anchor(self) -> Point:
        """A point the curve is built around, used as the local origin."""

    @abstractmethod
    def translated(self, dx: float, dy: float) -> "ConicShape":
        ...

    def intersect_with_infinite_line(self, line: "InfiniteLine", *, tol: Optional[Tolerance] = None) -> List[Point]:
        tolerance = resolve_tolerance(tol)
        ox, oy = line.get_closest_point_to_point(self.anchor)
        local = intersect_line_with_conic_matrix(
            self.translated(-ox, -oy).as_generalized_conic().as_matrix(),
            line.translated(-ox, -oy).get_triple(),
            tol=tolerance,
        )
        candidates = _shifted(local, ox, oy)
        points = [point for point in candidates if _on_both(point, self, line, tolerance)]
        return tolerance.select_distinct(points)

    def intersect_with(self, other, *, tol: Optional[Tolerance] = None) -> List[Point]:
        """Intersect with a line, another shape or a bare :class:`GeneralizedConic`."""

        from .line import InfiniteLine

        if isinstance(other, InfiniteLine):
            return self.intersect_with_infinite_line(other, tol=tol)
        tolerance = resolve_tolerance(tol)
        (x1, y1), (x2, y2) = self.anchor, other.anchor
        ox, oy = (x1 + x2) / 2.0, (y1 + y2) / 2.0
        local = intersect_conic_matrices(
            self.translated(-ox, -oy).as_generalized_conic().as_matrix(),
            other.translated(-ox, -oy).as_generalized_conic().as_matrix(),
            tol=tolerance,
        )
        candidates = _shifted(local, ox, oy)
        points = [point for point in candidates if _on_both(point, self, other, tolerance)]
        logger.debug("%d of %d candidate(s) lie on both curves", len(points), len(candidates))
        return tolerance.select_distinct(points)

    def intersect_with_circle(self, circle, *, tol: Optional[Tolerance] = None) -> List[Point]:
        return self.intersect_with(circle, tol=tol)

    def intersect_with_ellipse(self, ellipse, *, tol: Optional[Tolerance] = None) -> List[Point]:
        return self.intersect_with(ellipse, tol=tol)

    def intersect_with_parabola(self, parabola, *, tol: Optional[Tolerance] = None) -> List[Point]:
        return self.intersect_with(parabola, tol=tol)

    def intersect_with_generalized_conic(
        self, conic: GeneralizedConic, *, tol: Optional[Tolerance] = None
    ) -> List[Point]:
        return self.intersect_with(conic, tol=tol)

    def clone(self):
        return dataclasses.replace(self)


apply_debug_logging(
    globals(),
    logger=logger,
    skip=["as_point", "ToGeneralizedConic", "PointMembership", "IntersectWithLine"],
)


__all__ = ["ConicShape", "as_point", "IntersectWithLine", "PointMembership", "ToGeneralizedConic"]
