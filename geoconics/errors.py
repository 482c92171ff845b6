"""Exception types raised by the conic intersection engine."""

from __future__ import annotations

from typing import Optional


class ConicError(Exception):
    """Base class for every error raised by :mod:`geoconics`."""


class InvalidShapeError(ConicError, ValueError):
    """Raised when a shape is constructed from geometrically invalid parameters."""


class DegenerateConicError(ConicError, ValueError):
    """Raised when a matrix handed to the line splitter is not a line pair."""


class ConicComputationError(ConicError, RuntimeError):
    """Raised when a numerical routine breaks down on its input."""


class CoincidentConicsError(ConicError):
    """Raised when two conics describe the same curve.

    Their intersection is the whole curve, which cannot be reported as a
    finite list of points.
    """


class SceneError(ConicError, ValueError):
    """Raised for malformed scene descriptions."""

    def __init__(self, message: str, *, key: Optional[str] = None):
        self.key = key
        if key:
            message = f"[{key}] {message}"
        super().__init__(message)


__all__ = [
    "ConicError",
    "InvalidShapeError",
    "DegenerateConicError",
    "ConicComputationError",
    "CoincidentConicsError",
    "SceneError",
]
