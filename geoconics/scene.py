"""JSON scene descriptions: named curves plus the pairs to intersect.

Example::

    {
      "shapes": {
        "c": {"kind": "circle", "center": [0, 0], "radius": 1},
        "l": {"kind": "line", "point": [0, 0], "direction": [1, 1]}
      },
      "pairs": [["c", "l"]]
    }

Lines may also be given as ``{"kind": "line", "triple": [l1, l2, l3]}`` or
``{"kind": "line", "through": [[x0, y0], [x1, y1]]}``.  When ``pairs`` is
omitted every unordered pair of shapes is intersected.
"""

from __future__ import annotations

import itertools
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from .conic import GeneralizedConic
from .errors import ConicError, SceneError
from .intersect import Curve, intersect
from .shapes import Circle, Ellipse, InfiniteLine, Parabola
from .tolerance import Point, Tolerance, resolve_tolerance

logger = logging.getLogger(__name__)


@dataclass
class Scene:
    shapes: Dict[str, Curve]
    pairs: List[Tuple[str, str]]


@dataclass
class PairResult:
    first: str
    second: str
    points: List[Point] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "pair": [self.first, self.second],
            "points": [[x, y] for x, y in self.points],
        }
        if self.error is not None:
            data["error"] = self.error
        return data


def _require(spec: Mapping[str, Any], key: str, name: str) -> Any:
    if key not in spec:
        raise SceneError(f"missing field '{key}'", key=name)
    return spec[key]


def _number(value: Any, key: str, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SceneError(f"field '{key}' must be a number, got {value!r}", key=name)
    return float(value)


def _point(value: Any, key: str, name: str) -> Point:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise SceneError(f"field '{key}' must be a pair of numbers, got {value!r}", key=name)
    return _number(value[0], key, name), _number(value[1], key, name)


def _build_line(spec: Mapping[str, Any], name: str) -> InfiniteLine:
    if "triple" in spec:
        triple = spec["triple"]
        if not isinstance(triple, (list, tuple)) or len(triple) != 3:
            raise SceneError(f"field 'triple' must hold three numbers, got {triple!r}", key=name)
        return InfiniteLine.from_triple([_number(value, "triple", name) for value in triple])
    if "through" in spec:
        through = spec["through"]
        if not isinstance(through, (list, tuple)) or len(through) != 2:
            raise SceneError("field 'through' must hold two points", key=name)
        return InfiniteLine.from_points(_point(through[0], "through", name), _point(through[1], "through", name))
    return InfiniteLine(
        _point(_require(spec, "point", name), "point", name),
        _point(_require(spec, "direction", name), "direction", name),
    )


def _build_circle(spec: Mapping[str, Any], name: str) -> Circle:
    return Circle.from_center(
        _point(_require(spec, "center", name), "center", name),
        _number(_require(spec, "radius", name), "radius", name),
    )


def _build_ellipse(spec: Mapping[str, Any], name: str) -> Ellipse:
    return Ellipse(
        _point(_require(spec, "center", name), "center", name),
        _number(_require(spec, "semimajor", name), "semimajor", name),
        _number(_require(spec, "semiminor", name), "semiminor", name),
        _number(spec.get("rotation", 0.0), "rotation", name),
    )


def _build_parabola(spec: Mapping[str, Any], name: str) -> Parabola:
    directrix = _require(spec, "directrix", name)
    if not isinstance(directrix, Mapping):
        raise SceneError("field 'directrix' must be a line description", key=name)
    return Parabola(
        _point(_require(spec, "focus", name), "focus", name),
        _build_line(directrix, name),
    )


def _build_conic(spec: Mapping[str, Any], name: str) -> GeneralizedConic:
    coefficients = _require(spec, "coefficients", name)
    if not isinstance(coefficients, (list, tuple)) or len(coefficients) != 6:
        raise SceneError("field 'coefficients' must hold six numbers A..F", key=name)
    return GeneralizedConic(*(_number(value, "coefficients", name) for value in coefficients))


_BUILDERS: Dict[str, Callable[[Mapping[str, Any], str], Curve]] = {
    "line": _build_line,
    "circle": _build_circle,
    "ellipse": _build_ellipse,
    "parabola": _build_parabola,
    "conic": _build_conic,
}


def build_shape(name: str, spec: Any) -> Curve:
    if not isinstance(spec, Mapping):
        raise SceneError("shape description must be an object", key=name)
    kind = spec.get("kind")
    builder = _BUILDERS.get(kind) if isinstance(kind, str) else None
    if builder is None:
        raise SceneError(f"unknown shape kind {kind!r}; expected one of {sorted(_BUILDERS)}", key=name)
    try:
        return builder(spec, name)
    except SceneError:
        raise
    except ConicError as exc:
        raise SceneError(str(exc), key=name) from exc


def load_scene(data: Any) -> Scene:
    if not isinstance(data, Mapping):
        raise SceneError("scene must be a JSON object")
    raw_shapes = data.get("shapes")
    if not isinstance(raw_shapes, Mapping) or not raw_shapes:
        raise SceneError("scene needs a non-empty 'shapes' object")
    shapes = {str(name): build_shape(str(name), spec) for name, spec in raw_shapes.items()}

    raw_pairs = data.get("pairs")
    if raw_pairs is None:
        pairs = list(itertools.combinations(shapes, 2))
    else:
        if not isinstance(raw_pairs, list):
            raise SceneError("'pairs' must be a list of [name, name] entries")
        pairs = []
        for entry in raw_pairs:
            if not isinstance(entry, (list, tuple)) or len(entry) != 2:
                raise SceneError(f"invalid pair entry {entry!r}")
            first, second = str(entry[0]), str(entry[1])
            for name in (first, second):
                if name not in shapes:
                    raise SceneError(f"pair refers to unknown shape '{name}'")
            pairs.append((first, second))
    logger.debug("Loaded scene with %d shape(s) and %d pair(s)", len(shapes), len(pairs))
    return Scene(shapes=shapes, pairs=pairs)


def read_scene(path: Union[str, Path]) -> Scene:
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SceneError(f"invalid JSON in {path}: {exc}") from exc
    return load_scene(data)


def intersect_scene(scene: Scene, *, tol: Optional[Tolerance] = None) -> List[PairResult]:
    """Intersect every listed pair; a failing pair is reported, not raised."""

    tolerance = resolve_tolerance(tol)
    results: List[PairResult] = []
    for first, second in scene.pairs:
        try:
            points = intersect(scene.shapes[first], scene.shapes[second], tol=tolerance)
        except ConicError as exc:
            logger.warning("Intersection of %s and %s failed: %s", first, second, exc)
            results.append(PairResult(first, second, error=f"{type(exc).__name__}: {exc}"))
            continue
        results.append(PairResult(first, second, points=points))
    return results


def results_to_json(results: List[PairResult], *, epsilon: Optional[float] = None) -> str:
    payload: Dict[str, Any] = {"results": [result.to_dict() for result in results]}
    if epsilon is not None:
        payload["epsilon"] = epsilon
    return json.dumps(payload, indent=2)


__all__ = [
    "PairResult",
    "Scene",
    "build_shape",
    "intersect_scene",
    "load_scene",
    "read_scene",
    "results_to_json",
]
