import json

import pytest

from geoconics import (
    Circle,
    Ellipse,
    GeneralizedConic,
    InfiniteLine,
    Parabola,
    SceneError,
    intersect_scene,
    load_scene,
    read_scene,
    results_to_json,
)
from geoconics.scene import PairResult, build_shape


def sample_scene():
    return {
        "shapes": {
            "c": {"kind": "circle", "center": [0, 0], "radius": 1},
            "l": {"kind": "line", "point": [0, 0], "direction": [1, 0]},
            "far": {"kind": "circle", "center": [10, 0], "radius": 1},
        },
        "pairs": [["c", "l"], ["c", "far"]],
    }


def test_build_every_kind():
    assert isinstance(build_shape("l", {"kind": "line", "triple": [0, 1, -2]}), InfiniteLine)
    assert isinstance(build_shape("l", {"kind": "line", "through": [[0, 0], [1, 1]]}), InfiniteLine)
    assert isinstance(build_shape("c", {"kind": "circle", "center": [1, 2], "radius": 3}), Circle)
    ellipse = build_shape("e", {"kind": "ellipse", "center": [0, 0], "semimajor": 3, "semiminor": 2})
    assert isinstance(ellipse, Ellipse)
    assert ellipse.rotation == 0.0
    parabola = build_shape(
        "p",
        {
            "kind": "parabola",
            "focus": [0, 1],
            "directrix": {"kind": "line", "point": [0, -1], "direction": [1, 0]},
        },
    )
    assert isinstance(parabola, Parabola)
    assert parabola.focal_length == pytest.approx(1.0)
    conic = build_shape("q", {"kind": "conic", "coefficients": [0, 1, 0, 0, 0, -1]})
    assert conic == GeneralizedConic(0.0, 1.0, 0.0, 0.0, 0.0, -1.0)


@pytest.mark.parametrize(
    "spec, fragment",
    [
        ({"kind": "hexagon"}, "unknown shape kind"),
        ({"kind": "circle", "center": [0, 0]}, "missing field 'radius'"),
        ({"kind": "circle", "center": [0, 0], "radius": "big"}, "must be a number"),
        ({"kind": "circle", "center": [0], "radius": 1}, "pair of numbers"),
        ({"kind": "circle", "center": [0, 0], "radius": -1}, "radius must be positive"),
        ({"kind": "conic", "coefficients": [1, 2, 3]}, "six numbers"),
        ({"kind": "line", "point": [0, 0], "direction": [0, 0]}, "nonzero"),
        ("circle", "must be an object"),
    ],
)
def test_invalid_shape_descriptions(spec, fragment):
    with pytest.raises(SceneError) as excinfo:
        build_shape("bad", spec)

    assert excinfo.value.key == "bad"
    assert str(excinfo.value).startswith("[bad]")
    assert fragment in str(excinfo.value)


def test_load_scene_keeps_listed_pairs():
    scene = load_scene(sample_scene())

    assert set(scene.shapes) == {"c", "l", "far"}
    assert scene.pairs == [("c", "l"), ("c", "far")]


def test_load_scene_defaults_to_all_pairs():
    data = sample_scene()
    del data["pairs"]

    scene = load_scene(data)

    assert scene.pairs == [("c", "l"), ("c", "far"), ("l", "far")]


@pytest.mark.parametrize(
    "data",
    [
        [],
        {"shapes": {}},
        {"shapes": {"c": {"kind": "circle", "center": [0, 0], "radius": 1}}, "pairs": "all"},
        {"shapes": {"c": {"kind": "circle", "center": [0, 0], "radius": 1}}, "pairs": [["c"]]},
        {"shapes": {"c": {"kind": "circle", "center": [0, 0], "radius": 1}}, "pairs": [["c", "d"]]},
    ],
)
def test_invalid_scenes(data):
    with pytest.raises(SceneError):
        load_scene(data)


def test_read_scene(tmp_path):
    path = tmp_path / "scene.json"
    path.write_text(json.dumps(sample_scene()), encoding="utf-8")

    scene = read_scene(path)

    assert scene.pairs == [("c", "l"), ("c", "far")]


def test_read_scene_rejects_invalid_json(tmp_path):
    path = tmp_path / "scene.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SceneError, match="invalid JSON"):
        read_scene(path)


def test_intersect_scene():
    results = intersect_scene(load_scene(sample_scene()))

    assert [(r.first, r.second) for r in results] == [("c", "l"), ("c", "far")]
    assert all(r.ok for r in results)
    assert sorted(results[0].points) == [pytest.approx((-1.0, 0.0)), pytest.approx((1.0, 0.0))]
    assert results[1].points == []


def test_intersect_scene_reports_failures_per_pair():
    data = {
        "shapes": {
            "a": {"kind": "circle", "center": [0, 0], "radius": 1},
            "b": {"kind": "conic", "coefficients": [2, 0, 2, 0, 0, -2]},
            "l": {"kind": "line", "point": [0, 0], "direction": [0, 1]},
        },
        "pairs": [["a", "b"], ["a", "l"]],
    }

    first, second = intersect_scene(load_scene(data))

    assert not first.ok
    assert first.points == []
    assert first.error.startswith("CoincidentConicsError")
    assert second.ok
    assert len(second.points) == 2


def test_results_to_json():
    results = [
        PairResult("a", "b", points=[(1.0, 2.0)]),
        PairResult("a", "c", error="CoincidentConicsError: same curve"),
    ]

    payload = json.loads(results_to_json(results, epsilon=1e-8))

    assert payload == {
        "results": [
            {"pair": ["a", "b"], "points": [[1.0, 2.0]]},
            {"pair": ["a", "c"], "points": [], "error": "CoincidentConicsError: same curve"},
        ],
        "epsilon": 1e-8,
    }
    assert "epsilon" not in json.loads(results_to_json(results))
