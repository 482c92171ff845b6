import math

import pytest

from geoconics import Circle, GeneralizedConic, InfiniteLine, InvalidShapeError, Tolerance


def test_generalized_conic_of_circle():
    circle = Circle.from_center((1.0, -2.0), 3.0)

    conic = circle.as_generalized_conic()

    assert conic.coefficients == pytest.approx((1.0, 0.0, 1.0, -2.0, 4.0, -4.0))
    assert conic.is_point_on((4.0, -2.0))


def test_point_membership():
    circle = Circle.from_center((0.0, 0.0), 2.0)

    assert circle.is_point_on_circle((0.0, 2.0))
    assert circle.is_point_on((math.sqrt(2.0), -math.sqrt(2.0)))
    assert not circle.is_point_on((0.0, 2.0 + 1e-6))
    assert circle.is_point_on((0.0, 2.0 + 1e-6), tol=Tolerance(1e-5))


def test_closest_point_to_point():
    circle = Circle.from_center((1.0, 1.0), 2.0)

    assert circle.get_closest_point_to_point((4.0, 5.0)) == pytest.approx((2.2, 2.6))
    assert circle.get_closest_point_to_point((1.5, 1.0)) == pytest.approx((3.0, 1.0))


def test_closest_point_from_center_is_deterministic():
    circle = Circle.from_center((1.0, 1.0), 2.0)

    assert circle.get_closest_point_to_point((1.0, 1.0)) == pytest.approx((3.0, 1.0))


def test_line_through_center():
    circle = Circle.from_center((1.0, 1.0), 1.0)
    line = InfiniteLine((1.0, 1.0), (1.0, 0.0))

    points = sorted(circle.intersect_with_infinite_line(line))

    assert points == [pytest.approx((0.0, 1.0)), pytest.approx((2.0, 1.0))]


def test_tangent_and_missing_line():
    circle = Circle.from_center((0.0, 0.0), 1.0)

    tangent = InfiniteLine((0.0, 1.0), (1.0, 0.0))
    assert circle.intersect_with_infinite_line(tangent) == [pytest.approx((0.0, 1.0))]

    outside = InfiniteLine((0.0, 1.0 + 1e-6), (1.0, 0.0))
    assert circle.intersect_with_infinite_line(outside) == []


def test_circle_circle():
    first = Circle.from_center((0.0, 0.0), 1.0)
    second = Circle.from_center((1.0, 0.0), 1.0)

    points = sorted(first.intersect_with_circle(second))

    half_root = math.sqrt(3.0) / 2.0
    assert points == [pytest.approx((0.5, -half_root)), pytest.approx((0.5, half_root))]


def test_externally_tangent_circles():
    first = Circle.from_center((0.0, 0.0), 1.0)
    second = Circle.from_center((2.0, 0.0), 1.0)

    assert first.intersect_with(second) == [pytest.approx((1.0, 0.0), abs=1e-9)]


def test_concentric_circles_do_not_meet():
    first = Circle.from_center((0.0, 0.0), 1.0)
    second = Circle.from_center((0.0, 0.0), 2.0)

    assert first.intersect_with(second) == []


def test_circle_with_generalized_conic():
    circle = Circle.from_center((0.0, 0.0), 1.0)
    axes = GeneralizedConic(0.0, 1.0, 0.0, 0.0, 0.0, 0.0)

    points = sorted(circle.intersect_with_generalized_conic(axes))

    assert points == [
        pytest.approx((-1.0, 0.0), abs=1e-12),
        pytest.approx((0.0, -1.0), abs=1e-12),
        pytest.approx((0.0, 1.0), abs=1e-12),
        pytest.approx((1.0, 0.0), abs=1e-12),
    ]


def test_clone():
    circle = Circle.from_center((0.5, 0.5), 0.25)

    copy = circle.clone()

    assert copy == circle
    assert copy is not circle


@pytest.mark.parametrize("radius", [0.0, -1.0, math.inf, math.nan])
def test_invalid_radius(radius):
    with pytest.raises(InvalidShapeError):
        Circle.from_center((0.0, 0.0), radius)


def test_invalid_center():
    with pytest.raises(InvalidShapeError):
        Circle((0.0,), 1.0)


def test_translated_circle_keeps_radius():
    circle = Circle.from_center((1.0, -2.0), 3.0)

    moved = circle.translated(10.0, 5.0)

    assert moved == Circle.from_center((11.0, 3.0), 3.0)
    assert moved.anchor == (11.0, 3.0)
