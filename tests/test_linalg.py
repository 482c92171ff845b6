import numpy as np
import pytest

from geoconics.linalg import (
    adjugate,
    conic_anchor,
    conic_in_frame,
    conic_length_scale,
    first_nonvanishing_element,
    homogeneous_lines_equal,
    is_line_at_infinity,
    largest_abs_element,
    line_in_frame,
    matrix_rank,
    point_from_frame,
    real_eigenvalues,
    skew,
    to_affine,
    translation_frame,
)


def test_skew_matches_cross_product():
    a = np.array([1.0, -2.0, 3.0])
    b = np.array([0.5, 4.0, -1.0])

    assert skew(a) @ b == pytest.approx(np.cross(a, b))
    assert skew(a).T == pytest.approx(-skew(a))


def test_adjugate_of_invertible_matrix():
    m = np.array([[2.0, 1.0, 0.0], [1.0, 3.0, -1.0], [0.5, 0.0, 4.0]])

    adj = adjugate(m)

    assert adj @ m == pytest.approx(np.linalg.det(m) * np.eye(3))
    assert adj == pytest.approx(np.linalg.det(m) * np.linalg.inv(m))


def test_adjugate_of_singular_matrix():
    adj = adjugate(np.diag([1.0, 2.0, 0.0]))

    assert adj == pytest.approx(np.diag([0.0, 0.0, 2.0]))


def test_adjugate_rejects_wrong_shape():
    with pytest.raises(ValueError):
        adjugate(np.eye(2))


def test_matrix_rank():
    g = np.array([1.0, 0.0, -1.0])
    h = np.array([0.0, 1.0, 2.0])

    assert matrix_rank(np.eye(3)) == 3
    assert matrix_rank(np.outer(g, h) + np.outer(h, g)) == 2
    assert matrix_rank(np.outer(g, g)) == 1
    assert matrix_rank(np.zeros((3, 3))) == 0


def test_real_eigenvalues_sorted():
    assert real_eigenvalues(np.diag([3.0, 1.0, 2.0])) == pytest.approx([1.0, 2.0, 3.0])


def test_real_eigenvalues_drop_complex_pairs():
    rotation = np.array([[0.0, -1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 2.0]])

    assert real_eigenvalues(rotation) == pytest.approx([2.0])


def test_real_eigenvalues_merge_multiple_root():
    jordan = np.array([[1.0, 1.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 5.0]])
    perturbed = jordan + np.array([[0.0, 0.0, 0.0], [1e-14, 0.0, 0.0], [0.0, 0.0, 0.0]])

    assert real_eigenvalues(jordan) == pytest.approx([1.0, 5.0])
    assert real_eigenvalues(perturbed) == pytest.approx([1.0, 5.0], abs=1e-12)


def test_largest_and_first_nonvanishing_element():
    m = np.array([[0.0, 1e-14, 0.0], [0.0, 0.0, -3.0], [2.0, 0.0, 0.0]])

    assert largest_abs_element(m) == (1, 2, -3.0)
    assert first_nonvanishing_element(m) == (1, 2, -3.0)
    assert first_nonvanishing_element(m + np.diag([0.0, 0.5, 0.0])) == (1, 1, 0.5)
    assert first_nonvanishing_element(np.zeros((3, 3))) is None


def test_to_affine():
    assert to_affine([2.0, 4.0, 2.0]) == pytest.approx((1.0, 2.0))
    assert to_affine([-3.0, 6.0, -3.0]) == pytest.approx((1.0, -2.0))
    assert to_affine([1.0, 2.0, 0.0]) is None
    assert to_affine([0.0, 0.0, 0.0]) is None


def test_homogeneous_line_helpers():
    assert homogeneous_lines_equal([1.0, 2.0, 3.0], [-2.0, -4.0, -6.0])
    assert not homogeneous_lines_equal([1.0, 2.0, 3.0], [1.0, 2.0, 4.0])
    assert not homogeneous_lines_equal([1.0, 0.0, 0.0], [0.0, 1.0, 0.0])
    assert is_line_at_infinity([0.0, 0.0, 5.0])
    assert not is_line_at_infinity([0.0, 1.0, 5.0])


def test_translation_frame_maps_local_points_to_world():
    frame = translation_frame((2.0, 3.0), 5.0)

    assert point_from_frame((1.0, -1.0), frame) == pytest.approx((7.0, -2.0))
    assert point_from_frame((0.0, 0.0), frame) == pytest.approx((2.0, 3.0))


def test_conic_and_line_in_frame():
    circle = np.array([[1.0, 0.0, -2.0], [0.0, 1.0, -3.0], [-2.0, -3.0, 4.0 + 9.0 - 25.0]])
    frame = translation_frame((2.0, 3.0))

    assert np.allclose(conic_in_frame(circle, frame), np.diag([1.0, 1.0, -25.0]))
    assert np.allclose(line_in_frame([1.0, 0.0, -2.0], frame), [1.0, 0.0, 0.0])
    assert np.allclose(
        conic_in_frame(circle, translation_frame((2.0, 3.0), 5.0)),
        np.diag([25.0, 25.0, -25.0]),
    )


def test_conic_anchor_of_central_conics():
    circle = np.array([[1.0, 0.0, 4.0], [0.0, 1.0, -7.0], [4.0, -7.0, 16.0 + 49.0 - 1.0]])
    hyperbola = np.array([[0.0, 0.5, -1.5], [0.5, 0.0, -1.0], [-1.5, -1.0, 5.0]])

    assert conic_anchor(circle) == pytest.approx((-4.0, 7.0))
    # (x - 2)(y - 3) = 1
    assert conic_anchor(hyperbola) == pytest.approx((2.0, 3.0))


def test_conic_anchor_of_parabola_is_its_vertex():
    # (x - 5)^2 = 4 (y - 3)
    parabola = np.array([[1.0, 0.0, -5.0], [0.0, 0.0, -2.0], [-5.0, -2.0, 37.0]])

    assert conic_anchor(parabola) == pytest.approx((5.0, 3.0))


def test_conic_anchor_of_lines():
    parallel = np.array([[0.0, 0.0, 0.0], [0.0, 1.0, -4.0], [0.0, -4.0, 15.0]])
    single = np.array([[0.0, 0.0, 0.5], [0.0, 0.0, 0.0], [0.5, 0.0, -3.0]])

    # (y - 3)(y - 5) = 0
    assert conic_anchor(parallel) == pytest.approx((0.0, 4.0))
    assert conic_anchor(single) == pytest.approx((3.0, 0.0))
    assert conic_anchor(np.zeros((3, 3))) == (0.0, 0.0)


def test_conic_length_scale():
    assert conic_length_scale(np.diag([1.0, 1.0, -9.0])) == pytest.approx(3.0)
    assert conic_length_scale(np.diag([4.0, 4.0, -4.0])) == pytest.approx(1.0)
    assert conic_length_scale(np.diag([1.0, 1.0, 0.0])) == 1.0
    assert conic_length_scale(np.zeros((3, 3))) == 1.0
