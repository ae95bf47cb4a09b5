"""Tests for determinant, inverse, rank, norms and solves."""

import math

import numpy as np
import pytest

from strided import eye, from_array, linalg, use_options, zeros
from strided.core.errors import (
    DimensionError,
    EmptyArrayError,
    InvalidParameterError,
    NonSquareMatrixError,
    SingularMatrixError,
)

SINGULAR_3X3 = [[1, 2, 3], [2, 4, 6], [1, 0, 1]]


class TestDet:
    def test_two_by_two(self):
        assert linalg.det(from_array([[1, 2], [3, 4]])) == -2.0

    def test_one_by_one(self):
        assert linalg.det([[5]]) == 5.0

    def test_empty(self):
        assert linalg.det(zeros((0, 0))) == 1.0

    def test_three_by_three(self):
        assert linalg.det([[6, 1, 1], [4, -2, 5], [2, 8, 7]]) == pytest.approx(-306.0)

    def test_identity(self):
        assert linalg.det(eye(4)) == pytest.approx(1.0)

    def test_row_swap_flips_sign(self):
        a = [[0.0, 1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 1.0]]
        assert linalg.det(a) == pytest.approx(-1.0)

    def test_singular(self):
        assert linalg.det(SINGULAR_3X3) == 0.0
        assert linalg.det([[0, 1, 2], [0, 3, 4], [0, 5, 6]]) == 0.0

    def test_matches_numpy(self):
        a = np.array([[2.0, -1.0, 0.0, 3.0], [1.0, 4.0, 2.0, 0.0], [0.0, 1.0, 5.0, 1.0], [3.0, 0.0, 1.0, 2.0]])
        assert linalg.det(from_array(a)) == pytest.approx(np.linalg.det(a))

    def test_non_square(self, matrix_2x3):
        with pytest.raises(NonSquareMatrixError):
            linalg.det(matrix_2x3)


class TestInv:
    @pytest.mark.parametrize(
        "data",
        [
            [[4.0]],
            [[4.0, 7.0], [2.0, 6.0]],
            [[6.0, 1.0, 1.0], [4.0, -2.0, 5.0], [2.0, 8.0, 7.0]],
        ],
    )
    def test_product_is_identity(self, data):
        a = from_array(data)
        n = a.shape[0]
        np.testing.assert_allclose(a.dot(linalg.inv(a)).to_numpy(), np.eye(n), atol=1e-12)
        np.testing.assert_allclose((linalg.inv(a) @ a).to_numpy(), np.eye(n), atol=1e-12)

    def test_alias(self):
        assert linalg.inverse is linalg.inv

    @pytest.mark.parametrize("data", [[[0.0]], [[1, 2], [2, 4]], SINGULAR_3X3])
    def test_singular(self, data):
        with pytest.raises(SingularMatrixError):
            linalg.inv(data)

    def test_empty(self):
        with pytest.raises(EmptyArrayError):
            linalg.inv(zeros((0, 0)))

    def test_integer_input_gives_float(self):
        out = linalg.inv(from_array([[2, 0], [0, 4]], dtype="int32"))
        assert out.to_list() == [[0.5, 0], [0, 0.25]]


class TestRank:
    @pytest.mark.parametrize(
        "data,expected",
        [
            ([[1, 2], [2, 4]], 1),
            ([[1, 0], [0, 1]], 2),
            (SINGULAR_3X3, 2),
            ([[1, 2, 3], [4, 5, 6]], 2),
            ([[0, 0, 0]], 0),
        ],
    )
    def test_rank(self, data, expected):
        assert linalg.rank(data) == expected

    def test_tolerance(self):
        a = [[1.0, 0.0], [0.0, 1e-8]]
        assert linalg.rank(a) == 2
        assert linalg.rank(a, tol=1e-6) == 1


def test_trace():
    assert linalg.trace([[1, 2], [3, 4]]) == 5.0
    with pytest.raises(NonSquareMatrixError):
        linalg.trace([[1, 2, 3]])


class TestNorm:
    def test_frobenius(self):
        assert linalg.norm([[1, -2], [3, 4]]) == pytest.approx(math.sqrt(30))

    def test_one_and_inf(self):
        a = [[1, -2], [3, 4]]
        assert linalg.norm(a, 1) == 6.0
        assert linalg.norm(a, math.inf) == 7.0

    def test_matches_numpy(self):
        a = np.array([[1.5, -2.0, 0.5], [3.0, 4.0, -1.0]])
        for order in ("fro", 1, np.inf):
            assert linalg.norm(from_array(a), order) == pytest.approx(np.linalg.norm(a, order))

    @pytest.mark.parametrize("order", [2, True, "nuc", -1])
    def test_unsupported(self, order):
        with pytest.raises(InvalidParameterError):
            linalg.norm([[1, 2]], order)

    def test_requires_matrix(self):
        with pytest.raises(DimensionError):
            linalg.norm(from_array([1, 2]))


class TestSolve:
    def test_vector(self):
        assert linalg.solve([[2, 1], [1, 1]], [3, 2]).to_list() == pytest.approx([1.0, 1.0])

    def test_matrix_rhs(self):
        a = np.array([[3.0, 2.0, -1.0], [2.0, -2.0, 4.0], [-1.0, 0.5, -1.0]])
        b = np.array([[1.0, 0.0], [-2.0, 1.0], [0.0, 2.0]])
        out = linalg.solve(from_array(a), from_array(b))
        assert out.shape == (3, 2)
        np.testing.assert_allclose(out.to_numpy(), np.linalg.solve(a, b), atol=1e-12)

    def test_needs_pivoting(self):
        x = linalg.solve([[0, 1], [1, 0]], [2, 3])
        assert x.to_list() == [3.0, 2.0]

    def test_rhs_mismatch(self):
        with pytest.raises(DimensionError):
            linalg.solve([[1, 0], [0, 1]], [1, 2, 3])

    def test_singular(self):
        with pytest.raises(SingularMatrixError):
            linalg.solve([[1, 2], [2, 4]], [1, 2])


class TestPredicates:
    def test_symmetric(self, spd_matrix, matrix_2x3):
        assert linalg.is_symmetric(spd_matrix)
        assert not linalg.is_symmetric([[1, 2], [3, 1]])
        assert not linalg.is_symmetric(matrix_2x3)

    def test_symmetric_tolerance(self):
        a = [[1.0, 1.05], [1.0, 1.0]]
        assert not linalg.is_symmetric(a)
        assert linalg.is_symmetric(a, tol=0.1)
        with use_options(epsilon=0.1):
            assert linalg.is_symmetric(a)

    def test_positive_definite(self, spd_matrix, matrix_2x3):
        assert linalg.is_positive_definite(spd_matrix)
        assert linalg.is_positive_definite(eye(3))
        assert not linalg.is_positive_definite([[1, 2], [2, 1]])
        assert not linalg.is_positive_definite([[2, 1], [0, 2]])
        assert not linalg.is_positive_definite(matrix_2x3)
