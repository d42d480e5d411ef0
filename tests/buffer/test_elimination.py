"""
Tests for the elimination kernels in pymatrix.buffer._elimination.

Validates:
    - determinant: sign tracking, exact zero on singular input, input untouched
    - gauss_jordan_divide: matches numpy.linalg.solve, singular divisor raises
    - reduce_rows: V @ A == echelon, pivot/deficient bookkeeping, rank
    - rebuild_pseudo_inverse: matches numpy.linalg.pinv, Penrose identities when rank-deficient
"""

import numpy as np
import pytest

from pymatrix.buffer._elimination import (
    determinant,
    eliminate_column,
    gauss_jordan_divide,
    pivot_row,
    rebuild_pseudo_inverse,
    reduce_rows,
    swap_rows,
)
from pymatrix.core.exceptions import SingularMatrixError


# ═══════════════════════════════════════════════════════════════════════
# Row primitives
# ═══════════════════════════════════════════════════════════════════════


class TestRowPrimitives:

    def test_swap_rows(self):
        a = np.array([[1.0, 2.0], [3.0, 4.0]])
        swap_rows(a, 0, 1)
        np.testing.assert_array_equal(a, [[3.0, 4.0], [1.0, 2.0]])

    def test_pivot_row_picks_largest_magnitude(self):
        assert pivot_row(np.array([1.0, -5.0, 3.0]), 0) == (1, 5.0)

    def test_pivot_row_respects_start(self):
        assert pivot_row(np.array([9.0, -5.0, 3.0]), 2) == (2, 3.0)

    def test_pivot_row_tie_goes_to_first(self):
        assert pivot_row(np.array([2.0, -2.0]), 0)[0] == 0

    def test_eliminate_column(self):
        a = np.array([[1.0, 2.0], [3.0, 4.0]])
        eliminate_column(a, np.array([0.0, 3.0]), 0)
        np.testing.assert_array_equal(a, [[1.0, 2.0], [0.0, -2.0]])


# ═══════════════════════════════════════════════════════════════════════
# Determinant
# ═══════════════════════════════════════════════════════════════════════


class TestDeterminant:

    def test_two_by_two(self):
        assert determinant(np.array([[4.0, 3.0], [6.0, 3.0]])) == pytest.approx(-6.0)

    def test_one_by_one(self):
        assert determinant(np.array([[7.5]])) == 7.5

    def test_permutation_sign(self):
        p = np.array([[0.0, 1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 1.0]])
        assert determinant(p) == -1.0

    def test_singular_is_exact_zero(self):
        assert determinant(np.array([[0.0, 0.0], [1.0, 2.0]])) == 0.0
        assert determinant(np.array([[1.0, 2.0], [2.0, 4.0]])) == 0.0

    def test_input_untouched(self):
        a = np.array([[2.0, 1.0], [1.0, 3.0]])
        before = a.copy()
        determinant(a)
        np.testing.assert_array_equal(a, before)

    def test_integer_input_promoted(self):
        assert determinant(np.array([[4, 3], [6, 3]])) == pytest.approx(-6.0)

    def test_matches_numpy(self, rng):
        a = rng.standard_normal((6, 6))
        assert determinant(a) == pytest.approx(np.linalg.det(a), rel=1e-10)


# ═══════════════════════════════════════════════════════════════════════
# Gauss-Jordan division
# ═══════════════════════════════════════════════════════════════════════


class TestGaussJordanDivide:

    def test_matches_solve(self, rng):
        divisor = rng.standard_normal((5, 5)) + 5 * np.eye(5)
        rhs = rng.standard_normal((5, 3))
        expected = np.linalg.solve(divisor, rhs)
        gauss_jordan_divide(rhs, divisor)
        np.testing.assert_allclose(rhs, expected, rtol=1e-10, atol=1e-12)

    def test_returns_pivot_magnitudes(self):
        rhs = np.eye(2)
        pivots = gauss_jordan_divide(rhs, np.array([[2.0, 0.0], [0.0, -4.0]]))
        np.testing.assert_array_equal(pivots, [2.0, 4.0])

    def test_divisor_untouched(self, rng):
        divisor = rng.standard_normal((3, 3)) + 3 * np.eye(3)
        before = divisor.copy()
        gauss_jordan_divide(np.eye(3), divisor)
        np.testing.assert_array_equal(divisor, before)

    def test_singular_raises(self):
        with pytest.raises(SingularMatrixError) as exc_info:
            gauss_jordan_divide(np.eye(2), np.zeros((2, 2)))
        assert exc_info.value.rank == 0
        assert exc_info.value.expected_rank == 2
        assert exc_info.value.matrix_name == 'divisor'
        assert exc_info.value.condition_number == float('inf')

    def test_rank_one_divisor_raises(self):
        with pytest.raises(SingularMatrixError) as exc_info:
            gauss_jordan_divide(np.eye(2), np.array([[1.0, 2.0], [2.0, 4.0]]))
        assert exc_info.value.rank == 1


# ═══════════════════════════════════════════════════════════════════════
# Rank-revealing reduction and pseudo-inverse rebuild
# ═══════════════════════════════════════════════════════════════════════


class TestReduceRows:

    def test_transform_reproduces_echelon(self, rng):
        a = rng.standard_normal((4, 6))
        reduction = reduce_rows(a, 1e-12)
        np.testing.assert_allclose(reduction.transform @ a, reduction.echelon, atol=1e-10)

    def test_full_rank_bookkeeping(self, rng):
        a = rng.standard_normal((3, 5))
        reduction = reduce_rows(a, 1e-12)
        assert reduction.pivot_columns == (0, 1, 2)
        assert reduction.deficient_columns == ()
        assert reduction.processed == 3
        assert reduction.rank == 3

    def test_dependent_column_marked_deficient(self):
        a = np.array([[1.0, 2.0, 0.0], [2.0, 4.0, 1.0], [3.0, 6.0, 1.0]])
        reduction = reduce_rows(a, 1e-12)
        assert reduction.pivot_columns == (0, 2)
        assert reduction.deficient_columns == (1,)
        assert reduction.rank == 2

    def test_zero_matrix_has_rank_zero(self):
        reduction = reduce_rows(np.zeros((2, 3)), 0.0)
        assert reduction.rank == 0
        assert reduction.deficient_columns == (0, 1, 2)

    def test_threshold_is_inclusive(self):
        reduction = reduce_rows(np.array([[0.5]]), 0.5)
        assert reduction.rank == 0

    def test_input_untouched(self, rng):
        a = rng.standard_normal((3, 3))
        before = a.copy()
        reduce_rows(a, 0.0)
        np.testing.assert_array_equal(a, before)


class TestRebuildPseudoInverse:

    @pytest.mark.parametrize("shape", [(3, 3), (6, 3), (3, 6)])
    def test_full_rank_matches_numpy(self, rng, shape):
        a = rng.standard_normal(shape)
        pinv = rebuild_pseudo_inverse(a, reduce_rows(a, 1e-12))
        np.testing.assert_allclose(pinv, np.linalg.pinv(a), rtol=1e-8, atol=1e-10)

    def test_rank_deficient_satisfies_penrose_identities(self, rng):
        left = rng.standard_normal((5, 2))
        right = rng.standard_normal((2, 4))
        a = left @ right
        pinv = rebuild_pseudo_inverse(a, reduce_rows(a, 1e-10))
        np.testing.assert_allclose(a @ pinv @ a, a, atol=1e-8)
        np.testing.assert_allclose(pinv @ a @ pinv, pinv, atol=1e-8)
        np.testing.assert_allclose(a @ pinv, (a @ pinv).T, atol=1e-8)
        np.testing.assert_allclose(pinv @ a, (pinv @ a).T, atol=1e-8)

    def test_rank_zero_gives_zeros(self):
        a = np.zeros((2, 3))
        pinv = rebuild_pseudo_inverse(a, reduce_rows(a, 0.0))
        assert pinv.shape == (3, 2)
        assert not pinv.any()
