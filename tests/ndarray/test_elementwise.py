"""Tests for elementwise kernels, broadcasting arithmetic and reductions."""

import numpy as np
import pytest

from strided import DType, arange, from_array, zeros
from strided.core.errors import (
    DimensionError,
    DivisionByZeroError,
    EmptyArrayError,
    InvalidParameterError,
    MathematicalError,
    NumericalOverflowError,
)
from strided.ndarray import elementwise as ew


class TestApply:
    def test_unary_keeps_shape_and_dtype(self, matrix_2x3):
        out = ew.apply_unary(matrix_2x3, lambda v: v * 2, "double")
        assert out.shape == (2, 3)
        assert out.dtype is DType.FLOAT64
        assert out.to_list() == [[2, 4, 6], [8, 10, 12]]

    def test_unary_scalar(self):
        assert ew.apply_unary(4, np.sqrt, "sqrt") == 2.0

    def test_unary_domain(self):
        with pytest.raises(MathematicalError, match="negative"):
            ew.apply_unary(from_array([1, -1]), np.sqrt, "sqrt", lambda v: v >= 0, "Square root of negative number")

    def test_unary_nan_result(self):
        with pytest.raises(MathematicalError, match="undefined"):
            ew.apply_unary(from_array([1.0]), lambda v: v * np.nan, "bad")

    def test_unary_integer_truncates(self):
        out = ew.apply_unary(from_array([3, 5], dtype="int32"), lambda v: v / 2, "half")
        assert out.dtype is DType.INT32
        assert out.to_list() == [1, 2]

    def test_binary_scalars(self):
        assert ew.apply_binary(2, 3, np.add, "add") == 5.0

    def test_input_untouched(self):
        a = from_array([1, 2, 3])
        ew.add(a, 1)
        assert a.to_list() == [1, 2, 3]

    def test_rejects_non_finite_scalar(self):
        with pytest.raises(InvalidParameterError):
            ew.add(from_array([1]), float("nan"))

    def test_rejects_unknown_operand(self):
        with pytest.raises(InvalidParameterError):
            ew.add(from_array([1]), "one")


class TestArithmetic:
    def test_broadcast_add(self):
        a = from_array([[1, 2], [3, 4]])
        b = from_array([10, 20])
        assert ew.add(a, b).to_list() == [[11, 22], [13, 24]]

    def test_column_row_broadcast(self):
        col = from_array([[1], [2], [3]])
        row = from_array([10, 20])
        assert (col + row).to_list() == [[11, 21], [12, 22], [13, 23]]

    def test_incompatible_shapes(self):
        with pytest.raises(DimensionError, match="broadcast"):
            ew.add(zeros((2, 3)), zeros((4,)))

    def test_operators(self):
        a = from_array([2, 4, 6])
        assert (a - 1).to_list() == [1, 3, 5]
        assert (1 - a).to_list() == [-1, -3, -5]
        assert (a * a).to_list() == [4, 16, 36]
        assert (a / 2).to_list() == [1, 2, 3]
        assert (12 / a).to_list() == [6, 3, 2]
        assert (a // 4).to_list() == [0, 1, 1]
        assert (a % 4).to_list() == [2, 0, 2]
        assert (a**2).to_list() == [4, 16, 36]
        assert (2**a).to_list() == [4, 16, 64]
        assert (-a).to_list() == [-2, -4, -6]
        assert abs(from_array([-1, 2])).to_list() == [1, 2]

    def test_mod_sign_of_divisor(self):
        assert ew.mod(from_array([-7, 7]), 3).to_list() == [2, 1]
        assert ew.mod(7, -3) == -2.0

    def test_division_by_zero(self):
        with pytest.raises(DivisionByZeroError):
            ew.divide(from_array([1, 2]), from_array([1, 0]))
        with pytest.raises(ZeroDivisionError):
            from_array([1.0]) / 0

    def test_floor_divide_by_zero(self):
        with pytest.raises(DivisionByZeroError):
            ew.floor_divide(from_array([1]), 0)

    def test_power_overflow(self):
        with pytest.raises(NumericalOverflowError):
            ew.power(from_array([10.0]), 400)

    def test_integer_overflow(self):
        a = from_array([100], dtype="int8")
        with pytest.raises(NumericalOverflowError):
            a * 2

    def test_minimum_maximum(self):
        a = from_array([1, 5, 3])
        b = from_array([4, 2, 3])
        assert ew.minimum(a, b).to_list() == [1, 2, 3]
        assert ew.maximum(a, b).to_list() == [4, 5, 3]

    def test_negative_unsigned_overflows(self):
        with pytest.raises(NumericalOverflowError):
            ew.negative(from_array([1], dtype="uint8"))


class TestDtypePolicy:
    def test_array_scalar_keeps_dtype(self):
        out = from_array([1, 2], dtype="int16") * 1.5
        assert out.dtype is DType.INT16
        assert out.to_list() == [1, 3]

    def test_two_arrays_promote(self):
        a = from_array([1], dtype="int8")
        b = from_array([1], dtype="float32")
        assert (a + b).dtype is DType.FLOAT32

    def test_signed_unsigned(self):
        a = from_array([1], dtype="uint8")
        b = from_array([1], dtype="int8")
        assert (a + b).dtype is DType.INT16

    def test_promotion_outside_supported_set(self):
        a = from_array([1], dtype="uint32")
        b = from_array([1], dtype="int32")
        assert (a + b).dtype is DType.FLOAT64

    def test_list_operand(self):
        out = from_array([1, 2], dtype="int32") + [1, 1]
        assert out.dtype is DType.FLOAT64


class TestReduce:
    def test_total(self, matrix_2x3):
        assert matrix_2x3.sum() == 21.0
        assert matrix_2x3.prod() == 720.0
        assert matrix_2x3.mean() == 3.5
        assert matrix_2x3.min() == 1
        assert matrix_2x3.max() == 6

    def test_integer_total_is_int(self):
        total = from_array([1, 2, 3], dtype="int32").sum()
        assert total == 6
        assert type(total) is int

    def test_along_axis(self, matrix_2x3):
        assert matrix_2x3.sum(axis=0).to_list() == [5, 7, 9]
        assert matrix_2x3.sum(axis=1).to_list() == [6, 15]
        assert matrix_2x3.max(axis=-1).to_list() == [3, 6]

    def test_mean_is_float(self):
        out = from_array([[1, 2], [3, 4]], dtype="int32").mean(axis=0)
        assert out.dtype is DType.FLOAT64
        assert out.to_list() == [2.0, 3.0]

    def test_var_std(self):
        a = from_array([1, 2, 3, 4])
        assert a.var() == pytest.approx(1.25)
        assert a.var(ddof=1) == pytest.approx(5 / 3)
        assert a.std() == pytest.approx(np.sqrt(1.25))

    def test_ddof_too_large(self):
        with pytest.raises(InvalidParameterError):
            from_array([1, 2]).var(ddof=2)

    def test_on_view(self, cube):
        view = cube.transpose(2, 0, 1)
        assert view.sum(axis=0).to_list() == cube.to_numpy().sum(axis=2).tolist()

    def test_empty(self):
        empty = zeros((0,))
        assert empty.sum() == 0
        assert empty.prod() == 1
        with pytest.raises(EmptyArrayError):
            empty.mean()
        with pytest.raises(EmptyArrayError):
            empty.max()

    def test_unknown_kind(self):
        with pytest.raises(InvalidParameterError):
            ew.reduce(arange(3), "median")

    def test_bad_axis(self, matrix_2x3):
        with pytest.raises(InvalidParameterError):
            matrix_2x3.sum(axis=2)


class TestSelectionHelpers:
    def test_where(self):
        cond = from_array([1, 0, 1])
        out = ew.where(cond, from_array([1, 2, 3]), 0)
        assert out.to_list() == [1, 0, 3]

    def test_where_broadcasts(self):
        cond = from_array([[1], [0]])
        out = ew.where(cond, from_array([1, 2]), from_array([7, 8]))
        assert out.to_list() == [[1, 2], [7, 8]]

    def test_nonzero(self):
        rows, cols = ew.nonzero(from_array([[0, 3], [4, 0]]))
        assert rows.dtype is DType.INT32
        assert rows.to_list() == [0, 1]
        assert cols.to_list() == [1, 0]

    def test_count_nonzero(self):
        a = from_array([[0, 1, 2], [0, 0, 3]])
        assert ew.count_nonzero(a) == 3
        assert ew.count_nonzero(a, axis=0).to_list() == [0, 1, 2]

    def test_any_all(self):
        a = from_array([[0, 1], [0, 0]])
        assert ew.any_(a) is True
        assert ew.all_(a) is False
        assert ew.any_(a, axis=1).to_list() == [1, 0]
        assert ew.all_(from_array([[1, 1], [0, 1]]), axis=0).dtype is DType.UINT8
