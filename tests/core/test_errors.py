"""Tests for the exception taxonomy."""

import pytest

from strided.core.errors import (
    DimensionError,
    DivisionByZeroError,
    EmptyArrayError,
    IndexOutOfBoundsError,
    InvalidParameterError,
    MathematicalError,
    NonSquareMatrixError,
    NotPositiveDefiniteError,
    NumericalOverflowError,
    SingularMatrixError,
)


class TestDimensionError:
    def test_message_with_shapes(self):
        err = DimensionError("shapes differ", expected_shape=(2, 2), actual_shape=(3,), operation="add")
        assert str(err) == "add: shapes differ. Expected shape: [2, 2], got: [3]"
        assert err.expected_shape == (2, 2)
        assert err.actual_shape == (3,)
        assert err.operation == "add"

    def test_message_without_shapes(self):
        assert str(DimensionError("bad")) == "bad"

    def test_is_value_error(self):
        assert issubclass(DimensionError, ValueError)


class TestInvalidParameterError:
    def test_fields(self):
        err = InvalidParameterError("step", "non-zero integer", 0, "zero step")
        assert err.parameter_name == "step"
        assert err.expected == "non-zero integer"
        assert err.actual_value == 0
        assert "zero step" in str(err)

    @pytest.mark.parametrize(
        "factory,expected",
        [
            (InvalidParameterError.non_finite, "finite number"),
            (InvalidParameterError.negative, "non-negative number"),
            (InvalidParameterError.non_integer, "integer"),
        ],
    )
    def test_constructors(self, factory, expected):
        err = factory("x", 1.5)
        assert isinstance(err, InvalidParameterError)
        assert err.expected == expected
        assert "'x'" in str(err)


def test_index_out_of_bounds():
    err = IndexOutOfBoundsError(5, 3, axis=1)
    assert isinstance(err, IndexError)
    assert err.index == 5
    assert err.axis_length == 3
    assert "axis 1" in str(err)


def test_empty_array():
    err = EmptyArrayError("mean")
    assert err.operation == "mean"
    assert "mean" in str(err)


class TestMathematicalError:
    def test_detailed_message(self):
        err = MathematicalError("bad thing", "sqrt", {"value": -1.0})
        detail = err.detailed_message()
        assert detail.splitlines()[0] == "bad thing"
        assert "Operation: sqrt" in detail
        assert "value=-1.0" in detail

    def test_detailed_message_minimal(self):
        assert MathematicalError("only message").detailed_message() == "only message"

    @pytest.mark.parametrize(
        "err",
        [
            SingularMatrixError(matrix_shape=(2, 2)),
            NonSquareMatrixError((2, 3), "det"),
            NotPositiveDefiniteError(),
            NumericalOverflowError("cast", 300, "int8"),
            DivisionByZeroError("divide"),
        ],
    )
    def test_subclasses(self, err):
        assert isinstance(err, MathematicalError)
        assert isinstance(err, ArithmeticError)

    def test_builtin_compatibility(self):
        assert isinstance(NumericalOverflowError("cast", 1e300), OverflowError)
        assert isinstance(DivisionByZeroError(), ZeroDivisionError)

    def test_non_square_fields(self):
        err = NonSquareMatrixError((2, 3), "inv")
        assert err.shape == (2, 3)
        assert err.operation == "inv"
        assert "[2, 3]" in str(err)

    def test_singular_context(self):
        err = SingularMatrixError("singular", operation="inv", matrix_shape=(3, 3))
        assert err.context == {"shape": (3, 3)}
