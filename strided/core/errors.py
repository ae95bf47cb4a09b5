"""Exception taxonomy for the array engine.

Every error raised by the engine derives from one of the built-in exception
types, so ``except ValueError`` and ``except IndexError`` handlers written
against NumPy-style code keep working.
"""

from __future__ import annotations

__all__ = [
    "DimensionError",
    "DivisionByZeroError",
    "EmptyArrayError",
    "IndexOutOfBoundsError",
    "InvalidParameterError",
    "MathematicalError",
    "NonSquareMatrixError",
    "NotPositiveDefiniteError",
    "NumericalOverflowError",
    "SingularMatrixError",
]


def _shape_str(shape):
    if shape is None:
        return "unknown"
    return "[" + ", ".join(str(int(d)) for d in shape) + "]"


class DimensionError(ValueError):
    """Raised when array shapes are incompatible with an operation.

    Parameters
    ----------
    message : str
        Description of the incompatibility.
    expected_shape : sequence of int, optional
        Shape the operation required.
    actual_shape : sequence of int, optional
        Shape that was supplied.
    operation : str, optional
        Name of the operation that failed.
    """

    def __init__(self, message, expected_shape=None, actual_shape=None, operation=None):
        self.expected_shape = tuple(expected_shape) if expected_shape is not None else None
        self.actual_shape = tuple(actual_shape) if actual_shape is not None else None
        self.operation = operation

        full = f"{operation}: {message}" if operation else message
        if expected_shape is not None or actual_shape is not None:
            full += f". Expected shape: {_shape_str(expected_shape)}, got: {_shape_str(actual_shape)}"
        super().__init__(full)


class InvalidParameterError(ValueError):
    """Raised when a parameter has the wrong type, range or value.

    Parameters
    ----------
    parameter_name : str
        Name of the offending parameter.
    expected : str
        Human readable description of what was expected.
    actual_value : object
        The value that was supplied.
    additional_info : str, optional
        Extra context appended to the message.
    """

    def __init__(self, parameter_name, expected, actual_value, additional_info=None):
        self.parameter_name = parameter_name
        self.expected = expected
        self.actual_value = actual_value
        self.additional_info = additional_info

        message = f"Invalid parameter '{parameter_name}': expected {expected}, got {actual_value!r}"
        if additional_info:
            message += f". {additional_info}"
        super().__init__(message)

    @classmethod
    def non_finite(cls, parameter_name, value):
        """Build the error for a NaN or infinite value."""
        return cls(parameter_name, "finite number", value)

    @classmethod
    def negative(cls, parameter_name, value):
        """Build the error for a value that must be non-negative."""
        return cls(parameter_name, "non-negative number", value)

    @classmethod
    def non_integer(cls, parameter_name, value):
        """Build the error for a value that must be an integer."""
        return cls(parameter_name, "integer", value)


class IndexOutOfBoundsError(IndexError):
    """Raised when an index falls outside an axis.

    Parameters
    ----------
    index : int
        The index as supplied by the caller.
    axis_length : int
        Length of the axis being indexed.
    axis : int, optional
        Position of the axis.
    """

    def __init__(self, index, axis_length, axis=None):
        self.index = index
        self.axis_length = axis_length
        self.axis = axis

        where = f" for axis {axis}" if axis is not None else ""
        super().__init__(f"Index {index} is out of bounds{where} with size {axis_length}")


class EmptyArrayError(ValueError):
    """Raised when an operation needs at least one element."""

    def __init__(self, operation):
        self.operation = operation
        super().__init__(f"Cannot perform {operation} on an empty array")


class MathematicalError(ArithmeticError):
    """Raised when an operation is mathematically undefined.

    Parameters
    ----------
    message : str
        Description of the failure.
    operation : str, optional
        Name of the operation that failed.
    context : dict, optional
        Values that help diagnose the failure.
    """

    def __init__(self, message, operation=None, context=None):
        self.message = message
        self.operation = operation
        self.context = dict(context) if context else {}
        super().__init__(message)

    def detailed_message(self):
        """Return the message followed by the operation and context."""
        parts = [self.message]
        if self.operation:
            parts.append(f"Operation: {self.operation}")
        if self.context:
            parts.append("Context: " + ", ".join(f"{k}={v!r}" for k, v in self.context.items()))
        return "\n".join(parts)


class SingularMatrixError(MathematicalError):
    """Raised when a matrix has no inverse or LU pivot vanishes."""

    def __init__(self, message="Matrix is singular", operation=None, matrix_shape=None):
        self.matrix_shape = tuple(matrix_shape) if matrix_shape is not None else None
        context = {"shape": self.matrix_shape} if matrix_shape is not None else None
        super().__init__(message, operation, context)


class NonSquareMatrixError(MathematicalError):
    """Raised when a square matrix is required."""

    def __init__(self, shape, operation):
        self.shape = tuple(shape)
        super().__init__(
            f"{operation} requires a square matrix, got shape {_shape_str(shape)}",
            operation,
            {"shape": self.shape},
        )


class NotPositiveDefiniteError(MathematicalError):
    """Raised when a Cholesky factorization meets a non-positive pivot."""

    def __init__(self, message="Matrix is not positive definite", operation=None, matrix_shape=None):
        self.matrix_shape = tuple(matrix_shape) if matrix_shape is not None else None
        context = {"shape": self.matrix_shape} if matrix_shape is not None else None
        super().__init__(message, operation, context)


class NumericalOverflowError(MathematicalError, OverflowError):
    """Raised when a result cannot be represented in the target dtype."""

    def __init__(self, operation, value=None, dtype=None):
        self.value = value
        self.dtype = dtype
        target = f" as {dtype}" if dtype is not None else ""
        super().__init__(
            f"Numerical overflow in {operation}: {value!r} cannot be represented{target}",
            operation,
            {"value": value, "dtype": dtype},
        )


class DivisionByZeroError(MathematicalError, ZeroDivisionError):
    """Raised on division, floor division or modulo by zero."""

    def __init__(self, operation="divide"):
        super().__init__("Division by zero", operation)
