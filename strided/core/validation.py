"""Parameter validators shared by factories, views and linear algebra."""

from __future__ import annotations

import math
import numbers

import numpy as np

from strided.core.errors import DimensionError, InvalidParameterError, NonSquareMatrixError

__all__ = [
    "is_integer",
    "is_number",
    "normalize_axis",
    "require_matrix",
    "require_square",
    "validate_finite",
    "validate_integer",
    "validate_shape",
]


def is_integer(value) -> bool:
    """Return True for Python or NumPy integers, excluding booleans."""
    return isinstance(value, (numbers.Integral, np.integer)) and not isinstance(value, (bool, np.bool_))


def is_number(value) -> bool:
    """Return True for real scalars, excluding booleans."""
    return isinstance(value, (numbers.Real, np.number)) and not isinstance(value, (bool, np.bool_))


def validate_integer(value, name, minimum=None) -> int:
    """Return *value* as ``int`` after checking type and lower bound."""
    if not is_integer(value):
        raise InvalidParameterError.non_integer(name, value)
    value = int(value)
    if minimum is not None and value < minimum:
        if minimum == 0:
            raise InvalidParameterError.negative(name, value)
        raise InvalidParameterError(name, f"integer >= {minimum}", value)
    return value


def validate_finite(value, name="value") -> float:
    """Return *value* as a float after checking it is a finite real number."""
    if not is_number(value):
        raise InvalidParameterError(name, "finite number", value)
    if not math.isfinite(value):
        raise InvalidParameterError.non_finite(name, value)
    return value


def validate_shape(shape, name="shape") -> tuple[int, ...]:
    """Validate a shape and return it as a tuple.

    Parameters
    ----------
    shape : int or sequence of int
        Requested shape. A bare integer is treated as a one-dimensional shape.
    name : str
        Parameter name used in error messages.

    Returns
    -------
    tuple of int
        The validated shape.

    Raises
    ------
    InvalidParameterError
        If the shape is empty or contains anything but non-negative integers.
    """
    if is_integer(shape):
        shape = (shape,)
    if isinstance(shape, (str, bytes)) or not isinstance(shape, (tuple, list, np.ndarray)):
        raise InvalidParameterError(name, "sequence of non-negative integers", shape)
    if len(shape) == 0:
        raise InvalidParameterError(name, "non-empty sequence of non-negative integers", shape)
    return tuple(validate_integer(d, f"{name}[{i}]", minimum=0) for i, d in enumerate(shape))


def normalize_axis(axis, ndim, name="axis") -> int:
    """Map a possibly negative axis into ``[0, ndim)``."""
    axis = validate_integer(axis, name)
    if not -ndim <= axis < ndim:
        raise InvalidParameterError(name, f"integer in [{-ndim}, {ndim})", axis)
    return axis + ndim if axis < 0 else axis


def require_matrix(arr, operation):
    """Raise ``DimensionError`` unless *arr* is two-dimensional."""
    if arr.ndim != 2:
        raise DimensionError("expected a 2-D matrix", operation=operation, actual_shape=arr.shape)


def require_square(arr, operation):
    """Raise unless *arr* is a square two-dimensional matrix."""
    require_matrix(arr, operation)
    rows, cols = arr.shape
    if rows != cols:
        raise NonSquareMatrixError(arr.shape, operation)
