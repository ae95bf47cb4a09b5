"""Element kinds supported by storage buffers and the casting rules between them."""

from __future__ import annotations

from enum import Enum

import numpy as np

from strided.core.errors import InvalidParameterError, MathematicalError, NumericalOverflowError

__all__ = [
    "DType",
    "cast_values",
    "check_finite",
    "check_result",
    "promote",
]


class DType(str, Enum):
    """Closed set of element kinds a buffer may hold."""

    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    FLOAT32 = "float32"
    FLOAT64 = "float64"

    def __str__(self):
        return self.value

    @property
    def numpy(self):
        """The matching ``numpy.dtype``."""
        return np.dtype(self.value)

    @property
    def is_integer(self):
        return self.numpy.kind in "iu"

    @property
    def bounds(self):
        """Smallest and largest representable value."""
        info = np.iinfo(self.numpy) if self.is_integer else np.finfo(self.numpy)
        if self.is_integer:
            return int(info.min), int(info.max)
        return float(info.min), float(info.max)

    @classmethod
    def of(cls, value):
        """Coerce a string, ``numpy.dtype``, numpy scalar type or ``DType`` to a ``DType``.

        Parameters
        ----------
        value : str, numpy.dtype, type or DType
            The dtype description.

        Returns
        -------
        DType
            The matching tag.

        Raises
        ------
        InvalidParameterError
            If the description does not name one of the supported kinds.
        """
        if isinstance(value, cls):
            return value
        try:
            name = np.dtype(value).name
        except TypeError:
            name = None
        if name is not None:
            for member in cls:
                if member.value == name:
                    return member
        expected = "one of " + ", ".join(m.value for m in cls)
        raise InvalidParameterError("dtype", expected, value)


def promote(a, b):
    """Return the result dtype of a binary operation between two arrays.

    NumPy's promotion table is used while it stays inside the supported kinds.
    Combinations NumPy would widen to a 64-bit integer, such as ``int32`` with
    ``uint32``, fall back to ``float64``.
    """
    a, b = DType.of(a), DType.of(b)
    if a is b:
        return a
    name = np.promote_types(a.numpy, b.numpy).name
    try:
        return DType(name)
    except ValueError:
        return DType.FLOAT64


def check_finite(values, name="value"):
    """Raise ``InvalidParameterError`` if any of *values* is NaN or infinite."""
    arr = np.asarray(values)
    if arr.dtype.kind not in "fc":
        return
    bad = ~np.isfinite(arr)
    if bad.any():
        raise InvalidParameterError.non_finite(name, arr[bad].flat[0].item())


def check_result(values, operation):
    """Raise if a kernel produced NaN or an infinity.

    Raises
    ------
    MathematicalError
        If any value is NaN.
    NumericalOverflowError
        If any value is infinite.
    """
    arr = np.asarray(values)
    if arr.dtype.kind not in "fc":
        return
    nan = np.isnan(arr)
    if nan.any():
        raise MathematicalError(f"{operation} produced an undefined result", operation)
    inf = np.isinf(arr)
    if inf.any():
        raise NumericalOverflowError(operation, arr[inf].flat[0].item())


def cast_values(values, dtype, operation="cast"):
    """Convert finite numeric values to *dtype*.

    Integer targets truncate toward zero. Values outside the target range
    raise ``NumericalOverflowError`` instead of wrapping.

    Parameters
    ----------
    values : array_like
        Finite numeric values.
    dtype : DType
        Target element kind.
    operation : str
        Operation name used in error messages.

    Returns
    -------
    ndarray
        Array of ``dtype.numpy`` with the shape of *values*.
    """
    dtype = DType.of(dtype)
    arr = np.asarray(values)
    if arr.dtype == dtype.numpy:
        return arr
    arr = arr.astype(np.float64)
    if dtype.is_integer:
        arr = np.trunc(arr)
    lo, hi = dtype.bounds
    out_of_range = (arr < lo) | (arr > hi)
    if out_of_range.any():
        raise NumericalOverflowError(operation, arr[out_of_range].flat[0].item(), dtype.value)
    return arr.astype(dtype.numpy)
