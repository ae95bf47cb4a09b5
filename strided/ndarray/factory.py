"""Functions that allocate new arrays."""

from __future__ import annotations

import math

import numpy as np

from strided.core.config import get_options
from strided.core.constants import DEFAULT_LINSPACE_NUM
from strided.core.dtypes import DType, check_finite
from strided.core.errors import DimensionError, InvalidParameterError
from strided.core.validation import is_number, validate_finite, validate_integer, validate_shape
from strided.ndarray.buffer import StorageBuffer
from strided.ndarray.ndarray import NDArray

__all__ = [
    "arange",
    "eye",
    "from_array",
    "full",
    "linspace",
    "ones",
    "random",
    "zeros",
]


def _resolve_dtype(dtype):
    if dtype is None:
        return get_options().default_dtype
    return DType.of(dtype)


def full(shape, fill_value, dtype=None, readonly=False):
    """Return a new array of *shape* filled with *fill_value*.

    Parameters
    ----------
    shape : int or sequence of int
        Non-empty sequence of non-negative axis lengths.
    fill_value : float
        Finite value for every element.
    dtype : DType or str, optional
        Element kind. Defaults to the configured ``default_dtype``.
    readonly : bool, default=False
        Whether the returned view rejects writes.

    Returns
    -------
    NDArray
        Contiguous array over a new buffer.
    """
    shape = validate_shape(shape)
    fill_value = validate_finite(fill_value, "fill_value")
    dtype = _resolve_dtype(dtype)
    size = math.prod(shape)
    buffer = StorageBuffer.allocate(size, dtype, fill_value)
    return NDArray(buffer, shape, readonly=readonly)


def zeros(shape, dtype=None, readonly=False):
    """Return a new array of *shape* filled with zeros."""
    return full(shape, 0, dtype=dtype, readonly=readonly)


def ones(shape, dtype=None, readonly=False):
    """Return a new array of *shape* filled with ones."""
    return full(shape, 1, dtype=dtype, readonly=readonly)


def eye(n, dtype=None):
    """Return the ``n`` by ``n`` identity matrix."""
    n = validate_integer(n, "n", minimum=1)
    out = zeros((n, n), dtype=dtype)
    for i in range(n):
        out.set(i, i, 1)
    return out


def arange(start, stop=None, step=1, dtype=None):
    """Evenly spaced values in the half-open interval ``[start, stop)``.

    With a single argument the interval is ``[0, start)``.

    Parameters
    ----------
    start : float
        First value, or the end of the interval when ``stop`` is omitted.
    stop : float, optional
        End of the interval, excluded.
    step : float, default=1
        Spacing between values. Must be non-zero.
    dtype : DType or str, optional
        Element kind. Defaults to the configured ``default_dtype``.

    Returns
    -------
    NDArray
        One-dimensional array, empty when the interval holds no values.
    """
    if stop is None:
        start, stop = 0, start
    start = validate_finite(start, "start")
    stop = validate_finite(stop, "stop")
    step = validate_finite(step, "step")
    if step == 0:
        raise InvalidParameterError("step", "non-zero number", step)

    n = max(0, math.ceil((stop - start) / step))
    values = start + step * np.arange(n, dtype=np.float64)
    return NDArray.from_values(values, _resolve_dtype(dtype), "arange")


def linspace(start, stop, num=DEFAULT_LINSPACE_NUM, dtype=None):
    """Return *num* evenly spaced values from *start* to *stop* inclusive.

    The last element equals ``stop`` exactly.
    """
    start = validate_finite(start, "start")
    stop = validate_finite(stop, "stop")
    num = validate_integer(num, "num", minimum=1)

    if num == 1:
        values = np.array([start], dtype=np.float64)
    else:
        values = start + (stop - start) * np.arange(num, dtype=np.float64) / (num - 1)
        values[-1] = stop
    return NDArray.from_values(values, _resolve_dtype(dtype), "linspace")


def random(shape, dtype=None, seed=None):
    """Return an array of uniform samples from ``[0, 1)``.

    Parameters
    ----------
    shape : int or sequence of int
        Shape of the result.
    dtype : DType or str, optional
        Element kind. Integer kinds truncate every sample to zero.
    seed : int or numpy.random.Generator, optional
        Seed for :func:`numpy.random.default_rng`.
    """
    shape = validate_shape(shape)
    rng = np.random.default_rng(seed)
    values = rng.random(shape)
    return NDArray.from_values(values, _resolve_dtype(dtype), "random")


def _infer_shape(data):
    if isinstance(data, NDArray):
        return data.shape
    if isinstance(data, np.ndarray):
        return data.shape
    if isinstance(data, (list, tuple)):
        if len(data) == 0:
            return (0,)
        inner = [_infer_shape(item) for item in data]
        first = inner[0]
        for other in inner[1:]:
            if other != first:
                raise DimensionError(
                    "nested sequences must be rectangular",
                    expected_shape=first,
                    actual_shape=other,
                    operation="from_array",
                )
        return (len(data),) + first
    return ()


def _flatten(data, out):
    if isinstance(data, NDArray):
        out.extend(data.to_numpy().reshape(-1).tolist())
    elif isinstance(data, np.ndarray):
        _check_numeric_array(data)
        out.extend(data.reshape(-1).tolist())
    elif isinstance(data, (list, tuple)):
        for item in data:
            _flatten(item, out)
    elif is_number(data):
        out.append(data)
    else:
        raise InvalidParameterError("data", "numbers", data)


def _check_numeric_array(values):
    if values.dtype.kind not in "iuf":
        raise InvalidParameterError("data", "numeric array", values.dtype)


def from_array(data, dtype=None, readonly=False):
    """Build an array from nested sequences, a NumPy array or another array.

    Parameters
    ----------
    data : array_like or NDArray or float
        Rectangular nested lists or tuples of numbers, a numeric NumPy array,
        an existing ``NDArray`` (copied) or a scalar (0-d result).
    dtype : DType or str, optional
        Element kind. NumPy input and ``NDArray`` input keep their own dtype
        when it is supported; otherwise the configured ``default_dtype`` is
        used.
    readonly : bool, default=False
        Whether the returned view rejects writes.

    Returns
    -------
    NDArray
        A contiguous array over a new buffer.

    Raises
    ------
    DimensionError
        If nested sequences are ragged.
    InvalidParameterError
        If an element is not a finite number. Booleans are rejected.
    """
    if dtype is None:
        if isinstance(data, NDArray):
            dtype = data.dtype
        elif isinstance(data, np.ndarray) and data.dtype.name in {d.value for d in DType}:
            dtype = DType(data.dtype.name)
    dtype = _resolve_dtype(dtype)

    if isinstance(data, np.ndarray):
        _check_numeric_array(data)
        values = data
    else:
        shape = _infer_shape(data)
        flat = []
        _flatten(data, flat)
        values = np.array(flat, dtype=np.float64).reshape(shape)

    check_finite(values, "data")
    return NDArray.from_values(values, dtype, "from_array", readonly=readonly)
