"""Broadcasting elementwise kernels and axis reductions.

Kernels run on ``float64`` copies of the operands and the result is cast
back to the result dtype. A result containing NaN raises
``MathematicalError`` and one containing an infinity raises
``NumericalOverflowError``; nothing undefined is ever stored.
"""

from __future__ import annotations

import numpy as np

from strided.core.dtypes import DType, check_result, promote
from strided.core.errors import DivisionByZeroError, EmptyArrayError, InvalidParameterError, MathematicalError
from strided.core.validation import is_number, normalize_axis, validate_finite, validate_integer
from strided.ndarray.broadcasting import broadcast_shapes
from strided.ndarray.ndarray import NDArray

__all__ = [
    "absolute",
    "add",
    "all_",
    "any_",
    "apply_binary",
    "apply_unary",
    "as_operand",
    "count_nonzero",
    "divide",
    "floor_divide",
    "maximum",
    "minimum",
    "mod",
    "multiply",
    "negative",
    "nonzero",
    "power",
    "reduce",
    "subtract",
    "where",
]

REDUCTIONS = ("sum", "prod", "mean", "var", "std", "min", "max")


def as_operand(x, name="x"):
    """Return *x* as an ``NDArray`` or a finite Python scalar."""
    if isinstance(x, NDArray):
        return x
    if is_number(x):
        validate_finite(x, name)
        return x.item() if isinstance(x, np.generic) else x
    if isinstance(x, (list, tuple, np.ndarray)):
        from strided.ndarray.factory import from_array

        return from_array(x)
    raise InvalidParameterError(name, "NDArray, array-like or finite number", x)


def _as_array(x, name):
    x = as_operand(x, name)
    if isinstance(x, NDArray):
        return x
    return NDArray.from_values(np.asarray(x, dtype=np.float64), DType.FLOAT64, name)


def _values(arr, shape=None):
    if shape is not None and arr.shape != shape:
        arr = arr.broadcast_to(shape)
    return arr.to_numpy().astype(np.float64)


def _first_outside(values, valid):
    bad = ~valid
    if bad.any():
        return values[bad].flat[0].item()
    return None


def apply_unary(x, fn, name, domain=None, domain_message=None):
    """Apply a vectorized kernel to every element.

    Parameters
    ----------
    x : NDArray, array_like or number
        Operand. Scalars give a scalar result.
    fn : callable
        Kernel taking and returning a ``float64`` numpy array.
    name : str
        Operation name used in errors.
    domain : callable, optional
        Returns a boolean mask of the inputs ``fn`` accepts.
    domain_message : str, optional
        Message for values outside ``domain``.

    Returns
    -------
    NDArray or float
        Same shape and dtype as the input.
    """
    x = as_operand(x)
    scalar = not isinstance(x, NDArray)
    values = np.asarray(x, dtype=np.float64) if scalar else _values(x)

    if domain is not None:
        bad = _first_outside(values, domain(values))
        if bad is not None:
            raise MathematicalError(domain_message or f"{name} is undefined for {bad!r}", name, {"value": bad})

    with np.errstate(all="ignore"):
        out = fn(values)
    check_result(out, name)
    if scalar:
        return float(out)
    return NDArray.from_values(out, x.dtype, name)


def _result_dtype(x, y):
    if isinstance(x, NDArray) and isinstance(y, NDArray):
        return promote(x.dtype, y.dtype)
    if isinstance(x, NDArray):
        return x.dtype
    if isinstance(y, NDArray):
        return y.dtype
    return None


def apply_binary(x, y, fn, name, nonzero_divisor=False):
    """Apply a vectorized kernel to two broadcast operands.

    Parameters
    ----------
    x, y : NDArray, array_like or number
        Operands. Arrays are broadcast to a common shape.
    fn : callable
        Kernel taking two ``float64`` numpy arrays.
    name : str
        Operation name used in errors.
    nonzero_divisor : bool, default=False
        Reject a zero anywhere in ``y`` with ``DivisionByZeroError``.

    Returns
    -------
    NDArray or float
        An array unless both operands are scalars. With two arrays the dtype
        follows :func:`strided.core.dtypes.promote`; with one array it is the
        array's dtype.

    Raises
    ------
    DimensionError
        If the shapes cannot be broadcast together.
    """
    x, y = as_operand(x, "x"), as_operand(y, "y")
    dtype = _result_dtype(x, y)
    if dtype is None:
        xv, yv = np.float64(x), np.float64(y)
    else:
        shape = broadcast_shapes(
            x.shape if isinstance(x, NDArray) else (),
            y.shape if isinstance(y, NDArray) else (),
            name,
        )
        xv = _values(x, shape) if isinstance(x, NDArray) else np.full(shape, x, dtype=np.float64)
        yv = _values(y, shape) if isinstance(y, NDArray) else np.full(shape, y, dtype=np.float64)

    if nonzero_divisor and np.any(yv == 0):
        raise DivisionByZeroError(name)

    with np.errstate(all="ignore"):
        out = fn(xv, yv)
    check_result(out, name)
    if dtype is None:
        return float(out)
    return NDArray.from_values(out, dtype, name)


def add(x, y):
    return apply_binary(x, y, np.add, "add")


def subtract(x, y):
    return apply_binary(x, y, np.subtract, "subtract")


def multiply(x, y):
    return apply_binary(x, y, np.multiply, "multiply")


def divide(x, y):
    """True division; any zero divisor raises ``DivisionByZeroError``."""
    return apply_binary(x, y, np.divide, "divide", nonzero_divisor=True)


def floor_divide(x, y):
    return apply_binary(x, y, np.floor_divide, "floor_divide", nonzero_divisor=True)


def mod(x, y):
    """Remainder with the sign of the divisor, as Python's ``%``."""
    return apply_binary(x, y, np.mod, "mod", nonzero_divisor=True)


def power(x, y):
    return apply_binary(x, y, np.power, "power")


def minimum(x, y):
    return apply_binary(x, y, np.minimum, "minimum")


def maximum(x, y):
    return apply_binary(x, y, np.maximum, "maximum")


def negative(x):
    return apply_unary(x, np.negative, "negative")


def absolute(x):
    return apply_unary(x, np.abs, "abs")


def _python_number(value, dtype):
    if dtype.is_integer:
        return int(value)
    return float(value)


def reduce(arr, kind, axis=None, ddof=0):
    """Reduce an array over all elements or along one axis.

    Parameters
    ----------
    arr : NDArray
        Input array.
    kind : {"sum", "prod", "mean", "var", "std", "min", "max"}
        Reduction to apply.
    axis : int, optional
        Axis to reduce. Negative values count from the end. When omitted the
        whole array is reduced to a Python number.
    ddof : int, default=0
        Delta degrees of freedom for ``var`` and ``std``.

    Returns
    -------
    NDArray or int or float
        A Python number when ``axis`` is None, otherwise an array without the
        reduced axis. ``sum``, ``prod``, ``min`` and ``max`` keep the dtype;
        ``mean``, ``var`` and ``std`` produce ``float64``.

    Raises
    ------
    EmptyArrayError
        If anything but ``sum`` or ``prod`` reduces zero elements.
    InvalidParameterError
        If ``kind`` is unknown or ``ddof`` leaves no degrees of freedom.
    """
    if kind not in REDUCTIONS:
        raise InvalidParameterError("kind", "one of " + ", ".join(REDUCTIONS), kind)
    ddof = validate_integer(ddof, "ddof", minimum=0)
    values = arr.to_numpy().astype(np.float64)

    if axis is None:
        n = values.size
    else:
        axis = normalize_axis(axis, arr.ndim)
        n = values.shape[axis]

    if n == 0 and kind not in ("sum", "prod"):
        raise EmptyArrayError(kind)
    if kind in ("var", "std") and n > 0 and ddof >= n:
        raise InvalidParameterError("ddof", f"integer smaller than {n}", ddof)

    with np.errstate(all="ignore"):
        if kind in ("var", "std"):
            out = getattr(np, kind)(values, axis=axis, ddof=ddof)
        else:
            out = getattr(np, kind)(values, axis=axis)
    check_result(out, kind)

    keeps_dtype = kind in ("sum", "prod", "min", "max")
    if axis is None:
        return _python_number(out, arr.dtype) if keeps_dtype else float(out)
    dtype = arr.dtype if keeps_dtype else DType.FLOAT64
    return NDArray.from_values(np.asarray(out), dtype, kind)


def where(condition, x, y):
    """Choose elements from *x* where *condition* is non-zero, else from *y*."""
    condition, x, y = as_operand(condition, "condition"), as_operand(x, "x"), as_operand(y, "y")
    arrays = [v for v in (condition, x, y) if isinstance(v, NDArray)]
    shape = ()
    for a in arrays:
        shape = broadcast_shapes(shape, a.shape, "where")

    def expand(v):
        return _values(v, shape) if isinstance(v, NDArray) else np.full(shape, v, dtype=np.float64)

    dtype = _result_dtype(x, y) or DType.FLOAT64
    out = np.where(expand(condition) != 0, expand(x), expand(y))
    return NDArray.from_values(out, dtype, "where")


def nonzero(arr):
    """Coordinates of the non-zero elements, one ``int32`` array per axis."""
    arr = _as_array(arr, "arr")
    coords = np.nonzero(arr.to_numpy())
    return tuple(NDArray.from_values(c, DType.INT32, "nonzero") for c in coords)


def count_nonzero(arr, axis=None):
    """Number of non-zero elements, in total or along *axis*."""
    arr = _as_array(arr, "arr")
    values = arr.to_numpy()
    if axis is None:
        return int(np.count_nonzero(values))
    axis = normalize_axis(axis, arr.ndim)
    counts = np.count_nonzero(values, axis=axis)
    return NDArray.from_values(counts, DType.INT32, "count_nonzero")


def any_(arr, axis=None):
    arr = _as_array(arr, "arr")
    if axis is None:
        return bool(np.any(arr.to_numpy() != 0))
    axis = normalize_axis(axis, arr.ndim)
    return NDArray.from_values(np.any(arr.to_numpy() != 0, axis=axis), DType.UINT8, "any")


def all_(arr, axis=None):
    arr = _as_array(arr, "arr")
    if axis is None:
        return bool(np.all(arr.to_numpy() != 0))
    axis = normalize_axis(axis, arr.ndim)
    return NDArray.from_values(np.all(arr.to_numpy() != 0, axis=axis), DType.UINT8, "all")

