"""Inner and matrix products."""

from __future__ import annotations

import numpy as np

from strided.core.dtypes import check_result, promote
from strided.core.errors import DimensionError
from strided.ndarray.elementwise import as_operand
from strided.ndarray.ndarray import NDArray

__all__ = ["dot", "matmul"]


def dot(a, b):
    """Inner product of vectors or product of matrices.

    Parameters
    ----------
    a, b : NDArray or array_like
        One- or two-dimensional operands.

    Returns
    -------
    NDArray or int or float
        A Python number for two vectors. Otherwise a new array: ``(m, k) @ (k, n)``
        gives ``(m, n)``, ``(m, k) @ (k,)`` gives ``(m,)`` and ``(k,) @ (k, n)``
        gives ``(n,)``. The dtype is the promotion of the operand dtypes.

    Raises
    ------
    DimensionError
        If an operand is not 1-D or 2-D, or the contracted lengths differ.

    Examples
    --------
    >>> a = from_array([[1, 2], [3, 4]])
    >>> dot(a, from_array([1, 1])).to_list()
    [3.0, 7.0]
    """
    a, b = as_operand(a, "a"), as_operand(b, "b")
    for name, arr in (("a", a), ("b", b)):
        if not isinstance(arr, NDArray) or arr.ndim not in (1, 2):
            shape = arr.shape if isinstance(arr, NDArray) else ()
            raise DimensionError(f"operand {name} must be 1-D or 2-D", actual_shape=shape, operation="dot")

    inner_a = a.shape[-1]
    inner_b = b.shape[0]
    if inner_a != inner_b:
        raise DimensionError(
            f"shapes {list(a.shape)} and {list(b.shape)} are not aligned",
            expected_shape=(inner_a,) + b.shape[1:],
            actual_shape=b.shape,
            operation="dot",
        )

    dtype = promote(a.dtype, b.dtype)
    with np.errstate(all="ignore"):
        out = np.dot(a.to_numpy().astype(np.float64), b.to_numpy().astype(np.float64))
    check_result(out, "dot")
    if a.ndim == 1 and b.ndim == 1:
        return int(out) if dtype.is_integer else float(out)
    return NDArray.from_values(out, dtype, "dot")


matmul = dot
