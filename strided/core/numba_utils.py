"""Numba-compiled kernels for walking strided layouts."""

import numba as nb
import numpy as np

__all__ = [
    "gather_positions",
    "is_row_major",
    "row_major_strides",
    "strided_positions",
]


def _strided_positions_impl(shape, strides, offset):
    ndim = shape.shape[0]
    size = 1
    for d in range(ndim):
        size *= shape[d]

    positions = np.empty(size, dtype=np.int64)
    if size == 0:
        return positions

    counter = np.zeros(ndim, dtype=np.int64)
    pos = offset
    for i in range(size):
        positions[i] = pos
        d = ndim - 1
        while d >= 0:
            counter[d] += 1
            pos += strides[d]
            if counter[d] < shape[d]:
                break
            pos -= strides[d] * shape[d]
            counter[d] = 0
            d -= 1

    return positions


def _is_row_major_impl(shape, strides):
    for d in range(shape.shape[0]):
        if shape[d] == 0:
            return True

    expected = 1
    for d in range(shape.shape[0] - 1, -1, -1):
        if shape[d] != 1 and strides[d] != expected:
            return False
        expected *= shape[d]
    return True


_strided_positions_jit = nb.njit(cache=True)(_strided_positions_impl)
_is_row_major_jit = nb.njit(cache=True)(_is_row_major_impl)


def _as_index_array(values):
    return np.ascontiguousarray(np.asarray(values, dtype=np.int64).reshape(-1))


def row_major_strides(shape):
    """Return C-order element strides for *shape*.

    Parameters
    ----------
    shape : sequence of int
        Array shape.

    Returns
    -------
    tuple of int
        Stride of each axis in elements.
    """
    strides = []
    step = 1
    for dim in reversed(tuple(shape)):
        strides.append(step)
        step *= max(int(dim), 1)
    return tuple(reversed(strides))


def strided_positions(shape, strides, offset=0):
    """Buffer position of every element of a strided layout in row-major order.

    Parameters
    ----------
    shape : sequence of int
        Logical shape of the view.
    strides : sequence of int
        Per-axis element strides. May be negative or zero.
    offset : int
        Buffer position of the first logical element.

    Returns
    -------
    ndarray
        ``int64`` array of length ``prod(shape)``.
    """
    return _strided_positions_jit(_as_index_array(shape), _as_index_array(strides), np.int64(offset))


def gather_positions(axis_positions, axis_strides, offset=0):
    """Buffer positions of the outer product of per-axis coordinate lists.

    Parameters
    ----------
    axis_positions : sequence of array_like
        For each axis, the coordinates to visit along it.
    axis_strides : sequence of int
        Element stride of each axis.
    offset : int
        Buffer position of logical index ``(0, ..., 0)``.

    Returns
    -------
    ndarray
        ``int64`` positions in row-major order of the selection.
    """
    axis_positions = [_as_index_array(p) for p in axis_positions]
    if not axis_positions:
        return np.array([offset], dtype=np.int64)
    grids = np.meshgrid(*axis_positions, indexing="ij")
    strides = np.asarray(axis_strides, dtype=np.int64)
    flat = np.zeros(grids[0].size, dtype=np.int64) + np.int64(offset)
    for grid, stride in zip(grids, strides, strict=True):
        flat += grid.reshape(-1) * stride
    return flat


def is_row_major(shape, strides):
    """Return True when *strides* are the C-order strides of *shape*.

    Axes of length one may carry any stride.
    """
    return bool(_is_row_major_jit(_as_index_array(shape), _as_index_array(strides)))
