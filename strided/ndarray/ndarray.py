"""Strided array views over shared storage buffers."""

from __future__ import annotations

import logging

import numpy as np

from strided.core.dtypes import DType, cast_values, check_finite
from strided.core.errors import DimensionError, IndexOutOfBoundsError, InvalidParameterError, MathematicalError
from strided.core.numba_utils import gather_positions, is_row_major, row_major_strides, strided_positions
from strided.core.validation import is_integer, is_number, normalize_axis, validate_finite, validate_shape
from strided.ndarray.broadcasting import broadcast_strides
from strided.ndarray.buffer import StorageBuffer
from strided.ndarray.indexing import AxisSelection, normalize_index, resolve_axis

log = logging.getLogger(__name__)

__all__ = ["NDArray"]


class NDArray:
    """N-dimensional view onto a :class:`StorageBuffer`.

    A view is the tuple ``(buffer, shape, strides, offset, readonly)``. The
    element at logical index ``(i0, ..., ik)`` lives at buffer position
    ``offset + i0 * strides[0] + ... + ik * strides[k]``. Strides are counted
    in elements and may be negative (reversed slices) or zero (broadcast
    views, which are always readonly).

    Views are normally obtained from the factory functions such as
    :func:`strided.zeros` or :func:`strided.from_array`, or by transforming
    an existing view.

    Parameters
    ----------
    buffer : StorageBuffer
        Storage the view reads from and writes to.
    shape : sequence of int
        Logical shape. ``()`` is a zero-dimensional array with one element.
    strides : sequence of int, optional
        Per-axis strides in elements. Defaults to row-major strides.
    offset : int, default=0
        Buffer position of logical index ``(0, ..., 0)``.
    readonly : bool, default=False
        Whether writes through this view are rejected.
    """

    __slots__ = ("_buffer", "_shape", "_strides", "_offset", "_readonly")

    # numpy defers binary operators with an NDArray on the right to us
    __array_ufunc__ = None

    def __init__(self, buffer, shape, strides=None, offset=0, readonly=False):
        if not isinstance(buffer, StorageBuffer):
            raise InvalidParameterError("buffer", "StorageBuffer", type(buffer).__name__)
        shape = tuple(int(d) for d in shape)
        strides = row_major_strides(shape) if strides is None else tuple(int(s) for s in strides)
        if len(strides) != len(shape):
            raise DimensionError(
                "strides must have one entry per axis",
                expected_shape=shape,
                actual_shape=strides,
                operation="NDArray",
            )

        self._buffer = buffer
        self._shape = shape
        self._strides = strides
        self._offset = int(offset)
        self._readonly = bool(readonly)
        self._check_extent()

    def _check_extent(self):
        if 0 in self._shape:
            return
        lo = hi = self._offset
        for dim, stride in zip(self._shape, self._strides, strict=True):
            span = (dim - 1) * stride
            if span < 0:
                lo += span
            else:
                hi += span
        if lo < 0 or hi >= len(self._buffer):
            raise InvalidParameterError(
                "layout",
                f"positions within a buffer of length {len(self._buffer)}",
                (self._shape, self._strides, self._offset),
            )

    @classmethod
    def from_values(cls, values, dtype, operation="create", readonly=False):
        """Wrap finite *values* in a new contiguous array of *dtype*.

        Parameters
        ----------
        values : array_like
            Numeric values; the result takes their shape.
        dtype : DType or str
            Element kind of the new buffer.
        operation : str
            Name reported if a value cannot be represented in *dtype*.
        readonly : bool, default=False
            Readonly flag of the new view.

        Returns
        -------
        NDArray
            A view over a freshly allocated buffer.
        """
        values = np.asarray(values)
        buffer = StorageBuffer.from_values(values, dtype, operation)
        return cls(buffer, values.shape, readonly=readonly)

    @property
    def shape(self):
        return self._shape

    @property
    def strides(self):
        return self._strides

    @property
    def offset(self):
        return self._offset

    @property
    def dtype(self):
        return self._buffer.dtype

    @property
    def ndim(self):
        return len(self._shape)

    @property
    def size(self):
        size = 1
        for dim in self._shape:
            size *= dim
        return size

    @property
    def readonly(self):
        return self._readonly

    @property
    def buffer(self):
        """The storage buffer shared by every alias of this view."""
        return self._buffer

    @property
    def T(self):
        """Transposed view, equivalent to ``transpose()``."""
        return self.transpose()

    def is_contiguous(self):
        """Return True when the view walks its buffer in row-major order without gaps."""
        return is_row_major(self._shape, self._strides)

    def shares_data_with(self, other):
        """Return True when *other* reads from the same buffer."""
        return isinstance(other, NDArray) and other._buffer is self._buffer

    def _positions(self):
        return strided_positions(self._shape, self._strides, self._offset)

    def _position_of(self, indices, operation):
        if len(indices) == 1 and isinstance(indices[0], (tuple, list)):
            indices = tuple(indices[0])
        if len(indices) != self.ndim:
            raise DimensionError(
                f"expected {self.ndim} indices, got {len(indices)}",
                expected_shape=self._shape,
                operation=operation,
            )
        pos = self._offset
        for axis, (index, dim, stride) in enumerate(zip(indices, self._shape, self._strides, strict=True)):
            pos += normalize_index(index, dim, axis) * stride
        return pos

    def _require_writable(self, operation):
        if self._readonly:
            raise MathematicalError("Cannot modify a readonly array", operation, {"shape": self._shape})

    def get(self, *indices):
        """Return the element at *indices*.

        Parameters
        ----------
        *indices : int
            One index per axis; negative values count from the end.

        Returns
        -------
        int or float
            The element as a Python number.

        Raises
        ------
        DimensionError
            If the number of indices differs from ``ndim``.
        IndexOutOfBoundsError
            If an index falls outside its axis.
        """
        return self._buffer.data[self._position_of(indices, "get")].item()

    def set(self, *args):
        """Write a value: ``arr.set(i, j, value)``.

        The value must be finite. Integer dtypes truncate toward zero and
        reject values outside their range.

        Raises
        ------
        MathematicalError
            If the view is readonly.
        DimensionError
            If the number of indices differs from ``ndim``.
        InvalidParameterError
            If the value is not a finite number.
        """
        self._require_writable("set")
        if not args:
            raise DimensionError("set requires a value", expected_shape=self._shape, operation="set")
        *indices, value = args
        if self.ndim > 0 and not indices:
            raise DimensionError(
                f"expected {self.ndim} indices, got 0", expected_shape=self._shape, operation="set"
            )
        validate_finite(value, "value")
        pos = self._position_of(tuple(indices), "set")
        self._buffer.write(pos, value, "set")

    def item(self):
        """Return the only element of a size-one array."""
        if self.size != 1:
            raise DimensionError("can only convert an array of size 1", actual_shape=self._shape, operation="item")
        return self._buffer.data[self._positions()[0]].item()

    def view(self):
        """Return a new view with identical layout over the same buffer."""
        return NDArray(self._buffer, self._shape, self._strides, self._offset, self._readonly)

    def as_readonly(self):
        """Return a readonly view over the same buffer."""
        return NDArray(self._buffer, self._shape, self._strides, self._offset, readonly=True)

    def reshape(self, *shape):
        """Give the elements a new shape.

        Contiguous views are reshaped without copying. Other views are first
        copied into a contiguous buffer.

        Parameters
        ----------
        *shape : int or sequence of int
            New shape, as varargs or a single sequence.

        Raises
        ------
        DimensionError
            If the new shape holds a different number of elements.
        """
        if len(shape) == 1 and not is_integer(shape[0]):
            shape = shape[0]
        shape = validate_shape(shape) if len(shape) else ()
        size = 1
        for dim in shape:
            size *= dim
        if size != self.size:
            raise DimensionError(
                f"cannot reshape array of size {self.size} into shape {list(shape)}",
                expected_shape=shape,
                actual_shape=self._shape,
                operation="reshape",
            )
        if self.is_contiguous():
            return NDArray(self._buffer, shape, row_major_strides(shape), self._offset, self._readonly)

        log.debug("reshape of non-contiguous view %s with strides %s copies data", self._shape, self._strides)
        copied = self.copy()
        return NDArray(copied._buffer, shape, readonly=self._readonly)

    def transpose(self, *axes):
        """Permute the axes without copying.

        Parameters
        ----------
        *axes : int or sequence of int, optional
            New order of the axes. Reverses them when omitted.

        Raises
        ------
        DimensionError
            If the permutation length differs from ``ndim``.
        InvalidParameterError
            If an axis repeats or is out of range.
        """
        if len(axes) == 1 and (axes[0] is None or not is_integer(axes[0])):
            axes = axes[0]
        if axes is None or len(axes) == 0:
            axes = tuple(reversed(range(self.ndim)))
        axes = tuple(axes)
        if len(axes) != self.ndim:
            raise DimensionError(
                f"axes must list all {self.ndim} axes",
                expected_shape=(self.ndim,),
                actual_shape=(len(axes),),
                operation="transpose",
            )
        axes = tuple(normalize_axis(ax, self.ndim, "axes") for ax in axes)
        if len(set(axes)) != len(axes):
            raise InvalidParameterError("axes", "permutation without repeats", axes)
        shape = tuple(self._shape[ax] for ax in axes)
        strides = tuple(self._strides[ax] for ax in axes)
        return NDArray(self._buffer, shape, strides, self._offset, self._readonly)

    def broadcast_to(self, shape):
        """Readonly view that repeats the data along stretched axes."""
        shape = validate_shape(shape) if len(tuple(shape)) else ()
        strides = broadcast_strides(self._shape, self._strides, shape)
        return NDArray(self._buffer, shape, strides, self._offset, readonly=True)

    def _resolve(self, specs, operation):
        if len(specs) > self.ndim:
            raise DimensionError(
                f"too many indices: array is {self.ndim}-dimensional but {len(specs)} were given",
                expected_shape=self._shape,
                operation=operation,
            )
        selections = [resolve_axis(spec, dim, axis) for axis, (spec, dim) in enumerate(zip(specs, self._shape))]
        for dim in self._shape[len(specs) :]:
            selections.append(AxisSelection("range", start=0, step=1, size=dim))
        return selections

    def _view_of(self, selections):
        shape, strides = [], []
        offset = self._offset
        for sel, stride in zip(selections, self._strides, strict=True):
            if sel.size > 0:
                offset += sel.start * stride
            if sel.keeps_axis:
                shape.append(sel.size)
                strides.append(stride * sel.step)
        return NDArray(self._buffer, shape, strides, offset, self._readonly)

    def _selection_positions(self, selections):
        positions = gather_positions([sel.coordinates() for sel in selections], self._strides, self._offset)
        shape = tuple(sel.size for sel in selections if sel.keeps_axis)
        return positions, shape

    def slice(self, *specs):
        """Zero-copy view selected by single indices and ranges.

        Each spec applies to the axis at its position; axes without a spec
        are kept whole. A single index removes its axis. Ranges may be given
        as ``slice`` objects, ``(start, end[, step])`` tuples or strings such
        as ``"1:4"`` and ``"::-1"``.

        Raises
        ------
        DimensionError
            If more specs than axes are given.
        InvalidParameterError
            If a spec gathers or masks, which cannot be served as a view.

        Examples
        --------
        >>> from_array([0, 1, 2, 3, 4, 5]).slice("1:4").to_list()
        [1.0, 2.0, 3.0]
        """
        selections = self._resolve(specs, "slice")
        for spec, sel in zip(specs, selections):
            if not sel.is_basic:
                raise InvalidParameterError(
                    "spec", "single index or range", spec, "Use index() for gather and mask selections"
                )
        return self._view_of(selections)

    def index(self, *specs):
        """Select with any mix of indices, ranges, index arrays and masks.

        Index arrays and masks act on their own axis independently (outer
        indexing) and always return a copy. Without them the result is the
        same view :meth:`slice` returns.
        """
        selections = self._resolve(specs, "index")
        if all(sel.is_basic for sel in selections):
            return self._view_of(selections)
        positions, shape = self._selection_positions(selections)
        values = self._buffer.read(positions).reshape(shape)
        return NDArray(StorageBuffer(values.reshape(-1), self.dtype), shape, readonly=self._readonly)

    def _coordinate_array(self, index_array, axis):
        if isinstance(index_array, NDArray):
            values = index_array.to_numpy()
        else:
            values = np.asarray(index_array)
        if values.dtype.kind == "b" or (values.dtype.kind == "f" and not np.all(values == np.trunc(values))):
            raise InvalidParameterError("index_arrays", "integer index arrays", index_array)
        values = values.astype(np.int64).reshape(-1)
        dim = self._shape[axis]
        coords = np.where(values < 0, values + dim, values)
        bad = (coords < 0) | (coords >= dim)
        if bad.any():
            raise IndexOutOfBoundsError(int(values[bad][0]), dim, axis)
        return coords

    def fancy_index(self, *index_arrays):
        """Select points by coordinate arrays, one array per leading axis.

        Element ``i`` of the result is
        ``self[index_arrays[0][i], index_arrays[1][i], ...]``. Axes beyond the
        given arrays are kept whole. Always copies.

        Raises
        ------
        DimensionError
            If more arrays than axes are given or the arrays differ in length.
        """
        if not index_arrays or len(index_arrays) > self.ndim:
            raise DimensionError(
                f"expected between 1 and {self.ndim} index arrays, got {len(index_arrays)}",
                expected_shape=self._shape,
                operation="fancy_index",
            )
        coords = [self._coordinate_array(arr, axis) for axis, arr in enumerate(index_arrays)]
        n_points = coords[0].shape[0]
        for c in coords[1:]:
            if c.shape[0] != n_points:
                raise DimensionError(
                    "index arrays must have the same length",
                    expected_shape=(n_points,),
                    actual_shape=c.shape,
                    operation="fancy_index",
                )
        k = len(coords)
        base = np.full(n_points, self._offset, dtype=np.int64)
        for c, stride in zip(coords, self._strides[:k], strict=True):
            base += c * stride
        trailing = strided_positions(self._shape[k:], self._strides[k:], 0)
        positions = (base[:, None] + trailing[None, :]).reshape(-1)
        shape = (n_points,) + self._shape[k:]
        values = self._buffer.read(positions)
        return NDArray(StorageBuffer(values, self.dtype), shape, readonly=self._readonly)

    def boolean_index(self, mask):
        """Return a 1-D copy of the elements where *mask* is true.

        The mask covers the array in row-major order and must hold ``size``
        entries. NDArray masks treat non-zero values as true.
        """
        if isinstance(mask, NDArray):
            flags = mask.to_numpy().reshape(-1) != 0
        else:
            flags = np.asarray(mask)
            if flags.dtype.kind != "b":
                raise InvalidParameterError("mask", "boolean values", mask)
            flags = flags.reshape(-1)
        if flags.shape[0] != self.size:
            raise DimensionError(
                "mask must have one entry per element",
                expected_shape=(self.size,),
                actual_shape=flags.shape,
                operation="boolean_index",
            )
        values = self._buffer.read(self._positions()[flags])
        return NDArray(StorageBuffer(values, self.dtype), values.shape, readonly=self._readonly)

    def __getitem__(self, key):
        if not isinstance(key, tuple):
            key = (key,)
        if len(key) == self.ndim and all(is_integer(k) for k in key):
            return self.get(*key)
        return self.index(*key)

    def __setitem__(self, key, value):
        self._require_writable("setitem")
        if not isinstance(key, tuple):
            key = (key,)
        if len(key) == self.ndim and all(is_integer(k) for k in key):
            self.set(*key, value)
            return
        positions, shape = self._selection_positions(self._resolve(key, "setitem"))
        values = _broadcast_values(value, shape, "setitem")
        self._buffer.write(positions, values.reshape(-1), "setitem")

    def fill(self, value):
        """Set every element to *value*."""
        self._require_writable("fill")
        validate_finite(value, "value")
        self._buffer.write(self._positions(), value, "fill")

    def to_numpy(self):
        """Return the elements as a new ``numpy.ndarray`` of the same shape and dtype."""
        return self._buffer.read(self._positions()).reshape(self._shape)

    def to_list(self):
        """Return the elements as nested Python lists, or a number for 0-d arrays."""
        return self.to_numpy().tolist()

    def copy(self):
        """Copy into a new contiguous, writable buffer."""
        values = self._buffer.read(self._positions())
        return NDArray(StorageBuffer(values, self.dtype), self._shape)

    clone = copy

    def flatten(self):
        """Return a 1-D copy in row-major order."""
        return self.copy().reshape(self.size)

    def ravel(self):
        """Return a 1-D view when contiguous, otherwise a copy."""
        return self.reshape(self.size)

    def astype(self, dtype):
        """Copy the elements into a new buffer of *dtype*."""
        dtype = DType.of(dtype)
        values = cast_values(self.to_numpy(), dtype, "astype")
        return NDArray(StorageBuffer(values.reshape(-1), dtype), self._shape)

    def __array__(self, dtype=None, copy=None):
        if copy is False:
            raise ValueError("NDArray cannot be exposed to numpy without a copy")
        values = self.to_numpy()
        return values if dtype is None else values.astype(dtype)

    def __len__(self):
        if self.ndim == 0:
            raise TypeError("len() of a 0-d array")
        return self._shape[0]

    def __iter__(self):
        if self.ndim == 0:
            raise TypeError("iteration over a 0-d array")
        for i in range(self._shape[0]):
            yield self[i]

    def __repr__(self):
        from strided.core.format import format_array

        return format_array(self)

    __str__ = __repr__

    def info(self):
        """Return a table describing the layout of the view."""
        from strided.core.format import format_layout

        return format_layout(self)

    def add(self, other):
        from strided.ndarray import elementwise

        return elementwise.add(self, other)

    def subtract(self, other):
        from strided.ndarray import elementwise

        return elementwise.subtract(self, other)

    def multiply(self, other):
        from strided.ndarray import elementwise

        return elementwise.multiply(self, other)

    def divide(self, other):
        from strided.ndarray import elementwise

        return elementwise.divide(self, other)

    def _binary(self, name, other, reflected=False):
        from strided.ndarray import elementwise

        if not isinstance(other, NDArray) and not is_number(other) and not isinstance(other, (list, tuple, np.ndarray)):
            return NotImplemented
        fn = getattr(elementwise, name)
        return fn(other, self) if reflected else fn(self, other)

    def __add__(self, other):
        return self._binary("add", other)

    def __radd__(self, other):
        return self._binary("add", other, reflected=True)

    def __sub__(self, other):
        return self._binary("subtract", other)

    def __rsub__(self, other):
        return self._binary("subtract", other, reflected=True)

    def __mul__(self, other):
        return self._binary("multiply", other)

    def __rmul__(self, other):
        return self._binary("multiply", other, reflected=True)

    def __truediv__(self, other):
        return self._binary("divide", other)

    def __rtruediv__(self, other):
        return self._binary("divide", other, reflected=True)

    def __floordiv__(self, other):
        return self._binary("floor_divide", other)

    def __rfloordiv__(self, other):
        return self._binary("floor_divide", other, reflected=True)

    def __mod__(self, other):
        return self._binary("mod", other)

    def __rmod__(self, other):
        return self._binary("mod", other, reflected=True)

    def __pow__(self, other):
        return self._binary("power", other)

    def __rpow__(self, other):
        return self._binary("power", other, reflected=True)

    def __neg__(self):
        from strided.ndarray import elementwise

        return elementwise.negative(self)

    def __pos__(self):
        return self.copy()

    def __abs__(self):
        from strided.ndarray import elementwise

        return elementwise.absolute(self)

    def dot(self, other):
        """Matrix or inner product, see :func:`strided.ndarray.products.dot`."""
        from strided.ndarray.products import dot

        return dot(self, other)

    def __matmul__(self, other):
        if not isinstance(other, (NDArray, list, tuple, np.ndarray)):
            return NotImplemented
        return self.dot(other)

    def __rmatmul__(self, other):
        if not isinstance(other, (list, tuple, np.ndarray)):
            return NotImplemented
        from strided.ndarray.products import dot

        return dot(other, self)

    def _reduce(self, kind, axis, ddof=0):
        from strided.ndarray.elementwise import reduce

        return reduce(self, kind, axis=axis, ddof=ddof)

    def sum(self, axis=None):
        """Sum of the elements, over everything or along *axis*."""
        return self._reduce("sum", axis)

    def prod(self, axis=None):
        return self._reduce("prod", axis)

    def mean(self, axis=None):
        return self._reduce("mean", axis)

    def var(self, axis=None, ddof=0):
        """Variance with ``ddof`` delta degrees of freedom."""
        return self._reduce("var", axis, ddof)

    def std(self, axis=None, ddof=0):
        return self._reduce("std", axis, ddof)

    def min(self, axis=None):
        return self._reduce("min", axis)

    def max(self, axis=None):
        return self._reduce("max", axis)


def _broadcast_values(value, shape, operation):
    if isinstance(value, NDArray):
        return value.broadcast_to(shape).to_numpy()
    if is_number(value):
        validate_finite(value, "value")
        return np.full(shape, value, dtype=np.float64)
    values = np.asarray(value)
    if values.dtype.kind not in "iuf":
        raise InvalidParameterError("value", "numeric values", value)
    check_finite(values, "value")
    strides = broadcast_strides(values.shape, row_major_strides(values.shape), shape)
    positions = strided_positions(shape, strides, 0)
    return values.reshape(-1)[positions].reshape(shape)
