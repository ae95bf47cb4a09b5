"""Fixed-length storage shared by array views."""

from __future__ import annotations

import numpy as np

from strided.core.dtypes import DType, cast_values
from strided.core.errors import InvalidParameterError
from strided.core.validation import validate_integer

__all__ = ["StorageBuffer"]


class StorageBuffer:
    """Contiguous numeric cells tagged with a single dtype.

    A buffer never changes length after allocation. Views hold a reference to
    the buffer they read from; two views alias exactly when they hold the same
    buffer object.

    Parameters
    ----------
    data : ndarray
        One-dimensional array of ``dtype.numpy`` that becomes the storage.
    dtype : DType
        Element kind of the buffer.
    """

    __slots__ = ("_data", "_dtype")

    def __init__(self, data, dtype):
        dtype = DType.of(dtype)
        data = np.asarray(data)
        if data.ndim != 1:
            raise InvalidParameterError("data", "one-dimensional array", data.shape)
        if data.dtype != dtype.numpy:
            raise InvalidParameterError("data", f"array of {dtype}", data.dtype)
        self._data = np.ascontiguousarray(data)
        self._dtype = dtype

    @classmethod
    def allocate(cls, length, dtype, fill=0):
        """Allocate a buffer of *length* cells set to *fill*."""
        length = validate_integer(length, "length", minimum=0)
        dtype = DType.of(dtype)
        data = np.full(length, cast_values(fill, dtype, "allocate"), dtype=dtype.numpy)
        return cls(data, dtype)

    @classmethod
    def from_values(cls, values, dtype, operation="from_values"):
        """Allocate a buffer holding *values* cast to *dtype*.

        *values* must already be finite; casting truncates toward zero for
        integer kinds and raises on out-of-range values.
        """
        dtype = DType.of(dtype)
        data = cast_values(np.asarray(values).reshape(-1), dtype, operation)
        return cls(np.array(data, dtype=dtype.numpy, copy=True), dtype)

    @property
    def dtype(self):
        return self._dtype

    @property
    def data(self):
        """The underlying one-dimensional array."""
        return self._data

    @property
    def nbytes(self):
        return self._data.nbytes

    def __len__(self):
        return self._data.shape[0]

    def read(self, positions):
        """Return the values stored at *positions*."""
        return self._data[positions]

    def write(self, positions, values, operation="write"):
        """Cast *values* to the buffer dtype and store them at *positions*."""
        self._data[positions] = cast_values(values, self._dtype, operation)

    def __repr__(self):
        return f"StorageBuffer(length={len(self)}, dtype={self._dtype})"
