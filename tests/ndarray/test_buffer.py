"""Tests for storage buffers."""

import numpy as np
import pytest

from strided.core.dtypes import DType
from strided.core.errors import InvalidParameterError, NumericalOverflowError
from strided.ndarray.buffer import StorageBuffer


def test_allocate():
    buf = StorageBuffer.allocate(4, "int16", fill=3)
    assert len(buf) == 4
    assert buf.dtype is DType.INT16
    assert buf.data.dtype == np.int16
    assert buf.data.tolist() == [3, 3, 3, 3]
    assert buf.nbytes == 8


def test_from_values_casts():
    buf = StorageBuffer.from_values([[1.7, -2.7]], DType.INT8)
    assert buf.data.tolist() == [1, -2]


def test_from_values_copies():
    values = np.array([1.0, 2.0])
    buf = StorageBuffer.from_values(values, DType.FLOAT64)
    values[0] = 99.0
    assert buf.read(0) == 1.0


def test_write_validates_range():
    buf = StorageBuffer.allocate(2, DType.UINT8)
    with pytest.raises(NumericalOverflowError):
        buf.write([0, 1], [1, 256])
    assert buf.data.tolist() == [0, 0]


def test_rejects_wrong_dtype():
    with pytest.raises(InvalidParameterError):
        StorageBuffer(np.zeros(3, dtype=np.int64), DType.INT32)


def test_rejects_multidimensional():
    with pytest.raises(InvalidParameterError):
        StorageBuffer(np.zeros((2, 2)), DType.FLOAT64)


def test_negative_length():
    with pytest.raises(InvalidParameterError):
        StorageBuffer.allocate(-1, DType.FLOAT64)


def test_repr():
    assert repr(StorageBuffer.allocate(3, "float32")) == "StorageBuffer(length=3, dtype=float32)"
