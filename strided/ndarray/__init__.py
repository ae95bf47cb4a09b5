"""Strided array views, indexing, broadcasting and factories."""

from strided.ndarray.broadcasting import broadcast_shapes, broadcast_strides, result_shape
from strided.ndarray.buffer import StorageBuffer
from strided.ndarray.factory import arange, eye, from_array, full, linspace, ones, random, zeros
from strided.ndarray.indexing import (
    detect_index_kind,
    full_slice,
    normalize_index,
    normalize_range,
    parse_slice,
    range_size,
    reverse_slice,
    step_slice,
)
from strided.ndarray.ndarray import NDArray
from strided.ndarray.products import dot, matmul

__all__ = [
    "NDArray",
    "StorageBuffer",
    "arange",
    "broadcast_shapes",
    "broadcast_strides",
    "detect_index_kind",
    "dot",
    "eye",
    "from_array",
    "full",
    "full_slice",
    "linspace",
    "matmul",
    "normalize_index",
    "normalize_range",
    "ones",
    "parse_slice",
    "random",
    "range_size",
    "result_shape",
    "reverse_slice",
    "step_slice",
    "zeros",
]
