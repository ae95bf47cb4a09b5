"""NumPy-style strided arrays with broadcasting and dense linear algebra."""

from strided import linalg, ufuncs
from strided.core.config import EngineOptions, get_options, reset_options, set_options, use_options
from strided.core.dtypes import DType, promote
from strided.core.errors import (
    DimensionError,
    DivisionByZeroError,
    EmptyArrayError,
    IndexOutOfBoundsError,
    InvalidParameterError,
    MathematicalError,
    NonSquareMatrixError,
    NotPositiveDefiniteError,
    NumericalOverflowError,
    SingularMatrixError,
)
from strided.ndarray import (
    NDArray,
    StorageBuffer,
    arange,
    broadcast_shapes,
    dot,
    eye,
    from_array,
    full,
    full_slice,
    linspace,
    matmul,
    ones,
    parse_slice,
    random,
    reverse_slice,
    step_slice,
    zeros,
)

__version__ = "0.1.0"

__all__ = [
    "DType",
    "DimensionError",
    "DivisionByZeroError",
    "EmptyArrayError",
    "EngineOptions",
    "IndexOutOfBoundsError",
    "InvalidParameterError",
    "MathematicalError",
    "NDArray",
    "NonSquareMatrixError",
    "NotPositiveDefiniteError",
    "NumericalOverflowError",
    "SingularMatrixError",
    "StorageBuffer",
    "arange",
    "broadcast_shapes",
    "dot",
    "eye",
    "from_array",
    "full",
    "full_slice",
    "get_options",
    "linalg",
    "linspace",
    "matmul",
    "ones",
    "parse_slice",
    "promote",
    "random",
    "reset_options",
    "reverse_slice",
    "set_options",
    "step_slice",
    "ufuncs",
    "use_options",
    "zeros",
]
