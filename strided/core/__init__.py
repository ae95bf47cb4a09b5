"""Configuration, errors, dtypes and shared utilities."""

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

__all__ = [
    "DType",
    "DimensionError",
    "DivisionByZeroError",
    "EmptyArrayError",
    "EngineOptions",
    "IndexOutOfBoundsError",
    "InvalidParameterError",
    "MathematicalError",
    "NonSquareMatrixError",
    "NotPositiveDefiniteError",
    "NumericalOverflowError",
    "SingularMatrixError",
    "get_options",
    "promote",
    "reset_options",
    "set_options",
    "use_options",
]
