"""Dense linear algebra on two-dimensional arrays."""

from strided.linalg.decomposition import LUDecomposition, cholesky, gauss_jordan, lu, row_echelon
from strided.linalg.linalg import (
    det,
    inv,
    inverse,
    is_positive_definite,
    is_symmetric,
    norm,
    rank,
    solve,
    trace,
)

__all__ = [
    "LUDecomposition",
    "cholesky",
    "det",
    "gauss_jordan",
    "inv",
    "inverse",
    "is_positive_definite",
    "is_symmetric",
    "lu",
    "norm",
    "rank",
    "row_echelon",
    "solve",
    "trace",
]
