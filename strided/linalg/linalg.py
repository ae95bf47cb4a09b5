"""Determinant, inverse, rank, norms and linear solves for 2-D arrays."""

from __future__ import annotations

import logging
import math

from strided.core.config import get_options
from strided.core.dtypes import DType
from strided.core.errors import (
    DimensionError,
    EmptyArrayError,
    InvalidParameterError,
    NotPositiveDefiniteError,
    SingularMatrixError,
)
from strided.core.validation import require_matrix, require_square
from strided.linalg.decomposition import as_matrix, cholesky, gauss_jordan, lu, row_echelon
from strided.ndarray.factory import zeros

log = logging.getLogger(__name__)

__all__ = [
    "det",
    "inv",
    "inverse",
    "is_positive_definite",
    "is_symmetric",
    "norm",
    "rank",
    "solve",
    "trace",
]


def det(a):
    """Determinant of a square matrix.

    Matrices up to 2x2 use closed forms. Larger ones multiply the diagonal of
    the LU upper factor and flip the sign once per row exchange. A matrix
    whose factorization meets a vanishing pivot has determinant ``0.0``.

    Parameters
    ----------
    a : NDArray or array_like
        Square matrix.

    Returns
    -------
    float
        The determinant.

    Examples
    --------
    >>> det([[1, 2], [3, 4]])
    -2.0
    """
    a = as_matrix(a)
    require_square(a, "det")
    n = a.shape[0]
    if n == 0:
        return 1.0
    if n == 1:
        return float(a.get(0, 0))
    if n == 2:
        return float(a.get(0, 0) * a.get(1, 1) - a.get(0, 1) * a.get(1, 0))

    try:
        decomposition = lu(a)
    except SingularMatrixError:
        log.debug("det: singular %s matrix, returning 0", a.shape)
        return 0.0

    result = float(decomposition.sign)
    for i in range(n):
        result *= decomposition.upper.get(i, i)
    return result


def inv(a):
    """Inverse of a square matrix.

    Raises
    ------
    SingularMatrixError
        If the determinant of a 1x1 or 2x2 matrix is below the configured
        epsilon in magnitude, or Gauss-Jordan elimination of a larger matrix
        finds no usable pivot.
    EmptyArrayError
        For a 0x0 matrix.
    """
    a = as_matrix(a)
    require_square(a, "inv")
    n = a.shape[0]
    if n == 0:
        raise EmptyArrayError("inv")
    if n > 2:
        return gauss_jordan(a)

    d = det(a)
    if abs(d) < get_options().epsilon:
        raise SingularMatrixError("Matrix is singular and cannot be inverted", operation="inv", matrix_shape=a.shape)

    out = zeros((n, n), dtype=DType.FLOAT64)
    if n == 1:
        out.set(0, 0, 1.0 / d)
    else:
        out.set(0, 0, a.get(1, 1) / d)
        out.set(0, 1, -a.get(0, 1) / d)
        out.set(1, 0, -a.get(1, 0) / d)
        out.set(1, 1, a.get(0, 0) / d)
    return out


inverse = inv


def rank(a, tol=None):
    """Number of linearly independent rows.

    Parameters
    ----------
    a : NDArray or array_like
        Matrix of any shape.
    tol : float, optional
        Entries with magnitude at or below this count as zero. Defaults to the
        configured epsilon.

    Returns
    -------
    int
        The rank.
    """
    a = as_matrix(a)
    require_matrix(a, "rank")
    tol = get_options().epsilon if tol is None else tol
    reduced = row_echelon(a, tol)
    rows, cols = reduced.shape
    count = sum(1 for i in range(rows) if any(abs(reduced.get(i, j)) > tol for j in range(cols)))
    log.debug("rank: %s matrix has rank %d", a.shape, count)
    return count


def trace(a):
    """Sum of the diagonal of a square matrix."""
    a = as_matrix(a)
    require_square(a, "trace")
    return sum(a.get(i, i) for i in range(a.shape[0]))


def norm(a, ord="fro"):
    """Matrix norm.

    Parameters
    ----------
    a : NDArray or array_like
        Matrix of any shape.
    ord : {"fro", 1, inf}, default="fro"
        ``"fro"`` is the Frobenius norm, ``1`` the largest absolute column
        sum and ``inf`` the largest absolute row sum.

    Returns
    -------
    float
        The norm. Zero for matrices without elements.
    """
    a = as_matrix(a)
    require_matrix(a, "norm")
    rows, cols = a.shape

    if ord == "fro":
        return math.sqrt(math.fsum(a.get(i, j) ** 2 for i in range(rows) for j in range(cols)))
    if not isinstance(ord, bool) and ord == 1:
        sums = [math.fsum(abs(a.get(i, j)) for i in range(rows)) for j in range(cols)]
        return float(max(sums, default=0.0))
    if not isinstance(ord, (bool, str)) and ord == math.inf:
        sums = [math.fsum(abs(a.get(i, j)) for j in range(cols)) for i in range(rows)]
        return float(max(sums, default=0.0))
    raise InvalidParameterError("ord", "'fro', 1 or inf", ord)


def _forward_backward(decomposition, rhs, n):
    lower, upper, perm = decomposition.lower, decomposition.upper, decomposition.perm
    y = [0.0] * n
    for i in range(n):
        y[i] = rhs[perm.get(i)] - math.fsum(lower.get(i, j) * y[j] for j in range(i))
    x = [0.0] * n
    for i in range(n - 1, -1, -1):
        s = y[i] - math.fsum(upper.get(i, j) * x[j] for j in range(i + 1, n))
        x[i] = s / upper.get(i, i)
    return x


def solve(a, b):
    """Solve ``A x = b`` for a square, non-singular ``A``.

    Parameters
    ----------
    a : NDArray or array_like
        Square coefficient matrix.
    b : NDArray or array_like
        Right-hand side of length ``n``, or an ``(n, k)`` matrix whose columns
        are solved independently.

    Returns
    -------
    NDArray
        ``float64`` solution with the shape of *b*.

    Raises
    ------
    DimensionError
        If *b* does not have ``n`` rows.
    SingularMatrixError
        If the LU factorization meets a vanishing pivot.

    Examples
    --------
    >>> solve([[2, 1], [1, 1]], [3, 2]).to_list()
    [1.0, 1.0]
    """
    a = as_matrix(a)
    require_square(a, "solve")
    b = as_matrix(b)
    n = a.shape[0]
    if b.ndim not in (1, 2) or b.shape[0] != n:
        raise DimensionError(
            "right-hand side must have one row per equation",
            expected_shape=(n,),
            actual_shape=b.shape,
            operation="solve",
        )

    decomposition = lu(a)
    eps = get_options().epsilon
    for i in range(n):
        if abs(decomposition.upper.get(i, i)) < eps:
            raise SingularMatrixError(
                "Matrix is singular: zero pivot on the diagonal", operation="solve", matrix_shape=a.shape
            )

    out = zeros(b.shape, dtype=DType.FLOAT64)
    if b.ndim == 1:
        x = _forward_backward(decomposition, [b.get(i) for i in range(n)], n)
        for i in range(n):
            out.set(i, x[i])
        return out

    for col in range(b.shape[1]):
        x = _forward_backward(decomposition, [b.get(i, col) for i in range(n)], n)
        for i in range(n):
            out.set(i, col, x[i])
    return out


def is_symmetric(a, tol=None):
    """Return True when ``|a[i, j] - a[j, i]| <= tol`` for every pair.

    Non-square matrices are never symmetric.
    """
    a = as_matrix(a)
    require_matrix(a, "is_symmetric")
    tol = get_options().epsilon if tol is None else tol
    rows, cols = a.shape
    if rows != cols:
        return False
    for i in range(rows):
        for j in range(i + 1, cols):
            if abs(a.get(i, j) - a.get(j, i)) > tol:
                return False
    return True


def is_positive_definite(a):
    """Return True for symmetric matrices with a Cholesky factorization."""
    a = as_matrix(a)
    require_matrix(a, "is_positive_definite")
    if a.shape[0] != a.shape[1] or not is_symmetric(a):
        return False
    try:
        cholesky(a)
    except NotPositiveDefiniteError:
        return False
    return True
