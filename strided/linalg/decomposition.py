"""Matrix factorizations and elimination routines.

All routines work on copies through ``get``/``set`` and never touch the
storage of their input.
"""

from __future__ import annotations

import logging
import math
from typing import NamedTuple

from strided.core.config import get_options
from strided.core.dtypes import DType
from strided.core.errors import NotPositiveDefiniteError, SingularMatrixError
from strided.core.validation import require_matrix, require_square
from strided.ndarray.factory import eye, from_array, zeros
from strided.ndarray.ndarray import NDArray

log = logging.getLogger(__name__)

__all__ = [
    "LUDecomposition",
    "as_matrix",
    "cholesky",
    "gauss_jordan",
    "lu",
    "row_echelon",
]


class LUDecomposition(NamedTuple):
    """Result of :func:`lu`, satisfying ``P A = L U``.

    Attributes
    ----------
    lower : NDArray
        Unit lower-triangular factor holding the elimination multipliers.
    upper : NDArray
        Upper-triangular factor.
    perm : NDArray
        ``int32`` row permutation; row ``i`` of ``P A`` is row ``perm[i]`` of ``A``.
    swaps : int
        Number of row exchanges performed while pivoting.
    """

    lower: NDArray
    upper: NDArray
    perm: NDArray
    swaps: int

    @property
    def sign(self):
        """Determinant of the permutation, ``+1`` or ``-1``."""
        return -1 if self.swaps % 2 else 1


def as_matrix(a):
    """Return *a* as an ``NDArray``, converting nested sequences."""
    if isinstance(a, NDArray):
        return a
    return from_array(a)


def _swap_rows(m, r1, r2, stop=None):
    cols = m.shape[1] if stop is None else stop
    for j in range(cols):
        tmp = m.get(r1, j)
        m.set(r1, j, m.get(r2, j))
        m.set(r2, j, tmp)


def _pivot_row(m, col, start):
    best = start
    best_abs = abs(m.get(start, col))
    for i in range(start + 1, m.shape[0]):
        val = abs(m.get(i, col))
        if val > best_abs:
            best, best_abs = i, val
    return best, best_abs


def lu(a):
    """LU decomposition with partial pivoting.

    At each step the row with the largest magnitude in the pivot column is
    swapped into place (the first one on ties). The swap is applied to the
    upper factor, to the already computed columns of the lower factor and to
    the permutation.

    Parameters
    ----------
    a : NDArray or array_like
        Square matrix.

    Returns
    -------
    LUDecomposition
        Factors ``lower``, ``upper``, the permutation and the swap count.

    Raises
    ------
    DimensionError
        If *a* is not two-dimensional.
    NonSquareMatrixError
        If *a* is not square.
    SingularMatrixError
        If a pivot is smaller in magnitude than the configured epsilon.

    Examples
    --------
    >>> d = lu(from_array([[0, 1], [1, 0]]))
    >>> d.perm.to_list(), d.swaps
    ([1, 0], 1)
    """
    a = as_matrix(a)
    require_square(a, "lu")
    n = a.shape[0]
    eps = get_options().epsilon

    upper = a.astype(DType.FLOAT64)
    lower = eye(n, dtype=DType.FLOAT64) if n else zeros((0, 0), dtype=DType.FLOAT64)
    perm = list(range(n))
    swaps = 0

    for k in range(n - 1):
        p, pivot_abs = _pivot_row(upper, k, k)
        if p != k:
            _swap_rows(upper, k, p)
            _swap_rows(lower, k, p, stop=k)
            perm[k], perm[p] = perm[p], perm[k]
            swaps += 1
            log.debug("lu: exchanged rows %d and %d", k, p)

        if pivot_abs < eps:
            log.debug("lu: pivot %g in column %d is below epsilon", pivot_abs, k)
            raise SingularMatrixError(
                "Matrix is singular: zero pivot encountered", operation="lu", matrix_shape=a.shape
            )

        pivot = upper.get(k, k)
        for i in range(k + 1, n):
            factor = upper.get(i, k) / pivot
            lower.set(i, k, factor)
            for j in range(k, n):
                upper.set(i, j, upper.get(i, j) - factor * upper.get(k, j))

    return LUDecomposition(lower, upper, from_array(perm, dtype=DType.INT32), swaps)


def cholesky(a):
    """Cholesky factor ``L`` with ``A = L L^T``.

    Only the lower triangle of *a* is read.

    Raises
    ------
    NotPositiveDefiniteError
        If a diagonal pivot is not positive.
    """
    a = as_matrix(a)
    require_square(a, "cholesky")
    n = a.shape[0]
    factor = zeros((n, n), dtype=DType.FLOAT64)

    for j in range(n):
        s = a.get(j, j) - math.fsum(factor.get(j, k) ** 2 for k in range(j))
        if s <= 0:
            raise NotPositiveDefiniteError(
                f"Matrix is not positive definite: pivot {s:g} at row {j}",
                operation="cholesky",
                matrix_shape=a.shape,
            )
        diag = math.sqrt(s)
        factor.set(j, j, diag)
        for i in range(j + 1, n):
            s = a.get(i, j) - math.fsum(factor.get(i, k) * factor.get(j, k) for k in range(j))
            factor.set(i, j, s / diag)

    return factor


def gauss_jordan(a):
    """Invert a square matrix by Gauss-Jordan elimination on ``[A | I]``.

    Raises
    ------
    SingularMatrixError
        If no pivot larger than the configured epsilon exists in a column.
    """
    a = as_matrix(a)
    require_square(a, "gauss_jordan")
    n = a.shape[0]
    eps = get_options().epsilon

    aug = zeros((n, 2 * n), dtype=DType.FLOAT64)
    for i in range(n):
        for j in range(n):
            aug.set(i, j, a.get(i, j))
        aug.set(i, n + i, 1.0)

    for col in range(n):
        p, pivot_abs = _pivot_row(aug, col, col)
        if pivot_abs < eps:
            log.debug("gauss_jordan: no usable pivot in column %d", col)
            raise SingularMatrixError(
                "Matrix is singular and cannot be inverted", operation="inv", matrix_shape=a.shape
            )
        if p != col:
            _swap_rows(aug, col, p)

        pivot = aug.get(col, col)
        for j in range(2 * n):
            aug.set(col, j, aug.get(col, j) / pivot)

        for i in range(n):
            if i == col:
                continue
            factor = aug.get(i, col)
            if factor == 0:
                continue
            for j in range(2 * n):
                aug.set(i, j, aug.get(i, j) - factor * aug.get(col, j))

    return aug.slice(slice(None), (n, 2 * n)).copy()


def row_echelon(a, tol=None):
    """Reduced row echelon form with partial pivoting.

    Columns whose largest remaining entry does not exceed *tol* are skipped,
    so the number of non-zero rows of the result is the rank of *a*.

    Parameters
    ----------
    a : NDArray or array_like
        Matrix of any shape.
    tol : float, optional
        Zero threshold. Defaults to the configured epsilon.

    Returns
    -------
    NDArray
        ``float64`` matrix in reduced row echelon form.
    """
    a = as_matrix(a)
    require_matrix(a, "row_echelon")
    tol = get_options().epsilon if tol is None else tol
    rows, cols = a.shape
    m = a.astype(DType.FLOAT64)

    pivot_row = 0
    for col in range(cols):
        if pivot_row >= rows:
            break
        p, pivot_abs = _pivot_row(m, col, pivot_row)
        if pivot_abs <= tol:
            continue
        if p != pivot_row:
            _swap_rows(m, pivot_row, p)

        pivot = m.get(pivot_row, col)
        for j in range(cols):
            m.set(pivot_row, j, m.get(pivot_row, j) / pivot)
        for i in range(rows):
            if i == pivot_row:
                continue
            factor = m.get(i, col)
            if factor == 0:
                continue
            for j in range(cols):
                m.set(i, j, m.get(i, j) - factor * m.get(pivot_row, j))
        pivot_row += 1

    return m
