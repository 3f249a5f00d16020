"""
Dense matrix kernels and Gauss-Jordan inversion.

Used by linear regression (normal equations) and by the collinearity
diagnostics, which refit one auxiliary regression per predictor with the
same machinery.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from statsuite.core.compute.tolerances import SINGULAR_PIVOT_TOL
from statsuite.core.exceptions import DimensionError, SingularMatrixError
from statsuite.core.validation import check_2d, check_1d, check_square, check_finite


@dataclass(frozen=True)
class NormalEquationsResult:
    """
    Solution of the normal equations X'X b = X'y.

    Attributes:
        coefficients: b, shape (p,)
        xtx_inverse: (X'X)^-1, shape (p, p); reused for standard errors
    """
    coefficients: NDArray[np.floating[Any]]
    xtx_inverse: NDArray[np.floating[Any]]


def _as_matrix(A: ArrayLike, name: str) -> NDArray[np.floating[Any]]:
    arr = np.asarray(A, dtype=np.float64)
    check_2d(arr, name)
    return arr


def transpose(A: ArrayLike) -> NDArray[np.floating[Any]]:
    """Return A' as a new contiguous array."""
    return np.ascontiguousarray(_as_matrix(A, 'A').T)


def matmul(A: ArrayLike, B: ArrayLike) -> NDArray[np.floating[Any]]:
    """
    Matrix product A B.

    Raises:
        DimensionError: If A's column count differs from B's row count
    """
    A = _as_matrix(A, 'A')
    B = _as_matrix(B, 'B')
    if A.shape[1] != B.shape[0]:
        raise DimensionError(
            f"matmul: non-conformant shapes {A.shape} and {B.shape}"
        )
    return A @ B


def matvec(A: ArrayLike, v: ArrayLike) -> NDArray[np.floating[Any]]:
    """
    Matrix-vector product A v.

    Raises:
        DimensionError: If A's column count differs from len(v)
    """
    A = _as_matrix(A, 'A')
    v = np.asarray(v, dtype=np.float64)
    check_1d(v, 'v')
    if A.shape[1] != v.shape[0]:
        raise DimensionError(
            f"matvec: non-conformant shapes {A.shape} and {v.shape}"
        )
    return A @ v


def gauss_jordan_inverse(
    A: ArrayLike,
    tol: float = SINGULAR_PIVOT_TOL,
    name: str = 'A',
) -> NDArray[np.floating[Any]]:
    """
    Invert a square matrix by Gauss-Jordan elimination on [A | I].

    Each column is pivoted on the row (at or below the diagonal) holding the
    largest absolute value. The singularity threshold is relative to the
    matrix scale: tol * max(1, max|A|).

    Args:
        A: Square matrix to invert
        tol: Relative pivot threshold
        name: Matrix description used in error messages

    Returns:
        A^-1 as a new array

    Raises:
        DimensionError: If A is not square
        SingularMatrixError: If a pivot falls below the threshold
    """
    A = np.asarray(A, dtype=np.float64)
    check_square(A, name)
    check_finite(A, name)

    n = A.shape[0]
    if n == 0:
        return np.empty((0, 0), dtype=np.float64)

    threshold = tol * max(1.0, float(np.max(np.abs(A))))
    aug = np.hstack([A, np.eye(n)])

    for col in range(n):
        pivot_row = col + int(np.argmax(np.abs(aug[col:, col])))
        pivot = aug[pivot_row, col]
        if abs(pivot) < threshold:
            raise SingularMatrixError(
                f"{name} is singular: pivot {abs(pivot):.3e} in column {col} "
                f"is below threshold {threshold:.3e}",
                matrix_name=name,
                pivot_index=col,
                pivot_magnitude=float(abs(pivot)),
            )

        if pivot_row != col:
            aug[[col, pivot_row]] = aug[[pivot_row, col]]

        aug[col] /= pivot
        factors = aug[:, col].copy()
        factors[col] = 0.0
        aug -= np.outer(factors, aug[col])

    return aug[:, n:].copy()


def solve_normal_equations(
    X: ArrayLike,
    y: ArrayLike,
    tol: float = SINGULAR_PIVOT_TOL,
) -> NormalEquationsResult:
    """
    Least squares via b = (X'X)^-1 X'y.

    Raises:
        DimensionError: If X and y are non-conformant
        SingularMatrixError: If X'X is singular
    """
    X = _as_matrix(X, 'X')
    Xt = transpose(X)
    xtx_inv = gauss_jordan_inverse(matmul(Xt, X), tol=tol, name="X'X")
    coefficients = matvec(xtx_inv, matvec(Xt, y))
    return NormalEquationsResult(coefficients=coefficients, xtx_inverse=xtx_inv)
