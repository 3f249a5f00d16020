"""
Input validation utilities for statsuite.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from statsuite.core.exceptions import (
    ValidationError,
    DimensionError,
    InsufficientDataError,
)


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a float64 numpy array.

    Rejects inputs that result in object dtype (indicating mixed types or
    non-numeric data) and non-numeric dtypes.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with floating dtype

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if not np.issubdtype(result.dtype, np.floating):
        result = result.astype(np.float64)

    return result


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 1-dimensional."""
    check_ndim(array, 1, name)


def check_2d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 2-dimensional."""
    check_ndim(array, 2, name)


def check_square(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array is a square matrix.

    Raises:
        DimensionError: If array is not 2D or rows != columns
    """
    check_2d(array, name)
    if array.shape[0] != array.shape[1]:
        raise DimensionError(
            f"{name}: expected square matrix, got shape {array.shape}"
        )


def check_consistent_length(
    *arrays: Any,
    names: tuple[str, ...]
) -> None:
    """
    Verify all arrays have the same length (first dimension).

    Accepts numpy arrays and plain sequences.

    Raises:
        ValueError: If number of names doesn't match number of arrays
        DimensionError: If arrays have inconsistent lengths
    """
    if len(arrays) != len(names):
        raise ValueError(
            f"Number of arrays ({len(arrays)}) must match number of names ({len(names)})"
        )

    if len(arrays) < 2:
        return

    lengths = [len(arr) for arr in arrays]
    if len(set(lengths)) > 1:
        details = ", ".join(f"{name}={length}" for name, length in zip(names, lengths))
        raise DimensionError(f"Inconsistent lengths: {details}")


def check_min_samples(array: NDArray[np.floating[Any]], min_samples: int, name: str) -> None:
    """
    Verify array has at least the minimum number of samples.

    Raises:
        InsufficientDataError: If array has fewer than min_samples
    """
    n = array.shape[0]
    if n < min_samples:
        raise InsufficientDataError(
            f"{name}: requires at least {min_samples} samples, got {n}",
            required=min_samples,
            actual=n,
        )


def check_weights(weights: NDArray[np.floating[Any]], name: str = "weights") -> None:
    """
    Verify case weights are finite and non-negative.

    Zero weights are legal (the case is ignored downstream).

    Raises:
        ValidationError: If any weight is NaN, infinite or negative
    """
    check_finite(weights, name)
    negative = np.flatnonzero(weights < 0)
    if negative.size > 0:
        raise ValidationError(
            f"{name}: negative weights at positions {negative[:5].tolist()}"
            + (" ..." if negative.size > 5 else "")
        )


def check_no_zero_variance_columns(X: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify matrix has no constant (zero-variance) columns.

    A constant predictor is collinear with the intercept.

    Raises:
        ValidationError: If any column has zero variance
    """
    variances = np.var(X, axis=0)
    zero_var_cols = np.where(variances == 0)[0]

    if len(zero_var_cols) > 0:
        raise ValidationError(
            f"{name}: columns {zero_var_cols.tolist()} have zero variance (constant)"
        )
