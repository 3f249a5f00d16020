"""
Solver dispatch for regression.

This module provides fit() and collinearity_diagnostics() (public API) and
backend selection.
"""

from typing import Any, Literal, Sequence
import numpy as np
from numpy.typing import ArrayLike

from statsuite.core.exceptions import ValidationError
from statsuite.core.result import Result
from statsuite.core.compute.timing import Timer
from statsuite.core.validation import check_array, check_2d, check_finite, check_min_samples
from statsuite.core.validation import check_no_zero_variance_columns
from statsuite.regression.design import RegressionDesign
from statsuite.regression.solution import CollinearityParams, CollinearitySolution, LinearSolution
from statsuite.regression.backends.cpu import CPUNormalEquationsBackend
from statsuite.regression._diagnostics import correlation_matrix, tolerance_vif


BackendChoice = Literal['auto', 'cpu', 'cpu_gauss_jordan']


def fit(
    y: ArrayLike | RegressionDesign,
    X: ArrayLike | None = None,
    *,
    names: Sequence[str] | None = None,
    dependent_name: str = "y",
    backend: BackendChoice = 'cpu',
) -> LinearSolution:
    """
    Fit a linear regression model with intercept.

    Solves the ordinary least squares problem:
        min_b ||y - [1 | X] b||^2

    Cases with NaN in the response or any predictor are excluded listwise
    before fitting; the count is available as info['n_excluded'].

    Args:
        y: Response vector (n,), or a prebuilt RegressionDesign
        X: Predictor matrix (n x p) without intercept column
        names: Predictor names for tables (default x1..xp)
        dependent_name: Response name for tables
        backend: 'cpu' (Gauss-Jordan normal equations)

    Returns:
        LinearSolution with coefficients, ANOVA, diagnostics and tables

    Raises:
        ValidationError: If inputs are invalid
        DimensionError: If X and y have inconsistent lengths
        InsufficientDataError: If n <= p + 1 after listwise deletion
        SingularMatrixError: If X'X is singular (collinear predictors)

    Example:
        >>> from statsuite.regression import fit
        >>> result = fit(y, X, names=["age", "income"])
        >>> print(result.summary())
    """
    if isinstance(y, RegressionDesign):
        design = y
    else:
        if X is None:
            raise ValidationError("X: predictor matrix is required")
        design = RegressionDesign.from_arrays(
            X, y, names=names, dependent_name=dependent_name
        )

    result = _get_backend(backend).solve(design)
    return LinearSolution(_result=result, _design=design)


def collinearity_diagnostics(
    X: ArrayLike,
    names: Sequence[str] | None = None,
) -> CollinearitySolution:
    """
    Correlation matrix, Tolerance/VIF and concern level per predictor.

    Rows with NaN are dropped listwise. Constant columns are rejected since
    their correlations are undefined.

    Raises:
        ValidationError: If X is not numeric or has a constant column
        InsufficientDataError: If fewer than 3 complete rows remain
        SingularMatrixError: If an auxiliary regression is singular, i.e. the
            other predictors are themselves exactly collinear
    """
    timer = Timer()
    timer.start()

    X_arr = check_array(X, 'X')
    if X_arr.ndim == 1:
        X_arr = X_arr.reshape(-1, 1)
    check_2d(X_arr, 'X')
    p = X_arr.shape[1]
    if names is None:
        names = tuple(f"x{j + 1}" for j in range(p))
    if len(names) != p:
        raise ValidationError(f"names: expected {p} names, got {len(names)}")

    X_arr = X_arr[~np.any(np.isnan(X_arr), axis=1)]
    check_finite(X_arr, 'X')
    check_min_samples(X_arr, 3, 'X')
    check_no_zero_variance_columns(X_arr, 'X')

    with timer.section('correlations'):
        correlations = correlation_matrix(X_arr)
    with timer.section('vif'):
        tolerance, vif = tolerance_vif(X_arr)
    timer.stop()

    info: dict[str, Any] = {'n': int(X_arr.shape[0])}
    result = Result(
        params=CollinearityParams(correlations=correlations, tolerance=tolerance, vif=vif),
        info=info,
        timing=timer.result(),
        backend_name='cpu_gauss_jordan',
    )
    return CollinearitySolution(_result=result, names=tuple(names))


def _get_backend(choice: BackendChoice = 'cpu'):
    """Select and instantiate the regression backend."""
    if choice in ('auto', 'cpu', 'cpu_gauss_jordan'):
        return CPUNormalEquationsBackend()
    raise ValidationError(f"Unknown backend: {choice!r}. Use 'cpu'.")
