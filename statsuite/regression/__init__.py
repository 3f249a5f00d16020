"""
Ordinary least squares regression with diagnostics.

Public API:
    fit(y, X, ...) -> LinearSolution
    collinearity_diagnostics(X, ...) -> CollinearitySolution

fit() handles:
    - Listwise deletion and input validation
    - Design construction (intercept column first)
    - Backend selection
    - Result wrapping

Example:
    >>> from statsuite.regression import fit
    >>> result = fit(y, X)
    >>> print(result.coefficients)
    >>> print(result.summary())
"""

from statsuite.regression.design import RegressionDesign
from statsuite.regression.solution import (
    LinearSolution,
    LinearParams,
    CollinearitySolution,
    CollinearityParams,
)
from statsuite.regression.solvers import fit, collinearity_diagnostics

__all__ = [
    "fit",
    "collinearity_diagnostics",
    "RegressionDesign",
    "LinearSolution",
    "LinearParams",
    "CollinearitySolution",
    "CollinearityParams",
]
