"""
Regression diagnostics.

Durbin-Watson, residual summaries, predictor correlations and
Tolerance/VIF. Collinearity is measured by regressing each predictor on
the others (plus intercept) with the same normal-equations kernel used for
the main fit, so a singular auxiliary problem raises SingularMatrixError.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray

from statsuite.core.compute.linalg import solve_normal_equations

VIF_CONCERN_DESCRIPTIONS = (
    ("Low", "< 2", "No significant multicollinearity"),
    ("Moderate", "2 - 5", "Moderate multicollinearity, may not require action"),
    ("High", "5 - 10", "High multicollinearity, consider remedial measures"),
    ("Very High", "> 10", "Severe multicollinearity, remedial action recommended"),
)


@dataclass(frozen=True)
class SeriesSummary:
    """Minimum, maximum, mean, standard deviation and N of one series."""
    minimum: float
    maximum: float
    mean: float
    std: float
    n: int

    @classmethod
    def of(cls, values: NDArray[np.floating[Any]]) -> SeriesSummary:
        n = int(values.shape[0])
        return cls(
            minimum=float(np.min(values)),
            maximum=float(np.max(values)),
            mean=float(np.mean(values)),
            std=float(np.std(values, ddof=1)) if n > 1 else float('nan'),
            n=n,
        )


def durbin_watson(residuals: NDArray[np.floating[Any]]) -> float:
    """sum((e_i - e_{i-1})^2) / sum(e_i^2); NaN when every residual is zero."""
    denom = float(residuals @ residuals)
    if denom == 0.0:
        return float('nan')
    diff = np.diff(residuals)
    return float(diff @ diff) / denom


def standardize(values: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """(v - mean) / sd with ddof=1; all NaN when sd is zero."""
    sd = float(np.std(values, ddof=1))
    if sd == 0.0:
        return np.full(values.shape, np.nan)
    return (values - np.mean(values)) / sd


def residual_statistics(
    fitted: NDArray[np.floating[Any]],
    residuals: NDArray[np.floating[Any]],
    std_error: float,
) -> dict[str, SeriesSummary]:
    """
    Summaries of predicted values, residuals and their standardized forms.

    Standardized residuals are e_i / s with s the standard error of the
    estimate; NaN when s is zero (perfect fit).
    """
    if std_error > 0.0:
        std_residuals = residuals / std_error
    else:
        std_residuals = np.full(residuals.shape, np.nan)
    return {
        "Predicted Value": SeriesSummary.of(fitted),
        "Residual": SeriesSummary.of(residuals),
        "Std. Predicted Value": SeriesSummary.of(standardize(fitted)),
        "Std. Residual": SeriesSummary.of(std_residuals),
    }


def auxiliary_r_squared(X: NDArray[np.floating[Any]], j: int) -> float:
    """R^2 of predictor j regressed on the other predictors plus intercept."""
    n = X.shape[0]
    target = X[:, j]
    others = np.delete(X, j, axis=1)
    design = np.column_stack([np.ones(n), others])
    fit = solve_normal_equations(design, target)
    resid = target - design @ fit.coefficients
    sse = float(resid @ resid)
    sst = float(np.sum((target - np.mean(target)) ** 2))
    if sst == 0.0:
        return 0.0
    return min(max(1.0 - sse / sst, 0.0), 1.0)


def tolerance_vif(X: NDArray[np.floating[Any]]) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """
    Tolerance (1 - R^2_j) and VIF (1 / Tolerance) per predictor.

    With a single predictor both are exactly 1. A tolerance of zero gives
    an infinite VIF.
    """
    p = X.shape[1]
    if p == 1:
        return np.ones(1), np.ones(1)

    tolerance = np.array([1.0 - auxiliary_r_squared(X, j) for j in range(p)])
    with np.errstate(divide='ignore'):
        vif = np.where(tolerance > 0.0, 1.0 / np.where(tolerance > 0.0, tolerance, 1.0), np.inf)
    return tolerance, vif


def correlation_matrix(X: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """Pearson correlations between predictor columns."""
    if X.shape[1] == 1:
        return np.ones((1, 1))
    return np.corrcoef(X, rowvar=False)


def vif_concern(vif: float) -> str:
    """Concern level: Low < 2, Moderate < 5, High < 10, Very High otherwise."""
    if vif < 2.0:
        return "Low"
    if vif < 5.0:
        return "Moderate"
    if vif < 10.0:
        return "High"
    return "Very High"
