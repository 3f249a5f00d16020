"""
Regression solution types.

Contains the parameter payloads, the user-facing solution wrappers and the
Model Summary / ANOVA / Coefficients / Residuals Statistics table builders.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray
from scipy import special, stats

from statsuite.core.result import Result
from statsuite.core.tables import Table, ColumnHeader, LeafRow, GroupRow, headers
from statsuite.regression._diagnostics import (
    VIF_CONCERN_DESCRIPTIONS,
    SeriesSummary,
    residual_statistics,
    vif_concern,
)

if TYPE_CHECKING:
    from statsuite.regression.design import RegressionDesign


@dataclass(frozen=True)
class LinearParams:
    """
    Parameter payload for linear regression.

    coefficients, standard errors and xtx_inverse are ordered intercept
    first. tolerance and vif have one entry per predictor.
    """
    coefficients: NDArray[np.floating[Any]]
    fitted_values: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    sst: float
    ssr: float
    sse: float
    df_regression: int
    df_residual: int
    xtx_inverse: NDArray[np.floating[Any]]
    durbin_watson: float
    tolerance: NDArray[np.floating[Any]]
    vif: NDArray[np.floating[Any]]


@dataclass
class LinearSolution:
    """
    User-facing regression results.

    Wraps the backend Result and derives the ANOVA, goodness-of-fit and
    coefficient inference quantities on access.
    """
    _result: Result[LinearParams]
    _design: 'RegressionDesign'

    # Cached computations
    _standard_errors: NDArray[np.floating[Any]] | None = None
    _residual_statistics: dict[str, SeriesSummary] | None = None

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        return self._result.params.coefficients

    @property
    def intercept(self) -> float:
        return float(self.coefficients[0])

    @property
    def fitted_values(self) -> NDArray[np.floating[Any]]:
        return self._result.params.fitted_values

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        return self._result.params.residuals

    @property
    def sst(self) -> float:
        return self._result.params.sst

    @property
    def ssr(self) -> float:
        return self._result.params.ssr

    @property
    def sse(self) -> float:
        return self._result.params.sse

    @property
    def df_regression(self) -> int:
        return self._result.params.df_regression

    @property
    def df_residual(self) -> int:
        return self._result.params.df_residual

    @property
    def r_squared(self) -> float:
        if self.sst == 0:
            return 0.0
        return min(max(1.0 - self.sse / self.sst, 0.0), 1.0)

    @property
    def r(self) -> float:
        return float(np.sqrt(self.r_squared))

    @property
    def adjusted_r_squared(self) -> float:
        n = self._design.n
        return 1.0 - (n - 1) / self.df_residual * (1.0 - self.r_squared)

    @property
    def mean_square_regression(self) -> float:
        return self.ssr / self.df_regression

    @property
    def mean_square_residual(self) -> float:
        return self.sse / self.df_residual

    @property
    def std_error_estimate(self) -> float:
        """s = sqrt(SSE / (n - p - 1))."""
        return float(np.sqrt(self.mean_square_residual))

    @property
    def f_statistic(self) -> float:
        """(SSR/p) / (SSE/(n-p-1)); inf for a perfect fit, NaN for constant y."""
        if self.sst == 0:
            return float('nan')
        if self.sse == 0:
            return float('inf')
        return self.mean_square_regression / self.mean_square_residual

    @property
    def f_p_value(self) -> float:
        """
        Upper tail of F(p, n-p-1).

        Uses P(F > f) = I_x(df2/2, df1/2) with x = df2 / (df2 + df1 f),
        the regularized incomplete beta function.
        """
        f = self.f_statistic
        if np.isnan(f):
            return float('nan')
        if np.isinf(f):
            return 0.0
        df1, df2 = self.df_regression, self.df_residual
        x = df2 / (df2 + df1 * f)
        return float(special.betainc(df2 / 2.0, df1 / 2.0, x))

    @property
    def durbin_watson(self) -> float:
        return self._result.params.durbin_watson

    @property
    def standard_errors(self) -> NDArray[np.floating[Any]]:
        """
        Standard errors of coefficients.

        Computed as SE(b) = sqrt(diag(s^2 (X'X)^-1)).
        """
        if self._standard_errors is None:
            diag = np.diag(self._result.params.xtx_inverse)
            self._standard_errors = np.sqrt(self.mean_square_residual * np.clip(diag, 0.0, None))
        return self._standard_errors

    @property
    def t_statistics(self) -> NDArray[np.floating[Any]]:
        """t-statistics for coefficients; inf where the standard error is zero."""
        se = self.standard_errors
        with np.errstate(divide='ignore', invalid='ignore'):
            return np.where(se > 0, self.coefficients / np.where(se > 0, se, 1.0),
                            np.copysign(np.inf, self.coefficients))

    @property
    def p_values(self) -> NDArray[np.floating[Any]]:
        """Two-tailed p-values from Student's t with n-p-1 df."""
        return 2.0 * stats.t.sf(np.abs(self.t_statistics), self.df_residual)

    @property
    def standardized_coefficients(self) -> NDArray[np.floating[Any]]:
        """Beta_j = b_j * sd(x_j) / sd(y), predictors only."""
        sd_y = float(np.std(self._design.y, ddof=1))
        sd_x = np.std(self._design.X, axis=0, ddof=1)
        if sd_y == 0.0:
            return np.full(self._design.p, np.nan)
        return self.coefficients[1:] * sd_x / sd_y

    @property
    def tolerance(self) -> NDArray[np.floating[Any]]:
        return self._result.params.tolerance

    @property
    def vif(self) -> NDArray[np.floating[Any]]:
        return self._result.params.vif

    @property
    def residual_statistics(self) -> dict[str, SeriesSummary]:
        if self._residual_statistics is None:
            self._residual_statistics = residual_statistics(
                self.fitted_values, self.residuals, self.std_error_estimate
            )
        return self._residual_statistics

    @property
    def names(self) -> tuple[str, ...]:
        return self._design.names

    @property
    def n(self) -> int:
        return self._design.n

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def to_tables(self) -> list[Table]:
        return [
            model_summary_table(self),
            anova_table(self),
            coefficients_table(self),
            residuals_statistics_table(self),
        ]

    def summary(self) -> str:
        """Generate SPSS-style summary output."""
        lines = [
            f"Linear Regression: {self._design.dependent_name}",
            "=" * 72,
            f"Observations: {self.n} ({self._design.n_excluded} excluded)",
            f"R: {self.r:.6f}   R-squared: {self.r_squared:.6f}   "
            f"Adj. R-squared: {self.adjusted_r_squared:.6f}",
            f"Std. Error of the Estimate: {self.std_error_estimate:.6f}",
            f"F({self.df_regression}, {self.df_residual}) = {self.f_statistic:.4f}, "
            f"p = {self.f_p_value:.4g}",
            f"Durbin-Watson: {self.durbin_watson:.4f}",
            "",
            f"{'Term':<16} {'B':>12} {'Std.Error':>12} {'t':>10} {'Sig.':>8} {'VIF':>8}",
            "-" * 72,
        ]
        vifs = (float('nan'),) + tuple(self.vif)
        for name, b, se, t, p, v in zip(
            _term_names(self), self.coefficients, self.standard_errors,
            self.t_statistics, self.p_values, vifs,
        ):
            vif_str = f"{v:8.3f}" if not np.isnan(v) else " " * 8
            lines.append(f"{name:<16} {b:12.6f} {se:12.6f} {t:10.3f} {p:8.4f} {vif_str}")
        lines.append("-" * 72)
        lines.append(f"Backend: {self.backend_name}")
        if self._result.total_seconds is not None:
            lines.append(f"Time: {self._result.total_seconds:.4f}s")
        for w in self.warnings:
            lines.append(f"Warning: {w}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"LinearSolution(n={self.n}, p={self._design.p}, "
            f"r_squared={self.r_squared:.4f})"
        )


def _term_names(solution: LinearSolution) -> tuple[str, ...]:
    return ("(Constant)",) + solution.names


def _model_footnotes(solution: LinearSolution) -> tuple[str, ...]:
    return (
        "Predictors: " + ", ".join(_term_names(solution)),
        f"Dependent Variable: {solution._design.dependent_name}",
    )


def model_summary_table(solution: LinearSolution) -> Table:
    return Table(
        title="Model Summary",
        column_headers=headers(
            "Model", "R", "R Square", "Adjusted R Square",
            "Std. Error of the Estimate", "Durbin-Watson",
        ),
        rows=(LeafRow(
            row_header=("1",),
            cells={
                "R": solution.r,
                "R Square": solution.r_squared,
                "Adjusted R Square": solution.adjusted_r_squared,
                "Std. Error of the Estimate": solution.std_error_estimate,
                "Durbin-Watson": solution.durbin_watson,
            },
        ),),
        footnotes=_model_footnotes(solution),
    )


def anova_table(solution: LinearSolution) -> Table:
    children = (
        LeafRow(
            row_header=("1", "Regression"),
            cells={
                "Sum of Squares": solution.ssr,
                "df": solution.df_regression,
                "Mean Square": solution.mean_square_regression,
                "F": solution.f_statistic,
                "Sig.": solution.f_p_value,
            },
        ),
        LeafRow(
            row_header=("1", "Residual"),
            cells={
                "Sum of Squares": solution.sse,
                "df": solution.df_residual,
                "Mean Square": solution.mean_square_residual,
            },
        ),
        LeafRow(
            row_header=("1", "Total"),
            cells={
                "Sum of Squares": solution.sst,
                "df": solution.df_regression + solution.df_residual,
            },
        ),
    )
    return Table(
        title="ANOVA",
        column_headers=headers("Model", "", "Sum of Squares", "df", "Mean Square", "F", "Sig."),
        rows=(GroupRow(row_header=("1",), children=children),),
        footnotes=_model_footnotes(solution),
    )


def coefficients_table(solution: LinearSolution) -> Table:
    columns = (
        ColumnHeader("Model"),
        ColumnHeader(""),
        ColumnHeader("Unstandardized Coefficients", children=(
            ColumnHeader("B"),
            ColumnHeader("Std. Error"),
        )),
        ColumnHeader("Standardized Coefficients", children=(ColumnHeader("Beta"),)),
        ColumnHeader("t"),
        ColumnHeader("Sig."),
        ColumnHeader("Collinearity Statistics", children=(
            ColumnHeader("Tolerance"),
            ColumnHeader("VIF"),
        )),
    )

    beta = solution.standardized_coefficients
    rows = []
    for j, name in enumerate(_term_names(solution)):
        cells: dict[str, Any] = {
            "B": solution.coefficients[j],
            "Std. Error": solution.standard_errors[j],
            "t": solution.t_statistics[j],
            "Sig.": solution.p_values[j],
        }
        if j > 0:
            cells["Beta"] = beta[j - 1]
            cells["Tolerance"] = solution.tolerance[j - 1]
            cells["VIF"] = solution.vif[j - 1]
        rows.append(LeafRow(row_header=("1", name), cells=cells))

    return Table(
        title="Coefficients",
        column_headers=columns,
        rows=(GroupRow(row_header=("1",), children=tuple(rows)),),
        footnotes=(f"Dependent Variable: {solution._design.dependent_name}",),
    )


def residuals_statistics_table(solution: LinearSolution) -> Table:
    rows = tuple(
        LeafRow(
            row_header=(caption,),
            cells={
                "Minimum": s.minimum,
                "Maximum": s.maximum,
                "Mean": s.mean,
                "Std. Deviation": s.std,
                "N": s.n,
            },
        )
        for caption, s in solution.residual_statistics.items()
    )
    return Table(
        title="Residuals Statistics",
        column_headers=headers("", "Minimum", "Maximum", "Mean", "Std. Deviation", "N"),
        rows=rows,
        footnotes=(f"Dependent Variable: {solution._design.dependent_name}",),
    )


@dataclass(frozen=True)
class CollinearityParams:
    """Predictor correlations and per-predictor Tolerance/VIF."""
    correlations: NDArray[np.floating[Any]]
    tolerance: NDArray[np.floating[Any]]
    vif: NDArray[np.floating[Any]]


@dataclass
class CollinearitySolution:
    """Standalone multicollinearity diagnostics for a predictor set."""
    _result: Result[CollinearityParams]
    names: tuple[str, ...]

    @property
    def correlations(self) -> NDArray[np.floating[Any]]:
        return self._result.params.correlations

    @property
    def tolerance(self) -> NDArray[np.floating[Any]]:
        return self._result.params.tolerance

    @property
    def vif(self) -> NDArray[np.floating[Any]]:
        return self._result.params.vif

    @property
    def concern_levels(self) -> tuple[str, ...]:
        return tuple(vif_concern(float(v)) for v in self.vif)

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def to_tables(self) -> list[Table]:
        corr_rows = tuple(
            LeafRow(
                row_header=(name,),
                cells={other: self.correlations[i, j] for j, other in enumerate(self.names)},
            )
            for i, name in enumerate(self.names)
        )
        vif_rows = tuple(
            LeafRow(
                row_header=(name,),
                cells={"Tolerance": t, "VIF": v, "Concern Level": level},
            )
            for name, t, v, level in zip(self.names, self.tolerance, self.vif, self.concern_levels)
        )
        level_rows = tuple(
            LeafRow(row_header=(level,), cells={"VIF Range": span, "Interpretation": text})
            for level, span, text in VIF_CONCERN_DESCRIPTIONS
        )
        return [
            Table(
                title="Correlation Matrix",
                column_headers=headers("", *self.names),
                rows=corr_rows,
            ),
            Table(
                title="Variance Inflation Factors (VIF)",
                column_headers=headers("Variable", "Tolerance", "VIF", "Concern Level"),
                rows=vif_rows,
            ),
            Table(
                title="VIF Concern Levels",
                column_headers=headers("Concern Level", "VIF Range", "Interpretation"),
                rows=level_rows,
            ),
        ]

    def __repr__(self) -> str:
        return f"CollinearitySolution(names={self.names!r}, max_vif={float(np.max(self.vif)):.4g})"
