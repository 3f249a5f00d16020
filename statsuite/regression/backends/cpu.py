"""
CPU reference backend for linear regression.

Solves the normal equations (X'X) b = X'y by Gauss-Jordan inversion of
X'X, then derives the ANOVA decomposition, Durbin-Watson and per-predictor
Tolerance/VIF. Singular X'X (collinear predictors) raises
SingularMatrixError rather than dropping terms.
"""

from typing import Any
import numpy as np

from statsuite.core.result import Result
from statsuite.core.compute.timing import Timer
from statsuite.core.compute.linalg import solve_normal_equations
from statsuite.core.compute.tolerances import PERFECT_FIT_RTOL
from statsuite.regression.design import RegressionDesign
from statsuite.regression.solution import LinearParams
from statsuite.regression._diagnostics import durbin_watson, tolerance_vif


class CPUNormalEquationsBackend:
    """
    CPU backend using Gauss-Jordan inversion of the cross-product matrix.

    Implements the Backend protocol for RegressionDesign -> LinearParams.
    """

    @property
    def name(self) -> str:
        return 'cpu_gauss_jordan'

    def solve(self, design: RegressionDesign) -> Result[LinearParams]:
        """
        Solve OLS via the normal equations.

        Algorithm:
            1. Build [1 | X] and invert X'X by Gauss-Jordan elimination
            2. b = (X'X)^-1 X'y
            3. Residuals, sums of squares and diagnostics

        Raises:
            SingularMatrixError: If X'X (or an auxiliary VIF regression) is singular
        """
        timer = Timer()
        timer.start()
        warnings_list: list[str] = []

        y = design.y
        n, p = design.n, design.p

        with timer.section('normal_equations'):
            Xd = design.design_matrix()
            fit = solve_normal_equations(Xd, y)
            coefficients = fit.coefficients

        with timer.section('anova'):
            fitted_values = Xd @ coefficients
            residuals = y - fitted_values
            sse = float(residuals @ residuals)
            sst = float(np.sum((y - np.mean(y)) ** 2))
            # Floating-point drift can leave SSR slightly negative or SSE
            # slightly above SST on near-perfect fits.
            ssr = max(sst - sse, 0.0)
            if sst > 0.0 and sse <= PERFECT_FIT_RTOL * sst:
                residuals = np.zeros_like(residuals)
                fitted_values = y.copy()
                sse = 0.0
                ssr = sst

        if sst == 0.0:
            warnings_list.append(
                f"{design.dependent_name} is constant: R Square is 0 and F is undefined"
            )
        elif sse == 0.0:
            warnings_list.append(
                "perfect fit: residual sum of squares is zero, F is infinite "
                "and standardized residuals are undefined"
            )

        with timer.section('diagnostics'):
            dw = durbin_watson(residuals)
            tolerance, vif = tolerance_vif(design.X)

        timer.stop()

        params = LinearParams(
            coefficients=coefficients,
            fitted_values=fitted_values,
            residuals=residuals,
            sst=sst,
            ssr=ssr,
            sse=sse,
            df_regression=p,
            df_residual=n - p - 1,
            xtx_inverse=fit.xtx_inverse,
            durbin_watson=dw,
            tolerance=tolerance,
            vif=vif,
        )

        info: dict[str, Any] = {
            'method': 'gauss_jordan',
            'n_excluded': design.n_excluded,
        }

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )
