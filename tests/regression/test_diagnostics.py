"""
Tests for collinearity diagnostics and residual summaries.
"""

import pytest
import numpy as np

from statsuite.regression import fit, collinearity_diagnostics
from statsuite.regression._diagnostics import (
    SeriesSummary,
    auxiliary_r_squared,
    durbin_watson,
    standardize,
    tolerance_vif,
    vif_concern,
)
from statsuite.core.exceptions import (
    InsufficientDataError,
    SingularMatrixError,
    ValidationError,
)


@pytest.fixture
def correlated_predictors(rng):
    n = 200
    x1 = rng.standard_normal(n)
    x2 = 0.8 * x1 + 0.6 * rng.standard_normal(n)
    x3 = rng.standard_normal(n)
    return np.column_stack([x1, x2, x3])


class TestToleranceVIF:

    def test_single_predictor(self, rng):
        tolerance, vif = tolerance_vif(rng.standard_normal((20, 1)))
        assert tolerance.tolist() == [1.0]
        assert vif.tolist() == [1.0]

    def test_vif_matches_auxiliary_regression(self, correlated_predictors):
        X = correlated_predictors
        tolerance, vif = tolerance_vif(X)
        for j in range(3):
            others = np.column_stack([np.ones(len(X)), np.delete(X, j, axis=1)])
            coef, *_ = np.linalg.lstsq(others, X[:, j], rcond=None)
            resid = X[:, j] - others @ coef
            r2 = 1 - resid @ resid / np.sum((X[:, j] - X[:, j].mean()) ** 2)
            assert tolerance[j] == pytest.approx(1 - r2)
            assert vif[j] == pytest.approx(1 / (1 - r2))

    def test_two_predictors_share_vif(self, correlated_predictors):
        X = correlated_predictors[:, :2]
        _, vif = tolerance_vif(X)
        r = np.corrcoef(X, rowvar=False)[0, 1]
        np.testing.assert_allclose(vif, 1 / (1 - r ** 2))

    def test_auxiliary_r_squared_bounds(self, correlated_predictors):
        r2 = auxiliary_r_squared(correlated_predictors, 1)
        assert 0.0 <= r2 <= 1.0

    def test_fit_reports_vif(self, correlated_predictors, rng):
        y = correlated_predictors @ [1.0, 1.0, 1.0] + rng.standard_normal(200)
        result = fit(y, correlated_predictors)
        np.testing.assert_allclose(result.vif, tolerance_vif(correlated_predictors)[1])
        np.testing.assert_allclose(result.tolerance * result.vif, 1.0)


class TestVifConcern:

    @pytest.mark.parametrize("vif, level", [
        (1.0, "Low"),
        (1.99, "Low"),
        (2.0, "Moderate"),
        (4.99, "Moderate"),
        (5.0, "High"),
        (9.99, "High"),
        (10.0, "Very High"),
        (np.inf, "Very High"),
    ])
    def test_boundaries(self, vif, level):
        assert vif_concern(vif) == level


class TestCollinearityDiagnostics:

    def test_values(self, correlated_predictors):
        result = collinearity_diagnostics(correlated_predictors, names=["a", "b", "c"])
        np.testing.assert_allclose(
            result.correlations, np.corrcoef(correlated_predictors, rowvar=False)
        )
        np.testing.assert_allclose(result.vif, tolerance_vif(correlated_predictors)[1])
        assert len(result.concern_levels) == 3
        assert result.names == ("a", "b", "c")

    def test_tables(self, correlated_predictors):
        result = collinearity_diagnostics(correlated_predictors, names=["a", "b", "c"])
        tables = [t.to_dict() for t in result.to_tables()]
        assert [t["title"] for t in tables] == [
            "Correlation Matrix",
            "Variance Inflation Factors (VIF)",
            "VIF Concern Levels",
        ]
        corr = tables[0]
        assert corr["rows"][0]["rowHeader"] == ["a"]
        assert corr["rows"][0]["a"] == pytest.approx(1.0)
        vif_row = tables[1]["rows"][2]
        assert vif_row["rowHeader"] == ["c"]
        assert set(vif_row) == {"rowHeader", "Tolerance", "VIF", "Concern Level"}
        assert [r["rowHeader"][0] for r in tables[2]["rows"]] == [
            "Low", "Moderate", "High", "Very High",
        ]

    def test_single_column_vector(self, rng):
        result = collinearity_diagnostics(rng.standard_normal(10))
        assert result.vif.tolist() == [1.0]
        assert result.correlations.tolist() == [[1.0]]
        assert result.concern_levels == ("Low",)

    def test_missing_rows_dropped(self, correlated_predictors):
        X = correlated_predictors.copy()
        X[3, 0] = np.nan
        result = collinearity_diagnostics(X)
        assert result._result.info["n"] == 199

    def test_exact_collinearity(self, collinear_data):
        X, _ = collinear_data
        result = collinearity_diagnostics(X)
        assert np.all(result.vif > 1e6)
        assert result.concern_levels == ("Very High",) * 3

    def test_singular_auxiliary_regression(self, rng):
        x = rng.standard_normal(20)
        X = np.column_stack([x, x, rng.standard_normal(20)])
        with pytest.raises(SingularMatrixError):
            collinearity_diagnostics(X)

    def test_constant_column(self, rng):
        X = np.column_stack([rng.standard_normal(10), np.ones(10)])
        with pytest.raises(ValidationError):
            collinearity_diagnostics(X)

    def test_too_few_rows(self):
        with pytest.raises(InsufficientDataError):
            collinearity_diagnostics([[1.0, 2.0], [2.0, 1.0]])

    def test_names_mismatch(self, correlated_predictors):
        with pytest.raises(ValidationError, match="names"):
            collinearity_diagnostics(correlated_predictors, names=["a"])


class TestResidualHelpers:

    def test_durbin_watson_zero_residuals(self):
        assert np.isnan(durbin_watson(np.zeros(5)))

    def test_durbin_watson_alternating(self):
        assert durbin_watson(np.array([1.0, -1.0, 1.0, -1.0])) == pytest.approx(3.0)

    def test_standardize(self):
        z = standardize(np.array([1.0, 2.0, 3.0]))
        np.testing.assert_allclose(z, [-1.0, 0.0, 1.0])
        assert np.all(np.isnan(standardize(np.ones(3))))

    def test_series_summary(self):
        s = SeriesSummary.of(np.array([1.0, 2.0, 3.0, 6.0]))
        assert (s.minimum, s.maximum, s.mean, s.n) == (1.0, 6.0, 3.0, 4)
        assert s.std == pytest.approx(np.std([1, 2, 3, 6], ddof=1))

    def test_residual_statistics(self, simple_regression_data):
        X, y, _ = simple_regression_data
        result = fit(y, X)
        stats = result.residual_statistics
        assert list(stats) == ["Predicted Value", "Residual", "Std. Predicted Value", "Std. Residual"]
        assert stats["Residual"].mean == pytest.approx(0.0, abs=1e-10)
        assert stats["Predicted Value"].mean == pytest.approx(y.mean())
        assert stats["Std. Predicted Value"].std == pytest.approx(1.0)
        assert stats["Std. Residual"].n == 100
