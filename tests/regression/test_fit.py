"""
Tests for regression fit().

Tests the complete pipeline: RegressionDesign construction, backend
selection, and solution properties.
"""

import pytest
import numpy as np
from scipy import stats

from statsuite.regression import fit, RegressionDesign, LinearSolution
from statsuite.core.sample import MissingSpec
from statsuite.core.exceptions import (
    DimensionError,
    InsufficientDataError,
    SingularMatrixError,
    ValidationError,
)


class TestFitBasic:
    """Basic fit() functionality tests."""

    def test_fit_from_arrays(self, simple_regression_data):
        X, y, _ = simple_regression_data
        result = fit(y, X)
        assert isinstance(result, LinearSolution)
        assert result.coefficients.shape == (4,)

    def test_fit_from_design(self, simple_regression_data):
        X, y, _ = simple_regression_data
        design = RegressionDesign.from_arrays(X, y)
        result = fit(design)
        assert isinstance(result, LinearSolution)

    def test_fit_requires_X_with_arrays(self, simple_regression_data):
        _, y, _ = simple_regression_data
        with pytest.raises(ValidationError, match="X"):
            fit(y)

    def test_matches_lstsq(self, simple_regression_data):
        X, y, _ = simple_regression_data
        result = fit(y, X)
        Xd = np.column_stack([np.ones(len(y)), X])
        expected, *_ = np.linalg.lstsq(Xd, y, rcond=None)
        np.testing.assert_allclose(result.coefficients, expected, rtol=1e-10, atol=1e-12)

    def test_coefficients_close_to_truth(self, simple_regression_data):
        X, y, beta_true = simple_regression_data
        result = fit(y, X)
        np.testing.assert_allclose(result.coefficients[1:], beta_true, atol=0.1)
        assert result.intercept == pytest.approx(0.0, abs=0.1)

    def test_r_squared_range(self, simple_regression_data):
        X, y, _ = simple_regression_data
        result = fit(y, X)
        assert 0.0 <= result.r_squared <= 1.0
        assert result.r == pytest.approx(np.sqrt(result.r_squared))

    def test_residuals_orthogonal_to_design(self, simple_regression_data):
        X, y, _ = simple_regression_data
        result = fit(y, X)
        assert abs(result.residuals.sum()) < 1e-10
        np.testing.assert_allclose(X.T @ result.residuals, 0.0, atol=1e-9)

    def test_unknown_backend(self, simple_regression_data):
        X, y, _ = simple_regression_data
        with pytest.raises(ValidationError, match="backend"):
            fit(y, X, backend="gpu")


class TestFitProperties:

    def test_anova_decomposition(self, simple_regression_data):
        X, y, _ = simple_regression_data
        result = fit(y, X)
        assert result.sst == pytest.approx(result.ssr + result.sse)
        assert result.df_regression == 3
        assert result.df_residual == 96
        assert result.mean_square_residual == pytest.approx(result.sse / 96)
        assert result.std_error_estimate == pytest.approx(np.sqrt(result.sse / 96))

    def test_adjusted_r_squared(self, simple_regression_data):
        X, y, _ = simple_regression_data
        result = fit(y, X)
        expected = 1 - (1 - result.r_squared) * 99 / 96
        assert result.adjusted_r_squared == pytest.approx(expected)

    def test_f_statistic_and_p_value(self, rng):
        X = rng.standard_normal((40, 2))
        y = 0.3 * X[:, 0] + rng.standard_normal(40)
        result = fit(y, X)
        expected_f = (result.ssr / 2) / (result.sse / 37)
        assert result.f_statistic == pytest.approx(expected_f)
        assert result.f_p_value == pytest.approx(stats.f.sf(expected_f, 2, 37), rel=1e-8)

    def test_coefficient_inference(self, rng):
        X = rng.standard_normal((50, 2))
        y = 1.0 + X @ [0.5, 0.0] + rng.standard_normal(50)
        result = fit(y, X)
        Xd = np.column_stack([np.ones(50), X])
        cov = result.mean_square_residual * np.linalg.inv(Xd.T @ Xd)
        se = np.sqrt(np.diag(cov))
        np.testing.assert_allclose(result.standard_errors, se, rtol=1e-8)
        np.testing.assert_allclose(result.t_statistics, result.coefficients / se, rtol=1e-8)
        np.testing.assert_allclose(
            result.p_values,
            2 * stats.t.sf(np.abs(result.coefficients / se), 47),
            rtol=1e-6,
        )

    def test_standardized_coefficients(self, simple_regression_data):
        X, y, _ = simple_regression_data
        result = fit(y, X)
        expected = result.coefficients[1:] * X.std(axis=0, ddof=1) / y.std(ddof=1)
        np.testing.assert_allclose(result.standardized_coefficients, expected)

    def test_single_predictor_beta_is_correlation(self, rng):
        x = rng.standard_normal(30)
        y = 2 * x + rng.standard_normal(30)
        result = fit(y, x)
        assert result.standardized_coefficients[0] == pytest.approx(np.corrcoef(x, y)[0, 1])

    def test_durbin_watson(self, simple_regression_data):
        X, y, _ = simple_regression_data
        result = fit(y, X)
        e = result.residuals
        assert result.durbin_watson == pytest.approx(np.sum(np.diff(e) ** 2) / np.sum(e ** 2))
        assert 0.0 <= result.durbin_watson <= 4.0

    def test_metadata(self, simple_regression_data):
        X, y, _ = simple_regression_data
        result = fit(y, X, names=["a", "b", "c"])
        assert result.names == ("a", "b", "c")
        assert result.n == 100
        assert result.backend_name == "cpu_gauss_jordan"
        assert result.info["method"] == "gauss_jordan"
        assert result.info["n_excluded"] == 0
        assert "normal_equations" in result.timing
        assert result.warnings == ()


class TestFitFailures:

    def test_collinear_predictors(self, collinear_data):
        X, y = collinear_data
        with pytest.raises(SingularMatrixError):
            fit(y, X)

    def test_duplicated_predictor(self, rng):
        x = rng.standard_normal(20)
        with pytest.raises(SingularMatrixError):
            fit(rng.standard_normal(20), np.column_stack([x, x]))

    def test_too_few_cases(self):
        with pytest.raises(InsufficientDataError):
            fit([1.0, 2.0, 3.0], [[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]])

    def test_exactly_p_plus_two_cases(self):
        result = fit([1.0, 3.0, 2.0], [1.0, 2.0, 3.0])
        assert result.df_residual == 1

    def test_length_mismatch(self):
        with pytest.raises(DimensionError):
            fit([1.0, 2.0, 3.0, 4.0], [1.0, 2.0, 3.0])

    def test_infinite_values_rejected(self):
        with pytest.raises(ValidationError):
            fit([1.0, 2.0, 3.0, np.inf], [1.0, 2.0, 3.0, 4.0])

    def test_names_length_mismatch(self, simple_regression_data):
        X, y, _ = simple_regression_data
        with pytest.raises(ValidationError, match="names"):
            fit(y, X, names=["a"])


class TestMissingData:

    def test_listwise_deletion(self, simple_regression_data):
        X, y, _ = simple_regression_data
        X = X.copy()
        y = y.copy()
        X[0, 1] = np.nan
        y[5] = np.nan
        result = fit(y, X)
        assert result.n == 98
        assert result.info["n_excluded"] == 2

        keep = np.ones(100, dtype=bool)
        keep[[0, 5]] = False
        reference = fit(y[keep], X[keep])
        np.testing.assert_allclose(result.coefficients, reference.coefficients)

    def test_from_columns_with_user_missing(self):
        design = RegressionDesign.from_columns(
            [1, 2, 3, 99, 5, None],
            [[1, 2, 4, 4, 5, 6]],
            names=["x"],
            dependent_name="y",
            missing={"y": MissingSpec(values=(99,))},
        )
        assert design.n == 4
        assert design.n_excluded == 2
        assert design.names == ("x",)

    def test_from_columns_user_missing_text_cells(self):
        design = RegressionDesign.from_columns(
            ["1", "2", "3", "99", "5", "6"],
            [["1", "2", "4", "4", "-3", "6"]],
            names=["x"],
            dependent_name="y",
            missing={"y": MissingSpec(values=(99,)), "x": MissingSpec(low=-9, high=-1)},
        )
        assert design.n == 4
        assert design.n_excluded == 2

    def test_from_columns_rejects_text(self):
        with pytest.raises(ValidationError, match="non-numeric"):
            RegressionDesign.from_columns([1, 2, 3, 4], [["a", 2, 3, 4]], names=["x"])


class TestDegenerateFits:

    def test_perfect_fit(self):
        x = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
        result = fit(1.0 + 2.0 * x, x)
        np.testing.assert_allclose(result.coefficients, [1.0, 2.0], atol=1e-10)
        assert result.r_squared == 1.0
        assert result.sse == 0.0
        assert result.f_statistic == np.inf
        assert result.f_p_value == 0.0
        assert any("perfect fit" in w for w in result.warnings)
        assert np.isnan(result.residual_statistics["Std. Residual"].mean)

    def test_constant_response(self):
        x = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
        result = fit(np.full(5, 3.0), x, dependent_name="score")
        assert result.r_squared == 0.0
        assert np.isnan(result.f_statistic)
        assert np.isnan(result.f_p_value)
        assert np.all(np.isnan(result.standardized_coefficients))
        assert result.warnings == ("score is constant: R Square is 0 and F is undefined",)
