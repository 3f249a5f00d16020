"""
Tests for the regression result tables and text summary.
"""

import pytest
import numpy as np

from statsuite.regression import fit


@pytest.fixture
def solution(simple_regression_data):
    X, y, _ = simple_regression_data
    return fit(y, X, names=["age", "income", "tenure"], dependent_name="spend")


class TestTables:

    def test_titles(self, solution):
        assert [t.title for t in solution.to_tables()] == [
            "Model Summary", "ANOVA", "Coefficients", "Residuals Statistics",
        ]

    def test_model_summary(self, solution):
        from statsuite.regression.solution import model_summary_table

        table = model_summary_table(solution).to_dict()
        row = table["rows"][0]
        assert row["rowHeader"] == ["1"]
        assert row["R Square"] == pytest.approx(solution.r_squared)
        assert row["Durbin-Watson"] == pytest.approx(solution.durbin_watson)
        assert table["footnotes"] == [
            "Predictors: (Constant), age, income, tenure",
            "Dependent Variable: spend",
        ]

    def test_anova(self, solution):
        from statsuite.regression.solution import anova_table

        table = anova_table(solution).to_dict()
        group = table["rows"][0]
        assert group["rowHeader"] == ["1"]
        regression, residual, total = group["children"]
        assert regression["rowHeader"] == ["1", "Regression"]
        assert regression["df"] == 3
        assert regression["F"] == pytest.approx(solution.f_statistic)
        assert "F" not in residual
        assert residual["df"] == 96
        assert total["df"] == 99
        assert total["Sum of Squares"] == pytest.approx(solution.sst)

    def test_coefficients(self, solution):
        from statsuite.regression.solution import coefficients_table

        table = coefficients_table(solution).to_dict()
        top = [h["header"] for h in table["columnHeaders"]]
        assert top == [
            "Model", "", "Unstandardized Coefficients", "Standardized Coefficients",
            "t", "Sig.", "Collinearity Statistics",
        ]
        assert [c["header"] for c in table["columnHeaders"][2]["children"]] == ["B", "Std. Error"]

        constant, *predictors = table["rows"][0]["children"]
        assert constant["rowHeader"] == ["1", "(Constant)"]
        assert "Beta" not in constant
        assert "VIF" not in constant
        assert [p["rowHeader"][1] for p in predictors] == ["age", "income", "tenure"]
        assert predictors[0]["B"] == pytest.approx(solution.coefficients[1])
        assert predictors[0]["VIF"] == pytest.approx(solution.vif[0])

    def test_cells_are_plain_python(self, solution):
        from statsuite.regression.solution import coefficients_table

        row = coefficients_table(solution).to_dict()["rows"][0]["children"][1]
        assert all(not isinstance(v, np.generic) for v in row.values())

    def test_residuals_statistics(self, solution):
        from statsuite.regression.solution import residuals_statistics_table

        table = residuals_statistics_table(solution).to_dict()
        assert [r["rowHeader"][0] for r in table["rows"]] == [
            "Predicted Value", "Residual", "Std. Predicted Value", "Std. Residual",
        ]
        assert table["rows"][1]["N"] == 100


class TestSummary:

    def test_summary_contents(self, solution):
        text = solution.summary()
        assert "Linear Regression: spend" in text
        assert "(Constant)" in text
        assert "income" in text
        assert "Durbin-Watson" in text

    def test_summary_lists_warnings(self):
        x = np.array([1.0, 2.0, 3.0, 4.0])
        assert "Warning: perfect fit" in fit(3.0 * x, x).summary()

    def test_repr(self, solution):
        assert repr(solution).startswith("LinearSolution(n=100, p=3, r_squared=")
