"""
Tests for the built-in analysis modules served by the registry.
"""

import pytest

from statsuite.core.exceptions import ValidationError, ZeroVarianceError
from statsuite.execution import ComputeRegistry, ExecutionConfig, DEFAULT_MODULES
from statsuite.execution.modules import (
    FrequenciesModule,
    KIndependentSamplesModule,
    LinearRegressionModule,
    RunsModule,
    TwoIndependentSamplesModule,
)

SCORE = {"name": "score", "label": "Test score", "data": [3, 5, 4, 8, 9, 7, 6, 10]}
GROUP = {"name": "arm", "data": [1, 1, 1, 1, 2, 2, 2, 2], "values": {"1": "Control", "2": "Treatment"}}


def titles(response):
    return [t["title"] for t in response["tables"]]


@pytest.fixture
def registry():
    reg = ComputeRegistry(ExecutionConfig(cache_hit_delay=0.0))
    yield reg
    reg.terminate_all()


class TestDefaultModules:

    def test_names(self):
        assert set(DEFAULT_MODULES) == {
            "descriptive.frequencies",
            "nonparametric.two_independent_samples",
            "nonparametric.k_independent_samples",
            "nonparametric.runs",
            "regression.linear",
        }

    def test_has_method(self):
        assert RunsModule.has_method("analyze")
        assert not RunsModule.has_method("frequencies")


class TestFrequenciesModule:

    def test_tables_and_notes(self):
        out = FrequenciesModule().frequencies(
            [SCORE, {"name": "blank", "data": [None, ""]}], quartiles=True,
        )
        assert titles(out) == ["Statistics", "Test score", "blank"]
        assert out["notes"] == ["blank has no valid cases"]

    def test_empty_variable_keeps_its_tables(self, registry):
        out = registry.invoke("descriptive.frequencies", "frequencies",
                              {"variables": [{"name": "x", "data": [None, None]}]})
        assert titles(out) == ["Statistics", "x"]
        n_rows = out["tables"][0]["rows"][0]["children"]
        assert n_rows[0]["var_0"] == 0.0
        assert n_rows[1]["var_0"] == 2.0
        freq_rows = out["tables"][1]["rows"]
        assert [r["rowHeader"] for r in freq_rows] == [["Missing", "System"], ["Total"]]

    def test_statistics_off(self):
        out = FrequenciesModule().frequencies([SCORE], statistics=False)
        assert titles(out) == ["Test score"]
        assert "notes" not in out

    def test_weights_and_missing(self):
        variable = {"name": "v", "data": [1, 2, 9], "missing": {"values": [9]}}
        out = FrequenciesModule().frequencies([variable], weights=[2, 1, 1])
        stats = out["tables"][0]
        n_rows = stats["rows"][0]["children"]
        assert n_rows[0]["var_0"] == 3.0
        assert n_rows[1]["var_0"] == 1.0

    def test_via_registry(self, registry):
        out = registry.invoke("descriptive.frequencies", "frequencies",
                              {"variables": [{"name": "x", "data": [1, 2, 2]}]})
        assert out["tables"][0]["title"] == "Statistics"


class TestTwoIndependentSamplesModule:

    def test_mann_whitney(self):
        out = TwoIndependentSamplesModule().mann_whitney([SCORE], GROUP)
        assert titles(out) == ["Ranks", "Test Statistics"]
        ranks = out["tables"][0]
        assert [r["rowHeader"][1] for r in ranks["rows"]] == ["Control", "Treatment", "Total"]
        assert ranks["rows"][0]["rowHeader"][0] == "Test score"

    def test_both_tests(self):
        out = TwoIndependentSamplesModule().analyze(
            [SCORE], GROUP, mann_whitney=True, kolmogorov_smirnov=True,
        )
        assert titles(out) == ["Ranks", "Test Statistics", "Frequencies", "Test Statistics"]

    def test_kolmogorov_smirnov(self):
        out = TwoIndependentSamplesModule().kolmogorov_smirnov([SCORE], GROUP)
        assert titles(out) == ["Frequencies", "Test Statistics"]

    def test_no_test_selected(self):
        with pytest.raises(ValidationError):
            TwoIndependentSamplesModule().analyze([SCORE], GROUP, mann_whitney=False)

    def test_empty_variable_skipped(self):
        empty = {"name": "empty", "data": [None] * 8}
        out = TwoIndependentSamplesModule().mann_whitney([SCORE, empty], GROUP)
        stats = out["tables"][1]
        assert [h["header"] for h in stats["columnHeaders"]] == ["", "Test score"]
        assert len(out["notes"]) == 1
        assert out["notes"][0].startswith("empty was skipped:")

    def test_via_registry(self, registry):
        out = registry.proxy("nonparametric.two_independent_samples").analyze(
            test_variables=[SCORE], grouping=GROUP, group1=1, group2=2,
        )
        assert titles(out) == ["Ranks", "Test Statistics"]


class TestKIndependentSamplesModule:

    def test_grouping_range(self):
        grouping = {"name": "g", "data": [1, 1, 2, 2, 3, 3, 4, 4]}
        out = KIndependentSamplesModule().analyze([SCORE], grouping, minimum=1, maximum=3)
        ranks = out["tables"][0]
        assert [r["rowHeader"][1] for r in ranks["rows"]] == ["1", "2", "3", "Total"]
        assert ranks["rows"][-1]["N"] == 6
        assert titles(out) == ["Ranks", "Test Statistics"]

    def test_all_skipped(self):
        grouping = {"name": "g", "data": [1, 1, 1, 1, 1, 1, 1, 1]}
        out = KIndependentSamplesModule().analyze([SCORE], grouping)
        assert out["tables"] == []
        assert "Test score was skipped" in out["notes"][0]


class TestRunsModule:

    def test_one_table_per_cut_point(self):
        out = RunsModule().analyze([SCORE], cut_points=["median", "mean", 5])
        assert titles(out) == ["Runs Test", "Runs Test 2", "Runs Test 3"]
        assert out["tables"][2]["footnotes"] == ["Test value: Custom"]

    def test_requires_cut_point(self):
        with pytest.raises(ValidationError):
            RunsModule().analyze([SCORE], cut_points=[])

    def test_constant_variable_errors_through_registry(self, registry):
        constant = {"name": "c", "data": [4, 4, 4, 4]}
        with pytest.raises(ZeroVarianceError):
            registry.invoke("nonparametric.runs", "analyze", {"test_variables": [constant]})
        assert registry.status("nonparametric.runs").value == "error"


class TestLinearRegressionModule:

    def test_analyze(self):
        dependent = {"name": "y", "data": [2.1, 3.9, 6.2, 7.8, 10.1, 12.2, None]}
        independents = [
            {"name": "x1", "data": [1, 2, 3, 4, 5, 6, 7]},
            {"name": "x2", "data": [2, 1, 4, 3, 6, 5, 8]},
        ]
        out = LinearRegressionModule().analyze(dependent, independents)
        assert titles(out) == ["Model Summary", "ANOVA", "Coefficients", "Residuals Statistics"]
        assert out["notes"] == ["1 case(s) with missing values were excluded"]

    def test_collinearity(self):
        independents = [
            {"name": "x1", "data": [1, 2, 3, 4, 5, 6]},
            {"name": "x2", "data": [2, 1, 4, 3, 6, 5]},
        ]
        out = LinearRegressionModule().collinearity(independents)
        assert titles(out) == [
            "Correlation Matrix", "Variance Inflation Factors (VIF)", "VIF Concern Levels",
        ]

    def test_collinearity_requires_predictors(self):
        with pytest.raises(ValidationError):
            LinearRegressionModule().collinearity([])


class TestProcessIsolation:

    def test_runs_in_worker_process(self):
        with ComputeRegistry(ExecutionConfig(isolation="process", cache_hit_delay=0.0)) as reg:
            out = reg.invoke("nonparametric.runs", "analyze", {"test_variables": [SCORE]})
            assert titles(out) == ["Runs Test"]
            assert reg.resolve("nonparametric.runs").isolation == "process"
