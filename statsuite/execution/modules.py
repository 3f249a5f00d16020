"""
Analysis modules served by the execution layer.

Each module is a class whose public methods take plain, JSON-like keyword
parameters and return {"tables": [Table.to_dict(), ...]}. Variables arrive
in the host's form:

    {"name": "score", "data": [...], "label": "Test score",
     "kind": "numeric", "missing": {"values": [99], "range": [-9, -1]},
     "values": {1: "Control", 2: "Treatment"}}

Multi-variable methods skip a variable that has no valid data and report
it under "notes"; any other error propagates to the caller.
"""

from __future__ import annotations

from typing import Any, Callable, Sequence
import numpy as np

from statsuite.core.exceptions import InsufficientDataError, ValidationError
from statsuite.core.sample import MissingSpec
from statsuite.core.validation import check_consistent_length
from statsuite.descriptive.solution import frequency_table, statistics_table
from statsuite.descriptive.solvers import frequencies
from statsuite.nonparametric.solution import (
    frequencies_table,
    ranks_table,
    runs_table,
    test_statistics_table,
)
from statsuite.nonparametric.solvers import (
    kruskal_wallis_h,
    ks_two_sample,
    mann_whitney_u,
    runs_test,
)
from statsuite.regression.design import RegressionDesign, column_to_float
from statsuite.regression.solvers import collinearity_diagnostics, fit

Variable = dict[str, Any]


def _name(variable: Variable) -> str:
    return variable.get("name", "x")


def _label(variable: Variable) -> str:
    return variable.get("label") or _name(variable)


def _missing(variable: Variable) -> MissingSpec | None:
    return MissingSpec.from_dict(variable.get("missing"))


def _value_labels(variable: Variable) -> dict[Any, str] | None:
    return variable.get("values") or None


def _response(tables: list[dict[str, Any]], notes: Sequence[str] = ()) -> dict[str, Any]:
    response: dict[str, Any] = {"tables": tables}
    if notes:
        response["notes"] = list(notes)
    return response


def _per_variable(
    variables: Sequence[Variable],
    analyze: Callable[[Variable], Any],
    notes: list[str],
) -> list[Any]:
    """Run analyze on each variable, noting and skipping those without data."""
    solutions = []
    for variable in variables:
        try:
            solutions.append(analyze(variable))
        except InsufficientDataError as e:
            note = f"{_label(variable)} was skipped: {e}"
            if note not in notes:
                notes.append(note)
    return solutions


class AnalysisModule:
    """Base class; subclasses list their callable methods in `methods`."""

    name: str = ""
    methods: tuple[str, ...] = ()

    @classmethod
    def has_method(cls, method_name: str) -> bool:
        return method_name in cls.methods


class FrequenciesModule(AnalysisModule):
    name = "descriptive.frequencies"
    methods = ("frequencies",)

    def frequencies(
        self,
        variables: Sequence[Variable],
        weights: Sequence[float] | None = None,
        percentiles: Sequence[float] = (),
        quartiles: bool = False,
        percentile_method: str = "haverage",
        statistics: bool = True,
    ) -> dict[str, Any]:
        """
        Statistics table for all variables plus one frequency table each.

        A variable with no valid cases still gets its (empty) frequency
        table and its Statistics column, so the host can show the empty
        state.
        """
        notes: list[str] = []
        solutions = []
        for variable in variables:
            solution = frequencies(
                variable.get("data", []),
                weights,
                kind=variable.get("kind", "numeric"),
                missing=_missing(variable),
                percentiles=percentiles,
                quartiles=quartiles,
                percentile_method=percentile_method,
                statistics=statistics,
                name=_name(variable),
                label=variable.get("label"),
            )
            if not solution.rows:
                notes.append(f"{_label(variable)} has no valid cases")
            solutions.append(solution)

        tables = []
        if solutions and statistics:
            tables.append(statistics_table(solutions).to_dict())
        tables.extend(frequency_table(s).to_dict() for s in solutions)
        return _response(tables, notes)


class TwoIndependentSamplesModule(AnalysisModule):
    name = "nonparametric.two_independent_samples"
    methods = ("analyze", "mann_whitney", "kolmogorov_smirnov")

    def analyze(
        self,
        test_variables: Sequence[Variable],
        grouping: Variable,
        group1: float = 1,
        group2: float = 2,
        mann_whitney: bool = True,
        kolmogorov_smirnov: bool = False,
    ) -> dict[str, Any]:
        """Ranks/Test Statistics for Mann-Whitney, Frequencies/Test Statistics for KS."""
        if not (mann_whitney or kolmogorov_smirnov):
            raise ValidationError("select at least one of mann_whitney, kolmogorov_smirnov")

        notes: list[str] = []
        tables = []
        selected = []
        if mann_whitney:
            selected.append((mann_whitney_u, ranks_table))
        if kolmogorov_smirnov:
            selected.append((ks_two_sample, frequencies_table))

        for solver, descriptive_table in selected:
            def run(variable: Variable, solver=solver) -> Any:
                return solver(
                    variable.get("data", []),
                    grouping=grouping.get("data", []),
                    group1=group1,
                    group2=group2,
                    missing=_missing(variable),
                    grouping_missing=_missing(grouping),
                    name=_label(variable),
                    grouping_name=_label(grouping),
                    value_labels=_value_labels(grouping),
                )
            solutions = _per_variable(test_variables, run, notes)
            if solutions:
                tables.append(descriptive_table(solutions).to_dict())
                tables.append(test_statistics_table(solutions).to_dict())
        return _response(tables, notes)

    def mann_whitney(
        self,
        test_variables: Sequence[Variable],
        grouping: Variable,
        group1: float = 1,
        group2: float = 2,
    ) -> dict[str, Any]:
        return self.analyze(test_variables, grouping, group1, group2,
                            mann_whitney=True, kolmogorov_smirnov=False)

    def kolmogorov_smirnov(
        self,
        test_variables: Sequence[Variable],
        grouping: Variable,
        group1: float = 1,
        group2: float = 2,
    ) -> dict[str, Any]:
        return self.analyze(test_variables, grouping, group1, group2,
                            mann_whitney=False, kolmogorov_smirnov=True)


class KIndependentSamplesModule(AnalysisModule):
    name = "nonparametric.k_independent_samples"
    methods = ("analyze",)

    def analyze(
        self,
        test_variables: Sequence[Variable],
        grouping: Variable,
        minimum: float | None = None,
        maximum: float | None = None,
    ) -> dict[str, Any]:
        """Kruskal-Wallis H over the groups whose value lies in [minimum, maximum]."""
        notes: list[str] = []

        def run(variable: Variable) -> Any:
            return kruskal_wallis_h(
                variable.get("data", []),
                grouping=grouping.get("data", []),
                minimum=minimum,
                maximum=maximum,
                missing=_missing(variable),
                grouping_missing=_missing(grouping),
                name=_label(variable),
                grouping_name=_label(grouping),
                value_labels=_value_labels(grouping),
            )

        solutions = _per_variable(test_variables, run, notes)
        tables = []
        if solutions:
            tables.append(ranks_table(solutions).to_dict())
            tables.append(test_statistics_table(solutions).to_dict())
        return _response(tables, notes)


class RunsModule(AnalysisModule):
    name = "nonparametric.runs"
    methods = ("analyze",)

    def analyze(
        self,
        test_variables: Sequence[Variable],
        cut_points: Sequence[str | float] = ("median",),
    ) -> dict[str, Any]:
        """One Runs Test table per cut point, one column per variable."""
        if not cut_points:
            raise ValidationError("cut_points: at least one cut point is required")

        notes: list[str] = []
        tables = []
        for index, cut_point in enumerate(cut_points):
            def run(variable: Variable, cut_point=cut_point) -> Any:
                return runs_test(
                    variable.get("data", []),
                    cut_point,
                    missing=_missing(variable),
                    name=_label(variable),
                )
            solutions = _per_variable(test_variables, run, notes)
            if solutions:
                title = "Runs Test" if index == 0 else f"Runs Test {index + 1}"
                tables.append(runs_table(solutions, title=title).to_dict())
        return _response(tables, notes)


class LinearRegressionModule(AnalysisModule):
    name = "regression.linear"
    methods = ("analyze", "collinearity")

    def analyze(
        self,
        dependent: Variable,
        independents: Sequence[Variable],
    ) -> dict[str, Any]:
        """Model Summary, ANOVA, Coefficients and Residuals Statistics."""
        missing = {_name(v): _missing(v) for v in [dependent, *independents]}
        design = RegressionDesign.from_columns(
            dependent.get("data", []),
            [v.get("data", []) for v in independents],
            names=[_name(v) for v in independents],
            dependent_name=_name(dependent),
            missing=missing,
        )
        solution = fit(design)

        notes = list(solution.warnings)
        if design.n_excluded:
            notes.append(f"{design.n_excluded} case(s) with missing values were excluded")
        return _response([t.to_dict() for t in solution.to_tables()], notes)

    def collinearity(self, independents: Sequence[Variable]) -> dict[str, Any]:
        """Correlation Matrix, VIF and VIF Concern Levels tables."""
        if not independents:
            raise ValidationError("independents: at least one predictor is required")
        columns = [
            column_to_float(v.get("data", []), _name(v), _missing(v))
            for v in independents
        ]
        check_consistent_length(*columns, names=tuple(_name(v) for v in independents))
        solution = collinearity_diagnostics(
            np.column_stack(columns),
            names=[_name(v) for v in independents],
        )
        return _response([t.to_dict() for t in solution.to_tables()])


DEFAULT_MODULES: dict[str, type[AnalysisModule]] = {
    cls.name: cls
    for cls in (
        FrequenciesModule,
        TwoIndependentSamplesModule,
        KIndependentSamplesModule,
        RunsModule,
        LinearRegressionModule,
    )
}
