"""
Nonparametric test solution types.

NonparametricSolution wraps Result[TestParams]. The module-level table
builders accept several solutions (one per test variable) and lay them out
side by side the way the results viewer shows them: a "Ranks" table with
one block of rows per variable, and a "Test Statistics" table with one
column per variable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence, TYPE_CHECKING

from statsuite.core.result import Result
from statsuite.core.tables import Table, ColumnHeader, LeafRow, headers
from statsuite.nonparametric._common import (
    MannWhitneyParams,
    KruskalWallisParams,
    KolmogorovSmirnovParams,
    RunsParams,
)

if TYPE_CHECKING:
    from statsuite.nonparametric.design import NonparametricDesign

_METHODS = {
    "mann_whitney": "Mann-Whitney U Test",
    "kruskal_wallis": "Kruskal-Wallis Test",
    "ks_two_sample": "Two-Sample Kolmogorov-Smirnov Test",
    "runs": "Runs Test",
}


@dataclass
class NonparametricSolution:
    """
    User-facing nonparametric test results.

    Attributes shared by every test (statistic, p_value) are properties;
    test-specific values are on params.
    """
    _result: Result[Any]
    _design: 'NonparametricDesign'
    value_labels: Mapping[float, str] | None = None

    @property
    def params(self) -> Any:
        return self._result.params

    @property
    def test_type(self) -> str:
        return self._design.test_type

    @property
    def method(self) -> str:
        return _METHODS[self.test_type]

    @property
    def variable_name(self) -> str:
        return self._design.variable_name

    @property
    def statistic(self) -> float:
        """U, H, Kolmogorov-Smirnov Z, or runs-test Z."""
        p = self._result.params
        if isinstance(p, MannWhitneyParams):
            return p.u
        if isinstance(p, KruskalWallisParams):
            return p.h
        return p.z

    @property
    def p_value(self) -> float:
        """Asymptotic two-tailed p-value."""
        return self._result.params.p_value

    @property
    def group_labels(self) -> tuple[str, ...]:
        return tuple(
            format_group_label(label, self.value_labels)
            for label in self._design.group_labels
        )

    # --- Metadata ---

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

    # --- Formatting ---

    def to_tables(self) -> list[Table]:
        """Result tables for this single variable."""
        if self.test_type == "runs":
            return [runs_table([self])]
        if self.test_type == "ks_two_sample":
            return [frequencies_table([self]), test_statistics_table([self])]
        return [ranks_table([self]), test_statistics_table([self])]

    def summary(self) -> str:
        lines = [f"\t{self.method}", "", f"data:  {self.variable_name}"]
        p = self._result.params
        if isinstance(p, MannWhitneyParams):
            lines.append(f"U = {p.u:.5g}, W = {p.w:.5g}, Z = {p.z:.5g}, "
                         f"p-value = {_format_pvalue(p.p_value)}")
            if p.exact_p_value is not None:
                lines.append(f"exact p-value = {_format_pvalue(p.exact_p_value)}")
        elif isinstance(p, KruskalWallisParams):
            lines.append(f"H = {p.h:.5g}, df = {p.df}, "
                         f"p-value = {_format_pvalue(p.p_value)}")
        elif isinstance(p, KolmogorovSmirnovParams):
            lines.append(f"D = {p.d_absolute:.5g}, Z = {p.z:.5g}, "
                         f"p-value = {_format_pvalue(p.p_value)}")
        else:
            lines.append(f"test value = {p.test_value:.5g}, runs = {p.runs}, "
                         f"Z = {p.z:.5g}, p-value = {_format_pvalue(p.p_value)}")
        lines.append("")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"NonparametricSolution(method={self.method!r}, "
            f"statistic={self.statistic:.4g}, p_value={self.p_value:.4g})"
        )


def format_group_label(label: Any, value_labels: Mapping[float, str] | None = None) -> str:
    """Value label if one is defined, else the value without a trailing .0."""
    text = str(int(label)) if isinstance(label, float) and label.is_integer() else str(label)
    if value_labels:
        for key, value_label in value_labels.items():
            if key == label or str(key) == text:
                return str(value_label)
    return text


def _variable_columns(solutions: Sequence[NonparametricSolution]) -> tuple[ColumnHeader, ...]:
    return (ColumnHeader(""),) + tuple(
        ColumnHeader(s.variable_name, key=f"var_{i}") for i, s in enumerate(solutions)
    )


def ranks_table(solutions: Sequence[NonparametricSolution]) -> Table:
    """Mean ranks per group, one block per variable, each ending in Total."""
    grouping = solutions[0]._design.grouping_name if solutions else ""
    rows: list[LeafRow] = []
    for s in solutions:
        p = s.params
        if isinstance(p, MannWhitneyParams):
            counts = (p.n1, p.n2)
        else:
            counts = p.counts
        for label, n, mean_rank, rank_sum in zip(
            s.group_labels, counts, p.mean_ranks, p.rank_sums
        ):
            rows.append(LeafRow(
                row_header=(s.variable_name, label),
                cells={"N": n, "Mean Rank": mean_rank, "Sum of Ranks": rank_sum},
            ))
        rows.append(LeafRow(
            row_header=(s.variable_name, "Total"),
            cells={"N": sum(counts)},
        ))

    return Table(
        title="Ranks",
        column_headers=headers("", grouping, "N", "Mean Rank", "Sum of Ranks"),
        rows=tuple(rows),
    )


def frequencies_table(solutions: Sequence[NonparametricSolution]) -> Table:
    """Group sizes for the Kolmogorov-Smirnov test."""
    grouping = solutions[0]._design.grouping_name if solutions else ""
    rows: list[LeafRow] = []
    for s in solutions:
        p = s.params
        for label, n in zip(s.group_labels, (p.n1, p.n2)):
            rows.append(LeafRow(row_header=(s.variable_name, label), cells={"N": n}))
        rows.append(LeafRow(row_header=(s.variable_name, "Total"), cells={"N": p.n1 + p.n2}))
    return Table(
        title="Frequencies",
        column_headers=headers("", grouping, "N"),
        rows=tuple(rows),
    )


def test_statistics_table(solutions: Sequence[NonparametricSolution]) -> Table:
    """Statistic rows by variable column."""
    if not solutions:
        return Table(title="Test Statistics", column_headers=headers(""))

    test_type = solutions[0].test_type
    if test_type == "mann_whitney":
        layout = [
            (("Mann-Whitney U",), lambda p: p.u),
            (("Wilcoxon W",), lambda p: p.w),
            (("Z",), lambda p: p.z),
            (("Asymp. Sig. (2-tailed)",), lambda p: p.p_value),
            (("Exact Sig. [2*(1-tailed Sig.)]",), lambda p: p.exact_p_value),
        ]
    elif test_type == "kruskal_wallis":
        layout = [
            (("Kruskal-Wallis H",), lambda p: p.h),
            (("df",), lambda p: p.df),
            (("Asymp. Sig.",), lambda p: p.p_value),
        ]
    else:
        layout = [
            (("Most Extreme Differences", "Absolute"), lambda p: p.d_absolute),
            (("Most Extreme Differences", "Positive"), lambda p: p.d_positive),
            (("Most Extreme Differences", "Negative"), lambda p: p.d_negative),
            (("Kolmogorov-Smirnov Z",), lambda p: p.z),
            (("Asymp. Sig. (2-tailed)",), lambda p: p.p_value),
        ]

    rows = []
    for row_header, getter in layout:
        cells = {f"var_{i}": getter(s.params) for i, s in enumerate(solutions)}
        if all(v is None for v in cells.values()):
            continue
        rows.append(LeafRow(row_header=row_header, cells=cells))

    footnotes = []
    grouping = solutions[0]._design.grouping_name
    if grouping:
        footnotes.append(f"Grouping Variable: {grouping}")

    return Table(
        title="Test Statistics",
        column_headers=_variable_columns(solutions),
        rows=tuple(rows),
        footnotes=tuple(footnotes),
    )


def runs_table(solutions: Sequence[NonparametricSolution], title: str = "Runs Test") -> Table:
    """Runs test rows by variable column, for one cut-point policy."""
    layout = [
        ("Test Value", lambda p: p.test_value),
        ("Cases < Test Value", lambda p: p.n_below),
        ("Cases >= Test Value", lambda p: p.n_above),
        ("Total Cases", lambda p: p.n_total),
        ("Number of Runs", lambda p: p.runs),
        ("Z", lambda p: p.z),
        ("Asymp. Sig. (2-tailed)", lambda p: p.p_value),
    ]
    rows = tuple(
        LeafRow(
            row_header=(row_header,),
            cells={f"var_{i}": getter(s.params) for i, s in enumerate(solutions)},
        )
        for row_header, getter in layout
    )
    footnotes = ()
    if solutions:
        footnotes = (f"Test value: {solutions[0].params.cut_point.capitalize()}",)
    return Table(
        title=title,
        column_headers=_variable_columns(solutions),
        rows=rows,
        footnotes=footnotes,
    )


def _format_pvalue(p: float) -> str:
    if p < 2.2e-16:
        return "< 2.2e-16"
    if p < 0.001:
        return f"{p:.4e}"
    return f"{p:.4g}"
