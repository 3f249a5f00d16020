"""
Frequency analysis solution types.

Contains the parameter payload and user-facing solution wrapper, plus the
"Statistics" and per-variable frequency table builders.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence, TYPE_CHECKING

from statsuite.core.result import Result
from statsuite.core.tables import Table, ColumnHeader, LeafRow, GroupRow, headers
from statsuite.descriptive._dates import from_spss_seconds

if TYPE_CHECKING:
    from statsuite.descriptive.design import FrequencyDesign


@dataclass(frozen=True)
class FrequencyRow:
    """
    One distinct value of the distribution.

    Percentages are on a 0-100 scale. cumulative_percent accumulates
    valid_percent and is exactly 100 on the last row.
    """
    value: Any
    label: str
    frequency: float
    percent: float
    valid_percent: float
    cumulative_percent: float


@dataclass(frozen=True)
class FrequencyParams:
    """
    Parameter payload for a frequency analysis.

    valid, missing and total are weighted; n_valid and n_missing are case
    counts.
    """
    rows: tuple[FrequencyRow, ...]
    valid: float
    missing: float
    total: float
    n_valid: int
    n_missing: int
    modes: tuple[Any, ...]
    percentiles: dict[float, float | None] = field(default_factory=dict)
    statistics: dict[str, float | None] = field(default_factory=dict)


# Display order and captions of the "Statistics" table
STATISTIC_LABELS = (
    ("mean", "Mean"),
    ("se_mean", "Std. Error of Mean"),
    ("median", "Median"),
    ("mode", "Mode"),
    ("std", "Std. Deviation"),
    ("variance", "Variance"),
    ("skewness", "Skewness"),
    ("se_skewness", "Std. Error of Skewness"),
    ("kurtosis", "Kurtosis"),
    ("se_kurtosis", "Std. Error of Kurtosis"),
    ("range", "Range"),
    ("minimum", "Minimum"),
    ("maximum", "Maximum"),
    ("sum", "Sum"),
)

# Statistics that are dates themselves (not durations) for date variables
_DATE_VALUED = {"mean", "median", "minimum", "maximum"}


@dataclass
class FrequencySolution:
    """
    User-facing frequency results.

    Wraps Result[FrequencyParams] and provides convenient accessors.
    """
    _result: Result[FrequencyParams]
    _design: 'FrequencyDesign'
    label: str | None = None

    @property
    def rows(self) -> tuple[FrequencyRow, ...]:
        return self._result.params.rows

    @property
    def frequencies(self) -> dict[Any, float]:
        """Distinct value -> weighted frequency, in display order."""
        return {r.value: r.frequency for r in self._result.params.rows}

    @property
    def valid(self) -> float:
        return self._result.params.valid

    @property
    def missing(self) -> float:
        return self._result.params.missing

    @property
    def total(self) -> float:
        return self._result.params.total

    @property
    def modes(self) -> tuple[Any, ...]:
        return self._result.params.modes

    @property
    def percentiles(self) -> dict[float, float | None]:
        return self._result.params.percentiles

    @property
    def statistics(self) -> dict[str, float | None]:
        return self._result.params.statistics

    @property
    def kind(self) -> str:
        return self._design.kind

    @property
    def name(self) -> str:
        return self._design.name

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

    def display(self, value: Any) -> Any:
        """Render a distribution value for display (dates as dd-mm-yyyy)."""
        if value is None:
            return None
        if self.kind == "date":
            return from_spss_seconds(value)
        return value

    def to_tables(self, include_statistics: bool = True) -> list[Table]:
        tables = []
        if include_statistics:
            tables.append(statistics_table([self]))
        tables.append(frequency_table(self))
        return tables

    def summary(self) -> str:
        p = self._result.params
        lines = [f"Frequencies: {self.name}", ""]
        width = max([len(r.label) for r in p.rows] + [5])
        lines.append(f"{'Value':<{width}}  {'Freq':>10}  {'Percent':>8}  {'Valid %':>8}  {'Cum %':>8}")
        for r in p.rows:
            lines.append(
                f"{r.label:<{width}}  {r.frequency:>10.4g}  {r.percent:>8.1f}  "
                f"{r.valid_percent:>8.1f}  {r.cumulative_percent:>8.1f}"
            )
        lines.append(f"Valid: {p.valid:g}  Missing: {p.missing:g}  Total: {p.total:g}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        p = self._result.params
        return (
            f"FrequencySolution(name={self.name!r}, distinct={len(p.rows)}, "
            f"valid={p.valid:g}, missing={p.missing:g})"
        )


def statistics_table(solutions: Sequence[FrequencySolution]) -> Table:
    """N, summary statistics and percentiles; one column per variable."""
    columns = (ColumnHeader(""), ColumnHeader("")) + tuple(
        ColumnHeader(s.label or s.name, key=f"var_{i}") for i, s in enumerate(solutions)
    )

    def row(header: tuple[str, ...], getter) -> LeafRow:
        return LeafRow(
            row_header=header,
            cells={f"var_{i}": getter(s) for i, s in enumerate(solutions)},
        )

    rows: list[Any] = [
        GroupRow(row_header=("N",), children=(
            row(("N", "Valid"), lambda s: s.valid),
            row(("N", "Missing"), lambda s: s.missing),
        )),
    ]

    for key, caption in STATISTIC_LABELS:
        def getter(s: FrequencySolution, key: str = key) -> Any:
            if key == "mode":
                if not s.modes:
                    return None
                return s.display(s.modes[0])
            value = s.statistics.get(key)
            if key in _DATE_VALUED:
                return s.display(value)
            return value
        if any(key == "mode" or key in s.statistics for s in solutions):
            rows.append(row((caption,), getter))

    percentile_points = sorted({p for s in solutions for p in s.percentiles})
    if percentile_points:
        rows.append(GroupRow(row_header=("Percentiles",), children=tuple(
            row(("Percentiles", f"{p:g}"), lambda s, p=p: s.display(s.percentiles.get(p)))
            for p in percentile_points
        )))

    footnotes = ()
    if any(len(s.modes) > 1 for s in solutions):
        footnotes = ("Multiple modes exist. The smallest value is shown",)

    return Table(
        title="Statistics",
        column_headers=columns,
        rows=tuple(rows),
        footnotes=footnotes,
    )


def frequency_table(solution: FrequencySolution) -> Table:
    """Frequency table: Valid block, Missing row, grand Total."""
    p = solution._result.params
    valid_rows = tuple(
        LeafRow(
            row_header=("Valid", r.label),
            cells={
                "Frequency": r.frequency,
                "Percent": r.percent,
                "Valid Percent": r.valid_percent,
                "Cumulative Percent": r.cumulative_percent,
            },
        )
        for r in p.rows
    )

    rows: list[Any] = []
    if p.rows:
        valid_total = LeafRow(
            row_header=("Valid", "Total"),
            cells={
                "Frequency": p.valid,
                "Percent": 100.0 * p.valid / p.total if p.total else 0.0,
                "Valid Percent": 100.0,
            },
        )
        rows.append(GroupRow(row_header=("Valid",), children=valid_rows + (valid_total,)))
    if p.missing > 0:
        rows.append(LeafRow(
            row_header=("Missing", "System"),
            cells={
                "Frequency": p.missing,
                "Percent": 100.0 * p.missing / p.total,
            },
        ))
    if p.total > 0:
        rows.append(LeafRow(
            row_header=("Total",),
            cells={"Frequency": p.total, "Percent": 100.0},
        ))

    return Table(
        title=solution.label or solution.name,
        column_headers=headers("", "", "Frequency", "Percent", "Valid Percent", "Cumulative Percent"),
        rows=tuple(rows),
    )
