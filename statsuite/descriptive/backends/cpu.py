"""
CPU reference backend for frequency analysis.

Groups weight mass by distinct value, orders the distribution, and derives
percent columns, modes, percentiles and weighted summary statistics.
"""

from __future__ import annotations

from typing import Any
import numpy as np
from numpy.typing import NDArray

from statsuite.core.result import Result
from statsuite.core.compute.timing import Timer
from statsuite.core.compute.tolerances import CUMULATIVE_SNAP_THRESHOLD
from statsuite.descriptive._dates import from_spss_seconds
from statsuite.descriptive._percentiles import weighted_percentiles
from statsuite.descriptive._statistics import weighted_statistics
from statsuite.descriptive.design import FrequencyDesign, collation_key
from statsuite.descriptive.solution import FrequencyParams, FrequencyRow


def grouped_distribution(design: FrequencyDesign) -> tuple[NDArray[Any], NDArray[np.floating[Any]]]:
    """
    Distinct values in display order and their total weight.

    Numeric and date values ascend numerically; strings follow the pinned
    collation (collation_key).
    """
    if design.n == 0:
        return design.values[:0], np.empty(0, dtype=np.float64)

    if design.kind == "string":
        mass: dict[str, float] = {}
        for value, weight in zip(design.values, design.weights):
            mass[value] = mass.get(value, 0.0) + float(weight)
        ordered = sorted(mass, key=collation_key)
        return (
            np.asarray(ordered, dtype=object),
            np.asarray([mass[v] for v in ordered], dtype=np.float64),
        )

    y, inverse = np.unique(design.values, return_inverse=True)
    c = np.bincount(inverse.ravel(), weights=design.weights, minlength=y.shape[0])
    return y, c


def _label(value: Any, kind: str) -> str:
    if kind == "date":
        return from_spss_seconds(value)
    if kind == "numeric":
        return f"{value:g}"
    return str(value)


class CPUFrequencyBackend:
    """CPU reference backend for frequency analysis."""

    @property
    def name(self) -> str:
        return 'cpu_frequencies'

    def solve(
        self,
        design: FrequencyDesign,
        *,
        percentiles: tuple[float, ...] = (),
        percentile_method: str = "haverage",
        statistics: bool = True,
    ) -> Result[FrequencyParams]:
        """
        Compute the weighted frequency distribution.

        Parameters
        ----------
        design : FrequencyDesign
        percentiles : tuple of float
            Percentile points on a 0-100 scale. Ignored for strings.
        percentile_method : str
            'haverage' (default), 'waverage' or 'tukey'.
        statistics : bool
            Whether to compute weighted summary statistics (numeric and
            date variables only).
        """
        timer = Timer()
        timer.start()
        warnings_list: list[str] = []

        with timer.section('distribution'):
            y, c = grouped_distribution(design)
            valid = float(np.sum(c))
            total = valid + design.missing_weight

            rows = []
            cumulative = 0.0
            for value, freq in zip(y, c):
                valid_percent = 100.0 * freq / valid
                cumulative += valid_percent
                rows.append(FrequencyRow(
                    value=value.item() if isinstance(value, np.generic) else value,
                    label=_label(value, design.kind),
                    frequency=float(freq),
                    percent=100.0 * freq / total,
                    valid_percent=float(valid_percent),
                    cumulative_percent=float(cumulative),
                ))
            if rows and rows[-1].cumulative_percent >= CUMULATIVE_SNAP_THRESHOLD:
                last = rows[-1]
                rows[-1] = FrequencyRow(
                    value=last.value,
                    label=last.label,
                    frequency=last.frequency,
                    percent=last.percent,
                    valid_percent=last.valid_percent,
                    cumulative_percent=100.0,
                )

            modes: tuple[Any, ...] = ()
            if rows:
                top = max(r.frequency for r in rows)
                modes = tuple(r.value for r in rows if r.frequency == top)

        pct: dict[float, float | None] = {}
        stats: dict[str, float | None] = {}
        if design.is_numeric:
            with timer.section('percentiles'):
                points = tuple(percentiles)
                if statistics and 50.0 not in points:
                    points = points + (50.0,)
                computed = weighted_percentiles(y.astype(np.float64), c, points, percentile_method)
                pct = {float(p): computed[float(p)] for p in percentiles}

            if statistics:
                with timer.section('statistics'):
                    stats = weighted_statistics(design.values, design.weights)
                    stats["median"] = computed[50.0]
        elif percentiles:
            warnings_list.append(
                f"{design.name}: percentiles are not defined for string variables"
            )

        if design.n == 0:
            warnings_list.append(f"{design.name}: no valid cases")

        timer.stop()

        params = FrequencyParams(
            rows=tuple(rows),
            valid=valid,
            missing=design.missing_weight,
            total=total,
            n_valid=design.n,
            n_missing=design.n_missing,
            modes=modes,
            percentiles=pct,
            statistics=stats,
        )
        return Result(
            params=params,
            info={
                'kind': design.kind,
                'percentile_method': percentile_method,
                'n_distinct': len(rows),
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )
