"""
Solver dispatch for frequency analysis.

Provides frequencies() as the entry point and percentile() for a single
weighted percentile without building the full table.
"""

from __future__ import annotations

from typing import Any, Sequence
from numpy.typing import ArrayLike

from statsuite.core.exceptions import ValidationError
from statsuite.core.sample import MissingSpec
from statsuite.descriptive.design import FrequencyDesign
from statsuite.descriptive.solution import FrequencySolution
from statsuite.descriptive.backends.cpu import CPUFrequencyBackend

QUARTILES = (25.0, 50.0, 75.0)


def _get_backend(backend: str = 'cpu'):
    """Select backend for frequency analysis."""
    if backend in ('cpu', 'auto'):
        return CPUFrequencyBackend()
    raise ValidationError(f"Unknown backend: {backend!r}. Use 'cpu'.")


def frequencies(
    values: Sequence[Any] | ArrayLike | FrequencyDesign,
    weights: ArrayLike | None = None,
    *,
    kind: str = "numeric",
    missing: MissingSpec | None = None,
    percentiles: Sequence[float] = (),
    quartiles: bool = False,
    percentile_method: str = "haverage",
    statistics: bool = True,
    name: str = "x",
    label: str | None = None,
    backend: str = 'cpu',
) -> FrequencySolution:
    """
    Weighted frequency distribution of one variable.

    Parameters
    ----------
    values : sequence or FrequencyDesign
        Raw cells. None, NaN and blank strings are missing.
    weights : array-like or None
        Case weights, same length as values. Zero-weight cases are ignored;
        negative or non-finite weights are an error.
    kind : {"numeric", "string", "date"}
        How cells are interpreted and ordered.
    missing : MissingSpec or None
        User-defined missing values.
    percentiles : sequence of float
        Percentile points on a 0-100 scale (numeric and date only).
    quartiles : bool
        Shorthand for adding 25, 50 and 75 to percentiles.
    percentile_method : {"haverage", "waverage", "tukey"}
        Percentile definition. Default 'haverage', position (W + 1) p / 100.
    statistics : bool
        Compute weighted mean, dispersion and shape statistics.

    Returns
    -------
    FrequencySolution
        Empty input gives a solution with zero rows, not an error.
    """
    if isinstance(values, FrequencyDesign):
        design = values
    else:
        design = FrequencyDesign.from_column(
            values, weights, kind=kind, missing=missing, name=name,
        )

    points = tuple(float(p) for p in percentiles)
    if quartiles:
        points += tuple(q for q in QUARTILES if q not in points)

    result = _get_backend(backend).solve(
        design,
        percentiles=points,
        percentile_method=percentile_method,
        statistics=statistics,
    )
    return FrequencySolution(_result=result, _design=design, label=label)


def percentile(
    values: Sequence[Any] | ArrayLike,
    p: float,
    weights: ArrayLike | None = None,
    *,
    method: str = "haverage",
) -> float | None:
    """Single weighted percentile of a numeric column (None if no valid data)."""
    solution = frequencies(
        values, weights,
        percentiles=(p,),
        percentile_method=method,
        statistics=False,
    )
    return solution.percentiles[float(p)]
