"""
Wald-Wolfowitz runs test for randomness about a cut point.

Cases are dichotomized (x < test value vs x >= test value) and the number
of runs is counted in case order. Z uses a continuity correction of 0.5
toward the expected number of runs.
"""

from __future__ import annotations

from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy import stats

from statsuite.core.exceptions import ZeroVarianceError
from statsuite.nonparametric._common import RunsParams
from statsuite.nonparametric.design import NonparametricDesign


def first_mode(values: NDArray[np.floating[Any]]) -> float:
    """Most frequent value; ties go to the value seen first in case order."""
    _, inverse, counts = np.unique(values, return_inverse=True, return_counts=True)
    at_max = counts[inverse] == counts.max()
    return float(values[int(np.argmax(at_max))])


def resolve_test_value(values: NDArray[np.floating[Any]], cut_point: str | float) -> float:
    """Turn a cut-point policy into a number."""
    if cut_point == "median":
        return float(np.median(values))
    if cut_point == "mean":
        return float(np.mean(values))
    if cut_point == "mode":
        return first_mode(values)
    return float(cut_point)


def count_runs(below: NDArray[np.bool_]) -> int:
    """Number of maximal blocks of equal category."""
    if below.shape[0] == 0:
        return 0
    return 1 + int(np.count_nonzero(below[1:] != below[:-1]))


def runs(design: NonparametricDesign) -> tuple[RunsParams, list[str]]:
    """Runs test of design.values about design.cut_point."""
    values = design.values
    test_value = resolve_test_value(values, design.cut_point)
    below = values < test_value

    n = values.shape[0]
    n_below = int(np.count_nonzero(below))
    n_above = n - n_below
    n_runs = count_runs(below)

    if n_below == 0 or n_above == 0:
        raise ZeroVarianceError(
            f"{design.variable_name}: all {n} cases fall on one side of "
            f"test value {test_value:g}",
            quantity="runs",
        )

    product = 2.0 * n_below * n_above
    expected = 1.0 + product / n
    variance = product * (product - n) / (n * n * (n - 1.0))
    if variance <= 0.0:
        raise ZeroVarianceError(
            f"{design.variable_name}: variance of the number of runs is zero "
            f"({n_below} below, {n_above} at or above)",
            quantity="runs",
        )

    corrected = float(n_runs)
    if n_runs < expected:
        corrected += 0.5
    elif n_runs > expected:
        corrected -= 0.5
    z = (corrected - expected) / np.sqrt(variance)
    p_value = min(2.0 * float(stats.norm.sf(abs(z))), 1.0)

    cut_label = design.cut_point if isinstance(design.cut_point, str) else "custom"
    params = RunsParams(
        cut_point=cut_label,
        test_value=test_value,
        n_below=n_below,
        n_above=n_above,
        runs=n_runs,
        expected_runs=float(expected),
        variance=float(variance),
        z=float(z),
        p_value=p_value,
    )
    return params, []
