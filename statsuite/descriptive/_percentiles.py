"""
Weighted percentile definitions.

All functions work on a grouped distribution: ascending distinct values y,
their weights c (frequencies), and the total valid weight W = sum(c).

    haverage  position r = (W + 1) p / 100, interpolating between the
              order statistics at floor(r) and ceil(r)  (default)
    waverage  position t = W p / 100 (weighted average at X(W p))
    tukey     Tukey's hinges for 25/50/75, waverage otherwise
"""

from __future__ import annotations

import math
from typing import Any
import numpy as np
from numpy.typing import NDArray

from statsuite.core.exceptions import ValidationError

PERCENTILE_METHODS = ("haverage", "waverage", "tukey")


def _order_statistic(y: NDArray, cc: NDArray, position: float) -> float:
    """Value of the order statistic at a 1-based position of the expanded data."""
    k = int(np.searchsorted(cc, position, side='left'))
    return float(y[min(k, y.shape[0] - 1)])


def haverage(y: NDArray, c: NDArray, p: float) -> float:
    W = float(np.sum(c))
    cc = np.cumsum(c)
    r = (W + 1.0) * p / 100.0
    if r <= 1.0:
        return float(y[0])
    if r >= W:
        return float(y[-1])
    lower_pos = math.floor(r)
    upper_pos = math.ceil(r)
    lower = _order_statistic(y, cc, lower_pos)
    upper = _order_statistic(y, cc, upper_pos)
    frac = r - lower_pos
    return (1.0 - frac) * lower + frac * upper


def waverage(y: NDArray, c: NDArray, p: float) -> float:
    W = float(np.sum(c))
    cc = np.cumsum(c)
    t = W * p / 100.0
    if t <= 0.0:
        return float(y[0])
    if t >= W:
        return float(y[-1])
    k = int(np.searchsorted(cc, t, side='left'))
    cc_prev = float(cc[k - 1]) if k > 0 else 0.0
    y_prev = float(y[k - 1]) if k > 0 else float(y[0])
    g = (t - cc_prev) / float(c[k])
    return (1.0 - g) * y_prev + g * float(y[k])


def tukey_hinges(y: NDArray, c: NDArray, p: float) -> float:
    """Tukey's hinges on the distribution expanded with rounded weights."""
    target = round(p)
    if target not in (25, 50, 75):
        return waverage(y, c, p)

    counts = np.maximum(1, np.rint(c)).astype(np.intp)
    expanded = np.repeat(y, counts)
    n = expanded.shape[0]

    if target == 50:
        if n % 2 == 1:
            return float(expanded[(n + 1) // 2 - 1])
        return float((expanded[n // 2 - 1] + expanded[n // 2]) / 2.0)

    depth_median = (n + 1) / 2.0
    depth_hinge = (math.floor(depth_median) + 1) / 2.0
    lower_index = max(1, int(round(depth_hinge)))
    if target == 25:
        return float(expanded[lower_index - 1])
    return float(expanded[n - lower_index])


def weighted_percentiles(
    y: NDArray[np.floating[Any]],
    c: NDArray[np.floating[Any]],
    percentiles: tuple[float, ...],
    method: str = "haverage",
) -> dict[float, float | None]:
    """
    Percentiles of a grouped distribution.

    Returns None for every requested percentile when the distribution is
    empty.

    Raises:
        ValidationError: Unknown method or percentile outside [0, 100]
    """
    if method not in PERCENTILE_METHODS:
        raise ValidationError(
            f"percentile_method must be one of {PERCENTILE_METHODS}, got {method!r}"
        )
    for p in percentiles:
        if not 0.0 <= p <= 100.0:
            raise ValidationError(f"percentiles must lie in [0, 100], got {p}")

    if y.shape[0] == 0:
        return {float(p): None for p in percentiles}

    fn = {"haverage": haverage, "waverage": waverage, "tukey": tukey_hinges}[method]
    return {float(p): fn(y, c, float(p)) for p in percentiles}
