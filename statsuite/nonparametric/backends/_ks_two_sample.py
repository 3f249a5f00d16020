"""
Two-sample Kolmogorov-Smirnov test.

The empirical CDFs are evaluated at every point of the pooled support.
The p-value is the Kolmogorov limiting distribution

    p = 2 * sum_{k>=1} (-1)^(k-1) exp(-2 k^2 Z^2),  Z = D sqrt(n1 n2 / (n1 + n2))
"""

from __future__ import annotations

import numpy as np

from statsuite.core.compute.tolerances import (
    KS_SERIES_TOL,
    KS_SERIES_MAX_TERMS,
    KS_SMALL_STATISTIC,
)
from statsuite.nonparametric._common import KolmogorovSmirnovParams
from statsuite.nonparametric.design import NonparametricDesign


def kolmogorov_p_value(z: float) -> float:
    """Upper tail of the Kolmogorov distribution, clamped to [0, 1]."""
    if z < KS_SMALL_STATISTIC:
        return 1.0

    total = 0.0
    for k in range(1, KS_SERIES_MAX_TERMS + 1):
        term = (-1.0) ** (k - 1) * np.exp(-2.0 * k * k * z * z)
        total += term
        if abs(term) < KS_SERIES_TOL:
            break

    return float(min(max(2.0 * total, 0.0), 1.0))


def ks_two_sample(design: NonparametricDesign) -> tuple[KolmogorovSmirnovParams, list[str]]:
    """Kolmogorov-Smirnov Z for design.samples == (group1, group2)."""
    x, y = (np.sort(s) for s in design.samples)
    n1, n2 = x.shape[0], y.shape[0]

    support = np.unique(np.concatenate([x, y]))
    cdf1 = np.searchsorted(x, support, side='right') / n1
    cdf2 = np.searchsorted(y, support, side='right') / n2
    diff = cdf1 - cdf2

    d_positive = float(np.max(diff))
    d_negative = float(np.min(diff))
    d_absolute = float(np.max(np.abs(diff)))
    z = d_absolute * np.sqrt(n1 * n2 / (n1 + n2))

    params = KolmogorovSmirnovParams(
        d_absolute=d_absolute,
        d_positive=d_positive,
        d_negative=d_negative,
        z=float(z),
        p_value=kolmogorov_p_value(float(z)),
        n1=int(n1),
        n2=int(n2),
    )
    return params, []
