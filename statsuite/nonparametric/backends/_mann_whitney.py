"""
Mann-Whitney U test.

U1 = R1 - n1(n1+1)/2 and U2 = n1 n2 - U1; the smaller is reported along
with the rank sum (Wilcoxon W) of the group that produced it.

Asymptotic p uses the normal approximation with tie-corrected variance
    Var[U] = n1 n2 (N+1)/12 - n1 n2 sum(t^3 - t) / (12 N (N-1)).

Exact p enumerates the null distribution of U by the recurrence
    f(i, j)(u) = f(i, j-1)(u) + f(i-1, j)(u - j)
and is only attempted for small samples (see tolerances.EXACT_MAX_*).
"""

from __future__ import annotations

from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy import stats
from scipy.special import comb

from statsuite.core.compute.tolerances import EXACT_MAX_PRODUCT, EXACT_MAX_SPAN
from statsuite.core.exceptions import ZeroVarianceError
from statsuite.nonparametric._common import MannWhitneyParams
from statsuite.nonparametric._ranks import rank_groups
from statsuite.nonparametric.design import NonparametricDesign


def exact_is_feasible(n1: int, n2: int) -> bool:
    """Whether the exact distribution is enumerated for these group sizes."""
    product = n1 * n2
    return product < EXACT_MAX_PRODUCT and product / 2 + min(n1, n2) <= EXACT_MAX_SPAN


def u_distribution(n1: int, n2: int) -> NDArray[np.floating[Any]]:
    """
    Number of rank arrangements giving each U = 0..n1*n2 under H0.

    The counts sum to C(n1 + n2, n1).
    """
    # prev[j] holds the count vector for (i - 1, j)
    prev = [np.ones(1) for _ in range(n2 + 1)]
    for i in range(1, n1 + 1):
        cur = [np.ones(1)]
        for j in range(1, n2 + 1):
            counts = np.zeros(i * j + 1)
            left = cur[j - 1]
            counts[:left.size] += left
            shifted = prev[j]
            counts[j:j + shifted.size] += shifted
            cur.append(counts)
        prev = cur
    return prev[n2]


def exact_p_values(u: float, n1: int, n2: int) -> tuple[float, float]:
    """
    Exact (one-tailed, two-tailed) p for the smaller U.

    One-tailed is P(U <= u); two-tailed is min(2 * one-tailed, 1).
    """
    counts = u_distribution(n1, n2)
    total = comb(n1 + n2, n1, exact=True)
    one_tailed = float(np.sum(counts[:int(np.floor(u)) + 1]) / total)
    return one_tailed, min(2.0 * one_tailed, 1.0)


def mann_whitney(design: NonparametricDesign) -> tuple[MannWhitneyParams, list[str]]:
    """Mann-Whitney U for design.samples == (group1, group2)."""
    warnings_list: list[str] = []
    x, y = design.samples
    summary = rank_groups([x, y])
    n1, n2 = summary.counts
    r1, r2 = summary.rank_sums
    n = n1 + n2

    if len(summary.tie_sizes) == 1 and summary.tie_sizes[0] == n:
        raise ZeroVarianceError(
            f"{design.variable_name}: all {n} values are tied; "
            "the variance of U is zero",
            quantity="U",
        )

    u1 = r1 - n1 * (n1 + 1) / 2.0
    u2 = n1 * n2 - u1
    if u1 < u2:
        u, w = u1, r1
    else:
        u, w = u2, r2

    expected = n1 * n2 / 2.0
    variance = n1 * n2 * (n + 1) / 12.0
    if summary.tie_term > 0:
        variance -= n1 * n2 * summary.tie_term / (12.0 * n * (n - 1))
    z = (u - expected) / np.sqrt(variance)
    p_value = min(2.0 * float(stats.norm.sf(abs(z))), 1.0)

    exact_one = exact_two = None
    if exact_is_feasible(n1, n2):
        exact_one, exact_two = exact_p_values(u, n1, n2)
        if summary.has_ties:
            warnings_list.append(
                "exact p-value assumes no ties; the data contain ties"
            )

    params = MannWhitneyParams(
        u=float(u),
        w=float(w),
        z=float(z),
        p_value=p_value,
        exact_p_value=exact_two,
        exact_p_one_tailed=exact_one,
        n1=n1,
        n2=n2,
        rank_sums=(r1, r2),
        mean_ranks=summary.mean_ranks,
        tie_term=summary.tie_term,
    )
    return params, warnings_list
