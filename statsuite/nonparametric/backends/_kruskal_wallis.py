"""
Kruskal-Wallis H test.

H = 12 / (N (N+1)) * sum(R_i^2 / n_i) - 3 (N+1), divided by
1 - sum(t^3 - t) / (N^3 - N) when ties are present. Referred to a
chi-square distribution on k - 1 degrees of freedom.
"""

from __future__ import annotations

from scipy import stats

from statsuite.core.exceptions import ZeroVarianceError
from statsuite.nonparametric._common import KruskalWallisParams
from statsuite.nonparametric._ranks import rank_groups
from statsuite.nonparametric.design import NonparametricDesign


def kruskal_wallis(design: NonparametricDesign) -> tuple[KruskalWallisParams, list[str]]:
    """Kruskal-Wallis H over the non-empty groups of the design."""
    warnings_list: list[str] = []
    summary = rank_groups(design.samples)
    n = summary.n_total

    h_uncorrected = (
        12.0 / (n * (n + 1))
        * sum(r * r / c for r, c in zip(summary.rank_sums, summary.counts))
        - 3.0 * (n + 1)
    )

    correction = 1.0
    if summary.has_ties:
        correction = 1.0 - summary.tie_term / (float(n) ** 3 - n)
        if correction <= 0.0:
            raise ZeroVarianceError(
                f"{design.variable_name}: all {n} values are tied; H is undefined",
                quantity="H",
            )

    h = h_uncorrected / correction
    df = len(summary.counts) - 1
    p_value = float(stats.chi2.sf(h, df))

    if min(summary.counts) < 5:
        warnings_list.append(
            "some groups have fewer than 5 cases; the chi-square "
            "approximation may be inaccurate"
        )

    params = KruskalWallisParams(
        h=float(h),
        df=df,
        p_value=p_value,
        h_uncorrected=float(h_uncorrected),
        correction=float(correction),
        group_labels=design.group_labels,
        counts=summary.counts,
        rank_sums=summary.rank_sums,
        mean_ranks=summary.mean_ranks,
    )
    return params, warnings_list
