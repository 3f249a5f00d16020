"""
Nonparametric tests for independent samples and randomness.

Public API:
    mann_whitney_u(x, y) or mann_whitney_u(values, grouping=g, group1=1, group2=2)
    kruskal_wallis_h(a, b, c) or kruskal_wallis_h(values, grouping=g)
    ks_two_sample(x, y)
    runs_test(x, cut_point="median")

All tests rank with the shared mid-rank engine and raise rather than
return NaN when the data cannot support the statistic.
"""

from statsuite.nonparametric.design import NonparametricDesign
from statsuite.nonparametric.solution import NonparametricSolution
from statsuite.nonparametric.solvers import (
    mann_whitney_u,
    kruskal_wallis_h,
    ks_two_sample,
    runs_test,
)
from statsuite.nonparametric._ranks import RankedValue, RankSummary, midranks, rank_groups

__all__ = [
    "mann_whitney_u",
    "kruskal_wallis_h",
    "ks_two_sample",
    "runs_test",
    "NonparametricDesign",
    "NonparametricSolution",
    "RankedValue",
    "RankSummary",
    "midranks",
    "rank_groups",
]
