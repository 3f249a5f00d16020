"""
Parameter payloads for the nonparametric tests.

Each test returns its own frozen payload (a tagged variant keyed by the
design's test_type) carrying the statistic together with the inputs that
produced it, so result tables can be rendered without recomputation.
"""

from __future__ import annotations

from dataclasses import dataclass


VALID_CUT_POINTS = ("median", "mean", "mode")


@dataclass(frozen=True)
class MannWhitneyParams:
    """
    Mann-Whitney U test.

    Attributes
    ----------
    u : float
        The smaller of U1 and U2.
    w : float
        Wilcoxon W: rank sum of the group that yields the reported U.
    z : float
        Normal approximation with tie-corrected variance.
    p_value : float
        Asymptotic two-tailed p.
    exact_p_value : float or None
        Exact two-tailed p, min(2 P(U <= u), 1). None when the samples
        exceed the enumeration limits.
    exact_p_one_tailed : float or None
        P(U <= u) under H0.
    n1, n2 : int
        Group sizes.
    rank_sums, mean_ranks : tuple of float
        Per-group rank sums and mean ranks (group 1 first).
    tie_term : float
        sum(t^3 - t) over the pooled sample.
    """
    u: float
    w: float
    z: float
    p_value: float
    exact_p_value: float | None
    exact_p_one_tailed: float | None
    n1: int
    n2: int
    rank_sums: tuple[float, float]
    mean_ranks: tuple[float, float]
    tie_term: float


@dataclass(frozen=True)
class KruskalWallisParams:
    """
    Kruskal-Wallis H test.

    Attributes
    ----------
    h : float
        Tie-corrected H.
    df : int
        Number of non-empty groups minus one.
    p_value : float
        Chi-square upper tail of h on df degrees of freedom.
    h_uncorrected : float
        H before division by the tie correction.
    correction : float
        1 - sum(t^3 - t) / (N^3 - N); 1.0 without ties.
    group_labels : tuple of float
        Non-empty groups, ascending.
    counts, rank_sums, mean_ranks : tuple
        Per-group aggregates aligned with group_labels.
    """
    h: float
    df: int
    p_value: float
    h_uncorrected: float
    correction: float
    group_labels: tuple[float, ...]
    counts: tuple[int, ...]
    rank_sums: tuple[float, ...]
    mean_ranks: tuple[float, ...]


@dataclass(frozen=True)
class KolmogorovSmirnovParams:
    """
    Two-sample Kolmogorov-Smirnov test.

    d_positive is max(F1 - F2) and d_negative is min(F1 - F2) over the
    pooled support, so d_negative <= 0 <= d_positive.
    """
    d_absolute: float
    d_positive: float
    d_negative: float
    z: float
    p_value: float
    n1: int
    n2: int


@dataclass(frozen=True)
class RunsParams:
    """
    Wald-Wolfowitz runs test about a cut point.

    Cases below the test value form one category, cases at or above it
    the other.
    """
    cut_point: str
    test_value: float
    n_below: int
    n_above: int
    runs: int
    expected_runs: float
    variance: float
    z: float
    p_value: float

    @property
    def n_total(self) -> int:
        return self.n_below + self.n_above
