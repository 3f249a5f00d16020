"""
Rank & tie engine.

Pools one or more samples, sorts once, and assigns mid-ranks: each run of
equal values receives the mean of the integer ranks it occupies. The same
pass records tie-group sizes for the sum(t^3 - t) correction used by
Mann-Whitney and Kruskal-Wallis.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence
import numpy as np
from numpy.typing import ArrayLike, NDArray


@dataclass(frozen=True)
class RankedValue:
    """A pooled value with its 1-based mid-rank and originating group."""
    value: float
    rank: float
    group: int


@dataclass(frozen=True)
class RankSummary:
    """
    Aggregates of a pooled ranking.

    Attributes:
        pooled: All values in ascending order with their ranks
        counts: Per-group sample sizes, in input order
        rank_sums: Per-group sums of ranks
        tie_sizes: Sizes of every tie group with more than one member
        tie_term: sum(t^3 - t) over the tie groups
    """
    pooled: tuple[RankedValue, ...]
    counts: tuple[int, ...]
    rank_sums: tuple[float, ...]
    tie_sizes: tuple[int, ...]
    tie_term: float

    @property
    def n_total(self) -> int:
        return sum(self.counts)

    @property
    def mean_ranks(self) -> tuple[float, ...]:
        """Rank sum over count per group; 0.0 for an empty group."""
        return tuple(
            (r / n) if n > 0 else 0.0
            for r, n in zip(self.rank_sums, self.counts)
        )

    @property
    def has_ties(self) -> bool:
        return len(self.tie_sizes) > 0


def midranks(values: ArrayLike) -> NDArray[np.floating[Any]]:
    """
    Mid-ranks of a single array, returned in the original order.

    >>> midranks([3.0, 1.0, 3.0])
    array([2.5, 1. , 2.5])
    """
    x = np.asarray(values, dtype=np.float64).ravel()
    n = x.shape[0]
    order = np.argsort(x, kind='stable')
    ranks = np.empty(n, dtype=np.float64)

    i = 0
    while i < n:
        j = i
        while j + 1 < n and x[order[j + 1]] == x[order[i]]:
            j += 1
        # positions i..j (0-based) hold ranks i+1..j+1
        ranks[order[i:j + 1]] = (i + j + 2) / 2.0
        i = j + 1

    return ranks


def tie_sizes(values: ArrayLike) -> NDArray[np.intp]:
    """Sizes of tie groups (count > 1) among values."""
    _, counts = np.unique(np.asarray(values, dtype=np.float64), return_counts=True)
    return counts[counts > 1]


def tie_term(values: ArrayLike) -> float:
    """sum(t^3 - t) over tie groups."""
    t = tie_sizes(values).astype(np.float64)
    return float(np.sum(t ** 3 - t))


def rank_groups(samples: Sequence[ArrayLike]) -> RankSummary:
    """
    Rank the union of several samples.

    Args:
        samples: One array per group. A single array is one group.

    Returns:
        RankSummary; every aggregate is zero for an empty pool.
    """
    arrays = [np.asarray(s, dtype=np.float64).ravel() for s in samples]
    counts = tuple(int(a.shape[0]) for a in arrays)

    if sum(counts) == 0:
        return RankSummary(
            pooled=(),
            counts=counts,
            rank_sums=tuple(0.0 for _ in arrays),
            tie_sizes=(),
            tie_term=0.0,
        )

    pooled = np.concatenate(arrays)
    group_ids = np.concatenate([
        np.full(n, g, dtype=np.intp) for g, n in enumerate(counts)
    ])
    ranks = midranks(pooled)

    rank_sums = tuple(
        float(np.sum(ranks[group_ids == g])) for g in range(len(arrays))
    )
    sizes = tie_sizes(pooled)

    order = np.argsort(pooled, kind='stable')
    ranked = tuple(
        RankedValue(value=float(pooled[k]), rank=float(ranks[k]), group=int(group_ids[k]))
        for k in order
    )

    t = sizes.astype(np.float64)
    return RankSummary(
        pooled=ranked,
        counts=counts,
        rank_sums=rank_sums,
        tie_sizes=tuple(int(s) for s in sizes),
        tie_term=float(np.sum(t ** 3 - t)),
    )
