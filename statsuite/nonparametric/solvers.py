"""
Solver dispatch for nonparametric tests.

Provides mann_whitney_u(), kruskal_wallis_h(), ks_two_sample() and
runs_test(). Two-sample tests accept either two arrays or a test variable
with a grouping variable and the two group values to compare.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence
from numpy.typing import ArrayLike

from statsuite.core.exceptions import ValidationError
from statsuite.core.sample import MissingSpec
from statsuite.nonparametric.design import NonparametricDesign
from statsuite.nonparametric.solution import NonparametricSolution
from statsuite.nonparametric.backends.cpu import CPUNonparametricBackend


def _get_backend(backend: str = 'cpu'):
    """Select backend for nonparametric tests."""
    if backend in ('cpu', 'auto'):
        return CPUNonparametricBackend()
    raise ValidationError(f"Unknown backend: {backend!r}. Use 'cpu'.")


def _two_sample(
    test_type: str,
    x: ArrayLike | Sequence[Any] | NonparametricDesign,
    y: ArrayLike | Sequence[Any] | None,
    *,
    grouping: Sequence[Any] | None,
    group1: float,
    group2: float,
    missing: MissingSpec | None,
    grouping_missing: MissingSpec | None,
    name: str,
    grouping_name: str,
    value_labels: Mapping[float, str] | None,
    backend: str,
) -> NonparametricSolution:
    if isinstance(x, NonparametricDesign):
        design = x
    else:
        design = NonparametricDesign.for_two_samples(
            test_type, x, y,
            grouping=grouping,
            group1=group1,
            group2=group2,
            missing=missing,
            grouping_missing=grouping_missing,
            name=name,
            grouping_name=grouping_name,
        )
    result = _get_backend(backend).solve(design)
    return NonparametricSolution(_result=result, _design=design, value_labels=value_labels)


def mann_whitney_u(
    x: ArrayLike | Sequence[Any] | NonparametricDesign,
    y: ArrayLike | Sequence[Any] | None = None,
    *,
    grouping: Sequence[Any] | None = None,
    group1: float = 1.0,
    group2: float = 2.0,
    missing: MissingSpec | None = None,
    grouping_missing: MissingSpec | None = None,
    name: str = "x",
    grouping_name: str = "group",
    value_labels: Mapping[float, str] | None = None,
    backend: str = 'cpu',
) -> NonparametricSolution:
    """
    Mann-Whitney U test for two independent samples.

    Parameters
    ----------
    x : array-like or NonparametricDesign
        First sample, or the test variable when grouping is given.
    y : array-like or None
        Second sample. Must be None when grouping is given.
    grouping : sequence or None
        Grouping variable aligned with x.
    group1, group2 : float
        Grouping values defining the two samples.
    missing, grouping_missing : MissingSpec or None
        User-defined missing values for the test and grouping variables.
    name, grouping_name : str
        Variable names used in tables and error messages.
    value_labels : mapping or None
        Display labels for grouping values.

    Returns
    -------
    NonparametricSolution
        params is a MannWhitneyParams (U, W, Z, asymptotic and exact p).

    Raises
    ------
    InsufficientDataError
        Either group is empty after missing-value filtering.
    ZeroVarianceError
        Every value is tied.
    """
    return _two_sample(
        "mann_whitney", x, y,
        grouping=grouping, group1=group1, group2=group2,
        missing=missing, grouping_missing=grouping_missing,
        name=name, grouping_name=grouping_name,
        value_labels=value_labels, backend=backend,
    )


def ks_two_sample(
    x: ArrayLike | Sequence[Any] | NonparametricDesign,
    y: ArrayLike | Sequence[Any] | None = None,
    *,
    grouping: Sequence[Any] | None = None,
    group1: float = 1.0,
    group2: float = 2.0,
    missing: MissingSpec | None = None,
    grouping_missing: MissingSpec | None = None,
    name: str = "x",
    grouping_name: str = "group",
    value_labels: Mapping[float, str] | None = None,
    backend: str = 'cpu',
) -> NonparametricSolution:
    """
    Two-sample Kolmogorov-Smirnov test.

    Same inputs as mann_whitney_u(). params is a KolmogorovSmirnovParams
    with the most extreme differences (absolute, positive, negative), Z and
    the asymptotic two-tailed p-value.
    """
    return _two_sample(
        "ks_two_sample", x, y,
        grouping=grouping, group1=group1, group2=group2,
        missing=missing, grouping_missing=grouping_missing,
        name=name, grouping_name=grouping_name,
        value_labels=value_labels, backend=backend,
    )


def kruskal_wallis_h(
    *samples: ArrayLike | Sequence[Any],
    grouping: Sequence[Any] | None = None,
    minimum: float | None = None,
    maximum: float | None = None,
    missing: MissingSpec | None = None,
    grouping_missing: MissingSpec | None = None,
    name: str = "x",
    grouping_name: str = "group",
    value_labels: Mapping[float, str] | None = None,
    backend: str = 'cpu',
) -> NonparametricSolution:
    """
    Kruskal-Wallis H test for k independent samples.

    Call as kruskal_wallis_h(a, b, c) with one array per group, or as
    kruskal_wallis_h(values, grouping=g, minimum=1, maximum=3) with a test
    variable split by a grouping variable restricted to [minimum, maximum].

    Returns
    -------
    NonparametricSolution
        params is a KruskalWallisParams (tie-corrected H, df, p).

    Raises
    ------
    InsufficientDataError
        No valid data, or fewer than two non-empty groups.
    ZeroVarianceError
        Every value is tied.
    """
    if len(samples) == 1 and isinstance(samples[0], NonparametricDesign):
        design = samples[0]
    elif grouping is not None:
        if len(samples) != 1:
            raise ValidationError(
                f"with grouping, pass exactly one test variable, got {len(samples)}"
            )
        design = NonparametricDesign.for_kruskal_wallis_grouped(
            samples[0], grouping,
            minimum=minimum,
            maximum=maximum,
            missing=missing,
            grouping_missing=grouping_missing,
            name=name,
            grouping_name=grouping_name,
        )
    else:
        design = NonparametricDesign.for_kruskal_wallis(samples, name=name)

    result = _get_backend(backend).solve(design)
    return NonparametricSolution(_result=result, _design=design, value_labels=value_labels)


def runs_test(
    x: ArrayLike | Sequence[Any] | NonparametricDesign,
    cut_point: str | float = "median",
    *,
    missing: MissingSpec | None = None,
    name: str = "x",
    backend: str = 'cpu',
) -> NonparametricSolution:
    """
    Runs test for randomness of a sequence about a cut point.

    Parameters
    ----------
    x : array-like or NonparametricDesign
        Observations in case order.
    cut_point : {"median", "mean", "mode"} or float
        Test value policy. The mode is the most frequent value, ties going
        to the value that appears first.

    Raises
    ------
    InsufficientDataError
        Fewer than 2 valid cases.
    ZeroVarianceError
        Every case falls on one side of the test value.
    """
    if isinstance(x, NonparametricDesign):
        design = x
    else:
        design = NonparametricDesign.for_runs(x, cut_point, missing=missing, name=name)
    result = _get_backend(backend).solve(design)
    return NonparametricSolution(_result=result, _design=design)
