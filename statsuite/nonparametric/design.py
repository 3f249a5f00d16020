"""
NonparametricDesign: tagged union for nonparametric test inputs.

Uses factory classmethods per test type. The `test_type` field identifies
which fields are populated. Immutable after construction; all missing-value
filtering and minimum-size checks happen here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence
import numpy as np
from numpy.typing import NDArray, ArrayLike

from statsuite.core.exceptions import ValidationError, InsufficientDataError
from statsuite.core.sample import MissingSpec, ValidatedSample, GroupedSample
from statsuite.nonparametric._common import VALID_CUT_POINTS


TWO_SAMPLE_TESTS = ("mann_whitney", "ks_two_sample")


def _validate_cut_point(cut_point: str | float) -> str | float:
    """Accept one of VALID_CUT_POINTS or a finite number."""
    if isinstance(cut_point, str):
        if cut_point not in VALID_CUT_POINTS:
            raise ValidationError(
                f"cut_point must be one of {VALID_CUT_POINTS} or a number, "
                f"got {cut_point!r}"
            )
        return cut_point
    if isinstance(cut_point, bool) or not isinstance(cut_point, (int, float, np.number)):
        raise ValidationError(f"cut_point must be a string or number, got {cut_point!r}")
    if not np.isfinite(cut_point):
        raise ValidationError(f"cut_point must be finite, got {cut_point}")
    return float(cut_point)


def _require_non_empty(samples: Sequence[NDArray], labels: Sequence[Any]) -> None:
    for arr, label in zip(samples, labels):
        if arr.shape[0] == 0:
            raise InsufficientDataError(
                f"group {label!r} has no valid observations",
                required=1,
                actual=0,
            )


@dataclass(frozen=True)
class NonparametricDesign:
    """
    Design for nonparametric tests.

    Do not construct directly; use factory classmethods.
    """
    test_type: str

    _samples: tuple[NDArray[np.floating[Any]], ...] = ()
    _group_labels: tuple[Any, ...] = ()
    _cut_point: str | float = "median"
    _n_excluded: int = 0
    _variable_name: str = "x"
    _grouping_name: str = ""

    # --- Properties ---

    @property
    def samples(self) -> tuple[NDArray[np.floating[Any]], ...]:
        return self._samples

    @property
    def group_labels(self) -> tuple[Any, ...]:
        return self._group_labels

    @property
    def values(self) -> NDArray[np.floating[Any]]:
        """Single-sample data, in original case order (runs test)."""
        return self._samples[0]

    @property
    def cut_point(self) -> str | float:
        return self._cut_point

    @property
    def n_excluded(self) -> int:
        """Cases dropped as missing before the test."""
        return self._n_excluded

    @property
    def variable_name(self) -> str:
        return self._variable_name

    @property
    def grouping_name(self) -> str:
        return self._grouping_name

    @property
    def n(self) -> int:
        return sum(int(s.shape[0]) for s in self._samples)

    # --- Factories ---

    @classmethod
    def for_two_samples(
        cls,
        test_type: str,
        x: ArrayLike | Sequence[Any],
        y: ArrayLike | Sequence[Any] | None = None,
        *,
        grouping: Sequence[Any] | None = None,
        group1: float = 1.0,
        group2: float = 2.0,
        missing: MissingSpec | None = None,
        grouping_missing: MissingSpec | None = None,
        name: str = "x",
        grouping_name: str = "group",
    ) -> NonparametricDesign:
        """
        Two independent samples, either as two arrays or as a test variable
        split by a grouping variable.

        Raises:
            ValidationError: Unknown test type, or both y and grouping given
            InsufficientDataError: Either group empty after filtering
        """
        if test_type not in TWO_SAMPLE_TESTS:
            raise ValidationError(
                f"test_type must be one of {TWO_SAMPLE_TESTS}, got {test_type!r}"
            )

        if grouping is not None:
            if y is not None:
                raise ValidationError("pass either y or grouping, not both")
            if float(group1) == float(group2):
                raise ValidationError(
                    f"group1 and group2 must differ, both are {group1!r}"
                )
            grouped = GroupedSample.from_columns(
                x, grouping,
                missing=missing,
                grouping_missing=grouping_missing,
                name=name,
                grouping_name=grouping_name,
            )
            samples = (grouped.values_for(group1), grouped.values_for(group2))
            labels: tuple[Any, ...] = (float(group1), float(group2))
            n_excluded = grouped.sample.n_missing
        else:
            if y is None:
                raise ValidationError("two-sample test requires y or grouping")
            sx = ValidatedSample.from_column(x, missing=missing, name="x")
            sy = ValidatedSample.from_column(y, missing=missing, name="y")
            samples = (sx.values, sy.values)
            labels = ("x", "y")
            n_excluded = sx.n_missing + sy.n_missing
            grouping_name = ""

        _require_non_empty(samples, labels)

        return cls(
            test_type=test_type,
            _samples=samples,
            _group_labels=labels,
            _n_excluded=n_excluded,
            _variable_name=name,
            _grouping_name=grouping_name,
        )

    @classmethod
    def for_kruskal_wallis(
        cls,
        samples: Sequence[ArrayLike | Sequence[Any]],
        *,
        labels: Sequence[Any] | None = None,
        name: str = "x",
    ) -> NonparametricDesign:
        """
        K independent samples given as separate arrays.

        Empty samples are dropped; at least two must remain.
        """
        if labels is None:
            labels = tuple(range(1, len(samples) + 1))
        if len(labels) != len(samples):
            raise ValidationError(
                f"labels: expected {len(samples)} labels, got {len(labels)}"
            )

        validated = [
            ValidatedSample.from_column(s, name=f"sample {label}")
            for s, label in zip(samples, labels)
        ]
        kept = [(v.values, label) for v, label in zip(validated, labels) if v.n > 0]
        return cls._build_k_samples(
            kept,
            n_excluded=sum(v.n_missing for v in validated),
            name=name,
            grouping_name="",
        )

    @classmethod
    def for_kruskal_wallis_grouped(
        cls,
        data: Sequence[Any],
        grouping: Sequence[Any],
        *,
        minimum: float | None = None,
        maximum: float | None = None,
        missing: MissingSpec | None = None,
        grouping_missing: MissingSpec | None = None,
        name: str = "x",
        grouping_name: str = "group",
    ) -> NonparametricDesign:
        """
        Test variable split by a grouping variable, optionally restricted to
        group values in [minimum, maximum].
        """
        if minimum is not None and maximum is not None and minimum > maximum:
            raise ValidationError(
                f"grouping range minimum ({minimum}) exceeds maximum ({maximum})"
            )

        grouped = GroupedSample.from_columns(
            data, grouping,
            missing=missing,
            grouping_missing=grouping_missing,
            name=name,
            grouping_name=grouping_name,
        )
        n_excluded = grouped.sample.n_missing
        kept = []
        for label in grouped.labels:
            in_range = (
                (minimum is None or label >= minimum)
                and (maximum is None or label <= maximum)
            )
            if in_range:
                kept.append((grouped.values_for(label), label))
            else:
                n_excluded += int(grouped.groups[label].shape[0])

        return cls._build_k_samples(
            kept, n_excluded=n_excluded, name=name, grouping_name=grouping_name,
        )

    @classmethod
    def _build_k_samples(
        cls,
        kept: list[tuple[NDArray[np.floating[Any]], Any]],
        *,
        n_excluded: int,
        name: str,
        grouping_name: str,
    ) -> NonparametricDesign:
        n_total = sum(int(arr.shape[0]) for arr, _ in kept)
        if n_total == 0:
            raise InsufficientDataError(
                f"{name}: no valid observations", required=1, actual=0,
            )
        if len(kept) < 2:
            raise InsufficientDataError(
                f"{name}: Kruskal-Wallis needs at least 2 non-empty groups, "
                f"got {len(kept)}",
                required=2,
                actual=len(kept),
            )
        return cls(
            test_type="kruskal_wallis",
            _samples=tuple(arr for arr, _ in kept),
            _group_labels=tuple(label for _, label in kept),
            _n_excluded=n_excluded,
            _variable_name=name,
            _grouping_name=grouping_name,
        )

    @classmethod
    def for_runs(
        cls,
        data: ArrayLike | Sequence[Any],
        cut_point: str | float = "median",
        *,
        missing: MissingSpec | None = None,
        name: str = "x",
    ) -> NonparametricDesign:
        """
        Single sample in case order plus a cut-point policy.

        Raises:
            ValidationError: Unknown cut point
            InsufficientDataError: Fewer than 2 valid cases
        """
        cut_point = _validate_cut_point(cut_point)
        sample = ValidatedSample.from_column(data, missing=missing, name=name)
        if sample.n < 2:
            raise InsufficientDataError(
                f"{name}: runs test requires at least 2 valid cases, got {sample.n}",
                required=2,
                actual=sample.n,
            )
        return cls(
            test_type="runs",
            _samples=(sample.values,),
            _cut_point=cut_point,
            _n_excluded=sample.n_missing,
            _variable_name=name,
        )
