"""
Validated samples: raw host columns turned into numeric arrays.

A Column arrives from the host as a plain sequence of cells. System-missing
cells are None, NaN, or blank strings; a MissingSpec marks additional
user-defined missing values. Everything downstream (ranks, tests,
frequencies, regression) works on the float64 arrays built here and never
re-checks for missing data.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence
import numpy as np
from numpy.typing import ArrayLike, NDArray

from statsuite.core.exceptions import ValidationError
from statsuite.core.validation import check_array, check_consistent_length, check_weights


@dataclass(frozen=True)
class MissingSpec:
    """
    User-defined missing values for one variable.

    Attributes:
        values: Discrete values treated as missing
        low, high: Optional inclusive numeric range treated as missing;
            either bound may be None for an open end
    """
    values: tuple[Any, ...] = ()
    low: float | None = None
    high: float | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any] | None) -> MissingSpec | None:
        """Build from the host's {"values": [...], "range": [low, high]} form."""
        if not raw:
            return None
        low = high = None
        if raw.get('range') is not None:
            low, high = raw['range']
        return cls(values=tuple(raw.get('values', ())), low=low, high=high)

    def __contains__(self, value: Any) -> bool:
        # Cells and declared values may each arrive as numbers or as text;
        # a match in either form counts.
        number = _as_number(value)
        for declared in self.values:
            if value == declared or str(value) == str(declared):
                return True
            if number is not None and number == _as_number(declared):
                return True
        if self.low is None and self.high is None:
            return False
        if number is None:
            return False
        if self.low is not None and number < self.low:
            return False
        if self.high is not None and number > self.high:
            return False
        return True


def _as_number(value: Any) -> float | None:
    """float(value) for numbers and numeric text, else None."""
    if isinstance(value, (bool, np.bool_)):
        return None
    if isinstance(value, (int, float, np.integer, np.floating)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def is_system_missing(value: Any, blank_is_missing: bool = True) -> bool:
    """True for None, NaN, and (optionally) blank strings."""
    if value is None:
        return True
    if isinstance(value, (float, np.floating)) and np.isnan(value):
        return True
    if blank_is_missing and isinstance(value, str) and value.strip() == "":
        return True
    return False


def is_missing(value: Any, missing: MissingSpec | None = None,
               blank_is_missing: bool = True) -> bool:
    """System-missing or user-missing."""
    if is_system_missing(value, blank_is_missing):
        return True
    return missing is not None and value in missing


def to_float(value: Any, name: str) -> float:
    """Coerce one non-missing cell to float, rejecting non-numeric text."""
    if isinstance(value, bool):
        return float(value)
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name}: non-numeric value {value!r}") from e


def _weights_array(weights: ArrayLike | None, n: int, name: str) -> NDArray[np.floating[Any]]:
    if weights is None:
        return np.ones(n, dtype=np.float64)
    w = check_array(weights, name).ravel()
    check_weights(w, name)
    return w


@dataclass(frozen=True)
class ValidatedSample:
    """
    Numeric values after missing-value filtering, paired with case weights.

    Invariant: len(values) == len(weights). Every weight is finite and
    strictly positive; zero-weight cases are dropped at construction.

    Do not construct directly; use from_column() or from_array().
    """
    values: NDArray[np.floating[Any]]
    weights: NDArray[np.floating[Any]]
    n_missing: int = 0
    missing_weight: float = 0.0
    name: str = "values"
    positions: NDArray[np.intp] = field(default_factory=lambda: np.empty(0, dtype=np.intp))

    @classmethod
    def from_column(
        cls,
        data: Sequence[Any],
        weights: ArrayLike | None = None,
        *,
        missing: MissingSpec | None = None,
        name: str = "values",
    ) -> ValidatedSample:
        """
        Filter a raw host column and coerce it to float64.

        Args:
            data: Raw cells
            weights: Optional case weights (same length as data)
            missing: User-defined missing values
            name: Variable name for error messages

        Raises:
            DimensionError: If weights and data differ in length
            ValidationError: On negative or non-finite weights, or
                non-numeric cells
        """
        data = list(data)
        w = _weights_array(weights, len(data), f"{name} weights")
        check_consistent_length(data, w, names=(name, f"{name} weights"))

        kept_values: list[float] = []
        kept_positions: list[int] = []
        n_missing = 0
        missing_weight = 0.0
        for i, (cell, wi) in enumerate(zip(data, w)):
            if wi == 0:
                continue
            if is_missing(cell, missing):
                n_missing += 1
                missing_weight += float(wi)
                continue
            kept_values.append(to_float(cell, name))
            kept_positions.append(i)

        positions = np.asarray(kept_positions, dtype=np.intp)
        return cls(
            values=np.asarray(kept_values, dtype=np.float64),
            weights=w[positions] if positions.size else np.empty(0, dtype=np.float64),
            n_missing=n_missing,
            missing_weight=missing_weight,
            name=name,
            positions=positions,
        )

    @classmethod
    def from_array(cls, x: ArrayLike, name: str = "x") -> ValidatedSample:
        """Numeric array input: NaN marks missing, weights are all one."""
        arr = check_array(x, name).ravel()
        mask = ~np.isnan(arr)
        if np.any(np.isinf(arr[mask])):
            raise ValidationError(f"{name}: contains infinite values")
        values = arr[mask]
        return cls(
            values=values,
            weights=np.ones(values.shape[0], dtype=np.float64),
            n_missing=int(np.sum(~mask)),
            missing_weight=float(np.sum(~mask)),
            name=name,
            positions=np.flatnonzero(mask),
        )

    @property
    def n(self) -> int:
        """Number of valid cases."""
        return int(self.values.shape[0])

    @property
    def total_weight(self) -> float:
        """Sum of weights over valid cases."""
        return float(np.sum(self.weights))


@dataclass(frozen=True)
class GroupedSample:
    """
    A ValidatedSample partitioned by a numeric grouping variable.

    Holds index arrays into sample.values rather than copies. Groups are
    ordered by ascending group value.
    """
    sample: ValidatedSample
    groups: dict[float, NDArray[np.intp]]
    grouping_name: str = "group"

    @classmethod
    def from_columns(
        cls,
        data: Sequence[Any],
        grouping: Sequence[Any],
        *,
        missing: MissingSpec | None = None,
        grouping_missing: MissingSpec | None = None,
        name: str = "values",
        grouping_name: str = "group",
    ) -> GroupedSample:
        """
        Pair a test variable with its grouping variable.

        Cases missing on either variable are excluded.

        Raises:
            DimensionError: If the columns differ in length
        """
        data = list(data)
        grouping = list(grouping)
        check_consistent_length(data, grouping, names=(name, grouping_name))

        values: list[float] = []
        labels: list[float] = []
        n_missing = 0
        for cell, label in zip(data, grouping):
            if is_missing(cell, missing) or is_missing(label, grouping_missing):
                n_missing += 1
                continue
            values.append(to_float(cell, name))
            labels.append(to_float(label, grouping_name))

        values_arr = np.asarray(values, dtype=np.float64)
        labels_arr = np.asarray(labels, dtype=np.float64)
        sample = ValidatedSample(
            values=values_arr,
            weights=np.ones(values_arr.shape[0], dtype=np.float64),
            n_missing=n_missing,
            missing_weight=float(n_missing),
            name=name,
            positions=np.arange(values_arr.shape[0], dtype=np.intp),
        )
        groups = {
            float(label): np.flatnonzero(labels_arr == label)
            for label in np.unique(labels_arr)
        }
        return cls(sample=sample, groups=groups, grouping_name=grouping_name)

    def values_for(self, label: float) -> NDArray[np.floating[Any]]:
        """Values belonging to one group (empty if the label is absent)."""
        idx = self.groups.get(float(label))
        if idx is None:
            return np.empty(0, dtype=np.float64)
        return self.sample.values[idx]

    @property
    def labels(self) -> tuple[float, ...]:
        return tuple(self.groups)
