"""
FrequencyDesign: one variable prepared for a frequency analysis.

Handles missing-value filtering, weight validation and value coercion for
the three variable kinds:

    numeric  values coerced to float
    string   values kept as stripped text
    date     values converted to SPSS seconds (see _dates)

Immutable after construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence
import unicodedata
import numpy as np
from numpy.typing import NDArray, ArrayLike

from statsuite.core.exceptions import ValidationError
from statsuite.core.sample import MissingSpec, is_missing, to_float
from statsuite.core.validation import check_array, check_consistent_length, check_weights
from statsuite.descriptive._dates import to_spss_seconds

VALID_KINDS = ("numeric", "string", "date")


def collation_key(text: str) -> tuple[str, str]:
    """
    Pinned string ordering.

    Case-insensitive comparison of the NFKD form first; between strings
    that differ only in case, lower case sorts first.
    """
    return (unicodedata.normalize("NFKD", text).casefold(), text.swapcase())


@dataclass(frozen=True)
class FrequencyDesign:
    """
    Frequency analysis input.

    Attributes:
        values: Valid values (float64 for numeric/date, object for string)
        weights: Positive weights aligned with values
        missing_weight: Total weight of missing cases
        n_missing: Number of missing cases (unweighted)
        kind: One of VALID_KINDS
        name: Variable name

    Zero-weight cases appear in neither values nor the missing counts.

    Do not construct directly; use from_column().
    """
    values: NDArray[Any]
    weights: NDArray[np.floating[Any]]
    missing_weight: float
    n_missing: int
    kind: str
    name: str = "x"

    @classmethod
    def from_column(
        cls,
        data: Sequence[Any],
        weights: ArrayLike | None = None,
        *,
        kind: str = "numeric",
        missing: MissingSpec | None = None,
        name: str = "x",
    ) -> FrequencyDesign:
        """
        Build from a raw host column.

        Raises:
            ValidationError: Unknown kind, invalid weights, or a cell that
                cannot be coerced to the kind
            DimensionError: weights and data differ in length
        """
        if kind not in VALID_KINDS:
            raise ValidationError(f"kind must be one of {VALID_KINDS}, got {kind!r}")

        data = list(data)
        if weights is None:
            w = np.ones(len(data), dtype=np.float64)
        else:
            w = check_array(weights, f"{name} weights").ravel()
            check_weights(w, f"{name} weights")
        check_consistent_length(data, w, names=(name, f"{name} weights"))

        kept: list[Any] = []
        kept_weights: list[float] = []
        n_missing = 0
        missing_weight = 0.0
        for cell, wi in zip(data, w):
            if wi == 0:
                continue
            if isinstance(cell, str):
                cell = cell.strip()
            if is_missing(cell, missing):
                n_missing += 1
                missing_weight += float(wi)
                continue
            if kind == "numeric":
                value: Any = to_float(cell, name)
            elif kind == "date":
                value = to_spss_seconds(cell)
            else:
                value = str(cell)
            kept.append(value)
            kept_weights.append(float(wi))

        dtype = object if kind == "string" else np.float64
        return cls(
            values=np.asarray(kept, dtype=dtype),
            weights=np.asarray(kept_weights, dtype=np.float64),
            missing_weight=missing_weight,
            n_missing=n_missing,
            kind=kind,
            name=name,
        )

    @property
    def n(self) -> int:
        """Number of valid cases (unweighted)."""
        return int(self.values.shape[0])

    @property
    def valid_weight(self) -> float:
        return float(np.sum(self.weights))

    @property
    def total_weight(self) -> float:
        return self.valid_weight + self.missing_weight

    @property
    def is_numeric(self) -> bool:
        """Numeric and date variables support percentiles and statistics."""
        return self.kind != "string"

    def __repr__(self) -> str:
        return (
            f"FrequencyDesign(name={self.name!r}, kind={self.kind!r}, "
            f"n={self.n}, n_missing={self.n_missing})"
        )
