"""
Regression Design.

Holds the response and predictor columns after listwise deletion, and
builds the design matrix with a leading intercept column once per fit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence
import numpy as np
from numpy.typing import ArrayLike, NDArray

from statsuite.core.exceptions import ValidationError, InsufficientDataError
from statsuite.core.sample import MissingSpec, is_missing, to_float
from statsuite.core.validation import check_2d, check_1d, check_finite, check_consistent_length


def column_to_float(
    column: Sequence[Any],
    name: str,
    missing: MissingSpec | None = None,
) -> NDArray[np.floating[Any]]:
    """Raw host column to float64, missing cells as NaN."""
    return np.asarray(
        [np.nan if is_missing(v, missing) else to_float(v, name) for v in column],
        dtype=np.float64,
    )


@dataclass(frozen=True)
class RegressionDesign:
    """
    Linear regression specification.

    X holds the predictors only (n x p); the intercept column is added by
    design_matrix(). Immutable after construction.

    Construction:
        RegressionDesign.from_arrays(X, y)                 # NaN marks missing
        RegressionDesign.from_columns(y_col, [x1_col, ...]) # raw host columns
    """
    _X: NDArray[np.floating[Any]]
    _y: NDArray[np.floating[Any]]
    _n: int
    _p: int
    _names: tuple[str, ...]
    _dependent_name: str = "y"
    _n_excluded: int = 0

    @classmethod
    def from_arrays(
        cls,
        X: ArrayLike,
        y: ArrayLike,
        *,
        names: Sequence[str] | None = None,
        dependent_name: str = "y",
    ) -> RegressionDesign:
        """Build from numeric arrays; NaN (or None) entries are missing."""
        try:
            X_arr = np.asarray(X, dtype=np.float64)
            y_arr = np.asarray(y, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"regression inputs must be numeric: {e}") from e
        return cls._build(X_arr, y_arr, names=names, dependent_name=dependent_name)

    @classmethod
    def from_columns(
        cls,
        dependent: Sequence[Any],
        independents: Sequence[Sequence[Any]],
        *,
        names: Sequence[str] | None = None,
        dependent_name: str = "y",
        missing: dict[str, MissingSpec | None] | None = None,
    ) -> RegressionDesign:
        """
        Build from raw host columns (one sequence per predictor).

        Raises:
            DimensionError: If any column differs in length from the response
        """
        missing = missing or {}
        if names is None:
            names = [f"x{j + 1}" for j in range(len(independents))]
        if len(names) != len(independents):
            raise ValidationError(
                f"names: expected {len(independents)} names, got {len(names)}"
            )
        for col, name in zip(independents, names):
            check_consistent_length(dependent, col, names=(dependent_name, name))

        y_arr = column_to_float(dependent, dependent_name, missing.get(dependent_name))
        if independents:
            X_arr = np.column_stack([
                column_to_float(col, name, missing.get(name))
                for col, name in zip(independents, names)
            ])
        else:
            X_arr = np.empty((y_arr.shape[0], 0), dtype=np.float64)
        return cls._build(X_arr, y_arr, names=names, dependent_name=dependent_name)

    @classmethod
    def _build(
        cls,
        X: NDArray,
        y: NDArray,
        *,
        names: Sequence[str] | None,
        dependent_name: str,
    ) -> RegressionDesign:
        """Internal builder with validation and listwise deletion."""
        if X.ndim == 1:
            X = X.reshape(-1, 1)
        if y.ndim == 2 and y.shape[1] == 1:
            y = y.ravel()

        check_2d(X, 'X')
        check_1d(y, 'y')
        check_consistent_length(X, y, names=('X', 'y'))

        n_all, p = X.shape
        if p == 0:
            raise ValidationError("X: at least one predictor is required")
        if names is None:
            names = tuple(f"x{j + 1}" for j in range(p))
        if len(names) != p:
            raise ValidationError(f"names: expected {p} names, got {len(names)}")

        complete = ~np.isnan(y) & ~np.any(np.isnan(X), axis=1)
        X = X[complete]
        y = y[complete]
        check_finite(X, 'X')
        check_finite(y, 'y')

        n = X.shape[0]
        if n <= p + 1:
            raise InsufficientDataError(
                f"regression with {p} predictor(s) needs more than {p + 1} "
                f"complete cases, got {n}",
                required=p + 2,
                actual=n,
            )

        return cls(
            _X=X,
            _y=y,
            _n=n,
            _p=p,
            _names=tuple(names),
            _dependent_name=dependent_name,
            _n_excluded=int(n_all - n),
        )

    # === Properties ===

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Predictor matrix without intercept (n x p)."""
        return self._X

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        """Response vector (n,)."""
        return self._y

    @property
    def n(self) -> int:
        """Number of complete cases."""
        return self._n

    @property
    def p(self) -> int:
        """Number of predictors (excluding intercept)."""
        return self._p

    @property
    def names(self) -> tuple[str, ...]:
        return self._names

    @property
    def dependent_name(self) -> str:
        return self._dependent_name

    @property
    def n_excluded(self) -> int:
        """Cases dropped by listwise deletion."""
        return self._n_excluded

    def design_matrix(self) -> NDArray[np.floating[Any]]:
        """[1 | X], shape (n, p + 1)."""
        return np.column_stack([np.ones(self._n), self._X])
