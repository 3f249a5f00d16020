"""
Result envelope shared by every backend.

A backend returns Result[P], where P is its frozen params dataclass
(MannWhitneyParams, FrequencyParams, LinearParams, ...). Solution classes
wrap a Result and build tables from it; they never mutate it.
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Output of one backend solve.

    Attributes:
        params: Statistics computed by the backend
        info: Case accounting and method metadata, e.g. 'n_excluded',
            'test_type', 'percentile_method'
        timing: Timer.result() of the solve, or None when not measured
        backend_name: Name of the producing backend, e.g. 'cpu_gauss_jordan'
        warnings: Non-fatal conditions (ties, perfect fit, no valid cases)
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def total_seconds(self) -> float | None:
        if self.timing is None:
            return None
        return self.timing.get('total_seconds')

    def has_warning(self, substring: str) -> bool:
        return any(substring in w for w in self.warnings)
