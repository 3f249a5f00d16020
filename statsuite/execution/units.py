"""
Compute units.

A ComputeUnit is the execution context of one analysis module. It owns a
single-worker executor, so calls against one unit run one at a time while
different units run side by side. Status and timestamps are mutated only
by the owning ComputeRegistry.
"""

from __future__ import annotations

import copy
from concurrent.futures import Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor
from enum import Enum
from typing import Any

from statsuite.execution.modules import AnalysisModule


class UnitStatus(str, Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    ERROR = "error"


def run_method(module_cls: type[AnalysisModule], method_name: str, params: dict[str, Any]) -> Any:
    """Worker entry point; module-level so process workers can unpickle it."""
    return getattr(module_cls(), method_name)(**params)


class ComputeUnit:
    """
    Execution context for one analysis module.

    The worker is created on first submit and torn down by terminate().
    """

    def __init__(
        self,
        name: str,
        module_cls: type[AnalysisModule],
        *,
        isolation: str = "thread",
        now: float = 0.0,
    ):
        self.name = name
        self.module_cls = module_cls
        self.isolation = isolation
        self.status = UnitStatus.IDLE
        self.created_at = now
        self.last_used_at = now
        # Set by a failed call, cleared only by an explicit reset
        self.failed = False
        # Calls dispatched but not yet finished
        self.active = 0
        self._executor: Executor | None = None

    @property
    def is_started(self) -> bool:
        return self._executor is not None

    def _ensure_executor(self) -> Executor:
        if self._executor is None:
            if self.isolation == "process":
                self._executor = ProcessPoolExecutor(max_workers=1)
            else:
                self._executor = ThreadPoolExecutor(
                    max_workers=1, thread_name_prefix=f"unit-{self.name}"
                )
        return self._executor

    def run(self, method_name: str, params: dict[str, Any]) -> Any:
        """Run one module method on the unit's worker and wait for it."""
        if self.isolation == "process":
            future: Future = self._ensure_executor().submit(
                run_method, self.module_cls, method_name, params
            )
            return future.result()

        future = self._ensure_executor().submit(
            run_method, self.module_cls, method_name, copy.deepcopy(params)
        )
        return copy.deepcopy(future.result())

    def terminate(self) -> None:
        """Release the worker. In-flight work is allowed to finish."""
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None

    def __repr__(self) -> str:
        return f"ComputeUnit(name={self.name!r}, status={self.status.value!r})"
