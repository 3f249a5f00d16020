"""
Compute-unit execution layer.

Serves the analysis modules to a host application: each module name maps
to a lazily created compute unit with its own single-worker executor, and
results are cached by (module, method, params).

Public API:
    ComputeRegistry(config, modules, clock)
        .resolve / .invoke / .invoke_batch / .proxy
        .reset_status / .reset_unit / .cleanup_idle_units
        .terminate_all / .clear_cache
    ExecutionConfig, BatchTask, TaskOutcome, UnitStatus, DEFAULT_MODULES

Example:
    >>> from statsuite.execution import ComputeRegistry
    >>> with ComputeRegistry() as registry:
    ...     out = registry.invoke("descriptive.frequencies", "frequencies",
    ...                           {"variables": [{"name": "x", "data": [1, 2, 2]}]})
    >>> out["tables"][0]["title"]
    'Statistics'
"""

from statsuite.execution.config import ExecutionConfig
from statsuite.execution.modules import AnalysisModule, DEFAULT_MODULES
from statsuite.execution.units import ComputeUnit, UnitStatus
from statsuite.execution.registry import (
    BatchTask,
    ComputeRegistry,
    TaskOutcome,
    UnitProxy,
    cache_key,
)

__all__ = [
    "ComputeRegistry",
    "ExecutionConfig",
    "BatchTask",
    "TaskOutcome",
    "UnitProxy",
    "ComputeUnit",
    "UnitStatus",
    "AnalysisModule",
    "DEFAULT_MODULES",
    "cache_key",
]
