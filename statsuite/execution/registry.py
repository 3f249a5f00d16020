"""
Compute registry: lazily created compute units with a result cache.

Usage:
    registry = ComputeRegistry()
    out = registry.invoke("nonparametric.runs", "analyze",
                          {"test_variables": [{"name": "x", "data": [...]}]})
    registry.proxy("regression.linear").analyze(dependent=..., independents=[...])
    registry.cleanup_idle_units()
    registry.terminate_all()

A unit moves IDLE -> PROCESSING -> IDLE on success and to ERROR on any
failure. ERROR does not block further calls, but a unit that has failed
settles back into ERROR after each of them until reset_status() or
reset_unit() clears it. Only IDLE units are reaped.
"""

from __future__ import annotations

import copy
import json
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Mapping

import numpy as np

from statsuite.core.exceptions import (
    ExecutionError,
    UnknownMethodError,
    UnknownModuleError,
    ValidationError,
)
from statsuite.core.logging import get_logger
from statsuite.execution.config import ExecutionConfig
from statsuite.execution.modules import DEFAULT_MODULES, AnalysisModule
from statsuite.execution.units import ComputeUnit, UnitStatus

logger = get_logger(__name__)

CacheKey = tuple[str, str, str]


def _normalize_params(obj: Any) -> Any:
    """Recursively convert params to JSON-serializable values for cache keys.

    Handles:
    - numpy arrays and scalars -> Python lists and scalars
    - tuples -> lists
    - datetime/date -> ISO format strings
    - NaN/Inf stay floats: json writes the bare NaN/Infinity tokens,
      which no string or finite number serializes to
    """
    if isinstance(obj, np.ndarray):
        return [_normalize_params(v) for v in obj.tolist()]
    if isinstance(obj, np.generic):
        return _normalize_params(obj.item())
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, Mapping):
        return {str(k): _normalize_params(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_normalize_params(v) for v in obj]
    return obj


def cache_key(module_name: str, method_name: str, params: Mapping[str, Any]) -> CacheKey:
    """(module, method, canonical JSON of params); key order does not matter."""
    serialized = json.dumps(_normalize_params(params), sort_keys=True, default=str)
    return (module_name, method_name, serialized)


@dataclass(frozen=True)
class BatchTask:
    """One call in an invoke_batch() request."""
    module_name: str
    method_name: str
    params: Mapping[str, Any] | None = None
    cache_enabled: bool = True

    @classmethod
    def coerce(cls, task: BatchTask | Mapping[str, Any]) -> BatchTask:
        if isinstance(task, BatchTask):
            return task
        if isinstance(task, Mapping):
            try:
                return cls(**task)
            except TypeError as e:
                raise ValidationError(f"invalid batch task {dict(task)!r}: {e}") from e
        raise ValidationError(f"batch task must be a BatchTask or a mapping, got {type(task).__name__}")


@dataclass(frozen=True)
class TaskOutcome:
    """Result of one batch task: exactly one of result or error is meaningful."""
    result: Any = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class UnitProxy:
    """Attribute access becomes an invoke() on the bound module."""

    def __init__(self, registry: ComputeRegistry, module_name: str):
        self._registry = registry
        self._module_name = module_name

    def __getattr__(self, method_name: str) -> Callable[..., Any]:
        if method_name.startswith("_"):
            raise AttributeError(method_name)

        def call(**params: Any) -> Any:
            return self._registry.invoke(self._module_name, method_name, params)

        call.__name__ = method_name
        return call

    def __repr__(self) -> str:
        return f"UnitProxy({self._module_name!r})"


class ComputeRegistry:
    """
    Owner of all compute units and the shared result cache.

    Args:
        config: Execution settings
        modules: Module name -> AnalysisModule subclass
        clock: Monotonic time source in seconds (injectable for tests)
    """

    def __init__(
        self,
        config: ExecutionConfig | None = None,
        modules: Mapping[str, type[AnalysisModule]] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or ExecutionConfig()
        self._modules = dict(DEFAULT_MODULES if modules is None else modules)
        self._clock = clock
        self._units: dict[str, ComputeUnit] = {}
        self._cache: dict[CacheKey, Any] = {}
        self._lock = threading.RLock()

    # === Units ===

    def resolve(self, module_name: str) -> ComputeUnit:
        """Existing unit for module_name, or a new IDLE one."""
        with self._lock:
            module_cls = self._modules.get(module_name)
            if module_cls is None:
                raise UnknownModuleError(module_name)
            now = self._clock()
            unit = self._units.get(module_name)
            if unit is None:
                unit = ComputeUnit(
                    module_name, module_cls, isolation=self.config.isolation, now=now
                )
                self._units[module_name] = unit
                logger.info("unit_created", module=module_name, isolation=self.config.isolation)
            unit.last_used_at = now
            return unit

    def proxy(self, module_name: str) -> UnitProxy:
        if module_name not in self._modules:
            raise UnknownModuleError(module_name)
        return UnitProxy(self, module_name)

    def status(self, module_name: str) -> UnitStatus | None:
        """Current status, or None if no unit has been created for the module."""
        with self._lock:
            unit = self._units.get(module_name)
            return unit.status if unit is not None else None

    @property
    def unit_names(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._units)

    @property
    def cache_size(self) -> int:
        with self._lock:
            return len(self._cache)

    # === Invocation ===

    def invoke(
        self,
        module_name: str,
        method_name: str,
        params: Mapping[str, Any] | None = None,
        cache_enabled: bool = True,
    ) -> Any:
        """
        Run module_name.method_name(**params) on the module's unit.

        With caching enabled an identical earlier call returns its stored
        result without re-running.

        Raises:
            UnknownModuleError: No such module
            UnknownMethodError: The module has no such method (unit -> ERROR)
            Exception: Whatever the method raised (unit -> ERROR)
        """
        unit = self._checkout(module_name)
        return self._execute(unit, method_name, dict(params or {}), cache_enabled)

    def invoke_batch(
        self,
        tasks: Mapping[str, BatchTask | Mapping[str, Any]],
    ) -> dict[str, TaskOutcome]:
        """
        Run several invocations concurrently and wait for all of them.

        Every referenced unit is marked PROCESSING before any task starts.
        A failing task is reported in its TaskOutcome and does not affect
        the others.
        """
        batch = {name: BatchTask.coerce(task) for name, task in tasks.items()}
        outcomes: dict[str, TaskOutcome] = {}
        ready: dict[str, tuple[ComputeUnit, BatchTask]] = {}

        for name, task in batch.items():
            try:
                unit = self._checkout(task.module_name)
            except UnknownModuleError as e:
                outcomes[name] = TaskOutcome(error=e)
                continue
            ready[name] = (unit, task)

        logger.info("batch_started", tasks=len(batch), dispatched=len(ready))
        if ready:
            with ThreadPoolExecutor(max_workers=self.config.max_batch_workers) as pool:
                futures = {
                    pool.submit(
                        self._execute,
                        unit,
                        task.method_name,
                        dict(task.params or {}),
                        task.cache_enabled,
                    ): name
                    for name, (unit, task) in ready.items()
                }
                for future in as_completed(futures):
                    name = futures[future]
                    try:
                        outcomes[name] = TaskOutcome(result=future.result())
                    except Exception as e:
                        outcomes[name] = TaskOutcome(error=e)

        failed = sum(1 for o in outcomes.values() if not o.ok)
        logger.info("batch_finished", tasks=len(batch), failed=failed)
        return {name: outcomes[name] for name in batch}

    def _checkout(self, module_name: str) -> ComputeUnit:
        """Resolve and mark PROCESSING in one step, so no reaper sees it idle."""
        with self._lock:
            unit = self.resolve(module_name)
            unit.active += 1
            unit.status = UnitStatus.PROCESSING
            return unit

    def _finish(self, unit: ComputeUnit, failed: bool) -> None:
        with self._lock:
            unit.active = max(unit.active - 1, 0)
            unit.last_used_at = self._clock()
            if failed:
                unit.failed = True
            if failed or unit.active == 0:
                unit.status = UnitStatus.ERROR if unit.failed else UnitStatus.IDLE
            # terminate_all() may have detached the unit mid-call
            detached = unit.active == 0 and self._units.get(unit.name) is not unit
        if detached:
            unit.terminate()

    def _execute(
        self,
        unit: ComputeUnit,
        method_name: str,
        params: dict[str, Any],
        cache_enabled: bool,
    ) -> Any:
        log = logger.bind(module=unit.name, method=method_name)
        started = time.perf_counter()
        log.debug("invoke_started", cache_enabled=cache_enabled)
        try:
            if not unit.module_cls.has_method(method_name):
                raise UnknownMethodError(unit.name, method_name)

            key = cache_key(unit.name, method_name, params) if cache_enabled else None
            hit = False
            if key is not None:
                with self._lock:
                    hit = key in self._cache
                    cached = self._cache.get(key)

            if hit:
                if self.config.cache_hit_delay > 0:
                    time.sleep(self.config.cache_hit_delay)
                result = copy.deepcopy(cached)
                log.debug("cache_hit")
            else:
                result = unit.run(method_name, params)
                if key is not None:
                    with self._lock:
                        self._cache[key] = copy.deepcopy(result)
        except Exception as e:
            self._finish(unit, failed=True)
            log.error(
                "invoke_failed",
                error=str(e),
                error_type=type(e).__name__,
                duration=time.perf_counter() - started,
            )
            raise

        self._finish(unit, failed=False)
        log.info("invoke_finished", cached=hit, duration=time.perf_counter() - started)
        return result

    # === Lifecycle ===

    def reset_status(self, module_name: str) -> None:
        """ERROR -> IDLE (or back to PROCESSING if calls are in flight). The cache is untouched."""
        with self._lock:
            if module_name not in self._modules:
                raise UnknownModuleError(module_name)
            unit = self._units.get(module_name)
            if unit is not None and unit.failed:
                unit.failed = False
                if unit.status is UnitStatus.ERROR:
                    unit.status = UnitStatus.PROCESSING if unit.active else UnitStatus.IDLE
                logger.info("unit_status_reset", module=module_name)

    def reset_unit(self, module_name: str) -> bool:
        """
        Terminate an idle or errored unit and drop its cache entries.

        Returns whether a unit was terminated.

        Raises:
            ExecutionError: If the unit is processing
        """
        with self._lock:
            if module_name not in self._modules:
                raise UnknownModuleError(module_name)
            unit = self._units.get(module_name)
            if unit is not None and (unit.active or unit.status is UnitStatus.PROCESSING):
                raise ExecutionError(f"cannot reset {module_name!r} while it is processing")
            for key in [k for k in self._cache if k[0] == module_name]:
                del self._cache[key]
            if unit is None:
                return False
            del self._units[module_name]
        unit.terminate()
        logger.info("unit_terminated", module=module_name, reason="reset")
        return True

    def cleanup_idle_units(self, max_idle_time: float | None = None) -> list[str]:
        """
        Terminate IDLE units unused for longer than max_idle_time seconds
        (default config.idle_timeout). Returns the removed module names.
        """
        threshold = self.config.idle_timeout if max_idle_time is None else max_idle_time
        removed: list[ComputeUnit] = []
        with self._lock:
            now = self._clock()
            for name, unit in list(self._units.items()):
                if (
                    unit.status is UnitStatus.IDLE
                    and unit.active == 0
                    and now - unit.last_used_at > threshold
                ):
                    del self._units[name]
                    removed.append(unit)

        for unit in removed:
            unit.terminate()
            logger.info("unit_terminated", module=unit.name, reason="idle")
        return [unit.name for unit in removed]

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    def terminate_all(self) -> None:
        """Terminate every unit and clear the cache."""
        with self._lock:
            units = list(self._units.values())
            self._units.clear()
            self._cache.clear()
        for unit in units:
            unit.terminate()
            logger.info("unit_terminated", module=unit.name, reason="shutdown")

    def __enter__(self) -> ComputeRegistry:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.terminate_all()

    def __repr__(self) -> str:
        return f"ComputeRegistry(units={len(self._units)}, cached={len(self._cache)})"
