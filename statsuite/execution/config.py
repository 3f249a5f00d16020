"""Execution layer settings."""

from dataclasses import dataclass

from statsuite.core.exceptions import ValidationError

ISOLATION_MODES = ("thread", "process")


@dataclass(frozen=True)
class ExecutionConfig:
    """
    Settings for a ComputeRegistry.

    Attributes:
        idle_timeout: Seconds an idle unit may go unused before
            cleanup_idle_units() terminates it
        cache_hit_delay: Seconds a cache hit waits before returning, so
            hosts observe the PROCESSING state even for cached calls
        isolation: "thread" runs each unit on a single worker thread with
            params and results deep-copied; "process" runs each unit in its
            own single-worker process
        max_batch_workers: Cap on concurrently dispatched batch tasks
            (None lets the executor choose)
    """
    idle_timeout: float = 300.0
    cache_hit_delay: float = 0.01
    isolation: str = "thread"
    max_batch_workers: int | None = None

    def __post_init__(self) -> None:
        if self.isolation not in ISOLATION_MODES:
            raise ValidationError(
                f"isolation: expected one of {ISOLATION_MODES}, got {self.isolation!r}"
            )
        if self.idle_timeout < 0:
            raise ValidationError(f"idle_timeout: must be >= 0, got {self.idle_timeout}")
        if self.cache_hit_delay < 0:
            raise ValidationError(f"cache_hit_delay: must be >= 0, got {self.cache_hit_delay}")
        if self.max_batch_workers is not None and self.max_batch_workers < 1:
            raise ValidationError(
                f"max_batch_workers: must be >= 1, got {self.max_batch_workers}"
            )
