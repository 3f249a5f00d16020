"""
Section timing for backend solves.
"""

import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """
    Wall-clock timer for one solve, split into named sections.

        timer = Timer()
        timer.start()
        with timer.section('rank'):
            summary = rank_groups(samples)
        timer.stop()
        timer.result()   # {'total_seconds': ..., 'rank': ...}

    A section entered more than once accumulates.
    """

    def __init__(self):
        self._sections: dict[str, float] = {}
        self._started: float | None = None
        self._total: float | None = None

    def start(self) -> None:
        self._started = time.perf_counter()

    def stop(self) -> None:
        if self._started is None:
            raise RuntimeError("Timer.stop() called before start()")
        self._total = time.perf_counter() - self._started

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        began = time.perf_counter()
        try:
            yield
        finally:
            self._sections[name] = self._sections.get(name, 0.0) + time.perf_counter() - began

    def result(self) -> dict[str, float]:
        """'total_seconds' plus one entry per section; only valid after stop()."""
        if self._total is None:
            raise RuntimeError("Timer.result() called before stop()")
        return {'total_seconds': self._total, **self._sections}
