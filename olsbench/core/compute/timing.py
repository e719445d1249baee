"""
Clocks and section timing.

Two different jobs live here. Timer breaks a single fit into named
steps (decomposition, solve, residuals) and produces the dict stored
on Result.timing. clock_ns and clock_resolution_ns are the raw clock
that olsbench.benchmark reads around every evaluation.
"""

import time
from contextlib import contextmanager
from typing import Iterator


# bound directly so a measurement does not pay for a wrapper call
clock_ns = time.perf_counter_ns


def clock_resolution_ns() -> float:
    """Smallest tick of clock_ns(), in nanoseconds, as the OS reports it."""
    return time.get_clock_info('perf_counter').resolution * 1e9


class Timer:
    """
    Wall time of a computation and of its named steps, in seconds.

        timer = Timer()
        timer.start()
        with timer.section('qr_decomposition'):
            qr = qr_cpu(X)
        with timer.section('solve'):
            beta = qr_solve_cpu(X, y, qr)
        timer.stop()
        timer.result()   # {'total_seconds': ..., 'qr_decomposition': ..., 'solve': ...}

    A section name used twice adds up.
    """

    def __init__(self):
        self._sections: dict[str, float] = {}
        self._start_ns: int | None = None
        self._total: float | None = None

    def start(self) -> None:
        self._start_ns = clock_ns()

    def stop(self) -> None:
        if self._start_ns is None:
            raise RuntimeError("Timer.stop() called before start()")
        self._total = (clock_ns() - self._start_ns) / 1e9

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Add the time spent in the block to section `name`, even if it raises."""
        t0 = clock_ns()
        try:
            yield
        finally:
            self._sections[name] = self._sections.get(name, 0.0) + (clock_ns() - t0) / 1e9

    def result(self) -> dict[str, float]:
        """'total_seconds' followed by every section; only valid after stop()."""
        if self._total is None:
            raise RuntimeError("Timer.result() called before stop()")
        return {'total_seconds': self._total, **self._sections}


@contextmanager
def timed() -> Iterator[Timer]:
    """
    A Timer started on entry and stopped on exit.

        with timed() as timer:
            beta = crossprod_solve(X, y)
        timer.result()['total_seconds']
    """
    timer = Timer()
    timer.start()
    try:
        yield timer
    finally:
        timer.stop()
