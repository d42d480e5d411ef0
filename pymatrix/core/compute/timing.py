"""
Wall-clock phase timing for solver backends.

A backend wraps its whole run in start()/stop() and each algorithmic
phase (row reduction, reconstruction, decomposition) in section(). The
resulting dict is stored on the Result envelope.
"""

import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """
    Total run time plus accumulated per-phase durations.

    Example:
        timer = Timer()
        timer.start()
        with timer.section('reduction'):
            reduction = reduce_rows(a, negligible)
        with timer.section('reconstruction'):
            pinv = rebuild_pseudo_inverse(a, reduction)
        timer.stop()
        timer.result()   # {'total_seconds': ..., 'reduction': ..., 'reconstruction': ...}

    A phase entered more than once accumulates. Phases are not required
    to partition the total.
    """

    def __init__(self):
        self._phases: dict[str, float] = {}
        self._began: float | None = None
        self._elapsed: float | None = None

    def start(self) -> None:
        self._began = time.perf_counter()
        self._elapsed = None

    def stop(self) -> None:
        """
        Freeze the total.

        Raises:
            RuntimeError: If start() was never called
        """
        if self._began is None:
            raise RuntimeError("Timer.stop() called before start()")
        self._elapsed = time.perf_counter() - self._began

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Add the duration of the with-block to phase `name`."""
        began = time.perf_counter()
        try:
            yield
        finally:
            spent = time.perf_counter() - began
            self._phases[name] = self._phases.get(name, 0.0) + spent

    @property
    def phases(self) -> tuple[str, ...]:
        """Phase names in the order they were first entered."""
        return tuple(self._phases)

    def result(self) -> dict[str, float]:
        """
        'total_seconds' followed by one entry per phase, in seconds.

        Raises:
            RuntimeError: If stop() has not been called
        """
        if self._elapsed is None:
            raise RuntimeError("Timer.result() called before stop()")
        return {'total_seconds': self._elapsed, **self._phases}


@contextmanager
def timed() -> Iterator[Timer]:
    """Yield a started Timer and stop it when the block exits."""
    timer = Timer()
    timer.start()
    try:
        yield timer
    finally:
        timer.stop()
