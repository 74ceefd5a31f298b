"""Accumulating wall-clock timer."""

from __future__ import annotations

import time as _time


class TimerError(RuntimeError):
    """Raised when a timer is started twice or stopped while idle."""


class Timer:
    """Accumulates elapsed time over repeated start/stop intervals."""

    def __init__(self) -> None:
        self._time = 0.0
        self._start_time = 0.0
        self._last_time = 0.0
        self._max_time = 0.0
        self._min_time = 0.0
        self._num_calls = 0
        self._running = False

    def start(self) -> None:
        if self._running:
            raise TimerError("Timer already running")
        self._start_time = _time.perf_counter()
        self._running = True

    def stop(self) -> None:
        if not self._running:
            raise TimerError("Timer not running.")
        self._last_time = _time.perf_counter() - self._start_time
        self._time += self._last_time
        self._num_calls += 1
        self._running = False

    def reset(self) -> None:
        """Clear the accumulated time."""
        self._time = 0.0

    def running(self) -> bool:
        return self._running

    def time(self) -> float:
        return self._time

    def min_time(self) -> float:
        return self._min_time

    def max_time(self) -> float:
        return self._max_time

    def num_calls(self) -> int:
        return self._num_calls

    def last_time(self) -> float:
        return self._last_time

    def reduce(self) -> None:
        """Set the minimum and maximum over all processes; one process here."""
        self._max_time = self._time
        self._min_time = self._time

    def __enter__(self) -> "Timer":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()