"""Clocks: an abstract microsecond source, a wall clock, a manual clock, and a stopwatch."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod


class BaseTimer(ABC):
    """A source of time in whole microseconds."""

    @abstractmethod
    def microseconds(self) -> int:
        """Current time in microseconds."""


class HardwareTimer(BaseTimer):
    """A monotonic clock counting microseconds since it was created."""

    def __init__(self) -> None:
        self._created_ns = time.monotonic_ns()

    def microseconds(self) -> int:
        return (time.monotonic_ns() - self._created_ns) // 1000


class ManualTimer(BaseTimer):
    """A clock that moves only when advanced, for simulation."""

    def __init__(self) -> None:
        self._current_us = 0

    def reset_microseconds(self, t_us: int) -> None:
        if t_us < 0:
            raise ValueError(f"time cannot be negative: {t_us}")
        self._current_us = int(t_us)

    def advance_microseconds(self, dt_us: int) -> None:
        if dt_us < 0:
            raise ValueError(f"cannot advance by a negative amount: {dt_us}")
        self._current_us += int(dt_us)

    def microseconds(self) -> int:
        return self._current_us

    def seconds(self) -> float:
        return self.microseconds() * 1e-6


class Timer:
    """A stopwatch that measures time elapsed on a shared master clock."""

    def __init__(self, master: BaseTimer) -> None:
        self._master = master
        self._last_reset_us = 0
        self.reset()

    @property
    def master(self) -> BaseTimer:
        return self._master

    def adjust_time_by_seconds(self, seconds: float) -> None:
        """Shift the elapsed time by the given (possibly negative) seconds."""
        if seconds > 0:
            self._last_reset_us -= int(seconds * 1e6)
        else:
            self._last_reset_us += int(seconds * -1e6)

    def seconds(self) -> float:
        return self.microseconds() * 1e-6

    def microseconds(self) -> int:
        return self._master.microseconds() - self._last_reset_us

    def reset(self) -> None:
        self._last_reset_us = self._master.microseconds()