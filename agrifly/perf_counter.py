"""Performance counters: event counts, elapsed times and event intervals.

A counter measures one of three things: how often an event occurs, how long
an operation takes, or the interval between successive events. Counters can
be created on their own or kept in a registry for reporting all at once.
"""

from __future__ import annotations

import functools
import math
import sys
import threading
import time
from enum import Enum
from typing import Callable, Iterator, TextIO

Clock = Callable[[], int]

_U64 = 1 << 64


def _default_clock() -> int:
    return time.perf_counter_ns() // 1000


def _rms(m2: float, count: int) -> float:
    # The divisor wraps like an unsigned 64-bit count when there are no events.
    denom = (count - 1) % _U64
    if denom == 0:
        if m2 == 0:
            return math.nan
        quotient = math.inf if m2 > 0 else -math.inf
    else:
        quotient = m2 / denom
    if quotient < 0:
        return math.nan
    return math.sqrt(quotient)


class CounterType(Enum):
    COUNT = "count"  # number of times an event occurs
    ELAPSED = "elapsed"  # time spent performing an event
    INTERVAL = "interval"  # time between instances of an event


class PerfCounter:
    """A single performance counter.

    The clock is a callable returning the current time in whole microseconds.
    """

    def __init__(
        self, kind: CounterType, name: str, clock: Clock | None = None
    ) -> None:
        self._kind = CounterType(kind)
        self._name = name
        self._clock = clock if clock is not None else _default_clock
        self._event_count = 0
        self._time_start: int | None = None
        self._time_first: int | None = None
        self._time_last: int | None = None
        self._time_total = 0
        self._time_least = 0
        self._time_most = 0
        self._mean = 0.0
        self._m2 = 0.0

    def __repr__(self) -> str:
        return f"PerfCounter({self._kind}, {self._name!r})"

    @property
    def kind(self) -> CounterType:
        return self._kind

    @property
    def name(self) -> str:
        return self._name

    @property
    def event_count(self) -> int:
        return self._event_count

    @property
    def time_total(self) -> int:
        """Total elapsed microseconds (elapsed counters)."""
        return self._time_total

    @property
    def time_least(self) -> int:
        return self._time_least

    @property
    def time_most(self) -> int:
        return self._time_most

    @property
    def mean(self) -> float:
        """Running mean of the measured times, in seconds."""
        return self._mean

    def count(self) -> None:
        """Record one event (count and interval counters)."""
        if self._kind is CounterType.COUNT:
            self._event_count += 1
        elif self._kind is CounterType.INTERVAL:
            now = self._clock()
            if self._event_count == 0:
                self._time_first = now
            elif self._event_count == 1:
                interval = now - self._time_last
                self._time_least = interval
                self._time_most = interval
                self._mean = interval / 1e6
                self._m2 = 0.0
            else:
                interval = now - self._time_last
                if interval < self._time_least:
                    self._time_least = interval
                if interval > self._time_most:
                    self._time_most = interval
                dt = interval / 1e6
                delta = dt - self._mean
                self._mean += delta / self._event_count
                self._m2 += delta * (dt - self._mean)
            self._time_last = now
            self._event_count += 1

    def begin(self) -> None:
        """Start timing an event (elapsed counters)."""
        if self._kind is CounterType.ELAPSED:
            self._time_start = self._clock()

    def end(self) -> None:
        """Finish timing an event; does nothing without a matching begin()."""
        if self._kind is CounterType.ELAPSED and self._time_start is not None:
            elapsed = self._clock() - self._time_start
            if elapsed >= 0:
                self._record_elapsed(elapsed)

    def set_elapsed(self, elapsed_us: int) -> None:
        """Record a measurement directly; negative values are ignored."""
        if self._kind is CounterType.ELAPSED and elapsed_us >= 0:
            self._record_elapsed(int(elapsed_us))

    def _record_elapsed(self, elapsed: int) -> None:
        self._event_count += 1
        self._time_total += elapsed
        if self._time_least > elapsed or self._time_least == 0:
            self._time_least = elapsed
        if self._time_most < elapsed:
            self._time_most = elapsed
        dt = elapsed / 1e6
        delta = dt - self._mean
        self._mean += delta / self._event_count
        self._m2 += delta * (dt - self._mean)
        self._time_start = None

    def set_count(self, count: int) -> None:
        """Set the number of events (count counters)."""
        if self._kind is CounterType.COUNT:
            self._event_count = int(count)

    def cancel(self) -> None:
        """Abandon an event started with begin()."""
        if self._kind is CounterType.ELAPSED:
            self._time_start = None

    def reset(self) -> None:
        """Return the counter to its initial counts and extremes."""
        self._event_count = 0
        if self._kind is CounterType.ELAPSED:
            self._time_start = None
            self._time_total = 0
            self._time_least = 0
            self._time_most = 0
        elif self._kind is CounterType.INTERVAL:
            self._time_first = None
            self._time_last = None
            self._time_least = 0
            self._time_most = 0

    def __enter__(self) -> PerfCounter:
        self.begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.end()

    def _average_interval(self) -> int:
        if self._event_count == 0:
            return 0
        return (self._time_last - self._time_first) // self._event_count

    def format(self) -> str:
        """A one-line summary of the counter."""
        if self._kind is CounterType.COUNT:
            return f"{self._name}: {self._event_count} events"
        rms = 1e6 * _rms(self._m2, self._event_count)
        if self._kind is CounterType.ELAPSED:
            avg = 0 if self._event_count == 0 else self._time_total // self._event_count
            return (
                f"{self._name}: {self._event_count} events, "
                f"{self._time_total}us elapsed, {avg}us avg, "
                f"min {self._time_least}us max {self._time_most}us "
                f"{rms:5.3f}us rms"
            )
        return (
            f"{self._name}: {self._event_count} events, "
            f"{self._average_interval()}us avg, "
            f"min {self._time_least}us max {self._time_most}us "
            f"{rms:5.3f}us rms"
        )

    def write(self, stream: TextIO | None = None) -> None:
        """Write the summary line to the stream (stdout by default)."""
        (stream if stream is not None else sys.stdout).write(self.format() + "\n")

    def _precedes(self, other: PerfCounter) -> bool:
        if self._kind is other._kind:
            if self._kind is CounterType.COUNT:
                return self._event_count > other._event_count
            if self._kind is CounterType.ELAPSED:
                return self._time_total > other._time_total
            if self._event_count == 0:
                return False
            if other._event_count == 0:
                return True
            return self._average_interval() > other._average_interval()
        return self._kind is CounterType.ELAPSED or other._kind is CounterType.COUNT


def _compare(a: PerfCounter, b: PerfCounter) -> int:
    if a._precedes(b):
        return -1
    if b._precedes(a):
        return 1
    return 0


class PerfRegistry:
    """A thread-safe collection of counters, newest first."""

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock
        self._counters: list[PerfCounter] = []
        self._lock = threading.Lock()

    def alloc(self, kind: CounterType, name: str) -> PerfCounter:
        """Create and register a new counter."""
        counter = PerfCounter(kind, name, self._clock)
        with self._lock:
            self._counters.insert(0, counter)
        return counter

    def alloc_once(self, kind: CounterType, name: str) -> PerfCounter:
        """Return the counter with this name, creating it if needed.

        Raises ValueError if a counter of that name exists with another type.
        """
        kind = CounterType(kind)
        with self._lock:
            for counter in self._counters:
                if counter.name == name:
                    if counter.kind is kind:
                        return counter
                    raise ValueError(
                        f"counter {name!r} already exists with type {counter.kind.value}"
                    )
        return self.alloc(kind, name)

    def free(self, counter: PerfCounter) -> None:
        """Remove a counter from the registry."""
        with self._lock:
            self._counters = [c for c in self._counters if c is not counter]

    def __iter__(self) -> Iterator[PerfCounter]:
        with self._lock:
            snapshot = list(self._counters)
        return iter(snapshot)

    def __len__(self) -> int:
        with self._lock:
            return len(self._counters)

    def reset_all(self) -> None:
        with self._lock:
            for counter in self._counters:
                counter.reset()

    def print_all(self, stream: TextIO | None = None) -> None:
        with self._lock:
            for counter in self._counters:
                counter.write(stream)

    def print_all_ordered(self, stream: TextIO | None = None) -> None:
        """Print all counters: elapsed by total time, then intervals, then counts."""
        with self._lock:
            self._counters.sort(key=functools.cmp_to_key(_compare))
            for counter in self._counters:
                counter.write(stream)