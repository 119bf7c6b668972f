"""First- and second-order discrete low-pass filters."""

from __future__ import annotations

import math
from typing import Any


class LowPassFilterFirstOrder:
    """A first-order low-pass filter.

    Samples may be floats or anything supporting scalar multiplication and
    addition (for example Vec3 or numpy arrays). Until initialised, the filter
    passes its input straight through.
    """

    def __init__(self) -> None:
        self._coefficient = 0.0
        self._previous: Any = 0.0

    def initialise(
        self, sampling_period: float, cutoff_frequency: float, init_value: Any
    ) -> None:
        """Set the sampling period [s], cut-off frequency [rad/s] and initial value."""
        self._previous = init_value
        self._coefficient = math.exp(-sampling_period * cutoff_frequency)

    def apply(self, value: Any) -> Any:
        """Filter one sample and return the new output."""
        if self._coefficient <= 0.0:
            self._previous = value
            return value
        output = self._coefficient * self._previous + (1 - self._coefficient) * value
        self._previous = output
        return output

    @property
    def value(self) -> Any:
        """The most recent output."""
        return self._previous


class LowPassFilterSecondOrder:
    """A second-order (Butterworth-style) low-pass filter.

    Until initialised, the filter passes its input through unchanged.
    """

    def __init__(self) -> None:
        self._a1 = 0.0
        self._a2 = 0.0
        self._b0 = 1.0
        self._b1 = 0.0
        self._b2 = 0.0
        self._xm0: Any = 0.0
        self._xm1: Any = 0.0
        self._ym0: Any = 0.0
        self._ym1: Any = 0.0

    def initialise(
        self, sampling_period: float, cutoff_frequency: float, init_value: Any
    ) -> None:
        """Set the sampling period [s], cut-off frequency [rad/s] and initial value."""
        dt = sampling_period
        wc = cutoff_frequency
        sqrt2 = math.sqrt(2.0)
        dtwc2 = dt * dt * wc * wc
        den = dtwc2 + 2 * sqrt2 * dt * wc + 4
        self._a1 = (dtwc2 - 2 * sqrt2 * dt * wc + 4) / den
        self._a2 = 2 * (dtwc2 - 4) / den
        self._b0 = dtwc2 / den
        self._b1 = dtwc2 / den
        self._b2 = 2 * dtwc2 / den
        self._xm0 = self._xm1 = self._ym0 = self._ym1 = init_value

    def apply(self, value: Any) -> Any:
        """Filter one sample and return the new output."""
        output = (
            self._b2 * value
            + self._b0 * self._xm0
            + self._b1 * self._xm1
            - self._a1 * self._ym0
            - self._a2 * self._ym1
        )
        self._xm0, self._xm1 = self._xm1, value
        self._ym0, self._ym1 = self._ym1, output
        return output

    @property
    def value(self) -> Any:
        """The most recent output."""
        return self._ym1