"""Quintic polynomial trajectories in three dimensions."""

from __future__ import annotations

from typing import Iterable, Sequence

from .vec3 import Vec3

_NUM_COEFFS = 6


class Trajectory:
    """A 3D quintic polynomial in time, defined between a start and end time.

    The polynomial is c[0]*t^5 + c[1]*t^4 + c[2]*t^3 + c[3]*t^2 + c[4]*t + c[5],
    where each coefficient is a Vec3.
    """

    __slots__ = ("_coeffs", "_start_time", "_end_time")

    def __init__(
        self, coeffs: Iterable[Vec3], start_time: float, end_time: float
    ) -> None:
        coeff_list = [Vec3(c.x, c.y, c.z) for c in coeffs]
        if len(coeff_list) != _NUM_COEFFS:
            raise ValueError(
                f"a trajectory needs {_NUM_COEFFS} coefficients, got {len(coeff_list)}"
            )
        if start_time > end_time:
            raise ValueError(
                f"start time {start_time} is after end time {end_time}"
            )
        self._coeffs: tuple[Vec3, ...] = tuple(coeff_list)
        self._start_time = float(start_time)
        self._end_time = float(end_time)

    def __repr__(self) -> str:
        return (
            f"Trajectory({list(self._coeffs)!r}, "
            f"{self._start_time!r}, {self._end_time!r})"
        )

    @property
    def coeffs(self) -> list[Vec3]:
        """Copies of the six coefficients, highest power first."""
        return [Vec3(c.x, c.y, c.z) for c in self._coeffs]

    @property
    def start_time(self) -> float:
        return self._start_time

    @property
    def end_time(self) -> float:
        return self._end_time

    def _check_time(self, t: float) -> None:
        if not self._start_time <= t <= self._end_time:
            raise ValueError(
                f"time {t} outside trajectory interval "
                f"[{self._start_time}, {self._end_time}]"
            )

    def value(self, t: float) -> Vec3:
        """Position of the trajectory at time t."""
        self._check_time(t)
        c = self._coeffs
        return (
            c[0] * (t * t * t * t * t)
            + c[1] * (t * t * t * t)
            + c[2] * (t * t * t)
            + c[3] * (t * t)
            + c[4] * t
            + c[5]
        )

    def axis_value(self, axis: int, t: float) -> float:
        """Position along one axis (0, 1 or 2) at time t."""
        self._check_time(t)
        c = [coeff[axis] for coeff in self._coeffs]
        return (
            c[0] * t * t * t * t * t
            + c[1] * t * t * t * t
            + c[2] * t * t * t
            + c[3] * t * t
            + c[4] * t
            + c[5]
        )

    def derivative_coeffs(self) -> list[Vec3]:
        """The five coefficients of the time derivative, highest power first."""
        return [(5 - i) * coeff for i, coeff in enumerate(self._coeffs[:5])]

    def __sub__(self, other: Trajectory) -> Trajectory:
        """Relative trajectory, defined where both trajectories overlap in time."""
        if not isinstance(other, Trajectory):
            return NotImplemented
        start = max(self._start_time, other.start_time)
        end = min(self._end_time, other.end_time)
        return Trajectory(
            (mine - theirs for mine, theirs in zip(self._coeffs, other._coeffs)),
            start,
            end,
        )

    def __getitem__(self, index: int) -> Vec3:
        if not 0 <= index < _NUM_COEFFS:
            raise IndexError(f"Trajectory coefficient index out of range: {index}")
        c = self._coeffs[index]
        return Vec3(c.x, c.y, c.z)

    def __len__(self) -> int:
        return _NUM_COEFFS


def _as_sequence(coeffs: Sequence[Vec3]) -> list[Vec3]:
    return list(coeffs)