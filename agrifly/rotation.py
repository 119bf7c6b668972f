"""Attitudes represented by Euler-Rodrigues symmetric parameters."""

from __future__ import annotations

import math

import numpy as np

from .vec3 import Vec3

_MIN_ANGLE = 4.84813681e-6  # under one arc second


def _asin(x: float) -> float:
    return math.asin(x) if -1.0 <= x <= 1.0 else math.nan


def _acos(x: float) -> float:
    return math.acos(x) if -1.0 <= x <= 1.0 else math.nan


class Rotation:
    """A rotation stored as a unit quaternion (a, b, c, d).

    The constructor assumes a unit quaternion; call normalise() otherwise.
    """

    __slots__ = ("_v",)

    def __init__(self, a: float, b: float, c: float, d: float) -> None:
        self._v = [float(a), float(b), float(c), float(d)]

    def __repr__(self) -> str:
        return "Rotation({}, {}, {}, {})".format(*self._v)

    @classmethod
    def identity(cls) -> Rotation:
        return cls(1.0, 0.0, 0.0, 0.0)

    def inverse(self) -> Rotation:
        a, b, c, d = self._v
        return Rotation(a, -b, -c, -d)

    def normalise(self) -> None:
        """Rescale to unit norm in place; a near-zero quaternion becomes identity."""
        n = math.sqrt(sum(c * c for c in self._v))
        if n < 1.0e-6:
            self._v = [1.0, 0.0, 0.0, 0.0]
        else:
            self._v = [c / n for c in self._v]

    @classmethod
    def from_rotation_vector(cls, rot_vec: Vec3) -> Rotation:
        theta = rot_vec.norm2()
        if theta < _MIN_ANGLE:
            return cls.identity()
        return cls.from_axis_angle(rot_vec / theta, theta)

    @classmethod
    def from_axis_angle(cls, unit_vector: Vec3, angle: float) -> Rotation:
        """Rotation by angle about a unit axis (not checked for unit length)."""
        s = math.sin(angle * 0.5)
        return cls(
            math.cos(angle * 0.5),
            s * unit_vector.x,
            s * unit_vector.y,
            s * unit_vector.z,
        )

    @classmethod
    def from_euler_ypr(cls, yaw: float, pitch: float, roll: float) -> Rotation:
        """Rotation from 3-2-1 yaw, pitch, roll angles."""
        cy, sy = math.cos(0.5 * yaw), math.sin(0.5 * yaw)
        cp, sp = math.cos(0.5 * pitch), math.sin(0.5 * pitch)
        cr, sr = math.cos(0.5 * roll), math.sin(0.5 * roll)
        return cls(
            cy * cp * cr + sy * sp * sr,
            cy * cp * sr - sy * sp * cr,
            cy * sp * cr + sy * cp * sr,
            sy * cp * cr - cy * sp * sr,
        )

    @classmethod
    def from_vector_part_of_quaternion(cls, vec: Vec3) -> Rotation:
        v = Vec3(vec.x, vec.y, vec.z)
        tmp = v.norm2_squared()
        if tmp > 1.0:
            v = v.unit_vector()
            tmp = 1.0
        return cls(math.sqrt(1.0 - tmp), v.x, v.y, v.z)

    def __mul__(self, other):
        """Compose (self * r1 is r1 followed by self) or rotate a vector."""
        if isinstance(other, Rotation):
            a0, a1, a2, a3 = self._v
            b0, b1, b2, b3 = other._v
            return Rotation(
                b0 * a0 - b1 * a1 - b2 * a2 - b3 * a3,
                b1 * a0 + b0 * a1 + b3 * a2 - b2 * a3,
                b2 * a0 - b3 * a1 + b0 * a2 + b1 * a3,
                b3 * a0 + b2 * a1 - b1 * a2 + b0 * a3,
            )
        if isinstance(other, Vec3):
            return self._rotate(other)
        return NotImplemented

    def __getitem__(self, index: int) -> float:
        if not 0 <= index < 4:
            raise IndexError(f"Rotation index out of range: {index}")
        return self._v[index]

    def angle(self) -> float:
        """Rotation angle in radians, in [0, pi]."""
        return _acos(abs(self._v[0])) * 2.0

    def to_rotation_vector(self) -> Vec3:
        n = self.to_vector_part_of_quaternion()
        norm = n.norm2()
        angle = _asin(norm) * 2.0
        if angle < _MIN_ANGLE:
            return Vec3(0.0, 0.0, 0.0)
        return n * (angle / norm)

    def to_vector_part_of_quaternion(self) -> Vec3:
        """Vector part, with the sign chosen so the scalar part is positive."""
        a, b, c, d = self._v
        if a > 0:
            return Vec3(b, c, d)
        return Vec3(-b, -c, -d)

    def to_euler_ypr(self) -> Vec3:
        """Return (yaw, pitch, roll) as a vector."""
        a, b, c, d = self._v
        yaw = math.atan2(2.0 * b * c + 2.0 * a * d, b * b + a * a - d * d - c * c)
        pitch = -_asin(2.0 * b * d - 2.0 * a * c)
        roll = math.atan2(2.0 * c * d + 2.0 * a * b, d * d - c * c - b * b + a * a)
        return Vec3(yaw, pitch, roll)

    def _matrix_entries(self) -> list[float]:
        a, b, c, d = self._v
        r0, r1, r2, r3 = a * a, b * b, c * c, d * d
        return [
            r0 + r1 - r2 - r3,
            2 * b * c - 2 * a * d,
            2 * b * d + 2 * a * c,
            2 * b * c + 2 * a * d,
            r0 - r1 + r2 - r3,
            2 * c * d - 2 * a * b,
            2 * b * d - 2 * a * c,
            2 * c * d + 2 * a * b,
            r0 - r1 - r2 + r3,
        ]

    def rotation_matrix(self) -> np.ndarray:
        """The 3x3 rotation matrix."""
        return np.array(self._matrix_entries()).reshape(3, 3)

    def format_rotation_matrix(self) -> str:
        """The rotation matrix as tab-separated rows, three decimals each."""
        rows = self.rotation_matrix()
        return "".join(
            "".join(f"{value:.3f}\t" for value in row) + "\n" for row in rows
        )

    def _rotate(self, vec: Vec3) -> Vec3:
        r = self._matrix_entries()
        return Vec3(
            r[0] * vec.x + r[1] * vec.y + r[2] * vec.z,
            r[3] * vec.x + r[4] * vec.y + r[5] * vec.z,
            r[6] * vec.x + r[7] * vec.y + r[8] * vec.z,
        )