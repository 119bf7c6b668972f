"""Small dense-matrix helpers built on numpy."""

from __future__ import annotations

import numpy as np

from .vec3 import Vec3


def zero_matrix(rows: int, cols: int) -> np.ndarray:
    """A rows x cols matrix of zeros."""
    return np.zeros((rows, cols))


def identity_matrix(size: int) -> np.ndarray:
    """A size x size identity matrix."""
    return np.eye(size)


def _square(matrix) -> np.ndarray:
    arr = np.asarray(matrix, dtype=float)
    if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
        raise ValueError(f"expected a square matrix, got shape {arr.shape}")
    return arr


def matrix_inverse(matrix) -> np.ndarray:
    """Inverse of a square matrix; raises numpy.linalg.LinAlgError if singular."""
    return np.linalg.inv(_square(matrix))


def matrix_all_finite(matrix) -> bool:
    """True when every entry is finite."""
    return bool(np.all(np.isfinite(_square(matrix))))


def matrix_determinant(matrix) -> float:
    """Determinant of a square matrix."""
    return float(np.linalg.det(_square(matrix)))


def matrix_times_vec(matrix, vector: Vec3) -> Vec3:
    """Multiply a 3x3 matrix by a vector."""
    arr = np.asarray(matrix, dtype=float)
    if arr.shape != (3, 3):
        raise ValueError(f"expected a 3x3 matrix, got shape {arr.shape}")
    result = arr @ np.array(list(vector), dtype=float)
    return Vec3(*(float(c) for c in result))