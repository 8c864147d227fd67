"""Small 3D vector helpers on top of NumPy arrays."""

from __future__ import annotations

import numpy as np

from servo.core.types import TermEvaluationError


def vec3(x: float = 0.0, y: float = 0.0, z: float = 0.0) -> np.ndarray:
    return np.array([x, y, z], dtype=np.float64)


def as_vec3(value) -> np.ndarray:
    """Coerce a length-3 sequence into a float64 array."""
    arr = np.asarray(value, dtype=np.float64)
    if arr.shape != (3,):
        raise ValueError(f"expected a 3-vector, got shape {arr.shape}")
    return arr


def length(v: np.ndarray) -> float:
    return float(np.linalg.norm(v))


def normalized(v: np.ndarray) -> np.ndarray:
    """Unit vector in the direction of v.

    Raises TermEvaluationError for a zero-length input.
    """
    n = np.linalg.norm(v)
    if n == 0.0:
        raise TermEvaluationError(f"cannot normalize zero-length vector {v!r}")
    return v / n


def safe_normalized(v: np.ndarray) -> np.ndarray:
    """Like normalized(), but a zero-length input yields the zero vector."""
    n = np.linalg.norm(v)
    if n == 0.0:
        return np.zeros(3)
    return v / n


def dot(a: np.ndarray, b: np.ndarray) -> float:
    return float(np.dot(a, b))
