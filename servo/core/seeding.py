"""Seeding utilities.

Randomness flows through explicit NumPy Generators.  Nothing in servo
draws from a process-wide global RNG, so reporters on different worker
threads never race on shared generator state.
"""

from __future__ import annotations

import threading

import numpy as np

_local = threading.local()


def make_rng(seed: int | None = None) -> np.random.Generator:
    """Create a NumPy Generator from an explicit seed.

    If seed is None a fresh (non-reproducible) generator is returned.
    """
    return np.random.default_rng(seed)


def thread_rng() -> np.random.Generator:
    """Return the calling thread's own Generator, creating it on first use."""
    rng = getattr(_local, "rng", None)
    if rng is None:
        rng = make_rng()
        _local.rng = rng
    return rng
