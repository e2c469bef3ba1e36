"""
Random number generation utilities.

Layout code never draws from a global generator. Callers pass a
``numpy.random.Generator`` in explicitly, and ``make_rng`` builds one from
an integer or string seed so the same seed always reproduces the same
layout.
"""

import hashlib
from typing import Optional, Union

import numpy as np

Seed = Union[int, str]


def seed_to_int(seed: Seed) -> int:
    """
    Convert a seed to a non-negative integer accepted by NumPy.

    Strings (and negative integers) are hashed with SHA-256 rather than
    Python's ``hash`` so the mapping is stable across processes.

    Args:
        seed: Integer or string seed

    Returns:
        Non-negative integer seed
    """
    if isinstance(seed, (int, np.integer)) and not isinstance(seed, bool) and seed >= 0:
        return int(seed)
    digest = hashlib.sha256(str(seed).encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "little")


def make_rng(seed: Optional[Seed] = None) -> np.random.Generator:
    """
    Create a generator for a single layout request.

    Args:
        seed: Optional seed; None gives fresh OS entropy

    Returns:
        Independent NumPy generator
    """
    if seed is None:
        return np.random.default_rng()
    return np.random.default_rng(seed_to_int(seed))
