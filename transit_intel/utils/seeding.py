"""
Deterministic seeding helpers

Python's hash() is salted per process, so string keys are hashed with
CRC32 to get seeds that are stable across runs.
"""

import zlib

import numpy as np


def stable_seed(*parts) -> int:
    """Stable 32-bit seed from arbitrary key parts"""
    key = ":".join(str(p) for p in parts)
    return zlib.crc32(key.encode("utf-8"))


def seeded_rng(*parts) -> np.random.Generator:
    """Generator seeded from key parts (same parts -> same stream)"""
    return np.random.default_rng(stable_seed(*parts))
