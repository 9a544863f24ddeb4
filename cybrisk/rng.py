#!/usr/bin/env python3
"""
CybRisk - Random Number Sources

Every sampler takes its random source as an explicit argument. A source is
any zero-argument callable returning a float in [0, 1); exact 0.0 is a legal
draw and callers must tolerate it.

Sources carry mutable state and are owned by exactly one running simulation
at a time. ``claim()`` enforces that: starting a second simulation on an RNG
that is still in use raises ``RngInUseError``.
"""

import random
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, Set

from .logger import get_logger

logger = get_logger('rng')

RNG = Callable[[], float]

_LCG_MULTIPLIER = 1664525
_LCG_INCREMENT = 1013904223
_LCG_MODULUS = 2 ** 32


class RngInUseError(RuntimeError):
    """Raised when one RNG instance is shared by concurrent simulations."""


class DefaultRng:
    """Platform PRNG (Mersenne Twister), one private generator per instance."""

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def __call__(self) -> float:
        return self._random.random()

    def __repr__(self) -> str:
        return 'DefaultRng()'


class LcgRng:
    """
    Linear congruential generator (Numerical Recipes constants).

    Fully deterministic for a given seed, which makes it the source of choice
    for tests and shareable scenario comparisons. The state is divided by
    2**32, so 1.0 is never returned.
    """

    def __init__(self, seed: int = 0):
        self.seed = int(seed)
        self._state = self.seed % _LCG_MODULUS

    def __call__(self) -> float:
        self._state = (self._state * _LCG_MULTIPLIER + _LCG_INCREMENT) % _LCG_MODULUS
        return self._state / _LCG_MODULUS

    def __repr__(self) -> str:
        return f'LcgRng(seed={self.seed})'


def default_rng() -> DefaultRng:
    """Create a fresh default source. Used when a caller supplies none."""
    return DefaultRng()


def make_rng(seed: Optional[int] = None) -> RNG:
    """Seeded LCG when a seed is given, otherwise the platform source."""
    if seed is None:
        return default_rng()
    return LcgRng(seed)


# ---------------------------------------------------------------------------
# Ownership guard
# ---------------------------------------------------------------------------

_claimed: Set[int] = set()
_claim_lock = threading.Lock()


@contextmanager
def claim(rng: RNG) -> Iterator[RNG]:
    """Hold exclusive use of ``rng`` for the duration of one simulation."""
    key = id(rng)
    with _claim_lock:
        if key in _claimed:
            logger.error(f"RNG {rng!r} is already driving another simulation")
            raise RngInUseError(
                f"RNG {rng!r} is already in use by a running simulation; "
                "give each concurrent simulation its own RNG instance"
            )
        _claimed.add(key)
    try:
        yield rng
    finally:
        with _claim_lock:
            _claimed.discard(key)
