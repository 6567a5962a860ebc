"""
Entropy Source for the CXNN Instruction
=======================================

Produces uniformly distributed bytes. The generator is injectable so
tests can pin the seed or supply their own source; no particular
sequence is guaranteed across runs.
"""

import random
from typing import Optional, Protocol


class RandomProtocol(Protocol):
    """Minimal interface needed from a random generator."""

    def randint(self, a: int, b: int) -> int:
        """Return a random integer N such that a <= N <= b."""
        ...

    def seed(self, a=None) -> None:
        """Reseed the generator."""
        ...


class EntropySource:
    """
    Uniform byte generator.

    Seeded once at construction. Pass seed for reproducible runs or
    rng to substitute a different generator entirely.

    Example:
        >>> src = EntropySource(seed=1)
        >>> 0 <= src.next_byte() <= 255
        True
    """

    def __init__(self, seed: Optional[int] = None, rng: Optional[RandomProtocol] = None):
        self._rng = rng if rng is not None else random.Random(seed)

    def next_byte(self) -> int:
        """Return a uniformly distributed value in 0-255."""
        return self._rng.randint(0, 255) & 0xFF

    def reseed(self, seed: Optional[int] = None) -> None:
        """Reseed the underlying generator."""
        self._rng.seed(seed)
