"""Random tower heights for new skip-list elements.

Heights follow the classic geometric distribution with a 50 % branching
factor: P(level = L) = 0.5^L for L below the ceiling, with the remaining mass
on the ceiling itself. Every generator owns its own ``random.Random`` so two
containers never share hidden state and a seed makes a structure reproducible.
"""
from __future__ import annotations

import random
from typing import Optional

__all__ = ["LevelGenerator", "DEFAULT_MAX_LEVEL", "DEFAULT_P"]

DEFAULT_MAX_LEVEL = 16  # Supports > 65k elements on average.
DEFAULT_P = 0.5


class LevelGenerator:
    """Seedable per-instance source of tower heights in ``[1, max_level]``."""

    __slots__ = ("max_level", "p", "_rng")

    def __init__(self, max_level: int = DEFAULT_MAX_LEVEL, p: float = DEFAULT_P, seed: Optional[int] = None):
        if max_level < 1:
            raise ValueError(f"max_level must be >= 1, got {max_level}")
        if not 0 < p < 1:
            raise ValueError(f"p must be in (0, 1), got {p}")
        self.max_level = max_level
        self.p = p
        self._rng = random.Random(seed)

    def __call__(self) -> int:
        lvl = 1
        while self._rng.random() < self.p and lvl < self.max_level:
            lvl += 1
        return lvl

    def seed(self, seed: Optional[int]) -> None:
        self._rng.seed(seed)

    def copy(self) -> "LevelGenerator":
        """Independent generator that continues from the same RNG state."""
        clone = self.__class__(self.max_level, self.p)
        clone._rng.setstate(self._rng.getstate())
        return clone

    def __repr__(self) -> str:
        return f"LevelGenerator(max_level={self.max_level}, p={self.p})"
