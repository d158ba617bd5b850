"""
Shared random source.

Every stochastic decision in keen (gene draws, mutation boundaries, crossover
cut points, tournament picks) consumes numbers from one generator held by the
module-level ``domain`` object. Operators read ``domain.random`` once at the
start of an operation and make all of their draws from it in a fixed order, so
replacing the generator with an identically seeded one replays the operation
exactly.

Example:
    >>> import random
    >>> from keen.domain import domain
    >>> with domain.using(random.Random(42)):
    ...     result = mutator.mutate_chromosome(chromosome)
"""

from __future__ import annotations

import random
from contextlib import contextmanager
from typing import Iterator


class RandomSource:
    """Holder for the generator shared by all operators."""

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng if rng is not None else random.Random()

    @property
    def random(self) -> random.Random:
        """The current generator."""
        return self._rng

    @random.setter
    def random(self, rng: random.Random) -> None:
        self._rng = rng

    def seed(self, value: int | None) -> None:
        """Replace the current generator with a freshly seeded one."""
        self._rng = random.Random(value)

    @contextmanager
    def using(self, rng: random.Random) -> Iterator[random.Random]:
        """Temporarily replace the generator, restoring the previous one on exit."""
        previous = self._rng
        self._rng = rng
        try:
            yield rng
        finally:
            self._rng = previous


# Process-wide source
domain = RandomSource()


def get_random() -> random.Random:
    """Shortcut for ``domain.random``."""
    return domain.random


__all__ = ["RandomSource", "domain", "get_random"]
