"""
Rankers: how individuals are compared.

A ranker decides which of two individuals is better. Operators never compare
fitness values directly; they go through the ranker so the same selector works
for maximisation and minimisation problems.

Available rankers:
- FitnessMaxRanker: higher fitness is better
- FitnessMinRanker: lower fitness is better
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from functools import cmp_to_key
from typing import Any, Callable, Iterable, List, Sequence

from keen.exceptions import PreconditionError
from keen.genetic.individual import Individual


class IndividualRanker(ABC):
    """
    Three-way comparison between individuals.

    ``ranker(a, b)`` is negative when ``a`` is worse than ``b``, zero when they
    are equivalent and positive when ``a`` is better.
    """

    @abstractmethod
    def __call__(self, a: Individual, b: Individual) -> int:
        pass

    @property
    def comparator(self) -> Callable[[Individual], Any]:
        """Sort key ordering individuals from worst to best."""
        return cmp_to_key(self)

    def max(self, individuals: Iterable[Individual]) -> Individual:
        """Return the best individual, keeping the first one on ties."""
        best = None
        for individual in individuals:
            if best is None or self(individual, best) > 0:
                best = individual
        if best is None:
            raise PreconditionError("Cannot find the best of an empty population")
        return best

    def sort(self, population: Iterable[Individual]) -> List[Individual]:
        """Return the population ordered from best to worst."""
        return sorted(population, key=self.comparator, reverse=True)

    def fitness_transform(self, fitness: Sequence[float]) -> List[float]:
        """Map fitness values so that larger always means better."""
        return list(fitness)

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self).__name__)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class FitnessMaxRanker(IndividualRanker):
    """Higher fitness wins."""

    def __call__(self, a: Individual, b: Individual) -> int:
        return (a.fitness > b.fitness) - (a.fitness < b.fitness)


class FitnessMinRanker(IndividualRanker):
    """Lower fitness wins."""

    def __call__(self, a: Individual, b: Individual) -> int:
        return (b.fitness > a.fitness) - (b.fitness < a.fitness)

    def fitness_transform(self, fitness: Sequence[float]) -> List[float]:
        return [-f for f in fitness]


def get_ranker(name: str) -> IndividualRanker:
    """Factory function to create a ranker by name ("max" or "min")."""
    if name == "max":
        return FitnessMaxRanker()
    elif name == "min":
        return FitnessMinRanker()
    else:
        raise ValueError(f"Unknown ranker: {name}")


__all__ = [
    "IndividualRanker",
    "FitnessMaxRanker",
    "FitnessMinRanker",
    "get_ranker",
]
