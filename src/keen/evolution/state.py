"""Snapshot of an evolution run passed between operators."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Tuple

from keen.exceptions import CompositeException, EngineConfigException
from keen.genetic.individual import Individual
from keen.ranking import FitnessMaxRanker, IndividualRanker


@dataclass(frozen=True)
class EvolutionState:
    """
    Immutable state of an evolution: generation counter, ranker and population.

    Operators take a state and return a new one; the input is never modified.
    """

    generation: int = 0
    ranker: IndividualRanker = field(default_factory=FitnessMaxRanker)
    population: Tuple[Individual, ...] = ()

    def __post_init__(self):
        if self.generation < 0:
            raise CompositeException([
                EngineConfigException(
                    f"The generation ({self.generation}) must be non-negative"
                )
            ])
        if not isinstance(self.population, tuple):
            object.__setattr__(self, "population", tuple(self.population))

    @property
    def size(self) -> int:
        return len(self.population)

    def is_empty(self) -> bool:
        return not self.population

    def with_population(self, population: Iterable[Individual]) -> "EvolutionState":
        return replace(self, population=tuple(population))

    def next_generation(self) -> "EvolutionState":
        return replace(self, generation=self.generation + 1)

    def best(self) -> Individual:
        """Best individual according to the ranker."""
        return self.ranker.max(self.population)

    def __str__(self) -> str:
        return f"EvolutionState(generation={self.generation}, size={self.size})"


__all__ = ["EvolutionState"]
