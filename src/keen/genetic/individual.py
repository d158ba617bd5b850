"""Individual: a genotype paired with its fitness."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, List

from keen.genetic.genotype import Genotype


@dataclass(frozen=True, eq=False)
class Individual:
    """
    A candidate solution.

    Fitness is NaN until the individual is evaluated. Individuals are never
    updated in place: evaluation and alteration create new instances. Equality
    and hashing only consider the genotype, so two evaluations of the same
    genetic material are the same individual.

    Ordering between individuals is not defined here; use an
    ``IndividualRanker`` so that maximisation and minimisation are handled the
    same way.
    """

    genotype: Genotype
    fitness: float = math.nan

    @property
    def size(self) -> int:
        return len(self.genotype)

    def is_evaluated(self) -> bool:
        return not math.isnan(self.fitness)

    def verify(self) -> bool:
        return self.genotype.verify() and self.is_evaluated()

    def with_fitness(self, fitness: float) -> "Individual":
        return replace(self, fitness=float(fitness))

    def flatten(self) -> List[Any]:
        return self.genotype.flatten()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Individual):
            return NotImplemented
        return self.genotype == other.genotype

    def __hash__(self) -> int:
        return hash(("Individual", self.genotype))

    def __str__(self) -> str:
        return f"{self.genotype.to_simple_string()} -> {self.fitness}"


__all__ = ["Individual"]
