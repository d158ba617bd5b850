"""
Selection operators.

Selectors choose individuals from the current population, either as parents
for the alterers or as survivors carried into the next generation. They never
change the individuals they pick; the same individual may be picked more than
once.

Available selectors:
- RandomSelector: Uniform picks, no selection pressure
- TournamentSelector: Best of a few uniform picks
- RouletteWheelSelector: Probability proportional to (shifted) fitness

All comparisons go through the state's ranker, so every selector works for
both maximisation and minimisation.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import List, Sequence

from keen.config import TournamentSettings, validate_parameters
from keen.domain import domain
from keen.evolution.state import EvolutionState
from keen.exceptions import SelectionException, SelectorConfigException
from keen.genetic.individual import Individual
from keen.operators.operators import GeneticOperator
from keen.ranking import IndividualRanker
from keen.utils.logging import log_operator


class Selector(GeneticOperator):
    """
    Base class for every selector.

    ``__call__`` validates the request and delegates to ``select``, which
    returns exactly ``count`` individuals.
    """

    def __call__(self, state: EvolutionState, output_size: int) -> EvolutionState:
        if state.is_empty():
            raise SelectionException("The population must not be empty")
        if output_size < 0:
            raise SelectionException(
                f"The output size ({output_size}) must be non-negative"
            )
        selected = self.select(state.population, output_size, state.ranker)
        if len(selected) != output_size:
            raise SelectionException(
                f"Expected {output_size} individuals but {type(self).__name__} "
                f"selected {len(selected)}"
            )
        log_operator("selection", self, state.generation, selected=output_size)
        return state.with_population(selected)

    @abstractmethod
    def select(
        self,
        population: Sequence[Individual],
        count: int,
        ranker: IndividualRanker,
    ) -> List[Individual]:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class RandomSelector(Selector):
    """Uniform selection with replacement; ignores fitness entirely."""

    def select(
        self,
        population: Sequence[Individual],
        count: int,
        ranker: IndividualRanker,
    ) -> List[Individual]:
        rng = domain.random
        return [rng.choice(population) for _ in range(count)]


class TournamentSelector(Selector):
    """
    Tournament selection.

    Each pick runs a tournament of ``tournament_size`` contestants drawn
    uniformly with replacement; the winner is the best contestant according to
    the ranker, the first one drawn on ties. Larger tournaments increase
    selection pressure.
    """

    def __init__(self, tournament_size: int = 3):
        settings = validate_parameters(
            TournamentSettings, SelectorConfigException, tournament_size=tournament_size
        )
        self.tournament_size = settings.tournament_size

    def select(
        self,
        population: Sequence[Individual],
        count: int,
        ranker: IndividualRanker,
    ) -> List[Individual]:
        rng = domain.random
        selected = []
        for _ in range(count):
            contestants = [
                population[rng.randrange(len(population))]
                for _ in range(self.tournament_size)
            ]
            selected.append(ranker.max(contestants))
        return selected

    def __repr__(self) -> str:
        return f"TournamentSelector(tournament_size={self.tournament_size})"


class RouletteWheelSelector(Selector):
    """
    Roulette wheel selection.

    Selection probability proportional to fitness. Fitness values are first
    mapped by the ranker so that larger is better, then shifted to be positive.
    """

    def select(
        self,
        population: Sequence[Individual],
        count: int,
        ranker: IndividualRanker,
    ) -> List[Individual]:
        scores = ranker.fitness_transform([i.fitness for i in population])

        # Shift scores to be positive
        min_score = min(scores)
        weights = [s - min_score + 0.1 for s in scores]

        return domain.random.choices(population, weights=weights, k=count)


def get_selector(name: str, **kwargs) -> Selector:
    """Factory function to get a selector by name."""
    selectors = {
        "tournament": TournamentSelector,
        "random": RandomSelector,
        "roulette": RouletteWheelSelector,
    }

    if name not in selectors:
        raise ValueError(f"Unknown selection strategy: {name}")

    return selectors[name](**kwargs)


__all__ = [
    "Selector",
    "RandomSelector",
    "TournamentSelector",
    "RouletteWheelSelector",
    "get_selector",
]
