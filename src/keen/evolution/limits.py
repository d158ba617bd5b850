"""
Stopping criteria for the evolution loop.

A limit is checked once per generation, after the population has been
evaluated, and returns True when the evolution should stop. Limits that track
progress across generations (SteadyGenerations) are reset at the start of
every run.

Available limits:
- MaxGenerations: Stop after a fixed number of generations
- TargetFitness: Stop when an individual reaches a fitness
- SteadyGenerations: Stop when the best fitness stops improving
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from numbers import Real
from typing import Callable, Union

from keen.evolution.state import EvolutionState
from keen.exceptions import CompositeException, EngineConfigException
from keen.genetic.individual import Individual


def _require_positive(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise CompositeException([
            EngineConfigException(f"The {name} ({value}) must be a positive integer")
        ])


class Limit(ABC):
    """Abstract stopping criterion."""

    #: Short identifier reported as the stop reason.
    reason: str = "limit"

    @abstractmethod
    def __call__(self, state: EvolutionState) -> bool:
        pass

    def reset(self) -> None:
        """Forget any progress tracked during a previous run."""


class MaxGenerations(Limit):
    """Stops once ``state.generation`` reaches ``generations``."""

    reason = "max_generations"

    def __init__(self, generations: int):
        _require_positive("number of generations", generations)
        self.generations = generations

    def __call__(self, state: EvolutionState) -> bool:
        return state.generation >= self.generations

    def __repr__(self) -> str:
        return f"MaxGenerations({self.generations})"


class TargetFitness(Limit):
    """
    Stops when any individual's fitness satisfies a predicate.

    Passing a number is shorthand for "fitness equals this number".
    """

    reason = "target_fitness"

    def __init__(self, target: Union[float, Callable[[float], bool]]):
        if callable(target):
            self.predicate = target
        elif isinstance(target, Real) and not isinstance(target, bool) and not math.isnan(target):
            value = float(target)
            self.predicate = lambda fitness: fitness == value
        else:
            raise CompositeException([
                EngineConfigException(
                    f"The target fitness ({target}) must be a number or a predicate"
                )
            ])
        self.target = target

    def __call__(self, state: EvolutionState) -> bool:
        return any(
            individual.is_evaluated() and self.predicate(individual.fitness)
            for individual in state.population
        )

    def __repr__(self) -> str:
        return f"TargetFitness({self.target!r})"


class SteadyGenerations(Limit):
    """
    Stops after more than ``generations`` consecutive generations in which the
    best fitness did not improve according to the state's ranker.
    """

    reason = "steady_generations"

    def __init__(self, generations: int):
        _require_positive("number of steady generations", generations)
        self.generations = generations
        self.steady = 0
        self._best: Individual | None = None

    def reset(self) -> None:
        self.steady = 0
        self._best = None

    def __call__(self, state: EvolutionState) -> bool:
        if state.is_empty():
            return False
        best = state.best()
        if self._best is None or state.ranker(best, self._best) > 0:
            self._best = best
            self.steady = 0
        else:
            self.steady += 1
        return self.steady > self.generations

    def __repr__(self) -> str:
        return f"SteadyGenerations({self.generations})"


__all__ = ["Limit", "MaxGenerations", "TargetFitness", "SteadyGenerations"]
