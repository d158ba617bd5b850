"""Main evolution loop."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, List, Sequence

from keen.config import AltererConfig, EvolutionConfig, LimitsConfig, SelectionConfig
from keen.evolution.limits import Limit, MaxGenerations, SteadyGenerations, TargetFitness
from keen.evolution.state import EvolutionState
from keen.exceptions import CompositeException, EngineConfigException
from keen.genetic.genotype import Genotype
from keen.genetic.individual import Individual
from keen.operators.crossover import get_crossover
from keen.operators.mutation import get_mutator
from keen.operators.operators import Alterer, GeneticOperator
from keen.operators.selection import get_selector
from keen.ranking import IndividualRanker, get_ranker
from keen.utils.logging import LogLevel, log_event, log_generation, log_stop


@dataclass
class EvolutionResult:
    """Result of the evolution process."""

    best: Individual
    state: EvolutionState
    generations: int
    history: List[dict] = field(default_factory=list)
    stop_reason: str = ""


class EvolutionLoop:
    """
    Generational genetic algorithm.

    Each generation:
    1. **Initialization**: Build ``population_size`` random individuals when
       the population is empty
    2. **Evaluation**: Score every unevaluated individual
    3. **Parent selection**: Pick ``floor((1 - survival_rate) * N)`` parents
    4. **Survivor selection**: Pick the remaining individuals as survivors
    5. **Alteration**: Pass the parents through every alterer, in order
    6. **Replacement**: Survivors plus offspring form the next population,
       which is evaluated
    7. **Repeat**: Until any limit fires

    Example:
        >>> from keen.config import EvolutionConfig
        >>> loop = EvolutionLoop(fitness, genotype_factory, EvolutionConfig())
        >>> result = loop.run()
        >>> print(f"Best fitness: {result.best.fitness:.3f}")
        >>> print(f"Generations: {result.generations}")
    """

    def __init__(
        self,
        fitness_function: Callable[[Genotype], float],
        genotype_factory: Genotype.Factory,
        config: EvolutionConfig | None = None,
        parent_selector: GeneticOperator | None = None,
        survivor_selector: GeneticOperator | None = None,
        alterers: Sequence[Alterer] | None = None,
        ranker: IndividualRanker | None = None,
        limits: Sequence[Limit] | None = None,
    ):
        """
        Initialize the evolution loop.

        Args:
            fitness_function: Maps a genotype to its fitness.
            genotype_factory: Builds the random genotypes of the first
                generation.
            config: Evolution configuration. Any operator that is not passed
                explicitly is built from it.
            parent_selector: Chooses the individuals handed to the alterers.
            survivor_selector: Chooses the individuals kept unchanged.
            alterers: Mutators and crossovers applied to the parents in order.
            ranker: Decides which fitness is better. Defaults to
                ``config.ranker``.
            limits: Stopping criteria. Defaults to the ones described by
                ``LimitsConfig()``.

        Raises:
            CompositeException: If no limit is given.
        """
        self.fitness_function = fitness_function
        self.genotype_factory = genotype_factory
        self.config = config or EvolutionConfig()

        self.ranker = ranker or get_ranker(self.config.ranker)
        self.parent_selector = parent_selector or self._build_selector(
            self.config.parent_selection
        )
        self.survivor_selector = survivor_selector or self._build_selector(
            self.config.survivor_selection
        )
        if alterers is not None:
            self.alterers = list(alterers)
        else:
            self.alterers = [self._build_alterer(a) for a in self.config.alterers]
        self.limits = list(limits) if limits is not None else limits_from_config(LimitsConfig())
        if not self.limits:
            raise CompositeException([
                EngineConfigException("At least one limit is required to stop the evolution")
            ])

    def run(self, state: EvolutionState | None = None) -> EvolutionResult:
        """
        Evolve until any limit fires.

        Args:
            state: Optional starting state. An empty population is initialized
                from the genotype factory.

        Returns:
            EvolutionResult with the best individual ever seen, the final
            state, and per-generation statistics.
        """
        state = state or EvolutionState(0, self.ranker)
        for limit in self.limits:
            limit.reset()

        history = []
        best: Individual | None = None
        log_event(
            "START",
            level=LogLevel.VERBOSE,
            population=self.config.population_size,
            alterers=", ".join(repr(a) for a in self.alterers),
        )

        while True:
            state = self.iterate_generation(state)

            gen_best = state.best()
            gen_mean = sum(i.fitness for i in state.population) / state.size
            if best is None or state.ranker(gen_best, best) > 0:
                best = gen_best

            log_generation(
                gen=state.generation,
                size=state.size,
                best_fitness=gen_best.fitness,
                mean_fitness=gen_mean,
            )
            history.append({
                "generation": state.generation,
                "best_fitness": gen_best.fitness,
                "mean_fitness": gen_mean,
                "size": state.size,
            })

            # every limit sees every generation
            fired = [limit for limit in self.limits if limit(state)]
            if fired:
                reason = fired[0].reason
                log_stop(reason, state.generation)
                return EvolutionResult(
                    best=best,
                    state=state,
                    generations=state.generation,
                    history=history,
                    stop_reason=reason,
                )

    def iterate_generation(self, state: EvolutionState) -> EvolutionState:
        """Run one generation and return the evaluated next state."""
        if state.is_empty():
            state = state.with_population(
                Individual(self.genotype_factory.make())
                for _ in range(self.config.population_size)
            )
        state = self.evaluate(state)

        size = state.size
        # round() absorbs float noise such as (1 - 0.9) * 10 == 0.9999999999999998
        n_offspring = math.floor(round((1 - self.config.survival_rate) * size, 9))
        n_survivors = size - n_offspring

        offspring = self.parent_selector(state, n_offspring)
        survivors = self.survivor_selector(state, n_survivors)
        for alterer in self.alterers:
            offspring = alterer(offspring, n_offspring)

        merged = state.with_population(survivors.population + offspring.population)
        return self.evaluate(merged).next_generation()

    def evaluate(self, state: EvolutionState) -> EvolutionState:
        """Assign a fitness to every individual that does not have one yet."""
        return state.with_population(
            individual if individual.is_evaluated()
            else individual.with_fitness(self.fitness_function(individual.genotype))
            for individual in state.population
        )

    @staticmethod
    def _build_selector(config: SelectionConfig) -> GeneticOperator:
        return get_selector(config.strategy, **config.options)

    @staticmethod
    def _build_alterer(config: AltererConfig) -> Alterer:
        if config.kind == "mutation":
            return get_mutator(config.strategy, **config.options)
        return get_crossover(config.strategy, **config.options)


def limits_from_config(config: LimitsConfig) -> List[Limit]:
    """Build the limits described by a LimitsConfig."""
    limits: List[Limit] = []
    if config.max_generations is not None:
        limits.append(MaxGenerations(config.max_generations))
    if config.target_fitness is not None:
        limits.append(TargetFitness(config.target_fitness))
    if config.steady_generations is not None:
        limits.append(SteadyGenerations(config.steady_generations))
    return limits


__all__ = ["EvolutionLoop", "EvolutionResult", "limits_from_config"]
