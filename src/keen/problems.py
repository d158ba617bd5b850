"""
Ready-made problems for the CLI and for smoke-testing operator combinations.

Each problem bundles a genotype factory, a fitness function, a way to render a
genotype for humans and a preset configuration that is known to converge.

Available problems:
- one-max: Maximise the number of true bits
- word: Guess a target word character by character
- tsp: Shortest closed tour through a fixed set of cities
- sphere: Minimise the sum of squares of a real vector
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence, Tuple

from keen.config import (
    AltererConfig,
    Config,
    EvolutionConfig,
    LimitsConfig,
    SelectionConfig,
)
from keen.domain import domain
from keen.genetic.chromosomes import (
    BooleanChromosome,
    CharChromosome,
    DoubleChromosome,
    IntChromosome,
)
from keen.genetic.genes import IntGene
from keen.genetic.genotype import Genotype


@dataclass
class Problem:
    """A fitness function together with everything needed to evolve it."""

    name: str
    description: str
    genotype_factory: Genotype.Factory
    fitness: Callable[[Genotype], float]
    render: Callable[[Genotype], str]
    config: Config


# --------------------------------------------------------------------------- #
# One-max
# --------------------------------------------------------------------------- #

ONE_MAX_SIZE = 50


def count_ones(genotype: Genotype) -> float:
    return float(sum(1 for value in genotype.flatten() if value))


def one_max(size: int = ONE_MAX_SIZE) -> Problem:
    return Problem(
        name="one-max",
        description=f"Maximise the number of true genes in a {size}-bit chromosome",
        genotype_factory=Genotype.Factory([BooleanChromosome.Factory(size, true_rate=0.15)]),
        fitness=count_ones,
        render=lambda g: g.to_simple_string(),
        config=Config(
            evolution=EvolutionConfig(
                population_size=100,
                parent_selection=SelectionConfig(strategy="roulette"),
                survivor_selection=SelectionConfig(strategy="tournament"),
                alterers=[
                    AltererConfig(kind="mutation", strategy="bit_flip", options={"individual_rate": 0.5}),
                    AltererConfig(kind="crossover", strategy="single_point", options={"chromosome_rate": 0.6}),
                ],
            ),
            limits=LimitsConfig(max_generations=500, target_fitness=float(size)),
        ),
    )


# --------------------------------------------------------------------------- #
# Word guessing
# --------------------------------------------------------------------------- #

TARGET_WORD = "Sopaipilla"


def word_matcher(target: str) -> Callable[[Genotype], float]:
    def matches(genotype: Genotype) -> float:
        return float(sum(1 for c, t in zip(genotype.flatten(), target) if c == t))
    return matches


def word(target: str = TARGET_WORD) -> Problem:
    return Problem(
        name="word",
        description=f"Guess the word {target!r}",
        genotype_factory=Genotype.Factory([CharChromosome.Factory(len(target), ranges=[(" ", "z")])]),
        fitness=word_matcher(target),
        render=lambda g: "".join(g.flatten()),
        config=Config(
            evolution=EvolutionConfig(
                population_size=500,
                alterers=[
                    AltererConfig(kind="mutation", strategy="random", options={"individual_rate": 0.1}),
                    AltererConfig(kind="crossover", strategy="single_point", options={"chromosome_rate": 0.2}),
                ],
            ),
            limits=LimitsConfig(max_generations=1000, target_fitness=float(len(target))),
        ),
    )


# --------------------------------------------------------------------------- #
# Travelling salesman
# --------------------------------------------------------------------------- #

CITIES: List[Tuple[int, int]] = [
    (60, 200), (180, 200), (80, 180), (140, 180), (20, 160),
    (100, 160), (200, 160), (140, 140), (40, 120), (100, 120),
    (180, 100), (60, 80), (120, 80), (180, 60), (20, 40),
    (100, 40), (200, 40), (20, 20), (60, 20), (160, 20),
]


class RouteFactory:
    """Builds IntChromosomes holding a random permutation of ``range(size)``."""

    def __init__(self, size: int):
        self.size = size

    def make(self) -> IntChromosome:
        order = list(range(self.size))
        domain.random.shuffle(order)
        return IntChromosome(IntGene(i, (0, self.size - 1)) for i in order)


def tour_length(cities: Sequence[Tuple[float, float]]) -> Callable[[Genotype], float]:
    def length(genotype: Genotype) -> float:
        route = genotype.flatten()
        return sum(
            math.dist(cities[a], cities[b])
            for a, b in zip(route, route[1:] + route[:1])
        )
    return length


def tsp(cities: Sequence[Tuple[float, float]] = CITIES) -> Problem:
    return Problem(
        name="tsp",
        description=f"Shortest closed tour through {len(cities)} cities",
        genotype_factory=Genotype.Factory([RouteFactory(len(cities))]),
        fitness=tour_length(cities),
        render=lambda g: " -> ".join(str(i) for i in g.flatten()),
        config=Config(
            evolution=EvolutionConfig(
                population_size=200,
                ranker="min",
                alterers=[
                    AltererConfig(kind="mutation", strategy="inversion", options={"individual_rate": 0.3}),
                    AltererConfig(kind="crossover", strategy="ordered", options={"chromosome_rate": 0.3}),
                ],
            ),
            limits=LimitsConfig(max_generations=1000, steady_generations=100),
        ),
    )


# --------------------------------------------------------------------------- #
# Sphere
# --------------------------------------------------------------------------- #


def sum_of_squares(genotype: Genotype) -> float:
    return sum(x * x for x in genotype.flatten())


def sphere(dimensions: int = 5, bound: float = 5.12) -> Problem:
    return Problem(
        name="sphere",
        description=f"Minimise the sum of squares of {dimensions} reals in [-{bound}, {bound}]",
        genotype_factory=Genotype.Factory([
            DoubleChromosome.Factory(dimensions, ranges=[(-bound, bound)])
        ]),
        fitness=sum_of_squares,
        render=lambda g: ", ".join(f"{x:.4f}" for x in g.flatten()),
        config=Config(
            evolution=EvolutionConfig(
                population_size=100,
                ranker="min",
                alterers=[
                    AltererConfig(kind="crossover", strategy="average", options={"gene_rate": 0.5}),
                    AltererConfig(
                        kind="mutation",
                        strategy="random",
                        options={"individual_rate": 0.2, "gene_rate": 0.2},
                    ),
                ],
            ),
            limits=LimitsConfig(max_generations=300, steady_generations=50),
        ),
    )


PROBLEMS: Dict[str, Callable[[], Problem]] = {
    "one-max": one_max,
    "word": word,
    "tsp": tsp,
    "sphere": sphere,
}


def get_problem(name: str) -> Problem:
    """Factory function to get a bundled problem by name."""
    if name not in PROBLEMS:
        raise ValueError(f"Unknown problem: {name}")
    return PROBLEMS[name]()


__all__ = [
    "Problem",
    "PROBLEMS",
    "get_problem",
    "one_max",
    "word",
    "tsp",
    "sphere",
    "count_ones",
    "tour_length",
    "sum_of_squares",
    "RouteFactory",
]
