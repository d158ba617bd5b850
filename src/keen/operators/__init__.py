"""Genetic operators: mutation, crossover and selection."""

from keen.operators.operators import GeneticOperator, Alterer, MutationResult
from keen.operators.mutation import (
    Mutator,
    GeneMutator,
    RandomMutator,
    BitFlipMutator,
    InversionMutator,
    DisplacementMutator,
    PartialShuffleMutator,
    SwapMutator,
    get_mutator,
)
from keen.operators.crossover import (
    Crossover,
    PermutationCrossover,
    OrderedCrossover,
    PartiallyMappedCrossover,
    PositionBasedCrossover,
    CombineCrossover,
    AverageCrossover,
    SinglePointCrossover,
    get_crossover,
)
from keen.operators.selection import (
    Selector,
    RandomSelector,
    TournamentSelector,
    RouletteWheelSelector,
    get_selector,
)

__all__ = [
    "GeneticOperator",
    "Alterer",
    "MutationResult",
    "Mutator",
    "GeneMutator",
    "RandomMutator",
    "BitFlipMutator",
    "InversionMutator",
    "DisplacementMutator",
    "PartialShuffleMutator",
    "SwapMutator",
    "get_mutator",
    "Crossover",
    "PermutationCrossover",
    "OrderedCrossover",
    "PartiallyMappedCrossover",
    "PositionBasedCrossover",
    "CombineCrossover",
    "AverageCrossover",
    "SinglePointCrossover",
    "get_crossover",
    "Selector",
    "RandomSelector",
    "TournamentSelector",
    "RouletteWheelSelector",
    "get_selector",
]
