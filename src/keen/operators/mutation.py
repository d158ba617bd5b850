"""
Mutation operators.

A mutator walks the population and, with configurable probabilities, hands
chromosomes to ``mutate_chromosome``. Mutation is the main source of
exploration: it introduces genetic material that no parent carried.

Available mutators:
- RandomMutator: Replaces genes with freshly drawn values
- BitFlipMutator: Negates boolean genes
- InversionMutator: Reverses a random segment of the chromosome
- DisplacementMutator: Rotates the whole chromosome by a fixed distance
- PartialShuffleMutator: Shuffles a random segment of the chromosome
- SwapMutator: Exchanges genes with random partners

Inversion, displacement, partial shuffle and swap only reorder genes, so they
preserve permutations and are safe for ordering problems (e.g. TSP).
"""

from __future__ import annotations

import math
import random
from abc import abstractmethod
from typing import List, Sequence, Tuple, Type, TypeVar

from pydantic import BaseModel

from keen.config import (
    DisplacementSettings,
    GeneMutatorSettings,
    InversionSettings,
    MutatorSettings,
    PartialShuffleSettings,
    SwapSettings,
    validate_parameters,
)
from keen.domain import domain
from keen.evolution.state import EvolutionState
from keen.exceptions import IndexConstraintError, MutatorConfigException, MutatorException
from keen.genetic.chromosomes import Chromosome
from keen.genetic.genes import Gene
from keen.genetic.genotype import Genotype
from keen.genetic.individual import Individual
from keen.operators.operators import Alterer, MutationResult
from keen.utils.collections import rotate, swap
from keen.utils.logging import log_operator
from keen.utils.randoms import indices

G = TypeVar("G")


class Mutator(Alterer):
    """
    Base class for every mutator.

    Each individual is selected for mutation with probability
    ``individual_rate``; within a selected individual each chromosome is
    mutated with probability ``chromosome_rate``. Subclasses only implement
    ``mutate_chromosome``.

    Mutators preserve the population size: ``output_size`` must equal the
    size of the incoming population.
    """

    settings_cls: Type[BaseModel] = MutatorSettings

    def __init__(self, individual_rate: float = 0.5, chromosome_rate: float = 0.5):
        self._configure(individual_rate=individual_rate, chromosome_rate=chromosome_rate)

    def _configure(self, **values) -> None:
        settings = validate_parameters(self.settings_cls, MutatorConfigException, **values)
        for name, value in settings.model_dump().items():
            setattr(self, name, value)

    def __call__(self, state: EvolutionState, output_size: int) -> EvolutionState:
        if output_size != state.size:
            raise MutatorException(
                f"The output size ({output_size}) must be equal to the population "
                f"size ({state.size})"
            )
        if self.individual_rate == 0:
            return state

        rng = domain.random
        population = []
        total = 0
        for individual in state.population:
            if rng.random() > self.individual_rate:
                population.append(individual)
                continue
            result = self.mutate_individual(individual, rng)
            population.append(result.mutated)
            total += result.mutations

        log_operator("mutation", self, state.generation, mutations=total)
        return state.with_population(population)

    def mutate_individual(
        self, individual: Individual, rng: random.Random | None = None
    ) -> MutationResult[Individual]:
        """Mutate the chromosomes of one individual; the result is unevaluated."""
        rng = rng or domain.random
        chromosomes = []
        total = 0
        for chromosome in individual.genotype:
            if rng.random() > self.chromosome_rate:
                chromosomes.append(chromosome)
                continue
            mutated, count = self.mutate_chromosome(chromosome)
            chromosomes.append(mutated)
            total += count
        return MutationResult(Individual(Genotype(chromosomes), math.nan), total)

    @abstractmethod
    def mutate_chromosome(self, chromosome: Chromosome) -> MutationResult[Chromosome]:
        """Return a mutated copy of ``chromosome`` and the number of mutations."""

    def __repr__(self) -> str:
        params = ", ".join(
            f"{name}={getattr(self, name)}" for name in self.settings_cls.model_fields
        )
        return f"{type(self).__name__}({params})"


class GeneMutator(Mutator):
    """
    Mutator that decides gene by gene.

    Each gene of a selected chromosome is passed to ``mutate_gene`` with
    probability ``gene_rate``.
    """

    settings_cls = GeneMutatorSettings

    def __init__(
        self,
        individual_rate: float = 0.5,
        chromosome_rate: float = 0.5,
        gene_rate: float = 0.5,
    ):
        self._configure(
            individual_rate=individual_rate,
            chromosome_rate=chromosome_rate,
            gene_rate=gene_rate,
        )

    def mutate_chromosome(self, chromosome: Chromosome) -> MutationResult[Chromosome]:
        rng = domain.random
        genes = []
        mutations = 0
        for gene in chromosome:
            if rng.random() < self.gene_rate:
                genes.append(self.mutate_gene(gene))
                mutations += 1
            else:
                genes.append(gene)
        return MutationResult(chromosome.duplicate_with_genes(genes), mutations)

    @abstractmethod
    def mutate_gene(self, gene: Gene) -> Gene:
        pass


class RandomMutator(GeneMutator):
    """Replaces selected genes with a freshly drawn value."""

    def mutate_gene(self, gene: Gene) -> Gene:
        return gene.mutate()


class BitFlipMutator(GeneMutator):
    """Negates selected boolean genes; a selected gene always changes."""

    def mutate_gene(self, gene: Gene) -> Gene:
        return gene.flip()


def find_boundaries(
    size: int, probability: float, rng: random.Random
) -> Tuple[int, int]:
    """
    Pick a segment ``[start, end]`` by scanning the chromosome twice.

    The first scan draws once per index from 0 and stops at the first draw below
    ``probability`` (start defaults to 0). The second scan draws once per index
    from ``start`` and stops at the first draw above ``probability`` (end
    defaults to ``size - 1``).
    """
    start = 0
    for i in range(size):
        if rng.random() < probability:
            start = i
            break
    end = size - 1
    for i in range(start, size):
        if rng.random() > probability:
            end = i
            break
    return start, end


def invert(genes: Sequence[G], start: int, end: int) -> List[G]:
    """
    Reverse ``genes[start..end]`` (both inclusive) and return a new list.

    Raises:
        IndexConstraintError: If the bounds are outside the list or reversed.
    """
    if not 0 <= start <= end < len(genes):
        raise IndexConstraintError(
            f"The inversion bounds ({start}, {end}) must satisfy "
            f"0 <= start <= end < {len(genes)}"
        )
    genes = list(genes)
    genes[start:end + 1] = genes[start:end + 1][::-1]
    return genes


class InversionMutator(Mutator):
    """
    Reverses a random segment of the chromosome.

    The segment bounds come from two scans driven by
    ``inversion_boundary_probability`` (see ``find_boundaries``).
    """

    settings_cls = InversionSettings

    def __init__(
        self,
        individual_rate: float = 0.5,
        chromosome_rate: float = 0.5,
        inversion_boundary_probability: float = 0.5,
    ):
        self._configure(
            individual_rate=individual_rate,
            chromosome_rate=chromosome_rate,
            inversion_boundary_probability=inversion_boundary_probability,
        )

    def mutate_chromosome(self, chromosome: Chromosome) -> MutationResult[Chromosome]:
        if chromosome.is_empty():
            return MutationResult(chromosome, 0)
        start, end = find_boundaries(
            chromosome.size, self.inversion_boundary_probability, domain.random
        )
        genes = invert(chromosome.genes, start, end)
        return MutationResult(
            chromosome.duplicate_with_genes(genes), 1 if end > start else 0
        )


class DisplacementMutator(Mutator):
    """
    Rotates every gene of the chromosome by ``displacement`` positions.

    One draw picks the direction: below 0.5 rotates right, otherwise left.
    """

    settings_cls = DisplacementSettings

    def __init__(
        self,
        individual_rate: float = 0.5,
        chromosome_rate: float = 0.5,
        displacement: int = 1,
    ):
        self._configure(
            individual_rate=individual_rate,
            chromosome_rate=chromosome_rate,
            displacement=displacement,
        )

    def mutate_chromosome(self, chromosome: Chromosome) -> MutationResult[Chromosome]:
        size = chromosome.size
        if size == 0 or self.displacement % size == 0:
            return MutationResult(chromosome, 0)
        right = domain.random.random() < 0.5
        genes = rotate(chromosome.genes, self.displacement, right=right)
        return MutationResult(chromosome.duplicate_with_genes(genes), 1)


class PartialShuffleMutator(Mutator):
    """
    Shuffles a random segment of the chromosome.

    Boundaries are chosen like InversionMutator's; the segment is then
    shuffled with the shared random source.
    """

    settings_cls = PartialShuffleSettings

    def __init__(
        self,
        individual_rate: float = 1.0,
        chromosome_rate: float = 1.0,
        shuffle_boundary_probability: float = 0.5,
    ):
        self._configure(
            individual_rate=individual_rate,
            chromosome_rate=chromosome_rate,
            shuffle_boundary_probability=shuffle_boundary_probability,
        )

    def mutate_chromosome(self, chromosome: Chromosome) -> MutationResult[Chromosome]:
        if self.shuffle_boundary_probability == 0 or chromosome.is_empty():
            return MutationResult(chromosome, 0)
        rng = domain.random
        start, end = find_boundaries(
            chromosome.size, self.shuffle_boundary_probability, rng
        )
        genes = list(chromosome.genes)
        segment = genes[start:end + 1]
        rng.shuffle(segment)
        genes[start:end + 1] = segment
        return MutationResult(
            chromosome.duplicate_with_genes(genes), 1 if len(segment) > 1 else 0
        )


class SwapMutator(Mutator):
    """
    Swaps genes with random partners.

    Each position is picked with probability ``swap_rate``; every picked
    position draws a partner uniformly from the whole chromosome.
    """

    settings_cls = SwapSettings

    def __init__(
        self,
        individual_rate: float = 0.5,
        chromosome_rate: float = 0.5,
        swap_rate: float = 0.5,
    ):
        self._configure(
            individual_rate=individual_rate,
            chromosome_rate=chromosome_rate,
            swap_rate=swap_rate,
        )

    def mutate_chromosome(self, chromosome: Chromosome) -> MutationResult[Chromosome]:
        if chromosome.is_empty():
            return MutationResult(chromosome, 0)
        rng = domain.random
        genes = list(chromosome.genes)
        mutations = 0
        for i in indices(self.swap_rate, len(genes), rng=rng):
            swap(genes, i, rng.randrange(len(genes)))
            mutations += 1
        return MutationResult(chromosome.duplicate_with_genes(genes), mutations)


def get_mutator(name: str, **kwargs) -> Mutator:
    """Factory function to get a mutator by name."""
    mutators = {
        "random": RandomMutator,
        "bit_flip": BitFlipMutator,
        "inversion": InversionMutator,
        "displacement": DisplacementMutator,
        "partial_shuffle": PartialShuffleMutator,
        "swap": SwapMutator,
    }

    if name not in mutators:
        raise ValueError(f"Unknown mutation strategy: {name}")

    return mutators[name](**kwargs)


__all__ = [
    "Mutator",
    "GeneMutator",
    "RandomMutator",
    "BitFlipMutator",
    "InversionMutator",
    "DisplacementMutator",
    "PartialShuffleMutator",
    "SwapMutator",
    "find_boundaries",
    "invert",
    "get_mutator",
]
