"""
Crossover operators.

Crossover combines the genetic material of several parents into offspring that
may inherit useful traits from each of them. It works chromosome by chromosome:
for each parent group, a subset of chromosome positions is picked with
``chromosome_rate`` and the chromosomes at those positions are recombined by
``crossover_chromosomes``; the remaining positions are inherited from the first
parent.

Available crossovers:
- OrderedCrossover: Permutation-preserving (OX1), two parents, two offspring
- PartiallyMappedCrossover: Permutation-preserving (PMX), repairs clashes by mapping
- PositionBasedCrossover: Permutation-preserving (PBX), keeps random positions
- AverageCrossover: Gene-wise mean of numeric genes, one offspring
- SinglePointCrossover: Exchanges tails after a random cut point

Characteristics:
- **Permutation crossovers** never duplicate or drop a gene, so they are safe
  for ordering problems
- **Combine crossovers** apply a function across the parents' genes at each
  position
"""

from __future__ import annotations

import itertools
from abc import abstractmethod
from typing import Callable, List, Sequence, Tuple, Type, TypeVar

from pydantic import BaseModel

from keen.config import CombineCrossoverSettings, CrossoverSettings, validate_parameters
from keen.domain import domain
from keen.evolution.state import EvolutionState
from keen.exceptions import CrossoverConfigException, CrossoverException, IndexConstraintError
from keen.genetic.chromosomes import Chromosome
from keen.genetic.genes import Gene
from keen.genetic.genotype import Genotype
from keen.genetic.individual import Individual
from keen.operators.operators import Alterer
from keen.utils.collections import transpose
from keen.utils.logging import log_operator
from keen.utils.randoms import indices, sample_indices, subsets

G = TypeVar("G")


class Crossover(Alterer):
    """
    Base class for every crossover.

    Subclasses declare ``num_parents`` and ``num_offspring`` and implement
    ``crossover_chromosomes``, which receives one chromosome per parent and
    returns one chromosome per offspring.
    """

    num_parents: int = 2
    num_offspring: int = 2
    settings_cls: Type[BaseModel] = CrossoverSettings

    def __init__(self, chromosome_rate: float = 1.0, exclusivity: bool = False):
        self._configure(chromosome_rate=chromosome_rate, exclusivity=exclusivity)

    def _configure(self, **values) -> None:
        settings = validate_parameters(self.settings_cls, CrossoverConfigException, **values)
        for name, value in settings.model_dump().items():
            setattr(self, name, value)

    def __call__(self, state: EvolutionState, output_size: int) -> EvolutionState:
        if output_size < 0:
            raise CrossoverException(
                f"The output size ({output_size}) must be non-negative"
            )
        if output_size == 0:
            return state.with_population([])
        if state.is_empty():
            raise CrossoverException(
                f"Cannot produce {output_size} offspring from an empty population"
            )

        rng = domain.random
        groups = subsets(list(state.population), self.num_parents, self.exclusivity, rng=rng)
        offspring: List[Individual] = []
        while len(offspring) < output_size:
            parents = rng.choice(groups)
            for genotype in self.crossover([p.genotype for p in parents]):
                offspring.append(Individual(genotype))

        log_operator("crossover", self, state.generation, offspring=output_size)
        return state.with_population(offspring[:output_size])

    def crossover(self, parent_genotypes: Sequence[Genotype]) -> List[Genotype]:
        """
        Recombine one group of parent genotypes.

        Args:
            parent_genotypes: Exactly ``num_parents`` genotypes with the same,
                non-zero number of chromosomes.

        Returns:
            ``num_offspring`` genotypes. When no chromosome position is picked,
            the parents' genotypes are returned as the offspring.

        Raises:
            CrossoverException: If the parents violate the constraints above.
        """
        if len(parent_genotypes) != self.num_parents:
            raise CrossoverException(
                f"The number of inputs ({len(parent_genotypes)}) must be equal to "
                f"the number of parents ({self.num_parents})"
            )
        if len({g.size for g in parent_genotypes}) != 1:
            raise CrossoverException("Genotypes must have the same number of chromosomes")
        for index, genotype in enumerate(parent_genotypes):
            if genotype.is_empty():
                raise CrossoverException(
                    f"The number of chromosomes in parent {index} must be greater than 0"
                )

        base = parent_genotypes[0]
        picked = indices(self.chromosome_rate, base.size)
        if not picked:
            return list(itertools.islice(itertools.cycle(parent_genotypes), self.num_offspring))

        # offspring x picked position
        crossed = transpose([
            self.crossover_chromosomes([g[i] for g in parent_genotypes])
            for i in picked
        ])
        offspring = []
        for chromosomes in crossed:
            replacements = dict(zip(picked, chromosomes))
            offspring.append(Genotype(
                replacements.get(i, chromosome) for i, chromosome in enumerate(base)
            ))
        return offspring

    @abstractmethod
    def crossover_chromosomes(self, chromosomes: Sequence[Chromosome]) -> List[Chromosome]:
        """Recombine one chromosome per parent into one chromosome per offspring."""

    def __repr__(self) -> str:
        params = ", ".join(
            f"{name}={getattr(self, name)}" for name in self.settings_cls.model_fields
        )
        return f"{type(self).__name__}({params})"


class PermutationCrossover(Crossover):
    """
    Crossover for chromosomes whose genes form a permutation.

    Every parent chromosome must hold distinct genes. One draw decides whether
    the group is recombined at all: above ``chromosome_rate`` the parents are
    passed through unchanged.
    """

    def crossover_chromosomes(self, chromosomes: Sequence[Chromosome]) -> List[Chromosome]:
        for chromosome in chromosomes:
            if len(set(chromosome.genes)) != chromosome.size:
                raise CrossoverException(
                    "A permutation crossover can only be applied to permutation chromosomes"
                )
        if domain.random.random() > self.chromosome_rate:
            return list(chromosomes)
        base = chromosomes[0]
        return [base.duplicate_with_genes(genes) for genes in self.permute_chromosomes(chromosomes)]

    @abstractmethod
    def permute_chromosomes(self, chromosomes: Sequence[Chromosome]) -> List[List[Gene]]:
        pass


class OrderedCrossover(PermutationCrossover):
    """
    Ordered crossover (OX1).

    A region ``[start, end]`` is cut from one parent and inserted at the same
    position into the other parent's remaining genes, which keep their
    relative order. Each parent donates the region once, giving two offspring.

    Example:
        >>> p1 = [1, 2, 3, 4, 5, 6]
        >>> p2 = [6, 5, 4, 3, 2, 1]
        >>> crossover.exchange_crossing_regions((p1, p2), 1, 3)
        [6, 2, 3, 4, 5, 1]
    """

    num_parents = 2
    num_offspring = 2

    def permute_chromosomes(self, chromosomes: Sequence[Chromosome]) -> List[List[Gene]]:
        genes1, genes2 = (list(c.genes) for c in chromosomes)
        if len(genes1) < 2:
            return [genes1, genes2]
        start, end = sample_indices(2, len(genes1))
        return [
            self.exchange_crossing_regions((genes1, genes2), start, end),
            self.exchange_crossing_regions((genes2, genes1), start, end),
        ]

    def exchange_crossing_regions(
        self,
        parents: Tuple[Sequence[G], Sequence[G]],
        start: int,
        end: int,
    ) -> List[G]:
        """
        Insert ``parents[0][start..end]`` into ``parents[1]`` at ``start``.

        Genes of the second parent that appear in the region are dropped so
        the result is still a permutation.

        Raises:
            IndexConstraintError: If the region lies outside the parents.
        """
        donor, receiver = parents
        if start < 0:
            raise IndexConstraintError(
                f"The start of the crossover region ({start}) must be non-negative"
            )
        if end > len(donor) - 1:
            raise IndexConstraintError(
                f"The end of the crossover region ({end}) must be less than the size "
                f"of the parents ({len(donor)})"
            )
        if start > end:
            raise IndexConstraintError(
                f"The start of the crossover region ({start}) must not be greater "
                f"than its end ({end})"
            )
        if start == end:
            return list(receiver)
        segment = list(donor[start:end + 1])
        unique = [gene for gene in receiver if gene not in segment]
        return unique[:start] + segment + unique[start:]


class PartiallyMappedCrossover(PermutationCrossover):
    """
    Partially mapped crossover (PMX).

    Two cut points ``lo < hi`` delimit the crossing region ``[lo, hi)``. Each
    offspring takes the other parent's region and keeps its own genes outside
    it; an outside gene that clashes with the incoming region is replaced by
    following the region's mapping until it no longer clashes.

    Example:
        >>> p1 = [0, 1, 2, 3, 4, 5, 6, 7, 8, 9]
        >>> p2 = [9, 8, 7, 6, 5, 4, 3, 2, 1, 0]
        >>> crossover.map_crossing_regions((p1, p2), 3, 6)
        [0, 1, 2, 6, 5, 4, 3, 7, 8, 9]
    """

    num_parents = 2
    num_offspring = 2

    def permute_chromosomes(self, chromosomes: Sequence[Chromosome]) -> List[List[Gene]]:
        genes1, genes2 = (list(c.genes) for c in chromosomes)
        if len(genes1) < 2:
            return [genes1, genes2]
        lo, hi = sample_indices(2, len(genes1))
        return [
            self.map_crossing_regions((genes1, genes2), lo, hi),
            self.map_crossing_regions((genes2, genes1), lo, hi),
        ]

    def map_crossing_regions(
        self,
        parents: Tuple[Sequence[G], Sequence[G]],
        lo: int,
        hi: int,
    ) -> List[G]:
        """
        Build the offspring of ``parents[0]`` that receives ``parents[1][lo:hi]``.

        Raises:
            IndexConstraintError: If ``[lo, hi)`` is not a region of the parents.
        """
        own, other = parents
        if not 0 <= lo <= hi <= len(own):
            raise IndexConstraintError(
                f"The crossing region [{lo}, {hi}) must lie within [0, {len(own)}]"
            )
        own_region = list(own[lo:hi])
        incoming = list(other[lo:hi])
        offspring = list(own)
        offspring[lo:hi] = incoming
        for i in itertools.chain(range(lo), range(hi, len(own))):
            gene = own[i]
            while gene in incoming:
                gene = own_region[incoming.index(gene)]
            offspring[i] = gene
        return offspring


class PositionBasedCrossover(PermutationCrossover):
    """
    Position-based crossover (PBX).

    Each offspring keeps a few randomly chosen genes of one parent in place and
    fills the other positions with the remaining genes in the order they appear
    in the other parent.

    For each offspring, one ``randrange(size)`` draw bounds the candidate
    positions and each candidate below that bound is kept with probability
    ``1 / size``. The first offspring draws before the second.
    """

    num_parents = 2
    num_offspring = 2

    def permute_chromosomes(self, chromosomes: Sequence[Chromosome]) -> List[List[Gene]]:
        genes1, genes2 = (list(c.genes) for c in chromosomes)
        if len(genes1) < 2:
            return [genes1, genes2]
        return [
            self.keep_positions((genes1, genes2), self._draw_positions(len(genes1))),
            self.keep_positions((genes2, genes1), self._draw_positions(len(genes1))),
        ]

    @staticmethod
    def _draw_positions(size: int) -> List[int]:
        rng = domain.random
        return indices(1 / size, rng.randrange(size), rng=rng)

    def keep_positions(
        self,
        parents: Tuple[Sequence[G], Sequence[G]],
        positions: Sequence[int],
    ) -> List[G]:
        """Keep ``parents[0]`` at ``positions`` and fill the rest from ``parents[1]``."""
        donor, filler = parents
        kept = {i: donor[i] for i in positions}
        remaining = iter([gene for gene in filler if gene not in kept.values()])
        return [kept[i] if i in kept else next(remaining) for i in range(len(donor))]


class CombineCrossover(Crossover):
    """
    Combines the parents' genes position by position.

    At each position one draw decides the gene of the single offspring: below
    ``gene_rate`` it is ``combiner([parent1[i], parent2[i], ...])``, otherwise
    the first parent's gene is inherited. Parents are expected to have the
    same length.
    """

    num_offspring = 1
    settings_cls = CombineCrossoverSettings

    def __init__(
        self,
        combiner: Callable[[List[Gene]], Gene],
        chromosome_rate: float = 1.0,
        gene_rate: float = 1.0,
        num_parents: int = 2,
        exclusivity: bool = False,
    ):
        self.combiner = combiner
        self._configure(
            chromosome_rate=chromosome_rate,
            gene_rate=gene_rate,
            num_parents=num_parents,
            exclusivity=exclusivity,
        )

    def crossover_chromosomes(self, chromosomes: Sequence[Chromosome]) -> List[Chromosome]:
        return [chromosomes[0].duplicate_with_genes(self.combine(chromosomes))]

    def combine(self, chromosomes: Sequence[Chromosome]) -> List[Gene]:
        if len(chromosomes) != self.num_parents:
            raise CrossoverException(
                f"Number of inputs ({len(chromosomes)}) must equal the number of "
                f"parents ({self.num_parents})"
            )
        rng = domain.random
        genes = []
        for i in range(chromosomes[0].size):
            if rng.random() < self.gene_rate:
                genes.append(self.combiner([c[i] for c in chromosomes]))
            else:
                genes.append(chromosomes[0][i])
        return genes


def average_genes(genes: List[Gene]) -> Gene:
    return genes[0].average(genes[1:])


class AverageCrossover(CombineCrossover):
    """CombineCrossover whose offspring genes are the mean of the parents' genes."""

    def __init__(
        self,
        chromosome_rate: float = 1.0,
        gene_rate: float = 1.0,
        num_parents: int = 2,
        exclusivity: bool = False,
    ):
        super().__init__(
            average_genes,
            chromosome_rate=chromosome_rate,
            gene_rate=gene_rate,
            num_parents=num_parents,
            exclusivity=exclusivity,
        )


class SinglePointCrossover(Crossover):
    """
    Classic one-point crossover.

    One draw decides whether the pair is recombined (above ``chromosome_rate``
    the parents pass through), then a cut point is drawn in ``[0, size)`` and
    the tails after it are exchanged.
    """

    num_parents = 2
    num_offspring = 2

    def crossover_chromosomes(self, chromosomes: Sequence[Chromosome]) -> List[Chromosome]:
        if len(chromosomes) != 2:
            raise CrossoverException("The number of parent chromosomes must be 2")
        first, second = chromosomes
        if first.size != second.size:
            raise CrossoverException("Both parents must have the same size")
        rng = domain.random
        if rng.random() > self.chromosome_rate or first.is_empty():
            return list(chromosomes)
        point = rng.randrange(first.size)
        new_first, new_second = self.crossover_at(point, (first.genes, second.genes))
        return [first.duplicate_with_genes(new_first), first.duplicate_with_genes(new_second)]

    def crossover_at(
        self, point: int, parents: Tuple[Sequence[G], Sequence[G]]
    ) -> Tuple[List[G], List[G]]:
        """Exchange everything from ``point`` onwards between the two parents."""
        first, second = parents
        if not 0 <= point <= len(first):
            raise IndexConstraintError(
                f"The crossover point ({point}) must be in the range [0, {len(first)}]"
            )
        if len(first) != len(second):
            raise CrossoverException("Parents must have the same size")
        return (
            list(first[:point]) + list(second[point:]),
            list(second[:point]) + list(first[point:]),
        )


def get_crossover(name: str, **kwargs) -> Crossover:
    """Factory function to get a crossover by name."""
    crossovers = {
        "ordered": OrderedCrossover,
        "partially_mapped": PartiallyMappedCrossover,
        "position_based": PositionBasedCrossover,
        "average": AverageCrossover,
        "single_point": SinglePointCrossover,
    }

    if name not in crossovers:
        raise ValueError(f"Unknown crossover strategy: {name}")

    return crossovers[name](**kwargs)


__all__ = [
    "Crossover",
    "PermutationCrossover",
    "OrderedCrossover",
    "PartiallyMappedCrossover",
    "PositionBasedCrossover",
    "CombineCrossover",
    "AverageCrossover",
    "SinglePointCrossover",
    "get_crossover",
]
