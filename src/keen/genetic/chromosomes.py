"""
Chromosomes: immutable, fixed-length sequences of genes of one type.

``duplicate_with_genes`` is the only way to "change" a chromosome; it returns a
new instance of the same class and leaves the original untouched. Each concrete
chromosome carries a nested ``Factory`` that builds random chromosomes and
validates its configuration eagerly.
"""

from __future__ import annotations

import sys
from typing import Any, Callable, ClassVar, Iterable, Iterator, List, Sequence, Tuple, Type

from keen.domain import domain
from keen.exceptions import ChromosomeConfigException, CompositeException
from keen.genetic.genes import BooleanGene, CharGene, DoubleGene, Gene, IntGene
from keen.utils.randoms import next_char, next_double


class Chromosome:
    """
    Ordered, immutable sequence of genes.

    Chromosomes behave like read-only sequences (``len``, iteration, indexing,
    ``in``) and compare structurally: two chromosomes are equal when they are
    of the same class and hold equal genes in the same order.
    """

    gene_type: ClassVar[Type[Gene]] = Gene

    __slots__ = ("_genes",)

    def __init__(self, genes: Iterable[Gene] = ()):
        self._genes: Tuple[Gene, ...] = tuple(genes)

    @classmethod
    def of(cls, *values: Any, **gene_options: Any) -> "Chromosome":
        """Build a chromosome from raw values, wrapping each in ``gene_type``."""
        return cls(cls.gene_type(value, **gene_options) for value in values)

    @property
    def genes(self) -> Tuple[Gene, ...]:
        return self._genes

    @property
    def size(self) -> int:
        return len(self._genes)

    def get(self, index: int) -> Gene:
        return self._genes[index]

    def duplicate_with_genes(self, genes: Iterable[Gene]) -> "Chromosome":
        """Return a new chromosome of the same class holding ``genes``."""
        return type(self)(genes)

    def verify(self) -> bool:
        """A chromosome is valid when it is non-empty and all its genes are valid."""
        return bool(self._genes) and all(gene.verify() for gene in self._genes)

    def contains_all(self, genes: Iterable[Gene]) -> bool:
        return all(gene in self._genes for gene in genes)

    def flatten(self) -> List[Any]:
        return [value for gene in self._genes for value in gene.flatten()]

    def is_empty(self) -> bool:
        return not self._genes

    def __len__(self) -> int:
        return len(self._genes)

    def __iter__(self) -> Iterator[Gene]:
        return iter(self._genes)

    def __getitem__(self, index):
        return self._genes[index]

    def __contains__(self, gene: object) -> bool:
        return gene in self._genes

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if type(other) is not type(self):
            return NotImplemented
        return self._genes == other._genes

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._genes))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(repr(g) for g in self._genes)})"

    def to_simple_string(self) -> str:
        return "[" + ", ".join(g.to_simple_string() for g in self._genes) + "]"


class _RangedFactory:
    """
    Shared validation for factories with per-gene ranges and filters.

    ``ranges`` and ``filters`` may be empty (use the default), hold a single
    entry (applied to every gene) or hold exactly ``size`` entries.
    """

    default_range: ClassVar[Tuple[Any, Any]]

    def __init__(
        self,
        size: int,
        ranges: Sequence[Tuple[Any, Any]] = (),
        filters: Sequence[Callable[[Any], bool]] = (),
    ):
        infringements = []
        if size < 0:
            infringements.append(
                ChromosomeConfigException(f"The size ({size}) must be non-negative")
            )
        for name, items in (("ranges", ranges), ("filters", filters)):
            if len(items) > 1 and len(items) != size:
                infringements.append(
                    ChromosomeConfigException(
                        f"The number of {name} ({len(items)}) must be 0, 1 or "
                        f"equal to the size ({size})"
                    )
                )
        empty = [i for i, (low, high) in enumerate(ranges) if low > high]
        if empty:
            infringements.append(
                ChromosomeConfigException(f"The ranges cannot be empty at indices: {empty}")
            )
        if infringements:
            raise CompositeException(infringements)

        self.size = size
        self.ranges = self._expand(list(ranges), self.default_range)
        self.filters = self._expand(list(filters), lambda _: True)

    def _expand(self, items: list, default: Any) -> list:
        if not items:
            return [default] * self.size
        if len(items) == 1:
            return items * self.size
        return items

    def __repr__(self) -> str:
        return f"{type(self).__qualname__}(size={self.size}, ranges={self.ranges})"


class BooleanChromosome(Chromosome):
    """Chromosome of BooleanGenes."""

    gene_type = BooleanGene
    __slots__ = ()

    def true_count(self) -> int:
        return sum(1 for gene in self._genes if gene.value)

    def to_simple_string(self) -> str:
        return "".join("1" if gene.value else "0" for gene in self._genes)

    class Factory:
        """Builds random boolean chromosomes where each gene is true with ``true_rate``."""

        def __init__(self, size: int, true_rate: float = 0.5):
            infringements = []
            if size < 0:
                infringements.append(
                    ChromosomeConfigException(f"The size ({size}) must be non-negative")
                )
            if not 0.0 <= true_rate <= 1.0:
                infringements.append(
                    ChromosomeConfigException(
                        f"The true rate ({true_rate}) must be in 0.0..1.0"
                    )
                )
            if infringements:
                raise CompositeException(infringements)
            self.size = size
            self.true_rate = true_rate

        def make(self) -> "BooleanChromosome":
            rng = domain.random
            return BooleanChromosome(
                BooleanGene(rng.random() < self.true_rate) for _ in range(self.size)
            )

        def __repr__(self) -> str:
            return f"BooleanChromosome.Factory(size={self.size}, true_rate={self.true_rate})"


class IntChromosome(Chromosome):
    """Chromosome of IntGenes."""

    gene_type = IntGene
    __slots__ = ()

    class Factory(_RangedFactory):
        default_range = (-(2**31), 2**31 - 1)

        def make(self) -> "IntChromosome":
            rng = domain.random
            genes = []
            for gene_range, predicate in zip(self.ranges, self.filters):
                while True:
                    value = rng.randint(*gene_range)
                    if predicate(value):
                        break
                genes.append(IntGene(value, tuple(gene_range), predicate))
            return IntChromosome(genes)


class DoubleChromosome(Chromosome):
    """Chromosome of DoubleGenes."""

    gene_type = DoubleGene
    __slots__ = ()

    class Factory(_RangedFactory):
        default_range = (-sys.float_info.max, sys.float_info.max)

        def make(self) -> "DoubleChromosome":
            rng = domain.random
            genes = []
            for gene_range, predicate in zip(self.ranges, self.filters):
                while True:
                    value = next_double(*gene_range, rng=rng)
                    if predicate(value):
                        break
                genes.append(DoubleGene(value, tuple(gene_range), predicate))
            return DoubleChromosome(genes)


class CharChromosome(Chromosome):
    """Chromosome of CharGenes."""

    gene_type = CharGene
    __slots__ = ()

    def to_simple_string(self) -> str:
        return "".join(gene.value for gene in self._genes)

    class Factory(_RangedFactory):
        default_range = (" ", "z")

        def make(self) -> "CharChromosome":
            return CharChromosome(
                CharGene(next_char(gene_range, predicate), tuple(gene_range), predicate)
                for gene_range, predicate in zip(self.ranges, self.filters)
            )


__all__ = [
    "Chromosome",
    "BooleanChromosome",
    "IntChromosome",
    "DoubleChromosome",
    "CharChromosome",
]
