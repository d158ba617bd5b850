"""Genotype: the full genetic encoding of one individual."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, List, Sequence, Tuple

from keen.exceptions import IndexConstraintError
from keen.genetic.chromosomes import Chromosome


class Genotype:
    """
    Ordered, immutable collection of chromosomes.

    Chromosomes may differ in type and length. Membership queries use the
    chromosomes' structural equality.
    """

    __slots__ = ("_chromosomes",)

    def __init__(self, chromosomes: Iterable[Chromosome] = ()):
        self._chromosomes: Tuple[Chromosome, ...] = tuple(chromosomes)

    @classmethod
    def of(cls, *chromosomes: Chromosome) -> "Genotype":
        return cls(chromosomes)

    @property
    def chromosomes(self) -> Tuple[Chromosome, ...]:
        return self._chromosomes

    @property
    def size(self) -> int:
        return len(self._chromosomes)

    def is_empty(self) -> bool:
        return not self._chromosomes

    def contains(self, chromosome: Chromosome) -> bool:
        return chromosome in self._chromosomes

    def contains_all(self, chromosomes: Iterable[Chromosome]) -> bool:
        return all(c in self._chromosomes for c in chromosomes)

    def verify(self) -> bool:
        return bool(self._chromosomes) and all(c.verify() for c in self._chromosomes)

    def flatten(self) -> List[Any]:
        return [value for c in self._chromosomes for value in c.flatten()]

    def duplicate_with_chromosomes(self, chromosomes: Iterable[Chromosome]) -> "Genotype":
        return Genotype(chromosomes)

    def __getitem__(self, index: int) -> Chromosome:
        if not 0 <= index < len(self._chromosomes):
            raise IndexConstraintError(
                f"The index [{index}] must be in the range [0, {len(self._chromosomes)})"
            )
        return self._chromosomes[index]

    def __len__(self) -> int:
        return len(self._chromosomes)

    def __iter__(self) -> Iterator[Chromosome]:
        return iter(self._chromosomes)

    def __contains__(self, chromosome: object) -> bool:
        return chromosome in self._chromosomes

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Genotype):
            return NotImplemented
        return self._chromosomes == other._chromosomes

    def __hash__(self) -> int:
        return hash(("Genotype", self._chromosomes))

    def __repr__(self) -> str:
        return f"Genotype({', '.join(repr(c) for c in self._chromosomes)})"

    def to_simple_string(self) -> str:
        return "[" + ", ".join(c.to_simple_string() for c in self._chromosomes) + "]"

    class Factory:
        """Builds genotypes from a list of chromosome factories."""

        def __init__(self, chromosomes: Sequence[Any] = ()):
            self.chromosomes = list(chromosomes)

        def make(self) -> "Genotype":
            return Genotype(factory.make() for factory in self.chromosomes)


__all__ = ["Genotype"]
