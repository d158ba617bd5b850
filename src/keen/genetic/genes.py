"""
Genes: the smallest unit of genetic encoding.

A gene wraps one value plus the constraints that make it valid. Genes are
immutable; "mutating" a gene always produces a new instance through
``duplicate_with_value``, so a gene can never be changed behind the back of the
chromosome that owns it.

Available genes:
- BooleanGene: a single bit, mutated by flipping or by a fair coin
- IntGene: an integer in a closed range, optionally filtered
- DoubleGene: a float in a closed range, optionally filtered
- CharGene: a character in a closed range, optionally filtered
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Any, Callable, List, Sequence, Tuple

from keen.domain import domain
from keen.exceptions import PreconditionError
from keen.utils.randoms import next_char, next_double


def _accept_all(_: Any) -> bool:
    return True


class Gene(ABC):
    """
    Capability interface shared by every gene type.

    Subclasses provide ``value`` and ``duplicate_with_value``. ``generator``
    defaults to the current value, so a gene that does not know how to draw a
    random value mutates to an equal copy of itself.
    """

    value: Any

    @abstractmethod
    def duplicate_with_value(self, value: Any) -> "Gene":
        """Return a new gene of the same type and constraints holding ``value``."""

    def generator(self) -> Any:
        """Draw a random value valid for this gene."""
        return self.value

    def mutate(self) -> "Gene":
        """Return a sibling gene with a freshly drawn value."""
        return self.duplicate_with_value(self.generator())

    def verify(self) -> bool:
        """Whether the gene's value satisfies its constraints."""
        return True

    def flatten(self) -> List[Any]:
        return [self.value]

    def to_simple_string(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class BooleanGene(Gene):
    """A gene holding a single boolean."""

    value: bool

    def generator(self) -> bool:
        return domain.random.random() < 0.5

    def duplicate_with_value(self, value: bool) -> "BooleanGene":
        return BooleanGene(bool(value))

    def flip(self) -> "BooleanGene":
        """Return the negated gene."""
        return BooleanGene(not self.value)

    def to_int(self) -> int:
        return 1 if self.value else 0

    def to_float(self) -> float:
        return 1.0 if self.value else 0.0


class NumberGene(Gene):
    """
    A numeric gene constrained by a closed range and a filter predicate.

    ``mutate`` keeps drawing from the range until the filter accepts the value.
    """

    value: Any
    range: Tuple[Any, Any]
    filter: Callable[[Any], bool]

    def mutate(self) -> "NumberGene":
        while True:
            candidate = self.generator()
            if self.filter(candidate):
                return self.duplicate_with_value(candidate)

    def verify(self) -> bool:
        low, high = self.range
        return low <= self.value <= high and bool(self.filter(self.value))

    def duplicate_with_value(self, value: Any) -> "NumberGene":
        return replace(self, value=value)

    @abstractmethod
    def average(self, genes: Sequence["NumberGene"]) -> "NumberGene":
        """Return a gene holding the mean of this gene and ``genes``."""

    def to_float(self) -> float:
        return float(self.value)

    def to_int(self) -> int:
        return int(self.value)


@dataclass(frozen=True)
class IntGene(NumberGene):
    """An integer gene; its range is inclusive on both ends."""

    value: int
    range: Tuple[int, int] = (-(2**31), 2**31 - 1)
    filter: Callable[[int], bool] = field(default=_accept_all, compare=False, repr=False)

    def generator(self) -> int:
        low, high = self.range
        return domain.random.randint(low, high)

    def average(self, genes: Sequence["IntGene"]) -> "IntGene":
        if not genes:
            raise PreconditionError("The list of genes cannot be empty")
        total = self.value + sum(g.value for g in genes)
        # int() truncates toward zero
        return self.duplicate_with_value(int(total / (len(genes) + 1)))


@dataclass(frozen=True)
class DoubleGene(NumberGene):
    """A floating-point gene; its range is inclusive on both ends."""

    value: float
    range: Tuple[float, float] = (-sys.float_info.max, sys.float_info.max)
    filter: Callable[[float], bool] = field(default=_accept_all, compare=False, repr=False)

    def generator(self) -> float:
        low, high = self.range
        return next_double(low, high)

    def average(self, genes: Sequence["DoubleGene"]) -> "DoubleGene":
        if not genes:
            raise PreconditionError("The list of genes cannot be empty")
        total = self.value + sum(g.value for g in genes)
        return self.duplicate_with_value(total / (len(genes) + 1))


@dataclass(frozen=True)
class CharGene(Gene):
    """A single-character gene."""

    value: str
    range: Tuple[str, str] = (" ", "z")
    filter: Callable[[str], bool] = field(default=_accept_all, compare=False, repr=False)

    def generator(self) -> str:
        return next_char(self.range, self.filter)

    def duplicate_with_value(self, value: str) -> "CharGene":
        return replace(self, value=value)

    def verify(self) -> bool:
        low, high = self.range
        return (
            len(self.value) == 1
            and low <= self.value <= high
            and bool(self.filter(self.value))
        )


__all__ = [
    "Gene",
    "NumberGene",
    "BooleanGene",
    "IntGene",
    "DoubleGene",
    "CharGene",
]
