"""
Base abstractions for genetic operators.

This module defines the interface all operators implement. Every operator is a
function from an evolution state to a new evolution state:

- GeneticOperator: ``operator(state, output_size) -> state``
- Alterer: an operator that changes genetic material (mutators, crossovers)

Selectors are plain GeneticOperators: they choose individuals but never alter
them. Operators never modify their input state.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Generic, Iterator, TypeVar

from keen.evolution.state import EvolutionState

T = TypeVar("T")
R = TypeVar("R")


class GeneticOperator(ABC):
    """
    Abstract base class for every operator in the evolution pipeline.

    ``output_size`` is the number of individuals the returned state must hold.
    Mutators require it to match the input population; crossovers and selectors
    use it to decide how many individuals to produce.
    """

    @abstractmethod
    def __call__(self, state: EvolutionState, output_size: int) -> EvolutionState:
        pass


class Alterer(GeneticOperator):
    """Marker base class for operators that alter genetic material."""


@dataclass(frozen=True)
class MutationResult(Generic[T]):
    """
    A mutated value plus the number of mutations that produced it.

    Unpacks as a pair: ``mutated, count = result``.
    """

    mutated: T
    mutations: int = 0

    def map(self, fn: Callable[[T], R]) -> "MutationResult[R]":
        """Transform the mutated value, keeping the mutation count."""
        return MutationResult(fn(self.mutated), self.mutations)

    def __iter__(self) -> Iterator:
        yield self.mutated
        yield self.mutations


__all__ = ["GeneticOperator", "Alterer", "MutationResult"]
