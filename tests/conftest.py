"""Pytest configuration and fixtures."""

import pytest

from keen.domain import domain
from keen.evolution.state import EvolutionState
from keen.genetic.chromosomes import BooleanChromosome, IntChromosome
from keen.genetic.genotype import Genotype
from keen.genetic.individual import Individual
from keen.ranking import FitnessMaxRanker, FitnessMinRanker
from keen.utils.logging import get_verbosity, set_verbosity


@pytest.fixture(autouse=True)
def seeded_domain():
    """Seed the shared random source and restore it afterwards."""
    previous = domain.random
    domain.seed(11)
    yield domain
    domain.random = previous


@pytest.fixture(autouse=True)
def restore_verbosity():
    """Keep verbosity changes from leaking between tests."""
    previous = get_verbosity()
    yield
    set_verbosity(previous)


@pytest.fixture
def max_ranker():
    return FitnessMaxRanker()


@pytest.fixture
def min_ranker():
    return FitnessMinRanker()


@pytest.fixture
def scored_population():
    """Five single-chromosome individuals with fitness 1.0 .. 5.0."""
    return [
        Individual(Genotype([IntChromosome.of(i, i + 1)]), float(i))
        for i in range(1, 6)
    ]


@pytest.fixture
def permutation_population():
    """Four evaluated individuals holding permutations of 0..5."""
    orders = [
        [0, 1, 2, 3, 4, 5],
        [5, 4, 3, 2, 1, 0],
        [2, 0, 4, 1, 5, 3],
        [3, 5, 1, 4, 0, 2],
    ]
    return [
        Individual(Genotype([IntChromosome.of(*order, range=(0, 5))]), float(n))
        for n, order in enumerate(orders)
    ]


@pytest.fixture
def boolean_state():
    """Generation 0 state with three evaluated boolean individuals."""
    population = [
        Individual(Genotype([BooleanChromosome.of(True, False, True, False)]), 2.0),
        Individual(Genotype([BooleanChromosome.of(True, True, True, True)]), 4.0),
        Individual(Genotype([BooleanChromosome.of(False, False, False, False)]), 0.0),
    ]
    return EvolutionState(0, FitnessMaxRanker(), population)
