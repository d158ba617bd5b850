"""Test helpers shared by several test modules."""

import random

from keen.evolution.state import EvolutionState
from keen.genetic.genotype import Genotype
from keen.genetic.individual import Individual


class ScriptedRandom(random.Random):
    """
    Random source that replays scripted values.

    ``random()`` returns the scripted doubles in order and fails the test when
    an unexpected draw happens. ``randrange`` returns the scripted integers
    while there are any and falls back to the seeded generator afterwards.
    """

    def __init__(self, doubles=(), ints=(), seed=0):
        super().__init__(seed)
        self.doubles = list(doubles)
        self.ints = list(ints)
        self.double_draws = 0

    def random(self):
        if not self.doubles:
            raise AssertionError("unexpected random() draw")
        self.double_draws += 1
        return self.doubles.pop(0)

    # Keeps shuffle/choice on getrandbits instead of the scripted random().
    def getrandbits(self, k):
        return super().getrandbits(k)

    def randrange(self, start, stop=None, step=1):
        if self.ints:
            return self.ints.pop(0)
        return super().randrange(start, stop, step)


def values(chromosome):
    """Raw gene values of a chromosome."""
    return [gene.value for gene in chromosome]


def state_of(*chromosomes, fitness=1.0, ranker=None):
    """One evaluated single-chromosome individual per chromosome."""
    population = [Individual(Genotype([c]), fitness) for c in chromosomes]
    if ranker is None:
        return EvolutionState(0, population=population)
    return EvolutionState(0, ranker, population)
