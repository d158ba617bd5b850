"""
Evolution state, stopping criteria and the reference evolution loop.

``keen.evolution.loop`` is not imported here because it depends on the
operators, which in turn depend on ``EvolutionState``.
"""

from keen.evolution.state import EvolutionState
from keen.evolution.limits import Limit, MaxGenerations, TargetFitness, SteadyGenerations

__all__ = [
    "EvolutionState",
    "Limit",
    "MaxGenerations",
    "TargetFitness",
    "SteadyGenerations",
]
