"""
keen: Genetic Algorithms with Pluggable Operators

A small evolutionary computation toolkit. Candidate solutions are encoded as
immutable genotypes and evolved by composable operators that all share one
signature: ``operator(state, output_size) -> state``.

## Core Concept

1. **Encode** a candidate as a Genotype of typed chromosomes
2. **Evaluate** it with any ``Genotype -> float`` fitness function
3. **Evolve** the population through selection, crossover and mutation
4. **Stop** when a limit fires (generations, target fitness, stagnation)

Every random decision draws from one shared source (``keen.domain``), so a
seeded run is fully reproducible.

## API Reference

### Operators
```python
from keen import BooleanChromosome, Genotype, Individual, EvolutionState
from keen import BitFlipMutator, TournamentSelector

factory = Genotype.Factory([BooleanChromosome.Factory(size=20)])
population = [Individual(factory.make()) for _ in range(10)]
state = EvolutionState(0, population=population)

mutated = BitFlipMutator(individual_rate=1.0)(state, state.size)
```

### Evolution Loop
```python
from keen import EvolutionLoop, EvolutionConfig, MaxGenerations

loop = EvolutionLoop(fitness, factory, EvolutionConfig(population_size=100),
                     limits=[MaxGenerations(200)])
result = loop.run()
print(result.best.fitness, result.stop_reason)
```

### CLI Usage
```bash
keen run one-max --seed 42
keen run tsp --generations 500 --verbosity verbose
keen config keen.yaml
```
"""

__version__ = "0.1.0"

from keen.config import Config, EvolutionConfig, LimitsConfig, get_default_config
from keen.domain import domain, RandomSource
from keen.exceptions import (
    KeenException,
    ConfigurationError,
    CompositeException,
    PreconditionError,
    IndexConstraintError,
    MutatorConfigException,
    CrossoverConfigException,
    SelectorConfigException,
    ChromosomeConfigException,
    EngineConfigException,
    MutatorException,
    CrossoverException,
    SelectionException,
)
from keen.genetic import (
    Gene,
    BooleanGene,
    IntGene,
    DoubleGene,
    CharGene,
    Chromosome,
    BooleanChromosome,
    IntChromosome,
    DoubleChromosome,
    CharChromosome,
    Genotype,
    Individual,
)
from keen.ranking import IndividualRanker, FitnessMaxRanker, FitnessMinRanker
from keen.evolution import (
    EvolutionState,
    Limit,
    MaxGenerations,
    TargetFitness,
    SteadyGenerations,
)
from keen.operators import (
    GeneticOperator,
    Alterer,
    MutationResult,
    RandomMutator,
    BitFlipMutator,
    InversionMutator,
    DisplacementMutator,
    PartialShuffleMutator,
    SwapMutator,
    OrderedCrossover,
    PartiallyMappedCrossover,
    PositionBasedCrossover,
    AverageCrossover,
    CombineCrossover,
    SinglePointCrossover,
    RandomSelector,
    TournamentSelector,
    RouletteWheelSelector,
)
from keen.evolution.loop import EvolutionLoop, EvolutionResult

__all__ = [
    "__version__",
    # Configuration
    "Config",
    "EvolutionConfig",
    "LimitsConfig",
    "get_default_config",
    # Random source
    "domain",
    "RandomSource",
    # Errors
    "KeenException",
    "ConfigurationError",
    "CompositeException",
    "PreconditionError",
    "IndexConstraintError",
    "MutatorConfigException",
    "CrossoverConfigException",
    "SelectorConfigException",
    "ChromosomeConfigException",
    "EngineConfigException",
    "MutatorException",
    "CrossoverException",
    "SelectionException",
    # Genetic representation
    "Gene",
    "BooleanGene",
    "IntGene",
    "DoubleGene",
    "CharGene",
    "Chromosome",
    "BooleanChromosome",
    "IntChromosome",
    "DoubleChromosome",
    "CharChromosome",
    "Genotype",
    "Individual",
    # Ranking and state
    "IndividualRanker",
    "FitnessMaxRanker",
    "FitnessMinRanker",
    "EvolutionState",
    # Operators
    "GeneticOperator",
    "Alterer",
    "MutationResult",
    "RandomMutator",
    "BitFlipMutator",
    "InversionMutator",
    "DisplacementMutator",
    "PartialShuffleMutator",
    "SwapMutator",
    "OrderedCrossover",
    "PartiallyMappedCrossover",
    "PositionBasedCrossover",
    "AverageCrossover",
    "CombineCrossover",
    "SinglePointCrossover",
    "RandomSelector",
    "TournamentSelector",
    "RouletteWheelSelector",
    # Evolution loop
    "Limit",
    "MaxGenerations",
    "TargetFitness",
    "SteadyGenerations",
    "EvolutionLoop",
    "EvolutionResult",
]
