"""Genetic representation: genes, chromosomes, genotypes and individuals."""

from keen.genetic.genes import (
    Gene,
    NumberGene,
    BooleanGene,
    IntGene,
    DoubleGene,
    CharGene,
)
from keen.genetic.chromosomes import (
    Chromosome,
    BooleanChromosome,
    IntChromosome,
    DoubleChromosome,
    CharChromosome,
)
from keen.genetic.genotype import Genotype
from keen.genetic.individual import Individual

__all__ = [
    "Gene",
    "NumberGene",
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
]
