"""Tests for the bundled problems."""

import pytest

from keen.genetic.chromosomes import BooleanChromosome, CharChromosome, DoubleChromosome, IntChromosome
from keen.genetic.genotype import Genotype
from keen.problems import (
    CITIES,
    PROBLEMS,
    RouteFactory,
    count_ones,
    get_problem,
    one_max,
    sum_of_squares,
    tour_length,
    tsp,
    word,
)
from keen.problems import word_matcher


class TestFitnessFunctions:
    def test_count_ones(self):
        genotype = Genotype([BooleanChromosome.of(True, False, True, True)])
        assert count_ones(genotype) == 3.0

    def test_word_matcher(self):
        fitness = word_matcher("keen")
        assert fitness(Genotype([CharChromosome.of(*"kern")])) == 2.0
        assert fitness(Genotype([CharChromosome.of(*"keen")])) == 4.0

    def test_tour_length_is_closed(self):
        square = [(0, 0), (0, 1), (1, 1), (1, 0)]
        route = Genotype([IntChromosome.of(0, 1, 2, 3)])
        assert tour_length(square)(route) == pytest.approx(4.0)

    def test_tour_length_crossing(self):
        square = [(0, 0), (0, 1), (1, 1), (1, 0)]
        route = Genotype([IntChromosome.of(0, 2, 1, 3)])
        assert tour_length(square)(route) == pytest.approx(2 + 2 * 2 ** 0.5)

    def test_sum_of_squares(self):
        assert sum_of_squares(Genotype([DoubleChromosome.of(1.0, -2.0, 0.5)])) == pytest.approx(5.25)


class TestProblems:
    @pytest.mark.parametrize("name", list(PROBLEMS))
    def test_factory_builds_valid_genotypes(self, name):
        problem = get_problem(name)
        genotype = problem.genotype_factory.make()
        assert genotype.verify()
        assert isinstance(problem.fitness(genotype), float)
        assert isinstance(problem.render(genotype), str)
        assert problem.name == name

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown problem"):
            get_problem("knapsack")

    def test_one_max_preset(self):
        problem = one_max(10)
        assert problem.config.limits.target_fitness == 10.0
        assert problem.genotype_factory.make().size == 1
        assert problem.genotype_factory.make()[0].size == 10

    def test_word_preset(self):
        problem = word("abc")
        assert problem.config.limits.target_fitness == 3.0
        assert problem.render(Genotype([CharChromosome.of(*"abc")])) == "abc"

    def test_tsp_is_minimised(self):
        problem = tsp()
        assert problem.config.evolution.ranker == "min"
        route = problem.genotype_factory.make()
        assert sorted(route.flatten()) == list(range(len(CITIES)))

    def test_route_factory(self):
        for _ in range(10):
            chromosome = RouteFactory(6).make()
            assert sorted(g.value for g in chromosome) == list(range(6))
            assert chromosome.verify()

    def test_presets_are_independent(self):
        first = get_problem("sphere")
        first.config.evolution.population_size = 3
        assert get_problem("sphere").config.evolution.population_size == 100
