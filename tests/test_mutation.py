"""Tests for mutation operators."""

import math
import random

import pytest

from keen.domain import domain
from keen.evolution.state import EvolutionState
from keen.exceptions import (
    CompositeException,
    IndexConstraintError,
    MutatorConfigException,
    MutatorException,
)
from keen.genetic.chromosomes import BooleanChromosome, DoubleChromosome, IntChromosome
from keen.genetic.genotype import Genotype
from keen.genetic.individual import Individual
from keen.operators.mutation import (
    BitFlipMutator,
    DisplacementMutator,
    InversionMutator,
    PartialShuffleMutator,
    RandomMutator,
    SwapMutator,
    get_mutator,
    invert,
)
from keen.operators.operators import MutationResult

from helpers import ScriptedRandom, state_of, values


class TestMutatorConfig:
    """Tests for mutator parameter validation."""

    def test_defaults(self):
        mutator = InversionMutator()
        assert mutator.individual_rate == 0.5
        assert mutator.chromosome_rate == 0.5
        assert mutator.inversion_boundary_probability == 0.5

    def test_invalid_rate_message(self):
        with pytest.raises(CompositeException) as exc_info:
            RandomMutator(individual_rate=1.5)
        assert exc_info.value.has_infringement(
            MutatorConfigException, "The individual rate (1.5) must be in 0.0..1.0"
        )

    def test_errors_are_aggregated(self):
        with pytest.raises(CompositeException) as exc_info:
            SwapMutator(individual_rate=-0.1, chromosome_rate=2.0, swap_rate=3.0)
        assert len(exc_info.value.infringements) == 3
        assert all(isinstance(e, MutatorConfigException) for e in exc_info.value.infringements)

    @pytest.mark.parametrize("displacement", [-1, 1.5])
    def test_invalid_displacement(self, displacement):
        with pytest.raises(CompositeException) as exc_info:
            DisplacementMutator(displacement=displacement)
        assert exc_info.value.has_infringement(
            MutatorConfigException, "must be a non-negative integer"
        )

    @pytest.mark.parametrize("mutator_cls,field", [
        (mutator_cls, field)
        for mutator_cls in (
            RandomMutator,
            BitFlipMutator,
            InversionMutator,
            DisplacementMutator,
            PartialShuffleMutator,
            SwapMutator,
        )
        for field in ("individual_rate", "chromosome_rate")
    ] + [
        (RandomMutator, "gene_rate"),
        (BitFlipMutator, "gene_rate"),
        (InversionMutator, "inversion_boundary_probability"),
        (PartialShuffleMutator, "shuffle_boundary_probability"),
        (SwapMutator, "swap_rate"),
    ])
    @pytest.mark.parametrize("rate", [-0.5, 1.5])
    def test_rates_out_of_range(self, mutator_cls, field, rate):
        with pytest.raises(CompositeException) as exc_info:
            mutator_cls(**{field: rate})
        label = field.replace("_", " ")
        assert exc_info.value.has_infringement(
            MutatorConfigException, f"The {label} ({rate}) must be in 0.0..1.0"
        )

    def test_repr(self):
        assert repr(SwapMutator(0.1, 0.2, 0.3)) == (
            "SwapMutator(individual_rate=0.1, chromosome_rate=0.2, swap_rate=0.3)"
        )


class TestInversionMutator:
    """Tests for InversionMutator."""

    def test_invert(self):
        assert invert([1, 2, 3, 4, 5], 1, 3) == [1, 4, 3, 2, 5]
        assert invert([1, 2, 3], 0, 2) == [3, 2, 1]
        assert invert([1, 2, 3], 1, 1) == [1, 2, 3]

    @pytest.mark.parametrize("start,end", [(-1, 2), (2, 1), (0, 5)])
    def test_invert_invalid_bounds(self, start, end):
        with pytest.raises(IndexConstraintError):
            invert([1, 2, 3], start, end)

    def test_scripted_inversion(self):
        chromosome = IntChromosome.of(1, 2, 3, 4, 5)
        # start scan stops at index 3, end scan stops at index 4
        rng = ScriptedRandom(doubles=[0.9, 0.9, 0.9, 0.1, 0.2, 0.9])
        with domain.using(rng):
            mutated, count = InversionMutator().mutate_chromosome(chromosome)
        assert values(mutated) == [1, 2, 3, 5, 4]
        assert count == 1
        assert rng.doubles == []

    def test_degenerate_segment(self):
        chromosome = IntChromosome.of(1, 2, 3, 4, 5)
        rng = ScriptedRandom(doubles=[0.9] * 6)
        with domain.using(rng):
            mutated, count = InversionMutator().mutate_chromosome(chromosome)
        assert mutated == chromosome
        assert count == 0

    def test_empty_chromosome_draws_nothing(self):
        rng = ScriptedRandom()
        with domain.using(rng):
            result = InversionMutator().mutate_chromosome(IntChromosome())
        assert result.mutations == 0
        assert rng.double_draws == 0

    def test_preserves_permutation(self):
        chromosome = IntChromosome.of(*range(10))
        mutator = InversionMutator()
        for _ in range(20):
            mutated, _ = mutator.mutate_chromosome(chromosome)
            assert sorted(values(mutated)) == list(range(10))


class TestDisplacementMutator:
    """Tests for DisplacementMutator."""

    def test_rotates_right(self):
        with domain.using(ScriptedRandom(doubles=[0.1])):
            mutated, count = DisplacementMutator(displacement=2).mutate_chromosome(
                IntChromosome.of(0, 1, 2, 3)
            )
        assert values(mutated) == [2, 3, 0, 1]
        assert count == 1

    def test_rotates_left(self):
        with domain.using(ScriptedRandom(doubles=[0.7])):
            mutated, count = DisplacementMutator(displacement=1).mutate_chromosome(
                IntChromosome.of(0, 1, 2, 3)
            )
        assert values(mutated) == [1, 2, 3, 0]
        assert count == 1

    def test_full_turn_is_noop(self):
        rng = ScriptedRandom()
        chromosome = IntChromosome.of(0, 1, 2, 3)
        with domain.using(rng):
            mutated, count = DisplacementMutator(displacement=8).mutate_chromosome(chromosome)
        assert mutated == chromosome
        assert count == 0
        assert rng.double_draws == 0

    def test_empty_chromosome(self):
        result = DisplacementMutator(displacement=3).mutate_chromosome(IntChromosome())
        assert result.mutated.is_empty()
        assert result.mutations == 0


class TestPartialShuffleMutator:
    """Tests for PartialShuffleMutator."""

    def test_defaults(self):
        mutator = PartialShuffleMutator()
        assert mutator.individual_rate == 1.0
        assert mutator.chromosome_rate == 1.0
        assert mutator.shuffle_boundary_probability == 0.5

    def test_zero_probability_draws_nothing(self):
        rng = ScriptedRandom()
        chromosome = IntChromosome.of(1, 2, 3)
        with domain.using(rng):
            mutated, count = PartialShuffleMutator(
                shuffle_boundary_probability=0.0
            ).mutate_chromosome(chromosome)
        assert mutated == chromosome
        assert count == 0
        assert rng.double_draws == 0

    def test_single_gene_segment(self):
        chromosome = IntChromosome.of(1, 2, 3)
        with domain.using(ScriptedRandom(doubles=[0.1, 0.9])):
            mutated, count = PartialShuffleMutator().mutate_chromosome(chromosome)
        assert mutated == chromosome
        assert count == 0

    def test_result_is_permutation(self):
        chromosome = IntChromosome.of(*range(12))
        with domain.using(random.Random(5)):
            mutated, _ = PartialShuffleMutator().mutate_chromosome(chromosome)
        assert sorted(values(mutated)) == list(range(12))


class TestSwapMutator:
    """Tests for SwapMutator."""

    def test_scripted_swaps(self):
        rng = ScriptedRandom(doubles=[0.1, 0.1, 0.1], ints=[2, 2, 0])
        with domain.using(rng):
            mutated, count = SwapMutator().mutate_chromosome(IntChromosome.of(1, 2, 3))
        # [3, 2, 1] -> [3, 1, 2] -> [2, 1, 3]
        assert values(mutated) == [2, 1, 3]
        assert count == 3

    def test_no_position_picked(self):
        with domain.using(ScriptedRandom(doubles=[0.9, 0.9])):
            mutated, count = SwapMutator().mutate_chromosome(IntChromosome.of(1, 2))
        assert values(mutated) == [1, 2]
        assert count == 0

    def test_empty_chromosome(self):
        assert SwapMutator().mutate_chromosome(IntChromosome()).mutations == 0


class TestGeneMutators:
    """Tests for RandomMutator and BitFlipMutator."""

    def test_bit_flip(self):
        with domain.using(ScriptedRandom(doubles=[0.1, 0.9, 0.2])):
            mutated, count = BitFlipMutator().mutate_chromosome(
                BooleanChromosome.of(True, True, True)
            )
        assert mutated.to_simple_string() == "010"
        assert count == 2

    def test_random_mutator_keeps_ranges(self):
        chromosome = IntChromosome.of(*range(5), range=(0, 4))
        mutated, count = RandomMutator(gene_rate=1.0).mutate_chromosome(chromosome)
        assert count == 5
        assert mutated.verify()

    def test_random_mutator_on_default_double_range(self):
        mutated, count = RandomMutator(gene_rate=1.0).mutate_chromosome(DoubleChromosome.of(1.0, 2.0))
        assert count == 2
        assert all(math.isfinite(v) for v in mutated.flatten())
        assert mutated.verify()

    def test_gene_rate_zero(self):
        chromosome = IntChromosome.of(1, 2, 3)
        mutated, count = RandomMutator(gene_rate=0.0).mutate_chromosome(chromosome)
        assert mutated == chromosome
        assert count == 0


class TestMutatorCall:
    """Tests for applying a mutator to a whole state."""

    def test_rate_zero_returns_same_state(self, boolean_state):
        assert BitFlipMutator(individual_rate=0.0)(boolean_state, boolean_state.size) is boolean_state

    def test_size_mismatch(self, boolean_state):
        with pytest.raises(MutatorException):
            BitFlipMutator()(boolean_state, boolean_state.size + 1)

    def test_size_is_checked_before_rate(self, boolean_state):
        with pytest.raises(MutatorException):
            BitFlipMutator(individual_rate=0.0)(boolean_state, 1)

    def test_scripted_population(self):
        state = state_of(
            BooleanChromosome.of(True, True),
            BooleanChromosome.of(True, True),
            fitness=2.0,
        )
        # skip first individual, mutate second: chromosome picked, gene 0 flipped
        rng = ScriptedRandom(doubles=[0.9, 0.1, 0.1, 0.1, 0.9])
        with domain.using(rng):
            result = BitFlipMutator()(state, 2)

        first, second = result.population
        assert first is state.population[0]
        assert second.genotype[0].to_simple_string() == "01"
        assert math.isnan(second.fitness)
        assert rng.doubles == []

    def test_keeps_generation_and_input(self, boolean_state):
        before = boolean_state.population
        result = BitFlipMutator(individual_rate=1.0, chromosome_rate=1.0, gene_rate=1.0)(
            boolean_state, boolean_state.size
        )
        assert result.generation == boolean_state.generation
        assert boolean_state.population == before
        assert [i.genotype[0].to_simple_string() for i in result.population] == [
            "0101", "0000", "1111",
        ]

    def test_reproducible(self, boolean_state):
        mutator = SwapMutator(individual_rate=1.0, chromosome_rate=1.0)
        with domain.using(random.Random(9)):
            first = [i.flatten() for i in mutator(boolean_state, 3).population]
        with domain.using(random.Random(9)):
            second = [i.flatten() for i in mutator(boolean_state, 3).population]
        assert first == second

    def test_multi_chromosome_individual(self):
        individual = Individual(
            Genotype([BooleanChromosome.of(True), BooleanChromosome.of(False)]), 1.0
        )
        mutator = BitFlipMutator(individual_rate=1.0, chromosome_rate=1.0, gene_rate=1.0)
        result = mutator.mutate_individual(individual)
        assert result.mutations == 2
        assert result.mutated.flatten() == [False, True]


class TestMutationResult:
    """Tests for MutationResult."""

    def test_unpacking(self):
        mutated, count = MutationResult("x", 3)
        assert (mutated, count) == ("x", 3)

    def test_map(self):
        result = MutationResult([1, 2], 2).map(len)
        assert result == MutationResult(2, 2)


class TestGetMutator:
    """Tests for get_mutator()."""

    @pytest.mark.parametrize("name,cls", [
        ("random", RandomMutator),
        ("bit_flip", BitFlipMutator),
        ("inversion", InversionMutator),
        ("displacement", DisplacementMutator),
        ("partial_shuffle", PartialShuffleMutator),
        ("swap", SwapMutator),
    ])
    def test_names(self, name, cls):
        assert isinstance(get_mutator(name), cls)

    def test_options(self):
        assert get_mutator("random", individual_rate=0.3).individual_rate == 0.3

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown mutation strategy"):
            get_mutator("gaussian")

    def test_works_on_state(self):
        state = EvolutionState(0, population=[
            Individual(Genotype([IntChromosome.of(*range(6))]), 0.0)
        ])
        result = get_mutator("inversion", individual_rate=1.0, chromosome_rate=1.0)(state, 1)
        assert sorted(result.population[0].flatten()) == list(range(6))


class TestMutationProperties:
    """Properties that hold for every chromosome."""

    @pytest.mark.parametrize("mutator", [
        RandomMutator(gene_rate=0.0),
        BitFlipMutator(gene_rate=0.0),
        InversionMutator(inversion_boundary_probability=0.0),
        DisplacementMutator(displacement=0),
        PartialShuffleMutator(shuffle_boundary_probability=0.0),
        SwapMutator(swap_rate=0.0),
    ])
    def test_identity_at_rate_zero(self, mutator):
        chromosome = BooleanChromosome.of(True, False, False, True, True)
        mutated, count = mutator.mutate_chromosome(chromosome)
        assert mutated == chromosome
        assert count == 0

    def test_bit_flip_saturation(self):
        chromosome = BooleanChromosome.of(True, False, True, True)
        mutated, count = BitFlipMutator(gene_rate=1.0).mutate_chromosome(chromosome)
        assert mutated.to_simple_string() == "0100"
        assert count == chromosome.size

    def test_inversion_saturation(self):
        chromosome = IntChromosome.of(1, 2, 3, 4, 5)
        mutated, count = InversionMutator(
            inversion_boundary_probability=1.0
        ).mutate_chromosome(chromosome)
        assert values(mutated) == [5, 4, 3, 2, 1]
        assert count == 1

    @pytest.mark.parametrize("start,end", [(0, 4), (1, 3), (2, 2)])
    def test_inversion_is_self_inverse(self, start, end):
        genes = [1, 2, 3, 4, 5]
        assert invert(invert(genes, start, end), start, end) == genes

    @pytest.mark.parametrize("draws", [[0.1, 0.9], [0.9, 0.1]])
    def test_displacement_round_trip(self, draws):
        chromosome = IntChromosome.of(0, 1, 2, 3, 4)
        mutator = DisplacementMutator(displacement=3)
        with domain.using(ScriptedRandom(doubles=draws)):
            moved, _ = mutator.mutate_chromosome(chromosome)
            restored, _ = mutator.mutate_chromosome(moved)
        assert moved != chromosome
        assert restored == chromosome
