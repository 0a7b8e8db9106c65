"""
Unit tests for mutation operators (Subtask 2.3).

Tests cover:
- Individual and chromosome rates
- Fitness preservation of untouched individuals
- Random, swap, inversion, shuffle, bit flip and point mutations
- Argument validation
"""

from collections import Counter

import pytest

from keen.core.chromosomes import BooleanChromosome, IntChromosome, TreeChromosome
from keen.core.genes import BooleanGene, IntGene, TreeGene
from keen.core.genotype import Genotype, Individual
from keen.exceptions import CompositeError, DoubleConstraintError, MutationError
from keen.operators.mutation import (
    BitFlipMutator,
    InversionMutator,
    PartialShuffleMutator,
    PointMutator,
    RandomMutator,
    SwapMutator
)
from keen.utils.trees import Tree


def ranged_individual(values, fitness=1.0, bounds=(0, 9)):
    chromosome = IntChromosome(tuple(IntGene(value, bounds) for value in values))
    return Individual(Genotype((chromosome,)), fitness)


class TestMutatorRates:
    """Test suite for the rate handling shared by every mutator."""

    def test_zero_individual_rate_returns_population(self, rng, sample_population):
        """Test that nothing changes at individual rate 0."""
        mutated = RandomMutator(individual_rate=0.0)(sample_population, len(sample_population), rng)
        assert mutated == sample_population
        assert mutated is not sample_population

    def test_full_rates_mutate_every_gene(self, rng):
        """Test that every individual loses its fitness at full rates."""
        population = [ranged_individual([1, 2, 3]) for _ in range(5)]
        mutator = RandomMutator(individual_rate=1.0, chromosome_rate=1.0, gene_rate=1.0)
        mutated = mutator(population, len(population), rng)
        assert len(mutated) == 5
        assert not any(individual.is_evaluated for individual in mutated)
        assert all(individual.genotype.verify() for individual in mutated)

    def test_zero_gene_rate_keeps_fitness(self, rng):
        """Test that an individual without mutations keeps its fitness."""
        individual = ranged_individual([1, 2, 3], fitness=7.0)
        mutator = RandomMutator(individual_rate=1.0, chromosome_rate=1.0, gene_rate=0.0)
        assert mutator.mutate_individual(individual, rng) is individual

    def test_zero_chromosome_rate_keeps_fitness(self, rng):
        """Test that unvisited chromosomes are never mutated."""
        individual = ranged_individual([1, 2, 3], fitness=7.0)
        mutator = SwapMutator(individual_rate=1.0, chromosome_rate=0.0, swap_rate=1.0)
        assert mutator.mutate_individual(individual, rng).fitness == 7.0

    def test_population_is_not_modified(self, rng):
        """Test that the input population is left untouched."""
        population = [ranged_individual([1, 2, 3]) for _ in range(3)]
        snapshot = list(population)
        RandomMutator(1.0, 1.0, 1.0)(population, 3, rng)
        assert population == snapshot

    @pytest.mark.parametrize("rate", [-0.5, 1.01])
    def test_invalid_rates(self, rate):
        """Test that rates outside 0..1 are rejected."""
        with pytest.raises(CompositeError) as info:
            RandomMutator(individual_rate=rate)
        assert isinstance(info.value.failures[0], DoubleConstraintError)
        with pytest.raises(CompositeError):
            SwapMutator(swap_rate=rate)

    @pytest.mark.parametrize(
        "mutator_type",
        [RandomMutator, SwapMutator, InversionMutator, PartialShuffleMutator, BitFlipMutator, PointMutator]
    )
    def test_every_invalid_rate_is_reported(self, mutator_type):
        """Test that the shared rates and the strategy rate fail together."""
        with pytest.raises(CompositeError) as info:
            mutator_type(2.0, 3.0, 4.0)
        failures = info.value.failures
        assert len(failures) == 3
        assert all(isinstance(failure, DoubleConstraintError) for failure in failures)
        assert "individual rate (2.0)" in str(info.value)
        assert "chromosome rate (3.0)" in str(info.value)
        assert "(4.0) must be in 0.0..1.0" in str(info.value)

    def test_probability(self):
        """Test that the probability of a mutator is its individual rate."""
        assert InversionMutator(individual_rate=0.3).probability == 0.3


class TestChromosomeMutations:
    """Test suite for the individual mutation strategies."""

    def test_random_mutation_counts_genes(self, rng):
        """Test that every gene is replaced at gene rate 1."""
        chromosome = ranged_individual([1, 2, 3, 4]).genotype[0]
        result = RandomMutator(gene_rate=1.0).mutate_chromosome(chromosome, rng)
        assert result.mutations == 4
        assert result.chromosome.verify()

    def test_random_mutation_at_rate_zero(self, rng):
        """Test that a zero rate returns the original chromosome."""
        chromosome = ranged_individual([1, 2, 3]).genotype[0]
        result = RandomMutator(individual_rate=0.0).mutate_chromosome(chromosome, rng)
        assert result.chromosome is chromosome
        assert result.mutations == 0

    def test_swap_preserves_genes(self, rng):
        """Test that swaps only reorder genes."""
        chromosome = ranged_individual(list(range(10))).genotype[0]
        result = SwapMutator(swap_rate=1.0).mutate_chromosome(chromosome, rng)
        assert result.mutations == 10
        assert Counter(result.chromosome.genes) == Counter(chromosome.genes)

    def test_inversion_round_trip(self):
        """Test that inverting the same segment twice restores the genes."""
        genes = [IntGene(value) for value in range(8)]
        once = InversionMutator.invert(genes, 2, 6)
        assert [gene.value for gene in once] == [0, 1, 6, 5, 4, 3, 2, 7]
        assert InversionMutator.invert(once, 2, 6) == genes

    def test_inversion_counts_one_mutation(self, rng):
        """Test that an inversion is a single mutation."""
        chromosome = ranged_individual(list(range(10))).genotype[0]
        mutator = InversionMutator(inversion_boundary_probability=0.5)
        for _ in range(20):
            result = mutator.mutate_chromosome(chromosome, rng)
            assert result.mutations in (0, 1)
            assert Counter(result.chromosome.genes) == Counter(chromosome.genes)

    def test_partial_shuffle_preserves_genes(self, rng):
        """Test that shuffling a segment keeps the multiset of genes."""
        chromosome = ranged_individual(list(range(10))).genotype[0]
        result = PartialShuffleMutator(shuffle_boundary_probability=0.5).mutate_chromosome(chromosome, rng)
        assert Counter(result.chromosome.genes) == Counter(chromosome.genes)

    def test_bit_flip(self, rng):
        """Test that every bit is flipped at flip rate 1."""
        chromosome = BooleanChromosome((BooleanGene(True), BooleanGene(False), BooleanGene(True)))
        result = BitFlipMutator(flip_rate=1.0).mutate_chromosome(chromosome, rng)
        assert [gene.value for gene in result.chromosome] == [False, True, False]
        assert result.mutations == 3

    def test_bit_flip_requires_booleans(self, rng):
        """Test that bit flips reject other gene kinds."""
        chromosome = ranged_individual([1, 0]).genotype[0]
        with pytest.raises(CompositeError) as info:
            BitFlipMutator().mutate_chromosome(chromosome, rng)
        assert isinstance(info.value.failures[0], MutationError)

    def test_point_mutation_keeps_root_arity(self, rng):
        """Test that point mutation picks nodes with the root's arity."""
        tree = Tree("+", (Tree("*", (Tree(1), Tree(2))), Tree(3)))
        chromosome = TreeChromosome((TreeGene(tree),))
        result = PointMutator(gene_rate=1.0).mutate_chromosome(chromosome, rng)
        assert result.mutations == 1
        assert result.chromosome[0].value.arity == 2
        assert result.chromosome[0].value.value in ("+", "*")

    def test_point_mutation_requires_trees(self, rng):
        """Test that point mutation rejects other gene kinds."""
        chromosome = ranged_individual([1]).genotype[0]
        with pytest.raises(CompositeError) as info:
            PointMutator().mutate_chromosome(chromosome, rng)
        assert isinstance(info.value.failures[0], MutationError)
