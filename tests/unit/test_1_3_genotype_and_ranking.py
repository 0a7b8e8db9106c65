"""
Unit tests for genotypes, individuals and rankers (Subtask 1.3).

Tests cover:
- Genotype construction, indexing and flattening
- Genotype factories
- Individual fitness handling
- Maximizing and minimizing rankers
"""

import math

import pytest

from conftest import int_genotype, population_with_fitness
from keen.core.genotype import Genotype, Individual
from keen.core.ranking import FitnessMaxRanker, FitnessMinRanker
from keen.exceptions import CompositeError, InvalidIndexError


class TestGenotype:
    """Test suite for genotypes."""

    def test_empty_genotype_is_rejected(self):
        """Test that a genotype needs at least one chromosome."""
        with pytest.raises(CompositeError):
            Genotype(())

    def test_indexing(self):
        """Test positive, negative and out of range indexes."""
        genotype = int_genotype([1, 2], [3])
        assert genotype[0].flatten() == [1, 2]
        assert genotype[-1].flatten() == [3]
        with pytest.raises(CompositeError) as info:
            genotype[2]
        assert isinstance(info.value.failures[0], InvalidIndexError)
        assert isinstance(info.value.failures[0], IndexError)

    def test_flatten_and_size(self):
        """Test flattening across chromosomes."""
        genotype = int_genotype([1, 2], [3, 4, 5])
        assert genotype.size == 2
        assert genotype.flatten() == [1, 2, 3, 4, 5]

    def test_duplicate_with_chromosomes(self):
        """Test that duplication leaves the original untouched."""
        genotype = int_genotype([1, 2])
        duplicate = genotype.duplicate_with_chromosomes([int_genotype([7])[0]])
        assert duplicate.flatten() == [7]
        assert genotype.flatten() == [1, 2]

    def test_factory(self, rng, int_genotype_factory):
        """Test that factories build one chromosome per chromosome factory."""
        genotype = int_genotype_factory.make(rng)
        assert genotype.size == 2
        assert all(len(chromosome) == 5 for chromosome in genotype)
        assert genotype.verify()


class TestIndividual:
    """Test suite for individuals."""

    def test_new_individual_is_unevaluated(self):
        """Test the NaN fitness of a fresh individual."""
        individual = Individual(int_genotype([1]))
        assert math.isnan(individual.fitness)
        assert not individual.is_evaluated
        assert not individual.verify()

    def test_with_fitness(self):
        """Test that assigning fitness returns a new individual."""
        individual = Individual(int_genotype([1]))
        scored = individual.with_fitness(3.0)
        assert scored.fitness == 3.0
        assert scored.is_evaluated
        assert scored.genotype is individual.genotype
        assert not individual.is_evaluated

    def test_ordering_by_fitness(self):
        """Test that individuals compare by fitness."""
        low = Individual(int_genotype([9]), 1.0)
        high = Individual(int_genotype([0]), 2.0)
        assert low < high
        assert sorted([high, low]) == [low, high]


class TestRankers:
    """Test suite for fitness rankers."""

    def test_max_ranker_sort(self, max_ranker):
        """Test best first ordering when maximizing."""
        population = population_with_fitness([3.0, 1.0, 2.0])
        assert [individual.fitness for individual in max_ranker.sort(population)] == [3.0, 2.0, 1.0]
        assert [individual.fitness for individual in population] == [3.0, 1.0, 2.0]

    def test_min_ranker_sort(self, min_ranker):
        """Test best first ordering when minimizing."""
        population = population_with_fitness([3.0, 1.0, 2.0])
        assert [individual.fitness for individual in min_ranker.sort(population)] == [1.0, 2.0, 3.0]

    def test_best_and_worst(self, max_ranker, min_ranker, sample_population):
        """Test extreme picks for both directions."""
        assert max_ranker.best(sample_population).fitness == 9.0
        assert max_ranker.worst(sample_population).fitness == 0.0
        assert min_ranker.best(sample_population).fitness == 0.0

    def test_ties_keep_first(self, max_ranker):
        """Test that the first maximal candidate wins a tie."""
        population = population_with_fitness([1.0, 5.0, 5.0])
        assert max_ranker.max_with(population) is population[1]

    def test_sort_is_stable(self, max_ranker):
        """Test that tied individuals keep their relative order."""
        population = population_with_fitness([2.0, 2.0, 2.0])
        assert max_ranker.sort(population) == population

    def test_fitness_transform(self):
        """Test that transformed fitness grows with quality."""
        assert FitnessMaxRanker().fitness_transform(2.0) == 2.0
        assert FitnessMinRanker().fitness_transform(2.0) == -2.0

    def test_best_of_empty_population(self, max_ranker):
        """Test that an empty population has no best."""
        with pytest.raises(CompositeError):
            max_ranker.best([])
