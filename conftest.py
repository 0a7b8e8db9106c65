"""
PyTest configuration and fixtures for Keen.

This module provides shared test fixtures: seeded random sources, rankers,
sample genotypes and populations, and a logfire setup that never exports.
"""

import random
from typing import Callable, List, Sequence

import pytest
import logfire

from keen.core.chromosomes import DoubleChromosome, IntChromosome, IntChromosomeFactory
from keen.core.genes import DoubleGene, IntGene
from keen.core.genotype import Genotype, GenotypeFactory, Individual
from keen.core.ranking import FitnessMaxRanker, FitnessMinRanker


# Keep spans local during tests
logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source."""
    return random.Random(42)


@pytest.fixture
def max_ranker() -> FitnessMaxRanker:
    return FitnessMaxRanker()


@pytest.fixture
def min_ranker() -> FitnessMinRanker:
    return FitnessMinRanker()


def int_genotype(*chromosomes: Sequence[int]) -> Genotype:
    """Genotype with one IntChromosome per sequence of values."""
    return Genotype(tuple(
        IntChromosome(tuple(IntGene(value) for value in values)) for values in chromosomes
    ))


def double_genotype(*chromosomes: Sequence[float]) -> Genotype:
    """Genotype with one DoubleChromosome per sequence of values."""
    return Genotype(tuple(
        DoubleChromosome(tuple(DoubleGene(value) for value in values)) for values in chromosomes
    ))


def population_with_fitness(fitness: Sequence[float]) -> List[Individual]:
    """One single-gene individual per fitness value, gene value = position."""
    return [Individual(int_genotype([i]), value) for i, value in enumerate(fitness)]


@pytest.fixture
def make_population() -> Callable[[Sequence[float]], List[Individual]]:
    """Factory for evaluated populations with the given fitness values."""
    return population_with_fitness


@pytest.fixture
def sample_population() -> List[Individual]:
    """Ten evaluated individuals with fitness 0..9."""
    return population_with_fitness([float(i) for i in range(10)])


@pytest.fixture
def int_genotype_factory() -> GenotypeFactory:
    """Two integer chromosomes of five genes in 0..9."""
    return GenotypeFactory([
        IntChromosomeFactory(5, ranges=[(0, 9)]),
        IntChromosomeFactory(5, ranges=[(0, 9)])
    ])


@pytest.fixture
def sum_fitness() -> Callable[[Genotype], float]:
    """Fitness = sum of all gene values."""
    def fitness(genotype: Genotype) -> float:
        return float(sum(genotype.flatten()))
    return fitness


@pytest.fixture
def counting_fitness():
    """Fitness function that records every genotype it scores."""
    class CountingFitness:
        def __init__(self):
            self.calls: List[Genotype] = []

        def __call__(self, genotype: Genotype) -> float:
            self.calls.append(genotype)
            return float(sum(genotype.flatten()))

    return CountingFitness()


# Test markers
pytest.mark.slow = pytest.mark.slow
pytest.mark.unit = pytest.mark.unit
