"""
Fitness Rankers.

A ranker defines which of two individuals is better. Every ordering helper
returns new lists and never reorders the population it receives.
"""

import functools
from abc import ABC, abstractmethod
from typing import Callable, Iterable, Sequence

from keen.constraints import BeEmpty, constraints
from keen.core.genotype import Individual, Population


class IndividualRanker(ABC):
    """Total order over individuals by fitness."""

    @abstractmethod
    def compare(self, first: Individual, second: Individual) -> int:
        """Positive if ``first`` is better, negative if worse, zero if tied."""

    def __call__(self, first: Individual, second: Individual) -> int:
        return self.compare(first, second)

    @property
    def comparator(self) -> Callable[[Individual], object]:
        """Sort key where larger means better."""
        return functools.cmp_to_key(self.compare)

    def sort(self, population: Iterable[Individual]) -> Population:
        """Best individual first. Ties keep their relative order."""
        return sorted(population, key=self.comparator, reverse=True)

    def max_with(self, candidates: Sequence[Individual]) -> Individual:
        """The best candidate; the first one wins a tie."""
        with constraints() as scope:
            scope.must_not(candidates, BeEmpty(), "Cannot pick the best of no candidates")
        best = candidates[0]
        for candidate in candidates[1:]:
            if self.compare(candidate, best) > 0:
                best = candidate
        return best

    def best(self, population: Sequence[Individual]) -> Individual:
        return self.max_with(population)

    def worst(self, population: Sequence[Individual]) -> Individual:
        with constraints() as scope:
            scope.must_not(population, BeEmpty(), "Cannot pick the worst of an empty population")
        worst = population[0]
        for individual in population[1:]:
            if self.compare(individual, worst) < 0:
                worst = individual
        return worst

    def fitness_transform(self, fitness: float) -> float:
        """Map fitness so that larger transformed values are better."""
        return fitness


class FitnessMaxRanker(IndividualRanker):
    """Higher fitness is better."""

    def compare(self, first: Individual, second: Individual) -> int:
        return (first.fitness > second.fitness) - (first.fitness < second.fitness)


class FitnessMinRanker(IndividualRanker):
    """Lower fitness is better."""

    def compare(self, first: Individual, second: Individual) -> int:
        return (first.fitness < second.fitness) - (first.fitness > second.fitness)

    def fitness_transform(self, fitness: float) -> float:
        return -fitness
