"""
Selection Operators for Keen.

Selectors choose individuals from a population, with replacement, to survive
into the next generation or to breed. They never modify the population they
receive.
"""

import math
import random
from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np

from keen.constraints import BeAtLeast, BeEmpty, BePositive, DoubleBeEqualTo, HaveSize, constraints
from keen.core.genotype import Individual, Population
from keen.core.ranking import IndividualRanker
from keen.exceptions import SelectionError
from keen.utils.collections import binary_search_all, incremental, serial_search

SERIAL_INDEX_THRESHOLD = 35


class Selector(ABC):
    """Base class for selection operators."""

    def select(
        self,
        population: Sequence[Individual],
        count: int,
        ranker: IndividualRanker,
        rng: random.Random
    ) -> Population:
        """
        Select ``count`` individuals from ``population``.

        Args:
            population: Individuals to choose from
            count: Number of individuals to return
            ranker: Defines which individuals are better
            rng: Random source of the run

        Returns:
            A new list with exactly ``count`` individuals
        """
        with constraints() as scope:
            scope.must_not(population, BeEmpty(), "The population cannot be empty", error=SelectionError)
            scope.must(count, BeAtLeast(0), f"The count ({count}) must not be negative", error=SelectionError)
        selected = self._select(list(population), count, ranker, rng)
        with constraints() as scope:
            scope.must(
                selected, HaveSize(count),
                f"Expected {count} selected individuals but got {len(selected)}",
                error=SelectionError
            )
        return selected

    @abstractmethod
    def _select(
        self,
        population: Population,
        count: int,
        ranker: IndividualRanker,
        rng: random.Random
    ) -> Population:
        """Selection algorithm over validated arguments."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class RandomSelector(Selector):
    """Uniform draws with replacement."""

    def _select(self, population, count, ranker, rng):
        return [population[rng.randrange(len(population))] for _ in range(count)]


class TournamentSelector(Selector):
    """
    Tournament selection.

    Each slot holds the best of ``tournament_size`` uniform draws with
    replacement. A size of 1 is uniform random selection.
    """

    DEFAULT_SIZE = 3

    def __init__(self, tournament_size: int = DEFAULT_SIZE):
        with constraints() as scope:
            scope.must(
                tournament_size, BePositive(),
                f"The tournament size ({tournament_size}) must be positive"
            )
        self.tournament_size = tournament_size

    def _select(self, population, count, ranker, rng):
        selected = []
        for _ in range(count):
            contestants = [population[rng.randrange(len(population))] for _ in range(self.tournament_size)]
            selected.append(ranker.max_with(contestants))
        return selected

    def __repr__(self) -> str:
        return f"TournamentSelector(tournament_size={self.tournament_size})"


class ProbabilitySelector(Selector):
    """
    Inverse-CDF selection over per-individual probabilities.

    With ``sorted`` the population is ordered best first before the
    probabilities are computed, and the cumulative lookup switches from a
    serial scan to a binary search on large populations.
    """

    def __init__(self, sorted: bool = False):
        self.sorted = sorted

    @abstractmethod
    def probabilities(self, population: Population, ranker: IndividualRanker) -> np.ndarray:
        """Selection probability of each individual, in population order."""

    def _select(self, population, count, ranker, rng):
        candidates = ranker.sort(population) if self.sorted else population
        probabilities = self._checked_probabilities(candidates, ranker)
        cumulative = np.minimum(incremental(probabilities), 1.0)
        cumulative[-1] = 1.0
        draws = [rng.random() for _ in range(count)]
        if self.sorted and len(candidates) > SERIAL_INDEX_THRESHOLD:
            return [candidates[index] for index in binary_search_all(cumulative, draws)]
        return [candidates[serial_search(cumulative, draw)] for draw in draws]

    def _checked_probabilities(self, population: Population, ranker: IndividualRanker) -> np.ndarray:
        probabilities = np.asarray(self.probabilities(population, ranker), dtype=float)
        probabilities = np.where(np.isfinite(probabilities), probabilities, 0.0)
        total = float(probabilities.sum())
        if total <= 0.0:
            probabilities = np.full(len(population), 1.0 / len(population))
        elif not math.isclose(total, 1.0, abs_tol=1e-8):
            probabilities = probabilities / total
        with constraints() as scope:
            scope.must(
                float(probabilities.sum()), DoubleBeEqualTo(1.0),
                f"The probabilities must add up to 1.0 (got {probabilities.sum()})"
            )
        return probabilities


class RouletteWheelSelector(ProbabilitySelector):
    """Probability proportional to fitness, shifted so that none is negative."""

    def probabilities(self, population, ranker):
        fitness = np.array([ranker.fitness_transform(individual.fitness) for individual in population], dtype=float)
        shifted = fitness - min(fitness.min(), 0.0)
        total = shifted.sum()
        if total == 0.0:
            return np.full(len(population), 1.0 / len(population))
        return shifted / total

    def __repr__(self) -> str:
        return f"RouletteWheelSelector(sorted={self.sorted})"
