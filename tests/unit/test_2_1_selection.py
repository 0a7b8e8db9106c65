"""
Unit tests for selection operators (Subtask 2.1).

Tests cover:
- Output sizes and argument validation
- Random and tournament selection
- Roulette wheel probabilities and lookups
"""

import random

import numpy as np
import pytest

from keen.exceptions import CompositeError, IntConstraintError, SelectionError
from keen.operators.selection import (
    SERIAL_INDEX_THRESHOLD,
    RandomSelector,
    RouletteWheelSelector,
    TournamentSelector
)
from keen.utils import collections


SELECTORS = [RandomSelector(), TournamentSelector(), RouletteWheelSelector(), RouletteWheelSelector(sorted=True)]
SELECTOR_IDS = ["random", "tournament", "roulette", "sorted-roulette"]


class TestSelectorContract:
    """Test suite for the behaviour shared by every selector."""

    @pytest.mark.parametrize("selector", SELECTORS, ids=SELECTOR_IDS)
    def test_output_sizes(self, selector, rng, max_ranker, sample_population):
        """Test counts from zero to twice the population size."""
        for count in range(0, 2 * len(sample_population) + 1):
            selected = selector.select(sample_population, count, max_ranker, rng)
            assert len(selected) == count
            assert all(individual in sample_population for individual in selected)

    @pytest.mark.parametrize("selector", SELECTORS, ids=SELECTOR_IDS)
    def test_population_is_not_modified(self, selector, rng, max_ranker, make_population):
        """Test that selection leaves its input untouched."""
        population = make_population([3.0, 1.0, 2.0])
        snapshot = list(population)
        selector.select(population, 6, max_ranker, rng)
        assert population == snapshot

    @pytest.mark.parametrize("selector", SELECTORS, ids=SELECTOR_IDS)
    def test_empty_population(self, selector, rng, max_ranker):
        """Test that an empty population is rejected."""
        with pytest.raises(CompositeError) as info:
            selector.select([], 1, max_ranker, rng)
        assert isinstance(info.value.failures[0], SelectionError)

    def test_negative_count(self, rng, max_ranker, sample_population):
        """Test that a negative count is rejected."""
        with pytest.raises(CompositeError) as info:
            RandomSelector().select(sample_population, -1, max_ranker, rng)
        assert isinstance(info.value.failures[0], SelectionError)


class TestTournamentSelector:
    """Test suite for tournament selection."""

    def test_size_one_matches_random_selection(self, max_ranker, sample_population):
        """Test that a tournament of one is uniform random selection."""
        tournament = TournamentSelector(1).select(sample_population, 15, max_ranker, random.Random(3))
        uniform = RandomSelector().select(sample_population, 15, max_ranker, random.Random(3))
        assert tournament == uniform

    def test_large_tournaments_favor_the_best(self, rng, max_ranker, sample_population):
        """Test selection pressure of a large tournament."""
        selected = TournamentSelector(30).select(sample_population, 20, max_ranker, rng)
        assert np.mean([individual.fitness for individual in selected]) > 7.0

    def test_tournament_respects_minimization(self, rng, min_ranker, sample_population):
        """Test that the ranker decides which contestant wins."""
        selected = TournamentSelector(30).select(sample_population, 20, min_ranker, rng)
        assert np.mean([individual.fitness for individual in selected]) < 2.0

    def test_non_positive_size(self):
        """Test that the tournament size must be positive."""
        with pytest.raises(CompositeError) as info:
            TournamentSelector(0)
        assert isinstance(info.value.failures[0], IntConstraintError)


class TestRouletteWheelSelector:
    """Test suite for fitness proportional selection."""

    def test_probabilities_proportional_to_fitness(self, max_ranker, make_population):
        """Test the probabilities of a positive population."""
        probabilities = RouletteWheelSelector().probabilities(make_population([1.0, 2.0, 3.0]), max_ranker)
        assert probabilities == pytest.approx([1 / 6, 2 / 6, 3 / 6])

    def test_negative_fitness_is_shifted(self, max_ranker, make_population):
        """Test that negative fitness values are shifted to zero."""
        probabilities = RouletteWheelSelector().probabilities(make_population([-1.0, 0.0, 1.0]), max_ranker)
        assert probabilities == pytest.approx([0.0, 1 / 3, 2 / 3])

    def test_equal_fitness_is_uniform(self, max_ranker, make_population):
        """Test uniform probabilities when all fitness values are zero."""
        probabilities = RouletteWheelSelector().probabilities(make_population([0.0, 0.0, 0.0, 0.0]), max_ranker)
        assert probabilities == pytest.approx([0.25] * 4)

    def test_minimization_favors_low_fitness(self, min_ranker, make_population):
        """Test that probabilities follow the ranker direction."""
        probabilities = RouletteWheelSelector().probabilities(make_population([1.0, 2.0, 3.0]), min_ranker)
        assert probabilities[0] > probabilities[2]
        assert sum(probabilities) == pytest.approx(1.0)

    def test_zero_fitness_individual_is_never_selected(self, rng, max_ranker, make_population):
        """Test that an individual with zero probability never appears."""
        population = make_population([0.0, 5.0, 5.0])
        selected = RouletteWheelSelector().select(population, 100, max_ranker, rng)
        assert population[0] not in selected

    def test_sorted_lookup_on_large_population(self, rng, max_ranker, make_population):
        """Test the binary search path on a sorted large population."""
        population = make_population([float(i) for i in range(SERIAL_INDEX_THRESHOLD + 15)])
        selected = RouletteWheelSelector(sorted=True).select(population, 200, max_ranker, rng)
        assert len(selected) == 200
        assert np.mean([individual.fitness for individual in selected]) > np.mean(
            [individual.fitness for individual in population]
        )

    def test_sorted_and_unsorted_agree_on_ordered_population(self, max_ranker, make_population):
        """Test that serial and binary lookups draw the same individuals."""
        population = max_ranker.sort(make_population([float(i) for i in range(50)]))
        unsorted = RouletteWheelSelector().select(population, 30, max_ranker, random.Random(8))
        presorted = RouletteWheelSelector(sorted=True).select(population, 30, max_ranker, random.Random(8))
        assert unsorted == presorted

    def test_sorted_lookup_checks_order_once_per_call(self, rng, max_ranker, make_population, monkeypatch):
        """Test that a batch of lookups verifies the cumulative array a single time."""
        calls = []
        original = collections.check_sorted

        def counting_check(values):
            calls.append(len(values))
            original(values)

        monkeypatch.setattr(collections, "check_sorted", counting_check)
        population = make_population([float(i) for i in range(SERIAL_INDEX_THRESHOLD + 15)])
        selected = RouletteWheelSelector(sorted=True).select(population, 200, max_ranker, rng)
        assert len(selected) == 200
        assert calls == [len(population)]
