"""
Evolutionary Engine for Keen.

This module implements the generational loop that orchestrates
initialization, fitness evaluation, selection, alteration and termination.
"""

import asyncio
import contextlib
import logging
import random
import time
from enum import Enum
from typing import Iterable, List, Optional

import logfire

from keen.constraints import HaveSize, constraints, skip_checks
from keen.core.config import KeenConfig
from keen.core.evaluation import ConcurrentEvaluator, EvaluationExecutor, FitnessFunction, SequentialEvaluator
from keen.core.genotype import GenotypeFactory, Individual
from keen.core.limits import Limit, MaxGenerations
from keen.core.listeners import EvolutionInterceptor, EvolutionListener, LoggingListener
from keen.core.ranking import FitnessMaxRanker, IndividualRanker
from keen.core.state import EvolutionResult, EvolutionState
from keen.exceptions import EngineError
from keen.operators.base import Alterer
from keen.operators.selection import Selector, TournamentSelector


class EnginePhase(Enum):
    """Stages of the generational loop."""

    CREATED = "created"
    INITIALIZING = "initializing"
    EVALUATING = "evaluating"
    SELECTING = "selecting"
    ALTERING = "altering"
    CHECKING = "checking"
    TERMINATED = "terminated"


class EvolutionEngine:
    """
    Main engine for running a genetic algorithm.

    Each generation evaluates the population, selects survivors and parents,
    alters the parents into offspring in the order the alterers are given and
    replaces the population with survivors plus offspring. The run stops after
    the first generation for which any limit holds.
    """

    def __init__(
        self,
        genotype_factory: GenotypeFactory,
        fitness_function: FitnessFunction,
        config: Optional[KeenConfig] = None,
        ranker: Optional[IndividualRanker] = None,
        parent_selector: Optional[Selector] = None,
        survivor_selector: Optional[Selector] = None,
        alterers: Iterable[Alterer] = (),
        limits: Iterable[Limit] = (),
        listeners: Iterable[EvolutionListener] = (),
        interceptor: Optional[EvolutionInterceptor] = None,
        evaluator: Optional[EvaluationExecutor] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the evolutionary engine.

        Args:
            genotype_factory: Builds the genotypes of the initial population
            fitness_function: Scores a genotype; NaN is reserved for unevaluated individuals
            config: Keen configuration
            ranker: Defines which individuals are better (maximizes by default)
            parent_selector: Picks the individuals to alter (tournament by default)
            survivor_selector: Picks the individuals kept as they are (tournament by default)
            alterers: Crossovers and mutators, applied in order
            limits: Termination predicates; a generation limit from the config when empty
            listeners: Lifecycle observers
            interceptor: State transforms applied around every generation
            evaluator: Fitness evaluation strategy; chosen from the config when omitted
            logger: Optional logger instance
        """
        self.config = config or KeenConfig()
        self.genotype_factory = genotype_factory
        self.fitness_function = fitness_function
        self.logger = logger or self._setup_logger()

        # The single random stream of the run
        self.random = random.Random(self.config.random_seed)

        self.ranker = ranker or FitnessMaxRanker()
        self.parent_selector = parent_selector or TournamentSelector()
        self.survivor_selector = survivor_selector or TournamentSelector()
        self.alterers: List[Alterer] = list(alterers)
        self.limits: List[Limit] = list(limits) or [MaxGenerations(self.config.evolution.generations)]
        self.interceptor = interceptor or EvolutionInterceptor.identity()
        self.evaluator = evaluator or self._create_evaluator()

        self.listeners: List[EvolutionListener] = list(listeners)
        self.listeners.extend(limit.listener for limit in self.limits if limit.listener is not None)
        if self.config.logging.enable_logging:
            self.listeners.append(LoggingListener(self.logger, self.config.logging.log_interval))

        self.phase = EnginePhase.CREATED
        self.state = EvolutionState(ranker=self.ranker)

    def _setup_logger(self) -> logging.Logger:
        """Setup default logger."""
        logger = logging.getLogger("keen.engine")
        logger.setLevel(getattr(logging, self.config.logging.log_level))

        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return logger

    def _create_evaluator(self) -> EvaluationExecutor:
        parallelization = self.config.parallelization
        if parallelization.enable_parallel:
            return ConcurrentEvaluator(
                self.fitness_function,
                num_workers=parallelization.num_workers,
                chunk_size=parallelization.chunk_size
            )
        return SequentialEvaluator(self.fitness_function)

    def _notify(self, hook: str, state: EvolutionState) -> None:
        for listener in self.listeners:
            getattr(listener, hook)(state)

    async def evolve(self) -> EvolutionResult:
        """
        Run the generational loop until a limit holds.

        Returns:
            Final population, best individual and number of generations run
        """
        evolution = self.config.evolution
        checks = skip_checks() if self.config.skip_checks else contextlib.nullcontext()
        with logfire.span("Evolution",
                          population_size=evolution.population_size,
                          survival_rate=evolution.survival_rate), checks:

            start_time = time.perf_counter()
            self.logger.info(f"Starting evolution with population size {evolution.population_size}")

            try:
                state = self.state
                self._notify("on_evolution_started", state)
                while True:
                    with logfire.span("Generation", generation=state.generation + 1):
                        self._notify("on_generation_started", state)
                        state = await self.iterate_generation(state)
                        self.state = state
                        self._notify("on_generation_ended", state)

                    self.phase = EnginePhase.CHECKING
                    if any(limit(state) for limit in self.limits):
                        break
                    # Let other tasks run between generations
                    await asyncio.sleep(0)

                self.phase = EnginePhase.TERMINATED
                self._notify("on_evolution_ended", state)
            finally:
                self.evaluator.shutdown()

            elapsed_time = time.perf_counter() - start_time
            self.logger.info(f"Evolution completed in {elapsed_time:.3f}s after {state.generation} generations")

            return EvolutionResult(
                population=list(state.population),
                best=state.best(),
                generation=state.generation,
                duration=elapsed_time,
                evaluations=self.evaluator.evaluations
            )

    async def iterate_generation(self, state: EvolutionState) -> EvolutionState:
        """Run one generation and return the state of the next one."""
        state = self.interceptor.before(state)
        state = await self.start_evolution(state)
        state = await self.evaluate_population(state)

        self.phase = EnginePhase.SELECTING
        parents = self.select_parents(state, self.config.evolution.offspring)
        survivors = self.select_survivors(state, self.config.evolution.survivors)

        self.phase = EnginePhase.ALTERING
        offspring = self.alter_offspring(parents)

        state = state.with_population(survivors.population + offspring.population)
        state = await self.evaluate_population(state)
        state = self.interceptor.after(state)
        return state.next_generation()

    async def start_evolution(self, state: EvolutionState) -> EvolutionState:
        """Create the initial population when the state has none."""
        if not state.is_empty():
            return state
        self.phase = EnginePhase.INITIALIZING
        with logfire.span("Initialize Population"):
            self._notify("on_initialization_started", state)
            population = [
                Individual(self.genotype_factory.make(self.random))
                for _ in range(self.config.evolution.population_size)
            ]
            state = state.with_population(population)
            self._notify("on_initialization_ended", state)
            self.logger.info(f"Initialized population with {len(population)} individuals")
        return state

    async def evaluate_population(self, state: EvolutionState, force: bool = False) -> EvolutionState:
        """Score every unevaluated individual."""
        self.phase = EnginePhase.EVALUATING
        with logfire.span("Evaluate Population", size=state.size):
            self._notify("on_evaluation_started", state)
            evaluations = self.evaluator.evaluations
            state = self.evaluator(state, force=force)
            self._notify("on_evaluation_ended", state)

            evaluated = self.evaluator.evaluations - evaluations
            if evaluated:
                logfire.info(f"Evaluated {evaluated} individuals",
                             total_evaluations=self.evaluator.evaluations)

        with constraints() as scope:
            scope.must(
                state.population, HaveSize(self.config.evolution.population_size),
                f"Expected a population of {self.config.evolution.population_size} individuals "
                f"but got {state.size}",
                error=EngineError
            )
            scope.check(
                all(individual.is_evaluated for individual in state.population),
                "There are unevaluated individuals after evaluation",
                error=EngineError
            )
        return state

    def select_parents(self, state: EvolutionState, count: int) -> EvolutionState:
        self._notify("on_parent_selection_started", state)
        selected = state.with_population(
            self.parent_selector.select(state.population, count, self.ranker, self.random)
        )
        self._notify("on_parent_selection_ended", selected)
        return selected

    def select_survivors(self, state: EvolutionState, count: int) -> EvolutionState:
        self._notify("on_survivor_selection_started", state)
        selected = state.with_population(
            self.survivor_selector.select(state.population, count, self.ranker, self.random)
        )
        self._notify("on_survivor_selection_ended", selected)
        return selected

    def alter_offspring(self, parents: EvolutionState) -> EvolutionState:
        """Apply every alterer in order, each to the output of the previous one."""
        self._notify("on_alteration_started", parents)
        population = parents.population
        for alterer in self.alterers:
            population = alterer(population, len(parents.population), self.random)
        offspring = parents.with_population(population)
        self._notify("on_alteration_ended", offspring)
        return offspring
