"""
Evolution Listeners, Records and Interceptors.

Listeners observe a run through lifecycle hooks. The engine guarantees that a
``*_started`` hook always precedes the matching ``*_ended`` hook for the same
generation, and passes the current state to both.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

import logfire
import numpy as np

from keen.core.genotype import Individual
from keen.core.state import EvolutionState


class EvolutionListener:
    """Base listener; every hook does nothing."""

    def on_evolution_started(self, state: EvolutionState) -> None:
        pass

    def on_evolution_ended(self, state: EvolutionState) -> None:
        pass

    def on_generation_started(self, state: EvolutionState) -> None:
        pass

    def on_generation_ended(self, state: EvolutionState) -> None:
        pass

    def on_initialization_started(self, state: EvolutionState) -> None:
        pass

    def on_initialization_ended(self, state: EvolutionState) -> None:
        pass

    def on_evaluation_started(self, state: EvolutionState) -> None:
        pass

    def on_evaluation_ended(self, state: EvolutionState) -> None:
        pass

    def on_parent_selection_started(self, state: EvolutionState) -> None:
        pass

    def on_parent_selection_ended(self, state: EvolutionState) -> None:
        pass

    def on_survivor_selection_started(self, state: EvolutionState) -> None:
        pass

    def on_survivor_selection_ended(self, state: EvolutionState) -> None:
        pass

    def on_alteration_started(self, state: EvolutionState) -> None:
        pass

    def on_alteration_ended(self, state: EvolutionState) -> None:
        pass


@dataclass
class GenerationRecord:
    """Timings and outcome of one generation."""

    generation: int
    started_at: float = field(default_factory=time.perf_counter)
    duration: float = 0.0
    phases: Dict[str, float] = field(default_factory=dict)
    best: Optional[Individual] = None
    steady: int = 0


@dataclass
class EvolutionRecord:
    """Every generation of a run."""

    generations: List[GenerationRecord] = field(default_factory=list)
    started_at: float = 0.0
    duration: float = 0.0

    @property
    def last(self) -> Optional[GenerationRecord]:
        return self.generations[-1] if self.generations else None


class EvolutionRecorder(EvolutionListener):
    """
    Records the elapsed time of every phase and the best individual of every
    generation.

    ``steady`` counts the consecutive generations whose best fitness did not
    change.
    """

    PHASES = ("initialization", "evaluation", "parent_selection", "survivor_selection", "alteration")

    def __init__(self):
        self.evolution = EvolutionRecord()
        self._current: Optional[GenerationRecord] = None
        self._marks: Dict[str, float] = {}

    @property
    def steady(self) -> int:
        last = self.evolution.last
        return last.steady if last else 0

    def on_evolution_started(self, state):
        self.evolution = EvolutionRecord(started_at=time.perf_counter())

    def on_evolution_ended(self, state):
        self.evolution.duration = time.perf_counter() - self.evolution.started_at

    def on_generation_started(self, state):
        self._current = GenerationRecord(generation=state.generation + 1)

    def on_generation_ended(self, state):
        record = self._current or GenerationRecord(generation=state.generation)
        record.duration = time.perf_counter() - record.started_at
        if state.population:
            record.best = state.ranker.best(state.population)
        previous = self.evolution.last
        if previous is not None and previous.best is not None and record.best is not None \
                and previous.best.fitness == record.best.fitness:
            record.steady = previous.steady + 1
        self.evolution.generations.append(record)
        self._current = None

    def _start(self, phase: str) -> None:
        self._marks[phase] = time.perf_counter()

    def _end(self, phase: str) -> None:
        elapsed = time.perf_counter() - self._marks.pop(phase, time.perf_counter())
        if self._current is not None:
            self._current.phases[phase] = self._current.phases.get(phase, 0.0) + elapsed

    def on_initialization_started(self, state):
        self._start("initialization")

    def on_initialization_ended(self, state):
        self._end("initialization")

    def on_evaluation_started(self, state):
        self._start("evaluation")

    def on_evaluation_ended(self, state):
        self._end("evaluation")

    def on_parent_selection_started(self, state):
        self._start("parent_selection")

    def on_parent_selection_ended(self, state):
        self._end("parent_selection")

    def on_survivor_selection_started(self, state):
        self._start("survivor_selection")

    def on_survivor_selection_ended(self, state):
        self._end("survivor_selection")

    def on_alteration_started(self, state):
        self._start("alteration")

    def on_alteration_ended(self, state):
        self._end("alteration")


class LoggingListener(EvolutionListener):
    """Logs progress every ``log_interval`` generations."""

    def __init__(self, logger: logging.Logger, log_interval: int = 10):
        self.logger = logger
        self.log_interval = log_interval

    def on_generation_ended(self, state):
        if state.generation % self.log_interval != 0 or not state.population:
            return
        fitness = np.array([individual.fitness for individual in state.population], dtype=float)
        best = state.ranker.best(state.population)
        self.logger.info(
            f"Generation {state.generation}: "
            f"Best: {best.fitness:.4f}, "
            f"Avg: {np.nanmean(fitness):.4f}, "
            f"Std: {np.nanstd(fitness):.4f}"
        )
        logfire.info(
            "Evolution Progress",
            evolution_generation=state.generation,
            best_fitness=best.fitness,
            avg_fitness=float(np.nanmean(fitness)),
            std_fitness=float(np.nanstd(fitness))
        )

    def on_evolution_ended(self, state):
        if state.population:
            best = state.ranker.best(state.population)
            self.logger.info(f"Best individual after {state.generation} generations: {best}")


StateTransform = Callable[[EvolutionState], EvolutionState]


def _identity(state: EvolutionState) -> EvolutionState:
    return state


@dataclass(frozen=True)
class EvolutionInterceptor:
    """Transforms the state before and after every generation."""

    before: StateTransform = _identity
    after: StateTransform = _identity

    @classmethod
    def identity(cls) -> "EvolutionInterceptor":
        return cls()
