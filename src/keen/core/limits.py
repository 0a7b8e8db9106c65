"""
Termination Limits.

A limit is a predicate over the evolution state; the engine stops after the
first generation for which any of its limits holds.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional, Union

from keen.constraints import BePositive, BeAtLeast, constraints
from keen.core.listeners import EvolutionListener, EvolutionRecorder
from keen.core.state import EvolutionState


class Limit(ABC):
    """Termination predicate. ``listener`` is registered with the engine when set."""

    listener: Optional[EvolutionListener] = None

    @abstractmethod
    def __call__(self, state: EvolutionState) -> bool:
        """True when the run must stop."""


class MaxGenerations(Limit):
    """Stop once ``max_generations`` generations have run."""

    def __init__(self, max_generations: int):
        with constraints() as scope:
            scope.must(max_generations, BeAtLeast(0), f"The generation limit ({max_generations}) must not be negative")
        self.max_generations = max_generations

    def __call__(self, state):
        return state.generation >= self.max_generations

    def __repr__(self) -> str:
        return f"MaxGenerations({self.max_generations})"


class SteadyGenerations(Limit):
    """Stop once the best fitness has not changed for ``generations`` generations."""

    def __init__(self, generations: int):
        with constraints() as scope:
            scope.must(generations, BePositive(), f"The steady generations ({generations}) must be positive")
        self.generations = generations
        self.listener = EvolutionRecorder()

    def __call__(self, state):
        return self.listener.steady >= self.generations

    def __repr__(self) -> str:
        return f"SteadyGenerations({self.generations})"


class TargetFitness(Limit):
    """
    Stop once an individual reaches the target.

    A numeric target is reached by any fitness at least as good under the
    state's ranker; a predicate target is tested on every fitness.
    """

    def __init__(self, target: Union[float, Callable[[float], bool]]):
        self.target = target

    def __call__(self, state):
        if callable(self.target):
            return any(self.target(individual.fitness) for individual in state.population)
        goal = state.ranker.fitness_transform(self.target)
        return any(state.ranker.fitness_transform(individual.fitness) >= goal for individual in state.population)

    def __repr__(self) -> str:
        return f"TargetFitness({self.target!r})"
