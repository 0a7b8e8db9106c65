"""
Evolution state and result values.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence

from keen.constraints import BeAtLeast, constraints
from keen.core.genotype import Individual
from keen.core.ranking import FitnessMaxRanker, IndividualRanker


@dataclass(frozen=True)
class EvolutionState:
    """Snapshot of a run between two stages of the generational loop."""

    population: List[Individual] = field(default_factory=list)
    generation: int = 0
    ranker: IndividualRanker = field(default_factory=FitnessMaxRanker)

    def __post_init__(self):
        object.__setattr__(self, "population", list(self.population))
        with constraints() as scope:
            scope.must(self.generation, BeAtLeast(0), f"The generation ({self.generation}) must not be negative")

    @property
    def size(self) -> int:
        return len(self.population)

    def is_empty(self) -> bool:
        return not self.population

    def with_population(self, population: Sequence[Individual]) -> "EvolutionState":
        return replace(self, population=list(population))

    def next_generation(self) -> "EvolutionState":
        return replace(self, generation=self.generation + 1)

    def best(self) -> Optional[Individual]:
        if not self.population:
            return None
        return self.ranker.best(self.population)


@dataclass(frozen=True)
class EvolutionResult:
    """Outcome of a run."""

    population: List[Individual]
    best: Optional[Individual]
    generation: int
    duration: float
    evaluations: int

    @property
    def fitness(self) -> float:
        return self.best.fitness if self.best else float("nan")
