"""
Fitness Evaluators.

Evaluators score every unevaluated individual of a state. Individuals that
already carry a fitness are never scored again unless ``force`` is set. The
random source of the run is never handed to an evaluator.
"""

import multiprocessing
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Dict, List, Optional

from keen.core.genotype import Genotype
from keen.core.state import EvolutionState

FitnessFunction = Callable[[Genotype], float]


class EvaluationExecutor(ABC):
    """Base class for evaluators."""

    def __init__(self, fitness_function: FitnessFunction):
        self.fitness_function = fitness_function
        self.evaluations = 0

    def __call__(self, state: EvolutionState, force: bool = False) -> EvolutionState:
        population = list(state.population)
        pending = [i for i, individual in enumerate(population) if force or not individual.is_evaluated]
        if not pending:
            return state
        scores = self.score([population[i].genotype for i in pending])
        for i, fitness in zip(pending, scores):
            population[i] = population[i].with_fitness(fitness)
        self.evaluations += len(pending)
        return state.with_population(population)

    @abstractmethod
    def score(self, genotypes: List[Genotype]) -> List[float]:
        """Fitness of each genotype, in order."""

    def shutdown(self) -> None:
        """Release any worker resources."""


class SequentialEvaluator(EvaluationExecutor):
    """Evaluate individuals sequentially."""

    def score(self, genotypes):
        return [float(self.fitness_function(genotype)) for genotype in genotypes]


class ConcurrentEvaluator(EvaluationExecutor):
    """
    Evaluate individuals in parallel on a thread pool.

    Genotypes are split into chunks of ``chunk_size``; ``score`` returns only
    after every chunk has completed. An exception raised by the fitness
    function propagates unchanged.
    """

    def __init__(self, fitness_function: FitnessFunction, num_workers: Optional[int] = None, chunk_size: int = 10):
        super().__init__(fitness_function)
        self.num_workers = num_workers or multiprocessing.cpu_count()
        self.chunk_size = chunk_size
        self.executor: Optional[ThreadPoolExecutor] = None

    def score(self, genotypes):
        if self.executor is None:
            self.executor = ThreadPoolExecutor(max_workers=self.num_workers)
        chunks = [genotypes[i:i + self.chunk_size] for i in range(0, len(genotypes), self.chunk_size)]

        futures = {self.executor.submit(self._evaluate_chunk, chunk): index for index, chunk in enumerate(chunks)}

        # Wait for all evaluations to complete
        results: Dict[int, List[float]] = {}
        for future in as_completed(futures):
            results[futures[future]] = future.result()
        return [fitness for index in range(len(chunks)) for fitness in results[index]]

    def _evaluate_chunk(self, genotypes: List[Genotype]) -> List[float]:
        return [float(self.fitness_function(genotype)) for genotype in genotypes]

    def shutdown(self) -> None:
        if self.executor is not None:
            self.executor.shutdown(wait=True, cancel_futures=True)
            self.executor = None
