"""
Genotype and Individual for Keen.

A genotype is the full genetic encoding of a candidate solution: an ordered,
non-empty tuple of chromosomes. An individual pairs a genotype with its
fitness, which stays NaN until an evaluator scores it.
"""

import math
import random
from dataclasses import dataclass, field, replace
from typing import Any, Iterator, List, Sequence, Tuple

from keen.constraints import BeEmpty, IntBeInRange, constraints
from keen.core.chromosomes import Chromosome, ChromosomeFactory
from keen.exceptions import InvalidIndexError


@dataclass(frozen=True)
class Genotype:
    """Ordered collection of chromosomes."""

    chromosomes: Tuple[Chromosome, ...]

    def __post_init__(self):
        object.__setattr__(self, "chromosomes", tuple(self.chromosomes))
        with constraints() as scope:
            scope.must_not(self.chromosomes, BeEmpty(), "A genotype must have at least one chromosome")

    def __len__(self) -> int:
        return len(self.chromosomes)

    def __iter__(self) -> Iterator[Chromosome]:
        return iter(self.chromosomes)

    def __getitem__(self, index: int) -> Chromosome:
        with constraints() as scope:
            scope.must(
                index, IntBeInRange(-len(self.chromosomes), len(self.chromosomes) - 1),
                f"The index ({index}) must be in range for a genotype of {len(self.chromosomes)} chromosomes",
                error=InvalidIndexError
            )
        return self.chromosomes[index]

    @property
    def size(self) -> int:
        return len(self.chromosomes)

    def verify(self) -> bool:
        return all(chromosome.verify() for chromosome in self.chromosomes)

    def duplicate_with_chromosomes(self, chromosomes: Sequence[Chromosome]) -> "Genotype":
        return Genotype(tuple(chromosomes))

    def flatten(self) -> List[Any]:
        """Values of every gene, chromosome by chromosome."""
        return [value for chromosome in self.chromosomes for value in chromosome.flatten()]

    def __str__(self) -> str:
        return "[" + ", ".join(str(chromosome) for chromosome in self.chromosomes) + "]"


class GenotypeFactory:
    """Builds genotypes with one chromosome per configured factory."""

    def __init__(self, chromosome_factories: Sequence[ChromosomeFactory]):
        self.chromosome_factories = list(chromosome_factories)
        with constraints() as scope:
            scope.must_not(
                self.chromosome_factories, BeEmpty(),
                "A genotype factory needs at least one chromosome factory"
            )

    def make(self, rng: random.Random) -> Genotype:
        return Genotype(tuple(factory.make(rng) for factory in self.chromosome_factories))


@dataclass(frozen=True)
class Individual:
    """
    A candidate solution.

    Individuals are values: ``with_fitness`` returns a new instance. Ordering
    compares fitness only.
    """

    genotype: Genotype
    fitness: float = field(default=math.nan)

    @property
    def is_evaluated(self) -> bool:
        return not math.isnan(self.fitness)

    def verify(self) -> bool:
        return self.genotype.verify() and self.is_evaluated

    def with_fitness(self, fitness: float) -> "Individual":
        return replace(self, fitness=fitness)

    def flatten(self) -> List[Any]:
        return self.genotype.flatten()

    def __lt__(self, other: "Individual") -> bool:
        """Compare individuals by fitness (for sorting)."""
        return self.fitness < other.fitness

    def __str__(self) -> str:
        return f"{self.genotype} -> {self.fitness}"


Population = List[Individual]
