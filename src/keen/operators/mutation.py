"""
Mutation Operators for Keen.

A mutator visits each individual with probability ``individual_rate`` and
each of its chromosomes with probability ``chromosome_rate``. Mutated
individuals lose their fitness; untouched individuals keep it, so they are not
evaluated again.
"""

import random
from abc import abstractmethod
from typing import Dict, List, NamedTuple, Optional, Tuple

from keen.constraints import DoubleBeInRange, constraints
from keen.core.chromosomes import Chromosome
from keen.core.genes import BooleanGene, Gene, TreeGene
from keen.core.genotype import Genotype, Individual, Population
from keen.exceptions import MutationError
from keen.operators.base import Alterer
from keen.utils.collections import swap
from keen.utils.randoms import indices


class ChromosomeMutationResult(NamedTuple):
    chromosome: Chromosome
    mutations: int


class Mutator(Alterer):
    """
    Base class for mutators.

    Args:
        individual_rate: Probability that an individual is mutated at all
        chromosome_rate: Probability that each chromosome of a mutated individual is visited
        rates: Further named probabilities checked together with the two rates above
    """

    def __init__(
        self,
        individual_rate: float = 0.5,
        chromosome_rate: float = 0.5,
        rates: Optional[Dict[str, float]] = None
    ):
        with constraints() as scope:
            checked = {"individual rate": individual_rate, "chromosome rate": chromosome_rate}
            checked.update(rates or {})
            for name, rate in checked.items():
                scope.must(rate, DoubleBeInRange(0.0, 1.0), f"The {name} ({rate}) must be in 0.0..1.0")
        self.individual_rate = individual_rate
        self.chromosome_rate = chromosome_rate

    @property
    def probability(self) -> float:
        return self.individual_rate

    def __call__(self, population: Population, output_size: int, rng: random.Random) -> Population:
        if self.individual_rate == 0.0:
            return list(population)
        return [
            self.mutate_individual(individual, rng) if rng.random() < self.individual_rate else individual
            for individual in population
        ]

    def mutate_individual(self, individual: Individual, rng: random.Random) -> Individual:
        chromosomes = []
        mutations = 0
        for chromosome in individual.genotype:
            if rng.random() < self.chromosome_rate:
                result = self.mutate_chromosome(chromosome, rng)
                chromosomes.append(result.chromosome)
                mutations += result.mutations
            else:
                chromosomes.append(chromosome)
        if mutations == 0:
            return individual
        return Individual(Genotype(tuple(chromosomes)))

    @abstractmethod
    def mutate_chromosome(self, chromosome: Chromosome, rng: random.Random) -> ChromosomeMutationResult:
        """Return a mutated copy of ``chromosome`` and the number of mutations applied."""

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(individual_rate={self.individual_rate}, "
                f"chromosome_rate={self.chromosome_rate})")


def _boundaries(rng: random.Random, size: int, probability: float) -> Tuple[int, int]:
    """Scan for a segment start where a coin falls under ``probability``, then for its end."""
    start, end = 0, size - 1
    for i in range(size):
        if rng.random() < probability:
            start = i
            break
    for i in range(start, size):
        if rng.random() > probability:
            end = i
            break
    return start, end


class RandomMutator(Mutator):
    """Replaces genes by fresh random values that respect their constraints."""

    def __init__(self, individual_rate: float = 0.5, chromosome_rate: float = 0.5, gene_rate: float = 0.5):
        super().__init__(individual_rate, chromosome_rate, {"gene rate": gene_rate})
        self.gene_rate = gene_rate

    def mutate_chromosome(self, chromosome, rng):
        if self.individual_rate == 0.0 or self.gene_rate == 0.0:
            return ChromosomeMutationResult(chromosome, 0)
        genes: List[Gene] = []
        mutations = 0
        for gene in chromosome:
            if rng.random() < self.gene_rate:
                genes.append(gene.mutate(rng))
                mutations += 1
            else:
                genes.append(gene)
        return ChromosomeMutationResult(chromosome.duplicate_with_genes(genes), mutations)


class SwapMutator(Mutator):
    """Swaps randomly picked genes with genes at uniform random positions."""

    def __init__(self, individual_rate: float = 0.5, chromosome_rate: float = 0.5, swap_rate: float = 0.5):
        super().__init__(individual_rate, chromosome_rate, {"swap rate": swap_rate})
        self.swap_rate = swap_rate

    def mutate_chromosome(self, chromosome, rng):
        size = len(chromosome)
        if size < 2:
            return ChromosomeMutationResult(chromosome, 0)
        genes = list(chromosome.genes)
        mutations = 0
        for i in indices(rng, self.swap_rate, size):
            swap(genes, i, rng.randrange(size))
            mutations += 1
        return ChromosomeMutationResult(chromosome.duplicate_with_genes(genes), mutations)


class InversionMutator(Mutator):
    """Reverses a contiguous segment found by a boundary probability scan."""

    def __init__(
        self,
        individual_rate: float = 0.5,
        chromosome_rate: float = 0.5,
        inversion_boundary_probability: float = 0.5
    ):
        super().__init__(
            individual_rate, chromosome_rate, {"inversion boundary probability": inversion_boundary_probability}
        )
        self.inversion_boundary_probability = inversion_boundary_probability

    def mutate_chromosome(self, chromosome, rng):
        size = len(chromosome)
        if size < 2:
            return ChromosomeMutationResult(chromosome, 0)
        start, end = _boundaries(rng, size, self.inversion_boundary_probability)
        if start >= end:
            return ChromosomeMutationResult(chromosome, 0)
        return ChromosomeMutationResult(chromosome.duplicate_with_genes(self.invert(chromosome.genes, start, end)), 1)

    @staticmethod
    def invert(genes, start: int, end: int) -> List[Gene]:
        """Copy of ``genes`` with ``[start, end]`` reversed."""
        genes = list(genes)
        genes[start:end + 1] = genes[start:end + 1][::-1]
        return genes


class PartialShuffleMutator(Mutator):
    """Shuffles a contiguous segment found by a boundary probability scan."""

    def __init__(
        self,
        individual_rate: float = 0.5,
        chromosome_rate: float = 0.5,
        shuffle_boundary_probability: float = 0.5
    ):
        super().__init__(
            individual_rate, chromosome_rate, {"shuffle boundary probability": shuffle_boundary_probability}
        )
        self.shuffle_boundary_probability = shuffle_boundary_probability

    def mutate_chromosome(self, chromosome, rng):
        size = len(chromosome)
        if size < 2:
            return ChromosomeMutationResult(chromosome, 0)
        start, end = _boundaries(rng, size, self.shuffle_boundary_probability)
        if start >= end:
            return ChromosomeMutationResult(chromosome, 0)
        genes = list(chromosome.genes)
        segment = genes[start:end + 1]
        rng.shuffle(segment)
        genes[start:end + 1] = segment
        return ChromosomeMutationResult(chromosome.duplicate_with_genes(genes), 1)


class BitFlipMutator(Mutator):
    """Negates boolean genes."""

    def __init__(self, individual_rate: float = 0.5, chromosome_rate: float = 0.5, flip_rate: float = 0.5):
        super().__init__(individual_rate, chromosome_rate, {"flip rate": flip_rate})
        self.flip_rate = flip_rate

    def mutate_chromosome(self, chromosome, rng):
        with constraints() as scope:
            scope.check(
                all(isinstance(gene, BooleanGene) for gene in chromosome),
                "Bit flip mutation requires a chromosome of boolean genes",
                error=MutationError
            )
        genes = []
        mutations = 0
        for gene in chromosome:
            if rng.random() < self.flip_rate:
                genes.append(gene.negate())
                mutations += 1
            else:
                genes.append(gene)
        return ChromosomeMutationResult(chromosome.duplicate_with_genes(genes), mutations)


class PointMutator(Mutator):
    """
    Point mutation for tree genes.

    A mutated gene takes as its new value a random node of its own tree whose
    arity matches the arity of the tree's root.
    """

    def __init__(self, individual_rate: float = 0.5, chromosome_rate: float = 0.5, gene_rate: float = 0.5):
        super().__init__(individual_rate, chromosome_rate, {"gene rate": gene_rate})
        self.gene_rate = gene_rate

    def mutate_chromosome(self, chromosome, rng):
        with constraints() as scope:
            scope.check(
                all(isinstance(gene, TreeGene) for gene in chromosome),
                "Point mutation requires a chromosome of tree genes",
                error=MutationError
            )
        genes = []
        mutations = 0
        for gene in chromosome:
            if rng.random() < self.gene_rate:
                candidates = [node for node in gene.value.nodes if node.arity == gene.value.arity]
                genes.append(gene.duplicate_with_value(candidates[rng.randrange(len(candidates))]))
                mutations += 1
            else:
                genes.append(gene)
        return ChromosomeMutationResult(chromosome.duplicate_with_genes(genes), mutations)
