"""
Crossover Operators for Keen.

A crossover recombines the genotypes of ``num_parents`` parents into
``num_offspring`` offspring. Each chromosome position takes part in the
recombination with probability ``chromosome_rate``; positions that do not are
copied from the first parent.
"""

import random
from abc import abstractmethod
from collections import Counter
from typing import Callable, Dict, List, Optional, Sequence

from keen.constraints import BeAtLeast, BeEmpty, BePermutation, DoubleBeInRange, HaveSize, constraints
from keen.core.chromosomes import Chromosome
from keen.core.genes import Gene, NumberGene
from keen.core.genotype import Genotype, Individual, Population
from keen.exceptions import CrossoverError
from keen.operators.base import Alterer
from keen.utils.collections import transpose
from keen.utils.randoms import indices, sample_indices, subsets


class Crossover(Alterer):
    """
    Base class for crossovers.

    Args:
        num_offspring: Offspring produced by one recombination
        num_parents: Parents consumed by one recombination
        chromosome_rate: Probability that a chromosome position is recombined
        exclusivity: Whether a parent may take part in a single parent set only
        rates: Further named probabilities checked together with the chromosome rate
    """

    def __init__(
        self,
        num_offspring: int,
        num_parents: int,
        chromosome_rate: float,
        exclusivity: bool = False,
        rates: Optional[Dict[str, float]] = None
    ):
        with constraints() as scope:
            checked = {"chromosome rate": chromosome_rate}
            checked.update(rates or {})
            for name, rate in checked.items():
                scope.must(rate, DoubleBeInRange(0.0, 1.0), f"The {name} ({rate}) must be in 0.0..1.0")
            scope.must(num_parents, BeAtLeast(2), f"The number of parents ({num_parents}) must be at least 2")
            scope.must(num_offspring, BeAtLeast(1), f"The number of offspring ({num_offspring}) must be positive")
        self.num_offspring = num_offspring
        self.num_parents = num_parents
        self.chromosome_rate = chromosome_rate
        self.exclusivity = exclusivity

    def __call__(self, population: Population, output_size: int, rng: random.Random) -> Population:
        if output_size == 0:
            return []
        pool = list(population)
        # Pools smaller than a parent set are repeated until one fits
        while len(pool) < self.num_parents:
            pool.extend(population)
        parent_sets = subsets(rng, pool, self.num_parents, self.exclusivity)
        offspring: List[Genotype] = []
        while len(offspring) < output_size:
            parents = parent_sets[rng.randrange(len(parent_sets))]
            offspring.extend(self.crossover([parent.genotype for parent in parents], rng))
        return [Individual(genotype) for genotype in offspring[:output_size]]

    def crossover(self, parent_genotypes: Sequence[Genotype], rng: random.Random) -> List[Genotype]:
        """Recombine ``num_parents`` genotypes into ``num_offspring`` genotypes."""
        with constraints() as scope:
            scope.must(
                parent_genotypes, HaveSize(self.num_parents),
                f"The number of inputs ({len(parent_genotypes)}) must match the number of parents "
                f"({self.num_parents})",
                error=CrossoverError
            )
            if parent_genotypes:
                first = len(parent_genotypes[0])
                for i, genotype in enumerate(parent_genotypes):
                    scope.must(
                        genotype.chromosomes, HaveSize(first),
                        f"Parent {i} has {len(genotype)} chromosomes but parent 0 has {first}",
                        error=CrossoverError
                    )
                    scope.must_not(genotype.chromosomes, BeEmpty(), f"Parent {i} has no chromosomes", error=CrossoverError)

        size = len(parent_genotypes[0])
        chosen = set(indices(rng, self.chromosome_rate, size))
        columns = []
        for position in range(size):
            chromosomes = [genotype[position] for genotype in parent_genotypes]
            if position in chosen:
                crossed = self.crossover_chromosomes(chromosomes, rng)
            else:
                crossed = [chromosomes[0]] * self.num_offspring
            columns.append(crossed)
        return [Genotype(tuple(chromosomes)) for chromosomes in transpose(columns)]

    def crossover_chromosomes(self, chromosomes: Sequence[Chromosome], rng: random.Random) -> List[Chromosome]:
        """Validate the chromosomes of one position and recombine them."""
        with constraints() as scope:
            length = len(chromosomes[0]) if chromosomes else 0
            for i, chromosome in enumerate(chromosomes):
                scope.must_not(chromosome, BeEmpty(), f"Chromosome {i} cannot be empty")
                scope.must(
                    chromosome, HaveSize(length),
                    f"Chromosome {i} has {len(chromosome)} genes but chromosome 0 has {length}"
                )
        return self.recombine(list(chromosomes), rng)

    @abstractmethod
    def recombine(self, chromosomes: List[Chromosome], rng: random.Random) -> List[Chromosome]:
        """Recombine validated chromosomes of equal length."""


class SinglePointCrossover(Crossover):
    """Exchanges the tails of two chromosomes after a random cut point."""

    def __init__(self, chromosome_rate: float = 1.0, exclusivity: bool = False):
        super().__init__(num_offspring=2, num_parents=2, chromosome_rate=chromosome_rate, exclusivity=exclusivity)

    def recombine(self, chromosomes, rng):
        length = len(chromosomes[0])
        if length < 2:
            return list(chromosomes)
        return self.crossover_at(rng.randrange(1, length), chromosomes)

    def crossover_at(self, cut: int, chromosomes: Sequence[Chromosome]) -> List[Chromosome]:
        first, second = chromosomes
        genes1, genes2 = list(first.genes), list(second.genes)
        return [
            first.duplicate_with_genes(genes1[:cut] + genes2[cut:]),
            second.duplicate_with_genes(genes2[:cut] + genes1[cut:])
        ]


class CombineCrossover(Crossover):
    """
    Merges the genes found at each position of all parents into one offspring.

    Each position is replaced by ``combiner(genes)`` with probability
    ``gene_rate`` and otherwise copied from the first parent.
    """

    def __init__(
        self,
        combiner: Callable[[List[Gene]], Gene],
        chromosome_rate: float = 1.0,
        gene_rate: float = 1.0,
        num_parents: int = 2,
        exclusivity: bool = False
    ):
        super().__init__(
            num_offspring=1,
            num_parents=num_parents,
            chromosome_rate=chromosome_rate,
            exclusivity=exclusivity,
            rates={"gene rate": gene_rate}
        )
        self.combiner = combiner
        self.gene_rate = gene_rate

    def recombine(self, chromosomes, rng):
        return [self.combine(chromosomes, rng)]

    def combine(self, chromosomes: Sequence[Chromosome], rng: random.Random) -> Chromosome:
        first = chromosomes[0]
        genes = []
        for position in range(len(first)):
            if rng.random() < self.gene_rate:
                genes.append(self.combiner([chromosome[position] for chromosome in chromosomes]))
            else:
                genes.append(first[position])
        return first.duplicate_with_genes(genes)


def average_genes(genes: List[NumberGene]) -> NumberGene:
    """Arithmetic mean of the genes, built from the first one."""
    return genes[0].average(genes[1:])


class AverageCrossover(CombineCrossover):
    """Offspring genes are the mean of the parents' genes."""

    def __init__(
        self,
        chromosome_rate: float = 1.0,
        gene_rate: float = 1.0,
        num_parents: int = 2,
        exclusivity: bool = False
    ):
        super().__init__(
            average_genes,
            chromosome_rate=chromosome_rate,
            gene_rate=gene_rate,
            num_parents=num_parents,
            exclusivity=exclusivity
        )


class PermutationCrossover(Crossover):
    """
    Crossover for chromosomes that encode permutations.

    Every parent must hold each gene at most once and all parents must hold
    the same genes. Offspring hold exactly the genes of their parents.
    """

    def __init__(
        self,
        num_offspring: int = 2,
        num_parents: int = 2,
        chromosome_rate: float = 1.0,
        exclusivity: bool = False
    ):
        super().__init__(num_offspring, num_parents, chromosome_rate, exclusivity)

    def recombine(self, chromosomes, rng):
        with constraints() as scope:
            reference = Counter(chromosomes[0].genes)
            for i, chromosome in enumerate(chromosomes):
                scope.must(
                    list(chromosome.genes), BePermutation(),
                    f"Chromosome {i} must be a permutation (no duplicated genes)"
                )
                scope.check(
                    Counter(chromosome.genes) == reference,
                    f"Chromosome {i} must hold the same genes as chromosome 0",
                    error=CrossoverError
                )
        return self.permute_chromosomes(chromosomes, rng)

    @abstractmethod
    def permute_chromosomes(self, chromosomes: List[Chromosome], rng: random.Random) -> List[Chromosome]:
        """Recombine permutations."""


class PartiallyMappedCrossover(PermutationCrossover):
    """
    PMX.

    The ``[lo, hi)`` slice of each offspring comes verbatim from the opposite
    parent. Genes outside the slice that would repeat a gene of the slice are
    replaced by following the mapping between the two slices.
    """

    def __init__(self, chromosome_rate: float = 1.0, exclusivity: bool = False):
        super().__init__(num_offspring=2, num_parents=2, chromosome_rate=chromosome_rate, exclusivity=exclusivity)

    def permute_chromosomes(self, chromosomes, rng):
        length = len(chromosomes[0])
        if length < 2:
            return list(chromosomes)
        lo, hi = sample_indices(rng, 2, length + 1)
        return self.crossover_between(lo, hi, chromosomes)

    def crossover_between(self, lo: int, hi: int, chromosomes: Sequence[Chromosome]) -> List[Chromosome]:
        first, second = chromosomes
        genes1, genes2 = list(first.genes), list(second.genes)
        return [
            first.duplicate_with_genes(self._map(genes1, genes2, lo, hi)),
            second.duplicate_with_genes(self._map(genes2, genes1, lo, hi))
        ]

    @staticmethod
    def _map(own: List[Gene], other: List[Gene], lo: int, hi: int) -> List[Gene]:
        middle = other[lo:hi]
        mapping = {other[i]: own[i] for i in range(lo, hi)}
        child = list(own)
        child[lo:hi] = middle
        for i in list(range(lo)) + list(range(hi, len(own))):
            gene = own[i]
            while gene in mapping:
                gene = mapping[gene]
            child[i] = gene
        return child


class PositionBasedCrossover(PermutationCrossover):
    """
    Keeps randomly chosen positions of one parent and fills the others with
    the missing genes in the order of the other parent.
    """

    def __init__(self, chromosome_rate: float = 1.0, exclusivity: bool = False):
        super().__init__(num_offspring=2, num_parents=2, chromosome_rate=chromosome_rate, exclusivity=exclusivity)

    def permute_chromosomes(self, chromosomes, rng):
        length = len(chromosomes[0])
        positions = indices(rng, 1.0 / length, length)
        return self.crossover_at(positions, chromosomes)

    def crossover_at(self, positions: Sequence[int], chromosomes: Sequence[Chromosome]) -> List[Chromosome]:
        first, second = chromosomes
        genes1, genes2 = list(first.genes), list(second.genes)
        return [
            first.duplicate_with_genes(self._fill(genes1, genes2, positions)),
            second.duplicate_with_genes(self._fill(genes2, genes1, positions))
        ]

    @staticmethod
    def _fill(own: List[Gene], other: List[Gene], positions: Sequence[int]) -> List[Gene]:
        kept = {i: own[i] for i in positions}
        kept_genes = set(kept.values())
        donors = iter(gene for gene in other if gene not in kept_genes)
        return [kept[i] if i in kept else next(donors) for i in range(len(own))]


class OrderedCrossover(PermutationCrossover):
    """
    OX.

    The segment ``[start, end]`` of one parent is kept in place; the remaining
    genes follow in the order they appear in the other parent.
    """

    def __init__(self, chromosome_rate: float = 1.0, exclusivity: bool = False):
        super().__init__(num_offspring=2, num_parents=2, chromosome_rate=chromosome_rate, exclusivity=exclusivity)

    def permute_chromosomes(self, chromosomes, rng):
        length = len(chromosomes[0])
        if length < 2:
            return list(chromosomes)
        start, end = sample_indices(rng, 2, length)
        return self.crossover_between(start, end, chromosomes)

    def crossover_between(self, start: int, end: int, chromosomes: Sequence[Chromosome]) -> List[Chromosome]:
        first, second = chromosomes
        genes1, genes2 = list(first.genes), list(second.genes)
        return [
            first.duplicate_with_genes(self._order(genes1, genes2, start, end)),
            second.duplicate_with_genes(self._order(genes2, genes1, start, end))
        ]

    @staticmethod
    def _order(own: List[Gene], other: List[Gene], start: int, end: int) -> List[Gene]:
        segment = own[start:end + 1]
        kept = set(segment)
        rest = [gene for gene in other if gene not in kept]
        return rest[:start] + segment + rest[start:]
