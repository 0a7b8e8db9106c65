"""
Chromosome Representation for Keen.

A chromosome is an immutable, ordered sequence of genes of one kind. Crossover
and mutation never change a chromosome; they build a new one through
``duplicate_with_genes``.

Chromosomes are created by factories. Number and character factories accept a
list of inclusive ranges and a list of filters. Each list may be empty (type
defaults are used), hold a single entry (broadcast to every gene) or hold
exactly one entry per gene.
"""

import random
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Any, Callable, Generic, Iterable, List, Optional, Tuple, Type, TypeVar

from keen.constraints import BePositive, BeWeaklyOrdered, DoubleBeInRange, HaveSize, constraints
from keen.core.genes import (
    DOUBLE_RANGE,
    INT_RANGE,
    BooleanGene,
    CharGene,
    DoubleGene,
    Gene,
    IntGene,
    NothingGene,
    TreeGene,
    accept_all,
)
from keen.utils.randoms import CHAR_RANGE

G = TypeVar("G", bound=Gene)


@dataclass(frozen=True)
class Chromosome(Sequence, Generic[G]):
    """Ordered, immutable collection of genes."""

    genes: Tuple[G, ...]

    def __post_init__(self):
        object.__setattr__(self, "genes", tuple(self.genes))

    def __len__(self) -> int:
        return len(self.genes)

    def __getitem__(self, index):
        return self.genes[index]

    def __iter__(self):
        return iter(self.genes)

    @property
    def size(self) -> int:
        return len(self.genes)

    def verify(self) -> bool:
        """A chromosome is valid when every gene is valid."""
        return all(gene.verify() for gene in self.genes)

    def duplicate_with_genes(self, genes: Iterable[G]) -> "Chromosome[G]":
        return replace(self, genes=tuple(genes))

    def flatten(self) -> List[Any]:
        return [value for gene in self.genes for value in gene.flatten()]

    def __str__(self) -> str:
        return "[" + "|".join(str(gene) for gene in self.genes) + "]"


class BooleanChromosome(Chromosome[BooleanGene]):
    """Chromosome of truth values."""

    @property
    def true_count(self) -> int:
        return sum(1 for gene in self.genes if gene.value)


class CharChromosome(Chromosome[CharGene]):
    """Chromosome of characters."""

    def to_string(self) -> str:
        return "".join(gene.value for gene in self.genes)


class IntChromosome(Chromosome[IntGene]):
    pass


class DoubleChromosome(Chromosome[DoubleGene]):
    pass


class NothingChromosome(Chromosome[NothingGene]):
    pass


class TreeChromosome(Chromosome[TreeGene]):
    pass


class ChromosomeFactory(ABC, Generic[G]):
    """Builds chromosomes of a fixed size."""

    def __init__(self, size: int):
        self.size = size

    @abstractmethod
    def make(self, rng: random.Random) -> Chromosome[G]:
        """Create a new random chromosome."""


class ConstrainedChromosomeFactory(ChromosomeFactory[G]):
    """
    Factory for chromosomes whose genes have per-position ranges and filters.

    Every inconsistency between ``size``, ``ranges`` and ``filters`` is
    reported at construction time in a single CompositeError.
    """

    chromosome_class: Type[Chromosome] = Chromosome
    default_range: Tuple[Any, Any] = (None, None)

    def __init__(
        self,
        size: int,
        ranges: Optional[List[Tuple[Any, Any]]] = None,
        filters: Optional[List[Callable[[Any], bool]]] = None
    ):
        super().__init__(size)
        self.ranges = list(ranges or [])
        self.filters = list(filters or [])
        self.enforce_constraints()

    def enforce_constraints(self) -> None:
        with constraints() as scope:
            scope.must(self.size, BePositive(), f"The chromosome size ({self.size}) must be positive")
            if len(self.ranges) > 1:
                scope.must(
                    self.ranges, HaveSize(self.size),
                    f"When more than one range is given, the number of ranges ({len(self.ranges)}) "
                    f"must equal the chromosome size ({self.size})"
                )
            if len(self.filters) > 1:
                scope.must(
                    self.filters, HaveSize(self.size),
                    f"When more than one filter is given, the number of filters ({len(self.filters)}) "
                    f"must equal the chromosome size ({self.size})"
                )
            for lo, hi in self.ranges:
                scope.must((lo, hi), BeWeaklyOrdered(), f"The range ({lo!r}, {hi!r}) cannot be empty")

    def range_at(self, index: int) -> Tuple[Any, Any]:
        if not self.ranges:
            return self.default_range
        return self.ranges[index % len(self.ranges)]

    def filter_at(self, index: int) -> Callable[[Any], bool]:
        if not self.filters:
            return accept_all
        return self.filters[index % len(self.filters)]

    def make(self, rng: random.Random) -> Chromosome[G]:
        return self.chromosome_class(tuple(
            self.make_gene(rng, self.range_at(i), self.filter_at(i)) for i in range(self.size)
        ))

    @abstractmethod
    def make_gene(self, rng: random.Random, bounds: Tuple[Any, Any], filter: Callable[[Any], bool]) -> G:
        """Create a random gene respecting ``bounds`` and ``filter``."""


class IntChromosomeFactory(ConstrainedChromosomeFactory[IntGene]):
    chromosome_class = IntChromosome
    default_range = INT_RANGE

    def make_gene(self, rng, bounds, filter):
        return IntGene(bounds[0], bounds, filter).mutate(rng)


class DoubleChromosomeFactory(ConstrainedChromosomeFactory[DoubleGene]):
    chromosome_class = DoubleChromosome
    default_range = DOUBLE_RANGE

    def make_gene(self, rng, bounds, filter):
        return DoubleGene(bounds[0], bounds, filter).mutate(rng)


class CharChromosomeFactory(ConstrainedChromosomeFactory[CharGene]):
    chromosome_class = CharChromosome
    default_range = CHAR_RANGE

    def make_gene(self, rng, bounds, filter):
        return CharGene(bounds[0], bounds, filter).mutate(rng)


class BooleanChromosomeFactory(ChromosomeFactory[BooleanGene]):
    """Each gene is true with probability ``true_rate``."""

    def __init__(self, size: int, true_rate: float = 0.5):
        super().__init__(size)
        self.true_rate = true_rate
        with constraints() as scope:
            scope.must(size, BePositive(), f"The chromosome size ({size}) must be positive")
            scope.must(
                true_rate, DoubleBeInRange(0.0, 1.0),
                f"The true rate ({true_rate}) must be in 0.0..1.0"
            )

    def make(self, rng: random.Random) -> BooleanChromosome:
        return BooleanChromosome(tuple(BooleanGene(rng.random() < self.true_rate) for _ in range(self.size)))


class NothingChromosomeFactory(ChromosomeFactory[NothingGene]):

    def __init__(self, size: int):
        super().__init__(size)
        with constraints() as scope:
            scope.must(size, BePositive(), f"The chromosome size ({size}) must be positive")

    def make(self, rng: random.Random) -> NothingChromosome:
        return NothingChromosome(tuple(NothingGene() for _ in range(self.size)))
