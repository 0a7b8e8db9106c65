"""
Gene Representation for Keen.

A gene is the atomic unit of genetic information. Genes are immutable: every
transformation returns a new instance built with ``duplicate_with_value``.
Number genes carry an inclusive ``range`` and a ``filter`` predicate, and are
valid only when the value lies in the range and passes the filter.
"""

import math
import random
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Generic, List, Sequence, Tuple, TypeVar

from keen.constraints import BeEmpty, constraints
from keen.exceptions import AbsurdOperationError
from keen.utils.randoms import next_char, next_double_in_range, next_int_in_range
from keen.utils.trees import Tree

T = TypeVar("T")

INT_RANGE: Tuple[int, int] = (-(2 ** 31), 2 ** 31 - 1)
DOUBLE_RANGE: Tuple[float, float] = (-sys.float_info.max, sys.float_info.max)
PRINTABLE_RANGE: Tuple[str, str] = (" ", "z")


def accept_all(_value: Any) -> bool:
    """Default gene filter."""
    return True


class Gene(ABC, Generic[T]):
    """
    Base class for genes.

    Subclasses are frozen dataclasses holding a ``value``. The generator
    returns a fresh value respecting the gene's own constraints; ``mutate``
    wraps it in a new gene of the same kind.
    """

    value: T

    def generator(self, rng: random.Random) -> T:
        """Produce a new value for this gene."""
        return self.value

    def mutate(self, rng: random.Random) -> "Gene[T]":
        return self.duplicate_with_value(self.generator(rng))

    def duplicate_with_value(self, value: T) -> "Gene[T]":
        """Copy of this gene holding ``value``; range and filter are kept."""
        return replace(self, value=value)

    def verify(self) -> bool:
        return True

    def flatten(self) -> List[T]:
        return [self.value]


@dataclass(frozen=True)
class BooleanGene(Gene[bool]):
    """A gene holding a truth value."""

    value: bool

    def generator(self, rng: random.Random) -> bool:
        return rng.random() < 0.5

    def negate(self) -> "BooleanGene":
        return BooleanGene(not self.value)

    def to_int(self) -> int:
        return 1 if self.value else 0

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class CharGene(Gene[str]):
    """A gene holding a single character within an inclusive range."""

    value: str
    range: Tuple[str, str] = PRINTABLE_RANGE
    filter: Callable[[str], bool] = field(default=accept_all, compare=False, repr=False)

    def generator(self, rng: random.Random) -> str:
        return next_char(rng, self.range, self.filter)

    def verify(self) -> bool:
        return self.range[0] <= self.value <= self.range[1] and self.filter(self.value)

    def to_int(self) -> int:
        return ord(self.value)

    def __str__(self) -> str:
        return self.value


class NumberGene(Gene[T]):
    """
    A gene holding a number within an inclusive range.

    Mutation regenerates values until one passes the filter. ``average``
    combines this gene with others for arithmetic crossovers.
    """

    range: Tuple[T, T]
    filter: Callable[[T], bool]

    def generator(self, rng: random.Random) -> T:
        while True:
            candidate = self._random_value(rng)
            if self.filter(candidate):
                return candidate

    @abstractmethod
    def _random_value(self, rng: random.Random) -> T:
        """Draw an unfiltered value in range."""

    @abstractmethod
    def average(self, genes: Sequence["NumberGene[T]"]) -> "NumberGene[T]":
        """Mean of this gene and ``genes``, as a gene of this kind."""

    def verify(self) -> bool:
        return self.range[0] <= self.value <= self.range[1] and self.filter(self.value)

    def to_double(self) -> float:
        return float(self.value)

    def to_int(self) -> int:
        return int(self.value)

    def _mean(self, genes: Sequence["NumberGene[T]"]) -> float:
        with constraints() as scope:
            scope.must_not(genes, BeEmpty(), "Cannot average a gene with an empty list of genes")
        values = [self.value] + [gene.value for gene in genes]
        if all(isinstance(value, int) for value in values):
            return sum(values) / len(values)
        # Dividing before summing keeps the mean finite near the float limits
        mean = math.fsum(value / len(values) for value in values)
        return min(max(mean, self.range[0]), self.range[1])

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class IntGene(NumberGene[int]):
    value: int
    range: Tuple[int, int] = INT_RANGE
    filter: Callable[[int], bool] = field(default=accept_all, compare=False, repr=False)

    def _random_value(self, rng: random.Random) -> int:
        return next_int_in_range(rng, self.range)

    def average(self, genes: Sequence["NumberGene[int]"]) -> "IntGene":
        return self.duplicate_with_value(int(self._mean(genes)))


@dataclass(frozen=True)
class DoubleGene(NumberGene[float]):
    value: float
    range: Tuple[float, float] = DOUBLE_RANGE
    filter: Callable[[float], bool] = field(default=accept_all, compare=False, repr=False)

    def _random_value(self, rng: random.Random) -> float:
        return next_double_in_range(rng, self.range)

    def average(self, genes: Sequence["NumberGene[float]"]) -> "DoubleGene":
        return self.duplicate_with_value(self._mean(genes))


@dataclass(frozen=True)
class NothingGene(Gene[Any]):
    """Placeholder gene without a value."""

    @property
    def value(self) -> Any:
        raise AbsurdOperationError("A NothingGene has no value")

    def duplicate_with_value(self, value: Any) -> "NothingGene":
        return self

    def mutate(self, rng: random.Random) -> "NothingGene":
        return self

    def flatten(self) -> List[Any]:
        return []

    def __str__(self) -> str:
        return "Nothing"


@dataclass(frozen=True)
class TreeGene(Gene[Tree]):
    """A gene holding an immutable program tree."""

    value: Tree

    def flatten(self) -> List[Any]:
        return [node.value for node in self.value.nodes]

    def __str__(self) -> str:
        return str(self.value)
