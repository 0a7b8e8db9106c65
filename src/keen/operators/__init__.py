"""
Keen Operators - selection, crossover and mutation.
"""

from keen.operators.base import Alterer
from keen.operators.selection import (
    ProbabilitySelector,
    RandomSelector,
    RouletteWheelSelector,
    Selector,
    TournamentSelector
)
from keen.operators.crossover import (
    AverageCrossover,
    CombineCrossover,
    Crossover,
    OrderedCrossover,
    PartiallyMappedCrossover,
    PermutationCrossover,
    PositionBasedCrossover,
    SinglePointCrossover
)
from keen.operators.mutation import (
    BitFlipMutator,
    ChromosomeMutationResult,
    InversionMutator,
    Mutator,
    PartialShuffleMutator,
    PointMutator,
    RandomMutator,
    SwapMutator
)

__all__ = [
    "Alterer",

    # Selection
    "Selector",
    "RandomSelector",
    "TournamentSelector",
    "ProbabilitySelector",
    "RouletteWheelSelector",

    # Crossover
    "Crossover",
    "SinglePointCrossover",
    "CombineCrossover",
    "AverageCrossover",
    "PermutationCrossover",
    "PartiallyMappedCrossover",
    "PositionBasedCrossover",
    "OrderedCrossover",

    # Mutation
    "Mutator",
    "ChromosomeMutationResult",
    "RandomMutator",
    "SwapMutator",
    "InversionMutator",
    "PartialShuffleMutator",
    "BitFlipMutator",
    "PointMutator"
]
