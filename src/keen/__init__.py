"""
Keen Genetic Algorithm Toolkit.

This package evolves populations of candidate solutions through selection,
crossover and mutation, guided by a fitness function supplied by the caller.
Genetic structures are immutable and every operator validates its arguments
through the constraint engine in ``keen.constraints``.
"""

from keen.exceptions import (
    KeenError,
    ConstraintError,
    IntConstraintError,
    DoubleConstraintError,
    CollectionConstraintError,
    PairConstraintError,
    SelectionError,
    CrossoverError,
    MutationError,
    EngineError,
    InvalidIndexError,
    CompositeError,
    AbsurdOperationError
)
from keen.constraints import constraints, skip_checks, checks_skipped
from keen.core import (
    KeenConfig,
    EvolutionParameters,
    LoggingConfig,
    ParallelizationConfig,
    create_default_config,
    create_test_config,
    create_production_config,
    configure_logfire,
    BooleanGene,
    CharGene,
    IntGene,
    DoubleGene,
    NothingGene,
    TreeGene,
    Chromosome,
    BooleanChromosomeFactory,
    CharChromosomeFactory,
    IntChromosomeFactory,
    DoubleChromosomeFactory,
    NothingChromosomeFactory,
    Genotype,
    GenotypeFactory,
    Individual,
    FitnessMaxRanker,
    FitnessMinRanker,
    EvolutionEngine,
    EvolutionResult,
    EvolutionState,
    EvolutionListener,
    EvolutionRecorder,
    EvolutionInterceptor,
    SequentialEvaluator,
    ConcurrentEvaluator,
    MaxGenerations,
    SteadyGenerations,
    TargetFitness
)
from keen.operators import (
    RandomSelector,
    TournamentSelector,
    RouletteWheelSelector,
    SinglePointCrossover,
    CombineCrossover,
    AverageCrossover,
    PartiallyMappedCrossover,
    PositionBasedCrossover,
    OrderedCrossover,
    RandomMutator,
    SwapMutator,
    InversionMutator,
    PartialShuffleMutator,
    BitFlipMutator,
    PointMutator
)

__version__ = "1.0.0"

__all__ = [
    # Errors
    "KeenError",
    "ConstraintError",
    "IntConstraintError",
    "DoubleConstraintError",
    "CollectionConstraintError",
    "PairConstraintError",
    "SelectionError",
    "CrossoverError",
    "MutationError",
    "EngineError",
    "InvalidIndexError",
    "CompositeError",
    "AbsurdOperationError",
    # Constraints
    "constraints",
    "skip_checks",
    "checks_skipped",
    # Configuration
    "KeenConfig",
    "EvolutionParameters",
    "LoggingConfig",
    "ParallelizationConfig",
    "create_default_config",
    "create_test_config",
    "create_production_config",
    "configure_logfire",
    # Genetic representation
    "BooleanGene",
    "CharGene",
    "IntGene",
    "DoubleGene",
    "NothingGene",
    "TreeGene",
    "Chromosome",
    "BooleanChromosomeFactory",
    "CharChromosomeFactory",
    "IntChromosomeFactory",
    "DoubleChromosomeFactory",
    "NothingChromosomeFactory",
    "Genotype",
    "GenotypeFactory",
    "Individual",
    # Ranking
    "FitnessMaxRanker",
    "FitnessMinRanker",
    # Engine
    "EvolutionEngine",
    "EvolutionResult",
    "EvolutionState",
    "EvolutionListener",
    "EvolutionRecorder",
    "EvolutionInterceptor",
    "SequentialEvaluator",
    "ConcurrentEvaluator",
    "MaxGenerations",
    "SteadyGenerations",
    "TargetFitness",
    # Operators
    "RandomSelector",
    "TournamentSelector",
    "RouletteWheelSelector",
    "SinglePointCrossover",
    "CombineCrossover",
    "AverageCrossover",
    "PartiallyMappedCrossover",
    "PositionBasedCrossover",
    "OrderedCrossover",
    "RandomMutator",
    "SwapMutator",
    "InversionMutator",
    "PartialShuffleMutator",
    "BitFlipMutator",
    "PointMutator"
]
