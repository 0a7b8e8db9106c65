"""
Keen Core Module - Evolutionary Engine Components.

This module contains the core components of the Keen genetic algorithm toolkit,
including configuration, the genetic data model, rankers, evaluators, limits,
listeners and the main evolution engine.
"""

from keen.core.config import (
    KeenConfig,
    EvolutionParameters,
    LoggingConfig,
    ParallelizationConfig,
    create_default_config,
    create_test_config,
    create_production_config
)

from keen.core.genes import (
    Gene,
    BooleanGene,
    CharGene,
    NumberGene,
    IntGene,
    DoubleGene,
    NothingGene,
    TreeGene
)

from keen.core.chromosomes import (
    Chromosome,
    BooleanChromosome,
    CharChromosome,
    IntChromosome,
    DoubleChromosome,
    NothingChromosome,
    TreeChromosome,
    ChromosomeFactory,
    ConstrainedChromosomeFactory,
    BooleanChromosomeFactory,
    CharChromosomeFactory,
    IntChromosomeFactory,
    DoubleChromosomeFactory,
    NothingChromosomeFactory
)

from keen.core.genotype import (
    Genotype,
    GenotypeFactory,
    Individual,
    Population
)

from keen.core.ranking import (
    IndividualRanker,
    FitnessMaxRanker,
    FitnessMinRanker
)

from keen.core.state import (
    EvolutionState,
    EvolutionResult
)

from keen.core.evaluation import (
    EvaluationExecutor,
    SequentialEvaluator,
    ConcurrentEvaluator
)

from keen.core.listeners import (
    EvolutionListener,
    EvolutionRecorder,
    EvolutionRecord,
    GenerationRecord,
    LoggingListener,
    EvolutionInterceptor
)

from keen.core.limits import (
    Limit,
    MaxGenerations,
    SteadyGenerations,
    TargetFitness
)

from keen.core.engine import (
    EnginePhase,
    EvolutionEngine
)

from keen.core.observability import configure_logfire

__all__ = [
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
    "Gene",
    "BooleanGene",
    "CharGene",
    "NumberGene",
    "IntGene",
    "DoubleGene",
    "NothingGene",
    "TreeGene",
    "Chromosome",
    "BooleanChromosome",
    "CharChromosome",
    "IntChromosome",
    "DoubleChromosome",
    "NothingChromosome",
    "TreeChromosome",
    "ChromosomeFactory",
    "ConstrainedChromosomeFactory",
    "BooleanChromosomeFactory",
    "CharChromosomeFactory",
    "IntChromosomeFactory",
    "DoubleChromosomeFactory",
    "NothingChromosomeFactory",
    "Genotype",
    "GenotypeFactory",
    "Individual",
    "Population",

    # Ranking
    "IndividualRanker",
    "FitnessMaxRanker",
    "FitnessMinRanker",

    # Engine
    "EvolutionState",
    "EvolutionResult",
    "EvaluationExecutor",
    "SequentialEvaluator",
    "ConcurrentEvaluator",
    "EvolutionListener",
    "EvolutionRecorder",
    "EvolutionRecord",
    "GenerationRecord",
    "LoggingListener",
    "EvolutionInterceptor",
    "Limit",
    "MaxGenerations",
    "SteadyGenerations",
    "TargetFitness",
    "EnginePhase",
    "EvolutionEngine"
]
