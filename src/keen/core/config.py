"""
Keen Configuration Module.

This module defines configuration classes for the Keen evolutionary engine,
including evolution parameters, logging and parallel evaluation settings.
"""

from typing import Optional, Dict, Any, Literal
from pydantic import BaseModel, Field, ConfigDict
import math
import os


class EvolutionParameters(BaseModel):
    """Parameters controlling the generational loop."""

    model_config = ConfigDict(validate_assignment=True)

    population_size: int = Field(
        default=50,
        ge=1,
        description="Number of individuals in the population"
    )
    survival_rate: float = Field(
        default=0.4,
        ge=0.0,
        le=1.0,
        description="Fraction of the population selected as survivors each generation"
    )
    generations: int = Field(
        default=100,
        ge=1,
        description="Generation limit applied when no termination limit is supplied"
    )

    @property
    def survivors(self) -> int:
        """Number of survivors per generation; the rest are offspring."""
        return math.ceil(round(self.survival_rate * self.population_size, 9))

    @property
    def offspring(self) -> int:
        return self.population_size - self.survivors


class LoggingConfig(BaseModel):
    """Configuration for logging and monitoring."""

    enable_logging: bool = Field(
        default=True,
        description="Enable progress logging"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level"
    )
    log_interval: int = Field(
        default=10,
        ge=1,
        description="Generations between progress logs"
    )
    service_name: str = Field(
        default="keen",
        description="Service name reported to logfire"
    )


class ParallelizationConfig(BaseModel):
    """Configuration for parallel fitness evaluation."""

    enable_parallel: bool = Field(
        default=False,
        description="Evaluate fitness on a thread pool"
    )
    num_workers: Optional[int] = Field(
        default=None,
        ge=1,
        description="Number of parallel workers (None for auto)"
    )
    chunk_size: int = Field(
        default=10,
        ge=1,
        description="Individuals per parallel task"
    )


class KeenConfig(BaseModel):
    """Main configuration class for a Keen run."""

    model_config = ConfigDict(
        validate_assignment=True,
        extra='forbid'
    )

    evolution: EvolutionParameters = Field(
        default_factory=EvolutionParameters,
        description="Evolution parameters"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging and monitoring configuration"
    )
    parallelization: ParallelizationConfig = Field(
        default_factory=ParallelizationConfig,
        description="Parallel evaluation configuration"
    )

    random_seed: Optional[int] = Field(
        default=None,
        description="Seed of the run's random source"
    )
    skip_checks: bool = Field(
        default=False,
        description="Bypass constraint enforcement while the engine runs"
    )

    @classmethod
    def from_env(cls) -> "KeenConfig":
        """Create configuration from environment variables."""
        config_dict: Dict[str, Any] = {}

        if pop_size := os.getenv("KEEN_POPULATION_SIZE"):
            config_dict.setdefault("evolution", {})["population_size"] = int(pop_size)
        if survival_rate := os.getenv("KEEN_SURVIVAL_RATE"):
            config_dict.setdefault("evolution", {})["survival_rate"] = float(survival_rate)
        if generations := os.getenv("KEEN_GENERATIONS"):
            config_dict.setdefault("evolution", {})["generations"] = int(generations)

        if log_level := os.getenv("KEEN_LOG_LEVEL"):
            config_dict.setdefault("logging", {})["log_level"] = log_level.upper()

        if num_workers := os.getenv("KEEN_NUM_WORKERS"):
            config_dict.setdefault("parallelization", {})["num_workers"] = int(num_workers)
            config_dict["parallelization"]["enable_parallel"] = True

        if random_seed := os.getenv("KEEN_RANDOM_SEED"):
            config_dict["random_seed"] = int(random_seed)
        if skip_checks := os.getenv("KEEN_SKIP_CHECKS"):
            config_dict["skip_checks"] = skip_checks.lower() in ("1", "true", "yes")

        return cls(**config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump()

    def save(self, filepath: str) -> None:
        """Save configuration to JSON file."""
        import json
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2, default=str)

    @classmethod
    def load(cls, filepath: str) -> "KeenConfig":
        """Load configuration from JSON file."""
        import json
        with open(filepath, 'r') as f:
            data = json.load(f)
        return cls(**data)


# Convenience functions
def create_default_config() -> KeenConfig:
    """Create a default configuration suitable for most use cases."""
    return KeenConfig()


def create_test_config() -> KeenConfig:
    """Create a configuration suitable for testing (smaller, faster, seeded)."""
    return KeenConfig(
        evolution=EvolutionParameters(
            population_size=20,
            generations=10
        ),
        logging=LoggingConfig(
            log_interval=1
        ),
        parallelization=ParallelizationConfig(
            enable_parallel=False
        ),
        random_seed=42
    )


def create_production_config() -> KeenConfig:
    """Create a configuration suitable for long runs with expensive fitness functions."""
    return KeenConfig(
        evolution=EvolutionParameters(
            population_size=500,
            generations=1000
        ),
        logging=LoggingConfig(
            log_interval=25
        ),
        parallelization=ParallelizationConfig(
            enable_parallel=True,
            chunk_size=25
        )
    )
