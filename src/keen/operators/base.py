"""
Alterer contract shared by crossovers and mutators.
"""

import random
from abc import ABC, abstractmethod

from keen.core.genotype import Population


class Alterer(ABC):
    """Transforms a population of parents into offspring."""

    @abstractmethod
    def __call__(self, population: Population, output_size: int, rng: random.Random) -> Population:
        """Return ``output_size`` altered individuals built from ``population``."""
