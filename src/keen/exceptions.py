"""
Keen Error Taxonomy.

Constraint violations are aggregated into a single CompositeError per
enforcement scope. AbsurdOperationError signals a programming error and is
raised immediately.
"""

from typing import List, Sequence


class KeenError(Exception):
    """Base class for every error raised by keen."""


class ConstraintError(KeenError):
    """A single unfulfilled constraint."""

    def __init__(self, description: str):
        super().__init__(description)
        self.description = description


class IntConstraintError(ConstraintError):
    """Violation of an integer constraint."""


class DoubleConstraintError(ConstraintError):
    """Violation of a floating point constraint."""


class CollectionConstraintError(ConstraintError):
    """Violation of a collection size or shape constraint."""


class PairConstraintError(ConstraintError):
    """Violation of a constraint over a pair of values."""


class SelectionError(ConstraintError):
    """Invalid arguments passed to a selector."""


class CrossoverError(ConstraintError):
    """Invalid parents passed to a crossover."""


class MutationError(ConstraintError):
    """Invalid chromosome passed to a mutator."""


class EngineError(ConstraintError):
    """The evolutionary engine reached an inconsistent state."""


class InvalidIndexError(ConstraintError, IndexError):
    """Access to a position outside a genetic structure."""


class CompositeError(KeenError):
    """All constraint failures collected in one enforcement scope."""

    def __init__(self, failures: Sequence[ConstraintError]):
        self.failures: List[ConstraintError] = list(failures)
        details = ", ".join(f"{{ {failure.description} }}" for failure in self.failures)
        super().__init__(f"Unfulfilled constraints: [ {details} ]")

    def __len__(self) -> int:
        return len(self.failures)


class AbsurdOperationError(KeenError):
    """An operation that must never be performed was attempted."""
