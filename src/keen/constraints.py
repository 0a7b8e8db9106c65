"""
Constraint Enforcement for Keen.

This module provides the validation engine used at every construction and
invocation boundary of the library. Requirements are grouped in closed
families (int, double, collection and pair); each family reports violations
with its own error kind.

Clauses are collected inside a ``constraints()`` scope and every failing
clause is reported at once in a single ``CompositeError``:

    with constraints() as scope:
        scope.must(rate, DoubleBeInRange(0.0, 1.0), f"The rate ({rate}) must be in 0.0..1.0")
        scope.must_not(population, BeEmpty(), "The population cannot be empty")

Checks can be bypassed for a block of code with ``skip_checks()``. The mode is
held in a context variable that is set on entry and reset on exit, so it never
leaks into other threads or tasks.
"""

import math
from abc import ABC, abstractmethod
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Generic, Iterator, List, Optional, Sequence, Tuple, Type, TypeVar, Union

from keen.exceptions import (
    CollectionConstraintError,
    CompositeError,
    ConstraintError,
    DoubleConstraintError,
    IntConstraintError,
    PairConstraintError,
)

T = TypeVar("T")

_SKIP_CHECKS: ContextVar[bool] = ContextVar("keen_skip_checks", default=False)


@contextmanager
def skip_checks(enabled: bool = True) -> Iterator[None]:
    """Bypass (or, with ``enabled=False``, force) constraint enforcement inside the block."""
    token = _SKIP_CHECKS.set(enabled)
    try:
        yield
    finally:
        _SKIP_CHECKS.reset(token)


def checks_skipped() -> bool:
    """Whether enforcement is currently bypassed."""
    return _SKIP_CHECKS.get()


@dataclass(frozen=True)
class Success(Generic[T]):
    """A value that fulfilled a requirement."""

    value: T

    @property
    def is_success(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """The error generated by an unfulfilled requirement."""

    error: ConstraintError

    @property
    def is_success(self) -> bool:
        return False


Result = Union[Success, Failure]


class Requirement(ABC, Generic[T]):
    """A named predicate over a value together with the error kind it raises."""

    error_kind: ClassVar[Type[ConstraintError]] = ConstraintError

    @abstractmethod
    def validator(self, value: T) -> bool:
        """Return True when the value fulfills the requirement."""

    def generate_exception(self, description: str) -> ConstraintError:
        return self.error_kind(description)

    def validate(self, value: T, description: str) -> Result:
        if self.validator(value):
            return Success(value)
        return Failure(self.generate_exception(description))

    def validate_not(self, value: T, description: str) -> Result:
        if not self.validator(value):
            return Success(value)
        return Failure(self.generate_exception(description))


# Integer requirements

class IntRequirement(Requirement[int]):
    error_kind = IntConstraintError


@dataclass(frozen=True)
class BePositive(IntRequirement):
    def validator(self, value: int) -> bool:
        return value > 0


@dataclass(frozen=True)
class BeNegative(IntRequirement):
    def validator(self, value: int) -> bool:
        return value < 0


@dataclass(frozen=True)
class IntBeInRange(IntRequirement):
    """Inclusive range."""

    start: int
    end: int

    def validator(self, value: int) -> bool:
        return self.start <= value <= self.end


@dataclass(frozen=True)
class BeAtLeast(IntRequirement):
    minimum: int

    def validator(self, value: int) -> bool:
        return value >= self.minimum


@dataclass(frozen=True)
class BeAtMost(IntRequirement):
    maximum: int

    def validator(self, value: int) -> bool:
        return value <= self.maximum


@dataclass(frozen=True)
class IntBeEqualTo(IntRequirement):
    expected: int

    def validator(self, value: int) -> bool:
        return value == self.expected


# Floating point requirements

class DoubleRequirement(Requirement[float]):
    error_kind = DoubleConstraintError


@dataclass(frozen=True)
class DoubleBeInRange(DoubleRequirement):
    """Inclusive range. NaN is never in range."""

    start: float
    end: float

    def validator(self, value: float) -> bool:
        return self.start <= value <= self.end


@dataclass(frozen=True)
class DoubleBeEqualTo(DoubleRequirement):
    expected: float
    tolerance: float = 1e-8

    def validator(self, value: float) -> bool:
        return abs(value - self.expected) <= self.tolerance


@dataclass(frozen=True)
class DoubleBeAtLeast(DoubleRequirement):
    minimum: float

    def validator(self, value: float) -> bool:
        return value >= self.minimum


@dataclass(frozen=True)
class BeNaN(DoubleRequirement):
    def validator(self, value: float) -> bool:
        return math.isnan(value)


# Collection requirements

class CollectionRequirement(Requirement[Sequence[Any]]):
    error_kind = CollectionConstraintError


@dataclass(frozen=True)
class BeEmpty(CollectionRequirement):
    def validator(self, value: Sequence[Any]) -> bool:
        return len(value) == 0


@dataclass(frozen=True)
class HaveSize(CollectionRequirement):
    """Exact size, or a predicate over the size."""

    size: Union[int, Callable[[int], bool]]

    def validator(self, value: Sequence[Any]) -> bool:
        if callable(self.size):
            return self.size(len(value))
        return len(value) == self.size


@dataclass(frozen=True)
class BePermutation(CollectionRequirement):
    """No element appears twice."""

    def validator(self, value: Sequence[Any]) -> bool:
        return len(set(value)) == len(value)


@dataclass(frozen=True)
class BeSorted(CollectionRequirement):
    """Non-decreasing order."""

    def validator(self, value: Sequence[Any]) -> bool:
        return all(value[i] <= value[i + 1] for i in range(len(value) - 1))


# Pair requirements

class PairRequirement(Requirement[Tuple[Any, Any]]):
    error_kind = PairConstraintError


@dataclass(frozen=True)
class BeStrictlyOrdered(PairRequirement):
    def validator(self, value: Tuple[Any, Any]) -> bool:
        return value[0] < value[1]


@dataclass(frozen=True)
class BeWeaklyOrdered(PairRequirement):
    def validator(self, value: Tuple[Any, Any]) -> bool:
        return value[0] <= value[1]


class ConstraintScope:
    """Collects the outcome of every clause of one enforcement block."""

    def __init__(self, skipped: bool = False):
        self.skipped = skipped
        self.failures: List[ConstraintError] = []

    def must(
        self,
        value: T,
        requirement: Requirement[T],
        description: str,
        error: Optional[Type[ConstraintError]] = None
    ) -> Result:
        """Require ``value`` to fulfill ``requirement``."""
        if self.skipped:
            return Success(value)
        return self._record(requirement.validate(value, description), error)

    def must_not(
        self,
        value: T,
        requirement: Requirement[T],
        description: str,
        error: Optional[Type[ConstraintError]] = None
    ) -> Result:
        """Require ``value`` not to fulfill ``requirement``."""
        if self.skipped:
            return Success(value)
        return self._record(requirement.validate_not(value, description), error)

    def check(
        self,
        predicate: bool,
        description: str,
        error: Type[ConstraintError] = ConstraintError
    ) -> Result:
        """Require an already evaluated predicate to hold."""
        if self.skipped or predicate:
            return Success(predicate)
        return self._record(Failure(error(description)), None)

    def _record(self, result: Result, error: Optional[Type[ConstraintError]]) -> Result:
        if isinstance(result, Failure):
            if error is not None:
                result = Failure(error(result.error.description))
            self.failures.append(result.error)
        return result

    @property
    def fulfilled(self) -> bool:
        return not self.failures


@contextmanager
def constraints() -> Iterator[ConstraintScope]:
    """
    Open an enforcement scope.

    Every clause registered on the yielded scope is evaluated. When the block
    ends, all failures are raised together as a CompositeError.
    """
    scope = ConstraintScope(skipped=checks_skipped())
    yield scope
    if scope.failures:
        raise CompositeError(scope.failures)
