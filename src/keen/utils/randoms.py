"""
Random Utilities.

Every function draws from an explicit ``random.Random`` instance so that a run
is reproducible for a fixed seed.
"""

import random
import sys
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

from keen.constraints import (
    BeAtLeast,
    BeAtMost,
    BePositive,
    BeWeaklyOrdered,
    DoubleBeInRange,
    IntBeEqualTo,
    constraints,
)

T = TypeVar("T")

CHAR_RANGE: Tuple[str, str] = (chr(0), chr(sys.maxunicode))
SURROGATES: Tuple[int, int] = (0xD800, 0xDFFF)


def next_int_in_range(rng: random.Random, bounds: Tuple[int, int]) -> int:
    """Random integer in the inclusive range ``bounds``."""
    return rng.randint(bounds[0], bounds[1])


def next_double_in_range(rng: random.Random, bounds: Tuple[float, float]) -> float:
    """
    Random float in ``bounds``.

    Interpolates between the bounds instead of using ``hi - lo`` so that the
    full float range does not overflow to infinity.
    """
    lo, hi = bounds
    r = rng.random()
    return lo * (1.0 - r) + hi * r


def next_char(
    rng: random.Random,
    bounds: Tuple[str, str] = CHAR_RANGE,
    filter: Callable[[str], bool] = lambda _: True
) -> str:
    """
    Random character in the inclusive range ``bounds`` that passes ``filter``.

    Surrogate code points are redrawn, so the result always encodes as UTF-8.
    """
    while True:
        code = rng.randint(ord(bounds[0]), ord(bounds[1]))
        if SURROGATES[0] <= code <= SURROGATES[1]:
            continue
        candidate = chr(code)
        if filter(candidate):
            return candidate


def indices(rng: random.Random, pick_probability: float, end: int, start: int = 0) -> List[int]:
    """
    Indices of ``[start, end)`` picked independently with ``pick_probability``.

    The result is in ascending order.
    """
    with constraints() as scope:
        scope.must(
            pick_probability, DoubleBeInRange(0.0, 1.0),
            f"The pick probability ({pick_probability}) must be in 0.0..1.0"
        )
        scope.must((start, end), BeWeaklyOrdered(), f"The start ({start}) must not exceed the end ({end})")
    return [i for i in range(start, end) if rng.random() < pick_probability]


def sample_indices(rng: random.Random, size: int, end: int, start: int = 0) -> List[int]:
    """``size`` distinct indices of ``[start, end)`` in ascending order."""
    with constraints() as scope:
        scope.must(size, BeAtLeast(0), f"The sample size ({size}) must not be negative")
        scope.must(
            size, BeAtMost(max(end - start, 0)),
            f"The sample size ({size}) must be at most the size of the range ({end - start})"
        )
    return sorted(rng.sample(range(start, end), size))


def subsets(
    rng: random.Random,
    elements: Sequence[T],
    size: int,
    exclusive: bool,
    limit: Optional[int] = None
) -> List[List[T]]:
    """
    Random subsets of ``size`` elements.

    Elements are visited in shuffled order and every element opens at least
    one subset. In exclusive mode each element is used exactly once, which
    requires the number of elements to be a multiple of ``size``. Otherwise
    the remaining members of each subset are drawn uniformly from all
    elements.
    """
    with constraints() as scope:
        scope.must(size, BePositive(), f"The subset size ({size}) must be positive")
        scope.must(
            size, BeAtMost(len(elements)),
            f"The subset size ({size}) must be at most the number of elements ({len(elements)})"
        )
        if exclusive and size > 0:
            scope.must(
                len(elements) % size, IntBeEqualTo(0),
                f"The number of elements ({len(elements)}) must be a multiple of the subset size ({size})"
            )
        if limit is not None:
            scope.must(limit, BePositive(), f"The subset limit ({limit}) must be positive")

    remaining = list(range(len(elements)))
    rng.shuffle(remaining)
    result: List[List[T]] = []
    while remaining and (limit is None or len(result) < limit):
        if exclusive:
            chosen, remaining = remaining[:size], remaining[size:]
        else:
            chosen = [remaining.pop(0)]
            used = set()
            for _ in range(size - 1):
                index = rng.randrange(len(elements))
                chosen.append(index)
                used.add(index)
            remaining = [index for index in remaining if index not in used]
        result.append([elements[index] for index in chosen])
    return result
