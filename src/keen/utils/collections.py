"""
Collection helpers shared by the operators.
"""

from typing import List, Sequence, TypeVar

import numpy as np

from keen.constraints import HaveSize, constraints
from keen.exceptions import CollectionConstraintError

T = TypeVar("T")


def transpose(rows: Sequence[Sequence[T]]) -> List[List[T]]:
    """Transpose a rectangular list of lists."""
    if not rows:
        return []
    width = len(rows[0])
    with constraints() as scope:
        for i, row in enumerate(rows):
            scope.must(
                row, HaveSize(width),
                f"Row {i} has {len(row)} elements but {width} were expected"
            )
    return [[row[j] for row in rows] for j in range(width)]


def swap(items: List[T], i: int, j: int) -> None:
    """Swap two positions of a list in place."""
    items[i], items[j] = items[j], items[i]


def incremental(values: Sequence[float]) -> np.ndarray:
    """Cumulative sums of ``values``."""
    return np.cumsum(np.asarray(values, dtype=float))


def serial_search(cumulative: Sequence[float], value: float) -> int:
    """First index whose cumulative value reaches ``value``."""
    for i, upper in enumerate(cumulative):
        if value <= upper:
            return i
    return len(cumulative) - 1


def check_sorted(values: Sequence[float]) -> None:
    """Raise a CompositeError unless ``values`` is in ascending order."""
    with constraints() as scope:
        scope.check(
            bool(np.all(np.diff(np.asarray(values, dtype=float)) >= 0)),
            "Binary search requires a sorted array",
            error=CollectionConstraintError
        )


def binary_search(cumulative: Sequence[float], value: float) -> int:
    """
    First index whose cumulative value reaches ``value``.

    Raises a CompositeError when the array is not sorted.
    """
    return binary_search_all(cumulative, [value])[0]


def binary_search_all(cumulative: Sequence[float], values: Sequence[float]) -> List[int]:
    """
    ``binary_search`` for every item of ``values``.

    Sortedness is checked once for the whole batch.
    """
    check_sorted(cumulative)
    found = np.searchsorted(np.asarray(cumulative, dtype=float), np.asarray(values, dtype=float), side="left")
    return [int(index) for index in np.minimum(found, len(cumulative) - 1)]
