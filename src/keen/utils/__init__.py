"""
Keen Utilities - random sampling, collection helpers and tree values.
"""

from keen.utils.randoms import (
    CHAR_RANGE,
    indices,
    next_char,
    next_double_in_range,
    next_int_in_range,
    sample_indices,
    subsets
)
from keen.utils.collections import (
    binary_search,
    binary_search_all,
    check_sorted,
    incremental,
    serial_search,
    swap,
    transpose
)
from keen.utils.trees import Tree

__all__ = [
    # Random sampling
    "CHAR_RANGE",
    "indices",
    "next_char",
    "next_double_in_range",
    "next_int_in_range",
    "sample_indices",
    "subsets",

    # Collections
    "binary_search",
    "binary_search_all",
    "check_sorted",
    "incremental",
    "serial_search",
    "swap",
    "transpose",

    # Trees
    "Tree"
]
