"""
Immutable tree values carried by tree genes.
"""

from dataclasses import dataclass, field
from typing import Any, Iterator, List, Tuple


@dataclass(frozen=True)
class Tree:
    """A node holding a value and an ordered tuple of children."""

    value: Any
    children: Tuple["Tree", ...] = field(default_factory=tuple)

    @property
    def arity(self) -> int:
        return len(self.children)

    @property
    def nodes(self) -> List["Tree"]:
        """All subtrees in pre-order, starting with this node."""
        return list(self._walk())

    @property
    def size(self) -> int:
        return len(self.nodes)

    @property
    def height(self) -> int:
        if not self.children:
            return 0
        return 1 + max(child.height for child in self.children)

    def _walk(self) -> Iterator["Tree"]:
        yield self
        for child in self.children:
            yield from child._walk()

    def __str__(self) -> str:
        if not self.children:
            return str(self.value)
        return f"{self.value}({', '.join(str(child) for child in self.children)})"
