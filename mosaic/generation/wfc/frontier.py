"""
The frontier: indices of cells that can still be collapsed.

A cell leaves the frontier when it collapses or when it becomes a
contradiction, and never comes back.

Members live in a list plus an index -> slot map. Removal swaps the last
member into the freed slot, so random picks depend only on the seed and the
sequence of removals.
"""

from __future__ import annotations

import random
from collections.abc import Iterable, Iterator


class Frontier:
    """Set of cell indices with O(1) add, discard, membership and sampling."""

    def __init__(self, indices: Iterable[int] = ()):
        self._items: list[int] = []
        self._positions: dict[int, int] = {}
        for index in indices:
            self.add(index)

    def add(self, index: int) -> None:
        if index in self._positions:
            return
        self._positions[index] = len(self._items)
        self._items.append(index)

    def discard(self, index: int) -> bool:
        """Remove an index if present. Returns True if it was removed."""
        position = self._positions.pop(index, None)
        if position is None:
            return False

        last = self._items.pop()
        if last != index:
            self._items[position] = last
            self._positions[last] = position
        return True

    def sample(self, rng: random.Random) -> int:
        """Pick one index uniformly at random. The frontier must not be empty."""
        return self._items[rng.randrange(len(self._items))]

    def __contains__(self, index: object) -> bool:
        return index in self._positions

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __iter__(self) -> Iterator[int]:
        return iter(list(self._items))

    def __repr__(self) -> str:
        return f"Frontier({sorted(self._items)})"
