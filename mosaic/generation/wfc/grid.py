"""
Grid representation for Wave Function Collapse.

The Grid is the "wave function": a square array of cells where each cell
holds the tiles it could still become until it collapses to one of them.

Cells are stored in one flat list, indexed by ``y * size + x``.
"""

from __future__ import annotations

import random
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from ...core import Direction, EdgeLabel, Position, WorldPosition
from ...scene import SceneSink
from ..tileset import TileCatalog, TileDefinition


@dataclass(eq=False)
class Cell:
    """
    A single cell in the WFC grid.

    Before collapse: ``candidates`` holds the catalog indices still possible
    After collapse: ``resolved`` holds the chosen index, candidates is empty

    An unresolved cell with no candidates left is a contradiction. It can
    never collapse.
    """
    position: Position
    catalog: TileCatalog = field(repr=False)
    candidates: list[int] = field(default_factory=list)
    resolved: int | None = None

    @property
    def is_resolved(self) -> bool:
        return self.resolved is not None

    @property
    def is_contradiction(self) -> bool:
        """True when the cell is unresolved and has nothing left to become."""
        return self.resolved is None and not self.candidates

    @property
    def entropy(self) -> int:
        """
        How uncertain this cell is: the number of remaining candidates.

        Lower = more constrained.
        """
        return len(self.candidates)

    @property
    def tile(self) -> TileDefinition | None:
        """The placed tile, or None if not yet collapsed."""
        if self.resolved is None:
            return None
        return self.catalog[self.resolved]

    def collapse(self, rng: random.Random, sink: SceneSink) -> bool:
        """
        Resolve this cell with a weighted random draw over its candidates.

        The chosen tile is placed in the scene before this returns.

        Returns True if a tile was placed, False if the cell was already
        resolved or has no candidates.
        """
        if self.resolved is not None or not self.candidates:
            return False

        weights = [self.catalog.weight(index) for index in self.candidates]
        chosen = rng.choices(self.candidates, weights=weights, k=1)[0]

        self.resolved = chosen
        self.candidates = []
        sink.place(self.catalog[chosen].geometry, WorldPosition.of(self.position))
        return True

    def remove_options(self, direction: Direction, edge: EdgeLabel) -> bool:
        """
        Keep only candidates whose edge on ``direction`` fits against ``edge``.

        ``direction`` is the side of this cell that faces the neighbour that
        imposed the constraint.

        Returns True if the cell has no candidates left (a contradiction).
        A resolved cell is left untouched and returns False.
        """
        if self.resolved is not None:
            return False

        self.candidates = [
            index for index in self.candidates
            if self.catalog[index].check_edge(direction, edge)
        ]
        return not self.candidates


class Grid:
    """
    The square grid of cells representing the wave function.

    Initially every cell can be any tile in the catalog (maximum
    superposition), unless a narrower starting set is given.
    """

    def __init__(
        self,
        size: int,
        catalog: TileCatalog,
        initial_candidates: Sequence[int] | None = None,
    ):
        """
        Create a grid with all cells in superposition.

        Args:
            size: Number of cells along each side
            catalog: The tiles cells can become
            initial_candidates: Catalog indices every cell starts with
                                (default: the whole catalog)
        """
        if size < 1:
            raise ValueError(f"Grid size must be at least 1, got {size}")

        self.size = size
        self.catalog = catalog
        self.initial_candidates = list(
            catalog.indices() if initial_candidates is None else initial_candidates
        )

        self.cells: list[Cell] = [
            Cell(
                position=self.coords(index),
                catalog=catalog,
                candidates=list(self.initial_candidates),
            )
            for index in range(size * size)
        ]

    @property
    def width(self) -> int:
        return self.size

    @property
    def height(self) -> int:
        return self.size

    def __len__(self) -> int:
        return len(self.cells)

    def __getitem__(self, index: int) -> Cell:
        return self.cells[index]

    def index(self, x: int, y: int) -> int:
        """Linear index of a coordinate."""
        return y * self.size + x

    def coords(self, index: int) -> Position:
        """Coordinate of a linear index."""
        return Position(index % self.size, index // self.size)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def center_index(self) -> int:
        return self.index(self.size // 2, self.size // 2)

    def get_cell(self, x: int, y: int) -> Cell | None:
        """Get cell at position, or None if out of bounds."""
        if self.in_bounds(x, y):
            return self.cells[self.index(x, y)]
        return None

    def neighbors(self, index: int) -> Iterator[tuple[Direction, int]]:
        """
        Yield (direction, neighbour index) for every in-bounds neighbour.

        Direction is FROM the given cell TO the neighbour.
        """
        position = self.coords(index)
        for direction in Direction:
            nx = position.x + direction.dx
            ny = position.y + direction.dy
            if self.in_bounds(nx, ny):
                yield direction, self.index(nx, ny)

    def all_cells(self) -> Iterator[Cell]:
        """Iterate over all cells in index order."""
        yield from self.cells

    def resolved_count(self) -> int:
        return sum(1 for cell in self.cells if cell.is_resolved)

    def contradiction_count(self) -> int:
        return sum(1 for cell in self.cells if cell.is_contradiction)

    def is_complete(self) -> bool:
        """Check if all cells have collapsed."""
        return all(cell.is_resolved for cell in self.cells)

    def reset(self):
        """Return every cell to its starting superposition."""
        for cell in self.cells:
            cell.resolved = None
            cell.candidates = list(self.initial_candidates)
